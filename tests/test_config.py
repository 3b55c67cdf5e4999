import pytest

from depot.config import Settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ["DEPOT_DATABASE_URL", "DEPOT_MIGRATIONS_DIR", "DEPOT_LOG_LEVEL"]:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = Settings(_env_file=None)
    assert settings.database_url == "depot.sqlite3"
    assert settings.migrations_dir is None
    assert settings.log_level == "WARNING"


def test_environment(monkeypatch):
    monkeypatch.setenv("DEPOT_DATABASE_URL", "/var/lib/depot/timetable.sqlite3")
    monkeypatch.setenv("DEPOT_MIGRATIONS_DIR", "/srv/migrations")
    monkeypatch.setenv("DEPOT_LOG_LEVEL", "debug")
    settings = Settings(_env_file=None)
    assert settings.database_url == "/var/lib/depot/timetable.sqlite3"
    assert settings.migrations_dir == "/srv/migrations"
    assert settings.log_level == "debug"


def test_env_file(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("DEPOT_DATABASE_URL=stations.sqlite3\nOTHER_SETTING=1\n")
    settings = Settings(_env_file=str(env_file))
    assert settings.database_url == "stations.sqlite3"
