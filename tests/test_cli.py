import os

import pytest

import depot
from depot.cli import main

V1 = "20220926185252"


@pytest.fixture
def db_url(tmp_path):
    return str(tmp_path / "cli.sqlite3")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in ["DEPOT_DATABASE_URL", "DEPOT_MIGRATIONS_DIR", "DEPOT_LOG_LEVEL"]:
        monkeypatch.delenv(name, raising=False)
    # keep a stray .env out of the settings
    monkeypatch.chdir(tmp_path)


def test_upgrade_and_downgrade(db_url, capsys):
    assert main(["version", "-d", db_url]) == 0
    assert "not version controlled" in capsys.readouterr().out

    assert main(["upgrade", "-d", db_url]) == 0
    assert f"is at version {V1}" in capsys.readouterr().out
    assert depot.get_version(db_url) == V1

    assert main(["downgrade", "-d", db_url, "0"]) == 0
    assert "is at version 0" in capsys.readouterr().out
    assert depot.get_version(db_url) == "0"


def test_upgrade_to_version(db_url, capsys):
    assert main(["upgrade", "-d", db_url, V1]) == 0
    assert depot.get_version(db_url) == V1


def test_errors_exit_nonzero(db_url, tmp_path, capsys):
    missing = str(tmp_path / "nowhere")
    assert main(["upgrade", "-d", db_url, "-m", missing]) == 1
    err = capsys.readouterr().err
    assert err.startswith("depot: ")
    assert "is not a directory" in err

    assert main(["upgrade", "-d", db_url, "19990101000000"]) == 1
    assert "No migration with version" in capsys.readouterr().err


def test_list(capsys):
    assert main(["list"]) == 0
    assert capsys.readouterr().out.splitlines() == [f"{V1}  create_stations"]


def test_create(tmp_path, capsys):
    target = tmp_path / "migrations"
    target.mkdir()
    assert main(["create", "add_platforms", "-m", str(target)]) == 0
    out = capsys.readouterr().out
    assert out.startswith("Created ")
    created = os.listdir(target)
    assert len(created) == 1
    assert created[0].endswith("_add_platforms.py")

    assert main(["list", "-m", str(target)]) == 0
    assert "add_platforms" in capsys.readouterr().out


def test_settings_from_environment(db_url, monkeypatch, capsys):
    monkeypatch.setenv("DEPOT_DATABASE_URL", db_url)
    assert main(["upgrade"]) == 0
    assert depot.get_version(db_url) == V1


def test_command_is_required():
    with pytest.raises(SystemExit):
        main([])
