from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    database_url: str = "depot.sqlite3"
    migrations_dir: str | None = None
    log_level: str = "WARNING"

    model_config = SettingsConfigDict(env_prefix="DEPOT_", env_file=".env", extra="ignore")
