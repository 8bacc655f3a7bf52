from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path


class Settings(BaseSettings):
    APP_NAME: str = "Finance Ledger API"
    ENV: str = "dev"

    # SQLite file next to apps/backend, absolute so the CWD does not matter
    _default_db_path = Path(__file__).resolve().parents[2] / "finledger.sqlite3"
    DATABASE_URL: str = f"sqlite:///{_default_db_path}"

    CORS_ORIGINS: list[str] = ["*"]

    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # Deadline attached to every engine call made by the HTTP layer (0 disables)
    REQUEST_TIMEOUT_SECONDS: float = 10.0

    model_config = SettingsConfigDict(env_file=(".env",), env_prefix="FINLEDGER_", case_sensitive=False)


settings = Settings()
