import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# ======================================================
# .env lives next to the project root in dev and next
# to the executable when frozen
# ======================================================
if getattr(sys, "frozen", False):
    BASE_DIR = Path(sys.executable).parent
else:
    # This file is: <project_root>/app/core/config.py
    BASE_DIR = Path(__file__).resolve().parents[2]

load_dotenv(dotenv_path=BASE_DIR / ".env")


def _db_port(raw) -> str:
    # blank / "None" ports show up from half-filled .env files
    if not raw or str(raw).lower() == "none":
        return "5432"
    return str(raw)


@dataclass
class Settings:
    """Runtime configuration, read from the environment."""

    db_host: str = "127.0.0.1"
    db_port: str = "5432"
    db_name: str = "finance_tracker"
    db_user: str = "postgres"
    db_password: str = "postgres"
    database_url_override: str | None = None

    cors_origins: list[str] = field(default_factory=lambda: ["http://localhost:3000"])

    host: str = "0.0.0.0"
    port: int = 5000

    log_level: str = "INFO"
    log_format: str = "standard"

    @property
    def database_url(self) -> str:
        if self.database_url_override:
            return self.database_url_override
        return (
            f"postgresql+psycopg2://{self.db_user}:{self.db_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )

    @classmethod
    def from_env(cls) -> "Settings":
        origins = os.getenv("CORS_ORIGINS", "http://localhost:3000")

        return cls(
            db_host=os.getenv("DB_HOST", "127.0.0.1"),
            db_port=_db_port(os.getenv("DB_PORT")),
            db_name=os.getenv("DB_NAME", "finance_tracker"),
            db_user=os.getenv("DB_USER", "postgres"),
            db_password=os.getenv("DB_PASSWORD", "postgres"),
            database_url_override=os.getenv("DATABASE_URL") or None,
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "5000")),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "standard"),
        )


settings = Settings.from_env()
