from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from urllib.parse import unquote


def _split_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class Settings:
    app_name: str = os.getenv("APP_NAME", "Job Board")
    environment: str = os.getenv("ENV", "development")
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./db/jobboard.db")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    public_base_url: str = os.getenv("PUBLIC_BASE_URL", "http://localhost:5173").rstrip("/")
    cors_origins: list[str] = field(
        default_factory=lambda: _split_csv(
            os.getenv(
                "CORS_ORIGINS",
                "http://localhost,http://localhost:80,http://localhost:5173,http://127.0.0.1:8000",
            )
        )
    )
    email_user: str = os.getenv("EMAIL_USER", "")
    email_password: str = os.getenv("EMAIL_PASSWORD", "")
    smtp_host: str = os.getenv("SMTP_HOST", "smtp.gmail.com")
    smtp_port: int = int(os.getenv("SMTP_PORT", "587"))
    push_endpoint: str = os.getenv("PUSH_ENDPOINT", "https://fcm.googleapis.com/fcm/send")
    push_server_key: str = os.getenv("PUSH_SERVER_KEY", "")
    push_timeout_seconds: float = float(os.getenv("PUSH_TIMEOUT_SECONDS", "10"))
    notify_applicant_on_status_change: bool = (
        os.getenv("NOTIFY_APPLICANT_ON_STATUS_CHANGE", "true").lower() == "true"
    )
    inbox_cache_ttl_seconds: float = float(os.getenv("INBOX_CACHE_TTL_SECONDS", "300"))
    inbox_cache_max_principals: int = int(os.getenv("INBOX_CACHE_MAX_PRINCIPALS", "1024"))
    default_admin_email: str = os.getenv("DEFAULT_ADMIN_EMAIL", "")
    default_admin_password: str = os.getenv("DEFAULT_ADMIN_PASSWORD", "")

    def ensure_directories(self) -> None:
        self._ensure_sqlite_directory()

    def _ensure_sqlite_directory(self) -> None:
        if not self.database_url.startswith("sqlite:///"):
            return
        raw_path = self.database_url.replace("sqlite:///", "", 1)
        if not raw_path or raw_path == ":memory:":
            return
        db_path = Path(unquote(raw_path))
        if not db_path.is_absolute():
            db_path = Path(".") / db_path
        db_path.parent.mkdir(parents=True, exist_ok=True)


settings = Settings()
