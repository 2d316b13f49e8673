import os

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./bountyhub.db")
API_PREFIX = os.getenv("API_PREFIX", "/api/v1")
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")

ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(14 * 24 * 60)))
AUTH_COOKIE_NAME = os.getenv("AUTH_COOKIE_NAME", "_insr010usr")
COOKIE_DOMAIN = os.getenv("COOKIE_DOMAIN") or None
COOKIE_SECURE = os.getenv("COOKIE_SECURE", "false").lower() == "true"

PASSWORD_RESET_EXPIRE_MINUTES = int(os.getenv("PASSWORD_RESET_EXPIRE_MINUTES", "60"))

DEFAULT_REPORT_STATUS = "draft"
DEFAULT_SITE_SETTINGS: dict[str, str] = {
    "maintenance_mode": "false",
    "allow_registration": "true",
}


def cors_origins() -> list[str]:
    return [x.strip() for x in FRONTEND_URL.split(",") if x.strip()]


def password_reset_dev_show_token() -> bool:
    return os.getenv("PASSWORD_RESET_DEV_SHOW_TOKEN", "false").lower() == "true"
