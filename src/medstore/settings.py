"""Application settings read from the environment.

Values are looked up on every call so that a changed environment (for
example in tests) takes effect without reloading modules.
"""

import os

_DEV_JWT_SECRET = "medstore-dev-secret"

LOW_STOCK_THRESHOLD = 10
NOTIFICATION_EXPIRY_DAYS = 30
DEFAULT_PAGE_SIZE = 20

_DEV_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]


def environment() -> str:
    return (os.getenv("ENVIRONMENT") or os.getenv("PROTEAN_ENV") or "development").lower()


def jwt_secret() -> str:
    return os.getenv("JWT_SECRET", _DEV_JWT_SECRET)


def jwt_expiry_days() -> int:
    return int(os.getenv("JWT_EXPIRY_DAYS", "7"))


def admin_setup_key() -> str | None:
    return os.getenv("ADMIN_SETUP_KEY")


def allowed_origins() -> list[str]:
    origins = list(_DEV_ORIGINS)
    frontend_url = os.getenv("FRONTEND_URL")
    if frontend_url:
        origins.append(frontend_url)
    return origins
