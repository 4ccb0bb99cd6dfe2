import os
from dataclasses import dataclass
from typing import Optional

# Optional: load a local .env file if present.
try:
    from dotenv import load_dotenv

    load_dotenv()
except Exception:
    # If python-dotenv isn't installed or .env isn't present, that's fine.
    pass


def _env_bool(name: str, default: Optional[bool] = None) -> Optional[bool]:
    """Parse a boolean environment variable.

    Returns:
      - True/False if the env var is set to a recognizable value
      - default if unset or unrecognized

    Accepted truthy: 1, true, yes, y, on
    Accepted falsy:  0, false, no, n, off
    """

    raw = os.environ.get(name)
    if raw is None:
        return default
    v = raw.strip().lower()
    if v in ("1", "true", "yes", "y", "on"):
        return True
    if v in ("0", "false", "no", "n", "off"):
        return False
    return default


@dataclass(frozen=True)
class Config:
    """Runtime configuration.

    IMPORTANT: Provide secrets via environment variables or a .env file.
    Do not hardcode secrets in source code.
    """

    # -----------------
    # Core
    # -----------------
    # Preferred: set DEVCONNECTOR_DATABASE_URL (or DATABASE_URL) to use Postgres.
    # Fallback: DEVCONNECTOR_DB_PATH for SQLite.
    DB_DSN: str = (
        os.environ.get("DEVCONNECTOR_DATABASE_URL")
        or os.environ.get("DATABASE_URL")
        or os.environ.get("DEVCONNECTOR_DB_PATH", "./devconnector.sqlite")
    )

    # -----------------
    # Auth (JWT)
    # -----------------
    # NOTE: In dev, this defaults to a fixed string so you can get started.
    # In production, you MUST set AUTH_JWT_SECRET to a strong random value.
    AUTH_JWT_SECRET: str = os.environ.get("AUTH_JWT_SECRET", "dev_change_me")
    AUTH_TOKEN_EXPIRE_SECONDS: int = int(os.environ.get("AUTH_TOKEN_EXPIRE_SECONDS", "360000"))  # 100 hours

    # Header carrying the session token on every authenticated request.
    AUTH_HEADER_NAME: str = os.environ.get("AUTH_HEADER_NAME", "x-auth-token")

    PASSWORD_MIN_LENGTH: int = int(os.environ.get("PASSWORD_MIN_LENGTH", "6"))

    # Gravatar (avatar derived from the email address at registration)
    GRAVATAR_BASE_URL: str = os.environ.get("GRAVATAR_BASE_URL", "https://www.gravatar.com/avatar")
    GRAVATAR_SIZE: int = int(os.environ.get("GRAVATAR_SIZE", "200"))
    GRAVATAR_RATING: str = os.environ.get("GRAVATAR_RATING", "pg")
    GRAVATAR_DEFAULT: str = os.environ.get("GRAVATAR_DEFAULT", "mm")

    # -----------------
    # CORS (development)
    # -----------------
    CORS_ALLOW_ORIGINS: str = os.environ.get(
        "CORS_ALLOW_ORIGINS",
        "http://localhost:3000,http://127.0.0.1:3000",
    )

    # -----------------
    # Client
    # -----------------
    API_BASE_URL: str = os.environ.get("API_BASE_URL", "http://localhost:8000")
    # Where the client keeps the session token between runs. Empty = memory only.
    CLIENT_TOKEN_PATH: str = os.environ.get("CLIENT_TOKEN_PATH", "")
    ALERT_TIMEOUT_SECONDS: float = float(os.environ.get("ALERT_TIMEOUT_SECONDS", "5"))

    # Print request failures with tracebacks (500 handler).
    DEBUG_TRACEBACKS: bool = _env_bool("DEBUG_TRACEBACKS", False) is True


def load_config() -> Config:
    return Config()
