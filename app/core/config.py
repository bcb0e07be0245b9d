import os

# ✅ Environment
ENVIRONMENT = os.getenv("ENVIRONMENT", "development").lower()
IS_PRODUCTION = ENVIRONMENT == "production"

# ✅ Database
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./truckmatch.db")
RUN_MIGRATIONS = os.getenv("RUN_MIGRATIONS", "0") == "1"  # else create_all on startup

# ✅ Security
_DEV_SECRET_KEY = "truckmatch-dev-secret-change-me"
SECRET_KEY = os.getenv("SECRET_KEY") or ("" if IS_PRODUCTION else _DEV_SECRET_KEY)
ALGORITHM = os.getenv("ALGORITHM", "HS256")
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))

# ✅ Session cookies
ACCESS_COOKIE_NAME = os.getenv("ACCESS_COOKIE_NAME", "access")
REFRESH_COOKIE_NAME = os.getenv("REFRESH_COOKIE_NAME", "refresh")

# ✅ Frontend / CORS
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000")

# ✅ Messages and logging
APP_LOCALE = os.getenv("APP_LOCALE", "en")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_DIR = os.getenv("LOG_DIR", "logs")

# ✅ Admin
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL")
ADMIN_USERNAME = os.getenv("ADMIN_USERNAME")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD")
ADMIN_BOOTSTRAP_TOKEN = os.getenv("ADMIN_BOOTSTRAP_TOKEN")

# ✅ Email (job application notifications)
RESEND_API_KEY = os.getenv("RESEND_API_KEY", "")
EMAIL_FROM = os.getenv("EMAIL_FROM", "TruckMatch <noreply@truckmatch.ge>")


def validate_settings() -> None:
    """Fail fast on configuration the process cannot run without."""
    if not SECRET_KEY:
        raise RuntimeError("SECRET_KEY must be set when ENVIRONMENT=production")
    if not DATABASE_URL:
        raise RuntimeError("DATABASE_URL is not set")
