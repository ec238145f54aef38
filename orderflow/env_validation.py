import os
import logging
from django.core.exceptions import ImproperlyConfigured

logger = logging.getLogger(__name__)

# Mandatory environment variables for production
REQUIRED_PRODUCTION_ENV_VARS = [
    "SECRET_KEY",
    "DATABASE_URL",
]

MIN_PRODUCTION_SECRET_KEY_LENGTH = 50


def _fail(message):
    logger.critical(message)
    raise ImproperlyConfigured(f"CRITICAL: {message}")


def _check_orders_settings():
    currency = os.getenv("ORDERS_DEFAULT_CURRENCY")
    if currency is not None and not (len(currency) == 3 and currency.isalpha()):
        _fail(f"ORDERS_DEFAULT_CURRENCY must be a 3-letter currency code, got {currency!r}")

    min_length = os.getenv("ORDERS_PASSWORD_MIN_LENGTH")
    if min_length is not None and (not min_length.isdigit() or int(min_length) < 1):
        _fail(f"ORDERS_PASSWORD_MIN_LENGTH must be a positive integer, got {min_length!r}")


def _check_production(secret_key):
    missing = [var for var in REQUIRED_PRODUCTION_ENV_VARS if not os.getenv(var)]
    if missing:
        _fail(f"Missing required environment variables in production: {', '.join(missing)}")

    if secret_key.startswith("django-insecure") or len(secret_key) < MIN_PRODUCTION_SECRET_KEY_LENGTH:
        _fail("SECRET_KEY must be a long, secure string in production")


def validate_env():
    """
    Validate environment variables before settings are built.
    Raises ImproperlyConfigured on the first bad value.
    """
    is_production = os.getenv("PRODUCTION", "false").lower() == "true"
    secret_key = os.getenv("SECRET_KEY", "")

    if not secret_key and not is_production:
        logger.warning("SECRET_KEY not set, using insecure default for development.")

    _check_orders_settings()
    if is_production:
        _check_production(secret_key)

    logger.info("Environment validation passed successfully")
