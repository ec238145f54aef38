"""App-level settings with their defaults."""

from typing import Callable

from django.conf import settings
from django.utils.module_loading import import_string

DEFAULT_CURRENCY = "USD"
DEFAULT_PASSWORD_MIN_LENGTH = 8
DEFAULT_CREDENTIAL_HASHER = "django.contrib.auth.hashers.make_password"


def default_currency() -> str:
    return getattr(settings, "ORDERS_DEFAULT_CURRENCY", DEFAULT_CURRENCY).upper()


def password_min_length() -> int:
    return int(getattr(settings, "ORDERS_PASSWORD_MIN_LENGTH", DEFAULT_PASSWORD_MIN_LENGTH))


def credential_hasher() -> Callable[[str], str]:
    return import_string(getattr(settings, "ORDERS_CREDENTIAL_HASHER", DEFAULT_CREDENTIAL_HASHER))
