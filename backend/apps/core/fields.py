"""
Encrypted model fields.

Values are encrypted with Fernet (AES-128-CBC + HMAC) using
``settings.FIELD_ENCRYPTION_KEY`` before they reach the database.
Fernet output is randomized, so equality lookups on the column do not
work; store a keyed digest next to it (see ``keyed_digest``) when the
value has to be unique or searchable.
"""

import hashlib
import hmac
from functools import lru_cache

from cryptography.fernet import Fernet, InvalidToken
from django.conf import settings
from django.db import models


@lru_cache(maxsize=None)
def _fernet(key: str) -> Fernet:
    return Fernet(key.encode() if isinstance(key, str) else key)


def encrypt_value(value: str) -> str:
    return _fernet(settings.FIELD_ENCRYPTION_KEY).encrypt(value.encode("utf-8")).decode("ascii")


def decrypt_value(token: str) -> str:
    return _fernet(settings.FIELD_ENCRYPTION_KEY).decrypt(token.encode("ascii")).decode("utf-8")


def keyed_digest(value: str) -> str:
    """HMAC-SHA256 of a normalized value, hex encoded."""
    normalized = "".join(value.split()).replace("-", "").upper()
    return hmac.new(
        settings.NATIONAL_ID_HASH_KEY.encode("utf-8"),
        normalized.encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()


class EncryptedCharField(models.TextField):
    """Text stored encrypted, exposed to Python as plain text."""

    def from_db_value(self, value, expression, connection):
        if value is None or value == "":
            return value
        try:
            return decrypt_value(value)
        except InvalidToken as exc:
            raise ValueError(f"Cannot decrypt column {self.column!r}; wrong FIELD_ENCRYPTION_KEY?") from exc

    def get_prep_value(self, value):
        value = super().get_prep_value(value)
        if value is None or value == "":
            return value
        return encrypt_value(str(value))
