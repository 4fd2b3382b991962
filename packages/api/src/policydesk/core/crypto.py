# This project was developed with assistance from AI tools.
"""Field-level encryption for customer SSNs.

Fernet (AES-128-CBC + HMAC) with a key derived from ``ENCRYPTION_SECRET``
via PBKDF2. Ciphertext is stored with an ``ENC:`` prefix so plaintext
rows left over from imports can be told apart.
"""

import base64
import functools

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from .config import settings

ENCRYPTED_PREFIX = "ENC:"


class EncryptionError(Exception):
    """Raised when a value cannot be encrypted or decrypted."""


def _derive_key(secret: str, salt: str) -> bytes:
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=32,
        salt=salt.encode(),
        iterations=100_000,
    )
    return base64.urlsafe_b64encode(kdf.derive(secret.encode()))


@functools.lru_cache(maxsize=1)
def _get_cipher() -> Fernet:
    return Fernet(_derive_key(settings.ENCRYPTION_SECRET, settings.ENCRYPTION_SALT))


def encrypt_value(plaintext: str | None) -> str | None:
    """Encrypt ``plaintext``; empty and already-encrypted values pass through."""
    if not plaintext or plaintext.startswith(ENCRYPTED_PREFIX):
        return plaintext
    token = _get_cipher().encrypt(plaintext.encode())
    return f"{ENCRYPTED_PREFIX}{token.decode()}"


def decrypt_value(ciphertext: str | None) -> str | None:
    """Decrypt a stored value. Values without the prefix are returned as-is."""
    if not ciphertext or not ciphertext.startswith(ENCRYPTED_PREFIX):
        return ciphertext
    try:
        return _get_cipher().decrypt(ciphertext[len(ENCRYPTED_PREFIX):].encode()).decode()
    except InvalidToken as exc:
        raise EncryptionError("Decryption failed: invalid token or key") from exc
