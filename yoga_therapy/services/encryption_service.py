import base64
import binascii
import logging

from cryptography.fernet import Fernet, InvalidToken

from ..config import settings

logger = logging.getLogger("yoga_therapy")

_fernet = None

_KEY_HINT = (
    "Generate a valid key with: "
    "python -c \"from cryptography.fernet import Fernet; print(Fernet.generate_key().decode())\""
)


def get_fernet() -> Fernet:
    global _fernet
    if _fernet is None:
        key = settings.ENCRYPTION_KEY.encode()
        try:
            decoded = base64.urlsafe_b64decode(key)
        except (binascii.Error, ValueError) as e:
            raise ValueError(f"Invalid ENCRYPTION_KEY format: {e}. {_KEY_HINT}") from e
        if len(decoded) != 32:
            raise ValueError(f"ENCRYPTION_KEY must be 32 bytes, base64-encoded. {_KEY_HINT}")
        _fernet = Fernet(key)
    return _fernet


def encrypt(value: str | None) -> str | None:
    """Encrypt a medical free-text field before it is stored."""
    if not value:
        return value
    return get_fernet().encrypt(value.encode()).decode()


def decrypt(value: str | None) -> str | None:
    if not value:
        return value
    try:
        return get_fernet().decrypt(value.encode()).decode()
    except InvalidToken:
        # rows written under a previous ENCRYPTION_KEY
        logger.warning("Could not decrypt a stored patient field; check ENCRYPTION_KEY")
        return "[decryption failed]"
