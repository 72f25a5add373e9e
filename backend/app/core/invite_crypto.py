"""
Hashing and verification of invitation codes.

Codes are stored as "<salt_hex>:<derived_key_hex>" where the key is
PBKDF2-HMAC-SHA256 over the plaintext code. The layout matches codes
already issued by the previous registration site, so both must keep
the same salt size, key length and iteration count.
"""
import hmac
import secrets
from typing import NamedTuple, Optional

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from app.utils.logger import get_logger

logger = get_logger("invite_crypto")

SALT_BYTES = 16
KEY_BYTES = 32
ITERATIONS = 100_000


class InvitationCodeHash(NamedTuple):
    hash: str
    salt: str


def _derive_key(code: str, salt: bytes) -> bytes:
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=KEY_BYTES,
        salt=salt,
        iterations=ITERATIONS,
    )
    return kdf.derive(code.encode("utf-8"))


def hash_code(code: str, salt: Optional[bytes] = None) -> InvitationCodeHash:
    """Hash an invitation code, generating a fresh random salt unless one is given."""
    if salt is None:
        salt = secrets.token_bytes(SALT_BYTES)

    salt_hex = salt.hex()
    key_hex = _derive_key(code, salt).hex()
    return InvitationCodeHash(hash=f"{salt_hex}:{key_hex}", salt=salt_hex)


def verify_code(code: str, stored_hash: str) -> bool:
    """
    Check a plaintext code against a stored "<salt_hex>:<key_hex>" value.

    Never raises: malformed hashes and crypto failures both count as a mismatch.
    """
    try:
        parts = stored_hash.split(":")
        if len(parts) != 2 or not parts[0] or not parts[1]:
            return False
        salt_hex, key_hex = parts

        recomputed = hash_code(code, bytes.fromhex(salt_hex))
        _, new_key_hex = recomputed.hash.split(":")
        return hmac.compare_digest(new_key_hex, key_hex)
    except Exception as e:
        logger.error(f"Invitation code verification failed: {type(e).__name__}")
        return False
