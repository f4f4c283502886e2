import hashlib
import secrets


ENTRY_ID_RANDOM_BYTES = 32


def generate_entry_id() -> str:
    """Hex SHA-256 digest of 32 random bytes from the OS CSPRNG (64 chars)."""
    return hashlib.sha256(secrets.token_bytes(ENTRY_ID_RANDOM_BYTES)).hexdigest()
