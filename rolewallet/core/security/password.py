import bcrypt

DEFAULT_ROUNDS = 12

# bcrypt only looks at the first 72 bytes of the secret
_MAX_PASSWORD_BYTES = 72


def _encode(password: str) -> bytes:
    encoded = password.encode("utf-8")
    if len(encoded) > _MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must not exceed {_MAX_PASSWORD_BYTES} bytes.")
    return encoded


def hash_password(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Returns a salted bcrypt hash of ``password``."""
    return bcrypt.hashpw(_encode(password), bcrypt.gensalt(rounds=rounds)).decode("ascii")


def check_password(password: str, password_hash: str) -> bool:
    """
    Verifies ``password`` against a stored bcrypt hash.

    The comparison inside ``bcrypt.checkpw`` is constant-time. Malformed hashes
    and over-long passwords verify as False rather than raising.
    """
    try:
        return bcrypt.checkpw(_encode(password), password_hash.encode("ascii"))
    except ValueError:
        return False
