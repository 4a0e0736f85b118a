import bcrypt

# bcrypt only looks at the first 72 bytes and current releases refuse longer input.
BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes | None:
    raw = password.encode("utf-8")
    return raw if len(raw) <= BCRYPT_MAX_BYTES else None


def hash_password(password: str) -> str:
    """Salted bcrypt hash of an account password, as text for the `users` table."""
    if not password:
        raise ValueError("Password is required")
    raw = _password_bytes(password)
    if raw is None:
        raise ValueError(f"Password must be {BCRYPT_MAX_BYTES} bytes or less")
    return bcrypt.hashpw(raw, bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    if not password or not hashed:
        return False
    raw = _password_bytes(password)
    if raw is None:
        return False
    try:
        return bcrypt.checkpw(raw, hashed.encode("utf-8"))
    except ValueError:
        # Malformed hash in the store (e.g. a seeded placeholder).
        return False
