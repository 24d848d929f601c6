"""Owner password hashing and policy."""

from perfin.extensions import bcrypt

MIN_PASSWORD_LENGTH = 8


def check_password_policy(plain_password: str) -> None:
    """Raise ValueError when a new owner password is too weak to store."""
    if len(plain_password or "") < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters.")


def hash_password(plain_password: str) -> str:
    return bcrypt.generate_password_hash(plain_password).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """False for a wrong password or a stored value that is not a bcrypt hash."""
    if not plain_password or not hashed_password:
        return False
    try:
        return bcrypt.check_password_hash(hashed_password, plain_password)
    except ValueError:
        return False
