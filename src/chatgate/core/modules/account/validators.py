from chatgate.errors import ValidationError

# bcrypt only hashes the first 72 bytes and rejects longer input
MAX_PASSWORD_BYTES = 72


def is_password_too_long(password: str) -> bool:
    return len(password.encode("utf-8")) > MAX_PASSWORD_BYTES


def validate_credentials(email: str, password: str) -> None:
    """Validate registration input.

    Raises:
        ValidationError: If email or password is empty, or the password exceeds 72 bytes
    """
    if not email or not password:
        raise ValidationError("Email and password are required")

    if is_password_too_long(password):
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes long")
