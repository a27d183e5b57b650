# ABOUTME: Random identifier generation for users, comments, upvotes and sessions

import secrets
import string
import uuid

_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_id(length: int = 15) -> str:
    """Random lowercase alphanumeric id (users, comments, upvotes)."""
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(length))


def generate_uuid() -> str:
    """Random UUID4 string (posts)."""
    return str(uuid.uuid4())


def generate_session_token() -> str:
    """Opaque session token with 160 bits of entropy."""
    return secrets.token_hex(20)
