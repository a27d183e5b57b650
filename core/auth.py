# ABOUTME: Acting-user helpers shared by the post and comment services
# ABOUTME: Services receive the resolved user (or None) from the auth gate

from typing import Any

from core.errors import UnauthenticatedError


def require_user(acting_user: dict[str, Any] | None) -> dict[str, Any]:
    """Return the acting user or raise UnauthenticatedError."""
    if not acting_user:
        raise UnauthenticatedError()
    return acting_user


def viewer_id(viewer: dict[str, Any] | None) -> str | None:
    return viewer["id"] if viewer else None
