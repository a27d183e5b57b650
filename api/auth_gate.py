# ABOUTME: Resolves the session cookie to a user before every API request
# ABOUTME: Also the single request-parsing path for form fields (form-encoded or JSON bodies)

from functools import wraps
from typing import Any

from flask import g, request

from core.errors import UnauthenticatedError, ValidationError
from core.sessions import SessionCookie
from utils.input_validation import validator

from . import api, get_context


@api.before_request
def load_session():
    """Attach g.user / g.session from the session cookie (anonymous when absent or invalid)."""
    g.user = None
    g.session = None
    g.session_cookie = None

    sessions = get_context().sessions
    session_id = request.cookies.get(sessions.cookie_name)
    g.had_session_cookie = bool(session_id)
    if not session_id:
        return

    session, user = sessions.validate_session(session_id)
    if session is None:
        g.session_cookie = sessions.create_blank_session_cookie()
        return

    g.user = user
    g.session = session
    if session.fresh:
        g.session_cookie = sessions.create_session_cookie(session)


@api.after_request
def write_session_cookie(response):
    cookie = g.get("session_cookie")
    if cookie is not None:
        set_session_cookie(response, cookie)
    return response


def set_session_cookie(response, cookie: SessionCookie) -> None:
    response.set_cookie(
        cookie.name,
        cookie.value,
        max_age=cookie.max_age,
        path=cookie.path,
        secure=cookie.secure,
        httponly=cookie.httponly,
        samesite=cookie.samesite,
    )


def current_user() -> dict[str, Any] | None:
    return g.get("user")


def login_required(view):
    """Reject the request with 401 unless the session resolved to a user."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        if current_user() is None:
            raise UnauthenticatedError()
        return view(*args, **kwargs)

    return wrapper


def read_form() -> dict[str, Any]:
    """Request body as a flat dict: form-encoded first, then a JSON object."""
    if request.form:
        return request.form.to_dict()
    payload = request.get_json(silent=True)
    if isinstance(payload, dict):
        return payload
    return {}


def require_fields(*names: str) -> dict[str, str]:
    """Read the body and require each named field as a string.

    Raises:
        ValidationError: A field is missing or not a string
    """
    result = validator.validate_form(read_form(), list(names))
    if not result.is_valid:
        raise ValidationError(result.first_error())
    return result.sanitized_values
