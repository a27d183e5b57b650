# ABOUTME: Uniform JSON envelopes for every API response plus the app-wide error handlers
# ABOUTME: Success: {success, data, message?, pagination?}; error: {success: false, error, isFormError?}

from typing import Any

import orjson
from flask import Flask, jsonify
from flask.json.provider import JSONProvider
from werkzeug.exceptions import HTTPException

from core.errors import ForumError, InternalError
from core.pagination import Page
from utils.error_handling import format_user_error


class OrjsonProvider(JSONProvider):
    """Flask JSON provider backed by orjson (datetimes serialize as RFC 3339)."""

    def dumps(self, obj: Any, **kwargs: Any) -> str:
        return orjson.dumps(obj, option=orjson.OPT_NON_STR_KEYS).decode()

    def loads(self, s: str | bytes, **kwargs: Any) -> Any:
        return orjson.loads(s)


def success_response(
    data: Any = None,
    message: str | None = None,
    status: int = 200,
    pagination: dict[str, Any] | None = None,
):
    body: dict[str, Any] = {"success": True}
    if data is not None:
        body["data"] = data
    if message:
        body["message"] = message
    if pagination is not None:
        body["pagination"] = pagination
    return jsonify(body), status


def paginated_response(page: Page, message: str | None = None):
    return success_response(page.items, message=message, pagination=page.pagination())


def error_response(error: str, status: int, is_form_error: bool | None = None):
    body: dict[str, Any] = {"success": False, "error": error}
    if is_form_error is not None:
        body["isFormError"] = is_form_error
    return jsonify(body), status


def register_error_handlers(app: Flask, debug: bool = False) -> None:
    """Render every failure through error_response.

    Args:
        app: Flask application
        debug: Put exception messages in 500 responses (development only)
    """

    @app.errorhandler(ForumError)
    def handle_forum_error(error: ForumError):
        return error_response(error.message, error.status_code, error.is_form_error)

    @app.errorhandler(HTTPException)
    def handle_http_error(error: HTTPException):
        if error.code == 404:
            return error_response("Route not found", 404)
        if error.code == 405:
            return error_response("Method not allowed", 405)
        return error_response(error.description or error.name, error.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected_error(error: Exception):
        internal = InternalError(format_user_error(error, "api_internal", debug=debug))
        return error_response(internal.message, internal.status_code, internal.is_form_error)
