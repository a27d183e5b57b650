# ABOUTME: Forum REST API blueprint and registration helper
# ABOUTME: The blueprint is served at the root and again under /api for proxied frontends

from flask import Blueprint, Flask, current_app

from core.context import ServiceContext

api = Blueprint("api", __name__)

CONTEXT_KEY = "forum"


def get_context() -> ServiceContext:
    """Service context of the running app."""
    return current_app.extensions[CONTEXT_KEY]


def register_api(app: Flask, context: ServiceContext) -> None:
    """Attach the service context, the blueprint (twice) and the error handlers."""
    from .responses import register_error_handlers

    app.extensions[CONTEXT_KEY] = context
    app.register_blueprint(api)
    app.register_blueprint(api, url_prefix="/api", name="api_prefixed")
    register_error_handlers(app, debug=context.config.debug_errors)


from . import auth_gate, auth_routes, routes  # noqa: E402,F401
