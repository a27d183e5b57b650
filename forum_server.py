#!/usr/bin/env python
# ABOUTME: Flask application factory and command-line entry point for the forum API
# ABOUTME: Subcommands: serve (default), init-db (apply schema), purge-sessions (delete expired sessions)

import argparse
import sys

from flask import Flask
from flask_cors import CORS

from api import register_api
from api.responses import OrjsonProvider
from core.context import AppConfig, ServiceContext
from utils.console_output import console, print_error, print_info, print_section, print_success, print_warning
from version import get_version_string


def create_app(context: ServiceContext | None = None, config: AppConfig | None = None) -> Flask:
    """Build the Flask app.

    Args:
        context: Prebuilt service context (tests pass one around an in-memory store)
        config: Configuration used when ``context`` is None (defaults to the environment)

    Returns:
        Configured Flask application
    """
    if context is None:
        context = ServiceContext.from_config(config or AppConfig.from_env())

    app = Flask(__name__)
    app.json = OrjsonProvider(app)
    app.config["TESTING"] = context.config.environment == "testing"

    if context.config.cors_origins:
        CORS(app, origins=context.config.cors_origins, supports_credentials=True)
    else:
        print_warning("No CORS origins configured; cross-origin browser requests will be rejected")

    register_api(app, context)
    return app


def serve(args: argparse.Namespace, config: AppConfig) -> int:
    print_section(get_version_string())
    print_info(f"Environment: {config.environment}")
    print_info(f"Database URL: {'set' if config.database_url else 'not set'}")

    try:
        context = ServiceContext.from_config(config)
    except Exception as e:
        print_error(f"Database connection failed: {e}")
        return 1

    if not context.db.health_check():
        print_error("Database is not answering; refusing to start")
        context.close()
        return 1

    stats = context.db.pool.get_pool_stats()
    print_info(f"Connection pool: {stats['pool_size']} open, {stats['min_size']}-{stats['max_size']} allowed")

    app = create_app(context)
    host = args.host or config.host
    port = args.port or config.port
    print_success(f"Server running at http://{host}:{port}")
    try:
        app.run(host=host, port=port, debug=args.debug, threaded=True, use_reloader=False)
    finally:
        context.close()
    return 0


def init_db(config: AppConfig) -> int:
    try:
        context = ServiceContext.from_config(config)
    except Exception as e:
        print_error(f"Schema setup failed: {e}")
        return 1
    context.close()
    return 0


def purge_sessions(config: AppConfig) -> int:
    try:
        context = ServiceContext.from_config(config, skip_schema_setup=True)
    except Exception as e:
        print_error(f"Database connection failed: {e}")
        return 1
    try:
        removed = context.sessions.delete_expired_sessions()
        print_success(f"Removed {console.format_number(removed)} expired sessions")
    finally:
        context.close()
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Forum API server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="Configuration comes from DATABASE_URL and FORUM_* environment variables.",
    )
    parser.add_argument("--log-level", help="Logging level (default: FORUM_LOG_LEVEL or INFO)")
    subcommands = parser.add_subparsers(dest="command")

    serve_parser = subcommands.add_parser("serve", help="Run the HTTP server (default)")
    serve_parser.add_argument("--host", help="Bind address (default: HOST or 0.0.0.0)")
    serve_parser.add_argument("--port", type=int, help="Port (default: PORT or 3000)")
    serve_parser.add_argument("--debug", action="store_true", help="Enable Flask debug mode")

    subcommands.add_parser("init-db", help="Create tables and indexes")
    subcommands.add_parser("purge-sessions", help="Delete expired sessions")

    args = parser.parse_args(argv)
    config = AppConfig.from_env()
    console.setup_logging(args.log_level or config.log_level)

    if args.command == "init-db":
        return init_db(config)
    if args.command == "purge-sessions":
        return purge_sessions(config)

    if args.command is None:
        args = serve_parser.parse_args([])
    return serve(args, config)


if __name__ == "__main__":
    sys.exit(main())
