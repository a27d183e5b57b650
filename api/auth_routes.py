# ABOUTME: Authentication routes: signup, login, current user and logout
# ABOUTME: Session cookies are issued here and written by the auth gate's after_request hook

from flask import g

from core.errors import UnauthenticatedError

from . import api, get_context
from .auth_gate import current_user, read_form
from .responses import success_response


@api.route("/auth/signup", methods=["POST"])
def signup():
    """
    Create an account and log it in.

    Form Fields:
        username (str): 3-31 characters, unique
        password (str): at least 3 characters

    Returns:
        201 with a session cookie; 400 on invalid fields, 409 if the username is taken
    """
    form = read_form()
    context = get_context()

    user = context.users.signup(form.get("username"), form.get("password"))
    session = context.sessions.create_session(user["id"])
    g.session_cookie = context.sessions.create_session_cookie(session)

    return success_response(message="User created", status=201)


@api.route("/auth/login", methods=["POST"])
def login():
    """
    Log in with username and password.

    Returns:
        200 with a session cookie; 401 'Incorrect username' or 'Incorrect password'
    """
    form = read_form()
    context = get_context()

    user = context.users.login(form.get("username"), form.get("password"))
    session = context.sessions.create_session(user["id"])
    g.session_cookie = context.sessions.create_session_cookie(session)

    return success_response(message="Logged in")


@api.route("/auth/user", methods=["GET"])
def get_user():
    """Username of the current session, or 401."""
    user = current_user()
    if user is None:
        raise UnauthenticatedError("Invalid session" if g.get("had_session_cookie") else "Not authenticated")
    return success_response({"username": user["username"]}, message="User fetched")


@api.route("/auth/logout", methods=["GET"])
def logout():
    """Invalidate the current session and clear the cookie."""
    context = get_context()
    if g.get("session") is not None:
        context.sessions.invalidate_session(g.session.id)
    g.user = None
    g.session = None
    g.session_cookie = context.sessions.create_blank_session_cookie()
    return success_response(message="Logged out")
