# ABOUTME: Account signup and login against the users table
# ABOUTME: Validates credentials, hashes passwords with Werkzeug and maps duplicate usernames to ConflictError

import logging
from datetime import datetime, timezone
from typing import Any

from werkzeug.security import check_password_hash, generate_password_hash

from core.errors import ConflictError, UnauthenticatedError, ValidationError
from core.identifiers import generate_id
from core.postgres_database import UniqueViolationError
from utils.input_validation import validator

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, db):
        self.db = db

    def signup(self, username: Any, password: Any) -> dict[str, Any]:
        """Create an account.

        Raises:
            ValidationError: Missing fields, username outside 3-31 chars, password under 3 chars
            ConflictError: Username already used
        """
        result = validator.validate_credentials(username, password)
        if not result.is_valid:
            raise ValidationError(result.first_error())

        try:
            user = self.db.create_user(
                generate_id(15),
                username,
                generate_password_hash(password),
                datetime.now(timezone.utc),
            )
        except UniqueViolationError:
            raise ConflictError("Username already used")

        logger.info(f"Created user {user['id']}")
        return user

    def login(self, username: Any, password: Any) -> dict[str, Any]:
        """Check credentials and return the user.

        The client is told which field was wrong; the log line is not.

        Raises:
            ValidationError: Malformed credentials
            UnauthenticatedError: Unknown username or wrong password
        """
        result = validator.validate_credentials(username, password)
        if not result.is_valid:
            raise ValidationError(result.first_error())

        user = self.db.get_user_by_username(username)
        if user is None:
            logger.info("Rejected login attempt")
            raise UnauthenticatedError("Incorrect username", is_form_error=True)

        if not check_password_hash(user["password_hash"], password):
            logger.info("Rejected login attempt")
            raise UnauthenticatedError("Incorrect password", is_form_error=True)

        return {"id": user["id"], "username": user["username"], "created_at": user["created_at"]}
