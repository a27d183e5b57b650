# ABOUTME: Safe error reporting for API handlers
# ABOUTME: Logs full exception details server-side and returns a message that is safe to show clients

import logging

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Internal server error"


def format_user_error(error: BaseException, context: str, debug: bool = False) -> str:
    """Log an unexpected exception and build the message returned to the client.

    Args:
        error: The exception raised while handling a request
        context: Short label of where it happened (e.g. 'api_posts')
        debug: Return the exception text instead of the generic message (development only)

    Returns:
        Client-safe error message
    """
    logger.error("Unhandled error in %s: %s: %s", context, type(error).__name__, error, exc_info=error)

    if debug:
        message = str(error).strip()
        return message or type(error).__name__
    return GENERIC_ERROR_MESSAGE
