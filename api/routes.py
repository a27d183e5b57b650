#!/usr/bin/env python
# ABOUTME: REST API route handlers for posts, comments, upvotes and health
# ABOUTME: Handlers parse input, call the services from the app's ServiceContext and shape JSON envelopes

from datetime import datetime, timezone

from flask import request

from core.pagination import COMMENT_SORT_COLUMNS, POST_SORT_COLUMNS, POSTS_PAGE_SIZE, PageRequest

from . import api, get_context
from .auth_gate import current_user, login_required, require_fields
from .responses import error_response, paginated_response, success_response

# ============================================================================
# SYSTEM
# ============================================================================


@api.route("/health", methods=["GET"])
def api_health():
    """
    Check database connectivity.

    Returns:
        200 when the database answers, 503 otherwise
    """
    timestamp = datetime.now(timezone.utc).isoformat()
    if get_context().db.health_check():
        return success_response(
            {"database": "connected", "timestamp": timestamp}, message="Database connection successful"
        )
    return error_response("Database connection failed", 503)


# ============================================================================
# POSTS
# ============================================================================


@api.route("/posts", methods=["GET"])
def get_posts():
    """
    Get paginated list of posts.

    Query Parameters:
        page (int): Page number (default: 1)
        sortBy (str): created_at|title|points|comment_count (default: created_at)
        order (str): asc|desc (default: desc)
        author (str): Only posts by this user id

    Page size is fixed at 10; a ``limit`` parameter is ignored.

    Returns:
        Paginated JSON response with posts
    """
    page_request = PageRequest.from_query(request.args, POST_SORT_COLUMNS, fixed_limit=POSTS_PAGE_SIZE)
    page = get_context().posts.list_posts(page_request, author_id=request.args.get("author"), viewer=current_user())
    return paginated_response(page)


@api.route("/posts", methods=["POST"])
@login_required
def create_post():
    """
    Create a post as the logged-in user.

    Form Fields:
        title (str), url (str), content (str)

    Returns:
        201 with the created post
    """
    fields = require_fields("title", "url", "content")
    post = get_context().posts.create_post(fields["title"], fields["url"], fields["content"], current_user())
    return success_response(post, message="Post created", status=201)


@api.route("/posts/<post_id>", methods=["GET"])
def get_post(post_id: str):
    """Get single post by ID (404 when absent)."""
    post = get_context().posts.get_post(post_id, viewer=current_user())
    return success_response(post)


@api.route("/posts/<post_id>/upvote", methods=["POST"])
@login_required
def upvote_post(post_id: str):
    """
    Toggle the logged-in user's upvote on a post.

    Returns:
        {'upvoted': bool, 'points': int}
    """
    state = get_context().posts.toggle_upvote(post_id, current_user())
    return success_response(state, message="Upvote toggled")


# ============================================================================
# COMMENTS
# ============================================================================


@api.route("/comments/<post_id>", methods=["GET"])
def get_post_comments(post_id: str):
    """
    Get comments for a specific post, replies included.

    Query Parameters:
        page (int): Page number (default: 1)
        limit (int): Results per page (default: 10, max: 100)
        sortBy (str): created_at|points|reply_count (default: created_at)
        order (str): asc|desc (default: desc)

    Returns:
        Paginated JSON response with comments
    """
    page_request = PageRequest.from_query(request.args, COMMENT_SORT_COLUMNS)
    page = get_context().comments.list_comments(post_id, page_request, viewer=current_user())
    return paginated_response(page)


@api.route("/comments/<post_id>", methods=["POST"])
@login_required
def create_comment(post_id: str):
    """Top-level comment on a post. Form field: content."""
    fields = require_fields("content")
    comment = get_context().comments.create_comment(post_id, fields["content"], current_user())
    return success_response(comment, message="Comment created", status=201)


@api.route("/comments/<comment_id>/reply", methods=["POST"])
@login_required
def reply_to_comment(comment_id: str):
    """Reply to a comment; the reply belongs to the parent's post. Form field: content."""
    fields = require_fields("content")
    reply = get_context().comments.create_reply(comment_id, fields["content"], current_user())
    return success_response(reply, message="Reply created", status=201)


@api.route("/comments/<comment_id>/upvote", methods=["POST"])
@login_required
def upvote_comment(comment_id: str):
    """Toggle the logged-in user's upvote on a comment."""
    state = get_context().comments.toggle_upvote(comment_id, current_user())
    return success_response(state, message="Upvote toggled")
