# ABOUTME: Comment listing, top-level comments, threaded replies and upvote toggling
# ABOUTME: Replies always inherit the post of their parent comment

import logging
from datetime import datetime, timezone
from typing import Any

from core.auth import require_user, viewer_id
from core.errors import NotFoundError
from core.identifiers import generate_id
from core.pagination import Page, PageRequest
from core.postgres_database import ForeignKeyViolationError

logger = logging.getLogger(__name__)


class CommentService:
    def __init__(self, db):
        self.db = db

    def list_comments(self, post_id: str, page_request: PageRequest, viewer: dict[str, Any] | None = None) -> Page:
        items = self.db.list_comments(
            post_id,
            sort_by=page_request.sort_by,
            order=page_request.order,
            limit=page_request.limit,
            offset=page_request.offset,
            viewer_id=viewer_id(viewer),
        )
        return Page(items=items, page=page_request.page, limit=page_request.limit)

    def create_comment(self, post_id: str, content: str, acting_user: dict[str, Any] | None) -> dict[str, Any]:
        """Top-level comment on a post.

        Raises:
            UnauthenticatedError: No acting user
            NotFoundError: Post does not exist
        """
        user = require_user(acting_user)
        if self.db.get_post(post_id) is None:
            raise NotFoundError("Post not found")

        comment = self._insert(content, post_id, None, user, "Post not found")
        logger.info(f"User {user['id']} commented {comment['id']} on post {post_id}")
        return comment

    def create_reply(
        self, parent_comment_id: str, content: str, acting_user: dict[str, Any] | None
    ) -> dict[str, Any]:
        """Reply to a comment; the reply's post is the parent's post.

        Raises:
            UnauthenticatedError: No acting user
            NotFoundError: Parent comment does not exist
        """
        user = require_user(acting_user)
        parent = self.db.get_comment(parent_comment_id)
        if parent is None:
            raise NotFoundError("Parent comment not found")

        reply = self._insert(content, parent["post_id"], parent_comment_id, user, "Parent comment not found")
        logger.info(f"User {user['id']} replied {reply['id']} to comment {parent_comment_id}")
        return reply

    def toggle_upvote(self, comment_id: str, acting_user: dict[str, Any] | None) -> dict[str, Any]:
        user = require_user(acting_user)
        try:
            return self.db.toggle_comment_upvote(
                generate_id(15), comment_id, user["id"], datetime.now(timezone.utc)
            )
        except ForeignKeyViolationError:
            raise NotFoundError("Comment not found")

    def _insert(
        self,
        content: str,
        post_id: str,
        parent_comment_id: str | None,
        user: dict[str, Any],
        missing_message: str,
    ) -> dict[str, Any]:
        try:
            return self.db.insert_comment(
                {
                    "id": generate_id(15),
                    "content": content,
                    "post_id": post_id,
                    "parent_comment_id": parent_comment_id,
                    "author_id": user["id"],
                    "created_at": datetime.now(timezone.utc),
                }
            )
        except ForeignKeyViolationError:
            raise NotFoundError(missing_message)
