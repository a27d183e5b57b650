# ABOUTME: Post listing, creation, lookup and upvote toggling
# ABOUTME: Business rules over the store: authentication checks, id/timestamp stamping, NotFound mapping

import logging
from datetime import datetime, timezone
from typing import Any

from core.auth import require_user, viewer_id
from core.errors import NotFoundError
from core.identifiers import generate_id, generate_uuid
from core.pagination import Page, PageRequest
from core.postgres_database import ForeignKeyViolationError

logger = logging.getLogger(__name__)


class PostService:
    def __init__(self, db):
        self.db = db

    def list_posts(
        self,
        page_request: PageRequest,
        author_id: str | None = None,
        viewer: dict[str, Any] | None = None,
    ) -> Page:
        """One page of posts, optionally restricted to a single author."""
        items = self.db.list_posts(
            sort_by=page_request.sort_by,
            order=page_request.order,
            limit=page_request.limit,
            offset=page_request.offset,
            author_id=author_id or None,
            viewer_id=viewer_id(viewer),
        )
        return Page(items=items, page=page_request.page, limit=page_request.limit)

    def create_post(self, title: str, url: str, content: str, acting_user: dict[str, Any] | None) -> dict[str, Any]:
        user = require_user(acting_user)
        post = self.db.insert_post(
            {
                "id": generate_uuid(),
                "title": title,
                "url": url,
                "content": content,
                "author_id": user["id"],
                "created_at": datetime.now(timezone.utc),
            }
        )
        logger.info(f"User {user['id']} created post {post['id']}")
        return post

    def get_post(self, post_id: str, viewer: dict[str, Any] | None = None) -> dict[str, Any]:
        post = self.db.get_post(post_id, viewer_id=viewer_id(viewer))
        if post is None:
            raise NotFoundError("Post not found")
        return post

    def toggle_upvote(self, post_id: str, acting_user: dict[str, Any] | None) -> dict[str, Any]:
        """Upvote the post, or remove the acting user's upvote if present.

        Returns:
            {'upvoted': bool, 'points': int}
        """
        user = require_user(acting_user)
        try:
            return self.db.toggle_post_upvote(generate_id(15), post_id, user["id"], datetime.now(timezone.utc))
        except ForeignKeyViolationError:
            raise NotFoundError("Post not found")
