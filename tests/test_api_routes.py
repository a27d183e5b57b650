#!/usr/bin/env python
"""
ABOUTME: Test the forum REST endpoints through the Flask test client
ABOUTME: Validates envelopes, pagination, auth gating, error mapping and the /api prefix
"""

import pytest

from core.context import AppConfig, ServiceContext


def create_post(client, title="Hi", url="http://x", content="body"):
    return client.post("/posts", data={"title": title, "url": url, "content": content})


class TestHealthEndpoint:
    """Test health check endpoint"""

    def test_health_ok(self, api_client):
        """Test /health reports a connected database"""
        response = api_client.get("/health")
        assert response.status_code == 200
        body = response.get_json()
        assert body["success"] is True
        assert body["data"]["database"] == "connected"
        assert body["message"] == "Database connection successful"

    def test_health_database_down(self, api_client, memory_db):
        """Test /health returns 503 when the store does not answer"""
        memory_db.healthy = False
        response = api_client.get("/health")
        assert response.status_code == 503
        assert response.get_json() == {"success": False, "error": "Database connection failed"}


class TestPostsEndpoint:
    """Test posts endpoints"""

    def test_empty_listing(self, api_client):
        response = api_client.get("/posts")
        assert response.status_code == 200
        assert response.get_json() == {
            "success": True,
            "data": [],
            "pagination": {"page": 1, "limit": 10, "hasMore": False},
        }

    def test_create_post(self, alice_client):
        """Test POST /posts returns 201 with the stored post"""
        response = create_post(alice_client)
        assert response.status_code == 201
        body = response.get_json()
        assert body["message"] == "Post created"
        post = body["data"]
        assert post["title"] == "Hi"
        assert post["url"] == "http://x"
        assert post["content"] == "body"
        assert post["author"]["username"] == "alice"
        assert post["points"] == 0
        assert isinstance(post["created_at"], str)

    def test_create_post_accepts_json_body(self, alice_client):
        response = alice_client.post("/posts", json={"title": "J", "url": "http://j", "content": "c"})
        assert response.status_code == 201
        assert response.get_json()["data"]["title"] == "J"

    def test_create_post_requires_login(self, api_client):
        response = create_post(api_client)
        assert response.status_code == 401
        assert response.get_json() == {"success": False, "error": "Not authenticated", "isFormError": False}

    def test_create_post_missing_field(self, alice_client):
        response = alice_client.post("/posts", data={"title": "Hi", "url": "http://x"})
        assert response.status_code == 400
        body = response.get_json()
        assert body["error"] == "content is required"
        assert body["isFormError"] is True

    def test_get_post(self, alice_client):
        post_id = create_post(alice_client).get_json()["data"]["id"]
        response = alice_client.get(f"/posts/{post_id}")
        assert response.status_code == 200
        assert response.get_json()["data"]["id"] == post_id

    def test_get_missing_post(self, api_client):
        response = api_client.get("/posts/nope")
        assert response.status_code == 404
        assert response.get_json()["error"] == "Post not found"

    def test_page_size_fixed_at_ten(self, alice_client):
        """Test posts pages hold 10 items regardless of ?limit"""
        for i in range(12):
            create_post(alice_client, title=f"post {i:02d}")

        first = alice_client.get("/posts?limit=5").get_json()
        second = alice_client.get("/posts?page=2").get_json()
        assert len(first["data"]) == 10
        assert first["pagination"] == {"page": 1, "limit": 10, "hasMore": True}
        assert len(second["data"]) == 2
        assert second["pagination"]["hasMore"] is False

    def test_has_more_at_exact_boundary(self, alice_client):
        """Test a full final page still reports hasMore (next page is empty)"""
        for i in range(10):
            create_post(alice_client, title=f"post {i}")

        assert alice_client.get("/posts").get_json()["pagination"]["hasMore"] is True
        second = alice_client.get("/posts?page=2").get_json()
        assert second["data"] == []
        assert second["pagination"]["hasMore"] is False

    def test_sort_by_title(self, alice_client):
        for title in ["b", "c", "a"]:
            create_post(alice_client, title=title)

        body = alice_client.get("/posts?sortBy=title&order=asc").get_json()
        assert [p["title"] for p in body["data"]] == ["a", "b", "c"]

    def test_filter_by_author(self, alice_client, bob_client):
        alice_id = create_post(alice_client, title="from alice").get_json()["data"]["author"]["id"]
        create_post(bob_client, title="from bob")

        body = bob_client.get(f"/posts?author={alice_id}").get_json()
        assert [p["title"] for p in body["data"]] == ["from alice"]

    @pytest.mark.parametrize("query", ["sortBy=password_hash", "order=up", "page=0", "page=x"])
    def test_invalid_list_parameters(self, api_client, query):
        """Test rejected query parameters are not form errors"""
        response = api_client.get(f"/posts?{query}")
        assert response.status_code == 400
        body = response.get_json()
        assert body["success"] is False
        assert body["isFormError"] is False


class TestUpvoteEndpoints:
    """Test upvote toggles"""

    def test_post_upvote_toggles(self, alice_client):
        post_id = create_post(alice_client).get_json()["data"]["id"]

        first = alice_client.post(f"/posts/{post_id}/upvote")
        second = alice_client.post(f"/posts/{post_id}/upvote")
        assert first.status_code == 200
        assert first.get_json()["data"] == {"upvoted": True, "points": 1}
        assert first.get_json()["message"] == "Upvote toggled"
        assert second.get_json()["data"] == {"upvoted": False, "points": 0}

    def test_upvotes_from_two_users(self, alice_client, bob_client):
        post_id = create_post(alice_client).get_json()["data"]["id"]
        alice_client.post(f"/posts/{post_id}/upvote")
        bob_client.post(f"/posts/{post_id}/upvote")

        assert alice_client.get(f"/posts/{post_id}").get_json()["data"]["points"] == 2

    def test_interleaved_users_keep_separate_sessions(self, alice_client, bob_client):
        """Test requests alternating between two signed-in clients"""
        post_id = create_post(alice_client).get_json()["data"]["id"]

        bob_vote = bob_client.post(f"/posts/{post_id}/upvote")
        alice_view = alice_client.get(f"/posts/{post_id}").get_json()["data"]
        bob_view = bob_client.get(f"/posts/{post_id}").get_json()["data"]

        assert bob_vote.status_code == 200
        assert bob_vote.get_json()["data"] == {"upvoted": True, "points": 1}
        assert alice_view["is_upvoted"] is False
        assert bob_view["is_upvoted"] is True
        assert alice_client.get("/auth/user").get_json()["data"] == {"username": "alice"}
        assert bob_client.get("/auth/user").get_json()["data"] == {"username": "bob"}

    def test_upvote_requires_login(self, alice_client, api_client):
        post_id = create_post(alice_client).get_json()["data"]["id"]
        assert api_client.post(f"/posts/{post_id}/upvote").status_code == 401

    def test_upvote_missing_post(self, alice_client):
        response = alice_client.post("/posts/missing/upvote")
        assert response.status_code == 404

    def test_comment_upvote_toggles(self, alice_client):
        post_id = create_post(alice_client).get_json()["data"]["id"]
        comment_id = alice_client.post(f"/comments/{post_id}", data={"content": "c"}).get_json()["data"]["id"]

        first = alice_client.post(f"/comments/{comment_id}/upvote").get_json()["data"]
        second = alice_client.post(f"/comments/{comment_id}/upvote").get_json()["data"]
        assert first == {"upvoted": True, "points": 1}
        assert second == {"upvoted": False, "points": 0}

    def test_upvote_missing_comment(self, alice_client):
        response = alice_client.post("/comments/missing/upvote")
        assert response.status_code == 404
        assert response.get_json()["error"] == "Comment not found"


class TestCommentsEndpoint:
    """Test comment endpoints"""

    def test_comment_and_reply(self, alice_client, bob_client):
        post_id = create_post(alice_client).get_json()["data"]["id"]

        comment = bob_client.post(f"/comments/{post_id}", data={"content": "first"})
        assert comment.status_code == 201
        assert comment.get_json()["message"] == "Comment created"
        comment_id = comment.get_json()["data"]["id"]

        reply = alice_client.post(f"/comments/{comment_id}/reply", data={"content": "thanks"})
        assert reply.status_code == 201
        assert reply.get_json()["message"] == "Reply created"
        assert reply.get_json()["data"]["post_id"] == post_id
        assert reply.get_json()["data"]["parent_comment_id"] == comment_id

        listing = alice_client.get(f"/comments/{post_id}?sortBy=createdAt&order=asc").get_json()
        assert [c["content"] for c in listing["data"]] == ["first", "thanks"]
        assert listing["data"][0]["reply_count"] == 1
        assert alice_client.get(f"/posts/{post_id}").get_json()["data"]["comment_count"] == 2

    def test_comment_on_missing_post(self, alice_client):
        response = alice_client.post("/comments/missing", data={"content": "x"})
        assert response.status_code == 404
        assert response.get_json()["error"] == "Post not found"

    def test_reply_to_missing_comment(self, alice_client):
        response = alice_client.post("/comments/missing/reply", data={"content": "x"})
        assert response.status_code == 404
        assert response.get_json()["error"] == "Parent comment not found"

    def test_comment_requires_content(self, alice_client):
        post_id = create_post(alice_client).get_json()["data"]["id"]
        response = alice_client.post(f"/comments/{post_id}", data={})
        assert response.status_code == 400
        assert response.get_json()["isFormError"] is True

    def test_comment_requires_login(self, alice_client, api_client):
        post_id = create_post(alice_client).get_json()["data"]["id"]
        assert api_client.post(f"/comments/{post_id}", data={"content": "x"}).status_code == 401

    def test_comment_limit(self, alice_client):
        post_id = create_post(alice_client).get_json()["data"]["id"]
        for i in range(3):
            alice_client.post(f"/comments/{post_id}", data={"content": str(i)})

        body = alice_client.get(f"/comments/{post_id}?limit=2").get_json()
        assert len(body["data"]) == 2
        assert body["pagination"] == {"page": 1, "limit": 2, "hasMore": True}

    @pytest.mark.parametrize("query", ["limit=0", "limit=101", "sortBy=title"])
    def test_invalid_comment_parameters(self, api_client, query):
        response = api_client.get(f"/comments/any?{query}")
        assert response.status_code == 400
        assert response.get_json()["isFormError"] is False

    def test_comments_of_unknown_post_is_empty(self, api_client):
        body = api_client.get("/comments/unknown").get_json()
        assert body["data"] == []


class TestErrorHandling:
    """Test error envelopes"""

    def test_unknown_route(self, api_client):
        response = api_client.get("/does-not-exist")
        assert response.status_code == 404
        assert response.get_json() == {"success": False, "error": "Route not found"}

    def test_method_not_allowed(self, api_client):
        response = api_client.delete("/posts")
        assert response.status_code == 405
        assert response.get_json()["error"] == "Method not allowed"

    def test_internal_error_in_development(self, api_client, memory_db, monkeypatch):
        def broken(*args, **kwargs):
            raise RuntimeError("boom")

        monkeypatch.setattr(memory_db, "list_posts", broken)
        response = api_client.get("/posts")
        assert response.status_code == 500
        assert response.get_json() == {"success": False, "error": "boom", "isFormError": False}

    def test_internal_error_hidden_in_production(self, memory_db, monkeypatch):
        from forum_server import create_app

        def broken(*args, **kwargs):
            raise RuntimeError("connection string with secrets")

        config = AppConfig(database_url="postgresql://unused", environment="production", cors_origins=[])
        app = create_app(ServiceContext.from_store(config, memory_db))
        monkeypatch.setattr(memory_db, "list_posts", broken)

        response = app.test_client().get("/posts")
        assert response.status_code == 500
        assert response.get_json()["error"] == "Internal server error"


class TestApiPrefix:
    """Test the /api mount of the same routes"""

    def test_prefixed_listing(self, api_client):
        response = api_client.get("/api/posts")
        assert response.status_code == 200
        assert response.get_json()["success"] is True

    def test_prefixed_auth_flow(self, flask_app):
        client = flask_app.test_client()
        assert client.post("/api/auth/signup", data={"username": "carol", "password": "secret"}).status_code == 201
        assert client.get("/api/auth/user").get_json()["data"] == {"username": "carol"}
        assert client.post("/api/posts", data={"title": "t", "url": "u", "content": "c"}).status_code == 201


class TestEndToEnd:
    """Walk through the main flow as a single user"""

    def test_signup_post_upvote_twice(self, api_client):
        signup = api_client.post("/auth/signup", data={"username": "alice", "password": "secret"})
        assert signup.status_code == 201

        post = create_post(api_client).get_json()["data"]
        assert post["author"]["username"] == "alice"

        listing = api_client.get("/posts").get_json()
        assert [p["id"] for p in listing["data"]] == [post["id"]]

        assert api_client.post(f"/posts/{post['id']}/upvote").get_json()["data"]["upvoted"] is True
        assert api_client.get(f"/posts/{post['id']}").get_json()["data"]["is_upvoted"] is True
        assert api_client.post(f"/posts/{post['id']}/upvote").get_json()["data"]["upvoted"] is False
        assert api_client.get(f"/posts/{post['id']}").get_json()["data"]["points"] == 0
