"""Tests for the comment endpoints under /api/posts and /api/comments."""

from collections.abc import Awaitable, Callable
from typing import Any
from uuid import uuid4

import pytest
from httpx import AsyncClient

type CreatePost = Callable[..., Awaitable[Any]]


@pytest.fixture
async def post_id(alice: dict[str, Any], create_post: CreatePost) -> str:
    return (await create_post(alice)).json()["id"]


async def _comment(
    client: AsyncClient,
    post_id: str,
    auth: dict[str, Any],
    content: str = "Great post!",
) -> Any:
    return await client.post(
        f"/api/posts/{post_id}/comments",
        json={"content": content},
        headers=auth["headers"],
    )


class TestAddComment:
    @pytest.mark.parametrize("length", [1, 500])
    async def test_boundary_lengths_accepted(
        self,
        client: AsyncClient,
        bob: dict[str, Any],
        post_id: str,
        length: int,
    ) -> None:
        response = await _comment(client, post_id, bob, "x" * length)

        assert response.status_code == 201

    @pytest.mark.parametrize(
        ("content", "detail"),
        [
            ("", "Comment content is required"),
            ("   ", "Comment content is required"),
            ("x" * 501, "Comment cannot exceed 500 characters"),
        ],
    )
    async def test_out_of_range_rejected(
        self,
        client: AsyncClient,
        bob: dict[str, Any],
        post_id: str,
        content: str,
        detail: str,
    ) -> None:
        response = await _comment(client, post_id, bob, content)

        assert response.status_code == 400
        assert response.json()["detail"] == detail

    async def test_returns_all_comments_in_order(
        self,
        client: AsyncClient,
        alice: dict[str, Any],
        bob: dict[str, Any],
        post_id: str,
    ) -> None:
        await _comment(client, post_id, bob, "first")
        response = await _comment(client, post_id, alice, "second")

        comments = response.json()
        assert [c["content"] for c in comments] == ["first", "second"]
        assert [c["user"]["username"] for c in comments] == ["bob", "alice"]
        assert "email" not in comments[0]["user"]

    async def test_comments_appear_on_post(
        self,
        client: AsyncClient,
        bob: dict[str, Any],
        post_id: str,
    ) -> None:
        await _comment(client, post_id, bob)

        post = (await client.get(f"/api/posts/{post_id}")).json()

        assert [c["content"] for c in post["comments"]] == ["Great post!"]

    async def test_unknown_post(self, client: AsyncClient, bob: dict[str, Any]) -> None:
        response = await _comment(client, str(uuid4()), bob)

        assert response.status_code == 404

    async def test_requires_authentication(self, client: AsyncClient, post_id: str) -> None:
        response = await client.post(f"/api/posts/{post_id}/comments", json={"content": "hi"})

        assert response.status_code == 401


class TestDeleteComment:
    async def test_author_deletes_via_post_path(
        self,
        client: AsyncClient,
        bob: dict[str, Any],
        post_id: str,
    ) -> None:
        comment_id = (await _comment(client, post_id, bob)).json()[0]["id"]

        response = await client.delete(
            f"/api/posts/{post_id}/comments/{comment_id}",
            headers=bob["headers"],
        )

        post = (await client.get(f"/api/posts/{post_id}")).json()
        assert response.json() == {"message": "Comment deleted successfully"}
        assert post["comments"] == []

    async def test_post_author_cannot_delete_others_comment(
        self,
        client: AsyncClient,
        alice: dict[str, Any],
        bob: dict[str, Any],
        post_id: str,
    ) -> None:
        comment_id = (await _comment(client, post_id, bob)).json()[0]["id"]

        response = await client.delete(
            f"/api/posts/{post_id}/comments/{comment_id}",
            headers=alice["headers"],
        )

        assert response.status_code == 403

    async def test_admin_deletes_by_comment_id(
        self,
        client: AsyncClient,
        bob: dict[str, Any],
        admin: dict[str, Any],
        post_id: str,
    ) -> None:
        comment_id = (await _comment(client, post_id, bob)).json()[0]["id"]

        response = await client.delete(f"/api/comments/{comment_id}", headers=admin["headers"])

        assert response.status_code == 200
        assert (await client.get(f"/api/posts/{post_id}")).json()["comments"] == []

    async def test_unknown_comment(self, client: AsyncClient, bob: dict[str, Any]) -> None:
        response = await client.delete("/api/comments/missing", headers=bob["headers"])

        assert response.status_code == 404
        assert response.json() == {"detail": "Comment not found"}
