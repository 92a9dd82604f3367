"""Tests for the /api/categories endpoints."""

from typing import Any

from httpx import AsyncClient


class TestListCategories:
    async def test_first_read_seeds_defaults(self, client: AsyncClient) -> None:
        response = await client.get("/api/categories")

        names = [c["name"] for c in response.json()]
        assert response.status_code == 200
        assert len(names) == 12
        assert names == sorted(names)
        assert "Technology" in names
        assert {"id", "name", "description", "createdAt"} <= response.json()[0].keys()

    async def test_second_read_does_not_reseed(self, client: AsyncClient) -> None:
        first = (await client.get("/api/categories")).json()
        second = (await client.get("/api/categories")).json()

        assert first == second


class TestCreateCategory:
    async def test_create(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/categories",
            json={"name": "Rust", "description": "Systems programming"},
        )

        assert response.status_code == 201
        assert response.json()["name"] == "Rust"

    async def test_duplicate_name(self, client: AsyncClient) -> None:
        await client.post("/api/categories", json={"name": "Rust"})

        response = await client.post("/api/categories", json={"name": "Rust"})

        assert response.status_code == 400
        assert response.json()["detail"] == "Category 'Rust' already exists"

    async def test_name_too_long(self, client: AsyncClient) -> None:
        response = await client.post("/api/categories", json={"name": "x" * 51})

        assert response.status_code == 400


class TestSeedCategories:
    async def test_regular_user_is_forbidden(
        self,
        client: AsyncClient,
        alice: dict[str, Any],
    ) -> None:
        response = await client.post("/api/categories/seed", headers=alice["headers"])

        assert response.status_code == 403
        assert response.json() == {"detail": "Admin access required"}

    async def test_admin_reseeds_and_keeps_used_categories(
        self,
        client: AsyncClient,
        admin: dict[str, Any],
        category_id: str,
    ) -> None:
        await client.post("/api/categories", json={"name": "Unused"})
        await client.post(
            "/api/posts",
            data={"title": "Keeps it", "content": "Body", "category": category_id},
            headers=admin["headers"],
        )

        response = await client.post("/api/categories/seed", headers=admin["headers"])

        body = response.json()
        names = {c["name"] for c in body["categories"]}
        assert response.status_code == 200
        assert body["message"] == "Categories seeded successfully"
        assert "Unused" not in names
        assert category_id in {c["id"] for c in body["categories"]}
        assert len(names) == 12
