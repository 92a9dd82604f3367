"""Tests for slug generation."""

from re import fullmatch
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from techtalk.errors import ValidationError
from techtalk.services import generate_unique_slug, slugify


class TestSlugify:
    """Test cases for slugify."""

    @pytest.mark.parametrize(
        ("title", "expected"),
        [
            ("Hello World", "hello-world"),
            ("Node.js & React: Tips!", "nodejs-react-tips"),
            ("Python   3.12  released", "python-312-released"),
            ("snake_case stays", "snake_case-stays"),
            ("ALL CAPS", "all-caps"),
        ],
    )
    def test_examples(self, title: str, expected: str) -> None:
        assert slugify(title) == expected

    def test_is_deterministic(self) -> None:
        assert slugify("Same Title, Same Slug") == slugify("Same Title, Same Slug")

    @pytest.mark.parametrize("title", ["Hello World", "Ünïcödé títle 42", "  spaced  out  "])
    def test_only_lowercase_word_characters_and_hyphens(self, title: str) -> None:
        assert fullmatch(r"[a-z0-9_-]+", slugify(title))

    @pytest.mark.parametrize("title", ["!!!", "   ", "¿?"])
    def test_title_without_usable_characters(self, title: str) -> None:
        with pytest.raises(ValidationError) as exc_info:
            slugify(title)

        assert exc_info.value.errors[0]["field"] == "title"


class TestGenerateUniqueSlug:
    """Test cases for generate_unique_slug."""

    async def test_free_base_slug_is_used(self) -> None:
        exists = AsyncMock(return_value=False)

        assert await generate_unique_slug("Hello World", exists) == "hello-world"
        exists.assert_awaited_once_with("hello-world", None)

    async def test_taken_slugs_get_counter_suffix(self) -> None:
        taken = {"hello-world", "hello-world-1"}

        async def exists(slug: str, exclude_id: object) -> bool:
            return slug in taken

        assert await generate_unique_slug("Hello World", exists) == "hello-world-2"

    async def test_exclude_id_is_passed_to_probe(self) -> None:
        post_id = uuid4()
        exists = AsyncMock(return_value=False)

        await generate_unique_slug("Hello", exists, exclude_id=post_id)

        exists.assert_awaited_once_with("hello", post_id)
