"""
Async HTTP client for the TechTalkZA Blog API.

Wraps ``httpx.AsyncClient``, keeps the bearer token issued at login or
registration, and turns every non-2xx response or unreadable body into
``ApiError``.
"""

from typing import Any, Self
from uuid import UUID

from httpx import AsyncClient, Response

from techtalk.monitoring import get_logger

logger = get_logger(__name__)

DEFAULT_BASE_URL = "http://localhost:5000"

type ImageUpload = tuple[str, bytes, str]


class ApiError(Exception):
    """A request the API answered with a non-2xx status or an unreadable body."""

    def __init__(
        self,
        status_code: int,
        detail: str,
        errors: list[dict[str, Any]] | None = None,
    ) -> None:
        super().__init__(f"{status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail
        self.errors = errors or []


def _post_form(data: dict[str, Any]) -> dict[str, Any]:
    """
    Translate a post dict into multipart form fields.

    ``None`` values are dropped, tags lists are sent as one comma separated
    field, and ``is_published`` goes out as ``isPublished``.
    """
    form: dict[str, Any] = {}
    for name, value in data.items():
        if value is None:
            continue
        if name in ("is_published", "isPublished"):
            form["isPublished"] = "true" if value else "false"
        elif name == "tags" and not isinstance(value, str):
            form["tags"] = ", ".join(str(tag) for tag in value)
        elif name in ("title", "content", "category", "excerpt", "tags"):
            form[name] = str(value)
    return form


class BlogApiClient:
    """
    Client for the blog REST API.

    Examples
    --------
    >>> async with BlogApiClient("http://localhost:5000") as api:
    ...     await api.login("alice@x.com", "secret1")
    ...     page = await api.list_posts(page=1)
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        token: str | None = None,
        client: AsyncClient | None = None,
        timeout: float = 10.0,
    ) -> None:
        """
        Initialize the client.

        Args:
            base_url: Server root; ``/api`` paths are appended to it
            token: Bearer token from an earlier session
            client: Preconfigured httpx client (tests pass one with a mock transport)
            timeout: Request timeout in seconds when the client is created here
        """
        self._client = client or AsyncClient(base_url=base_url, timeout=timeout)
        self._owns_client = client is None
        self.token = token

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def clear_token(self) -> None:
        self.token = None

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}

    @staticmethod
    def _raise_for_status(response: Response) -> None:
        if response.is_success:
            return
        try:
            body = response.json()
        except ValueError:
            body = {}
        detail = body.get("detail") if isinstance(body, dict) else None
        errors = body.get("errors") if isinstance(body, dict) else None
        logger.debug(f"API error {response.status_code} for {response.request.url.path}")
        raise ApiError(
            response.status_code,
            str(detail or response.reason_phrase or "Request failed"),
            errors,
        )

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        response = await self._client.request(
            method,
            f"/api{path}",
            headers=self._headers(),
            **kwargs,
        )
        self._raise_for_status(response)
        try:
            return response.json()
        except ValueError as e:
            logger.debug(f"Unreadable body for {response.request.url.path}")
            raise ApiError(response.status_code, "Invalid JSON in response") from e

    # Auth

    async def register(self, username: str, email: str, password: str) -> dict[str, Any]:
        """Register, store the issued token and return ``{token, user}``."""
        data = await self._request(
            "POST",
            "/auth/register",
            json={"username": username, "email": email, "password": password},
        )
        self.token = data["token"]
        return data

    async def login(self, email: str, password: str) -> dict[str, Any]:
        """Login, store the issued token and return ``{token, user}``."""
        data = await self._request(
            "POST",
            "/auth/login",
            json={"email": email, "password": password},
        )
        self.token = data["token"]
        return data

    async def me(self) -> dict[str, Any]:
        return await self._request("GET", "/auth/me")

    # Posts

    async def list_posts(
        self,
        page: int = 1,
        limit: int = 10,
        search: str | None = None,
        category: str | UUID | None = None,
    ) -> dict[str, Any]:
        params: dict[str, Any] = {"page": page, "limit": limit}
        if search:
            params["search"] = search
        if category:
            params["category"] = str(category)
        return await self._request("GET", "/posts", params=params)

    async def search_posts(self, query: str) -> list[dict[str, Any]]:
        return await self._request("GET", "/posts/search", params={"q": query})

    async def get_post(self, post_id: str | UUID) -> dict[str, Any]:
        return await self._request("GET", f"/posts/{post_id}")

    async def create_post(
        self,
        data: dict[str, Any],
        image: ImageUpload | None = None,
    ) -> dict[str, Any]:
        """
        Create a post.

        Args:
            data: ``title``, ``content``, ``category`` and optional ``tags``,
                ``excerpt``, ``is_published``
            image: Optional ``(filename, bytes, content_type)`` featured image
        """
        files = {"featuredImage": image} if image else None
        return await self._request("POST", "/posts", data=_post_form(data), files=files)

    async def update_post(
        self,
        post_id: str | UUID,
        data: dict[str, Any],
        image: ImageUpload | None = None,
    ) -> dict[str, Any]:
        files = {"featuredImage": image} if image else None
        return await self._request(
            "PUT",
            f"/posts/{post_id}",
            data=_post_form(data),
            files=files,
        )

    async def delete_post(self, post_id: str | UUID) -> dict[str, Any]:
        return await self._request("DELETE", f"/posts/{post_id}")

    # Comments

    async def add_comment(self, post_id: str | UUID, content: str) -> list[dict[str, Any]]:
        return await self._request("POST", f"/posts/{post_id}/comments", json={"content": content})

    async def delete_comment(self, post_id: str | UUID, comment_id: str) -> dict[str, Any]:
        return await self._request("DELETE", f"/posts/{post_id}/comments/{comment_id}")

    # Categories

    async def list_categories(self) -> list[dict[str, Any]]:
        return await self._request("GET", "/categories")

    async def create_category(
        self,
        name: str,
        description: str | None = None,
    ) -> dict[str, Any]:
        return await self._request(
            "POST",
            "/categories",
            json={"name": name, "description": description},
        )
