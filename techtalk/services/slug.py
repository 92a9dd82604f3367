"""
URL slug generation for posts.

``slugify`` is pure; ``generate_unique_slug`` probes the store for a free
candidate. The probe is check-then-act, so the unique index on
``posts.slug`` remains the final arbiter under concurrent writes.
"""

from collections.abc import Awaitable, Callable
from re import ASCII, compile
from uuid import UUID

from techtalk.errors import field_error

type SlugExists = Callable[[str, UUID | None], Awaitable[bool]]

_NON_WORD = compile(r"[^\w ]+", ASCII)
_SPACES = compile(r" +")


def slugify(title: str) -> str:
    """
    Turn a title into a URL slug.

    Examples
    --------
    >>> slugify("Hello World")
    'hello-world'
    >>> slugify("Node.js & React: Tips!")
    'nodejs-react-tips'

    Raises:
        ValidationError: If nothing usable is left of the title
    """
    slug = _SPACES.sub("-", _NON_WORD.sub("", title.lower()))
    if not slug.strip("-"):
        mssg = "Title must contain at least one letter or digit"
        raise field_error("title", mssg)
    return slug


async def generate_unique_slug(
    title: str,
    exists: SlugExists,
    exclude_id: UUID | None = None,
) -> str:
    """
    Find a slug for ``title`` that no other post uses.

    Tries the base slug, then ``<base>-1``, ``<base>-2`` and so on.

    Args:
        title: Post title
        exists: Async probe ``(slug, exclude_id) -> bool``
        exclude_id: Post to ignore during the probe (the post being edited)
    """
    base = slugify(title)
    candidate = base
    counter = 1
    while await exists(candidate, exclude_id):
        candidate = f"{base}-{counter}"
        counter += 1
    return candidate
