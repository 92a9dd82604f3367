"""
Category service.

The category list seeds itself with a default set the first time it is
read from an empty table.
"""

from techtalk.errors.database import ConflictError
from techtalk.models import CategoryDB
from techtalk.monitoring import get_logger
from techtalk.repositories import CategoryRepository
from techtalk.schemas.category import CategoryCreate

logger = get_logger(__name__)

DEFAULT_CATEGORIES: tuple[tuple[str, str], ...] = (
    ("Technology", "Posts about technology, programming, and software development"),
    ("Web Development", "Frontend and backend web development topics"),
    ("Programming", "General programming concepts and tutorials"),
    ("JavaScript", "JavaScript programming language and frameworks"),
    ("React", "React.js library and ecosystem"),
    ("Node.js", "Node.js runtime and server-side development"),
    ("Database", "Database design, management, and optimization"),
    ("DevOps", "Development operations, deployment, and infrastructure"),
    ("AI & Machine Learning", "Artificial intelligence and machine learning topics"),
    ("Design", "UI/UX design, graphics, and user experience"),
    ("Career", "Career advice, job searching, and professional development"),
    ("Tutorials", "Step-by-step tutorials and how-to guides"),
)


def default_categories(skip: set[str] | None = None) -> list[CategoryDB]:
    """Build unsaved rows for every default category not named in ``skip``."""
    skip = skip or set()
    return [
        CategoryDB(name=name, description=description)
        for name, description in DEFAULT_CATEGORIES
        if name not in skip
    ]


class CategoryService:
    """Service for listing, creating and seeding categories."""

    def __init__(self, category_repo: CategoryRepository) -> None:
        self.category_repo = category_repo

    async def list_categories(self) -> list[CategoryDB]:
        """
        Return all categories sorted by name, seeding the defaults if there are none.

        When two first requests race to seed, the loser's unique violation is
        absorbed and the table is read again.
        """
        categories = await self.category_repo.list_all()
        if categories:
            return categories

        try:
            await self.category_repo.add_all(default_categories())
        except ConflictError:
            logger.info("Default categories were seeded concurrently, re-reading")
        else:
            logger.info(f"Seeded {len(DEFAULT_CATEGORIES)} default categories")
        return await self.category_repo.list_all()

    async def create_category(self, payload: CategoryCreate) -> CategoryDB:
        """
        Create a category.

        Raises:
            DuplicateCategoryError: If the name is already taken (400)
        """
        category = CategoryDB(name=payload.name, description=payload.description or None)
        return await self.category_repo.create(category)

    async def reseed_categories(self) -> list[CategoryDB]:
        """
        Drop categories no post uses and add back any missing defaults.

        Returns:
            list[CategoryDB]: The resulting category list
        """
        removed = await self.category_repo.delete_unreferenced()
        existing = {category.name for category in await self.category_repo.list_all()}
        missing = default_categories(skip=existing)
        if missing:
            await self.category_repo.add_all(missing)
        logger.info(f"Reseeded categories: removed {removed}, added {len(missing)}")
        return await self.category_repo.list_all()
