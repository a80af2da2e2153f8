"""Category service."""

import logging

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from eventhub.errors import InvalidInputError
from eventhub.models.category import Category
from eventhub.models.event import Event
from eventhub.schemas.category import CategoryCreate

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES: list[tuple[str, str]] = [
    ("Technology", "Tech conferences and workshops"),
    ("Music", "Concerts and music festivals"),
    ("Business", "Business conferences and networking"),
    ("Sports", "Sports events and tournaments"),
    ("Education", "Educational workshops and seminars"),
    ("Arts and Culture", "Art exhibitions and cultural events"),
    ("Food and Drink", "Food festivals and culinary events"),
    ("Health and Wellness", "Health, fitness and wellness events"),
]


class CategoryService:
    """Service for category operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_categories(self) -> list[Category]:
        """Get all categories ordered by name."""
        result = await self.db.execute(select(Category).order_by(Category.name))
        return list(result.scalars().all())

    async def create_category(self, category_data: CategoryCreate) -> Category:
        """
        Create a category.

        Raises:
            InvalidInputError: If a category with the same name exists
        """
        category = Category(
            name=category_data.name,
            description=category_data.description,
        )
        self.db.add(category)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise InvalidInputError("Category name already exists")
        await self.db.refresh(category)
        return category

    async def initialize_defaults(self) -> list[Category]:
        """Replace all categories with the default set. Events lose their category."""
        await self.db.execute(update(Event).values(category_id=None))
        await self.db.execute(delete(Category))

        categories = [
            Category(name=name, description=description)
            for name, description in DEFAULT_CATEGORIES
        ]
        self.db.add_all(categories)
        await self.db.commit()
        logger.info(f"Initialized {len(categories)} default categories")
        return await self.get_categories()

    async def get_categories_with_counts(self) -> list[tuple[Category, int]]:
        """Categories with their event counts, busiest first."""
        event_count = func.count(Event.event_id).label("event_count")
        result = await self.db.execute(
            select(Category, event_count)
            .outerjoin(Event, Event.category_id == Category.category_id)
            .group_by(Category.category_id)
            .order_by(event_count.desc(), Category.name)
        )
        return [(row.Category, row.event_count) for row in result]
