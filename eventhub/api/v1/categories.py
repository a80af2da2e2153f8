"""Categories API endpoints."""

from fastapi import APIRouter, status

from eventhub.api.v1.dependencies import AdminUser, CategoryServiceDep
from eventhub.schemas.category import (
    CategoryCreate,
    CategoryResponse,
    CategoryWithCountResponse,
)

router = APIRouter()


@router.get(
    "",
    response_model=list[CategoryResponse],
    summary="List categories",
)
async def list_categories(
    category_service: CategoryServiceDep,
) -> list[CategoryResponse]:
    categories = await category_service.get_categories()
    return [CategoryResponse.model_validate(c) for c in categories]


@router.post(
    "",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a category",
)
async def create_category(
    category_data: CategoryCreate,
    admin: AdminUser,
    category_service: CategoryServiceDep,
) -> CategoryResponse:
    category = await category_service.create_category(category_data)
    return CategoryResponse.model_validate(category)


@router.post(
    "/initialize",
    response_model=list[CategoryResponse],
    summary="Reset categories to the defaults",
)
async def initialize_categories(
    admin: AdminUser,
    category_service: CategoryServiceDep,
) -> list[CategoryResponse]:
    """Remove existing categories and create the default set."""
    categories = await category_service.initialize_defaults()
    return [CategoryResponse.model_validate(c) for c in categories]


@router.get(
    "/with-count",
    response_model=list[CategoryWithCountResponse],
    summary="List categories with event counts",
)
async def list_categories_with_count(
    category_service: CategoryServiceDep,
) -> list[CategoryWithCountResponse]:
    rows = await category_service.get_categories_with_counts()
    return [
        CategoryWithCountResponse(
            category_id=category.category_id,
            name=category.name,
            description=category.description,
            created_at=category.created_at,
            event_count=count,
        )
        for category, count in rows
    ]
