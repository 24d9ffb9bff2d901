"""
Categories API Endpoints.
"""

from fastapi import APIRouter

from inkline.backend.core.dependencies import CurrentUserId, DbSession, RequestId
from inkline.backend.schemas.base import ApiResponse, ResponseMetadata
from inkline.backend.schemas.category import CategoryCreate, CategoryResponse
from inkline.backend.services.category import CategoryService

router = APIRouter()


@router.get(
    "",
    response_model=ApiResponse[list[CategoryResponse]],
    summary="List categories",
)
async def list_categories(
    db: DbSession,
    user_id: CurrentUserId,
    request_id: RequestId,
) -> ApiResponse[list[CategoryResponse]]:
    categories = await CategoryService(db, user_id).list_categories()
    return ApiResponse(
        data=[CategoryResponse.model_validate(c) for c in categories],
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.post(
    "",
    response_model=ApiResponse[CategoryResponse],
    summary="Create or find a category",
    description="Returns the existing category when the name matches ignoring case.",
)
async def upsert_category(
    data: CategoryCreate,
    db: DbSession,
    user_id: CurrentUserId,
    request_id: RequestId,
) -> ApiResponse[CategoryResponse]:
    category = await CategoryService(db, user_id).upsert_category(data.name)
    return ApiResponse(
        data=CategoryResponse.model_validate(category),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.delete(
    "/{category_id}",
    status_code=204,
    summary="Delete a category",
    description="Notes in the category become unassigned.",
)
async def delete_category(
    category_id: str,
    db: DbSession,
    user_id: CurrentUserId,
) -> None:
    await CategoryService(db, user_id).delete_category(category_id)
