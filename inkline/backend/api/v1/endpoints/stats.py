"""
Insights API Endpoint.
"""

from fastapi import APIRouter

from inkline.backend.core.dependencies import CurrentUserId, DbSession, RequestId
from inkline.backend.schemas.base import ApiResponse, ResponseMetadata
from inkline.backend.schemas.stats import InsightsResponse
from inkline.backend.services.stats import StatsService

router = APIRouter()


@router.get(
    "",
    response_model=ApiResponse[InsightsResponse],
    summary="Dashboard insights",
)
async def get_insights(
    db: DbSession,
    user_id: CurrentUserId,
    request_id: RequestId,
) -> ApiResponse[InsightsResponse]:
    insights = await StatsService(db, user_id).get_insights()
    return ApiResponse(data=insights, metadata=ResponseMetadata(request_id=request_id))
