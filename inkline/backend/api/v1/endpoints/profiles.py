"""
Profiles API Endpoints.
"""

from fastapi import APIRouter

from inkline.backend.core.dependencies import CurrentUserId, DbSession, RequestId
from inkline.backend.models.profile import Profile
from inkline.backend.schemas.base import ApiResponse, ResponseMetadata
from inkline.backend.schemas.profile import ProfileResponse, ProfileUpdate
from inkline.backend.services.profile import ProfileService

router = APIRouter()


async def _respond(
    service: ProfileService, profile: Profile, request_id: str
) -> ApiResponse[ProfileResponse]:
    count = await service.public_notes_count(profile)
    return ApiResponse(
        data=ProfileResponse.from_profile(profile, count),
        metadata=ResponseMetadata(request_id=request_id),
    )


# Declared before /{profile_id} so "me" is not taken as an id
@router.get(
    "/me",
    response_model=ApiResponse[ProfileResponse],
    summary="Get own profile",
    description="Created with a placeholder username on first access.",
)
async def get_own_profile(
    db: DbSession,
    user_id: CurrentUserId,
    request_id: RequestId,
) -> ApiResponse[ProfileResponse]:
    service = ProfileService(db, user_id)
    return await _respond(service, await service.get_profile(user_id), request_id)


@router.patch(
    "/me",
    response_model=ApiResponse[ProfileResponse],
    summary="Update own profile",
)
async def update_own_profile(
    data: ProfileUpdate,
    db: DbSession,
    user_id: CurrentUserId,
    request_id: RequestId,
) -> ApiResponse[ProfileResponse]:
    service = ProfileService(db, user_id)
    return await _respond(service, await service.update_own(data), request_id)


@router.get(
    "/{profile_id}",
    response_model=ApiResponse[ProfileResponse],
    summary="Get a profile",
    description="Public profiles are visible to any signed-in user; private ones only to their owner.",
)
async def get_profile(
    profile_id: str,
    db: DbSession,
    user_id: CurrentUserId,
    request_id: RequestId,
) -> ApiResponse[ProfileResponse]:
    service = ProfileService(db, user_id)
    return await _respond(service, await service.get_profile(profile_id), request_id)
