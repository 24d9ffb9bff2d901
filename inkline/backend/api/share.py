"""
Public Share Endpoint.

Unauthenticated read-only access to notes whose owner made them public.
"""

from fastapi import APIRouter, Depends

from inkline.backend.core.dependencies import DbSession, RequestId, require_feature
from inkline.backend.schemas.base import ApiResponse, ResponseMetadata
from inkline.backend.schemas.note import PublicNoteResponse
from inkline.backend.services.share import ShareService

router = APIRouter()


@router.get(
    "/share/{share_id}",
    response_model=ApiResponse[PublicNoteResponse],
    summary="Read a shared note",
    description="Counts one view per successful load. Private and unknown notes are both 404.",
    dependencies=[Depends(require_feature("sharing_enabled"))],
)
async def read_shared_note(
    share_id: str,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[PublicNoteResponse]:
    note = await ShareService(db).view_public_note(share_id)
    return ApiResponse(
        data=PublicNoteResponse.model_validate(note),
        metadata=ResponseMetadata(request_id=request_id),
    )
