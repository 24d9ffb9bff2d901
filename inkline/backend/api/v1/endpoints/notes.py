"""
Notes API Endpoints.

REST API endpoints for note management. Every route acts on the notes of
the authenticated user only.
"""

from fastapi import APIRouter, Depends, Query, Response

from inkline.backend.core.dependencies import (
    CurrentUserId,
    DbSession,
    RequestId,
    require_feature,
)
from inkline.backend.schemas.base import ApiResponse, ResponseMetadata
from inkline.backend.schemas.note import (
    DeleteResult,
    ExportRequest,
    NoteIds,
    NoteResponse,
    NoteUpdate,
    ShareToggle,
)
from inkline.backend.services.export import build_export_archive
from inkline.backend.services.note import NoteService

router = APIRouter()


def _envelope(data, request_id: str):
    return ApiResponse(data=data, metadata=ResponseMetadata(request_id=request_id))


@router.get(
    "",
    response_model=ApiResponse[list[NoteResponse]],
    summary="List notes",
    description="Active (default) or archived notes, most recently updated first.",
)
async def list_notes(
    db: DbSession,
    user_id: CurrentUserId,
    request_id: RequestId,
    archived: bool = Query(default=False, description="List archived notes instead"),
) -> ApiResponse[list[NoteResponse]]:
    notes = await NoteService(db, user_id).list_notes(archived=archived)
    return _envelope([NoteResponse.model_validate(n) for n in notes], request_id)


@router.post(
    "",
    response_model=ApiResponse[NoteResponse],
    status_code=201,
    summary="Create a note",
    description="Create an empty note. Fails with 409 when the note quota is reached.",
)
async def create_note(
    db: DbSession,
    user_id: CurrentUserId,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    note = await NoteService(db, user_id).create_note()
    return _envelope(NoteResponse.model_validate(note), request_id)


@router.post(
    "/archive",
    response_model=ApiResponse[list[NoteResponse]],
    summary="Archive notes",
)
async def archive_notes(
    data: NoteIds,
    db: DbSession,
    user_id: CurrentUserId,
    request_id: RequestId,
) -> ApiResponse[list[NoteResponse]]:
    notes = await NoteService(db, user_id).archive_notes(data.ids)
    return _envelope([NoteResponse.model_validate(n) for n in notes], request_id)


@router.post(
    "/restore",
    response_model=ApiResponse[list[NoteResponse]],
    summary="Restore archived notes",
)
async def restore_notes(
    data: NoteIds,
    db: DbSession,
    user_id: CurrentUserId,
    request_id: RequestId,
) -> ApiResponse[list[NoteResponse]]:
    notes = await NoteService(db, user_id).restore_notes(data.ids)
    return _envelope([NoteResponse.model_validate(n) for n in notes], request_id)


@router.post(
    "/delete",
    response_model=ApiResponse[DeleteResult],
    summary="Delete notes",
    description="Permanently delete notes. Returns the identifiers actually removed.",
)
async def delete_notes(
    data: NoteIds,
    db: DbSession,
    user_id: CurrentUserId,
    request_id: RequestId,
) -> ApiResponse[DeleteResult]:
    deleted = await NoteService(db, user_id).delete_notes(data.ids)
    return _envelope(DeleteResult(deleted_ids=deleted), request_id)


@router.post(
    "/export",
    summary="Export notes",
    description="Download the selected notes as a zip of plain-text files.",
    response_class=Response,
    dependencies=[Depends(require_feature("export_enabled"))],
)
async def export_notes(
    data: ExportRequest,
    db: DbSession,
    user_id: CurrentUserId,
) -> Response:
    notes = await NoteService(db, user_id).get_notes_for_export(data.ids)
    return Response(
        content=build_export_archive(notes),
        media_type="application/zip",
        headers={"Content-Disposition": f'attachment; filename="{data.filename}"'},
    )


@router.get(
    "/{note_id}",
    response_model=ApiResponse[NoteResponse],
    summary="Get a note",
)
async def get_note(
    note_id: str,
    db: DbSession,
    user_id: CurrentUserId,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    note = await NoteService(db, user_id).get_note(note_id)
    return _envelope(NoteResponse.model_validate(note), request_id)


@router.patch(
    "/{note_id}",
    response_model=ApiResponse[NoteResponse],
    summary="Update a note",
    description="Update title, body or category. Only provided fields are updated.",
)
async def update_note(
    note_id: str,
    data: NoteUpdate,
    db: DbSession,
    user_id: CurrentUserId,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    note = await NoteService(db, user_id).update_note(note_id, data)
    return _envelope(NoteResponse.model_validate(note), request_id)


@router.delete(
    "/{note_id}",
    status_code=204,
    summary="Delete a note",
)
async def delete_note(
    note_id: str,
    db: DbSession,
    user_id: CurrentUserId,
) -> None:
    await NoteService(db, user_id).delete_note(note_id)


@router.post(
    "/{note_id}/share",
    response_model=ApiResponse[NoteResponse],
    summary="Set note visibility",
    description="Make a note public or private. The share identifier never changes once issued.",
    dependencies=[Depends(require_feature("sharing_enabled"))],
)
async def set_sharing(
    note_id: str,
    data: ShareToggle,
    db: DbSession,
    user_id: CurrentUserId,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    note = await NoteService(db, user_id).set_sharing(note_id, data.is_public)
    return _envelope(NoteResponse.model_validate(note), request_id)
