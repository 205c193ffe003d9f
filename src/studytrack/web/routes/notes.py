"""Note endpoints. Notes are private to their author."""

from fastapi import APIRouter, Depends, Response, status

from studytrack.core.enums import ResourceType
from studytrack.core.study import add_note, edit_note, remove_note
from studytrack.db.database import Database
from studytrack.db.notes_repository import get_notes_by_resource, get_user_notes
from studytrack.web.auth import get_current_user_id
from studytrack.web.dependencies import get_database
from studytrack.web.errors import ERROR_RESPONSES
from studytrack.web.schemas import NoteCreate, NoteResponse, NoteUpdate

router = APIRouter(prefix="/api/notes", tags=["notes"], responses=ERROR_RESPONSES)


@router.get("", response_model=list[NoteResponse])
def list_notes(
    user_id: str = Depends(get_current_user_id),
    db: Database = Depends(get_database),
) -> list[NoteResponse]:
    """List the caller's notes, most recently updated first."""
    with db.connect() as conn:
        notes = get_user_notes(conn, user_id)
    return [NoteResponse.model_validate(n) for n in notes]


@router.post("", response_model=NoteResponse, status_code=status.HTTP_201_CREATED)
def post_note(
    body: NoteCreate,
    user_id: str = Depends(get_current_user_id),
    db: Database = Depends(get_database),
) -> NoteResponse:
    """Attach a note to a resource."""
    note = add_note(
        db, user_id, body.resource_type, body.resource_id, body.content, body.title
    )
    return NoteResponse.model_validate(note)


@router.get("/{resource_type}/{resource_id}", response_model=list[NoteResponse])
def list_resource_notes(
    resource_type: ResourceType,
    resource_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Database = Depends(get_database),
) -> list[NoteResponse]:
    """List the caller's notes on one resource."""
    with db.connect() as conn:
        notes = get_notes_by_resource(conn, user_id, resource_type, resource_id)
    return [NoteResponse.model_validate(n) for n in notes]


@router.put("/{note_id}", response_model=NoteResponse)
def put_note(
    note_id: str,
    body: NoteUpdate,
    user_id: str = Depends(get_current_user_id),
    db: Database = Depends(get_database),
) -> NoteResponse:
    """Edit one of the caller's notes."""
    note = edit_note(db, user_id, note_id, body.content, body.title)
    return NoteResponse.model_validate(note)


@router.delete("/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_note(
    note_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Database = Depends(get_database),
) -> Response:
    """Delete one of the caller's notes."""
    remove_note(db, user_id, note_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
