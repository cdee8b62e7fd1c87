from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session
from app.core.config import settings
from app.core.database import get_db
from app.core.errors import PageNotFound
from app.core.security import get_current_user
from app.models.user import User
from app.models.page import Page
from app.schemas.page import (
    PageCreate, PageUpdate, PageResponse, MoveRequest, ReorderRequest,
    DuplicateRequest, DuplicateResponse
)
from app.services import page_service, tree_store
from app.services.page_events import page_event_stream
from typing import List, Optional

router = APIRouter(prefix="/pages", tags=["pages"])

def _scoped_page(db: Session, page_id: str, user: User, active: bool = False) -> Page:
    # une page d'un autre workspace est traitée comme inexistante
    page = tree_store.get_active_page(db, page_id) if active else tree_store.get_page(db, page_id)
    if page.workspace_id != user.workspace_id:
        raise PageNotFound("Page not found")
    return page

# Crée une page
@router.post("", response_model=PageResponse, status_code=status.HTTP_201_CREATED)
def create_page(page_data: PageCreate, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    workspace_id = page_data.workspace_id or current_user.workspace_id
    if workspace_id != current_user.workspace_id:
        raise PageNotFound("Workspace not found")

    return page_service.create_page(
        db, current_user.id, workspace_id,
        parent_id=page_data.parent_id,
        title=page_data.title,
        icon=page_data.icon,
        content=page_data.content
    )

@router.get("", response_model=List[PageResponse])
def list_pages(workspace_id: Optional[str] = None, parent_id: Optional[str] = None,
               db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    # toutes les pages hors corbeille du workspace
    if workspace_id and workspace_id != current_user.workspace_id:
        raise PageNotFound("Workspace not found")
    return tree_store.list_pages(db, current_user.workspace_id, parent_id)

@router.post("/move")
def move_page(move_data: MoveRequest, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    _scoped_page(db, move_data.page_id, current_user)
    if move_data.new_parent_id and move_data.new_parent_id != move_data.page_id:
        try:
            _scoped_page(db, move_data.new_parent_id, current_user)
        except PageNotFound:
            raise PageNotFound("Parent page not found")

    page_service.move_page(db, current_user.id, move_data.page_id, move_data.new_parent_id)
    return {"success": True}

@router.post("/reorder")
def reorder_pages(reorder_data: ReorderRequest, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    # les ids hors workspace sont ignorés, comme les ids inconnus
    page_ids = []
    for page_id in reorder_data.page_ids:
        page = tree_store.find_page(db, page_id)
        if page is None or page.workspace_id == current_user.workspace_id:
            page_ids.append(page_id)
    page_service.reorder_pages(db, current_user.id, page_ids)
    return {"success": True}

@router.get("/{page_id}", response_model=PageResponse)
def get_page(page_id: str, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return _scoped_page(db, page_id, current_user, active=True)

@router.patch("/{page_id}", response_model=PageResponse)
def update_page(page_id: str, page_data: PageUpdate, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    _scoped_page(db, page_id, current_user, active=True)
    return page_service.update_page(db, current_user.id, page_id, **page_data.model_dump(exclude_unset=True))

@router.delete("/{page_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_page(page_id: str, permanent: bool = False, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    _scoped_page(db, page_id, current_user)
    if permanent:
        page_service.purge_page(db, page_id)
    else:
        page_service.trash_page(db, current_user.id, page_id)

@router.post("/{page_id}/restore", response_model=PageResponse)
def restore_page(page_id: str, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    _scoped_page(db, page_id, current_user)
    return page_service.restore_page(db, current_user.id, page_id)

@router.post("/{page_id}/duplicate", response_model=DuplicateResponse)
def duplicate_page(page_id: str, options: Optional[DuplicateRequest] = None,
                   db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    _scoped_page(db, page_id, current_user, active=True)
    include_subpages = options.include_subpages if options else False

    pages = page_service.duplicate_page(db, current_user.id, page_id, include_subpages=include_subpages)
    return {"page": pages[0], "all_pages": pages, "count": len(pages)}

def _subscribable_page(page_id: str, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)) -> str:
    return _scoped_page(db, page_id, current_user).id

@router.get("/{page_id}/subscribe")
async def subscribe_to_page(request: Request, page_id: str = Depends(_subscribable_page)):
    """Flux SSE des mises à jour d'une page (connected, update, heartbeat)"""
    return StreamingResponse(
        page_event_stream(page_id, request.is_disconnected, settings.SSE_KEEPALIVE_SECONDS),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )
