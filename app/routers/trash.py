from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.core.security import get_current_user
from app.models.user import User
from app.schemas.page import PageResponse, EmptyTrashResponse
from app.services import page_service, tree_store
from typing import List

router = APIRouter(prefix="/trash", tags=["trash"])

@router.get("", response_model=List[PageResponse])
def list_trash(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    # pages supprimées, les plus récentes d'abord
    return tree_store.list_trashed(db, current_user.workspace_id)

@router.delete("", response_model=EmptyTrashResponse)
def empty_trash(response: Response, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    """Vider la corbeille: succès partiel possible, signalé en 207"""
    result = page_service.empty_trash(db, current_user.workspace_id)
    if result["failed"]:
        response.status_code = status.HTTP_207_MULTI_STATUS
    return result
