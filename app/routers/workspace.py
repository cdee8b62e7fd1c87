from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.core.security import get_current_user
from app.models.user import User
from app.schemas.workspace import WorkspaceResponse
from app.services.workspace_service import get_workspace

router = APIRouter(prefix="/workspace", tags=["workspace"])

@router.get("", response_model=WorkspaceResponse)
def read_workspace(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    workspace = get_workspace(db, current_user.workspace_id)
    if not workspace:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Workspace not found")
    return workspace
