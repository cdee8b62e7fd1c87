"""Workspace service"""

from sqlalchemy.orm import Session
from typing import Optional
from app.models.workspace import Workspace
from app.services.ids import new_id


def create_default_workspace(db: Session, name: str = "My Workspace") -> Workspace:
    workspace_id = new_id()
    workspace = Workspace(
        id=workspace_id,
        name=name,
        slug=f"workspace-{workspace_id.lower()[-8:]}",  # les premiers caractères = timestamp
        icon="📓"
    )
    db.add(workspace)
    db.commit()
    db.refresh(workspace)
    return workspace


def get_workspace(db: Session, workspace_id: Optional[str]) -> Optional[Workspace]:
    if not workspace_id:
        return None
    return db.query(Workspace).filter(Workspace.id == workspace_id).first()
