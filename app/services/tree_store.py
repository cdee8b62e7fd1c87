"""Tree store

Seul endroit qui lit l'arbre des pages et calcule path / depth / position.
Il ne décide pas quand recalculer un chemin: c'est le rôle de page_service.
"""

from sqlalchemy.orm import Session
from typing import List, Optional, Tuple
from app.core.errors import PageNotFound
from app.models.page import Page


def get_page(db: Session, page_id: str) -> Page:
    page = db.query(Page).filter(Page.id == page_id).first()
    if not page:
        raise PageNotFound("Page not found")
    return page


def get_active_page(db: Session, page_id: str) -> Page:
    # une page dans la corbeille est traitée comme absente
    page = get_page(db, page_id)
    if page.is_trashed:
        raise PageNotFound("Page not found")
    return page


def find_page(db: Session, page_id: Optional[str], workspace_id: Optional[str] = None) -> Optional[Page]:
    if not page_id:
        return None
    query = db.query(Page).filter(Page.id == page_id)
    if workspace_id:
        query = query.filter(Page.workspace_id == workspace_id)
    return query.first()


def _siblings_query(db: Session, parent_id: Optional[str], workspace_id: str):
    query = db.query(Page).filter(
        Page.workspace_id == workspace_id,
        Page.deleted_at.is_(None)
    )
    if parent_id:
        return query.filter(Page.parent_id == parent_id)
    return query.filter(Page.parent_id.is_(None))


def list_children(db: Session, parent_id: Optional[str], workspace_id: str) -> List[Page]:
    # ordre par position, puis par id (= ordre de création) en cas d'égalité
    return _siblings_query(db, parent_id, workspace_id).order_by(Page.position, Page.id).all()


def list_pages(db: Session, workspace_id: Optional[str] = None, parent_id: Optional[str] = None) -> List[Page]:
    query = db.query(Page).filter(Page.deleted_at.is_(None))
    if workspace_id:
        query = query.filter(Page.workspace_id == workspace_id)
    if parent_id:
        query = query.filter(Page.parent_id == parent_id)
    return query.order_by(Page.depth, Page.position, Page.id).all()


def list_trashed(db: Session, workspace_id: Optional[str] = None) -> List[Page]:
    query = db.query(Page).filter(Page.deleted_at.isnot(None))
    if workspace_id:
        query = query.filter(Page.workspace_id == workspace_id)
    return query.order_by(Page.deleted_at.desc()).all()


def compute_child_path(parent: Optional[Page]) -> Tuple[List[str], int]:
    if parent is None:
        return [], 0
    return list(parent.path or []) + [parent.id], (parent.depth or 0) + 1


def next_position(db: Session, parent_id: Optional[str], workspace_id: str) -> int:
    # nombre de frères actifs, pas max+1: seul l'ordre relatif compte
    return _siblings_query(db, parent_id, workspace_id).count()


def is_descendant_of(candidate_ancestor_id: str, page: Page) -> bool:
    """True si `candidate_ancestor_id` est un ancêtre de `page` (via son path)."""
    return candidate_ancestor_id in (page.path or [])
