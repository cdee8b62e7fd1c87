"""Page service

Opérations de mutation de l'arbre. Chaque écriture de ligne est commitée
seule (pas de transaction englobante): une erreur au milieu d'un
duplicate ou d'un vidage de corbeille laisse les lignes déjà écrites.
"""

import logging
from datetime import datetime
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from typing import Any, Dict, List, Optional

from app.core.config import settings
from app.core.errors import InvalidArgument, Internal, PageError, PageNotFound
from app.models.page import Page, default_content
from app.services import tree_store
from app.services.ids import new_id
from app.services.notification_service import record_page_created
from app.services.page_events import page_events

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("title", "icon", "cover", "content", "properties")


def _commit(db: Session):
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Storage failure", extra={"error": str(e)})
        raise Internal("Storage failure") from e


def _notify(page: Page):
    page_events.emit(page.id, page.updated_at)


# func 1: create_page()
def create_page(
    db: Session,
    user_id: Optional[int],
    workspace_id: str,
    parent_id: Optional[str] = None,
    title: Optional[str] = None,
    icon: Optional[str] = None,
    content: Optional[Dict[str, Any]] = None,
) -> Page:
    if not workspace_id:
        raise InvalidArgument("Workspace ID is required")

    # parent introuvable (ou d'un autre workspace) => page racine, sans erreur
    parent = tree_store.find_page(db, parent_id, workspace_id)
    path, depth = tree_store.compute_child_path(parent)
    resolved_parent_id = parent.id if parent else None
    position = tree_store.next_position(db, resolved_parent_id, workspace_id)

    now = datetime.utcnow()
    page = Page(
        id=new_id(),
        workspace_id=workspace_id,
        parent_id=resolved_parent_id,
        title=title or "Untitled",
        icon=icon,
        path=path,
        depth=depth,
        position=position,
        content=content or default_content(),
        properties={},
        created_at=now,
        updated_at=now,
        created_by=user_id,
        last_edited_by=user_id
    )
    db.add(page)
    _commit(db)
    db.refresh(page)
    logger.info("Page created", extra={"event": "page_created", "page_id": page.id, "parent_id": resolved_parent_id})

    if user_id is not None:
        record_page_created(db, user_id, page)
    return page


# func 2: update_page()
def update_page(db: Session, user_id: Optional[int], page_id: str, **changes) -> Page:
    page = tree_store.get_active_page(db, page_id)

    unknown = set(changes) - set(EDITABLE_FIELDS)
    if unknown:
        raise InvalidArgument(f"Unknown fields: {', '.join(sorted(unknown))}")

    for field, value in changes.items():
        setattr(page, field, value)
    page.updated_at = datetime.utcnow()
    page.last_edited_by = user_id

    _commit(db)
    db.refresh(page)
    _notify(page)
    return page


# func 3: move_page()
def move_page(db: Session, user_id: Optional[int], page_id: str, new_parent_id: Optional[str] = None) -> Page:
    page = tree_store.get_page(db, page_id)

    if new_parent_id == page_id:
        raise InvalidArgument("Cannot make a page its own parent")

    parent = None
    if new_parent_id:
        parent = tree_store.find_page(db, new_parent_id)
        if parent is None:
            raise PageNotFound("Parent page not found")
        if tree_store.is_descendant_of(page_id, parent):
            raise InvalidArgument("Cannot move a page under its own descendant")

    # seule la page déplacée est recalculée, ses descendants gardent leur ancien path
    path, depth = tree_store.compute_child_path(parent)
    page.parent_id = parent.id if parent else None
    page.path = path
    page.depth = depth
    page.updated_at = datetime.utcnow()
    page.last_edited_by = user_id

    _commit(db)
    db.refresh(page)
    logger.info("Page moved", extra={"event": "page_moved", "page_id": page_id, "parent_id": page.parent_id})
    _notify(page)
    return page


# func 4: duplicate_page()
def _clone(db: Session, source: Page, parent_id: Optional[str], path: List[str], depth: int,
           title: str, user_id: Optional[int]) -> Page:
    now = datetime.utcnow()
    clone = Page(
        id=new_id(),
        workspace_id=source.workspace_id,
        parent_id=parent_id,
        title=title,
        icon=source.icon,
        cover=source.cover,
        path=path,
        depth=depth,
        position=tree_store.next_position(db, parent_id, source.workspace_id),
        content=source.content,
        properties=source.properties,
        created_at=now,
        updated_at=now,
        created_by=user_id,
        last_edited_by=user_id
    )
    db.add(clone)
    _commit(db)
    db.refresh(clone)
    return clone


def _duplicate_subtree(db: Session, source: Page, new_parent_id: Optional[str], user_id: Optional[int]) -> List[Page]:
    # parent avant enfants: l'id du parent cloné est connu quand on clone l'enfant
    path, depth = tree_store.compute_child_path(tree_store.find_page(db, new_parent_id))
    if new_parent_id == source.parent_id:
        title = f"{source.title}{settings.COPY_SUFFIX}"
    else:
        title = source.title

    clone = _clone(db, source, new_parent_id, path, depth, title, user_id)
    duplicated = [clone]
    for child in tree_store.list_children(db, source.id, source.workspace_id):
        duplicated.extend(_duplicate_subtree(db, child, clone.id, user_id))
    return duplicated


def duplicate_page(db: Session, user_id: Optional[int], page_id: str, include_subpages: bool = False) -> List[Page]:
    source = tree_store.get_active_page(db, page_id)

    if include_subpages:
        duplicated = _duplicate_subtree(db, source, source.parent_id, user_id)
    else:
        duplicated = [_clone(db, source, source.parent_id, list(source.path or []), source.depth,
                             f"{source.title}{settings.COPY_SUFFIX}", user_id)]

    logger.info("Page duplicated", extra={"event": "page_duplicated", "page_id": page_id, "count": len(duplicated)})
    return duplicated


# func 5: trash_page() / restore_page() / purge_page()
def trash_page(db: Session, user_id: Optional[int], page_id: str) -> Page:
    page = tree_store.get_page(db, page_id)

    # pas de cascade: les sous-pages restent actives
    now = datetime.utcnow()
    page.deleted_at = now
    page.updated_at = now
    page.last_edited_by = user_id

    _commit(db)
    db.refresh(page)
    logger.info("Page trashed", extra={"event": "page_trashed", "page_id": page_id})
    _notify(page)
    return page


def restore_page(db: Session, user_id: Optional[int], page_id: str) -> Page:
    page = tree_store.get_page(db, page_id)
    if not page.is_trashed:
        raise InvalidArgument("Page is not in trash")

    # l'ascendance n'est ni vérifiée ni réparée
    page.deleted_at = None
    page.updated_at = datetime.utcnow()
    page.last_edited_by = user_id

    _commit(db)
    db.refresh(page)
    logger.info("Page restored", extra={"event": "page_restored", "page_id": page_id})
    _notify(page)
    return page


def purge_page(db: Session, page_id: str) -> None:
    page = tree_store.get_page(db, page_id)
    db.delete(page)
    _commit(db)
    logger.info("Page purged", extra={"event": "page_purged", "page_id": page_id})
    page_events.emit(page_id, datetime.utcnow())


def empty_trash(db: Session, workspace_id: Optional[str] = None) -> Dict[str, list]:
    """Purge chaque page de la corbeille indépendamment; un échec n'arrête pas les autres."""
    # purges séquentielles: la Session SQLAlchemy de la requête n'est pas thread-safe
    result = {"purged": [], "failed": []}
    for page_id in [p.id for p in tree_store.list_trashed(db, workspace_id)]:
        try:
            purge_page(db, page_id)
            result["purged"].append(page_id)
        except PageError as e:
            logger.warning("Purge failed", extra={"event": "page_purge_failed", "page_id": page_id, "error": e.message})
            result["failed"].append({"id": page_id, "error": e.message})

    logger.info("Trash emptied", extra={"event": "trash_emptied", "workspace_id": workspace_id,
                                         "count": len(result["purged"])})
    return result


# func 6: reorder_pages()
def reorder_pages(db: Session, user_id: Optional[int], ordered_ids: List[str]) -> None:
    # aucune vérification que les ids partagent le même parent
    for index, page_id in enumerate(ordered_ids):
        page = tree_store.find_page(db, page_id)
        if page is None:
            continue
        page.position = index
        page.updated_at = datetime.utcnow()
        page.last_edited_by = user_id
        _commit(db)
        _notify(page)

    logger.info("Pages reordered", extra={"event": "pages_reordered", "count": len(ordered_ids)})
