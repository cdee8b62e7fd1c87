from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from datetime import datetime
from typing import Optional, List, Any

# Schemas pour les pages (JSON en camelCase, snake_case accepté en entrée)

class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

class PageCreate(CamelModel):
    workspace_id: Optional[str] = None  # par défaut: workspace de l'utilisateur
    parent_id: Optional[str] = None
    title: Optional[str] = None
    icon: Optional[str] = None
    content: Optional[dict[str, Any]] = None

class PageUpdate(CamelModel):
    title: Optional[str] = None
    icon: Optional[str] = None
    cover: Optional[str] = None
    content: Optional[dict[str, Any]] = None
    properties: Optional[dict[str, Any]] = None

class PageResponse(CamelModel):
    id: str
    workspace_id: str
    parent_id: Optional[str]
    title: str
    icon: Optional[str]
    cover: Optional[str]
    path: List[str]
    depth: int
    position: int
    content: Optional[dict[str, Any]]
    properties: Optional[dict[str, Any]]
    created_at: datetime
    updated_at: datetime
    deleted_at: Optional[datetime]
    created_by: Optional[int]
    last_edited_by: Optional[int]

    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

class MoveRequest(CamelModel):
    page_id: str
    new_parent_id: Optional[str] = None

class ReorderRequest(CamelModel):
    page_ids: List[str]

class DuplicateRequest(CamelModel):
    include_subpages: bool = False

class DuplicateResponse(CamelModel):
    page: PageResponse
    all_pages: List[PageResponse]
    count: int

class PurgeFailure(BaseModel):
    id: str
    error: str

class EmptyTrashResponse(BaseModel):
    purged: List[str]
    failed: List[PurgeFailure]
