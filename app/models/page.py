"""Page model

Noeud de l'arbre de documents. `path` est le chemin matérialisé des
ancêtres (racine d'abord, sans la page elle-même), `depth == len(path)`.
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON
from datetime import datetime
from app.core.database import Base
from app.services.ids import new_id


def default_content():
    return {"type": "doc", "content": [{"type": "paragraph"}]}


class Page(Base):
    __tablename__ = "pages"

    id = Column(String(26), primary_key=True, default=new_id)
    workspace_id = Column(String(26), ForeignKey("workspaces.id"), nullable=False, index=True)
    # pas de contrainte FK: une purge peut laisser des enfants orphelins
    parent_id = Column(String(26), nullable=True, index=True)

    title = Column(String, nullable=False, default="Untitled")
    icon = Column(String, nullable=True)
    cover = Column(String, nullable=True)

    path = Column(JSON, nullable=False, default=lambda: [])
    depth = Column(Integer, nullable=False, default=0)
    position = Column(Integer, nullable=False, default=0)

    content = Column(JSON, nullable=True, default=default_content)
    properties = Column(JSON, nullable=True, default=lambda: {})

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow)
    deleted_at = Column(DateTime, nullable=True, index=True)  # soft delete (corbeille)

    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    last_edited_by = Column(Integer, ForeignKey("users.id"), nullable=True)

    @property
    def is_trashed(self) -> bool:
        return self.deleted_at is not None

    def __repr__(self) -> str:
        return f"<Page(id={self.id}, title={self.title!r}, depth={self.depth})>"
