from sqlalchemy import Column, String, DateTime, JSON
from datetime import datetime
from app.core.database import Base
from app.services.ids import new_id

class Workspace(Base):
    __tablename__ = "workspaces"

    id = Column(String(26), primary_key=True, default=new_id)
    name = Column(String, nullable=False)
    slug = Column(String, unique=True, nullable=False, index=True)
    icon = Column(String, nullable=True)
    settings = Column(JSON, default=lambda: {})
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
