from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from datetime import datetime
from app.core.database import Base
from app.services.ids import new_id

class Notification(Base):
    """Alerte utilisateur (ex: page créée). Le flux inbox n'est pas exposé ici."""
    __tablename__ = "notifications"

    id = Column(String(26), primary_key=True, default=new_id)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    type = Column(String, nullable=False)
    title = Column(String, nullable=False)
    message = Column(String, nullable=True)
    page_id = Column(String(26), nullable=True)
    link_url = Column(String, nullable=True)
    link_text = Column(String, nullable=True)
    status = Column(String, default="unread")
    created_at = Column(DateTime, default=datetime.utcnow)
