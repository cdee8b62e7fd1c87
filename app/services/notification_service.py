# Sink "page créée": une ligne dans notifications, le flux inbox est ailleurs
from sqlalchemy.orm import Session
from app.models.notification import Notification
from app.models.page import Page


def record_page_created(db: Session, user_id: int, page: Page) -> Notification:
    notification = Notification(
        user_id=user_id,
        type="page_created",
        title="New page created",
        message=f'"{page.title}" was created',
        page_id=page.id,
        link_url=f"/page/{page.id}",
        link_text="View page",
        status="unread"
    )
    db.add(notification)
    db.commit()
    return notification
