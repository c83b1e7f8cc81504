from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional
from sqlalchemy.orm import Session, joinedload
from fastapi import HTTPException, status
from tracker.modules.auth.model import User
from tracker.modules.notifications.model import Notification
from tracker.modules.requests.model import AssignmentRequest, RequestStatus
from tracker.core import cache
from tracker.core.logger import logger

RECENT_WINDOW_DAYS = 7


def recent_cutoff() -> datetime:
    return datetime.now(timezone.utc) - timedelta(days=RECENT_WINDOW_DAYS)


def _is_recent(created_at: Optional[datetime], cutoff: datetime) -> bool:
    if created_at is None:
        return True
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    return created_at >= cutoff


# ================================================================
# WRITE HELPERS (used by other modules, caller commits)
# ================================================================

def add_notification(
    db: Session,
    user_id: int,
    type: str,
    title: str,
    message: str,
    link: Optional[str] = None,
    task_comment_id: Optional[int] = None,
    assignment_request_id: Optional[int] = None,
) -> Notification:
    notification = Notification(
        user_id=user_id,
        type=type,
        title=title,
        message=message,
        link=link,
        read=False,
        task_comment_id=task_comment_id,
        assignment_request_id=assignment_request_id,
    )
    db.add(notification)
    return notification


def add_notifications(db: Session, rows: Iterable[dict]) -> list[Notification]:
    return [add_notification(db, **row) for row in rows]


# ================================================================
# PAGE
# ================================================================

def list_notifications(db: Session, user_id: int) -> list[Notification]:
    return (
        db.query(Notification)
        .filter(Notification.user_id == user_id)
        .order_by(Notification.created_at.desc(), Notification.id.desc())
        .all()
    )


def list_requests_with_recency(db: Session, user_id: int) -> list[tuple[AssignmentRequest, bool]]:
    cutoff = recent_cutoff()
    requests = (
        db.query(AssignmentRequest)
        .options(joinedload(AssignmentRequest.task))
        .filter(AssignmentRequest.user_id == user_id)
        .order_by(AssignmentRequest.created_at.desc(), AssignmentRequest.id.desc())
        .all()
    )
    return [(r, _is_recent(r.created_at, cutoff)) for r in requests]


def mark_as_read(db: Session, notification_id: int, user_id: int) -> Notification:
    notification = (
        db.query(Notification)
        .filter(Notification.id == notification_id, Notification.user_id == user_id)
        .first()
    )
    if not notification:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Notification {notification_id} not found",
        )
    notification.read = True
    db.commit()
    db.refresh(notification)

    cache.revalidate_path("/notifications", "/dashboard")
    return notification


def mark_all_as_read(db: Session, user_id: int) -> int:
    updated = (
        db.query(Notification)
        .filter(Notification.user_id == user_id, Notification.read == False)
        .update({Notification.read: True}, synchronize_session=False)
    )
    db.commit()

    cache.revalidate_path("/notifications", "/dashboard")
    logger.info(f"[Notifications] User {user_id} marked {updated} notification(s) as read")
    return updated


# ================================================================
# SIDEBAR BADGES
# ================================================================

def badge_counts(db: Session, user: User) -> dict:
    if user.is_admin:
        pending = (
            db.query(AssignmentRequest)
            .filter(AssignmentRequest.status == RequestStatus.PENDING)
            .count()
        )
        return {"notifications": 0, "pending_requests": pending}

    cutoff = recent_cutoff()
    unread = [
        n for n in db.query(Notification)
        .filter(Notification.user_id == user.id, Notification.read == False)
        .all()
        if _is_recent(n.created_at, cutoff)
    ]
    reviewed = [
        r for r in db.query(AssignmentRequest)
        .filter(
            AssignmentRequest.user_id == user.id,
            AssignmentRequest.status.in_([RequestStatus.APPROVED, RequestStatus.REJECTED]),
        )
        .all()
        if _is_recent(r.created_at, cutoff)
    ]
    return {"notifications": len(unread) + len(reviewed), "pending_requests": 0}
