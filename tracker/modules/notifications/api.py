from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from tracker.db.session import get_db
from tracker.modules.auth.model import User
from tracker.modules.notifications.schema import (
    NotificationResponse,
    RequestWithRecencyResponse,
    BadgeCountsResponse,
)
from tracker.modules.notifications import service
from tracker.core.cache import cached_page
from tracker.core.dependencies import get_current_user
from tracker.core.response import success
from tracker.routes.notifications import NOTIFICATION_ROUTES, NOTIFICATION_PREFIX, NOTIFICATION_TAG

router = APIRouter(prefix=NOTIFICATION_PREFIX, tags=[NOTIFICATION_TAG])

_CLEAN_RESPONSES = {
    422: {"description": "excluded"},
    500: {"description": "excluded"},
}


def _build_page(db: Session, user: User) -> dict:
    notifications = service.list_notifications(db, user.id)
    requests = service.list_requests_with_recency(db, user.id)
    return {
        "notifications": [
            NotificationResponse.model_validate(n).model_dump(mode="json") for n in notifications
        ],
        "requests": [
            RequestWithRecencyResponse.model_validate(r)
            .model_copy(update={"is_recent": recent})
            .model_dump(mode="json")
            for r, recent in requests
        ],
        "unread": sum(1 for n in notifications if not n.read),
    }


@router.get(
    NOTIFICATION_ROUTES["list"],
    responses={
        200: {"description": "Notifications fetched successfully"},
        401: {"description": "Unauthorized"},
        **_CLEAN_RESPONSES,
    },
)
def list_notifications(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    payload = cached_page("/notifications", lambda: _build_page(db, current_user), user_id=current_user.id)
    return success(data=payload, message="Notifications fetched successfully")


@router.get(
    NOTIFICATION_ROUTES["counts"],
    responses={
        200: {"description": "Badge counts"},
        401: {"description": "Unauthorized"},
        **_CLEAN_RESPONSES,
    },
)
def badge_counts(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    counts = BadgeCountsResponse(**service.badge_counts(db, current_user))
    return success(data=counts.model_dump(), message="Badge counts fetched successfully")


@router.post(
    NOTIFICATION_ROUTES["mark_read"],
    responses={
        200: {"description": "Notification marked as read"},
        404: {"description": "Notification not found"},
        **_CLEAN_RESPONSES,
    },
)
def mark_read(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    notification = service.mark_as_read(db, notification_id, current_user.id)
    return success(
        data=NotificationResponse.model_validate(notification).model_dump(mode="json"),
        message="Notification marked as read",
    )


@router.post(
    NOTIFICATION_ROUTES["mark_all_read"],
    responses={
        200: {"description": "All notifications marked as read"},
        **_CLEAN_RESPONSES,
    },
)
def mark_all_read(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    updated = service.mark_all_as_read(db, current_user.id)
    return success(data={"updated": updated}, message="All notifications marked as read")
