from datetime import datetime, timezone
from typing import Optional
from sqlalchemy.orm import Session, joinedload
from fastapi import HTTPException, status
from tracker.modules.auth.model import User
from tracker.modules.requests.model import AssignmentRequest, RequestStatus
from tracker.modules.tasks.model import TaskAssignment, TaskStatus
from tracker.modules.notifications.model import NotificationType
from tracker.modules.notifications import service as notifications
from tracker.modules.tasks import service as task_service
from tracker.routes.tasks import task_page_path
from tracker.core import cache
from tracker.core.logger import logger


def _commit(db: Session, action: str, request_id: Optional[int] = None) -> None:
    try:
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"[{action}] DB error for request {request_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save assignment request. Please try again.",
        )


# ================================================================
# REQUESTER
# ================================================================

def request_assignment(db: Session, task_id: int, user: User) -> AssignmentRequest:
    task = task_service.get_task_or_404(db, task_id)

    if task_service.is_assignee(db, task.id, user.id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You are already assigned to this task",
        )

    existing = (
        db.query(AssignmentRequest)
        .filter(
            AssignmentRequest.task_id == task.id,
            AssignmentRequest.user_id == user.id,
            AssignmentRequest.status == RequestStatus.PENDING,
        )
        .first()
    )
    if existing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You already have a pending request for this task",
        )

    request = AssignmentRequest(task_id=task.id, user_id=user.id, status=RequestStatus.PENDING)
    db.add(request)
    _commit(db, "RequestAssignment")
    db.refresh(request)

    cache.revalidate_path(task_page_path(task.id), "/admin/requests", "/notifications")
    logger.info(f"[RequestAssignment] User {user.id} requested task {task.id} (request {request.id})")
    return request


def get_user_assignment_requests(db: Session, user_id: int) -> list[AssignmentRequest]:
    return (
        db.query(AssignmentRequest)
        .options(joinedload(AssignmentRequest.task))
        .filter(AssignmentRequest.user_id == user_id)
        .order_by(AssignmentRequest.created_at.desc(), AssignmentRequest.id.desc())
        .all()
    )


# ================================================================
# ADMIN
# ================================================================

def list_pending_requests(db: Session) -> list[AssignmentRequest]:
    return (
        db.query(AssignmentRequest)
        .options(joinedload(AssignmentRequest.task), joinedload(AssignmentRequest.user))
        .filter(AssignmentRequest.status == RequestStatus.PENDING)
        .order_by(AssignmentRequest.created_at.desc(), AssignmentRequest.id.desc())
        .all()
    )


def response_notification_text(task_title: str, approved: bool, admin_comment: Optional[str]) -> tuple[str, str]:
    verb = "Approved" if approved else "Rejected"
    title = f"Request {verb}: {task_title}"
    message = f"Your request has been {verb.lower()}."
    if admin_comment:
        message += f' Admin comment: "{admin_comment}"'
    return title, message


def handle_assignment_request(
    db: Session,
    request_id: int,
    action: str,
    admin: User,
    admin_comment: Optional[str] = None,
) -> AssignmentRequest:
    request = (
        db.query(AssignmentRequest)
        .filter(AssignmentRequest.id == request_id)
        .with_for_update()
        .first()
    )
    if not request:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Assignment request {request_id} not found",
        )
    if request.status != RequestStatus.PENDING:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Request has already been {request.status.value}",
        )

    approved = action == RequestStatus.APPROVED.value
    comment = admin_comment.strip() if admin_comment and admin_comment.strip() else None

    request.status = RequestStatus.APPROVED if approved else RequestStatus.REJECTED
    request.admin_comment = comment
    request.reviewed_by = admin.id
    request.reviewed_at = datetime.now(timezone.utc)

    task = request.task
    if approved:
        if not task_service.is_assignee(db, task.id, request.user_id):
            db.add(TaskAssignment(task_id=task.id, user_id=request.user_id))
        if task.status == TaskStatus.UNASSIGNED:
            task.status = TaskStatus.PENDING

    title, message = response_notification_text(task.title, approved, comment)
    notifications.add_notification(
        db,
        user_id=request.user_id,
        type=NotificationType.ASSIGNMENT_RESPONSE,
        title=title,
        message=message,
        link=task_page_path(task.id),
        assignment_request_id=request.id,
    )

    _commit(db, "ReviewRequest", request_id)
    db.refresh(request)

    cache.revalidate_path(
        "/admin/requests", "/notifications", "/tasks", "/dashboard", "/admin/metrics",
    )
    logger.info(
        f"[ReviewRequest] Request {request_id} {request.status.value} by admin {admin.id} "
        f"| task={task.id} user={request.user_id}"
    )
    return request
