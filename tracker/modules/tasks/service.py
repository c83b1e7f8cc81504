from datetime import datetime, timezone
from typing import Optional
from sqlalchemy.orm import Session, selectinload
from fastapi import HTTPException, status
from tracker.modules.auth.model import User
from tracker.modules.tasks.model import Task, TaskAssignment, TaskLink, TaskStatus
from tracker.modules.tasks.schema import (
    TaskCreateRequest,
    TaskUpdateRequest,
    TaskLinkInput,
    TaskListResponse,
    TaskDetailResponse,
)
from tracker.modules.auth.schema import UserMinimalResponse
from tracker.modules.notifications.model import NotificationType
from tracker.modules.notifications import service as notifications
from tracker.modules.requests.model import AssignmentRequest, RequestStatus
from tracker.routes.tasks import task_page_path
from tracker.core import cache
from tracker.core.logger import logger

ACTIVE_STATUSES = (TaskStatus.PENDING, TaskStatus.IN_PROGRESS)
DASHBOARD_LIST_SIZE = 5


# ================================================================
# LOOKUPS
# ================================================================

def get_task_or_404(db: Session, task_id: int) -> Task:
    """Get a task by ID or raise 404"""
    task = db.query(Task).filter(Task.id == task_id).first()
    if not task:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Task {task_id} not found",
        )
    return task


def is_assignee(db: Session, task_id: int, user_id: int) -> bool:
    return (
        db.query(TaskAssignment)
        .filter(TaskAssignment.task_id == task_id, TaskAssignment.user_id == user_id)
        .first()
        is not None
    )


def get_assignee_ids(db: Session, task_id: int) -> list[int]:
    rows = db.query(TaskAssignment.user_id).filter(TaskAssignment.task_id == task_id).all()
    return [row.user_id for row in rows]


def _require_assignee_or_admin(db: Session, task: Task, user: User, detail: str) -> None:
    if is_assignee(db, task.id, user.id) or user.is_admin:
        return
    logger.warning(f"[TaskAuth] User {user.id} denied on task {task.id}: not assignee or admin")
    raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


def _commit(db: Session, action: str, task_id: Optional[int] = None) -> None:
    try:
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"[{action}] DB error for task {task_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save task changes. Please try again.",
        )


def _revalidate_task(task_id: Optional[int] = None, *extra: str) -> None:
    paths = ["/tasks", "/dashboard", "/admin/metrics", *extra]
    if task_id is not None:
        paths.append(task_page_path(task_id))
    cache.revalidate_path(*paths)


# ================================================================
# PAGES
# ================================================================

def _task_query(db: Session):
    return db.query(Task).options(
        selectinload(Task.assignees),
        selectinload(Task.creator),
    )


def list_tasks(db: Session) -> list[Task]:
    return _task_query(db).order_by(Task.created_at.desc(), Task.id.desc()).all()


def list_unassigned_tasks(db: Session) -> list[Task]:
    return (
        _task_query(db)
        .filter(Task.status == TaskStatus.UNASSIGNED)
        .order_by(Task.created_at.desc(), Task.id.desc())
        .all()
    )


def get_my_tasks(db: Session, user_id: int) -> list[Task]:
    return (
        _task_query(db)
        .join(TaskAssignment, TaskAssignment.task_id == Task.id)
        .filter(TaskAssignment.user_id == user_id)
        .order_by(Task.created_at.desc(), Task.id.desc())
        .all()
    )


def serialize_tasks(tasks: list[Task]) -> list[dict]:
    return [TaskListResponse.model_validate(t).model_dump(mode="json") for t in tasks]


def build_dashboard(db: Session, user: User) -> dict:
    all_tasks = list_tasks(db)
    my_tasks = get_my_tasks(db, user.id)

    my_active = [t for t in my_tasks if t.status in ACTIVE_STATUSES]
    my_completed = [t for t in my_tasks if t.status == TaskStatus.COMPLETED]
    unassigned = [t for t in all_tasks if t.status == TaskStatus.UNASSIGNED]

    total = len(all_tasks)
    total_completed = sum(1 for t in all_tasks if t.status == TaskStatus.COMPLETED)
    completion = round(total_completed / total * 100) if total else 0

    return {
        "user": UserMinimalResponse.model_validate(user).model_dump(mode="json"),
        "stats": {
            "my_active_tasks": len(my_active),
            "my_completed_tasks": len(my_completed),
            "unassigned_tasks": len(unassigned),
            "total_tasks": total,
        },
        "progress": {
            "completed": total_completed,
            "total": total,
            "remaining": total - total_completed,
            "completion_percentage": completion,
        },
        "recent_active_tasks": serialize_tasks(my_active[:DASHBOARD_LIST_SIZE]),
        "recent_unassigned_tasks": serialize_tasks(unassigned[:DASHBOARD_LIST_SIZE]),
    }


def build_task_detail(db: Session, task_id: int, user: User) -> dict:
    task = (
        db.query(Task)
        .options(
            selectinload(Task.assignees),
            selectinload(Task.creator),
            selectinload(Task.links),
            selectinload(Task.comments),
        )
        .filter(Task.id == task_id)
        .first()
    )
    if not task:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Task {task_id} not found",
        )

    pending_request = (
        db.query(AssignmentRequest)
        .filter(
            AssignmentRequest.task_id == task_id,
            AssignmentRequest.user_id == user.id,
            AssignmentRequest.status == RequestStatus.PENDING,
        )
        .first()
    )

    payload = {
        "task": TaskDetailResponse.model_validate(task).model_dump(mode="json"),
        "is_admin": user.is_admin,
        "is_assigned": any(a.id == user.id for a in task.assignees),
        "pending_request_id": pending_request.id if pending_request else None,
        "all_users": None,
    }
    if user.is_admin:
        users = db.query(User).filter(User.is_active == True).order_by(User.first_name).all()
        payload["all_users"] = [UserMinimalResponse.model_validate(u).model_dump(mode="json") for u in users]
    return payload


# ================================================================
# ADMIN ACTIONS
# ================================================================

def _valid_links(links: list[TaskLinkInput]) -> list[TaskLinkInput]:
    return [link for link in links if link.name.strip() and link.url.strip()]


def create_task(db: Session, data: TaskCreateRequest, created_by: int) -> Task:
    task = Task(
        title=data.title,
        description=data.description,
        status=TaskStatus.UNASSIGNED,
        created_by=created_by,
    )
    for link in _valid_links(data.links):
        task.links.append(TaskLink(link_type=link.link_type, name=link.name.strip(), url=link.url.strip()))

    db.add(task)
    _commit(db, "CreateTask")
    db.refresh(task)

    _revalidate_task()
    logger.info(f"[CreateTask] Task {task.id} created by User {created_by} with {len(task.links)} link(s)")
    return task


def update_task(db: Session, task_id: int, data: TaskUpdateRequest) -> Task:
    task = get_task_or_404(db, task_id)

    if data.title is not None:
        task.title = data.title
    if data.description is not None:
        task.description = data.description
    if data.status is not None:
        task.status = data.status

    if data.links is not None:
        # Replace the whole link set
        task.links.clear()
        for link in _valid_links(data.links):
            task.links.append(TaskLink(link_type=link.link_type, name=link.name.strip(), url=link.url.strip()))

    _commit(db, "UpdateTask", task_id)
    db.refresh(task)

    _revalidate_task(task_id, "/admin/requests", "/notifications")
    return task


def delete_task(db: Session, task_id: int) -> dict:
    task = get_task_or_404(db, task_id)
    db.delete(task)
    _commit(db, "DeleteTask", task_id)

    _revalidate_task(task_id, "/admin/requests", "/notifications")
    logger.info(f"[DeleteTask] Task {task_id} deleted.")
    return {"message": f"Task {task_id} deleted successfully"}


def assign_users_to_task(db: Session, task_id: int, user_ids: list[int], admin: User) -> Task:
    task = get_task_or_404(db, task_id)

    wanted = list(dict.fromkeys(user_ids))
    if wanted:
        found = {u.id for u in db.query(User.id).filter(User.id.in_(wanted)).all()}
        missing = [uid for uid in wanted if uid not in found]
        if missing:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Users not found: {missing}",
            )

    existing = get_assignee_ids(db, task_id)
    added = [uid for uid in wanted if uid not in existing]
    removed = [uid for uid in existing if uid not in wanted]

    for assignment in list(task.assignments):
        if assignment.user_id in removed:
            task.assignments.remove(assignment)
    for uid in added:
        task.assignments.append(TaskAssignment(user_id=uid))

    if existing and not wanted:
        task.status = TaskStatus.PAUSED
    elif wanted and task.status == TaskStatus.UNASSIGNED:
        task.status = TaskStatus.PENDING

    link = task_page_path(task_id)
    notifications.add_notifications(db, [
        {
            "user_id": uid,
            "type": NotificationType.TASK_ASSIGNMENT,
            "title": f"New task assigned: {task.title}",
            "message": f"{admin.full_name} assigned you a new task.",
            "link": link,
        }
        for uid in added
    ] + [
        {
            "user_id": uid,
            "type": NotificationType.TASK_UNASSIGNMENT,
            "title": f"Removed from task: {task.title}",
            "message": f"{admin.full_name} removed you from this task.",
            "link": link,
        }
        for uid in removed
    ])

    _commit(db, "AssignUsers", task_id)
    db.refresh(task)

    _revalidate_task(task_id, "/notifications")
    logger.info(
        f"[AssignUsers] Task {task_id} by admin {admin.id} | added={added} removed={removed} "
        f"status={task.status.value}"
    )
    return task


# ================================================================
# ASSIGNEE / ADMIN ACTIONS
# ================================================================

def update_task_status(db: Session, task_id: int, new_status: TaskStatus, user: User) -> Task:
    task = get_task_or_404(db, task_id)
    _require_assignee_or_admin(
        db, task, user,
        "You are not authorized to update this task. "
        "Only assigned users and administrators can change its status.",
    )

    old_status = task.status
    task.status = new_status
    _commit(db, "UpdateStatus", task_id)
    db.refresh(task)

    _revalidate_task(task_id)
    logger.info(f"[UpdateStatus] Task {task_id} {old_status.value} -> {new_status.value} by User {user.id}")
    return task


def pause_task(db: Session, task_id: int, reason: str, user: User) -> Task:
    task = get_task_or_404(db, task_id)
    _require_assignee_or_admin(db, task, user, "You are not authorized to pause this task")

    task.status = TaskStatus.PAUSED
    task.paused_reason = reason
    task.paused_by = user.id
    task.paused_at = datetime.now(timezone.utc)
    _commit(db, "PauseTask", task_id)
    db.refresh(task)

    _revalidate_task(task_id)
    logger.info(f"[PauseTask] Task {task_id} paused by User {user.id}")
    return task


def resume_task(db: Session, task_id: int, user: User) -> Task:
    task = get_task_or_404(db, task_id)
    _require_assignee_or_admin(db, task, user, "You are not authorized to resume this task")

    task.status = TaskStatus.PENDING
    task.paused_reason = None
    task.paused_by = None
    task.paused_at = None
    _commit(db, "ResumeTask", task_id)
    db.refresh(task)

    _revalidate_task(task_id)
    logger.info(f"[ResumeTask] Task {task_id} resumed by User {user.id}")
    return task
