from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from tracker.db.session import get_db
from tracker.modules.auth.model import User
from tracker.modules.tasks.schema import (
    TaskCreateRequest,
    TaskUpdateRequest,
    TaskStatusUpdateRequest,
    AssignUsersRequest,
    PauseTaskRequest,
    TaskResponse,
    TaskListResponse,
)
from tracker.modules.tasks import service
from tracker.core.cache import cached_page
from tracker.core.dependencies import get_current_user, require_admin
from tracker.core.response import success
from tracker.routes.tasks import (
    TASK_ROUTES,
    TASK_PREFIX,
    TASK_TAG,
    DASHBOARD_PREFIX,
    DASHBOARD_TAG,
    task_page_path,
)

router = APIRouter(prefix=TASK_PREFIX, tags=[TASK_TAG])
dashboard_router = APIRouter(prefix=DASHBOARD_PREFIX, tags=[DASHBOARD_TAG])

_CLEAN_RESPONSES = {
    422: {"description": "excluded"},
    500: {"description": "excluded"},
}


# ════════════════════════════════════════════════════════
# CREATE TASK
# ════════════════════════════════════════════════════════

@router.post(
    TASK_ROUTES["create"],
    status_code=201,
    responses={
        201: {"description": "Task created successfully"},
        403: {"description": "Admin access required"},
        **_CLEAN_RESPONSES,
    },
)
def create_task(
    data: TaskCreateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    task = service.create_task(db, data, created_by=current_user.id)
    return success(
        data=_serialize_task(task),
        message="Task created successfully",
        status_code=201,
    )


# ════════════════════════════════════════════════════════
# LIST TASKS
# ════════════════════════════════════════════════════════

@router.get(
    TASK_ROUTES["list"],
    responses={
        200: {"description": "Tasks fetched successfully"},
        401: {"description": "Unauthorized"},
        **_CLEAN_RESPONSES,
    },
)
def list_tasks(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    tasks = cached_page("/tasks", lambda: service.serialize_tasks(service.list_tasks(db)))
    return success(data=tasks, message="Tasks fetched successfully", meta={"total": len(tasks)})


@router.get(
    TASK_ROUTES["my_tasks"],
    responses={
        200: {"description": "Assigned tasks fetched successfully"},
        401: {"description": "Unauthorized"},
        **_CLEAN_RESPONSES,
    },
)
def my_tasks(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    tasks = cached_page(
        "/tasks/my-tasks",
        lambda: service.serialize_tasks(service.get_my_tasks(db, current_user.id)),
        user_id=current_user.id,
    )
    return success(data=tasks, message="Assigned tasks fetched successfully", meta={"total": len(tasks)})


@router.get(
    TASK_ROUTES["unassigned"],
    responses={
        200: {"description": "Unassigned tasks fetched successfully"},
        401: {"description": "Unauthorized"},
        **_CLEAN_RESPONSES,
    },
)
def unassigned_tasks(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    tasks = cached_page(
        "/tasks/unassigned",
        lambda: service.serialize_tasks(service.list_unassigned_tasks(db)),
    )
    return success(data=tasks, message="Unassigned tasks fetched successfully", meta={"total": len(tasks)})


# ════════════════════════════════════════════════════════
# GET TASK DETAIL
# ════════════════════════════════════════════════════════

@router.get(
    TASK_ROUTES["get"],
    responses={
        200: {"description": "Task fetched successfully"},
        401: {"description": "Unauthorized"},
        404: {"description": "Task not found"},
        **_CLEAN_RESPONSES,
    },
)
def get_task(
    task_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    payload = cached_page(
        task_page_path(task_id),
        lambda: service.build_task_detail(db, task_id, current_user),
        user_id=current_user.id,
    )
    return success(data=payload, message="Task fetched successfully")


# ════════════════════════════════════════════════════════
# UPDATE / DELETE (admin)
# ════════════════════════════════════════════════════════

@router.patch(
    TASK_ROUTES["update"],
    responses={
        200: {"description": "Task updated successfully"},
        403: {"description": "Admin access required"},
        404: {"description": "Task not found"},
        **_CLEAN_RESPONSES,
    },
)
def update_task(
    task_id: int,
    data: TaskUpdateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    task = service.update_task(db, task_id, data)
    return success(data=_serialize_task(task), message="Task updated successfully")


@router.delete(
    TASK_ROUTES["delete"],
    responses={
        200: {"description": "Task deleted successfully"},
        403: {"description": "Admin access required"},
        404: {"description": "Task not found"},
        **_CLEAN_RESPONSES,
    },
)
def delete_task(
    task_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    result = service.delete_task(db, task_id)
    return success(data=result, message="Task deleted successfully")


@router.put(
    TASK_ROUTES["assign_users"],
    responses={
        200: {"description": "Assignees updated successfully"},
        400: {"description": "Unknown user ids"},
        403: {"description": "Admin access required"},
        404: {"description": "Task not found"},
        **_CLEAN_RESPONSES,
    },
)
def assign_users(
    task_id: int,
    data: AssignUsersRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    task = service.assign_users_to_task(db, task_id, data.user_ids, admin=current_user)
    return success(
        data=TaskListResponse.model_validate(task).model_dump(mode="json"),
        message="Assignees updated successfully",
    )


# ════════════════════════════════════════════════════════
# STATUS / PAUSE / RESUME (assignee or admin)
# ════════════════════════════════════════════════════════

@router.patch(
    TASK_ROUTES["update_status"],
    responses={
        200: {"description": "Task status updated successfully"},
        403: {"description": "Not an assignee or admin"},
        404: {"description": "Task not found"},
        **_CLEAN_RESPONSES,
    },
)
def update_task_status(
    task_id: int,
    data: TaskStatusUpdateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    task = service.update_task_status(db, task_id, data.status, current_user)
    return success(data=_serialize_task(task), message="Task status updated successfully")


@router.post(
    TASK_ROUTES["pause"],
    responses={
        200: {"description": "Task paused"},
        403: {"description": "Not an assignee or admin"},
        404: {"description": "Task not found"},
        **_CLEAN_RESPONSES,
    },
)
def pause_task(
    task_id: int,
    data: PauseTaskRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    task = service.pause_task(db, task_id, data.reason, current_user)
    return success(data=_serialize_task(task), message="Task paused")


@router.post(
    TASK_ROUTES["resume"],
    responses={
        200: {"description": "Task resumed"},
        403: {"description": "Not an assignee or admin"},
        404: {"description": "Task not found"},
        **_CLEAN_RESPONSES,
    },
)
def resume_task(
    task_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    task = service.resume_task(db, task_id, current_user)
    return success(data=_serialize_task(task), message="Task resumed")


# ════════════════════════════════════════════════════════
# DASHBOARD
# ════════════════════════════════════════════════════════

@dashboard_router.get(
    "",
    responses={
        200: {"description": "Dashboard fetched successfully"},
        401: {"description": "Unauthorized"},
        **_CLEAN_RESPONSES,
    },
)
def dashboard(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    payload = cached_page(
        "/dashboard",
        lambda: service.build_dashboard(db, current_user),
        user_id=current_user.id,
    )
    return success(data=payload, message="Dashboard fetched successfully")


def _serialize_task(task) -> dict:
    return TaskResponse.model_validate(task).model_dump(mode="json")
