from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from tracker.db.session import get_db
from tracker.modules.auth.model import User
from tracker.modules.requests.schema import (
    ReviewRequest,
    AssignmentRequestResponse,
    PendingRequestResponse,
)
from tracker.modules.requests import service
from tracker.core.cache import cached_page
from tracker.core.dependencies import get_current_user, require_admin
from tracker.core.response import success
from tracker.routes.requests import REQUEST_ROUTES, REQUEST_PREFIX, REQUEST_TAG

router = APIRouter(prefix=REQUEST_PREFIX, tags=[REQUEST_TAG])

_CLEAN_RESPONSES = {
    422: {"description": "excluded"},
    500: {"description": "excluded"},
}


@router.post(
    REQUEST_ROUTES["create"],
    status_code=201,
    responses={
        201: {"description": "Assignment requested"},
        400: {"description": "Already assigned or request pending"},
        404: {"description": "Task not found"},
        **_CLEAN_RESPONSES,
    },
)
def request_assignment(
    task_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    request = service.request_assignment(db, task_id, current_user)
    return success(
        data=AssignmentRequestResponse.model_validate(request).model_dump(mode="json"),
        message="Assignment requested",
        status_code=201,
    )


@router.get(
    REQUEST_ROUTES["mine"],
    responses={
        200: {"description": "Requests fetched successfully"},
        401: {"description": "Unauthorized"},
        **_CLEAN_RESPONSES,
    },
)
def my_requests(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    requests = service.get_user_assignment_requests(db, current_user.id)
    data = [AssignmentRequestResponse.model_validate(r).model_dump(mode="json") for r in requests]
    return success(data=data, message="Requests fetched successfully", meta={"total": len(data)})


@router.get(
    REQUEST_ROUTES["pending"],
    responses={
        200: {"description": "Pending requests fetched successfully"},
        403: {"description": "Admin access required"},
        **_CLEAN_RESPONSES,
    },
)
def pending_requests(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    data = cached_page(
        "/admin/requests",
        lambda: [
            PendingRequestResponse.model_validate(r).model_dump(mode="json")
            for r in service.list_pending_requests(db)
        ],
    )
    return success(data=data, message="Pending requests fetched successfully", meta={"total": len(data)})


@router.post(
    REQUEST_ROUTES["review"],
    responses={
        200: {"description": "Request reviewed"},
        400: {"description": "Request is no longer pending"},
        403: {"description": "Admin access required"},
        404: {"description": "Request not found"},
        **_CLEAN_RESPONSES,
    },
)
def review_request(
    request_id: int,
    data: ReviewRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    request = service.handle_assignment_request(
        db, request_id, data.action, admin=current_user, admin_comment=data.admin_comment,
    )
    return success(
        data=AssignmentRequestResponse.model_validate(request).model_dump(mode="json"),
        message=f"Request {request.status.value}",
    )
