from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from tracker.db.session import get_db
from tracker.modules.auth.model import User
from tracker.modules.auth.schema import UserResponse
from tracker.modules.admin import service
from tracker.core.cache import cached_page
from tracker.core.dependencies import require_admin
from tracker.core.response import success
from tracker.routes.admin import ADMIN_ROUTES, ADMIN_PREFIX, ADMIN_TAG

router = APIRouter(prefix=ADMIN_PREFIX, tags=[ADMIN_TAG])

_CLEAN_RESPONSES = {
    422: {"description": "excluded"},
    500: {"description": "excluded"},
}


@router.get(
    ADMIN_ROUTES["metrics"],
    responses={
        200: {"description": "User metrics"},
        403: {"description": "Admin access required"},
        **_CLEAN_RESPONSES,
    },
)
def metrics(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    data = cached_page("/admin/metrics", lambda: service.user_metrics(db))
    return success(data=data, message="User metrics fetched successfully", meta={"total": len(data)})


@router.get(
    ADMIN_ROUTES["users"],
    responses={
        200: {"description": "All users"},
        403: {"description": "Admin access required"},
        **_CLEAN_RESPONSES,
    },
)
def list_users(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    users = service.list_users(db)
    data = [UserResponse.model_validate(u).model_dump(mode="json") for u in users]
    return success(data=data, message="Users fetched successfully", meta={"total": len(data)})
