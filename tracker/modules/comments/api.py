from typing import Optional
from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.orm import Session
from tracker.db.session import get_db
from tracker.modules.auth.model import User
from tracker.modules.comments.schema import CommentResponse
from tracker.modules.comments import service
from tracker.modules.comments.service import CommentImage
from tracker.core.dependencies import get_current_user
from tracker.core.response import success
from tracker.core.storage import CommentImageStorage, get_storage
from tracker.routes.comments import COMMENT_ROUTES, COMMENT_PREFIX, COMMENT_TAG

router = APIRouter(prefix=COMMENT_PREFIX, tags=[COMMENT_TAG])

_CLEAN_RESPONSES = {
    422: {"description": "excluded"},
    500: {"description": "excluded"},
}


def _read_upload(upload: Optional[UploadFile]) -> Optional[CommentImage]:
    # Browsers send an empty part when no file was picked
    if upload is None or not upload.filename:
        return None
    data = upload.file.read()
    if not data:
        return None
    return CommentImage(data, upload.content_type, upload.filename)


@router.post(
    COMMENT_ROUTES["create"],
    status_code=201,
    responses={
        201: {"description": "Comment added"},
        400: {"description": "Invalid image"},
        404: {"description": "Task not found"},
        **_CLEAN_RESPONSES,
    },
)
def add_comment(
    task_id: int,
    content: str = Form(..., min_length=1, max_length=10000),
    image: Optional[UploadFile] = File(default=None),
    db: Session = Depends(get_db),
    storage: CommentImageStorage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    comment = service.add_comment(db, storage, task_id, content, current_user, image=_read_upload(image))
    return success(data=_serialize(comment), message="Comment added", status_code=201)


@router.patch(
    COMMENT_ROUTES["update"],
    responses={
        200: {"description": "Comment updated"},
        400: {"description": "Invalid image"},
        403: {"description": "Not the comment owner"},
        404: {"description": "Comment not found"},
        **_CLEAN_RESPONSES,
    },
)
def update_comment(
    comment_id: int,
    content: str = Form(..., min_length=1, max_length=10000),
    image: Optional[UploadFile] = File(default=None),
    remove_image: bool = Form(default=False),
    db: Session = Depends(get_db),
    storage: CommentImageStorage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    comment = service.update_comment(
        db, storage, comment_id, content, current_user,
        image=_read_upload(image),
        remove_image=remove_image,
    )
    return success(data=_serialize(comment), message="Comment updated")


@router.delete(
    COMMENT_ROUTES["delete"],
    responses={
        200: {"description": "Comment deleted"},
        403: {"description": "Not the comment owner"},
        404: {"description": "Comment not found"},
        **_CLEAN_RESPONSES,
    },
)
def delete_comment(
    comment_id: int,
    db: Session = Depends(get_db),
    storage: CommentImageStorage = Depends(get_storage),
    current_user: User = Depends(get_current_user),
):
    result = service.delete_comment(db, storage, comment_id, current_user)
    return success(data=result, message="Comment deleted")


def _serialize(comment) -> dict:
    return CommentResponse.model_validate(comment).model_dump(mode="json")
