"""
comments/service.py

Task comments with an optional image attachment. Images are written to the
comment-images bucket before the row is saved; when an admin comments, every
assignee except the author is notified in the same transaction as the row.
"""

import os
import secrets
import time
from typing import Optional
from sqlalchemy.orm import Session
from fastapi import HTTPException, status
from tracker.modules.auth.model import User
from tracker.modules.comments.model import TaskComment
from tracker.modules.notifications.model import NotificationType
from tracker.modules.notifications import service as notifications
from tracker.modules.tasks import service as task_service
from tracker.routes.tasks import task_page_path
from tracker.core import cache
from tracker.core.storage import CommentImageStorage, ALLOWED_IMAGE_TYPES, MAX_IMAGE_BYTES
from tracker.core.logger import logger

QUOTE_LENGTH = 100

_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
}


class CommentImage:
    """An uploaded image as read from the multipart form."""

    def __init__(self, data: bytes, content_type: Optional[str], filename: Optional[str] = None):
        self.data = data
        self.content_type = content_type
        self.filename = filename


# ================================================================
# IMAGE HELPERS
# ================================================================

def validate_image(image: CommentImage) -> None:
    if image.content_type not in ALLOWED_IMAGE_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid file type. Only JPEG, PNG, GIF and WebP images are allowed.",
        )
    if len(image.data) > MAX_IMAGE_BYTES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="File too large. Maximum size is 5MB.",
        )


def build_object_path(user_id: int, image: CommentImage) -> str:
    ext = ""
    if image.filename:
        ext = os.path.splitext(image.filename)[1].lstrip(".").lower()
    if not ext:
        ext = _EXTENSIONS.get(image.content_type, "bin")
    return f"{user_id}/{int(time.time() * 1000)}-{secrets.token_hex(4)}.{ext}"


def upload_image(storage: CommentImageStorage, user_id: int, image: CommentImage) -> str:
    validate_image(image)
    path = build_object_path(user_id, image)
    try:
        storage.upload(path, image.data, image.content_type)
    except Exception as e:
        logger.error(f"[CommentImage] Upload failed for {path}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to upload image",
        )
    logger.info(f"[CommentImage] Uploaded {path} ({len(image.data)} bytes)")
    return storage.public_url(path)


def quote(content: str) -> str:
    if len(content) > QUOTE_LENGTH:
        return content[:QUOTE_LENGTH] + "..."
    return content


# ================================================================
# ACTIONS
# ================================================================

def _get_owned_comment(db: Session, comment_id: int, user: User, verb: str) -> TaskComment:
    comment = db.query(TaskComment).filter(TaskComment.id == comment_id).first()
    if not comment:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Comment {comment_id} not found",
        )
    if comment.user_id != user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"You can only {verb} your own comments",
        )
    return comment


def _commit(db: Session, action: str) -> None:
    try:
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"[{action}] DB error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save comment. Please try again.",
        )


def add_comment(
    db: Session,
    storage: CommentImageStorage,
    task_id: int,
    content: str,
    user: User,
    image: Optional[CommentImage] = None,
) -> TaskComment:
    task = task_service.get_task_or_404(db, task_id)

    image_url = upload_image(storage, user.id, image) if image else None

    comment = TaskComment(task_id=task.id, user_id=user.id, content=content, image_url=image_url)
    db.add(comment)
    db.flush()

    recipients = []
    if user.is_admin:
        recipients = [uid for uid in task_service.get_assignee_ids(db, task.id) if uid != user.id]
        notifications.add_notifications(db, [
            {
                "user_id": uid,
                "type": NotificationType.TASK_COMMENT,
                "title": f"New comment on: {task.title}",
                "message": f'{user.full_name} commented: "{quote(content)}"',
                "link": task_page_path(task.id),
                "task_comment_id": comment.id,
            }
            for uid in recipients
        ])

    _commit(db, "AddComment")
    db.refresh(comment)

    cache.revalidate_path(task_page_path(task.id), "/notifications", "/dashboard")
    logger.info(
        f"[AddComment] Comment {comment.id} on task {task.id} by User {user.id} "
        f"| image={bool(image_url)} notified={len(recipients)}"
    )
    return comment


def update_comment(
    db: Session,
    storage: CommentImageStorage,
    comment_id: int,
    content: str,
    user: User,
    image: Optional[CommentImage] = None,
    remove_image: bool = False,
) -> TaskComment:
    comment = _get_owned_comment(db, comment_id, user, "edit")
    old_url = comment.image_url

    if image:
        comment.image_url = upload_image(storage, user.id, image)
    elif remove_image:
        comment.image_url = None

    comment.content = content
    _commit(db, "UpdateComment")
    db.refresh(comment)

    if old_url and old_url != comment.image_url:
        storage.remove_by_url(old_url)

    cache.revalidate_path(task_page_path(comment.task_id))
    return comment


def delete_comment(db: Session, storage: CommentImageStorage, comment_id: int, user: User) -> dict:
    comment = _get_owned_comment(db, comment_id, user, "delete")
    task_id = comment.task_id

    if comment.image_url:
        storage.remove_by_url(comment.image_url)

    db.delete(comment)
    _commit(db, "DeleteComment")

    cache.revalidate_path(task_page_path(task_id), "/notifications")
    logger.info(f"[DeleteComment] Comment {comment_id} deleted by User {user.id}")
    return {"message": f"Comment {comment_id} deleted successfully"}
