from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Text
from sqlalchemy.sql import func
from tracker.db.base import Base


class NotificationType:
    TASK_ASSIGNMENT = "task_assignment"
    TASK_UNASSIGNMENT = "task_unassignment"
    TASK_COMMENT = "task_comment"
    ASSIGNMENT_RESPONSE = "assignment_response"


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    type = Column(String(50), nullable=False)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    link = Column(String(255), nullable=True)
    read = Column(Boolean, nullable=False, default=False, index=True)

    task_comment_id = Column(Integer, ForeignKey('task_comments.id', ondelete='SET NULL'), nullable=True)
    assignment_request_id = Column(
        Integer, ForeignKey('assignment_requests.id', ondelete='SET NULL'), nullable=True
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    def __repr__(self):
        return f"<Notification id={self.id} user_id={self.user_id} type={self.type} read={self.read}>"
