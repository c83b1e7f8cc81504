from sqlalchemy import Column, Integer, DateTime, ForeignKey, Text, Enum, Index, text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from tracker.db.base import Base
import enum


class RequestStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class AssignmentRequest(Base):
    __tablename__ = "assignment_requests"
    __table_args__ = (
        # At most one pending request per (task, user)
        Index(
            "uq_assignment_requests_pending",
            "task_id",
            "user_id",
            unique=True,
            postgresql_where=text("status = 'pending'"),
            sqlite_where=text("status = 'pending'"),
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    task_id = Column(Integer, ForeignKey('tasks.id', ondelete='CASCADE'), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    status = Column(
        Enum(
            RequestStatus,
            name="assignment_request_status",
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
        default=RequestStatus.PENDING,
        index=True,
    )
    admin_comment = Column(Text, nullable=True)
    reviewed_by = Column(Integer, ForeignKey('users.id'), nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    task = relationship("Task", back_populates="assignment_requests")
    user = relationship("User", foreign_keys=[user_id])
    reviewer = relationship("User", foreign_keys=[reviewed_by])

    def __repr__(self):
        return (
            f"<AssignmentRequest id={self.id} task_id={self.task_id} "
            f"user_id={self.user_id} status={self.status}>"
        )
