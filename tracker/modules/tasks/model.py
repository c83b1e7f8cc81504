from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text, Enum, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from tracker.db.base import Base
import enum


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class TaskStatus(str, enum.Enum):
    UNASSIGNED = "unassigned"
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    PAUSED = "paused"


STATUS_LABELS = {
    TaskStatus.UNASSIGNED: "Unassigned",
    TaskStatus.PENDING: "Pending",
    TaskStatus.IN_PROGRESS: "In Progress",
    TaskStatus.COMPLETED: "Completed",
    TaskStatus.PAUSED: "Paused",
}


class LinkType(str, enum.Enum):
    PLUGINS = "plugins"
    DOCUMENTATION = "documentation"
    TUTORIALS = "tutorials"


class Task(Base):
    __tablename__ = "tasks"
    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=True)
    status = Column(
        Enum(TaskStatus, name="task_status", values_callable=_enum_values),
        nullable=False,
        default=TaskStatus.UNASSIGNED,
        index=True
    )

    created_by = Column(Integer, ForeignKey('users.id'), nullable=False, index=True)

    paused_reason = Column(Text, nullable=True)
    paused_by = Column(Integer, ForeignKey('users.id'), nullable=True)
    paused_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    creator = relationship("User", foreign_keys=[created_by])
    pauser = relationship("User", foreign_keys=[paused_by])
    assignments = relationship(
        "TaskAssignment",
        back_populates="task",
        cascade="all, delete-orphan",
    )
    assignees = relationship(
        "User",
        secondary="task_assignments",
        viewonly=True,
        order_by="User.first_name",
    )
    links = relationship(
        "TaskLink",
        back_populates="task",
        cascade="all, delete-orphan",
        order_by="TaskLink.id",
    )
    comments = relationship(
        "TaskComment",
        back_populates="task",
        cascade="all, delete-orphan",
        order_by="TaskComment.id",
    )
    assignment_requests = relationship(
        "AssignmentRequest",
        back_populates="task",
        cascade="all, delete-orphan",
    )

    @property
    def status_label(self) -> str:
        return STATUS_LABELS.get(self.status, str(self.status))

    def __repr__(self):
        return f"<Task id={self.id} title='{self.title}' status={self.status}>"


class TaskAssignment(Base):
    __tablename__ = "task_assignments"
    __table_args__ = (UniqueConstraint("task_id", "user_id", name="uq_task_assignments_task_user"),)

    id = Column(Integer, primary_key=True, index=True)
    task_id = Column(Integer, ForeignKey('tasks.id', ondelete='CASCADE'), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    assigned_at = Column(DateTime(timezone=True), server_default=func.now())

    task = relationship("Task", back_populates="assignments")
    user = relationship("User")

    def __repr__(self):
        return f"<TaskAssignment task_id={self.task_id} user_id={self.user_id}>"


class TaskLink(Base):
    __tablename__ = "task_links"

    id = Column(Integer, primary_key=True, index=True)
    task_id = Column(Integer, ForeignKey('tasks.id', ondelete='CASCADE'), nullable=False, index=True)
    link_type = Column(
        Enum(LinkType, name="task_link_type", values_callable=_enum_values),
        nullable=False,
    )
    name = Column(String(255), nullable=False)
    url = Column(String(2048), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    task = relationship("Task", back_populates="links")
