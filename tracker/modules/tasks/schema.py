from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from tracker.modules.tasks.model import TaskStatus, LinkType
from tracker.modules.auth.schema import UserMinimalResponse
from tracker.modules.comments.schema import CommentResponse


# ────────────────────────────────────────────────────────────────
# REQUEST SCHEMAS
# ────────────────────────────────────────────────────────────────

class TaskLinkInput(BaseModel):
    link_type: LinkType = Field(..., description="plugins, documentation or tutorials")
    name: str = Field(default="", max_length=255)
    url: str = Field(default="", max_length=2048)


class TaskCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=255, description="Task title")
    description: Optional[str] = Field(default=None, max_length=10000, description="Task description")
    links: List[TaskLinkInput] = Field(default_factory=list, description="External resources")


class TaskUpdateRequest(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=10000)
    status: Optional[TaskStatus] = None
    # None leaves links untouched, [] removes them all
    links: Optional[List[TaskLinkInput]] = None


class TaskStatusUpdateRequest(BaseModel):
    status: TaskStatus = Field(..., description="New task status")


class AssignUsersRequest(BaseModel):
    user_ids: List[int] = Field(default_factory=list, description="Full set of assignees")


class PauseTaskRequest(BaseModel):
    reason: str = Field(..., min_length=1, max_length=2000)


# ────────────────────────────────────────────────────────────────
# RESPONSE SCHEMAS
# ────────────────────────────────────────────────────────────────

class TaskLinkResponse(BaseModel):
    id: int
    link_type: LinkType
    name: str
    url: str

    model_config = {"from_attributes": True}


class TaskResponse(BaseModel):
    id: int
    title: str
    description: Optional[str]
    status: TaskStatus
    status_label: str
    created_by: int
    paused_reason: Optional[str] = None
    paused_by: Optional[int] = None
    paused_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class TaskListResponse(TaskResponse):
    creator: Optional[UserMinimalResponse] = None
    assignees: List[UserMinimalResponse] = []

    model_config = {"from_attributes": True}


class TaskDetailResponse(TaskListResponse):
    pauser: Optional[UserMinimalResponse] = None
    links: List[TaskLinkResponse] = []
    comments: List[CommentResponse] = []

    model_config = {"from_attributes": True}
