from pydantic import BaseModel, Field
from typing import Optional, Literal
from datetime import datetime
from tracker.modules.requests.model import RequestStatus
from tracker.modules.tasks.model import TaskStatus
from tracker.modules.auth.schema import UserMinimalResponse


class ReviewRequest(BaseModel):
    action: Literal["approved", "rejected"]
    admin_comment: Optional[str] = Field(default=None, max_length=2000)


class TaskSummary(BaseModel):
    id: int
    title: str
    status: TaskStatus

    model_config = {"from_attributes": True}


class AssignmentRequestResponse(BaseModel):
    id: int
    task_id: int
    user_id: int
    status: RequestStatus
    admin_comment: Optional[str] = None
    reviewed_by: Optional[int] = None
    reviewed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    task: Optional[TaskSummary] = None

    model_config = {"from_attributes": True}


class PendingRequestResponse(AssignmentRequestResponse):
    user: Optional[UserMinimalResponse] = None

    model_config = {"from_attributes": True}
