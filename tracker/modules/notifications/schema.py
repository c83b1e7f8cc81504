from pydantic import BaseModel
from typing import Optional
from datetime import datetime
from tracker.modules.requests.schema import AssignmentRequestResponse


class NotificationResponse(BaseModel):
    id: int
    user_id: int
    type: str
    title: str
    message: str
    link: Optional[str] = None
    read: bool
    task_comment_id: Optional[int] = None
    assignment_request_id: Optional[int] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class RequestWithRecencyResponse(AssignmentRequestResponse):
    is_recent: bool = False


class BadgeCountsResponse(BaseModel):
    notifications: int
    pending_requests: int
