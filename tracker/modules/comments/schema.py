from pydantic import BaseModel
from typing import Optional
from datetime import datetime
from tracker.modules.auth.schema import UserMinimalResponse


class CommentResponse(BaseModel):
    id: int
    task_id: int
    user_id: int
    content: str
    image_url: Optional[str]
    user: Optional[UserMinimalResponse] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
