from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


# ────────────────────────────────────────────────────────────────
# REQUEST SCHEMAS
# ────────────────────────────────────────────────────────────────

class SectionCreateRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    slug: str = Field(..., min_length=1, max_length=255, pattern=SLUG_PATTERN)
    order: int = Field(default=0, ge=0)


class SectionUpdateRequest(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    slug: Optional[str] = Field(default=None, min_length=1, max_length=255, pattern=SLUG_PATTERN)
    order: Optional[int] = Field(default=None, ge=0)


class PageCreateRequest(BaseModel):
    section_id: int
    title: str = Field(..., min_length=1, max_length=255)
    content: str = ""


class PageUpdateRequest(BaseModel):
    section_id: Optional[int] = None
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    content: Optional[str] = None


class ReorderRequest(BaseModel):
    ids: List[int] = Field(..., min_length=1, description="Ids in their new display order")


# ────────────────────────────────────────────────────────────────
# RESPONSE SCHEMAS
# ────────────────────────────────────────────────────────────────

class PageSummary(BaseModel):
    id: int
    section_id: int
    title: str
    order: int

    model_config = {"from_attributes": True}


class PageResponse(PageSummary):
    content: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class SectionResponse(BaseModel):
    id: int
    title: str
    slug: str
    order: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class SectionWithPagesResponse(SectionResponse):
    pages: List[PageSummary] = []

    model_config = {"from_attributes": True}


class SectionDetailResponse(SectionResponse):
    pages: List[PageResponse] = []

    model_config = {"from_attributes": True}


class PageWithSectionResponse(PageResponse):
    section: SectionResponse

    model_config = {"from_attributes": True}
