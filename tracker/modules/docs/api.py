from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from tracker.db.session import get_db
from tracker.modules.auth.model import User
from tracker.modules.docs.schema import (
    SectionCreateRequest,
    SectionUpdateRequest,
    PageCreateRequest,
    PageUpdateRequest,
    ReorderRequest,
    PageSummary,
    PageResponse,
    SectionResponse,
    SectionWithPagesResponse,
    SectionDetailResponse,
    PageWithSectionResponse,
)
from tracker.modules.docs import service
from tracker.core.cache import cached_page
from tracker.core.dependencies import get_current_user, require_admin
from tracker.core.response import success
from tracker.routes.docs import DOCS_ROUTES, DOCS_PREFIX, DOCS_TAG

router = APIRouter(prefix=DOCS_PREFIX, tags=[DOCS_TAG])

_CLEAN_RESPONSES = {
    422: {"description": "excluded"},
    500: {"description": "excluded"},
}


def _index_payload(db: Session) -> list[dict]:
    return [
        SectionWithPagesResponse.model_validate(s).model_dump(mode="json")
        for s in service.list_sections(db)
    ]


# ════════════════════════════════════════════════════════
# VIEWER
# ════════════════════════════════════════════════════════

@router.get(
    DOCS_ROUTES["index"],
    responses={200: {"description": "Documentation index"}, **_CLEAN_RESPONSES},
)
def docs_index(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    data = cached_page("/docs", lambda: _index_payload(db))
    return success(data=data, message="Documentation fetched successfully")


@router.get(
    DOCS_ROUTES["section"],
    responses={
        200: {"description": "Section with pages"},
        404: {"description": "Section not found"},
        **_CLEAN_RESPONSES,
    },
)
def docs_section(
    slug: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    data = cached_page(
        f"/docs/{slug}",
        lambda: SectionDetailResponse.model_validate(service.get_section_by_slug(db, slug)).model_dump(mode="json"),
    )
    return success(data=data, message="Section fetched successfully")


@router.get(
    DOCS_ROUTES["page"],
    responses={
        200: {"description": "Documentation page"},
        404: {"description": "Page not found"},
        **_CLEAN_RESPONSES,
    },
)
def docs_page(
    slug: str,
    page_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    data = cached_page(
        f"/docs/{slug}/{page_id}",
        lambda: PageWithSectionResponse.model_validate(
            service.get_page_in_section(db, slug, page_id)
        ).model_dump(mode="json"),
    )
    return success(data=data, message="Page fetched successfully")


# ════════════════════════════════════════════════════════
# ADMIN: SECTIONS
# ════════════════════════════════════════════════════════

@router.get(
    DOCS_ROUTES["admin_index"],
    responses={
        200: {"description": "Documentation admin index"},
        403: {"description": "Admin access required"},
        **_CLEAN_RESPONSES,
    },
)
def admin_index(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    data = cached_page("/admin/documentation", lambda: _index_payload(db))
    return success(data=data, message="Documentation fetched successfully")


@router.post(
    DOCS_ROUTES["create_section"],
    status_code=201,
    responses={
        201: {"description": "Section created"},
        400: {"description": "Slug already in use"},
        403: {"description": "Admin access required"},
        **_CLEAN_RESPONSES,
    },
)
def create_section(
    data: SectionCreateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    section = service.create_section(db, data)
    return success(
        data=SectionResponse.model_validate(section).model_dump(mode="json"),
        message="Section created",
        status_code=201,
    )


@router.put(
    DOCS_ROUTES["reorder_sections"],
    responses={
        200: {"description": "Sections reordered"},
        400: {"description": "Duplicate section id"},
        404: {"description": "Unknown section id"},
        **_CLEAN_RESPONSES,
    },
)
def reorder_sections(
    data: ReorderRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    sections = service.reorder_sections(db, data.ids)
    return success(
        data=[SectionResponse.model_validate(s).model_dump(mode="json") for s in sections],
        message="Sections reordered",
    )


@router.patch(
    DOCS_ROUTES["update_section"],
    responses={
        200: {"description": "Section updated"},
        400: {"description": "Slug already in use"},
        404: {"description": "Section not found"},
        **_CLEAN_RESPONSES,
    },
)
def update_section(
    section_id: int,
    data: SectionUpdateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    section = service.update_section(db, section_id, data)
    return success(data=SectionResponse.model_validate(section).model_dump(mode="json"), message="Section updated")


@router.delete(
    DOCS_ROUTES["delete_section"],
    responses={
        200: {"description": "Section deleted"},
        404: {"description": "Section not found"},
        **_CLEAN_RESPONSES,
    },
)
def delete_section(
    section_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    return success(data=service.delete_section(db, section_id), message="Section deleted")


# ════════════════════════════════════════════════════════
# ADMIN: PAGES
# ════════════════════════════════════════════════════════

@router.post(
    DOCS_ROUTES["create_page"],
    status_code=201,
    responses={
        201: {"description": "Page created"},
        404: {"description": "Section not found"},
        **_CLEAN_RESPONSES,
    },
)
def create_page(
    data: PageCreateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    page = service.create_page(db, data)
    return success(
        data=PageResponse.model_validate(page).model_dump(mode="json"),
        message="Page created",
        status_code=201,
    )


@router.put(
    DOCS_ROUTES["reorder_pages"],
    responses={
        200: {"description": "Pages reordered"},
        400: {"description": "Duplicate page id or mixed sections"},
        404: {"description": "Unknown page id"},
        **_CLEAN_RESPONSES,
    },
)
def reorder_pages(
    data: ReorderRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    pages = service.reorder_pages(db, data.ids)
    return success(
        data=[PageSummary.model_validate(p).model_dump(mode="json") for p in pages],
        message="Pages reordered",
    )


@router.patch(
    DOCS_ROUTES["update_page"],
    responses={
        200: {"description": "Page updated"},
        404: {"description": "Page or section not found"},
        **_CLEAN_RESPONSES,
    },
)
def update_page(
    page_id: int,
    data: PageUpdateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    page = service.update_page(db, page_id, data)
    return success(data=PageResponse.model_validate(page).model_dump(mode="json"), message="Page updated")


@router.delete(
    DOCS_ROUTES["delete_page"],
    responses={
        200: {"description": "Page deleted"},
        404: {"description": "Page not found"},
        **_CLEAN_RESPONSES,
    },
)
def delete_page(
    page_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    return success(data=service.delete_page(db, page_id), message="Page deleted")
