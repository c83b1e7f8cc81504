"""
docs/service.py

Documentation wiki: ordered sections, each holding ordered pages.
Reordering takes the ids in their new visual order and rewrites the
order column as 0..N-1.
"""

from typing import Optional
from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload
from fastapi import HTTPException, status
from tracker.modules.docs.model import DocumentationSection, DocumentationPage
from tracker.modules.docs.schema import (
    SectionCreateRequest,
    SectionUpdateRequest,
    PageCreateRequest,
    PageUpdateRequest,
)
from tracker.core import cache
from tracker.core.logger import logger

DOCS_PATHS = ("/docs", "/admin/documentation")


def _revalidate() -> None:
    cache.revalidate_path(*DOCS_PATHS)


def _commit(db: Session, action: str) -> None:
    try:
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"[{action}] DB error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save documentation. Please try again.",
        )


# ================================================================
# LOOKUPS
# ================================================================

def get_section_or_404(db: Session, section_id: int) -> DocumentationSection:
    section = db.query(DocumentationSection).filter(DocumentationSection.id == section_id).first()
    if not section:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Section {section_id} not found",
        )
    return section


def get_page_or_404(db: Session, page_id: int) -> DocumentationPage:
    page = db.query(DocumentationPage).filter(DocumentationPage.id == page_id).first()
    if not page:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Page {page_id} not found",
        )
    return page


def _ensure_slug_free(db: Session, slug: str, exclude_id: Optional[int] = None) -> None:
    query = db.query(DocumentationSection).filter(DocumentationSection.slug == slug)
    if exclude_id is not None:
        query = query.filter(DocumentationSection.id != exclude_id)
    if query.first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"A section with slug '{slug}' already exists",
        )


# ================================================================
# VIEWER
# ================================================================

def list_sections(db: Session) -> list[DocumentationSection]:
    return (
        db.query(DocumentationSection)
        .options(selectinload(DocumentationSection.pages))
        .order_by(DocumentationSection.order, DocumentationSection.id)
        .all()
    )


def get_section_by_slug(db: Session, slug: str) -> DocumentationSection:
    section = (
        db.query(DocumentationSection)
        .options(selectinload(DocumentationSection.pages))
        .filter(DocumentationSection.slug == slug)
        .first()
    )
    if not section:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Section '{slug}' not found",
        )
    return section


def get_page_in_section(db: Session, slug: str, page_id: int) -> DocumentationPage:
    page = (
        db.query(DocumentationPage)
        .join(DocumentationSection, DocumentationSection.id == DocumentationPage.section_id)
        .filter(DocumentationSection.slug == slug, DocumentationPage.id == page_id)
        .first()
    )
    if not page:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Page {page_id} not found in section '{slug}'",
        )
    return page


# ================================================================
# SECTIONS
# ================================================================

def create_section(db: Session, data: SectionCreateRequest) -> DocumentationSection:
    _ensure_slug_free(db, data.slug)
    section = DocumentationSection(title=data.title, slug=data.slug, order=data.order)
    db.add(section)
    _commit(db, "CreateSection")
    db.refresh(section)

    _revalidate()
    logger.info(f"[Docs] Section {section.id} '{section.slug}' created")
    return section


def update_section(db: Session, section_id: int, data: SectionUpdateRequest) -> DocumentationSection:
    section = get_section_or_404(db, section_id)
    if data.slug is not None and data.slug != section.slug:
        _ensure_slug_free(db, data.slug, exclude_id=section.id)
        section.slug = data.slug
    if data.title is not None:
        section.title = data.title
    if data.order is not None:
        section.order = data.order

    _commit(db, "UpdateSection")
    db.refresh(section)
    _revalidate()
    return section


def delete_section(db: Session, section_id: int) -> dict:
    section = get_section_or_404(db, section_id)
    db.delete(section)
    _commit(db, "DeleteSection")

    _revalidate()
    logger.info(f"[Docs] Section {section_id} deleted")
    return {"message": f"Section {section_id} deleted successfully"}


def _reject_duplicates(ids: list[int], label: str) -> None:
    if len(set(ids)) != len(ids):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Each {label} id may appear only once in a reorder",
        )


def reorder_sections(db: Session, ids: list[int]) -> list[DocumentationSection]:
    _reject_duplicates(ids, "section")
    sections = db.query(DocumentationSection).filter(DocumentationSection.id.in_(ids)).all()
    by_id = {s.id: s for s in sections}
    missing = [i for i in ids if i not in by_id]
    if missing:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Sections not found: {missing}",
        )

    for position, section_id in enumerate(ids):
        by_id[section_id].order = position
    _commit(db, "ReorderSections")

    _revalidate()
    return [by_id[i] for i in ids]


# ================================================================
# PAGES
# ================================================================

def next_page_order(db: Session, section_id: int) -> int:
    current = (
        db.query(func.max(DocumentationPage.order))
        .filter(DocumentationPage.section_id == section_id)
        .scalar()
    )
    return 0 if current is None else current + 1


def create_page(db: Session, data: PageCreateRequest) -> DocumentationPage:
    get_section_or_404(db, data.section_id)
    page = DocumentationPage(
        section_id=data.section_id,
        title=data.title,
        content=data.content,
        order=next_page_order(db, data.section_id),
    )
    db.add(page)
    _commit(db, "CreatePage")
    db.refresh(page)

    _revalidate()
    logger.info(f"[Docs] Page {page.id} created in section {page.section_id} at {page.order}")
    return page


def update_page(db: Session, page_id: int, data: PageUpdateRequest) -> DocumentationPage:
    page = get_page_or_404(db, page_id)
    if data.section_id is not None and data.section_id != page.section_id:
        get_section_or_404(db, data.section_id)
        page.order = next_page_order(db, data.section_id)
        page.section_id = data.section_id
    if data.title is not None:
        page.title = data.title
    if data.content is not None:
        page.content = data.content

    _commit(db, "UpdatePage")
    db.refresh(page)
    _revalidate()
    return page


def delete_page(db: Session, page_id: int) -> dict:
    page = get_page_or_404(db, page_id)
    db.delete(page)
    _commit(db, "DeletePage")

    _revalidate()
    logger.info(f"[Docs] Page {page_id} deleted")
    return {"message": f"Page {page_id} deleted successfully"}


def reorder_pages(db: Session, ids: list[int]) -> list[DocumentationPage]:
    _reject_duplicates(ids, "page")
    pages = db.query(DocumentationPage).filter(DocumentationPage.id.in_(ids)).all()
    by_id = {p.id: p for p in pages}
    missing = [i for i in ids if i not in by_id]
    if missing:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Pages not found: {missing}",
        )
    if len({p.section_id for p in pages}) > 1:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Pages can only be reordered within a single section",
        )

    for position, page_id in enumerate(ids):
        by_id[page_id].order = position
    _commit(db, "ReorderPages")

    _revalidate()
    return [by_id[i] for i in ids]
