from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from tracker.db.base import Base


class DocumentationSection(Base):
    __tablename__ = "documentation_sections"
    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, unique=True, index=True)
    order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    pages = relationship(
        "DocumentationPage",
        back_populates="section",
        cascade="all, delete-orphan",
        order_by="DocumentationPage.order",
    )

    def __repr__(self):
        return f"<DocumentationSection id={self.id} slug={self.slug} order={self.order}>"


class DocumentationPage(Base):
    __tablename__ = "documentation_pages"
    id = Column(Integer, primary_key=True, index=True)
    section_id = Column(
        Integer, ForeignKey('documentation_sections.id', ondelete='CASCADE'), nullable=False, index=True
    )
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False, default="")
    order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    section = relationship("DocumentationSection", back_populates="pages")

    def __repr__(self):
        return f"<DocumentationPage id={self.id} section_id={self.section_id} order={self.order}>"
