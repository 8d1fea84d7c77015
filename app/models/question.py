"""Q&A question model."""
from uuid import UUID

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from .base import Auditable, Base, SoftDeletable


class Question(Auditable, SoftDeletable, Base):
    """Represents a community question."""

    __tablename__ = "questions"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    slug: Mapped[str] = mapped_column(String(250), unique=True, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    author_id: Mapped[UUID] = mapped_column(Uuid, nullable=False, index=True)
    category_id: Mapped[UUID | None] = mapped_column(ForeignKey("categories.id"), nullable=True)
    view_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    vote_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_resolved: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    accepted_answer_id: Mapped[UUID | None] = mapped_column(Uuid, nullable=True)

    def mark_as_resolved(self, answer_id: UUID) -> None:
        self.accepted_answer_id = answer_id
        self.is_resolved = True

    def mark_as_unresolved(self) -> None:
        self.accepted_answer_id = None
        self.is_resolved = False
