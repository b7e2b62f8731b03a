"""
Card collision ORM model.

Audit record written when a submission is rejected as a duplicate under
the 'record' duplicate policy.

Dependencies: sqlalchemy, cardbase.boundary.db.base
System role: Duplicate submission history
"""

from uuid import UUID

from sqlalchemy import Float, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cardbase.boundary.db.base import Base, UUIDMixin, TimestampMixin


class CardCollisionModel(Base, UUIDMixin, TimestampMixin):
    """
    Link between a rejected card and the content it duplicated.

    Attributes:
        id: UUID primary key (auto-generated)
        card_id: The rejected card's metadata row (cascade delete)
        collision_point_id: Vector point of the existing card, NULL when the
            matched card had none
        matched_card_id: Existing card's ID when the detecting stage knows it
        stage: 'lexical' or 'semantic'
        score: Score that reached the threshold
    """

    __tablename__ = "card_collisions"

    card_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("cards.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    collision_point_id: Mapped[UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        nullable=True,
        index=True,
    )

    matched_card_id: Mapped[UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        nullable=True,
    )

    stage: Mapped[str] = mapped_column(String(16), nullable=False)

    score: Mapped[float] = mapped_column(Float, nullable=False)

    # Relationships
    card = relationship("CardModel", back_populates="collisions")
