"""
Card ORM model.

Represents a submitted card: its text, rendering, provenance, owner,
visibility and the link to its entry in the vector index.

Dependencies: sqlalchemy, cardbase.boundary.db.base
System role: Authoritative card metadata (source of truth)
"""

from uuid import UUID

from sqlalchemy import Boolean, Index, Integer, String, Text, Uuid, cast, func
from sqlalchemy.dialects.postgresql import REGCONFIG
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cardbase.boundary.db.base import Base, UUIDMixin, TimestampMixin

FULL_TEXT_CONFIG = "english"


class CardModel(Base, UUIDMixin, TimestampMixin):
    """
    Card ORM model.

    A card with a vector_point_id owns exactly one vector entry under that
    ID. Cards recorded as duplicates have no vector_point_id; their
    collision row names the point they collided with.

    Attributes:
        id: UUID primary key (auto-generated, immutable)
        content: Card text body (at least the configured minimum word count)
        card_html: Rendered/annotated form of the content
        link: Source URL
        oc_file_path: Source file path
        author_id: Owning user ID (immutable)
        private: When true only the author may read the card
        vector_point_id: Key of the card's vector entry; unique when present
        vote_score: Aggregate vote score maintained outside this service
        created_at: Creation timestamp (UTC)
        updated_at: Last modification timestamp (UTC)

    Relationships:
        collisions: CardCollisionModel rows recorded for this card
    """

    __tablename__ = "cards"

    content: Mapped[str] = mapped_column(Text, nullable=False)

    card_html: Mapped[str | None] = mapped_column(Text, nullable=True)

    link: Mapped[str | None] = mapped_column(String(2048), nullable=True)

    oc_file_path: Mapped[str | None] = mapped_column(String(2048), nullable=True)

    author_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        nullable=False,
        index=True,
    )

    private: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
    )

    vector_point_id: Mapped[UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        nullable=True,
        unique=True,
        doc="Vector index key; NULL for duplicates and skipped vector writes",
    )

    vote_score: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
    )

    # Relationships
    collisions = relationship(
        "CardCollisionModel",
        back_populates="card",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


def content_tsvector(column=CardModel.content):
    """to_tsvector expression shared by the full-text index and queries."""
    return func.to_tsvector(cast(FULL_TEXT_CONFIG, REGCONFIG), column)


# PostgreSQL-only search indexes
Index(
    "ix_cards_content_fts",
    content_tsvector(),
    postgresql_using="gin",
).ddl_if(dialect="postgresql")

Index(
    "ix_cards_content_trgm",
    CardModel.content,
    postgresql_using="gin",
    postgresql_ops={"content": "gin_trgm_ops"},
).ddl_if(dialect="postgresql")
