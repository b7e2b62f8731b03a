"""
Card domain models and schemas.

Request/response schemas for card creation, deletion, lookup and search.
Field names match the public JSON contract.

Dependencies: pydantic
System role: Card API contracts
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CreateCardRequest(BaseModel):
    """Request schema for submitting a new card."""

    content: str = Field(..., description="Card text body")
    card_html: str | None = Field(None, description="Rendered form of the content")
    link: str | None = Field(None, max_length=2048, description="Source URL")
    oc_file_path: str | None = Field(None, max_length=2048, description="Source file path")
    private: bool | None = Field(None, description="Restrict visibility to the author")


class DeleteCardRequest(BaseModel):
    """Request schema for deleting a card."""

    card_uuid: uuid.UUID = Field(..., description="ID of the card to delete")


class SearchCardRequest(BaseModel):
    """Request schema for semantic and full-text search."""

    content: str = Field(..., min_length=1, description="Search text")
    filter_oc_file_path: list[str] | None = Field(
        None, description="Only return cards from these source files"
    )
    filter_link_url: list[str] | None = Field(
        None, description="Only return cards with these links"
    )


class CardResponse(BaseModel):
    """Card metadata as returned by lookup and search."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    content: str
    card_html: str | None
    link: str | None
    oc_file_path: str | None
    author_id: uuid.UUID
    private: bool
    vote_score: int
    created_at: datetime
    updated_at: datetime


class ScoreCard(BaseModel):
    """A search hit: card metadata with its score."""

    metadata: CardResponse
    score: float


class SearchCardResponse(BaseModel):
    """Response schema for both search modes."""

    score_cards: list[ScoreCard]
    total_card_pages: int
    orphaned_point_ids: list[uuid.UUID] | None = Field(
        None,
        description="Ranked neighbours with no metadata row (orphan_policy=warn only)",
    )


class CardCountResponse(BaseModel):
    """Response schema for the card count."""

    total_count: int
