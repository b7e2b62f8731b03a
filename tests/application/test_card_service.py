"""
Test suite for CardService.

System role: Verification of private card visibility on direct lookup
"""

import uuid
from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from cardbase.application.services.card_service import CardService
from cardbase.core.exceptions import (
    AuthenticationRequiredError,
    CardAccessForbiddenError,
    CardNotFoundError,
)
from tests.factories import make_card

CARD_CRUD = "cardbase.application.services.card_service.card_crud"


@pytest.fixture
def card_service() -> CardService:
    return CardService(db=AsyncMock(spec=AsyncSession))


@pytest.mark.asyncio
async def test_public_card_visible_to_anonymous(card_service) -> None:
    card = make_card()
    with patch(f"{CARD_CRUD}.get_by_id", new=AsyncMock(return_value=card)):
        assert await card_service.get_card(card.id, None) is card


@pytest.mark.asyncio
async def test_private_card_visible_to_author(card_service, user_id) -> None:
    card = make_card(author_id=user_id, private=True)
    with patch(f"{CARD_CRUD}.get_by_id", new=AsyncMock(return_value=card)):
        assert await card_service.get_card(card.id, user_id) is card


@pytest.mark.asyncio
async def test_private_card_requires_sign_in(card_service) -> None:
    card = make_card(private=True)
    with patch(f"{CARD_CRUD}.get_by_id", new=AsyncMock(return_value=card)):
        with pytest.raises(AuthenticationRequiredError):
            await card_service.get_card(card.id, None)


@pytest.mark.asyncio
async def test_private_card_forbidden_to_other_user(card_service, user_id) -> None:
    card = make_card(private=True)
    with patch(f"{CARD_CRUD}.get_by_id", new=AsyncMock(return_value=card)):
        with pytest.raises(CardAccessForbiddenError):
            await card_service.get_card(card.id, user_id)


@pytest.mark.asyncio
async def test_missing_card(card_service) -> None:
    with patch(f"{CARD_CRUD}.get_by_id", new=AsyncMock(return_value=None)):
        with pytest.raises(CardNotFoundError):
            await card_service.get_card(uuid.uuid4(), None)


@pytest.mark.asyncio
async def test_count(card_service) -> None:
    with patch(f"{CARD_CRUD}.count", new=AsyncMock(return_value=42)):
        assert await card_service.count_cards() == 42
