"""
Card API endpoints.

Routes:
- POST /card - Submit a new card
- DELETE /card - Delete own card
- POST /card/search[/{page}] - Semantic search
- POST /card/search/full_text[/{page}] - Full-text search
- GET /card/count - Total number of cards
- GET /card/{card_id} - Get single card

Dependencies: cardbase.application.services, cardbase.models
System role: Card management HTTP API
"""

import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Response, status

from cardbase.api.deps.auth import get_optional_user, require_user
from cardbase.api.deps.dependencies import (
    get_card_service,
    get_deletion_service,
    get_ingestion_service,
    get_retrieval_service,
)
from cardbase.application.services import (
    CardService,
    DeletionService,
    IngestionService,
    RetrievalService,
)
from cardbase.boundary.db.CRUD.card_crud import CardFilters
from cardbase.models.card import (
    CardCountResponse,
    CardResponse,
    CreateCardRequest,
    DeleteCardRequest,
    SearchCardRequest,
    SearchCardResponse,
)
from cardbase.models.common import MessageResponse
from cardbase.models.identity import UserIdentity

from .card_error_handling import handle_card_errors
from .card_responses import map_card_to_response, map_search_page_to_response
from .card_validators import validate_search

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/card", tags=["cards"])

ERROR_RESPONSES = {
    400: {"model": MessageResponse},
    401: {"model": MessageResponse},
    403: {"model": MessageResponse},
    404: {"model": MessageResponse},
    503: {"model": MessageResponse},
}


def _filters(request: SearchCardRequest) -> CardFilters:
    return CardFilters(
        oc_file_paths=request.filter_oc_file_path,
        links=request.filter_link_url,
    )


def _user_id(user: Optional[UserIdentity]) -> Optional[UUID]:
    return user.id if user else None


@router.post("", status_code=204, responses=ERROR_RESPONSES)
@handle_card_errors
async def create_card(
    request: CreateCardRequest,
    user: UserIdentity = Depends(require_user),
    ingestion_service: IngestionService = Depends(get_ingestion_service),
) -> Response:
    """
    Submit a new card.

    Args:
        request: CreateCardRequest with content, card_html, link, oc_file_path, private
        user: Signed-in author
        ingestion_service: Injected IngestionService

    Returns:
        Response: 204 on success

    Raises:
        HTTPException(400): Content too short or duplicate
        HTTPException(503): Backend unavailable
    """
    logger.info(
        "Creating card",
        extra={"author_id": str(user.id), "private": bool(request.private)},
    )

    card_id = await ingestion_service.create_card(
        content=request.content,
        author_id=user.id,
        card_html=request.card_html,
        link=request.link,
        oc_file_path=request.oc_file_path,
        is_private=bool(request.private),
    )

    logger.info("Card created successfully", extra={"card_id": str(card_id)})
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("", status_code=204, responses=ERROR_RESPONSES)
@handle_card_errors
async def delete_card(
    request: DeleteCardRequest,
    user: UserIdentity = Depends(require_user),
    deletion_service: DeletionService = Depends(get_deletion_service),
) -> Response:
    """
    Delete a card owned by the caller.

    Raises:
        HTTPException(401): Not signed in, or not the author
        HTTPException(404): Card not found
        HTTPException(503): Backend unavailable
    """
    logger.info(
        "Deleting card",
        extra={"card_id": str(request.card_uuid), "requester_id": str(user.id)},
    )

    await deletion_service.delete_card(request.card_uuid, user.id)

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/search/full_text", response_model=SearchCardResponse, responses=ERROR_RESPONSES)
@router.post("/search/full_text/{page}", response_model=SearchCardResponse, responses=ERROR_RESPONSES)
@handle_card_errors
async def search_full_text(
    request: SearchCardRequest,
    page: int = Path(1, ge=1),
    user: Optional[UserIdentity] = Depends(get_optional_user),
    retrieval_service: RetrievalService = Depends(get_retrieval_service),
) -> SearchCardResponse:
    """
    Full-text search over visible cards.

    Args:
        request: SearchCardRequest with content and optional filters
        page: 1-indexed page (default 1)
        user: Caller, if signed in
        retrieval_service: Injected RetrievalService

    Returns:
        SearchCardResponse: score_cards and total_card_pages
    """
    validate_search(request)

    result = await retrieval_service.search_full_text(
        request.content,
        page=page,
        current_user_id=_user_id(user),
        filters=_filters(request),
    )

    logger.info(
        "Full-text search completed",
        extra={"page": page, "results": len(result.results)},
    )
    return map_search_page_to_response(result)


@router.post("/search", response_model=SearchCardResponse, responses=ERROR_RESPONSES)
@router.post("/search/{page}", response_model=SearchCardResponse, responses=ERROR_RESPONSES)
@handle_card_errors
async def search_semantic(
    request: SearchCardRequest,
    page: int = Path(1, ge=1),
    user: Optional[UserIdentity] = Depends(get_optional_user),
    retrieval_service: RetrievalService = Depends(get_retrieval_service),
) -> SearchCardResponse:
    """
    Semantic search over visible cards.

    Args:
        request: SearchCardRequest with content and optional filters
        page: 1-indexed page (default 1)
        user: Caller, if signed in
        retrieval_service: Injected RetrievalService

    Returns:
        SearchCardResponse: score_cards in vector rank order and total_card_pages
    """
    validate_search(request)

    result = await retrieval_service.search_semantic(
        request.content,
        page=page,
        current_user_id=_user_id(user),
        filters=_filters(request),
    )
    return map_search_page_to_response(result)


@router.get("/count", response_model=CardCountResponse, responses=ERROR_RESPONSES)
@handle_card_errors
async def count_cards(
    card_service: CardService = Depends(get_card_service),
) -> CardCountResponse:
    """Total number of stored cards."""
    return CardCountResponse(total_count=await card_service.count_cards())


@router.get("/{card_id}", response_model=CardResponse, responses=ERROR_RESPONSES)
@handle_card_errors
async def get_card(
    card_id: UUID,
    user: Optional[UserIdentity] = Depends(get_optional_user),
    card_service: CardService = Depends(get_card_service),
) -> CardResponse:
    """
    Get single card by ID.

    Raises:
        HTTPException(401): Private card, anonymous caller
        HTTPException(403): Private card, caller is not the author
        HTTPException(404): Card not found
    """
    card = await card_service.get_card(card_id, _user_id(user))
    return map_card_to_response(card)
