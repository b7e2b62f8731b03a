"""
Card response mapping utilities.

Transforms ORM models and service results into Pydantic response models.

Dependencies: cardbase.models.card
System role: Card response transformation
"""

from cardbase.application.services.retrieval_service import SearchPage
from cardbase.boundary.db.models.card_model import CardModel
from cardbase.models.card import CardResponse, ScoreCard, SearchCardResponse


def map_card_to_response(card: CardModel) -> CardResponse:
    """
    Transform a CardModel into CardResponse.

    Args:
        card: ORM card row

    Returns:
        CardResponse: Pydantic model for API response
    """
    return CardResponse.model_validate(card)


def map_search_page_to_response(page: SearchPage) -> SearchCardResponse:
    """
    Transform a SearchPage into SearchCardResponse, keeping rank order.

    Args:
        page: Service search result

    Returns:
        SearchCardResponse: Pydantic model for API response
    """
    return SearchCardResponse(
        score_cards=[
            ScoreCard(metadata=map_card_to_response(hit.card), score=hit.score)
            for hit in page.results
        ],
        total_card_pages=page.total_pages,
        orphaned_point_ids=page.orphaned_point_ids,
    )
