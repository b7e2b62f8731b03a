"""
Test suite for IngestionService.

Tests word-count validation, duplicate policies and the create saga's
rollback and compensation paths.

System role: Verification of card creation orchestration
"""

import uuid
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from cardbase.application.services.ingestion_service import IngestionService
from cardbase.core.dedup_outcome import Collision, DedupStage, Unique
from cardbase.core.exceptions import (
    CardValidationError,
    DuplicateCardError,
    MetadataStoreError,
    VectorStoreError,
)
from cardbase.core.point_ref import Linked, Unlinked
from tests.factories import make_content

CARD_CRUD = "cardbase.application.services.ingestion_service.card_crud"
COLLISION_CRUD = "cardbase.application.services.ingestion_service.collision_crud"


@pytest.fixture
def mock_db_session() -> AsyncMock:
    """Provide mock async database session."""
    return AsyncMock(spec=AsyncSession)


@pytest.fixture
def mock_dedup_checker() -> MagicMock:
    checker = MagicMock()
    checker.check = AsyncMock(return_value=Unique(embedding=[0.5, 0.5, 0.5, 0.5]))
    return checker


@pytest.fixture
def ingestion_service(mock_db_session, mock_dedup_checker, mock_vector_store, card_settings):
    return IngestionService(
        db=mock_db_session,
        dedup_checker=mock_dedup_checker,
        vector_store=mock_vector_store,
        settings=card_settings,
    )


def created_row(*args, **kwargs) -> MagicMock:
    row = MagicMock()
    row.id = uuid.uuid4()
    return row


class TestValidation:
    """Minimum word count."""

    @pytest.mark.asyncio
    async def test_sixty_nine_words_rejected(self, ingestion_service, mock_dedup_checker, user_id) -> None:
        with pytest.raises(CardValidationError) as exc_info:
            await ingestion_service.create_card(make_content(69), author_id=user_id)

        assert exc_info.value.message == "Card content must be at least 70 words long"
        mock_dedup_checker.check.assert_not_called()

    @pytest.mark.asyncio
    async def test_seventy_words_accepted(self, ingestion_service, mock_dedup_checker, user_id) -> None:
        with patch(f"{CARD_CRUD}.create", new=AsyncMock(side_effect=created_row)):
            await ingestion_service.create_card(make_content(70), author_id=user_id)

        mock_dedup_checker.check.assert_awaited_once()


class TestUniqueContent:
    """Saga for new content."""

    @pytest.mark.asyncio
    async def test_writes_row_then_vector_then_commits(
        self, ingestion_service, mock_db_session, mock_vector_store, user_id
    ) -> None:
        create = AsyncMock(side_effect=created_row)
        with patch(f"{CARD_CRUD}.create", new=create):
            card_id = await ingestion_service.create_card(
                make_content(80),
                author_id=user_id,
                card_html="<p>x</p>",
                link="https://example.org",
                oc_file_path="files/aff.docx",
                is_private=True,
            )

        assert isinstance(card_id, uuid.UUID)
        fields = create.call_args.kwargs
        assert fields["author_id"] == user_id
        assert fields["private"] is True
        point = mock_vector_store.upsert_point.call_args.args[0]
        assert point.point_id == fields["vector_point_id"]
        assert point.embedding == [0.5, 0.5, 0.5, 0.5]
        assert point.payload["private"] is True
        assert point.payload["author_id"] == str(user_id)
        assert point.payload["oc_file_path"] == "files/aff.docx"
        assert point.payload["link"] == "https://example.org"
        assert isinstance(point.payload["created_at"], float)
        mock_db_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_public_payload_omits_unset_fields(
        self, ingestion_service, mock_vector_store, user_id
    ) -> None:
        with patch(f"{CARD_CRUD}.create", new=AsyncMock(side_effect=created_row)):
            await ingestion_service.create_card(make_content(80), author_id=user_id)

        payload = mock_vector_store.upsert_point.call_args.args[0].payload
        assert payload["private"] is False
        assert "oc_file_path" not in payload
        assert "link" not in payload

    @pytest.mark.asyncio
    async def test_vector_failure_rolls_back_row(
        self, ingestion_service, mock_db_session, mock_vector_store, user_id
    ) -> None:
        mock_vector_store.upsert_point.side_effect = VectorStoreError("down", operation="upsert")
        with patch(f"{CARD_CRUD}.create", new=AsyncMock(side_effect=created_row)):
            with pytest.raises(VectorStoreError):
                await ingestion_service.create_card(make_content(80), author_id=user_id)

        mock_db_session.rollback.assert_awaited_once()
        mock_db_session.commit.assert_not_called()

    @pytest.mark.asyncio
    async def test_commit_failure_deletes_vector(
        self, ingestion_service, mock_db_session, mock_vector_store, user_id
    ) -> None:
        mock_db_session.commit.side_effect = OperationalError("COMMIT", {}, Exception("lost"))
        with patch(f"{CARD_CRUD}.create", new=AsyncMock(side_effect=created_row)):
            with pytest.raises(MetadataStoreError):
                await ingestion_service.create_card(make_content(80), author_id=user_id)

        upserted = mock_vector_store.upsert_point.call_args.args[0].point_id
        mock_vector_store.delete_points.assert_awaited_once_with([upserted])

    @pytest.mark.asyncio
    async def test_failed_compensation_still_raises_commit_error(
        self, ingestion_service, mock_db_session, mock_vector_store, user_id
    ) -> None:
        mock_db_session.commit.side_effect = OperationalError("COMMIT", {}, Exception("lost"))
        mock_vector_store.delete_points.side_effect = VectorStoreError("down")
        with patch(f"{CARD_CRUD}.create", new=AsyncMock(side_effect=created_row)):
            with pytest.raises(MetadataStoreError):
                await ingestion_service.create_card(make_content(80), author_id=user_id)


class TestDuplicatePolicies:
    """Collision handling."""

    @pytest.mark.asyncio
    async def test_record_policy_writes_unlinked_row_and_audit(
        self, ingestion_service, mock_dedup_checker, mock_db_session, mock_vector_store, user_id
    ) -> None:
        existing_point = uuid.uuid4()
        matched_card = uuid.uuid4()
        mock_dedup_checker.check.return_value = Collision(
            point=Linked(existing_point),
            stage=DedupStage.LEXICAL,
            score=0.97,
            matched_card_id=matched_card,
        )
        create_card = AsyncMock(side_effect=created_row)
        create_collision = AsyncMock(side_effect=created_row)
        with patch(f"{CARD_CRUD}.create", new=create_card), patch(
            f"{COLLISION_CRUD}.create", new=create_collision
        ):
            with pytest.raises(DuplicateCardError) as exc_info:
                await ingestion_service.create_card(make_content(80), author_id=user_id)

        assert exc_info.value.message == "Card already exists"
        assert exc_info.value.recorded_card_id is not None
        assert create_card.call_args.kwargs["vector_point_id"] is None
        audit = create_collision.call_args.kwargs
        assert audit["collision_point_id"] == existing_point
        assert audit["matched_card_id"] == matched_card
        assert audit["stage"] == "lexical"
        mock_db_session.commit.assert_awaited_once()
        mock_vector_store.upsert_point.assert_not_called()

    @pytest.mark.asyncio
    async def test_record_policy_with_unlinked_match(
        self, ingestion_service, mock_dedup_checker, user_id
    ) -> None:
        mock_dedup_checker.check.return_value = Collision(
            point=Unlinked(), stage=DedupStage.LEXICAL, score=0.92
        )
        create_collision = AsyncMock(side_effect=created_row)
        with patch(f"{CARD_CRUD}.create", new=AsyncMock(side_effect=created_row)), patch(
            f"{COLLISION_CRUD}.create", new=create_collision
        ):
            with pytest.raises(DuplicateCardError) as exc_info:
                await ingestion_service.create_card(make_content(80), author_id=user_id)

        assert create_collision.call_args.kwargs["collision_point_id"] is None
        assert exc_info.value.collision_point_id is None

    @pytest.mark.asyncio
    async def test_reject_policy_writes_nothing(
        self, ingestion_service, mock_dedup_checker, mock_db_session, mock_vector_store, user_id
    ) -> None:
        ingestion_service.settings = ingestion_service.settings.model_copy(
            update={"duplicate_policy": "reject"}
        )
        mock_dedup_checker.check.return_value = Collision(
            point=Linked(uuid.uuid4()), stage=DedupStage.SEMANTIC, score=0.99
        )
        create = AsyncMock(side_effect=created_row)
        with patch(f"{CARD_CRUD}.create", new=create):
            with pytest.raises(DuplicateCardError) as exc_info:
                await ingestion_service.create_card(make_content(80), author_id=user_id)

        assert exc_info.value.recorded_card_id is None
        create.assert_not_called()
        mock_db_session.commit.assert_not_called()
        mock_vector_store.upsert_point.assert_not_called()
