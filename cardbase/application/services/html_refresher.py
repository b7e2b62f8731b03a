"""
Best-effort HTML refresh for collided cards.

When a submission collides with an existing card, the existing card's HTML
is overwritten with the new submission's HTML. The write runs as a
background task with its own database session; the request never waits
for it and never sees its errors. Failures are logged.

Dependencies: asyncio, sqlalchemy, cardbase.boundary.db
System role: Fire-and-forget rendering refresh on the dedup path
"""

import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from cardbase.boundary.db.CRUD.card_crud import card_crud
from cardbase.core.point_ref import Linked, PointRef
from cardbase.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)


class HtmlRefresher:
    """
    Schedules HTML overwrites of existing cards.

    Tasks are tracked so shutdown can wait for in-flight writes.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        enabled: bool = True,
    ) -> None:
        """
        Args:
            session_factory: Factory for the per-task database session
            enabled: When False, schedule() is a no-op
        """
        self._session_factory = session_factory
        self._enabled = enabled
        self._tasks: set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        """Number of refresh tasks still running."""
        return len(self._tasks)

    def schedule(self, point: PointRef, card_html: str | None) -> asyncio.Task | None:
        """
        Start a background overwrite of the HTML of the card owning ``point``.

        ``card_html`` of None clears the existing rendering. Unlinked points
        have no card to refresh.

        Args:
            point: Point reference of the existing card
            card_html: New rendering from the duplicate submission

        Returns:
            The scheduled task, or None when nothing was scheduled
        """
        if not self._enabled or not isinstance(point, Linked):
            return None

        task = asyncio.create_task(self._refresh(point, card_html))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _refresh(self, point: Linked, card_html: str | None) -> None:
        try:
            async with self._session_factory() as session:
                updated = await card_crud.update_html_by_point_id(
                    session, point.point_id, card_html
                )
                await session.commit()
            logger.info(
                "Refreshed card HTML",
                extra={"point_id": str(point.point_id), "rows": updated},
            )
        except Exception as e:
            log_exception_with_context(
                logger,
                "Card HTML refresh failed",
                e,
                point_id=point.point_id,
            )

    async def drain(self) -> None:
        """Wait for all in-flight refresh tasks (application shutdown)."""
        if self._tasks:
            logger.info(f"{__name__}:drain - Waiting for {len(self._tasks)} refresh tasks")
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
