"""Concurrent loading of everything a series detail screen shows.

Five independent requests are issued per activation. Each completion is
applied on the event loop thread, so a slot mutation and the selection
re-resolution it triggers happen in one step without locking.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Any, Protocol

from jellyresume.detail.alerts import AlertChannel, FetchFailure, RequestKind
from jellyresume.detail.state import DetailState
from jellyresume.errors import get_friendly_message, log_error
from jellyresume.jellyfin.models import Episode, Image, Item, Season, SeriesDetail

logger = logging.getLogger(__name__)


class MediaClient(Protocol):
    """The media-server operations the coordinator depends on."""

    async def get_series_detail(self, item_id: str) -> SeriesDetail: ...

    async def get_seasons(self, item_id: str) -> Sequence[Season]: ...

    async def get_episodes(self, item_id: str) -> Sequence[Episode]: ...

    async def get_images(self, item_id: str) -> Sequence[Image]: ...

    async def get_similar_items(self, item_id: str) -> Sequence[Item]: ...


class FetchCoordinator:
    """Issues the detail screen's requests and routes their results.

    Successful payloads go to the matching ``DetailState`` slot; failures
    are published to the alert channel and leave every slot untouched.
    Requests are never retried or cancelled, and one failing request has no
    effect on the others.
    """

    def __init__(
        self,
        client: MediaClient,
        state: DetailState,
        alerts: AlertChannel | None = None,
        *,
        log_errors: bool = False,
    ) -> None:
        """Initialize the coordinator.

        Args:
            client: Media-server client.
            state: State container receiving the results.
            alerts: Channel failures are published to. A new one is created
                if not provided.
            log_errors: Also append failures to the error log file.
        """
        self._client = client
        self._state = state
        self.alerts = alerts if alerts is not None else AlertChannel()
        self._log_errors = log_errors
        self._in_flight: set[asyncio.Task[FetchFailure | None]] = set()

    def _requests(
        self,
    ) -> list[tuple[RequestKind, Callable[[str], Awaitable[Any]], Callable[[Any], None]]]:
        client, state = self._client, self._state
        return [
            (RequestKind.SERIES_DETAIL, client.get_series_detail, state.set_series_detail),
            (RequestKind.SEASONS, client.get_seasons, state.set_seasons),
            (RequestKind.EPISODES, client.get_episodes, state.set_episodes),
            (RequestKind.IMAGES, client.get_images, state.set_images),
            (RequestKind.SIMILAR_ITEMS, client.get_similar_items, state.set_similar_items),
        ]

    @property
    def in_flight(self) -> int:
        """Number of requests that have not completed yet."""
        return len(self._in_flight)

    def load(self) -> list[asyncio.Task[FetchFailure | None]]:
        """Schedule all requests for the state's item.

        Must be called from a running event loop. Calling again while a
        batch is still running schedules a second, overlapping batch.

        Returns:
            The scheduled tasks, one per request.
        """
        item_id = self._state.item.id
        logger.debug("Loading detail screen for item %s", item_id)

        tasks = []
        for kind, fetch, store in self._requests():
            task = asyncio.create_task(
                self._fetch(kind, fetch, store, item_id),
                name=f"fetch {kind.value} {item_id}",
            )
            self._in_flight.add(task)
            task.add_done_callback(self._in_flight.discard)
            tasks.append(task)
        return tasks

    async def load_and_wait(self) -> list[FetchFailure]:
        """Schedule all requests and wait for this batch to finish.

        Returns:
            Failures from this batch, in request order.
        """
        results = await asyncio.gather(*self.load())
        return [failure for failure in results if failure is not None]

    async def _fetch(
        self,
        kind: RequestKind,
        fetch: Callable[[str], Awaitable[Any]],
        store: Callable[[Any], None],
        item_id: str,
    ) -> FetchFailure | None:
        try:
            payload = await fetch(item_id)
        except Exception as e:
            failure = FetchFailure(kind, get_friendly_message(e))
            self._report(failure, e)
            return failure

        store(payload)
        logger.debug("Fetched %s for item %s", kind.value, item_id)
        return None

    def _report(self, failure: FetchFailure, error: Exception) -> None:
        logger.warning(
            "Failed to fetch %s for item %s: %s",
            failure.request_kind.value,
            self._state.item.id,
            error,
        )
        if self._log_errors:
            log_error(error, context=f"fetch {failure.request_kind.value}")
        self.alerts.publish(failure.to_alert())
