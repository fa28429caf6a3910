"""Keep local mirrors of remote collections in step with store snapshots."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping
from typing import Any, Generic, TypeVar

from anyio import to_thread

from govconsole.infrastructure.document_store import (
    CollectionHandle,
    Document,
    DocumentStore,
    Unsubscribe,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

ChangeListener = Callable[[], None]


class SubscriptionError(RuntimeError):
    """Raised by a snapshot stream whose subscription failed."""


_CLOSED = object()


class LiveCollection(Generic[T]):
    """Local ordered mirror of a collection, replaced wholesale on each snapshot.

    Snapshots may be produced on worker threads; they are applied on the event
    loop that bound the collection. Deliveries that belong to a previous
    binding are ignored.
    """

    def __init__(
        self,
        store: DocumentStore,
        factory: Callable[[Mapping[str, Any]], T],
        *,
        error_message: str,
    ) -> None:
        self._store = store
        self._factory = factory
        self._error_message = error_message
        self._handle: CollectionHandle | None = None
        self._unsubscribe: Unsubscribe | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._generation = 0
        self._listeners: list[ChangeListener] = []
        self.items: list[T] = []
        self.error: str | None = None
        self.synced = False

    @property
    def handle(self) -> CollectionHandle | None:
        return self._handle

    @property
    def is_subscribed(self) -> bool:
        return self._unsubscribe is not None

    def add_listener(self, listener: ChangeListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    async def bind(self, handle: CollectionHandle | None) -> None:
        """Follow ``handle``, tearing down any subscription to a different path."""

        if handle == self._handle and (self._unsubscribe is not None or handle is None):
            return

        self._teardown()
        self._handle = handle
        self.items = []
        self.error = None
        self.synced = False
        if handle is None:
            self._notify()
            return

        self._loop = asyncio.get_running_loop()
        generation = self._generation

        def on_snapshot(documents: list[Document]) -> None:
            self._schedule(generation, self._apply_snapshot, documents)

        def on_error(error: Exception) -> None:
            self._schedule(generation, self._apply_error, error)

        unsubscribe = await to_thread.run_sync(
            self._store.subscribe, handle, on_snapshot, on_error
        )
        if generation != self._generation or self.error is not None:
            # Rebound while subscribing, or the first read already failed.
            unsubscribe()
            return
        self._unsubscribe = unsubscribe

    def close(self) -> None:
        self._teardown()
        self._handle = None

    def _teardown(self) -> None:
        self._generation += 1
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _schedule(self, generation: int, apply: Callable[[Any], None], argument: Any) -> None:
        loop = self._loop
        if loop is None or loop.is_closed():
            return
        loop.call_soon_threadsafe(self._apply_if_current, generation, apply, argument)

    def _apply_if_current(
        self, generation: int, apply: Callable[[Any], None], argument: Any
    ) -> None:
        if generation != self._generation:
            return
        apply(argument)

    def _apply_snapshot(self, documents: list[Document]) -> None:
        self.items = [self._factory(document) for document in documents]
        self.synced = True
        self._notify()

    def _apply_error(self, error: Exception) -> None:
        logger.error("Subscription to %s failed: %s", self._handle, error)
        # The store ended the subscription; it is not retried.
        self._unsubscribe = None
        self.error = self._error_message
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()


class SnapshotStream:
    """Lazy stream of full-collection snapshots.

    Iteration subscribes on first use; :meth:`close` releases the
    subscription and ends iteration. A closed stream may be iterated again,
    which subscribes afresh.
    """

    def __init__(self, store: DocumentStore, handle: CollectionHandle) -> None:
        self._store = store
        self._handle = handle
        self._queue: asyncio.Queue[Any] | None = None
        self._unsubscribe: Unsubscribe | None = None

    @property
    def handle(self) -> CollectionHandle:
        return self._handle

    async def open(self) -> None:
        if self._queue is not None:
            return

        loop = asyncio.get_running_loop()
        queue: asyncio.Queue[Any] = asyncio.Queue()
        self._queue = queue

        def push(item: Any) -> None:
            if not loop.is_closed():
                loop.call_soon_threadsafe(queue.put_nowait, item)

        self._unsubscribe = await to_thread.run_sync(
            self._store.subscribe, self._handle, push, push
        )

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        if self._queue is not None:
            self._queue.put_nowait(_CLOSED)
            self._queue = None

    async def __aenter__(self) -> "SnapshotStream":
        await self.open()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.close()

    def __aiter__(self) -> "SnapshotStream":
        return self

    async def __anext__(self) -> list[Document]:
        if self._queue is None:
            await self.open()
        queue = self._queue
        assert queue is not None
        item = await queue.get()
        if item is _CLOSED:
            raise StopAsyncIteration
        if isinstance(item, Exception):
            self.close()
            raise SubscriptionError(str(item)) from item
        return item


__all__ = ["LiveCollection", "SnapshotStream", "SubscriptionError"]
