"""Document collections with push-based change notification."""

from __future__ import annotations

import copy
import logging
import threading
import uuid
from collections import defaultdict
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, DefaultDict

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from govconsole.infrastructure.models import DocumentModel

logger = logging.getLogger(__name__)

Document = dict[str, Any]
SnapshotCallback = Callable[[list[Document]], None]
ErrorCallback = Callable[[Exception], None]
Unsubscribe = Callable[[], None]


class DocumentStoreError(RuntimeError):
    """Raised when the backing database rejects a store operation."""


class DocumentNotFoundError(DocumentStoreError):
    """Raised when updating a document that does not exist."""


@dataclass(frozen=True)
class CollectionHandle:
    """Reference to a collection addressed by a slash separated path."""

    path: str

    @property
    def name(self) -> str:
        return self.path.rsplit("/", 1)[-1]


@dataclass
class _Subscription:
    on_snapshot: SnapshotCallback
    on_error: ErrorCallback | None


class DocumentStore:
    """Provide CRUD operations and live snapshots over document collections.

    Every committed mutation re-reads the affected collection and delivers the
    full snapshot to each subscriber of that path. Subscribers are invoked on
    the thread that performed the mutation. Mutations of one path, together
    with their deliveries, are serialized so subscribers see snapshots in
    commit order.
    """

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory
        self._lock = threading.Lock()
        self._subscriptions: DefaultDict[str, dict[int, _Subscription]] = defaultdict(dict)
        self._next_token = 0
        self._path_locks: dict[str, threading.RLock] = {}

    def collection(self, path: str) -> CollectionHandle:
        segments = [segment for segment in path.strip("/").split("/")]
        if not segments or any(not segment for segment in segments):
            raise ValueError(f"Invalid collection path '{path}'")
        if len(segments) % 2 == 0:
            raise ValueError(
                f"Collection path '{path}' must have an odd number of segments"
            )
        return CollectionHandle("/".join(segments))

    def snapshot(self, handle: CollectionHandle) -> list[Document]:
        """Return the current contents of ``handle`` in insertion order."""

        session = self._session_factory()
        try:
            models = session.scalars(
                select(DocumentModel)
                .where(DocumentModel.collection_path == handle.path)
                .order_by(DocumentModel.seq)
            ).all()
            return [self._to_document(model) for model in models]
        except SQLAlchemyError as exc:
            logger.error("Failed to read collection %s: %s", handle.path, exc)
            raise DocumentStoreError(f"Could not read collection '{handle.name}'.") from exc
        finally:
            session.close()

    def insert(self, handle: CollectionHandle, record: Mapping[str, Any]) -> str:
        """Store ``record`` as a new document and return its generated id."""

        document_id = uuid.uuid4().hex
        with self._path_lock(handle.path):
            session = self._session_factory()
            try:
                session.add(
                    DocumentModel(
                        collection_path=handle.path,
                        document_id=document_id,
                        data=self._clean(record),
                    )
                )
                session.commit()
            except SQLAlchemyError as exc:
                session.rollback()
                logger.error("Failed to insert into %s: %s", handle.path, exc)
                raise DocumentStoreError(
                    f"Could not add document to '{handle.name}'."
                ) from exc
            finally:
                session.close()

            self._notify(handle)
        return document_id

    def update(
        self, handle: CollectionHandle, document_id: str, partial: Mapping[str, Any]
    ) -> None:
        """Merge ``partial`` into an existing document."""

        with self._path_lock(handle.path):
            session = self._session_factory()
            try:
                model = self._get_model(session, handle, document_id)
                if model is None:
                    raise DocumentNotFoundError(
                        f"No document to update: {handle.path}/{document_id}"
                    )
                model.data = {**(model.data or {}), **self._clean(partial)}
                session.add(model)
                session.commit()
            except SQLAlchemyError as exc:
                session.rollback()
                logger.error("Failed to update %s/%s: %s", handle.path, document_id, exc)
                raise DocumentStoreError(
                    f"Could not update document in '{handle.name}'."
                ) from exc
            finally:
                session.close()

            self._notify(handle)

    def remove(self, handle: CollectionHandle, document_id: str) -> None:
        """Delete a document; deleting a missing document is a no-op."""

        with self._path_lock(handle.path):
            session = self._session_factory()
            try:
                model = self._get_model(session, handle, document_id)
                if model is None:
                    return
                session.delete(model)
                session.commit()
            except SQLAlchemyError as exc:
                session.rollback()
                logger.error("Failed to delete %s/%s: %s", handle.path, document_id, exc)
                raise DocumentStoreError(
                    f"Could not delete document from '{handle.name}'."
                ) from exc
            finally:
                session.close()

            self._notify(handle)

    def subscribe(
        self,
        handle: CollectionHandle,
        on_snapshot: SnapshotCallback,
        on_error: ErrorCallback | None = None,
    ) -> Unsubscribe:
        """Deliver the current snapshot now and again after every mutation.

        A read failure is reported once through ``on_error`` and ends the
        subscription.
        """

        subscription = _Subscription(on_snapshot=on_snapshot, on_error=on_error)
        with self._path_lock(handle.path):
            with self._lock:
                token = self._next_token
                self._next_token += 1
                self._subscriptions[handle.path][token] = subscription

            try:
                documents = self.snapshot(handle)
            except DocumentStoreError as exc:
                self._discard(handle.path, token)
                self._report_error(handle, subscription, exc)
            else:
                self._deliver(handle, subscription, documents)

        def unsubscribe() -> None:
            self._discard(handle.path, token)

        return unsubscribe

    def _path_lock(self, path: str) -> threading.RLock:
        with self._lock:
            lock = self._path_locks.get(path)
            if lock is None:
                lock = self._path_locks[path] = threading.RLock()
            return lock

    def subscriber_count(self, handle: CollectionHandle) -> int:
        with self._lock:
            return len(self._subscriptions.get(handle.path, {}))

    def _notify(self, handle: CollectionHandle) -> None:
        with self._lock:
            subscriptions = list(self._subscriptions.get(handle.path, {}).items())
        if not subscriptions:
            return

        try:
            documents = self.snapshot(handle)
        except DocumentStoreError as exc:
            for token, subscription in subscriptions:
                self._discard(handle.path, token)
                self._report_error(handle, subscription, exc)
            return

        for _, subscription in subscriptions:
            self._deliver(handle, subscription, copy.deepcopy(documents))

    def _discard(self, path: str, token: int) -> None:
        with self._lock:
            subscriptions = self._subscriptions.get(path)
            if subscriptions is None:
                return
            subscriptions.pop(token, None)
            if not subscriptions:
                self._subscriptions.pop(path, None)

    @staticmethod
    def _deliver(
        handle: CollectionHandle, subscription: _Subscription, documents: list[Document]
    ) -> None:
        try:
            subscription.on_snapshot(documents)
        except Exception:
            logger.exception("Snapshot listener for %s failed", handle.path)

    @staticmethod
    def _report_error(
        handle: CollectionHandle, subscription: _Subscription, error: Exception
    ) -> None:
        if subscription.on_error is None:
            logger.error("Subscription to %s failed: %s", handle.path, error)
            return
        try:
            subscription.on_error(error)
        except Exception:
            logger.exception("Error listener for %s failed", handle.path)

    @staticmethod
    def _get_model(
        session: Session, handle: CollectionHandle, document_id: str
    ) -> DocumentModel | None:
        return session.scalars(
            select(DocumentModel).where(
                DocumentModel.collection_path == handle.path,
                DocumentModel.document_id == document_id,
            )
        ).first()

    @staticmethod
    def _clean(record: Mapping[str, Any]) -> Document:
        # ``id`` belongs to the document key, never to its data.
        return {key: copy.deepcopy(value) for key, value in record.items() if key != "id"}

    @staticmethod
    def _to_document(model: DocumentModel) -> Document:
        return {"id": model.document_id, **copy.deepcopy(model.data or {})}


__all__ = [
    "CollectionHandle",
    "Document",
    "DocumentNotFoundError",
    "DocumentStore",
    "DocumentStoreError",
    "Unsubscribe",
]
