"""
Collection/document access over the SQLAlchemy session.

Services talk to collections by name ("frameworks", "observations", ...)
and exchange plain dicts. Each collection maps to one ORM model; nested
parts of a document (sections, responses, class info) live in JSON columns.
"""
from __future__ import annotations

import copy
import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Callable

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from observation_tracker.core.errors import Conflict, NotFound, StoreFailure
from observation_tracker.models.framework import Framework
from observation_tracker.models.observation import Observation
from observation_tracker.models.scheduled_observation import ScheduledObservation
from observation_tracker.models.teacher import Teacher
from observation_tracker.models.user import User
from observation_tracker.store.change_feed import ChangeFeed

logger = logging.getLogger(__name__)

COLLECTIONS = {
    "frameworks": Framework,
    "observations": Observation,
    "teachers": Teacher,
    "users": User,
    "scheduled_observations": ScheduledObservation,
}

ENTITY_NAMES = {
    "frameworks": "framework",
    "observations": "observation",
    "teachers": "teacher",
    "users": "user",
    "scheduled_observations": "scheduled observation",
}

# order used for list() without order_by and for published snapshots
DEFAULT_ORDER = {
    "frameworks": ("name", False),
    "observations": ("date", True),
    "teachers": ("name", False),
    "users": ("display_name", False),
    "scheduled_observations": ("scheduled_date", False),
}

READ_ONLY_KEYS = {"id", "created_at", "updated_at"}


class DocumentStore:
    def __init__(self, db: Session, feed: ChangeFeed | None = None):
        self.db = db
        self.feed = feed
        self._dirty: set[str] = set()

    # -- mapping helpers -------------------------------------------------

    def _model(self, collection: str):
        try:
            return COLLECTIONS[collection]
        except KeyError:
            raise ValueError(f"Unknown collection: {collection}")

    @staticmethod
    def _aliases(model) -> dict[str, str]:
        return getattr(model, "__document_aliases__", {})

    def _attr(self, model, key: str) -> str:
        attr = self._aliases(model).get(key, key)
        if attr not in sa_inspect(model).columns.keys():
            raise ValueError(f"Unknown field for {model.__tablename__}: {key}")
        return attr

    def to_document(self, row) -> dict:
        reverse = {v: k for k, v in self._aliases(type(row)).items()}
        doc = {}
        for attr in sa_inspect(type(row)).columns.keys():
            doc[reverse.get(attr, attr)] = copy.deepcopy(getattr(row, attr))
        return doc

    def _query(self, collection: str, where: dict | None):
        model = self._model(collection)
        q = self.db.query(model)
        for key, value in (where or {}).items():
            q = q.filter(getattr(model, self._attr(model, key)) == value)
        return model, q

    @contextmanager
    def _guard(self, message: str):
        try:
            yield
        except IntegrityError:
            raise
        except SQLAlchemyError as exc:
            logger.exception(message)
            raise StoreFailure(message) from exc

    # -- reads -----------------------------------------------------------

    def get(self, collection: str, doc_id: str) -> dict | None:
        model = self._model(collection)
        with self._guard(f"Failed to fetch {ENTITY_NAMES[collection]}"):
            row = self.db.get(model, doc_id)
        return self.to_document(row) if row is not None else None

    def list(
        self,
        collection: str,
        where: dict | None = None,
        order_by: str | None = None,
        descending: bool | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[dict]:
        model, q = self._query(collection, where)

        default_field, default_desc = DEFAULT_ORDER[collection]
        field = order_by or default_field
        desc = default_desc if descending is None and order_by is None else bool(descending)
        column = getattr(model, self._attr(model, field))
        q = q.order_by(column.desc() if desc else column.asc(), model.id.asc())

        if offset:
            q = q.offset(offset)
        if limit is not None:
            q = q.limit(limit)

        with self._guard(f"Failed to fetch {collection}"):
            rows = q.all()
        return [self.to_document(r) for r in rows]

    def count(self, collection: str, where: dict | None = None) -> int:
        _, q = self._query(collection, where)
        with self._guard(f"Failed to count {collection}"):
            return q.count()

    # -- writes ----------------------------------------------------------

    def create(self, collection: str, doc: dict) -> str:
        model = self._model(collection)
        values = {self._attr(model, k): copy.deepcopy(v) for k, v in doc.items() if k not in READ_ONLY_KEYS}
        if doc.get("id"):
            values["id"] = doc["id"]

        now = datetime.utcnow()
        row = model(**values, created_at=now, updated_at=now)

        with self._guard(f"Failed to create {ENTITY_NAMES[collection]}"):
            if doc.get("id") and self.db.get(model, doc["id"]) is not None:
                raise Conflict(f"{ENTITY_NAMES[collection].capitalize()} already exists")
            self.db.add(row)
            try:
                self.db.flush()
            except IntegrityError:
                self.db.rollback()
                raise Conflict(f"{ENTITY_NAMES[collection].capitalize()} already exists")

        self._dirty.add(collection)
        logger.info("Created %s %s", ENTITY_NAMES[collection], row.id)
        return row.id

    def update(self, collection: str, doc_id: str, partial: dict) -> dict:
        model = self._model(collection)
        with self._guard(f"Failed to update {ENTITY_NAMES[collection]}"):
            row = self.db.get(model, doc_id)
            if row is None:
                raise NotFound(ENTITY_NAMES[collection], doc_id)

            for key, value in partial.items():
                if key in READ_ONLY_KEYS:
                    continue
                setattr(row, self._attr(model, key), copy.deepcopy(value))
            row.updated_at = datetime.utcnow()

            try:
                self.db.flush()
            except IntegrityError:
                self.db.rollback()
                raise Conflict(f"{ENTITY_NAMES[collection].capitalize()} conflicts with an existing record")

        self._dirty.add(collection)
        logger.info("Updated %s %s (%s)", ENTITY_NAMES[collection], doc_id, ", ".join(sorted(partial)))
        return self.to_document(row)

    def delete(self, collection: str, doc_id: str) -> None:
        model = self._model(collection)
        with self._guard(f"Failed to delete {ENTITY_NAMES[collection]}"):
            row = self.db.get(model, doc_id)
            if row is None:
                raise NotFound(ENTITY_NAMES[collection], doc_id)
            self.db.delete(row)
            self.db.flush()

        self._dirty.add(collection)
        logger.info("Deleted %s %s", ENTITY_NAMES[collection], doc_id)

    def commit(self) -> None:
        """
        Commit the unit of work, then push a fresh snapshot of every written
        collection to its listeners.
        """
        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Commit failed")
            raise StoreFailure("Failed to save changes") from exc

        dirty, self._dirty = self._dirty, set()
        if self.feed is None:
            return
        for collection in sorted(dirty):
            if self.feed.has_listeners(collection):
                self.feed.publish(collection, self.list(collection))

    # -- subscriptions ---------------------------------------------------

    def subscribe(
        self,
        collection: str,
        callback: Callable[[list[dict]], None],
        where: dict | None = None,
    ) -> Callable[[], bool]:
        """
        Deliver the current snapshot now and again after every committed
        write to the collection. Returns an unsubscribe function.
        """
        if self.feed is None:
            raise RuntimeError("DocumentStore has no change feed")

        def _matches(doc: dict) -> bool:
            return all(doc.get(k) == v for k, v in (where or {}).items())

        def _handler(snapshot: list[dict]) -> None:
            callback([d for d in snapshot if _matches(d)])

        callback(self.list(collection, where=where))
        token = self.feed.on_change(collection, _handler)
        return lambda: self.feed.unsubscribe(token)
