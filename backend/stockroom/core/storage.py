# backend/stockroom/core/storage.py

import json
import logging
from typing import Any, Mapping

from sqlalchemy.orm import Session, sessionmaker

from stockroom.models.kv_entry import KeyValueEntry

logger = logging.getLogger(__name__)


class SqlKeyValueStore:
    """
    JSON values stored by string key in the ``kv_entries`` table.

    Every write fully replaces the previous value under the key. Reads of a
    missing key, or of a value that no longer decodes, give back the
    caller's default.
    """

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def get(self, key: str, default: Any = None) -> Any:
        db: Session = self._session_factory()
        try:
            entry = db.get(KeyValueEntry, key)
            if entry is None:
                return default
            try:
                return json.loads(entry.value)
            except ValueError:
                logger.warning("Discarding malformed value stored under %r", key)
                return default
        finally:
            db.close()

    def set(self, key: str, value: Any) -> None:
        self.set_many({key: value})

    def set_many(self, items: Mapping[str, Any]) -> None:
        # one transaction: either every key is replaced or none is
        encoded = {k: json.dumps(v) for k, v in items.items()}

        db: Session = self._session_factory()
        try:
            for key, raw in encoded.items():
                db.merge(KeyValueEntry(key=key, value=raw))
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def remove(self, key: str) -> None:
        db: Session = self._session_factory()
        try:
            entry = db.get(KeyValueEntry, key)
            if entry is not None:
                db.delete(entry)
                db.commit()
        finally:
            db.close()
