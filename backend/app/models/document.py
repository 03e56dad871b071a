"""
Document mapping helpers.

Collections are stored as tables. The caller's document is kept whole in a
JSON ``body`` column; typed columns hold a best-effort copy of the fields
the service filters or sorts on. Reads always come from ``body``, so a
document is returned exactly as it was stored.
"""

import uuid
from datetime import datetime
from typing import Any, Dict, Iterable, Optional

from sqlalchemy import DateTime, Float, String

# Store-assigned; never taken from a caller document
RESERVED_KEYS = {"_id"}


def new_document_id() -> str:
    """Store-generated identifier for a new document."""
    return uuid.uuid4().hex


def _column_value(column_type: Any, value: Any) -> Any:
    """
    Coerce a document value for its typed copy.

    Values that do not fit the column (wrong type, too long) become None;
    the document itself keeps the original value.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(column_type, DateTime):
        if isinstance(value, datetime):
            return value
        if isinstance(value, str):
            try:
                return datetime.fromisoformat(value)
            except ValueError:
                return None
        return None

    if isinstance(column_type, Float):
        try:
            return float(value)
        except (TypeError, ValueError):
            return None

    if isinstance(column_type, String):
        if isinstance(value, (int, float)):
            value = str(value)
        if not isinstance(value, str):
            return None
        if column_type.length and len(value) > column_type.length:
            return None
        return value

    return value


def _serialize(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    return value


class DocumentMixin:
    """
    Mixin for models exposed as flat documents.

    Subclasses declare a JSON ``body`` column and ``__document_fields__``, a
    mapping of document key (as seen by API clients) to the model attribute
    holding its typed copy.
    """

    __document_fields__: Dict[str, str] = {}

    @classmethod
    def from_document(cls, document: Dict[str, Any], **assigned: Any):
        """
        Build a new row from a caller document.

        Keyword arguments are server-assigned document keys and win over
        caller values.
        """
        body = {k: v for k, v in document.items() if k not in RESERVED_KEYS}
        body.update({k: _serialize(v) for k, v in assigned.items()})

        instance = cls(id=new_document_id(), body=body)
        instance.sync_columns()
        return instance

    def sync_columns(self):
        """Refresh the typed copies from ``body``."""
        body = self.body or {}
        columns = self.__table__.columns
        for key, attr in self.__document_fields__.items():
            setattr(self, attr, _column_value(columns[attr].type, body.get(key)))

    def merge_fields(self, fields: Dict[str, Any], protected: Iterable[str] = ()) -> bool:
        """
        Merge fields into this document ($set semantics).

        Returns:
            True if any stored value changed
        """
        skip = set(protected) | RESERVED_KEYS
        body = dict(self.body or {})
        changed = False

        for key, value in fields.items():
            if key in skip:
                continue
            value = _serialize(value)
            if key not in body or body[key] != value:
                body[key] = value
                changed = True

        if changed:
            # JSON columns only notice reassignment
            self.body = body
            self.sync_columns()

        return changed

    def to_document(self, fields: Optional[Iterable[str]] = None) -> Dict[str, Any]:
        """
        Render the model as a flat document.

        Args:
            fields: Optional projection; only these document keys (plus _id)
                are returned
        """
        document: Dict[str, Any] = {"_id": self.id}
        document.update(self.body or {})

        if fields is not None:
            wanted = set(fields) | {"_id"}
            document = {k: v for k, v in document.items() if k in wanted}

        return document
