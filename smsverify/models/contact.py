"""
smsverify/models/contact.py

Purpose: Contact record model and field mapping

- ContactRecord: what the SMS controller needs from a stored contact
  (five named fields plus save())
- ContactFieldMap: maps each logical field to a getter/setter on the
  concrete record, fixed at controller construction
- DocumentContactRecord: dict-backed record with a pluggable save
- MongoContactRecord: document persisted to the contacts collection

Logical fields:
- phone_number: raw or normalized dialable number
- blocked: outbound delivery administratively disabled
- confirmation_code: last-issued one-time code, or empty
- confirmation_attempted_at: when the code was last issued (UTC)
- confirmed_phone_number: number for which confirmation last succeeded
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Protocol, runtime_checkable

from smsverify.utils.time_utils import utc_now


PHONE_NUMBER = "phone_number"
BLOCKED = "blocked"
CONFIRMATION_CODE = "confirmation_code"
CONFIRMATION_ATTEMPTED_AT = "confirmation_attempted_at"
CONFIRMED_PHONE_NUMBER = "confirmed_phone_number"

LOGICAL_FIELDS = (
    PHONE_NUMBER,
    BLOCKED,
    CONFIRMATION_CODE,
    CONFIRMATION_ATTEMPTED_AT,
    CONFIRMED_PHONE_NUMBER,
)


@runtime_checkable
class ContactRecord(Protocol):
    """
    Anything persisted that can be saved.
    save() returns a truthy value on success and a falsy one on failure.
    """

    def save(self) -> Any:
        ...


@dataclass(frozen=True)
class FieldAccessor:
    """Getter/setter pair for one logical field on a concrete record."""
    getter: Callable[[Any], Any]
    setter: Callable[[Any, Any], None]

    @classmethod
    def attribute(cls, name: str) -> "FieldAccessor":
        return cls(
            getter=lambda record: getattr(record, name, None),
            setter=lambda record, value: setattr(record, name, value),
        )

    @classmethod
    def item(cls, key: str) -> "FieldAccessor":
        def _set(record, value):
            record[key] = value
        return cls(getter=lambda record: record.get(key), setter=_set)


@dataclass(frozen=True)
class ContactFieldMap:
    """
    Maps the five logical fields to accessors on a concrete record type.

    Build one per deployment with for_attributes() or for_document(),
    renaming any field whose storage name differs:

        fields = ContactFieldMap.for_attributes(phone_number="mobile")
    """
    phone_number: FieldAccessor
    blocked: FieldAccessor
    confirmation_code: FieldAccessor
    confirmation_attempted_at: FieldAccessor
    confirmed_phone_number: FieldAccessor

    @classmethod
    def for_attributes(cls, **names: str) -> "ContactFieldMap":
        """Accessors via getattr/setattr. Unnamed fields use the logical name."""
        return cls(**{
            field: FieldAccessor.attribute(name)
            for field, name in _resolve_names(names).items()
        })

    @classmethod
    def for_document(cls, **keys: str) -> "ContactFieldMap":
        """Accessors via item access on a mapping (e.g. a Mongo document)."""
        return cls(**{
            field: FieldAccessor.item(key)
            for field, key in _resolve_names(keys).items()
        })

    def get(self, record: Any, field: str) -> Any:
        return getattr(self, field).getter(record)

    def set(self, record: Any, field: str, value: Any) -> None:
        getattr(self, field).setter(record, value)


def _resolve_names(overrides: Dict[str, str]) -> Dict[str, str]:
    unknown = set(overrides) - set(LOGICAL_FIELDS)
    if unknown:
        raise ValueError(f"Unknown contact fields: {', '.join(sorted(unknown))}")
    return {field: overrides.get(field, field) for field in LOGICAL_FIELDS}


DEFAULT_FIELDS = ContactFieldMap.for_attributes()


class DocumentContactRecord(dict):
    """
    Contact held as a plain dict. save() delegates to `saver`, which
    receives the document and returns the persistence result.
    """

    def __init__(self, data: Optional[Dict[str, Any]] = None, saver: Optional[Callable[[Dict[str, Any]], Any]] = None):
        super().__init__(data or {})
        self._saver = saver

    def save(self) -> Any:
        if self._saver is None:
            return True
        return self._saver(self)


DOCUMENT_FIELDS = ContactFieldMap.for_document()


class MongoContactRecord(DocumentContactRecord):
    """
    Contact document stored in the `contacts` collection, keyed by contact_id.

    Document fields:
    - contact_id: str (unique)
    - phone_number, blocked, confirmation_code,
      confirmation_attempted_at, confirmed_phone_number
    - created_at, updated_at: datetime
    """

    def __init__(self, collection, data: Dict[str, Any]):
        super().__init__(data)
        self.collection = collection

    @property
    def contact_id(self) -> str:
        return self["contact_id"]

    def save(self) -> bool:
        self["updated_at"] = utc_now()
        document = {key: value for key, value in self.items() if key != "_id"}
        result = self.collection.replace_one(
            {"contact_id": self.contact_id},
            document,
            upsert=True
        )
        return bool(result.acknowledged)

    @classmethod
    def new(cls, collection, contact_id: str, phone_number: str) -> "MongoContactRecord":
        now = utc_now()
        return cls(collection, {
            "contact_id": contact_id,
            PHONE_NUMBER: phone_number,
            BLOCKED: False,
            CONFIRMATION_CODE: None,
            CONFIRMATION_ATTEMPTED_AT: None,
            CONFIRMED_PHONE_NUMBER: None,
            "created_at": now,
            "updated_at": now,
        })

