"""Product record data model and the persisted collection layout."""

import json
from dataclasses import dataclass, field
from datetime import date, datetime, timezone

from blitz.dates import format_timestamp_iso, parse_timestamp, utcnow

# Version 0 is the legacy layout: a bare JSON array of records.
SCHEMA_VERSION = 1

# Field names used by version 0 records.
LEGACY_FIELDS = {
    "nome": "name",
    "codigo": "code",
    "lote": "lot",
    "vencimento": "expirationDate",
    "diasRestantes": "daysRemaining",
    "dataRegistro": "registeredAt",
}


@dataclass
class ProductRecord:
    """One registered product and how close it was to expiring."""

    name: str
    code: str
    lot: str
    expiration_date: date
    days_remaining: int
    registered_at: datetime = field(default_factory=utcnow)

    def __post_init__(self):
        if self.registered_at.tzinfo is None:
            self.registered_at = self.registered_at.replace(tzinfo=timezone.utc)

    def to_dict(self) -> dict:
        """Serialize using the persisted field names."""
        return {
            "name": self.name,
            "code": self.code,
            "lot": self.lot,
            "expirationDate": self.expiration_date.isoformat(),
            "daysRemaining": self.days_remaining,
            "registeredAt": format_timestamp_iso(self.registered_at),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ProductRecord":
        """Deserialize from the persisted field names.

        Raises:
            KeyError: a required field is missing.
            ValueError: a date or number field cannot be parsed.
        """
        return cls(
            name=str(data["name"]),
            code=str(data.get("code", "")),
            lot=str(data.get("lot", "")),
            expiration_date=date.fromisoformat(data["expirationDate"]),
            days_remaining=int(data["daysRemaining"]),
            registered_at=parse_timestamp(data["registeredAt"]),
        )


def dump_collection(records: list[ProductRecord]) -> str:
    """Encode a record sequence into the versioned JSON envelope."""
    return json.dumps(
        {
            "schemaVersion": SCHEMA_VERSION,
            "records": [r.to_dict() for r in records],
        },
        ensure_ascii=False,
    )


def _migrate_legacy(item):
    """Rename version 0 fields; items already using current names pass through."""
    if not isinstance(item, dict):
        return item
    return {LEGACY_FIELDS.get(key, key): value for key, value in item.items()}


def load_collection(raw: str) -> list[ProductRecord]:
    """Decode a stored blob, migrating the legacy bare-array layout.

    Raises:
        ValueError: the blob is not JSON, has an unknown version, or holds
            malformed records.
    """
    data = json.loads(raw)

    if isinstance(data, list):
        items = [_migrate_legacy(item) for item in data]
    elif isinstance(data, dict):
        version = data.get("schemaVersion")
        if version != SCHEMA_VERSION:
            raise ValueError(f"Unsupported schema version: {version!r}")
        items = data.get("records", [])
    else:
        raise ValueError(f"Unexpected stored value of type {type(data).__name__}")

    if not isinstance(items, list):
        raise ValueError("Stored records are not a list")

    try:
        return [ProductRecord.from_dict(item) for item in items]
    except (KeyError, TypeError, AttributeError) as exc:
        raise ValueError(f"Malformed record: {exc}") from exc
