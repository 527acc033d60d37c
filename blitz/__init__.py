"""
BLITZ 45 Dias — product expiry tracker.

Registers products with their expiration date and reports them ordered by
urgency.

Features:
- Registration with a 45-day staleness criterion and explicit override
- Severity tiers (1 week, 45 days) for the report view
- Semicolon-delimited CSV export
- One persisted, versioned collection behind a pluggable key-value storage
"""

from blitz.record import ProductRecord
from blitz.store import JsonFileStorage, MemoryStorage, RecordStore, UnreadableCollectionError
from blitz.registration import RegistrationFlow, RegistrationForm, RegistrationOutcome
from blitz.report import ReportGenerator, UrgencyMode, NothingToExportError
from blitz.severity import Severity

__all__ = [
    "ProductRecord",
    "JsonFileStorage",
    "MemoryStorage",
    "RecordStore",
    "UnreadableCollectionError",
    "RegistrationFlow",
    "RegistrationForm",
    "RegistrationOutcome",
    "ReportGenerator",
    "UrgencyMode",
    "NothingToExportError",
    "Severity",
]
