"""
Report generation for registered products.

Builds the urgency-sorted table shown on the report page, the semicolon
delimited CSV export, and the bulk clear of the collection.
"""

import csv
import io
import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

from blitz.dates import days_until, format_date, format_timestamp, utcnow
from blitz.record import ProductRecord
from blitz.severity import Severity, classify, css_class
from config.settings import CSV_FILENAME_PREFIX, URGENCY_MODE

logger = logging.getLogger(__name__)

CSV_HEADER = [
    "Produto",
    "Codigo_Barras",
    "Lote",
    "Data_Vencimento",
    "Dias_Restantes",
    "Data_Registro",
]
CSV_DELIMITER = ";"

EMPTY_REPORT_MESSAGE = "Nenhum produto registrado ainda."
NOTHING_TO_EXPORT_MESSAGE = "Não há dados para exportar."
CLEAR_WARNING = (
    "ATENÇÃO!\n\n"
    "Isso apagará TODOS os registros de produtos salvos."
    "\nUse isso apenas após gerar o relatório e ter certeza que não precisa mais dos dados."
    "\n\nDeseja continuar?"
)
CLEARED_MESSAGE = "Dados limpos com sucesso."


class UrgencyMode(str, Enum):
    """Where the day count used for ordering and severity comes from."""

    SNAPSHOT = "snapshot"        # as computed at registration
    LIVE = "live"                # recomputed against today on every read


class NothingToExportError(ValueError):
    """Raised when an export is requested for an empty collection."""

    def __init__(self, message: str = NOTHING_TO_EXPORT_MESSAGE):
        super().__init__(message)


@dataclass
class ReportRow:
    """One table row of the report page."""

    record: ProductRecord
    days_remaining: int
    severity: Severity
    expiration_display: str
    registered_display: str

    @property
    def css_class(self) -> str:
        return css_class(self.severity)

    def to_dict(self) -> dict:
        data = self.record.to_dict()
        data.update({
            "effectiveDaysRemaining": self.days_remaining,
            "severity": self.severity.value,
            "cssClass": self.css_class,
            "expirationDisplay": self.expiration_display,
            "registeredDisplay": self.registered_display,
        })
        return data


@dataclass
class CsvExport:
    filename: str
    content: str
    row_count: int

    @property
    def data(self) -> bytes:
        return self.content.encode("utf-8")


def _clean_field(value: str) -> str:
    """Keep column alignment: no delimiter inside a free-text field."""
    return value.replace(CSV_DELIMITER, ",")


def export_filename(today: date) -> str:
    return f"{CSV_FILENAME_PREFIX}{today.isoformat()}.csv"


class ReportGenerator:
    """Generate the report view, CSV export and bulk clear from a record store.

    Usage:
        report = ReportGenerator(store)
        for row in report.rows():
            ...
        export = report.export_csv()
    """

    def __init__(
        self,
        store,
        clock: Callable[[], datetime] = utcnow,
        urgency_mode: UrgencyMode | str = URGENCY_MODE,
        thresholds=None,
        tz=None,
    ):
        self._store = store
        self._clock = clock
        self._urgency_mode = UrgencyMode(urgency_mode)
        self._thresholds = thresholds
        self._tz = tz

    @property
    def urgency_mode(self) -> UrgencyMode:
        return self._urgency_mode

    def effective_days(self, record: ProductRecord, now: Optional[datetime] = None) -> int:
        """Day count used for ordering and severity under the urgency mode."""
        if self._urgency_mode == UrgencyMode.LIVE:
            return days_until(record.expiration_date, now or self._clock(), self._tz)
        return record.days_remaining

    def rows(self) -> list[ReportRow]:
        """All records, most urgent first; equal day counts keep insertion order."""
        now = self._clock()
        rows = []
        for record in self._store.load():
            days = self.effective_days(record, now)
            rows.append(
                ReportRow(
                    record=record,
                    days_remaining=days,
                    severity=classify(days, self._thresholds),
                    expiration_display=format_date(record.expiration_date),
                    registered_display=format_timestamp(record.registered_at, self._tz),
                )
            )
        # sorted() is stable
        return sorted(rows, key=lambda r: r.days_remaining)

    def summary(self) -> dict:
        """Counts per severity tier."""
        rows = self.rows()
        by_severity = {s.value: 0 for s in Severity}
        for row in rows:
            by_severity[row.severity.value] += 1
        return {
            "generated_at": self._clock().astimezone(timezone.utc).isoformat(),
            "urgency_mode": self._urgency_mode.value,
            "total_records": len(rows),
            "by_severity": by_severity,
            "most_urgent": rows[0].to_dict() if rows else None,
        }

    def export_csv(self) -> CsvExport:
        """Build the CSV export of every stored record, in stored order.

        Raises:
            NothingToExportError: the collection is empty.
        """
        records = self._store.load()
        if not records:
            raise NothingToExportError()

        now = self._clock()
        output = io.StringIO()
        writer = csv.writer(output, delimiter=CSV_DELIMITER, lineterminator="\n")
        writer.writerow(CSV_HEADER)
        for record in records:
            writer.writerow([
                _clean_field(record.name),
                _clean_field(record.code),
                _clean_field(record.lot),
                format_date(record.expiration_date),
                self.effective_days(record, now),
                format_timestamp(record.registered_at, self._tz),
            ])

        export = CsvExport(
            filename=export_filename(now.astimezone(timezone.utc).date()),
            content=output.getvalue(),
            row_count=len(records),
        )
        logger.info("Exported %d record(s) to %s", export.row_count, export.filename)
        return export

    def write_csv(self, directory: str | Path) -> Path:
        """Write the CSV export into *directory* and return its path."""
        export = self.export_csv()
        target = Path(directory) / export.filename
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(export.data)
        return target

    def clear_all(self, confirm: Callable[[str], Optional[bool]]) -> bool:
        """Delete every record after an affirmative confirmation.

        Returns True when the collection was cleared.
        """
        if not confirm(CLEAR_WARNING):
            logger.info("Clear-all declined")
            return False
        self._store.clear()
        return True
