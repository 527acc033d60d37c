"""Tests for the report generator."""

import shutil
import tempfile
import unittest
from datetime import date, datetime, timedelta, timezone
from pathlib import Path

from blitz.record import ProductRecord
from blitz.report import (
    CSV_HEADER,
    NothingToExportError,
    ReportGenerator,
    UrgencyMode,
    export_filename,
)
from blitz.severity import Severity
from blitz.store import MemoryStorage, RecordStore

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)
TODAY = date(2026, 10, 18)


class ReportTestCase(unittest.TestCase):

    def setUp(self):
        self.store = RecordStore(MemoryStorage())
        self.report = ReportGenerator(self.store, clock=lambda: NOW, tz=timezone.utc)

    def _add(self, name, days, registered_days_ago=0, **kw):
        record = ProductRecord(
            name=name,
            code=kw.pop("code", "789"),
            lot=kw.pop("lot", "L1"),
            expiration_date=TODAY - timedelta(days=registered_days_ago) + timedelta(days=days),
            days_remaining=days,
            registered_at=NOW - timedelta(days=registered_days_ago),
        )
        self.store.append(record)
        return record


class TestReportRows(ReportTestCase):

    def test_empty(self):
        self.assertEqual(self.store.load(), [])
        self.assertEqual(self.report.rows(), [])

    def test_sorted_most_urgent_first(self):
        for name, days in [("c", 60), ("a", -1), ("d", 8), ("b", 7), ("e", 45)]:
            self._add(name, days)
        rows = self.report.rows()
        self.assertEqual([r.record.name for r in rows], ["a", "b", "d", "e", "c"])
        for current, following in zip(rows, rows[1:]):
            self.assertLessEqual(current.days_remaining, following.days_remaining)

    def test_ties_keep_insertion_order(self):
        for name in ("first", "second", "third"):
            self._add(name, 10)
        self.assertEqual([r.record.name for r in self.report.rows()], ["first", "second", "third"])

    def test_severity_classes(self):
        self._add("crit", 7)
        self._add("warn-low", 8)
        self._add("warn-high", 45)
        self._add("none", 46)
        rows = {r.record.name: r for r in self.report.rows()}
        self.assertEqual(rows["crit"].severity, Severity.CRITICAL)
        self.assertEqual(rows["crit"].css_class, "vencendo-7d")
        self.assertEqual(rows["warn-low"].css_class, "vencendo-45d")
        self.assertEqual(rows["warn-high"].css_class, "vencendo-45d")
        self.assertEqual(rows["none"].css_class, "")

    def test_display_formats(self):
        self._add("x", 10)
        row = self.report.rows()[0]
        self.assertEqual(row.expiration_display, "28/10/2026")
        self.assertEqual(row.registered_display, "18/10/2026, 12:00:00")

    def test_summary(self):
        self._add("a", 2)
        self._add("b", 20)
        self._add("c", 90)
        summary = self.report.summary()
        self.assertEqual(summary["total_records"], 3)
        self.assertEqual(summary["by_severity"], {"critical": 1, "warning": 1, "none": 1})
        self.assertEqual(summary["most_urgent"]["name"], "a")
        self.assertEqual(summary["urgency_mode"], "snapshot")


class TestUrgencyModes(ReportTestCase):

    def test_snapshot_keeps_registration_count(self):
        # Registered 30 days ago with 40 days left: 10 days left today
        self._add("old", 40, registered_days_ago=30)
        row = self.report.rows()[0]
        self.assertEqual(row.days_remaining, 40)
        self.assertEqual(row.severity, Severity.WARNING)

    def test_live_recomputes_from_today(self):
        self._add("old", 40, registered_days_ago=35)
        live = ReportGenerator(self.store, clock=lambda: NOW, urgency_mode=UrgencyMode.LIVE, tz=timezone.utc)
        row = live.rows()[0]
        self.assertEqual(row.days_remaining, 5)
        self.assertEqual(row.severity, Severity.CRITICAL)
        self.assertEqual(row.record.days_remaining, 40)

    def test_live_changes_order(self):
        self._add("registered-late", 20)
        self._add("registered-early", 30, registered_days_ago=25)
        snapshot = [r.record.name for r in self.report.rows()]
        live = ReportGenerator(self.store, clock=lambda: NOW, urgency_mode="live", tz=timezone.utc)
        self.assertEqual(snapshot, ["registered-late", "registered-early"])
        self.assertEqual([r.record.name for r in live.rows()], ["registered-early", "registered-late"])

    def test_unknown_mode_rejected(self):
        with self.assertRaises(ValueError):
            ReportGenerator(self.store, urgency_mode="sometimes")


class TestCsvExport(ReportTestCase):

    def test_empty_export_raises(self):
        with self.assertRaises(NothingToExportError) as ctx:
            self.report.export_csv()
        self.assertEqual(str(ctx.exception), "Não há dados para exportar.")

    def test_filename_embeds_date(self):
        self._add("a", 1)
        self.assertEqual(self.report.export_csv().filename, "RELATORIO_BLITZ_2026-10-18.csv")
        self.assertEqual(export_filename(date(2027, 1, 2)), "RELATORIO_BLITZ_2027-01-02.csv")

    def test_header_and_rows(self):
        self._add("Feijão", 10, code="111", lot="F1")
        self._add("Açúcar", 3, code="222", lot="A9")
        lines = self.report.export_csv().content.splitlines()
        self.assertEqual(lines[0], "Produto;Codigo_Barras;Lote;Data_Vencimento;Dias_Restantes;Data_Registro")
        self.assertEqual(lines[0].split(";"), CSV_HEADER)
        self.assertEqual(lines[1], "Feijão;111;F1;28/10/2026;10;18/10/2026, 12:00:00")
        self.assertEqual(lines[2], "Açúcar;222;A9;21/10/2026;3;18/10/2026, 12:00:00")
        self.assertEqual(len(lines), 3)

    def test_semicolons_replaced(self):
        self._add("Biscoito; recheado", 5)
        self._add("Suco", 9, code="12;34", lot="L;2")
        export = self.report.export_csv()
        lines = export.content.splitlines()
        self.assertEqual(export.row_count, 2)
        self.assertTrue(lines[1].startswith("Biscoito, recheado;"))
        self.assertTrue(lines[2].startswith("Suco;12,34;L,2;"))
        for line in lines:
            self.assertEqual(len(line.split(";")), 6)

    def test_utf8_bytes(self):
        self._add("Pão de queijo", 2)
        self.assertIn("Pão".encode("utf-8"), self.report.export_csv().data)

    def test_write_csv(self):
        self._add("a", 1)
        tmpdir = tempfile.mkdtemp(prefix="blitz_export_")
        try:
            path = self.report.write_csv(Path(tmpdir) / "out")
            self.assertEqual(path.name, "RELATORIO_BLITZ_2026-10-18.csv")
            self.assertTrue(path.read_text(encoding="utf-8").startswith("Produto;"))
        finally:
            shutil.rmtree(tmpdir, ignore_errors=True)


class TestClearAll(ReportTestCase):

    def test_confirmed_clear(self):
        self._add("a", 1)
        prompts = []
        cleared = self.report.clear_all(lambda message: prompts.append(message) or True)
        self.assertTrue(cleared)
        self.assertIn("TODOS", prompts[0])
        self.assertEqual(self.store.load(), [])

    def test_declined_clear(self):
        self._add("a", 1)
        self.assertFalse(self.report.clear_all(lambda message: False))
        self.assertEqual(len(self.report.rows()), 1)


if __name__ == "__main__":
    unittest.main()
