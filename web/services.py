"""Backend service initialization for the web dashboard."""

from flask import current_app, flash

from blitz.dates import utcnow
from blitz.notifications import NoticeKind

FLASH_CATEGORIES = {
    NoticeKind.SUCCESS: "success",
    NoticeKind.ERROR: "danger",
}


class FlashNotifier:
    """Show notices as flashed messages on the next rendered page."""

    def show(self, message: str, kind: NoticeKind = NoticeKind.SUCCESS) -> None:
        flash(message, FLASH_CATEGORIES[kind])


def _clock():
    return current_app.config.get("BLITZ_CLOCK") or utcnow


def get_storage():
    from blitz.store import JsonFileStorage
    return JsonFileStorage(current_app.config["BLITZ_STORAGE_PATH"])


def get_record_store(storage=None):
    from blitz.store import RecordStore
    if storage is None:
        storage = get_storage()
    return RecordStore(storage, key=current_app.config["BLITZ_STORAGE_KEY"])


def get_registration_flow(store=None, notifier=None):
    from blitz.registration import RegistrationFlow
    if store is None:
        store = get_record_store()
    return RegistrationFlow(
        store,
        notifier or FlashNotifier(),
        clock=_clock(),
        threshold_days=current_app.config["BLITZ_STALENESS_DAYS"],
    )


def get_report_generator(store=None):
    from blitz.report import ReportGenerator
    from blitz.severity import build_thresholds
    if store is None:
        store = get_record_store()
    return ReportGenerator(
        store,
        clock=_clock(),
        urgency_mode=current_app.config["BLITZ_URGENCY_MODE"],
        thresholds=build_thresholds(
            current_app.config["BLITZ_CRITICAL_DAYS"],
            current_app.config["BLITZ_STALENESS_DAYS"],
        ),
    )


def parse_confirmation(value):
    """Map a ``confirmed`` form field to True, False or None (not asked yet)."""
    if value is None:
        return None
    return value.strip().lower() in ("yes", "sim", "1", "true")
