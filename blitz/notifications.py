"""Transient user notices.

A notifier is anything with ``show(message, kind)``. The web dashboard flashes
notices into the next page; the command line prints them.
"""

import logging
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)


class NoticeKind(str, Enum):
    SUCCESS = "sucesso"
    ERROR = "erro"


@dataclass
class Notice:
    message: str
    kind: NoticeKind


class ConsoleNotifier:
    """Print notices to stdout."""

    PREFIXES = {
        NoticeKind.SUCCESS: "[OK]",
        NoticeKind.ERROR: "[ERRO]",
    }

    def show(self, message: str, kind: NoticeKind = NoticeKind.SUCCESS) -> None:
        print(f"{self.PREFIXES[kind]} {message}")


class RecordingNotifier:
    """Keep notices in memory in the order they were shown."""

    def __init__(self):
        self.notices: list[Notice] = []

    def show(self, message: str, kind: NoticeKind = NoticeKind.SUCCESS) -> None:
        logger.debug("Notice (%s): %s", kind.value, message)
        self.notices.append(Notice(message=message, kind=kind))

    @property
    def last(self):
        return self.notices[-1] if self.notices else None
