"""Registration flow — validate a submission, confirm stale products, commit.

Products expiring within the staleness criterion are registered directly.
Anything further out needs an explicit confirmation; nothing is written to
the store unless that confirmation comes back affirmative.

Usage:
    flow = RegistrationFlow(store, ConsoleNotifier())
    result = flow.submit(form, confirm=lambda message: ask_yes_no(message))
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, Mapping, Optional

from blitz.dates import days_until, parse_calendar_date, utcnow
from blitz.notifications import NoticeKind
from blitz.record import ProductRecord
from blitz.store import UnreadableCollectionError
from config.settings import STALENESS_THRESHOLD_DAYS

logger = logging.getLogger(__name__)

REGISTERED_MESSAGE = "Produto registrado com sucesso!"
CANCELLED_MESSAGE = "Registro cancelado pelo usuário."

# Returns True to proceed, False to decline, None when the answer is not known yet.
ConfirmCallback = Callable[[str], Optional[bool]]


class RegistrationOutcome(str, Enum):
    REGISTERED = "registered"
    CANCELLED = "cancelled"
    PENDING_CONFIRMATION = "pending_confirmation"
    INVALID = "invalid"
    STORAGE_ERROR = "storage_error"


@dataclass
class RegistrationForm:
    """The four fields of a registration submission, as typed."""

    name: str
    code: str
    lot: str
    expiration_date: str

    @classmethod
    def from_mapping(cls, data: Mapping) -> "RegistrationForm":
        return cls(
            name=(data.get("name") or "").strip(),
            code=(data.get("code") or "").strip(),
            lot=(data.get("lot") or "").strip(),
            expiration_date=(data.get("expiration_date") or "").strip(),
        )

    def as_dict(self) -> dict:
        return {
            "name": self.name,
            "code": self.code,
            "lot": self.lot,
            "expiration_date": self.expiration_date,
        }


@dataclass
class RegistrationResult:
    outcome: RegistrationOutcome
    days_remaining: Optional[int] = None
    record: Optional[ProductRecord] = None
    message: str = ""
    errors: list[str] = field(default_factory=list)

    @property
    def reset_form(self) -> bool:
        """Inputs are cleared and focus returns to the first field."""
        return self.outcome == RegistrationOutcome.REGISTERED


class RegistrationFlow:
    """Register products, asking for confirmation outside the criterion."""

    def __init__(
        self,
        store,
        notifier,
        clock: Callable[[], datetime] = utcnow,
        threshold_days: int = STALENESS_THRESHOLD_DAYS,
        tz=None,
    ):
        self._store = store
        self._notifier = notifier
        self._clock = clock
        self._threshold_days = threshold_days
        self._tz = tz

    def validate(self, form: RegistrationForm) -> list[str]:
        """Return a list of problems with *form*; empty when it is usable."""
        errors = []
        if not form.name:
            errors.append("Informe o nome do produto.")
        if not form.code:
            errors.append("Informe o código de barras.")
        if not form.lot:
            errors.append("Informe o lote.")
        if not form.expiration_date:
            errors.append("Informe a data de vencimento.")
        else:
            try:
                parse_calendar_date(form.expiration_date)
            except ValueError as exc:
                errors.append(str(exc))
        return errors

    def needs_confirmation(self, days_remaining: int) -> bool:
        return days_remaining > self._threshold_days

    def confirmation_message(self, days_remaining: int) -> str:
        return (
            f"ATENÇÃO: Este produto vence em {days_remaining} dias "
            f"(fora do critério de {self._threshold_days} dias).\n\n"
            "Deseja registrar mesmo assim?"
        )

    def submit(self, form: RegistrationForm, confirm: Optional[ConfirmCallback] = None) -> RegistrationResult:
        """Process one submission.

        Args:
            form: The submitted fields.
            confirm: Asked only when the product is outside the criterion.
                ``None`` behaves like a callback that cannot answer yet.

        Returns:
            RegistrationResult describing what happened. Only the
            ``REGISTERED`` outcome touches the store.
        """
        errors = self.validate(form)
        if errors:
            message = " ".join(errors)
            self._notifier.show(message, NoticeKind.ERROR)
            return RegistrationResult(
                outcome=RegistrationOutcome.INVALID,
                message=message,
                errors=errors,
            )

        expiration = parse_calendar_date(form.expiration_date)
        days_remaining = days_until(expiration, self._clock(), self._tz)

        if self.needs_confirmation(days_remaining):
            prompt = self.confirmation_message(days_remaining)
            answer = confirm(prompt) if confirm else None
            if answer is None:
                return RegistrationResult(
                    outcome=RegistrationOutcome.PENDING_CONFIRMATION,
                    days_remaining=days_remaining,
                    message=prompt,
                )
            if not answer:
                logger.info("Registration of %r declined (%d days remaining)", form.name, days_remaining)
                self._notifier.show(CANCELLED_MESSAGE, NoticeKind.ERROR)
                return RegistrationResult(
                    outcome=RegistrationOutcome.CANCELLED,
                    days_remaining=days_remaining,
                    message=CANCELLED_MESSAGE,
                )

        return self._commit(form, expiration, days_remaining)

    def _commit(self, form: RegistrationForm, expiration, days_remaining: int) -> RegistrationResult:
        record = ProductRecord(
            name=form.name,
            code=form.code,
            lot=form.lot,
            expiration_date=expiration,
            days_remaining=days_remaining,
            registered_at=self._clock(),
        )
        try:
            self._store.append(record)
        except UnreadableCollectionError as exc:
            message = str(exc)
            self._notifier.show(message, NoticeKind.ERROR)
            return RegistrationResult(
                outcome=RegistrationOutcome.STORAGE_ERROR,
                days_remaining=days_remaining,
                message=message,
            )
        logger.info(
            "Registered %r (code %s, lot %s) expiring %s, %d days remaining",
            record.name, record.code, record.lot, record.expiration_date, days_remaining,
        )
        self._notifier.show(REGISTERED_MESSAGE, NoticeKind.SUCCESS)
        return RegistrationResult(
            outcome=RegistrationOutcome.REGISTERED,
            days_remaining=days_remaining,
            record=record,
            message=REGISTERED_MESSAGE,
        )
