"""REST API v1 — JSON endpoints for automation and integration."""

from flask import Blueprint, jsonify, request

from blitz.notifications import RecordingNotifier
from blitz.registration import RegistrationForm, RegistrationOutcome
from blitz.severity import Severity
from web.services import get_record_store, get_registration_flow, get_report_generator, parse_confirmation

bp = Blueprint("api", __name__)


def _error(message, status=400, **extra):
    body = {"error": message}
    body.update(extra)
    return jsonify(body), status


def _as_answer(value):
    if isinstance(value, bool):
        return value
    return parse_confirmation(None if value is None else str(value))


# ── Records ──────────────────────────────────────────────────────────

@bp.route("/records")
def list_records():
    """Report rows, most urgent first."""
    rows = get_report_generator().rows()
    severity = request.args.get("severity")
    if severity:
        try:
            wanted = Severity(severity)
        except ValueError:
            return _error(f"Invalid severity: {severity}")
        rows = [r for r in rows if r.severity == wanted]
    return jsonify([r.to_dict() for r in rows])


@bp.route("/records/summary")
def records_summary():
    return jsonify(get_report_generator().summary())


@bp.route("/records", methods=["POST"])
def create_record():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return _error("Request body must be a JSON object")

    form = RegistrationForm.from_mapping({k: str(v) for k, v in data.items() if v is not None and k != "confirmed"})
    answer = _as_answer(data.get("confirmed"))
    flow = get_registration_flow(notifier=RecordingNotifier())
    result = flow.submit(form, confirm=lambda message: answer)

    if result.outcome == RegistrationOutcome.INVALID:
        return _error(result.message, errors=result.errors)
    if result.outcome == RegistrationOutcome.STORAGE_ERROR:
        return _error(result.message, 500)
    if result.outcome == RegistrationOutcome.PENDING_CONFIRMATION:
        return _error(
            result.message, 409,
            confirmation_required=True,
            days_remaining=result.days_remaining,
        )
    if result.outcome == RegistrationOutcome.CANCELLED:
        return jsonify({
            "outcome": result.outcome.value,
            "message": result.message,
            "days_remaining": result.days_remaining,
        }), 200
    return jsonify({
        "outcome": result.outcome.value,
        "message": result.message,
        "record": result.record.to_dict(),
    }), 201


@bp.route("/records", methods=["DELETE"])
def clear_records():
    """Clear every record; requires ``?confirm=yes``."""
    if not _as_answer(request.args.get("confirm")):
        return _error("Clearing all records requires confirm=yes")
    get_record_store().clear()
    return jsonify({"cleared": True})
