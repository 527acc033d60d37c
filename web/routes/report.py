"""Report routes — urgency table, CSV export, clear all."""

from flask import Blueprint, Response, flash, redirect, render_template, request, url_for

from blitz.report import CLEAR_WARNING, CLEARED_MESSAGE, EMPTY_REPORT_MESSAGE, NothingToExportError
from web.services import get_report_generator, parse_confirmation

bp = Blueprint("report", __name__)


@bp.route("/")
def index():
    report = get_report_generator()
    rows = report.rows()
    return render_template(
        "report/index.html",
        rows=rows,
        empty_message=EMPTY_REPORT_MESSAGE,
        urgency_mode=report.urgency_mode.value,
    )


@bp.route("/export")
def export_csv():
    """Download every record as CSV."""
    report = get_report_generator()
    try:
        export = report.export_csv()
    except NothingToExportError as exc:
        flash(str(exc), "danger")
        return redirect(url_for("report.index"))

    return Response(
        export.data,
        mimetype="text/csv",
        headers={"Content-Disposition": f"attachment; filename={export.filename}"},
    )


@bp.route("/clear", methods=["POST"])
def clear():
    answer = parse_confirmation(request.form.get("confirmed"))
    if answer is None:
        return render_template("report/confirm_clear.html", warning=CLEAR_WARNING)

    report = get_report_generator()
    if report.clear_all(lambda message: answer):
        flash(CLEARED_MESSAGE, "success")
    return redirect(url_for("report.index"))
