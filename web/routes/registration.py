"""Registration routes — product form and the out-of-criterion confirmation."""

from flask import Blueprint, render_template, request, redirect, url_for

from blitz.registration import RegistrationForm, RegistrationOutcome
from web.services import get_registration_flow, parse_confirmation

bp = Blueprint("registration", __name__)


@bp.route("/", methods=["GET", "POST"])
def index():
    if request.method == "GET":
        return render_template("registration/index.html", form=None)

    form = RegistrationForm.from_mapping(request.form)
    answer = parse_confirmation(request.form.get("confirmed"))
    flow = get_registration_flow()
    result = flow.submit(form, confirm=lambda message: answer)

    if result.outcome == RegistrationOutcome.INVALID:
        return render_template("registration/index.html", form=form), 400
    if result.outcome == RegistrationOutcome.STORAGE_ERROR:
        return render_template("registration/index.html", form=form), 500

    if result.outcome == RegistrationOutcome.PENDING_CONFIRMATION:
        return render_template(
            "registration/confirm.html",
            form=form,
            days_remaining=result.days_remaining,
            message=result.message,
        )

    # Registered or cancelled: start over with an empty form
    return redirect(url_for("registration.index"))
