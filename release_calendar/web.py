# release_calendar/web.py
from flask import Blueprint, render_template, request, redirect, url_for, flash, current_app, Response
from release_calendar.grid import month_year_display, next_month, previous_month, weekday_names
from release_calendar.repo import RepoError
from release_calendar.service import CalendarService, ValidationError, NotFoundError
from datetime import date
import json, logging
from typing import Optional

logger = logging.getLogger(__name__)

bp = Blueprint("main", __name__, url_prefix="", template_folder="templates")  # blueprint name = 'main'

def register_routes(app, service: CalendarService):
    """
    Register blueprint and ensure SERVICE is in app.config.
    Call this once during app creation (run.create_app does this).
    """
    if "SERVICE" not in app.config:
        app.config["SERVICE"] = service
    app.register_blueprint(bp)
    logger.debug("Registered blueprint 'main' and injected SERVICE")

def register_error_handlers(app):
    """Centralized handlers for service exceptions."""
    @app.errorhandler(ValidationError)
    def handle_validation_error(e):
        logger.warning("ValidationError: %s", e)
        return render_template("error.html", message=str(e)), 400

    @app.errorhandler(NotFoundError)
    def handle_not_found(e):
        logger.info("NotFoundError: %s", e)
        return render_template("error.html", message=str(e)), 404

    @app.errorhandler(RepoError)
    def handle_repo_error(e):
        logger.error("RepoError: %s", e)
        return render_template("error.html", message="storage unavailable"), 500

# helper to get service instance
def current_service() -> CalendarService:
    return current_app.config["SERVICE"]

def _optional_int(name: str) -> Optional[int]:
    raw = request.form.get(name, "").strip()
    return int(raw) if raw != "" else None

def _series_form() -> dict:
    """Read the series form; raises ValueError for non-numeric fields."""
    return {
        "source_url": request.form.get("source_url", ""),
        "title": request.form.get("title", ""),
        "start_date": request.form.get("start_date", "").strip(),
        "season": _optional_int("season"),
        "episode_start": _optional_int("episode_start"),
        "release_interval": _optional_int("release_interval"),
        "max_episodes": _optional_int("max_episodes"),
    }

# -----------------------
# Calendar
# -----------------------
@bp.route("/")
def index():
    return redirect(url_for("main.calendar_view"))

@bp.route("/calendar")
def calendar_view():
    svc = current_service()
    today = date.today()
    year = request.args.get("year", type=int) or today.year
    month = request.args.get("month", type=int) or today.month
    cells = svc.month_view(year, month, today=today)  # ValidationError -> 400
    return render_template(
        "calendar.html",
        cells=cells,
        weeks=[cells[i:i + 7] for i in range(0, len(cells), 7)],
        weekdays=weekday_names(),
        title=month_year_display(year, month),
        prev=previous_month(year, month),
        next=next_month(year, month),
    )

@bp.route("/events/<event_id>/watched", methods=["POST"])
def event_watched(event_id: str):
    svc = current_service()
    watched = request.form.get("watched", "1") == "1"
    svc.set_event_watched(event_id, watched)
    flash("Marked as watched" if watched else "Watched status removed", "success")
    return redirect(request.referrer or url_for("main.calendar_view"))

# -----------------------
# Series
# -----------------------
@bp.route("/series")
def series_list():
    svc = current_service()
    return render_template("series_list.html", series=svc.list_series())

@bp.route("/series/new", methods=["GET", "POST"])
def series_new():
    svc = current_service()
    if request.method == "POST":
        try:
            form = _series_form()
            if form["release_interval"] is None:
                form["release_interval"] = 7
            s = svc.add_series(**form)
            flash(f"Series added: {s.title or s.source_url}", "success")
            return redirect(url_for("main.series_list"))
        except (ValidationError, ValueError) as e:
            flash(str(e), "danger")
    return render_template("series_form.html", series=None, today=date.today().isoformat())

@bp.route("/series/<series_id>/edit", methods=["GET", "POST"])
def series_edit(series_id: str):
    svc = current_service()
    try:
        s = svc.get_series(series_id)
    except NotFoundError:
        flash("Series not found", "danger")
        return redirect(url_for("main.series_list"))
    if request.method == "POST":
        try:
            changes = _series_form()
            # blank keeps the stored value
            for key in ("season", "episode_start", "release_interval"):
                if changes[key] is None:
                    changes[key] = getattr(s, key)
            svc.update_series(series_id, **changes)
            flash("Series updated", "success")
            return redirect(url_for("main.series_list"))
        except (ValidationError, ValueError) as e:
            flash(str(e), "danger")
    return render_template("series_form.html", series=s, today=date.today().isoformat())

@bp.route("/series/<series_id>/delete", methods=["POST"])
def series_delete(series_id: str):
    svc = current_service()
    try:
        svc.delete_series(series_id)
        flash("Series deleted", "info")
    except NotFoundError as e:
        flash(str(e), "danger")
    return redirect(url_for("main.series_list"))

# -----------------------
# Import / Export endpoints
# -----------------------
@bp.route("/export")
def export_data():
    svc = current_service()
    payload = svc.export_data()
    return Response(json.dumps(payload, ensure_ascii=False), mimetype="application/json",
                    headers={"Content-Disposition": "attachment; filename=release_calendar.json"})

@bp.route("/import", methods=["GET", "POST"])
def import_data():
    svc = current_service()
    if request.method == "POST":
        file = request.files.get("file")
        if not file:
            flash("No file uploaded", "danger")
            return redirect(url_for("main.import_data"))
        try:
            payload = json.loads(file.read().decode("utf-8"))
        except (UnicodeDecodeError, ValueError) as e:
            logger.exception("Failed to parse uploaded file")
            flash(f"Failed to parse file: {e}", "danger")
            return redirect(url_for("main.import_data"))
        try:
            created, errors = svc.import_data(payload)
        except ValidationError as e:
            flash(str(e), "danger")
            return redirect(url_for("main.import_data"))
        flash(f"Imported: series={created}, errors={len(errors)}", "info")
        return redirect(url_for("main.series_list"))
    return render_template("import.html")
