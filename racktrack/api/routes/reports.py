from flask import Blueprint, Response, g, jsonify, request, send_file

from racktrack.api.auth import current_identity, get_services, login_required
from racktrack.artifacts.locator import IMAGE_EXTENSIONS
from racktrack.logging.logger import Log
from racktrack.sessions.models import Identity
from racktrack.storage.models import Report, parse_timestamp_ms
from racktrack.storage.paths import resolve_stored_path, to_stored_path

reports_bp = Blueprint("reports", __name__)

NO_STORE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate, private",
    "Pragma": "no-cache",
    "Expires": "0",
}


def _created_at_key(report: Report) -> float:
    return parse_timestamp_ms(report.created_at) or 0.0


def _send_report_pdf(report: Report) -> Response | tuple[Response, int]:
    path = resolve_stored_path(report.pdf_path, get_services().settings.root_path)
    if not path.exists():
        return jsonify({"success": False, "message": "PDF file not found"}), 404
    response = send_file(
        path,
        mimetype="application/pdf",
        download_name=report.filename or "report.pdf",
        max_age=0,
    )
    response.headers["Cache-Control"] = "no-cache"
    return response


@reports_bp.route("/generate-report", methods=["POST"])
def generate_report():
    """Run the report scripts and record the merged PDF for the caller."""
    services = get_services()
    outcome = services.generator.generate(current_identity())
    return jsonify({
        "success": True,
        "message": "Report generated successfully",
        "pdfPath": to_stored_path(outcome.artifact, services.settings.root_path),
        "reportId": outcome.report.id if outcome.report else None,
        "logs": [log.to_dict() for log in outcome.logs],
    })


@reports_bp.route("/report/pdf", methods=["GET"])
@login_required
def latest_report_pdf():
    """Serve the caller's most recent report. HEAD is answered from the same view."""
    identity: Identity = g.identity
    reports = get_services().reports.list_by_user(identity.user_id or "")
    if not reports:
        return jsonify({"success": False, "message": "No reports found"}), 404
    latest = max(reports, key=_created_at_key)
    return _send_report_pdf(latest)


@reports_bp.route("/report/<report_id>/pdf", methods=["GET"])
@login_required
def report_pdf(report_id: str):
    identity: Identity = g.identity
    report = get_services().reports.get(report_id)
    if report is None:
        return jsonify({"success": False, "message": "Report not found"}), 404
    if report.user_id != identity.user_id:
        return jsonify({"success": False, "message": "Forbidden"}), 403
    return _send_report_pdf(report)


@reports_bp.route("/history/<uid>", methods=["GET"])
@login_required
def history(uid: str):
    """List a user's reports, newest first. Users may only read their own history."""
    identity: Identity = g.identity
    if identity.user_id != uid:
        return jsonify({"success": False, "message": "Forbidden"}), 403
    reports = sorted(get_services().reports.list_by_user(uid), key=_created_at_key, reverse=True)
    return jsonify({"success": True, "reports": [r.to_dict() for r in reports]})


@reports_bp.route("/reports/<report_id>", methods=["DELETE"])
@login_required
def delete_report(report_id: str):
    identity: Identity = g.identity
    services = get_services()
    report = services.reports.get(report_id)
    if report is None:
        return jsonify({"success": False, "message": "Report not found"}), 404
    if report.user_id != identity.user_id:
        return jsonify({"success": False, "message": "Forbidden"}), 403

    try:
        resolve_stored_path(report.pdf_path, services.settings.root_path).unlink(missing_ok=True)
    except OSError as exc:
        Log.warning(f"Failed to delete report file {report.pdf_path}: {exc}")

    deleted = services.reports.delete(report_id)
    return jsonify({"success": deleted})


@reports_bp.route("/original-image", methods=["GET"])
def original_image():
    """Serve the newest uploaded image, or the first whose name starts with ?name=."""
    services = get_services()
    candidates = services.locator.scan(services.upload_folders(), extensions=IMAGE_EXTENSIONS)
    requested = request.args.get("name")
    if requested:
        match = next((c for c in candidates if c.path.name.startswith(requested)), None)
    else:
        match = services.locator.newest(candidates)

    if match is None:
        return jsonify({"success": False, "message": "No original image found"}), 404
    response = send_file(match.path, max_age=0)
    response.headers.update(NO_STORE_HEADERS)
    return response
