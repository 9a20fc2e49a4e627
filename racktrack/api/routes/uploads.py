from pathlib import Path

from flask import Blueprint, jsonify, request
from werkzeug.datastructures import FileStorage

from racktrack.api.auth import current_identity, get_services
from racktrack.uploads.models import IncomingFile
from racktrack.uploads.placement import unique_filename
from racktrack.uploads.validator import discard_staged

uploads_bp = Blueprint("uploads", __name__)


def stage_files(files: list[FileStorage], staging_dir: Path) -> list[IncomingFile]:
    """Save request files into staging under collision-resistant names."""
    staging_dir.mkdir(parents=True, exist_ok=True)
    staged: list[IncomingFile] = []
    try:
        for storage in files:
            original_name = storage.filename or ""
            path = staging_dir / unique_filename(original_name)
            storage.save(path)
            staged.append(
                IncomingFile(
                    original_name=original_name,
                    mimetype=storage.mimetype or "",
                    staged_path=path,
                )
            )
    except OSError:
        discard_staged(staged)
        raise
    return staged


@uploads_bp.route("/upload", methods=["POST"])
def upload():
    """Accept a batch, process the newest file and record a report for signed-in users."""
    services = get_services()
    upload_type = request.form.get("uploadType")
    files = [f for f in request.files.getlist("files") if f.filename]
    staged = stage_files(files, services.settings.staging_path)

    context = services.pipeline.run(upload_type, staged, current_identity())

    return jsonify({
        "success": True,
        "message": f"Successfully uploaded {len(context.placed)} file(s)",
        "uploads": [u.to_dict() for u in context.uploads],
        "reports": [r.to_dict() for r in context.reports],
    })


@uploads_bp.route("/uploads", methods=["GET"])
def list_uploads():
    uploads = get_services().uploads.list_all()
    return jsonify({"success": True, "uploads": [u.to_dict() for u in uploads]})
