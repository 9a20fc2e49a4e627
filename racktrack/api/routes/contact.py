import pydantic
from flask import Blueprint, jsonify, request

from racktrack.api.auth import get_services
from racktrack.api.schemas import ContactRequest

contact_bp = Blueprint("contact", __name__)


@contact_bp.route("/contact", methods=["POST"])
def submit_contact():
    """Store a contact-form message, then try to email it."""
    try:
        data = ContactRequest.model_validate(request.get_json(silent=True) or {})
    except pydantic.ValidationError:
        return jsonify({"success": False, "message": "Failed to submit contact form"}), 400

    services = get_services()
    contact = services.contacts.create(data.name, data.email, data.message)
    contact = services.notifier.notify(contact)
    return jsonify({
        "success": True,
        "message": "Message received",
        "contact": contact.to_dict(),
    }), 201
