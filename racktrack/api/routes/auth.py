import pydantic
from flask import Blueprint, g, jsonify, request

from racktrack.api.auth import bearer_token, get_services, login_required
from racktrack.api.schemas import Credentials, ProfileUpdate
from racktrack.logging.logger import Log
from racktrack.sessions.models import Identity
from racktrack.storage.exceptions import DuplicateUserError

auth_bp = Blueprint("auth", __name__)


@auth_bp.route("/register", methods=["POST"])
def register():
    """Create an account."""
    try:
        credentials = Credentials.model_validate(request.get_json(silent=True) or {})
    except pydantic.ValidationError:
        return jsonify({"success": False, "message": "username and password are required"}), 400

    try:
        user = get_services().users.create(credentials.username, credentials.password)
    except DuplicateUserError:
        return jsonify({"success": False, "message": "Username already exists"}), 400

    return jsonify({
        "success": True,
        "message": "User registered",
        "user": {"id": user.id, "username": user.username},
    }), 201


@auth_bp.route("/login", methods=["POST"])
def login():
    """Validate credentials and open a session."""
    try:
        credentials = Credentials.model_validate(request.get_json(silent=True) or {})
    except pydantic.ValidationError:
        return jsonify({"success": False, "message": "Invalid request"}), 400

    services = get_services()
    if not services.users.validate_credentials(credentials.username, credentials.password):
        return jsonify({"success": False, "message": "Invalid credentials"}), 401

    user = services.users.get_by_username(credentials.username)
    session_id = services.sessions.create(
        Identity(username=credentials.username, user_id=user.id if user else None)
    )
    Log.info(f"User {credentials.username} logged in")
    return jsonify({
        "success": True,
        "message": "Login successful",
        "sessionId": session_id,
        "user": {"id": user.id, "username": user.username} if user else None,
    })


@auth_bp.route("/logout", methods=["POST"])
def logout():
    token = bearer_token()
    if token:
        get_services().sessions.invalidate(token)
    return jsonify({"success": True, "message": "Logged out"})


@auth_bp.route("/session", methods=["GET"])
@login_required
def session():
    identity: Identity = g.identity
    return jsonify({
        "success": True,
        "user": {"id": identity.user_id, "username": identity.username},
    })


@auth_bp.route("/user/profile", methods=["GET"])
@login_required
def get_profile():
    identity: Identity = g.identity
    if not identity.user_id:
        return jsonify({"success": False, "message": "Invalid session"}), 401

    user = get_services().users.get(identity.user_id)
    if user is None:
        return jsonify({"success": False, "message": "User not found"}), 404
    return jsonify({"success": True, "user": user.to_public_dict()})


@auth_bp.route("/user/profile", methods=["PATCH"])
@login_required
def update_profile():
    identity: Identity = g.identity
    if not identity.user_id:
        return jsonify({"success": False, "message": "Invalid session"}), 401

    try:
        profile = ProfileUpdate.model_validate(request.get_json(silent=True) or {})
    except pydantic.ValidationError:
        return jsonify({"success": False, "message": "Failed to update profile"}), 400

    user = get_services().users.update_profile(
        identity.user_id,
        email=profile.email,
        full_name=profile.fullName,
        profile_image=profile.profileImage,
    )
    if user is None:
        return jsonify({"success": False, "message": "User not found"}), 404
    return jsonify({"success": True, "message": "Profile updated", "user": user.to_public_dict()})
