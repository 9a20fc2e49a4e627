from flask import Flask

from racktrack.api.errors import register_error_handlers
from racktrack.api.services import Services, build_services
from racktrack.config.settings import Settings


def create_app(settings: Settings | None = None, services: Services | None = None) -> Flask:
    """Application factory function"""
    settings = settings or (services.settings if services is not None else Settings())
    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = settings.max_upload_bytes
    app.extensions["racktrack"] = services or build_services(settings)

    register_error_handlers(app)

    from racktrack.api.routes.auth import auth_bp
    from racktrack.api.routes.contact import contact_bp
    from racktrack.api.routes.reports import reports_bp
    from racktrack.api.routes.uploads import uploads_bp
    app.register_blueprint(auth_bp, url_prefix="/api")
    app.register_blueprint(uploads_bp, url_prefix="/api")
    app.register_blueprint(reports_bp, url_prefix="/api")
    app.register_blueprint(contact_bp, url_prefix="/api")
    return app
