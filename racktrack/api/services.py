from dataclasses import dataclass
from pathlib import Path

from racktrack.artifacts.locator import ArtifactLocator
from racktrack.config.settings import Settings
from racktrack.notifications.contact_notifier import ContactNotifier
from racktrack.reports.generator import ReportGenerator
from racktrack.reports.publisher import ReportPublisher
from racktrack.runner.process_runner import ProcessRunner
from racktrack.sessions.base import BaseSessionStore
from racktrack.sessions.store import InMemorySessionStore
from racktrack.storage.base import BaseReportStore
from racktrack.storage.contact_store import ContactStore
from racktrack.storage.factory import ReportStoreFactory
from racktrack.storage.user_store import UserStore
from racktrack.uploads.models import ALLOWED_UPLOAD_TYPES
from racktrack.uploads.processor import UploadPipeline, build_upload_pipeline
from racktrack.uploads.registry import UploadRegistry

USERS_FILE = "users.json"
CONTACTS_FILE = "contacts.json"


@dataclass
class Services:
    """Collaborators shared by every request handler."""

    settings: Settings
    sessions: BaseSessionStore
    users: UserStore
    contacts: ContactStore
    reports: BaseReportStore
    uploads: UploadRegistry
    pipeline: UploadPipeline
    generator: ReportGenerator
    notifier: ContactNotifier
    locator: ArtifactLocator

    def upload_folders(self) -> list[Path]:
        return [self.settings.files_path / t for t in ALLOWED_UPLOAD_TYPES]


def build_services(settings: Settings, runner: ProcessRunner | None = None) -> Services:
    """Create directories and wire every collaborator from settings."""
    for folder in (settings.data_path, settings.staging_path, settings.reports_path):
        folder.mkdir(parents=True, exist_ok=True)
    for upload_type in ALLOWED_UPLOAD_TYPES:
        (settings.files_path / upload_type).mkdir(parents=True, exist_ok=True)

    runner = runner or ProcessRunner(default_timeout=settings.process_timeout_seconds)
    locator = ArtifactLocator()
    reports = ReportStoreFactory.create(settings)
    uploads = UploadRegistry()
    contacts = ContactStore(settings.data_path / CONTACTS_FILE)
    publisher = ReportPublisher(reports, settings.reports_path, settings.root_path)

    generator = ReportGenerator(
        runner,
        publisher,
        locator,
        executable=Path(settings.python_executable),
        scripts_root=settings.scripts_path,
        scripts=settings.report_scripts,
        artifact=settings.results_pdf_path,
        upload_folders=[settings.files_path / t for t in ALLOWED_UPLOAD_TYPES],
        base_dir=settings.root_path,
        timeout=settings.process_timeout_seconds,
    )
    notifier = ContactNotifier(
        contacts,
        api_key=settings.resend_api_key,
        sender=settings.resend_from,
        recipients=settings.contact_recipient_list(),
        timeout_seconds=settings.resend_timeout_seconds,
    )
    return Services(
        settings=settings,
        sessions=InMemorySessionStore(),
        users=UserStore(settings.data_path / USERS_FILE, rounds=settings.bcrypt_rounds),
        contacts=contacts,
        reports=reports,
        uploads=uploads,
        pipeline=build_upload_pipeline(settings, reports, uploads, runner=runner, locator=locator),
        generator=generator,
        notifier=notifier,
        locator=locator,
    )
