import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    http_host: str = "127.0.0.1"
    http_port: int = 5000
    max_file_bytes: int = 50 * 1024 * 1024
    max_upload_bytes: int = 1024 * 1024 * 1024

    base_dir: Path = Path(".")
    data_dir: str = "data"
    files_dir: str = "files"
    reports_dir: str = "reports"
    results_pdf: str = "Results/Merged_Result.pdf"

    python_executable: str = sys.executable
    scripts_dir: str = "python_codes"
    upload_scripts: dict[str, str] = Field(
        default_factory=lambda: {
            "single-image": "single.py",
            "multiple-images": "multii.py",
            "video": "video.py",
        }
    )
    report_scripts: list[str] = Field(
        default_factory=lambda: [
            "1_rack_match.py",
            "2_switch_match.py",
            "3_patchpanel_match.py",
            "4_1_conneted_port_match.py",
            "4_port_match.py",
            "5_cable_match.py",
            "6_merge_result.py",
        ]
    )
    process_timeout_seconds: float | None = None

    report_store_backend: str = "json"
    bcrypt_rounds: int = 10

    contact_recipients: str = ""
    resend_api_key: str = ""
    resend_from: str = "no-reply@racktrack.ai"
    resend_timeout_seconds: int = 15

    @property
    def root_path(self) -> Path:
        return self.base_dir.resolve()

    @property
    def data_path(self) -> Path:
        return self.root_path / self.data_dir

    @property
    def files_path(self) -> Path:
        return self.root_path / self.files_dir

    @property
    def staging_path(self) -> Path:
        return self.files_path / "temp"

    @property
    def reports_path(self) -> Path:
        return self.root_path / self.reports_dir

    @property
    def results_pdf_path(self) -> Path:
        return self.root_path / self.results_pdf

    @property
    def scripts_path(self) -> Path:
        return self.root_path / self.scripts_dir

    def contact_recipient_list(self) -> list[str]:
        """Split the comma-separated recipient setting into addresses."""
        return [r.strip() for r in self.contact_recipients.split(",") if r.strip()]
