import sys
from collections.abc import Iterator
from pathlib import Path

import pytest
from flask import Flask
from flask.testing import FlaskClient

from racktrack.api.app import create_app
from racktrack.api.services import build_services
from racktrack.config.settings import Settings
from tests.helpers import write_script

REPORT_SCRIPTS = ["1_prepare.py", "2_merge.py"]

# Stand-in for the detection scripts: copies a fixture PDF to the merged result path.
MERGE_SCRIPT = """\
import shutil
from pathlib import Path

target = Path({artifact!r})
target.parent.mkdir(parents=True, exist_ok=True)
shutil.copyfile({source!r}, target)
print("merged")
"""


@pytest.fixture()
def project(tmp_path: Path, merged_pdf_bytes: bytes) -> Settings:
    """A project directory with working upload and report scripts."""
    fixture_pdf = tmp_path / "fixture.pdf"
    fixture_pdf.write_bytes(merged_pdf_bytes)
    settings = Settings(
        base_dir=tmp_path,
        python_executable=sys.executable,
        bcrypt_rounds=4,
        report_store_backend="json",
        report_scripts=REPORT_SCRIPTS,
        process_timeout_seconds=30,
        resend_api_key="",
        contact_recipients="",
    )
    merge = MERGE_SCRIPT.format(
        artifact=str(settings.results_pdf_path), source=str(fixture_pdf)
    )
    scripts = settings.scripts_path
    write_script(scripts / "single.py", merge)
    write_script(scripts / "multii.py", merge)
    write_script(scripts / "video.py", "print('video processed')\n")
    write_script(scripts / "1_prepare.py", "print('prepared')\n")
    write_script(scripts / "2_merge.py", merge)
    return settings


@pytest.fixture()
def app(project: Settings) -> Iterator[Flask]:
    app = create_app(services=build_services(project))
    app.config["TESTING"] = True
    yield app


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    return app.test_client()
