import io
import sys
from pathlib import Path

import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from racktrack.config.settings import Settings


@pytest.fixture()
def merged_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF standing in for the merged result."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Merged Result")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    """Settings rooted in a temporary project directory."""
    return Settings(
        base_dir=tmp_path,
        python_executable=sys.executable,
        bcrypt_rounds=4,
        report_store_backend="json",
        resend_api_key="",
        contact_recipients="",
    )
