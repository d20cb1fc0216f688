"""Shared pytest fixtures: settings and a container wired to fakes."""

import pytest

from fakes import FakeLLMProvider, FakeOcr, FakePineconeIndex, ScriptedChatModel, make_settings
from study_companion.core.container import ServiceContainer


@pytest.fixture
def settings(tmp_path):
    return make_settings(tmp_path)


@pytest.fixture
def fake_index():
    return FakePineconeIndex()


@pytest.fixture
def fake_ocr():
    return FakeOcr(blocks=["Text found in the image", "Text", "found"])


@pytest.fixture
def build_container(settings, fake_index, fake_ocr):
    """Factory: container with scripted models and in-memory index."""

    def _build(model: ScriptedChatModel | None = None, creative: ScriptedChatModel | None = None, index=None):
        return ServiceContainer.build(
            settings,
            llm_provider=FakeLLMProvider(model, creative),
            ocr=fake_ocr,
            index_factory=lambda credentials: index or fake_index,
        )

    return _build


@pytest.fixture
def sample_pdf(tmp_path):
    path = tmp_path / "sample.pdf"
    path.write_bytes(build_pdf("Photosynthesis converts light into chemical energy"))
    return path


def build_pdf(text: str) -> bytes:
    """Smallest valid single-page PDF showing `text` in Helvetica."""
    stream = f"BT /F1 24 Tf 72 720 Td ({text}) Tj ET".encode()
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] /Contents 4 0 R "
        b"/Resources << /Font << /F1 5 0 R >> >> >>",
        b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]
    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % number + body + b"\nendobj\n"
    xref_at = len(out)
    out += b"xref\n0 %d\n" % (len(objects) + 1)
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += b"%010d 00000 n \n" % offset
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n" % (len(objects) + 1, xref_at)
    return bytes(out)
