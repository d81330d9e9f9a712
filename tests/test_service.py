import io

import pytest
from PIL import Image

from qrbrand.config import Settings
from qrbrand.encoder import PNG_SIGNATURE
from qrbrand.engine import QRBrandEngine
from qrbrand.errors import ContentTooLarge
from qrbrand.service import QRService


@pytest.mark.parametrize("base_url", ["https://s.example", "https://s.example/", "https://s.example//"])
def test_short_url_trims_trailing_slashes(base_url):
    service = QRService(QRBrandEngine.create(128), base_url)
    assert service.short_url("Ab3kP9x") == "https://s.example/Ab3kP9x"


def test_generate_qr_matches_raw_url_generation():
    service = QRService(QRBrandEngine.create(256), "https://s.example")
    assert service.generate_qr("Ab3kP9x") == service.generate_for_url("https://s.example/Ab3kP9x")


def test_from_settings_uses_size_and_logo(square_logo):
    settings = Settings(base_url="https://s.example", qr_size=200, qr_branding_logo=square_logo)
    service = QRService.from_settings(settings)
    assert service.engine.size == 200
    assert service.engine.has_logo
    png = service.generate_qr("abc")
    assert png.startswith(PNG_SIGNATURE)
    with Image.open(io.BytesIO(png)) as img:
        assert img.size == (200, 200)


def test_errors_propagate_unchanged():
    service = QRService(QRBrandEngine.create(128), "https://s.example")
    with pytest.raises(ContentTooLarge):
        service.generate_for_url("https://s.example/" + "x" * 4000)


@pytest.mark.decoders
def test_short_link_qr_decodes_to_full_url():
    from qrbrand.verify import verify

    service = QRService(QRBrandEngine.create(512), "https://s.example/")
    with Image.open(io.BytesIO(service.generate_qr("Ab3kP9x"))) as img:
        results = verify(img, expected_data="https://s.example/Ab3kP9x")
    assert any(r.success for r in results)
