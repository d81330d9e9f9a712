"""QR service: short codes and raw URLs to branded QR PNGs."""

from qrbrand.config import Settings
from qrbrand.engine import QRBrandEngine
from qrbrand.logging import audit, get_logger, trace

log = get_logger("service")


class QRService:
    """Generates QR codes for short links served under ``base_url``."""

    def __init__(self, engine: QRBrandEngine, base_url: str):
        self.engine = engine
        self.base_url = base_url

    @classmethod
    def from_settings(cls, settings: Settings) -> "QRService":
        engine = QRBrandEngine.create(settings.qr_size, settings.qr_branding_logo)
        return cls(engine, settings.base_url)

    def short_url(self, short_code: str) -> str:
        return f"{self.base_url.rstrip('/')}/{short_code}"

    @trace
    def generate_qr(self, short_code: str) -> bytes:
        """PNG for the short link ``{base_url}/{short_code}``."""
        url = self.short_url(short_code)
        audit("service.short_qr", logger=log, code=short_code, url=url)
        return self.generate_for_url(url)

    @trace
    def generate_for_url(self, url: str) -> bytes:
        """PNG for a raw URL, no shortening."""
        return self.engine.generate(url)
