"""Process settings read from environment variables."""

import os
from dataclasses import dataclass
from pathlib import Path

from qrbrand.errors import ConfigError
from qrbrand.logging import get_logger

log = get_logger("config")

DEFAULT_BASE_URL = "http://localhost:8080"
DEFAULT_QR_SIZE = 512
DEFAULT_LOGO_PATH = Path("assets/logo.svg")

_TRUTHY = {"1", "true", "yes", "on"}


def _resolve_logo(raw: str | None) -> Path | None:
    # Explicit path wins; otherwise fall back to the bundled default. Missing files are ignored.
    path = Path(raw) if raw else DEFAULT_LOGO_PATH
    if path.exists():
        return path
    if raw:
        log.warning("QR_BRANDING_LOGO=%s does not exist; generating without a logo", raw)
    return None


@dataclass(frozen=True)
class Settings:
    base_url: str = DEFAULT_BASE_URL
    qr_size: int = DEFAULT_QR_SIZE
    qr_branding_logo: Path | None = None
    log_level: str = "INFO"
    log_file: str | None = None
    log_json: bool = False

    @classmethod
    def from_env(cls, environ=None) -> "Settings":
        """Load settings from *environ* (defaults to ``os.environ``).

        Recognised variables: BASE_URL, QR_SIZE, QR_BRANDING_LOGO,
        QR_LOG_LEVEL, QR_LOG_FILE, QR_LOG_JSON.
        """
        env = os.environ if environ is None else environ

        raw_size = env.get("QR_SIZE", str(DEFAULT_QR_SIZE))
        try:
            qr_size = int(raw_size)
        except ValueError:
            raise ConfigError(f"Invalid QR size value: {raw_size!r}") from None
        if qr_size <= 0:
            raise ConfigError(f"Invalid QR size value: {raw_size!r}")

        return cls(
            base_url=env.get("BASE_URL", DEFAULT_BASE_URL),
            qr_size=qr_size,
            qr_branding_logo=_resolve_logo(env.get("QR_BRANDING_LOGO")),
            log_level=env.get("QR_LOG_LEVEL", "INFO"),
            log_file=env.get("QR_LOG_FILE") or None,
            log_json=env.get("QR_LOG_JSON", "").strip().lower() in _TRUTHY,
        )
