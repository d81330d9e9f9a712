"""Branding engine: content string in, branded QR PNG out."""

from dataclasses import dataclass
from pathlib import Path

from PIL import Image

from qrbrand.compositor import LOGO_MAX_SCALE, LOGO_PADDING_PX, overlay
from qrbrand.encoder import encode_png
from qrbrand.logging import audit, get_logger, trace
from qrbrand.logo import LogoAsset
from qrbrand.matrix import encode_matrix
from qrbrand.raster import QUIET_ZONE, rasterize

log = get_logger("engine")

# Logo overlay relies on the highest correction level
ENGINE_ECC = "H"


@dataclass(frozen=True)
class GeneratorConfig:
    """Immutable engine settings, fixed for the engine's lifetime."""

    target_size_px: int
    logo: LogoAsset | None = None
    logo_max_scale: float = LOGO_MAX_SCALE
    logo_padding_px: int = LOGO_PADDING_PX
    quiet_zone: int = QUIET_ZONE

    def __post_init__(self):
        if isinstance(self.target_size_px, bool) or not isinstance(self.target_size_px, int) \
                or self.target_size_px <= 0:
            raise ValueError(f"target_size_px must be a positive integer, got {self.target_size_px!r}")
        if not 0.0 < self.logo_max_scale <= 1.0:
            raise ValueError(f"logo_max_scale must be in (0, 1], got {self.logo_max_scale!r}")
        if self.logo_padding_px < 0:
            raise ValueError(f"logo_padding_px must be >= 0, got {self.logo_padding_px!r}")


class QRBrandEngine:
    """Generates QR code PNGs with an optional centred logo.

    One engine serves any number of ``generate`` calls, including
    concurrent ones: each call works on its own buffers and only reads the
    shared logo.
    """

    def __init__(self, config: GeneratorConfig):
        self.config = config
        audit("engine.created", logger=log,
              size=config.target_size_px,
              logo=str(config.logo.source) if config.logo else None)

    @classmethod
    def create(cls, target_size_px: int, logo_path: str | Path | None = None, **options) -> "QRBrandEngine":
        """Build an engine, loading the logo up front.

        Raises:
            LogoPreparationFailure: the logo could not be loaded; no engine is built.
        """
        logo = LogoAsset.load(logo_path) if logo_path is not None else None
        return cls(GeneratorConfig(target_size_px=target_size_px, logo=logo, **options))

    @property
    def size(self) -> int:
        return self.config.target_size_px

    @property
    def has_logo(self) -> bool:
        return self.config.logo is not None

    @trace
    def generate_image(self, content: str) -> Image.Image:
        """Encode, rasterize and brand *content*; returns the RGBA image.

        Raises:
            ContentTooLarge: content does not fit a QR symbol at level H.
        """
        cfg = self.config
        matrix = encode_matrix(content, ecc=ENGINE_ECC)
        img = rasterize(matrix, cfg.target_size_px, quiet_zone=cfg.quiet_zone)
        if cfg.logo is not None:
            img = overlay(img, cfg.logo.image, max_scale=cfg.logo_max_scale,
                          padding=cfg.logo_padding_px)
        audit("qr.generated", logger=log,
              data=content[:80], version=matrix.version,
              modules=f"{matrix.size}x{matrix.size}",
              image_px=f"{img.size[0]}x{img.size[1]}", logo=cfg.logo is not None)
        return img

    @trace
    def generate(self, content: str) -> bytes:
        """Generate a branded QR code for *content* as PNG bytes."""
        return encode_png(self.generate_image(content))

    def __repr__(self):
        return f"QRBrandEngine(size={self.size}, logo={self.has_logo})"
