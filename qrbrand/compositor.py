"""Compositor: place a logo at the centre of a rendered QR code.

The logo is scaled so its longer side is at most ``LOGO_MAX_SCALE`` of the
QR image's shorter side. At ECC level H roughly 30% of codewords can be
recovered; a 20% linear footprint keeps the occluded area well inside that
margin. Changing either the ECC level or this fraction needs the scan
verification in ``qrbrand.verify`` re-run.
"""

from dataclasses import dataclass

import numpy as np
from PIL import Image

from qrbrand.logging import audit, get_logger, trace
from qrbrand.raster import LIGHT

log = get_logger("compositor")

# Maximum logo size as a fraction of the QR image's shorter side
LOGO_MAX_SCALE = 0.20
# White margin painted around the logo, in pixels
LOGO_PADDING_PX = 4


@dataclass(frozen=True)
class LogoPlacement:
    """Where the scaled logo and its backing patch land on the canvas.

    Coordinates are signed; anything outside the canvas is clipped when
    drawing.
    """

    x: int
    y: int
    width: int
    height: int
    padding: int

    @property
    def box(self) -> tuple[int, int, int, int]:
        return (self.x, self.y, self.x + self.width, self.y + self.height)

    @property
    def backing_box(self) -> tuple[int, int, int, int]:
        p = self.padding
        return (self.x - p, self.y - p, self.x + self.width + p, self.y + self.height + p)


def fit_logo_to_qr(logo_size: tuple[int, int], qr_size: tuple[int, int],
                   max_scale: float = LOGO_MAX_SCALE) -> tuple[int, int]:
    """Scaled (width, height) for a logo on a QR image.

    The logo is only ever shrunk, never enlarged, and keeps its aspect
    ratio. Both sides are at least one pixel.
    """
    lw, lh = logo_size
    max_logo_px = int(min(qr_size) * max_scale)
    scale = min(1.0, max_logo_px / max(lw, lh))
    return max(1, int(lw * scale)), max(1, int(lh * scale))


def compute_placement(logo_size: tuple[int, int], qr_size: tuple[int, int],
                      max_scale: float = LOGO_MAX_SCALE,
                      padding: int = LOGO_PADDING_PX) -> LogoPlacement:
    """Centre the scaled logo on the QR image."""
    width, height = fit_logo_to_qr(logo_size, qr_size, max_scale)
    qw, qh = qr_size
    return LogoPlacement(
        x=(qw - width) // 2,
        y=(qh - height) // 2,
        width=width,
        height=height,
        padding=padding,
    )


def _clip(box, width, height):
    x0, y0, x1, y1 = box
    return max(x0, 0), max(y0, 0), min(x1, width), min(y1, height)


@trace
def overlay(qr: Image.Image, logo: Image.Image,
            max_scale: float = LOGO_MAX_SCALE,
            padding: int = LOGO_PADDING_PX) -> Image.Image:
    """Return a new image with *logo* blended over the centre of *qr*.

    Neither input is modified. Logo pixels are combined as
    ``(1 - a) * dst + a * src`` per colour channel; the result is opaque.
    Fully transparent logo pixels leave the backing patch untouched.
    """
    canvas = np.array(qr.convert("RGBA"), dtype=np.uint8)
    h, w = canvas.shape[:2]

    placement = compute_placement(logo.size, (w, h), max_scale, padding)
    scaled = logo.convert("RGBA").resize((placement.width, placement.height), Image.LANCZOS)

    bx0, by0, bx1, by1 = _clip(placement.backing_box, w, h)
    if bx1 > bx0 and by1 > by0:
        canvas[by0:by1, bx0:bx1] = LIGHT

    x0, y0, x1, y1 = _clip(placement.box, w, h)
    if x1 > x0 and y1 > y0:
        src = np.asarray(scaled, dtype=np.float64)[
            y0 - placement.y:y1 - placement.y,
            x0 - placement.x:x1 - placement.x,
        ]
        dst = canvas[y0:y1, x0:x1]
        alpha = src[..., 3:4] / 255.0
        blended = ((1.0 - alpha) * dst[..., :3] + alpha * src[..., :3]).astype(np.uint8)
        visible = src[..., 3] > 0
        dst[visible, :3] = blended[visible]
        dst[visible, 3] = 255

    audit("logo.overlaid", logger=log,
          qr=f"{w}x{h}", logo=f"{logo.size[0]}x{logo.size[1]}",
          scaled=f"{placement.width}x{placement.height}", at=f"{placement.x},{placement.y}")
    return Image.fromarray(canvas)
