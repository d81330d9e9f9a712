"""Rasterizer: module matrix to an exact-size RGBA image."""

import numpy as np
from PIL import Image

from qrbrand.logging import get_logger, trace
from qrbrand.matrix import ModuleMatrix

log = get_logger("raster")

DARK = (0, 0, 0, 255)
LIGHT = (255, 255, 255, 255)

# Quiet zone width required around a QR symbol, in modules
QUIET_ZONE = 4


def module_scale(matrix_size: int, target_size_px: int, quiet_zone: int = QUIET_ZONE) -> int:
    """Whole pixels per module so that matrix plus quiet zone fits the target.

    Returns 0 when the target is smaller than one pixel per module.
    """
    return target_size_px // (matrix_size + 2 * quiet_zone)


@trace
def rasterize(matrix: ModuleMatrix, target_size_px: int, quiet_zone: int = QUIET_ZONE) -> Image.Image:
    """Render *matrix* as a square RGBA image of exactly ``target_size_px``.

    Each module becomes a block of ``scale`` x ``scale`` pixels. Pixels left
    over after the integer fit are split evenly around the grid and painted
    light, so they only widen the quiet zone.
    """
    padded = np.pad(matrix.to_array(), quiet_zone, constant_values=False)
    total = padded.shape[0]
    scale = module_scale(matrix.size, target_size_px, quiet_zone)

    canvas = np.empty((target_size_px, target_size_px, 4), dtype=np.uint8)
    canvas[:] = LIGHT

    if scale >= 1:
        dark = np.repeat(np.repeat(padded, scale, axis=0), scale, axis=1)
        span = total * scale
        off = (target_size_px - span) // 2
        canvas[off:off + span, off:off + span][dark] = DARK
    else:
        log.warning("target %dpx is smaller than %d modules; sampling nearest module",
                    target_size_px, total)
        idx = (np.arange(target_size_px) * total) // target_size_px
        canvas[padded[np.ix_(idx, idx)]] = DARK

    return Image.fromarray(canvas)
