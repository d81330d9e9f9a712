"""Logo loading: turn a logo file (SVG or bitmap) into an RGBA image."""

import io
import math
from dataclasses import dataclass
from pathlib import Path
from xml.etree import ElementTree

from PIL import Image, UnidentifiedImageError

from qrbrand.errors import (
    LogoIOFailure,
    LogoParseFailure,
    LogoUnsupportedFormat,
)
from qrbrand.logging import audit, get_logger, trace

log = get_logger("logo")

# Longer side of a rendered vector logo, in pixels
LOGO_WORKING_SIZE = 200

VECTOR_EXTENSIONS = {"svg"}
RASTER_EXTENSIONS = {"png", "jpg", "jpeg"}


def _extension(path: Path) -> str:
    return path.suffix.lstrip(".").lower()


def logo_kind(path) -> str:
    """Return "vector" or "raster" for *path*, judged by extension."""
    path = Path(path)
    ext = _extension(path)
    if ext in VECTOR_EXTENSIONS:
        return "vector"
    if ext in RASTER_EXTENSIONS:
        return "raster"
    raise LogoUnsupportedFormat(
        f"unsupported logo format {path.suffix or '(none)'!r} for {path}; use PNG, JPEG or SVG",
        path=path,
    )


class _SizeContext:
    """Unit context for resolving the root <svg> size without a cairo surface."""

    dpi = 96
    font_size = 12
    context_width = 0
    context_height = 0


def _svg_natural_size(svg_data: bytes) -> tuple[float, float]:
    from cairosvg.helpers import node_format
    from cairosvg.parser import Tree

    width, height, _viewbox = node_format(_SizeContext(), Tree(bytestring=svg_data))
    if not (width > 0 and height > 0) or math.isinf(width) or math.isinf(height):
        raise ValueError(f"SVG has no usable size ({width}x{height})")
    return width, height


def _render_svg(svg_data: bytes, width: int, height: int) -> Image.Image:
    import cairosvg

    png = cairosvg.svg2png(bytestring=svg_data, output_width=width, output_height=height)
    img = Image.open(io.BytesIO(png))
    img.load()
    return img.convert("RGBA")


@trace
def load_svg_logo(path) -> Image.Image:
    """Render an SVG logo with its longer side at ``LOGO_WORKING_SIZE`` pixels.

    The size is read from the root element, so the SVG is rasterized once,
    directly at the working resolution. The drawing is flattened onto opaque
    white so transparent areas of the SVG do not let QR modules show through
    the logo.
    """
    path = Path(path)
    try:
        svg_data = path.read_bytes()
    except OSError as exc:
        raise LogoIOFailure(f"failed to read SVG file {path}: {exc}", path=path) from exc

    # A missing libcairo surfaces here and propagates as-is
    from cairocffi import CairoError

    try:
        width, height = _svg_natural_size(svg_data)
        scale = LOGO_WORKING_SIZE / max(width, height)
        out_w, out_h = max(1, round(width * scale)), max(1, round(height * scale))
        rendered = _render_svg(svg_data, out_w, out_h)
    except (ElementTree.ParseError, ValueError, CairoError) as exc:
        raise LogoParseFailure(f"failed to parse SVG {path}: {exc}", path=path) from exc

    backing = Image.new("RGBA", rendered.size, (255, 255, 255, 255))
    img = Image.alpha_composite(backing, rendered)
    audit("logo.svg_rendered", logger=log, path=str(path),
          natural=f"{width:g}x{height:g}", rendered=f"{img.size[0]}x{img.size[1]}")
    return img


@trace
def load_raster_logo(path) -> Image.Image:
    """Decode a bitmap logo to RGBA at its native pixel size."""
    path = Path(path)
    try:
        with Image.open(path) as src:
            src.load()
            img = src.convert("RGBA")
    except UnidentifiedImageError as exc:
        raise LogoParseFailure(f"cannot decode logo image {path}: {exc}", path=path) from exc
    except OSError as exc:
        raise LogoIOFailure(f"failed to open logo image {path}: {exc}", path=path) from exc
    return img


_LOADERS = {
    "vector": load_svg_logo,
    "raster": load_raster_logo,
}


@trace
def load_logo(path) -> Image.Image:
    """Load a logo file as an RGBA image, choosing the loader by extension.

    Raises:
        LogoUnsupportedFormat: extension is not svg/png/jpg/jpeg.
        LogoIOFailure: the file cannot be read.
        LogoParseFailure: the file contents cannot be decoded.
    """
    return _LOADERS[logo_kind(path)](path)


@dataclass(frozen=True)
class LogoAsset:
    """A logo loaded once and then only ever read.

    ``image`` is shared by every generation call of the engine that owns
    this asset; compositing reads it and never writes to it.
    """

    source: Path
    kind: str
    image: Image.Image

    @classmethod
    def load(cls, path) -> "LogoAsset":
        path = Path(path)
        kind = logo_kind(path)
        image = _LOADERS[kind](path)
        audit("logo.loaded", logger=log, path=str(path), kind=kind,
              size=f"{image.size[0]}x{image.size[1]}")
        return cls(source=path, kind=kind, image=image)

    @property
    def size(self) -> tuple[int, int]:
        return self.image.size
