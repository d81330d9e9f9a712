"""PNG serialization of the final RGBA image."""

import io

from PIL import Image

from qrbrand.errors import EncodingFailure
from qrbrand.logging import trace

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


@trace
def encode_png(image: Image.Image) -> bytes:
    """Encode an RGBA image as PNG bytes (no text or colour-profile chunks)."""
    if image.mode != "RGBA":
        raise EncodingFailure(f"expected an RGBA image, got mode {image.mode}")
    width, height = image.size
    if width <= 0 or height <= 0:
        raise EncodingFailure(f"cannot encode an empty {width}x{height} image")
    raw = image.tobytes()
    if len(raw) != width * height * 4:
        raise EncodingFailure(
            f"pixel buffer holds {len(raw)} bytes, expected {width * height * 4} for {width}x{height} RGBA"
        )

    buf = io.BytesIO()
    try:
        image.save(buf, format="PNG")
    except (OSError, ValueError) as exc:
        raise EncodingFailure(f"failed to encode PNG: {exc}") from exc
    return buf.getvalue()
