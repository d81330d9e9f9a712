import pytest
from PIL import Image

SQUARE_SVG = (
    b'<svg xmlns="http://www.w3.org/2000/svg" width="100" height="50">'
    b'<rect x="10" y="10" width="30" height="30" fill="#ff0000"/>'
    b"</svg>"
)


def _has_cairosvg() -> bool:
    try:
        import cairosvg  # noqa: F401
    except (ImportError, OSError):
        return False
    return True


def _has_decoders() -> bool:
    try:
        import qrbrand.verify  # noqa: F401
    except (ImportError, OSError):
        return False
    return True


def pytest_configure(config):
    config.addinivalue_line("markers", "cairosvg: needs cairosvg and libcairo")
    config.addinivalue_line("markers", "decoders: needs pyzbar/libzbar and OpenCV")


def pytest_collection_modifyitems(config, items):
    skips = {
        "cairosvg": (_has_cairosvg(), "cairosvg/libcairo not available"),
        "decoders": (_has_decoders(), "pyzbar/libzbar or OpenCV not available"),
    }
    for item in items:
        for marker, (available, reason) in skips.items():
            if marker in item.keywords and not available:
                item.add_marker(pytest.mark.skip(reason=reason))


@pytest.fixture
def square_logo(tmp_path):
    """64x64 opaque black PNG."""
    path = tmp_path / "square.png"
    Image.new("RGBA", (64, 64), (0, 0, 0, 255)).save(path)
    return path


@pytest.fixture
def wide_logo(tmp_path):
    """400x100 opaque red PNG, larger than any safe area below 2000px."""
    path = tmp_path / "wide.png"
    Image.new("RGBA", (400, 100), (255, 0, 0, 255)).save(path)
    return path


@pytest.fixture
def jpeg_logo(tmp_path):
    path = tmp_path / "logo.jpg"
    Image.new("RGB", (30, 20), (0, 0, 255)).save(path)
    return path


@pytest.fixture
def svg_logo(tmp_path):
    path = tmp_path / "logo.svg"
    path.write_bytes(SQUARE_SVG)
    return path


@pytest.fixture
def broken_svg(tmp_path):
    path = tmp_path / "broken.svg"
    path.write_bytes(b"<svg xmlns='http://www.w3.org/2000/svg'><rect width=")
    return path


@pytest.fixture
def broken_png(tmp_path):
    path = tmp_path / "broken.png"
    path.write_bytes(b"this is not a png at all")
    return path
