import logging

import pytest
from PIL import Image

from qrbrand.cli import build_parser, main
from qrbrand.encoder import PNG_SIGNATURE


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch, tmp_path):
    for var in ("BASE_URL", "QR_SIZE", "QR_BRANDING_LOGO", "QR_LOG_LEVEL", "QR_LOG_FILE", "QR_LOG_JSON"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    root = logging.getLogger("qrbrand")
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_generate_writes_png(tmp_path, capsys):
    out = tmp_path / "out" / "qr.png"
    main(["generate", "https://example.com", "-o", str(out), "--size", "256"])
    assert out.read_bytes().startswith(PNG_SIGNATURE)
    with Image.open(out) as img:
        assert img.size == (256, 256)
    assert "Generated" in capsys.readouterr().out


def test_generate_with_logo(tmp_path, square_logo):
    out = tmp_path / "branded.png"
    main(["generate", "https://example.com", "-o", str(out), "-s", "300", "--logo", str(square_logo)])
    with Image.open(out) as img:
        assert img.size == (300, 300)


def test_size_defaults_to_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("QR_SIZE", "200")
    out = tmp_path / "env.png"
    main(["generate", "hello", "-o", str(out)])
    with Image.open(out) as img:
        assert img.size == (200, 200)


def test_short_command_uses_base_url(tmp_path, capsys):
    out = tmp_path / "short.png"
    main(["short", "Ab3kP9x", "--base-url", "https://s.example/", "-o", str(out), "-s", "256"])
    assert out.exists()
    assert "https://s.example/Ab3kP9x" in capsys.readouterr().out


def test_library_errors_exit_with_status_2(tmp_path, capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["generate", "hello", "-o", str(tmp_path / "x.png"), "--logo", str(tmp_path / "logo.gif")])
    assert excinfo.value.code == 2
    assert "logo preparation failed" in capsys.readouterr().err


def test_content_too_large_exits_with_status_2(tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        main(["generate", "x" * 4000, "-o", str(tmp_path / "x.png")])
    assert excinfo.value.code == 2


@pytest.mark.parametrize("command", [["generate", "hello"], ["short", "Ab3kP9x"]])
@pytest.mark.parametrize("size", ["0", "-5", "abc"])
def test_invalid_size_is_usage_error(tmp_path, capsys, command, size):
    out = tmp_path / "never.png"
    with pytest.raises(SystemExit) as excinfo:
        main([*command, "-o", str(out), "-s", size])
    assert excinfo.value.code == 2
    assert "invalid size" in capsys.readouterr().err
    assert not out.exists()


def test_bad_environment_exits_with_status_2(monkeypatch):
    monkeypatch.setenv("QR_SIZE", "huge")
    with pytest.raises(SystemExit) as excinfo:
        main(["generate", "hello"])
    assert excinfo.value.code == 2


def test_no_command_prints_help():
    with pytest.raises(SystemExit) as excinfo:
        main([])
    assert excinfo.value.code == 1


def test_parser_defaults():
    args = build_parser().parse_args(["generate", "x"])
    assert args.size is None
    assert args.logo is None
    assert args.output == "output/qr.png"


@pytest.mark.decoders
def test_verify_command_passes_on_generated_code(tmp_path, capsys):
    out = tmp_path / "qr.png"
    main(["generate", "https://example.com", "-o", str(out), "-s", "400"])
    with pytest.raises(SystemExit) as excinfo:
        main(["verify", str(out), "--expected", "https://example.com"])
    lines = [line for line in capsys.readouterr().out.splitlines() if "|" in line]
    zbar = next(line for line in lines if "pyzbar/zbar" in line)
    assert "PASS" in zbar
    assert "https://example.com" in zbar
    all_pass = all(" PASS " in line for line in lines)
    assert excinfo.value.code == (0 if all_pass else 1)
