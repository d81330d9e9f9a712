"""qrbrand CLI: generate branded QR codes and check that they scan."""

import argparse
import sys
from pathlib import Path

from qrbrand.config import Settings
from qrbrand.errors import QRBrandError
from qrbrand.logging import audit, get_logger, setup_logging

log = get_logger("cli")


def _positive_int(value: str) -> int:
    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid size {value!r}: not an integer") from None
    if n <= 0:
        raise argparse.ArgumentTypeError(f"invalid size {value!r}: must be a positive integer")
    return n


def _write(output: Path, png: bytes):
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(png)


def cmd_generate(args, settings: Settings):
    """Generate a QR code for arbitrary content."""
    from qrbrand.engine import QRBrandEngine

    size = args.size if args.size is not None else settings.qr_size
    logo = args.logo if args.logo is not None else settings.qr_branding_logo
    engine = QRBrandEngine.create(size, logo)

    output = Path(args.output)
    _write(output, engine.generate(args.content))
    print(f"Generated: {output} ({size}x{size}, logo={'yes' if engine.has_logo else 'no'})")


def cmd_short(args, settings: Settings):
    """Generate a QR code for a short link."""
    from qrbrand.engine import QRBrandEngine
    from qrbrand.service import QRService

    engine = QRBrandEngine.create(
        args.size if args.size is not None else settings.qr_size,
        args.logo if args.logo is not None else settings.qr_branding_logo,
    )
    service = QRService(engine, args.base_url or settings.base_url)

    output = Path(args.output)
    _write(output, service.generate_qr(args.code))
    print(f"Generated: {output} -> {service.short_url(args.code)}")


def cmd_verify(args, settings: Settings):
    """Decode a QR code image with every available reader."""
    from PIL import Image

    from qrbrand.verify import verify

    with Image.open(args.image) as img:
        results = verify(img, expected_data=args.expected)

    all_pass = True
    for r in results:
        status = "PASS" if r.success else "FAIL"
        if not r.success:
            all_pass = False
        print(f"  [{r.decoder:12s}] {status} | {r.decode_time_ms:6.1f}ms | {r.decoded_data or r.error}")

    sys.exit(0 if all_pass else 1)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="qrbrand", description="Branded QR code generator")

    parser.add_argument("-V", "--verbose", action="store_true", help="Enable DEBUG-level logging")
    parser.add_argument("--log-file", default=None, help="Write JSON logs to file")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- generate ---
    p_gen = subparsers.add_parser("generate", help="Generate a QR code for any content")
    p_gen.add_argument("content", help="Text or URL to encode")
    p_gen.add_argument("-o", "--output", default="output/qr.png", help="Output PNG path")
    p_gen.add_argument("-s", "--size", type=_positive_int, default=None, help="Image size in pixels (default: QR_SIZE)")
    p_gen.add_argument("--logo", default=None, help="Logo file (PNG, JPEG or SVG; default: QR_BRANDING_LOGO)")

    # --- short ---
    p_short = subparsers.add_parser("short", help="Generate a QR code for a short link")
    p_short.add_argument("code", help="Short code")
    p_short.add_argument("-o", "--output", default="output/short_qr.png", help="Output PNG path")
    p_short.add_argument("--base-url", default=None, help="Short link base URL (default: BASE_URL)")
    p_short.add_argument("-s", "--size", type=_positive_int, default=None, help="Image size in pixels")
    p_short.add_argument("--logo", default=None, help="Logo file")

    # --- verify ---
    p_ver = subparsers.add_parser("verify", help="Verify that a QR code image scans")
    p_ver.add_argument("image", help="Path to QR code image")
    p_ver.add_argument("--expected", default=None, help="Expected decoded data (fails if mismatch)")

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = Settings.from_env()
    except QRBrandError as e:
        print(f"error: {e}", file=sys.stderr)
        sys.exit(2)

    level = "DEBUG" if args.verbose else settings.log_level
    setup_logging(level=level, log_file=args.log_file or settings.log_file, json_format=settings.log_json)
    audit("cli.start", logger=log, command=args.command, verbose=args.verbose)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    commands = {
        "generate": cmd_generate,
        "short": cmd_short,
        "verify": cmd_verify,
    }
    try:
        commands[args.command](args, settings)
    except QRBrandError as e:
        print(f"error: {e}", file=sys.stderr)
        sys.exit(2)
    audit("cli.done", logger=log, command=args.command)


if __name__ == "__main__":
    main()
