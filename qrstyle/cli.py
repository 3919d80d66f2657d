"""qrstyle CLI: generate styled QR codes, verify images, render linear barcodes."""

import argparse
import sys
from pathlib import Path

from PIL import Image

from qrstyle.config import LocatorCenterShape, LocatorShape, LogoOverlay, ModuleShape, RenderConfig, Settings
from qrstyle.errors import EncodingError, SurfaceError
from qrstyle.logging import audit, get_logger, setup_logging

log = get_logger("cli")

EXIT_ENCODING = 2
EXIT_SURFACE = 3


def _print_scan_results(results) -> bool:
    all_pass = True
    for r in results:
        status = "PASS" if r.success else "FAIL"
        all_pass = all_pass and r.success
        print(f"  [{r.decoder:12s}] {status} | {r.decode_time_ms:6.1f}ms | {r.decoded_data or r.error}")
    return all_pass


def cmd_generate(args, settings: Settings):
    """Generate a (styled) QR code."""
    from qrstyle.generator import generate_qr

    if not args.text:
        print("error: nothing to encode", file=sys.stderr)
        return 1

    config = RenderConfig(
        size=args.size,
        fg_color=args.fg,
        bg_color=args.bg,
        ecc=args.ecc,
        margin=args.margin,
        module_shape=args.module_shape,
        locator_shape=args.locator_shape,
        locator_center=args.locator_center,
    )
    logo = None
    if args.logo:
        logo = LogoOverlay(
            source=Path(args.logo),
            ratio=args.logo_ratio,
            timeout=args.logo_timeout if args.logo_timeout is not None else settings.logo_timeout,
        )

    output = Path(args.output)
    output.parent.mkdir(parents=True, exist_ok=True)
    img = generate_qr(args.text, config, logo=logo)
    img.save(output)
    print(f"Generated: {output} ({img.size[0]}x{img.size[1]})")

    if args.verify:
        from qrstyle.verify import verify

        results = verify(img, expected_data=args.text)
        _print_scan_results(results)
        if not any(r.success for r in results):
            return 1
    return 0


def cmd_verify(args, settings: Settings):
    """Verify a QR code image."""
    from qrstyle.verify import verify

    try:
        img = Image.open(args.image)
        img.load()
    except OSError as exc:
        print(f"error: cannot read image {args.image}: {exc}", file=sys.stderr)
        return 1
    results = verify(img, expected_data=args.expected)
    _print_scan_results(results)
    return 0 if any(r.success for r in results) else 1


def cmd_barcode(args, settings: Settings):
    """Render a linear barcode."""
    from qrstyle.linear import BarcodeOptions, generate_barcode

    output = Path(args.output)
    output.parent.mkdir(parents=True, exist_ok=True)
    img = generate_barcode(BarcodeOptions(
        text=args.text,
        format=args.format,
        width=args.bar_width,
        height=args.height,
        display_value=not args.no_text,
        font_size=args.font_size,
        line_color=args.line_color,
        background=args.background,
    ))
    img.save(output)
    print(f"Generated: {output} ({img.size[0]}x{img.size[1]})")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="qrstyle", description="Styled QR code rasterizer")

    parser.add_argument("-V", "--verbose", action="store_true", help="Enable DEBUG-level logging")
    parser.add_argument("--log-file", default=None, help="Append JSON logs to file")
    parser.add_argument("--json-logs", action="store_true", help="JSON log lines on the console")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- generate ---
    p_gen = subparsers.add_parser("generate", help="Generate a QR code")
    p_gen.add_argument("text", help="Text or URL to encode")
    p_gen.add_argument("-o", "--output", default="output/qr.png", help="Output file path")
    p_gen.add_argument("-s", "--size", type=int, default=256, help="Image width/height in pixels")
    p_gen.add_argument("--fg", default="#000", help="Foreground color")
    p_gen.add_argument("--bg", default="#fff", help="Background color")
    p_gen.add_argument("-e", "--ecc", default="M", choices=["L", "M", "Q", "H"], help="Error correction level")
    p_gen.add_argument("--margin", type=int, default=2, help="Quiet zone in modules")
    p_gen.add_argument("--module-shape", default="square", choices=[s.value for s in ModuleShape])
    p_gen.add_argument("--locator-shape", default="square", choices=[s.value for s in LocatorShape])
    p_gen.add_argument("--locator-center", default="square", choices=[s.value for s in LocatorCenterShape])
    p_gen.add_argument("--logo", default=None, help="Center logo image path")
    p_gen.add_argument("--logo-ratio", type=float, default=0.2, help="Logo width as a fraction of the image")
    p_gen.add_argument("--logo-timeout", type=float, default=None, help="Seconds to wait for the logo")
    p_gen.add_argument("--verify", action="store_true", help="Decode the result and fail on mismatch")

    # --- verify ---
    p_ver = subparsers.add_parser("verify", help="Verify a QR code image")
    p_ver.add_argument("image", help="Path to QR code image")
    p_ver.add_argument("--expected", default=None, help="Expected decoded data (fails if mismatch)")

    # --- barcode ---
    p_bar = subparsers.add_parser("barcode", help="Render a linear barcode")
    p_bar.add_argument("text", help="Data to encode")
    p_bar.add_argument("-o", "--output", default="output/barcode.png", help="Output file path")
    p_bar.add_argument("-f", "--format", default="CODE128", help="Symbology (CODE128, EAN13, UPCA, ...)")
    p_bar.add_argument("--bar-width", type=int, default=2, help="Narrow bar width in pixels")
    p_bar.add_argument("--height", type=int, default=100, help="Bar height in pixels")
    p_bar.add_argument("--no-text", action="store_true", help="Hide the human-readable value")
    p_bar.add_argument("--font-size", type=int, default=20)
    p_bar.add_argument("--line-color", default="#000")
    p_bar.add_argument("--background", default="#fff")

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = Settings.from_env()

    level = "DEBUG" if args.verbose else settings.log_level
    setup_logging(level=level, log_file=args.log_file or settings.log_file, json_format=args.json_logs)
    audit("cli.start", logger=log, command=args.command, verbose=args.verbose)

    if args.command is None:
        parser.print_help()
        return 1

    commands = {
        "generate": cmd_generate,
        "verify": cmd_verify,
        "barcode": cmd_barcode,
    }
    try:
        code = commands[args.command](args, settings)
    except EncodingError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_ENCODING
    except SurfaceError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_SURFACE
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    audit("cli.done", logger=log, command=args.command, exit_code=code)
    return code


if __name__ == "__main__":
    sys.exit(main())
