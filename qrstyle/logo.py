"""Logo compositor: center a caller-supplied image on a finished QR raster.

The overlay is cosmetic. If either image cannot be loaded in time the
undecorated raster is returned instead of failing the whole generation.
"""

import base64
import binascii
import io
import math
import urllib.parse
from concurrent.futures import ThreadPoolExecutor, wait
from pathlib import Path

from PIL import Image, ImageChops, ImageDraw

from qrstyle.config import LogoOverlay, LogoSource
from qrstyle.errors import OverlayError
from qrstyle.logging import audit, get_logger, trace

log = get_logger("logo")

MAX_RATIO = 1.0
# share of the raster area a logo may cover before decoding gets unreliable
SAFE_AREA = 1 / 3


def _decode_data_url(url: str) -> bytes:
    header, sep, payload = url.partition(",")
    if not sep:
        raise OverlayError("malformed data URL: no ',' separator")
    if header.endswith(";base64"):
        try:
            return base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise OverlayError(f"malformed base64 in data URL: {exc}") from exc
    return urllib.parse.unquote_to_bytes(payload)


def load_image(source: LogoSource) -> Image.Image:
    """Load *source* into a fully decoded Pillow image.

    Accepts a Pillow image (copied), encoded bytes, a ``data:`` URL or a path.
    Any failure is raised as :class:`OverlayError`.
    """
    if isinstance(source, Image.Image):
        return source.copy()

    if isinstance(source, (bytes, bytearray)):
        fp = io.BytesIO(source)
    elif isinstance(source, str) and source.startswith("data:"):
        fp = io.BytesIO(_decode_data_url(source))
    elif isinstance(source, (str, Path)):
        fp = source
    else:
        raise OverlayError(f"unsupported image source: {type(source).__name__}")

    try:
        img = Image.open(fp)
        img.load()
    except (OSError, ValueError, Image.DecompressionBombError) as exc:
        raise OverlayError(f"cannot load image: {exc}") from exc
    return img


def _load_both(base: Image.Image, overlay: LogoOverlay) -> tuple[Image.Image, Image.Image] | None:
    """Load base and logo concurrently; None when either fails or the wait times out."""
    pool = ThreadPoolExecutor(max_workers=2, thread_name_prefix="qrstyle-logo")
    try:
        base_future = pool.submit(load_image, base)
        logo_future = pool.submit(load_image, overlay.source)
        _, pending = wait([base_future, logo_future], timeout=overlay.timeout)
        if pending:
            log.warning("Logo load did not finish within %.1fs; returning QR without logo", overlay.timeout)
            audit("logo.skipped", logger=log, reason="timeout", timeout_s=overlay.timeout)
            return None
        try:
            return base_future.result(), logo_future.result()
        except OverlayError as exc:
            log.warning("Logo overlay skipped: %s", exc)
            audit("logo.skipped", logger=log, reason=str(exc))
            return None
    finally:
        # a stuck loader must not hold the caller past the timeout
        pool.shutdown(wait=False, cancel_futures=True)


@trace
def composite_logo(
    base: Image.Image,
    overlay: LogoOverlay,
    bg_color: tuple[int, ...] = (255, 255, 255),
) -> Image.Image:
    """Draw *overlay* centered on *base* inside a background-colored halo.

    The logo is scaled to a square of ``width * ratio`` pixels and clipped to
    the inscribed circle; a filled circle ``padding`` pixels wider clears the
    modules behind it. Ratios ``<= 0`` skip the overlay, ratios above 1 are
    clamped to 1. *base* is never modified.
    """
    ratio = overlay.ratio
    if ratio <= 0:
        log.warning("Logo ratio %.3f is not positive; skipping overlay", ratio)
        audit("logo.skipped", logger=log, reason="non-positive ratio", ratio=ratio)
        return base
    if ratio > MAX_RATIO:
        log.warning("Logo ratio %.3f clamped to %.1f", ratio, MAX_RATIO)
        ratio = MAX_RATIO

    loaded = _load_both(base, overlay)
    if loaded is None:
        return base
    canvas, logo = loaded

    canvas = canvas.convert("RGB")
    width, height = canvas.size
    logo_px = max(1, int(width * ratio))
    covered = math.pi * (logo_px / 2) ** 2 / (width * height)
    if covered > SAFE_AREA:
        log.warning("Logo covers %.0f%% of the code; it may no longer scan", covered * 100)

    # halo
    cx, cy = width / 2, height / 2
    halo = logo_px / 2 + overlay.padding
    ImageDraw.Draw(canvas).ellipse([cx - halo, cy - halo, cx + halo, cy + halo], fill=bg_color)

    # circular clip combined with the logo's own transparency
    logo_rgba = logo.convert("RGBA").resize((logo_px, logo_px), Image.LANCZOS)
    clip = Image.new("L", (logo_px, logo_px), 0)
    ImageDraw.Draw(clip).ellipse([0, 0, logo_px - 1, logo_px - 1], fill=255)
    mask = ImageChops.multiply(clip, logo_rgba.getchannel("A"))

    x_off = (width - logo_px) // 2
    y_off = (height - logo_px) // 2
    canvas.paste(logo_rgba.convert("RGB"), (x_off, y_off), mask)

    audit("logo.composited", logger=log,
          qr_size=f"{width}x{height}", logo_px=logo_px, ratio=ratio,
          padding=overlay.padding, area_pct=round(covered * 100, 1))
    return canvas
