"""Scan verification: decode rasters with reference QR readers (ZBar, OpenCV)."""

import time
from dataclasses import dataclass

import cv2
import numpy as np
from PIL import Image

from qrstyle.logging import audit, get_logger, trace

log = get_logger("verify")


@dataclass
class ScanResult:
    """Result of a single scan attempt."""
    success: bool
    decoded_data: str | None = None
    decode_time_ms: float = 0.0
    decoder: str = ""
    error: str | None = None


def _finish(decoder: str, start: float, data: str | None) -> ScanResult:
    elapsed = (time.perf_counter() - start) * 1000
    if data:
        audit("scan.verified", logger=log, decoder=decoder, success=True, time_ms=round(elapsed, 1), data=data[:80])
        return ScanResult(success=True, decoded_data=data, decode_time_ms=elapsed, decoder=decoder)
    audit("scan.verified", logger=log, decoder=decoder, success=False, time_ms=round(elapsed, 1))
    return ScanResult(success=False, decode_time_ms=elapsed, decoder=decoder, error="No QR code detected")


def _failed(decoder: str, start: float, exc: Exception) -> ScanResult:
    elapsed = (time.perf_counter() - start) * 1000
    audit("scan.error", logger=log, decoder=decoder, error=str(exc), time_ms=round(elapsed, 1))
    return ScanResult(success=False, decode_time_ms=elapsed, decoder=decoder, error=str(exc))


@trace
def scan_pyzbar(image: Image.Image) -> ScanResult:
    """Scan with pyzbar (ZBar). A missing ZBar library is reported as a failed scan."""
    start = time.perf_counter()
    try:
        from pyzbar.pyzbar import ZBarSymbol, decode as pyzbar_decode

        results = pyzbar_decode(image.convert("L"), symbols=[ZBarSymbol.QRCODE])
        data = results[0].data.decode("utf-8", errors="replace") if results else None
        return _finish("pyzbar/zbar", start, data)
    except Exception as e:
        return _failed("pyzbar/zbar", start, e)


@trace
def scan_opencv(image: Image.Image) -> ScanResult:
    """Scan with OpenCV's built-in QRCodeDetector."""
    start = time.perf_counter()
    try:
        gray = cv2.cvtColor(np.array(image.convert("RGB")), cv2.COLOR_RGB2GRAY)
        data, _, _ = cv2.QRCodeDetector().detectAndDecode(gray)
        return _finish("opencv", start, data or None)
    except Exception as e:
        return _failed("opencv", start, e)


@trace
def verify(image: Image.Image, expected_data: str | None = None) -> list[ScanResult]:
    """Run every decoder on *image*.

    With *expected_data* set, a decode that returns different text counts as
    a failure.
    """
    results = []
    for scanner in (scan_pyzbar, scan_opencv):
        result = scanner(image)
        if result.success and expected_data is not None and result.decoded_data != expected_data:
            result.success = False
            result.error = f"Data mismatch: got {result.decoded_data!r}, expected {expected_data!r}"
        results.append(result)
    return results


def decodes_to(image: Image.Image, expected_data: str) -> bool:
    """True if at least one decoder returns exactly *expected_data*."""
    return any(r.success for r in verify(image, expected_data=expected_data))
