"""Scan verification: decode generated codes with real readers."""

import time
from dataclasses import dataclass

import cv2
import numpy as np
from PIL import Image
from pyzbar.pyzbar import decode as pyzbar_decode

from qrbrand.logging import audit, get_logger, trace

log = get_logger("verify")


@dataclass
class ScanResult:
    """Result of a single scan attempt."""
    success: bool
    decoded_data: str | None = None
    decode_time_ms: float = 0.0
    decoder: str = ""
    error: str | None = None


def _timed_scan(decoder: str, image: Image.Image, read) -> ScanResult:
    start = time.perf_counter()
    try:
        data = read(image)
    except Exception as e:  # decoder crashes count as a failed scan
        elapsed = (time.perf_counter() - start) * 1000
        audit("scan.error", logger=log, decoder=decoder, error=str(e), time_ms=round(elapsed, 1))
        return ScanResult(success=False, decode_time_ms=elapsed, decoder=decoder, error=str(e))

    elapsed = (time.perf_counter() - start) * 1000
    if data:
        audit("scan.verified", logger=log, decoder=decoder, success=True,
              time_ms=round(elapsed, 1), data=data[:80])
        return ScanResult(success=True, decoded_data=data, decode_time_ms=elapsed, decoder=decoder)
    audit("scan.verified", logger=log, decoder=decoder, success=False,
          time_ms=round(elapsed, 1), error="No QR code detected")
    return ScanResult(success=False, decode_time_ms=elapsed, decoder=decoder,
                      error="No QR code detected")


def _read_pyzbar(image: Image.Image) -> str | None:
    results = pyzbar_decode(image.convert("RGB"))
    if not results:
        return None
    return results[0].data.decode("utf-8", errors="replace")


def _read_opencv(image: Image.Image) -> str | None:
    gray = cv2.cvtColor(np.array(image.convert("RGB")), cv2.COLOR_RGB2GRAY)
    data, _points, _ = cv2.QRCodeDetector().detectAndDecode(gray)
    return data or None


@trace
def scan_pyzbar(image: Image.Image) -> ScanResult:
    """Scan with pyzbar (wraps ZBar)."""
    return _timed_scan("pyzbar/zbar", image, _read_pyzbar)


@trace
def scan_opencv(image: Image.Image) -> ScanResult:
    """Scan with OpenCV's built-in QR detector."""
    return _timed_scan("opencv", image, _read_opencv)


@trace
def verify(image: Image.Image, expected_data: str | None = None) -> list[ScanResult]:
    """Run every decoder on *image*.

    Args:
        image: Image containing a QR code.
        expected_data: If given, a decode that returns anything else is a failure.

    Returns:
        One ScanResult per decoder.
    """
    results = []
    for scanner in [scan_pyzbar, scan_opencv]:
        result = scanner(image)
        if result.success and expected_data is not None and result.decoded_data != expected_data:
            result.success = False
            result.error = f"Data mismatch: got '{result.decoded_data}', expected '{expected_data}'"
        results.append(result)
    return results
