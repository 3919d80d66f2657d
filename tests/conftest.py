from __future__ import annotations

import io
import logging

import pytest
from PIL import Image

from qrstyle.encoder import Matrix, encode_matrix
from qrstyle.logging import ROOT


@pytest.fixture(autouse=True)
def _reset_qrstyle_logger():
    yield
    logger = logging.getLogger(ROOT)
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def example_matrix() -> Matrix:
    return encode_matrix("https://example.com", "M")


@pytest.fixture
def red_logo() -> Image.Image:
    return Image.new("RGB", (64, 64), (220, 20, 20))


@pytest.fixture
def red_logo_png(red_logo: Image.Image) -> bytes:
    buf = io.BytesIO()
    red_logo.save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def zbar():
    """ZBar reader; OpenCV's detector does not recognise circular or rounded locators."""
    return pytest.importorskip("pyzbar.pyzbar", reason="ZBar shared library is not installed")
