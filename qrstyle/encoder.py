"""Boundary to the ``qrcode`` library: payload -> module matrix, and its native renderer."""

from dataclasses import dataclass

import qrcode
from PIL import Image
from qrcode.exceptions import DataOverflowError

from qrstyle.config import ECC_NAMES, RenderConfig
from qrstyle.errors import EncodingError, SurfaceError
from qrstyle.logging import audit, get_logger, trace

log = get_logger("encoder")


@dataclass(frozen=True)
class Matrix:
    """Immutable square grid of modules, ``True`` = dark."""

    modules: tuple[tuple[bool, ...], ...]
    version: int | None = None

    def __post_init__(self):
        n = len(self.modules)
        if any(len(row) != n for row in self.modules):
            raise ValueError("module matrix must be square")

    @classmethod
    def from_rows(cls, rows, version: int | None = None) -> "Matrix":
        return cls(tuple(tuple(bool(v) for v in row) for row in rows), version)

    @property
    def size(self) -> int:
        return len(self.modules)

    def is_dark(self, row: int, col: int) -> bool:
        return self.modules[row][col]


def _build(text: str, ecc: str, border: int, box_size: int = 1) -> qrcode.QRCode:
    ecc_level = ECC_NAMES[ecc.upper()]
    qr = qrcode.QRCode(
        version=None,
        error_correction=ecc_level.value,
        box_size=box_size,
        border=border,
    )
    qr.add_data(text)
    try:
        qr.make(fit=True)
    # qrcode 8 reports an overflow as an invalid version (41) ValueError
    except (DataOverflowError, ValueError) as exc:
        raise EncodingError(
            f"payload of {len(text)} characters does not fit error correction level {ecc.upper()}"
        ) from exc
    return qr


@trace
def encode_matrix(text: str, ecc: str = "M") -> Matrix:
    """Encode *text* and return the bare module matrix (no quiet zone)."""
    qr = _build(text, ecc, border=0)
    matrix = Matrix.from_rows(qr.modules, version=qr.version)
    audit("qr.encoded", logger=log,
          data=text[:80], version=qr.version, size=f"{matrix.size}x{matrix.size}", ecc=ecc.upper())
    return matrix


@trace
def render_native(text: str, config: RenderConfig) -> Image.Image:
    """Render with the encoder's own square-module path, scaled to ``config.size``.

    One pixel per module is produced first, then scaled with nearest-neighbour
    sampling so module edges stay hard.
    """
    qr = _build(text, config.ecc, border=config.margin)
    total = qr.modules_count + 2 * config.margin
    if config.size < total:
        raise SurfaceError(f"{config.size}px is too small for {total} modules including the margin")
    img = qr.make_image(fill_color=config.fg_rgb, back_color=config.bg_rgb).convert("RGB")
    if img.size != (config.size, config.size):
        img = img.resize((config.size, config.size), Image.NEAREST)
    audit("qr.native_rendered", logger=log,
          version=qr.version, ecc=config.ecc, margin=config.margin, image_px=f"{img.size[0]}x{img.size[1]}")
    return img
