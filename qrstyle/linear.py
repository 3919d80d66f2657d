"""Linear (1D) barcodes: a pass-through to python-barcode's image writer."""

from dataclasses import dataclass

import barcode
from barcode.errors import BarcodeError
from barcode.writer import ImageWriter
from PIL import Image

from qrstyle.errors import EncodingError
from qrstyle.logging import audit, get_logger, trace

log = get_logger("linear")

# python-barcode works in millimetres; render at 96 dpi so px map cleanly
DPI = 96
QUIET_ZONE_PX = 10
# keeps a 1px bar from converting back to 0.999..px, which the writer draws as x1 < x0
_BAR_EPSILON_PX = 1e-6


def _px_to_mm(px: float) -> float:
    return px * 25.4 / DPI


@dataclass(frozen=True)
class BarcodeOptions:
    text: str
    format: str = "CODE128"
    width: int = 2           # narrowest bar, px
    height: int = 100        # bar height, px
    display_value: bool = True
    font_size: int = 20
    line_color: str = "#000"
    background: str = "#fff"


@trace
def generate_barcode(options: BarcodeOptions) -> Image.Image:
    """Render a linear barcode. Unknown formats and invalid payloads raise EncodingError."""
    name = options.format.lower().replace("-", "")
    try:
        cls = barcode.get_barcode_class(name)
    except BarcodeError as exc:
        raise EncodingError(f"unsupported barcode format {options.format!r}") from exc

    writer_options = {
        "module_width": _px_to_mm(options.width + _BAR_EPSILON_PX),
        "module_height": _px_to_mm(options.height),
        "quiet_zone": _px_to_mm(QUIET_ZONE_PX),
        "font_size": options.font_size,
        "foreground": options.line_color,
        "background": options.background,
        "write_text": options.display_value,
        "dpi": DPI,
    }
    try:
        code = cls(options.text, writer=ImageWriter())
        img = code.render(writer_options)
    except (BarcodeError, ValueError) as exc:
        raise EncodingError(f"cannot encode {options.text!r} as {options.format}: {exc}") from exc

    audit("barcode.generated", logger=log,
          format=options.format, data=options.text[:80], image_px=f"{img.size[0]}x{img.size[1]}")
    return img
