"""Rasterization orchestrator: turn a payload and a RenderConfig into a styled QR image."""

from PIL import Image, ImageDraw

from qrstyle.config import LogoOverlay, RenderConfig
from qrstyle.encoder import Matrix, encode_matrix, render_native
from qrstyle.errors import SurfaceError
from qrstyle.finder import FINDER_SIZE, finder_origins, is_finder_cell
from qrstyle.locator import paint_locator
from qrstyle.logging import audit, get_logger, trace
from qrstyle.logo import composite_logo
from qrstyle.shapes import paint_module, snap

log = get_logger("generator")


def _new_surface(size: int, color: tuple[int, ...]) -> Image.Image:
    try:
        return Image.new("RGB", (size, size), color)
    except (MemoryError, ValueError) as exc:
        raise SurfaceError(f"cannot allocate a {size}x{size} raster") from exc


@trace
def render_matrix(
    matrix: Matrix,
    config: RenderConfig,
    *,
    module_painter=paint_module,
    locator_painter=paint_locator,
) -> Image.Image:
    """Draw *matrix* with the styles in *config*.

    Dark cells outside the locator blocks go through *module_painter*; the
    three locator blocks are then drawn whole by *locator_painter*. Both are
    swappable so alternative shape renderers can be plugged in.
    """
    n = matrix.size
    if n < 2 * FINDER_SIZE + 1:
        raise ValueError(f"a {n}x{n} matrix cannot hold three separate locator patterns")

    cell = config.size / (n + 2 * config.margin)
    if cell < 1:
        raise SurfaceError(
            f"{config.size}px leaves less than one pixel per cell for {n} modules + margin {config.margin}"
        )
    offset = config.margin * cell

    img = _new_surface(config.size, config.bg_rgb)
    draw = ImageDraw.Draw(img)
    fg, bg = config.fg_rgb, config.bg_rgb
    edges = [snap(offset + i * cell) for i in range(n + 1)]

    painted = 0
    for row in range(n):
        for col in range(n):
            if not matrix.is_dark(row, col) or is_finder_cell(row, col, n):
                continue
            module_painter(draw, (edges[col], edges[row], edges[col + 1], edges[row + 1]), fg, config.module_shape)
            painted += 1

    for row, col in finder_origins(n):
        locator_painter(
            draw,
            offset + col * cell,
            offset + row * cell,
            cell,
            fg,
            bg,
            config.locator_shape,
            config.locator_center,
        )

    audit("qr.styled_rendered", logger=log,
          size=f"{n}x{n}", cell_px=round(cell, 3), modules_painted=painted,
          module_shape=config.module_shape.value, locator_shape=config.locator_shape.value,
          locator_center=config.locator_center.value)
    return img


@trace
def rasterize(text: str, config: RenderConfig | None = None) -> Image.Image:
    """Produce the QR raster for *text*.

    With all three selectors on ``square`` the encoder's own renderer is used
    as-is; any other combination goes through :func:`render_matrix`.
    """
    config = config or RenderConfig()
    if config.is_default_style:
        return render_native(text, config)
    return render_matrix(encode_matrix(text, config.ecc), config)


@trace
def generate_qr(
    text: str,
    config: RenderConfig | None = None,
    logo: LogoOverlay | None = None,
) -> Image.Image:
    """Generate a styled QR code, optionally with a center logo.

    Args:
        text: Payload. Must not be empty.
        config: Size, colors, redundancy level, margin and style selectors.
        logo: Optional center logo. A logo that cannot be loaded is skipped.

    Raises:
        ValueError: empty payload.
        EncodingError: payload too long for the redundancy level.
        SurfaceError: raster cannot be allocated at the requested size.
    """
    if not text:
        raise ValueError("Nothing to encode: payload is empty")
    config = config or RenderConfig()

    img = rasterize(text, config)
    if logo is not None:
        img = composite_logo(img, logo, bg_color=config.bg_rgb)

    audit("qr.generated", logger=log,
          data=text[:80], ecc=config.ecc, margin=config.margin,
          image_px=f"{img.size[0]}x{img.size[1]}",
          styled=not config.is_default_style, logo=logo is not None)
    return img
