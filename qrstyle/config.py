"""Render configuration, style selectors and environment settings.

Every generation call receives its configuration as a frozen value; nothing
in the package keeps style state between calls.
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Union

import qrcode.constants
from PIL import Image, ImageColor


class ECCLevel(Enum):
    L = qrcode.constants.ERROR_CORRECT_L  # 7%
    M = qrcode.constants.ERROR_CORRECT_M  # 15%
    Q = qrcode.constants.ERROR_CORRECT_Q  # 25%
    H = qrcode.constants.ERROR_CORRECT_H  # 30%


ECC_NAMES = {"L": ECCLevel.L, "M": ECCLevel.M, "Q": ECCLevel.Q, "H": ECCLevel.H}


class _Selector(str, Enum):
    """String-valued style selector that also accepts legacy spellings."""

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            key = value.strip().lower().replace("_", "-")
            key = cls._aliases().get(key, key)
            for member in cls:
                if member.value == key:
                    return member
        return None

    @classmethod
    def _aliases(cls) -> dict:
        return {}


class ModuleShape(_Selector):
    SQUARE = "square"
    ROUNDED = "rounded"
    DOTS = "dots"
    DIAMOND = "diamond"
    STAR = "star"
    CLASSY = "classy"
    CLASSY_ROUNDED = "classy-rounded"
    EXTRA_ROUNDED = "extra-rounded"


class LocatorShape(_Selector):
    SQUARE = "square"
    ROUNDED = "rounded"
    EXTRA_ROUNDED = "extra-rounded"
    CIRCULAR = "circular"

    @classmethod
    def _aliases(cls) -> dict:
        return {"dot": "circular", "circle": "circular"}


class LocatorCenterShape(_Selector):
    SQUARE = "square"
    CIRCULAR = "circular"

    @classmethod
    def _aliases(cls) -> dict:
        return {"dot": "circular", "circle": "circular"}


@dataclass(frozen=True)
class RenderConfig:
    """Everything that determines the output raster besides the payload.

    Attributes:
        size: Output width and height in pixels.
        fg_color: Dark module color, any Pillow color string.
        bg_color: Light module / quiet zone color.
        ecc: Redundancy level L/M/Q/H.
        margin: Quiet zone width in cells.
        module_shape: Shape used for data cells.
        locator_shape: Outline family of the three locator squares.
        locator_center: Shape of the 3x3 locator centers.
    """

    size: int = 256
    fg_color: str = "#000"
    bg_color: str = "#fff"
    ecc: str = "M"
    margin: int = 2
    module_shape: ModuleShape = ModuleShape.SQUARE
    locator_shape: LocatorShape = LocatorShape.SQUARE
    locator_center: LocatorCenterShape = LocatorCenterShape.SQUARE

    def __post_init__(self):
        # frozen: normalise through object.__setattr__
        object.__setattr__(self, "module_shape", ModuleShape(self.module_shape))
        object.__setattr__(self, "locator_shape", LocatorShape(self.locator_shape))
        object.__setattr__(self, "locator_center", LocatorCenterShape(self.locator_center))

        ecc = self.ecc.name if isinstance(self.ecc, ECCLevel) else str(self.ecc).upper()
        if ecc not in ECC_NAMES:
            raise ValueError(f"Unknown error correction level {self.ecc!r} (expected L/M/Q/H)")
        object.__setattr__(self, "ecc", ecc)

        if int(self.size) <= 0:
            raise ValueError(f"size must be positive, got {self.size}")
        if int(self.margin) < 0:
            raise ValueError(f"margin must not be negative, got {self.margin}")
        object.__setattr__(self, "size", int(self.size))
        object.__setattr__(self, "margin", int(self.margin))

        # Pillow raises ValueError for unknown colors
        ImageColor.getrgb(self.fg_color)
        ImageColor.getrgb(self.bg_color)

    @property
    def is_default_style(self) -> bool:
        return (
            self.module_shape is ModuleShape.SQUARE
            and self.locator_shape is LocatorShape.SQUARE
            and self.locator_center is LocatorCenterShape.SQUARE
        )

    @property
    def ecc_level(self) -> ECCLevel:
        return ECC_NAMES[self.ecc]

    @property
    def fg_rgb(self) -> tuple[int, int, int]:
        return ImageColor.getrgb(self.fg_color)[:3]

    @property
    def bg_rgb(self) -> tuple[int, int, int]:
        return ImageColor.getrgb(self.bg_color)[:3]


@dataclass(frozen=True)
class Settings:
    """Process-level defaults read from the environment.

    ``QRSTYLE_LOG_LEVEL``, ``QRSTYLE_LOG_FILE`` and ``QRSTYLE_LOGO_TIMEOUT``
    (seconds). CLI flags take precedence over these.
    """

    log_level: str = "INFO"
    log_file: str | None = None
    logo_timeout: float = 5.0

    @classmethod
    def from_env(cls, environ=None) -> "Settings":
        env = os.environ if environ is None else environ
        timeout = env.get("QRSTYLE_LOGO_TIMEOUT")
        try:
            logo_timeout = float(timeout) if timeout else cls.logo_timeout
        except ValueError:
            raise ValueError(f"QRSTYLE_LOGO_TIMEOUT must be a number, got {timeout!r}") from None
        return cls(
            log_level=env.get("QRSTYLE_LOG_LEVEL", cls.log_level).upper(),
            log_file=env.get("QRSTYLE_LOG_FILE") or None,
            logo_timeout=logo_timeout,
        )


LogoSource = Union[Image.Image, bytes, str, Path]


@dataclass(frozen=True)
class LogoOverlay:
    """A center logo request.

    Attributes:
        source: Pillow image, encoded image bytes, a file path or a ``data:`` URL.
        ratio: Logo diameter as a fraction of the raster width.
        padding: Halo width in pixels around the logo circle.
        timeout: Seconds to wait for the image loads before giving up.
    """

    source: LogoSource
    ratio: float = 0.2
    padding: int = 5
    timeout: float = field(default_factory=lambda: Settings.from_env().logo_timeout)
