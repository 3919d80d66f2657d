"""Exception hierarchy for qrstyle."""


class QRStyleError(Exception):
    """Base class for every error raised by qrstyle."""


class EncodingError(QRStyleError):
    """The payload cannot be encoded (too long for the level, invalid barcode data)."""


class SurfaceError(QRStyleError):
    """The drawing surface cannot be allocated for the requested geometry."""


class OverlayError(QRStyleError):
    """A logo or base image could not be loaded for compositing.

    Never escapes :func:`qrstyle.logo.composite_logo`; the compositor falls
    back to the undecorated raster.
    """
