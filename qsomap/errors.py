"""Exception types for QSO map tools."""


class QsoMapError(Exception):
    """Base class for all qsomap errors."""


class AdifParseError(QsoMapError):
    """ADIF text is structurally unusable (no end-of-header marker)."""


class BoundaryError(QsoMapError):
    """Something outside the core failed: an upload or a geometry fetch."""


class UploadError(BoundaryError):
    """An uploaded log could not be read."""


class GeometryError(BoundaryError):
    """Base map geometry was unreachable or malformed."""
