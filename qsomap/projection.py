"""Map projections fitted to a canvas.

A projection is built for one canvas size and then reused for every frame
drawn at that size. Screen y grows downward, so north is up.
"""

import math


class Projection:
    """Base class: subclasses supply the raw (radians -> unit plane) formula."""

    name = ""

    def __init__(self, width: float, height: float):
        if not (math.isfinite(width) and math.isfinite(height)) or width <= 0 or height <= 0:
            raise ValueError(f"Canvas size must be finite and positive, got {width}x{height}")
        self.width = width
        self.height = height

        x_max, _ = self.raw(math.pi, 0.0)
        _, y_max = self.raw(0.0, math.pi / 2)
        self.scale = min(width / (2 * abs(x_max)), height / (2 * abs(y_max)))
        self.cx = width / 2
        self.cy = height / 2

    def raw(self, lam: float, phi: float) -> tuple[float, float]:
        raise NotImplementedError

    @property
    def size(self) -> tuple[float, float]:
        return self.width, self.height

    def project(self, lon: float, lat: float) -> tuple[float, float]:
        """Longitude/latitude in degrees to canvas x/y in pixels."""
        x, y = self.raw(math.radians(lon), math.radians(lat))
        return self.cx + x * self.scale, self.cy - y * self.scale

    def project_ring(self, ring) -> list[tuple[float, float]]:
        """Project a GeoJSON ring ([lon, lat] pairs)."""
        return [self.project(point[0], point[1]) for point in ring]

    def __repr__(self):
        return f"<{type(self).__name__} {self.width}x{self.height}>"


class Equirectangular(Projection):
    """Plate carrée: x is longitude, y is latitude."""

    name = "equirectangular"

    def raw(self, lam, phi):
        return lam, phi


class EqualEarth(Projection):
    """Equal Earth (Šavrič, Patterson & Jenny, 2018)."""

    name = "equal_earth"

    A1 = 1.340264
    A2 = -0.081106
    A3 = 0.000893
    A4 = 0.003796
    M = math.sqrt(3) / 2

    def raw(self, lam, phi):
        theta = math.asin(self.M * math.sin(phi))
        t2 = theta * theta
        t6 = t2 * t2 * t2
        x = lam * math.cos(theta) / (
            self.M * (self.A1 + 3 * self.A2 * t2 + t6 * (7 * self.A3 + 9 * self.A4 * t2)))
        y = theta * (self.A1 + self.A2 * t2 + t6 * (self.A3 + self.A4 * t2))
        return x, y


PROJECTIONS = {cls.name: cls for cls in (Equirectangular, EqualEarth)}


def make_projection(name: str, width: float, height: float) -> Projection:
    """Build a projection by name ("equal_earth" or "equirectangular")."""
    try:
        cls = PROJECTIONS[name]
    except KeyError:
        raise ValueError(f"Unknown projection '{name}'. Valid: {list(PROJECTIONS)}") from None
    return cls(width, height)
