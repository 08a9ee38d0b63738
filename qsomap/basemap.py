"""Country outlines for the map background (GeoJSON FeatureCollection)."""

import json
import logging
import math
from pathlib import Path

import requests

from .errors import GeometryError


logger = logging.getLogger(__name__)

DEFAULT_GEOMETRY_URL = "https://raw.githubusercontent.com/holtzy/D3-graph-gallery/master/DATA/world.geojson"
USER_AGENT = "qsomap/1.0"


def validate_feature_collection(data) -> dict:
    """Check the minimum shape we draw from: a dict with a list of features.

    Raises:
        GeometryError: if data isn't usable
    """
    if not isinstance(data, dict) or not isinstance(data.get("features"), list):
        raise GeometryError("Invalid map data format: expected a FeatureCollection with 'features'")
    return data


def fetch_geometry(url: str = DEFAULT_GEOMETRY_URL, timeout: float = 30) -> dict:
    """Download a GeoJSON FeatureCollection.

    Raises:
        GeometryError: on network/HTTP failure or a response that isn't
            a FeatureCollection
    """
    try:
        response = requests.get(url, timeout=timeout, headers={"User-Agent": USER_AGENT})
        response.raise_for_status()
        data = response.json()
    except requests.RequestException as e:
        raise GeometryError(f"Error loading map data from {url}: {e}") from e
    except ValueError as e:
        raise GeometryError(f"Map data from {url} is not valid JSON: {e}") from e

    data = validate_feature_collection(data)
    logger.info("Loaded %d map features from %s", len(data["features"]), url)
    return data


def load_geometry(path: Path | str) -> dict:
    """Read a GeoJSON FeatureCollection from a local file.

    Raises:
        GeometryError: if the file is missing, unreadable or not a FeatureCollection
    """
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise GeometryError(f"Error loading map data from {path}: {e}") from e
    return validate_feature_collection(data)


def feature_name(feature: dict) -> str:
    props = feature.get("properties")
    if not isinstance(props, dict):
        return ""
    return str(props.get("name") or props.get("NAME") or props.get("ADMIN") or "")


def _is_point(point) -> bool:
    """[lon, lat, ...] with finite numeric lon and lat."""
    if not isinstance(point, (list, tuple)) or len(point) < 2:
        return False
    return all(isinstance(v, (int, float)) and not isinstance(v, bool) and math.isfinite(v)
               for v in point[:2])


def feature_rings(data: dict) -> list[tuple[str, list]]:
    """Flatten Polygon and MultiPolygon features into (name, ring) pairs.

    Features with other geometry types or broken coordinates are skipped;
    one bad country shouldn't blank the whole background.
    """
    rings = []
    for feature in data.get("features", []):
        if not isinstance(feature, dict):
            continue
        geometry = feature.get("geometry")
        if not isinstance(geometry, dict):
            continue
        kind = geometry.get("type")
        coords = geometry.get("coordinates")
        if kind == "Polygon":
            polygons = [coords]
        elif kind == "MultiPolygon":
            polygons = coords
        else:
            continue

        name = feature_name(feature)
        try:
            for polygon in polygons:
                for ring in polygon:
                    if len(ring) >= 3 and all(_is_point(point) for point in ring):
                        rings.append((name, ring))
        except TypeError:
            logger.debug("Skipping malformed geometry for feature %r", name)
    return rings
