"""
Geospatial projection utilities for coordinate transformations.

Field coordinates are recorded as UTM easting/northing (WGS84). They are
converted to geographic latitude/longitude for mapping; there is no reverse
path.
"""
from functools import lru_cache
from typing import Sequence, Tuple
import numpy as np
from pyproj import Transformer


def get_utm_crs_code(zone: int, hemisphere: str) -> str:
    """
    Get the EPSG code of a WGS84 UTM zone.

    Args:
        zone: UTM zone number (1-60)
        hemisphere: "N" or "S"

    Returns:
        EPSG code for the UTM zone

    Raises:
        ValueError: If the zone or hemisphere does not exist
    """
    if not 1 <= int(zone) <= 60:
        raise ValueError(f"UTM zone must be between 1 and 60, got {zone}")

    hemisphere = hemisphere.strip().upper()[:1]
    if hemisphere not in ("N", "S"):
        raise ValueError(f"UTM hemisphere must be 'N' or 'S', got {hemisphere!r}")

    # Northern hemisphere: EPSG:326XX, Southern hemisphere: EPSG:327XX
    prefix = "6" if hemisphere == "N" else "7"
    return f"EPSG:32{prefix}{int(zone):02d}"


@lru_cache(maxsize=16)
def _utm_to_wgs84(crs_code: str) -> Transformer:
    return Transformer.from_crs(
        crs_code,
        "EPSG:4326",     # WGS84 (lat/lon)
        always_xy=True   # (x, y) -> (lon, lat)
    )


def utm_to_latlng(
    utm_x: float,
    utm_y: float,
    zone: int,
    hemisphere: str = "N",
) -> Tuple[float, float]:
    """
    Convert a UTM coordinate to latitude/longitude.

    Out-of-range eastings/northings are transformed as-is; the result is
    mathematically consistent even when it is geographically meaningless.

    Args:
        utm_x: Easting in meters
        utm_y: Northing in meters
        zone: UTM zone number
        hemisphere: "N" or "S"

    Returns:
        (latitude, longitude) in decimal degrees
    """
    transformer = _utm_to_wgs84(get_utm_crs_code(zone, hemisphere))
    lng, lat = transformer.transform(float(utm_x), float(utm_y))
    return float(lat), float(lng)


def utm_to_latlng_many(
    eastings: Sequence[float],
    northings: Sequence[float],
    zone: int,
    hemisphere: str = "N",
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Convert many UTM coordinates in one call.

    Args:
        eastings: Easting values in meters
        northings: Northing values in meters, same length as eastings
        zone: UTM zone number
        hemisphere: "N" or "S"

    Returns:
        Tuple of (latitudes, longitudes) arrays in decimal degrees
    """
    xs = np.asarray(eastings, dtype=float)
    ys = np.asarray(northings, dtype=float)
    if xs.shape != ys.shape:
        raise ValueError("eastings and northings must have the same length")

    if xs.size == 0:
        return np.empty(0), np.empty(0)

    transformer = _utm_to_wgs84(get_utm_crs_code(zone, hemisphere))
    lngs, lats = transformer.transform(xs, ys)
    return np.asarray(lats, dtype=float), np.asarray(lngs, dtype=float)
