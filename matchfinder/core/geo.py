"""
Geodesic distance helpers.

`GeodesicWithin(lat_col, lon_col, lat, lon, meters)` is a boolean SQL predicate.
On PostgreSQL it compiles to PostGIS ST_DWithin over geography points; every
other dialect calls the `geodesic_distance` function that
`register_sqlite_functions` installs on each SQLite connection.
"""

import math
from typing import Optional

from sqlalchemy import Boolean
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.sql.functions import FunctionElement

EARTH_RADIUS_M = 6_371_008.8


def haversine_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlmb = math.radians(lon2 - lon1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlmb / 2) ** 2
    return 2 * EARTH_RADIUS_M * math.asin(min(1.0, math.sqrt(a)))


def _sqlite_geodesic_distance(lat1, lon1, lat2, lon2) -> Optional[float]:
    if None in (lat1, lon1, lat2, lon2):
        return None
    try:
        return haversine_m(float(lat1), float(lon1), float(lat2), float(lon2))
    except (TypeError, ValueError):
        return None


def register_sqlite_functions(dbapi_connection, connection_record=None):
    dbapi_connection.create_function("geodesic_distance", 4, _sqlite_geodesic_distance, deterministic=True)


class GeodesicWithin(FunctionElement):
    type = Boolean()
    name = "geodesic_within"
    inherit_cache = True


@compiles(GeodesicWithin)
def _compile_geodesic_within(element, compiler, **kw):
    lat_col, lon_col, lat, lon, meters = [compiler.process(c, **kw) for c in element.clauses]
    return f"geodesic_distance({lat_col}, {lon_col}, {lat}, {lon}) <= {meters}"


@compiles(GeodesicWithin, "postgresql")
def _compile_geodesic_within_pg(element, compiler, **kw):
    lat_col, lon_col, lat, lon, meters = [compiler.process(c, **kw) for c in element.clauses]
    # ST_MakePoint takes (x, y) = (lon, lat)
    return (
        f"ST_DWithin("
        f"ST_SetSRID(ST_MakePoint({lon_col}, {lat_col}), 4326)::geography, "
        f"ST_SetSRID(ST_MakePoint({lon}, {lat}), 4326)::geography, "
        f"{meters})"
    )
