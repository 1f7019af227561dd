"""S-JTSK to WGS84 conversion of address point coordinates."""

from __future__ import annotations

from functools import lru_cache

from pyproj import CRS, Transformer

from ruian_addresses.common.models import Address

SJTSK_EPSG = 5514
WGS84_EPSG = 4326

CZECHIA_BBOX_WGS84 = {
    "min_lat": 48.5,
    "max_lat": 51.1,
    "min_lon": 12.0,
    "max_lon": 18.9,
}


@lru_cache(maxsize=1)
def _transformer() -> Transformer:
    return Transformer.from_crs(CRS.from_epsg(SJTSK_EPSG), CRS.from_epsg(WGS84_EPSG), always_xy=True)


def sjtsk_to_wgs84(location_x: float, location_y: float) -> tuple[float, float]:
    # RÚIAN publishes positive X/Y; EPSG:5514 axes are easting=-Y, northing=-X.
    lon, lat = _transformer().transform(-location_y, -location_x)
    return lat, lon


def address_lat_lon(address: Address) -> tuple[float, float] | None:
    if address.location_x is None or address.location_y is None:
        return None
    return sjtsk_to_wgs84(address.location_x, address.location_y)


def within_czechia(lat: float, lon: float) -> bool:
    bbox = CZECHIA_BBOX_WGS84
    return bbox["min_lat"] <= lat <= bbox["max_lat"] and bbox["min_lon"] <= lon <= bbox["max_lon"]
