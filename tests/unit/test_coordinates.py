from pyproj import Transformer

from conftest import csv_text, make_row
from ruian_addresses.pipeline.coordinates import address_lat_lon, sjtsk_to_wgs84, within_czechia
from ruian_addresses.pipeline.rows import parse_rows


def _address(**overrides):
    (address,) = parse_rows(csv_text([make_row(**overrides)]).splitlines(keepends=True))
    return address


def test_sjtsk_to_wgs84_inverts_krovak_projection():
    transformer = Transformer.from_crs("EPSG:4326", "EPSG:5514", always_xy=True)
    easting, northing = transformer.transform(15.477, 49.816)

    lat, lon = sjtsk_to_wgs84(location_x=-northing, location_y=-easting)

    assert abs(lat - 49.816) < 1e-6
    assert abs(lon - 15.477) < 1e-6


def test_address_coordinates_land_in_czechia():
    lat_lon = address_lat_lon(_address())

    assert lat_lon is not None
    lat, lon = lat_lon
    assert within_czechia(lat, lon)
    assert abs(lat - 49.8) < 0.5
    assert abs(lon - 15.5) < 0.5


def test_missing_coordinate_yields_none():
    assert address_lat_lon(_address(**{"Souřadnice X": ""})) is None
    assert address_lat_lon(_address(**{"Souřadnice Y": ""})) is None


def test_within_czechia_rejects_outliers():
    assert within_czechia(50.08, 14.42)
    assert not within_czechia(10.0, 10.0)
