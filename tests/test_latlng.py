import pytest

from geomappable import GeocodeError, GeoLoc, LatLng, config

from tests.models import Location


def test_latlng_init():
    p = LatLng(1., 2.)
    assert p.lat == 1.
    assert p.lng == 2.

    p = LatLng('1.5', '-2.5')
    assert p.lat == 1.5
    assert p.lng == -2.5


def test_latlng_eq_and_hash():
    assert LatLng(1, 2) == LatLng(1., 2.)
    assert LatLng(1, 2) != LatLng(2, 1)
    assert LatLng(1, 2) != (1, 2)
    assert len({LatLng(1, 2), LatLng(1, 2), LatLng(2, 1)}) == 2


def test_latlng_repr_and_str():
    assert repr(LatLng(1, 2)) == '<LatLng(1.0, 2.0)>'
    assert str(LatLng(1, 2)) == '1.0,2.0'
    assert LatLng(1, 2).ll == '1.0,2.0'


def test_latlng_is_valid():
    assert LatLng(90, -180).is_valid
    assert not LatLng(91, 0).is_valid
    assert not LatLng(0, 181).is_valid


def test_latlng_wrap_longitude():
    assert LatLng.wrap_longitude(181) == -179
    assert LatLng.wrap_longitude(-190) == 170
    assert LatLng.wrap_longitude(45) == 45
    assert LatLng.wrap_longitude(180) == 180
    assert LatLng.wrap_longitude(-180) == -180
    assert LatLng.wrap_longitude(540) == 180
    assert LatLng.wrap_longitude(-540) == -180
    assert LatLng.wrap_longitude(719) == -1

    # Huge values wrap in one step
    assert -180 <= LatLng.wrap_longitude(1e12) <= 180


def test_latlng_wrap_longitude_non_finite():
    with pytest.raises(ValueError):
        LatLng.wrap_longitude(float('nan'))

    with pytest.raises(ValueError):
        LatLng.wrap_longitude(float('-inf'))

    with pytest.raises(ValueError):
        LatLng(0, 0).endpoint(0, float('nan'))


def test_latlng_to_float():
    assert LatLng(1, 2).to_float() == (1., 2.)
    assert LatLng(1, 2).to_float(reverse=True) == (2., 1.)


def test_normalize_latlng():
    p = LatLng(1, 2)
    assert LatLng.normalize(p) is p


def test_normalize_sequences():
    assert LatLng.normalize((1, 2)) == LatLng(1, 2)
    assert LatLng.normalize([1, 2]) == LatLng(1, 2)
    assert LatLng.normalize(1, 2) == LatLng(1, 2)


def test_normalize_strings():
    assert LatLng.normalize('37.792,-122.393') == LatLng(37.792, -122.393)
    assert LatLng.normalize(' 37.792, -122.393 ') == LatLng(37.792, -122.393)
    assert LatLng.normalize('37.792 -122.393') == LatLng(37.792, -122.393)


def test_normalize_objects():
    class HasLatLng:
        lat, lng = 1, 2

    class HasLatitude:
        latitude, longitude = 3, 4

    assert LatLng.normalize(HasLatLng()) == LatLng(1, 2)
    assert LatLng.normalize(HasLatitude()) == LatLng(3, 4)
    assert LatLng.normalize(Location(name='x', lat=5, lng=6)) == LatLng(5, 6)


def test_normalize_record_without_coordinates():
    with pytest.raises(ValueError):
        LatLng.normalize(Location(name='x'))


def test_normalize_invalid():
    with pytest.raises(TypeError):
        LatLng.normalize(object())

    with pytest.raises(TypeError):
        LatLng.normalize((1, 2, 3))


def test_normalize_address():
    config.set_geocoder(
        lambda address: GeoLoc(51.5, -0.12) if address == 'London' else GeoLoc.failure()
    )
    assert LatLng.normalize('London') == LatLng(51.5, -0.12)

    with pytest.raises(GeocodeError):
        LatLng.normalize('Atlantis')


def test_normalize_address_without_geocoder():
    with pytest.raises(GeocodeError):
        LatLng.normalize('London')


def test_latlng_distance_to():
    assert LatLng(0, 0).distance_to((1, 0), units='miles', formula='flat') == pytest.approx(69.1)


def test_latlng_headings():
    assert LatLng(0, 0).heading_to((0, 1)) == pytest.approx(90.)
    assert LatLng(0, 0).heading_from((0, 1)) == pytest.approx(270.)


def test_latlng_endpoint_and_midpoint():
    end = LatLng(0, 0).endpoint(0, 69.1707, units='miles')
    assert end.lat == pytest.approx(1., abs=1e-4)

    mid = LatLng(0, 0).midpoint_to((0, 2))
    assert mid.lng == pytest.approx(1., abs=1e-6)
