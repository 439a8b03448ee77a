import numpy as np
import pytest
from pytest import approx

from geomappable import LatLng, calc, config, distances_from, sort_by_distance_from

from tests.functions import ORIGIN, PLACES
from tests.models import CustomLocation, Location


def test_distances_from():
    points = list(PLACES.values())
    res = distances_from(points, ORIGIN)
    assert isinstance(res, np.ndarray)
    assert len(res) == 4

    for point, distance in zip(points, res):
        assert distance == approx(calc.distance_between(ORIGIN, point), abs=1e-6)

    res = distances_from(points, ORIGIN, units='kms', formula='flat')
    for point, distance in zip(points, res):
        assert distance == approx(
            calc.distance_between(ORIGIN, point, units='kms', formula='flat'), abs=1e-6
        )


def test_distances_from_mixed_inputs():
    res = distances_from([(0, 1), LatLng(0, 2), '0,3'], (0, 0))
    assert res == approx([69.1707, 2 * 69.1707, 3 * 69.1707], abs=1e-3)

    # Identical points
    assert distances_from([ORIGIN], ORIGIN)[0] == approx(0, abs=1e-3)


def test_distances_from_defaults():
    config.set_default_units('nms')
    assert distances_from([(0, 1)], (0, 0))[0] == approx(
        calc.distance_between((0, 0), (0, 1), units='nms')
    )


def test_distances_from_empty():
    assert len(distances_from([], ORIGIN)) == 0


def test_sort_by_distance_from():
    locations = [
        Location(name=name, lat=lat, lng=lng) for name, (lat, lng) in PLACES.items()
    ]
    res = sort_by_distance_from(reversed(locations), ORIGIN)
    assert [x.name for x in res] == ['Ferry Building', 'Golden Gate', 'Oakland', 'San Jose']
    assert res[0].distance == approx(0.245, abs=0.01)
    assert isinstance(res[0].distance, float)


def test_sort_by_distance_from_model_units():
    locations = [
        CustomLocation(name=name, latitude=lat, longitude=lng)
        for name, (lat, lng) in PLACES.items()
    ]
    res = sort_by_distance_from(locations, ORIGIN, distance_attribute_name='dist')
    assert res[-1].name == 'San Jose'
    assert res[-1].dist == approx(
        calc.distance_between(ORIGIN, PLACES['San Jose'], units='kms')
    )


def test_sort_by_distance_from_is_stable():
    points = [LatLng(0, 1), LatLng(0, -1), LatLng(1, 0)]
    res = sort_by_distance_from(points, (0, 0))
    assert res == points


def test_sort_by_distance_from_empty():
    assert sort_by_distance_from([], ORIGIN) == []


def test_sort_by_distance_from_invalid():
    with pytest.raises(TypeError):
        sort_by_distance_from([object()], ORIGIN)
