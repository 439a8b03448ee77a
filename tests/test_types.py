import pytest

from geomappable import DistanceRange, Formula, Units


def test_units_coerce():
    assert Units.coerce('miles') is Units.MILES
    assert Units.coerce(Units.KMS) is Units.KMS
    assert Units.NMS == 'nms'

    with pytest.raises(ValueError, match="Options: \\['miles', 'kms', 'nms'\\]"):
        Units.coerce('parsecs')


def test_formula_coerce():
    assert Formula.coerce('flat') is Formula.FLAT
    assert Formula.coerce(Formula.SPHERE) is Formula.SPHERE

    with pytest.raises(ValueError):
        Formula.coerce(None)


def test_distance_range_normalize():
    assert DistanceRange.normalize(range(1, 5)) == DistanceRange(1, 5, True)
    assert DistanceRange.normalize((1, 5)) == DistanceRange(1, 5, False)
    assert DistanceRange.normalize([1.5, 5.5]) == DistanceRange(1.5, 5.5)

    rng = DistanceRange(0, 1, True)
    assert DistanceRange.normalize(rng) is rng


def test_distance_range_normalize_invalid():
    with pytest.raises(ValueError):
        DistanceRange.normalize(range(0, 10, 2))

    with pytest.raises(TypeError):
        DistanceRange.normalize(5)

    with pytest.raises(TypeError):
        DistanceRange.normalize((1, 2, 3))
