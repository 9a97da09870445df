import math

import pytest

from aeroverse.core.config import PHYSICS_CFG
from aeroverse.core.model import SimulationParameters
from aeroverse.core.predictor import (
    ESCAPE_CLASSIFICATION,
    REACH_ZONES,
    classify_reach,
    predict,
    predict_parameters,
)

GM = 20.0
R0 = 4.0


def test_near_circular_tangential_injection():
    elements = predict(2.2, 0.0, R0, GM)
    assert elements.specific_energy < 0.0
    assert elements.specific_energy == pytest.approx(2.2**2 / 2 - GM / R0)
    assert elements.angular_momentum == pytest.approx(R0 * 2.2)
    assert elements.eccentricity == pytest.approx(0.0, abs=0.05)
    assert elements.apoapsis_distance == pytest.approx(R0, rel=1e-6)
    assert elements.apoapsis_au == pytest.approx(1.0, rel=1e-6)
    assert elements.classification == "Low Earth Orbit"
    assert elements.bound


def test_semi_major_axis_and_period_for_bound_orbit():
    elements = predict(2.0, 10.0, R0, GM)
    energy = 2.0 - GM / R0
    a = -GM / (2.0 * energy)
    assert elements.semi_major_axis == pytest.approx(a)
    assert elements.period == pytest.approx(2.0 * math.pi * math.sqrt(a**3 / GM))
    assert elements.periapsis_distance == pytest.approx(a * (1.0 - elements.eccentricity))


@pytest.mark.parametrize("speed", [3.2, 3.5])
def test_unbound_orbit_is_classified_as_escape(speed):
    elements = predict(speed, 20.0, R0, GM)
    assert elements.specific_energy > 0.0
    assert elements.classification == ESCAPE_CLASSIFICATION
    assert math.isinf(elements.apoapsis_distance)
    assert math.isinf(elements.semi_major_axis)
    assert math.isinf(elements.apoapsis_au)
    assert elements.period is None
    assert elements.eccentricity > 1.0
    assert not elements.bound
    assert elements.target_text == "Interstellar Space (Escape)"


def test_exactly_zero_energy_counts_as_escape():
    # speed**2 / 2 == GM / R0 exactly for these values
    elements = predict(2.0, 0.0, 2.0, 4.0)
    assert elements.specific_energy == 0.0
    assert elements.classification == ESCAPE_CLASSIFICATION
    assert elements.eccentricity == pytest.approx(1.0)


def test_zero_angular_momentum_keeps_eccentricity_below_one():
    elements = predict(0.0, 0.0, R0, GM)
    assert 0.0 <= elements.eccentricity < 1.0
    assert elements.eccentricity == pytest.approx(1.0 - PHYSICS_CFG.eccentricity_margin)
    assert elements.apoapsis_distance == pytest.approx(R0, rel=1e-6)


def test_eccentricity_never_negative_near_circular_speed():
    circular = math.sqrt(GM / R0)
    for delta in (-1e-9, 0.0, 1e-9):
        elements = predict(circular + delta, 0.0, R0, GM)
        assert 0.0 <= elements.eccentricity < 1.0
        assert not math.isnan(elements.eccentricity)


def test_angle_only_changes_angular_momentum():
    straight = predict(2.6, 0.0, R0, GM)
    tilted = predict(2.6, 40.0, R0, GM)
    assert tilted.specific_energy == pytest.approx(straight.specific_energy)
    assert tilted.semi_major_axis == pytest.approx(straight.semi_major_axis)
    assert tilted.angular_momentum == pytest.approx(straight.angular_momentum * math.cos(math.radians(40)))
    assert tilted.eccentricity > straight.eccentricity


def test_low_periapsis_does_not_change_classification():
    elements = predict(2.2, -40.0, R0, GM)
    assert elements.periapsis_distance < PHYSICS_CFG.body_radius
    assert elements.classification != ESCAPE_CLASSIFICATION
    assert elements.classification in {label for _, label in REACH_ZONES}


def test_zone_table_is_ascending_with_catch_all():
    bounds = [bound for bound, _ in REACH_ZONES]
    assert bounds == sorted(bounds)
    assert math.isinf(bounds[-1])


@pytest.mark.parametrize(
    "au, label",
    [
        (1.0, "Low Earth Orbit"),
        (1.1, "High Earth Orbit"),
        (1.5, "Reaching Mars"),
        (2.5, "Asteroid Belt"),
        (5.0, "Reaching Jupiter"),
        (11.9, "Reaching Saturn"),
        (24.0, "Reaching Uranus"),
        (25.0, "Reaching Neptune/Pluto"),
        (400.0, "Reaching Neptune/Pluto"),
    ],
)
def test_classify_reach_first_match_wins(au, label):
    assert classify_reach(au) == label


def test_predict_parameters_uses_configured_constants():
    params = SimulationParameters(2.6, 30.0)
    direct = predict(2.6, 30.0, PHYSICS_CFG.initial_radius, PHYSICS_CFG.gm)
    assert predict_parameters(params) == direct
    assert direct.classification == "Asteroid Belt"


@pytest.mark.parametrize("r0, gm", [(0.0, GM), (-1.0, GM), (R0, 0.0), (R0, float("nan"))])
def test_invalid_constants_raise(r0, gm):
    with pytest.raises(ValueError):
        predict(2.0, 0.0, r0, gm)
