import math

import numpy as np
import pytest

from aeroverse.core.config import PHYSICS_CFG, LabCfg
from aeroverse.core.controller import RunController
from aeroverse.core.model import AdvanceEvent, RunStatus, SimulationParameters
from aeroverse.core.physics import energy_specific
from aeroverse.core.predictor import predict
from aeroverse.core.runner import run_until_outcome

FRAME_DT = 1.0 / 60.0
WIDE_LAB = LabCfg(speed_range=(0.0, 5.0))


def assert_pristine_idle(controller):
    sat = controller.satellite
    assert controller.status is RunStatus.IDLE
    assert sat.position.tolist() == [PHYSICS_CFG.initial_radius, 0.0]
    assert len(sat.trail) == 0
    assert sat.time == 0.0
    assert not sat.crashed


def test_defaults_and_initial_projection():
    controller = RunController()
    assert controller.params == SimulationParameters(2.2, 0.0)
    assert_pristine_idle(controller)
    assert controller.elements.classification == "Low Earth Orbit"
    assert not controller.is_active


def test_launch_only_from_idle():
    controller = RunController()
    assert controller.launch()
    assert controller.status is RunStatus.ORBITING
    assert not controller.launch()
    assert controller.status is RunStatus.ORBITING


def test_tick_is_a_no_op_while_idle():
    controller = RunController()
    assert controller.tick(FRAME_DT) is None
    assert_pristine_idle(controller)


def test_tick_moves_satellite_while_orbiting():
    controller = RunController()
    controller.launch()
    controller.tick(FRAME_DT)
    assert controller.satellite.position[1] > 0.0
    assert controller.satellite.time == pytest.approx(FRAME_DT)


def test_drop_speed_crashes_before_half_revolution():
    controller = RunController(params=SimulationParameters(1.0, 0.0))
    outcome = run_until_outcome(controller, 30.0, FRAME_DT)
    assert outcome.status is RunStatus.CRASHED
    assert abs(outcome.swept_angle) < math.pi


def test_crash_is_terminal():
    controller = RunController(params=SimulationParameters(1.0, 0.0))
    run_until_outcome(controller, 30.0, FRAME_DT)
    assert controller.status is RunStatus.CRASHED
    frozen = controller.satellite.position.copy()
    for _ in range(10):
        assert controller.tick(FRAME_DT) is None
    assert np.array_equal(controller.satellite.position, frozen)
    assert controller.status is RunStatus.CRASHED
    assert not controller.launch()


@pytest.mark.parametrize("speed, angle", [(3.2, 0.0), (3.5, 20.0), (3.3, -20.0), (3.5, 45.0)])
def test_predicted_escape_is_reached_by_integration(speed, angle):
    elements = predict(speed, angle, PHYSICS_CFG.initial_radius, PHYSICS_CFG.gm)
    assert elements.classification == "Escape"
    assert elements.periapsis_distance > PHYSICS_CFG.impact_radius
    controller = RunController(params=SimulationParameters(speed, angle))
    outcome = run_until_outcome(controller, 400.0, 1.0 / 30.0, stop_on_escape=True)
    assert outcome.escaped
    assert controller.status is RunStatus.ESCAPED
    assert controller.satellite.radius > PHYSICS_CFG.escape_radius


def test_escape_status_keeps_integrating():
    controller = RunController(params=SimulationParameters(3.5, 0.0))
    run_until_outcome(controller, 400.0, 1.0 / 30.0, stop_on_escape=True)
    assert controller.status is RunStatus.ESCAPED
    radius = controller.satellite.radius
    event = controller.tick(FRAME_DT)
    assert event is AdvanceEvent.ESCAPE
    assert controller.status is RunStatus.ESCAPED
    assert controller.is_active
    assert controller.satellite.radius > radius


def test_bound_orbit_keeps_orbiting_and_conserves_energy():
    controller = RunController()
    controller.launch()
    sat = controller.satellite
    e0 = energy_specific(sat.position, sat.velocity)
    outcome = run_until_outcome(controller, 40.0, FRAME_DT)
    assert outcome.status is RunStatus.ORBITING
    assert outcome.revolutions > 2.0
    sat = controller.satellite
    assert energy_specific(sat.position, sat.velocity) == pytest.approx(e0, rel=0.01)
    assert outcome.max_radius == pytest.approx(PHYSICS_CFG.initial_radius, rel=0.01)


def test_zero_speed_crash_with_wide_speed_range():
    for angle in (-45.0, 0.0, 45.0):
        controller = RunController(lab_cfg=WIDE_LAB, params=SimulationParameters(0.0, angle))
        assert controller.params.speed == 0.0
        outcome = run_until_outcome(controller, 10.0, FRAME_DT)
        assert outcome.status is RunStatus.CRASHED
        assert outcome.frames < 300


def test_reset_is_idempotent_from_every_state():
    controller = RunController(params=SimulationParameters(1.0, 0.0))
    controller.reset()
    controller.reset()
    assert_pristine_idle(controller)

    controller.launch()
    for _ in range(20):
        controller.tick(FRAME_DT)
    controller.reset()
    assert_pristine_idle(controller)

    run_until_outcome(controller, 30.0, FRAME_DT)
    assert controller.status is RunStatus.CRASHED
    controller.reset()
    first = controller.satellite
    controller.reset()
    assert_pristine_idle(controller)
    assert np.array_equal(first.velocity, controller.satellite.velocity)

    escaping = RunController(params=SimulationParameters(3.5, 0.0))
    run_until_outcome(escaping, 400.0, 1.0 / 30.0, stop_on_escape=True)
    escaping.reset()
    assert_pristine_idle(escaping)


def test_parameter_change_resets_active_run():
    controller = RunController()
    controller.launch()
    for _ in range(30):
        controller.tick(FRAME_DT)
    controller.set_speed(2.5)
    assert_pristine_idle(controller)
    assert controller.params.speed == 2.5
    assert controller.satellite.velocity[1] == pytest.approx(2.5)

    controller.launch()
    controller.tick(FRAME_DT)
    controller.set_angle(30.0)
    assert_pristine_idle(controller)
    assert controller.satellite.velocity[0] == pytest.approx(2.5 * 0.5)


def test_projection_recomputes_on_every_parameter_change():
    controller = RunController()
    before = controller.elements
    controller.set_speed(3.3)
    assert controller.elements is not before
    assert controller.elements.classification == "Escape"
    controller.set_speed(2.2)
    controller.set_angle(-20.0)
    assert controller.elements == predict(2.2, -20.0, 4.0, 20.0)


def test_parameters_are_clamped_into_lab_ranges():
    controller = RunController()
    controller.set_speed(9.0)
    assert controller.params.speed == 3.5
    controller.set_speed(0.2)
    assert controller.params.speed == 1.0
    controller.set_angle(80.0)
    assert controller.params.angle_deg == 45.0
    controller.set_angle(-80.0)
    assert controller.params.angle_deg == -45.0


def test_nudges_follow_slider_steps():
    controller = RunController()
    controller.nudge_speed(1)
    assert controller.params.speed == pytest.approx(2.3)
    controller.nudge_speed(-3)
    assert controller.params.speed == pytest.approx(2.0)
    controller.nudge_angle(5)
    assert controller.params.angle_deg == 5.0


@pytest.mark.parametrize("bad", [float("nan"), float("inf")])
def test_non_finite_parameters_raise(bad):
    controller = RunController()
    with pytest.raises(ValueError):
        controller.set_speed(bad)
    with pytest.raises(ValueError):
        controller.set_angle(bad)
    assert controller.params == SimulationParameters(2.2, 0.0)


def test_listeners_see_every_transition():
    seen = []
    controller = RunController(params=SimulationParameters(1.0, 0.0))
    controller.add_listener(lambda old, new, sat: seen.append((old, new)))
    controller.launch()
    run_until_outcome(controller, 30.0, FRAME_DT)
    controller.reset()
    assert seen == [
        (RunStatus.IDLE, RunStatus.ORBITING),
        (RunStatus.ORBITING, RunStatus.CRASHED),
        (RunStatus.CRASHED, RunStatus.IDLE),
    ]


def test_removed_listener_is_not_called():
    calls = []

    def listener(old, new, sat):
        calls.append(new)

    controller = RunController()
    controller.add_listener(listener)
    controller.remove_listener(listener)
    controller.launch()
    assert calls == []


def test_below_range_speed_is_clamped_not_rejected():
    controller = RunController()
    controller.set_speed(-0.5)
    assert controller.params.speed == 1.0
    controller.set_parameters(SimulationParameters(0.0, -90.0))
    assert controller.params == SimulationParameters(1.0, -45.0)


def test_nudge_below_zero_speed_stays_at_range_floor():
    controller = RunController(lab_cfg=WIDE_LAB, params=SimulationParameters(0.0, 0.0))
    controller.launch()
    controller.nudge_speed(-1)
    assert controller.status is RunStatus.IDLE
    assert controller.params.speed == 0.0


def test_rejected_edit_keeps_the_active_run():
    controller = RunController()
    controller.launch()
    controller.tick(FRAME_DT)
    with pytest.raises(ValueError):
        controller.set_speed(float("nan"))
    assert controller.status is RunStatus.ORBITING
    assert controller.satellite.time > 0.0
