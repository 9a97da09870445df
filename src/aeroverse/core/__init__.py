"""Physics and state machine core of the orbital lab."""

from .config import LAB_CFG, PHYSICS_CFG, LabCfg, PhysicsCfg
from .controller import RunController
from .model import (
    AdvanceEvent,
    AdvanceResult,
    OrbitalElements,
    RunStatus,
    SatelliteState,
    SimulationParameters,
)
from .physics import advance, initial_state
from .predictor import predict, predict_parameters

__all__ = [
    "LAB_CFG",
    "PHYSICS_CFG",
    "AdvanceEvent",
    "AdvanceResult",
    "LabCfg",
    "OrbitalElements",
    "PhysicsCfg",
    "RunController",
    "RunStatus",
    "SatelliteState",
    "SimulationParameters",
    "advance",
    "initial_state",
    "predict",
    "predict_parameters",
]
