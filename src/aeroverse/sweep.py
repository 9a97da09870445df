"""Parameter sweep that classifies launch outcomes over speed and angle (predicted or simulated)."""
from __future__ import annotations

import argparse
from pathlib import Path
from typing import Sequence

import numpy as np

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
from matplotlib.colors import ListedColormap

from aeroverse.core.config import LAB_CFG, PHYSICS_CFG, PhysicsCfg
from aeroverse.core.controller import RunController
from aeroverse.core.model import RunStatus, SimulationParameters
from aeroverse.core.predictor import predict
from aeroverse.core.runner import run_until_outcome

ORBIT, CRASH, ESCAPE = 0, 1, 2
OUTCOME_LABELS = ("Orbit", "Crash", "Escape")

SPEED_POINTS = 26
ANGLE_POINTS = 19
FRAME_DT = 1.0 / 30.0
SIM_DURATION = 120.0

FIGURES_DIR = Path("figures")


def classify_fast(speed: float, angle_deg: float, cfg: PhysicsCfg = PHYSICS_CFG) -> int:
    """Outcome from the analytic projection alone.

    A bound orbit whose periapsis lies inside the impact radius is counted
    as a crash here, unlike the reach classification shown in the lab.
    """

    elements = predict(speed, angle_deg, cfg.initial_radius, cfg.gm)
    if not elements.bound:
        return ESCAPE
    if elements.periapsis_distance < cfg.impact_radius:
        return CRASH
    return ORBIT


def classify_simulated(
    speed: float,
    angle_deg: float,
    cfg: PhysicsCfg = PHYSICS_CFG,
    *,
    duration: float = SIM_DURATION,
    frame_dt: float = FRAME_DT,
) -> int:
    """Outcome of an integrated run through the run controller."""

    controller = RunController(cfg, params=SimulationParameters(speed, angle_deg))
    outcome = run_until_outcome(controller, duration, frame_dt, stop_on_escape=True)
    if outcome.status is RunStatus.CRASHED:
        return CRASH
    if outcome.escaped:
        return ESCAPE
    return ORBIT


def run_sweep(mode: str = "fast") -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    speeds = np.linspace(*LAB_CFG.speed_range, SPEED_POINTS)
    angles = np.linspace(*LAB_CFG.angle_range, ANGLE_POINTS)
    results = np.zeros((angles.size, speeds.size), dtype=int)

    total = angles.size * speeds.size
    print(f"\n--- Running parameter sweep ({mode}) ---")
    print(f"{total} points ({SPEED_POINTS} speeds x {ANGLE_POINTS} angles)")

    for i, angle in enumerate(angles):
        for j, speed in enumerate(speeds):
            if mode == "fast":
                results[i, j] = classify_fast(float(speed), float(angle))
            else:
                results[i, j] = classify_simulated(float(speed), float(angle))
        if i % 4 == 0:
            print(f"  {i + 1}/{angles.size} rows done ({100 * (i + 1) / angles.size:.0f}%)")

    return speeds, angles, results


def agreement(fast: np.ndarray, simulated: np.ndarray) -> float:
    """Fraction of grid points where both classifications match."""

    if fast.shape != simulated.shape:
        raise ValueError("result grids must have the same shape")
    return float(np.mean(fast == simulated))


def plot_heatmap(
    speeds: np.ndarray,
    angles: np.ndarray,
    results: np.ndarray,
    mode: str,
    figures_dir: Path = FIGURES_DIR,
) -> Path:
    figures_dir.mkdir(parents=True, exist_ok=True)
    cmap = ListedColormap(["#2f9e44", "#f03e3e", "#ffd43b"])

    fig, ax = plt.subplots(figsize=(10, 6))
    extent = [speeds.min(), speeds.max(), angles.min(), angles.max()]
    im = ax.imshow(
        results,
        origin="lower",
        extent=extent,
        aspect="auto",
        cmap=cmap,
        vmin=-0.5,
        vmax=2.5,
    )
    cbar = fig.colorbar(im, ticks=[ORBIT, CRASH, ESCAPE])
    cbar.ax.set_yticklabels(OUTCOME_LABELS)
    ax.set_xlabel("Injection speed")
    ax.set_ylabel("Injection angle [deg]")
    ax.set_title(f"Launch outcome per speed and angle ({mode})")
    fig.tight_layout()
    out = figures_dir / f"sweep_heatmap_{mode}.png"
    fig.savefig(out, dpi=180)
    plt.close(fig)
    return out


def main(argv: Sequence[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--mode", choices=("fast", "simulated", "both"), default="fast")
    parser.add_argument("--figures-dir", default=str(FIGURES_DIR))
    args = parser.parse_args(argv)
    figures_dir = Path(args.figures_dir)

    print(f"Circular speed at R0: {PHYSICS_CFG.circular_speed:.3f}")
    print(f"Escape speed at R0: {PHYSICS_CFG.escape_speed:.3f}")
    modes = ("fast", "simulated") if args.mode == "both" else (args.mode,)
    grids = {}
    for mode in modes:
        speeds, angles, results = run_sweep(mode)
        grids[mode] = results
        out = plot_heatmap(speeds, angles, results, mode, figures_dir)
        print(f"Heatmap saved to {out}")
    if len(grids) == 2:
        print(f"Prediction / simulation agreement: {agreement(grids['fast'], grids['simulated']):.1%}")


if __name__ == "__main__":
    main()
