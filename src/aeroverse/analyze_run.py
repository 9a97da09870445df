"""Analyze a recorded orbital lab run and generate diagnostic figures."""
from __future__ import annotations

import argparse
import csv
import json
import math
from pathlib import Path
from typing import Dict, List, Sequence

import numpy as np

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt


TIMESERIES_FILENAME = "timeseries.csv"
EVENTS_FILENAME = "events.csv"
META_FILENAME = "meta.json"
FIGS_SUBDIR = "figs"
ENERGY_TOL = 1e-4  # specific energy tolerance for orbit classification


def load_timeseries(path: Path) -> Dict[str, np.ndarray]:
    with path.open("r", newline="") as fh:
        reader = csv.DictReader(fh)
        columns: Dict[str, List[float]] = {name: [] for name in reader.fieldnames or []}
        for row in reader:
            for key, value in row.items():
                if key is None:
                    continue
                columns.setdefault(key, []).append(float(value))
    return {key: np.asarray(values) for key, values in columns.items()}


def load_events(path: Path) -> List[dict]:
    with path.open("r", newline="") as fh:
        reader = csv.DictReader(fh)
        events: List[dict] = []
        for row in reader:
            if not row:
                continue
            event = {
                "t": float(row["t"]),
                "type": row["type"],
                "r": float(row["r"]),
                "v": float(row["v"]),
            }
            details_raw = row.get("details", "")
            if details_raw:
                try:
                    event["details"] = json.loads(details_raw)
                except json.JSONDecodeError:
                    event["details"] = details_raw
            events.append(event)
    return events


def classify_orbit(energy_last: float) -> str:
    if energy_last < -ENERGY_TOL:
        return "elliptic"
    if energy_last > ENERGY_TOL:
        return "hyperbolic"
    return "parabolic"


def relative_energy_drift(energy: np.ndarray) -> float:
    if energy.size == 0:
        return 0.0
    denom = energy[0] if abs(energy[0]) > 1e-12 else 1.0
    return float((energy[-1] - energy[0]) / abs(denom))


def summarize_events(events: Sequence[dict]) -> Dict[str, int]:
    summary: Dict[str, int] = {"launch": 0, "escape": 0, "crash": 0, "reset": 0}
    for event in events:
        if event["type"] in summary:
            summary[event["type"]] += 1
    return summary


def estimate_period(ts: Dict[str, np.ndarray]) -> float | None:
    """Time between the last two upward crossings of the +x axis."""

    x = ts.get("x")
    y = ts.get("y")
    t = ts.get("t")
    if x is None or y is None or t is None or t.size < 3:
        return None
    crossings = [
        float(t[i])
        for i in range(1, t.size)
        if y[i - 1] < 0.0 <= y[i] and x[i] > 0.0
    ]
    if len(crossings) >= 2:
        return crossings[-1] - crossings[-2]
    return None


def ensure_fig_dir(run_dir: Path) -> Path:
    fig_dir = run_dir / FIGS_SUBDIR
    fig_dir.mkdir(parents=True, exist_ok=True)
    return fig_dir


def plot_orbit(fig_dir: Path, ts: Dict[str, np.ndarray], body_radius: float) -> None:
    fig, ax = plt.subplots(figsize=(6, 6))
    ax.plot(ts["x"], ts["y"], color="#fbbf24", lw=1.5, label="Satellite")
    theta = np.linspace(0, 2 * np.pi, 256)
    ax.fill(body_radius * np.cos(theta), body_radius * np.sin(theta), color="#1e40af", alpha=0.6)
    ax.set_aspect("equal", "box")
    ax.set_xlabel("x [units]")
    ax.set_ylabel("y [units]")
    ax.set_title("Trajectory (x-y)")
    ax.legend()
    fig.tight_layout()
    fig.savefig(fig_dir / "orbit_xy.png", dpi=150)
    plt.close(fig)


def plot_energy(fig_dir: Path, ts: Dict[str, np.ndarray], rel_drift: float) -> None:
    fig, ax = plt.subplots(figsize=(7, 4))
    ax.plot(ts["t"], ts["energy"], color="#ffa94d")
    ax.set_xlabel("t [s]")
    ax.set_ylabel("Specific energy")
    ax.set_title(f"Specific energy - relative drift {rel_drift:.2e}")
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    fig.savefig(fig_dir / "energy.png", dpi=150)
    plt.close(fig)


def plot_eccentricity(fig_dir: Path, ts: Dict[str, np.ndarray]) -> None:
    fig, ax = plt.subplots(figsize=(7, 4))
    ax.plot(ts["t"], ts["e"], color="#9775fa")
    ax.set_xlabel("t [s]")
    ax.set_ylabel("e [-]")
    ax.set_title("Eccentricity over time")
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    fig.savefig(fig_dir / "eccentricity.png", dpi=150)
    plt.close(fig)


def plot_radius(fig_dir: Path, ts: Dict[str, np.ndarray], events: Sequence[dict]) -> None:
    fig, ax = plt.subplots(figsize=(7, 4))
    ax.plot(ts["t"], ts["r"], color="#4dabf7")
    styles = {"crash": ("#d9480f", "--", "Crash"), "escape": ("#fab005", ":", "Escape")}
    labelled: set[str] = set()
    for event in events:
        style = styles.get(event["type"])
        if style is None:
            continue
        color, linestyle, label = style
        ax.axvline(
            event["t"],
            color=color,
            linestyle=linestyle,
            alpha=0.7,
            label=None if label in labelled else label,
        )
        labelled.add(label)
    if labelled:
        ax.legend()
    ax.set_xlabel("t [s]")
    ax.set_ylabel("r [units]")
    ax.set_title("Radius over time")
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    fig.savefig(fig_dir / "radius.png", dpi=150)
    plt.close(fig)


def analyze(run_path: Path) -> dict:
    """Load a run folder, write its figures and return the summary values."""

    with (run_path / META_FILENAME).open("r", encoding="utf-8") as fh:
        meta = json.load(fh)
    ts = load_timeseries(run_path / TIMESERIES_FILENAME)
    events = load_events(run_path / EVENTS_FILENAME)
    if not ts or ts["t"].size == 0:
        raise ValueError(f"{run_path / TIMESERIES_FILENAME} holds no samples")

    energy = ts["energy"]
    rel_drift = relative_energy_drift(energy)
    energy_last = float(energy[-1])
    gm = float(meta.get("gm", 0.0))
    a = None
    period_theory = None
    if gm > 0 and energy_last < 0:
        a = -gm / (2.0 * energy_last)
        period_theory = 2.0 * math.pi * math.sqrt(a**3 / gm)

    body_radius = float(meta.get("physics", {}).get("body_radius", 0.0))
    fig_dir = ensure_fig_dir(run_path)
    plot_orbit(fig_dir, ts, body_radius)
    plot_energy(fig_dir, ts, rel_drift)
    plot_eccentricity(fig_dir, ts)
    plot_radius(fig_dir, ts, events)

    return {
        "run": run_path.name,
        "orbit_class": classify_orbit(energy_last),
        "predicted_class": meta.get("predicted", {}).get("classification"),
        "a": a,
        "period_theory": period_theory,
        "period_sim": estimate_period(ts),
        "rel_drift": rel_drift,
        "events": summarize_events(events),
        "fig_dir": fig_dir,
    }


def print_summary(summary: dict) -> None:
    print(f"Run: {summary['run']}")
    print(f" Classification: {summary['orbit_class']}")
    if summary["predicted_class"] is not None:
        print(f" Predicted reach: {summary['predicted_class']}")
    if summary["a"] is not None:
        print(f" Semi-major axis a = {summary['a']:.4f}")
    else:
        print(" Semi-major axis a: undefined (open trajectory)")
    if summary["period_theory"] is not None:
        print(f" Theoretical period = {summary['period_theory']:.3f} s")
    if summary["period_sim"] is not None:
        print(f" Simulated period (last two x-axis crossings) = {summary['period_sim']:.3f} s")
    else:
        print(" Simulated period: needs at least two full revolutions")
    print(f" Relative energy drift = {summary['rel_drift']:.3e}")
    print(" Events:" + ",".join(f" {etype}: {count}" for etype, count in summary["events"].items()))
    print(f" Figures: {summary['fig_dir']}")


def main(argv: Sequence[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Analyze a logged run and write figures.")
    parser.add_argument("run_dir", nargs="?", help="Path or id of a run folder")
    parser.add_argument("--runs-dir", default="data/runs", help="Root folder of logged runs")
    args = parser.parse_args(argv)

    base_runs_dir = Path(args.runs_dir)
    if args.run_dir:
        run_path = Path(args.run_dir)
        if not run_path.is_dir():
            run_path = base_runs_dir / args.run_dir
    else:
        last_run_file = base_runs_dir / "last_run.txt"
        if not last_run_file.exists():
            parser.error("No run given and last_run.txt is missing.")
        run_path = base_runs_dir / last_run_file.read_text(encoding="utf-8").strip()

    if not run_path.is_dir():
        parser.error(f"Run folder not found: {run_path}")
    for name in (META_FILENAME, TIMESERIES_FILENAME, EVENTS_FILENAME):
        if not (run_path / name).exists():
            parser.error(f"Run folder is missing {name}")

    try:
        summary = analyze(run_path)
    except ValueError as exc:
        parser.error(str(exc))
    print_summary(summary)


if __name__ == "__main__":
    main()
