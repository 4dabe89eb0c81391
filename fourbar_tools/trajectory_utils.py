"""
trajectory_utils.py - Full-rotation sweeps and joint-path statistics.

This module provides:
  - sweep: solve the linkage at evenly spaced crank angles over one revolution
  - valid_crank_ranges: contiguous crank intervals where the loop closes
  - angle_span: smallest arc covering a set of rocker angles
  - analyze_trajectory: bounding box / length / closure statistics of a path

=============================================================================
N_STEPS (Sweep Step Count):
    Number of crank positions per revolution.

    EFFECTS:
    - Observed extremes approach the analytic limits as N_STEPS grows
    - Cost is linear in N_STEPS (one closed-form solve per step)

    RECOMMENDATIONS:
    - Plotting a coupler curve: 72-180 steps
    - Checking limits against limits.analyze_limits: 360+ steps
=============================================================================
"""
from __future__ import annotations

import numpy as np

from configs.appconfig import DEFAULT_N_STEPS
from configs.link_models import MechanismConfig
from fourbar_tools.geometry import to_degrees
from fourbar_tools.kinematic import solve
from fourbar_tools.schemas import SweepResult


# =============================================================================
# Type Definitions
# =============================================================================

Trajectory = list[tuple[float, float]]


# =============================================================================
# Sweep
# =============================================================================

def crank_angles(n_steps: int, start: float = 0.0) -> np.ndarray:
    """n_steps crank angles covering one revolution, endpoint excluded."""
    return start + np.linspace(0.0, 2 * np.pi, n_steps, endpoint=False)


def sweep(
    config: MechanismConfig,
    n_steps: int = DEFAULT_N_STEPS,
    start: float = 0.0,
) -> SweepResult:
    """
    Solve the linkage at n_steps crank angles over a full rotation.

    Args:
        config: Link lengths and assembly mode
        n_steps: Number of crank positions (must be >= 1)
        start: First crank angle in radians

    Returns:
        SweepResult with every state (valid or not) and the observed
        theta4 / transmission extremes over the valid ones
    """
    if n_steps < 1:
        return SweepResult(
            states=[],
            n_steps=n_steps,
            valid_fraction=0.0,
            error=f'n_steps must be at least 1, got {n_steps}',
        )

    states = [solve(config, float(theta2)) for theta2 in crank_angles(n_steps, start)]
    valid = [s for s in states if s.is_valid]

    if not valid:
        return SweepResult(states=states, n_steps=n_steps, valid_fraction=0.0)

    theta4_deg = [to_degrees(s.theta4) for s in valid]
    mu_deg = np.array([to_degrees(s.transmission_angle) for s in valid])

    return SweepResult(
        states=states,
        n_steps=n_steps,
        valid_fraction=len(valid) / n_steps,
        theta4_range=angle_span(theta4_deg),
        transmission_range=(float(np.min(mu_deg)), float(np.max(mu_deg))),
    )


def angle_span(degrees) -> tuple[float, float]:
    """
    Smallest arc covering a set of directions, in degrees.

    The arc starts after the widest gap between neighbouring angles, so a
    rocker swinging through 0 deg gives e.g. (350, 370) rather than (10, 350).

    Returns:
        (lo, hi) with lo in [0, 360) and lo <= hi < lo + 360
    """
    values = np.mod(np.asarray(degrees, dtype=float), 360.0)
    values[values >= 360.0] = 0.0  # mod of a tiny negative rounds up to 360
    values = np.sort(values)
    gaps = np.diff(np.append(values, values[0] + 360.0))
    i = int(np.argmax(gaps))
    if i == len(values) - 1:
        return float(values[0]), float(values[-1])
    return float(values[i + 1]), float(values[i] + 360.0)


def valid_crank_ranges(result: SweepResult) -> list[tuple[float, float]]:
    """
    Contiguous runs of valid crank angles in a sweep.

    Runs wrap around a full revolution: a run touching both the first and the
    last step is reported once, starting at its later end.

    Returns:
        List of (first_theta2, last_theta2) in radians; [(start, last)] when
        every step is valid, [] when none is
    """
    states = result.states
    n = len(states)
    flags = [s.is_valid for s in states]
    if not any(flags):
        return []
    if all(flags):
        return [(states[0].theta2, states[-1].theta2)]

    # Rotate so the scan starts right after an invalid step
    first_invalid = flags.index(False)
    order = [(first_invalid + 1 + i) % n for i in range(n)]

    ranges = []
    run_start = None
    for idx in order:
        if flags[idx] and run_start is None:
            run_start = idx
        elif not flags[idx] and run_start is not None:
            ranges.append((states[run_start].theta2, states[prev].theta2))
            run_start = None
        prev = idx
    if run_start is not None:
        ranges.append((states[run_start].theta2, states[prev].theta2))
    return ranges


# =============================================================================
# Path statistics
# =============================================================================

def analyze_trajectory(trajectory: Trajectory) -> dict:
    """
    Compute statistics about a joint path.

    Args:
        trajectory: Sequence of (x, y) points, e.g. SweepResult.trajectories()['B']

    Returns:
        Dictionary with path statistics
    """
    traj = np.array(trajectory, dtype=float)
    n = len(traj)
    if n == 0:
        return {'n_points': 0}

    centroid = np.mean(traj, axis=0)

    # Bounding box
    x_min, y_min = np.min(traj, axis=0)
    x_max, y_max = np.max(traj, axis=0)

    # Path length
    diffs = np.diff(traj, axis=0)
    segment_lengths = np.sqrt(np.sum(diffs**2, axis=1))
    total_length = np.sum(segment_lengths)

    # Closure (how close start is to end)
    closure_gap = np.sqrt(np.sum((traj[0] - traj[-1])**2))

    return {
        'n_points': int(n),
        'centroid': (float(centroid[0]), float(centroid[1])),
        'bounding_box': {
            'x_min': float(x_min),
            'x_max': float(x_max),
            'y_min': float(y_min),
            'y_max': float(y_max),
            'width': float(x_max - x_min),
            'height': float(y_max - y_min),
        },
        'total_path_length': float(total_length),
        'closure_gap': float(closure_gap),
        'avg_segment_length': float(total_length / (n - 1)) if n > 1 else 0.0,
    }
