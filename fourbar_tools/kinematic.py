"""
kinematic.py - Closed-form position analysis of a planar four-bar linkage.

This module provides:
  - Forward position analysis: crank angle -> joint positions and link angles
  - Inverse position analysis: rocker angle -> a compatible crank angle
  - Helpers shared with the limit analyzer (state assembly, transmission angle)

Frame conventions:
  - O2 (crank pivot) at the origin, O4 (rocker pivot) at (r1, 0)
  - A is the crank tip, B the coupler/rocker joint
  - AssemblyMode.OPEN places B right of the directed line A->O4,
    AssemblyMode.CROSSED places it to the left

Design notes:
  - Functions are pure: no state survives between calls
  - Geometric infeasibility is returned as data, never raised
"""
from __future__ import annotations

import numpy as np

from configs.link_models import AssemblyMode
from configs.link_models import MechanismConfig
from fourbar_tools.geometry import angle_difference
from fourbar_tools.geometry import circle_intersections
from fourbar_tools.geometry import cross
from fourbar_tools.geometry import distance
from fourbar_tools.geometry import law_of_cosines_angle
from fourbar_tools.schemas import MechanismState
from fourbar_tools.schemas import ORIGIN
from fourbar_tools.schemas import Point


# =============================================================================
# Shared Helpers
# =============================================================================

def ground_pivots(config: MechanismConfig) -> tuple[Point, Point]:
    """Fixed pivots (O2, O4)."""
    return ORIGIN, Point(float(config.r1), 0.0)


def crank_position(r2: float, theta2: float) -> Point:
    """Position of the crank tip A for a crank angle."""
    return Point(float(r2 * np.cos(theta2)), float(r2 * np.sin(theta2)))


def transmission_angle(config: MechanismConfig, d_ao4: float) -> float:
    """
    Transmission angle (radians, in [0, pi]) for a given |A - O4|.

    Law of cosines on triangle A, B, O4; monotonically increasing in d_ao4.
    """
    return law_of_cosines_angle(config.r3, config.r4, d_ao4)


def branch_side(mode: AssemblyMode) -> int:
    """Sign of cross(A, O4, B) required by an assembly mode."""
    return -1 if AssemblyMode(mode) is AssemblyMode.OPEN else 1


def on_branch(config: MechanismConfig, a, b) -> bool:
    """Whether joints A and B lie on the configured assembly branch."""
    side = cross(a, ground_pivots(config)[1], b)
    return side == 0 or int(np.sign(side)) == branch_side(config.assembly_mode)


def invalid_state(config: MechanismConfig, theta2: float) -> MechanismState:
    """Sentinel state for a crank angle at which the loop cannot close."""
    o2, o4 = ground_pivots(config)
    return MechanismState(
        a=crank_position(config.r2, theta2),
        b=ORIGIN,
        o2=o2,
        o4=o4,
        theta2=float(theta2),
        theta3=0.0,
        theta4=0.0,
        transmission_angle=0.0,
        is_valid=False,
    )


def state_from_joints(config: MechanismConfig, a, b, theta2: float | None = None) -> MechanismState:
    """Assemble a valid state from already-known joint positions."""
    o2, o4 = ground_pivots(config)
    a = Point(float(a[0]), float(a[1]))
    b = Point(float(b[0]), float(b[1]))
    if theta2 is None:
        theta2 = float(np.arctan2(a.y, a.x))

    return MechanismState(
        a=a,
        b=b,
        o2=o2,
        o4=o4,
        theta2=float(theta2),
        theta3=float(np.arctan2(b.y - a.y, b.x - a.x)),
        theta4=float(np.arctan2(b.y - o4.y, b.x - o4.x)),
        transmission_angle=transmission_angle(config, distance(a, o4)),
        is_valid=True,
    )


# =============================================================================
# Forward Position Analysis
# =============================================================================

def solve(config: MechanismConfig, theta2: float) -> MechanismState:
    """
    Solve the four-bar for a crank angle.

    Args:
        config: Link lengths and assembly mode
        theta2: Crank angle in radians (any real, period 2*pi)

    Returns:
        MechanismState; is_valid is False when circle(A, r3) and
        circle(O4, r4) do not meet at this crank angle
    """
    _, o4 = ground_pivots(config)
    a = crank_position(config.r2, theta2)

    # Validity gate: d == 0, d > r3 + r4 or d < |r3 - r4|
    candidates = circle_intersections(a, config.r3, o4, config.r4)
    if candidates is None:
        return invalid_state(config, theta2)

    right, left = candidates
    b = right if AssemblyMode(config.assembly_mode) is AssemblyMode.OPEN else left
    return state_from_joints(config, a, b, theta2=theta2)


# =============================================================================
# Inverse Position Analysis
# =============================================================================

def rocker_position(config: MechanismConfig, theta4: float) -> Point:
    """Position of joint B for a rocker angle."""
    return Point(
        float(config.r1 + config.r4 * np.cos(theta4)),
        float(config.r4 * np.sin(theta4)),
    )


def inverse_candidates(config: MechanismConfig, theta4: float) -> tuple[float, float] | None:
    """
    Both crank angles that place the rocker at theta4.

    Returns:
        (canonical, other) crank angles in radians, or None when the rocker
        orientation cannot be reached by any crank angle
    """
    b = rocker_position(config, theta4)
    candidates = circle_intersections(ORIGIN, config.r2, b, config.r3)
    if candidates is None:
        return None

    canonical, other = candidates
    return (
        float(np.arctan2(canonical.y, canonical.x)),
        float(np.arctan2(other.y, other.x)),
    )


def solve_inverse(config: MechanismConfig, theta4: float) -> float | None:
    """
    Find a crank angle producing the rocker angle theta4.

    Always commits to the same candidate (the crank tip right of the line
    O2->B). Callers needing branch continuity while the target moves should
    use solve_inverse_nearest.

    Args:
        config: Link lengths (assembly mode is not used)
        theta4: Target rocker angle in radians

    Returns:
        Crank angle in radians, or None if unreachable
    """
    candidates = inverse_candidates(config, theta4)
    if candidates is None:
        return None
    return candidates[0]


def solve_inverse_nearest(
    config: MechanismConfig,
    theta4: float,
    previous_theta2: float,
) -> float | None:
    """Crank angle for theta4 closest (wrapped) to previous_theta2, or None if unreachable."""
    candidates = inverse_candidates(config, theta4)
    if candidates is None:
        return None
    return min(candidates, key=lambda t: angle_difference(t, previous_theta2))


def branch_inverse_candidates(
    config: MechanismConfig,
    theta4: float,
    rel_tol: float = 1e-6,
) -> list[float]:
    """
    Crank angles for theta4 that stay on the configured assembly branch.

    A candidate from inverse_candidates is kept only when solve() in
    config.assembly_mode places B back at the target rocker position.
    An empty list means theta4 cannot be reached in this mode.
    """
    candidates = inverse_candidates(config, theta4)
    if candidates is None:
        return []

    target = rocker_position(config, theta4)
    tol = rel_tol * max(config.lengths)
    kept = []
    for theta2 in candidates:
        state = solve(config, theta2)
        if state.is_valid and distance(state.b, target) <= tol and theta2 not in kept:
            kept.append(theta2)
    return kept


def crank_angle_from_point(point) -> float:
    """Crank angle pointing at an arbitrary point, e.g. a dragged crank tip."""
    return float(np.arctan2(point[1], point[0]))
