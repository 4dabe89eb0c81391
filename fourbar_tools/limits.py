"""
limits.py - Extremes of a four-bar over a full crank rotation.

Two independent analyses:
  - Rocker limits: the output link reverses when crank and coupler are
    collinear, i.e. |O2 B| = r2 + r3 (extended) or |O2 B| = |r2 - r3| (folded).
    Joint positions are rebuilt from those distances instead of from an angle.
  - Transmission limits: mu grows with d = |A O4|, so its extremes sit at the
    ends of the achievable d interval.
"""
from __future__ import annotations

import logging

import numpy as np

from configs.appconfig import AppConfig
from configs.appconfig import REACH_TOL
from configs.link_models import MechanismConfig
from fourbar_tools.geometry import clamp_unit
from fourbar_tools.geometry import normalize_angle
from fourbar_tools.geometry import to_degrees
from fourbar_tools.kinematic import on_branch
from fourbar_tools.kinematic import rocker_position
from fourbar_tools.kinematic import state_from_joints
from fourbar_tools.kinematic import transmission_angle
from fourbar_tools.schemas import LimitAnalysis
from fourbar_tools.schemas import MechanismState
from fourbar_tools.schemas import Point
from fourbar_tools.schemas import TransmissionQuality

logger = logging.getLogger(__name__)


# =============================================================================
# Rocker Limits (crank / coupler collinear)
# =============================================================================

def _collinear_scale(config: MechanismConfig, extended: bool) -> float:
    """Factor k with A = k * B when O2, A and B are collinear."""
    r2, r3 = config.r2, config.r3
    if extended:
        return r2 / (r2 + r3)
    if r2 >= r3:
        # B between O2 and A
        return r2 / (r2 - r3)
    # A and B on opposite sides of O2
    return -r2 / (r3 - r2)


def collinear_limit_state(
    config: MechanismConfig,
    extended: bool,
    reach_tol: float = REACH_TOL,
) -> MechanismState | None:
    """
    Rebuild the linkage at one crank/coupler collinear configuration.

    Args:
        config: Link lengths and assembly mode
        extended: True for |O2 B| = r2 + r3, False for |O2 B| = |r2 - r3|
        reach_tol: How far |cos(gamma)| may exceed 1 before the extreme is unreachable

    Returns:
        MechanismState on the configured assembly branch, or None when the
        linkage never reaches this collinear configuration
    """
    r1, r2, r3, r4 = config.lengths
    dist_o2b = r2 + r3 if extended else abs(r2 - r3)

    if dist_o2b == 0:
        # Folded with r2 == r3: B lands on O2 and A is undetermined
        return None

    # Interior angle at O4 of triangle (O2, O4, B)
    cos_gamma = (r1 * r1 + r4 * r4 - dist_o2b * dist_o2b) / (2 * r1 * r4)
    if abs(cos_gamma) > 1.0 + reach_tol:
        return None
    gamma = float(np.arccos(clamp_unit(cos_gamma)))

    scale = _collinear_scale(config, extended)
    candidates = []
    # O4->O2 points along pi, so B sits at pi -/+ gamma; the assembly mode picks the side
    for theta4 in (np.pi - gamma, gamma - np.pi):
        b = rocker_position(config, theta4)
        a = Point(b.x * scale, b.y * scale)
        candidates.append((a, b))
        if on_branch(config, a, b):
            return state_from_joints(config, a, b)

    # Only reachable through rounding when cross(A, O4, B) flips sign at ~0
    a, b = candidates[0]
    return state_from_joints(config, a, b)


def rocker_limits(
    config: MechanismConfig,
) -> tuple[bool, float, float, MechanismState | None, MechanismState | None]:
    """(has_limits, min_deg, max_deg, state_at_min, state_at_max)"""
    extended_state = collinear_limit_state(config, extended=True)
    folded_state = collinear_limit_state(config, extended=False)

    if extended_state is None or folded_state is None:
        logger.debug(
            f'Rocker has no collinear limits (extended reachable: {extended_state is not None}, '
            f'folded reachable: {folded_state is not None})',
        )
        return False, 0.0, 360.0, None, None

    ext_deg = to_degrees(normalize_angle(extended_state.theta4))
    fold_deg = to_degrees(normalize_angle(folded_state.theta4))
    if ext_deg <= fold_deg:
        return True, ext_deg, fold_deg, extended_state, folded_state
    return True, fold_deg, ext_deg, folded_state, extended_state


# =============================================================================
# Transmission Angle Limits
# =============================================================================

def transmission_distance_range(config: MechanismConfig) -> tuple[float, float] | None:
    """
    Achievable range of d = |A O4|, or None if empty.

    The crank alone allows [|r1 - r2|, r1 + r2]; the coupler/rocker pair
    allows [|r3 - r4|, r3 + r4].
    """
    r1, r2, r3, r4 = config.lengths
    d_min = max(abs(r1 - r2), abs(r3 - r4))
    d_max = min(r1 + r2, r3 + r4)
    if d_min > d_max:
        return None
    return d_min, d_max


def transmission_limits(config: MechanismConfig) -> tuple[float | None, float | None]:
    """(mu_min, mu_max) in degrees, (None, None) for impossible geometry."""
    d_range = transmission_distance_range(config)
    if d_range is None:
        logger.debug(f'No configuration satisfies both distance constraints for {config.lengths}')
        return None, None

    d_min, d_max = d_range
    return (
        to_degrees(transmission_angle(config, d_min)),
        to_degrees(transmission_angle(config, d_max)),
    )


def rate_transmission_angle(mu: float) -> TransmissionQuality:
    """Quality band of a transmission angle given in radians."""
    mu_deg = to_degrees(mu)
    if mu_deg < AppConfig.TRANSMISSION_POOR_LOW or mu_deg > AppConfig.TRANSMISSION_POOR_HIGH:
        return TransmissionQuality.POOR
    if AppConfig.TRANSMISSION_OPTIMAL_LOW < mu_deg < AppConfig.TRANSMISSION_OPTIMAL_HIGH:
        return TransmissionQuality.OPTIMAL
    return TransmissionQuality.ACCEPTABLE


# =============================================================================
# High-Level Orchestrator
# =============================================================================

def analyze_limits(config: MechanismConfig) -> LimitAnalysis:
    """
    Compute the rocker range and the transmission-angle extremes.

    Args:
        config: Link lengths and assembly mode

    Returns:
        LimitAnalysis with angles in degrees
    """
    has_limits, rocker_min, rocker_max, state_min, state_max = rocker_limits(config)
    mu_min, mu_max = transmission_limits(config)

    return LimitAnalysis(
        has_rocker_limits=has_limits,
        rocker_min=rocker_min,
        rocker_max=rocker_max,
        transmission_min=mu_min,
        transmission_max=mu_max,
        limit_state_min=state_min,
        limit_state_max=state_max,
    )
