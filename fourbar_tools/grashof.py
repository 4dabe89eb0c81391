"""
grashof.py - Mechanism classification by Grashof's law.

With the link lengths sorted as s <= p <= q <= l:
  - s + l <  p + q : Grashof, at least one link fully rotates
  - s + l == p + q : change-point, the linkage can fold flat
  - s + l >  p + q : non-Grashof, no link fully rotates
"""
from __future__ import annotations

import math

from configs.appconfig import CHANGE_POINT_REL_TOL
from configs.link_models import MechanismConfig
from fourbar_tools.schemas import GrashofType


def _sorted_lengths(config: MechanismConfig) -> tuple[float, float, float, float]:
    s, p, q, l = sorted(config.lengths)
    return s, p, q, l


def is_change_point(config: MechanismConfig, rel_tol: float = CHANGE_POINT_REL_TOL) -> bool:
    s, p, q, l = _sorted_lengths(config)
    return math.isclose(s + l, p + q, rel_tol=rel_tol, abs_tol=0.0)


def is_grashof(config: MechanismConfig, rel_tol: float = CHANGE_POINT_REL_TOL) -> bool:
    """True when s + l <= p + q (change-point linkages included)."""
    s, p, q, l = _sorted_lengths(config)
    return s + l <= p + q or is_change_point(config, rel_tol=rel_tol)


def can_assemble(config: MechanismConfig) -> bool:
    """False when the longest link exceeds the other three combined, so the loop never closes."""
    s, p, q, l = _sorted_lengths(config)
    return l <= s + p + q


def classify(config: MechanismConfig, rel_tol: float = CHANGE_POINT_REL_TOL) -> GrashofType:
    """
    Classify a four-bar by its rotational behavior.

    Args:
        config: Link lengths (assembly mode is not used)
        rel_tol: Relative tolerance for the s + l == p + q change-point test

    Returns:
        GrashofType label
    """
    if not can_assemble(config):
        return GrashofType.INVALID

    if is_change_point(config, rel_tol=rel_tol):
        return GrashofType.CHANGE_POINT
    if not is_grashof(config, rel_tol=rel_tol):
        return GrashofType.TRIPLE_ROCKER

    # A tied shortest link is a change-point or non-Grashof, so s is unique here
    s = _sorted_lengths(config)[0]
    if config.r2 == s:
        return GrashofType.CRANK_ROCKER
    if config.r1 == s:
        return GrashofType.DOUBLE_CRANK
    return GrashofType.DOUBLE_ROCKER
