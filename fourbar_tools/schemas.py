"""
schemas.py - Data structures for four-bar kinematics.

Dataclasses, enums and named tuples used across fourbar_tools modules.
All records are created fresh per call and never mutated by the core.
"""
from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from enum import Enum
from typing import NamedTuple


class Point(NamedTuple):
    x: float
    y: float


ORIGIN = Point(0.0, 0.0)


class GrashofType(str, Enum):
    CRANK_ROCKER = 'Crank-Rocker'
    DOUBLE_CRANK = 'Double-Crank (Drag-Link)'
    DOUBLE_ROCKER = 'Double-Rocker'
    CHANGE_POINT = 'Change-Point'
    TRIPLE_ROCKER = 'Triple-Rocker (Non-Grashof)'
    INVALID = 'Invalid Geometry'


class TransmissionQuality(str, Enum):
    POOR = 'poor'
    ACCEPTABLE = 'acceptable'
    OPTIMAL = 'optimal'


@dataclass(frozen=True)
class MechanismState:
    """Snapshot of the linkage at one crank angle. Angles in radians."""
    a: Point                 # crank tip, joint between crank and coupler
    b: Point                 # joint between coupler and rocker
    o2: Point                # crank ground pivot, always the origin
    o4: Point                # rocker ground pivot, (r1, 0)
    theta2: float
    theta3: float
    theta4: float
    transmission_angle: float
    is_valid: bool

    def to_dict(self) -> dict:
        return {
            'A': list(self.a),
            'B': list(self.b),
            'O2': list(self.o2),
            'O4': list(self.o4),
            'theta2': self.theta2,
            'theta3': self.theta3,
            'theta4': self.theta4,
            'transmission_angle': self.transmission_angle,
            'is_valid': self.is_valid,
        }


@dataclass(frozen=True)
class LimitAnalysis:
    """Output-link range and transmission-angle extremes. Angles in degrees.

    transmission_min / transmission_max are None when no configuration can
    satisfy the crank and coupler/rocker distance constraints at once.
    """
    has_rocker_limits: bool
    rocker_min: float
    rocker_max: float
    transmission_min: float | None
    transmission_max: float | None
    limit_state_min: MechanismState | None = None
    limit_state_max: MechanismState | None = None

    @property
    def has_transmission_limits(self) -> bool:
        return self.transmission_min is not None and self.transmission_max is not None

    def to_dict(self) -> dict:
        return {
            'has_rocker_limits': self.has_rocker_limits,
            'rocker_min': self.rocker_min,
            'rocker_max': self.rocker_max,
            'transmission_min': self.transmission_min,
            'transmission_max': self.transmission_max,
            'limit_state_min': self.limit_state_min.to_dict() if self.limit_state_min is not None else None,
            'limit_state_max': self.limit_state_max.to_dict() if self.limit_state_max is not None else None,
        }


@dataclass
class SweepResult:
    """
    Result of solving the linkage over one full crank revolution.

    theta4_range is the smallest arc holding every valid rocker angle, so it
    stays continuous when the rocker swings through 0 deg.
    """
    states: list[MechanismState]
    n_steps: int
    valid_fraction: float
    theta4_range: tuple[float, float] | None = None         # degrees, see angle_span; hi may exceed 360
    transmission_range: tuple[float, float] | None = None   # degrees
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.error is None

    def trajectories(self) -> dict[str, list[list[float]]]:
        """Joint paths over the valid states: joint_name -> [[x,y], ...]"""
        valid = [s for s in self.states if s.is_valid]
        return {
            'A': [list(s.a) for s in valid],
            'B': [list(s.b) for s in valid],
        }

    def to_dict(self, include_states: bool = False) -> dict:
        data = {
            'success': self.success,
            'n_steps': self.n_steps,
            'valid_fraction': self.valid_fraction,
            'theta4_range': list(self.theta4_range) if self.theta4_range else None,
            'transmission_range': list(self.transmission_range) if self.transmission_range else None,
            'trajectories': self.trajectories(),
            'error': self.error,
        }
        if include_states:
            data['states'] = [s.to_dict() for s in self.states]
        return data


@dataclass
class SimulationResult:
    """Result of running a linkage through pylinkage's own solver."""
    success: bool
    trajectories: dict[str, list[list[float]]] = field(default_factory=dict)  # joint_name -> [[x,y], ...]
    n_steps: int = 0
    error: str | None = None

    def to_dict(self) -> dict:
        return {
            'success': self.success,
            'trajectories': self.trajectories,
            'n_steps': self.n_steps,
            'error': self.error,
        }
