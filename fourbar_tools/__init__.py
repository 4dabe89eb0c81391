"""
Closed-form kinematics of the planar four-bar linkage.

Public operations:
- solve: crank angle -> MechanismState
- solve_inverse: rocker angle -> crank angle or None
- classify: link lengths -> GrashofType
- analyze_limits: configuration -> LimitAnalysis
"""
from __future__ import annotations

from configs.link_models import AssemblyMode
from configs.link_models import MechanismConfig
from fourbar_tools.grashof import classify
from fourbar_tools.kinematic import solve
from fourbar_tools.kinematic import solve_inverse
from fourbar_tools.kinematic import solve_inverse_nearest
from fourbar_tools.limits import analyze_limits
from fourbar_tools.limits import rate_transmission_angle
from fourbar_tools.schemas import GrashofType
from fourbar_tools.schemas import LimitAnalysis
from fourbar_tools.schemas import MechanismState
from fourbar_tools.schemas import Point
from fourbar_tools.schemas import TransmissionQuality
from fourbar_tools.trajectory_utils import sweep

__all__ = [
    'AssemblyMode',
    'GrashofType',
    'LimitAnalysis',
    'MechanismConfig',
    'MechanismState',
    'Point',
    'TransmissionQuality',
    'analyze_limits',
    'classify',
    'rate_transmission_angle',
    'solve',
    'solve_inverse',
    'solve_inverse_nearest',
    'sweep',
]
