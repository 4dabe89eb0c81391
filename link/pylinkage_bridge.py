"""
Bridge module between the closed-form four-bar solver and pylinkage.

This module handles:
- MechanismConfig → pylinkage Linkage conversion
- Trajectory extraction from pylinkage's own step solver

pylinkage picks, at every step, the circle intersection nearest to the
previous position. Seeding the joints with the closed-form solution therefore
makes pylinkage follow the configured assembly branch, which is what the
cross-checks in tests rely on.

Key pylinkage concepts:
- In pylinkage, a 4-bar linkage uses only 2 joints: Crank + Revolute
- The Revolute joint represents the POINT where coupler meets rocker
- Revolute.distance0 = coupler length (from crank end to revolute point)
- Revolute.distance1 = rocker length (from second ground point to revolute point)
"""
from __future__ import annotations

import logging

import numpy as np
from pylinkage.joints import Crank
from pylinkage.joints import Revolute
from pylinkage.linkage import Linkage

from configs.appconfig import DEFAULT_N_STEPS
from configs.link_models import MechanismConfig
from fourbar_tools.kinematic import ground_pivots
from fourbar_tools.kinematic import solve
from fourbar_tools.schemas import SimulationResult

logger = logging.getLogger(__name__)

CRANK_JOINT = "crank"
ROCKER_JOINT = "coupler_rocker_joint"


def make_fourbar_linkage(
    config: MechanismConfig,
    theta2: float = 0.0,
    n_steps: int = DEFAULT_N_STEPS,
) -> tuple[Linkage | None, str | None]:
    """
    Build a pylinkage Linkage for a four-bar configuration.

    Args:
        config: Link lengths and assembly mode
        theta2: Crank angle the linkage starts at
        n_steps: Steps per crank revolution

    Returns:
        (Linkage, None) on success, (None, error_message) when the loop
        cannot close at theta2
    """
    if n_steps < 1:
        return None, f"n_steps must be at least 1, got {n_steps}"

    state = solve(config, theta2)
    if not state.is_valid:
        return None, f"Linkage cannot be assembled at theta2={theta2:.4f} rad"

    o2, o4 = ground_pivots(config)

    # joint0 / joint1 as tuples create implicit Static joints
    crank = Crank(
        x=state.a.x,
        y=state.a.y,
        joint0=tuple(o2),
        angle=2 * np.pi / n_steps,   # Rotation per step
        distance=config.r2,
        name=CRANK_JOINT,
    )
    revolute = Revolute(
        x=state.b.x,
        y=state.b.y,
        joint0=crank,
        joint1=tuple(o4),
        distance0=config.r3,
        distance1=config.r4,
        name=ROCKER_JOINT,
    )

    linkage = Linkage(
        joints=(crank, revolute),
        order=(crank, revolute),
        name=f"four-bar {config.assembly_mode.value}",
    )
    logger.debug(f"Created pylinkage four-bar {config.lengths} starting at theta2={theta2:.4f}")
    return linkage, None


def simulate_fourbar(
    config: MechanismConfig,
    n_steps: int = DEFAULT_N_STEPS,
    theta2: float = 0.0,
) -> SimulationResult:
    """
    Run one crank revolution through pylinkage.

    Returns:
        SimulationResult with 'crank' and 'coupler_rocker_joint' paths
    """
    linkage, error = make_fourbar_linkage(config, theta2=theta2, n_steps=n_steps)
    if error:
        return SimulationResult(success=False, n_steps=n_steps, error=error)

    trajectories: dict[str, list[list[float]]] = {joint.name: [] for joint in linkage.joints}
    try:
        for coords in linkage.step(iterations=n_steps):
            for joint, coord in zip(linkage.joints, coords):
                if coord[0] is None or coord[1] is None:
                    return SimulationResult(
                        success=False,
                        trajectories=trajectories,
                        n_steps=n_steps,
                        error=f"Joint '{joint.name}' could not be placed",
                    )
                trajectories[joint.name].append([float(coord[0]), float(coord[1])])
    except Exception as e:
        logger.exception("pylinkage four-bar simulation failed")
        return SimulationResult(
            success=False,
            trajectories=trajectories,
            n_steps=n_steps,
            error=f"Simulation failed: {str(e)}",
        )

    return SimulationResult(success=True, trajectories=trajectories, n_steps=n_steps)
