"""
test_kinematics.py - Forward and inverse position analysis.
"""
from __future__ import annotations

import numpy as np
import pytest

from configs.link_models import AssemblyMode
from configs.link_models import MechanismConfig
from fourbar_tools.geometry import angle_difference
from fourbar_tools.geometry import cross
from fourbar_tools.geometry import distance
from fourbar_tools.kinematic import branch_inverse_candidates
from fourbar_tools.kinematic import crank_angle_from_point
from fourbar_tools.kinematic import inverse_candidates
from fourbar_tools.kinematic import solve
from fourbar_tools.kinematic import solve_inverse
from fourbar_tools.kinematic import solve_inverse_nearest

EPS = 1e-9


@pytest.fixture
def crank_rocker():
    return MechanismConfig(r1=300, r2=100, r3=300, r4=200, assembly_mode=AssemblyMode.OPEN)


CONFIGS = [
    (300, 100, 300, 200),   # crank-rocker
    (100, 300, 350, 250),   # drag-link
    (300, 250, 100, 350),   # double-rocker
    (400, 150, 300, 200),   # triple-rocker
    (100, 100, 100, 100),   # change-point
    (5.0, 2.0, 4.5, 3.0),
]


def test_solve_quarter_turn_open(crank_rocker):
    """theta2 = pi/2: A = (0, 100), |A O4| = sqrt(300^2 + 100^2)"""
    state = solve(crank_rocker, np.pi / 2)
    assert state.is_valid
    assert state.a.x == pytest.approx(0.0, abs=1e-9)
    assert state.a.y == pytest.approx(100.0)
    assert distance(state.a, state.o4) == pytest.approx(np.sqrt(300**2 + 100**2))
    assert state.b.x == pytest.approx(166.9052, abs=1e-3)
    assert state.b.y == pytest.approx(-149.2843, abs=1e-3)
    assert state.theta4 == pytest.approx(np.arctan2(-149.2843, 166.9052 - 300), abs=1e-5)
    # cos(mu) = (300^2 + 200^2 - 100000) / (2 * 300 * 200) = 0.25
    assert state.transmission_angle == pytest.approx(np.arccos(0.25))


def test_solve_quarter_turn_crossed(crank_rocker):
    state = solve(crank_rocker.with_mode(AssemblyMode.CROSSED), np.pi / 2)
    assert state.is_valid
    assert state.b.x == pytest.approx(283.0948, abs=1e-3)
    assert state.b.y == pytest.approx(199.2843, abs=1e-3)
    # Transmission angle does not depend on the branch
    assert state.transmission_angle == pytest.approx(np.arccos(0.25))


def test_assembly_mode_branch_sides(crank_rocker):
    """OPEN puts B right of A->O4, CROSSED puts it left"""
    for theta2 in np.linspace(0, 2 * np.pi, 37):
        open_state = solve(crank_rocker, theta2)
        crossed_state = solve(crank_rocker.with_mode(AssemblyMode.CROSSED), theta2)
        assert cross(open_state.a, open_state.o4, open_state.b) <= 0
        assert cross(crossed_state.a, crossed_state.o4, crossed_state.b) >= 0


@pytest.mark.parametrize('lengths', CONFIGS)
@pytest.mark.parametrize('mode', list(AssemblyMode))
def test_solve_distance_invariants(lengths, mode):
    """Every valid state keeps all link lengths"""
    r1, r2, r3, r4 = lengths
    config = MechanismConfig(r1=r1, r2=r2, r3=r3, r4=r4, assembly_mode=mode)
    n_valid = 0
    for theta2 in np.linspace(-2 * np.pi, 2 * np.pi, 181):
        state = solve(config, theta2)
        assert state.o2 == (0.0, 0.0)
        assert state.o4 == (r1, 0.0)
        assert distance(state.o2, state.a) == pytest.approx(r2)
        if not state.is_valid:
            continue
        n_valid += 1
        assert abs(distance(state.a, state.b) - r3) < 1e-6
        assert abs(distance(state.b, state.o4) - r4) < 1e-6
        assert 0.0 <= state.transmission_angle <= np.pi
    assert n_valid > 0


def test_solve_is_periodic(crank_rocker):
    s0 = solve(crank_rocker, 0.7)
    s1 = solve(crank_rocker, 0.7 + 2 * np.pi)
    assert s1.b == pytest.approx(s0.b)
    assert s1.theta4 == pytest.approx(s0.theta4)


def test_solve_invalid_sentinel():
    """Triple-rocker with the crank pointing away from O4 cannot close"""
    config = MechanismConfig(r1=400, r2=150, r3=300, r4=200)
    state = solve(config, np.pi)
    assert not state.is_valid
    assert state.b == (0.0, 0.0)
    assert state.theta3 == 0.0 and state.theta4 == 0.0 and state.transmission_angle == 0.0
    assert state.theta2 == np.pi
    assert state.a == pytest.approx((-150.0, 0.0))


def test_solve_never_valid_when_one_link_exceeds_others():
    """Ground longer than the other three combined: no crank angle closes the loop"""
    config = MechanismConfig(r1=1000, r2=100, r3=100, r4=100)
    for theta2 in np.linspace(0, 2 * np.pi, 90):
        assert not solve(config, theta2).is_valid


def test_solve_concentric_is_invalid():
    """A on top of O4 (r1 == r2 at theta2 = 0) is treated as unsolvable"""
    config = MechanismConfig(r1=100, r2=100, r3=50, r4=50)
    assert not solve(config, 0.0).is_valid


def test_state_to_dict(crank_rocker):
    data = solve(crank_rocker, 1.0).to_dict()
    assert set(data) == {'A', 'B', 'O2', 'O4', 'theta2', 'theta3', 'theta4', 'transmission_angle', 'is_valid'}
    assert data['O4'] == [300.0, 0.0]
    assert data['is_valid'] is True


@pytest.mark.parametrize('mode', list(AssemblyMode))
def test_inverse_round_trip(crank_rocker, mode):
    """solve -> theta4 -> solve_inverse -> solve reproduces B on one of the two branches"""
    config = crank_rocker.with_mode(mode)
    for theta2 in np.linspace(0, 2 * np.pi, 25, endpoint=False):
        state = solve(config, theta2)
        assert state.is_valid
        recovered = solve_inverse(config, state.theta4)
        assert recovered is not None
        branches = [solve(config.with_mode(m), recovered) for m in AssemblyMode]
        assert any(
            s.is_valid and distance(s.b, state.b) < 1e-6
            for s in branches
        )


def test_inverse_unreachable_returns_none(crank_rocker):
    """B at theta4 = 0 sits 500 from O2, beyond r2 + r3 = 400"""
    assert solve_inverse(crank_rocker, 0.0) is None
    assert inverse_candidates(crank_rocker, 0.0) is None
    assert solve_inverse_nearest(crank_rocker, 0.0, 1.0) is None


def test_inverse_candidates_both_place_b(crank_rocker):
    theta4 = np.deg2rad(240.0)
    candidates = inverse_candidates(crank_rocker, theta4)
    assert candidates is not None
    assert solve_inverse(crank_rocker, theta4) == candidates[0]
    b = (300 + 200 * np.cos(theta4), 200 * np.sin(theta4))
    for theta2 in candidates:
        a = (100 * np.cos(theta2), 100 * np.sin(theta2))
        assert distance(a, b) == pytest.approx(300)


def test_inverse_nearest_tracks_previous(crank_rocker):
    theta4 = np.deg2rad(240.0)
    first, second = inverse_candidates(crank_rocker, theta4)
    assert solve_inverse_nearest(crank_rocker, theta4, first + 0.01) == first
    assert solve_inverse_nearest(crank_rocker, theta4, second - 0.01) == second
    assert angle_difference(first, second) > 0.1


@pytest.mark.parametrize('mode', list(AssemblyMode))
def test_branch_inverse_candidates_stay_on_branch(crank_rocker, mode):
    """Every crank angle of a sweep is recovered on its own branch"""
    config = crank_rocker.with_mode(mode)
    for theta2 in np.linspace(0, 2 * np.pi, 25, endpoint=False):
        state = solve(config, theta2)
        kept = branch_inverse_candidates(config, state.theta4)
        assert kept
        assert any(angle_difference(t, theta2) < 1e-5 for t in kept)
        for t in kept:
            assert angle_difference(solve(config, t).theta4, state.theta4) < 1e-6


def test_branch_inverse_candidates_other_mode_only(crank_rocker):
    """theta4 = 90 deg puts B above the ground: reachable, but only when crossed"""
    theta4 = np.deg2rad(90.0)
    assert inverse_candidates(crank_rocker, theta4) is not None
    assert branch_inverse_candidates(crank_rocker, theta4) == []

    crossed = crank_rocker.with_mode(AssemblyMode.CROSSED)
    kept = branch_inverse_candidates(crossed, theta4)
    assert kept
    for theta2 in kept:
        assert solve(crossed, theta2).theta4 == pytest.approx(theta4, abs=1e-6)


def test_branch_inverse_candidates_unreachable(crank_rocker):
    assert branch_inverse_candidates(crank_rocker, 0.0) == []


def test_crank_angle_from_point():
    assert crank_angle_from_point((0, 5)) == pytest.approx(np.pi / 2)
    assert crank_angle_from_point((-1, 0)) == pytest.approx(np.pi)
