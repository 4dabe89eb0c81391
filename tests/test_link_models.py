"""
test_link_models.py - Validation of the mechanism configuration model.
"""
from __future__ import annotations

import pytest
from pydantic import ValidationError

from configs.link_models import AssemblyMode
from configs.link_models import MechanismConfig


def test_config_defaults_to_open():
    config = MechanismConfig(r1=300, r2=100, r3=300, r4=200)
    assert config.assembly_mode is AssemblyMode.OPEN
    assert config.lengths == (300.0, 100.0, 300.0, 200.0)


def test_config_accepts_mode_string():
    config = MechanismConfig(r1=3, r2=1, r3=3, r4=2, assembly_mode='crossed')
    assert config.assembly_mode is AssemblyMode.CROSSED


@pytest.mark.parametrize('bad', [0, -1.0, float('inf'), float('nan')])
def test_config_rejects_bad_lengths(bad):
    """Non-positive or non-finite lengths fail at construction"""
    with pytest.raises(ValidationError):
        MechanismConfig(r1=300, r2=bad, r3=300, r4=200)


def test_config_rejects_unknown_mode_and_extra_fields():
    with pytest.raises(ValidationError):
        MechanismConfig(r1=3, r2=1, r3=3, r4=2, assembly_mode='sideways')
    with pytest.raises(ValidationError):
        MechanismConfig(r1=3, r2=1, r3=3, r4=2, r5=1)


def test_config_is_immutable():
    config = MechanismConfig(r1=3, r2=1, r3=3, r4=2)
    with pytest.raises(ValidationError):
        config.r1 = 10


def test_with_mode_returns_new_config():
    config = MechanismConfig(r1=3, r2=1, r3=3, r4=2)
    crossed = config.with_mode(AssemblyMode.CROSSED)
    assert crossed.assembly_mode is AssemblyMode.CROSSED
    assert config.assembly_mode is AssemblyMode.OPEN
    assert crossed.lengths == config.lengths


def test_assembly_mode_sign_round_trip():
    assert AssemblyMode.OPEN.sign == 1
    assert AssemblyMode.CROSSED.sign == -1
    assert AssemblyMode.from_sign(-1) is AssemblyMode.CROSSED
    with pytest.raises(ValueError):
        AssemblyMode.from_sign(0)


def test_default_config_matches_app_defaults():
    config = MechanismConfig.default()
    assert config.as_dict() == {'r1': 300.0, 'r2': 100.0, 'r3': 300.0, 'r4': 200.0, 'assembly_mode': 'open'}
