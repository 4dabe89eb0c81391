from __future__ import annotations

import logging
import math
import time

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError

from configs.appconfig import AppConfig
from configs.appconfig import DEFAULT_N_STEPS
from configs.link_models import MechanismConfig
from fourbar_tools.geometry import angle_difference
from fourbar_tools.geometry import to_degrees
from fourbar_tools.grashof import classify
from fourbar_tools.kinematic import branch_inverse_candidates
from fourbar_tools.kinematic import solve
from fourbar_tools.kinematic import solve_inverse
from fourbar_tools.limits import analyze_limits
from fourbar_tools.limits import rate_transmission_angle
from fourbar_tools.trajectory_utils import analyze_trajectory
from fourbar_tools.trajectory_utils import sweep
from fourbar_tools.trajectory_utils import valid_crank_ranges

logger = logging.getLogger(__name__)

CONFIG_FIELDS = ('r1', 'r2', 'r3', 'r4', 'assembly_mode')


def sanitize_for_json(obj):
    """
    Recursively sanitize an object for JSON serialization.

    Converts inf/-inf to string "Infinity"/"-Infinity", nan to null,
    tuples to lists and numpy scalars to floats.
    """
    if isinstance(obj, dict):
        return {k: sanitize_for_json(v) for k, v in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [sanitize_for_json(item) for item in obj]
    elif isinstance(obj, (bool, int, str)) or obj is None:
        return obj
    elif isinstance(obj, float):
        if math.isinf(obj):
            return 'Infinity' if obj > 0 else '-Infinity'
        elif math.isnan(obj):
            return None
        return obj
    elif hasattr(obj, '__float__'):  # numpy types
        val = float(obj)
        if math.isinf(val):
            return 'Infinity' if val > 0 else '-Infinity'
        elif math.isnan(val):
            return None
        return val
    return obj


def parse_config(payload: dict) -> MechanismConfig:
    """Build a MechanismConfig from the config fields of a request payload."""
    return MechanismConfig.model_validate({k: payload[k] for k in CONFIG_FIELDS if k in payload})


def _error(message: str) -> dict:
    return {
        'status': 'error',
        'message': message,
    }


def _validation_error(e: ValidationError) -> dict:
    details = '; '.join(
        f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
    )
    return _error(f'Invalid mechanism configuration: {details}')


def _required_float(payload: dict, key: str) -> float:
    if key not in payload:
        raise KeyError(key)
    return float(payload[key])


app = FastAPI(title='Fourbar API')

# Simple CORS setup
app.add_middleware(
    CORSMiddleware,
    allow_origins=['*'],
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)


@app.get('/')
def root():
    return {'message': 'Fourbar API is running'}


@app.get('/status')
def get_status():
    return {
        'status': 'operational',
        'message': 'Fourbar backend is running successfully',
    }


@app.get('/defaults')
def get_defaults():
    """Default mechanism plus the ranges offered to editing controls"""
    return {
        'status': 'success',
        'config': AppConfig.get_defaults(),
        'length_ranges': {k: list(v) for k, v in AppConfig.LENGTH_RANGES.items()},
        'speed_range': list(AppConfig.SPEED_RANGE),
        'n_steps': DEFAULT_N_STEPS,
    }


@app.post('/solve')
def solve_mechanism(request: dict):
    """
    Forward position analysis.

    Request: config fields + 'theta2' (radians)
    """
    try:
        config = parse_config(request)
        theta2 = _required_float(request, 'theta2')
    except ValidationError as e:
        return _validation_error(e)
    except KeyError as e:
        return _error(f'Missing field: {e.args[0]}')
    except (TypeError, ValueError) as e:
        return _error(f'Invalid request: {str(e)}')

    state = solve(config, theta2)
    return sanitize_for_json({
        'status': 'success',
        'state': state.to_dict(),
        'transmission_quality': rate_transmission_angle(state.transmission_angle).value if state.is_valid else None,
    })


@app.post('/solve-inverse')
def solve_mechanism_inverse(request: dict):
    """
    Inverse position analysis.

    Request: config fields + 'theta4' (radians), optional 'previous_theta2'
    to pick the crank solution nearest the current one.

    Only crank angles whose forward solve in the requested assembly mode
    lands back on theta4 are returned; 'reachable' ignores the mode,
    'mode_reachable' does not.
    """
    try:
        config = parse_config(request)
        theta4 = _required_float(request, 'theta4')
        previous = request.get('previous_theta2')
        previous = float(previous) if previous is not None else None
    except ValidationError as e:
        return _validation_error(e)
    except KeyError as e:
        return _error(f'Missing field: {e.args[0]}')
    except (TypeError, ValueError) as e:
        return _error(f'Invalid request: {str(e)}')

    reachable = solve_inverse(config, theta4) is not None
    on_branch = branch_inverse_candidates(config, theta4)
    if not on_branch:
        theta2 = None
    elif previous is None:
        theta2 = on_branch[0]
    else:
        theta2 = min(on_branch, key=lambda t: angle_difference(t, previous))

    return sanitize_for_json({
        'status': 'success',
        'reachable': reachable,
        'mode_reachable': theta2 is not None,
        'theta2': theta2,
        'state': solve(config, theta2).to_dict() if theta2 is not None else None,
    })


@app.post('/classify')
def classify_mechanism(request: dict):
    """Grashof classification. Request: config fields"""
    try:
        config = parse_config(request)
    except ValidationError as e:
        return _validation_error(e)

    grashof_type = classify(config)
    return {
        'status': 'success',
        'grashof_type': grashof_type.value,
        'name': grashof_type.name,
    }


@app.post('/limits')
def mechanism_limits(request: dict):
    """Rocker and transmission-angle limits. Request: config fields"""
    try:
        config = parse_config(request)
    except ValidationError as e:
        return _validation_error(e)

    limits = analyze_limits(config)
    return sanitize_for_json({
        'status': 'success',
        'limits': limits.to_dict(),
    })


@app.post('/analyze')
def analyze_mechanism(request: dict):
    """
    Everything a viewer needs for one frame: state, classification and limits.

    Request: config fields + optional 'theta2' (radians, default from AppConfig)
    """
    try:
        config = parse_config(request)
        theta2 = float(request.get('theta2', AppConfig.DEFAULT_THETA2))
    except ValidationError as e:
        return _validation_error(e)
    except (TypeError, ValueError) as e:
        return _error(f'Invalid request: {str(e)}')

    start_time = time.time()
    state = solve(config, theta2)
    grashof_type = classify(config)
    limits = analyze_limits(config)
    execution_time = (time.time() - start_time) * 1000

    return sanitize_for_json({
        'status': 'success',
        'config': config.as_dict(),
        'state': state.to_dict(),
        'state_degrees': {
            'theta2': to_degrees(state.theta2),
            'theta3': to_degrees(state.theta3),
            'theta4': to_degrees(state.theta4),
            'transmission_angle': to_degrees(state.transmission_angle),
        },
        'transmission_quality': rate_transmission_angle(state.transmission_angle).value if state.is_valid else None,
        'grashof_type': grashof_type.value,
        'limits': limits.to_dict(),
        'execution_time_ms': execution_time,
    })


@app.post('/sweep')
def sweep_mechanism(request: dict):
    """
    Solve over a full crank revolution.

    Request: config fields + optional 'n_steps', 'start' (radians),
    'include_states' (bool)
    """
    try:
        config = parse_config(request)
        n_steps = int(request.get('n_steps', DEFAULT_N_STEPS))
        start = float(request.get('start', 0.0))
    except ValidationError as e:
        return _validation_error(e)
    except (TypeError, ValueError) as e:
        return _error(f'Invalid request: {str(e)}')

    result = sweep(config, n_steps=n_steps, start=start)
    if not result.success:
        return _error(result.error)

    trajectories = result.trajectories()
    logger.info(f'Swept {config.lengths} over {n_steps} steps, {result.valid_fraction:.0%} valid')
    return sanitize_for_json({
        'status': 'success',
        **result.to_dict(include_states=bool(request.get('include_states', False))),
        'valid_crank_ranges': valid_crank_ranges(result),
        'coupler_path_stats': analyze_trajectory(trajectories['B']),
    })
