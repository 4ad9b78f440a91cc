from typing import Dict


def init_metrics() -> Dict[str, int | float | dict]:
    return {
        'attempts': 0,
        'budget_aborts': 0,
        'dead_end_attempts': 0,
        'missing_target_attempts': 0,
        'iterations_last': 0,
        'iterations_total': 0,
        'rooms': 0,
        'target_distance': 0,
        'runtime_ms': 0.0,
        'phase_ms': {},
    }
