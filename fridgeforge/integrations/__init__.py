"""Integration check helpers."""

from .checks import (
    IntegrationCheckResult,
    check_gateway,
    check_models,
    run_all_checks,
)

__all__ = [
    "IntegrationCheckResult",
    "check_gateway",
    "check_models",
    "run_all_checks",
]
