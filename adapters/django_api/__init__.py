"""
EastGate Django HTTP adapter.
Thin framework glue over core/http_api handlers.
"""

from adapters.django_api.dev_seed import (
    DEV_MAIN_BRANCH_ID,
    DEV_NGOMA_BRANCH_ID,
    dev_seed_bundle,
)
from adapters.django_api.wiring import build_dependencies, reset_dependencies

__all__ = [
    "DEV_MAIN_BRANCH_ID",
    "DEV_NGOMA_BRANCH_ID",
    "build_dependencies",
    "dev_seed_bundle",
    "reset_dependencies",
]
