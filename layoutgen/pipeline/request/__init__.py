"""Layout requests — dataclasses, parsing and validation."""

from .models import (
    REAL, VOID, SEED_MAX_TCR, SEED_MAX_AREA, SEED_RANDOM, SEED_RULES,
    Department, LayoutOptions, CorelapRequest, CraftRequest, RequestError,
)
from .parsing import parse_corelap_request, parse_craft_request, parse_department
from .validation import validate_corelap_request, validate_craft_request

__all__ = [
    # Models
    "REAL", "VOID", "SEED_MAX_TCR", "SEED_MAX_AREA", "SEED_RANDOM", "SEED_RULES",
    "Department", "LayoutOptions", "CorelapRequest", "CraftRequest", "RequestError",
    # Parsing / Validation
    "parse_corelap_request", "parse_craft_request", "parse_department",
    "validate_corelap_request", "validate_craft_request",
]
