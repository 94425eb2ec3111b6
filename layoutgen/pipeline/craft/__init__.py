"""CRAFT — flow-driven improvement search over a packed layout.

Submodules:
  models        Output dataclasses and configuration constants.
  engine        Locked-aware packer and random-swap hill climbing.
  serialization JSON conversion (craft_result_to_dict, parse_craft_result).
"""

from .models import PlacedDepartment, Packing, CraftResult
from .engine import optimize_layout, pack_departments, packing_cost
from .serialization import craft_result_to_dict, parse_craft_result

__all__ = [
    # Models
    "PlacedDepartment", "Packing", "CraftResult",
    # Engine
    "optimize_layout", "pack_departments", "packing_cost",
    # Serialization
    "craft_result_to_dict", "parse_craft_result",
]
