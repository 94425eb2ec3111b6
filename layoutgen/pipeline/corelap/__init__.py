"""CORELAP — constructive, closeness-driven department placement.

Submodules:
  models        Output dataclasses and scoring constants.
  scoring       Candidate rectangle scoring (PR + small biases) and final score.
  engine        Seed-and-grow placement algorithm.
  serialization JSON conversion (corelap_result_to_dict).
"""

from .models import Contact, CorelapResult, PlacementStep
from .engine import generate_layout
from .scoring import evaluate_candidate, cluster_centroid, closeness_score
from .serialization import corelap_result_to_dict

__all__ = [
    # Models
    "Contact", "CorelapResult", "PlacementStep",
    # Engine
    "generate_layout",
    # Scoring
    "evaluate_candidate", "cluster_centroid", "closeness_score",
    # Serialization
    "corelap_result_to_dict",
]
