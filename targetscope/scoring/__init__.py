"""Pure scoring: seven dimension scorers and the weighted combiner."""

from .chemical_tractability import score_chemical_tractability
from .clinical_history import score_clinical_history
from .common import linear_scale
from .engine import DIMENSION_WEIGHTS, RawDataInputs, calculate_scores, score_label
from .genetic_evidence import score_genetic_evidence
from .innovation_signal import score_innovation_signal
from .literature_depth import score_literature_depth
from .regulatory_genomics import score_regulatory_genomics
from .structural_readiness import score_structural_readiness

__all__ = [
    "DIMENSION_WEIGHTS", "RawDataInputs", "calculate_scores", "score_label", "linear_scale",
    "score_genetic_evidence", "score_chemical_tractability", "score_structural_readiness",
    "score_clinical_history", "score_literature_depth", "score_innovation_signal",
    "score_regulatory_genomics",
]
