# targetscope/models.py
from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Dict, Generic, List, Literal, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

# ============================================================================
# Base
# ============================================================================

class FrozenModel(BaseModel):
    """Write-once model; dumps with camelCase keys (``by_alias=True``)."""
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


def now_ms() -> int:
    return int(time.time() * 1000)


DimensionName = Literal[
    "geneticEvidence",
    "chemicalTractability",
    "structuralReadiness",
    "clinicalHistory",
    "literatureDepth",
    "innovationSignal",
    "regulatoryGenomics",
]

SourceKey = Literal[
    "openTargets",
    "chembl",
    "pubmed",
    "clinicalTrials",
    "biorxiv",
    "alphafold",
    "alphagenome",
]

# fixed output order of the seven envelopes
SOURCE_KEYS: List[SourceKey] = [
    "openTargets",
    "chembl",
    "pubmed",
    "clinicalTrials",
    "biorxiv",
    "alphafold",
    "alphagenome",
]

# ============================================================================
# Result envelope
# ============================================================================

T = TypeVar("T")


class ServiceResult(FrozenModel, Generic[T]):
    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    source: str
    timestamp: int = Field(default_factory=now_ms)
    cached: bool = False
    response_time_ms: int = 0
    diagnostics: List[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_outcome(self) -> "ServiceResult[T]":
        if self.success and self.data is None:
            raise ValueError("successful result must carry data")
        if not self.success and (self.data is not None or not self.error):
            raise ValueError("failed result must carry an error and no data")
        return self

    @classmethod
    def ok(cls, source: str, data: T, started: float, *, cached: bool = False,
           diagnostics: Optional[List[str]] = None) -> "ServiceResult[T]":
        return cls(
            success=True,
            data=data,
            source=source,
            cached=cached,
            response_time_ms=_elapsed_ms(started),
            diagnostics=list(diagnostics or []),
        )

    @classmethod
    def failed(cls, source: str, error: str, started: float,
               diagnostics: Optional[List[str]] = None) -> "ServiceResult[T]":
        return cls(
            success=False,
            error=error or "Unknown error",
            source=source,
            response_time_ms=_elapsed_ms(started),
            diagnostics=list(diagnostics or []),
        )


def _elapsed_ms(started: float) -> int:
    return max(0, int((time.monotonic() - started) * 1000))

# ============================================================================
# Normalized records (one shape per source)
# ============================================================================

# ---------------------------- Open Targets -----------------------------------

class DiseaseAssociation(FrozenModel):
    disease_id: str
    disease_name: str
    score: float
    datasource_diversity: int


class Tractability(FrozenModel):
    label: str
    modality: str
    value: bool


class OpenTargetsData(FrozenModel):
    ensembl_id: str
    approved_symbol: str
    approved_name: str
    biotype: str = "protein_coding"
    disease_association_count: int = 0
    top_disease_associations: List[DiseaseAssociation] = Field(default_factory=list)
    tractability: List[Tractability] = Field(default_factory=list)

# ------------------------------- ChEMBL --------------------------------------

class Mechanism(FrozenModel):
    mechanism_of_action: str
    molecule_chembl_id: str
    max_phase: float
    action_type: str


class DrugLikeness(FrozenModel):
    lipinski_violations: int
    lipinski_pass: bool
    veber_pass: bool
    overall_score: int
    flags: List[str] = Field(default_factory=list)


class CompoundDetail(FrozenModel):
    chembl_id: str
    preferred_name: Optional[str] = None
    molecule_type: str = "Unknown"
    max_phase: float = 0
    smiles: Optional[str] = None
    molecular_weight: Optional[float] = None
    alogp: Optional[float] = None
    psa: Optional[float] = None
    hba: Optional[int] = None
    hbd: Optional[int] = None
    num_ro5_violations: Optional[int] = None
    aromatic_rings: Optional[int] = None
    rotatable_bonds: Optional[int] = None
    structure_image_url: str = ""
    pchembl_value: Optional[float] = None
    activity_type: Optional[str] = None
    drug_likeness: Optional[DrugLikeness] = None


class CompoundActivity(FrozenModel):
    molecule_chembl_id: str
    pchembl_value: float
    standard_type: Optional[str] = None
    standard_value: Optional[float] = None


class ChEMBLData(FrozenModel):
    target_chembl_id: str = ""
    compound_count: int = 0
    mechanisms: List[Mechanism] = Field(default_factory=list)
    max_clinical_phase: float = 0
    bioactivity_count: int = 0
    potent_compound_count: int = 0
    top_compounds: List[CompoundDetail] = Field(default_factory=list)
    top_activities: List[CompoundActivity] = Field(default_factory=list)

# ------------------------------- PubMed --------------------------------------

class PubMedData(FrozenModel):
    total_publications: int = 0
    recent_publications: int = 0
    drug_focused_publications: int = 0
    review_articles: int = 0

# ------------------------- ClinicalTrials.gov --------------------------------

class TrialStudy(FrozenModel):
    nct_id: str = ""
    title: str = ""
    phase: str = "N/A"
    status: str = "Unknown"
    sponsor: str = "Unknown"
    start_date: str = ""
    enrollment: Optional[int] = None
    conditions: List[str] = Field(default_factory=list)
    interventions: List[str] = Field(default_factory=list)


class SponsorCount(FrozenModel):
    sponsor: str
    count: int


class ClinicalTrialsData(FrozenModel):
    total_trials: int = 0
    trials_by_phase: Dict[str, int] = Field(default_factory=dict)
    trials_by_status: Dict[str, int] = Field(default_factory=dict)
    active_trials: int = 0
    sponsors: List[str] = Field(default_factory=list)
    sponsor_trial_counts: List[SponsorCount] = Field(default_factory=list)
    recent_trials: int = 0
    studies: List[TrialStudy] = Field(default_factory=list)

# ------------------------------- bioRxiv -------------------------------------

VelocityTrend = Literal["increasing", "stable", "decreasing"]


class Preprint(FrozenModel):
    doi: str
    title: str
    date: str
    authors: str = ""
    institution: str = ""


class BioRxivData(FrozenModel):
    preprints_90d: int = 0
    preprints_30d: int = 0
    preprints_prior_30d: int = 0
    velocity_trend: VelocityTrend = "stable"
    unique_groups: int = 0
    recent_preprints: List[Preprint] = Field(default_factory=list)

# ---------------------------- AlphaFold / PDB --------------------------------

class AlphaFoldData(FrozenModel):
    uniprot_id: str = ""
    pdb_count: int = 0
    avg_plddt: float = Field(0.0, alias="avgPLDDT")
    ligand_bound_count: int = 0
    # None means no experimental structures at all
    best_resolution: Optional[float] = None
    pdb_ids: List[str] = Field(default_factory=list)
    has_alphafold: bool = False
    # names of fields derived by heuristic rather than measured upstream
    estimated_fields: List[str] = Field(default_factory=list)

# --------------------------- AlphaGenome / Ensembl ---------------------------

RegulatoryComplexity = Literal["high", "moderate", "low"]


class AlphaGenomeData(FrozenModel):
    regulatory_feature_count: int = 0
    promoter_count: int = 0
    enhancer_count: int = 0
    ctcf_count: int = 0
    open_chromatin_count: int = 0
    constrained_element_count: int = 0
    gene_length: int = 0
    chromosome: str = ""
    biotype: str = "protein_coding"
    transcript_count: int = 1
    regulatory_complexity: RegulatoryComplexity = "low"
    expression_breadth: int = 0
    estimated_fields: List[str] = Field(default_factory=list)

# ============================================================================
# Scores
# ============================================================================

class ScoreComponent(FrozenModel):
    name: str
    value: float
    max_value: float
    description: str

    @model_validator(mode="after")
    def _in_range(self) -> "ScoreComponent":
        if not (0 <= self.value <= self.max_value):
            raise ValueError(f"{self.name}: value {self.value} outside [0, {self.max_value}]")
        return self


class DimensionScore(FrozenModel):
    dimension: DimensionName
    label: str
    score: int = Field(ge=0, le=100)
    components: List[ScoreComponent] = Field(default_factory=list)
    description: str

    @model_validator(mode="after")
    def _caps_fit(self) -> "DimensionScore":
        if sum(c.max_value for c in self.components) > 100:
            raise ValueError(f"{self.dimension}: component maxima exceed 100")
        return self


class OverallScore(FrozenModel):
    value: int = Field(ge=0, le=100)
    label: str
    dimensions: Dict[str, DimensionScore]
    weights: Dict[str, float]

# ============================================================================
# Profile
# ============================================================================

DevelopmentLevel = Literal["Tclin", "Tchem", "Tbio", "Tdark"]


class RawData(FrozenModel):
    open_targets: ServiceResult[OpenTargetsData]
    chembl: ServiceResult[ChEMBLData]
    pubmed: ServiceResult[PubMedData]
    clinical_trials: ServiceResult[ClinicalTrialsData]
    biorxiv: ServiceResult[BioRxivData]
    alphafold: ServiceResult[AlphaFoldData]
    alphagenome: ServiceResult[AlphaGenomeData]


class ProfileMetadata(FrozenModel):
    analysis_timestamp: int
    total_response_time_ms: int
    services_completed: int
    services_failed: int


class TargetProfile(FrozenModel):
    gene: str
    ensembl_id: str
    uniprot_id: str = ""
    approved_name: str
    development_level: DevelopmentLevel
    scores: OverallScore
    raw_data: RawData
    metadata: ProfileMetadata


class Candidate(FrozenModel):
    id: str
    name: str
    symbol: str


@dataclass(frozen=True)
class TargetQuery:
    """Identity handed to every adapter once the symbol has been resolved."""
    symbol: str
    ensembl_id: str
    approved_name: str = ""
