# targetscope/adapters/schemas.py
"""Expected shapes of upstream payloads.

Used only for soft validation: a mismatch produces diagnostics, the raw
payload is still normalized. Unknown keys are ignored.
"""
from __future__ import annotations

from typing import List, Optional, Union

from pydantic import BaseModel

Numeric = Union[float, str]

# ---------------------------- Open Targets -----------------------------------

class OTSearchHit(BaseModel):
    id: str
    entity: str
    name: Optional[str] = None
    description: Optional[str] = None


class OTSearch(BaseModel):
    hits: List[OTSearchHit]
    total: Optional[int] = None


class OTSearchData(BaseModel):
    search: OTSearch


class OTSearchResponse(BaseModel):
    data: OTSearchData


class OTTractability(BaseModel):
    label: str
    modality: str
    value: bool


class OTDatasourceScore(BaseModel):
    id: str
    score: float


class OTDisease(BaseModel):
    id: str
    name: str


class OTDiseaseRow(BaseModel):
    disease: OTDisease
    score: float
    datasourceScores: List[OTDatasourceScore]


class OTAssociatedDiseases(BaseModel):
    count: int
    rows: List[OTDiseaseRow]


class OTTarget(BaseModel):
    approvedSymbol: str
    approvedName: str
    biotype: Optional[str] = None
    tractability: Optional[List[OTTractability]] = None
    associatedDiseases: Optional[OTAssociatedDiseases] = None


class OTTargetData(BaseModel):
    target: OTTarget


class OTTargetResponse(BaseModel):
    data: OTTargetData

# ------------------------------- ChEMBL --------------------------------------

class ChEMBLPageMeta(BaseModel):
    total_count: int


class ChEMBLTarget(BaseModel):
    target_chembl_id: str
    pref_name: Optional[str] = None
    target_type: Optional[str] = None
    organism: Optional[str] = None


class ChEMBLTargetSearch(BaseModel):
    targets: List[ChEMBLTarget]
    page_meta: ChEMBLPageMeta


class ChEMBLMechanism(BaseModel):
    mechanism_of_action: Optional[str] = None
    molecule_chembl_id: str
    max_phase: Optional[Numeric] = None
    action_type: Optional[str] = None


class ChEMBLMechanismSearch(BaseModel):
    mechanisms: List[ChEMBLMechanism]
    page_meta: ChEMBLPageMeta


class ChEMBLActivity(BaseModel):
    molecule_chembl_id: str
    pchembl_value: Optional[Numeric] = None
    standard_type: Optional[str] = None
    standard_value: Optional[Numeric] = None


class ChEMBLActivitySearch(BaseModel):
    activities: List[ChEMBLActivity]
    page_meta: ChEMBLPageMeta


class ChEMBLMoleculeProperties(BaseModel):
    full_mwt: Optional[Numeric] = None
    alogp: Optional[Numeric] = None
    psa: Optional[Numeric] = None
    hba: Optional[int] = None
    hbd: Optional[int] = None
    num_ro5_violations: Optional[int] = None
    aromatic_rings: Optional[int] = None
    rtb: Optional[int] = None


class ChEMBLMoleculeStructures(BaseModel):
    canonical_smiles: Optional[str] = None


class ChEMBLMolecule(BaseModel):
    molecule_chembl_id: str
    pref_name: Optional[str] = None
    molecule_type: Optional[str] = None
    max_phase: Optional[Numeric] = None
    molecule_structures: Optional[ChEMBLMoleculeStructures] = None
    molecule_properties: Optional[ChEMBLMoleculeProperties] = None

# ------------------------------- PubMed --------------------------------------

class ESearchResult(BaseModel):
    count: str
    idlist: Optional[List[str]] = None


class PubMedSearch(BaseModel):
    esearchresult: ESearchResult

# ------------------------- ClinicalTrials.gov --------------------------------

class CTOrganization(BaseModel):
    fullName: str


class CTIdentification(BaseModel):
    nctId: str
    briefTitle: str
    organization: Optional[CTOrganization] = None


class CTEnrollment(BaseModel):
    count: Optional[int] = None


class CTDesign(BaseModel):
    phases: Optional[List[str]] = None
    enrollmentInfo: Optional[CTEnrollment] = None


class CTDateStruct(BaseModel):
    date: Optional[str] = None


class CTStatus(BaseModel):
    overallStatus: str
    startDateStruct: Optional[CTDateStruct] = None


class CTProtocol(BaseModel):
    identificationModule: Optional[CTIdentification] = None
    designModule: Optional[CTDesign] = None
    statusModule: Optional[CTStatus] = None


class CTStudy(BaseModel):
    protocolSection: CTProtocol


class CTStudiesResponse(BaseModel):
    totalCount: int
    studies: List[CTStudy]

# ------------------------------- bioRxiv -------------------------------------

class BioRxivPreprint(BaseModel):
    doi: str
    title: str
    date: str
    authors: Optional[str] = None
    abstract: Optional[str] = None
    author_corresponding_institution: Optional[str] = None


class BioRxivPage(BaseModel):
    collection: List[BioRxivPreprint]

# ---------------------------- AlphaFold / PDB --------------------------------

class AlphaFoldPrediction(BaseModel):
    entryId: str
    globalMetricValue: Optional[float] = None
    confidenceAvgLocalScore: Optional[float] = None


class RCSBHit(BaseModel):
    identifier: str
    score: Optional[float] = None


class RCSBSearchResponse(BaseModel):
    result_set: List[RCSBHit] = []
    total_count: Optional[int] = None

# --------------------------------- Ensembl -----------------------------------

class EnsemblTranscript(BaseModel):
    id: str


class EnsemblLookup(BaseModel):
    id: str
    seq_region_name: str
    start: int
    end: int
    biotype: Optional[str] = None
    Transcript: Optional[List[EnsemblTranscript]] = None
