"""
Adapter tests against canned upstream payloads (see conftest.FakeUpstream).
"""

import datetime as dt

import httpx
import pytest

from conftest import (
    ALPHAFOLD_HOST,
    BIORXIV_HOST,
    CHEMBL_HOST,
    CT_HOST,
    ENSEMBL_HOST,
    EUTILS_HOST,
    OT_HOST,
    RCSB_HOST,
    UNIPROT_HOST,
)
from targetscope.adapters import ADAPTER_CLASSES, default_adapters
from targetscope.adapters.alphafold import AlphaFoldAdapter, estimate_best_resolution
from targetscope.adapters.alphagenome import AlphaGenomeAdapter, expression_breadth, regulatory_complexity
from targetscope.adapters.base import error_message, to_float, to_int
from targetscope.adapters.biorxiv import BioRxivAdapter, velocity_trend
from targetscope.adapters.chembl import ChEMBLAdapter
from targetscope.adapters.clinical_trials import ClinicalTrialsAdapter, highest_phase
from targetscope.adapters.open_targets import OpenTargetsAdapter
from targetscope.adapters.pubmed import PubMedAdapter
from targetscope.errors import UpstreamError
from targetscope.models import SOURCE_KEYS, TargetQuery

TARGET = TargetQuery(symbol="EGFR", ensembl_id="ENSG00000146648", approved_name="epidermal growth factor receptor")


def days_ago(n: int) -> str:
    return (dt.date.today() - dt.timedelta(days=n)).isoformat()


# ---------------------------------------------------------------------------
# helpers and derived classifications
# ---------------------------------------------------------------------------


class TestHelpers:
    def test_to_float(self):
        assert to_float("6.5") == 6.5
        assert to_float(3) == 3.0
        assert to_float(None) is None
        assert to_float(True) is None
        assert to_float("n/a") is None
        assert to_float(float("nan")) is None

    def test_to_int(self):
        assert to_int("4.0") == 4
        assert to_int(None) == 0
        assert to_int("x", 7) == 7

    def test_error_message_for_status(self):
        req = httpx.Request("GET", "https://example.org/x")
        exc = httpx.HTTPStatusError("boom", request=req, response=httpx.Response(503, request=req))
        assert error_message(exc) == "GET https://example.org/x -> 503"

    def test_error_message_falls_back_to_class(self):
        assert error_message(ValueError()) == "ValueError"
        assert error_message(ValueError("bad")) == "bad"

    def test_adapters_in_raw_data_order(self, client, cache):
        assert [cls.key for cls in ADAPTER_CLASSES] == SOURCE_KEYS
        assert [a.key for a in default_adapters(client, cache)] == SOURCE_KEYS


class TestDerivedClassifications:
    @pytest.mark.parametrize("last,prior,trend", [
        (10, 5, "increasing"),
        (3, 0, "increasing"),
        (0, 0, "stable"),
        (6, 5, "stable"),
        (2, 5, "decreasing"),
    ])
    def test_velocity_trend(self, last, prior, trend):
        assert velocity_trend(last, prior) == trend

    @pytest.mark.parametrize("args,label", [
        ((40, 0, 0, 0, 0), "high"),
        ((8, 1, 6, 0, 0), "high"),
        ((6, 1, 1, 1, 0), "high"),
        ((12, 0, 0, 0, 0), "moderate"),
        ((4, 0, 3, 0, 0), "moderate"),
        ((4, 1, 1, 0, 0), "moderate"),
        ((2, 1, 0, 0, 0), "low"),
        ((0, 0, 0, 0, 0), "low"),
    ])
    def test_regulatory_complexity(self, args, label):
        assert regulatory_complexity(*args) == label

    @pytest.mark.parametrize("transcripts,features,breadth", [
        (12, 25, 90), (8, 15, 70), (4, 0, 50), (1, 6, 50), (2, 0, 30), (1, 0, 15),
    ])
    def test_expression_breadth(self, transcripts, features, breadth):
        assert expression_breadth(transcripts, features) == breadth

    @pytest.mark.parametrize("total,res", [(25, 1.8), (11, 1.8), (10, 2.2), (6, 2.2), (5, 2.8), (1, 2.8), (0, None)])
    def test_estimate_best_resolution(self, total, res):
        assert estimate_best_resolution(total) == res

    @pytest.mark.parametrize("phases,expected", [
        (["PHASE1", "PHASE2"], "PHASE2"),
        (["EARLY_PHASE1"], "EARLY_PHASE1"),
        (["PHASE3"], "PHASE3"),
        ([], "N/A"),
        (None, "N/A"),
    ])
    def test_highest_phase(self, phases, expected):
        assert highest_phase(phases) == expected


# ---------------------------------------------------------------------------
# Open Targets
# ---------------------------------------------------------------------------

OT_SEARCH = {
    "data": {
        "search": {
            "total": 2,
            "hits": [
                {"id": "EFO_0000311", "entity": "disease", "name": "cancer", "description": "a disease"},
                {"id": "ENSG00000146648", "entity": "target", "name": "EGFR",
                 "description": "epidermal growth factor receptor"},
            ],
        }
    }
}

OT_TARGET = {
    "data": {
        "target": {
            "approvedSymbol": "EGFR",
            "approvedName": "epidermal growth factor receptor",
            "biotype": "protein_coding",
            "tractability": [
                {"label": "Approved Drug", "modality": "SM", "value": True},
                {"label": "Clinical Precedence", "modality": "AB", "value": False},
            ],
            "associatedDiseases": {
                "count": 60,
                "rows": [
                    {"disease": {"id": "EFO_0001071", "name": "lung carcinoma"}, "score": 0.93,
                     "datasourceScores": [{"id": "chembl", "score": 0.9}, {"id": "europepmc", "score": 0.4},
                                          {"id": "impc", "score": 0}]},
                    {"disease": {"id": "EFO_0000228", "name": "glioblastoma"}, "score": "0.87",
                     "datasourceScores": []},
                ],
            },
        }
    }
}


class TestOpenTargets:
    @pytest.mark.asyncio
    async def test_resolve_picks_first_target_hit(self, fake, client, cache):
        fake.add(OT_HOST, "/api/v4/graphql", OT_SEARCH, method="POST", body_contains="SearchTarget")
        adapter = OpenTargetsAdapter(client, cache)
        resolved = await adapter.resolve("EGFR")
        assert resolved == {"id": "ENSG00000146648", "name": "EGFR"}
        # cached on second call
        await adapter.resolve("EGFR")
        assert fake.count(OT_HOST) == 1

    @pytest.mark.asyncio
    async def test_resolve_no_target(self, fake, client, cache):
        fake.add(OT_HOST, "/api/v4/graphql", {"data": {"search": {"hits": [], "total": 0}}}, method="POST")
        assert await OpenTargetsAdapter(client, cache).resolve("ZZZZ9") is None

    @pytest.mark.asyncio
    async def test_graphql_errors_raise(self, fake, client, cache):
        fake.add(OT_HOST, "/api/v4/graphql", {"errors": [{"message": "bad query"}]}, method="POST")
        with pytest.raises(UpstreamError, match="bad query"):
            await OpenTargetsAdapter(client, cache).resolve("EGFR")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [[1, 2], "maintenance"])
    async def test_non_object_body_raises(self, fake, client, cache, body):
        fake.add(OT_HOST, "/api/v4/graphql", body, method="POST")
        with pytest.raises(UpstreamError, match="unexpected"):
            await OpenTargetsAdapter(client, cache).resolve("EGFR")

    @pytest.mark.asyncio
    async def test_non_object_body_is_failed_envelope(self, fake, client, cache):
        fake.add(OT_HOST, "/api/v4/graphql", [{"data": {}}], method="POST")
        res = await OpenTargetsAdapter(client, cache).fetch(TARGET)
        assert not res.success
        assert res.data is None
        assert res.error == "Open Targets returned an unexpected list body"

    @pytest.mark.asyncio
    async def test_search_candidates(self, fake, client, cache):
        fake.add(OT_HOST, "/api/v4/graphql", OT_SEARCH, method="POST")
        out = await OpenTargetsAdapter(client, cache).search("EGF")
        assert len(out) == 1
        assert out[0].id == "ENSG00000146648"
        assert out[0].symbol == "EGFR"
        assert out[0].name == "epidermal growth factor receptor"

    @pytest.mark.asyncio
    async def test_fetch_normalizes_target(self, fake, client, cache):
        fake.add(OT_HOST, "/api/v4/graphql", OT_TARGET, method="POST", body_contains="TargetInfo")
        res = await OpenTargetsAdapter(client, cache).fetch(TARGET)
        assert res.success and res.source == "Open Targets"
        data = res.data
        assert data.disease_association_count == 60
        assert data.approved_name == "epidermal growth factor receptor"
        assert [a.datasource_diversity for a in data.top_disease_associations] == [2, 0]
        assert data.top_disease_associations[1].score == pytest.approx(0.87)
        assert [(t.modality, t.value) for t in data.tractability] == [("SM", True), ("AB", False)]

    @pytest.mark.asyncio
    async def test_missing_target_is_failure(self, fake, client, cache):
        fake.add(OT_HOST, "/api/v4/graphql", {"data": {"target": None}}, method="POST")
        res = await OpenTargetsAdapter(client, cache).fetch(TARGET)
        assert not res.success
        assert res.data is None
        assert res.error == "Target not found in Open Targets"

    @pytest.mark.asyncio
    async def test_cache_hit(self, fake, client, cache):
        fake.add(OT_HOST, "/api/v4/graphql", OT_TARGET, method="POST")
        adapter = OpenTargetsAdapter(client, cache)
        first = await adapter.fetch(TARGET)
        second = await adapter.fetch(TARGET)
        assert not first.cached
        assert second.cached
        assert second.data == first.data
        assert fake.count(OT_HOST) == 1


# ---------------------------------------------------------------------------
# ChEMBL
# ---------------------------------------------------------------------------

CHEMBL = "/chembl/api/data"


def chembl_routes(fake, mechanisms=None):
    fake.add(CHEMBL_HOST, f"{CHEMBL}/target/search.json", {"targets": [
        {"target_chembl_id": "CHEMBL2111", "organism": "Mus musculus", "target_type": "SINGLE PROTEIN"},
        {"target_chembl_id": "CHEMBL203", "organism": "Homo sapiens", "target_type": "SINGLE PROTEIN"},
    ]})
    fake.add(CHEMBL_HOST, f"{CHEMBL}/mechanism.json", mechanisms if mechanisms is not None else {"mechanisms": [
        {"molecule_chembl_id": "CHEMBL553", "mechanism_of_action": "EGFR inhibitor", "max_phase": 4,
         "action_type": "INHIBITOR"},
        {"molecule_chembl_id": "CHEMBL1421", "mechanism_of_action": "Tyrosine kinase inhibitor",
         "max_phase": "3.0", "action_type": "INHIBITOR"},
        {"molecule_chembl_id": "CHEMBL553", "mechanism_of_action": "EGFR inhibitor", "max_phase": 4,
         "action_type": None},
    ]})
    fake.add(CHEMBL_HOST, f"{CHEMBL}/activity.json", {"page_meta": {"total_count": 600}},
             params={"pchembl_value__gte": "6", "limit": "1"})
    fake.add(CHEMBL_HOST, f"{CHEMBL}/activity.json", {"page_meta": {"total_count": 25}},
             params={"pchembl_value__gte": "7", "limit": "1"})
    fake.add(CHEMBL_HOST, f"{CHEMBL}/activity.json", {"activities": [
        {"molecule_chembl_id": "CHEMBL999", "pchembl_value": "8.2", "standard_type": "IC50", "standard_value": "6.3"},
        {"molecule_chembl_id": "CHEMBL999", "pchembl_value": "7.4", "standard_type": "Ki"},
        {"molecule_chembl_id": "CHEMBL553", "pchembl_value": "9.1", "standard_type": "IC50"},
        {"molecule_chembl_id": "CHEMBL777", "pchembl_value": None},
    ]}, params={"pchembl_value__gte": "7", "limit": "20"})
    fake.add(CHEMBL_HOST, f"{CHEMBL}/molecule/CHEMBL553.json", {
        "molecule_chembl_id": "CHEMBL553", "pref_name": "ERLOTINIB", "molecule_type": "Small molecule",
        "max_phase": "4.0",
        "molecule_structures": {"canonical_smiles": "COCCOc1cc2ncnc(Nc3cccc(C#C)c3)c2cc1OCCOC"},
        "molecule_properties": {"full_mwt": "393.44", "alogp": "3.41", "psa": "74.73", "hba": 7, "hbd": 1,
                                "num_ro5_violations": 0, "aromatic_rings": 3, "rtb": 10},
    })
    fake.add(CHEMBL_HOST, f"{CHEMBL}/molecule/CHEMBL999.json", {
        "molecule_chembl_id": "CHEMBL999", "pref_name": None, "max_phase": None,
        "molecule_structures": None, "molecule_properties": None,
    })


class TestChEMBL:
    @pytest.mark.asyncio
    async def test_fetch(self, fake, client, cache):
        chembl_routes(fake)
        res = await ChEMBLAdapter(client, cache).fetch(TARGET)
        assert res.success
        data = res.data
        assert data.target_chembl_id == "CHEMBL203"
        assert data.compound_count == 2
        assert data.max_clinical_phase == 4
        assert data.bioactivity_count == 600
        assert data.potent_compound_count == 25
        assert len(data.mechanisms) == 3
        assert data.mechanisms[2].action_type == "Unknown"
        assert [a.molecule_chembl_id for a in data.top_activities] == ["CHEMBL999", "CHEMBL999", "CHEMBL553"]

    @pytest.mark.asyncio
    async def test_compound_details(self, fake, client, cache):
        chembl_routes(fake)
        res = await ChEMBLAdapter(client, cache).fetch(TARGET)
        compounds = res.data.top_compounds
        # CHEMBL1421 has no molecule route and is skipped
        assert [c.chembl_id for c in compounds] == ["CHEMBL553", "CHEMBL999"]
        erlotinib, other = compounds
        assert erlotinib.preferred_name == "ERLOTINIB"
        assert erlotinib.pchembl_value == pytest.approx(9.1)
        assert erlotinib.rotatable_bonds == 10
        assert erlotinib.structure_image_url == "https://www.ebi.ac.uk/chembl/api/data/image/CHEMBL553.svg"
        assert erlotinib.drug_likeness is not None
        assert erlotinib.drug_likeness.lipinski_pass
        assert other.pchembl_value == pytest.approx(8.2)
        assert other.activity_type == "IC50"
        assert other.structure_image_url == ""
        assert any("CHEMBL1421" in d for d in res.diagnostics)

    @pytest.mark.asyncio
    async def test_no_chembl_target(self, fake, client, cache):
        fake.add(CHEMBL_HOST, f"{CHEMBL}/target/search.json", {"targets": []})
        res = await ChEMBLAdapter(client, cache).fetch(TARGET)
        assert res.success
        assert res.data.compound_count == 0
        assert res.data.target_chembl_id == ""

    @pytest.mark.asyncio
    async def test_mechanism_failure_fails_source(self, fake, client, cache):
        chembl_routes(fake, mechanisms=500)
        res = await ChEMBLAdapter(client, cache).fetch(TARGET)
        assert not res.success
        assert "500" in res.error

    @pytest.mark.asyncio
    async def test_activity_failure_degrades(self, fake, client, cache):
        fake.add(CHEMBL_HOST, f"{CHEMBL}/activity.json", 500)
        chembl_routes(fake)
        res = await ChEMBLAdapter(client, cache).fetch(TARGET)
        assert res.success
        assert res.data.bioactivity_count == 0
        assert res.data.potent_compound_count == 0
        assert res.data.top_activities == []
        assert any("pChEMBL >= 6" in d for d in res.diagnostics)


# ---------------------------------------------------------------------------
# PubMed
# ---------------------------------------------------------------------------

ESEARCH = "/entrez/eutils/esearch.fcgi"


def esearch(count):
    return {"esearchresult": {"count": str(count), "idlist": []}}


def pubmed_routes(fake, reviews=None):
    fake.add(EUTILS_HOST, ESEARCH, esearch(600), params={"term": "EGFR", "datetype": "pdat"})
    fake.add(EUTILS_HOST, ESEARCH, esearch(1200),
             params={"term": "EGFR AND (drug OR therapeutic OR inhibitor OR treatment)"})
    fake.add(EUTILS_HOST, ESEARCH, reviews if reviews is not None else esearch(120),
             params={"term": "EGFR AND review[pt]"})
    fake.add(EUTILS_HOST, ESEARCH, esearch(6000), params={"term": "EGFR"})


class TestPubMed:
    @pytest.mark.asyncio
    async def test_fetch(self, fake, client, cache):
        pubmed_routes(fake)
        res = await PubMedAdapter(client, cache, api_key="").fetch(TARGET)
        assert res.success
        assert res.data.total_publications == 6000
        assert res.data.recent_publications == 600
        assert res.data.drug_focused_publications == 1200
        assert res.data.review_articles == 120
        assert fake.count(EUTILS_HOST) == 4

    @pytest.mark.asyncio
    async def test_api_key_forwarded(self, fake, client, cache):
        pubmed_routes(fake)
        await PubMedAdapter(client, cache, api_key="k123").fetch(TARGET)
        assert all(r.url.params.get("api_key") == "k123" for r in fake.calls)

    @pytest.mark.asyncio
    async def test_recent_window_params(self, fake, client, cache):
        pubmed_routes(fake)
        await PubMedAdapter(client, cache, api_key="").fetch(TARGET)
        recent = [r for r in fake.calls if r.url.params.get("datetype") == "pdat"]
        assert len(recent) == 1
        assert recent[0].url.params["maxdate"] == dt.date.today().strftime("%Y/%m/%d")

    @pytest.mark.asyncio
    async def test_secondary_failure_degrades(self, fake, client, cache):
        pubmed_routes(fake, reviews=500)
        res = await PubMedAdapter(client, cache, api_key="").fetch(TARGET)
        assert res.success
        assert res.data.review_articles == 0
        assert res.data.total_publications == 6000
        assert any(d.startswith("PubMed review count unavailable") for d in res.diagnostics)

    @pytest.mark.asyncio
    async def test_total_failure_fails(self, fake, client, cache):
        fake.add(EUTILS_HOST, ESEARCH, 503)
        res = await PubMedAdapter(client, cache, api_key="").fetch(TARGET)
        assert not res.success
        assert "503" in res.error


# ---------------------------------------------------------------------------
# ClinicalTrials.gov
# ---------------------------------------------------------------------------


def study(nct, phases, status, sponsor, start):
    return {"protocolSection": {
        "identificationModule": {"nctId": nct, "briefTitle": f"Study {nct}", "organization": {"fullName": sponsor}},
        "designModule": {"phases": phases, "enrollmentInfo": {"count": 100}},
        "statusModule": {"overallStatus": status, "startDateStruct": {"date": start}},
        "conditionsModule": {"conditions": ["NSCLC"]},
        "armsInterventionsModule": {"interventions": [{"type": "DRUG", "name": "Osimertinib"}, {"type": "OTHER"}]},
    }}


def trials_routes(fake, recruiting=None):
    recent = dt.date.today().isoformat()[:7]
    fake.add(CT_HOST, "/api/v2/studies", recruiting if recruiting is not None else {"totalCount": 3, "studies": []},
             params={"filter.overallStatus": "RECRUITING"})
    fake.add(CT_HOST, "/api/v2/studies", {"totalCount": 42, "studies": [
        study("NCT1", ["PHASE1", "PHASE2"], "RECRUITING", "Pfizer", recent),
        study("NCT2", ["PHASE3"], "COMPLETED", "NCI", "2001-05"),
        study("NCT3", [], "COMPLETED", "Pfizer", "2005-01-10"),
    ]})


class TestClinicalTrials:
    @pytest.mark.asyncio
    async def test_fetch(self, fake, client, cache):
        trials_routes(fake)
        res = await ClinicalTrialsAdapter(client, cache).fetch(TARGET)
        assert res.success
        data = res.data
        assert data.total_trials == 42
        assert data.active_trials == 3
        assert data.trials_by_phase == {"PHASE2": 1, "PHASE3": 1, "N/A": 1}
        assert data.trials_by_status == {"RECRUITING": 1, "COMPLETED": 2}
        assert data.sponsors == ["Pfizer", "NCI"]
        assert data.sponsor_trial_counts[0].count == 2
        assert data.recent_trials == 1
        assert data.studies[0].interventions == ["Osimertinib", "OTHER"]
        assert data.studies[0].enrollment == 100

    @pytest.mark.asyncio
    async def test_recruiting_failure_degrades(self, fake, client, cache):
        trials_routes(fake, recruiting=500)
        res = await ClinicalTrialsAdapter(client, cache).fetch(TARGET)
        assert res.success
        assert res.data.active_trials == 0
        assert any("recruiting" in d for d in res.diagnostics)

    @pytest.mark.asyncio
    async def test_main_query_failure(self, fake, client, cache):
        fake.add(CT_HOST, "/api/v2/studies", httpx.ConnectError)
        res = await ClinicalTrialsAdapter(client, cache).fetch(TARGET)
        assert not res.success
        assert res.source == "ClinicalTrials.gov"


# ---------------------------------------------------------------------------
# bioRxiv
# ---------------------------------------------------------------------------


def biorxiv_collection():
    return [
        {"doi": "10.1101/1", "title": "EGFR signalling in tumours", "date": days_ago(2),
         "author_corresponding_institution": "MIT"},
        {"doi": "10.1101/2", "title": "Kinase screens", "abstract": "we profile egfr mutants", "date": days_ago(10),
         "author_corresponding_institution": "Broad"},
        {"doi": "10.1101/3", "title": "EGFR resistance", "date": days_ago(20),
         "author_corresponding_institution": "MIT"},
        {"doi": "10.1101/4", "title": "EGFR in glioma", "date": days_ago(45),
         "author_corresponding_institution": ""},
        {"doi": "10.1101/5", "title": "Older EGFR work", "date": days_ago(80)},
        {"doi": "10.1101/6", "title": "EGFRvIII variants", "date": days_ago(3),
         "author_corresponding_institution": "Oxford"},
        {"doi": "10.1101/7", "title": "Unrelated", "date": days_ago(1)},
    ]


class TestBioRxiv:
    @pytest.mark.asyncio
    async def test_fetch(self, fake, client, cache):
        def page(request):
            if request.url.path.endswith("/0"):
                return {"collection": biorxiv_collection()}
            return {"collection": []}

        fake.add(BIORXIV_HOST, "/details/biorxiv/", page)
        res = await BioRxivAdapter(client, cache).fetch(TARGET)
        assert res.success
        data = res.data
        assert data.preprints_90d == 5
        assert data.preprints_30d == 3
        assert data.preprints_prior_30d == 1
        assert data.velocity_trend == "increasing"
        assert data.unique_groups == 2
        assert [p.doi for p in data.recent_preprints] == ["10.1101/1", "10.1101/2", "10.1101/3", "10.1101/4", "10.1101/5"]
        assert fake.count(BIORXIV_HOST) == 5

    @pytest.mark.asyncio
    async def test_all_pages_fail(self, fake, client, cache):
        fake.add(BIORXIV_HOST, "/details/biorxiv/", httpx.ConnectError)
        res = await BioRxivAdapter(client, cache).fetch(TARGET)
        assert res.success
        assert res.data.preprints_90d == 0
        assert res.data.velocity_trend == "stable"
        assert len(res.diagnostics) == 5


# ---------------------------------------------------------------------------
# AlphaFold / PDB
# ---------------------------------------------------------------------------


def alphafold_routes(fake, ligand=None, uniprot=None, fulltext=None):
    fake.add(UNIPROT_HOST, "/uniprotkb/search",
             uniprot if uniprot is not None else {"results": [{"primaryAccession": "P00533"}]})
    fake.add(RCSB_HOST, "/rcsbsearch/v2/query",
             ligand if ligand is not None else {"total_count": 2, "result_set": [{"identifier": "1M17"},
                                                                                {"identifier": "4HJO"}]},
             method="POST", body_contains="nonpolymer_entity_count")
    fake.add(RCSB_HOST, "/rcsbsearch/v2/query",
             fulltext if fulltext is not None else {"total_count": 12, "result_set": [{"identifier": "4HJO"},
                                                                                     {"identifier": "5UG9"}]},
             method="POST")
    fake.add(ALPHAFOLD_HOST, "/api/prediction/P00533", [{"globalMetricValue": 75.9, "uniprotAccession": "P00533"}])


class TestAlphaFold:
    @pytest.mark.asyncio
    async def test_fetch(self, fake, client, cache):
        alphafold_routes(fake)
        res = await AlphaFoldAdapter(client, cache).fetch(TARGET)
        assert res.success
        data = res.data
        assert data.uniprot_id == "P00533"
        assert data.pdb_ids == ["1M17", "4HJO", "5UG9"]
        assert data.pdb_count == 12
        assert data.ligand_bound_count == 2
        assert data.best_resolution == 1.8
        assert data.avg_plddt == pytest.approx(75.9)
        assert data.has_alphafold
        assert data.estimated_fields == ["best_resolution"]
        assert data.model_dump(by_alias=True)["avgPLDDT"] == pytest.approx(75.9)

    @pytest.mark.asyncio
    async def test_ligand_count_estimated_without_hits(self, fake, client, cache):
        alphafold_routes(fake, ligand=204)
        res = await AlphaFoldAdapter(client, cache).fetch(TARGET)
        assert res.success
        assert res.data.pdb_ids == ["4HJO", "5UG9"]
        assert res.data.ligand_bound_count == 4
        assert "ligand_bound_count" in res.data.estimated_fields

    @pytest.mark.asyncio
    async def test_no_structures(self, fake, client, cache):
        alphafold_routes(fake, ligand=204, fulltext=204)
        res = await AlphaFoldAdapter(client, cache).fetch(TARGET)
        assert res.success
        assert res.data.pdb_count == 0
        assert res.data.best_resolution is None
        assert res.data.ligand_bound_count == 0

    @pytest.mark.asyncio
    async def test_uniprot_failure_degrades(self, fake, client, cache):
        alphafold_routes(fake, uniprot=500)
        res = await AlphaFoldAdapter(client, cache).fetch(TARGET)
        assert res.success
        assert res.data.uniprot_id == ""
        assert res.data.pdb_ids == ["4HJO", "5UG9"]
        assert not res.data.has_alphafold
        assert any("UniProt" in d for d in res.diagnostics)

    @pytest.mark.asyncio
    async def test_both_lookups_fail(self, fake, client, cache):
        alphafold_routes(fake, uniprot=500, fulltext=500)
        res = await AlphaFoldAdapter(client, cache).fetch(TARGET)
        assert not res.success
        assert res.error.startswith("Structure lookup failed")


# ---------------------------------------------------------------------------
# AlphaGenome (Ensembl)
# ---------------------------------------------------------------------------

LOOKUP = {
    "id": "ENSG00000146648", "seq_region_name": "7", "start": 55019017, "end": 55211628,
    "biotype": "protein_coding", "Transcript": [{"id": f"ENST{i}"} for i in range(8)],
}

REGULATORY = [
    {"feature_type": "regulatory", "description": "Promoter"},
    {"feature_type": "regulatory", "description": "Promoter Flanking Region"},
    {"feature_type": "regulatory", "description": "Enhancer"},
    {"feature_type": "regulatory", "description": "Enhancer"},
    {"feature_type": "regulatory", "description": "Enhancer"},
    {"feature_type": "regulatory", "description": "CTCF Binding Site"},
    {"feature_type": "regulatory", "description": "Open chromatin"},
]


def ensembl_routes(fake, lookup=None, constrained=None):
    fake.add(ENSEMBL_HOST, "/lookup/id/ENSG00000146648", lookup if lookup is not None else LOOKUP)
    fake.add(ENSEMBL_HOST, "/overlap/region/homo_sapiens/7:", REGULATORY, params={"feature": "regulatory"})
    fake.add(ENSEMBL_HOST, "/overlap/region/homo_sapiens/7:",
             constrained if constrained is not None else [{"id": "c1"}, {"id": "c2"}, {"id": "c3"}],
             params={"feature": "constrained"})


class TestAlphaGenome:
    @pytest.mark.asyncio
    async def test_fetch(self, fake, client, cache):
        ensembl_routes(fake)
        res = await AlphaGenomeAdapter(client, cache).fetch(TARGET)
        assert res.success
        data = res.data
        assert data.chromosome == "7"
        assert data.gene_length == 192611
        assert data.regulatory_feature_count == 7
        assert data.promoter_count == 2
        assert data.enhancer_count == 3
        assert data.ctcf_count == 1
        assert data.open_chromatin_count == 1
        assert data.constrained_element_count == 3
        assert data.transcript_count == 8
        assert data.regulatory_complexity == "high"
        assert data.expression_breadth == 50
        assert data.estimated_fields == ["expression_breadth"]

    @pytest.mark.asyncio
    async def test_flanked_regions(self, fake, client, cache):
        ensembl_routes(fake)
        await AlphaGenomeAdapter(client, cache).fetch(TARGET)
        paths = sorted(r.url.path for r in fake.calls if "/overlap/" in r.url.path)
        assert paths == [
            "/overlap/region/homo_sapiens/7:54969017-55261628",
            "/overlap/region/homo_sapiens/7:55009017-55221628",
        ]

    @pytest.mark.asyncio
    async def test_empty_transcript_list_counts_zero(self, fake, client, cache):
        ensembl_routes(fake, lookup=dict(LOOKUP, Transcript=[]))
        res = await AlphaGenomeAdapter(client, cache).fetch(TARGET)
        assert res.success
        assert res.data.transcript_count == 0

    @pytest.mark.asyncio
    async def test_missing_transcript_list_counts_one(self, fake, client, cache):
        lookup = {k: v for k, v in LOOKUP.items() if k != "Transcript"}
        ensembl_routes(fake, lookup=lookup)
        res = await AlphaGenomeAdapter(client, cache).fetch(TARGET)
        assert res.success
        assert res.data.transcript_count == 1

    @pytest.mark.asyncio
    async def test_lookup_failure(self, fake, client, cache):
        ensembl_routes(fake, lookup=400)
        res = await AlphaGenomeAdapter(client, cache).fetch(TARGET)
        assert not res.success
        assert res.error.startswith("Could not resolve gene coordinates")

    @pytest.mark.asyncio
    async def test_constrained_failure_degrades(self, fake, client, cache):
        ensembl_routes(fake, constrained=503)
        res = await AlphaGenomeAdapter(client, cache).fetch(TARGET)
        assert res.success
        assert res.data.constrained_element_count == 0
        assert any("constrained" in d for d in res.diagnostics)
