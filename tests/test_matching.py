"""Tests for single-compound and batch KEGG matching."""

from __future__ import annotations

from pathlib import Path
import sys
from typing import Dict, List

import pandas as pd
import pytest
import requests

sys.path.append(str(Path(__file__).resolve().parents[1]))

from keggmatch.kegg import KeggRecord
from keggmatch.matching import match_batch, match_compound, summarize_status
from keggmatch.models import MatchResult, MatchStatus


class FakeClient:
    """In-memory stand-in for :class:`keggmatch.kegg.KeggClient`."""

    def __init__(self, formulas: Dict[str, List[str]], names: Dict[str, str]) -> None:
        self.formulas = formulas
        self.names = names
        self.calls: List[str] = []

    def find_by_formula(self, formula: str) -> List[str]:
        self.calls.append(formula)
        return list(self.formulas.get(formula, []))

    def fetch_record(self, reference: str) -> KeggRecord:
        return KeggRecord(entry_id=reference, names=[self.names[reference], "synonym"])


@pytest.fixture
def client() -> FakeClient:
    return FakeClient(
        formulas={
            "C6H12O6": ["cpd:C00095", "cpd:C00031", "cpd:C00159"],
            "C8H10N4O2": ["cpd:C07481"],
        },
        names={
            "cpd:C00095": "D-Fructose",
            "cpd:C00031": "D-Glucose",
            "cpd:C00159": "D-Mannose",
            "cpd:C07481": "Caffeine",
        },
    )


# ---------------------------------------------------------------------------
# match_compound
# ---------------------------------------------------------------------------

def test_match_compound_auto_accepted(client: FakeClient) -> None:
    res = match_compound("D-Glucose", "C6H12O6", client=client)
    assert res.status is MatchStatus.AUTO_ACCEPTED
    assert res.kegg_id == "cpd:C00031"
    assert res.kegg_name == "D-Glucose"
    assert res.similarity == 1.0
    assert res.message is None


def test_match_compound_needs_verification(client: FakeClient) -> None:
    res = match_compound("Sugar", "C6H12O6", similarity_threshold=0.9, client=client)
    assert res.status is MatchStatus.NEEDS_VERIFICATION
    assert res.kegg_id is not None
    assert res.similarity is not None and res.similarity < 0.9


def test_match_compound_threshold_is_inclusive(client: FakeClient) -> None:
    # "glucose" vs "d-glucose": two insertions over nine characters.
    expected = 1 - 2 / 9
    res = match_compound("Glucose", "C6H12O6", similarity_threshold=expected, client=client)
    assert res.similarity == pytest.approx(expected)
    assert res.status is MatchStatus.AUTO_ACCEPTED

    res = match_compound("Glucose", "C6H12O6", similarity_threshold=expected + 1e-9, client=client)
    assert res.status is MatchStatus.NEEDS_VERIFICATION


def test_match_compound_no_match(client: FakeClient) -> None:
    res = match_compound("Unknown", "Xyz123", client=client)
    assert res == MatchResult(MatchStatus.NO_MATCH)
    assert res.kegg_id is None
    assert res.kegg_name is None
    assert res.similarity is None


def test_match_compound_first_maximum_wins() -> None:
    client = FakeClient(
        formulas={"C5H5N5": ["cpd:A", "cpd:B"]},
        names={"cpd:A": "Adenine", "cpd:B": "adenine"},
    )
    res = match_compound("ADENINE", "C5H5N5", client=client)
    assert res.kegg_id == "cpd:A"
    assert res.kegg_name == "Adenine"


def test_match_compound_uses_first_name(client: FakeClient) -> None:
    res = match_compound("synonym", "C8H10N4O2", client=client)
    assert res.kegg_name == "Caffeine"
    assert res.status is MatchStatus.NEEDS_VERIFICATION


def test_match_compound_network_error() -> None:
    class BrokenClient:
        def find_by_formula(self, formula: str) -> List[str]:
            raise requests.ConnectionError("boom")

    res = match_compound("Caffeine", "C8H10N4O2", client=BrokenClient())
    assert res.status is MatchStatus.ERROR
    assert res.message == "boom"
    assert res.status_label == "Error: boom"
    assert res.kegg_id is None and res.similarity is None


def test_match_compound_malformed_record(client: FakeClient) -> None:
    def broken_fetch(reference: str) -> KeggRecord:
        raise ValueError(f"KEGG entry {reference} has no NAME field")

    client.fetch_record = broken_fetch  # type: ignore[method-assign]
    res = match_compound("Caffeine", "C8H10N4O2", client=client)
    assert res.status is MatchStatus.ERROR
    assert "no NAME" in res.status_label


def test_match_compound_empty_formula(client: FakeClient) -> None:
    res = match_compound("Caffeine", "", client=client)
    assert res.status is MatchStatus.ERROR
    assert client.calls == []


# ---------------------------------------------------------------------------
# match_batch
# ---------------------------------------------------------------------------

def test_match_batch_appends_columns(client: FakeClient) -> None:
    df = pd.DataFrame(
        {
            "Standardized_Name": ["Caffeine", "D-Glucose", "Unknown"],
            "Formula": ["C8H10N4O2", "C6H12O6", "Xyz123"],
            "Sample": ["s1", "s2", "s3"],
        },
        index=[10, 5, 7],
    )
    out = match_batch(df, delay=0, client=client)

    assert len(out) == 3
    assert list(out.index) == [10, 5, 7]
    assert list(out.columns) == list(df.columns) + ["KEGG_ID", "KEGG_Name", "Similarity", "Status"]
    pd.testing.assert_frame_equal(out[df.columns], df)
    assert out["KEGG_ID"].tolist()[:2] == ["cpd:C07481", "cpd:C00031"]
    assert out["Status"].tolist() == ["Auto-accepted", "Auto-accepted", "No match"]
    assert pd.isna(out.loc[7, "KEGG_ID"])
    assert pd.isna(out.loc[7, "Similarity"])
    assert "KEGG_ID" not in df.columns


def test_match_batch_missing_column_fails_before_lookup(client: FakeClient) -> None:
    df = pd.DataFrame({"Standardized_Name": ["Caffeine"]})
    with pytest.raises(ValueError, match="Formula"):
        match_batch(df, delay=0, client=client)
    assert client.calls == []


def test_match_batch_missing_both_columns(client: FakeClient) -> None:
    with pytest.raises(ValueError, match="Standardized_Name, Formula"):
        match_batch(pd.DataFrame({"Name": ["x"]}), delay=0, client=client)


def test_match_batch_row_errors_do_not_abort(client: FakeClient) -> None:
    original = client.find_by_formula

    def flaky(formula: str) -> List[str]:
        if formula == "C6H12O6":
            raise requests.Timeout("timed out")
        return original(formula)

    client.find_by_formula = flaky  # type: ignore[method-assign]
    df = pd.DataFrame(
        {"Standardized_Name": ["D-Glucose", "Caffeine"], "Formula": ["C6H12O6", "C8H10N4O2"]}
    )
    out = match_batch(df, delay=0, client=client)
    assert out["Status"].tolist() == ["Error: timed out", "Auto-accepted"]


def test_match_batch_sleeps_between_rows(client: FakeClient, monkeypatch: pytest.MonkeyPatch) -> None:
    sleeps: List[float] = []
    monkeypatch.setattr("keggmatch.matching.time.sleep", sleeps.append)
    df = pd.DataFrame(
        {"Standardized_Name": ["a", "b", "c"], "Formula": ["C8H10N4O2"] * 3}
    )
    match_batch(df, delay=0.5, client=client)
    assert sleeps == [0.5, 0.5]


def test_match_batch_logs_progress(client: FakeClient, caplog: pytest.LogCaptureFixture) -> None:
    df = pd.DataFrame({"Standardized_Name": ["Caffeine"], "Formula": ["C8H10N4O2"]})
    with caplog.at_level("INFO", logger="keggmatch.matching"):
        match_batch(df, delay=0, client=client)
    assert "Processed 1/1: Caffeine - Status: Auto-accepted" in caplog.text


def test_match_batch_empty_table(client: FakeClient) -> None:
    df = pd.DataFrame({"Standardized_Name": [], "Formula": []})
    out = match_batch(df, delay=0, client=client)
    assert len(out) == 0
    assert "Status" in out.columns


def test_summarize_status() -> None:
    df = pd.DataFrame(
        {"Status": ["Auto-accepted", "Error: boom", "Error: timed out", "No match"]}
    )
    counts = summarize_status(df)
    assert counts["Error"] == 2
    assert counts["Auto-accepted"] == 1
    assert counts["No match"] == 1


def test_match_compound_empty_generator_is_no_match(client: FakeClient) -> None:
    def lazy_find(formula: str):
        return (ref for ref in client.formulas.get(formula, []))

    client.find_by_formula = lazy_find  # type: ignore[method-assign]
    assert match_compound("Unknown", "Xyz123", client=client) == MatchResult.no_match()

    res = match_compound("Caffeine", "C8H10N4O2", client=client)
    assert res.status is MatchStatus.AUTO_ACCEPTED
    assert res.kegg_id == "cpd:C07481"


def test_match_batch_keeps_existing_status_column(client: FakeClient) -> None:
    df = pd.DataFrame(
        {"Standardized_Name": ["Caffeine"], "Formula": ["C8H10N4O2"], "Status": ["QC passed"]}
    )
    with pytest.raises(ValueError, match="Status"):
        match_batch(df, delay=0, client=client)
    assert client.calls == []
    assert df["Status"].tolist() == ["QC passed"]


def test_match_batch_rejects_previous_output(client: FakeClient) -> None:
    df = pd.DataFrame({"Standardized_Name": ["Caffeine"], "Formula": ["C8H10N4O2"]})
    out = match_batch(df, delay=0, client=client)
    with pytest.raises(ValueError, match="KEGG_ID, KEGG_Name, Similarity, Status"):
        match_batch(out, delay=0, client=client)
