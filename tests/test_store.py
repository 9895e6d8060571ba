"""Tests for advisory stores and record mapping."""

import json

import pytest

from crate_advisor.core.models import AdvisoryDetail, AdvisorySummary, split_aliases
from crate_advisor.core.resolver import VulnerabilityResolver
from crate_advisor.store.base import AdvisoryStoreError
from crate_advisor.store.memory import InMemoryAdvisoryStore
from crate_advisor.store.offline import AdvisoryDatabaseConfig, OfflineAdvisoryStore


def _offline_store(path):
    return OfflineAdvisoryStore(AdvisoryDatabaseConfig(path))


class TestRecordMapping:
    """Test conversion of raw records to models."""

    def test_summary_accepts_alternate_keys(self):
        summary = AdvisorySummary.from_dict({
            "id": "RUSTSEC-2019-0001",
            "cratename": "ammonia",
            "patched": [">=2.1.0"],
            "aliases": "CVE-2019-15542;GHSA-xxxx",
            "small_desc": "Uncontrolled recursion",
        })
        assert summary.crate_name == "ammonia"
        assert summary.patched.raw == ">=2.1.0"
        assert summary.aliases == ("CVE-2019-15542", "GHSA-xxxx")
        assert summary.short_description == "Uncontrolled recursion"

    def test_list_patched_is_joined_as_alternatives(self):
        summary = AdvisorySummary.from_dict({"id": "X", "crate_name": "a", "patched": ["^1.0.0", ">=2.0.0"]})
        assert summary.patched.raw == "^1.0.0|>=2.0.0"
        assert len(summary.patched.clauses) == 2

    def test_summary_requires_id(self):
        with pytest.raises(ValueError):
            AdvisorySummary.from_dict({"crate_name": "a", "patched": ">=1.0.0"})

    def test_detail_maps_package_and_type(self):
        detail = AdvisoryDetail.from_dict({
            "id": "RUSTSEC-2019-0001",
            "package": "ammonia",
            "type": "vulnerability",
            "keywords": ["xss", "html"],
            "patched": [">=2.1.0", "^1.2.1"],
            "unaffected": None,
            "url": "https://example.invalid/ignored",
        })
        assert detail.affected_package == "ammonia"
        assert detail.advisory_type == "vulnerability"
        assert detail.keywords == "xss;html"
        assert detail.patched == ">=2.1.0|^1.2.1"
        assert detail.unaffected == ""
        assert detail.url == "https://rustsec.org/advisories/RUSTSEC-2019-0001.html"

    def test_split_aliases(self):
        assert split_aliases(None) == ()
        assert split_aliases("A;B") == ("A", "B")
        assert split_aliases(["A", "B"]) == ("A", "B")


class TestInMemoryAdvisoryStore:
    """Test the in-memory store."""

    def test_lists_summaries_unfiltered(self, store, summaries):
        assert store.list_summaries() == summaries

    def test_details_in_storage_order(self, summaries, details):
        extra = AdvisoryDetail(id="RUSTSEC-2021-0003", subtitle="second row")
        store = InMemoryAdvisoryStore(summaries, details + [extra])

        rows = store.get_details("RUSTSEC-2021-0003")
        assert [row.subtitle for row in rows] == ["Buffer overflow in SmallVec::insert_many", "second row"]

    def test_unknown_id(self, store):
        assert store.get_details("RUSTSEC-0000-0000") == []

    def test_statistics(self, store):
        assert store.get_statistics() == {"total_summaries": 3, "total_crates": 3, "total_details": 3}


class TestAdvisoryDatabaseConfig:
    """Test snapshot configuration validation."""

    def test_missing_path(self, tmp_path):
        with pytest.raises(ValueError, match="does not exist"):
            AdvisoryDatabaseConfig(tmp_path / "missing.json")

    def test_invalid_workers(self, snapshot_file):
        with pytest.raises(ValueError):
            AdvisoryDatabaseConfig(snapshot_file, max_workers=0)

    def test_path_is_coerced(self, snapshot_file):
        config = AdvisoryDatabaseConfig(str(snapshot_file))
        assert config.database_path == snapshot_file


class TestOfflineAdvisoryStore:
    """Test the JSON snapshot store."""

    def test_combined_snapshot(self, snapshot_file):
        store = _offline_store(snapshot_file)

        summaries = store.list_summaries()
        assert [summary.crate_name for summary in summaries] == ["smallvec", "tokio", "net2"]
        assert store.get_details("RUSTSEC-2021-0072")[0].affected_package == "tokio"

    def test_directory_of_single_advisories(self, tmp_path):
        advisories = tmp_path / "advisories" / "smallvec"
        advisories.mkdir(parents=True)
        (advisories / "RUSTSEC-2021-0003.json").write_text(json.dumps({
            "id": "RUSTSEC-2021-0003",
            "package": "smallvec",
            "patched": [">=0.6.14, <1.0.0", ">=1.6.1"],
            "subtitle": "Buffer overflow in SmallVec::insert_many",
        }))
        (tmp_path / "advisories" / "list.json").write_text(json.dumps([
            {"id": "RUSTSEC-2020-0016", "package": "net2", "patched": []},
        ]))

        store = _offline_store(tmp_path / "advisories")
        summaries = {summary.id: summary for summary in store.list_summaries()}

        assert summaries["RUSTSEC-2021-0003"].crate_name == "smallvec"
        assert summaries["RUSTSEC-2021-0003"].patched.raw == ">=0.6.14, <1.0.0|>=1.6.1"
        assert summaries["RUSTSEC-2020-0016"].crate_name == "net2"
        assert store.get_details("RUSTSEC-2021-0003")[0].subtitle == "Buffer overflow in SmallVec::insert_many"

    def test_invalid_json(self, tmp_path):
        snapshot = tmp_path / "broken.json"
        snapshot.write_text("{not json")

        with pytest.raises(AdvisoryStoreError, match="broken.json"):
            _offline_store(snapshot).list_summaries()

    def test_record_without_id(self, tmp_path):
        snapshot = tmp_path / "advisories.json"
        snapshot.write_text(json.dumps({"summaries": [{"crate_name": "a", "patched": ">=1.0.0"}]}))

        with pytest.raises(AdvisoryStoreError, match="Invalid advisory record"):
            _offline_store(snapshot).list_summaries()

    def test_snapshot_is_reread(self, tmp_path):
        snapshot = tmp_path / "advisories.json"
        snapshot.write_text(json.dumps({"summaries": [], "details": []}))
        resolver = VulnerabilityResolver(_offline_store(snapshot))
        assert resolver.resolve("smallvec", "1.6.0") == []

        snapshot.write_text(json.dumps({
            "summaries": [{"id": "RUSTSEC-2021-0003", "crate_name": "smallvec", "patched": ">=1.6.1"}],
            "details": [{"id": "RUSTSEC-2021-0003", "package": "smallvec"}],
        }))
        assert [detail.id for detail in resolver.resolve("smallvec", "1.6.0")] == ["RUSTSEC-2021-0003"]

    def test_database_stats(self, snapshot_file):
        store = _offline_store(snapshot_file)

        stats = store.get_database_stats()
        assert stats["total_summaries"] == 3
        assert stats["unique_advisories"] == 3
        assert stats["total_details"] == 3
        assert stats["average_advisories_per_crate"] == 1

    def test_details_without_prior_listing(self, snapshot_file):
        store = _offline_store(snapshot_file)

        rows = store.get_details("RUSTSEC-2021-0003")
        assert [row.affected_package for row in rows] == ["smallvec"]

    def test_snapshot_is_unaffected_by_later_reloads(self, tmp_path):
        snapshot_path = tmp_path / "advisories.json"
        snapshot_path.write_text(json.dumps({
            "summaries": [{"id": "RUSTSEC-2021-0003", "crate_name": "smallvec", "patched": ">=1.6.1"}],
            "details": [{"id": "RUSTSEC-2021-0003", "package": "smallvec"}],
        }))
        store = _offline_store(snapshot_path)

        first = store.snapshot()
        snapshot_path.write_text(json.dumps({"summaries": [], "details": []}))
        second = store.snapshot()

        assert [row.id for row in first.get_details("RUSTSEC-2021-0003")] == ["RUSTSEC-2021-0003"]
        assert second.list_summaries() == []
        assert store.get_details("RUSTSEC-2021-0003") == []
