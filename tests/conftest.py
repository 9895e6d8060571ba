"""Shared fixtures for crate-advisor tests."""

import json

import pytest

from crate_advisor.core.models import AdvisoryDetail, AdvisorySummary
from crate_advisor.store.memory import InMemoryAdvisoryStore


SUMMARY_RECORDS = [
    {
        "id": "RUSTSEC-2021-0003",
        "crate_name": "smallvec",
        "patched": ">=0.6.14, <1.0.0|>=1.6.1",
        "aliases": "CVE-2021-25900",
        "short_description": "Buffer overflow in SmallVec::insert_many",
    },
    {
        "id": "RUSTSEC-2021-0072",
        "crate_name": "tokio",
        "patched": ">=1.5.1, <1.6.0|>=1.6.3, <1.7.0|>=1.7.2, <1.8.0|>=1.8.1",
        "aliases": "CVE-2021-38191;GHSA-2grh-hm3w-w7hv",
        "short_description": "Task dropped in wrong thread when aborting LocalSet task",
    },
    {
        "id": "RUSTSEC-2020-0016",
        "crate_name": "net2",
        "patched": "",
        "aliases": "",
        "short_description": "net2 invalidly assumes the memory layout of std::net::SocketAddr",
    },
]

DETAIL_RECORDS = [
    {
        "id": "RUSTSEC-2021-0003",
        "subtitle": "Buffer overflow in SmallVec::insert_many",
        "reported": "2021-01-08",
        "issued": "2021-01-08",
        "package": "smallvec",
        "type": "vulnerability",
        "keywords": "buffer-overflow;heap-overflow",
        "aliases": "CVE-2021-25900",
        "reference": "https://github.com/servo/rust-smallvec/issues/252",
        "patched": ">=0.6.14, <1.0.0|>=1.6.1",
        "unaffected": "<0.3.2",
        "description": "A bug in the SmallVec::insert_many method caused it to allocate a buffer that was smaller than needed.",
    },
    {
        "id": "RUSTSEC-2021-0072",
        "subtitle": "Task dropped in wrong thread when aborting LocalSet task",
        "reported": "2021-07-07",
        "issued": "2021-07-07",
        "package": "tokio",
        "type": "vulnerability",
        "keywords": "",
        "aliases": "CVE-2021-38191;GHSA-2grh-hm3w-w7hv",
        "reference": "https://github.com/tokio-rs/tokio/issues/3929",
        "patched": ">=1.5.1, <1.6.0|>=1.6.3, <1.7.0|>=1.7.2, <1.8.0|>=1.8.1",
        "unaffected": "<0.3.0",
        "description": "When aborting a task with JoinHandle::abort, the future was dropped in the wrong thread.",
    },
    {
        "id": "RUSTSEC-2020-0016",
        "subtitle": "net2 invalidly assumes the memory layout of std::net::SocketAddr",
        "package": "net2",
        "type": "unsound",
        "patched": "",
        "description": "The net2 crate has assumed std::net::SocketAddrV4 and std::net::SocketAddrV6 have the same memory layout as the system C representation.",
    },
]


@pytest.fixture
def summaries():
    return [AdvisorySummary.from_dict(record) for record in SUMMARY_RECORDS]


@pytest.fixture
def details():
    return [AdvisoryDetail.from_dict(record) for record in DETAIL_RECORDS]


@pytest.fixture
def store(summaries, details):
    """In-memory store over the sample advisories."""
    return InMemoryAdvisoryStore(summaries, details)


@pytest.fixture
def snapshot_file(tmp_path):
    """Write the sample advisories to a combined JSON snapshot."""
    snapshot = tmp_path / "advisories.json"
    snapshot.write_text(json.dumps({"summaries": SUMMARY_RECORDS, "details": DETAIL_RECORDS}))
    return snapshot
