"""Tests for the crate-advisor command line interface."""

import json

import pytest
from typer.testing import CliRunner

from crate_advisor.cli.main import ADVISORIES_ENV_VAR, app


runner = CliRunner()


@pytest.fixture
def project(tmp_path):
    """Project directory with a Cargo.lock and a build directory to skip."""
    root = tmp_path / "project"
    root.mkdir()
    (root / "Cargo.lock").write_text(
        'version = 3\n\n'
        '[[package]]\nname = "smallvec"\nversion = "1.6.0"\n\n'
        '[[package]]\nname = "tokio"\nversion = "1.8.1"\n'
    )
    (root / "target").mkdir()
    (root / "target" / "targets.txt").write_text("net2/0.2.37\n")
    return root


class TestCheckCommand:
    """Test the check command."""

    def test_vulnerable_crate(self, snapshot_file, tmp_path):
        output_file = tmp_path / "results.json"

        result = runner.invoke(app, [
            "check", "smallvec", "1.6.0",
            "--advisories", str(snapshot_file),
            "--json-output", str(output_file),
        ])

        assert result.exit_code == 0
        assert "Found 1 advisories!" in result.output

        data = json.loads(output_file.read_text())
        assert data["summary"]["targets"] == ["smallvec/1.6.0"]
        assert data["summary"]["total_advisories"] == 1
        assert data["advisories"][0]["id"] == "RUSTSEC-2021-0003"
        assert data["advisories"][0]["url"] == "https://rustsec.org/advisories/RUSTSEC-2021-0003.html"

    def test_patched_crate(self, snapshot_file):
        result = runner.invoke(app, ["check", "smallvec", "1.6.1", "-a", str(snapshot_file)])

        assert result.exit_code == 0
        assert "No unpatched advisories found!" in result.output

    def test_advisories_from_environment(self, snapshot_file):
        result = runner.invoke(
            app,
            ["check", "tokio", "1.6.0"],
            env={ADVISORIES_ENV_VAR: str(snapshot_file)},
        )

        assert result.exit_code == 0
        assert "Found 1 advisories!" in result.output

    def test_missing_snapshot(self, tmp_path):
        result = runner.invoke(app, ["check", "smallvec", "1.6.0", "-a", str(tmp_path / "missing.json")])

        assert result.exit_code == 1
        assert "Database path does not exist" in result.output

    def test_broken_snapshot(self, tmp_path):
        snapshot = tmp_path / "advisories.json"
        snapshot.write_text("[")

        result = runner.invoke(app, ["check", "smallvec", "1.6.0", "-a", str(snapshot)])

        assert result.exit_code == 1
        assert "Error:" in result.output


class TestScanCommand:
    """Test the scan command."""

    def test_scan_directory(self, project, snapshot_file, tmp_path):
        output_file = tmp_path / "scan.json"

        result = runner.invoke(app, ["scan", str(project), "-a", str(snapshot_file), "-o", str(output_file)])

        assert result.exit_code == 0
        data = json.loads(output_file.read_text())
        assert data["summary"]["targets"] == ["smallvec/1.6.0", "tokio/1.8.1"]
        assert [advisory["id"] for advisory in data["advisories"]] == ["RUSTSEC-2021-0003"]

    def test_scan_concurrent_matches_sequential(self, project, snapshot_file, tmp_path):
        sequential = tmp_path / "sequential.json"
        concurrent = tmp_path / "concurrent.json"

        runner.invoke(app, ["scan", str(project), "-a", str(snapshot_file), "-o", str(sequential)])
        result = runner.invoke(app, [
            "scan", str(project), "-a", str(snapshot_file), "-o", str(concurrent), "--concurrent",
        ])

        assert result.exit_code == 0
        assert (
            json.loads(concurrent.read_text())["advisories"]
            == json.loads(sequential.read_text())["advisories"]
        )

    def test_scan_target_list(self, tmp_path, snapshot_file):
        target_list = tmp_path / "release.targets"
        target_list.write_text("net2/0.2.37\nnet2/0.2.38\n")
        output_file = tmp_path / "scan.json"

        result = runner.invoke(app, ["scan", str(target_list), "-a", str(snapshot_file), "-o", str(output_file)])

        assert result.exit_code == 0
        data = json.loads(output_file.read_text())
        assert data["summary"]["total_targets"] == 2
        assert [advisory["id"] for advisory in data["advisories"]] == ["RUSTSEC-2020-0016"]

    def test_invalid_target_line(self, tmp_path, snapshot_file):
        target_list = tmp_path / "targets.txt"
        target_list.write_text("net2\n")

        result = runner.invoke(app, ["scan", str(target_list), "-a", str(snapshot_file)])

        assert result.exit_code == 1
        assert "Error:" in result.output
        assert "'net2'" in result.output

    def test_no_lock_files(self, tmp_path, snapshot_file):
        empty = tmp_path / "empty"
        empty.mkdir()

        result = runner.invoke(app, ["scan", str(empty), "-a", str(snapshot_file)])

        assert result.exit_code == 0
        assert "No locked crates found" in result.output

    def test_missing_path(self, tmp_path, snapshot_file):
        result = runner.invoke(app, ["scan", str(tmp_path / "missing"), "-a", str(snapshot_file)])

        assert result.exit_code == 1
        assert "Path does not exist" in result.output


class TestMatchCommand:
    """Test the match command."""

    def test_vulnerable(self):
        result = runner.invoke(app, ["match", ">1.0.0,<2.0.0", "2.0.0"])

        assert result.exit_code == 0
        assert "2.0.0 is VULNERABLE" in result.output

    def test_patched(self):
        result = runner.invoke(app, ["match", "^1.0.0|>2.0.0,<3.0.0", "2.5.0"])

        assert result.exit_code == 0
        assert "2.5.0 is patched" in result.output
        assert "closed" in result.output
        assert "exact" in result.output

    def test_malformed_clause_is_reported(self):
        result = runner.invoke(app, ["match", "^0.9.0| >=1.0.0", "1.2.0"])

        assert result.exit_code == 0
        assert "malformed" in result.output
        assert "1.2.0 is VULNERABLE" in result.output


class TestInfoCommand:
    """Test the info command."""

    def test_info(self, snapshot_file):
        result = runner.invoke(app, ["info", "-a", str(snapshot_file)])

        assert result.exit_code == 0
        assert "Advisories: 3" in result.output
        assert "cargo-lock" in result.output
