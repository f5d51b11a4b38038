"""Tests for the CLI."""

import json
import zipfile
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from repolens import __version__
from repolens.github import FetchError
from repolens.main import cli
from repolens.snapshot import RawSnapshot

HTML_FILES = ["capability.html", "engineering.html", "executive.html", "index.html", "product.html"]


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def snapshot_file(tmp_path, node_snapshot):
    path = tmp_path / "webapp.json"
    path.write_text(json.dumps(node_snapshot.to_dict()))
    return path


class TestGenerate:
    def test_writes_documents(self, runner, snapshot_file, tmp_path):
        out = tmp_path / "site"
        result = runner.invoke(cli, ["generate", str(snapshot_file), "--snapshot", "-O", str(out)])
        assert result.exit_code == 0, result.output
        assert sorted(p.name for p in out.glob("*.html")) == HTML_FILES
        analysis = json.loads((out / "analysis.json").read_text())
        assert analysis["meta"]["full_name"] == "acme/webapp"
        assert "Production-Ready" in result.output

    def test_context_options(self, runner, snapshot_file, tmp_path):
        out = tmp_path / "site"
        result = runner.invoke(cli, [
            "generate", str(snapshot_file), "--snapshot", "-O", str(out),
            "--industry", "Healthcare", "--personas", "Clinician",
        ])
        assert result.exit_code == 0, result.output
        analysis = json.loads((out / "analysis.json").read_text())
        assert analysis["domains"][0] == {"name": "Healthcare", "confidence": "explicit"}
        assert analysis["personas"][0]["role"] == "Clinician"

    def test_zip(self, runner, snapshot_file, tmp_path):
        out = tmp_path / "site"
        result = runner.invoke(cli, ["generate", str(snapshot_file), "--snapshot", "-O", str(out), "--zip"])
        assert result.exit_code == 0, result.output
        with zipfile.ZipFile(tmp_path / "site.zip") as zf:
            assert sorted(zf.namelist()) == HTML_FILES

    def test_json_only(self, runner, snapshot_file, tmp_path):
        out = tmp_path / "site"
        result = runner.invoke(cli, ["generate", str(snapshot_file), "--snapshot", "-O", str(out), "--json-only"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["meta"]["name"] == "webapp"
        assert not out.exists()

    def test_missing_snapshot(self, runner, tmp_path):
        result = runner.invoke(cli, ["generate", str(tmp_path / "nope.json"), "--snapshot"])
        assert result.exit_code == 1
        assert "Snapshot file not found" in result.output

    def test_invalid_snapshot_json(self, runner, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{oops")
        result = runner.invoke(cli, ["generate", str(path), "--snapshot"])
        assert result.exit_code == 1
        assert "not valid JSON" in result.output

    @patch("repolens.main.GitHubClient.fetch_snapshot")
    def test_fetch_error(self, mock_fetch, runner):
        mock_fetch.side_effect = FetchError("not_found")
        result = runner.invoke(cli, ["generate", "acme/missing"])
        assert result.exit_code == 1
        assert "Repository not found" in result.output

    @patch("repolens.main.GitHubClient")
    def test_fetch_and_save_snapshot(self, mock_client_cls, runner, node_snapshot, tmp_path):
        client = mock_client_cls.return_value.__enter__.return_value
        client.fetch_snapshot.return_value = node_snapshot
        saved = tmp_path / "saved.json"
        out = tmp_path / "site"

        result = runner.invoke(
            cli,
            ["generate", "acme/webapp", "-O", str(out), "--save-snapshot", str(saved)],
            env={"GITHUB_TOKEN": "tok"},
        )

        assert result.exit_code == 0, result.output
        assert mock_client_cls.call_args.kwargs["token"] == "tok"
        assert client.fetch_snapshot.call_args.args[0] == "acme/webapp"
        assert RawSnapshot.from_dict(json.loads(saved.read_text())) == node_snapshot
        assert (out / "index.html").is_file()


class TestAnalyze:
    def test_json(self, runner, snapshot_file):
        result = runner.invoke(cli, ["analyze", str(snapshot_file), "--snapshot", "--json"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["maturity"]["level"] == "Production-Ready"
        assert data["tech_stack"][0] == {"name": "TypeScript", "category": "language", "percentage": 70}

    def test_summary_table(self, runner, snapshot_file):
        result = runner.invoke(cli, ["analyze", str(snapshot_file), "--snapshot"])
        assert result.exit_code == 0, result.output
        assert "acme/webapp" in result.output
        assert "[default]" in result.output


class TestMisc:
    def test_version(self, runner):
        result = runner.invoke(cli, ["version"])
        assert result.exit_code == 0
        assert f"repolens v{__version__}" in result.output

    def test_serve_empty_directory(self, runner, tmp_path):
        result = runner.invoke(cli, ["serve", str(tmp_path)])
        assert result.exit_code == 1
        assert "No generated documents found" in result.output
