"""Tests for writing documents to disk."""

import json
import zipfile

from repolens.analyzer import analyze_snapshot
from repolens.output import ANALYSIS_FILENAME, write_analysis, write_archive, write_pages

from conftest import FIXED_NOW

PAGES = {
    "executive": "<p>e</p>",
    "index": "<p>i</p>",
    "product": "<p>p</p>",
}


class TestWritePages:
    def test_written_in_page_order(self, tmp_path):
        written = write_pages(PAGES, tmp_path / "nested" / "out")
        assert [p.name for p in written] == ["index.html", "product.html", "executive.html"]
        assert (tmp_path / "nested" / "out" / "index.html").read_text() == "<p>i</p>"

    def test_unknown_keys_skipped(self, tmp_path):
        written = write_pages({"index": "x", "extra": "y"}, tmp_path)
        assert [p.name for p in written] == ["index.html"]
        assert not (tmp_path / "extra.html").exists()


class TestWriteAnalysis:
    def test_json(self, tmp_path, empty_snapshot):
        path = write_analysis(analyze_snapshot(empty_snapshot, now=FIXED_NOW), tmp_path)
        assert path.name == ANALYSIS_FILENAME
        data = json.loads(path.read_text())
        assert data["maturity"] == {"level": "Experimental", "badge": "blue", "score": 0}
        assert data["context"]["industry"] == ""


class TestWriteArchive:
    def test_zip_contents(self, tmp_path):
        archive = write_archive(PAGES, tmp_path / "bundle" / "repo.zip")
        with zipfile.ZipFile(archive) as zf:
            assert zf.namelist() == ["index.html", "product.html", "executive.html"]
            assert zf.read("product.html").decode() == "<p>p</p>"
