"""Write generated documents, analysis JSON and zip bundles to disk."""

from __future__ import annotations

import json
import zipfile
from pathlib import Path

from .analyzer import AnalysisResult
from .layout import PAGE_KEYS

ANALYSIS_FILENAME = "analysis.json"


def write_pages(pages: dict[str, str], out_dir: Path) -> list[Path]:
    """Write each document as <key>.html. Returns written paths."""
    out_dir.mkdir(parents=True, exist_ok=True)
    written = []
    for key in PAGE_KEYS:
        if key in pages:
            path = out_dir / f"{key}.html"
            path.write_text(pages[key], encoding="utf-8")
            written.append(path)
    return written


def write_analysis(analysis: AnalysisResult, out_dir: Path) -> Path:
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / ANALYSIS_FILENAME
    path.write_text(json.dumps(analysis.to_dict(), indent=2), encoding="utf-8")
    return path


def write_archive(pages: dict[str, str], archive_path: Path) -> Path:
    """Bundle the documents into a zip of <key>.html files."""
    archive_path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(archive_path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for key in PAGE_KEYS:
            if key in pages:
                zf.writestr(f"{key}.html", pages[key])
    return archive_path
