"""Snapshot -> analysis -> documents, with progress reporting."""

from __future__ import annotations

import datetime
from dataclasses import dataclass
from typing import Any

from .analyzer import AnalysisResult, analyze_snapshot
from .generator import generate_all
from .snapshot import RawSnapshot, UserContext


@dataclass(frozen=True)
class PipelineResult:
    """Analysis plus the five rendered documents."""

    analysis: AnalysisResult
    pages: dict[str, str]

    def to_dict(self) -> dict[str, Any]:
        return {
            "analysis": self.analysis.to_dict(),
            "pages": sorted(self.pages),
        }


def run(
    snapshot: RawSnapshot,
    context: UserContext | None = None,
    progress_callback=None,
    now: datetime.datetime | None = None,
) -> PipelineResult:
    """Analyze a snapshot and render every document."""
    if progress_callback:
        progress_callback("Analyzing repository...", 1, 2)
    analysis = analyze_snapshot(snapshot, context, now=now)

    if progress_callback:
        progress_callback("Rendering documents...", 2, 2)
    pages = generate_all(analysis)

    return PipelineResult(analysis=analysis, pages=pages)
