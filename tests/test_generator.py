"""Tests for the multi-perspective document generator."""

import json

import pytest

from repolens.analyzer import Domain, analyze_snapshot
from repolens.generator import (
    build_domain_radial,
    combination_plays,
    generate_all,
    radial_points,
)
from repolens.layout import (
    PAGE_KEYS,
    format_date,
    format_number,
    page_href,
    resolve_page_key,
    short_summary,
    trim_label,
)
from repolens.pipeline import run
from repolens.snapshot import RawSnapshot, UserContext
from repolens.theme import DEFAULT_PALETTE, get_palette

from conftest import FIXED_NOW


@pytest.fixture
def node_pages(node_snapshot):
    return generate_all(analyze_snapshot(node_snapshot, UserContext(industry="Retail"), now=FIXED_NOW))


@pytest.fixture
def empty_pages(empty_snapshot):
    return generate_all(analyze_snapshot(empty_snapshot, now=FIXED_NOW))


class TestGenerateAll:
    """Test the full document set."""

    def test_five_documents(self, node_pages):
        assert list(node_pages) == ["index", "engineering", "product", "capability", "executive"]
        for page in node_pages.values():
            assert page.startswith("<!DOCTYPE html>")
            assert page.rstrip().endswith("</html>")

    def test_perspective_markers(self, node_pages):
        assert "Hub Perspective" in node_pages["index"]
        assert "Engineering Perspective" in node_pages["engineering"]
        assert "Product Perspective" in node_pages["product"]
        assert "Capability Perspective" in node_pages["capability"]
        assert "Executive Perspective" in node_pages["executive"]

    def test_every_page_links_to_every_page(self, node_pages):
        for page in node_pages.values():
            for key in PAGE_KEYS:
                assert f'href="{page_href(key)}"' in page

    def test_active_nav_link(self, node_pages):
        for key, page in node_pages.items():
            assert f'class="nav-link active" href="./{key}.html"' in page
            assert page.count("nav-link active") == 1

    def test_shared_footer(self, node_pages):
        for page in node_pages.values():
            assert "Generated by RepoLens" in page
            assert "https://github.com/acme/webapp" in page

    def test_deterministic(self, node_snapshot):
        first = generate_all(analyze_snapshot(node_snapshot, now=FIXED_NOW))
        second = generate_all(analyze_snapshot(node_snapshot, now=FIXED_NOW))
        assert first == second

    def test_language_accent(self, node_pages, empty_pages):
        assert "--accent: #f7df1e;" in node_pages["index"]
        assert f"--accent: {DEFAULT_PALETTE.accent};" in empty_pages["index"]

    def test_copy_script_only_on_engineering(self, node_pages):
        assert "<script>" in node_pages["engineering"]
        assert "<script>" not in node_pages["index"]


class TestEscaping:
    def test_hostile_metadata(self):
        snapshot = RawSnapshot(
            owner="evil",
            repo="x",
            meta={
                "name": '<script>alert("x")</script>&',
                "description": 'Say "hi" & <b>bye</b>',
                "topics": ["<img>"],
            },
        )
        pages = generate_all(analyze_snapshot(snapshot, now=FIXED_NOW))
        for page in pages.values():
            assert "<script>alert" not in page
            assert "<b>bye</b>" not in page
            assert "<img>" not in page
        assert "&lt;script&gt;alert(&quot;x&quot;)&lt;/script&gt;&amp;" in pages["engineering"]
        assert "Say &quot;hi&quot; &amp; &lt;b&gt;bye&lt;/b&gt;" in pages["index"]
        assert "&lt;img&gt;" in pages["index"]


class TestHub:
    def test_stats_and_topics(self, node_pages):
        hub = node_pages["index"]
        assert "acme/webapp" in hub
        assert "2,500" in hub
        assert "1,234" in hub
        assert "Production-Ready" in hub
        assert "badge-green" in hub
        assert '<span class="chip subtle">dashboard</span>' in hub

    def test_no_topics(self, empty_pages):
        assert "No topics published for this repository." in empty_pages["index"]


class TestEngineering:
    def test_commands_and_decisions(self, node_pages):
        page = node_pages["engineering"]
        assert page.count('class="code-wrap"') == 1
        assert "npm install\nnpm run dev" in page
        assert "Prefer server components over client state" in page
        assert "Containerized deployment | Automated CI/CD workflows" in page
        assert "(70%)" in page
        assert "<h4>Language</h4>" in page
        assert "<h4>Framework</h4>" in page

    def test_generic_fallbacks(self, empty_pages):
        page = empty_pages["engineering"]
        assert "No explicit design rationale was detected in the repository docs." in page
        assert "git clone &lt;repo-url&gt;" in page
        assert "Core Modules" in page


class TestProduct:
    def test_features_and_personas(self, node_pages):
        page = node_pages["product"]
        assert "Fast Server Rendering With Streaming" in page
        assert "Retail often face fragmented tooling" in page
        assert "Software Engineer" in page
        assert page.count('class="journey-step"') == 4


class TestCapability:
    def test_domains(self, node_pages):
        page = node_pages["capability"]
        assert "Retail" in page
        assert "explicit" in page
        assert "<svg" in page

    def test_radial_points(self):
        domains = [Domain(name=f"D{i}", confidence="inferred") for i in range(4)]
        assert radial_points(domains) == [
            ("D0", 440, 170),
            ("D1", 320, 290),
            ("D2", 200, 170),
            ("D3", 320, 50),
        ]

    def test_radial_trims_labels(self):
        svg = build_domain_radial("repo", (Domain("Software Engineering", "default"),))
        assert "Software Engin." in svg
        assert svg.count("<line") == 1

    def test_plays_with_api(self, node_snapshot):
        analysis = analyze_snapshot(node_snapshot, now=FIXED_NOW)
        plays = combination_plays(analysis)
        assert len(plays) == len(analysis.domains)
        assert all("API-first components" in p for p in plays)

    def test_plays_with_graphql_dependency(self):
        package = {"dependencies": {"graphql": "16"}}
        snapshot = RawSnapshot(owner="o", repo="r", config_contents={"package.json": json.dumps(package)})
        plays = combination_plays(analyze_snapshot(snapshot, now=FIXED_NOW))
        assert plays[0] == (
            "Software Engineering: integrate r's API-first components into partner platforms "
            "to unlock interoperability opportunities."
        )

    def test_plays_without_api(self, empty_snapshot):
        plays = combination_plays(analyze_snapshot(empty_snapshot, now=FIXED_NOW))
        assert plays == [
            "Software Engineering: extend empty's core modules into adjacent team workflows "
            "without rebuilding project foundations.",
            "Developer Productivity: extend empty's core modules into adjacent team workflows "
            "without rebuilding project foundations.",
        ]


class TestExecutive:
    def test_narrative_and_metrics(self, node_snapshot):
        context = UserContext(metrics="30% fewer incidents")
        analysis = analyze_snapshot(node_snapshot, context, now=FIXED_NOW)
        page = generate_all(analysis)["executive"]
        assert "<blockquote>" in page
        assert "webapp exists to solve a practical delivery problem" in page
        assert "30% fewer incidents" in page
        assert "2024-01-01" in page
        assert "Review the Repository -&gt;" in page


class TestLayoutHelpers:
    def test_format_number(self):
        assert format_number(1234567) == "1,234,567"
        assert format_number(None) == "0"

    def test_format_date(self):
        assert format_date("2024-03-05T10:00:00Z") == "2024-03-05"
        assert format_date("") == "Unknown"
        assert format_date("yesterday") == "Unknown"

    def test_format_date_normalizes_to_utc(self):
        assert format_date("2024-01-01T23:00:00-05:00") == "2024-01-02"
        assert format_date("2024-01-02T01:00:00+03:00") == "2024-01-01"

    def test_short_summary(self):
        assert short_summary("short") == "short"
        assert short_summary("x" * 80) == "x" * 65 + "..."

    def test_trim_label(self):
        assert trim_label("API & Integration", 15) == "API & Integrat."
        assert trim_label("Healthcare", 15) == "Healthcare"

    @pytest.mark.parametrize(
        "name,expected",
        [("hub", "index"), ("index.html", "index"), ("Engineering", "engineering"), ("executive.html", "executive")],
    )
    def test_resolve_page_key(self, name, expected):
        assert resolve_page_key(name) == expected

    def test_resolve_unknown_page(self):
        with pytest.raises(KeyError):
            resolve_page_key("roadmap")

    @pytest.mark.parametrize(
        "language,accent",
        [("TypeScript", "#f7df1e"), ("Python", "#3572A5"), ("Rust", "#DEA584"), ("Go", "#00ACD7"), ("Gosu", "#58a6ff"), (None, "#58a6ff")],
    )
    def test_palette(self, language, accent):
        assert get_palette(language).accent == accent


class TestPipeline:
    def test_run_reports_progress(self, node_snapshot):
        calls = []
        result = run(node_snapshot, progress_callback=lambda *args: calls.append(args), now=FIXED_NOW)
        assert calls == [("Analyzing repository...", 1, 2), ("Rendering documents...", 2, 2)]
        assert set(result.pages) == set(PAGE_KEYS)
        assert result.to_dict()["pages"] == sorted(PAGE_KEYS)
        assert result.analysis.meta.name == "webapp"
