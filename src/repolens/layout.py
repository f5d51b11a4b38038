"""Shared page shell: head, navigation, footer, and text formatting helpers.

Every document is wrapped by ``render_page`` so the five perspectives keep
the same navigation, theme and footer.
"""

from __future__ import annotations

import datetime
import html

from .analyzer import AnalysisResult, parse_timestamp
from .theme import FONT_LINKS, get_palette, shared_styles

TOOL_NAME = "RepoLens"

# (key, label); key doubles as the output file stem
PAGES = (
    ("index", "Hub"),
    ("engineering", "Engineering"),
    ("product", "Product"),
    ("capability", "Capability"),
    ("executive", "Executive"),
)

PAGE_KEYS = tuple(key for key, _ in PAGES)
PAGE_ALIASES = {"hub": "index"}


def resolve_page_key(key: str) -> str:
    """Map a page name (including the ``hub`` alias) to its document key."""
    key = str(key or "").strip().lower()
    if key.endswith(".html"):
        key = key[: -len(".html")]
    key = PAGE_ALIASES.get(key, key)
    if key not in PAGE_KEYS:
        raise KeyError(f"Unknown page: {key!r}. Expected one of {', '.join(PAGE_KEYS)} or hub")
    return key


def page_href(key: str) -> str:
    return f"./{key}.html"


def escape_html(value) -> str:
    """Escape text for safe embedding in element content and attributes."""
    return html.escape("" if value is None else str(value), quote=True)


def format_number(value) -> str:
    try:
        return f"{int(value or 0):,}"
    except (TypeError, ValueError):
        return "0"


def format_date(value: str) -> str:
    """Return YYYY-MM-DD, or "Unknown" when absent or unparseable."""
    parsed = parse_timestamp(value)
    if parsed is None:
        return "Unknown"
    return parsed.astimezone(datetime.timezone.utc).date().isoformat()


def short_summary(text: str) -> str:
    cleaned = str(text or "").strip()
    return cleaned if len(cleaned) <= 68 else f"{cleaned[:65]}..."


def trim_label(text: str, limit: int) -> str:
    text = str(text)
    return text if len(text) <= limit else f"{text[: limit - 1]}."


def repo_button(analysis: AnalysisResult, label: str, css_class: str = "primary-btn") -> str:
    return (
        f'<a class="{css_class}" href="{escape_html(analysis.meta.repo_url)}" '
        f'target="_blank" rel="noreferrer">{escape_html(label)}</a>'
    )


def render_nav(page_key: str, analysis: AnalysisResult) -> str:
    links = "".join(
        f'<a class="nav-link{" active" if key == page_key else ""}" href="{page_href(key)}">{label}</a>'
        for key, label in PAGES
    )
    return f"""
    <nav class="top-nav">
      <div class="nav-links">{links}</div>
      <a class="repo-link mono" href="{escape_html(analysis.meta.repo_url)}" target="_blank" rel="noreferrer">GitHub -&gt;</a>
    </nav>
  """


def render_footer(analysis: AnalysisResult) -> str:
    return f"""
    <footer class="footer">
      <div class="mono">{TOOL_NAME} | Generated by {TOOL_NAME}</div>
      <div class="mono">{escape_html(analysis.meta.full_name)}</div>
      {repo_button(analysis, "View on GitHub", "ghost-btn")}
    </footer>
  """


def render_page(
    analysis: AnalysisResult,
    page_key: str,
    page_name: str,
    hero: str,
    body: str,
    extra_script: str = "",
) -> str:
    """Wrap hero and body content in the shared document shell."""
    palette = get_palette(analysis.meta.primary_language)
    script = f"\n  <script>{extra_script}</script>" if extra_script else ""
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <title>{escape_html(page_name)} - {escape_html(analysis.meta.name)} | {TOOL_NAME}</title>
  {FONT_LINKS}
  {shared_styles(palette)}
</head>
<body>
  {render_nav(page_key, analysis)}
  <main>{hero}{body}</main>
  {render_footer(analysis)}{script}
</body>
</html>"""
