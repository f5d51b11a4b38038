"""Multi-perspective document generator.

Renders one AnalysisResult into five cross-linked HTML documents: the hub
plus engineering, product, capability and executive perspectives. Each
builder supplies only hero and body markup; ``layout.render_page`` adds
the shared shell.
"""

from __future__ import annotations

import math
from collections import defaultdict

from .analyzer import AnalysisResult, Domain
from .layout import (
    escape_html,
    format_date,
    format_number,
    page_href,
    render_page,
    repo_button,
    short_summary,
    trim_label,
)
from .readme import to_title

FEATURE_ICONS = ("⚡", "\U0001f9e9", "\U0001f680", "\U0001f512", "\U0001f4ca", "\U0001f6e0", "\U0001f310", "✨")

HUB_LINKS = (
    ("engineering", "Engineering", "Developers", "Architecture, stack, and implementation depth."),
    ("product", "Product", "End Users", "Value proposition, features, and user outcomes."),
    ("capability", "Capability", "Business Strategy", "Cross-domain leverage and platform potential."),
    ("executive", "Executive", "Leadership", "Strategic summary and evidence snapshot."),
)

JOURNEY_STEPS = ("Discover", "Install", "Configure", "Value")

BEFORE_AFTER = (
    ("Fragmented implementation patterns", "Reusable structured workflow with clear entry points"),
    ("Slow team onboarding", "Faster adoption through documented setup and examples"),
    ("Inconsistent quality baseline", "Predictable process anchored in tested project components"),
)

STRATEGIC_VALUE = (
    "Defensibility: proven public footprint and contributor participation.",
    "Extensibility: modular stack components support adjacent scenarios.",
    "Community: open-source delivery strengthens transparency and adoption confidence.",
)

RADIAL_CENTER = (320, 170)
RADIAL_RADIUS = 120

COPY_SCRIPT = """
    document.querySelectorAll('.copy-btn').forEach(button => {
      button.addEventListener('click', async () => {
        const node = document.getElementById(button.getAttribute('data-copy-id'))
        if (!node) return
        try {
          await navigator.clipboard.writeText(node.textContent || '')
          const prev = button.textContent
          button.textContent = 'Copied'
          setTimeout(() => button.textContent = prev, 1200)
        } catch (_err) {
          button.textContent = 'Copy failed'
          setTimeout(() => button.textContent = 'Copy', 1200)
        }
      })
    })
  """


def generate_all(analysis: AnalysisResult) -> dict[str, str]:
    """Render the full document set, keyed by page key."""
    return {
        "index": generate_hub_page(analysis),
        "engineering": generate_engineering_page(analysis),
        "product": generate_product_page(analysis),
        "capability": generate_capability_page(analysis),
        "executive": generate_executive_page(analysis),
    }


def _chips(items, css_class: str = "chip") -> str:
    return "".join(f'<span class="{css_class}">{escape_html(item)}</span>' for item in items)


def _plain_list(items) -> str:
    return "".join(f"<li>{escape_html(item)}</li>" for item in items)


# --- Hub ---


def generate_hub_page(analysis: AnalysisResult) -> str:
    meta = analysis.meta
    maturity = analysis.maturity

    hero = f"""
    <section class="hero hero-gradient">
      <div>
        <p class="eyebrow">Hub Perspective</p>
        <h1>{escape_html(meta.full_name)}</h1>
        <p class="lead">{escape_html(meta.description)}</p>
      </div>
      <div class="badge badge-{escape_html(maturity.badge)}">{escape_html(maturity.level)}</div>
    </section>
  """

    stats = (
        ("Stars", format_number(meta.stars)),
        ("Forks", format_number(meta.forks)),
        ("Contributors", format_number(analysis.metrics.contributors)),
        ("Releases", format_number(analysis.metrics.releases)),
    )
    stat_cards = "".join(
        f"""
        <article class="card stat-card">
          <p class="mono muted">{escape_html(label)}</p>
          <h2>{escape_html(value)}</h2>
        </article>"""
        for label, value in stats
    )
    link_cards = "".join(
        f"""
        <article class="card perspective-card audience-{key}">
          <p class="mono muted">{escape_html(audience)}</p>
          <h3>{escape_html(title)}</h3>
          <p>{escape_html(desc)}</p>
          <a class="ghost-btn" href="{page_href(key)}">Open -&gt;</a>
        </article>"""
        for key, title, audience, desc in HUB_LINKS
    )
    if meta.topics:
        topics = _chips(meta.topics, "chip subtle")
    else:
        topics = '<span class="muted">No topics published for this repository.</span>'

    body = f"""
    <section class="stats-grid">{stat_cards}
    </section>

    <section class="split-grid">{link_cards}
    </section>

    <section class="card">
      <h3>Tech Stack</h3>
      <div class="chip-row">{_chips(item.name for item in analysis.tech_stack[:14])}</div>
    </section>

    <section class="card">
      <h3>Topics</h3>
      <div class="chip-row">{topics}</div>
      <div class="section-actions">{repo_button(analysis, "View on GitHub")}</div>
    </section>
  """
    return render_page(analysis, "index", "Hub", hero, body)


# --- Engineering ---


def build_technical_thesis(analysis: AnalysisResult) -> str:
    language = analysis.meta.primary_language or "multi-language"
    pattern = analysis.architecture.patterns[0] if analysis.architecture.patterns else "modular architecture"
    return (
        f"{analysis.meta.name} uses a {pattern} built primarily with {language}. The project "
        "emphasizes reusable modules, maintainable boundaries, and practical operational fit."
    )


def derive_how_it_works(analysis: AnalysisResult) -> list[str]:
    key_modules = ", ".join(c.name for c in analysis.architecture.components[:3])
    return [
        "Clone the repository and install dependencies based on the project package manager.",
        f"Initialize the runtime environment for {analysis.meta.primary_language or 'the primary stack'} components.",
        f"Activate key modules: {key_modules}.",
        "Run the documented command path and validate behavior through existing test and workflow checks.",
    ]


def group_stack(analysis: AnalysisResult) -> dict[str, list]:
    """Group tech stack entries by category, keeping first-seen order."""
    groups: dict[str, list] = defaultdict(list)
    for item in analysis.tech_stack:
        groups[item.category or "other"].append(item)
    return dict(groups)


def generate_engineering_page(analysis: AnalysisResult) -> str:
    meta = analysis.meta
    arch = analysis.architecture

    hero = f"""
    <section class="hero">
      <p class="eyebrow">Engineering Perspective</p>
      <h1>{escape_html(meta.name)} Technical Thesis</h1>
      <p class="lead">{escape_html(build_technical_thesis(analysis))}</p>
      <p class="mono muted">Patterns: {escape_html(" | ".join(arch.patterns))}</p>
    </section>
  """

    nodes = "".join(
        f"""
        <div class="arch-node">
          <h4>{escape_html(c.name)}</h4>
          <p>{escape_html(c.role)}</p>
        </div>"""
        for c in arch.components[:6]
    )

    columns = []
    for category, items in group_stack(analysis).items():
        entries = "".join(
            f'<p class="mono">{escape_html(item.name)}'
            + (f' <span class="muted">({item.percentage}%)</span>' if item.percentage else "")
            + "</p>"
            for item in items
        )
        columns.append(f"""
        <article class="stack-column">
          <h4>{escape_html(to_title(category))}</h4>
          {entries}
        </article>""")

    commands = "".join(
        f"""
      <div class="code-wrap">
        <button class="ghost-btn copy-btn" data-copy-id="cmd-{i}">Copy</button>
        <pre><code id="cmd-{i}">{escape_html(cmd)}</code></pre>
      </div>"""
        for i, cmd in enumerate(analysis.getting_started.commands)
    )

    if analysis.design_decisions:
        decisions = "".join(
            f"""
      <details class="decision">
        <summary>{escape_html(short_summary(d))}</summary>
        <p>{escape_html(d)}</p>
      </details>"""
            for d in analysis.design_decisions
        )
    else:
        decisions = '<p class="muted">No explicit design rationale was detected in the repository docs.</p>'

    body = f"""
    <section class="card">
      <h3>Architecture Visualization</h3>
      <div class="arch-map">{nodes}
      </div>
      <p class="mono muted">Deployment: {escape_html(" | ".join(arch.deployment))}</p>
    </section>

    <section class="card">
      <h3>Tech Stack by Layer</h3>
      <div class="stack-groups">{"".join(columns)}
      </div>
    </section>

    <section class="card">
      <h3>How It Works</h3>
      <ol class="steps">{_plain_list(derive_how_it_works(analysis))}</ol>
    </section>

    <section class="card">
      <h3>Install and Run</h3>{commands}
    </section>

    <section class="card">
      <h3>Design Decisions</h3>{decisions}
    </section>

    <section class="card metric-strip">
      <article><p class="muted mono">Maturity</p><h4>{escape_html(analysis.maturity.level)}</h4></article>
      <article><p class="muted mono">Open Issues</p><h4>{format_number(meta.open_issues)}</h4></article>
      <article><p class="muted mono">Updated</p><h4>{escape_html(format_date(meta.updated_at))}</h4></article>
      <article><p class="muted mono">Contributors</p><h4>{format_number(analysis.metrics.contributors)}</h4></article>
    </section>

    <section class="section-actions">{repo_button(analysis, "Open Repository")}</section>
  """
    return render_page(analysis, "engineering", "Engineering", hero, body, extra_script=COPY_SCRIPT)


# --- Product ---


def feature_icon(index: int) -> str:
    return FEATURE_ICONS[index % len(FEATURE_ICONS)]


def product_value_line(analysis: AnalysisResult) -> str:
    return (
        f"{analysis.meta.name} converts implementation complexity into predictable value by "
        "packaging workflows, documentation, and reusable components for faster outcomes."
    )


def problem_narrative(analysis: AnalysisResult) -> str:
    industry = analysis.context.industry or "software teams"
    return (
        f"{industry} often face fragmented tooling, inconsistent setup quality, and long onboarding "
        f"cycles. {analysis.meta.name} addresses this by reducing ambiguity and giving teams a "
        "concrete path from idea to execution."
    )


def solution_narrative(analysis: AnalysisResult) -> str:
    first = analysis.features[0].name if analysis.features else "structured delivery"
    return (
        f"The repository aligns around {first} and complementary capabilities, creating a focused "
        "workflow that is easier to adopt, adapt, and scale across teams."
    )


def generate_product_page(analysis: AnalysisResult) -> str:
    meta = analysis.meta

    hero = f"""
    <section class="hero">
      <p class="eyebrow">Product Perspective</p>
      <h1>{escape_html(meta.name)} as User Value</h1>
      <p class="lead">{escape_html(product_value_line(analysis))}</p>
    </section>
  """

    journey = '<div class="journey-link">-&gt;</div>'.join(
        f'<div class="journey-step"><span>{n}</span><p>{step}</p></div>'
        for n, step in enumerate(JOURNEY_STEPS, start=1)
    )
    features = "".join(
        f"""
      <article class="card feature-card">
        <h4>{feature_icon(i)} {escape_html(f.name)}</h4>
        <p>{escape_html(f.description)}</p>
      </article>"""
        for i, f in enumerate(analysis.features[:8])
    )
    personas = "".join(
        f"""
      <article class="card">
        <h4>{escape_html(p.role)}</h4>
        <p><strong>Pain:</strong> {escape_html(p.pain)}</p>
        <p><strong>Benefit:</strong> {escape_html(p.benefit)}</p>
      </article>"""
        for p in analysis.personas[:6]
    )
    rows = "".join(
        f"<tr><td>{escape_html(before)}</td><td>{escape_html(after)}</td></tr>"
        for before, after in BEFORE_AFTER
    )

    body = f"""
    <section class="card">
      <h3>Problem</h3>
      <p>{escape_html(problem_narrative(analysis))}</p>
    </section>

    <section class="card">
      <h3>Solution</h3>
      <p>{escape_html(solution_narrative(analysis))}</p>
    </section>

    <section class="card">
      <h3>User Journey</h3>
      <div class="journey">{journey}</div>
    </section>

    <section class="split-grid">{features}
    </section>

    <section class="split-grid">{personas}
    </section>

    <section class="card">
      <h3>Before / After</h3>
      <table class="compare">
        <thead><tr><th>Before</th><th>After</th></tr></thead>
        <tbody>{rows}</tbody>
      </table>
    </section>

    <section class="card">
      <h3>Use Cases</h3>
      <ul class="plain-list">{_plain_list(analysis.use_cases[:6])}</ul>
      <div class="chip-row">{_chips(meta.topics, "chip subtle")}</div>
      <div class="section-actions">{repo_button(analysis, "Explore on GitHub")}</div>
    </section>
  """
    return render_page(analysis, "product", "Product", hero, body)


# --- Capability ---


def capability_thesis(analysis: AnalysisResult) -> str:
    domain = analysis.domains[0].name if analysis.domains else "Software Engineering"
    return (
        f"{analysis.meta.name} can be extended beyond its immediate use case into {domain} and "
        "adjacent domains by reusing its architecture patterns and tooling choices."
    )


def combination_plays(analysis: AnalysisResult) -> list[str]:
    """One play per domain; the closing clause branches on API/GraphQL presence."""
    name = analysis.meta.name
    api_ready = any("GraphQL" in t.name or "API" in t.name for t in analysis.tech_stack) or any(
        c.name == "API Layer" for c in analysis.architecture.components
    )
    plays = []
    for domain in analysis.domains[:6]:
        if api_ready:
            plays.append(
                f"{domain.name}: integrate {name}'s API-first components into partner platforms "
                "to unlock interoperability opportunities."
            )
        else:
            plays.append(
                f"{domain.name}: extend {name}'s core modules into adjacent team workflows "
                "without rebuilding project foundations."
            )
    return plays


def emerging_opportunity(analysis: AnalysisResult) -> str:
    topics = ", ".join(analysis.meta.topics[:3])
    return (
        f"As adoption of {topics or 'modular software systems'} continues, {analysis.meta.name} is "
        "positioned as a reusable foundation for teams seeking faster delivery with strong maintainability."
    )


def radial_points(domains) -> list[tuple[str, int, int]]:
    """Place one node per domain on a circle around the centre."""
    cx, cy = RADIAL_CENTER
    count = max(len(domains), 1)
    points = []
    for index, domain in enumerate(domains):
        angle = math.pi * 2 * index / count
        points.append((
            domain.name,
            math.floor(cx + math.cos(angle) * RADIAL_RADIUS + 0.5),
            math.floor(cy + math.sin(angle) * RADIAL_RADIUS + 0.5),
        ))
    return points


def build_domain_radial(repo_name: str, domains: tuple[Domain, ...]) -> str:
    cx, cy = RADIAL_CENTER
    points = radial_points(domains)
    spokes = "".join(
        f'<line x1="{cx}" y1="{cy}" x2="{x}" y2="{y}" stroke="#30363d" stroke-dasharray="4 5"/>'
        for _, x, y in points
    )
    nodes = "".join(
        f"""
      <circle cx="{x}" cy="{y}" r="38" fill="#0d1117" stroke="#30363d" stroke-width="1.5"></circle>
      <text x="{x}" y="{y}" text-anchor="middle" dominant-baseline="middle" fill="#8b949e" font-size="11" font-family="JetBrains Mono">{escape_html(trim_label(label, 15))}</text>"""
        for label, x, y in points
    )
    return f"""
    <svg width="640" height="340" viewBox="0 0 640 340" role="img" aria-label="Capability map">
      {spokes}
      <circle cx="{cx}" cy="{cy}" r="54" fill="#161b22" stroke-width="2" style="stroke: var(--accent)"></circle>
      <text x="{cx}" y="{cy}" text-anchor="middle" dominant-baseline="middle" fill="#e6edf3" font-size="13" font-family="JetBrains Mono">{escape_html(repo_name)}</text>{nodes}
    </svg>
  """


def generate_capability_page(analysis: AnalysisResult) -> str:
    meta = analysis.meta
    domains = analysis.domains[:6]

    hero = f"""
    <section class="hero">
      <p class="eyebrow">Capability Perspective</p>
      <h1>Not just {escape_html(meta.name)}. A platform for reusable capability.</h1>
      <p class="lead">{escape_html(capability_thesis(analysis))}</p>
    </section>
  """

    domain_cards = "".join(
        f"""
      <article class="card">
        <p class="mono muted">{escape_html(d.confidence)}</p>
        <h4>{escape_html(d.name)}</h4>
        <p><strong>Problem:</strong> Teams need dependable execution patterns under delivery pressure.</p>
        <p><strong>Fit:</strong> {escape_html(meta.name)} contributes modular building blocks and implementation guidance.</p>
        <p><strong>Impact:</strong> Faster time-to-value with lower architecture rework.</p>
      </article>"""
        for d in domains
    )

    body = f"""
    <section class="card">
      <h3>Capability Map</h3>
      <div class="radial-wrap">{build_domain_radial(meta.name, domains)}</div>
    </section>

    <section class="split-grid">{domain_cards}
    </section>

    <section class="card">
      <h3>Building Blocks</h3>
      <div class="chip-row">{_chips(item.name for item in analysis.tech_stack[:16])}</div>
    </section>

    <section class="card">
      <h3>Combination Plays</h3>
      <ul class="plain-list">{_plain_list(combination_plays(analysis))}</ul>
    </section>

    <section class="card">
      <h3>Emerging Opportunity</h3>
      <p>{escape_html(emerging_opportunity(analysis))}</p>
      <div class="section-actions">{repo_button(analysis, "Connect with the Maintainer")}</div>
    </section>
  """
    return render_page(analysis, "capability", "Capability", hero, body)


# --- Executive ---


def executive_statement(analysis: AnalysisResult) -> str:
    return (
        f"{analysis.meta.name} exists to turn a recurring engineering problem into a repeatable, "
        "scalable operating advantage."
    )


def executive_opportunity(analysis: AnalysisResult) -> str:
    metric_line = analysis.metrics.user_provided.metrics
    if metric_line:
        return (
            "This repository addresses an operational bottleneck with measurable impact potential: "
            f"{metric_line}. Public traction and contributor activity indicate strong relevance and "
            "continued momentum."
        )
    return (
        "This repository addresses a high-frequency execution challenge and provides a reusable "
        "implementation baseline. Community signals suggest it can reduce delivery risk while "
        "accelerating roadmap execution."
    )


def primary_audience(analysis: AnalysisResult) -> str:
    return analysis.personas[0].role if analysis.personas else "faster, maintainable software delivery"


def primary_capabilities(analysis: AnalysisResult) -> str:
    return ", ".join(item.name for item in analysis.tech_stack[:3]) or "core engineering patterns"


def generate_executive_page(analysis: AnalysisResult) -> str:
    meta = analysis.meta
    metrics = analysis.metrics

    hero = f"""
    <section class="hero hero-minimal">
      <p class="eyebrow">Executive Perspective</p>
      <h1>{escape_html(executive_statement(analysis))}</h1>
    </section>
  """

    stats = (
        ("Stars", format_number(metrics.stars)),
        ("Contributors", format_number(metrics.contributors)),
        ("Releases", format_number(metrics.releases)),
        ("Last Updated", format_date(metrics.last_updated)),
    )
    stat_cards = "".join(
        f'<article class="card"><p class="mono muted">{label}</p><h3>{escape_html(value)}</h3></article>'
        for label, value in stats
    )

    body = f"""
    <section class="card"><h3>The Opportunity</h3><p>{escape_html(executive_opportunity(analysis))}</p></section>

    <section class="card">
      <h3>What We Built</h3>
      <p>{escape_html(meta.name)} serves teams that need {escape_html(primary_audience(analysis))}. It combines {escape_html(primary_capabilities(analysis))}. The result is a reusable asset for faster, lower-risk delivery.</p>
    </section>

    <section class="metric-strip">{stat_cards}</section>

    <section class="card">
      <h3>Strategic Value</h3>
      <ul class="plain-list">{_plain_list(STRATEGIC_VALUE)}</ul>
    </section>

    <section class="section-actions">{repo_button(analysis, "Review the Repository ->")}</section>

    <section class="card quote"><blockquote>{escape_html(analysis.narrative)}</blockquote></section>
  """
    return render_page(analysis, "executive", "Executive", hero, body)
