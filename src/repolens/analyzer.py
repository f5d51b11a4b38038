"""Heuristic repository analyzer. No network, no model.

Turns a RawSnapshot (plus optional user context) into an AnalysisResult:
normalized metadata, tech stack, architecture, features, audience,
domains, maturity and onboarding commands. Every rule is a fixed keyword
match, substring scan or threshold; every branch has a fallback.
"""

from __future__ import annotations

import datetime
import json
import math
from dataclasses import asdict, dataclass, field
from typing import Any, Callable

from .readme import (
    clean_sentence,
    dedupe,
    extract_bullets,
    extract_section,
    extract_shell_blocks,
    to_title,
)
from .signals import (
    COMPONENT_SIGNALS,
    DATA_PERSONA,
    DATA_PERSONA_TOKENS,
    DEFAULT_DOMAINS,
    DESIGN_KEYWORDS,
    DOMAIN_KEYWORDS,
    DOMAIN_README_CHARS,
    FALLBACK_COMPONENT,
    FALLBACK_DEPLOYMENT,
    FALLBACK_PATTERN,
    FEATURE_KEYWORDS,
    GENERIC_COMMAND,
    GENERIC_FEATURES,
    GENERIC_STEPS,
    GETTING_STARTED_KEYWORDS,
    GETTING_STARTED_README_CHARS,
    MANIFEST_COMMANDS,
    MATURITY_LEVELS,
    MATURITY_WEIGHTS,
    MAX_COMMAND_BLOCKS,
    MAX_COMPONENTS,
    MAX_DESIGN_DECISIONS,
    MAX_DOMAINS,
    MAX_FEATURES,
    MAX_PATTERNS,
    MAX_PERSONAS,
    MAX_TECH_STACK,
    MAX_USE_CASES,
    MIN_FEATURES,
    NODE_DEPENDENCIES,
    PATTERN_SIGNALS,
    PERSONA_CATALOG,
    PYTHON_DEPENDENCIES,
    README_TECH,
    SPARSE_COMPONENT_THRESHOLD,
    TREE_TECH,
    USE_CASE_KEYWORDS,
)
from .snapshot import (
    RawSnapshot,
    UserContext,
    get_bool,
    get_dict,
    get_int,
    get_list,
    get_str,
    split_user_list,
)


@dataclass(frozen=True)
class RepoMeta:
    """Normalized repository identity and counters."""

    name: str
    full_name: str
    owner: str
    repo: str
    description: str
    stars: int = 0
    forks: int = 0
    watchers: int = 0
    open_issues: int = 0
    primary_language: str = ""
    topics: tuple[str, ...] = ()
    license: str = "Not specified"
    homepage: str = ""
    created_at: str = ""
    updated_at: str = ""
    repo_url: str = ""
    is_archived: bool = False
    default_branch: str = "main"


@dataclass(frozen=True)
class TechItem:
    name: str
    category: str
    percentage: int | None = None


@dataclass(frozen=True)
class Component:
    name: str
    role: str


@dataclass(frozen=True)
class Architecture:
    components: tuple[Component, ...]
    patterns: tuple[str, ...]
    deployment: tuple[str, ...]


@dataclass(frozen=True)
class Feature:
    name: str
    description: str


@dataclass(frozen=True)
class Persona:
    role: str
    pain: str
    benefit: str


@dataclass(frozen=True)
class UserProvided:
    """Verbatim copy of the user-supplied context fields."""

    metrics: str = ""
    use_cases: tuple[str, ...] = ()
    industry: str = ""


@dataclass(frozen=True)
class Metrics:
    stars: int = 0
    forks: int = 0
    watchers: int = 0
    open_issues: int = 0
    contributors: int = 0
    releases: int = 0
    last_updated: str = ""
    days_since_update: int = 0
    user_provided: UserProvided = field(default_factory=UserProvided)


@dataclass(frozen=True)
class Domain:
    name: str
    confidence: str  # explicit | inferred | default


@dataclass(frozen=True)
class Maturity:
    level: str
    badge: str
    score: int


@dataclass(frozen=True)
class GettingStarted:
    steps: str
    commands: tuple[str, ...]


@dataclass(frozen=True)
class AnalysisResult:
    """Complete heuristic analysis of one repository snapshot."""

    meta: RepoMeta
    tech_stack: tuple[TechItem, ...]
    architecture: Architecture
    features: tuple[Feature, ...]
    use_cases: tuple[str, ...]
    personas: tuple[Persona, ...]
    metrics: Metrics
    narrative: str
    domains: tuple[Domain, ...]
    maturity: Maturity
    getting_started: GettingStarted
    design_decisions: tuple[str, ...]
    context: UserContext

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def summary_rows(self) -> list[tuple[str, str]]:
        """Key/value rows for a compact console summary."""
        rows = [
            ("Name", self.meta.full_name),
            ("Description", self.meta.description[:80]),
            ("Maturity", f"{self.maturity.level} (score {self.maturity.score})"),
        ]
        languages = [t for t in self.tech_stack if t.category == "language" and t.percentage is not None]
        if languages:
            rows.append(("Languages", ", ".join(f"{t.name} ({t.percentage}%)" for t in languages[:5])))
        others = [t.name for t in self.tech_stack if t.percentage is None]
        if others:
            rows.append(("Stack", ", ".join(others[:8])))
        rows.append(("Components", ", ".join(c.name for c in self.architecture.components)))
        rows.append(("Patterns", ", ".join(self.architecture.patterns)))
        rows.append(("Domains", ", ".join(f"{d.name} [{d.confidence}]" for d in self.domains)))
        rows.append(("Features", str(len(self.features))))
        return rows


def analyze_snapshot(
    snapshot: RawSnapshot,
    context: UserContext | None = None,
    now: datetime.datetime | None = None,
) -> AnalysisResult:
    """Run full heuristic analysis on a repository snapshot.

    Never raises for missing or malformed snapshot fields. `now` pins the
    clock used for `days_since_update`.
    """
    context = (context or UserContext()).normalized()
    meta = _extract_meta(snapshot)

    return AnalysisResult(
        meta=meta,
        tech_stack=_extract_tech_stack(snapshot),
        architecture=_extract_architecture(snapshot),
        features=_extract_features(snapshot.readme, meta),
        use_cases=_extract_use_cases(snapshot.readme, meta, context),
        personas=_infer_personas(snapshot.readme, meta, context),
        metrics=_extract_metrics(snapshot, context, now),
        narrative=_build_narrative(meta, context),
        domains=_infer_domains(snapshot, meta, context),
        maturity=_assess_maturity(snapshot),
        getting_started=_extract_getting_started(snapshot),
        design_decisions=_extract_design_decisions(snapshot),
        context=context,
    )


def _extract_meta(snapshot: RawSnapshot) -> RepoMeta:
    meta = snapshot.meta
    owner, repo = snapshot.owner, snapshot.repo
    name = get_str(meta, "name", repo)
    topics = tuple(str(t) for t in get_list(meta, "topics") if isinstance(t, str) and t)
    return RepoMeta(
        name=name,
        full_name=get_str(meta, "full_name", f"{owner}/{repo}"),
        owner=owner,
        repo=repo,
        description=get_str(meta, "description") or _infer_description(name, owner),
        stars=get_int(meta, "stargazers_count"),
        forks=get_int(meta, "forks_count"),
        watchers=get_int(meta, "watchers_count"),
        open_issues=get_int(meta, "open_issues_count"),
        primary_language=get_str(meta, "language"),
        topics=topics,
        license=get_str(get_dict(meta, "license"), "name", "Not specified"),
        homepage=get_str(meta, "homepage"),
        created_at=get_str(meta, "created_at"),
        updated_at=get_str(meta, "updated_at"),
        repo_url=get_str(meta, "html_url", f"https://github.com/{owner}/{repo}"),
        is_archived=get_bool(meta, "archived"),
        default_branch=get_str(meta, "default_branch", "main"),
    )


def _infer_description(name: str, owner: str) -> str:
    return f"{name} is an open-source project maintained by {owner}."


# --- Tech stack ---


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _push_unique(stack: list[TechItem], item: TechItem) -> None:
    if not any(existing.name == item.name for existing in stack):
        stack.append(item)


def _safe_json(text: str) -> dict[str, Any] | None:
    """Parse a JSON object; malformed or non-object input counts as absent."""
    if not text:
        return None
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, ValueError):
        return None
    return data if isinstance(data, dict) else None


def _path_matches(path: str, token: str) -> bool:
    if token.startswith("prefix:"):
        return path.startswith(token[len("prefix:"):])
    if token.startswith("suffix:"):
        return path.endswith(token[len("suffix:"):])
    if token.startswith("all:"):
        return all(part in path for part in token[len("all:"):].split("+"))
    return token in path


def _any_path(paths: list[str], tokens: tuple[str, ...]) -> bool:
    return any(_path_matches(path, token) for path in paths for token in tokens)


def _extract_tech_stack(snapshot: RawSnapshot) -> tuple[TechItem, ...]:
    stack: list[TechItem] = []

    languages = {name: size for name, size in snapshot.languages.items() if size >= 0}
    total = sum(languages.values())
    for name, size in sorted(languages.items(), key=lambda x: -x[1]):
        pct = _round_half_up(size / total * 100) if total else 0
        _push_unique(stack, TechItem(name=name, category="language", percentage=pct))

    package = _safe_json(snapshot.config("package.json"))
    if package:
        deps = {**get_dict(package, "dependencies"), **get_dict(package, "devDependencies")}
        _detect_dependencies(deps.keys(), NODE_DEPENDENCIES, stack)
        node_engine = get_str(get_dict(package, "engines"), "node")
        if node_engine:
            _push_unique(stack, TechItem(name=f"Node.js {node_engine}", category="runtime"))

    requirements = snapshot.config("requirements.txt").lower()
    if requirements:
        for token, (name, category) in PYTHON_DEPENDENCIES:
            if token in requirements:
                _push_unique(stack, TechItem(name=name, category=category))

    paths = snapshot.lower_paths
    for tokens, (name, category) in TREE_TECH:
        if _any_path(paths, tokens):
            _push_unique(stack, TechItem(name=name, category=category))

    readme = snapshot.readme.lower()
    for tokens, (name, category) in README_TECH:
        if any(token in readme for token in tokens):
            _push_unique(stack, TechItem(name=name, category=category))

    return tuple(stack[:MAX_TECH_STACK])


def _detect_dependencies(names, table, stack: list[TechItem]) -> None:
    """Match dependency names by case-insensitive substring against a token table."""
    for dep in names:
        normalized = str(dep).lower()
        for token, (name, category) in table:
            if token in normalized:
                _push_unique(stack, TechItem(name=name, category=category))


# --- Architecture ---


def _extract_architecture(snapshot: RawSnapshot) -> Architecture:
    paths = snapshot.lower_paths

    components = [
        Component(name=name, role=role)
        for tokens, (name, role) in COMPONENT_SIGNALS
        if _any_path(paths, tokens)
    ]
    if len(components) <= SPARSE_COMPONENT_THRESHOLD:
        components.append(Component(*FALLBACK_COMPONENT))

    patterns = [label for tokens, label in PATTERN_SIGNALS if _any_path(paths, tokens)]
    if not patterns:
        patterns.append(FALLBACK_PATTERN)

    deployment = []
    if "dockerfile" in paths or "docker-compose.yml" in paths:
        deployment.append("Containerized deployment")
    if any(".github/workflows" in path for path in paths):
        deployment.append("Automated CI/CD workflows")
    if snapshot.config("go.mod"):
        deployment.append("Go module packaging")
    if snapshot.config("Cargo.toml"):
        deployment.append("Rust cargo build chain")
    if not deployment:
        deployment.append(FALLBACK_DEPLOYMENT)

    return Architecture(
        components=tuple(components[:MAX_COMPONENTS]),
        patterns=tuple(patterns[:MAX_PATTERNS]),
        deployment=tuple(deployment),
    )


# --- Features ---


def _first_non_empty(strategies: list[Callable[[], list]]) -> list:
    """Evaluate strategies in order, returning the first non-empty result."""
    for strategy in strategies:
        result = strategy()
        if result:
            return result
    return []


def _readme_features(readme: str) -> list[Feature]:
    section = extract_section(readme, FEATURE_KEYWORDS)
    features = []
    for line in extract_bullets(section or readme)[:MAX_FEATURES]:
        cleaned = clean_sentence(line)
        if len(cleaned) > 4:
            features.append(Feature(name=to_title(cleaned[:48]), description=cleaned))
    return features


def _topic_features(meta: RepoMeta) -> list[Feature]:
    features = []
    for topic in meta.topics[:6]:
        words = topic.replace("-", " ")
        features.append(Feature(
            name=to_title(words),
            description=f"Supports {words} workflows through focused project components.",
        ))
    return features


def _generic_features() -> list[Feature]:
    return [Feature(name=name, description=desc) for name, desc in GENERIC_FEATURES]


def _extract_features(readme: str, meta: RepoMeta) -> tuple[Feature, ...]:
    features = _readme_features(readme)
    if len(features) < MIN_FEATURES:
        features.extend(_topic_features(meta))

    if not features:
        features = _generic_features()
    elif len(features) < MIN_FEATURES:
        # Pad thin results so every page has a full feature grid.
        names = {f.name for f in features}
        for generic in _generic_features():
            if len(features) >= MIN_FEATURES:
                break
            if generic.name not in names:
                features.append(generic)

    return tuple(features[:MAX_FEATURES])


# --- Use cases & personas ---


def _extract_use_cases(readme: str, meta: RepoMeta, context: UserContext) -> tuple[str, ...]:
    use_cases = list(split_user_list(context.use_cases))

    section = extract_section(readme, USE_CASE_KEYWORDS)
    use_cases.extend(clean_sentence(line) for line in extract_bullets(section)[:6])

    language = meta.primary_language or "software"
    use_cases.extend([
        f"Accelerate {language} project delivery with reusable foundations.",
        "Standardize team workflows with a documented, shareable implementation pattern.",
        "Use as a reference implementation for onboarding and architecture alignment.",
    ])

    return tuple(item for item in dedupe(use_cases) if item)[:MAX_USE_CASES]


def _infer_personas(readme: str, meta: RepoMeta, context: UserContext) -> tuple[Persona, ...]:
    personas = [
        Persona(
            role=role,
            pain=f"Needs a reliable way to execute {meta.name or 'the project'} outcomes quickly.",
            benefit="Gets a structured, reusable implementation with less uncertainty.",
        )
        for role in split_user_list(context.personas)
    ]

    candidates = [Persona(*entry) for entry in PERSONA_CATALOG]
    text = f"{readme} {' '.join(meta.topics)}".lower()
    if any(token in text for token in DATA_PERSONA_TOKENS):
        candidates.insert(0, Persona(*DATA_PERSONA))

    for candidate in candidates:
        if not any(existing.role == candidate.role for existing in personas):
            personas.append(candidate)

    return tuple(personas[:MAX_PERSONAS])


# --- Metrics & narrative ---


def parse_timestamp(value: str) -> datetime.datetime | None:
    """Parse an ISO-8601 timestamp; returns None when unparseable."""
    if not value:
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=datetime.timezone.utc)
    return parsed


def _extract_metrics(
    snapshot: RawSnapshot,
    context: UserContext,
    now: datetime.datetime | None,
) -> Metrics:
    meta = snapshot.meta
    now = now or datetime.datetime.now(datetime.timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=datetime.timezone.utc)

    updated_at = get_str(meta, "updated_at")
    last_updated = parse_timestamp(updated_at) or now
    days = max(0, _round_half_up((now - last_updated).total_seconds() / 86400))

    return Metrics(
        stars=get_int(meta, "stargazers_count"),
        forks=get_int(meta, "forks_count"),
        watchers=get_int(meta, "subscribers_count") or get_int(meta, "watchers_count"),
        open_issues=get_int(meta, "open_issues_count"),
        contributors=len(snapshot.contributors),
        releases=len(snapshot.releases),
        last_updated=updated_at,
        days_since_update=days,
        user_provided=UserProvided(
            metrics=context.metrics,
            use_cases=tuple(split_user_list(context.use_cases)),
            industry=context.industry,
        ),
    )


def _build_narrative(meta: RepoMeta, context: UserContext) -> str:
    use_cases = split_user_list(context.use_cases)
    lead = (
        f"{meta.name or 'This project'} exists to solve a practical delivery problem "
        "with a maintainable, open-source approach."
    )
    body = (
        f"{meta.description.rstrip('.')}. It combines reusable technical foundations with "
        "documentation that helps teams move from setup to value quickly."
    )
    if context.industry or use_cases:
        tail = (
            f"The strongest fit is for {context.industry or 'software teams'} focused on "
            f"{use_cases[0] if use_cases else 'faster, lower-risk execution'}."
        )
    else:
        tail = "Its strongest value is reducing implementation friction for teams shipping in iterative cycles."
    return f"{lead} {body} {tail}"


# --- Domains ---


def _infer_domains(snapshot: RawSnapshot, meta: RepoMeta, context: UserContext) -> tuple[Domain, ...]:
    domains: list[Domain] = []
    if context.industry:
        domains.append(Domain(name=context.industry, confidence="explicit"))

    # Raw description only; the generated fallback sentence must not match tokens.
    description = get_str(snapshot.meta, "description")
    text = f"{' '.join(meta.topics)} {description} {snapshot.readme[:DOMAIN_README_CHARS]}".lower()
    for token, label in DOMAIN_KEYWORDS:
        if token in text and not any(d.name == label for d in domains):
            domains.append(Domain(name=label, confidence="inferred"))

    for label in DEFAULT_DOMAINS:
        if not any(d.name == label for d in domains):
            domains.append(Domain(name=label, confidence="default"))

    return tuple(domains[:MAX_DOMAINS])


# --- Maturity ---


def _maturity_signals(snapshot: RawSnapshot) -> dict[str, int]:
    paths = snapshot.paths
    return {
        "stars": get_int(snapshot.meta, "stargazers_count"),
        "releases": len(snapshot.releases),
        "contributors": len(snapshot.contributors),
        "contributing_guide": int("CONTRIBUTING.md" in paths),
        "test_paths": int(any("test" in p or "spec" in p for p in snapshot.lower_paths)),
        "ci_workflows": int(any(p.startswith(".github/workflows/") for p in paths)),
    }


def _assess_maturity(snapshot: RawSnapshot) -> Maturity:
    signals = _maturity_signals(snapshot)
    score = sum(points for signal, threshold, points in MATURITY_WEIGHTS if signals[signal] > threshold)
    level, badge = next((lv, b) for minimum, lv, b in MATURITY_LEVELS if score >= minimum)
    return Maturity(level=level, badge=badge, score=score)


# --- Getting started & design decisions ---


def _extract_getting_started(snapshot: RawSnapshot) -> GettingStarted:
    readme = snapshot.readme
    section = extract_section(readme, GETTING_STARTED_KEYWORDS)
    search_in = section or readme[:GETTING_STARTED_README_CHARS]

    strategies: list[Callable[[], list]] = [
        lambda: extract_shell_blocks(search_in, MAX_COMMAND_BLOCKS),
    ]
    for manifest, commands in MANIFEST_COMMANDS:
        strategies.append(lambda m=manifest, c=commands: [c] if snapshot.config(m) else [])
    strategies.append(lambda: [GENERIC_COMMAND])

    return GettingStarted(
        steps=section or GENERIC_STEPS,
        commands=tuple(_first_non_empty(strategies)),
    )


def _extract_design_decisions(snapshot: RawSnapshot) -> tuple[str, ...]:
    section = extract_section(snapshot.readme, DESIGN_KEYWORDS)
    decisions = [c for c in (clean_sentence(line) for line in extract_bullets(section)) if len(c) > 6]

    if not decisions:
        package = _safe_json(snapshot.config("package.json"))
        if package:
            if package.get("type") == "module":
                decisions.append("Adopts ES modules for explicit imports and modern runtime compatibility.")
            if get_str(get_dict(package, "scripts"), "test"):
                decisions.append("Defines test automation scripts to reduce release risk.")

    return tuple(dedupe(decisions))[:MAX_DESIGN_DECISIONS]
