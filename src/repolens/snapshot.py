"""Raw repository snapshot and optional user context.

A snapshot is the complete input bundle for one run: repository metadata,
readme text, file tree, releases, contributors, language byte counts and
the contents of a few well-known config files. Every read goes through
the coalescing accessors below so malformed fields fall back to defaults.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field, replace
from typing import Any


def get_str(data: Any, key: str, default: str = "") -> str:
    """Read a string field, returning default when absent or empty."""
    if not isinstance(data, dict):
        return default
    value = data.get(key)
    if value is None or isinstance(value, (dict, list)):
        return default
    value = str(value)
    return value if value else default


def get_int(data: Any, key: str, default: int = 0) -> int:
    """Read a numeric field; missing or non-numeric values become default."""
    if not isinstance(data, dict):
        return default
    value = data.get(key)
    if isinstance(value, bool) or value is None:
        return default
    if isinstance(value, int):
        return value
    try:
        number = float(value) if isinstance(value, float) else float(str(value))
    except (ValueError, OverflowError):
        return default
    if not math.isfinite(number):
        return default
    return int(number)


def get_bool(data: Any, key: str) -> bool:
    if not isinstance(data, dict):
        return False
    return bool(data.get(key))


def get_list(data: Any, key: str) -> list:
    if not isinstance(data, dict):
        return []
    value = data.get(key)
    return list(value) if isinstance(value, (list, tuple)) else []


def get_dict(data: Any, key: str) -> dict:
    if not isinstance(data, dict):
        return {}
    value = data.get(key)
    return dict(value) if isinstance(value, dict) else {}


def split_user_list(value: str | None) -> list[str]:
    """Split free text on newlines, commas and semicolons, dropping blanks."""
    parts = re.split(r"\r?\n|,|;", str(value or ""))
    return [p.strip() for p in parts if p.strip()]


@dataclass(frozen=True)
class TreeEntry:
    """One path in the repository tree."""

    path: str
    type: str = "blob"

    @property
    def lower(self) -> str:
        return self.path.lower()


@dataclass(frozen=True)
class UserContext:
    """Optional free-text context supplied alongside a repository."""

    industry: str = ""
    use_cases: str = ""
    metrics: str = ""
    personas: str = ""

    def normalized(self) -> UserContext:
        return UserContext(
            industry=str(self.industry or "").strip(),
            use_cases=str(self.use_cases or "").strip(),
            metrics=str(self.metrics or "").strip(),
            personas=str(self.personas or "").strip(),
        )

    @classmethod
    def from_dict(cls, data: Any) -> UserContext:
        return cls(
            industry=get_str(data, "industry"),
            use_cases=get_str(data, "use_cases") or get_str(data, "useCases"),
            metrics=get_str(data, "metrics"),
            personas=get_str(data, "personas"),
        ).normalized()

    def to_dict(self) -> dict[str, str]:
        return {
            "industry": self.industry,
            "use_cases": self.use_cases,
            "metrics": self.metrics,
            "personas": self.personas,
        }


@dataclass(frozen=True)
class RawSnapshot:
    """Everything fetched about one repository at one point in time."""

    owner: str
    repo: str
    meta: dict[str, Any] = field(default_factory=dict)
    readme: str = ""
    file_tree: tuple[TreeEntry, ...] = ()
    releases: tuple[dict[str, Any], ...] = ()
    contributors: tuple[dict[str, Any], ...] = ()
    languages: dict[str, int] = field(default_factory=dict)
    config_contents: dict[str, str] = field(default_factory=dict)

    @property
    def paths(self) -> list[str]:
        return [entry.path for entry in self.file_tree]

    @property
    def lower_paths(self) -> list[str]:
        return [entry.lower for entry in self.file_tree]

    def config(self, name: str) -> str:
        """Return a config file's text, or empty string when absent."""
        value = self.config_contents.get(name)
        return value if isinstance(value, str) else ""

    def with_meta(self, **overrides: Any) -> RawSnapshot:
        return replace(self, meta={**self.meta, **overrides})

    @classmethod
    def from_dict(cls, data: Any) -> RawSnapshot:
        """Build a snapshot from a loosely-typed mapping.

        Accepts both the snake_case layout written by ``to_dict`` and the
        camelCase keys used by browser exports (``fileTree``,
        ``configContents``).
        """
        if not isinstance(data, dict):
            data = {}
        meta = get_dict(data, "meta")
        owner = get_str(data, "owner") or get_str(get_dict(meta, "owner"), "login") or "unknown"
        repo = get_str(data, "repo") or get_str(meta, "name") or "repository"

        tree_raw = get_list(data, "file_tree") or get_list(data, "fileTree")
        tree = []
        for node in tree_raw:
            if isinstance(node, str):
                tree.append(TreeEntry(path=node))
            elif isinstance(node, dict) and isinstance(node.get("path"), str):
                tree.append(TreeEntry(path=node["path"], type=get_str(node, "type", "blob")))

        languages = {}
        for name, size in get_dict(data, "languages").items():
            languages[str(name)] = get_int({"v": size}, "v")

        configs_raw = get_dict(data, "config_contents") or get_dict(data, "configContents")
        configs = {str(k): v for k, v in configs_raw.items() if isinstance(v, str)}

        return cls(
            owner=owner,
            repo=repo,
            meta=meta,
            readme=get_str(data, "readme"),
            file_tree=tuple(tree),
            releases=tuple(r for r in get_list(data, "releases") if isinstance(r, dict)),
            contributors=tuple(c for c in get_list(data, "contributors") if isinstance(c, dict)),
            languages=languages,
            config_contents=configs,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "owner": self.owner,
            "repo": self.repo,
            "meta": self.meta,
            "readme": self.readme,
            "file_tree": [{"path": e.path, "type": e.type} for e in self.file_tree],
            "releases": list(self.releases),
            "contributors": list(self.contributors),
            "languages": self.languages,
            "config_contents": self.config_contents,
        }
