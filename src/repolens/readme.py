"""Markdown helpers: section capture, bullet extraction, text cleanup."""

from __future__ import annotations

import re

from .signals import MAX_SECTION_LINES

HEADING_RE = re.compile(r"^(#{1,3})\s+(.+)")
BULLET_RE = re.compile(r"^[-*+]\s+")
FENCED_SHELL_RE = re.compile(
    r"```(?:bash|sh|shell|zsh|powershell|cmd)?\n([\s\S]+?)```", re.IGNORECASE
)


def extract_section(readme: str, keywords: tuple[str, ...] | list[str]) -> str:
    """Return the body of the first heading whose text contains a keyword.

    Capture starts after the matching heading and stops at the next heading
    of the same or shallower depth, or after MAX_SECTION_LINES lines.
    """
    if not readme:
        return ""

    capturing = False
    depth = 0
    output: list[str] = []

    for line in readme.split("\n"):
        header = HEADING_RE.match(line)
        if header:
            current_depth = len(header.group(1))
            label = header.group(2).lower()
            if any(keyword in label for keyword in keywords):
                capturing = True
                depth = current_depth
                continue
            if capturing and current_depth <= depth:
                break
        if capturing:
            output.append(line)
            if len(output) >= MAX_SECTION_LINES:
                break

    return "\n".join(output).strip()


def extract_bullets(text: str) -> list[str]:
    """Return the text of every `-`, `*` or `+` bullet line."""
    bullets = []
    for line in str(text or "").split("\n"):
        line = line.strip()
        if BULLET_RE.match(line):
            bullets.append(BULLET_RE.sub("", line, count=1).strip())
    return bullets


def extract_shell_blocks(text: str, limit: int) -> list[str]:
    """Return up to `limit` non-empty fenced shell blocks."""
    blocks = []
    for match in FENCED_SHELL_RE.finditer(text or ""):
        block = match.group(1).strip()
        if block:
            blocks.append(block)
        if len(blocks) >= limit:
            break
    return blocks


def clean_sentence(text: str) -> str:
    """Strip markdown emphasis, heading and quote markers; collapse whitespace."""
    text = re.sub(r"[`*_>#]", "", str(text or ""))
    return re.sub(r"\s+", " ", text).strip()


def to_title(text: str) -> str:
    return " ".join(w[0].upper() + w[1:] if w else "" for w in str(text or "").split(" ")).strip()


def dedupe(items) -> list[str]:
    """Trim and de-duplicate strings, keeping first-seen order."""
    seen: dict[str, None] = {}
    for item in items:
        seen.setdefault(str(item or "").strip(), None)
    return list(seen)
