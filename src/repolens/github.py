"""GitHub REST client - builds a RawSnapshot for one public repository.

Fetches metadata, readme, recursive tree, releases, contributors,
language byte counts and a curated set of config files. The metadata
request decides success; every other request degrades to an empty value.
"""

from __future__ import annotations

import base64
import re
from concurrent.futures import ThreadPoolExecutor
from typing import Any
from urllib.parse import quote

import httpx

from .snapshot import RawSnapshot, TreeEntry

GITHUB_API_BASE_URL = "https://api.github.com"
GITHUB_ACCEPT_HEADER = "application/vnd.github+json"
REQUEST_TIMEOUT = 20
README_MAX_CHARS = 12000
CONFIG_MAX_CHARS = 5000
TREE_MAX_ENTRIES = 3000
RELEASES_PER_PAGE = 10
CONTRIBUTORS_PER_PAGE = 20
MAX_WORKERS = 6
TRUNCATED_MARKER = "\n...[truncated]"

CONFIG_FILES = (
    "package.json",
    "requirements.txt",
    "pyproject.toml",
    "Cargo.toml",
    "go.mod",
    "pom.xml",
    "build.gradle",
    "docker-compose.yml",
    "Dockerfile",
    ".env.example",
    "CONTRIBUTING.md",
    "CHANGELOG.md",
    "architecture.md",
    "README.md",
)

FETCH_ERROR_MESSAGES = {
    "invalid_url": "Please enter a valid GitHub repository: https://github.com/owner/repo or owner/repo",
    "not_found": "Repository not found. Make sure it is public and the URL is correct.",
    "rate_limited": "GitHub rate limit reached. Wait a few minutes or pass --token / GITHUB_TOKEN.",
    "upstream_error": "GitHub API error. Please try again.",
    "network_error": "Connection failed. Check your internet connection.",
    "unknown": "Something went wrong. Please try again.",
}

REPO_REF_RE = re.compile(
    r"^(?:(?:https?://)?(?:www\.)?github\.com/)?([A-Za-z0-9_.-]+)/([A-Za-z0-9_.-]+?)(?:\.git)?/?$"
)


class FetchError(Exception):
    """Error retrieving repository data, tagged with a taxonomy code."""

    def __init__(self, code: str, message: str | None = None):
        self.code = code if code in FETCH_ERROR_MESSAGES else "unknown"
        super().__init__(message or FETCH_ERROR_MESSAGES[self.code])


def parse_repo_ref(ref: str) -> tuple[str, str]:
    """Split a GitHub URL or owner/repo shorthand into (owner, repo)."""
    text = str(ref or "").strip()
    text = re.sub(r"[?#].*$", "", text)
    if text.startswith(("http://", "https://")) and "github.com/" not in text:
        raise FetchError("invalid_url")
    # Deep links like /owner/repo/tree/main keep only the first two segments.
    deep = re.match(r"^((?:https?://)?(?:www\.)?github\.com/[^/]+/[^/]+)/.+$", text)
    if deep:
        text = deep.group(1)
    match = REPO_REF_RE.match(text)
    if not match:
        raise FetchError("invalid_url")
    return match.group(1), match.group(2)


def decode_content(content: str) -> str:
    """Decode a base64 contents payload as UTF-8, replacing bad bytes."""
    raw = base64.b64decode(str(content or "").replace("\n", ""))
    return raw.decode("utf-8", errors="replace")


def truncate(text: str, limit: int) -> str:
    return f"{text[:limit]}{TRUNCATED_MARKER}" if len(text) > limit else text


class GitHubClient:
    """Client for the GitHub REST API."""

    def __init__(
        self,
        token: str | None = None,
        base_url: str = GITHUB_API_BASE_URL,
        timeout: float = REQUEST_TIMEOUT,
    ):
        self.base_url = base_url.rstrip("/")
        headers = {"Accept": GITHUB_ACCEPT_HEADER}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.Client(headers=headers, timeout=timeout)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> GitHubClient:
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def _get(self, path: str) -> httpx.Response:
        try:
            return self._client.get(f"{self.base_url}{path}")
        except httpx.TransportError as e:
            raise FetchError("network_error") from e
        except httpx.HTTPError as e:
            raise FetchError("unknown") from e

    def _get_json(self, path: str, default: Any) -> Any:
        """GET a secondary resource; any failure yields default."""
        try:
            resp = self._get(path)
            if resp.status_code != 200:
                return default
            data = resp.json()
        except (FetchError, ValueError):
            return default
        return data if isinstance(data, type(default)) else default

    def fetch_meta(self, owner: str, repo: str) -> dict[str, Any]:
        resp = self._get(f"/repos/{owner}/{repo}")
        if resp.status_code == 404:
            raise FetchError("not_found")
        if resp.status_code in (403, 429):
            raise FetchError("rate_limited")
        if resp.status_code != 200:
            raise FetchError("upstream_error", f"GitHub API error: {resp.status_code}")
        try:
            data = resp.json()
        except ValueError as e:
            raise FetchError("upstream_error", "GitHub returned an unreadable response") from e
        if not isinstance(data, dict):
            raise FetchError("upstream_error", "GitHub returned an unexpected response")
        return data

    def fetch_readme(self, owner: str, repo: str) -> str:
        data = self._get_json(f"/repos/{owner}/{repo}/readme", {})
        try:
            text = decode_content(data.get("content", ""))
        except ValueError:
            return ""
        return truncate(text, README_MAX_CHARS)

    def fetch_tree(self, owner: str, repo: str) -> list[TreeEntry]:
        data = self._get_json(f"/repos/{owner}/{repo}/git/trees/HEAD?recursive=1", {})
        nodes = data.get("tree") if isinstance(data.get("tree"), list) else []
        entries = []
        for node in nodes:
            if not isinstance(node, dict) or not isinstance(node.get("path"), str):
                continue
            path = node["path"]
            # .github/ stays: workflow paths feed CI and maturity signals.
            if path == ".git" or path.startswith(".git/"):
                continue
            entries.append(TreeEntry(path=path, type=node.get("type") or "blob"))
        return entries[:TREE_MAX_ENTRIES]

    def fetch_file(self, owner: str, repo: str, path: str) -> str | None:
        data = self._get_json(f"/repos/{owner}/{repo}/contents/{quote(path)}", {})
        if "content" not in data:
            return None
        try:
            return truncate(decode_content(data["content"]), CONFIG_MAX_CHARS)
        except ValueError:
            return None

    def fetch_config_contents(self, owner: str, repo: str, tree: list[TreeEntry]) -> dict[str, str]:
        wanted = [e.path for e in tree if e.type == "blob" and e.path in CONFIG_FILES]
        if not wanted:
            return {}
        with ThreadPoolExecutor(max_workers=MAX_WORKERS) as pool:
            results = list(pool.map(lambda p: (p, self.fetch_file(owner, repo, p)), wanted))
        return {path: text for path, text in results if text is not None}

    def fetch_snapshot(self, ref: str, progress_callback=None) -> RawSnapshot:
        """Fetch everything needed to analyze one repository."""
        owner, repo = parse_repo_ref(ref)
        total = 3

        if progress_callback:
            progress_callback(f"Fetching {owner}/{repo} metadata...", 1, total)

        with ThreadPoolExecutor(max_workers=MAX_WORKERS) as pool:
            meta_f = pool.submit(self.fetch_meta, owner, repo)
            readme_f = pool.submit(self.fetch_readme, owner, repo)
            tree_f = pool.submit(self.fetch_tree, owner, repo)
            releases_f = pool.submit(
                self._get_json, f"/repos/{owner}/{repo}/releases?per_page={RELEASES_PER_PAGE}", []
            )
            contributors_f = pool.submit(
                self._get_json, f"/repos/{owner}/{repo}/contributors?per_page={CONTRIBUTORS_PER_PAGE}", []
            )
            languages_f = pool.submit(self._get_json, f"/repos/{owner}/{repo}/languages", {})
            meta = meta_f.result()

        tree = tree_f.result()
        if progress_callback:
            progress_callback(f"Reading config files ({len(tree)} paths)...", 2, total)
        configs = self.fetch_config_contents(owner, repo, tree)

        if progress_callback:
            progress_callback("Snapshot complete", 3, total)

        return RawSnapshot(
            owner=owner,
            repo=repo,
            meta=meta,
            readme=readme_f.result(),
            file_tree=tuple(tree),
            releases=tuple(r for r in releases_f.result() if isinstance(r, dict)),
            contributors=tuple(c for c in contributors_f.result() if isinstance(c, dict)),
            languages={k: v for k, v in languages_f.result().items() if isinstance(v, int)},
            config_contents=configs,
        )
