"""Local HTTP server for previewing a generated document set.

Serves the five HTML documents from an output directory written by
``repolens generate``, plus the analysis JSON when present.
"""

from __future__ import annotations

import threading
import webbrowser
from functools import partial
from http.server import HTTPServer, SimpleHTTPRequestHandler
from pathlib import Path

from .layout import PAGE_KEYS, resolve_page_key
from .output import ANALYSIS_FILENAME

DEFAULT_PORT = 8420


def _load_pages(out_dir: Path) -> dict[str, str]:
    """Load generated documents from an output directory."""
    pages = {}
    for key in PAGE_KEYS:
        path = out_dir / f"{key}.html"
        if path.is_file():
            pages[key] = path.read_text(encoding="utf-8")

    if not pages:
        raise FileNotFoundError(
            f"No generated documents found in {out_dir}. "
            "Run 'repolens generate <repo>' first."
        )
    return pages


class RepoLensHandler(SimpleHTTPRequestHandler):
    """HTTP handler that serves generated documents and analysis data."""

    def __init__(self, *args, pages: dict, analysis_json: str | None, **kwargs):
        self._pages = pages
        self._analysis_json = analysis_json
        super().__init__(*args, **kwargs)

    def do_GET(self):
        path = self.path.split("?", 1)[0]
        if path == "/api/analysis":
            self._serve_analysis()
            return
        if path in ("/", ""):
            path = "/index.html"
        try:
            key = resolve_page_key(path.lstrip("/"))
        except KeyError:
            self.send_error(404)
            return
        if key not in self._pages:
            self.send_error(404)
            return
        self._send(self._pages[key].encode("utf-8"), "text/html; charset=utf-8")

    def _serve_analysis(self):
        if self._analysis_json is None:
            self.send_error(404)
            return
        self._send(self._analysis_json.encode("utf-8"), "application/json")

    def _send(self, content: bytes, content_type: str):
        self.send_response(200)
        self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(len(content)))
        self.end_headers()
        self.wfile.write(content)

    def log_message(self, format, *args):
        """Suppress default access logs."""
        pass


def start_server(
    out_dir: Path,
    port: int = DEFAULT_PORT,
    open_browser: bool = False,
) -> None:
    """Start the local preview server.

    Args:
        out_dir: Directory holding <key>.html documents
        port: Port to serve on
        open_browser: Whether to auto-open in browser
    """
    out_dir = Path(out_dir)
    pages = _load_pages(out_dir)
    analysis_path = out_dir / ANALYSIS_FILENAME
    analysis_json = analysis_path.read_text(encoding="utf-8") if analysis_path.is_file() else None

    handler = partial(RepoLensHandler, pages=pages, analysis_json=analysis_json)
    HTTPServer.allow_reuse_address = True
    server = HTTPServer(("127.0.0.1", port), handler)

    url = f"http://localhost:{port}"

    if open_browser:
        threading.Timer(0.5, lambda: webbrowser.open(url)).start()

    try:
        server.serve_forever()
    except KeyboardInterrupt:
        pass
    finally:
        server.server_close()
