"""OpenAPI document loading from a file, a URL or standard input."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import IO, Any, Final

import requests
import yaml
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .errors import DocumentError

logger = logging.getLogger(__name__)

YAML_SUFFIXES: Final[frozenset[str]] = frozenset({".yml", ".yaml"})
FETCH_TIMEOUT: Final[float] = 30.0


def _build_session() -> requests.Session:
    """Create a session that retries transient server errors."""
    session = requests.Session()
    retries = Retry(total=3, backoff_factor=0.5, status_forcelist=(500, 502, 503, 504))
    adapter = HTTPAdapter(max_retries=retries)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    return session


def _ensure_mapping(data: Any, source: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise DocumentError("Document root must be a mapping", source)
    return data


def parse_document(raw: str, source: str, *, yaml_first: bool = False) -> dict[str, Any]:
    """Parse document text as JSON, falling back to YAML.

    Args:
        raw: The document text.
        source: Where the text came from, used in error messages.
        yaml_first: Skip the JSON attempt (for ``.yaml`` files).

    Raises:
        DocumentError: If the text is neither valid JSON nor valid YAML.
    """
    if not yaml_first:
        try:
            return _ensure_mapping(json.loads(raw), source)
        except json.JSONDecodeError:
            pass

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise DocumentError(f"Invalid JSON or YAML: {e}", source) from e
    return _ensure_mapping(data, source)


def fetch_document(url: str) -> dict[str, Any]:
    """Fetch a JSON/YAML document by URL.

    Uses urllib3 Retry via requests.adapters.HTTPAdapter.
    """
    logger.info("fetching schema from %s", url)
    session = _build_session()
    try:
        resp = session.get(url, timeout=FETCH_TIMEOUT)
        resp.raise_for_status()
    except requests.RequestException as e:
        raise DocumentError(f"Failed to fetch document: {e}", url) from e
    finally:
        session.close()

    return parse_document(resp.text, url)


def read_document_file(path: Path) -> dict[str, Any]:
    """Load a document from a file.

    Supports both YAML and JSON formats; the suffix decides which parser is
    tried first.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise DocumentError(f"Failed to read document: {e}", str(path)) from e
    return parse_document(raw, str(path), yaml_first=path.suffix.lower() in YAML_SUFFIXES)


def read_document_stream(stream: IO[str]) -> dict[str, Any]:
    """Load a document from an open text stream."""
    return parse_document(stream.read(), "<stdin>")


def load_document(source: str | None) -> dict[str, Any]:
    """Load an OpenAPI document from ``source``.

    ``source`` may be an ``http(s)://`` URL, a local path, or ``None`` to read
    standard input.

    Raises:
        DocumentError: If the document cannot be read or parsed.
    """
    if source is None:
        return read_document_stream(sys.stdin)
    if source.startswith(("http://", "https://")):
        return fetch_document(source)
    return read_document_file(Path(source))
