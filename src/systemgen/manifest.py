"""Helpers for the JSON manifests shipped with the system template."""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, Iterable

from .errors import FileSystemError, ManifestParseError

__all__ = ["load_manifest", "write_manifest", "read_title", "write_title", "strip_generator_entries"]


LOGGER = logging.getLogger(__name__)

_TITLE_FIELD = re.compile(r'(?P<prefix>"title"\s*:\s*")(?P<value>(?:[^"\\]|\\.)*)(?P<suffix>")')


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise FileSystemError("read", path, str(exc)) from exc


def _write_text(path: Path, text: str) -> None:
    try:
        path.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise FileSystemError("write", path, str(exc)) from exc


def _parse(path: Path, text: str) -> dict[str, Any]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ManifestParseError(path, str(exc)) from exc
    if not isinstance(data, dict):
        raise ManifestParseError(path, "top-level value must be an object")
    return data


def load_manifest(path: str | Path) -> dict[str, Any]:
    """Read ``path`` and return its top-level JSON object."""

    path = Path(path)
    return _parse(path, _read_text(path))


def write_manifest(path: str | Path, data: dict[str, Any]) -> None:
    """Write ``data`` with two-space indentation, keeping key order."""

    _write_text(Path(path), json.dumps(data, indent=2, ensure_ascii=False) + "\n")


def read_title(path: str | Path) -> str | None:
    """Return the manifest's top-level ``title`` value, or ``None`` if absent."""

    title = load_manifest(path).get("title")
    return title if isinstance(title, str) else None


def write_title(path: str | Path, title: str) -> bool:
    """Set the manifest's ``title`` field to ``title``.

    Only the title value is touched; the rest of the file keeps its exact
    formatting. Returns ``True`` when the file was rewritten.
    """

    path = Path(path)
    text = _read_text(path)
    _parse(path, text)

    match = _TITLE_FIELD.search(text)
    if match is None:
        LOGGER.warning("%s has no title field; leaving it unchanged", path)
        return False

    value = json.dumps(title, ensure_ascii=False)[1:-1]
    if value == match.group("value"):
        return False

    updated = text[: match.start("value")] + value + text[match.end("value") :]
    _write_text(path, updated)
    return True


def strip_generator_entries(
    path: str | Path,
    *,
    script: str,
    dependencies: Iterable[str],
) -> dict[str, Any]:
    """Remove the generator script and its dev dependencies from ``path``.

    The manifest is parsed before anything is written, so a malformed file is
    reported without being modified. Returns the rewritten manifest.
    """

    path = Path(path)
    data = load_manifest(path)

    scripts = data.get("scripts")
    if isinstance(scripts, dict):
        scripts.pop(script, None)

    dev_dependencies = data.get("devDependencies")
    if isinstance(dev_dependencies, dict):
        for name in dependencies:
            dev_dependencies.pop(name, None)

    write_manifest(path, data)
    return data
