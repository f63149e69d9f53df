"""
JSON Schema validation for hookforge manifests.

Usage:
    from hookforge.manifest.validator import validate_manifest_file

    issues = validate_manifest_file(Path("hookforge.yaml"))
    for issue in issues:
        print(issue)
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError

logger = logging.getLogger(__name__)

_SCHEMAS_DIR = Path(__file__).parent / "schemas"
_MANIFEST_SCHEMA = "manifest.schema.json"


@dataclass
class ManifestIssue:
    """A single validation finding for a manifest."""

    file: Path | None
    message: str
    path: str = ""  # location within the document, e.g. "taps[2]/stage"
    severity: str = "error"  # "error" | "warning"

    def __str__(self) -> str:
        loc = f" at {self.path}" if self.path else ""
        source = self.file if self.file is not None else "<manifest>"
        return f"[{self.severity.upper()}] {source}{loc}: {self.message}"


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


@lru_cache(maxsize=None)
def _validator() -> Draft202012Validator:
    with (_SCHEMAS_DIR / _MANIFEST_SCHEMA).open() as fh:
        schema = json.load(fh)
    return Draft202012Validator(schema)


def _json_path(error: ValidationError) -> str:
    """Convert a jsonschema ValidationError path to a readable string."""
    parts = []
    for p in error.absolute_path:
        if isinstance(p, int):
            parts.append(f"[{p}]")
        else:
            parts.append(str(p))
    return "/".join(parts).replace("/[", "[")


def _check_references(data: dict[str, Any], file: Path | None) -> list[ManifestIssue]:
    """Taps must target declared hooks; duplicate names on one hook are suspicious."""
    issues: list[ManifestIssue] = []
    hooks = data.get("hooks") or {}
    seen: set[tuple[str, str]] = set()
    for index, tap in enumerate(data.get("taps") or []):
        hook_name = tap.get("hook")
        if hook_name not in hooks:
            issues.append(
                ManifestIssue(
                    file=file,
                    message=f"Tap '{tap.get('name')}' targets undeclared hook '{hook_name}'",
                    path=f"taps[{index}]/hook",
                )
            )
            continue
        key = (hook_name, tap.get("name"))
        if key in seen:
            issues.append(
                ManifestIssue(
                    file=file,
                    message=f"Tap name '{key[1]}' is registered twice on hook '{hook_name}'",
                    path=f"taps[{index}]/name",
                    severity="warning",
                )
            )
        seen.add(key)
    return issues


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def validate_manifest_data(data: Any, file: Path | None = None) -> list[ManifestIssue]:
    """
    Validate an already-parsed manifest document.

    Args:
        data: Parsed YAML document.
        file: Source file, used in issue messages.

    Returns:
        A list of :class:`ManifestIssue` objects (empty on success).
    """
    if data is None:
        return [ManifestIssue(file=file, message="Manifest is empty")]

    issues = [
        ManifestIssue(file=file, message=error.message, path=_json_path(error))
        for error in sorted(_validator().iter_errors(data), key=_json_path)
    ]
    if issues:
        return issues

    return _check_references(data, file)


def load_manifest_yaml(path: Path) -> tuple[Any, list[ManifestIssue]]:
    """Parse a manifest file, returning the document and any parse issue."""
    try:
        with path.open() as fh:
            return yaml.safe_load(fh), []
    except OSError as exc:
        return None, [ManifestIssue(file=path, message=f"Cannot read manifest: {exc}")]
    except yaml.YAMLError as exc:
        return None, [ManifestIssue(file=path, message=f"YAML parse error: {exc}")]


def validate_manifest_file(path: Path, *, strict: bool = False) -> list[ManifestIssue]:
    """
    Validate a manifest file.

    Args:
        path:   Manifest YAML file.
        strict: If ``True``, warnings are escalated to errors.

    Returns:
        A list of :class:`ManifestIssue` objects (empty on success).
    """
    data, issues = load_manifest_yaml(path)
    if issues:
        return issues

    issues = validate_manifest_data(data, path)
    if strict:
        for issue in issues:
            if issue.severity == "warning":
                issue.severity = "error"
    logger.debug("Validated manifest %s: %d issue(s)", path, len(issues))
    return issues
