"""
Workload manifests — read the SDK's WorkloadManifest.json files.

Layout::

    <root>/sdk-manifests/<featureBand>/<manifestId>/WorkloadManifest.json

If no directory exists for the feature band, the exact SDK version
directory is tried. A missing manifest directory is not an error (the
SDK simply has no workloads); a manifest that exists but cannot be
parsed raises WorkloadManifestError.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from sdkdoctor.core.models.toolchain import WorkloadPackKind
from sdkdoctor.core.models.version import SemanticVersion, feature_band

logger = logging.getLogger(__name__)

MANIFESTS_DIR = "sdk-manifests"
MANIFEST_FILE = "WorkloadManifest.json"


class WorkloadManifestError(Exception):
    """Raised when a workload manifest exists but is invalid."""


@dataclass
class PackDefinition:
    id: str
    kind: WorkloadPackKind
    version: str
    alias_to: dict[str, str] = field(default_factory=dict)

    def resolve_id(self, rid: str) -> str | None:
        """Real pack id for a runtime identifier; None if unavailable on it."""
        if not self.alias_to:
            return self.id
        return self.alias_to.get(rid)


@dataclass
class WorkloadDefinition:
    id: str
    description: str = ""
    kind: str = "dev"
    abstract: bool = False
    packs: list[str] = field(default_factory=list)
    extends: list[str] = field(default_factory=list)
    platforms: list[str] = field(default_factory=list)

    def supports(self, rid: str) -> bool:
        return not self.platforms or rid in self.platforms


@dataclass
class WorkloadManifest:
    id: str
    version: str = ""
    path: Path | None = None
    workloads: dict[str, WorkloadDefinition] = field(default_factory=dict)
    packs: dict[str, PackDefinition] = field(default_factory=dict)


def strip_json_comments(text: str) -> str:
    """Remove ``//`` and ``/* */`` comments and trailing commas outside strings."""
    out: list[str] = []
    i, n = 0, len(text)
    in_string = False

    while i < n:
        ch = text[i]
        if in_string:
            out.append(ch)
            if ch == "\\" and i + 1 < n:
                out.append(text[i + 1])
                i += 2
                continue
            if ch == '"':
                in_string = False
            i += 1
        elif ch == '"':
            in_string = True
            out.append(ch)
            i += 1
        elif text.startswith("//", i):
            end = text.find("\n", i)
            i = n if end == -1 else end
        elif text.startswith("/*", i):
            end = text.find("*/", i + 2)
            i = n if end == -1 else end + 2
        elif ch == ",":
            # Drop the comma if the next significant char closes a container
            j = i + 1
            while j < n and text[j] in " \t\r\n":
                j += 1
            if j < n and text[j] in "}]":
                i += 1
                continue
            out.append(ch)
            i += 1
        else:
            out.append(ch)
            i += 1

    return "".join(out)


def _as_list(value: Any, what: str) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list):
        raise WorkloadManifestError(f"{what} must be a list, got {type(value).__name__}")
    return [str(v) for v in value]


def _as_mapping(value: Any, what: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise WorkloadManifestError(f"{what} must be an object, got {type(value).__name__}")
    return value


def parse_manifest(manifest_id: str, text: str, path: Path | None = None) -> WorkloadManifest:
    """Parse manifest JSON text.

    Raises:
        WorkloadManifestError: If the text is not a valid manifest.
    """
    where = path or manifest_id
    try:
        data = json.loads(strip_json_comments(text))
    except json.JSONDecodeError as e:
        raise WorkloadManifestError(f"Invalid JSON in {where}: {e}") from e

    if not isinstance(data, dict):
        raise WorkloadManifestError(
            f"Expected a JSON object in {where}, got {type(data).__name__}"
        )

    manifest = WorkloadManifest(id=manifest_id, version=str(data.get("version", "")), path=path)

    for workload_id, raw in _as_mapping(data.get("workloads"), f"'workloads' in {where}").items():
        if not isinstance(raw, dict):
            raise WorkloadManifestError(f"Workload '{workload_id}' in {where} is not an object")
        manifest.workloads[workload_id] = WorkloadDefinition(
            id=workload_id,
            description=str(raw.get("description", "")),
            kind=str(raw.get("kind", "dev")),
            abstract=bool(raw.get("abstract", False)),
            packs=_as_list(raw.get("packs"), f"Workload '{workload_id}' packs in {where}"),
            extends=_as_list(raw.get("extends"), f"Workload '{workload_id}' extends in {where}"),
            platforms=_as_list(raw.get("platforms"), f"Workload '{workload_id}' platforms in {where}"),
        )

    for pack_id, raw in _as_mapping(data.get("packs"), f"'packs' in {where}").items():
        if not isinstance(raw, dict):
            raise WorkloadManifestError(f"Pack '{pack_id}' in {where} is not an object")
        kind_str = str(raw.get("kind", "")).lower()
        try:
            kind = WorkloadPackKind(kind_str)
        except ValueError as e:
            raise WorkloadManifestError(
                f"Pack '{pack_id}' in {where} has unknown kind '{kind_str}'"
            ) from e
        alias_to = _as_mapping(raw.get("alias-to"), f"Pack '{pack_id}' alias-to in {where}")
        manifest.packs[pack_id] = PackDefinition(
            id=pack_id,
            kind=kind,
            version=str(raw.get("version", "")),
            alias_to={str(k): str(v) for k, v in alias_to.items()},
        )

    return manifest


def manifest_directory(root: Path, sdk_version: str) -> Path | None:
    """Directory holding the manifests for an SDK version, if any."""
    base = root / MANIFESTS_DIR
    version = SemanticVersion.try_parse(sdk_version)

    candidates = []
    if version is not None:
        candidates.append(base / feature_band(version))
    candidates.append(base / sdk_version)

    for candidate in candidates:
        if candidate.is_dir():
            return candidate
    return None


def load_manifests(root: Path, sdk_version: str) -> list[WorkloadManifest]:
    """Load every manifest for ``sdk_version`` under ``root``.

    Returns an empty list when there is no manifest directory.
    """
    directory = manifest_directory(root, sdk_version)
    if directory is None:
        logger.debug("No workload manifests for SDK %s under %s", sdk_version, root)
        return []

    manifests = []
    for sub in sorted(p for p in directory.iterdir() if p.is_dir()):
        manifest_file = sub / MANIFEST_FILE
        if not manifest_file.is_file():
            continue
        try:
            text = manifest_file.read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as e:
            raise WorkloadManifestError(f"Cannot read {manifest_file}: {e}") from e
        manifests.append(parse_manifest(sub.name, text, manifest_file))

    logger.debug("Loaded %d workload manifest(s) from %s", len(manifests), directory)
    return manifests
