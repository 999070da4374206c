"""
Workload resolver — which packs are installed, which workloads are missing.

Given the toolchain root and an SDK version, loads that SDK's workload
manifests and answers two read-only queries:

    get_installed_packs(kind)          packs of a kind present on disk
    suggest_for_missing_packs(ids)     workloads that would provide ids

Every query reads the manifests and pack directories afresh, so results
are a snapshot of the disk at call time. Caching across calls is the
caller's policy (see ``Toolchain``).

Installed pack locations:
    sdk / framework / tool   <root>/packs/<resolvedId>/<version>/
    library                  <root>/library-packs/<resolvedId>.<version>.nupkg
    template                 <root>/template-packs/<id>.<version>.nupkg (lower-case)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from sdkdoctor.core.models.toolchain import PackInfo, WorkloadPackKind, WorkloadSuggestion
from sdkdoctor.core.services import host
from sdkdoctor.core.services.workload_manifest import (
    PackDefinition,
    WorkloadDefinition,
    WorkloadManifest,
    load_manifests,
    manifest_directory,
)

logger = logging.getLogger(__name__)


def pack_path(root: Path, pack: PackDefinition, resolved_id: str) -> Path:
    """Where ``pack`` lives under ``root`` once installed."""
    if pack.kind == WorkloadPackKind.LIBRARY:
        return root / "library-packs" / f"{resolved_id}.{pack.version}.nupkg"
    if pack.kind == WorkloadPackKind.TEMPLATE:
        return root / "template-packs" / f"{resolved_id}.{pack.version}.nupkg".lower()
    return root / "packs" / resolved_id / pack.version


def _is_installed(path: Path, kind: WorkloadPackKind) -> bool:
    if kind in (WorkloadPackKind.LIBRARY, WorkloadPackKind.TEMPLATE):
        return path.is_file()
    return path.is_dir()


class WorkloadResolver:
    """Workload queries for one SDK version under one toolchain root."""

    def __init__(self, root: Path, sdk_version: str, rid: str | None = None):
        self.root = Path(root)
        self.sdk_version = sdk_version
        self.rid = rid or host.runtime_identifier()

    @property
    def install_directory(self) -> Path:
        return self.root / self.sdk_version

    @property
    def manifests_found(self) -> bool:
        return manifest_directory(self.root, self.sdk_version) is not None

    def _load(self) -> tuple[dict[str, WorkloadDefinition], dict[str, PackDefinition]]:
        manifests: list[WorkloadManifest] = load_manifests(self.root, self.sdk_version)
        workloads: dict[str, WorkloadDefinition] = {}
        packs: dict[str, PackDefinition] = {}
        for manifest in manifests:
            for workload_id, workload in manifest.workloads.items():
                if workload_id in workloads:
                    logger.warning(
                        "Workload '%s' redefined by manifest '%s'", workload_id, manifest.id
                    )
                workloads[workload_id] = workload
            packs.update(manifest.packs)
        return workloads, packs

    def get_installed_packs(self, kind: WorkloadPackKind | str) -> list[PackInfo]:
        """All packs of ``kind`` installed for this SDK version."""
        kind = WorkloadPackKind(kind)
        _, packs = self._load()

        installed = []
        for pack in packs.values():
            if pack.kind != kind:
                continue
            resolved_id = pack.resolve_id(self.rid)
            if resolved_id is None:
                continue
            path = pack_path(self.root, pack, resolved_id)
            if _is_installed(path, pack.kind):
                installed.append(
                    PackInfo(
                        id=pack.id,
                        resolved_id=resolved_id,
                        kind=pack.kind,
                        version=pack.version,
                        path=path,
                    )
                )
        return installed

    def suggest_for_missing_packs(self, missing_pack_ids: Iterable[str]) -> set[WorkloadSuggestion]:
        """Workloads that, once installed, would provide the missing packs.

        Picks greedily: the workload covering the most still-missing
        packs first (ties broken by id), until every coverable pack is
        covered. Empty input yields an empty set.
        """
        missing = {pack_id for pack_id in missing_pack_ids if pack_id}
        if not missing:
            return set()

        workloads, _ = self._load()
        candidates: dict[str, set[str]] = {}
        for workload in workloads.values():
            if workload.abstract or not workload.supports(self.rid):
                continue
            provided = self._expand_packs(workload.id, workloads) & missing
            if provided:
                candidates[workload.id] = provided

        uncovered = missing - set().union(*candidates.values()) if candidates else missing
        if uncovered:
            logger.info("No workload provides pack(s): %s", ", ".join(sorted(uncovered)))

        remaining = missing - uncovered
        suggestions: set[WorkloadSuggestion] = set()
        while remaining:
            best_id = min(candidates, key=lambda wid: (-len(candidates[wid] & remaining), wid))
            covered = candidates.pop(best_id) & remaining
            suggestions.add(
                WorkloadSuggestion(
                    id=best_id,
                    description=workloads[best_id].description,
                    provides=frozenset(covered),
                )
            )
            remaining -= covered

        return suggestions

    def _expand_packs(
        self,
        workload_id: str,
        workloads: dict[str, WorkloadDefinition],
        seen: set[str] | None = None,
    ) -> set[str]:
        """Packs of a workload including everything it extends."""
        seen = set() if seen is None else seen
        if workload_id in seen:
            return set()
        seen.add(workload_id)

        workload = workloads.get(workload_id)
        if workload is None:
            logger.debug("Workload '%s' extends unknown workload", workload_id)
            return set()

        packs = set(workload.packs)
        for base in workload.extends:
            packs |= self._expand_packs(base, workloads, seen)
        return packs
