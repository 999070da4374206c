"""
Diagnose use case — locate the toolchain and inventory its SDKs.

Turns "not found" conditions into an actionable error message (what
was searched, and where) instead of an exception.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from sdkdoctor.core.models.config import DoctorConfig
from sdkdoctor.core.models.toolchain import SdkRecord, ToolchainLocation, WorkloadSuggestion
from sdkdoctor.core.services.toolchain import Toolchain
from sdkdoctor.core.services.workload_manifest import WorkloadManifestError

logger = logging.getLogger(__name__)


@dataclass
class DiagnoseResult:
    """Result of the diagnose use case."""

    location: ToolchainLocation = field(default_factory=ToolchainLocation)
    searched: list[str] = field(default_factory=list)
    sdks: list[SdkRecord] = field(default_factory=list)
    suggestions: set[WorkloadSuggestion] = field(default_factory=set)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        result: dict = {
            "location": self.location.to_dict(),
            "searched": list(self.searched),
        }
        if self.error:
            result["error"] = self.error
            return result

        result["sdks"] = [sdk.to_dict() for sdk in self.sdks]
        if self.suggestions:
            result["suggestions"] = [s.to_dict() for s in sorted(self.suggestions, key=lambda s: s.id)]
        return result


def run_diagnose(
    config: DoctorConfig | None = None,
    toolchain: Toolchain | None = None,
    missing_packs: list[str] | None = None,
    sdk_version: str | None = None,
) -> DiagnoseResult:
    """Locate the toolchain, list SDKs, optionally suggest workloads.

    Args:
        config: Doctor configuration (defaults if None).
        toolchain: Pre-built toolchain facade (built from config if None).
        missing_packs: Pack ids a project needs but lacks.
        sdk_version: SDK to resolve workloads against (latest if None).

    Returns:
        DiagnoseResult; ``error`` is set for actionable failures.
    """
    config = config or DoctorConfig()
    toolchain = toolchain or Toolchain.from_config(config)

    result = DiagnoseResult(
        location=toolchain.locator.location,
        searched=list(toolchain.locator.searched),
    )

    if not toolchain.exists:
        where = ", ".join(result.searched) or "no locations for this platform"
        result.error = (
            f"Toolchain not found. Searched: {where}. "
            "Install the SDK or add its path under toolchain.candidates in doctor.yml."
        )
        return result

    result.sdks = toolchain.get_sdks()
    if not result.sdks:
        result.error = (
            f"No SDKs reported by {toolchain.locator.executable_path} --list-sdks."
        )
        return result

    if missing_packs:
        version = sdk_version or str(max(result.sdks, key=lambda r: r.version).version)
        try:
            resolver = toolchain.workload_resolver(version)
            if not resolver.manifests_found:
                result.error = (
                    f"No workload manifests for SDK {version} under "
                    f"{resolver.root / 'sdk-manifests'}."
                )
                return result
            result.suggestions = resolver.suggest_for_missing_packs(missing_packs)
        except WorkloadManifestError as e:
            result.error = f"Workload manifests for SDK {version} are invalid: {e}"

    return result
