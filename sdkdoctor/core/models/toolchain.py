"""
Toolchain models — what was found on disk.

A ToolchainLocation says where the toolchain executable lives, an
SdkRecord describes one installed SDK, and PackInfo / WorkloadSuggestion
describe workload packs and the workloads that would provide them.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from sdkdoctor.core.models.version import SemanticVersion


class ToolchainLocation(BaseModel):
    """Where the toolchain executable was resolved.

    Both paths are None when no strategy found the toolchain.
    """

    model_config = ConfigDict(frozen=True)

    executable_path: Path | None = None
    root_directory: Path | None = None
    strategy: str = ""               # which strategy produced this location

    @property
    def exists(self) -> bool:
        """True iff an executable path was resolved and is a file on disk."""
        return self.executable_path is not None and self.executable_path.is_file()

    def to_dict(self) -> dict[str, Any]:
        return {
            "executable_path": str(self.executable_path) if self.executable_path else None,
            "root_directory": str(self.root_directory) if self.root_directory else None,
            "strategy": self.strategy,
            "exists": self.exists,
        }


class SdkRecord(BaseModel):
    """One installed SDK: ``<installRoot>/<version>``."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    version: SemanticVersion
    directory: Path

    def to_dict(self) -> dict[str, str]:
        return {"version": str(self.version), "directory": str(self.directory)}


class WorkloadPackKind(str, Enum):
    """Kinds of pack a workload manifest can declare."""

    SDK = "sdk"
    FRAMEWORK = "framework"
    LIBRARY = "library"
    TEMPLATE = "template"
    TOOL = "tool"


class PackInfo(BaseModel):
    """An installable component pack as declared by a workload manifest."""

    model_config = ConfigDict(frozen=True)

    id: str                          # pack id as named in the manifest
    resolved_id: str                 # id after alias-to resolution for this host
    kind: WorkloadPackKind
    version: str
    path: Path                       # where the pack lives when installed

    def to_dict(self) -> dict[str, str]:
        return {
            "id": self.id,
            "resolved_id": self.resolved_id,
            "kind": self.kind.value,
            "version": self.version,
            "path": str(self.path),
        }


class WorkloadSuggestion(BaseModel):
    """A workload that would provide one or more missing packs."""

    model_config = ConfigDict(frozen=True)

    id: str
    description: str = ""
    provides: frozenset[str] = Field(default_factory=frozenset)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "description": self.description,
            "provides": sorted(self.provides),
        }
