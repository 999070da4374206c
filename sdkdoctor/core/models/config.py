"""
Doctor configuration model — the shape of doctor.yml.

Every section is optional; an empty or missing file yields defaults.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class ToolchainConfig(BaseModel):
    """How to find the toolchain and query it."""

    candidates: list[str] = Field(default_factory=list)  # scanned before platform defaults
    use_resolver: bool = True
    list_sdks_timeout: int = 30


class WorkloadsConfig(BaseModel):
    """Workload resolution policy."""

    cache: bool = False   # reuse resolvers per (root, sdk version) within one run


class InstallerConfig(BaseModel):
    download_dir: str | None = None
    timeout: int = 1800


class RemedyUrl(BaseModel):
    url: str = ""
    title: str = ""


class RemedyDefinition(BaseModel):
    """A named installer remedy runnable from the CLI."""

    name: str
    description: str = ""
    urls: list[RemedyUrl] = Field(default_factory=list)


class DoctorConfig(BaseModel):
    """Top-level doctor.yml."""

    toolchain: ToolchainConfig = Field(default_factory=ToolchainConfig)
    workloads: WorkloadsConfig = Field(default_factory=WorkloadsConfig)
    installer: InstallerConfig = Field(default_factory=InstallerConfig)
    remedies: list[RemedyDefinition] = Field(default_factory=list)

    def get_remedy(self, name: str) -> RemedyDefinition | None:
        """Look up a remedy definition by name."""
        for remedy in self.remedies:
            if remedy.name == name:
                return remedy
        return None
