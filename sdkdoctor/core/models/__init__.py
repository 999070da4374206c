"""
Domain models — Pydantic types for the doctor.

All models are re-exported here for convenient access:

    from sdkdoctor.core.models import SdkRecord, PackInfo, RemedyReceipt
"""

from sdkdoctor.core.models.config import (
    DoctorConfig,
    InstallerConfig,
    RemedyDefinition,
    RemedyUrl,
    ToolchainConfig,
    WorkloadsConfig,
)
from sdkdoctor.core.models.remedy import RemedyReceipt, RemedyStatus
from sdkdoctor.core.models.toolchain import (
    PackInfo,
    SdkRecord,
    ToolchainLocation,
    WorkloadPackKind,
    WorkloadSuggestion,
)
from sdkdoctor.core.models.version import InvalidVersion, SemanticVersion, feature_band

__all__ = [
    # config.py
    "DoctorConfig",
    "InstallerConfig",
    "RemedyDefinition",
    "RemedyUrl",
    "ToolchainConfig",
    "WorkloadsConfig",
    # remedy.py
    "RemedyReceipt",
    "RemedyStatus",
    # toolchain.py
    "PackInfo",
    "SdkRecord",
    "ToolchainLocation",
    "WorkloadPackKind",
    "WorkloadSuggestion",
    # version.py
    "InvalidVersion",
    "SemanticVersion",
    "feature_band",
]
