"""
Tests for the diagnose use case.
"""

from pathlib import Path

from sdkdoctor.core.services.toolchain import Toolchain
from sdkdoctor.core.use_cases.diagnose import run_diagnose

MANIFEST = {
    "version": "6.0.0",
    "workloads": {
        "android": {"description": "Android", "packs": ["Microsoft.Android.Sdk"]},
    },
    "packs": {
        "Microsoft.Android.Sdk": {"kind": "sdk", "version": "31.0.0"},
    },
}


def _sdk_lines(dotnet_root: Path, *versions: str) -> list[str]:
    sdk_dir = dotnet_root / "sdk"
    for version in versions:
        (sdk_dir / version).mkdir(parents=True, exist_ok=True)
    return [f"{version} [{sdk_dir}]" for version in versions]


class TestDiagnose:
    def test_toolchain_not_found(self, missing_locator):
        result = run_diagnose(toolchain=Toolchain(locator=missing_locator))
        assert not result.ok
        assert result.error.startswith("Toolchain not found. Searched:")
        assert "error" in result.to_dict()

    def test_not_found_lists_searched(self, tmp_path: Path):
        from sdkdoctor.core.services.toolchain_locator import ToolchainLocator, candidate_strategy

        missing = tmp_path / "nowhere" / "dotnet"
        toolchain = Toolchain(locator=ToolchainLocator([candidate_strategy([missing])]))
        result = run_diagnose(toolchain=toolchain)
        assert str(missing) in result.error
        assert result.searched == [str(missing)]

    def test_no_sdks(self, locator, fake_runner):
        result = run_diagnose(toolchain=Toolchain(locator=locator, runner=fake_runner([])))
        assert result.error.startswith("No SDKs reported by")

    def test_lists_sdks(self, locator, fake_runner, dotnet_root: Path):
        runner = fake_runner(_sdk_lines(dotnet_root, "6.0.100", "7.0.100"))
        result = run_diagnose(toolchain=Toolchain(locator=locator, runner=runner))
        assert result.ok
        assert [str(r.version) for r in result.sdks] == ["6.0.100", "7.0.100"]
        assert result.to_dict()["sdks"][0]["version"] == "6.0.100"

    def test_suggestions_for_latest_sdk(self, locator, fake_runner, dotnet_root: Path, write_manifest):
        write_manifest("7.0.100", "microsoft.net.sdk.android", MANIFEST)
        runner = fake_runner(_sdk_lines(dotnet_root, "6.0.100", "7.0.100"))
        result = run_diagnose(
            toolchain=Toolchain(locator=locator, runner=runner),
            missing_packs=["Microsoft.Android.Sdk"],
        )
        assert result.ok
        assert {s.id for s in result.suggestions} == {"android"}
        assert result.to_dict()["suggestions"][0]["id"] == "android"

    def test_explicit_sdk_without_manifests(self, locator, fake_runner, dotnet_root: Path, write_manifest):
        write_manifest("7.0.100", "microsoft.net.sdk.android", MANIFEST)
        runner = fake_runner(_sdk_lines(dotnet_root, "6.0.100", "7.0.100"))
        result = run_diagnose(
            toolchain=Toolchain(locator=locator, runner=runner),
            missing_packs=["Microsoft.Android.Sdk"],
            sdk_version="6.0.100",
        )
        assert result.error.startswith("No workload manifests for SDK 6.0.100")

    def test_invalid_manifest(self, locator, fake_runner, dotnet_root: Path, write_manifest):
        write_manifest("6.0.100", "broken", "{ not json")
        runner = fake_runner(_sdk_lines(dotnet_root, "6.0.100"))
        result = run_diagnose(
            toolchain=Toolchain(locator=locator, runner=runner),
            missing_packs=["Anything"],
        )
        assert "are invalid" in result.error
