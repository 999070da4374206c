"""
Tests for the CLI — run through click's CliRunner.

The toolchain is pinned through a doctor.yml with explicit candidates
and the resolver off, so the host's real installation never leaks in.
"""

import json
import sys
from pathlib import Path

import pytest
from click.testing import CliRunner

from sdkdoctor import __version__
from sdkdoctor.adapters.installer.bootstrapper import BootstrapperInstaller
from sdkdoctor.core.services import host, toolchain_locator
from sdkdoctor.main import cli


@pytest.fixture(autouse=True)
def no_platform_candidates(monkeypatch):
    monkeypatch.setattr(toolchain_locator, "platform_candidate_paths", lambda *a, **kw: [])


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def _write_config(tmp_path: Path, candidates=(), extra: str = "") -> Path:
    path = tmp_path / "doctor.yml"
    lines = ["toolchain:", "  use_resolver: false", "  candidates:"]
    lines += [f"    - '{c}'" for c in candidates] or ["    []"]
    path.write_text("\n".join(lines) + "\n" + extra)
    return path


def _fake_dotnet(root: Path, *versions: str) -> Path:
    """An executable that prints --list-sdks output for ``versions``."""
    sdk_dir = root / "sdk"
    for version in versions:
        (sdk_dir / version).mkdir(parents=True, exist_ok=True)
    exe = root / host.executable_name()
    body = "".join(f'echo "{v} [{sdk_dir}]"\n' for v in versions)
    exe.write_text("#!/bin/sh\n" + body)
    exe.chmod(0o755)
    return exe


# ── Basics ──────────────────────────────────────────────────────────


class TestBasics:
    def test_help(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "SDK Doctor" in result.output

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_bad_config(self, runner, tmp_path):
        path = tmp_path / "doctor.yml"
        path.write_text("- not a mapping\n")
        result = runner.invoke(cli, ["--config", str(path), "locate"])
        assert result.exit_code == 1
        assert "Expected a YAML mapping" in result.output


# ── Locate / SDKs ───────────────────────────────────────────────────


class TestLocate:
    def test_found(self, runner, tmp_path, dotnet_root):
        exe = dotnet_root / host.executable_name()
        config = _write_config(tmp_path, [exe])
        result = runner.invoke(cli, ["-q", "--config", str(config), "locate", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["exists"] is True
        assert data["strategy"] == "candidates"
        assert data["root_directory"] == str(dotnet_root)

    def test_not_found(self, runner, tmp_path):
        missing = tmp_path / "nowhere" / "dotnet"
        config = _write_config(tmp_path, [missing])
        result = runner.invoke(cli, ["-q", "--config", str(config), "locate"])
        assert result.exit_code == 1
        assert "Toolchain not found" in result.output
        assert "Searched:" in result.output
        assert str(missing) in result.output


@pytest.mark.skipif(sys.platform == "win32", reason="shell script toolchain")
class TestSdks:
    def test_lists(self, runner, tmp_path):
        exe = _fake_dotnet(tmp_path / "dotnet", "6.0.100", "7.0.200")
        config = _write_config(tmp_path, [exe])
        result = runner.invoke(cli, ["-q", "--config", str(config), "sdks", "--json"])
        assert result.exit_code == 0
        versions = [r["version"] for r in json.loads(result.output)]
        assert versions == ["6.0.100", "7.0.200"]

    def test_diagnose(self, runner, tmp_path):
        exe = _fake_dotnet(tmp_path / "dotnet", "6.0.100")
        config = _write_config(tmp_path, [exe])
        result = runner.invoke(cli, ["-q", "--config", str(config), "diagnose"])
        assert result.exit_code == 0
        assert "SDK 6.0.100" in result.output


# ── Workloads ───────────────────────────────────────────────────────


class TestWorkloads:
    MANIFEST = {
        "version": "6.0.0",
        "workloads": {"android": {"packs": ["Microsoft.Android.Sdk"]}},
        "packs": {"Microsoft.Android.Sdk": {"kind": "sdk", "version": "31.0.0"}},
    }

    def test_suggest(self, runner, tmp_path, dotnet_root, write_manifest):
        write_manifest("6.0.100", "android", self.MANIFEST)
        config = _write_config(tmp_path, [dotnet_root / host.executable_name()])
        result = runner.invoke(
            cli,
            ["-q", "--config", str(config), "workloads", "suggest", "6.0.100", "Microsoft.Android.Sdk", "--json"],
        )
        assert result.exit_code == 0
        assert json.loads(result.output) == [
            {"id": "android", "description": "", "provides": ["Microsoft.Android.Sdk"]}
        ]

    def test_packs(self, runner, tmp_path, dotnet_root, write_manifest):
        write_manifest("6.0.100", "android", self.MANIFEST)
        (dotnet_root / "packs" / "Microsoft.Android.Sdk" / "31.0.0").mkdir(parents=True)
        config = _write_config(tmp_path, [dotnet_root / host.executable_name()])
        result = runner.invoke(
            cli, ["-q", "--config", str(config), "workloads", "packs", "6.0.100", "--json"]
        )
        assert result.exit_code == 0
        packs = json.loads(result.output)
        assert [p["id"] for p in packs] == ["Microsoft.Android.Sdk"]

    def test_invalid_manifest(self, runner, tmp_path, dotnet_root, write_manifest):
        write_manifest("6.0.100", "android", "[1, 2]")
        config = _write_config(tmp_path, [dotnet_root / host.executable_name()])
        result = runner.invoke(
            cli, ["-q", "--config", str(config), "workloads", "packs", "6.0.100"]
        )
        assert result.exit_code == 1
        assert "Expected a JSON object" in result.output

    def test_malformed_workloads_section(self, runner, tmp_path, dotnet_root, write_manifest):
        write_manifest("6.0.100", "android", {"workloads": ["android"]})
        config = _write_config(tmp_path, [dotnet_root / host.executable_name()])
        result = runner.invoke(
            cli, ["-q", "--config", str(config), "workloads", "suggest", "6.0.100", "p"]
        )
        assert result.exit_code == 1
        assert not isinstance(result.exception, AttributeError)
        assert "must be an object" in result.output


# ── Remedies ────────────────────────────────────────────────────────


class TestRemedy:
    REMEDIES = (
        "remedies:\n"
        "  - name: placeholder\n"
        "    urls:\n"
        "      - url: ''\n"
        "        title: Nothing yet\n"
    )

    def test_unknown_remedy(self, runner, tmp_path):
        config = _write_config(tmp_path, extra=self.REMEDIES)
        result = runner.invoke(cli, ["-q", "--config", str(config), "remedy", "ios"])
        assert result.exit_code == 1
        assert "Unknown remedy 'ios'" in result.output
        assert "placeholder" in result.output

    def test_runs_remedy(self, runner, tmp_path, monkeypatch):
        monkeypatch.setattr(BootstrapperInstaller, "is_available", lambda self: True)
        config = _write_config(tmp_path, extra=self.REMEDIES)
        result = runner.invoke(cli, ["-q", "--config", str(config), "remedy", "placeholder", "--json"])
        assert result.exit_code == 0
        report = json.loads(result.output)
        assert report["status"] == "ok"
        assert report["receipts"][0]["remedy"] == "placeholder"

    def test_installer_unavailable(self, runner, tmp_path, monkeypatch):
        monkeypatch.setattr(BootstrapperInstaller, "is_available", lambda self: False)
        config = _write_config(tmp_path, extra=self.REMEDIES)
        result = runner.invoke(cli, ["-q", "--config", str(config), "remedy", "placeholder"])
        assert result.exit_code == 1
        assert "Cannot run installers" in result.output
        assert "Result:" not in result.output

    @pytest.mark.skipif(sys.platform == "win32", reason="needs bash")
    def test_install_failure_exits_nonzero(self, runner, tmp_path):
        script = tmp_path / "src" / "broken.sh"
        script.parent.mkdir()
        script.write_text("exit 4\n")
        config = _write_config(tmp_path)
        result = runner.invoke(
            cli, ["-q", "--config", str(config), "install", script.as_uri(), "--title", "Broken"]
        )
        assert result.exit_code == 1
        assert "0/1 succeeded (failed)" in result.output
        assert "exited with code 4" in result.output
