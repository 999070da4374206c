"""
Tests for remedies — status reporting and the installer remedy.
"""

import asyncio

import pytest

from sdkdoctor.adapters.mock import MockInstaller
from sdkdoctor.core.engine.cancellation import CancellationToken
from sdkdoctor.core.engine.executor import run_remedy
from sdkdoctor.core.models.config import RemedyDefinition, RemedyUrl
from sdkdoctor.core.models.remedy import RemedyStatus
from sdkdoctor.core.remedies.base import Remedy
from sdkdoctor.core.remedies.boots import BootsRemedy


class NoopRemedy(Remedy):
    async def cure(self, token):
        pass


# ── Status Reporting ────────────────────────────────────────────────


class TestReportStatus:
    def test_records_message_and_progress(self):
        remedy = NoopRemedy()
        remedy.report_status("Working", 0.5)
        assert remedy.last_message == "Working"
        assert remedy.progress == 0.5
        assert remedy.history == [("Working", 0.5)]

    @pytest.mark.parametrize("raw, expected", [(1.5, 1.0), (-3, 0.0), (0.25, 0.25)])
    def test_clamps(self, raw, expected):
        remedy = NoopRemedy()
        remedy.report_status("x", raw)
        assert remedy.progress == expected

    def test_tolerates_garbage(self):
        remedy = NoopRemedy()
        remedy.report_status("first", 0.4)
        remedy.report_status("nan", float("nan"))
        remedy.report_status("text", "abc")
        assert remedy.progress == 0.4
        assert remedy.last_message == "text"

    def test_listener_errors_are_contained(self):
        def broken(name, message, fraction):
            raise RuntimeError("console gone")

        remedy = NoopRemedy()
        remedy.attach(broken)
        remedy.report_status("still fine", 0.1)
        assert remedy.progress == 0.1

    def test_default_name(self):
        assert NoopRemedy().name == "NoopRemedy"
        assert NoopRemedy(name="custom").name == "custom"
        assert NoopRemedy().status == RemedyStatus.CREATED


# ── Installer Remedy ────────────────────────────────────────────────


class TestBootsRemedy:
    def test_empty_list_succeeds(self):
        installer = MockInstaller()
        remedy = BootsRemedy(installer, [])
        receipt = asyncio.run(run_remedy(remedy, CancellationToken()))
        assert receipt.ok
        assert remedy.status == RemedyStatus.SUCCEEDED
        assert remedy.history == []
        assert installer.call_count == 0

    def test_skips_empty_url(self):
        installer = MockInstaller()
        remedy = BootsRemedy(installer, [("", "skip"), ("http://x/installer", "Real")])
        receipt = asyncio.run(run_remedy(remedy, CancellationToken()))
        assert receipt.ok
        assert remedy.history == [("Real", 1.0)]
        assert installer.call_log == ["http://x/installer"]

    def test_none_entries(self):
        installer = MockInstaller()
        remedy = BootsRemedy(installer, [(None, None), ("http://x/a.pkg", None)])
        asyncio.run(run_remedy(remedy, CancellationToken()))
        assert remedy.history == [("http://x/a.pkg", 1.0)]

    def test_progress_advances_on_skipped_entries(self):
        installer = MockInstaller()
        remedy = BootsRemedy(installer, [
            ("http://x/1.pkg", "One"),
            ("", "Skipped"),
            ("http://x/3.pkg", "Three"),
            ("http://x/4.pkg", ""),
        ])
        asyncio.run(run_remedy(remedy, CancellationToken()))
        assert remedy.history == [
            ("One", 0.25),
            ("Three", 0.75),
            ("http://x/4.pkg", 1.0),
        ]
        assert installer.call_count == 3

    def test_failure_is_not_rolled_back(self):
        installer = MockInstaller()
        installer.set_failure("http://x/2.pkg", error="exit code 1")
        remedy = BootsRemedy(installer, [
            ("http://x/1.pkg", "One"),
            ("http://x/2.pkg", "Two"),
            ("http://x/3.pkg", "Three"),
        ])
        receipt = asyncio.run(run_remedy(remedy, CancellationToken()))
        assert receipt.failed
        assert "exit code 1" in receipt.error
        assert remedy.status == RemedyStatus.FAILED
        assert installer.call_log == ["http://x/1.pkg", "http://x/2.pkg"]

    def test_cancelled_before_start(self):
        installer = MockInstaller()
        token = CancellationToken()
        token.cancel()
        remedy = BootsRemedy(installer, [("http://x/1.pkg", "One")])

        receipt = asyncio.run(run_remedy(remedy, token))
        assert receipt.cancelled
        assert remedy.status == RemedyStatus.CANCELLED
        assert installer.call_count == 0
        assert remedy.history == []

    def test_cancelled_during_install(self):
        installer = MockInstaller()
        installer.set_blocking("http://x/slow.pkg")
        token = CancellationToken()
        remedy = BootsRemedy(installer, [("http://x/slow.pkg", "Slow"), ("http://x/next.pkg", "Next")])

        async def scenario():
            task = asyncio.create_task(run_remedy(remedy, token))
            while installer.call_count == 0:
                await asyncio.sleep(0.01)
            token.cancel()
            return await task

        receipt = asyncio.run(scenario())
        assert receipt.cancelled
        assert not receipt.failed
        assert remedy.status == RemedyStatus.CANCELLED
        assert installer.call_log == ["http://x/slow.pkg"]

    def test_from_definition(self):
        definition = RemedyDefinition(
            name="android",
            urls=[RemedyUrl(url="http://x/a.pkg", title="Android"), RemedyUrl()],
        )
        remedy = BootsRemedy.from_definition(definition, MockInstaller())
        assert remedy.name == "android"
        assert remedy.urls == [("http://x/a.pkg", "Android"), ("", "")]
