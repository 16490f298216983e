"""
Tests for bulk package installation.
"""

import pytest

from dotboot.engine.results import StepStatus
from dotboot.executors.base import RunResult
from dotboot.steps.packages import PackagesStep


class FakeBrew:
    """Keeps an installed set and answers brew list/install from it."""

    def __init__(self, installed=(), broken=(), batch_installs=(), fail_batch=False):
        self.installed = set(installed)
        self.broken = set(broken)
        self.batch_installs = set(batch_installs)
        self.fail_batch = fail_batch

    def __call__(self, argv, shell):
        if argv[:2] == ("brew", "list"):
            return RunResult(0 if argv[2] in self.installed else 1, "", "")
        if argv[:2] == ("brew", "install"):
            wanted = argv[2:]
            if len(wanted) > 1 and (self.fail_batch or self.broken & set(wanted)):
                # batch dies part way through
                self.installed |= self.batch_installs & set(wanted)
                return RunResult(1, "", "Error: No available formula")
            if self.broken & set(wanted):
                return RunResult(1, "", "Error: No available formula")
            self.installed |= set(wanted)
            return RunResult(0, "", "")
        return None


class TestPackagesStep:

    @pytest.mark.asyncio
    async def test_all_present(self, make_context, executor):
        executor.handler = FakeBrew(installed={"bat", "fd"})

        result = await PackagesStep({"packages": ["bat", "fd"]}, make_context()).run()

        assert result.status == StepStatus.ALREADY_SATISFIED
        assert executor.mutations == []

    @pytest.mark.asyncio
    async def test_batch_installs_missing_only(self, make_context, executor):
        executor.handler = FakeBrew(installed={"bat"})

        result = await PackagesStep({"packages": ["bat", "fd", "rg"]}, make_context()).run()

        assert result.status == StepStatus.APPLIED
        assert executor.mutations == [("brew", "install", "fd", "rg")]
        assert result.details == {"installed": ["fd", "rg"], "failed": []}

    @pytest.mark.asyncio
    async def test_fallback_skips_packages_installed_by_batch(self, make_context, executor, reporter):
        executor.handler = FakeBrew(batch_installs={"fd"}, broken={"nope"})

        result = await PackagesStep({"packages": ["fd", "nope", "rg"]}, make_context()).run()

        assert executor.mutations == [
            ("brew", "install", "fd", "nope", "rg"),
            ("brew", "install", "nope"),
            ("brew", "install", "rg"),
        ]
        assert result.status == StepStatus.FAILED
        assert not result.fatal
        assert result.msg == "Failed to install: nope"
        assert result.details == {"installed": ["rg"], "failed": ["nope"]}
        assert "Some packages failed to install. Trying individual installation..." in reporter.messages("error")

    @pytest.mark.asyncio
    async def test_fallback_all_succeed(self, make_context, executor):
        executor.handler = FakeBrew(fail_batch=True)

        result = await PackagesStep({"packages": ["a", "b"]}, make_context()).run()

        assert result.status == StepStatus.APPLIED
        assert result.details == {"installed": ["a", "b"], "failed": []}

    def test_packages_deduplicated_in_order(self, make_context):
        step = PackagesStep({"packages": ["fd", "bat", "fd"]}, make_context())
        assert step.packages == ["fd", "bat"]

    def test_packages_must_be_a_list(self, make_context):
        step = PackagesStep({"packages": "bat fd"}, make_context())
        assert step.validate_args() == "'packages' must be a list"

    @pytest.mark.asyncio
    async def test_second_run_is_idempotent(self, make_context, executor):
        executor.handler = FakeBrew()
        args = {"packages": ["bat", "fd"]}

        first = await PackagesStep(args, make_context()).run()
        executor.calls.clear()
        second = await PackagesStep(args, make_context()).run()

        assert first.status == StepStatus.APPLIED
        assert second.status == StepStatus.ALREADY_SATISFIED
        assert executor.mutations == []
