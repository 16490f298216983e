"""
Tests for dotfile deployment.
"""

import os

import pytest

from dotboot.engine.results import StepStatus
from dotboot.steps.dotfiles import DotfilesStep

FILES = [
    {"src": "bling", "dest": "bling"},
    {"src": "zsh/.zshrc", "dest": ".zshrc"},
]


@pytest.fixture
def bundle(make_context):
    context = make_context()
    source = context.config.source_dir
    (source / "bling" / "themes").mkdir(parents=True)
    (source / "bling" / "bling.sh").write_text("echo bling\n")
    (source / "bling" / "themes" / "dark.toml").write_text("bg = 'black'\n")
    (source / "zsh").mkdir()
    (source / "zsh" / ".zshrc").write_text("export ZSH=$HOME/.oh-my-zsh\n")
    return context


class TestDotfilesStep:

    @pytest.mark.asyncio
    async def test_copies_tree_and_file(self, bundle):
        home = bundle.config.home

        result = await DotfilesStep({"files": FILES}, bundle).run()

        assert result.status == StepStatus.APPLIED
        assert (home / "bling" / "bling.sh").read_text() == "echo bling\n"
        assert (home / "bling" / "themes" / "dark.toml").exists()
        assert (home / ".zshrc").read_text() == "export ZSH=$HOME/.oh-my-zsh\n"
        assert result.details["copied"] == [str(home / "bling"), str(home / ".zshrc")]

    @pytest.mark.asyncio
    async def test_second_run_is_satisfied(self, bundle):
        await DotfilesStep({"files": FILES}, bundle).run()

        result = await DotfilesStep({"files": FILES}, bundle).run()

        assert result.status == StepStatus.ALREADY_SATISFIED

    @pytest.mark.asyncio
    async def test_overwrites_changed_destination(self, bundle):
        home = bundle.config.home
        (home / ".zshrc").write_text("old\n")
        (home / "bling").mkdir()
        (home / "bling" / "bling.sh").write_text("old\n")
        (home / "bling" / "local.sh").write_text("mine\n")

        result = await DotfilesStep({"files": FILES}, bundle).run()

        assert result.status == StepStatus.APPLIED
        assert (home / ".zshrc").read_text() == "export ZSH=$HOME/.oh-my-zsh\n"
        assert (home / "bling" / "bling.sh").read_text() == "echo bling\n"
        # merged, not nested and not wiped
        assert (home / "bling" / "local.sh").read_text() == "mine\n"
        assert not (home / "bling" / "bling").exists()

    @pytest.mark.asyncio
    async def test_redeploys_tree_with_symlink(self, bundle):
        home = bundle.config.home
        bling = bundle.config.source_dir / "bling"
        (bling / "real.sh").write_text("v1\n")
        (bling / "link.sh").symlink_to("real.sh")
        await DotfilesStep({"files": FILES}, bundle).run()
        assert (await DotfilesStep({"files": FILES}, bundle).run()).status == StepStatus.ALREADY_SATISFIED

        (bling / "real.sh").write_text("v2\n")
        result = await DotfilesStep({"files": FILES}, bundle).run()

        assert result.status == StepStatus.APPLIED
        assert (home / "bling" / "link.sh").is_symlink()
        assert os.readlink(home / "bling" / "link.sh") == "real.sh"
        assert (home / "bling" / "link.sh").read_text() == "v2\n"

    @pytest.mark.asyncio
    async def test_retargeted_symlink_is_relinked(self, bundle):
        home = bundle.config.home
        bling = bundle.config.source_dir / "bling"
        (bling / "real.sh").write_text("real\n")
        (bling / "other.sh").write_text("other\n")
        (bling / "link.sh").symlink_to("real.sh")
        await DotfilesStep({"files": FILES}, bundle).run()

        (bling / "link.sh").unlink()
        (bling / "link.sh").symlink_to("other.sh")
        result = await DotfilesStep({"files": FILES}, bundle).run()

        assert result.status == StepStatus.APPLIED
        assert os.readlink(home / "bling" / "link.sh") == "other.sh"

    @pytest.mark.asyncio
    async def test_missing_source_is_skipped(self, make_context, reporter):
        context = make_context()
        (context.config.source_dir / "zsh").mkdir()
        (context.config.source_dir / "zsh" / ".zshrc").write_text("# zshrc\n")

        result = await DotfilesStep({"files": FILES}, context).run()

        assert result.status == StepStatus.APPLIED
        assert result.details["skipped"] == [str(context.config.source_dir / "bling")]
        assert not (context.config.home / "bling").exists()
        assert any("not found, skipping" in m for m in reporter.messages("info"))

    @pytest.mark.asyncio
    async def test_nothing_in_bundle(self, make_context):
        context = make_context()

        result = await DotfilesStep({"files": FILES}, context).run()

        assert result.status == StepStatus.ALREADY_SATISFIED
        assert "not in bundle" in result.msg

    @pytest.mark.asyncio
    async def test_destination_is_directory_fails(self, bundle):
        (bundle.config.home / ".zshrc").mkdir()

        result = await DotfilesStep({"files": FILES}, bundle).run()

        assert result.status == StepStatus.FAILED
        assert not result.fatal
        assert result.details["failed"] == [str(bundle.config.home / ".zshrc")]
        # the directory entry was still deployed
        assert (bundle.config.home / "bling" / "bling.sh").exists()

    def test_absolute_paths_kept(self, make_context, tmp_path):
        step = DotfilesStep({"files": [{"src": "/etc/hosts", "dest": str(tmp_path / "hosts")}]}, make_context())
        [spec] = step.specs()
        assert str(spec.src) == "/etc/hosts"
        assert spec.dest == tmp_path / "hosts"

    @pytest.mark.parametrize("files", ["bling", [{"src": "bling"}], ["bling"]])
    def test_malformed_entries(self, make_context, files):
        step = DotfilesStep({"files": files}, make_context())
        assert step.validate_args() is not None
