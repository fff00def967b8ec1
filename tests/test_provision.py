"""
End-to-end provisioning runs against the in-memory FakeHost.
"""

import click
import pytest

from devstrap.core.engine.sequencer import run_sequence
from devstrap.core.services.plan import build_plan
from devstrap.ui.cli.prompts import ClickPrompter, PromptCancelled, ScriptedPrompter

DECLINE_ALL = {
    "git_username": "Ada Lovelace",
    "git_email": "ada@example.com",
    "generate_ssh_key": "n",
    "apply_macos_settings": "n",
}

ACCEPT_ALL = {
    **DECLINE_ALL,
    "generate_ssh_key": "y",
    "github_email": "ada@github.example",
    "apply_macos_settings": "yes",
}


def _run(ctx):
    return run_sequence(build_plan(ctx.catalog), ctx)


class TestCleanMachine:
    def test_declining_optional_prompts(self, make_ctx, host, home, catalog):
        ctx = make_ctx()
        report = _run(ctx)

        assert report.status == "ok"
        assert report.exit_code == 0

        # Every catalog package installed
        assert host.formulae == set(catalog.cli_tools.names) | set(catalog.languages.names)
        assert host.casks == set(catalog.applications.names)
        assert host.pip_packages == set(catalog.python_packages.names)

        # Git identity from prompts, plus defaults
        assert host.git_config["user.name"] == "Ada Lovelace"
        assert host.git_config["user.email"] == "ada@example.com"
        assert host.git_config["init.defaultBranch"] == "main"
        assert host.git_config["pull.rebase"] == "false"
        assert host.git_config["core.editor"] == "vim"

        # Optional sections untouched
        assert not (home / ".ssh" / "id_ed25519").exists()
        assert host.defaults == {}
        assert not host.ran("killall")

        # Shell framework and plugins
        assert (home / ".oh-my-zsh").is_dir()
        for plugin in catalog.shell_plugins:
            assert (home / ".oh-my-zsh" / "custom" / "plugins" / plugin.name).is_dir()

        # Summary with the five categories
        assert "Bootstrap Complete!" in ctx.reporter.messages("success")
        bullets = [text for level, text in ctx.reporter.history if level == "line" and "✓" in text]
        assert len(bullets) == 5
        assert bullets[0] == "  ✓ Homebrew package manager"

    def test_second_run_has_no_duplicate_side_effects(self, make_ctx, host):
        first = _run(make_ctx())
        assert first.status == "ok"
        mutations_after_first = len(host.mutations())

        ctx = make_ctx(answers={"generate_ssh_key": "n", "apply_macos_settings": "n"})
        second = _run(ctx)

        assert second.status == "ok"
        assert len(host.mutations()) == mutations_after_first
        for step in ("cli-tools", "languages", "applications", "shell-plugins", "oh-my-zsh"):
            assert all(r.status == "present" for r in second.receipts_for(step)), step
        # Identity was already set, so it was not asked again
        assert "git_username" not in ctx.prompter.asked
        assert "git_email" not in ctx.prompter.asked

    def test_accepting_optional_prompts(self, make_ctx, host, home, environ):
        ctx = make_ctx(answers=ACCEPT_ALL)
        report = _run(ctx)
        assert report.status == "ok"

        key = home / ".ssh" / "id_ed25519"
        assert key.is_file()
        assert host.ran("ssh-keygen", "-t", "ed25519", "-C", "ada@github.example", "-f", str(key))
        assert host.ran("ssh-add", str(key))
        assert environ["SSH_AUTH_SOCK"] == "/tmp/ssh-agent.sock"
        assert "ssh-ed25519 AAAAC3Nza ada@github.example" in [t for lvl, t in ctx.reporter.history if lvl == "line"]

        assert host.defaults[("com.apple.finder", "AppleShowAllFiles")] == "true"
        assert host.defaults[("NSGlobalDomain", "KeyRepeat")] == "2"
        assert host.defaults[("com.apple.screencapture", "location")] == str(home / "Screenshots")
        assert (home / "Screenshots").is_dir()
        assert host.ran("killall", "Finder")
        assert "macOS settings applied" in ctx.reporter.messages("success")

    def test_existing_ssh_key_is_not_overwritten(self, make_ctx, host, home):
        ssh_dir = home / ".ssh"
        ssh_dir.mkdir()
        (ssh_dir / "id_ed25519").write_text("EXISTING\n")

        ctx = make_ctx(answers=ACCEPT_ALL)
        report = _run(ctx)

        assert report.status == "ok"
        assert (ssh_dir / "id_ed25519").read_text() == "EXISTING\n"
        assert not host.ran("ssh-keygen")
        assert "github_email" not in ctx.prompter.asked
        assert "SSH key already exists" in ctx.reporter.messages("success")


class TestFailures:
    def test_wrong_platform_exits_before_any_command(self, make_ctx, host):
        ctx = make_ctx(platform="linux")
        report = _run(ctx)

        assert report.exit_code == 1
        assert host.calls == []
        assert ctx.reporter.messages("error") == ["This script is designed for macOS only"]

    def test_other_catalog_platform_is_named_verbatim(self, make_ctx, host, catalog):
        ctx = make_ctx(platform="darwin", catalog_override=catalog.model_copy(update={"platform": "linux"}))
        report = _run(ctx)

        assert report.exit_code == 1
        assert host.calls == []
        assert ctx.reporter.messages("error") == ["This script is designed for linux only"]

    def test_cli_tool_failure_halts_everything_after_it(self, make_ctx, host):
        host.fail("brew", "install", "wget", returncode=7)
        ctx = make_ctx()
        report = _run(ctx)

        assert report.status == "failed"
        assert report.exit_code == 7
        assert "curl" not in host.formulae
        assert host.casks == set()
        assert host.git_config == {}
        assert "Bootstrap Complete!" not in ctx.reporter.messages("success")

    def test_cask_failure_is_a_warning(self, make_ctx, host, catalog):
        host.fail("brew", "install", "--cask", "cursor")
        ctx = make_ctx()
        report = _run(ctx)

        assert report.status == "ok"
        assert host.casks == set(catalog.applications.names) - {"cursor"}
        assert "Failed to install cursor (may require manual installation)" in ctx.reporter.messages("warning")
        assert "Bootstrap Complete!" in ctx.reporter.messages("success")

    def test_ssh_failure_is_tolerated(self, make_ctx, host, home):
        host.fail("ssh-keygen")
        ctx = make_ctx(answers=ACCEPT_ALL)
        report = _run(ctx)

        assert report.status == "ok"
        assert not host.ran("ssh-add")
        assert report.tolerated == 1
        assert "Bootstrap Complete!" in ctx.reporter.messages("success")

    def test_empty_git_username_aborts(self, make_ctx, host):
        ctx = make_ctx(answers={**DECLINE_ALL, "git_username": "  "})
        report = _run(ctx)
        assert report.status == "failed"
        assert report.halted_by.step == "git"
        assert host.pip_packages == set()

    def test_unanswered_prompt_fails_its_step(self, make_ctx, host):
        ctx = make_ctx(answers={})
        report = _run(ctx)
        assert report.status == "failed"
        assert report.exit_code == 1
        assert report.halted_by.step == "git"
        assert "No answer provided for 'git_username'" in report.halted_by.error
        assert "user.name" not in host.git_config


class TestBootstrapPaths:
    def test_missing_command_line_tools_is_pending(self, make_ctx, host):
        host.command_line_tools = False
        ctx = make_ctx()
        report = _run(ctx)

        assert report.status == "pending"
        assert report.exit_code == 0
        assert host.ran("xcode-select", "--install")
        assert not any(call[0].endswith("brew") for call in host.calls)
        assert ctx.reporter.messages("warning") == [
            "Please complete the Command Line Tools installation and re-run this script"
        ]

    def test_fresh_homebrew_on_apple_silicon(self, make_ctx, host, home, environ):
        host.executables.discard("brew")
        ctx = make_ctx(machine="arm64")
        report = _run(ctx)

        assert report.status == "ok"
        assert host.ran("/bin/bash", "-c")
        assert "Homebrew installed" in ctx.reporter.messages("success")
        profile = (home / ".zprofile").read_text()
        assert profile.count('eval "$(/opt/homebrew/bin/brew shellenv)"') == 1
        assert environ["PATH"].startswith("/opt/homebrew/bin")

    def test_fresh_homebrew_on_intel_leaves_profile_alone(self, make_ctx, host, home):
        host.executables.discard("brew")
        report = _run(make_ctx(machine="x86_64"))
        assert report.status == "ok"
        assert not (home / ".zprofile").exists()

    def test_existing_homebrew_is_updated(self, make_ctx, host):
        report = _run(make_ctx())
        assert report.status == "ok"
        assert ["/usr/local/bin/brew", "update"] in host.calls
        assert not host.ran("/bin/bash", "-c")

    def test_dry_run_changes_nothing(self, make_ctx, host, home):
        ctx = make_ctx(dry_run=True, answers={"generate_ssh_key": "y", "github_email": "a@b.c", "apply_macos_settings": "y"})
        report = _run(ctx)

        assert report.status == "ok"
        assert host.mutations() == []
        assert host.git_config == {}
        assert not (home / ".oh-my-zsh").exists()
        assert report.changed == 0


class TestInterrupts:
    def test_ctrl_c_at_optional_prompt_stops_the_run(self, make_ctx, host, monkeypatch):
        def interrupted(_prompt=""):
            raise KeyboardInterrupt

        monkeypatch.setattr(click.termui, "visible_prompt_func", interrupted)
        ctx = make_ctx()
        ctx.prompter = ScriptedPrompter(
            {"git_username": "Ada Lovelace", "git_email": "ada@example.com"},
            fallback=ClickPrompter(),
        )

        with pytest.raises(PromptCancelled):
            _run(ctx)

        assert ctx.prompter.asked[-1] == "generate_ssh_key"
        assert "apply_macos_settings" not in ctx.prompter.asked
        assert ["/usr/local/bin/brew", "cleanup"] not in host.calls
        assert "Bootstrap Complete!" not in ctx.reporter.messages("success")
        assert ctx.reporter.messages("warning") == []
