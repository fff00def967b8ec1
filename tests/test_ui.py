"""
Tests for the console reporter, the summary and operator prompts.
"""

import pytest

from devstrap.core.models.catalog import Catalog, Summary
from devstrap.ui.cli.console import ConsoleReporter, print_summary
from devstrap.ui.cli.prompts import PromptError, Prompter, ScriptedPrompter, parse_yes_no


class TestConsoleReporter:
    def test_tags(self, capsys):
        reporter = ConsoleReporter(color=False)
        reporter.info("Installing jq...")
        reporter.success("jq already installed")
        reporter.warning("Failed to install cursor")
        reporter.error("Failed to install wget")

        out = capsys.readouterr().out.splitlines()
        assert out == [
            "[INFO] Installing jq...",
            "[SUCCESS] jq already installed",
            "[WARNING] Failed to install cursor",
            "[ERROR] Failed to install wget",
        ]

    def test_color_codes(self, capsys):
        reporter = ConsoleReporter(color=True)
        reporter.error("boom")
        out = capsys.readouterr().out
        assert "\x1b[31m[ERROR]" in out

    def test_err_writes_to_stderr(self, capsys):
        reporter = ConsoleReporter(color=False, err=True)
        reporter.success("jq already installed")
        reporter.line("  ✓ Homebrew package manager")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err.splitlines() == ["[SUCCESS] jq already installed", "  ✓ Homebrew package manager"]

    def test_history(self):
        reporter = ConsoleReporter(color=False)
        reporter.info("a")
        reporter.line("  plain")
        reporter.info("b")
        assert reporter.messages("info") == ["a", "b"]
        assert reporter.history[1] == ("line", "  plain")


class TestSummary:
    def test_full_summary(self, capsys):
        catalog = Catalog(
            summary=Summary(
                installed=["Homebrew package manager", "Oh My Zsh with plugins"],
                next_steps=["Restart your terminal", "Add your SSH key to GitHub"],
                note="Some applications may require additional configuration",
            )
        )
        print_summary(ConsoleReporter(color=False), catalog)
        out = capsys.readouterr().out

        assert "[SUCCESS] Bootstrap Complete!" in out
        assert out.count("[SUCCESS] ========================================") == 2
        assert "  ✓ Homebrew package manager" in out
        assert "  2. Add your SSH key to GitHub" in out
        assert "[WARNING] Note: Some applications may require additional configuration" in out
        assert out.index("Installed tools:") < out.index("Next steps:") < out.index("Note:")

    def test_empty_sections_are_omitted(self, capsys):
        print_summary(ConsoleReporter(color=False), Catalog())
        out = capsys.readouterr().out
        assert "Bootstrap Complete!" in out
        assert "Installed tools:" not in out
        assert "Note:" not in out


class TestPrompts:
    @pytest.mark.parametrize("answer", ["y", "YES", " true ", "1"])
    def test_yes(self, answer):
        assert parse_yes_no(answer)

    @pytest.mark.parametrize("answer", ["n", "No", "false", "0", "", "False"])
    def test_no(self, answer):
        assert not parse_yes_no(answer)

    def test_garbage_is_an_error(self):
        with pytest.raises(PromptError):
            parse_yes_no("maybe")

    def test_scripted_answers_are_recorded(self):
        prompter = ScriptedPrompter({"git_username": "  Ada  ", "generate_ssh_key": True})
        assert prompter.ask("git_username", "Enter your Git username") == "Ada"
        assert prompter.confirm("generate_ssh_key", "Generate?")
        assert prompter.asked == ["git_username", "generate_ssh_key"]

    def test_missing_answer_without_fallback(self):
        with pytest.raises(PromptError, match="git_email"):
            ScriptedPrompter({}).ask("git_email", "Enter your Git email")

    def test_missing_answer_uses_fallback(self):
        class Always(Prompter):
            def ask(self, key, text):
                return f"fallback:{key}"

            def confirm(self, key, text):
                return True

        prompter = ScriptedPrompter({"git_username": "Ada"}, fallback=Always())
        assert prompter.ask("git_email", "Enter your Git email") == "fallback:git_email"
        assert prompter.confirm("apply_macos_settings", "Apply?")
        assert prompter.ask("git_username", "Enter your Git username") == "Ada"
