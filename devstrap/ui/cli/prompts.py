"""
Operator prompts.

Every question devstrap asks has a stable key, so a run can be driven
from a YAML answers file (``devstrap run --answers``) or from a dict in
tests instead of a terminal:

    git_username           Git username (asked only when unset)
    git_email              Git email (asked only when unset)
    generate_ssh_key       yes/no
    github_email           email comment for the new SSH key
    apply_macos_settings   yes/no
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping

import click

logger = logging.getLogger(__name__)

_YES = {"y", "yes", "true", "1"}
_NO = {"n", "no", "false", "0", ""}


class PromptError(Exception):
    """Raised when a prompt cannot be answered."""


class PromptCancelled(KeyboardInterrupt):
    """The operator interrupted a prompt (Ctrl-C or end of input).

    Derives from KeyboardInterrupt so no step policy can tolerate it:
    the run stops where it is and click exits with "Aborted!".
    """


def parse_yes_no(answer: str) -> bool:
    """Interpret a canned yes/no answer; anything else is an error."""
    normalized = answer.strip().lower()
    if normalized in _YES:
        return True
    if normalized in _NO:
        return False
    raise PromptError(f"Not a yes/no answer: {answer!r}")


class Prompter(ABC):
    """Source of operator input."""

    @abstractmethod
    def ask(self, key: str, text: str) -> str:
        """Ask for a free-text value."""

    @abstractmethod
    def confirm(self, key: str, text: str) -> bool:
        """Ask a yes/no question. Defaults to no."""


class ClickPrompter(Prompter):
    """Interactive prompts on the controlling terminal."""

    def __init__(self, err: bool = False):
        self._err = err

    def ask(self, key: str, text: str) -> str:
        try:
            return click.prompt(text, err=self._err).strip()
        except click.Abort:
            raise PromptCancelled(key) from None

    def confirm(self, key: str, text: str) -> bool:
        try:
            return click.confirm(text, default=False, err=self._err)
        except click.Abort:
            raise PromptCancelled(key) from None


class ScriptedPrompter(Prompter):
    """Answers from a mapping, optionally falling back to another prompter.

    Every question asked is recorded in ``asked`` in order.
    """

    def __init__(self, answers: Mapping[str, str | bool], fallback: Prompter | None = None):
        self._answers = dict(answers)
        self._fallback = fallback
        self.asked: list[str] = []

    def _lookup(self, key: str) -> str | bool | None:
        self.asked.append(key)
        return self._answers.get(key)

    def ask(self, key: str, text: str) -> str:
        answer = self._lookup(key)
        if answer is None:
            if self._fallback is None:
                raise PromptError(f"No answer provided for '{key}'")
            return self._fallback.ask(key, text)
        logger.debug("Scripted answer for %s", key)
        return str(answer).strip()

    def confirm(self, key: str, text: str) -> bool:
        answer = self._lookup(key)
        if answer is None:
            if self._fallback is None:
                raise PromptError(f"No answer provided for '{key}'")
            return self._fallback.confirm(key, text)
        if isinstance(answer, bool):
            return answer
        return parse_yes_no(answer)
