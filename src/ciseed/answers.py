"""Answer sources for the option tree resolver.

The resolver never talks to a terminal itself; it asks an ``AnswerSource``
for either a free-text string (placeholder questions) or one choice among
a fixed set. Two sources ship with ciseed:

- ``ConsoleAnswerSource`` -- prompts the user through click.
- ``PresetAnswerSource`` -- answers from a ``{ENV_KEY: value}`` mapping,
  for CI runs and tests. Unanswered choice questions fall back to the
  first choice; unanswered free-text questions are an error.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

import click

from ciseed.exceptions import AnswerError


class AnswerSource(ABC):
    """Where the resolver gets its answers from."""

    @abstractmethod
    def ask_for_string(self, title: str, env_key: str) -> str:
        """Return a free-text answer for the question ``title``."""

    @abstractmethod
    def select_from_strings(self, title: str, env_key: str, choices: list[str]) -> str:
        """Return one of ``choices`` for the question ``title``."""


class ConsoleAnswerSource(AnswerSource):
    """Interactive answers read from the terminal.

    Aborting a prompt (Ctrl-C, EOF) raises ``click.Abort``, which unwinds
    the whole resolution.
    """

    def ask_for_string(self, title: str, env_key: str) -> str:
        return click.prompt(f"Provide: {title}", type=str).strip()

    def select_from_strings(self, title: str, env_key: str, choices: list[str]) -> str:
        click.echo(f"Select: {title}")
        for number, choice in enumerate(choices, start=1):
            click.echo(f"  [{number}] {choice}")
        number = click.prompt(
            "Please select from the list",
            type=click.IntRange(1, len(choices)),
        )
        return choices[number - 1]


class PresetAnswerSource(AnswerSource):
    """Non-interactive answers keyed by environment variable name.

    Questions are matched by ``env_key``, falling back to the question
    title for branch-only questions without an env key.

    Attributes:
        answers: Env key (or title) to answer.
        asked: Titles of the questions actually asked, in order.
    """

    def __init__(self, answers: dict[str, str] | None = None) -> None:
        self.answers = dict(answers or {})
        self.asked: list[str] = []

    def _lookup(self, title: str, env_key: str) -> str | None:
        self.asked.append(title)
        if env_key and env_key in self.answers:
            return self.answers[env_key]
        return self.answers.get(title)

    def ask_for_string(self, title: str, env_key: str) -> str:
        answer = self._lookup(title, env_key)
        if answer is None:
            raise AnswerError(f"no answer provided for {env_key or title!r}")
        return answer

    def select_from_strings(self, title: str, env_key: str, choices: list[str]) -> str:
        if not choices:
            raise AnswerError(f"nothing to select for {title!r}")
        answer = self._lookup(title, env_key)
        if answer is None:
            return choices[0]
        if answer not in choices:
            raise AnswerError(
                f"answer {answer!r} for {env_key or title!r} is not one of {choices}"
            )
        return answer
