"""Tests for the answer sources."""

from __future__ import annotations

import click
import pytest
from click.testing import CliRunner

from ciseed.answers import ConsoleAnswerSource, PresetAnswerSource
from ciseed.exceptions import AnswerError


class TestPresetAnswerSource:
    """Answers from a mapping."""

    def test_by_env_key(self) -> None:
        source = PresetAnswerSource({"BITRISE_SCHEME": "App"})
        assert source.ask_for_string("Scheme name", "BITRISE_SCHEME") == "App"
        assert source.asked == ["Scheme name"]

    def test_by_title_without_env_key(self) -> None:
        source = PresetAnswerSource({"Build Platform": "iOS"})
        assert source.select_from_strings("Build Platform", "", ["Android", "iOS"]) == "iOS"

    def test_missing_string_answer(self) -> None:
        with pytest.raises(AnswerError, match="BITRISE_SCHEME"):
            PresetAnswerSource().ask_for_string("Scheme name", "BITRISE_SCHEME")

    def test_missing_choice_takes_first(self) -> None:
        source = PresetAnswerSource()
        assert source.select_from_strings("Gradle task to run", "GRADLE_TASK", ["a", "b"]) == "a"

    def test_answer_not_in_choices(self) -> None:
        source = PresetAnswerSource({"GRADLE_TASK": "lint"})
        with pytest.raises(AnswerError, match="lint"):
            source.select_from_strings("Gradle task to run", "GRADLE_TASK", ["assemble"])

    def test_no_choices(self) -> None:
        with pytest.raises(AnswerError):
            PresetAnswerSource().select_from_strings("Scheme name", "BITRISE_SCHEME", [])


def _run(callback, user_input: str):
    @click.command()
    def command() -> None:
        click.echo(f"ANSWER={callback()}")

    return CliRunner().invoke(command, input=user_input)


class TestConsoleAnswerSource:
    """Prompts through click."""

    def test_ask_for_string(self) -> None:
        source = ConsoleAnswerSource()
        result = _run(lambda: source.ask_for_string("Scheme name", "BITRISE_SCHEME"), "  App \n")
        assert result.exit_code == 0
        assert "Provide: Scheme name" in result.output
        assert "ANSWER=App" in result.output

    def test_select_from_strings(self) -> None:
        source = ConsoleAnswerSource()
        result = _run(
            lambda: source.select_from_strings("Platform", "", ["android", "ios"]), "2\n"
        )
        assert result.exit_code == 0
        assert "[1] android" in result.output
        assert "ANSWER=ios" in result.output

    def test_select_rejects_out_of_range(self) -> None:
        source = ConsoleAnswerSource()
        result = _run(
            lambda: source.select_from_strings("Platform", "", ["android", "ios"]), "5\n1\n"
        )
        assert "ANSWER=android" in result.output

    def test_abort_on_eof(self) -> None:
        source = ConsoleAnswerSource()
        result = _run(lambda: source.ask_for_string("Scheme name", "BITRISE_SCHEME"), "")
        assert result.exit_code == 1
        assert "ANSWER=" not in result.output
