"""Option tree resolution: from questions to one chosen config.

``resolve()`` walks a platform's option tree from the root, one question
at a time:

1. A ``ConfigLeaf`` ends the walk with its config id and the environment
   assignments collected so far.
2. A ``Question`` is answered:
   - only the placeholder ``"_"`` -> ask the answer source for free text;
   - exactly one literal answer -> select it without asking;
   - several answers -> ask the answer source to pick one (sorted).
   The answer is bound to the question's ``env_key`` unless it is empty.
3. The walk descends into the only child when there is exactly one,
   whatever the answer was (this is how a free-text answer reaches the
   next question), and into ``children[answer]`` otherwise. A missing
   child ends the walk with ``NoConfigSelectedError``.

``ask_for_config()`` wraps this for a whole ``ScanResult``: pick the
platform, resolve its tree and compile the chosen template.
"""

from __future__ import annotations

import logging

from ciseed.answers import AnswerSource
from ciseed.compiler import compile_config
from ciseed.exceptions import NoConfigSelectedError
from ciseed.models.options import PLACEHOLDER, ConfigLeaf, OptionTree, Question
from ciseed.models.pipeline import EnvItem, PipelineDocument
from ciseed.models.scan_result import ScanResult

logger = logging.getLogger(__name__)

PLATFORM_TITLE = "platform"


def _answer(question: Question, answers: AnswerSource) -> str:
    choices = question.answers
    if len(choices) == 1:
        if choices[0] == PLACEHOLDER:
            return answers.ask_for_string(question.title, question.env_key)
        return choices[0]
    return answers.select_from_strings(question.title, question.env_key, choices)


def resolve(tree: OptionTree, answers: AnswerSource) -> tuple[str, list[EnvItem]]:
    """Resolve an option tree to a config id.

    Args:
        tree: The platform's option tree.
        answers: Source of answers for the questions that need one.

    Returns:
        The chosen config id and the ordered environment assignments.

    Raises:
        NoConfigSelectedError: If an answer leads nowhere.
        AnswerError: If the answer source cannot answer.
    """
    envs: list[EnvItem] = []
    index = tree.root
    while True:
        node = tree.node(index)
        if isinstance(node, ConfigLeaf):
            logger.debug("Selected config %s with %d env(s)", node.config_id, len(envs))
            return node.config_id, envs
        if not isinstance(node, Question):
            raise TypeError(f"unexpected option node: {node!r}")

        selected = _answer(node, answers)
        if node.env_key:
            envs.append({node.env_key: selected})

        if len(node.children) == 1:
            index = next(iter(node.children.values()))
        elif selected in node.children:
            index = node.children[selected]
        else:
            raise NoConfigSelectedError(
                f"no config selected: {selected!r} is not an answer of {node.title!r}"
            )


def select_platform(scan_result: ScanResult, answers: AnswerSource) -> str:
    """Pick the platform to configure; auto-selects a single platform.

    Raises:
        NoConfigSelectedError: If the scan result holds no platform, or
            the answer is not one of them.
    """
    platforms = scan_result.platforms
    if not platforms:
        raise NoConfigSelectedError("no platform detected")
    if len(platforms) == 1:
        return platforms[0]
    platform = answers.select_from_strings(PLATFORM_TITLE, "", platforms)
    if platform not in scan_result.platform_trees:
        raise NoConfigSelectedError(f"invalid platform selected: {platform}")
    return platform


def ask_for_config(scan_result: ScanResult, answers: AnswerSource) -> PipelineDocument:
    """Select a platform and config, and compile the pipeline document."""
    platform = select_platform(scan_result, answers)
    config_id, envs = resolve(scan_result.platform_trees[platform], answers)
    logger.info("Platform %s, config %s", platform, config_id)
    return compile_config(
        platform, config_id, envs, scan_result.platform_templates[platform]
    )
