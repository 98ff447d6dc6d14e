"""Property-based tests for option tree resolution.

Verifies on randomly generated trees that:
- Resolution is deterministic for a fixed answer sequence.
- Every path reported by ``paths()`` resolves to its own config id.
- Only env keys of questions on the chosen path are bound.
"""
from __future__ import annotations

from hypothesis import given, settings
from hypothesis import strategies as st

from ciseed.answers import AnswerSource
from ciseed.models.options import PLACEHOLDER, OptionTree, Question
from ciseed.resolver import resolve


class PathAnswers(AnswerSource):
    """Answers each question with the answer a given path takes there."""

    def __init__(self, tree: OptionTree, path: list[str], free_text: str = "typed") -> None:
        self.free_text = free_text
        self.by_title: dict[str, str] = {}
        index = tree.root
        for answer in path:
            node = tree.node(index)
            assert isinstance(node, Question)
            self.by_title[node.title] = answer
            index = node.children[answer]

    def ask_for_string(self, title: str, env_key: str) -> str:
        assert self.by_title[title] == PLACEHOLDER
        return self.free_text

    def select_from_strings(self, title: str, env_key: str, choices: list[str]) -> str:
        answer = self.by_title[title]
        assert answer in choices
        return answer


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

answers = st.text(alphabet=st.sampled_from("abcdefgh./"), min_size=1, max_size=6).filter(
    lambda s: s != PLACEHOLDER
)


@st.composite
def option_trees(draw: st.DrawFn, max_depth: int = 3) -> OptionTree:
    """Generate a valid tree; each question gets a unique env key."""
    tree = OptionTree()
    counter = {"questions": 0, "leaves": 0}

    def build(depth: int) -> int:
        if depth >= max_depth or draw(st.booleans()):
            counter["leaves"] += 1
            return tree.add_leaf(f"config-{counter['leaves']}")
        counter["questions"] += 1
        env_key = draw(st.sampled_from(["", f"KEY_{counter['questions']}"]))
        question = tree.add_question(f"Question {counter['questions']}", env_key)
        if draw(st.booleans()):
            tree.add_answer(question, PLACEHOLDER, build(depth + 1))
        else:
            for answer in draw(st.lists(answers, min_size=1, max_size=3, unique=True)):
                tree.add_answer(question, answer, build(depth + 1))
        return question

    tree.root = build(0)
    return tree


def _path_keys(tree: OptionTree, path: list[str]) -> list[str]:
    keys: list[str] = []
    index = tree.root
    for answer in path:
        node = tree.node(index)
        assert isinstance(node, Question)
        if node.env_key:
            keys.append(node.env_key)
        index = node.children[answer]
    return keys


@given(tree=option_trees())
@settings(max_examples=100)
def test_every_path_resolves_to_its_config(tree: OptionTree) -> None:
    """Answering along a path reaches that path's leaf."""
    for path, config_id in tree.paths():
        assert resolve(tree, PathAnswers(tree, path))[0] == config_id


@given(tree=option_trees())
@settings(max_examples=100)
def test_resolution_deterministic(tree: OptionTree) -> None:
    """Same tree, same answers -> same config id and assignments."""
    for path, _ in tree.paths():
        assert resolve(tree, PathAnswers(tree, path)) == resolve(tree, PathAnswers(tree, path))


@given(tree=option_trees())
@settings(max_examples=100)
def test_only_path_keys_bound(tree: OptionTree) -> None:
    """Assignments are exactly the env keys along the chosen path, in order."""
    for path, _ in tree.paths():
        _, envs = resolve(tree, PathAnswers(tree, path))
        assert [next(iter(env)) for env in envs] == _path_keys(tree, path)
