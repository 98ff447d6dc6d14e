"""Option tree: the question/answer decision tree behind every config.

A platform scanner describes what it can build as an ``OptionTree``. Each
``Question`` binds the chosen answer to an environment variable and
branches into a child node per answer; each ``ConfigLeaf`` names a
pipeline template of the owning platform.

Nodes live in a flat arena owned by the tree and refer to their children
by index. The same leaf may be reachable from several answers, which keeps
trees such as "ios / android / ios,android all lead to one config" small
and makes the whole structure trivially serializable.

Placeholder answers
-------------------
An answer key of ``"_"`` (``PLACEHOLDER``) means "any user-supplied string
is accepted here". Resolvers prompt for free text instead of offering a
fixed choice, and the exhaustive snapshot renders the key literally.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, Union

from ciseed.exceptions import OptionTreeError

PLACEHOLDER = "_"


@dataclass
class Question:
    """A node asking for one value.

    Attributes:
        title: Human-readable prompt (e.g. "Scheme name").
        env_key: Environment variable the answer is bound to. Empty for
            questions that only pick a branch.
        children: Answer string to child node index.
    """

    title: str
    env_key: str
    children: dict[str, int] = field(default_factory=dict)

    @property
    def answers(self) -> list[str]:
        """Return the answer keys in sorted order."""
        return sorted(self.children)

    @property
    def is_placeholder(self) -> bool:
        """True when the only accepted answer is free text."""
        return list(self.children) == [PLACEHOLDER]


@dataclass(frozen=True)
class ConfigLeaf:
    """A terminal node naming a pipeline template of the owning platform."""

    config_id: str


OptionNode = Union[Question, ConfigLeaf]


class OptionTree:
    """Arena-backed option tree.

    Build top-down or bottom-up::

        tree = OptionTree()
        leaf = tree.add_leaf("default-ios-config")
        scheme = tree.add_question("Scheme name", "BITRISE_SCHEME")
        tree.add_answer(scheme, PLACEHOLDER, leaf)
        project = tree.add_question("Project path", "BITRISE_PROJECT_PATH")
        tree.add_answer(project, PLACEHOLDER, scheme)
        tree.root = project

    If ``root`` is never assigned, the first node added is the root.
    """

    def __init__(self) -> None:
        self._nodes: list[OptionNode] = []
        self._root: int | None = None

    @classmethod
    def single_leaf(cls, config_id: str) -> OptionTree:
        """Create a tree consisting of one config leaf."""
        tree = cls()
        tree.add_leaf(config_id)
        return tree

    # -- Construction -------------------------------------------------------

    def add_question(self, title: str, env_key: str = "") -> int:
        """Append a question node and return its index."""
        return self._append(Question(title=title, env_key=env_key))

    def add_leaf(self, config_id: str) -> int:
        """Append a config leaf and return its index."""
        if not config_id:
            raise OptionTreeError("config leaf needs a non-empty config id")
        return self._append(ConfigLeaf(config_id=config_id))

    def add_answer(self, parent: int, answer: str, child: int) -> None:
        """Wire ``answer`` of question ``parent`` to node ``child``.

        Raises:
            OptionTreeError: If ``parent`` is not a question, ``child`` is
                out of range, or ``answer`` is already taken.
        """
        question = self.node(parent)
        if not isinstance(question, Question):
            raise OptionTreeError(f"node {parent} is a config leaf and cannot branch")
        self.node(child)
        if answer in question.children:
            raise OptionTreeError(
                f"duplicate answer {answer!r} for question {question.title!r}"
            )
        question.children[answer] = child

    def graft(
        self,
        other: OptionTree,
        node: int | None = None,
        rename: Callable[[str], str] | None = None,
    ) -> int:
        """Copy a subtree of ``other`` into this arena.

        Shared nodes stay shared in the copy.

        Args:
            other: Tree to copy from.
            node: Subtree root in ``other``; defaults to its root.
            rename: Optional config id rewrite applied to copied leaves.

        Returns:
            Index of the copied subtree root in this tree.
        """
        copied: dict[int, int] = {}

        def copy(index: int) -> int:
            if index in copied:
                return copied[index]
            source = other.node(index)
            if isinstance(source, ConfigLeaf):
                config_id = rename(source.config_id) if rename else source.config_id
                new_index = self.add_leaf(config_id)
            elif isinstance(source, Question):
                new_index = self.add_question(source.title, source.env_key)
                for answer, child in source.children.items():
                    self.add_answer(new_index, answer, copy(child))
            else:
                raise TypeError(f"unexpected option node: {source!r}")
            copied[index] = new_index
            return new_index

        return copy(other.root if node is None else node)

    def _append(self, node: OptionNode) -> int:
        self._nodes.append(node)
        if self._root is None:
            self._root = len(self._nodes) - 1
        return len(self._nodes) - 1

    # -- Access -------------------------------------------------------------

    @property
    def root(self) -> int:
        """Index of the root node."""
        if self._root is None:
            raise OptionTreeError("option tree is empty")
        return self._root

    @root.setter
    def root(self, index: int) -> None:
        self.node(index)
        self._root = index

    @property
    def root_node(self) -> OptionNode:
        return self.node(self.root)

    def node(self, index: int) -> OptionNode:
        """Return the node stored at ``index``."""
        if index < 0 or index >= len(self._nodes):
            raise OptionTreeError(f"no option node at index {index}")
        return self._nodes[index]

    def __len__(self) -> int:
        return len(self._nodes)

    def is_empty(self) -> bool:
        return self._root is None

    # -- Traversal ----------------------------------------------------------

    def paths(self) -> Iterator[tuple[list[str], str]]:
        """Yield every root-to-leaf path as ``(answers, config_id)``."""

        def walk(index: int, trail: list[str]) -> Iterator[tuple[list[str], str]]:
            current = self.node(index)
            if isinstance(current, ConfigLeaf):
                yield list(trail), current.config_id
            elif isinstance(current, Question):
                if not current.children:
                    raise OptionTreeError(
                        f"question {current.title!r} has no answers"
                    )
                for answer in current.answers:
                    yield from walk(current.children[answer], trail + [answer])
            else:
                raise TypeError(f"unexpected option node: {current!r}")

        yield from walk(self.root, [])

    def config_ids(self) -> list[str]:
        """Return every reachable config id, sorted and deduplicated."""
        return sorted({config_id for _, config_id in self.paths()})

    def validate(self) -> None:
        """Check that every path from the root ends at a config leaf.

        Raises:
            OptionTreeError: On an empty tree, a question without answers,
                or a cycle.
        """
        on_path: set[int] = set()

        def walk(index: int) -> None:
            if index in on_path:
                raise OptionTreeError(f"cycle through option node {index}")
            current = self.node(index)
            if isinstance(current, ConfigLeaf):
                return
            if not isinstance(current, Question):
                raise TypeError(f"unexpected option node: {current!r}")
            if not current.children:
                raise OptionTreeError(f"question {current.title!r} has no answers")
            on_path.add(index)
            for child in current.children.values():
                walk(child)
            on_path.discard(index)

        walk(self.root)

    # -- Serialization ------------------------------------------------------

    def to_dict(self, index: int | None = None) -> dict[str, Any]:
        """Render the (sub)tree as nested mappings.

        Questions become ``{title, env_key, value_map}`` with answers in
        sorted order, leaves become ``{config: <id>}``.
        """
        current = self.node(self.root if index is None else index)
        if isinstance(current, ConfigLeaf):
            return {"config": current.config_id}
        if isinstance(current, Question):
            return {
                "title": current.title,
                "env_key": current.env_key,
                "value_map": {
                    answer: self.to_dict(current.children[answer])
                    for answer in current.answers
                },
            }
        raise TypeError(f"unexpected option node: {current!r}")
