"""Deterministic YAML reading and writing.

Snapshots and pipeline documents are compared byte-for-byte by downstream
tooling, so every dump goes through ``dump_yaml``: mapping keys keep their
insertion order, multi-line strings (pipeline templates embedded in a scan
result) are written as literal ``|`` blocks, and line width is unbounded so
long values are never folded.
"""

from __future__ import annotations

from typing import Any

import yaml


class _BlockDumper(yaml.SafeDumper):
    """SafeDumper that writes multi-line strings as literal blocks."""

    def ignore_aliases(self, data: Any) -> bool:
        # Step items are shared between workflows; write them out in full.
        return True


def _represent_str(dumper: yaml.SafeDumper, data: str) -> yaml.ScalarNode:
    if "\n" in data:
        return dumper.represent_scalar("tag:yaml.org,2002:str", data, style="|")
    return dumper.represent_scalar("tag:yaml.org,2002:str", data)


_BlockDumper.add_representer(str, _represent_str)


def dump_yaml(data: Any) -> str:
    """Serialize ``data`` to YAML, preserving mapping order."""
    return yaml.dump(
        data,
        Dumper=_BlockDumper,
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
        width=float("inf"),
    )


def load_yaml(text: str) -> Any:
    """Parse YAML text with the safe loader."""
    return yaml.safe_load(text)
