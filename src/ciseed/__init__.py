"""ciseed: Detect mobile build platforms in a repository and seed a CI config."""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"
