"""Bootstrap (composition root) for DATASTASH.

Assembles the application at runtime: reads configuration, builds the remote
store backend it names, and wires it into a `Datastore` with a cache root.

Import rules:
- Entry points import *this* package rather than individual adapters.
- This package may import every other `datastash` package.
- Inner layers must not import `datastash.bootstrap`.
"""

from .bootstrap import build_cache, build_datastore, build_remote_store

__all__ = ["build_cache", "build_datastore", "build_remote_store"]
