"""Domain layer for DATASTASH.

Contains the addressing rules: the coordinate value object, the pure mappings
from a coordinate to a remote key and a local cache path, and the domain
errors raised when a coordinate is malformed or absent.

Dependency rule: do not import from `datastash.adapters` or `datastash.entrypoints`.
"""
