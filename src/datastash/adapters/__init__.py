"""Adapters (infrastructure) for DATASTASH.

Provide concrete implementations of the interfaces: remote object stores
(memory, local directory, S3), file-backed lock providers, the on-disk cache
directory and the archive codec used for directory artifacts.

Dependency rule: may import `datastash.domain` and `datastash.interfaces`;
neither of those may import this package.
"""
