"""DATASTASH

A versioned artifact cache. Files and directories are published to a remote
object store under a stable `(group, name, version)` coordinate and resolved
back to a local path on demand, downloading and unpacking each coordinate at
most once per cache root.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
