"""Support namespace for cross-cutting, dependency-light helpers.

This package provides a neutral location for small, reusable functions that
would otherwise clutter feature packages. It is not a new architectural layer.

Scope:
- Small, stateless helpers with minimal dependencies (path aliases, removal of
  files or trees).
- No business rules, no orchestration, no wiring.

Import direction:
- May be imported by any DATASTASH package.
- Must not import from application packages.

Public API:
- Nothing is re-exported at the package level. Import specific helpers from
  their defining modules.
"""
