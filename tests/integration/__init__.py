"""Integration tests.

Purpose
- Exercise real cross-process behavior: several spawned processes sharing
  one cache root and one directory-backed remote store.

Guidelines
- Children are started with the ``spawn`` method; their targets live in
  tests/helpers/workers.py.
- Every wait has a timeout so a broken lock fails instead of hanging.
"""
