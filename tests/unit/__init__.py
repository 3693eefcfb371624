"""Unit tests.

Purpose
- Verify a single module/class/function in isolation: coordinates, config,
  the archive codec, the cache layout, the S3 adapter (stubbed client) and
  the datastore over an in-memory remote.

Guidelines
- Temporary directories are fine; network and real S3 are not.
- Keep tests small, fast, and deterministic.
"""
