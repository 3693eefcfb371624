"""Contract tests.

Purpose
- Run one behavioral suite against every RemoteStore backend (memory, local
  directory) and every LockProvider (lock files) so they
  stay interchangeable behind the datastore.

Guidelines
- Parametrize implementations via fixtures; assert only the public contract.
"""
