"""DATASTASH test suite.

Folder taxonomy
- unit/         : Isolated, fast checks of a single module/class/function.
- contract/     : Shared behavior enforced across every RemoteStore and
                  LockProvider implementation.
- integration/  : Real interactions across processes and the filesystem
                  (multiprocess locking, shared remote directories).
- e2e/          : The ``datastash`` CLI invoked through Click's CliRunner.
- helpers/      : Shared fakes and subprocess targets (no tests here).

Markers are applied by directory (see tests/conftest.py); property-based
tests additionally carry ``@pytest.mark.property``.
"""
