"""Service layer for DATASTASH.

Implements the application use-cases (publish, resolve, list, wipe) in
`datastash.service_layer.datastore`. The remote store is injected; the local
side is built from the cache-directory, archive and lock adapters.

Dependency rule: may import `datastash.domain`, `datastash.interfaces` and the
local-disk adapters, but not `datastash.entrypoints` or `datastash.bootstrap`.
"""
