"""Interfaces (application boundary) for DATASTASH.

Defines framework-free contracts shared by the service layer and adapters:
the remote object store and the per-coordinate lock provider. Business rules
stay out of this package.

Dependency rule: this package is independent of the other `datastash.*`
layers. It may be imported by `datastash.service_layer`, `datastash.adapters`,
and `datastash.bootstrap`.
"""
