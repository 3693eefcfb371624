"""Entry points into DATASTASH (outermost layer).

Entry points translate user input into calls on a `Datastore` built by
`datastash.bootstrap` and render results and errors for humans.

Import rules:
- May import `datastash.bootstrap`, `datastash.config` and domain types.
- Nothing inside the library imports from `datastash.entrypoints`.
"""
