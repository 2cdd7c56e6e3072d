"""Domain layer for REPOBUILDER.

Contains the repository records the builders create (communities, collections,
items, e-persons and bitstreams) and the domain error hierarchy raised by the
persistence services. This package is deliberately technology-agnostic.

Dependency rule: do not import from `repobuilder.adapters` or
`repobuilder.entrypoints`.
"""
