"""Interfaces (application boundary) for REPOBUILDER.

Defines framework-free contracts consumed by the builder lifecycle: the scoped
persistence session, one service per repository record kind, the indexing
service, the asset store and ID generators. Business rules stay out of this
package.

Dependency rule: this package may import `repobuilder.domain` only. It may be
imported by `repobuilder.builders`, `repobuilder.adapters`, and
`repobuilder.bootstrap`.
"""
