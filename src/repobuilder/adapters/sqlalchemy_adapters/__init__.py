"""SQLAlchemy persistence backend.

Records live in the repository tables (see `repobuilder.adapters.db.schema`),
bitstream bytes in an injected asset store. Sessions wrap a single SQLAlchemy
Connection.
"""

from .services import (
    SqlAlchemyBitstreamService,
    SqlAlchemyCollectionService,
    SqlAlchemyCommunityService,
    SqlAlchemyEPersonService,
    SqlAlchemyItemService,
)
from .session import SqlAlchemySession

__all__ = [
    "SqlAlchemyBitstreamService",
    "SqlAlchemyCollectionService",
    "SqlAlchemyCommunityService",
    "SqlAlchemyEPersonService",
    "SqlAlchemyItemService",
    "SqlAlchemySession",
]
