"""Builder lifecycle: locator, registry, builders, teardown and leak sweep."""

from .base import DEFAULT_PRIORITY, Builder, BuildResult
from .bitstream import BitstreamBuilder
from .collection import CollectionBuilder
from .community import CommunityBuilder
from .eperson import EPersonBuilder
from .errors import (
    BuilderError,
    ConfigurationError,
    CreationError,
    DeletionError,
    DuplicateRegistrationError,
    InvalidPriorityError,
    LeakDetectedError,
    LeakSweepError,
    RunFailedError,
    ServicesNotInitializedError,
    TeardownError,
)
from .item import ItemBuilder
from .locator import ServiceHandles, ServiceLocator
from .registry import BuilderRegistry
from .sweeper import LeakSweeper, SweepReport
from .teardown import TeardownCoordinator, teardown_order

__all__ = [
    "DEFAULT_PRIORITY",
    "BitstreamBuilder",
    "BuildResult",
    "Builder",
    "BuilderError",
    "BuilderRegistry",
    "CollectionBuilder",
    "CommunityBuilder",
    "ConfigurationError",
    "CreationError",
    "DeletionError",
    "DuplicateRegistrationError",
    "EPersonBuilder",
    "InvalidPriorityError",
    "ItemBuilder",
    "LeakDetectedError",
    "LeakSweepError",
    "LeakSweeper",
    "RunFailedError",
    "ServiceHandles",
    "ServiceLocator",
    "SweepReport",
    "TeardownCoordinator",
    "TeardownError",
    "teardown_order",
]
