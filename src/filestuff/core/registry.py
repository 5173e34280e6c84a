"""Metadata key registry.

The registry holds the set of metadata keys requested for every entry read
by a load. It starts from a default set and only ever grows.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable

from filestuff.types.aliases import ResourceKeyInput
from filestuff.types.models import (
    DEFAULT_RESOURCE_KEYS,
    REQUIRED_RESOURCE_KEYS,
    ResourceKey,
)

logger = logging.getLogger(__name__)


def coerce_resource_keys(keys: ResourceKeyInput) -> frozenset[ResourceKey]:
    """Convert resource keys given as members or string values.

    Args:
        keys: Iterable of ``ResourceKey`` members or their string values

    Returns:
        Frozen set of ``ResourceKey`` members

    Raises:
        ValueError: If a string does not name a known resource key
    """
    return frozenset(ResourceKey(key) for key in keys)


class ResourceKeyRegistry:
    """Append-only, thread-safe set of metadata keys.

    Reads return an immutable snapshot, so a reader always observes either
    the set before an extension or the set after it.
    """

    def __init__(self, keys: Iterable[ResourceKey] = DEFAULT_RESOURCE_KEYS) -> None:
        """Initialize the registry.

        Args:
            keys: Initial keys; the keys the classifier needs are always added
        """
        self._lock: threading.Lock = threading.Lock()
        self._keys: frozenset[ResourceKey] = coerce_resource_keys(keys) | REQUIRED_RESOURCE_KEYS

    def current_keys(self) -> frozenset[ResourceKey]:
        """Return the keys requested by subsequent loads."""
        with self._lock:
            return self._keys

    def extend(self, keys: ResourceKeyInput) -> None:
        """Add keys to the registry.

        Adding keys that are already present changes nothing. The change is
        visible to every load started afterwards.

        Args:
            keys: Keys to add

        Raises:
            ValueError: If a string does not name a known resource key
        """
        additions = coerce_resource_keys(keys)
        with self._lock:
            added = additions - self._keys
            if not added:
                return
            self._keys = self._keys | added

        logger.debug(
            "Extended resource keys",
            extra={"added_keys": sorted(key.value for key in added)},
        )

    def __contains__(self, key: object) -> bool:
        return key in self.current_keys()

    def __len__(self) -> int:
        return len(self.current_keys())


# Process-wide registry used when a caller does not inject one
_default_registry: ResourceKeyRegistry = ResourceKeyRegistry()


def get_default_registry() -> ResourceKeyRegistry:
    """Get the process-wide resource key registry.

    Returns:
        Default registry instance
    """
    return _default_registry


def extend_resource_keys(keys: ResourceKeyInput) -> None:
    """Add keys to the process-wide registry.

    Keys added persist until the process exits and take effect for every
    subsequent load that uses the default registry.

    Args:
        keys: Keys to add

    Raises:
        ValueError: If a string does not name a known resource key
    """
    _default_registry.extend(keys)


def current_resource_keys() -> frozenset[ResourceKey]:
    """Return the keys of the process-wide registry."""
    return _default_registry.current_keys()
