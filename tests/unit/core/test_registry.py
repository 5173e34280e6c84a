"""Unit tests for the resource key registry."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor

import pytest

from filestuff.core.registry import (
    ResourceKeyRegistry,
    coerce_resource_keys,
    current_resource_keys,
    extend_resource_keys,
    get_default_registry,
)
from filestuff.types.models import DEFAULT_RESOURCE_KEYS, REQUIRED_RESOURCE_KEYS, ResourceKey


class TestCoerceResourceKeys:
    """Test conversion of key inputs."""

    @pytest.mark.unit
    def test_accepts_members_and_strings(self) -> None:
        """Test that members and string values can be mixed."""
        keys = coerce_resource_keys([ResourceKey.IS_HIDDEN, "link_count"])

        assert keys == frozenset({ResourceKey.IS_HIDDEN, ResourceKey.LINK_COUNT})

    @pytest.mark.unit
    def test_rejects_unknown_key(self) -> None:
        """Test that unknown key names raise ValueError."""
        with pytest.raises(ValueError):
            _ = coerce_resource_keys(["colour_label"])


class TestResourceKeyRegistry:
    """Test ResourceKeyRegistry behaviour."""

    @pytest.mark.unit
    def test_starts_with_default_keys(self, registry: ResourceKeyRegistry) -> None:
        """Test that a new registry holds exactly the default keys."""
        assert registry.current_keys() == DEFAULT_RESOURCE_KEYS
        assert len(registry) == len(DEFAULT_RESOURCE_KEYS)

    @pytest.mark.unit
    def test_required_keys_always_present(self) -> None:
        """Test that the classifier keys are added to any initial set."""
        registry = ResourceKeyRegistry([ResourceKey.FILE_SIZE])

        assert registry.current_keys() == REQUIRED_RESOURCE_KEYS | {ResourceKey.FILE_SIZE}

    @pytest.mark.unit
    def test_extend_adds_keys(self, registry: ResourceKeyRegistry) -> None:
        """Test that extended keys become part of the current set."""
        registry.extend([ResourceKey.IS_HIDDEN, "link_count"])

        assert ResourceKey.IS_HIDDEN in registry
        assert ResourceKey.LINK_COUNT in registry
        assert registry.current_keys() == DEFAULT_RESOURCE_KEYS | {
            ResourceKey.IS_HIDDEN,
            ResourceKey.LINK_COUNT,
        }

    @pytest.mark.unit
    def test_extend_with_present_keys_is_noop(self, registry: ResourceKeyRegistry) -> None:
        """Test that adding keys already present changes nothing."""
        before = registry.current_keys()

        registry.extend([ResourceKey.FILE_SIZE])
        registry.extend([])

        assert registry.current_keys() is before

    @pytest.mark.unit
    def test_extend_never_removes(self, registry: ResourceKeyRegistry) -> None:
        """Test that the key set only grows."""
        before = registry.current_keys()

        registry.extend([ResourceKey.CONTENT_ACCESS_DATE])

        assert before < registry.current_keys()

    @pytest.mark.unit
    def test_extend_rejects_unknown_key_atomically(self, registry: ResourceKeyRegistry) -> None:
        """Test that a bad key leaves the registry unchanged."""
        before = registry.current_keys()

        with pytest.raises(ValueError):
            registry.extend([ResourceKey.IS_HIDDEN, "colour_label"])

        assert registry.current_keys() == before

    @pytest.mark.unit
    def test_snapshot_is_not_affected_by_later_extension(self, registry: ResourceKeyRegistry) -> None:
        """Test that a snapshot read earlier does not change."""
        snapshot = registry.current_keys()

        registry.extend([ResourceKey.IS_WRITABLE])

        assert ResourceKey.IS_WRITABLE not in snapshot

    @pytest.mark.unit
    def test_extend_logs_added_keys(
        self,
        registry: ResourceKeyRegistry,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """Test that an extension is logged with the added keys."""
        with caplog.at_level(logging.DEBUG, logger="filestuff.core.registry"):
            registry.extend([ResourceKey.IS_HIDDEN])

        records = [record for record in caplog.records if record.getMessage() == "Extended resource keys"]
        assert len(records) == 1
        assert getattr(records[0], "added_keys") == ["is_hidden"]  # noqa: B009

    @pytest.mark.unit
    def test_concurrent_extensions_are_all_kept(self, registry: ResourceKeyRegistry) -> None:
        """Test that extensions from many threads are never lost."""
        extra = [key for key in ResourceKey if key not in DEFAULT_RESOURCE_KEYS]

        with ThreadPoolExecutor(max_workers=8) as executor:
            for _ in range(4):
                _ = list(executor.map(lambda key: registry.extend([key]), extra))

        assert registry.current_keys() == frozenset(ResourceKey)


class TestDefaultRegistry:
    """Test the process-wide registry helpers."""

    @pytest.mark.unit
    def test_default_registry_is_shared(self) -> None:
        """Test that the default registry is a single instance."""
        assert get_default_registry() is get_default_registry()

    @pytest.mark.unit
    def test_default_registry_holds_defaults(self) -> None:
        """Test that the process-wide registry contains the default keys."""
        assert DEFAULT_RESOURCE_KEYS <= current_resource_keys()

    @pytest.mark.unit
    def test_extend_resource_keys_updates_default_registry(self) -> None:
        """Test that module-level extension reaches the shared registry."""
        extend_resource_keys([ResourceKey.LINK_COUNT])

        assert ResourceKey.LINK_COUNT in current_resource_keys()
        assert ResourceKey.LINK_COUNT in get_default_registry()
