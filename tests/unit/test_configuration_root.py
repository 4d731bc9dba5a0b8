"""Unit tests for the layered configuration host.

Tests cover:
- Last-layer-wins precedence and case-insensitive keys
- Sections, flat snapshots and pydantic binding
- Builder ordering (each source sees earlier layers)
- ConfigurationManager live layers
- Reload, change callbacks and close
"""

from unittest.mock import Mock

import pytest
from pydantic import BaseModel

from vault_config.configuration import (
    ConfigurationBuilder,
    ConfigurationManager,
    ConfigurationProvider,
    ConfigurationRoot,
    MemoryConfigurationProvider,
    combine_keys,
)


class DatabaseSettings(BaseModel):
    host: str
    port: int
    connection_string: str | None = None
    replicas: list[str] = []


class RecordingSource:
    """Source that records what it could read when it was built."""

    def __init__(self, probe_key: str):
        self.probe_key = probe_key
        self.seen: str | None = None

    def build(self, configuration):
        self.seen = configuration.get(self.probe_key)
        return MemoryConfigurationProvider({"Recorded": "yes"})


@pytest.mark.unit
class TestConfigurationProvider:
    """Test the base provider snapshot."""

    def test_try_get_is_case_insensitive(self):
        """Test keys match regardless of case."""
        provider = MemoryConfigurationProvider({"Database:Password": "p"})

        assert provider.try_get("database:PASSWORD") == (True, "p")
        assert provider.try_get("absent") == (False, None)

    def test_keys_keep_original_casing(self):
        """Test keys() reports keys as written."""
        provider = MemoryConfigurationProvider({"Database:Password": "p"})

        assert provider.keys() == ["Database:Password"]

    def test_set_replaces_snapshot(self):
        """Test set() publishes a new snapshot including the key."""
        provider = ConfigurationProvider()
        before = provider._data

        provider.set("Feature:Enabled", "true")

        assert provider.try_get("feature:enabled") == (True, "true")
        assert before == {}

    def test_none_value_is_found(self):
        """Test an explicit None value counts as defined."""
        provider = MemoryConfigurationProvider({"Optional": None})

        assert provider.try_get("Optional") == (True, None)


@pytest.mark.unit
class TestConfigurationRoot:
    """Test reads across layers."""

    @pytest.fixture
    def configuration(self):
        return (
            ConfigurationBuilder()
            .add_in_memory_collection(
                {"Database:Host": "localhost", "Database:Port": "5432", "Name": "app"}
            )
            .add_in_memory_collection({"database:host": "db.internal", "Empty": None})
            .build()
        )

    def test_last_layer_wins(self, configuration):
        """Test the layer added last overrides earlier ones."""
        assert configuration["Database:Host"] == "db.internal"
        assert configuration["Database:Port"] == "5432"

    def test_get_default(self, configuration):
        """Test get() falls back to the default."""
        assert configuration.get("Absent") is None
        assert configuration.get("Absent", "fallback") == "fallback"

    def test_getitem_missing_raises_key_error(self, configuration):
        """Test indexing an undefined key raises KeyError."""
        with pytest.raises(KeyError):
            configuration["Absent"]

    def test_contains(self, configuration):
        """Test membership includes keys holding None."""
        assert "DATABASE:HOST" in configuration
        assert "Empty" in configuration
        assert "Absent" not in configuration
        assert 42 not in configuration

    def test_keys_and_as_dict(self, configuration):
        """Test the merged view uses the winning layer's casing."""
        assert configuration.as_dict() == {
            "database:host": "db.internal",
            "Database:Port": "5432",
            "Name": "app",
            "Empty": None,
        }
        assert len(configuration) == 4
        assert sorted(configuration) == sorted(configuration.keys())

    def test_get_section(self, configuration):
        """Test sections read keys relative to their path."""
        section = configuration.get_section("Database")

        assert section.key == "Database"
        assert section["Host"] == "db.internal"
        assert "port" in section
        assert section.as_dict() == {"host": "db.internal", "Port": "5432"}

    def test_nested_sections(self):
        """Test sections can be nested."""
        configuration = (
            ConfigurationBuilder()
            .add_in_memory_collection({"A:B:C": "v", "A:B": "section-value"})
            .build()
        )

        section = configuration.get_section("A").get_section("B")

        assert section.path == "A:B"
        assert section.value == "section-value"
        assert section.get("C") == "v"

    def test_bind_pydantic_model(self):
        """Test binding converts keys to fields, numbers and lists."""
        configuration = (
            ConfigurationBuilder()
            .add_in_memory_collection(
                {
                    "Database:Host": "db",
                    "Database:Port": "5432",
                    "Database:ConnectionString": "postgres://db",
                    "Database:Replicas:1": "r2",
                    "Database:Replicas:0": "r1",
                }
            )
            .build()
        )

        settings = configuration.bind(DatabaseSettings, "Database")

        assert settings == DatabaseSettings(
            host="db",
            port=5432,
            connection_string="postgres://db",
            replicas=["r1", "r2"],
        )

    def test_bind_section_object(self):
        """Test a section binds without repeating its path."""
        configuration = (
            ConfigurationBuilder()
            .add_in_memory_collection({"Db:Host": "db", "Db:Port": "1"})
            .build()
        )

        settings = configuration.get_section("Db").bind(DatabaseSettings)

        assert settings.host == "db"
        assert settings.port == 1

    def test_reload_and_close_reach_every_provider(self):
        """Test reload() and close() are forwarded to each layer."""
        first, second = Mock(), Mock()
        configuration = ConfigurationRoot([first, second])

        configuration.reload()
        configuration.close()

        first.load.assert_called_once()
        second.load.assert_called_once()
        first.close.assert_called_once()
        second.close.assert_called_once()

    def test_on_change_registers_on_every_provider(self):
        """Test change callbacks are registered on all layers."""
        provider = MemoryConfigurationProvider({})
        configuration = ConfigurationRoot([provider])
        callback = Mock()

        configuration.on_change(callback)
        provider._notify_reload()

        callback.assert_called_once()

    def test_context_manager_closes(self):
        """Test leaving a with-block closes the layers."""
        provider = Mock()

        with ConfigurationRoot([provider]):
            pass

        provider.close.assert_called_once()


@pytest.mark.unit
class TestConfigurationBuilder:
    """Test ConfigurationBuilder."""

    def test_sources_see_earlier_layers_only(self):
        """Test each source is built against the layers before it."""
        early = RecordingSource("Recorded")
        probe = RecordingSource("Seed")
        builder = (
            ConfigurationBuilder()
            .add(early)
            .add_in_memory_collection({"Seed": "planted"})
            .add(probe)
        )

        builder.build()

        assert early.seen is None
        assert probe.seen == "planted"
        assert len(builder.sources) == 3


@pytest.mark.unit
class TestConfigurationManager:
    """Test ConfigurationManager."""

    def test_layers_are_readable_as_soon_as_added(self):
        """Test values are visible without a separate build step."""
        manager = ConfigurationManager()

        manager.add_in_memory_collection({"Seed": "planted"})

        assert manager["Seed"] == "planted"
        assert manager.build() is manager

    def test_new_source_sees_existing_layers(self):
        """Test a source added later can read what is registered."""
        manager = ConfigurationManager().add_in_memory_collection({"Seed": "planted"})
        probe = RecordingSource("Seed")

        manager.add(probe)

        assert probe.seen == "planted"
        assert manager["Recorded"] == "yes"
        assert len(manager.providers) == 2


@pytest.mark.unit
def test_combine_keys_skips_empty_segments():
    """Test key segments are joined with colons."""
    assert combine_keys("", "Database", "Password") == "Database:Password"
