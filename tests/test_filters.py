"""
Tests for filter presets and the preset registry.
"""

import logging

import pytest
import numpy as np

from photoedit.errors import InvalidParameter, UnknownPreset
from photoedit.processing.adjustments import Adjustments, DEFAULT_ADJUSTMENTS
from photoedit.processing.filters import (
    FilterPreset, FilterPresetRegistry, PRESET_FILTERS, apply_filter,
)


class TestCatalog:
    """Test the built-in preset catalog."""

    def test_catalog_size_and_order(self, registry):
        """Test the built-in catalog order."""
        ids = registry.ids()
        assert len(registry) == 20
        assert ids[0] == "none"
        assert ids[:4] == ["none", "vivid", "dramatic", "noir"]
        assert ids[-1] == "gingham"
        assert len(set(ids)) == len(ids)

    def test_catalog_entries(self, registry):
        """Test catalog entries as plain data."""
        catalog = registry.to_catalog()
        assert catalog[0] == {'id': 'none', 'name': 'None', 'adjustments': {}}
        noir = next(item for item in catalog if item['id'] == 'noir')
        assert noir['adjustments'] == {'saturation': -100, 'contrast': 30, 'brightness': -10}

    def test_every_preset_is_valid(self):
        """Test every built-in preset resolves to valid adjustments."""
        for preset in PRESET_FILTERS:
            adjustments = preset.to_adjustments()
            assert isinstance(adjustments, Adjustments)

    def test_adjustments_for_merges_over_neutral(self, registry):
        """Test preset values are merged over neutral defaults."""
        adj = registry.adjustments_for("sepia")
        assert adj.saturation == -60
        assert adj.temperature == 40
        assert adj.tint == 10
        assert adj.brightness == 0
        assert registry.adjustments_for("missing") == DEFAULT_ADJUSTMENTS

    def test_contains(self, registry):
        """Test membership checks by id."""
        assert "vivid" in registry
        assert "missing" not in registry


class TestApplyFilter:
    """Test applying presets to buffers."""

    def test_none_returns_input(self, gradient_buffer, registry):
        """Test the "none" preset returns the input."""
        assert registry.apply_filter(gradient_buffer, "none") is gradient_buffer

    def test_unknown_returns_input(self, gradient_buffer, registry, caplog):
        """Test unknown ids return the input with a warning."""
        with caplog.at_level(logging.WARNING):
            result = registry.apply_filter(gradient_buffer, "does-not-exist")
        assert result is gradient_buffer
        assert "does-not-exist" in caplog.text

    def test_noir_is_grayscale(self, gradient_buffer):
        """Test noir produces a grayscale image."""
        result = apply_filter(gradient_buffer, "noir")
        pixels = result.pixels
        assert np.array_equal(pixels[:, :, 0], pixels[:, :, 1])
        assert np.array_equal(pixels[:, :, 1], pixels[:, :, 2])
        assert result.size == gradient_buffer.size

    def test_filter_matches_adjustments(self, gradient_buffer, registry):
        """Test a preset renders like its merged adjustments."""
        from photoedit.processing.adjustments import apply_adjustments

        expected = apply_adjustments(gradient_buffer, registry.adjustments_for("vivid"))
        assert registry.apply_filter(gradient_buffer, "vivid") == expected


class TestRegistry:
    """Test registry lookups and custom presets."""

    def test_require_unknown_raises(self, registry):
        """Test require raises for unknown ids."""
        with pytest.raises(UnknownPreset) as exc_info:
            registry.require("nope")
        assert exc_info.value.filter_id == "nope"
        assert "nope" in str(exc_info.value)

    def test_unknown_preset_is_key_error(self, registry):
        """Test UnknownPreset is also a KeyError."""
        with pytest.raises(KeyError):
            registry.require("nope")

    def test_duplicate_id_rejected(self, registry):
        """Test registering an existing id fails."""
        with pytest.raises(InvalidParameter):
            registry.register(FilterPreset("vivid", "Another Vivid", {'contrast': 5}))

    def test_invalid_preset_adjustments(self):
        """Test presets validate their adjustments."""
        with pytest.raises(InvalidParameter):
            FilterPreset("broken", "Broken", {'contrast': 500})
        with pytest.raises(InvalidParameter):
            FilterPreset("broken", "Broken", {'sparkle': 5})

    def test_presets_are_hashable(self):
        """Equal presets hash alike and can be kept in sets."""
        first = FilterPreset("custom", "Custom", {'contrast': 10, 'tint': 5})
        second = FilterPreset("custom", "Custom", {'tint': 5, 'contrast': 10})

        assert first == second
        assert hash(first) == hash(second)
        assert len({first, second, *PRESET_FILTERS}) == len(PRESET_FILTERS) + 1

    def test_preset_copies_adjustments(self):
        """Test presets keep their own copy of the values."""
        values = {'contrast': 10}
        preset = FilterPreset("custom", "Custom", values)
        values['contrast'] = 99
        assert preset.adjustments['contrast'] == 10

    def test_from_config_adds_custom_presets(self):
        """Test custom presets are appended from config."""
        config = {'filters': {'custom': [
            {'id': 'punchy', 'name': 'Punchy', 'adjustments': {'contrast': 25, 'saturation': 20}},
            {'id': 'plain'},
        ]}}
        registry = FilterPresetRegistry.from_config(config)

        assert len(registry) == 22
        assert registry.ids()[-2:] == ['punchy', 'plain']
        assert registry.adjustments_for('punchy').contrast == 25
        assert registry.require('plain').name == 'plain'

    def test_from_config_without_custom(self):
        """Test a config without custom presets."""
        assert len(FilterPresetRegistry.from_config({})) == 20

    def test_from_config_missing_id(self):
        """Test custom presets need an id."""
        with pytest.raises(InvalidParameter):
            FilterPresetRegistry.from_config({'filters': {'custom': [{'name': 'No id'}]}})

    def test_empty_registry(self):
        """Test a registry without presets."""
        registry = FilterPresetRegistry(presets=())
        assert len(registry) == 0
        assert registry.to_catalog() == []
