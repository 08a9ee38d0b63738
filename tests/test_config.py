#!/usr/bin/env -S uv run
# /// script
# requires-python = ">=3.10"
# dependencies = [
#   "pyyaml",
#   "requests",
# ]
# ///
"""Test configuration loading and saving."""

import sys
import tempfile
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from qsomap.config import load_config, save_config, DEFAULT_CONFIG


def test_default_config():
    """Test that default config has required fields."""
    print("Testing DEFAULT_CONFIG:\n")

    required_fields = ['callsign', 'home_grid', 'geometry_url', 'geometry_file', 'projection',
                       'width', 'height', 'zoom_min', 'zoom_max', 'hit_tolerance',
                       'normalize_tags', 'log_level']

    for field in required_fields:
        assert field in DEFAULT_CONFIG, f"Missing required field: {field}"
        print(f"  ✓ {field}: {DEFAULT_CONFIG[field]}")

    assert DEFAULT_CONFIG['zoom_min'] == 0.5
    assert DEFAULT_CONFIG['zoom_max'] == 5.0
    print("\n✅ Default config has all required fields!\n")


def test_load_nonexistent():
    """Test loading config when file doesn't exist."""
    print("Testing load_config() with nonexistent file:\n")

    with tempfile.TemporaryDirectory() as tmpdir:
        fake_path = Path(tmpdir) / "nonexistent.yaml"
        config = load_config(fake_path)

        print(f"  Result: {config}")
        assert config['projection'] == DEFAULT_CONFIG['projection']
        assert config['width'] == DEFAULT_CONFIG['width']

    print("  ✅ Returns default config\n")


def test_save_and_load():
    """Test saving and loading config."""
    print("Testing save_config() and load_config():\n")

    test_config = {
        'callsign': 'W1AW',
        'home_grid': 'FN31pr',
        'projection': 'equirectangular',
        'width': 1024,
        'normalize_tags': True,
    }

    with tempfile.TemporaryDirectory() as tmpdir:
        config_path = Path(tmpdir) / "sub" / "test_config.yaml"

        save_config(test_config, config_path)
        print(f"  Saved to {config_path}")
        assert config_path.exists(), "Config file should exist"

        loaded = load_config(config_path)
        print(f"  Loaded: {loaded}")

        for key, value in test_config.items():
            assert loaded[key] == value, f"Mismatch on {key}: {loaded[key]} != {value}"
            print(f"    ✓ {key}: {value}")

        # Keys not in the file keep their defaults
        assert loaded['height'] == DEFAULT_CONFIG['height']

    print("\n✅ Save and load works correctly!\n")


def test_bad_yaml_ignored():
    """A file that isn't a mapping (or isn't YAML) leaves the defaults alone."""
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "bad.yaml"
        path.write_text("width: [unclosed\n")
        config = load_config(path)
        assert config['width'] == DEFAULT_CONFIG['width']

        path.write_text("- just\n- a list\n")
        config = load_config(path)
        assert config['width'] == DEFAULT_CONFIG['width']


def test_config_search_paths():
    """Test that load_config can be called without path."""
    config = load_config()

    print(f"  Loaded config (from default paths or defaults): {config}")
    assert 'callsign' in config
    assert 'projection' in config


if __name__ == "__main__":
    print("=" * 60)
    print("Testing config.py")
    print("=" * 60 + "\n")

    test_default_config()
    test_load_nonexistent()
    test_save_and_load()
    test_bad_yaml_ignored()
    test_config_search_paths()

    print("=" * 60)
    print("✅ ALL TESTS PASSED!")
    print("=" * 60)
