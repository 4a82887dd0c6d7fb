from pathlib import Path
from unittest.mock import mock_open, patch

import pytest

from worldgen.config import (
    DEFAULT_SEED,
    GenesisConfig,
    NoiseConfig,
    load_config,
    load_genesis_config,
    resolve_seed,
)


def test_load_config_file_not_found():
    """Test that load_config raises FileNotFoundError if config file is missing."""
    with pytest.raises(FileNotFoundError):
        load_config(Path("nonexistent_config.yaml"))


def test_load_config_success():
    """Test that load_config successfully loads a valid config file."""
    mock_yaml_content = """
    genesis:
      seed: 42
      cache_format: "text"
    """
    with patch("builtins.open", mock_open(read_data=mock_yaml_content)):
        with patch("pathlib.Path.exists", return_value=True):
            config = load_config(Path("config.yaml"))
            assert config["genesis"]["seed"] == 42
            assert config["genesis"]["cache_format"] == "text"


def test_load_config_invalid_yaml():
    """Test that load_config reports malformed YAML as ValueError."""
    with patch("builtins.open", mock_open(read_data="genesis: [unclosed")):
        with patch("pathlib.Path.exists", return_value=True):
            with pytest.raises(ValueError):
                load_config(Path("config.yaml"))


def test_load_config_empty_file():
    with patch("builtins.open", mock_open(read_data="")):
        with patch("pathlib.Path.exists", return_value=True):
            assert load_config(Path("config.yaml")) == {}


def test_load_genesis_config_file_not_found():
    """Test that load_genesis_config raises FileNotFoundError if config file is missing."""
    with pytest.raises(FileNotFoundError):
        load_genesis_config(Path("nonexistent_config.yaml"))


def test_load_genesis_config_success():
    """Test that load_genesis_config reads the genesis section."""
    mock_yaml_content = """
    genesis:
      seed: 42
      cache_format: "text"
      load_radius: 1
      noise:
        octaves: 2
    """
    with patch("builtins.open", mock_open(read_data=mock_yaml_content)):
        with patch("pathlib.Path.exists", return_value=True):
            genesis = load_genesis_config(Path("config.yaml"))
            assert genesis.seed == 42
            assert genesis.cache_format == "text"
            assert genesis.load_radius == 1
            assert genesis.noise.octaves == 2
            assert genesis.noise.frequency == NoiseConfig.frequency


def test_load_genesis_config_missing_section():
    """Test that a missing genesis section falls back to defaults."""
    mock_yaml_content = """
    extraction:
      output_dir: "data/chunks"
    """
    with patch("builtins.open", mock_open(read_data=mock_yaml_content)):
        with patch("pathlib.Path.exists", return_value=True):
            genesis = load_genesis_config(Path("config.yaml"))
            assert genesis.seed == DEFAULT_SEED
            assert genesis.cache_format == "binary"
            assert genesis.num_workers == 1


def test_load_genesis_config_resolves_cache_dir(tmp_path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text("genesis:\n  cache_dir: world/chunks\n")
    genesis = load_genesis_config(config_path)
    assert genesis.cache_dir == tmp_path / "world" / "chunks"


def test_load_genesis_config_keeps_absolute_cache_dir(tmp_path):
    config_path = tmp_path / "config.yaml"
    target = tmp_path / "elsewhere"
    config_path.write_text(f"genesis:\n  cache_dir: {target}\n")
    assert load_genesis_config(config_path).cache_dir == target


def test_repository_config_loads():
    """The shipped config.yaml is valid."""
    genesis = load_genesis_config(Path(__file__).parent.parent / "config.yaml")
    assert genesis.seed == DEFAULT_SEED
    assert genesis.noise == NoiseConfig()


class TestGenesisConfig:
    """Test suite for GenesisConfig validation."""

    def test_defaults(self):
        config = GenesisConfig()
        assert config.seed == 15
        assert config.cache_dir == Path("cache/chunks")
        assert config.noise.octaves == 3
        assert config.noise.gain == 0.9
        assert config.noise.lacunarity == 0.5

    @pytest.mark.parametrize(
        "section",
        [
            {"cache_format": "ron"},
            {"load_radius": -1},
            {"num_workers": 0},
            {"noise": {"octaves": 0}},
            {"noise": {"frequency": 0}},
            {"noise": "loud"},
            {"load_radius": "far"},
            {"unexpected": True},
        ],
    )
    def test_invalid_sections(self, section):
        with pytest.raises(ValueError):
            GenesisConfig.from_dict(section)

    def test_from_dict_normalizes(self):
        config = GenesisConfig.from_dict({"log_level": "debug", "cache_dir": "x/y"})
        assert config.log_level == "DEBUG"
        assert config.cache_dir == Path("x/y")


class TestResolveSeed:
    def test_integers_pass_through(self):
        assert resolve_seed(7) == 7
        assert resolve_seed("-12") == -12
        assert resolve_seed(None) == DEFAULT_SEED

    def test_strings_hash_stably(self):
        assert resolve_seed("VoxelTree") == resolve_seed("VoxelTree")
        assert resolve_seed("VoxelTree") != resolve_seed("VoxelTrees")
        assert resolve_seed("VoxelTree") >= 0
