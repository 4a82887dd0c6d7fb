"""
Configuration loading for VoxelGenesis.

Handles loading genesis parameters (seed, cache location and format, noise
settings) from config.yaml files.
"""

import hashlib
import struct
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

DEFAULT_SEED = 15
CACHE_FORMATS = ("binary", "text")


def _stable_hash(seed_str) -> int:
    """Stable seed hashing function for deterministic world generation."""
    digest = hashlib.md5(str(seed_str).encode()).digest()
    return struct.unpack(">I", digest[:4])[0] & 0x7FFFFFFF


def resolve_seed(seed: Union[int, str, None]) -> int:
    """Integers pass through; any other value is hashed to a stable integer."""
    if seed is None:
        return DEFAULT_SEED
    if isinstance(seed, int) and not isinstance(seed, bool):
        return seed
    text = str(seed).strip()
    if text.lstrip("-").isdigit():
        return int(text)
    return _stable_hash(text)


@dataclass
class NoiseConfig:
    frequency: float = 0.03
    octaves: int = 3
    gain: float = 0.9
    lacunarity: float = 0.5

    def __post_init__(self):
        if self.octaves < 1:
            raise ValueError(f"noise.octaves must be at least 1, got {self.octaves}")
        if self.frequency <= 0:
            raise ValueError(f"noise.frequency must be positive, got {self.frequency}")


@dataclass
class GenesisConfig:
    """Resolved genesis settings. Every field has a usable default."""

    seed: int = DEFAULT_SEED
    cache_dir: Path = Path("cache/chunks")
    cache_format: str = "binary"
    noise: NoiseConfig = field(default_factory=NoiseConfig)
    load_radius: int = 2
    num_workers: int = 1
    log_level: str = "INFO"

    def __post_init__(self):
        self.cache_dir = Path(self.cache_dir)
        if self.cache_format not in CACHE_FORMATS:
            raise ValueError(
                f"cache_format must be one of {CACHE_FORMATS}, got {self.cache_format!r}"
            )
        if self.load_radius < 0:
            raise ValueError(f"load_radius must be non-negative, got {self.load_radius}")
        if self.num_workers < 1:
            raise ValueError(f"num_workers must be at least 1, got {self.num_workers}")

    @classmethod
    def from_dict(cls, section: Dict[str, Any]) -> "GenesisConfig":
        """
        Build a config from the ``genesis`` section of config.yaml.

        Args:
            section: Parsed mapping; missing keys fall back to defaults

        Raises:
            ValueError: If a value is out of range or of the wrong type
        """
        section = dict(section or {})
        noise = section.pop("noise", None) or {}
        known = {"seed", "cache_dir", "cache_format", "load_radius", "num_workers", "log_level"}
        unknown = set(section) - known
        if unknown:
            raise ValueError(f"Unknown genesis config keys: {sorted(unknown)}")
        try:
            noise_config = NoiseConfig(
                frequency=float(noise.get("frequency", NoiseConfig.frequency)),
                octaves=int(noise.get("octaves", NoiseConfig.octaves)),
                gain=float(noise.get("gain", NoiseConfig.gain)),
                lacunarity=float(noise.get("lacunarity", NoiseConfig.lacunarity)),
            )
            return cls(
                seed=resolve_seed(section.get("seed")),
                cache_dir=Path(section.get("cache_dir", "cache/chunks")),
                cache_format=str(section.get("cache_format", "binary")),
                noise=noise_config,
                load_radius=int(section.get("load_radius", 2)),
                num_workers=int(section.get("num_workers", 1)),
                log_level=str(section.get("log_level", "INFO")).upper(),
            )
        except (TypeError, AttributeError) as e:
            raise ValueError(f"Invalid genesis config: {e}")


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load full configuration from config.yaml.

    Args:
        config_path: Path to config.yaml file

    Returns:
        Dictionary with full configuration

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If the file is not valid YAML
    """
    if config_path is None:
        config_path = Path("config.yaml")

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        try:
            config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML configuration: {e}")

    return config or {}


def load_genesis_config(config_path: Path = Path("config.yaml")) -> GenesisConfig:
    """
    Load the genesis section of config.yaml.

    Relative ``cache_dir`` values are resolved against the config file's directory.
    """
    config = load_config(config_path)
    genesis = GenesisConfig.from_dict(config.get("genesis", {}))
    if not genesis.cache_dir.is_absolute():
        genesis.cache_dir = config_path.parent / genesis.cache_dir
    return genesis
