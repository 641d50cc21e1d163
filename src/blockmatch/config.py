"""Loading and validation of the JSON game configuration.

Configuration defects (a palette too small for ``minMatch``, non-positive
grid dimensions, malformed values) are reported here as ``ConfigError`` so
they surface at startup instead of as a stuck board mid-game.
"""
from __future__ import annotations

import json
import logging
from importlib import resources
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Tuple

from blockmatch import constants
from blockmatch.components.palette import Palette

logger = logging.getLogger(__name__)

Color = Tuple[int, int, int]


class ConfigError(ValueError):
    """Raised when the game configuration cannot drive a playable board."""


@dataclass(slots=True)
class GridConfig:
    rows: int = constants.GRID_ROWS
    cols: int = constants.GRID_COLS
    block_size: int = constants.BLOCK_SIZE


@dataclass(slots=True)
class GameplayConfig:
    time_limit_seconds: float = constants.TIME_LIMIT_SECONDS
    min_match: int = constants.MIN_MATCH
    score_per_match: int | float = constants.SCORE_PER_MATCH
    initial_score: int | float = constants.INITIAL_SCORE


@dataclass(slots=True)
class PacingConfig:
    clear_delay: float = constants.CLEAR_DELAY
    drop_delay: float = constants.DROP_DELAY
    refill_delay: float = constants.REFILL_DELAY


@dataclass(slots=True)
class ImageAsset:
    name: str
    path: str = ""
    width: int = 0
    height: int = 0
    kind: str | None = None

    @property
    def is_block(self) -> bool:
        if self.kind is not None:
            return self.kind == constants.BLOCK_ASSET_KIND
        return self.name.startswith(constants.BLOCK_ASSET_PREFIX)


@dataclass(slots=True)
class SoundAsset:
    name: str
    path: str = ""
    volume: float = 1.0
    loop: bool = False


@dataclass(slots=True)
class GameConfig:
    canvas_width: int = constants.CANVAS_WIDTH
    canvas_height: int = constants.CANVAS_HEIGHT
    grid: GridConfig = field(default_factory=GridConfig)
    gameplay: GameplayConfig = field(default_factory=GameplayConfig)
    pacing: PacingConfig = field(default_factory=PacingConfig)
    colors: Dict[str, Any] = field(default_factory=dict)
    text: Dict[str, Any] = field(default_factory=dict)
    images: List[ImageAsset] = field(default_factory=lambda: _default_images())
    sounds: List[SoundAsset] = field(default_factory=list)
    base_dir: Path | None = None

    def palette(self) -> Palette:
        return palette_from_assets(self.images)

    def block_colors(self) -> Dict[str, Color]:
        """Return the display colour of each palette block, falling back to a fixed cycle."""
        configured = self.colors.get("blocks")
        if not isinstance(configured, dict):
            configured = {}
        mapping: Dict[str, Color] = {}
        for index, name in enumerate(self.palette()):
            raw = configured.get(name)
            if raw is None:
                mapping[name] = constants.FALLBACK_BLOCK_COLORS[index % len(constants.FALLBACK_BLOCK_COLORS)]
            else:
                mapping[name] = parse_color(raw)
        return mapping

    def asset_path(self, path: str) -> Path:
        """Resolve an asset path relative to the directory of the config file."""
        resolved = Path(path)
        if not resolved.is_absolute() and self.base_dir is not None:
            resolved = self.base_dir / resolved
        return resolved

    def sound(self, name: str) -> SoundAsset | None:
        for asset in self.sounds:
            if asset.name == name:
                return asset
        return None


def _default_images() -> List[ImageAsset]:
    return [ImageAsset(name=name, kind=constants.BLOCK_ASSET_KIND) for name in constants.DEFAULT_BLOCK_NAMES]


def default_config_path() -> Path:
    """Location of the configuration bundled inside the installed package."""
    return Path(str(resources.files("blockmatch") / "data" / "data.json"))


def load_config(path: Path | str | None = None) -> GameConfig:
    """Read, parse and validate the JSON configuration file."""
    config_path = Path(path) if path is not None else default_config_path()
    try:
        with config_path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except OSError as exc:
        raise ConfigError(f"Cannot read configuration {config_path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Configuration {config_path} is not valid JSON: {exc}") from exc
    config = config_from_dict(data)
    config.base_dir = config_path.parent
    validate_config(config)
    logger.info(
        "Loaded configuration from %s (%dx%d grid, %d block types, minMatch=%d)",
        config_path,
        config.grid.rows,
        config.grid.cols,
        len(config.palette()),
        config.gameplay.min_match,
    )
    return config


def config_from_dict(data: Mapping[str, Any]) -> GameConfig:
    """Build a GameConfig from decoded JSON, applying defaults for absent keys."""
    if not isinstance(data, Mapping):
        raise ConfigError("Configuration root must be an object")
    grid = _section(data, "grid")
    gameplay = _section(data, "gameplay")
    pacing = _section(data, "pacing")
    assets = _section(data, "assets")
    return GameConfig(
        canvas_width=_int(data, "canvasWidth", constants.CANVAS_WIDTH),
        canvas_height=_int(data, "canvasHeight", constants.CANVAS_HEIGHT),
        grid=GridConfig(
            rows=_int(grid, "rows", constants.GRID_ROWS),
            cols=_int(grid, "cols", constants.GRID_COLS),
            block_size=_int(grid, "blockSize", constants.BLOCK_SIZE),
        ),
        gameplay=GameplayConfig(
            time_limit_seconds=_number(gameplay, "timeLimitSeconds", constants.TIME_LIMIT_SECONDS),
            min_match=_int(gameplay, "minMatch", constants.MIN_MATCH),
            score_per_match=_number(gameplay, "scorePerMatch", constants.SCORE_PER_MATCH),
            initial_score=_number(gameplay, "initialScore", constants.INITIAL_SCORE),
        ),
        pacing=PacingConfig(
            clear_delay=_number(pacing, "clearDelay", constants.CLEAR_DELAY),
            drop_delay=_number(pacing, "dropDelay", constants.DROP_DELAY),
            refill_delay=_number(pacing, "refillDelay", constants.REFILL_DELAY),
        ),
        colors=dict(_section(data, "colors")),
        text=dict(_section(data, "text")),
        images=[_image(entry) for entry in _list(assets, "images")] if "images" in assets else _default_images(),
        sounds=[_sound(entry) for entry in _list(assets, "sounds")],
    )


def palette_from_assets(images: List[ImageAsset]) -> Palette:
    names = [image.name for image in images if image.is_block]
    if not names:
        raise ConfigError("No block assets configured; the palette would be empty")
    return Palette.of(names)


def validate_config(config: GameConfig) -> None:
    """Reject configurations the engine cannot play.

    The generator needs at least ``minMatch`` distinct block types to be
    guaranteed a legal placement for every cell.
    """
    if config.grid.rows <= 0 or config.grid.cols <= 0:
        raise ConfigError(
            f"Grid dimensions must be positive, got {config.grid.rows}x{config.grid.cols}"
        )
    if config.grid.block_size <= 0:
        raise ConfigError(f"blockSize must be positive, got {config.grid.block_size}")
    min_match = config.gameplay.min_match
    if min_match < 2:
        raise ConfigError(f"minMatch must be at least 2, got {min_match}")
    palette = config.palette()
    if len(palette) < min_match:
        raise ConfigError(
            f"Palette has {len(palette)} block type(s) but minMatch={min_match} needs at least {min_match}"
        )
    if config.gameplay.time_limit_seconds < 0:
        raise ConfigError("timeLimitSeconds must not be negative")
    for name in ("clear_delay", "drop_delay", "refill_delay"):
        if getattr(config.pacing, name) < 0:
            raise ConfigError(f"pacing.{name} must not be negative")


def parse_color(value: Any) -> Color:
    if isinstance(value, str):
        text = value.lstrip("#")
        if len(text) == 3:
            text = "".join(ch * 2 for ch in text)
        if len(text) != 6:
            raise ConfigError(f"Unsupported colour value {value!r}")
        try:
            return int(text[0:2], 16), int(text[2:4], 16), int(text[4:6], 16)
        except ValueError as exc:
            raise ConfigError(f"Unsupported colour value {value!r}") from exc
    if isinstance(value, (list, tuple)) and len(value) >= 3:
        return int(value[0]), int(value[1]), int(value[2])
    raise ConfigError(f"Unsupported colour value {value!r}")


def _section(data: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = data.get(key, {})
    if not isinstance(value, Mapping):
        raise ConfigError(f"'{key}' must be an object")
    return value


def _list(data: Mapping[str, Any], key: str) -> List[Any]:
    value = data.get(key, [])
    if not isinstance(value, list):
        raise ConfigError(f"'{key}' must be a list")
    return value


def _int(data: Mapping[str, Any], key: str, default: int) -> int:
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"'{key}' must be an integer, got {value!r}")
    return value


def _number(data: Mapping[str, Any], key: str, default: int | float) -> int | float:
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"'{key}' must be a number, got {value!r}")
    return value


def _image(entry: Any) -> ImageAsset:
    if not isinstance(entry, Mapping) or not isinstance(entry.get("name"), str):
        raise ConfigError(f"Image asset entries need a string 'name', got {entry!r}")
    return ImageAsset(
        name=entry["name"],
        path=str(entry.get("path", "")),
        width=int(entry.get("width", 0)),
        height=int(entry.get("height", 0)),
        kind=entry.get("kind"),
    )


def _sound(entry: Any) -> SoundAsset:
    if not isinstance(entry, Mapping) or not isinstance(entry.get("name"), str):
        raise ConfigError(f"Sound asset entries need a string 'name', got {entry!r}")
    return SoundAsset(
        name=entry["name"],
        path=str(entry.get("path", "")),
        volume=float(entry.get("volume", 1.0)),
        loop=bool(entry.get("loop", False)),
    )
