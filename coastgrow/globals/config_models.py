"""Typed configuration models and YAML loading helpers.

All tunables of the growth pipeline live in :class:`GrowConfig` instead of
module-level constants, so small deterministic runs (tests, previews) can be
configured explicitly.

Config layout (``config/grow_configs.yml``)
-------------------------------------------
::

    preset: textured          # textured | classic
    seed: 0                   # spur length RNG
    erode_passes: 3
    output: colorize          # colorize | binary
    save_steps: false
    spurs:
      min_length: 0
      max_length: 25          # exclusive
      noise_gating: true
      gate_base: 100
      gate_ramp: 155
      batch_size: 16384
    noise:
      scale: 1.0
      persistence: 0.6667
      lacunarity: 15.0
      octaves: 2
      seed: 10
    palette:
      land: "#1A662A"
      sand: "#FADB75"
      water: "#120052"

The public entry point is :func:`read_config_file`.
"""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass, field, replace, asdict
from typing import Dict, Any, Mapping
from pathlib import Path

import numpy as np
import yaml

from coastgrow.globals.logutil import info, error
from coastgrow.globals import directories, configs


def hex_to_rgba(value: str) -> tuple[int, int, int, int]:
    """Parse ``#RRGGBB`` or ``#RRGGBBAA`` into an RGBA tuple (alpha defaults to 255)."""
    text = str(value).strip().lstrip("#")
    if len(text) not in (6, 8):
        raise ValueError(f"Invalid hex color {value!r}; expected #RRGGBB or #RRGGBBAA.")
    try:
        channels = [int(text[i:i + 2], 16) for i in range(0, len(text), 2)]
    except ValueError as exc:
        raise ValueError(f"Invalid hex color {value!r}.") from exc
    if len(channels) == 3:
        channels.append(255)
    return tuple(channels)


def _as_int(key: str, value: Any) -> int:
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise ValueError(f"{key} must be an integer, got {value!r}")
    if isinstance(value, numbers.Integral):
        return int(value)
    if float(value).is_integer():
        return int(value)
    raise ValueError(f"{key} must be a whole number, got {value!r}")

def _as_optional_int(key: str, value: Any) -> int | None:
    return None if value is None else _as_int(key, value)

def _as_float(key: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise ValueError(f"{key} must be a number, got {value!r}")
    if not math.isfinite(float(value)):
        raise ValueError(f"{key} must be finite, got {value!r}")
    return float(value)

def _as_bool(key: str, value: Any) -> bool:
    # YAML parses true/false/yes/no itself; "false" as a string is rejected
    if not isinstance(value, (bool, np.bool_)):
        raise ValueError(f"{key} must be true or false, got {value!r}")
    return bool(value)

def _coerce_fields(obj, section: str, kinds: Dict[str, Any]) -> None:
    """Check and normalize field types in place on a frozen dataclass."""
    for name, coerce in kinds.items():
        key = f"{section}.{name}" if section else name
        object.__setattr__(obj, name, coerce(key, getattr(obj, name)))


# --- Dataclasses ---------------------------------------------------------
@dataclass(frozen=True)
class NoiseConfig:
    """Perlin noise parameters for the growth-gate field."""
    scale: float = configs.NOISE_SCALE
    persistence: float = configs.NOISE_PERSISTENCE
    lacunarity: float = configs.NOISE_LACUNARITY
    octaves: int = configs.NOISE_OCTAVES
    seed: int = configs.NOISE_SEED

    def __post_init__(self):
        _coerce_fields(self, "noise", {
            "scale": _as_float,
            "persistence": _as_float,
            "lacunarity": _as_float,
            "octaves": _as_int,
            "seed": _as_int,
        })
        if self.octaves < 1:
            raise ValueError(f"noise.octaves must be >= 1, got {self.octaves}")
        if self.scale <= 0:
            raise ValueError(f"noise.scale must be > 0, got {self.scale}")


@dataclass(frozen=True)
class SpurConfig:
    """Spur length range ``[min_length, max_length)`` and growth-gate shape."""
    min_length: int = configs.SPUR_MIN_LENGTH
    max_length: int = configs.SPUR_MAX_LENGTH
    noise_gating: bool = True
    gate_base: int = configs.GATE_BASE
    gate_ramp: int = configs.GATE_RAMP
    batch_size: int = configs.GROWTH_BATCH_SIZE

    def __post_init__(self):
        _coerce_fields(self, "spurs", {
            "min_length": _as_int,
            "max_length": _as_int,
            "noise_gating": _as_bool,
            "gate_base": _as_int,
            "gate_ramp": _as_int,
            "batch_size": _as_int,
        })
        if self.min_length < 0 or self.max_length < 0:
            raise ValueError(
                f"spur lengths must be >= 0, got [{self.min_length}, {self.max_length})"
            )
        if self.gate_ramp < 0:
            raise ValueError(f"spurs.gate_ramp must be >= 0, got {self.gate_ramp}")
        if self.batch_size < 1:
            raise ValueError(f"spurs.batch_size must be >= 1, got {self.batch_size}")


@dataclass(frozen=True)
class Palette:
    """Terrain band colors as hex strings."""
    land: str = configs.LAND_COLOR
    sand: str = configs.SAND_COLOR
    water: str = configs.WATER_COLOR

    def __post_init__(self):
        # fail at load time, not at colorize time
        for name in ("land", "sand", "water"):
            value = getattr(self, name)
            if not isinstance(value, str):
                raise ValueError(f"palette.{name} must be a quoted hex string, got {value!r}")
            try:
                hex_to_rgba(value)
            except ValueError as exc:
                raise ValueError(f"palette.{name}: {exc}") from exc

    def rgba(self) -> Dict[str, tuple[int, int, int, int]]:
        return {name: hex_to_rgba(getattr(self, name)) for name in ("water", "sand", "land")}


@dataclass(frozen=True)
class GrowConfig:
    """Configuration for one run of the growth pipeline.

    CLI flags may override these values via :meth:`with_overrides`.
    """
    spurs: SpurConfig = field(default_factory=SpurConfig)
    noise: NoiseConfig = field(default_factory=NoiseConfig)
    palette: Palette = field(default_factory=Palette)
    erode_passes: int = configs.ERODE_PASSES
    output: str = "colorize"
    seed: int | None = 0
    save_steps: bool = False

    def __post_init__(self):
        _coerce_fields(self, "", {
            "erode_passes": _as_int,
            "seed": _as_optional_int,
            "save_steps": _as_bool,
        })
        if self.erode_passes < 0:
            raise ValueError(f"erode_passes must be >= 0, got {self.erode_passes}")
        if self.output not in configs.OUTPUT_MODES:
            raise ValueError(f"output must be one of {configs.OUTPUT_MODES}, got {self.output!r}")

    def with_overrides(
        self,
        *,
        seed: int | None = None,
        noise_seed: int | None = None,
        min_length: int | None = None,
        max_length: int | None = None,
        noise_gating: bool | None = None,
        erode_passes: int | None = None,
        output: str | None = None,
        save_steps: bool | None = None,
    ) -> "GrowConfig":
        """Return a copy with every non-None value applied."""
        spurs = self.spurs
        if min_length is not None:
            spurs = replace(spurs, min_length=int(min_length))
        if max_length is not None:
            spurs = replace(spurs, max_length=int(max_length))
        if noise_gating is not None:
            spurs = replace(spurs, noise_gating=bool(noise_gating))

        noise = self.noise if noise_seed is None else replace(self.noise, seed=int(noise_seed))

        return replace(
            self,
            spurs=spurs,
            noise=noise,
            seed=self.seed if seed is None else int(seed),
            erode_passes=self.erode_passes if erode_passes is None else int(erode_passes),
            output=self.output if output is None else output,
            save_steps=self.save_steps if save_steps is None else bool(save_steps),
        )

    def summary(self) -> Dict[str, Any]:
        """Flatten into ``section.key -> value`` for logging."""
        flat: Dict[str, Any] = {}
        for key, value in asdict(self).items():
            if isinstance(value, dict):
                for sub_key, sub_value in value.items():
                    flat[f"{key}.{sub_key}"] = sub_value
            else:
                flat[key] = value
        return flat


# The two historical variants: noise-gated spurs with colorized 3-pass
# erosion, and fixed-range spurs with a single erosion and binary output.
PRESETS: Dict[str, GrowConfig] = {
    "textured": GrowConfig(),
    "classic": GrowConfig(
        spurs=SpurConfig(noise_gating=False),
        erode_passes=1,
        output="binary",
    ),
}


def preset_config(name: str) -> GrowConfig:
    try:
        return PRESETS[name]
    except KeyError as exc:
        raise ValueError(f"Unknown preset {name!r}; choose from {sorted(PRESETS)}") from exc


# --- YAML loader ---------------------------------------------------------
def default_config_path() -> Path:
    return directories.CONFIG_DIR / configs.GROW_CONFIGS_NAME

def load_yaml(path: Path) -> Dict[str, Any]:
    """Load YAML file, returning an empty dict when the file is missing."""
    try:
        info(f"Loading config from {path}...")
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        error(f"Config not found at {path}; using defaults.")
        return {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Failed to parse YAML config at {path}: {exc}") from exc

    if not isinstance(data, Mapping):
        raise ValueError(f"Config at {path} must be a mapping, got {type(data).__name__}")
    info(f"Using config: {path}")
    return dict(data)

def _section(raw: Mapping[str, Any], key: str) -> Dict[str, Any]:
    block = raw.get(key) or {}
    if not isinstance(block, Mapping):
        raise ValueError(f"Config section '{key}' must be a mapping.")
    return dict(block)

def _merge(base, block: Dict[str, Any], section: str):
    known = set(asdict(base))
    unknown = sorted(set(block) - known)
    if unknown:
        raise ValueError(f"Unknown keys in '{section}': {unknown}")
    return replace(base, **block)

def build_grow_config(raw: Mapping[str, Any], *, base: GrowConfig | None = None) -> GrowConfig:
    """Convert a raw dict from YAML into :class:`GrowConfig`.

    Values not present in ``raw`` come from ``base``, or from the preset
    named by ``raw['preset']`` (default ``textured``). Raises ValueError
    on malformed values.
    """
    raw = dict(raw or {})
    if base is None:
        base = preset_config(raw.get("preset", "textured"))

    spurs = _merge(base.spurs, _section(raw, "spurs"), "spurs")
    noise = _merge(base.noise, _section(raw, "noise"), "noise")
    palette = _merge(base.palette, _section(raw, "palette"), "palette")

    top = {k: raw[k] for k in ("erode_passes", "output", "seed", "save_steps") if k in raw}
    return replace(base, spurs=spurs, noise=noise, palette=palette, **top)

def read_config_file(
    path: Path | str | None = None,
    *,
    preset: str | None = None,
) -> GrowConfig:
    """Read a YAML config file into a :class:`GrowConfig`.

    Parameters
    ----------
    path
        Path to a YAML file, or ``None`` for ``config/grow_configs.yml``.
    preset
        Preset to start from; overrides any ``preset`` key in the file.
    """
    resolved = Path(path) if path is not None else default_config_path()
    raw = load_yaml(resolved)
    base = preset_config(preset) if preset else None
    return build_grow_config(raw, base=base)
