# coastgrow/cli/__main__.py
from pathlib import Path
from typing import Optional
from datetime import datetime

import typer

from coastgrow.globals.logutil import Logger, info, error, success, setting_config, set_verbose
from coastgrow.globals import directories, configs
from coastgrow.globals.config_models import GrowConfig, read_config_file
from coastgrow.globals.image_utility import ImageLoadError, ImageWriteError, write_image
from coastgrow.features.growth.pipeline import grow_image
from coastgrow.features.growth.noise_field import NoiseField

# --- Typer app (root has no options) ---
app = typer.Typer(no_args_is_help=True)

DEFAULT_CONFIG_FILE_PATH = directories.CONFIG_DIR / configs.GROW_CONFIGS_NAME


def _resolve_log_path(source: Path) -> Path:
    '''
    Default log file: logs/<source stem>_grow_<timestamp>.log
    '''
    base = directories.LOGS_DIR
    return base / f"{source.stem}_grow_{datetime.now():%Y%m%d_%H%M%S}.log"

def _load_config(config: Optional[Path], preset: Optional[str]) -> GrowConfig:
    """Read YAML (missing file -> preset defaults); exit 2 on malformed values."""
    try:
        return read_config_file(config, preset=preset)
    except ValueError as exc:
        error(f"Invalid configuration: {exc}")
        raise typer.Exit(code=2)

def _print_config(cfg: GrowConfig) -> None:
    info("Resolved configuration:")
    for k, v in cfg.summary().items():
        setting_config(f"  {k}: {v}")

# --- SUBCOMMANDS ---
@app.command("grow")
def grow(
    # I/O
    source: Path = typer.Argument(..., help="Coastline mask image (transparent/white background)."),
    output: Path = typer.Argument(..., help="Output image path (png recommended)."),
    config: Optional[Path] = typer.Option(
        DEFAULT_CONFIG_FILE_PATH, "--config", "-c",
        help="YAML file with parameters. Flags override YAML.",
        rich_help_panel="I/O"
    ),
    preset: Optional[str] = typer.Option(
        None, "--preset", "-p",
        help="Start from a preset: textured | classic.",
        rich_help_panel="I/O"
    ),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Log file path (default: logs/).", rich_help_panel="I/O"),
    # Growth
    seed: Optional[int] = typer.Option(None, "--seed", help="Spur length RNG seed", rich_help_panel="Growth"),
    min_length: Optional[int] = typer.Option(None, "--min-length", help="Shortest spur (inclusive)", rich_help_panel="Growth"),
    max_length: Optional[int] = typer.Option(None, "--max-length", help="Longest spur (exclusive)", rich_help_panel="Growth"),
    no_noise: bool = typer.Option(False, "--no-noise", help="Grow full spurs without the noise gate", rich_help_panel="Growth"),
    noise_seed: Optional[int] = typer.Option(None, "--noise-seed", help="Perlin base seed", rich_help_panel="Growth"),
    # Cleanup / output
    erode_passes: Optional[int] = typer.Option(None, "--erode-passes", help="Erosion passes after the dilate", rich_help_panel="Output"),
    binary: bool = typer.Option(False, "--binary", help="Write the cleaned mask instead of terrain colors", rich_help_panel="Output"),
    save_steps: bool = typer.Option(False, "--save-steps", help="Also write grown/dilated/eroded/noise images", rich_help_panel="Output"),
    # Utility
    show: bool = typer.Option(False, "--show", help="Display each stage in a window", rich_help_panel="Utility"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print resolved config and exit", rich_help_panel="Utility"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable verbose logging", rich_help_panel="Utility"),
):
    '''
    Grow a textured terrain image from a sparse coastline mask.
    The main processing steps include:
    1. Loading the mask
    2. Growing noise-gated spurs from every occupied point
    3. Dilate + erode cleanup
    4. Classifying land / sand / water and saving the result
    '''
    set_verbose(verbose)
    with Logger(logfile_path=log_file or _resolve_log_path(source)):
        cfg = _load_config(config, preset)
        try:
            cfg = cfg.with_overrides(
                seed=seed,
                noise_seed=noise_seed,
                min_length=min_length,
                max_length=max_length,
                noise_gating=False if no_noise else None,
                erode_passes=erode_passes,
                output="binary" if binary else None,
                save_steps=True if save_steps else None,
            )
        except ValueError as exc:
            error(f"Invalid option: {exc}")
            raise typer.Exit(code=2)

        _print_config(cfg)
        if dry_run:
            raise typer.Exit()

        try:
            results = grow_image(source, output, cfg, show=show)
        except ImageLoadError as exc:
            error(f"Could not load mask: {exc}")
            raise typer.Exit(code=1)
        except ImageWriteError as exc:
            error(f"Could not write output: {exc}")
            raise typer.Exit(code=1)

        success(f"Growth completed successfully! Output: {results['output']}")

@app.command("noise")
def noise(
    output: Path = typer.Argument(..., help="Where to write the grayscale noise preview."),
    width: int = typer.Option(..., "--width", "-W", min=1, help="Field width in pixels"),
    height: int = typer.Option(..., "--height", "-H", min=1, help="Field height in pixels"),
    config: Optional[Path] = typer.Option(DEFAULT_CONFIG_FILE_PATH, "--config", "-c", help="YAML file with noise parameters."),
    noise_seed: Optional[int] = typer.Option(None, "--noise-seed", help="Perlin base seed"),
):
    """Write the growth-gate noise field for a given image size."""
    cfg = _load_config(config, None).with_overrides(noise_seed=noise_seed)
    field = NoiseField.generate(width, height, cfg.noise)
    try:
        write_image(output, field.to_image(), message="Wrote noise field")
    except ImageWriteError as exc:
        error(str(exc))
        raise typer.Exit(code=1)

@app.command("show-config")
def show_config(
    config: Optional[Path] = typer.Option(DEFAULT_CONFIG_FILE_PATH, "--config", "-c", help="YAML file with parameters."),
    preset: Optional[str] = typer.Option(None, "--preset", "-p", help="textured | classic"),
):
    """Print the configuration a run would use."""
    _print_config(_load_config(config, preset))

def main():
    app()

if __name__ == "__main__":
    main()
