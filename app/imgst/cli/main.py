"""Main CLI application entry point.

Defines the Typer application and its single cleaning command.
"""

from pathlib import Path
from typing import Annotated

import typer

from imgst import __version__
from imgst.cli.display import print_run_summary
from imgst.core.config import SettingsError, load_settings
from imgst.core.controller import EXIT_CONFIG_ERROR, ConfigurationError, RunController
from imgst.transform.jpeg import JpegMetadataStripper
from imgst.utils.formatting import print_error
from imgst.utils.logging import configure_logging

# Create main Typer app
app = typer.Typer(
    name="imgst",
    help="Simple image metadata cleaner.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"imgst version {__version__}")
        raise typer.Exit()


@app.command()
def main(
    input_dir: Annotated[
        Path,
        typer.Option(
            "--input",
            "-i",
            help="Input directory containing original images.",
        ),
    ],
    output_dir: Annotated[
        Path,
        typer.Option(
            "--output",
            "-o",
            help="Output directory where cleaned images will be written.",
        ),
    ],
    num_threads: Annotated[
        int | None,
        typer.Option(
            "--num-threads",
            "-j",
            min=0,
            help="Number of worker threads for directory walking (0 = automatic).",
        ),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Only print what would be done, do not write files."),
    ] = False,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Settings file (default: ~/.config/imgst/config.toml).",
        ),
    ] = None,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            count=True,
            help="Increase verbosity (-v for debug output).",
        ),
    ] = 0,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Only show warnings and errors."),
    ] = False,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
) -> None:
    """Recursively walk INPUT, remove metadata from JPEG files and write the
    cleaned copies into OUTPUT, preserving the directory structure.
    """
    configure_logging(verbose=verbose, quiet=quiet)

    try:
        settings = load_settings(config_path)
    except SettingsError as e:
        print_error(str(e))
        raise typer.Exit(code=EXIT_CONFIG_ERROR) from e

    controller = RunController(
        input_dir,
        output_dir,
        JpegMetadataStripper(quality=settings.jpeg_quality),
        num_threads=settings.num_threads if num_threads is None else num_threads,
        dry_run=dry_run,
        extensions=settings.extension_set,
        respect_ignore_files=settings.respect_ignore_files,
    )

    try:
        report = controller.run()
    except ConfigurationError as e:
        print_error(str(e))
        raise typer.Exit(code=EXIT_CONFIG_ERROR) from e

    if not quiet:
        print_run_summary(report)

    if not report.success:
        raise typer.Exit(code=report.exit_code)


if __name__ == "__main__":
    app()
