"""diffview CLI entry point."""

import sys
from pathlib import Path

import click

from diffview import __version__
from diffview.core.config import Config, ConfigError, load_config, merge_cli_args
from diffview.core.engine import STDIN_TARGET, DiffViewEngine, EngineError
from diffview.output import get_formatter


def _read_stdin(target: str) -> str | None:
    if target != STDIN_TARGET:
        return None
    return click.get_text_stream("stdin").read()


@click.group()
@click.version_option(version=__version__, prog_name="diffview")
def cli() -> None:
    """diffview - Read unified diffs as structured, highlighted views.

    Parses git diff output into files, hunks and changes, highlights the
    words that changed inside replaced lines and lays hunks out for unified
    or side-by-side reading.
    """
    pass


@cli.command()
@click.argument("target", type=str, required=False, default=STDIN_TARGET)
@click.option(
    "--split/--unified",
    "split",
    default=None,
    help="Side-by-side or unified layout (default: unified).",
)
@click.option(
    "-o",
    "--output",
    "output_format",
    type=click.Choice(["text", "json"]),
    default=None,
    help="Output format (default: text).",
)
@click.option(
    "-f",
    "--output-file",
    type=click.Path(),
    default=None,
    help="Write output to file (default: stdout).",
)
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(exists=True),
    default=None,
    help="Config file path (default: .diffview.yaml).",
)
@click.option(
    "--no-word-diff",
    is_flag=True,
    default=False,
    help="Highlight whole lines instead of changed words.",
)
@click.option(
    "--max-word-diff-length",
    type=click.IntRange(min=0),
    default=None,
    help="Skip word diff for lines longer than this (default: 2000).",
)
@click.option("--no-color", is_flag=True, default=False, help="Disable ANSI colors.")
@click.option("-v", "--verbose", is_flag=True, help="Verbose output.")
@click.option("-q", "--quiet", is_flag=True, help="Suppress progress output.")
def show(
    target: str,
    split: bool | None,
    output_format: str | None,
    output_file: str | None,
    config_path: str | None,
    no_word_diff: bool,
    max_word_diff_length: int | None,
    no_color: bool,
    verbose: bool,
    quiet: bool,
) -> None:
    """Show a diff as a structured view.

    TARGET is a patch file (.patch, .diff); use "-" or omit it to read
    the diff from stdin.
    """
    try:
        config = load_config(config_path)

        cli_args = {
            "mode": None if split is None else ("split" if split else "unified"),
            "output_format": output_format,
            "word_diff": False if no_word_diff else None,
            "max_word_diff_length": max_word_diff_length,
            "color": False if no_color or output_file else None,
        }
        config = merge_cli_args(config, **cli_args)

        engine = DiffViewEngine(config, verbose=verbose, quiet=quiet)
        view = engine.view(target, _read_stdin(target))

        formatter = get_formatter(config.output_format)
        output = formatter.format(view, color=config.color)

        if output_file:
            Path(output_file).write_text(output)
            if not quiet:
                click.echo(f"Output written to {output_file}")
        else:
            click.echo(output)

    except ConfigError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(2)
    except EngineError as e:
        click.echo(f"Diff error: {e}", err=True)
        sys.exit(3)


def _load_config_or_exit() -> Config:
    """Load the discovered config, exiting with status 2 when it is invalid."""
    try:
        return load_config()
    except ConfigError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(2)


@cli.command()
@click.argument("target", type=str, required=False, default=STDIN_TARGET)
def stats(target: str) -> None:
    """Print files changed, additions and deletions of a diff."""
    engine = DiffViewEngine(_load_config_or_exit(), quiet=True)
    try:
        diff = engine.load(target, _read_stdin(target))
    except EngineError as e:
        click.echo(f"Diff error: {e}", err=True)
        sys.exit(3)

    for file_diff in diff.files:
        marker = " (binary)" if file_diff.is_binary else ""
        click.echo(
            f"{file_diff.stats.additions:>6} {file_diff.stats.deletions:>6}  {file_diff.path}{marker}"
        )
    click.echo(
        f"{diff.stats.files_changed} file(s) changed, "
        f"{diff.stats.additions} insertion(s)(+), {diff.stats.deletions} deletion(s)(-)"
    )


@cli.command()
@click.option(
    "--force",
    is_flag=True,
    help="Overwrite existing config file.",
)
def init(force: bool) -> None:
    """Create .diffview.yaml config file."""
    config_path = Path(".diffview.yaml")

    if config_path.exists() and not force:
        click.echo(
            "Config file already exists. Use --force to overwrite.", err=True
        )
        sys.exit(1)

    default_config = """\
# diffview configuration

view:
  mode: unified            # unified | split
  word_diff: true
  max_word_diff_length: 2000

settings:
  output_format: text      # text | json
  color: true
"""
    config_path.write_text(default_config)
    click.echo(f"Created {config_path}")


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
