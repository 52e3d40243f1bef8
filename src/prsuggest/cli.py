"""CLI interface using Typer."""

import json
import logging
import os
import traceback
from dataclasses import asdict
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from prsuggest import __version__
from prsuggest.config import load_config
from prsuggest.diff import (
  DiffParseError,
  FileError,
  GitError,
  extract_diff_text,
  parse_all_hunks,
  read_diff_file,
)
from prsuggest.github import GitHubError, PatchSyntaxError, get_github_patch_ranges
from prsuggest.output import get_formatter
from prsuggest.review import MissingTokenError, run_review
from prsuggest.scope import ScopeOrderError

app = typer.Typer(
  name="prsuggest",
  help="Turn proposed file edits into GitHub pull request suggestions",
  no_args_is_help=True,
)

console = Console()

_KNOWN_ERRORS = (
  DiffParseError,
  FileError,
  GitError,
  GitHubError,
  MissingTokenError,
  PatchSyntaxError,
  ScopeOrderError,
)


def _is_debug() -> bool:
  return os.environ.get("PRSUGGEST_DEBUG", "").lower() in ("1", "true", "yes")


def _setup_logging(verbose: bool) -> None:
  logging.basicConfig(
    level=logging.INFO if verbose else logging.WARNING,
    format="%(message)s",
    handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    force=True,
  )


def _fail(error: Exception, show_traceback: bool) -> None:
  console.print(f"[red]Error:[/red] {error}")
  if show_traceback:
    console.print("\n[dim]Traceback:[/dim]")
    console.print(traceback.format_exc())
  raise typer.Exit(1)


def version_callback(value: bool) -> None:
  if value:
    console.print(f"prsuggest {__version__}")
    raise typer.Exit()


@app.callback()
def main(
  version: bool = typer.Option(None, "--version", "-v", callback=version_callback, is_eager=True),
) -> None:
  """Turn proposed file edits into GitHub pull request suggestions."""


@app.command()
def review(
  repo: str = typer.Argument(..., help="Repository as OWNER/REPO"),
  pull_number: int = typer.Argument(..., help="Pull request number"),
  diff: Optional[Path] = typer.Option(None, "--diff", help="Unified diff of the proposed change"),
  git_dir: Optional[Path] = typer.Option(
    None, "--git-dir", help="Working tree whose uncommitted changes are the proposed change"
  ),
  dry_run: bool = typer.Option(False, "--dry-run", "-n", help="Print the review instead of submitting it"),
  format_type: Optional[str] = typer.Option(
    None, "--format", help="Output format: terminal, json, markdown"
  ),
  config: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file path"),
  verbose: bool = typer.Option(False, "--verbose", help="Log progress information"),
  debug: bool = typer.Option(False, "--debug", "-d", help="Show full traceback on errors"),
) -> None:
  """Comment the proposed change on a pull request as suggestions.

  Suggestions that fall outside the pull request diff are listed in the
  review body instead.
  """
  _setup_logging(verbose)
  show_traceback = debug or _is_debug()

  if (diff is None) == (git_dir is None):
    console.print("[red]Error:[/red] Pass exactly one of --diff or --git-dir")
    raise typer.Exit(1)

  try:
    settings = load_config(config)
    plan = run_review(
      repo=repo,
      pull_number=pull_number,
      diff_file=diff,
      git_dir=git_dir,
      settings=settings,
      dry_run=dry_run,
    )
    formatter = get_formatter(format_type or settings.output_format)
    output = formatter.format(plan)
    if output:
      console.print(output, markup=False, highlight=False, soft_wrap=True)

  except _KNOWN_ERRORS as e:
    console.print(f"[red]Error:[/red] {e}")
    raise typer.Exit(1) from None
  except Exception as e:
    _fail(e, show_traceback)


@app.command()
def scope(
  patch_file: Path = typer.Argument(..., help="File holding one file's GitHub patch text"),
) -> None:
  """Print the commentable line ranges of a GitHub patch."""
  try:
    ranges = get_github_patch_ranges(read_diff_file(patch_file))
  except (FileError, PatchSyntaxError) as e:
    _fail(e, _is_debug())
  for line_range in ranges:
    console.print(f"[{line_range.start}, {line_range.end})", markup=False, highlight=False)


@app.command()
def hunks(
  diff_file: Optional[Path] = typer.Argument(None, help="Unified diff file"),
  git_dir: Optional[Path] = typer.Option(
    None, "--git-dir", help="Parse the uncommitted changes of this working tree instead"
  ),
) -> None:
  """Print the hunks parsed from a unified diff as JSON."""
  if (diff_file is None) == (git_dir is None):
    console.print("[red]Error:[/red] Pass exactly one of DIFF_FILE or --git-dir")
    raise typer.Exit(1)

  try:
    diff_text = read_diff_file(diff_file) if diff_file is not None else extract_diff_text(git_dir)
    hunks_by_file = parse_all_hunks(diff_text)
  except (FileError, GitError, DiffParseError) as e:
    _fail(e, _is_debug())
  data = {
    path: [asdict(h) for h in file_hunks]
    for path, file_hunks in hunks_by_file.items()
  }
  console.print_json(json.dumps(data))


if __name__ == "__main__":
  app()
