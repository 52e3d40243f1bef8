"""Local git change extraction."""

import logging
import subprocess
from pathlib import Path

from prsuggest.models import FileDiffContent

logger = logging.getLogger(__name__)


class GitError(Exception):
  """Git command failed."""


class FileError(Exception):
  """File operation failed."""


def _sanitize_error(stderr: str) -> str:
  """Remove potentially sensitive path information from error messages."""
  lines = stderr.strip().split("\n")
  sanitized = []
  for line in lines:
    if "fatal:" in line or "error:" in line:
      sanitized.append(line.split("/")[-1] if "/" in line else line)
    else:
      sanitized.append(line)
  return "\n".join(sanitized)


def run_git(*args: str, cwd: Path | None = None) -> str:
  """Run a git command and return stdout."""
  try:
    result = subprocess.run(
      ["git", *args],
      capture_output=True,
      text=True,
      check=True,
      cwd=cwd,
    )
    return result.stdout
  except subprocess.CalledProcessError as e:
    sanitized = _sanitize_error(e.stderr)
    raise GitError(f"git {' '.join(args)} failed: {sanitized}") from e
  except FileNotFoundError as e:
    raise GitError("git executable not found") from e


def find_repo_root(git_dir: Path) -> Path:
  """Get the root of the git repository containing git_dir."""
  return Path(run_git("rev-parse", "--show-toplevel", cwd=git_dir).strip())


def extract_diff_text(git_dir: Path) -> str:
  """Diff of the tracked working tree changes against HEAD."""
  return run_git("diff", "HEAD", "--no-renames", cwd=git_dir)


def _parse_name_status(output: str) -> list[tuple[str, str]]:
  """Parse `git diff --name-status` output into (status, path) pairs."""
  entries = []
  for line in output.splitlines():
    if not line.strip():
      continue
    status, _, path = line.partition("\t")
    entries.append((status[:1], path))
  return entries


def extract_file_contents(git_dir: Path) -> dict[str, FileDiffContent]:
  """Old (HEAD) and new (working tree) content of every changed file.

  Untracked files are not included; added files have empty old content
  and deleted files have empty new content.
  """
  root = find_repo_root(git_dir)
  output = run_git("diff", "HEAD", "--name-status", "--no-renames", cwd=root)

  contents: dict[str, FileDiffContent] = {}
  for status, path in _parse_name_status(output):
    old_content = "" if status == "A" else run_git("show", f"HEAD:{path}", cwd=root)
    new_content = "" if status == "D" else _read_text(root / path, path)
    contents[path] = FileDiffContent(old_content=old_content, new_content=new_content)

  logger.info("Collected %d changed file(s) from %s", len(contents), root)
  return contents


def _read_text(file_path: Path, rel_path: str) -> str:
  try:
    return file_path.read_text()
  except (OSError, UnicodeDecodeError) as e:
    raise FileError(f"Cannot read {rel_path}: {e}") from e


def read_diff_file(path: Path) -> str:
  """Read a unified diff from disk."""
  return _read_text(path, str(path))
