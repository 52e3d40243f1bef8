"""Unified diff parsing into hunks."""

from dataclasses import dataclass, field

from unidiff import PatchSet, PatchedFile
from unidiff.errors import UnidiffParseError
from unidiff.patch import Hunk as UnidiffHunk

from prsuggest.models import Hunk

DEV_NULL = "/dev/null"

# Header used when only the hunk text of a single file is available
_DIFF_HEADER = "\n".join([
  "diff --git a/file.ext b/file.ext",
  "index cac8fbc..87f387c 100644",
  "--- a/file.ext",
  "+++ b/file.ext",
  "",
])
_SYNTHETIC_PATH = "file.ext"


class DiffParseError(Exception):
  """Diff text could not be parsed."""


@dataclass
class _ChangeBlock:
  """Run of contiguous added/removed lines being collected."""

  old_start: int
  new_start: int
  previous_line: str | None
  removed: int = 0
  added: list[str] = field(default_factory=list)

  def build(self, next_line: str | None = None) -> Hunk:
    return Hunk(
      old_start=self.old_start,
      old_end=self.old_start + self.removed - 1,
      new_start=self.new_start,
      new_end=self.new_start + len(self.added) - 1,
      new_content=tuple(self.added),
      previous_line=self.previous_line or None,
      next_line=next_line or None,
    )


def _first_line(start: int, length: int) -> int:
  # An empty side names the line before the gap in its header
  return start if length else start + 1


def _strip(value: str) -> str:
  return value.rstrip("\r\n")


def _parse_hunk(hunk: UnidiffHunk) -> list[Hunk]:
  """Split one @@ section into one hunk per block of changed lines."""
  hunks: list[Hunk] = []
  old_line = _first_line(hunk.source_start, hunk.source_length)
  new_line = _first_line(hunk.target_start, hunk.target_length)
  block: _ChangeBlock | None = None
  previous: str | None = None

  for line in hunk:
    if line.is_context:
      content = _strip(line.value)
      if block is not None:
        hunks.append(block.build(next_line=content))
        block = None
      previous = content
      old_line += 1
      new_line += 1
    elif line.is_removed or line.is_added:
      if block is None:
        block = _ChangeBlock(old_start=old_line, new_start=new_line, previous_line=previous)
      if line.is_removed:
        block.removed += 1
        old_line += 1
      else:
        block.added.append(_strip(line.value))
        new_line += 1
    # "\ No newline at end of file" markers are neither and are dropped

  if block is not None:
    hunks.append(block.build())
  return hunks


def _file_key(patched_file: PatchedFile) -> str:
  """Path of the file after the change, or before it for deletions."""
  if patched_file.target_file and patched_file.target_file != DEV_NULL:
    return patched_file.target_file.removeprefix("b/")
  return patched_file.source_file.removeprefix("a/")


def parse_all_hunks(diff: str) -> dict[str, list[Hunk]]:
  """Parse a unified diff of one or more files into hunks per file.

  Args:
    diff: Unified diff text with file headers.

  Returns:
    Mapping of file path to its hunks in ascending line order. Files
    without any changed lines are left out.

  Raises:
    DiffParseError: If the diff is malformed.
  """
  if not diff.strip():
    return {}

  try:
    patch_set = PatchSet(diff)
  except UnidiffParseError as e:
    raise DiffParseError(f"Failed to parse diff content: {e}") from e

  hunks_by_file: dict[str, list[Hunk]] = {}
  for patched_file in patch_set:
    hunks = [h for section in patched_file for h in _parse_hunk(section)]
    if hunks:
      hunks_by_file.setdefault(_file_key(patched_file), []).extend(hunks)
  return hunks_by_file


def parse_patch(patch: str) -> list[Hunk]:
  """Parse the hunk text of a single file that has no file header."""
  return parse_all_hunks(_DIFF_HEADER + patch).get(_SYNTHETIC_PATH, [])
