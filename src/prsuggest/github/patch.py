"""Commentable line ranges from GitHub pull request patch text."""

import logging
import re
from enum import Enum
from typing import Mapping

from prsuggest.models import LineRange

logger = logging.getLogger(__name__)

# @@ -<original start>[,<count>] +<updated start>[,<count>] @@
_HUNK_HEADER = re.compile(r"@@ -(\d+)(,\d+)? \+(\d+)(?:,(\d+))? @@")


class PatchSyntaxError(Exception):
  """Patch text has no recognizable hunk header."""

  def __init__(self, patch_text: str, filename: str | None = None):
    self.patch_text = patch_text
    self.filename = filename
    location = f" for {filename}" if filename else ""
    super().__init__(
      f"Unexpected patch text format{location}. Expected {patch_text!r} to be of"
      " format @@ -<number>[,<number>] +<number>[,<number>] @@"
    )


class HeaderShape(Enum):
  """Shapes a GitHub hunk header can take."""

  MULTILINE = "multiline"  # @@ -132,7 +132,7 @@
  ONELINE_TO_MULTILINE = "oneline-to-multiline"  # @@ -1 +0,0 @@
  ONELINE = "oneline"  # @@ -1 +1 @@
  MULTILINE_TO_ONELINE = "multiline-to-oneline"  # @@ -0,0 +1 @@


def _shape(match: re.Match) -> HeaderShape:
  old_is_multi = match.group(2) is not None
  new_is_multi = match.group(4) is not None
  if old_is_multi:
    return HeaderShape.MULTILINE if new_is_multi else HeaderShape.MULTILINE_TO_ONELINE
  return HeaderShape.ONELINE_TO_MULTILINE if new_is_multi else HeaderShape.ONELINE


def iter_patch_headers(patch_text: str):
  """Yield (shape, new-side range) for each hunk header in order."""
  position = 0
  while True:
    match = _HUNK_HEADER.search(patch_text, position)
    if match is None:
      return
    start = int(match.group(3))
    count = match.group(4)
    end = start + int(count) if count is not None else start + 1
    yield _shape(match), LineRange(start=start, end=end)
    position = match.end()


def get_github_patch_ranges(patch_text: str) -> list[LineRange]:
  """Parse one file's GitHub patch text into current-file line ranges.

  Only the updated (new side) numbers matter. A header with a count
  gives [start, start + count); a single-line header gives
  [start, start + 1).

  Raises:
    TypeError: If patch_text is not a string.
    PatchSyntaxError: If no hunk header is found.
  """
  if not isinstance(patch_text, str):
    raise TypeError("GitHub patch text must be a string")

  ranges = [line_range for _, line_range in iter_patch_headers(patch_text)]
  if not ranges:
    raise PatchSyntaxError(patch_text)
  return ranges


def patch_text_to_ranges(patches: Mapping[str, str]) -> dict[str, list[LineRange]]:
  """Get the commentable ranges of every file's patch text.

  Raises:
    PatchSyntaxError: Naming the first file whose patch cannot be parsed.
  """
  ranges_by_file: dict[str, list[LineRange]] = {}
  for filename, patch_text in patches.items():
    try:
      ranges_by_file[filename] = get_github_patch_ranges(patch_text)
    except PatchSyntaxError as e:
      logger.error("Failed to parse the patch of file %s", filename)
      raise PatchSyntaxError(patch_text, filename) from e
  return ranges_by_file
