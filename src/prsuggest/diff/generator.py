"""Hunks from the full old and new text of files."""

import logging
from difflib import unified_diff
from typing import Mapping

from prsuggest.diff.parser import parse_all_hunks
from prsuggest.models import FileDiffContent, Hunk

logger = logging.getLogger(__name__)

_UNUSED_PATH = "unused"


def _split_lines(text: str) -> list[str]:
  """Split on newlines only, ignoring a single trailing newline."""
  lines = text.split("\n")
  if lines[-1] == "":
    lines.pop()
  return lines


def create_patch(path: str, old_content: str, new_content: str) -> str:
  """Build a unified diff text for one file from its two versions."""
  lines = unified_diff(
    _split_lines(old_content),
    _split_lines(new_content),
    fromfile=f"a/{path}",
    tofile=f"b/{path}",
    lineterm="",
  )
  return "\n".join(lines) + "\n"


def get_suggested_hunks(old_content: str, new_content: str) -> list[Hunk]:
  """Compute the hunks that turn old_content into new_content.

  Both texts are compared line by line after dropping one trailing
  newline, so contents that differ only in a final newline (for example
  "a" and "a\\n") produce no hunks.
  """
  if old_content == new_content:
    return []
  patch = create_patch(_UNUSED_PATH, old_content, new_content)
  return parse_all_hunks(patch).get(_UNUSED_PATH, [])


def get_raw_suggestion_hunks(
  diff_contents: Mapping[str, FileDiffContent],
) -> dict[str, list[Hunk]]:
  """Compute hunks for every file whose old and new contents differ.

  Files with identical contents are skipped entirely. The hunks of each
  file are ascending and disjoint.
  """
  file_hunks: dict[str, list[Hunk]] = {}
  for path, contents in diff_contents.items():
    if contents.old_content == contents.new_content:
      continue
    hunks = get_suggested_hunks(contents.old_content, contents.new_content)
    if hunks:
      file_hunks[path] = hunks
  logger.info("Parsed ranges of old and new patch")
  return file_hunks
