"""Diff parsing and hunk generation."""

from prsuggest.diff.extractor import (
    FileError,
    GitError,
    extract_diff_text,
    extract_file_contents,
    read_diff_file,
)
from prsuggest.diff.generator import get_raw_suggestion_hunks, get_suggested_hunks
from prsuggest.diff.parser import DiffParseError, parse_all_hunks, parse_patch
from prsuggest.diff.ranges import NOT_FOUND, find_range

__all__ = [
  "DiffParseError",
  "FileError",
  "GitError",
  "NOT_FOUND",
  "extract_diff_text",
  "extract_file_contents",
  "find_range",
  "get_raw_suggestion_hunks",
  "get_suggested_hunks",
  "parse_all_hunks",
  "parse_patch",
  "read_diff_file",
]
