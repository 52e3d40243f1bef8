"""Render partitioned hunks into GitHub review comments."""

from typing import Mapping, Sequence

from prsuggest.models import (
  Hunk,
  MultilineComment,
  ReviewComment,
  Side,
  SingleLineComment,
)

SUMMARY_HEADER = "Some suggestions could not be made:"


def suggestion_body(hunk: Hunk) -> str:
  """Wrap the hunk's replacement lines in a suggestion code fence."""
  content = "\n".join(hunk.new_content)
  return f"```suggestion\n{content}\n```"


def build_review_comments(valid_hunks: Mapping[str, Sequence[Hunk]]) -> list[ReviewComment]:
  """Convert valid hunks into review comments, ordered by file path.

  Lines are addressed by the hunk's old range, which after partitioning
  lies within the pull request's current file.
  """
  comments: list[ReviewComment] = []
  for path in sorted(valid_hunks):
    for hunk in valid_hunks[path]:
      body = suggestion_body(hunk)
      if hunk.old_start == hunk.old_end:
        comments.append(SingleLineComment(
          path=path,
          body=body,
          line=hunk.old_end,
          side=Side.RIGHT,
        ))
      else:
        comments.append(MultilineComment(
          path=path,
          body=body,
          start_line=hunk.old_start,
          line=hunk.old_end,
          side=Side.RIGHT,
          start_side=Side.RIGHT,
        ))
  return comments


def _hunk_message(hunk: Hunk) -> str:
  return f"  * lines {hunk.old_start}-{hunk.old_end}"


def _file_message(path: str, hunks: Sequence[Hunk]) -> str:
  return "\n".join([f"* {path}", *(_hunk_message(h) for h in hunks)])


def build_summary_comment(invalid_hunks: Mapping[str, Sequence[Hunk]]) -> str:
  """Describe the suggestions that could not be placed, or '' if none."""
  if not any(invalid_hunks.values()):
    return ""
  files = [_file_message(path, invalid_hunks[path]) for path in sorted(invalid_hunks) if invalid_hunks[path]]
  return "\n".join([SUMMARY_HEADER, *files])
