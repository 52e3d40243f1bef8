"""Partition suggested hunks by the commentable scope of a pull request."""

import logging
from typing import Mapping, Sequence

from prsuggest.models import Hunk, LineRange, PartitionResult

logger = logging.getLogger(__name__)


class ScopeOrderError(Exception):
  """Hunks were not ascending and disjoint."""


def ranges_to_scope_hunks(
  ranges_by_file: Mapping[str, Sequence[LineRange]],
) -> dict[str, list[Hunk]]:
  """Turn each file's half-open commentable ranges into scope hunks."""
  return {
    filename: [line_range.to_scope_hunk() for line_range in ranges]
    for filename, ranges in ranges_by_file.items()
  }


def _check_pull_request_order(filename: str, hunks: Sequence[Hunk]) -> None:
  for previous, current in zip(hunks, hunks[1:]):
    if current.new_start <= previous.new_end:
      raise ScopeOrderError(
        f"Pull request hunks for {filename} overlap or are unsorted: "
        f"{previous.new_start}-{previous.new_end} then {current.new_start}-{current.new_end}"
      )


def _check_suggestion_order(filename: str, hunks: Sequence[Hunk]) -> None:
  for previous, current in zip(hunks, hunks[1:]):
    if current.old_start < previous.old_start:
      raise ScopeOrderError(
        f"Suggested hunks for {filename} are unsorted: "
        f"{previous.old_start} then {current.old_start}"
      )


def _place(suggested: Hunk, candidate: Hunk) -> Hunk | None:
  """Return the hunk to comment with inside candidate, or None."""
  if not suggested.is_degenerate:
    return suggested if suggested.fits_within(candidate) else None

  # An empty span cannot be addressed, so borrow one line of context
  for adjusted in (suggested.adjusted_up(), suggested.adjusted_down()):
    if adjusted is not None and adjusted.fits_within(candidate):
      return adjusted
  return None


def partition_file_hunks(
  pull_request_hunks: Sequence[Hunk],
  suggested_hunks: Sequence[Hunk],
) -> tuple[list[Hunk], list[Hunk]]:
  """Split one file's suggested hunks into valid and invalid hunks.

  The old range of a suggested hunk must fit entirely inside the new
  range of a single pull request hunk. Both sequences must be ascending;
  the pull request hunks are walked once with a forward cursor.

  Returns:
    Tuple of (valid_hunks, invalid_hunks).
  """
  valid: list[Hunk] = []
  invalid: list[Hunk] = []
  index = 0

  for suggested in suggested_hunks:
    while index < len(pull_request_hunks) and pull_request_hunks[index].new_end < suggested.old_start:
      index += 1
    if index == len(pull_request_hunks):
      invalid.append(suggested)
      continue

    placed = _place(suggested, pull_request_hunks[index])
    if placed is None:
      invalid.append(suggested)
    else:
      valid.append(placed)

  return valid, invalid


def partition_suggested_hunks_by_scope(
  pull_request_hunks: Mapping[str, Sequence[Hunk]],
  suggested_hunks: Mapping[str, Sequence[Hunk]],
) -> PartitionResult:
  """Split suggested hunks into commentable and non-commentable hunks.

  Compares the new line ranges of pull_request_hunks against the old
  line ranges of suggested_hunks. Every suggested hunk ends up in exactly
  one of the two outputs; a file key is only present in an output when
  it has at least one hunk there.

  Args:
    pull_request_hunks: Hunks describing the lines open for comments.
    suggested_hunks: Hunks describing the suggested changes.

  Raises:
    ScopeOrderError: If either side is not in ascending order.
  """
  valid_hunks: dict[str, list[Hunk]] = {}
  invalid_hunks: dict[str, list[Hunk]] = {}

  for filename, hunks in suggested_hunks.items():
    if not hunks:
      continue
    _check_suggestion_order(filename, hunks)

    file_scope = pull_request_hunks.get(filename)
    if file_scope is None:
      # file is not part of the pull request diff
      invalid_hunks[filename] = list(hunks)
      continue
    _check_pull_request_order(filename, file_scope)

    valid, invalid = partition_file_hunks(file_scope, hunks)
    if valid:
      valid_hunks[filename] = valid
    if invalid:
      invalid_hunks[filename] = invalid

  if invalid_hunks:
    logger.info(
      "%d suggestion(s) fall outside the pull request scope",
      sum(len(h) for h in invalid_hunks.values()),
    )
  return PartitionResult(valid_hunks=valid_hunks, invalid_hunks=invalid_hunks)
