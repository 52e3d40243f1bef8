"""Binary search over ascending, disjoint line ranges."""

from typing import Sequence

from prsuggest.models import LineRange

NOT_FOUND = -1


def find_range(ranges: Sequence[LineRange], value: int, start_index: int = 0) -> int:
  """Find the index of the range containing value.

  The search treats each range's end as inclusive, so callers holding
  half-open ranges must pass end - 1 if the last line must not match.
  Ranges are expected to be ascending and pairwise disjoint.

  Args:
    ranges: Ascending, disjoint ranges.
    value: Line number to look up.
    start_index: Lowest index to consider.

  Returns:
    Index of the containing range, or NOT_FOUND.
  """
  lo = max(start_index, 0)
  hi = len(ranges) - 1
  while lo <= hi:
    mid = (lo + hi) // 2
    if ranges[mid].start > value:
      hi = mid - 1
    elif ranges[mid].end < value:
      lo = mid + 1
    else:
      return mid
  return NOT_FOUND
