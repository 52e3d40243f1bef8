"""Tests for GitHub patch range parsing."""

import pytest
from prsuggest.github.patch import (
  HeaderShape,
  PatchSyntaxError,
  get_github_patch_ranges,
  iter_patch_headers,
  patch_text_to_ranges,
)
from prsuggest.models import LineRange


class TestGetGitHubPatchRanges:
  def test_multiline_to_multiline(self) -> None:
    patch = "@@ -132,7 +132,7 @@ module.exports = {\n-foo\n+bar"
    assert get_github_patch_ranges(patch) == [LineRange(132, 139)]

  def test_oneline_to_multiline(self) -> None:
    assert get_github_patch_ranges("@@ -1 +0,0 @@\n-Hello foo") == [LineRange(0, 0)]

  def test_oneline_to_oneline(self) -> None:
    assert get_github_patch_ranges("@@ -1 +1 @@\n-Hello foo\n+") == [LineRange(1, 2)]

  def test_multiline_to_oneline(self) -> None:
    assert get_github_patch_ranges("@@ -0,0 +1 @@\n+Hello foo") == [LineRange(1, 2)]

  def test_new_file(self) -> None:
    patch = "@@ -0,0 +1,12 @@\n+Hello world"
    assert get_github_patch_ranges(patch) == [LineRange(1, 13)]

  def test_mixed_headers_keep_order(self) -> None:
    patch = "\n".join([
      "@@ -1 +1 @@",
      "-a",
      "+b",
      "@@ -10,2 +10,3 @@ def foo():",
      " c",
      "+d",
      " e",
      "@@ -30,2 +31 @@",
      "-f",
      " g",
    ])
    assert get_github_patch_ranges(patch) == [
      LineRange(1, 2),
      LineRange(10, 13),
      LineRange(31, 32),
    ]

  def test_malformed_text_raises(self) -> None:
    with pytest.raises(PatchSyntaxError) as excinfo:
      get_github_patch_ranges("@@ this is not a patch @@")
    assert "this is not a patch" in str(excinfo.value)

  def test_empty_text_raises(self) -> None:
    with pytest.raises(PatchSyntaxError):
      get_github_patch_ranges("")

  def test_non_string_raises(self) -> None:
    with pytest.raises(TypeError):
      get_github_patch_ranges(None)  # type: ignore[arg-type]

  def test_repeated_calls_are_independent(self) -> None:
    patch = "@@ -1 +1 @@\n-a\n+b"
    assert get_github_patch_ranges(patch) == get_github_patch_ranges(patch)


class TestIterPatchHeaders:
  def test_shapes(self) -> None:
    patch = "@@ -3,4 +3,4 @@\n@@ -1 +0,0 @@\n@@ -1 +1 @@\n@@ -0,0 +1 @@"
    assert [shape for shape, _ in iter_patch_headers(patch)] == [
      HeaderShape.MULTILINE,
      HeaderShape.ONELINE_TO_MULTILINE,
      HeaderShape.ONELINE,
      HeaderShape.MULTILINE_TO_ONELINE,
    ]


class TestPatchTextToRanges:
  def test_ranges_per_file(self) -> None:
    patches = {
      "a.py": "@@ -1,2 +1,3 @@\n a\n+b\n c",
      "b.py": "@@ -5 +5 @@\n-x\n+y",
    }
    assert patch_text_to_ranges(patches) == {
      "a.py": [LineRange(1, 4)],
      "b.py": [LineRange(5, 6)],
    }

  def test_error_names_file(self) -> None:
    with pytest.raises(PatchSyntaxError) as excinfo:
      patch_text_to_ranges({"good.py": "@@ -1 +1 @@", "bad.py": "Binary files differ"})
    assert excinfo.value.filename == "bad.py"
    assert excinfo.value.patch_text == "Binary files differ"
    assert "bad.py" in str(excinfo.value)
