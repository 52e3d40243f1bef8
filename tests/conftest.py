"""Pytest fixtures."""

import pytest
from prsuggest.models import Hunk, ReviewPlan, SingleLineComment

CLOUDBUILD = """steps:
- name: 'ubuntu'
  args: ['echo', 'foobar']
- name: 'ubuntu'
  args: ['sleep', '30']
- name: 'ubuntu'
  args: ['sleep', '60']
"""


@pytest.fixture
def cloudbuild() -> str:
  return CLOUDBUILD


@pytest.fixture
def one_line_diff() -> str:
  return """diff --git a/cloudbuild.yaml b/cloudbuild.yaml
index cac8fbc..87f387c 100644
--- a/cloudbuild.yaml
+++ b/cloudbuild.yaml
@@ -2,6 +2,6 @@ steps:
 - name: 'ubuntu'
   args: ['echo', 'foobar']
 - name: 'ubuntu'
-  args: ['sleep', '30']
+  args: ['sleep', '301']
 - name: 'ubuntu'
   args: ['sleep', '60']
"""


@pytest.fixture
def deletion_diff() -> str:
  return """diff --git a/cloudbuild.yaml b/cloudbuild.yaml
index cac8fbc..87f387c 100644
--- a/cloudbuild.yaml
+++ b/cloudbuild.yaml
@@ -2,5 +2,3 @@ steps:
 - name: 'ubuntu'
   args: ['echo', 'foobar']
-- name: 'ubuntu'
-  args: ['sleep', '30']
 - name: 'ubuntu'
"""


@pytest.fixture
def addition_diff() -> str:
  return """diff --git a/cloudbuild.yaml b/cloudbuild.yaml
index cac8fbc..87f387c 100644
--- a/cloudbuild.yaml
+++ b/cloudbuild.yaml
@@ -4,3 +4,4 @@
 - name: 'ubuntu'
   args: ['sleep', '30']
+  id: 'added'
 - name: 'ubuntu'
"""


@pytest.fixture
def sample_plan() -> ReviewPlan:
  hunk = Hunk(old_start=5, old_end=5, new_start=5, new_end=5, new_content=("  args: ['sleep', '301']",))
  return ReviewPlan(
    comments=[
      SingleLineComment(
        path="cloudbuild.yaml",
        body="```suggestion\n  args: ['sleep', '301']\n```",
        line=5,
      ),
    ],
    summary="Some suggestions could not be made:\n* README.md\n  * lines 1-2",
    valid_hunks={"cloudbuild.yaml": [hunk]},
    invalid_hunks={"README.md": [Hunk(old_start=1, old_end=2, new_start=1, new_end=1)]},
  )
