"""Differential git fixtures for GitHub API tooling.

repostate describes a repository as a shared initial commit plus linear
branches of single-file commits, builds that description both through the
GitHub API and with a local git executable, and reads either one back so
tests can check that remote and local history agree.
"""

from repostate.exceptions import RepoStateError
from repostate.state import Commit, ReferenceState, RefDetails, RepoState

__all__ = ["Commit", "RefDetails", "ReferenceState", "RepoState", "RepoStateError"]
