"""Shared fixtures for the trunkver test suite."""

from __future__ import annotations

import itertools
import shutil
import subprocess
from datetime import datetime, timedelta
from pathlib import Path

import pytest

from trunkver.vcs.git import Branch, Commit, GitRepository, Tag

EPOCH = datetime(2024, 1, 1, 12, 0, 0)


class FakeRepository(GitRepository):
    """In-memory commit graph standing in for a git repository.

    Only the primitive queries are replaced; branch-origin detection and
    the other higher level methods run unchanged on top of them.
    """

    def __init__(self) -> None:
        self.path = Path(".")
        self._commits: dict[str, Commit] = {}
        self._history = {}
        self._merge_bases = {}
        self._branches: dict[str, str] = {}
        self._tags: list[Tag] = []
        self._order: dict[str, int] = {}
        self._counter = itertools.count(1)
        self.head = "main"

    # -------------------------------------------------------------------------
    # Building the graph
    # -------------------------------------------------------------------------

    def commit(self, message: str = "chore: work", *, branch: str | None = None, tag: str | None = None) -> Commit:
        """Add a commit on top of ``branch`` (the checked-out one by default)."""
        branch = branch or self.head
        parents = (self._branches[branch],) if branch in self._branches else ()
        commit = self._add(message, parents)
        self._branches[branch] = commit.sha
        if tag is not None:
            self.tag(tag, commit.sha)
        return commit

    def merge(self, source: str, into: str = "main", message: str | None = None) -> Commit:
        """Merge ``source`` into ``into`` with a git style merge message."""
        if message is None:
            message = f"Merge branch '{source}'" if into in ("main", "master") else f"Merge branch '{source}' into {into}"
        commit = self._add(message, (self._branches[into], self._branches[source]))
        self._branches[into] = commit.sha
        return commit

    def create_branch(self, name: str, start: str | None = None) -> None:
        """Create ``name`` at the tip of branch ``start`` (or at a sha)."""
        start = start or self.head
        self._branches[name] = self._branches.get(start, start)

    def delete_branch(self, name: str) -> None:
        del self._branches[name]

    def checkout(self, name: str) -> None:
        self.head = name

    def tag(self, name: str, sha: str | None = None) -> None:
        self._tags.append(Tag(name, sha or self._branches[self.head]))

    def _add(self, message: str, parents: tuple[str, ...]) -> Commit:
        index = next(self._counter)
        sha = f"c{index:06d}" + "a" * 33
        commit = Commit(sha, message, "Test", "test@test.com", EPOCH + timedelta(minutes=index), parents)
        self._commits[sha] = commit
        self._order[sha] = index
        return commit

    def _ancestors(self, sha: str) -> set[str]:
        seen: set[str] = set()
        stack = [sha]
        while stack:
            current = stack.pop()
            if current in seen:
                continue
            seen.add(current)
            stack.extend(self._commits[current].parents)
        return seen

    # -------------------------------------------------------------------------
    # Repository primitives
    # -------------------------------------------------------------------------

    def head_sha(self) -> str:
        return self._branches[self.head]

    def get_commit(self, rev: str) -> Commit:
        return self._commits[self._branches.get(rev, rev)]

    def get_commits(self, tip: str, *, exclude: tuple[str, ...] = ()) -> list[Commit]:
        reachable = self._ancestors(self._branches.get(tip, tip))
        for sha in exclude:
            reachable -= self._ancestors(sha)
        return [self._commits[sha] for sha in sorted(reachable, key=self._order.__getitem__, reverse=True)]

    def find_merge_base(self, first: str, second: str) -> str | None:
        common = self._ancestors(first) & self._ancestors(second)
        return max(common, key=self._order.__getitem__, default=None)

    def branches(self) -> list[Branch]:
        return [Branch(name, sha) for name, sha in sorted(self._branches.items())]

    def current_branch(self) -> Branch:
        return Branch(self.head, self._branches[self.head])

    def get_tags(self) -> list[Tag]:
        return list(self._tags)


@pytest.fixture
def repo() -> FakeRepository:
    """Empty in-memory repository with ``main`` checked out."""
    return FakeRepository()


@pytest.fixture
def make_commit():
    """Factory for standalone commits."""
    counter = itertools.count(1)

    def factory(message: str = "chore: work", parents: tuple[str, ...] = ()) -> Commit:
        index = next(counter)
        return Commit(f"f{index:06d}" + "b" * 33, message, "T", "t@t.com", EPOCH + timedelta(minutes=index), parents)

    return factory


# =============================================================================
# Real git
# =============================================================================


class GitWorkdir:
    """Thin driver for a scratch git repository."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def git(self, *args: str) -> str:
        result = subprocess.run(["git", *args], cwd=self.path, capture_output=True, text=True, check=True)
        return result.stdout.strip()

    def commit(self, message: str) -> str:
        self.git("commit", "--allow-empty", "-m", message)
        return self.git("rev-parse", "HEAD")


@pytest.fixture
def temp_git_repo(tmp_path: Path) -> GitWorkdir:
    """Fresh git repository on ``main`` with an identity configured."""
    if shutil.which("git") is None:
        pytest.skip("git is not installed")

    workdir = GitWorkdir(tmp_path)
    workdir.git("init", "-q")
    workdir.git("checkout", "-q", "-b", "main")
    workdir.git("config", "user.name", "Test")
    workdir.git("config", "user.email", "test@test.com")
    workdir.git("config", "commit.gpgsign", "false")
    workdir.git("config", "tag.gpgsign", "false")
    return workdir
