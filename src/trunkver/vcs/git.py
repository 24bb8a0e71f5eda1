"""Read-only git repository access.

All information is obtained by running the ``git`` executable as a
subprocess. Nothing here ever writes to the repository.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

from trunkver.exceptions import BranchNotFoundError, GitError, NotARepositoryError

if TYPE_CHECKING:
    from trunkver.config.models import TrunkverConfig

logger = logging.getLogger(__name__)

_FIELD_SEP = "\x1f"
_RECORD_SEP = "\x1e"
_LOG_FORMAT = _FIELD_SEP.join(["%H", "%P", "%an", "%ae", "%cI", "%B"]) + _RECORD_SEP

REMOTE_PREFIX = "refs/remotes/"
LOCAL_PREFIX = "refs/heads/"


@dataclass(frozen=True)
class Commit:
    """A git commit."""

    sha: str
    message: str
    author_name: str
    author_email: str
    date: datetime
    parents: tuple[str, ...] = field(default=())

    @property
    def short_sha(self) -> str:
        return self.sha[:7]

    @property
    def subject(self) -> str:
        return self.message.split("\n", 1)[0].strip()

    @property
    def is_merge(self) -> bool:
        return len(self.parents) > 1

    def __str__(self) -> str:
        return f"{self.short_sha} {self.subject}"


@dataclass(frozen=True)
class Branch:
    """A local or remote-tracking branch."""

    name: str
    tip: str
    is_remote: bool = False

    @property
    def friendly_name(self) -> str:
        """Branch name without the remote (``origin/feature/x`` -> ``feature/x``)."""
        if self.is_remote and "/" in self.name:
            return self.name.split("/", 1)[1]
        return self.name

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class BranchCommit:
    """A branch and the commit at which the walked branch diverged from it."""

    branch: Branch
    commit: Commit


@dataclass(frozen=True)
class Tag:
    """A tag pointing, after peeling, at ``sha``."""

    name: str
    sha: str


class GitRepository:
    """Git repository backed by the ``git`` command line."""

    def __init__(self, path: Path | str | None = None) -> None:
        start = Path(path) if path is not None else Path.cwd()
        try:
            toplevel = self._run_in(start, "rev-parse", "--show-toplevel")
        except GitError as e:
            raise NotARepositoryError(f"Not a git repository: {start}", stderr=e.stderr) from e
        self.path = Path(toplevel)
        self._commits: dict[str, Commit] = {}
        self._history: dict[tuple[str, ...], list[Commit]] = {}
        self._merge_bases: dict[tuple[str, str], str | None] = {}

    # -------------------------------------------------------------------------
    # Low level
    # -------------------------------------------------------------------------

    @staticmethod
    def _run_in(cwd: Path, *args: str) -> str:
        try:
            result = subprocess.run(
                ["git", *args],
                capture_output=True,
                text=True,
                check=True,
                cwd=cwd,
            )
        except FileNotFoundError as e:
            raise GitError("git executable not found") from e
        except subprocess.CalledProcessError as e:
            raise GitError(f"git {' '.join(args)} failed with exit code {e.returncode}", stderr=e.stderr) from e
        return result.stdout.rstrip("\n")

    def _run(self, *args: str) -> str:
        return self._run_in(self.path, *args)

    def _parse_log(self, output: str) -> list[Commit]:
        commits = []
        for record in output.split(_RECORD_SEP):
            record = record.strip("\n")
            if not record:
                continue
            sha, parents, author_name, author_email, date, message = record.split(_FIELD_SEP, 5)
            commit = Commit(
                sha=sha,
                message=message.strip(),
                author_name=author_name,
                author_email=author_email,
                date=datetime.fromisoformat(date),
                parents=tuple(parents.split()),
            )
            self._commits[sha] = commit
            commits.append(commit)
        return commits

    # -------------------------------------------------------------------------
    # Commits
    # -------------------------------------------------------------------------

    def head_sha(self) -> str:
        return self._run("rev-parse", "HEAD")

    def get_commit(self, rev: str) -> Commit:
        """Return a single commit by sha or revision expression."""
        if rev in self._commits:
            return self._commits[rev]
        output = self._run("log", "-1", f"--format={_LOG_FORMAT}", rev, "--")
        return self._parse_log(output)[0]

    def get_commits(self, tip: str, *, exclude: tuple[str, ...] = ()) -> list[Commit]:
        """Return commits reachable from ``tip`` but not from ``exclude``.

        Commits are returned newest first, in topological order.
        """
        key = (tip, *exclude)
        if key not in self._history:
            args = ["log", "--topo-order", f"--format={_LOG_FORMAT}", tip]
            args.extend(f"^{sha}" for sha in exclude)
            self._history[key] = self._parse_log(self._run(*args, "--"))
        return list(self._history[key])

    def find_merge_base(self, first: str, second: str) -> str | None:
        key = (first, second) if first <= second else (second, first)
        if key not in self._merge_bases:
            try:
                self._merge_bases[key] = self._run("merge-base", first, second) or None
            except GitError:
                self._merge_bases[key] = None
        return self._merge_bases[key]

    # -------------------------------------------------------------------------
    # Branches
    # -------------------------------------------------------------------------

    def branches(self) -> list[Branch]:
        """Return local branches followed by remote-tracking branches."""
        output = self._run(
            "for-each-ref",
            f"--format=%(refname){_FIELD_SEP}%(objectname)",
            LOCAL_PREFIX,
            REMOTE_PREFIX,
        )
        result = []
        for line in output.splitlines():
            ref, sha = line.split(_FIELD_SEP)
            if ref.startswith(LOCAL_PREFIX):
                result.append(Branch(ref.removeprefix(LOCAL_PREFIX), sha))
            elif not ref.endswith("/HEAD"):
                result.append(Branch(ref.removeprefix(REMOTE_PREFIX), sha, is_remote=True))
        return result

    def find_branch(self, name: str) -> Branch | None:
        """Find a branch by name, preferring local branches over remote ones."""
        candidates = self.branches()
        for branch in candidates:
            if not branch.is_remote and branch.name == name:
                return branch
        for branch in candidates:
            if branch.is_remote and name in (branch.name, branch.friendly_name):
                return branch
        return None

    def current_branch(self) -> Branch:
        """Return the checked-out branch; a detached HEAD is reported as ``HEAD``."""
        sha = self.head_sha()
        try:
            name = self._run("symbolic-ref", "--short", "-q", "HEAD")
        except GitError:
            logger.debug("HEAD is detached at %s", sha)
            return Branch("HEAD", sha)
        return Branch(name, sha)

    def get_branch(self, name: str) -> Branch:
        branch = self.find_branch(name)
        if branch is None:
            raise BranchNotFoundError(f"Branch not found: {name}")
        return branch

    def find_commit_branches_was_branched_from(self, branch: Branch, config: TrunkverConfig) -> list[BranchCommit]:
        """Return, for every other branch, the commit where ``branch`` left it.

        Branches that were themselves cut from ``branch`` (their merge base is
        our tip while their tip is ahead) are not origins. Local branches hide
        their remote-tracking counterparts. Merge bases excluded by the ignore
        filter are skipped.
        """
        local_names = {b.name for b in self.branches() if not b.is_remote}
        result = []
        for other in self.branches():
            if other.friendly_name == branch.friendly_name:
                continue
            if other.is_remote and other.friendly_name in local_names:
                continue
            merge_base = self.find_merge_base(branch.tip, other.tip)
            if merge_base is None:
                continue
            if merge_base == branch.tip and other.tip != branch.tip:
                continue
            commit = self.get_commit(merge_base)
            if config.ignore.is_ignored(commit):
                continue
            result.append(BranchCommit(other, commit))
        return result

    # -------------------------------------------------------------------------
    # Tags
    # -------------------------------------------------------------------------

    def get_tags(self) -> list[Tag]:
        """Return all tags, annotated tags peeled to the commit they point to."""
        output = self._run(
            "for-each-ref",
            f"--format=%(refname:short){_FIELD_SEP}%(objectname){_FIELD_SEP}%(*objectname)",
            "refs/tags",
        )
        tags = []
        for line in output.splitlines():
            name, sha, peeled = line.split(_FIELD_SEP, 2)
            tags.append(Tag(name, peeled or sha))
        return tags
