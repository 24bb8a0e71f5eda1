"""Incrementers for commits attributed to a non-trunk branch.

Mirror images of the trunk rules in ``trunk.py``.
"""

from __future__ import annotations

from trunkver.core.trunk.incrementers import BranchedBase, CommitBase, CommitWithTagBase, MergeCommitBase


class CommitOnNonTrunk(CommitBase):
    # C 56 minutes ago  (HEAD -> feature/foo) <<--
    # B 57 minutes ago
    # A 58 minutes ago  (main)

    on_trunk = False


class CommitOnNonTrunkWithPreReleaseTag(CommitWithTagBase):
    # C 56 minutes ago  (HEAD -> feature/foo)
    # B 57 minutes ago  (tag 0.2.0-foo.1) <<--
    # A 58 minutes ago  (main)

    on_trunk = False
    pre_release = True
    last = False


class LastCommitOnNonTrunkWithPreReleaseTag(CommitWithTagBase):
    # C 56 minutes ago  (HEAD -> feature/foo) (tag 0.2.0-foo.1) <<--
    # B 57 minutes ago
    # A 58 minutes ago  (main)

    on_trunk = False
    pre_release = True
    last = True


class CommitOnNonTrunkWithStableTag(CommitWithTagBase):
    # C 56 minutes ago  (HEAD -> release/0.2.0)
    # B 57 minutes ago  (tag 0.2.0) <<--
    # A 58 minutes ago  (main)

    on_trunk = False
    pre_release = False
    last = False


class LastCommitOnNonTrunkWithStableTag(CommitWithTagBase):
    # C 56 minutes ago  (HEAD -> release/0.2.0) (tag 0.2.0) <<--
    # B 57 minutes ago
    # A 58 minutes ago  (main)

    on_trunk = False
    pre_release = False
    last = True


class MergeCommitOnNonTrunk(MergeCommitBase):
    # D  54 minutes ago  (HEAD -> feature/foo)
    # *  55 minutes ago  <<--
    # |\
    # | C 56 minutes ago  (feature/bar)
    # |/
    # B 57 minutes ago
    # A 58 minutes ago  (main)

    on_trunk = False
    last = False


class LastMergeCommitOnNonTrunk(MergeCommitBase):
    # *  55 minutes ago  (HEAD -> feature/foo) <<--
    # |\
    # | C 56 minutes ago  (feature/bar)
    # |/
    # B 57 minutes ago
    # A 58 minutes ago  (main)

    on_trunk = False
    last = True


class CommitOnNonTrunkBranchedToTrunk(BranchedBase):
    # B 57 minutes ago  (develop) (HEAD -> support/1.x) <<--
    # A 58 minutes ago

    on_trunk = False
    to_trunk = True


class CommitOnNonTrunkBranchedToNonTrunk(BranchedBase):
    # B 57 minutes ago  (develop) (HEAD -> feature/foo) <<--
    # A 58 minutes ago

    on_trunk = False
    to_trunk = False
