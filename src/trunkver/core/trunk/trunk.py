"""Incrementers for commits attributed to a trunk (main) branch.

The sketches show ``git log --graph`` output, newest first; ``<<--``
marks the commit the rule matches.
"""

from __future__ import annotations

from trunkver.core.trunk.incrementers import BranchedBase, CommitBase, CommitWithTagBase, MergeCommitBase


class CommitOnTrunk(CommitBase):
    # B 57 minutes ago  (HEAD -> main) <<--
    # A 58 minutes ago

    on_trunk = True


class CommitOnTrunkWithPreReleaseTag(CommitWithTagBase):
    # B 58 minutes ago  (HEAD -> main)
    # A 59 minutes ago  (tag 0.2.0-1) <<--

    on_trunk = True
    pre_release = True
    last = False


class LastCommitOnTrunkWithPreReleaseTag(CommitWithTagBase):
    # B 58 minutes ago  (HEAD -> main) (tag 0.2.0-1) <<--
    # A 59 minutes ago

    on_trunk = True
    pre_release = True
    last = True


class CommitOnTrunkWithStableTag(CommitWithTagBase):
    # B 58 minutes ago  (HEAD -> main)
    # A 59 minutes ago  (tag 0.2.0) <<--

    on_trunk = True
    pre_release = False
    last = False


class LastCommitOnTrunkWithStableTag(CommitWithTagBase):
    # B 58 minutes ago  (HEAD -> main) (tag 0.2.0) <<--
    # A 59 minutes ago

    on_trunk = True
    pre_release = False
    last = True


class MergeCommitOnTrunk(MergeCommitBase):
    # C  55 minutes ago  (HEAD -> main)
    # *  56 minutes ago  <<--
    # |\
    # | B 57 minutes ago  (feature/foo)
    # |/
    # A 58 minutes ago

    on_trunk = True
    last = False


class LastMergeCommitOnTrunk(MergeCommitBase):
    # *  56 minutes ago  (HEAD -> main) <<--
    # |\
    # | B 57 minutes ago  (feature/foo)
    # |/
    # A 58 minutes ago

    on_trunk = True
    last = True


class CommitOnTrunkBranchedToTrunk(BranchedBase):
    # B 58 minutes ago  (main) (HEAD -> support/1.x) <<--
    # A 59 minutes ago

    on_trunk = True
    to_trunk = True


class CommitOnTrunkBranchedToNonTrunk(BranchedBase):
    # B 58 minutes ago  (main) (HEAD -> feature/foo) <<--
    # A 59 minutes ago

    on_trunk = True
    to_trunk = False
