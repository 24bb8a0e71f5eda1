"""Tests for the increment engine rules."""

from __future__ import annotations

import pytest

from trunkver.config.models import TrunkverConfig
from trunkver.core.base_version import BaseVersionOperand
from trunkver.core.iteration import TrunkIteration
from trunkver.core.trunk import INCREMENTERS, TrunkContext, determine_base_version, evaluate
from trunkver.core.version import SemanticVersion, VersionField
from trunkver.exceptions import VersionCalculationError


@pytest.fixture
def config():
    return TrunkverConfig.model_validate(
        {"branches": {"support": {"regex": r"^support[/-]", "label": "", "increment": "Patch", "is_main_branch": True}}}
    )


@pytest.fixture
def main(config):
    return config.get_effective_configuration("main")


@pytest.fixture
def feature(config):
    return config.get_effective_configuration("feature/x")


@pytest.fixture
def build(make_commit):
    """Build an iteration from records given oldest first.

    Each record is ``(branch_name, configuration)`` optionally followed by
    a list of tag versions and a forced increment.
    """

    def factory(branch_name, configuration, *records, parent=None):
        iteration = TrunkIteration.create(branch_name, configuration, parent)
        commits = [make_commit() for _ in records]
        for record, commit in reversed(list(zip(records, commits, strict=True))):
            name, record_configuration, *rest = record
            versions = rest[0] if rest else []
            increment = rest[1] if len(rest) > 1 else VersionField.NONE
            trunk_commit = iteration.create_commit(commit, name, record_configuration, increment)
            trunk_commit.add_semantic_versions(SemanticVersion.parse(v) for v in versions)
        return iteration

    return factory


def _rules(iteration, target_label, target_branch=None):
    return [(commit.value.sha, item.source) for commit, item in evaluate(iteration, target_label, target_branch)]


def _version(iteration, target_label):
    return str(determine_base_version(iteration, target_label).get_semantic_version())


class TestIncrementerOrder:
    """Tests for the registered rule list."""

    def test_trunk_rules_before_non_trunk_rules(self):
        names = [rule.name for rule in INCREMENTERS]

        assert len(names) == 18
        assert names[:9] == [
            "CommitOnTrunk",
            "CommitOnTrunkWithPreReleaseTag",
            "LastCommitOnTrunkWithPreReleaseTag",
            "CommitOnTrunkWithStableTag",
            "LastCommitOnTrunkWithStableTag",
            "MergeCommitOnTrunk",
            "LastMergeCommitOnTrunk",
            "CommitOnTrunkBranchedToTrunk",
            "CommitOnTrunkBranchedToNonTrunk",
        ]
        assert names[9:] == [name.replace("Trunk", "NonTrunk", 1) for name in names[:9]]


class TestTrunkRules:
    """Commits attributed to a trunk branch."""

    def test_empty_iteration_raises(self, main, build):
        with pytest.raises(VersionCalculationError):
            determine_base_version(build("main", main), "")

    def test_commits_without_tags(self, main, build):
        iteration = build("main", main, ("main", main), ("main", main, [], VersionField.PATCH), ("main", main))

        assert _version(iteration, "") == "0.0.1"

    def test_stable_tag_then_commit(self, main, build):
        """Without a forced increment the untagged tip keeps the tag version."""
        iteration = build("main", main, ("main", main, ["1.0.0"]), ("main", main))
        tagged, tip = iteration.commits

        assert _rules(iteration, "") == [
            (tagged.sha, "CommitOnTrunkWithStableTag"),
            (tip.sha, "CommitOnTrunk"),
        ]
        assert _version(iteration, "") == "1.0.0"

    def test_every_forced_trunk_commit_increments(self, main, build):
        iteration = build(
            "main",
            main,
            ("main", main, ["1.0.0"]),
            ("main", main, [], VersionField.PATCH),
            ("main", main, [], VersionField.PATCH),
        )

        assert _version(iteration, "") == "1.0.2"

    def test_branch_increment_not_applied_on_trunk(self, build):
        main = TrunkverConfig.model_validate({"branches": {"main": {"increment": "Major"}}}).get_effective_configuration(
            "main"
        )
        iteration = build("main", main, ("main", main, ["1.0.0"]), ("main", main))

        assert _version(iteration, "") == "1.0.0"

    def test_pre_release_tag_then_commit(self, main, build):
        """An unlabelled pre-release tag on trunk keeps counting."""
        iteration = build("main", main, ("main", main, ["0.2.0-1"]), ("main", main))
        tagged, _ = iteration.commits

        assert _rules(iteration, "")[0] == (tagged.sha, "CommitOnTrunkWithPreReleaseTag")
        assert _version(iteration, "") == "0.2.0-2"

    def test_last_commit_with_pre_release_tag(self, main, build):
        iteration = build("main", main, ("main", main), ("main", main, ["0.2.0-1"]))
        _, tip = iteration.commits

        assert (tip.sha, "LastCommitOnTrunkWithPreReleaseTag") in _rules(iteration, "")
        assert _version(iteration, "") == "0.2.0-1"

    def test_last_commit_with_stable_tag(self, main, build):
        iteration = build("main", main, ("main", main), ("main", main, ["1.0.0"]))

        assert _version(iteration, "") == "1.0.0"

    def test_tagged_tip_with_forced_increment_is_kept(self, main, build):
        """The tag of the current commit wins over its message by default."""
        iteration = build("main", main, ("main", main, ["1.0.0"], VersionField.MINOR))

        assert _version(iteration, "") == "1.0.0"

    def test_tagged_tip_with_forced_increment_applied(self, build):
        main = TrunkverConfig(prevent_increment_when_current_commit_tagged=False).get_effective_configuration("main")
        iteration = build("main", main, ("main", main, ["1.0.0"], VersionField.MINOR))

        assert [item.source for _, item in evaluate(iteration, "")] == [
            "LastCommitOnTrunkWithStableTag",
            "LastCommitOnTrunkWithStableTag",
        ]
        assert _version(iteration, "") == "1.1.0"

    def test_forced_increment_on_trunk(self, main, build):
        iteration = build("main", main, ("main", main, ["1.0.0"]), ("main", main, [], VersionField.MAJOR))

        assert _version(iteration, "") == "2.0.0"

    def test_higher_alternative_lifts_result(self, main, build):
        """Tags that do not match the label still bound the result."""
        iteration = build("main", main, ("main", main, ["1.0.0", "2.0.0-beta.1"]), ("main", main))

        assert _version(iteration, "") == "2.0.0"

    def test_branched_to_trunk(self, config, main, build):
        support = config.get_effective_configuration("support/1.x")
        iteration = build("support/1.x", support, ("main", main, ["1.0.0"]), ("main", main))
        _, tip = iteration.commits

        assert _rules(iteration, "")[-2:] == [
            (tip.sha, "CommitOnTrunk"),
            (tip.sha, "CommitOnTrunkBranchedToTrunk"),
        ]
        assert _version(iteration, "") == "1.0.1"


class TestNonTrunkRules:
    """Commits attributed to a non-trunk branch."""

    def test_fresh_branch(self, main, feature, build):
        """A branch without own commits gets the next pre-release."""
        iteration = build("feature/x", feature, ("main", main, ["1.0.0"]), ("main", main))
        _, tip = iteration.commits

        assert _rules(iteration, "x")[-2:] == [
            (tip.sha, "CommitOnTrunk"),
            (tip.sha, "CommitOnTrunkBranchedToNonTrunk"),
        ]
        assert _version(iteration, "x") == "1.0.1-x.1"

    def test_commits_count_up(self, main, feature, build):
        iteration = build(
            "feature/x",
            feature,
            ("main", main, ["1.0.0"]),
            ("main", main),
            ("feature/x", feature),
            ("feature/x", feature),
        )

        assert _version(iteration, "x") == "1.0.1-x.2"

    def test_forced_increment_carries_forward(self, main, feature, build):
        """A non-trunk increment stays pending until a tag resets it."""
        iteration = build(
            "feature/x",
            feature,
            ("main", main, ["1.0.0"]),
            ("feature/x", feature, [], VersionField.MINOR),
            ("feature/x", feature),
        )

        assert _version(iteration, "x") == "1.1.0-x.2"

    def test_pre_release_tag_on_branch(self, main, feature, build):
        iteration = build(
            "feature/x",
            feature,
            ("main", main, ["1.0.0"]),
            ("feature/x", feature, ["1.0.1-x.1"]),
            ("feature/x", feature),
        )
        _, tagged, _ = iteration.commits

        assert (tagged.sha, "CommitOnNonTrunkWithPreReleaseTag") in _rules(iteration, "x")
        assert _version(iteration, "x") == "1.0.1-x.2"

    def test_last_commit_with_pre_release_tag(self, main, feature, build):
        iteration = build(
            "feature/x",
            feature,
            ("main", main, ["1.0.0"]),
            ("feature/x", feature, ["1.0.1-x.3"]),
        )

        assert _version(iteration, "x") == "1.0.1-x.3"

    def test_other_label_is_alternative(self, main, feature, build):
        """A tag with another label is not selected but is not lost."""
        iteration = build(
            "feature/x",
            feature,
            ("main", main, ["1.0.0"]),
            ("feature/x", feature, ["3.0.0-y.1"]),
            ("feature/x", feature),
        )

        assert _version(iteration, "x") == "3.0.0-x.1"

    def test_stable_tag_on_branch(self, config, build):
        release = config.get_effective_configuration("release/1.1")
        iteration = build("release/1.1", release, ("release/1.1", release, ["1.1.0"]), ("release/1.1", release))
        tagged, _ = iteration.commits

        assert (tagged.sha, "CommitOnNonTrunkWithStableTag") in _rules(iteration, "beta")
        assert _version(iteration, "beta") == "1.2.0-beta.1"

    def test_branched_to_non_trunk(self, config, feature, build):
        develop = config.get_effective_configuration("develop")
        iteration = build("feature/x", feature, ("develop", develop, ["1.1.0-alpha.1"]), ("develop", develop))
        _, tip = iteration.commits

        assert (tip.sha, "CommitOnNonTrunkBranchedToNonTrunk") in _rules(iteration, "x")
        assert _version(iteration, "x") == "1.1.0-x.1"


class TestMergeRules:
    """Merge commits owning a child iteration."""

    def _merge(self, build, main, feature, child_records, *, last=True):
        records = [("main", main, ["1.0.0"]), ("main", main)]
        if not last:
            records.append(("main", main))
        iteration = build("main", main, *records)
        merge = iteration.commits[1]
        merge.add_child_iteration(build("feature/x", feature, *child_records, parent=iteration))
        return iteration, merge

    def test_child_increment_is_folded(self, main, feature, build):
        iteration, merge = self._merge(build, main, feature, [("feature/x", feature, [], VersionField.MINOR)])

        assert (merge.sha, "LastMergeCommitOnTrunk") in _rules(iteration, "")
        assert _version(iteration, "") == "1.1.0"

    def test_child_without_increment_keeps_version(self, main, feature, build):
        iteration, _ = self._merge(build, main, feature, [("feature/x", feature)])

        assert _version(iteration, "") == "1.0.0"

    def test_tagged_child_version_is_lower_bound(self, main, feature, build):
        iteration, merge = self._merge(build, main, feature, [("feature/x", feature, ["2.0.0"])])
        result = determine_base_version(iteration, "")

        assert str(result.get_semantic_version()) == "2.0.0"
        assert result.base_version_source == merge.child_iteration.commits[0].value

    def test_non_terminal_merge(self, main, feature, build):
        iteration, merge = self._merge(
            build, main, feature, [("feature/x", feature, [], VersionField.MINOR)], last=False
        )

        assert (merge.sha, "MergeCommitOnTrunk") in _rules(iteration, "")
        assert _version(iteration, "") == "1.1.0"

    def test_merge_operation_is_operator(self, main, feature, build):
        iteration, merge = self._merge(build, main, feature, [("feature/x", feature, ["2.0.0"])])

        items = [item for commit, item in evaluate(iteration, "") if commit is merge]
        assert len(items) == 1
        assert not isinstance(items[0], BaseVersionOperand)
        assert items[0].alternative_semantic_version == SemanticVersion(2, 0, 0)

    def test_merge_without_resolver_raises(self, main, feature, build):
        iteration, merge = self._merge(build, main, feature, [("feature/x", feature, [], VersionField.MINOR)])
        rule = next(rule for rule in INCREMENTERS if rule.name == "LastMergeCommitOnTrunk")

        with pytest.raises(VersionCalculationError, match="merged branch"):
            list(rule.get_increments(iteration, merge, TrunkContext(target_label="")))


class TestRuleGuards:
    """Rules invoked outside their precondition fail loudly."""

    def test_tag_rule_without_selected_version(self, main, build):
        iteration = build("main", main, ("main", main))
        rule = next(rule for rule in INCREMENTERS if rule.name == "LastCommitOnTrunkWithStableTag")
        context = TrunkContext(target_label="")

        assert not rule.match_precondition(iteration, iteration.commits[0], context)
        with pytest.raises(VersionCalculationError, match="No tag version"):
            list(rule.get_increments(iteration, iteration.commits[0], context))
