"""Tests for merge commit message parsing."""

from __future__ import annotations

import pytest

from trunkver.config.models import TrunkverConfig
from trunkver.core.merge_message import MergeMessage, version_from_branch_name
from trunkver.core.version import SemanticVersion


@pytest.fixture
def config():
    return TrunkverConfig()


class TestTryParse:
    """Tests for MergeMessage.try_parse()."""

    @pytest.mark.parametrize(
        ("message", "format_name", "branch", "target", "number"),
        [
            ("Merge branch 'feature/login'", "Default", "feature/login", None, None),
            ("Merge branch 'feature/login' into develop", "Default", "feature/login", "develop", None),
            ("Finish feature/login", "SmartGit", "feature/login", None, None),
            ("Merge pull request #42 from acme/feature/login", "GitHubPull", "feature/login", None, 42),
            (
                "Merge pull request #7 in PROJ/repo from feature/login to main",
                "BitBucketPull",
                "feature/login",
                "main",
                7,
            ),
            ("Merged in feature/login (pull request #9)", "BitBucketCloudPull", "feature/login", None, 9),
            ("Merge remote-tracking branch 'origin/feature/login'", "RemoteTracking", "feature/login", None, None),
            (
                "Merge pull request 12 from feature/login into main",
                "AzureDevOpsPull",
                "feature/login",
                "main",
                12,
            ),
        ],
    )
    def test_known_formats(self, config, make_commit, message, format_name, branch, target, number):
        result = MergeMessage.try_parse(make_commit(message, ("a", "b")), config)

        assert result is not None
        assert result.format_name == format_name
        assert result.merged_branch == branch
        assert result.target_branch == target
        assert result.pull_request_number == number
        assert result.is_merged_pull_request is (number is not None)

    def test_bitbucket_server_v7(self, config, make_commit):
        message = "Pull request #15: Feature/login\n\nMerge in PROJ/repo from feature/login to main"
        result = MergeMessage.try_parse(make_commit(message, ("a", "b")), config)

        assert result is not None
        assert result.format_name == "BitBucketPullv7"
        assert result.merged_branch == "feature/login"
        assert result.pull_request_number == 15

    def test_refs_prefix_stripped(self, config, make_commit):
        result = MergeMessage.try_parse(make_commit("Merge branch 'refs/heads/feature/x'"), config)

        assert result.merged_branch == "feature/x"

    def test_no_match(self, config, make_commit):
        assert MergeMessage.try_parse(make_commit("feat: add things"), config) is None

    def test_release_branch_carries_version(self, config, make_commit):
        """A merged release branch named after a version yields that version."""
        result = MergeMessage.try_parse(make_commit("Merge branch 'release/2.1.0'"), config)

        assert result.merged_branch == "release/2.1.0"
        assert result.version == SemanticVersion(2, 1, 0)

    def test_non_release_branch_has_no_version(self, config, make_commit):
        result = MergeMessage.try_parse(make_commit("Merge branch 'feature/2.1.0'"), config)

        assert result.version is None

    def test_custom_format_tried_first(self, make_commit):
        config = TrunkverConfig(merge_message_formats={"Landed": r"^Landed (?P<SourceBranch>\S+)"})

        result = MergeMessage.try_parse(make_commit("Landed feature/x"), config)

        assert result.format_name == "Landed"
        assert result.merged_branch == "feature/x"

    def test_custom_format_replaces_builtin_of_same_name(self, make_commit):
        config = TrunkverConfig(merge_message_formats={"Default": r"^Integrate (?P<SourceBranch>\S+)"})

        assert MergeMessage.try_parse(make_commit("Merge branch 'feature/x'"), config) is None
        assert MergeMessage.try_parse(make_commit("Integrate feature/x"), config).merged_branch == "feature/x"


class TestVersionFromBranchName:
    """Tests for version_from_branch_name()."""

    def test_slash(self):
        assert version_from_branch_name("release/1.2.0") == SemanticVersion(1, 2, 0)

    def test_dash_and_prefix(self):
        assert version_from_branch_name("release-v1.2", "[vV]?") == SemanticVersion(1, 2, 0)

    def test_no_version(self):
        assert version_from_branch_name("release/next") is None
