"""Index of semantic-version tags reachable from a branch."""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import TYPE_CHECKING

from trunkver.core.version import SemanticVersion, SemanticVersionWithTag

if TYPE_CHECKING:
    from datetime import datetime

    from trunkver.config.models import EffectiveConfiguration, TrunkverConfig
    from trunkver.vcs.git import Branch, GitRepository

logger = logging.getLogger(__name__)


class TaggedSemanticVersionRepository:
    """Resolves git tags into semantic versions keyed by commit sha."""

    def __init__(self, repository: GitRepository) -> None:
        self.repository = repository

    def get_all_tagged_semantic_versions(
        self,
        config: TrunkverConfig,
        effective_configuration: EffectiveConfiguration,
        branch: Branch,
        label: str | None,
        not_after: datetime | None,
    ) -> dict[str, list[SemanticVersionWithTag]]:
        """Return the semantic-version tags reachable from ``branch``.

        Args:
            config: Global configuration
            effective_configuration: Configuration of ``branch`` (tag prefix)
            branch: Branch whose history bounds the search
            label: Only keep versions matching this label (None keeps all)
            not_after: Skip tags on commits newer than this

        Returns:
            Mapping of commit sha to versions, highest version first
        """
        tag_prefix = effective_configuration.tag_prefix or config.tag_prefix
        commits = {commit.sha: commit for commit in self.repository.get_commits(branch.tip)}

        result: dict[str, list[SemanticVersionWithTag]] = defaultdict(list)
        for tag in self.repository.get_tags():
            commit = commits.get(tag.sha)
            if commit is None:
                continue
            if not_after is not None and commit.date > not_after:
                continue
            version = SemanticVersion.try_parse(tag.name, tag_prefix)
            if version is None:
                logger.debug("Skipping tag %s: not a semantic version", tag.name)
                continue
            if label is not None and not version.is_match_for_branch_specific_label(label):
                continue
            result[tag.sha].append(SemanticVersionWithTag(version, tag.name, tag.sha))

        for versions in result.values():
            versions.sort(key=lambda element: element.value, reverse=True)
        return dict(result)
