"""End-to-end pipeline: detect spec changes, pick relevant tests, ask the LLM.

Every stage returns its counts instead of printing them; the CLI decides
what to show and whether an empty stage ends the run.
"""

import logging
from pathlib import Path

from pydantic import BaseModel, Field

from api_test_updater.config import UpdaterConfig
from api_test_updater.corpus import discover_test_files, read_document
from api_test_updater.detector import SpecDiff, detect_spec_changes
from api_test_updater.generator.suggest import Suggestion, SuggestionGenerator
from api_test_updater.ranking.budget import RenderedContext, render_context
from api_test_updater.ranking.extractor import extract_endpoints
from api_test_updater.ranking.ranker import RankingResult, rank_documents

logger = logging.getLogger(__name__)


class Analysis(BaseModel):
    """Everything derived for one spec file before any model call."""

    spec_diff: SpecDiff
    identifiers: list[str] = Field(default_factory=list)
    ranking: RankingResult
    context: RenderedContext


class PipelineReport(BaseModel):
    spec_diffs: list[SpecDiff] = Field(default_factory=list)
    test_files_found: int = 0
    analyses: list[Analysis] = Field(default_factory=list)
    suggestions: list[Suggestion] = Field(default_factory=list)


def analyze_diff(
    spec_diff: SpecDiff,
    test_files: list[Path],
    config: UpdaterConfig,
    test_repo: Path | None = None,
) -> Analysis:
    """Extract identifiers, rank the corpus and render the bounded context."""
    identifiers = extract_endpoints(spec_diff.changes)
    logger.info("Looking for tests that reference these API endpoints: %s", ", ".join(identifiers))

    ranking = rank_documents(identifiers, test_files, read_document)
    logger.info("Selected %d relevant test files for analysis", len(ranking.documents))

    context = render_context(
        ranking.documents,
        read_document,
        per_document_char_budget=config.per_document_char_budget,
        total_token_budget=config.total_token_budget,
        root=test_repo,
    )
    return Analysis(spec_diff=spec_diff, identifiers=identifiers, ranking=ranking, context=context)


def run_pipeline(
    repo: Path,
    test_repo: Path,
    config: UpdaterConfig,
    generator: SuggestionGenerator | None = None,
) -> PipelineReport:
    """Run detection, analysis and (when a generator is given) suggestion."""
    report = PipelineReport()

    report.spec_diffs = detect_spec_changes(repo, config)
    if not report.spec_diffs:
        return report

    test_files = discover_test_files(test_repo, config.test_code_paths)
    report.test_files_found = len(test_files)
    logger.info("Found %d test files in test repository", len(test_files))

    for spec_diff in report.spec_diffs:
        analysis = analyze_diff(spec_diff, test_files, config, test_repo)
        report.analyses.append(analysis)
        if generator is not None:
            logger.info("Generating test code for %s", spec_diff.file)
            report.suggestions.append(generator.suggest(spec_diff, analysis.context))

    return report
