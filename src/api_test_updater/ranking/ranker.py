"""Score test files by how many changed endpoints they reference."""

import logging
import re
from pathlib import Path
from typing import Callable

from pydantic import BaseModel, Field, computed_field

from api_test_updater.corpus import read_document as default_reader
from api_test_updater.errors import UnreadableDocument

logger = logging.getLogger(__name__)

GENERIC_NAME_MARKERS = ("api", "endpoint", "integration", "service")

MIN_BUDGET = 2
MAX_BUDGET = 5
BUDGET_NUMERATOR = 15000
FALLBACK_COUNT = 2
NO_IDENTIFIER_COUNT = 3

_PARAM_RE = re.compile(r"\{[^}]+\}")


class ScoredDocument(BaseModel):
    """A corpus document with the identifiers it references."""

    identity: Path
    matched: list[str] = Field(default_factory=list)

    @computed_field
    @property
    def score(self) -> int:
        return len(self.matched)


class RankingResult(BaseModel):
    documents: list[ScoredDocument] = Field(default_factory=list)
    unreadable: list[Path] = Field(default_factory=list)
    corpus_size: int = 0
    budget: int = MIN_BUDGET
    fallback: bool = False


def ranking_budget(corpus_size: int) -> int:
    """Maximum number of documents returned for a corpus of this size."""
    return min(MAX_BUDGET, max(MIN_BUDGET, BUDGET_NUMERATOR // max(corpus_size, 1)))


def search_patterns(identifier: str) -> list[str]:
    """All lowercase strings whose presence counts as a reference to identifier."""
    segments = [s for s in identifier.split("/") if s]
    patterns = [
        identifier,
        re.sub(r"^/", "", identifier),
        _PARAM_RE.sub("", identifier),
        "/".join(segments),
    ]
    patterns.extend(s for s in segments if not s.startswith("{") and len(s) > 2)
    return [p.lower() for p in patterns if p]


def rank_documents(
    identifiers: list[str],
    corpus: list[Path],
    read_document: Callable[[Path], str] = default_reader,
) -> RankingResult:
    """Rank corpus documents by the number of distinct identifiers they mention."""
    budget = ranking_budget(len(corpus))
    result = RankingResult(corpus_size=len(corpus), budget=budget)

    if not corpus:
        logger.info("No candidate documents to rank")
        return result

    if not identifiers:
        logger.warning("No specific API endpoints found in changes, using fallback selection")
        count = min(NO_IDENTIFIER_COUNT, len(corpus), budget)
        result.documents = [ScoredDocument(identity=doc) for doc in corpus[:count]]
        result.fallback = True
        return result

    patterns = {identifier: search_patterns(identifier) for identifier in identifiers}
    readable: list[Path] = []
    scored: list[ScoredDocument] = []

    for doc in corpus:
        try:
            content = read_document(doc).lower()
        except (UnreadableDocument, OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read test file %s: %s", doc, e)
            result.unreadable.append(doc)
            continue
        readable.append(doc)

        matched = [
            identifier
            for identifier, family in patterns.items()
            if any(pattern in content for pattern in family)
        ]
        if matched:
            scored.append(ScoredDocument(identity=doc, matched=matched))

    # sorted() is stable, so equal scores keep corpus order
    ranked = sorted(scored, key=lambda d: d.score, reverse=True)

    for doc in ranked[:MAX_BUDGET]:
        logger.debug("%s references endpoints: %s", doc.identity.name, ", ".join(doc.matched))

    if ranked:
        result.documents = ranked[:budget]
        return result

    logger.info("No test files reference the changed endpoints, selecting files for general context")
    result.fallback = True
    named = [doc for doc in readable if _has_generic_name(doc)]
    chosen = named or readable
    result.documents = [ScoredDocument(identity=doc) for doc in chosen[: min(FALLBACK_COUNT, budget)]]
    return result


def _has_generic_name(doc: Path) -> bool:
    name = doc.name.lower()
    return any(marker in name for marker in GENERIC_NAME_MARKERS)
