"""Render ranked test files into a token-bounded prompt section.

Truncation is line based: declaration-like lines (imports, requires,
top-level constants) are kept first, followed by as many body lines as the
per-document budget allows. Token counts are a fixed chars/3.5 estimate,
not a real tokenizer.
"""

import logging
import math
import os
from pathlib import Path
from typing import Callable

from pydantic import BaseModel, Field

from api_test_updater.corpus import read_document as default_reader
from api_test_updater.errors import UnreadableDocument
from api_test_updater.ranking.ranker import ScoredDocument

logger = logging.getLogger(__name__)

CHARS_PER_TOKEN = 3.5
MAX_DECLARATION_LINES = 10
CHARS_PER_LINE = 50
TRUNCATION_MARKER = "... (truncated)"
DECLARATION_PREFIXES = ("import ", "from ", "const ", "require(", "using ", "package ")

NO_CONTEXT_NOTICE = (
    "No test files found in the test repository. "
    "Please create new test files following standard testing patterns."
)


class BudgetedContext(BaseModel):
    identity: Path
    framework_hint: str
    rendered_text: str
    estimated_tokens: int
    truncated: bool = False


class RenderedContext(BaseModel):
    contexts: list[BudgetedContext] = Field(default_factory=list)
    skipped_for_budget: int = 0
    unreadable: list[Path] = Field(default_factory=list)
    total_tokens: int = 0

    def as_prompt_text(self) -> str:
        if not self.contexts:
            return NO_CONTEXT_NOTICE
        return "\n".join(c.rendered_text for c in self.contexts)


def estimate_tokens(text: str) -> int:
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def detect_test_framework(content: str) -> str:
    """Best-effort guess of the testing framework used by a file."""
    if "describe(" in content and "it(" in content:
        return "Jest/Mocha"
    if "test(" in content:
        return "Jest"
    if "@Test" in content:
        return "JUnit"
    if "def test_" in content:
        return "pytest"
    if "unittest.TestCase" in content:
        return "unittest"
    if "testing.T" in content:
        return "Go testing"
    return "Unknown"


def is_declaration(line: str) -> bool:
    return line.strip().startswith(DECLARATION_PREFIXES)


def truncate_content(content: str, char_budget: int) -> tuple[str, bool]:
    """Shrink content to roughly char_budget, keeping declarations first."""
    if len(content) <= char_budget:
        return content, False

    lines = content.split("\n")
    declarations = [line for line in lines if is_declaration(line)][:MAX_DECLARATION_LINES]
    body = [line for line in lines if not is_declaration(line)]

    declaration_text = "\n".join(declarations)
    max_body_lines = max(0, (char_budget - len(declaration_text)) // CHARS_PER_LINE)
    body_text = "\n".join(body[:max_body_lines])

    return f"{declaration_text}\n\n{body_text}\n\n{TRUNCATION_MARKER}", True


def render_context(
    documents: list[ScoredDocument],
    read_document: Callable[[Path], str] = default_reader,
    per_document_char_budget: int = 1000,
    total_token_budget: int = 8000,
    root: Path | None = None,
) -> RenderedContext:
    """Render ranked documents until the total token estimate would exceed the budget.

    Documents are re-sorted smallest first; the sort is stable so rank order
    breaks ties between equally sized files.
    """
    result = RenderedContext()

    loaded: list[tuple[ScoredDocument, str]] = []
    for doc in documents:
        try:
            loaded.append((doc, read_document(doc.identity)))
        except (UnreadableDocument, OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read test file %s: %s", doc.identity, e)
            result.unreadable.append(doc.identity)
    loaded.sort(key=lambda item: len(item[1]))

    for index, (doc, content) in enumerate(loaded):
        text, truncated = truncate_content(content, per_document_char_budget)
        tokens = estimate_tokens(text)
        if result.total_tokens + tokens > total_token_budget:
            result.skipped_for_budget = len(loaded) - index
            logger.info("Token limit reached, skipping remaining %d test files", result.skipped_for_budget)
            break

        result.total_tokens += tokens
        framework = detect_test_framework(content)
        result.contexts.append(
            BudgetedContext(
                identity=doc.identity,
                framework_hint=framework,
                rendered_text=_render_block(doc.identity, text, framework, root),
                estimated_tokens=tokens,
                truncated=truncated,
            )
        )

    logger.info("Analyzed %d test files (~%d tokens)", len(result.contexts), result.total_tokens)
    return result


def _render_block(path: Path, text: str, framework: str, root: Path | None) -> str:
    relative = os.path.relpath(path, root) if root is not None else str(path)
    return f"\n=== {path.name} ===\nPath: {relative}\nFramework: {framework}\n{text}\n"
