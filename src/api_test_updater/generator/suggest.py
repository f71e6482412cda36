"""Suggestion generator — asks the LLM for test code covering detected API changes."""

import logging
import re
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

from api_test_updater.detector import SpecDiff
from api_test_updater.diff.models import ChangeRecord, dump_changes
from api_test_updater.llm import LlmClient
from api_test_updater.ranking.budget import RenderedContext

logger = logging.getLogger(__name__)

PROMPTS_DIR = Path(__file__).parent.parent / "prompts"

_CODE_BLOCK_RE = re.compile(
    r"```[\w+-]*\s*\n"
    r"(?://|#)\s*File:\s*([^\n]+?)\s*\n"
    r"(?://|#)\s*Action:\s*(create|update|modify)\s*\n"
    r"(?://|#)\s*Description:\s*([^\n]+?)\s*\n"
    r"(.*?)```",
    re.DOTALL,
)


class GeneratedTest(BaseModel):
    """One file-level change proposed by the model."""

    file_path: str
    action: Literal["create", "update", "modify"]
    description: str
    code: str


class Suggestion(BaseModel):
    file: str
    changes: list[ChangeRecord] = Field(default_factory=list)
    ai_output: str = ""
    test_files_analyzed: int = 0
    generated_tests: list[GeneratedTest] = Field(default_factory=list)
    error: str | None = None


class SuggestionGenerator:
    """Builds the generation prompt and parses the model's code blocks."""

    def __init__(self, model: str | None = None, temperature: float = 0.2, max_tokens: int = 4000):
        self.client = LlmClient(model=model, temperature=temperature, max_tokens=max_tokens)

    def suggest(self, spec_diff: SpecDiff, context: RenderedContext) -> Suggestion:
        system_prompt = (PROMPTS_DIR / "suggest.md").read_text(encoding="utf-8")
        user_prompt = build_user_prompt(spec_diff, context)

        try:
            output = self.client.call(system=system_prompt, user=user_prompt)
        except Exception as e:  # litellm raises provider-specific exception types
            logger.error("Error generating test code for %s: %s", spec_diff.file, e)
            return Suggestion(
                file=spec_diff.file,
                changes=spec_diff.changes,
                ai_output=f"Error generating test code: {e}",
                error=str(e),
            )

        return Suggestion(
            file=spec_diff.file,
            changes=spec_diff.changes,
            ai_output=output,
            test_files_analyzed=len(context.contexts),
            generated_tests=parse_generated_tests(output),
        )


def build_user_prompt(spec_diff: SpecDiff, context: RenderedContext) -> str:
    return (
        f"## API Changes Detected in {spec_diff.file}:\n\n"
        f"```json\n{dump_changes(spec_diff.changes)}\n```\n\n"
        f"## Existing Test Files Structure:\n\n"
        f"{context.as_prompt_text()}"
    )


def parse_generated_tests(output: str) -> list[GeneratedTest]:
    """Extract File/Action/Description code blocks from a model response."""
    tests = []
    for match in _CODE_BLOCK_RE.finditer(output):
        file_path, action, description, code = match.groups()
        tests.append(
            GeneratedTest(
                file_path=file_path.strip().lstrip("/"),
                action=action,
                description=description.strip(),
                code=code.strip(),
            )
        )
    return tests


def apply_suggestion(suggestion: Suggestion, test_repo: Path) -> list[Path]:
    """Write generated test files into test_repo. Returns the written paths."""
    root = test_repo.resolve()
    written = []
    for test in suggestion.generated_tests:
        target = (root / test.file_path).resolve()
        if not target.is_relative_to(root):
            logger.error("Refusing to write %s outside %s", test.file_path, root)
            continue
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(test.code + "\n", encoding="utf-8")
        logger.info("%s %s: %s", test.action, test.file_path, test.description)
        written.append(target)
    return written
