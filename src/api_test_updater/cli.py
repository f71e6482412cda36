"""CLI entry point for api-test-updater."""

import logging
from pathlib import Path

import click

from api_test_updater.config import load_config, validate_config
from api_test_updater.corpus import discover_test_files
from api_test_updater.detector import SpecDiff, detect_spec_changes
from api_test_updater.diff.differ import diff_documents
from api_test_updater.diff.models import dump_changes
from api_test_updater.errors import ConfigError
from api_test_updater.generator.suggest import SuggestionGenerator, apply_suggestion
from api_test_updater.pipeline import analyze_diff, run_pipeline

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def _load_config(config_path: Path | None):
    try:
        config = load_config(config_path)
        validate_config(config)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e
    return config


def _describe(change) -> str:
    """One-line human summary of a change record."""
    method = getattr(change, "method", None)
    target = f"{method.upper()} {change.path}" if method else change.path
    line = f"{change.type}: {target}"
    details = getattr(change, "details", None)
    if details:
        line += f" ({len(details)} details)"
    return line


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(verbose: bool):
    """API Test Updater — keep a test suite in step with OpenAPI changes."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format=LOG_FORMAT)


@main.command()
@click.argument("old_spec", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("new_spec", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Print changes as JSON.")
def diff(old_spec: Path, new_spec: Path, as_json: bool):
    """Show the API changes between two spec files."""
    changes = diff_documents(old_spec.read_text(encoding="utf-8"), new_spec.read_text(encoding="utf-8"))

    if as_json:
        click.echo(dump_changes(changes))
        return

    if not changes:
        click.echo("No API changes detected.")
        return
    click.echo(f"Found {len(changes)} changes:")
    for change in changes:
        click.echo(f"  {_describe(change)}")


@main.command()
@click.argument("old_spec", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("new_spec", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("test_repo", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--config", "config_path", default=None, type=click.Path(path_type=Path), help="Config file (JSON or YAML).")
def rank(old_spec: Path, new_spec: Path, test_repo: Path, config_path: Path | None):
    """Rank the test files in TEST_REPO by relevance to the spec changes."""
    config = _load_config(config_path)
    changes = diff_documents(old_spec.read_text(encoding="utf-8"), new_spec.read_text(encoding="utf-8"))
    if not changes:
        click.echo("No API changes detected.")
        return

    test_files = discover_test_files(test_repo, config.test_code_paths)
    click.echo(f"Found {len(test_files)} test files.")

    analysis = analyze_diff(SpecDiff(file=new_spec.name, changes=changes), test_files, config, test_repo)
    click.echo(f"Endpoints: {', '.join(analysis.identifiers) or '(none)'}")
    click.echo(f"Ranked {len(analysis.ranking.documents)} of {analysis.ranking.corpus_size} (budget {analysis.ranking.budget}):")
    for doc in analysis.ranking.documents:
        click.echo(f"  [{doc.score}] {doc.identity.relative_to(test_repo)}")
    click.echo(f"Context: {len(analysis.context.contexts)} files, ~{analysis.context.total_tokens} tokens")


@main.command()
@click.option("--repo", default=".", type=click.Path(exists=True, file_okay=False, path_type=Path), help="Repository containing the API specs.")
@click.option("--config", "config_path", default=None, type=click.Path(path_type=Path), help="Config file (JSON or YAML).")
def detect(repo: Path, config_path: Path | None):
    """List API spec changes introduced by the last commit."""
    config = _load_config(config_path)
    diffs = detect_spec_changes(repo, config)
    if not diffs:
        click.echo("No relevant API spec changes detected.")
        return
    for spec_diff in diffs:
        click.echo(f"{spec_diff.file}: {len(spec_diff.changes)} changes")
        for change in spec_diff.changes:
            click.echo(f"  {_describe(change)}")


@main.command()
@click.option("--test-repo", required=True, type=click.Path(exists=True, file_okay=False, path_type=Path), help="Local checkout of the test repository.")
@click.option("--repo", default=".", type=click.Path(exists=True, file_okay=False, path_type=Path), help="Repository containing the API specs.")
@click.option("--config", "config_path", default=None, type=click.Path(path_type=Path), help="Config file (JSON or YAML).")
@click.option("--model", default=None, help="LLM model to use.")
@click.option("--apply", "apply_changes", is_flag=True, help="Write generated tests into the test repository.")
@click.option("--report", "report_path", default=None, type=click.Path(dir_okay=False, path_type=Path), help="Write a JSON report to this file.")
def run(test_repo: Path, repo: Path, config_path: Path | None, model: str | None, apply_changes: bool, report_path: Path | None):
    """Full pipeline: detect changes -> select tests -> generate test code."""
    config = _load_config(config_path)
    if model:
        config.model = model

    generator = SuggestionGenerator(model=config.model, temperature=config.temperature, max_tokens=config.max_tokens)
    report = run_pipeline(repo, test_repo, config, generator)

    if not report.spec_diffs:
        click.echo("No API changes detected in the specifications.")
        return

    click.echo(f"Found {len(report.spec_diffs)} API specification changes, {report.test_files_found} test files.")
    for suggestion in report.suggestions:
        status = f"error: {suggestion.error}" if suggestion.error else f"{len(suggestion.generated_tests)} generated tests"
        click.echo(f"  {suggestion.file}: {status}")
        if apply_changes:
            for path in apply_suggestion(suggestion, test_repo):
                click.echo(f"    Wrote {path}")

    if report_path:
        report_path.parent.mkdir(parents=True, exist_ok=True)
        report_path.write_text(report.model_dump_json(indent=2, by_alias=True), encoding="utf-8")
        click.echo(f"Report saved to {report_path}")
