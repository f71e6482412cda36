"""OpenAPI / Swagger document parser.

Accepts JSON or YAML text and normalizes it into a NormalizedSpec.
"""

import json
from pathlib import Path

import yaml
from pydantic import ValidationError

from api_test_updater.errors import UnparsableSpec
from api_test_updater.parser.base import NormalizedSpec, Operation, Parameter, Response

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")


def load_spec(file_path: Path) -> NormalizedSpec:
    """Read and parse a spec file."""
    return parse_spec(file_path.read_text(encoding="utf-8"))


def parse_spec(raw: str) -> NormalizedSpec:
    """Parse spec text, trying JSON first and YAML second."""
    doc = _decode(raw)
    try:
        return _normalize(doc)
    except ValidationError as e:
        raise UnparsableSpec(f"malformed spec content: {e}", f"malformed spec content: {e}") from e


def _decode(raw: str) -> dict:
    try:
        doc = json.loads(raw)
        if isinstance(doc, dict):
            return doc
        json_error = f"expected a mapping, got {type(doc).__name__}"
    except (json.JSONDecodeError, ValueError) as e:
        json_error = str(e)

    try:
        doc = yaml.safe_load(raw)
        if isinstance(doc, dict):
            return doc
        yaml_error = f"expected a mapping, got {type(doc).__name__}"
    except yaml.YAMLError as e:
        yaml_error = str(e)

    raise UnparsableSpec(json_error, yaml_error)


def _normalize(doc: dict) -> NormalizedSpec:
    paths: dict[str, dict[str, Operation]] = {}
    raw_paths = doc.get("paths")
    if not isinstance(raw_paths, dict):
        return NormalizedSpec(paths=paths)

    for path, item in raw_paths.items():
        if not isinstance(item, dict):
            continue
        methods = {}
        for method, operation in item.items():
            # Method keys are matched case-insensitively but stored as written
            if str(method).lower() not in HTTP_METHODS or not isinstance(operation, dict):
                continue
            methods[str(method)] = _parse_operation(operation)
        paths[str(path)] = methods
    return NormalizedSpec(paths=paths)


def _parse_operation(operation: dict) -> Operation:
    operation_id = operation.get("operationId")
    return Operation(
        parameters=_parse_parameters(operation.get("parameters")),
        responses=_parse_responses(operation.get("responses")),
        operation_id=str(operation_id) if operation_id is not None else None,
    )


def _parse_parameters(params) -> list[Parameter]:
    if not isinstance(params, list):
        return []
    result = []
    for p in params:
        if not isinstance(p, dict):
            continue
        if "$ref" in p:
            result.append(Parameter(name=str(p["$ref"]), location="ref"))
            continue
        required = p.get("required")
        result.append(
            Parameter(
                name=str(p.get("name", "")),
                location=str(p.get("in", "query")),
                # Only a real boolean counts; "false" strings fall back to the default
                required=required if isinstance(required, bool) else False,
            )
        )
    return result


def _parse_responses(responses) -> dict[str, Response]:
    if not isinstance(responses, dict):
        return {}
    result = {}
    for status_code, resp in responses.items():
        description = resp.get("description") if isinstance(resp, dict) else None
        # YAML reads 200 as an int; JSON keys are always strings
        result[str(status_code)] = Response(description=str(description) if description is not None else "")
    return result
