"""Structural diff between two normalized API specs."""

import logging

from api_test_updater.diff.models import (
    NewCode,
    NewEndpoint,
    NewMethod,
    NewParameter,
    ParameterChange,
    RemovedCode,
    RemovedEndpoint,
    RemovedMethod,
    RemovedParameter,
    RequirementChanged,
    ResponseChange,
)
from api_test_updater.errors import UnparsableSpec
from api_test_updater.parser.base import NormalizedSpec, Operation, Parameter, Response
from api_test_updater.parser.openapi import parse_spec

logger = logging.getLogger(__name__)


def diff_documents(old_raw: str, new_raw: str) -> list:
    """Parse and diff two raw spec documents.

    Never raises: an unparsable document yields an empty change list.
    """
    try:
        old = parse_spec(old_raw)
        new = parse_spec(new_raw)
    except UnparsableSpec as e:
        logger.warning("Error comparing OpenAPI specs: %s", e)
        return []
    return diff_specs(old, new)


def diff_specs(old: NormalizedSpec, new: NormalizedSpec) -> list:
    """Compute change records from old to new.

    Records from the pass over ``new`` come first, in ``new``'s key order,
    followed by removals in ``old``'s key order.
    """
    changes: list = []

    for path, new_methods in new.paths.items():
        old_methods = old.paths.get(path)
        if old_methods is None:
            changes.append(NewEndpoint(path=path))
            continue
        for method, new_op in new_methods.items():
            old_op = old_methods.get(method)
            if old_op is None:
                changes.append(NewMethod(path=path, method=method))
                continue
            changes.extend(_compare_operations(path, method, old_op, new_op))

    for path, old_methods in old.paths.items():
        new_methods = new.paths.get(path)
        if new_methods is None:
            changes.append(RemovedEndpoint(path=path))
            continue
        for method in old_methods:
            if method not in new_methods:
                changes.append(RemovedMethod(path=path, method=method))

    return changes


def _compare_operations(path: str, method: str, old_op: Operation, new_op: Operation) -> list:
    records: list = []
    param_changes = compare_parameters(old_op.parameters, new_op.parameters)
    if param_changes:
        records.append(ParameterChange(path=path, method=method, details=param_changes))
    response_changes = compare_responses(old_op.responses, new_op.responses)
    if response_changes:
        records.append(ResponseChange(path=path, method=method, details=response_changes))
    return records


def compare_parameters(old_params: list[Parameter], new_params: list[Parameter]) -> list:
    """Diff two parameter lists keyed by (name, location)."""
    old_by_key = _index(old_params)
    new_by_key = _index(new_params)
    changes: list = []

    for key, new_param in new_by_key.items():
        old_param = old_by_key.get(key)
        if old_param is None:
            changes.append(NewParameter(parameter=new_param.name, location=new_param.location))
        elif old_param.required != new_param.required:
            changes.append(
                RequirementChanged(
                    parameter=new_param.name,
                    location=new_param.location,
                    from_=old_param.required,
                    to=new_param.required,
                )
            )

    for key, old_param in old_by_key.items():
        if key not in new_by_key:
            changes.append(RemovedParameter(parameter=old_param.name, location=old_param.location))

    return changes


def compare_responses(old_responses: dict[str, Response], new_responses: dict[str, Response]) -> list:
    """Diff two response maps by exact status code string."""
    changes: list = [NewCode(code=code) for code in new_responses if code not in old_responses]
    changes.extend(RemovedCode(code=code) for code in old_responses if code not in new_responses)
    return changes


def _index(params: list[Parameter]) -> dict[tuple[str, str], Parameter]:
    # First occurrence wins for duplicate (name, location) pairs
    indexed: dict[tuple[str, str], Parameter] = {}
    for p in params:
        indexed.setdefault(p.key, p)
    return indexed
