"""Typed change records produced by the spec differ.

Each record kind is its own model with a literal ``type`` tag, so the
unions below are closed and serialize to the JSON shape embedded in
generation prompts.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class NewParameter(BaseModel):
    type: Literal["new_parameter"] = "new_parameter"
    parameter: str
    location: str


class RemovedParameter(BaseModel):
    type: Literal["removed_parameter"] = "removed_parameter"
    parameter: str
    location: str


class RequirementChanged(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: Literal["parameter_requirement_changed"] = "parameter_requirement_changed"
    parameter: str
    location: str
    from_: bool = Field(alias="from")
    to: bool


ParameterDelta = Annotated[
    Union[NewParameter, RemovedParameter, RequirementChanged],
    Field(discriminator="type"),
]


class NewCode(BaseModel):
    type: Literal["new_response_code"] = "new_response_code"
    code: str


class RemovedCode(BaseModel):
    type: Literal["removed_response_code"] = "removed_response_code"
    code: str


ResponseDelta = Annotated[Union[NewCode, RemovedCode], Field(discriminator="type")]


class NewEndpoint(BaseModel):
    type: Literal["new_endpoint"] = "new_endpoint"
    path: str


class RemovedEndpoint(BaseModel):
    type: Literal["removed_endpoint"] = "removed_endpoint"
    path: str


class NewMethod(BaseModel):
    type: Literal["new_method"] = "new_method"
    path: str
    method: str


class RemovedMethod(BaseModel):
    type: Literal["removed_method"] = "removed_method"
    path: str
    method: str


class ParameterChange(BaseModel):
    type: Literal["parameter_changes"] = "parameter_changes"
    path: str
    method: str
    details: list[ParameterDelta]


class ResponseChange(BaseModel):
    type: Literal["response_changes"] = "response_changes"
    path: str
    method: str
    details: list[ResponseDelta]


ChangeRecord = Annotated[
    Union[NewEndpoint, RemovedEndpoint, NewMethod, RemovedMethod, ParameterChange, ResponseChange],
    Field(discriminator="type"),
]

_changes_adapter = TypeAdapter(list[ChangeRecord])


def dump_changes(changes: list, indent: int | None = 2) -> str:
    """Serialize change records to JSON using wire field names."""
    return _changes_adapter.dump_json(changes, indent=indent, by_alias=True).decode("utf-8")
