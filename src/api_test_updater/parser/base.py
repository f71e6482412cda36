"""Normalized data models for parsed API specifications.

The parser converts both serializations (JSON and YAML) into these models
so the differ never touches raw documents.
"""

from pydantic import BaseModel, Field


class Parameter(BaseModel):
    """A single operation parameter, identified by (name, location)."""

    name: str
    location: str  # query / path / header / cookie / body
    required: bool = False

    @property
    def key(self) -> tuple[str, str]:
        return (self.name, self.location)


class Response(BaseModel):
    """A documented response for one status code."""

    description: str = ""


class Operation(BaseModel):
    """One HTTP method under a path."""

    parameters: list[Parameter] = Field(default_factory=list)
    responses: dict[str, Response] = Field(default_factory=dict)  # status code -> response
    operation_id: str | None = None


class NormalizedSpec(BaseModel):
    """path -> method -> operation, in document order."""

    paths: dict[str, dict[str, Operation]] = Field(default_factory=dict)
