"""
Descriptor schema — Pydantic types for the raw project descriptor.

The descriptor is usually a ``package.json`` with an extra
``buildMetadata`` section, so unknown top-level and metadata keys are
tolerated. The nested ``aws`` and ``container`` sections are strict:
unknown properties and keys outside the identifier pattern are rejected.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, StringConstraints

IDENTIFIER_PATTERN = r"^[a-zA-Z0-9-_]+$"

Identifier = Annotated[str, StringConstraints(pattern=IDENTIFIER_PATTERN)]
NonEmptyStr = Annotated[str, StringConstraints(min_length=1)]

# A `/`-separated relative directory; segments never contain `\` or `:`
StaticDir = Annotated[str, StringConstraints(pattern=r"^[^\\:]+$")]


class ProjectType(str, Enum):
    """Supported project types — each selects a different task set."""

    LIB = "lib"
    CLI = "cli"
    API = "api"
    AWS_MICROSERVICE = "aws-microservice"
    CONTAINER = "container"
    UI = "ui"


class Language(str, Enum):
    """Supported project languages."""

    JS = "js"
    TS = "ts"


class BuildSecret(BaseModel):
    """A secret mounted into a container build (``--secret``)."""

    model_config = ConfigDict(extra="forbid")

    type: NonEmptyStr
    src: NonEmptyStr


class ContainerTarget(BaseModel):
    """One container image build.

    ``build_file`` defaults to ``Dockerfile``; args and secrets default
    to empty mappings.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    repo: NonEmptyStr
    build_file: NonEmptyStr = Field(default="Dockerfile", alias="buildFile")
    build_args: dict[Identifier, NonEmptyStr] = Field(default_factory=dict, alias="buildArgs")
    build_secrets: dict[Identifier, BuildSecret] = Field(
        default_factory=dict, alias="buildSecrets"
    )


class AwsConfig(BaseModel):
    """AWS deployment configuration — CDK stacks keyed by target."""

    model_config = ConfigDict(extra="forbid")

    stacks: dict[Identifier, NonEmptyStr]


class BuildMetadata(BaseModel):
    """The ``buildMetadata`` section of a descriptor."""

    model_config = ConfigDict(populate_by_name=True)

    type: ProjectType
    language: Language
    required_env: list[str] = Field(default_factory=list, alias="requiredEnv")
    static_file_patterns: list[str] = Field(default_factory=list, alias="staticFilePatterns")
    static_dirs: list[StaticDir] = Field(default_factory=list, alias="staticDirs")
    aws: AwsConfig | None = None
    container: dict[Identifier, ContainerTarget] | None = None


class ProjectDescriptor(BaseModel):
    """Root descriptor document."""

    model_config = ConfigDict(populate_by_name=True)

    name: NonEmptyStr
    description: str = ""
    version: NonEmptyStr
    build_metadata: BuildMetadata = Field(alias="buildMetadata")
