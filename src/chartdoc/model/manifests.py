"""Models for the third-party manifest schemas found in tutorials.

These models only cover the parts of each schema that tutorials exercise.
Unknown keys are allowed so that newer upstream fields do not trip the checks.
"""

import re
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

CHART_NAME_RE = re.compile(r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?$")
SEMVER_RE = re.compile(
    r"^v?(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)?"
    r"(?:\+[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)?$"
)

Scalar = str | int | float


class _Manifest(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


# Helm chart metadata


class ChartDependency(_Manifest):
    """Entry of the Chart.yaml dependencies list."""

    name: str
    version: Scalar
    repository: str | None = Field(default=None)


class ChartMetadata(_Manifest):
    """Chart.yaml."""

    apiVersion: Literal["v1", "v2"]
    name: str
    version: str
    type: Literal["application", "library"] = Field(default="application")
    appVersion: Scalar | None = Field(default=None)
    description: str | None = Field(default=None)
    dependencies: list[ChartDependency] = Field(default_factory=list)

    @field_validator("version", mode="before")
    @classmethod
    def _coerce_version(cls, value: Any) -> Any:
        # YAML reads `version: 1.0` as a float
        if isinstance(value, (int, float)):
            return str(value)
        return value

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        if not CHART_NAME_RE.match(value):
            raise ValueError("chart name must be lowercase alphanumerics and '-'")
        return value

    @field_validator("version")
    @classmethod
    def _check_version(cls, value: str) -> str:
        if not SEMVER_RE.match(value):
            raise ValueError(f"'{value}' is not a SemVer 2 version")
        return value

    @model_validator(mode="after")
    def _check_type(self) -> "ChartMetadata":
        if self.apiVersion == "v1" and self.type == "library":
            raise ValueError("library charts require apiVersion v2")
        return self


# ArgoCD Application


class ObjectMeta(_Manifest):
    name: str = Field(min_length=1)
    namespace: str | None = Field(default=None)


class HelmSourceOptions(_Manifest):
    releaseName: str | None = Field(default=None)
    valueFiles: list[str] = Field(default_factory=list)
    values: str | None = Field(default=None)
    valuesObject: dict[str, Any] | None = Field(default=None)


class ApplicationSource(_Manifest):
    repoURL: str = Field(min_length=1)
    path: str | None = Field(default=None)
    chart: str | None = Field(default=None)
    targetRevision: Scalar | None = Field(default=None)
    helm: HelmSourceOptions | None = Field(default=None)

    @model_validator(mode="after")
    def _path_or_chart(self) -> "ApplicationSource":
        if (self.path is None) == (self.chart is None):
            raise ValueError("source needs exactly one of 'path' or 'chart'")
        return self


class ApplicationDestination(_Manifest):
    server: str | None = Field(default=None)
    name: str | None = Field(default=None)
    namespace: str | None = Field(default=None)

    @model_validator(mode="after")
    def _server_or_name(self) -> "ApplicationDestination":
        if (self.server is None) == (self.name is None):
            raise ValueError("destination needs exactly one of 'server' or 'name'")
        return self


class AutomatedSync(_Manifest):
    prune: bool = Field(default=False)
    selfHeal: bool = Field(default=False)
    allowEmpty: bool = Field(default=False)


class SyncPolicy(_Manifest):
    automated: AutomatedSync | None = Field(default=None)
    syncOptions: list[str] = Field(default_factory=list)

    @field_validator("syncOptions")
    @classmethod
    def _check_options(cls, value: list[str]) -> list[str]:
        for option in value:
            key, sep, setting = option.partition("=")
            if not sep or not key or not setting:
                raise ValueError(f"sync option '{option}' must look like Key=value")
        return value


class ApplicationSpec(_Manifest):
    project: str = Field(default="default")
    source: ApplicationSource | None = Field(default=None)
    sources: list[ApplicationSource] | None = Field(default=None)
    destination: ApplicationDestination
    syncPolicy: SyncPolicy | None = Field(default=None)

    @model_validator(mode="after")
    def _source_or_sources(self) -> "ApplicationSpec":
        if (self.source is None) == (self.sources is None):
            raise ValueError("spec needs exactly one of 'source' or 'sources'")
        if self.sources is not None and not self.sources:
            raise ValueError("'sources' must not be empty")
        return self

    def all_sources(self) -> list[ApplicationSource]:
        if self.source is not None:
            return [self.source]
        return list(self.sources or [])


class ArgoApplication(_Manifest):
    """argoproj.io/v1alpha1 Application."""

    apiVersion: Literal["argoproj.io/v1alpha1"]
    kind: Literal["Application"]
    metadata: ObjectMeta
    spec: ApplicationSpec


# GitHub Actions workflow


class WorkflowStep(_Manifest):
    name: str | None = Field(default=None)
    uses: str | None = Field(default=None)
    run: str | None = Field(default=None)
    with_: dict[str, Any] | None = Field(default=None, alias="with")
    env: dict[str, Any] | None = Field(default=None)

    @model_validator(mode="after")
    def _uses_or_run(self) -> "WorkflowStep":
        if (self.uses is None) == (self.run is None):
            raise ValueError("step needs exactly one of 'uses' or 'run'")
        return self


class WorkflowJob(_Manifest):
    runs_on: str | list[str] | dict[str, Any] | None = Field(default=None, alias="runs-on")
    uses: str | None = Field(default=None)
    needs: str | list[str] | None = Field(default=None)
    steps: list[WorkflowStep] = Field(default_factory=list)

    @model_validator(mode="after")
    def _runner_and_steps(self) -> "WorkflowJob":
        # Jobs calling a reusable workflow have neither a runner nor steps
        if self.uses is not None:
            return self
        if self.runs_on is None:
            raise ValueError("job needs 'runs-on'")
        if not self.steps:
            raise ValueError("job needs at least one step")
        return self


class GitHubWorkflow(_Manifest):
    """.github/workflows/*.yml."""

    name: str | None = Field(default=None)
    on: str | list[str] | dict[str, Any]
    jobs: dict[str, WorkflowJob]

    @model_validator(mode="before")
    @classmethod
    def _bare_on_key(cls, data: Any) -> Any:
        # YAML 1.1 reads the bare `on` key as boolean True
        if isinstance(data, dict) and True in data and "on" not in data:
            data = dict(data)
            data["on"] = data.pop(True)
        return data

    @field_validator("jobs")
    @classmethod
    def _has_jobs(cls, value: dict[str, WorkflowJob]) -> dict[str, WorkflowJob]:
        if not value:
            raise ValueError("workflow needs at least one job")
        return value

    def steps(self) -> list[WorkflowStep]:
        return [step for job in self.jobs.values() for step in job.steps]


# Generic Kubernetes object


class K8sObject(_Manifest):
    """Any Kubernetes object: only the identifying fields are checked."""

    apiVersion: str = Field(min_length=1)
    kind: str = Field(min_length=1)
    metadata: ObjectMeta
