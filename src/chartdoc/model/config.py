"""Lint configuration model."""

from pydantic import BaseModel, Field, field_validator

from chartdoc.model.snippet import Severity, SnippetKind


class LintConfig(BaseModel):
    """Configuration for a lint run, stored in .chartdoc/config.json."""

    fail_on: Severity = Field(default=Severity.ERROR)

    # Repeated sections
    check_duplicates: bool = Field(default=True)
    duplicate_min_chars: int = Field(default=40, ge=1)

    # Filtering
    ignore: list[str] = Field(default_factory=list)
    disabled_kinds: list[SnippetKind] = Field(default_factory=list)

    # Commands accepted without subcommand checks
    extra_tools: list[str] = Field(default_factory=list)

    # Values files seeding the .Values reference check
    values_files: list[str] = Field(default_factory=list)

    @field_validator("ignore")
    @classmethod
    def _upper_codes(cls, value: list[str]) -> list[str]:
        return [code.strip().upper() for code in value if code.strip()]
