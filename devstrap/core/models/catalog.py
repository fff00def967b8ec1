"""
Catalog models — the declarative table of everything devstrap provisions.

The catalog is plain data: package groups, shell plugins, git defaults
and macOS preference flags. It is loaded from YAML by
``devstrap.core.config.loader`` and never mutated during a run.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator


class Descriptor(BaseModel):
    """A named package the catalog ensures is present."""

    name: str
    comment: str = ""

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("descriptor name must not be empty")
        return v


class PackageGroup(BaseModel):
    """A list of descriptors owned by one package manager.

    ``tolerate_failures`` turns install failures in this group into
    warnings instead of aborting the run.
    """

    id: str
    title: str
    manager: str                       # registry name, e.g. 'brew', 'brew-cask', 'pip'
    tolerate_failures: bool = False
    failure_hint: str = ""
    packages: list[Descriptor] = Field(default_factory=list)

    @field_validator("packages", mode="before")
    @classmethod
    def _coerce_packages(cls, v: object) -> object:
        # Accept bare strings as well as {name, comment} mappings
        if isinstance(v, list):
            return [{"name": item} if isinstance(item, str) else item for item in v]
        return v

    @property
    def names(self) -> list[str]:
        return [d.name for d in self.packages]


class ShellPlugin(BaseModel):
    """An Oh My Zsh plugin cloned from a git repository."""

    name: str
    url: str


class DefaultsSetting(BaseModel):
    """A single ``defaults write`` preference."""

    domain: str
    key: str
    type: Literal["bool", "int", "float", "string"] = "bool"
    value: bool | int | float | str

    def value_arg(self) -> str:
        """Render the value the way the ``defaults`` CLI expects it."""
        if self.type == "bool":
            return "true" if self.value else "false"
        return str(self.value)


class Summary(BaseModel):
    """Text printed once the run completes."""

    installed: list[str] = Field(default_factory=list)
    next_steps: list[str] = Field(default_factory=list)
    note: str = ""


class Catalog(BaseModel):
    """Everything a provisioning run installs and configures."""

    platform: str = "darwin"

    cli_tools: PackageGroup = Field(
        default_factory=lambda: PackageGroup(id="cli-tools", title="essential CLI tools", manager="brew")
    )
    languages: PackageGroup = Field(
        default_factory=lambda: PackageGroup(
            id="languages", title="programming languages and tools", manager="brew"
        )
    )
    applications: PackageGroup = Field(
        default_factory=lambda: PackageGroup(
            id="applications",
            title="development applications",
            manager="brew-cask",
            tolerate_failures=True,
        )
    )
    python_packages: PackageGroup = Field(
        default_factory=lambda: PackageGroup(
            id="python-packages", title="common Python packages", manager="pip"
        )
    )

    shell_plugins: list[ShellPlugin] = Field(default_factory=list)
    git_defaults: dict[str, str] = Field(default_factory=dict)

    ssh_key_path: str = "~/.ssh/id_ed25519"
    ssh_key_type: str = "ed25519"

    macos_defaults: list[DefaultsSetting] = Field(default_factory=list)
    screenshots_dir: str | None = None
    restart_apps: list[str] = Field(default_factory=list)

    summary: Summary = Field(default_factory=Summary)

    @property
    def package_groups(self) -> list[PackageGroup]:
        """All package groups, in provisioning order."""
        return [self.cli_tools, self.languages, self.applications, self.python_packages]
