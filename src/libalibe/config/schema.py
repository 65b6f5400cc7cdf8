"""Configuration schema."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LibalibeConfig(BaseModel):
    """Merged libalibe configuration.

    Attributes:
        items: Mapping of symbolic package name to package directory.
        include: Library names that may be linked/installed into projects.
            Empty means every item.
        exclude: Library names removed from ``include``.
        branch: Branch releases are published from.
        remote: Git remote releases are pushed to.
        commit_message: Default commit message for release flows.
        package_manager: Package manager binary.
    """

    model_config = ConfigDict(extra="forbid")

    items: dict[str, str] = Field(default_factory=dict)
    include: list[str] = Field(default_factory=list)
    exclude: list[str] = Field(default_factory=list)
    branch: str = "master"
    remote: str = "origin"
    commit_message: str = "Small fix"
    package_manager: str = "pnpm"

    @field_validator("branch", "remote", "commit_message", "package_manager")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value

    @property
    def library_names(self) -> list[str]:
        """Names eligible for linking, in include order."""
        include = self.include or list(self.items)
        return [name for name in include if name not in self.exclude]

    def get_item_path(self, name: str) -> str | None:
        """Get the configured directory of an item."""
        return self.items.get(name)
