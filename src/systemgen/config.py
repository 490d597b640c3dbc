"""Configuration objects shared by the scaffolder pipeline and CLI."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from pydantic import BaseModel, ConfigDict, Field

from .errors import ValidationError
from .naming import (
    safe_property_name,
    transform_class_name,
    transform_constant_name,
    transform_package_name,
)

__all__ = ["NamingProfile", "ScaffoldSettings", "DEFAULT_ANSWERS"]


DEFAULT_ANSWERS: Mapping[str, object] = {
    "package_name": "my-system",
    "title": "My System",
    "class_name": "MySystem",
    "constant_name": "MY_SYSTEM",
    "data_model": False,
}


@dataclass(frozen=True, slots=True)
class NamingProfile:
    """Identifiers describing the system being generated.

    Attributes
    ----------
    package_name:
        Lower-case, hyphenated name used for the build directory, file names
        and every lower-case occurrence of the template token.
    title:
        The human readable title written to the host manifest. Preserved
        verbatim apart from surrounding whitespace.
    class_name:
        Alphanumeric identifier replacing the capitalised token.
    constant_name:
        Upper-case alphanumeric identifier replacing the all-caps token.
    data_model:
        Whether the structured-schema data model replaces the legacy
        ``template.json`` variant.
    """

    package_name: str
    title: str
    class_name: str
    constant_name: str
    data_model: bool = False

    @property
    def property_name(self) -> str:
        """Package name usable where identifiers cannot contain hyphens."""

        return safe_property_name(self.package_name)

    @classmethod
    def from_answers(
        cls,
        package_name: str | None,
        title: str | None,
        class_name: str | None,
        constant_name: str | None,
        *,
        data_model: bool = False,
    ) -> "NamingProfile":
        """Validate raw answers and derive a :class:`NamingProfile` from them.

        Raises
        ------
        ValidationError
            If any text answer is missing or blank after trimming, or if an
            identifier would be empty once invalid characters are removed.
        """

        answers = {
            "package_name": package_name,
            "title": title,
            "class_name": class_name,
            "constant_name": constant_name,
        }
        cleaned: dict[str, str] = {}
        for field_name, value in answers.items():
            stripped = (value or "").strip()
            if not stripped:
                raise ValidationError(field_name)
            cleaned[field_name] = stripped

        package = transform_package_name(cleaned["package_name"])
        profile = cls(
            package_name=package,
            title=cleaned["title"],
            class_name=transform_class_name(cleaned["class_name"], package_name=package),
            constant_name=transform_constant_name(cleaned["constant_name"], package_name=package),
            data_model=bool(data_model),
        )

        for field_name in ("class_name", "constant_name"):
            if not getattr(profile, field_name):
                raise ValidationError(
                    field_name,
                    f"{field_name} must contain at least one letter or digit.",
                )
        if not profile.property_name:
            raise ValidationError(
                "package_name", "package_name must contain at least one letter or digit."
            )

        return profile

    def context(self) -> Mapping[str, str]:
        """Return the derived identifiers as a plain mapping."""

        return {
            "package_name": self.package_name,
            "title": self.title,
            "class_name": self.class_name,
            "constant_name": self.constant_name,
            "property_name": self.property_name,
        }


class ScaffoldSettings(BaseModel):
    """Locations and template constants used during a scaffolding run."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    template_root: Path = Field(default_factory=Path.cwd, description="Checked-out copy of the system template.")
    build_root: Path | None = Field(None, description="Directory receiving build output. Defaults to <template_root>/build.")
    token: str = Field("boilerplate", min_length=1, description="Lower-case placeholder name used throughout the template.")
    datamodels_dir: str = Field("src/datamodels", description="Template-relative directory holding the alternate data model.")
    ignore: tuple[str, ...] = Field(("node_modules",), description="Top-level names never copied into the build.")
    generator_artifacts: tuple[str, ...] = Field(
        ("src/generate-boilerplate-system.mjs", "package-lock.json"),
        description="Output-relative files deleted once the build is complete.",
    )
    system_manifest: str = Field("system.json", description="Host manifest whose title field is updated.")
    package_manifest: str = Field("package.json", description="Package manifest cleaned of generator entries.")
    generator_script: str = Field("generate", description="Script entry that runs the generator.")
    generator_dependencies: tuple[str, ...] = Field(
        ("glob", "prompt", "renamer", "replace", "inquirer"),
        description="Development dependencies only the generator needs.",
    )

    @property
    def build_path(self) -> Path:
        """Directory that is reset at the start of every run."""

        if self.build_root is not None:
            return self.build_root
        return self.template_root / "build"

    def output_dir(self, profile: NamingProfile) -> Path:
        """Return the directory the generated system is written to."""

        return self.build_path / profile.package_name
