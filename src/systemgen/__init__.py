"""Generate a newly named game system from the boilerplate template.

The package exposes the identifier derivations used to rename the template,
the replacement rules applied to its files, and a staged scaffolder usable
both programmatically and through the ``systemgen`` command.
"""

from __future__ import annotations

from .config import NamingProfile, ScaffoldSettings
from .errors import FileSystemError, ManifestParseError, ScaffoldError, ValidationError
from .naming import (
    safe_property_name,
    transform_class_name,
    transform_constant_name,
    transform_package_name,
)
from .scaffold import ProjectScaffolder, PublishedTree
from .template import ReplacementRule, TokenReplacer, build_ruleset

__all__ = [
    "FileSystemError",
    "ManifestParseError",
    "NamingProfile",
    "ProjectScaffolder",
    "PublishedTree",
    "ReplacementRule",
    "ScaffoldError",
    "ScaffoldSettings",
    "TokenReplacer",
    "ValidationError",
    "build_ruleset",
    "safe_property_name",
    "transform_class_name",
    "transform_constant_name",
    "transform_package_name",
]

__version__ = "0.1.0"
