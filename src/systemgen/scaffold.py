"""Build a renamed copy of the system template.

A run is a fixed sequence of stages. Each stage takes the tree value produced
by the previous one, so the order reset, copy, substitute, rename, strip cannot
be shuffled without a type error:

``reset_build_dir`` -> :class:`CleanTree`
``copy_sources`` -> :class:`CopiedTree`
``substitute_tokens`` -> :class:`SubstitutedTree`
``rename_paths`` -> :class:`RenamedTree`
``strip_artifacts`` -> :class:`PublishedTree`
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from .config import NamingProfile, ScaffoldSettings
from .errors import FileSystemError, ValidationError
from .manifest import read_title, strip_generator_entries, write_title
from .template import TokenReplacer, build_ruleset

__all__ = [
    "CleanTree",
    "CopiedTree",
    "SubstitutedTree",
    "RenamedTree",
    "PublishedTree",
    "ProjectScaffolder",
    "reset_build_dir",
    "enumerate_sources",
    "copy_sources",
    "substitute_tokens",
    "rename_paths",
    "strip_artifacts",
]


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CleanTree:
    """Output location after the build directory has been removed."""

    root: Path


@dataclass(frozen=True, slots=True)
class CopiedTree:
    """Output tree holding the final file set, not yet rewritten."""

    root: Path
    files: tuple[Path, ...]


@dataclass(frozen=True, slots=True)
class SubstitutedTree:
    """Output tree after token replacement."""

    root: Path
    files: tuple[Path, ...]
    changed: tuple[Path, ...]


@dataclass(frozen=True, slots=True)
class RenamedTree:
    """Output tree after files carrying the token in their name were renamed."""

    root: Path
    files: tuple[Path, ...]
    renamed: tuple[tuple[Path, Path], ...]


@dataclass(frozen=True, slots=True)
class PublishedTree:
    """Finished output tree with generator artifacts removed."""

    root: Path
    files: tuple[Path, ...]


def _list_files(root: Path) -> tuple[Path, ...]:
    try:
        return tuple(sorted(path.relative_to(root) for path in root.rglob("*") if path.is_file()))
    except OSError as exc:
        raise FileSystemError("list", root, str(exc)) from exc


def _remove_tree(path: Path) -> None:
    if not path.exists():
        return
    try:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink()
    except OSError as exc:
        raise FileSystemError("delete", path, str(exc)) from exc


def _copy_path(source: Path, destination: Path) -> None:
    try:
        if source.is_dir():
            shutil.copytree(source, destination, dirs_exist_ok=True)
        else:
            destination.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(source, destination)
    except OSError as exc:
        raise FileSystemError("copy", source, str(exc)) from exc


def reset_build_dir(settings: ScaffoldSettings, profile: NamingProfile) -> CleanTree:
    """Delete the build directory so the run starts from a clean slate.

    Raises :class:`ValidationError` without deleting anything when the build
    directory is the template root or one of its parents.
    """

    build_path = settings.build_path
    resolved_build = build_path.resolve()
    resolved_template = settings.template_root.resolve()
    if resolved_build == resolved_template or resolved_build in resolved_template.parents:
        raise ValidationError(
            "build_root",
            f"build directory {build_path} would delete the template at {settings.template_root}.",
        )

    LOGGER.info("resetting build directory %s", build_path)
    _remove_tree(build_path)
    return CleanTree(root=settings.output_dir(profile))


def enumerate_sources(settings: ScaffoldSettings) -> list[Path]:
    """Return the top-level template paths that should be copied."""

    template_root = settings.template_root
    if not template_root.is_dir():
        raise FileSystemError("list", template_root, "template root is not a directory")

    build_path = settings.build_path.resolve()
    ignored = set(settings.ignore)
    try:
        entries = sorted(template_root.iterdir())
    except OSError as exc:
        raise FileSystemError("list", template_root, str(exc)) from exc

    sources = []
    for path in entries:
        if path.name in ignored or path.name.startswith("."):
            continue
        if path.resolve() == build_path:
            continue
        sources.append(path)
    return sources


def copy_sources(
    tree: CleanTree,
    sources: Sequence[Path],
    settings: ScaffoldSettings,
    profile: NamingProfile,
) -> CopiedTree:
    """Copy ``sources`` into the output tree.

    When the profile selects the structured data model, the contents of the
    alternate data model directory are layered over the output root. The
    alternate directory itself never ships.
    """

    root = tree.root
    try:
        root.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise FileSystemError("create", root, str(exc)) from exc

    for source in sources:
        LOGGER.debug("copying %s", source.name)
        _copy_path(source, root / source.name)

    datamodels = settings.template_root / settings.datamodels_dir
    if profile.data_model:
        if not datamodels.is_dir():
            raise FileSystemError("copy", datamodels, "alternate data model directory not found")
        for entry in sorted(datamodels.iterdir()):
            LOGGER.debug("applying data model override %s", entry.name)
            _copy_path(entry, root / entry.name)

    _remove_tree(root / settings.datamodels_dir)
    return CopiedTree(root=root, files=_list_files(root))


def substitute_tokens(
    tree: CopiedTree,
    settings: ScaffoldSettings,
    profile: NamingProfile,
) -> SubstitutedTree:
    """Rename tokens everywhere, then write the title into the host manifest.

    The title goes in last so the project-wide rules never rewrite it.
    """

    manifest = tree.root / settings.system_manifest
    template_title = read_title(manifest) if manifest.is_file() else None

    replacer = TokenReplacer(build_ruleset(profile, settings.token))
    changed = replacer.render_directory(tree.root)
    LOGGER.info("replaced tokens in %d file(s)", len(changed))

    if template_title is None:
        LOGGER.warning("no title in %s; title not applied", settings.system_manifest)
    else:
        write_title(manifest, template_title.replace(settings.token.capitalize(), profile.title))

    return SubstitutedTree(
        root=tree.root,
        files=tree.files,
        changed=tuple(path.relative_to(tree.root) for path in changed),
    )


def _renamed(name: str, settings: ScaffoldSettings, profile: NamingProfile) -> str:
    return name.replace(settings.token, profile.package_name)


def rename_paths(
    tree: SubstitutedTree,
    settings: ScaffoldSettings,
    profile: NamingProfile,
) -> RenamedTree:
    """Rename every file whose name contains the token, in place."""

    renamed: list[tuple[Path, Path]] = []
    for relative in tree.files:
        if settings.token not in relative.name:
            continue
        source = tree.root / relative
        target = source.with_name(_renamed(relative.name, settings, profile))
        try:
            source.rename(target)
        except OSError as exc:
            raise FileSystemError("rename", source, str(exc)) from exc
        LOGGER.debug("renamed %s -> %s", relative, target.name)
        renamed.append((relative, target.relative_to(tree.root)))

    return RenamedTree(root=tree.root, files=_list_files(tree.root), renamed=tuple(renamed))


def strip_artifacts(
    tree: RenamedTree,
    settings: ScaffoldSettings,
    profile: NamingProfile,
) -> PublishedTree:
    """Remove generator files and generator entries from the package manifest."""

    for artifact in settings.generator_artifacts:
        original = tree.root / artifact
        renamed = original.with_name(_renamed(original.name, settings, profile))
        for candidate in dict.fromkeys((original, renamed)):
            if candidate.exists():
                LOGGER.debug("removing generator artifact %s", candidate.relative_to(tree.root))
                _remove_tree(candidate)

    manifest = tree.root / settings.package_manifest
    if manifest.is_file():
        strip_generator_entries(
            manifest,
            script=settings.generator_script,
            dependencies=settings.generator_dependencies,
        )
    else:
        LOGGER.warning("no %s in build output; nothing to clean", settings.package_manifest)

    return PublishedTree(root=tree.root, files=_list_files(tree.root))


class ProjectScaffolder:
    """Turn the system template into a newly named project."""

    def __init__(self, settings: ScaffoldSettings | None = None) -> None:
        self.settings = settings or ScaffoldSettings()

    def create(self, profile: NamingProfile) -> PublishedTree:
        """Run every stage for ``profile`` and return the finished tree."""

        settings = self.settings
        sources = enumerate_sources(settings)
        clean = reset_build_dir(settings, profile)
        copied = copy_sources(clean, sources, settings, profile)
        substituted = substitute_tokens(copied, settings, profile)
        renamed = rename_paths(substituted, settings, profile)
        published = strip_artifacts(renamed, settings, profile)
        LOGGER.info("wrote %d file(s) to %s", len(published.files), published.root)
        return published
