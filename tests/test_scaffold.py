from __future__ import annotations

import json
from pathlib import Path

import pytest

from systemgen.config import NamingProfile, ScaffoldSettings
from systemgen.errors import FileSystemError, ManifestParseError, ValidationError
from systemgen.scaffold import (
    CleanTree,
    ProjectScaffolder,
    copy_sources,
    enumerate_sources,
    reset_build_dir,
)
from tests.fixtures.template_tree import PNG_BYTES, TEMPLATE_FILES, snapshot


@pytest.fixture()
def scaffolder(settings: ScaffoldSettings) -> ProjectScaffolder:
    return ProjectScaffolder(settings)


def _read(root: Path, relative: str) -> str:
    return (root / relative).read_text(encoding="utf-8")


def test_scaffolder_writes_renamed_tree(scaffolder: ProjectScaffolder, profile: NamingProfile):
    tree = scaffolder.create(profile)
    root = tree.root

    assert root == scaffolder.settings.template_root / "build" / "my-system"
    assert _read(root, "module/my-system.mjs") == (
        "import { MYSYSTEM } from './helpers/config.mjs';\n"
        "\n"
        "Hooks.once('init', function () {\n"
        "  game.mysystem = { MySystemActor, MySystemItem };\n"
        "  CONFIG.MYSYSTEM = MYSYSTEM;\n"
        "});\n"
    )
    sheet = _read(root, "module/sheets/actor-sheet.mjs")
    assert "this.actor.flags.mysystem.level" in sheet
    assert "'systems/my-system/templates/actor.hbs'" in sheet
    assert (root / "css" / "my-system.css").is_file()
    assert not (root / "module" / "boilerplate.mjs").exists()
    assert (root / "assets" / "icon.png").read_bytes() == PNG_BYTES


def test_no_template_token_survives(scaffolder: ProjectScaffolder, profile: NamingProfile):
    tree = scaffolder.create(profile)

    for relative, data in snapshot(tree.root).items():
        assert "boilerplate" not in relative
        text = data.decode("utf-8", errors="ignore")
        for token in ("boilerplate", "Boilerplate", "BOILERPLATE"):
            assert token not in text, f"{token} left in {relative}"


def test_title_is_written_to_system_manifest_only(scaffolder: ProjectScaffolder, profile: NamingProfile):
    tree = scaffolder.create(profile)

    system = json.loads(_read(tree.root, "system.json"))
    assert system["title"] == "My System"
    assert system["description"] == "The MySystem system for FoundryVTT!"
    assert system["esmodules"] == ["module/my-system.mjs"]

    for relative, data in snapshot(tree.root).items():
        if relative != "system.json":
            assert b"My System" not in data, relative


@pytest.mark.parametrize("title", ["Boilerplate Legends", "boilerplate & BOILERPLATE", "Boilerplate"])
def test_title_containing_template_token_is_kept_verbatim(settings: ScaffoldSettings, title: str):
    profile = NamingProfile.from_answers("my-system", title, "MySystem", "MY_SYSTEM")
    tree = ProjectScaffolder(settings).create(profile)

    system = json.loads(_read(tree.root, "system.json"))
    assert system["title"] == title
    assert system["id"] == "my-system"
    assert system["description"] == "The MySystem system for FoundryVTT!"


def test_ignored_and_hidden_paths_are_not_copied(scaffolder: ProjectScaffolder, profile: NamingProfile):
    tree = scaffolder.create(profile)

    assert not (tree.root / "node_modules").exists()
    assert not (tree.root / ".git").exists()
    assert not (tree.root / "build").exists()


def test_generator_artifacts_are_removed(scaffolder: ProjectScaffolder, profile: NamingProfile):
    tree = scaffolder.create(profile)

    assert not (tree.root / "package-lock.json").exists()
    assert list((tree.root / "src").glob("generate-*")) == []

    package = json.loads(_read(tree.root, "package.json"))
    assert "generate" not in package["scripts"]
    assert package["scripts"]["build"] == "sass src/scss/my-system.scss css/my-system.css"
    assert package["devDependencies"] == {"sass": "^1.69.5"}
    assert package["name"] == "my-system"


def test_legacy_data_model_by_default(scaffolder: ProjectScaffolder, profile: NamingProfile):
    tree = scaffolder.create(profile)

    assert _read(tree.root, "module/data/character.mjs") == "// legacy character\n"
    assert not (tree.root / "module" / "data" / "base-model.mjs").exists()
    assert not (tree.root / "src" / "datamodels").exists()
    assert (tree.root / "template.json").is_file()


def test_structured_data_model_overrides_legacy_files(settings: ScaffoldSettings):
    profile = NamingProfile.from_answers(
        "my-system", "My System", "MySystem", "MY_SYSTEM", data_model=True
    )
    tree = ProjectScaffolder(settings).create(profile)

    assert _read(tree.root, "module/data/character.mjs") == "// structured MySystemCharacter model\n"
    assert _read(tree.root, "module/data/base-model.mjs") == "export default class MySystemDataModel {}\n"
    assert _read(tree.root, "module/sheets/actor-sheet.mjs").startswith("export class MySystemActorSheet")
    assert not (tree.root / "src" / "datamodels").exists()
    assert all("datamodels" not in path.as_posix() for path in tree.files)


def test_running_twice_produces_identical_trees(scaffolder: ProjectScaffolder, profile: NamingProfile):
    first = snapshot(scaffolder.create(profile).root)
    (scaffolder.settings.build_path / "stale.txt").write_text("left over", encoding="utf-8")

    second = snapshot(scaffolder.create(profile).root)

    assert first == second
    assert not (scaffolder.settings.build_path / "stale.txt").exists()


def test_template_is_left_untouched(scaffolder: ProjectScaffolder, profile: NamingProfile):
    before = {
        key: value
        for key, value in snapshot(scaffolder.settings.template_root).items()
        if not key.startswith("build/")
    }
    scaffolder.create(profile)
    after = {
        key: value
        for key, value in snapshot(scaffolder.settings.template_root).items()
        if not key.startswith("build/")
    }
    assert before == after
    assert set(TEMPLATE_FILES) <= set(after)


def test_enumerate_sources_is_sorted_and_filtered(settings: ScaffoldSettings):
    (settings.build_path / "old").mkdir(parents=True)

    names = [path.name for path in enumerate_sources(settings)]

    assert names == sorted(names)
    assert "node_modules" not in names
    assert ".git" not in names
    assert "build" not in names
    assert {"module", "src", "system.json", "package.json"} <= set(names)


def test_enumerate_sources_requires_template_directory(tmp_path: Path):
    settings = ScaffoldSettings(template_root=tmp_path / "missing")
    with pytest.raises(FileSystemError) as excinfo:
        enumerate_sources(settings)
    assert excinfo.value.operation == "list"


def test_reset_build_dir_removes_previous_output(settings: ScaffoldSettings, profile: NamingProfile):
    leftover = settings.build_path / "other-system" / "file.txt"
    leftover.parent.mkdir(parents=True)
    leftover.write_text("x", encoding="utf-8")

    clean = reset_build_dir(settings, profile)

    assert clean == CleanTree(root=settings.build_path / "my-system")
    assert not settings.build_path.exists()


def test_structured_data_model_requires_source_directory(tmp_path: Path):
    template = tmp_path / "template"
    template.mkdir()
    (template / "system.json").write_text('{"title": "Boilerplate"}', encoding="utf-8")
    settings = ScaffoldSettings(template_root=template)
    profile = NamingProfile.from_answers("demo", "Demo", "Demo", "DEMO", data_model=True)

    clean = reset_build_dir(settings, profile)
    with pytest.raises(FileSystemError) as excinfo:
        copy_sources(clean, enumerate_sources(settings), settings, profile)
    assert excinfo.value.path == template / "src" / "datamodels"


def test_rename_failures_are_surfaced(
    monkeypatch: pytest.MonkeyPatch, scaffolder: ProjectScaffolder, profile: NamingProfile
):
    def fail_rename(self: Path, target: Path) -> Path:
        raise PermissionError(13, "Permission denied")

    monkeypatch.setattr(Path, "rename", fail_rename)

    with pytest.raises(FileSystemError) as excinfo:
        scaffolder.create(profile)
    assert excinfo.value.operation == "rename"
    assert "boilerplate" in excinfo.value.path.name


def test_invalid_package_manifest_aborts_before_rewrite(
    template_root: Path, settings: ScaffoldSettings, profile: NamingProfile
):
    (template_root / "package.json").write_text("{ not json", encoding="utf-8")

    with pytest.raises(ManifestParseError):
        ProjectScaffolder(settings).create(profile)

    output = settings.output_dir(profile)
    assert (output / "package.json").read_text(encoding="utf-8") == "{ not json"
    assert (output / "module" / "my-system.mjs").is_file()


@pytest.mark.parametrize("build_root", ["template", "parent"])
def test_build_root_covering_template_is_rejected(
    template_root: Path, profile: NamingProfile, build_root: str
):
    target = template_root if build_root == "template" else template_root.parent
    settings = ScaffoldSettings(template_root=template_root, build_root=target)
    before = snapshot(template_root)

    with pytest.raises(ValidationError) as excinfo:
        ProjectScaffolder(settings).create(profile)

    assert excinfo.value.field == "build_root"
    assert snapshot(template_root) == before


def test_unreadable_template_root_is_reported(
    monkeypatch: pytest.MonkeyPatch, settings: ScaffoldSettings
):
    def fail_iterdir(self: Path):
        raise PermissionError(13, "Permission denied")

    monkeypatch.setattr(Path, "iterdir", fail_iterdir)

    with pytest.raises(FileSystemError) as excinfo:
        enumerate_sources(settings)
    assert excinfo.value.operation == "list"
    assert excinfo.value.path == settings.template_root


def test_unreadable_output_tree_is_reported(
    monkeypatch: pytest.MonkeyPatch, scaffolder: ProjectScaffolder, profile: NamingProfile
):
    def fail_rglob(self: Path, pattern: str):
        raise PermissionError(13, "Permission denied")

    monkeypatch.setattr(Path, "rglob", fail_rglob)

    with pytest.raises(FileSystemError) as excinfo:
        scaffolder.create(profile)
    assert excinfo.value.operation == "list"
    assert excinfo.value.path == scaffolder.settings.output_dir(profile)
