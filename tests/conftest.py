from __future__ import annotations

from pathlib import Path

import pytest

from systemgen.config import NamingProfile, ScaffoldSettings
from tests.fixtures.template_tree import write_template


@pytest.fixture()
def template_root(tmp_path: Path) -> Path:
    return write_template(tmp_path / "template")


@pytest.fixture()
def settings(template_root: Path) -> ScaffoldSettings:
    return ScaffoldSettings(template_root=template_root)


@pytest.fixture()
def profile() -> NamingProfile:
    return NamingProfile.from_answers("my-system", "My System", "MySystem", "MY_SYSTEM")
