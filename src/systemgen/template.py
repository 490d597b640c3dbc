"""Token replacement applied to the copied system template."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from .config import NamingProfile
from .errors import FileSystemError

__all__ = ["ReplacementRule", "TokenReplacer", "build_ruleset"]


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ReplacementRule:
    """A single ``pattern`` to ``replacement`` substitution."""

    pattern: re.Pattern[str]
    replacement: str

    @classmethod
    def literal(cls, text: str, replacement: str) -> "ReplacementRule":
        return cls(re.compile(re.escape(text)), replacement)

    def apply(self, text: str) -> str:
        # Replacements are inserted verbatim, never expanded as group references.
        return self.pattern.sub(lambda _match: self.replacement, text)


def build_ruleset(profile: NamingProfile, token: str = "boilerplate") -> list[ReplacementRule]:
    """Return the ordered replacement rules for ``profile``.

    The dotted runtime and flag handles come first so the generic lower-case
    rule cannot shadow them.
    """

    lower = token.lower()
    return [
        ReplacementRule(re.compile(rf"game\.{re.escape(lower)}"), f"game.{profile.property_name}"),
        ReplacementRule(re.compile(rf"flags\.{re.escape(lower)}"), f"flags.{profile.property_name}"),
        ReplacementRule.literal(lower, profile.package_name),
        ReplacementRule.literal(lower.capitalize(), profile.class_name),
        ReplacementRule.literal(lower.upper(), profile.constant_name),
    ]


@dataclass(slots=True)
class TokenReplacer:
    """Apply a sequence of :class:`ReplacementRule` objects to text and files."""

    rules: Sequence[ReplacementRule] = field(default_factory=list)

    def render_string(self, text: str) -> str:
        """Return ``text`` with every rule applied in order."""

        for rule in self.rules:
            text = rule.apply(text)
        return text

    def render_file(self, path: str | Path, *, encoding: str = "utf-8") -> bool:
        """Rewrite ``path`` in place and return ``True`` when it changed.

        Files that cannot be decoded as text are left untouched.
        """

        path = Path(path)
        try:
            # newline="" keeps the template's line endings byte-for-byte.
            with path.open(encoding=encoding, newline="") as handle:
                original = handle.read()
        except UnicodeDecodeError:
            LOGGER.debug("skipping non-text file %s", path)
            return False
        except OSError as exc:
            raise FileSystemError("read", path, str(exc)) from exc

        rendered = self.render_string(original)
        if rendered == original:
            return False

        try:
            with path.open("w", encoding=encoding, newline="") as handle:
                handle.write(rendered)
        except OSError as exc:
            raise FileSystemError("write", path, str(exc)) from exc
        return True

    def render_directory(self, root: str | Path) -> list[Path]:
        """Rewrite every file below ``root`` and return the ones that changed."""

        root = Path(root)
        if not root.is_dir():
            raise FileSystemError("replace", root, "not a directory")

        try:
            paths = sorted(root.rglob("*"))
        except OSError as exc:
            raise FileSystemError("list", root, str(exc)) from exc

        changed: list[Path] = []
        for path in paths:
            if not path.is_file():
                continue
            if self.render_file(path):
                LOGGER.debug("replaced tokens in %s", path.relative_to(root))
                changed.append(path)
        return changed
