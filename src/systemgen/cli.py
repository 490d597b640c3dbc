"""Command line interface for generating a new system from the template."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any, Sequence

from rich.console import Console
from rich.prompt import Confirm, Prompt

from .config import DEFAULT_ANSWERS, NamingProfile, ScaffoldSettings
from .errors import ScaffoldError
from .scaffold import ProjectScaffolder

LOGGER = logging.getLogger(__name__)

error_console = Console(stderr=True)

QUESTIONS: Sequence[tuple[str, str]] = (
    (
        "package_name",
        'Enter the package name of your system, such as "my-system" '
        "(alphanumeric characters and hyphens only)",
    ),
    ("title", 'Enter the formatted name of your system, such as "My System"'),
    (
        "class_name",
        'Enter the name of your system for usage in JS classes, such as "MySystem" '
        "(alphanumeric characters only)",
    ),
    (
        "constant_name",
        'Enter the name of your system for usage in constants, such as "MY_SYSTEM" '
        "(alphanumeric characters only)",
    ),
)
DATA_MODEL_QUESTION = "Use DataModel instead of template.json?"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="systemgen",
        description="Generate a new game system from the boilerplate template",
    )
    parser.add_argument("--package-name", help="Package name, such as my-system")
    parser.add_argument("--title", help="Human readable title, such as 'My System'")
    parser.add_argument("--class-name", help="Class name, such as MySystem")
    parser.add_argument("--constant-name", help="Constant name, such as MY_SYSTEM")
    parser.add_argument(
        "--data-model",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Use the structured DataModel variant instead of template.json",
    )
    parser.add_argument(
        "--template-root",
        type=Path,
        default=Path.cwd(),
        help="Directory containing the system template",
    )
    parser.add_argument(
        "--build-root",
        type=Path,
        default=None,
        help="Directory receiving build output (defaults to <template-root>/build)",
    )
    parser.add_argument(
        "-y",
        "--non-interactive",
        action="store_true",
        help="Use defaults for unanswered questions instead of prompting",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log every file operation",
    )
    return parser


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _collect_answers(args: argparse.Namespace) -> dict[str, Any]:
    """Return answers from flags, prompting for any that are missing."""

    answers: dict[str, Any] = {}
    for key, question in QUESTIONS:
        value = getattr(args, key)
        if value is None:
            default = str(DEFAULT_ANSWERS[key])
            value = default if args.non_interactive else Prompt.ask(question, default=default)
        answers[key] = value

    data_model = args.data_model
    if data_model is None:
        default_model = bool(DEFAULT_ANSWERS["data_model"])
        data_model = (
            default_model
            if args.non_interactive
            else Confirm.ask(DATA_MODEL_QUESTION, default=default_model)
        )
    answers["data_model"] = data_model
    return answers


def _display_path(path: Path) -> str:
    try:
        return path.resolve().relative_to(Path.cwd().resolve()).as_posix()
    except ValueError:
        return path.as_posix()


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        answers = _collect_answers(args)
    except (EOFError, KeyboardInterrupt):
        error_console.print(
            "error: input aborted before all questions were answered.",
            markup=False,
            highlight=False,
            soft_wrap=True,
        )
        return 1

    try:
        profile = NamingProfile.from_answers(
            answers["package_name"],
            answers["title"],
            answers["class_name"],
            answers["constant_name"],
            data_model=answers["data_model"],
        )
        settings = ScaffoldSettings(template_root=args.template_root, build_root=args.build_root)
        tree = ProjectScaffolder(settings).create(profile)
    except ScaffoldError as exc:
        LOGGER.debug("scaffolding aborted", exc_info=True)
        error_console.print(f"error: {exc}", markup=False, highlight=False, soft_wrap=True)
        return 1

    print(f"Success! Your system has been written to the {_display_path(tree.root)}/ directory.")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
