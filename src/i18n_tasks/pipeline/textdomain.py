"""
Text-domain injection for gettext calls in source files.

Every call to a known translation function gets the project's text domain
as its domain argument. Calls without a domain have it appended; calls
with a different domain are rewritten when domain updates are enabled.
Files are rewritten in place and only when something changed.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from ..config.schema import I18nTasksConfig
from ..utils.core.exceptions import ExternalToolError
from .profile import ProjectProfile
from .steps import find_source_files
from .types import ItemFailure, StepResult

logger = logging.getLogger(__name__)

# 1-based position of the domain argument for each translation function
DOMAIN_POSITIONS: dict[str, int] = {
    "__": 2,
    "_e": 2,
    "_x": 3,
    "_ex": 3,
    "_n": 4,
    "_nx": 5,
    "_n_noop": 3,
    "_nx_noop": 4,
    "esc_attr__": 2,
    "esc_html__": 2,
    "esc_attr_e": 2,
    "esc_html_e": 2,
    "esc_attr_x": 3,
    "esc_html_x": 3,
}

CALL_PATTERN = re.compile(
    r"(?<![\w$>:])("
    + "|".join(sorted(DOMAIN_POSITIONS, key=len, reverse=True))
    + r")\s*\("
)


def split_arguments(source: str, start: int) -> tuple[list[str], int] | None:
    """
    Split a call's argument list at top-level commas.

    Args:
        source: Source text
        start: Index just after the opening parenthesis

    Returns:
        Raw argument texts and the index of the closing parenthesis, or
        None when the call is not closed
    """
    args: list[str] = []
    depth = 0
    quote: str | None = None
    current = start
    index = start

    while index < len(source):
        char = source[index]
        if quote:
            if char == "\\":
                index += 1
            elif char == quote:
                quote = None
        elif char in "'\"":
            quote = char
        elif char in "([{":
            depth += 1
        elif char in ")]}":
            if depth == 0:
                args.append(source[current:index])
                return args, index
            depth -= 1
        elif char == "," and depth == 0:
            args.append(source[current:index])
            current = index + 1
        index += 1

    return None


def _replace_argument(arg: str, value: str) -> str:
    stripped = arg.strip()
    if not stripped:
        return arg
    lead = arg[: len(arg) - len(arg.lstrip())]
    trail = arg[len(arg.rstrip()) :]
    return f"{lead}{value}{trail}"


def apply_text_domain(source: str, domain: str, update_domains: bool = True) -> tuple[str, int]:
    """
    Add or update the text domain of every translation call in ``source``.

    Returns:
        The rewritten source and the number of calls changed
    """
    literal = f"'{domain}'"
    pieces: list[str] = []
    changed = 0
    position = 0

    for match in CALL_PATTERN.finditer(source):
        if match.start() < position:
            continue
        split = split_arguments(source, match.end())
        if split is None:
            continue
        args, close = split
        if len(args) == 1 and not args[0].strip():
            continue

        domain_index = DOMAIN_POSITIONS[match.group(1)] - 1
        new_args = list(args)
        if len(args) == domain_index:
            last = args[-1]
            body = last.rstrip()
            new_args[-1] = f"{body}, {literal}{last[len(body):]}"
        elif len(args) > domain_index and update_domains:
            if args[domain_index].strip() == literal:
                continue
            new_args[domain_index] = _replace_argument(args[domain_index], literal)
        else:
            continue

        pieces.append(source[position : match.end()])
        pieces.append(",".join(new_args))
        position = close
        changed += 1

    pieces.append(source[position:])
    return "".join(pieces), changed


class TextDomainStep:
    """Inject the project's text domain into translation calls."""

    name: str = "textdomain"

    def __init__(self, profile: ProjectProfile, config: I18nTasksConfig, root: Path) -> None:
        self.profile: ProjectProfile = profile
        self.config: I18nTasksConfig = config
        self.root: Path = root

    async def run(self) -> StepResult:
        domain = self.profile.project_name
        source_files = find_source_files(
            self.root, self.config.source_extension, self.config.extraction.exclude
        )

        updated: list[str] = []
        failures: list[ItemFailure] = []
        for relative_path in source_files:
            path = self.root / relative_path
            try:
                content = path.read_text(encoding="utf-8")
                new_content, changed = apply_text_domain(
                    content, domain, self.config.extraction.update_domains
                )
                if changed:
                    _ = path.write_text(new_content, encoding="utf-8")
                    logger.info(f"Set text domain in {changed} call(s) in {relative_path}")
                    updated.append(str(relative_path))
            except (OSError, UnicodeError) as e:
                logger.error(f"Error updating text domain in {relative_path}: {e}")
                failures.append(ItemFailure(item=str(relative_path), reason=str(e)))

        if failures:
            reason = f"{len(failures)} of {len(source_files)} item(s) failed"
            return StepResult.failure(
                reason,
                failures=tuple(failures),
                error=ExternalToolError(reason, context=[f.item for f in failures]),
                domain=domain,
                updated=updated,
            )

        logger.info(f"Text domain '{domain}' applied to {len(updated)} file(s)")
        return StepResult.success(domain=domain, source_files=len(source_files), updated=updated)
