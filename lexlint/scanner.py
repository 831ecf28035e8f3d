from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
import logging
import os
from pathlib import Path
import re

from lexlint.models import Location, ScanResult, Violation
from lexlint.rules import Rule
from lexlint.source import SourceFile

logger = logging.getLogger(__name__)

INLINE_IGNORE_PATTERN = re.compile(r"lexlint:ignore(?:[ \t]+([A-Za-z0-9_, \t-]+))?", re.IGNORECASE)
FILE_READ_ERROR_RULE_ID = "file_read_error"


def lint_source(data: bytes, rules: list[Rule], path: str = "<memory>") -> list[Violation]:
    return _lint(SourceFile(data, path=path), rules)


def _lint(source: SourceFile, rules: list[Rule]) -> list[Violation]:
    violations: list[Violation] = []
    for rule in rules:
        violations.extend(rule.validate(source))
    violations.sort(key=lambda violation: (violation.location.byte_offset, violation.rule_id))
    logger.debug("%s: %d violation(s)", source.path, len(violations))
    return violations


def _should_exclude(path: Path, excludes: list[str]) -> bool:
    return any(ex in path.parts for ex in excludes)


def _has_allowed_target(path: Path, include_extensions: set[str], max_file_size_kb: int) -> bool:
    if not path.is_file():
        return False
    if max_file_size_kb > 0 and path.stat().st_size > max_file_size_kb * 1024:
        return False
    return path.suffix.lower() in include_extensions


def collect_files(
    root: Path,
    excludes: list[str],
    include_extensions: list[str],
    max_file_size_kb: int,
) -> list[Path]:
    include_ext_set = {ext.lower() if ext.startswith(".") else f".{ext.lower()}" for ext in include_extensions}
    if root.is_file():
        # An explicitly named file is linted regardless of its extension.
        return [root] if _has_allowed_target(root, {root.suffix.lower()}, max_file_size_kb) else []

    files: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root, topdown=True, followlinks=False):
        dir_path = Path(dirpath)
        dirnames[:] = sorted(name for name in dirnames if not _should_exclude(dir_path / name, excludes))
        for filename in sorted(filenames):
            file_path = dir_path / filename
            if _should_exclude(file_path, excludes):
                continue
            if not _has_allowed_target(file_path, include_ext_set, max_file_size_kb):
                continue
            files.append(file_path)
    return files


def scan_path(
    root: str,
    rules: list[Rule],
    excludes: list[str],
    include_extensions: list[str],
    max_file_size_kb: int,
    inline_ignore: bool = True,
    jobs: int = 1,
) -> ScanResult:
    root_path = Path(root).resolve()
    base_path = root_path.parent if root_path.is_file() else root_path
    files = collect_files(root_path, excludes, include_extensions, max_file_size_kb)

    def scan_one(file_path: Path) -> list[Violation]:
        return _scan_file(file_path, _relative_path(file_path, base_path), rules, inline_ignore)

    if jobs > 1 and len(files) > 1:
        with ThreadPoolExecutor(max_workers=jobs) as executor:
            per_file = list(executor.map(scan_one, files))
    else:
        per_file = [scan_one(file_path) for file_path in files]

    violations = [violation for file_violations in per_file for violation in file_violations]
    return ScanResult(violations=_dedupe_violations(violations), files_scanned=len(files))


def _scan_file(file_path: Path, relative: str, rules: list[Rule], inline_ignore: bool) -> list[Violation]:
    try:
        data = file_path.read_bytes()
    except OSError as exc:
        logger.debug("Unable to read %s: %s", file_path, exc)
        return [
            Violation(
                rule_id=FILE_READ_ERROR_RULE_ID,
                title="File read error",
                severity="warning",
                message=f"Unable to read file during scan: {exc}",
                location=Location(file_path=relative, byte_offset=0, line=1, column=1),
            )
        ]

    violations = lint_source(data, rules, path=relative)
    if not inline_ignore:
        return violations
    inline_map = _get_inline_ignore_map(data)
    return [violation for violation in violations if not _is_suppressed(violation, inline_map)]


def _relative_path(path: Path, root: Path) -> str:
    try:
        return path.resolve().relative_to(root).as_posix()
    except ValueError:
        return str(path)


def _dedupe_violations(violations: list[Violation]) -> list[Violation]:
    unique: dict[tuple[str, str, int, str], Violation] = {}
    for violation in violations:
        key = (violation.location.file_path, violation.rule_id, violation.location.byte_offset, violation.message)
        unique[key] = violation
    return sorted(
        unique.values(),
        key=lambda violation: (violation.location.file_path, violation.location.byte_offset, violation.rule_id),
    )


def _is_suppressed(violation: Violation, inline_map: dict[int, set[str]]) -> bool:
    ignored_rules = inline_map.get(violation.location.line)
    return ignored_rules is not None and ("*" in ignored_rules or violation.rule_id in ignored_rules)


def _get_inline_ignore_map(data: bytes) -> dict[int, set[str]]:
    rule_map: dict[int, set[str]] = {}
    source = data.decode("utf-8", errors="replace")
    for idx, line in enumerate(source.split("\n"), start=1):
        match = INLINE_IGNORE_PATTERN.search(line)
        if not match:
            continue
        rules = match.group(1)
        if rules is None:
            rule_map[idx] = {"*"}
            continue
        parsed = {token.lower() for token in re.split(r"[,\s]+", rules) if token}
        rule_map[idx] = parsed if parsed else {"*"}
    return rule_map
