#!/usr/bin/env python3
"""Layering validation script.

The engines in core/, types/ and utils/ must stay usable by any front end,
so they may not depend on the presentation layer. This script parses every
engine module and reports:
- Imports of lunardisk.app or lunardisk.__main__ (absolute or relative)
- Calls to print()

Exit codes:
    0: Layering respected
    1: At least one violation (or the package could not be found)
"""

from __future__ import annotations

import ast
import sys
from pathlib import Path
from typing import Final, NamedTuple

PACKAGE: Final[str] = "lunardisk"
ENGINE_PACKAGES: Final[tuple[str, ...]] = ("core", "types", "utils")
FORBIDDEN_MODULES: Final[tuple[str, ...]] = (f"{PACKAGE}.app", f"{PACKAGE}.__main__")

# Terminal colors
RED: Final[str] = "\033[31m"
GREEN: Final[str] = "\033[32m"
RESET: Final[str] = "\033[0m"


class Violation(NamedTuple):
    path: Path
    line: int
    message: str


def _package_name(source_root: Path, file_path: Path) -> str:
    # Package that relative imports in this file resolve against
    return ".".join(file_path.relative_to(source_root).parent.parts)


def _absolute_target(package: str, node: ast.ImportFrom) -> str:
    if node.level == 0:
        return node.module or ""
    parts = package.split(".")
    base = parts[: len(parts) - (node.level - 1)]
    return ".".join([*base, node.module] if node.module else base)


def _is_forbidden(target: str) -> bool:
    return any(target == name or target.startswith(f"{name}.") for name in FORBIDDEN_MODULES)


def find_violations(source_root: Path, file_path: Path) -> list[Violation]:
    """Parse one module and collect layering violations.

    Args:
        source_root: Directory containing the top-level package
        file_path: Engine module to check

    Returns:
        Violations in source order
    """
    tree = ast.parse(file_path.read_text(encoding="utf-8"), filename=str(file_path))
    package = _package_name(source_root, file_path)
    violations: list[Violation] = []

    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                if _is_forbidden(alias.name):
                    violations.append(Violation(file_path, node.lineno, f"imports {alias.name}"))
        elif isinstance(node, ast.ImportFrom):
            target = _absolute_target(package, node)
            if _is_forbidden(target):
                violations.append(Violation(file_path, node.lineno, f"imports from {target}"))
        elif isinstance(node, ast.Call) and isinstance(node.func, ast.Name) and node.func.id == "print":
            violations.append(Violation(file_path, node.lineno, "calls print()"))

    return sorted(violations, key=lambda v: v.line)


def main() -> int:
    """Check every engine module.

    Returns:
        Exit code: 0 if clean, 1 otherwise.
    """
    project_root = Path(__file__).resolve().parent.parent
    source_root = project_root / "src"
    package_dir = source_root / PACKAGE

    if not package_dir.is_dir():
        print(f"{RED}Error: {package_dir} does not exist{RESET}", file=sys.stderr)
        return 1

    violations = [
        violation
        for engine in ENGINE_PACKAGES
        for py_file in sorted((package_dir / engine).rglob("*.py"))
        for violation in find_violations(source_root, py_file)
    ]

    if not violations:
        print(f"{GREEN}✓ Engine packages ({', '.join(ENGINE_PACKAGES)}) are independent of the app layer{RESET}")
        return 0

    print(f"{RED}✗ {len(violations)} layering violation(s):{RESET}")
    for violation in violations:
        print(f"  {violation.path.relative_to(project_root)}:{violation.line}: {violation.message}")
    return 1


if __name__ == "__main__":
    sys.exit(main())
