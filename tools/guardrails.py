#!/usr/bin/env python3
"""Lightweight local guardrails for the speedctl package.

Checks every file:
- parses with `ast.parse`
- has no bare `except:` clause

Usage:
- python tools/guardrails.py
- python tools/guardrails.py --files speedctl/actions.py speedctl/events.py
"""

from __future__ import annotations

import argparse
import ast
from pathlib import Path


ROOT = Path(__file__).resolve().parent.parent


def default_files() -> list[str]:
    return sorted(str(p.relative_to(ROOT)) for p in (ROOT / "speedctl").glob("*.py"))


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run lightweight guardrails.")
    parser.add_argument(
        "--files",
        nargs="*",
        default=None,
        help="Paths to Python files to validate (defaults to every module in speedctl/).",
    )
    return parser.parse_args(argv)


def check_file(path: Path) -> tuple[bool, str]:
    if not path.exists():
        return False, "missing"
    if not path.is_file():
        return False, "not a file"
    try:
        # Accept UTF-8 files with or without BOM to keep local checks stable.
        source = path.read_text(encoding="utf-8-sig")
    except UnicodeDecodeError:
        source = path.read_text(encoding="utf-8", errors="replace")
    try:
        tree = ast.parse(source, filename=str(path))
    except SyntaxError as exc:
        location = f"{exc.lineno}:{exc.offset}" if exc.lineno else "unknown"
        return False, f"syntax error at {location}: {exc.msg}"

    bare = [node.lineno for node in ast.walk(tree) if isinstance(node, ast.ExceptHandler) and node.type is None]
    if bare:
        return False, "bare except at line(s) " + ", ".join(str(n) for n in bare)
    return True, "ok"


def main(argv=None) -> int:
    args = parse_args(argv)
    files = [Path(f) if Path(f).is_absolute() else ROOT / f for f in (args.files or default_files())]

    print("Guardrails: syntax parse, bare except")
    print(f"Root: {ROOT}")

    failures = 0
    for file_path in files:
        ok, detail = check_file(file_path)
        try:
            rel = file_path.relative_to(ROOT)
        except ValueError:
            rel = file_path
        prefix = "PASS" if ok else "FAIL"
        print(f"[{prefix}] {rel} - {detail}")
        if not ok:
            failures += 1

    if failures:
        print(f"Result: FAILED ({failures} file(s))")
        return 1
    print("Result: PASSED")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
