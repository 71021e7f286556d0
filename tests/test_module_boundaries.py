"""Architecture boundary checks: parsing and domain code stay free of I/O stacks."""

from __future__ import annotations

import ast
from pathlib import Path

PACKAGE_DIR = Path(__file__).resolve().parents[1] / "receiptlens"
IO_MODULES = ("fitz", "httpx", "pytesseract")


def _imports(path: Path) -> list[str]:
    tree = ast.parse(path.read_text(encoding="utf-8"), filename=str(path))
    result: list[str] = []
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                result.append(alias.name)
        elif isinstance(node, ast.ImportFrom):
            base = "." * node.level + (node.module or "")
            result.append(base)
    return result


def _is_forbidden(mod: str) -> bool:
    if mod == "receiptlens.runtime" or mod.startswith("receiptlens.runtime."):
        return True
    return mod.split(".")[0] in IO_MODULES


def test_receipt_parsing_does_not_import_runtime_or_io_libraries() -> None:
    violations: list[str] = []
    for path in sorted((PACKAGE_DIR / "receipt").rglob("*.py")):
        for mod in _imports(path):
            if _is_forbidden(mod):
                violations.append(f"{path}: {mod}")
    assert not violations, "Receipt -> Runtime/I/O import violations:\n" + "\n".join(violations)


def test_domain_does_not_import_runtime_or_io_libraries() -> None:
    violations: list[str] = []
    for path in sorted((PACKAGE_DIR / "domain").rglob("*.py")):
        for mod in _imports(path):
            if _is_forbidden(mod):
                violations.append(f"{path}: {mod}")
    assert not violations, "Domain -> Runtime/I/O import violations:\n" + "\n".join(violations)
