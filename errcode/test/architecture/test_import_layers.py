"""Import layering rules, checked statically with ``ast``.

- ``errcode.core`` stays free of presentation: no ``errcode.output``,
  ``errcode.cli``, ``typer`` or ``rich``.
- ``errcode.output`` never reaches up into ``errcode.cli``.
- Only ``output/console.py`` imports ``rich``.
"""

from __future__ import annotations

import ast
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class ImportRef:
    module: str
    line: int


def package_root() -> Path:
    return Path(__file__).resolve().parents[2]


def iter_python_files(base: Path) -> list[Path]:
    root = package_root()
    files: list[Path] = []
    for path in sorted(base.rglob("*.py")):
        rel = path.relative_to(root)
        if any(part.startswith(".") or part == "__pycache__" for part in rel.parts):
            continue
        if rel.parts and rel.parts[0] == "test":
            continue
        files.append(path)
    return files


def parse_imports(path: Path) -> list[ImportRef]:
    tree = ast.parse(path.read_text(encoding="utf-8"), filename=str(path))
    imports: list[ImportRef] = []
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            imports.extend(ImportRef(alias.name, node.lineno) for alias in node.names)
        elif isinstance(node, ast.ImportFrom):
            if node.level or node.module is None:
                continue
            imports.append(ImportRef(node.module, node.lineno))
    return imports


def matches_prefix(module: str, prefix: str) -> bool:
    return module == prefix or module.startswith(prefix + ".")


def _offenders(base: Path, forbidden: tuple[str, ...]) -> list[str]:
    root = package_root()
    offenders: list[str] = []
    for file_path in iter_python_files(base):
        rel = file_path.relative_to(root)
        for item in parse_imports(file_path):
            if any(matches_prefix(item.module, prefix) for prefix in forbidden):
                offenders.append(f"{rel}:{item.line}: forbidden import '{item.module}'")
    return offenders


def test_core_has_no_presentation_dependencies() -> None:
    offenders = _offenders(
        package_root() / "core",
        ("errcode.output", "errcode.cli", "typer", "rich"),
    )
    assert not offenders, "core -> presentation violations:\n" + "\n".join(offenders)


def test_output_does_not_import_cli() -> None:
    offenders = _offenders(package_root() / "output", ("errcode.cli", "typer"))
    assert not offenders, "output -> cli violations:\n" + "\n".join(offenders)


def test_direct_rich_imports_are_limited_to_console() -> None:
    root = package_root()
    allowlist = {"output/console.py"}
    offenders = [
        line
        for line in _offenders(root, ("rich",))
        if line.split(":", 1)[0].replace("\\", "/") not in allowlist
    ]
    assert not offenders, "Direct rich usage policy violations:\n" + "\n".join(offenders)


def test_scan_finds_sources() -> None:
    files = {p.name for p in iter_python_files(package_root() / "core")}
    assert {"value.py", "codec.py", "render.py", "codeset.py", "codes.py"} <= files
