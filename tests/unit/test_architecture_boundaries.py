import ast
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[2]


def _imports_of(py_file: Path):
    tree = ast.parse(py_file.read_text(encoding="utf-8"), filename=str(py_file))
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                yield node.lineno, alias.name
        elif isinstance(node, ast.ImportFrom):
            yield node.lineno, node.module or ""


def _violations(layer: str, forbidden: tuple):
    violations = []
    for py_file in (REPO_ROOT / "hlspack" / layer).rglob("*.py"):
        rel_path = py_file.relative_to(REPO_ROOT)
        for lineno, name in _imports_of(py_file):
            if any(name == f or name.startswith(f + ".") for f in forbidden):
                violations.append(f"{rel_path}:{lineno} imports {name}")
    return violations


def test_pipeline_layer_does_not_import_ui_layer():
    """Pipeline layer must not import from UI layer directly."""
    violations = _violations("pipeline", ("hlspack.ui", "rich"))
    assert not violations, "Pipeline layer must not import UI layer:\n" + "\n".join(violations)


def test_domain_layer_has_no_outward_imports():
    violations = _violations("domain", ("hlspack.infrastructure", "hlspack.pipeline", "hlspack.ui", "hlspack.config"))
    assert not violations, "Domain layer must stay self-contained:\n" + "\n".join(violations)


def test_infrastructure_does_not_import_pipeline_or_ui():
    violations = _violations("infrastructure", ("hlspack.pipeline", "hlspack.ui"))
    assert not violations, "Infrastructure must not import pipeline/UI:\n" + "\n".join(violations)


def test_config_layer_depends_only_on_domain():
    violations = _violations("config", ("hlspack.infrastructure", "hlspack.pipeline", "hlspack.ui"))
    assert not violations, "Config layer may only import domain:\n" + "\n".join(violations)
