from __future__ import annotations

from pathlib import Path


_README_ANCHORS = (
    "Generate C# constants from a Godot project.godot",
    "--project",
    "--output",
    "--namespace",
    "--no-actions",
    "--no-layers",
    "--no-groups",
    "--actions-name",
    "--layers-name",
    "--groups-name",
    "--godot-project",
    "--strict",
    "Actions.cs",
    "CollisionLayers.cs",
    "Groups.cs",
    "pytest",
)


def _tool_root() -> Path:
    return Path(__file__).resolve().parents[2]


def test_t_25_required_artifacts_exist() -> None:
    tool_root = _tool_root()
    required_paths = {
        "gdconsts.py",
        "pyproject.toml",
        "README.md",
        "tests/conftest.py",
        "tests/test_cli.py",
        "tests/test_parser.py",
        "tests/test_sanitize.py",
        "tests/test_emitter.py",
        "tests/test_writer.py",
        "tests/test_pipeline.py",
        "tests/test_summary.py",
        "tests/fixtures/project.godot",
        "tests/fixtures/Demo.csproj",
        "tests/external/test_external_cli.py",
        "tests/external/test_repo_shape.py",
    }

    missing = sorted(path for path in required_paths if not (tool_root / path).exists())
    assert missing == []


def test_t_26_generated_output_is_not_committed() -> None:
    tool_root = _tool_root()

    assert not (tool_root / "scripts" / "generated").exists()
    assert list(tool_root.glob("*.cs")) == []


def test_t_27_readme_documents_cli_surface_and_outputs() -> None:
    readme = _tool_root() / "README.md"
    assert readme.exists(), "README.md must exist"
    content = readme.read_text(encoding="utf-8")
    missing = [anchor for anchor in _README_ANCHORS if anchor not in content]
    assert missing == [], f"README.md missing required anchors: {missing}"
