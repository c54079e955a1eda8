import argparse
import sys
from collections.abc import Callable
from pathlib import Path

import pytest

GENERATOR_DIR = Path(__file__).resolve().parent.parent
if str(GENERATOR_DIR) not in sys.path:
    sys.path.insert(0, str(GENERATOR_DIR))

import gdconsts  # noqa: E402

FIXTURES_DIR = Path(__file__).resolve().parent / "fixtures"

SCENARIO_PROJECT = """\
[input]
jump=...
move_left=...
[layer_names]
2d_physics/layer_1="Player"
2d_physics/layer_3="Enemies"
[global_group]
enemies=...
"""


@pytest.fixture
def fixture_project() -> Path:
    return FIXTURES_DIR / "project.godot"


@pytest.fixture
def godot_project(tmp_path: Path) -> Path:
    project = tmp_path / "project.godot"
    project.write_text(SCENARIO_PROJECT, encoding="utf-8")
    return project


@pytest.fixture
def make_args(
    godot_project: Path, tmp_path: Path
) -> Callable[..., argparse.Namespace]:
    def _make_args(**overrides: object) -> argparse.Namespace:
        base_args: dict[str, object] = {
            "project": "Demo",
            "output": tmp_path / "scripts" / "generated",
            "namespace": None,
            "no_actions": False,
            "no_groups": False,
            "no_layers": False,
            "actions_name": "Actions",
            "groups_name": "Groups",
            "layers_name": "CollisionLayers",
            "godot_project": godot_project,
            "strict": False,
        }
        base_args.update(overrides)
        return argparse.Namespace(**base_args)

    return _make_args


@pytest.fixture
def make_config(
    tmp_path: Path, godot_project: Path
) -> Callable[..., gdconsts.GenerateConfig]:
    def _make_config(**overrides: object) -> gdconsts.GenerateConfig:
        base: dict[str, object] = {
            "godot_project": godot_project,
            "output_dir": tmp_path / "out",
            "namespace": "Demo.Generated",
            "actions_name": "Actions",
            "layers_name": "CollisionLayers",
            "groups_name": "Groups",
            "actions_enabled": True,
            "layers_enabled": True,
            "groups_enabled": True,
            "strict": False,
        }
        base.update(overrides)
        return gdconsts.GenerateConfig(**base)

    return _make_config
