import pytest

import gdconsts


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("Jump", "Jump"),
        ("jump", "Jump"),
        ("move_left", "MoveLeft"),
        ("move left", "MoveLeft"),
        ("ui/menu-item", "UiMenuItem"),
        ("ui_accept", "UiAccept"),
        ("camelCase", "CamelCase"),
        ("World Geometry", "WorldGeometry"),
        ("3lives", "_3Lives"),
        ("2d_layer", "_2DLayer"),
        ("player 2", "Player2"),
        ("player2x", "Player2X"),
        ("level10boss", "Level10Boss"),
        ("__private__", "Private"),
        ("énemies", "Énemies"),
    ],
)
def test_sanitize_name_pascal_cases_by_stripping_separators(
    raw: str, expected: str
) -> None:
    assert gdconsts.sanitize_name(raw) == expected


def test_sanitize_name_empty_input_falls_back_to_unnamed() -> None:
    assert gdconsts.sanitize_name("") == "Unnamed"


@pytest.mark.parametrize("raw", ["---", " ", "/_/", "!?"])
def test_sanitize_name_all_separator_input_falls_back_to_unnamed(raw: str) -> None:
    assert gdconsts.sanitize_name(raw) == gdconsts.FALLBACK_IDENTIFIER


@pytest.mark.parametrize(
    "raw",
    ["Jump", "move_left", "3lives", "---", "", "a-b c", "½", "level²", "²x", "x①"],
)
def test_sanitize_name_output_is_a_valid_identifier(raw: str) -> None:
    result = gdconsts.sanitize_name(raw)

    assert result.isidentifier()
    assert not result[0].isdigit()


def test_sanitize_name_is_idempotent_on_its_output() -> None:
    once = gdconsts.sanitize_name("ui/menu-item")

    assert gdconsts.sanitize_name(once) == once


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("½", "Unnamed"),
        ("level²", "Level"),
        ("²x", "X"),
        ("x①", "X"),
        ("ⅻhour", "Hour"),
        ("٣lives", "_٣Lives"),
    ],
)
def test_sanitize_name_treats_non_decimal_numerals_as_separators(
    raw: str, expected: str
) -> None:
    result = gdconsts.sanitize_name(raw)

    assert result == expected
    assert result.isidentifier()
