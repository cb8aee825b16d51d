import re

import pytest

from weather_mcp.services.color_scheme import (
    CORE_PALETTE_ROLES,
    SCHEME_ROLES,
    ColorSchemeError,
    argb_from_hex,
    ensure_hash_prefix,
    generate_color_scheme,
    generate_core_palette_colors,
    hex_from_argb,
    normalize_category,
    supported_categories,
)

UPPER_HEX = re.compile(r"^#[0-9A-F]{6}$")
LOWER_HEX = re.compile(r"^#[0-9a-f]{6}$")


def test_core_palette_roles_and_format():
    colors = generate_core_palette_colors("#FF0062")

    assert list(colors) == list(CORE_PALETTE_ROLES)
    assert all(UPPER_HEX.match(value) for value in colors.values())
    assert colors["primary"] == "#FF0062"


def test_core_palette_accepts_seed_without_hash():
    assert generate_core_palette_colors("ff0062") == generate_core_palette_colors("#FF0062")


def test_scheme_roles_and_format():
    colors = generate_color_scheme("#6200EE", "tonal-spot")

    assert list(colors) == list(SCHEME_ROLES)
    assert all(LOWER_HEX.match(value) for value in colors.values())


def test_scheme_dark_mode_changes_background():
    light = generate_color_scheme("6200EE", "vibrant")
    dark = generate_color_scheme("6200EE", "vibrant", dark_mode=True)

    assert light["background"] != dark["background"]


@pytest.mark.parametrize("category", supported_categories())
def test_every_category_builds(category):
    assert len(generate_color_scheme("#FF0062", category)) == len(SCHEME_ROLES)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Tonal Spot", "tonal-spot"),
        ("tonal_spot", "tonal-spot"),
        ("tonalspot", "tonal-spot"),
        ("  FRUIT   SALAD ", "fruit-salad"),
        ("fruitsalad", "fruit-salad"),
        ("neutrals", "neutral"),
        ("Monochrome", "monochrome"),
    ],
)
def test_normalize_category_aliases(raw, expected):
    assert normalize_category(raw) == expected


def test_unknown_category_lists_supported_ones():
    with pytest.raises(ColorSchemeError) as excinfo:
        normalize_category("pastel")

    message = str(excinfo.value)
    assert message.startswith('Unsupported color scheme category: "pastel".')
    for name in supported_categories():
        assert f'"{name}"' in message


def test_unknown_category_is_a_value_error():
    with pytest.raises(ValueError):
        generate_color_scheme("#FF0062", "pastel")


def test_ensure_hash_prefix():
    assert ensure_hash_prefix("FF0062") == "#FF0062"
    assert ensure_hash_prefix("  #FF0062 ") == "#FF0062"


def test_argb_from_hex():
    assert argb_from_hex("#FF0062") == 0xFFFF0062
    assert argb_from_hex("abc") == 0xFFAABBCC
    assert argb_from_hex("#80FF0062") == 0xFFFF0062


@pytest.mark.parametrize("bad", ["", "#12345", "#GGGGGG", "#1234567"])
def test_argb_from_hex_rejects_malformed(bad):
    with pytest.raises(ColorSchemeError):
        argb_from_hex(bad)


def test_hex_from_argb():
    assert hex_from_argb(0xFFFF0062) == "#ff0062"
    assert hex_from_argb(0xFF000000) == "#000000"
