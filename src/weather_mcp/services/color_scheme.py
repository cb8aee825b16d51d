"""
Material Design color generation.

Thin layer over `materialyoucolor` (Python port of Material Color
Utilities): seed parsing, category lookup and extraction of the role
colors returned to MCP clients.
"""

import re
from typing import Any, Dict, List

from materialyoucolor.dynamiccolor.material_dynamic_colors import MaterialDynamicColors
from materialyoucolor.hct import Hct
from materialyoucolor.palettes.core_palette import CorePalette
from materialyoucolor.scheme.scheme_content import SchemeContent
from materialyoucolor.scheme.scheme_expressive import SchemeExpressive
from materialyoucolor.scheme.scheme_fidelity import SchemeFidelity
from materialyoucolor.scheme.scheme_fruit_salad import SchemeFruitSalad
from materialyoucolor.scheme.scheme_monochrome import SchemeMonochrome
from materialyoucolor.scheme.scheme_neutral import SchemeNeutral
from materialyoucolor.scheme.scheme_rainbow import SchemeRainbow
from materialyoucolor.scheme.scheme_tonal_spot import SchemeTonalSpot
from materialyoucolor.scheme.scheme_vibrant import SchemeVibrant

SCHEME_ROLES = (
    "primary",
    "onPrimary",
    "primaryContainer",
    "onPrimaryContainer",
    "secondary",
    "onSecondary",
    "tertiary",
    "onTertiary",
    "background",
    "surface",
)

CORE_PALETTE_ROLES = (
    "primary",
    "secondary",
    "tertiary",
    "error",
    "neutral",
    "neutralVariant",
)

# Ordered; this is also the order reported to clients
SCHEME_FACTORIES = {
    "content": SchemeContent,
    "expressive": SchemeExpressive,
    "fidelity": SchemeFidelity,
    "fruit-salad": SchemeFruitSalad,
    "monochrome": SchemeMonochrome,
    "neutral": SchemeNeutral,
    "rainbow": SchemeRainbow,
    "tonal-spot": SchemeTonalSpot,
    "vibrant": SchemeVibrant,
}

CATEGORY_ALIASES = {
    **{name: name for name in SCHEME_FACTORIES},
    "fruitsalad": "fruit-salad",
    "neutrals": "neutral",
    "tonalspot": "tonal-spot",
}

# Tone used by Material Theme Builder for the non-seed key colors
KEY_COLOR_TONE = 60


class ColorSchemeError(ValueError):
    """Raised for unparseable seed colors and unknown categories."""


def supported_categories() -> List[str]:
    return list(SCHEME_FACTORIES)


def describe_categories() -> str:
    return ", ".join(f'"{name}"' for name in supported_categories())


def normalize_category(category: str) -> str:
    """
    Resolve a user-supplied category to its canonical name.

    Matching ignores case and treats runs of underscores or whitespace
    as a single hyphen, so "Tonal Spot", "tonal_spot" and "tonalspot"
    all resolve to "tonal-spot".

    Raises:
        ColorSchemeError: If the category is not recognized
    """
    normalized = re.sub(r"[_\s]+", "-", category.strip().lower())
    match = CATEGORY_ALIASES.get(normalized)
    if match is None:
        raise ColorSchemeError(
            f'Unsupported color scheme category: "{category}". '
            f"Supported categories: {describe_categories()}."
        )
    return match


def ensure_hash_prefix(hex_color: str) -> str:
    trimmed = hex_color.strip()
    return trimmed if trimmed.startswith("#") else f"#{trimmed}"


def argb_from_hex(hex_color: str) -> int:
    """
    Parse `#rgb`, `#rrggbb` or `#aarrggbb` into an opaque ARGB integer.

    The alpha channel of 8-digit input is ignored.
    """
    digits = hex_color.strip().lstrip("#")
    if not re.fullmatch(r"[0-9a-fA-F]+", digits) or len(digits) not in (3, 6, 8):
        raise ColorSchemeError(f"Invalid hex color: {hex_color!r}")

    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    elif len(digits) == 8:
        digits = digits[2:]
    return 0xFF000000 | int(digits, 16)


def hex_from_argb(argb: int) -> str:
    return "#{:02x}{:02x}{:02x}".format((argb >> 16) & 0xFF, (argb >> 8) & 0xFF, argb & 0xFF)


def hex_from_rgba(rgba: List[int]) -> str:
    red, green, blue = rgba[:3]
    return f"#{red:02x}{green:02x}{blue:02x}"


def build_scheme(
    seed_color: str,
    category: str,
    dark_mode: bool = False,
    contrast_level: float = 0.0,
) -> Any:
    """Instantiate the dynamic scheme for `category` from a seed color."""
    factory = SCHEME_FACTORIES[normalize_category(category)]
    source = Hct.from_int(argb_from_hex(seed_color))
    return factory(source, dark_mode, contrast_level)


def extract_hex_colors(scheme: Any) -> Dict[str, str]:
    colors = {}
    for role in SCHEME_ROLES:
        dynamic_color = getattr(MaterialDynamicColors, role)
        colors[role] = hex_from_rgba(dynamic_color.get_hct(scheme).to_rgba())
    return colors


def generate_color_scheme(
    seed_color: str,
    category: str,
    dark_mode: bool = False,
    contrast_level: float = 0.0,
) -> Dict[str, str]:
    """
    Generate the ten scheme role colors for a seed and category.

    Args:
        seed_color: Hex seed, with or without leading '#'
        category: Scheme category or alias (see `supported_categories`)
        dark_mode: Build the dark variant of the scheme
        contrast_level: -1.0 (reduced) to 1.0 (high), 0.0 is standard

    Returns:
        Dict[str, str]: Role name to lower-case `#rrggbb`
    """
    scheme = build_scheme(ensure_hash_prefix(seed_color), category, dark_mode, contrast_level)
    return extract_hex_colors(scheme)


def generate_core_palette_colors(seed_color: str) -> Dict[str, str]:
    """
    Generate the six CorePalette key colors, matching Material Theme Builder.

    Primary is the seed itself; the other roles are tone 60 of the
    content-derived palettes.

    Returns:
        Dict[str, str]: Role name to upper-case `#RRGGBB`
    """
    argb = argb_from_hex(ensure_hash_prefix(seed_color))
    palette = CorePalette.content_of(argb)

    colors = {
        "primary": argb,
        "secondary": palette.a2.tone(KEY_COLOR_TONE),
        "tertiary": palette.a3.tone(KEY_COLOR_TONE),
        "error": palette.error.tone(KEY_COLOR_TONE),
        "neutral": palette.n1.tone(KEY_COLOR_TONE),
        "neutralVariant": palette.n2.tone(KEY_COLOR_TONE),
    }
    return {role: hex_from_argb(colors[role]).upper() for role in CORE_PALETTE_ROLES}
