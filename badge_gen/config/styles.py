"""
Art style presets and prompt templates.
"""

from dataclasses import dataclass
from typing import Dict, List


@dataclass(frozen=True)
class StylePreset:
    """Named art style with its prompt prefix."""
    name: str
    description: str
    prompt_template: str


STYLE_PRESETS: Dict[str, StylePreset] = {
    preset.name: preset for preset in [
        StylePreset(
            name="bitmoji",
            description="Flat colors, simplified features, friendly and approachable style",
            prompt_template=(
                "Professional headshot portrait in Bitmoji style, flat colors, simplified "
                "cartoon features, friendly expression, head and shoulders visible, white "
                "background, suitable for employee badge"
            ),
        ),
        StylePreset(
            name="pixar",
            description="3D-rendered cartoon with expressive features",
            prompt_template=(
                "Professional headshot portrait in Pixar 3D animation style, expressive "
                "features, high-quality 3D rendering, friendly expression, head and "
                "shoulders visible, white background, suitable for employee badge"
            ),
        ),
        StylePreset(
            name="corporate",
            description="Professional caricature, business-appropriate",
            prompt_template=(
                "Professional headshot portrait as business caricature, polished and clean, "
                "professional attire, subtle stylization, head and shoulders visible, "
                "neutral background, suitable for corporate employee badge"
            ),
        ),
        StylePreset(
            name="vector-art",
            description="Clean vector illustration with geometric shapes",
            prompt_template=(
                "Professional headshot portrait as vector art illustration, clean lines, "
                "geometric shapes, modern flat design, professional expression, head and "
                "shoulders visible, solid background, suitable for employee badge"
            ),
        ),
        StylePreset(
            name="anime",
            description="Japanese animation style portrait",
            prompt_template=(
                "Professional headshot portrait in anime style, clean anime character "
                "design, professional expression, head and shoulders visible, white "
                "background, suitable for employee badge"
            ),
        ),
        StylePreset(
            name="pixel-art",
            description="Retro 8-bit/16-bit video game sprite style",
            prompt_template=(
                "Professional headshot portrait in pixel art style, 16-bit video game "
                "character sprite, retro gaming aesthetic, head and shoulders visible, "
                "solid background, suitable for employee badge"
            ),
        ),
    ]
}


def get_style_preset(style_name: str) -> StylePreset:
    """Look up a style preset by name.

    Raises:
        ValueError: If the style is not defined
    """
    if style_name not in STYLE_PRESETS:
        raise ValueError(
            f"Unknown style: {style_name}. Available styles: {', '.join(STYLE_PRESETS)}"
        )
    return STYLE_PRESETS[style_name]


def list_styles() -> List[str]:
    return list(STYLE_PRESETS)


def build_prompt(style_name: str, attributes: str) -> str:
    """Join a style template and a person description."""
    return f"{get_style_preset(style_name).prompt_template}, {attributes}"
