"""Manual attribute selections offered by the customizer."""

from typing import Literal, get_args

from pydantic import BaseModel, Field, field_validator


Material = Literal["Gold", "Silver", "Rose Gold", "Platinum", "Titanium"]
MaterialFinish = Literal["Polished", "Matte", "Brushed", "Hammered", "Satin"]
Gemstone = Literal[
    "Diamond", "Sapphire", "Ruby", "Emerald", "Amethyst",
    "Opal", "Pearl", "Garnet", "Topaz", "None",
]
GemstoneCut = Literal[
    "Round", "Princess", "Oval", "Marquise", "Pear",
    "Emerald", "Baguette", "Cushion", "Asscher", "Radiant",
]
DesignStyle = Literal[
    "Vintage", "Modern", "Art Deco", "Minimalist", "Bohemian",
    "Nature-Inspired", "Geometric", "Classic", "Abstract",
]

MATERIALS = get_args(Material)
MATERIAL_FINISHES = get_args(MaterialFinish)
GEMSTONES = get_args(Gemstone)
GEMSTONE_CUTS = get_args(GemstoneCut)
DESIGN_STYLES = get_args(DesignStyle)

# Gemstone value meaning "remove all gemstones"
NO_GEMSTONE = "None"


class ManualAttributeSelection(BaseModel):
    """Structured alternative to a free-text prompt.

    Every field is optional; None means "no change".
    """

    material: Material | None = None
    material_finish: MaterialFinish | None = None
    gemstone: Gemstone | None = None
    gemstone_cut: GemstoneCut | None = Field(
        default=None,
        description="Ignored when gemstone is 'None'",
    )
    design_style: DesignStyle | None = None
    engraving_text: str | None = None

    @field_validator(
        "material", "material_finish", "gemstone", "gemstone_cut", "design_style",
        mode="before",
    )
    @classmethod
    def _blank_is_unset(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def removes_gemstones(self) -> bool:
        return self.gemstone == NO_GEMSTONE

    @property
    def engraving(self) -> str:
        """Engraving text with surrounding whitespace stripped."""
        return (self.engraving_text or "").strip()

    def is_empty(self) -> bool:
        """True if nothing would change."""
        cut_counts = self.gemstone_cut is not None and not self.removes_gemstones
        return not (
            self.material
            or self.material_finish
            or self.gemstone
            or cut_counts
            or self.design_style
            or self.engraving
        )
