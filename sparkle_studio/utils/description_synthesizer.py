"""Turn customizer input into a single instruction for the image model."""

from typing import Literal

from ..models.attributes import ManualAttributeSelection


CustomizationMode = Literal["prompt", "manual"]

SUBTLE_ENHANCE_INSTRUCTION = "Subtly enhance or refine the provided base image."
REMOVE_GEMSTONES_CLAUSE = "Remove any existing gemstones or ensure no gemstones are present."


def _material_clause(selection: ManualAttributeSelection) -> str | None:
    finish = selection.material_finish.lower() if selection.material_finish else None
    if selection.material:
        clause = f"Set material to {selection.material}"
        if finish:
            clause += f" with a {finish} finish"
        return clause + "."
    if finish:
        return f"Apply a {finish} finish."
    return None


def _gemstone_clause(selection: ManualAttributeSelection) -> str | None:
    cut = selection.gemstone_cut.lower() if selection.gemstone_cut else None
    if selection.removes_gemstones:
        # The cut is irrelevant once gemstones are removed.
        return REMOVE_GEMSTONES_CLAUSE
    if selection.gemstone:
        clause = f"Set gemstone to {selection.gemstone}"
        if cut:
            clause += f" with a {cut} cut"
        return clause + "."
    if cut:
        return f"Use a {cut} cut for the gemstone(s)."
    return None


def _style_clause(selection: ManualAttributeSelection) -> str | None:
    if selection.design_style:
        return f"The overall design style should be {selection.design_style.lower()}."
    return None


def _engraving_clause(selection: ManualAttributeSelection) -> str | None:
    if selection.engraving:
        return f'Add engraving: "{selection.engraving}".'
    return None


def synthesize(
    mode: CustomizationMode,
    free_text: str = "",
    selection: ManualAttributeSelection | None = None,
    has_base_image: bool = False,
) -> str:
    """Build the customization instruction.

    Args:
        mode: "prompt" for free text, "manual" for attribute selections
        free_text: The user's prompt (prompt mode)
        selection: Attribute selections (manual mode)
        has_base_image: Whether a base image will accompany the instruction

    Returns:
        The instruction. May be empty; the caller decides whether to reject it.
    """
    if mode == "prompt":
        return (free_text or "").strip()

    if mode != "manual":
        raise ValueError(f"Unknown customization mode: {mode!r}")

    selection = selection or ManualAttributeSelection()
    clauses = [
        clause
        for clause in (
            _material_clause(selection),
            _gemstone_clause(selection),
            _style_clause(selection),
            _engraving_clause(selection),
        )
        if clause
    ]

    if not clauses:
        return SUBTLE_ENHANCE_INSTRUCTION if has_base_image else ""
    return " ".join(clauses)


def is_customization_provided(
    mode: CustomizationMode,
    free_text: str = "",
    selection: ManualAttributeSelection | None = None,
) -> bool:
    """True if the user actually asked for something."""
    if mode == "prompt":
        return bool((free_text or "").strip())
    return selection is not None and not selection.is_empty()


def build_generation_prompt(instruction: str, has_base_image: bool) -> str:
    """Wrap an instruction in modify-this-image or create-from-scratch wording."""
    if has_base_image:
        return (
            f'Using the provided image as a base, create a new image that incorporates these changes: '
            f'"{instruction}". Ensure the output is a clear, high-quality image of the modified jewelry.'
        )
    return (
        f'Generate a new, clear, high-quality image of a piece of jewelry based on this description: '
        f'"{instruction}".'
    )
