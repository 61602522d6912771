"""Generative design pipeline for jewelry customization."""

import asyncio
import logging

from ..agents import JewelryDescriber, JewelrySuggester, PromptEnhancer
from ..config import StudioConfig
from ..errors import DesignStoreError, EmptyInstruction
from ..logging_setup import preview
from ..models import (
    CustomizationRequest,
    GenerationResult,
    ImagePayload,
    JewelrySuggestion,
    ManualAttributeSelection,
    SavedDesign,
    VariationSet,
)
from ..services import DesignStore, GeminiImageClient, SupabaseDesignStore
from ..utils.description_synthesizer import (
    CustomizationMode,
    build_generation_prompt,
    is_customization_provided,
    synthesize,
)


logger = logging.getLogger(__name__)


# Fixed order; callers map result positions to these labels themselves.
VARIATION_ANGLES = (
    "front",
    "back",
    "top-down (bird's-eye view)",
    "45-degree angle",
)


def build_variation_instructions(original_description: str) -> list[str]:
    """One instruction per angle, in VARIATION_ANGLES order."""
    return [
        f"Show a clear {angle} view of the jewelry from this image, maintaining the style "
        f'and details consistent with the original concept: "{original_description}".'
        for angle in VARIATION_ANGLES
    ]


class DesignPipeline:
    """Jewelry design pipeline.

    Flow for a customization:
    1. Synthesize one instruction from a prompt or manual selections
    2. Wrap it as "modify this image" or "create from scratch"
    3. Ask the image model for exactly one image

    Variations fan a finished design out into four views and keep whatever
    succeeds. Descriptions retry while the text service is overloaded.
    """

    def __init__(self, config: StudioConfig):
        self.config = config

        # Initialize services
        self.image_client = GeminiImageClient(
            config=config.gemini,
            api_key=config.gemini_api_key,
        )
        self.design_store: DesignStore | None = None
        if config.supabase_url and config.supabase_key:
            self.design_store = SupabaseDesignStore(
                url=config.supabase_url,
                key=config.supabase_key,
                table=config.saved_designs_table,
            )

        # Initialize agents
        agent_kwargs = {
            "endpoint": config.azure_openai_endpoint,
            "deployment": config.azure_openai_deployment,
        }
        self.describer = JewelryDescriber(retry=config.retry, **agent_kwargs)
        self.prompt_enhancer = PromptEnhancer(**agent_kwargs)
        self.suggester = JewelrySuggester(**agent_kwargs)

    def build_request(
        self,
        mode: CustomizationMode,
        prompt: str = "",
        selection: ManualAttributeSelection | None = None,
        base_image: ImagePayload | None = None,
    ) -> CustomizationRequest:
        """Synthesize the instruction and validate there is something to do.

        Raises:
            EmptyInstruction: no prompt, no selections and nothing to refine
        """
        instruction = synthesize(
            mode,
            free_text=prompt,
            selection=selection,
            has_base_image=base_image is not None,
        )
        # A bare base image with no manual choices still gets a refinement pass
        refine_only = mode == "manual" and base_image is not None
        if not is_customization_provided(mode, prompt, selection) and not refine_only:
            if base_image is not None:
                raise EmptyInstruction(
                    "Please describe your customization or select manual options for the current base image."
                )
            raise EmptyInstruction("Please describe your new design or select manual options.")

        return CustomizationRequest(instruction=instruction, base_image=base_image)

    async def customize(self, request: CustomizationRequest) -> GenerationResult:
        """Generate a customized design.

        Raises:
            GenerationFailed: the model returned no image
        """
        logger.info(
            f"Customizing jewelry (base image: {request.is_modification}): {preview(request.instruction)}"
        )
        prompt = build_generation_prompt(request.instruction, request.is_modification)
        return await self.image_client.generate(prompt, request.base_image)

    async def _try_generate(
        self,
        instruction: str,
        base_image: ImagePayload,
    ) -> GenerationResult | None:
        """Generate one variation; a failure drops the slot."""
        try:
            return await self.image_client.generate(instruction, base_image)
        except Exception as e:
            logger.warning(f"Variation failed ({e}) for: {preview(instruction)}")
            return None

    async def generate_variations(
        self,
        base_image: ImagePayload,
        original_description: str,
    ) -> VariationSet:
        """Render front, back, top-down and 45-degree views of a design.

        Never raises for per-view failures; the set may hold 0 to 4 images,
        in generation order.
        """
        instructions = build_variation_instructions(original_description)
        logger.info(f"Generating {len(instructions)} variations for: {preview(original_description)}")

        if self.config.variations.parallel:
            outcomes = await asyncio.gather(
                *(self._try_generate(instruction, base_image) for instruction in instructions)
            )
        else:
            outcomes = []
            for instruction in instructions:
                outcomes.append(await self._try_generate(instruction, base_image))

        variations = VariationSet(images=[result for result in outcomes if result is not None])
        logger.info(f"Generated {len(variations)}/{len(instructions)} variations")
        return variations

    async def describe(self, image: ImagePayload) -> str:
        """Write a listing description for a jewelry image."""
        return await self.describer.describe(image)

    async def enhance_prompt(self, prompt: str) -> str:
        """Expand a rough idea into a detailed image prompt."""
        if not prompt.strip():
            raise EmptyInstruction("Please type your initial idea before enhancing.")
        return await self.prompt_enhancer.enhance(prompt)

    async def suggest(self, search_query: str) -> list[JewelrySuggestion]:
        """Suggest jewelry for a search query."""
        return await self.suggester.suggest(search_query)

    def _require_store(self) -> DesignStore:
        if self.design_store is None:
            raise DesignStoreError("Design storage is not configured (set SUPABASE_URL and SUPABASE_KEY).")
        return self.design_store

    def save_design(self, user_id: str, image_data_uri: str, design_prompt: str) -> SavedDesign:
        """Persist a finished design for a user."""
        return self._require_store().save(user_id, image_data_uri, design_prompt)

    def list_designs(self, user_id: str) -> list[SavedDesign]:
        """Fetch a user's saved designs, newest first."""
        return self._require_store().list_for_user(user_id)

    async def close(self):
        """Release HTTP resources."""
        await self.image_client.close()
