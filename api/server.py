"""FastAPI server for Sparkle Studio.

Serves the jewelry customizer and product pages:
- customize: prompt or manual selections, optional base image (data URI)
- variations: four views of a finished design
- describe: listing copy for a jewelry image
- enhance-prompt / suggest: text helpers
- designs: save and list a user's finished designs
"""

import logging
from contextlib import asynccontextmanager
from typing import Literal

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from sparkle_studio import __version__
from sparkle_studio.config import load_config
from sparkle_studio.logging_setup import setup_logging
from sparkle_studio.models import ImagePayload, JewelrySuggestion, ManualAttributeSelection, SavedDesign
from sparkle_studio.pipeline import DesignPipeline


logger = logging.getLogger(__name__)

config = load_config()
setup_logging(config.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Close the pipeline's HTTP clients on shutdown."""
    yield
    if _pipeline is not None:
        await _pipeline.close()


app = FastAPI(
    title="Sparkle Studio API",
    description="Generative jewelry design",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class CustomizeRequest(BaseModel):
    """Request body for a customization."""
    mode: Literal["prompt", "manual"] = "prompt"
    prompt: str = ""
    manual: ManualAttributeSelection | None = None
    base_image: str | None = None  # Base64 data URL


class CustomizeResponse(BaseModel):
    success: bool
    image: str | None = None  # Data URL of the generated design
    instruction: str | None = None
    error: str | None = None


class VariationsRequest(BaseModel):
    base_image: str = Field(min_length=1)  # Base64 data URL
    original_description: str


class VariationsResponse(BaseModel):
    """Fewer than `requested` images means some views could not be produced."""
    success: bool
    variations: list[str] = Field(default_factory=list)
    requested: int = 4
    error: str | None = None


class DescribeRequest(BaseModel):
    image: str = Field(min_length=1)  # Base64 data URL


class DescribeResponse(BaseModel):
    success: bool
    description: str | None = None
    error: str | None = None


class EnhancePromptRequest(BaseModel):
    prompt: str


class EnhancePromptResponse(BaseModel):
    success: bool
    enhanced_prompt: str | None = None
    error: str | None = None


class SuggestRequest(BaseModel):
    query: str


class SuggestResponse(BaseModel):
    suggestions: list[JewelrySuggestion] = Field(default_factory=list)


class SaveDesignRequest(BaseModel):
    user_id: str
    image: str  # Base64 data URL
    design_prompt: str


class SaveDesignResponse(BaseModel):
    success: bool
    design: SavedDesign | None = None
    error: str | None = None


class DesignListResponse(BaseModel):
    success: bool
    designs: list[SavedDesign] = Field(default_factory=list)
    error: str | None = None


# Initialize pipeline (will be done on first request)
_pipeline: DesignPipeline | None = None


def get_pipeline() -> DesignPipeline:
    """Get or create the pipeline instance."""
    global _pipeline
    if _pipeline is None:
        _pipeline = DesignPipeline(config)
    return _pipeline


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "Sparkle Studio API", "version": __version__}


@app.get("/health")
async def health():
    """Detailed health check."""
    pipeline = get_pipeline()
    image_ok = await pipeline.image_client.check_connection()

    return {
        "status": "ok" if image_ok else "degraded",
        "image_model": "connected" if image_ok else "disconnected",
        "design_store": "configured" if pipeline.design_store is not None else "not configured",
    }


@app.post("/api/customize", response_model=CustomizeResponse)
async def customize(request: CustomizeRequest):
    """Generate a new or modified jewelry design."""
    instruction = None
    try:
        pipeline = get_pipeline()
        base_image = ImagePayload.from_data_uri(request.base_image) if request.base_image else None

        design_request = pipeline.build_request(
            mode=request.mode,
            prompt=request.prompt,
            selection=request.manual,
            base_image=base_image,
        )
        instruction = design_request.instruction

        result = await pipeline.customize(design_request)
        return CustomizeResponse(success=True, image=result.data_uri, instruction=instruction)

    except Exception as e:
        logger.exception("Customization failed")
        return CustomizeResponse(success=False, instruction=instruction, error=str(e))


@app.post("/api/variations", response_model=VariationsResponse)
async def variations(request: VariationsRequest):
    """Generate front, back, top-down and 45-degree views of a design."""
    try:
        pipeline = get_pipeline()
        base_image = ImagePayload.from_data_uri(request.base_image)

        variation_set = await pipeline.generate_variations(base_image, request.original_description)
        return VariationsResponse(success=True, variations=variation_set.data_uris)

    except Exception as e:
        logger.exception("Variation generation failed")
        return VariationsResponse(success=False, error=str(e))


@app.post("/api/describe", response_model=DescribeResponse)
async def describe(request: DescribeRequest):
    """Write listing copy for a jewelry image."""
    try:
        pipeline = get_pipeline()
        image = ImagePayload.from_data_uri(request.image)

        description = await pipeline.describe(image)
        return DescribeResponse(success=True, description=description)

    except Exception as e:
        logger.exception("Description generation failed")
        return DescribeResponse(success=False, error=str(e))


@app.post("/api/enhance-prompt", response_model=EnhancePromptResponse)
async def enhance_prompt(request: EnhancePromptRequest):
    """Expand a rough idea into a detailed image prompt."""
    try:
        enhanced = await get_pipeline().enhance_prompt(request.prompt)
        return EnhancePromptResponse(success=True, enhanced_prompt=enhanced)

    except Exception as e:
        logger.exception("Prompt enhancement failed")
        return EnhancePromptResponse(success=False, error=str(e))


@app.post("/api/suggest", response_model=SuggestResponse)
async def suggest(request: SuggestRequest):
    """Suggest jewelry for a search query; failures yield no suggestions."""
    try:
        suggestions = await get_pipeline().suggest(request.query)
    except Exception:
        logger.exception("Suggestion failed")
        suggestions = []
    return SuggestResponse(suggestions=suggestions)


@app.post("/api/designs", response_model=SaveDesignResponse)
def save_design(request: SaveDesignRequest):
    """Save a finished design for a user."""
    try:
        design = get_pipeline().save_design(request.user_id, request.image, request.design_prompt)
        return SaveDesignResponse(success=True, design=design)

    except Exception as e:
        logger.exception("Saving design failed")
        return SaveDesignResponse(success=False, error=str(e))


@app.get("/api/designs/{user_id}", response_model=DesignListResponse)
def list_designs(user_id: str):
    """List a user's saved designs, newest first."""
    try:
        designs = get_pipeline().list_designs(user_id)
        return DesignListResponse(success=True, designs=designs)

    except Exception as e:
        logger.exception("Fetching designs failed")
        return DesignListResponse(success=False, error=str(e))


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
