"""Tests for the design pipeline with mocked services."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from sparkle_studio.config import StudioConfig, VariationConfig
from sparkle_studio.errors import DesignStoreError, EmptyInstruction, GenerationFailed
from sparkle_studio.models import GenerationResult, ImagePayload, ManualAttributeSelection
from sparkle_studio.pipeline import VARIATION_ANGLES, DesignPipeline, build_variation_instructions


def image_result(tag: bytes) -> GenerationResult:
    return GenerationResult(image=ImagePayload(data=tag, mime_type="image/png"))


class TestPipelineInitialization:
    """Tests for pipeline initialization."""

    def test_pipeline_creates_with_config(self, studio_config):
        pipeline = DesignPipeline(studio_config)

        assert pipeline.config is studio_config
        assert pipeline.image_client is not None
        assert pipeline.describer is not None
        assert pipeline.prompt_enhancer is not None
        assert pipeline.suggester is not None
        assert pipeline.design_store is None

    def test_store_created_when_supabase_configured(self):
        config = StudioConfig(supabase_url="https://example.supabase.co", supabase_key="anon")
        pipeline = DesignPipeline(config)

        assert pipeline.design_store is not None

    def test_describer_uses_retry_config(self):
        config = StudioConfig(retry={"max_attempts": 5, "delay": 0.1})
        pipeline = DesignPipeline(config)

        assert pipeline.describer.retry.max_attempts == 5
        assert pipeline.describer.retry.delay == 0.1


class TestBuildRequest:
    """Tests for instruction synthesis and validation."""

    @pytest.fixture
    def pipeline(self, studio_config):
        return DesignPipeline(studio_config)

    def test_prompt_mode(self, pipeline):
        request = pipeline.build_request("prompt", prompt=" Emerald drop earrings ")

        assert request.instruction == "Emerald drop earrings"
        assert request.base_image is None
        assert not request.is_modification

    def test_empty_prompt_rejected(self, pipeline):
        with pytest.raises(EmptyInstruction, match="new design"):
            pipeline.build_request("prompt", prompt="   ")

    def test_empty_prompt_with_base_image_rejected(self, pipeline, base_image):
        with pytest.raises(EmptyInstruction, match="current base image"):
            pipeline.build_request("prompt", prompt="", base_image=base_image)

    def test_manual_nothing_set_with_base_image_refines(self, pipeline, base_image):
        request = pipeline.build_request("manual", selection=ManualAttributeSelection(), base_image=base_image)

        assert request.instruction.startswith("Subtly enhance")
        assert request.is_modification

    def test_manual_nothing_set_without_base_image_rejected(self, pipeline):
        with pytest.raises(EmptyInstruction):
            pipeline.build_request("manual", selection=ManualAttributeSelection())

    def test_manual_blank_fields_without_base_image_rejected(self, pipeline):
        selection = ManualAttributeSelection(material=" ", engraving_text="   ")

        with pytest.raises(EmptyInstruction, match="new design"):
            pipeline.build_request("manual", selection=selection)

    def test_manual_gemstone_removal_is_a_change(self, pipeline):
        selection = ManualAttributeSelection(gemstone="None", gemstone_cut="Pear")

        request = pipeline.build_request("manual", selection=selection)

        assert request.instruction.startswith("Remove any existing gemstones")

    def test_gate_uses_customization_check(self, pipeline, monkeypatch):
        monkeypatch.setattr(
            "sparkle_studio.pipeline.design_pipeline.is_customization_provided",
            lambda mode, free_text, selection: False,
        )

        with pytest.raises(EmptyInstruction):
            pipeline.build_request("prompt", prompt="A gold ring")


class TestCustomize:
    """Tests for single-image generation."""

    @pytest.fixture
    def pipeline(self, studio_config):
        pipeline = DesignPipeline(studio_config)
        pipeline.image_client.generate = AsyncMock(return_value=image_result(b"ring"))
        return pipeline

    @pytest.mark.asyncio
    async def test_from_scratch(self, pipeline):
        request = pipeline.build_request("prompt", prompt="A gold ring")

        result = await pipeline.customize(request)

        assert result.image.data == b"ring"
        prompt, base = pipeline.image_client.generate.await_args.args
        assert prompt.startswith("Generate a new")
        assert '"A gold ring"' in prompt
        assert base is None

    @pytest.mark.asyncio
    async def test_modification(self, pipeline, base_image):
        selection = ManualAttributeSelection(gemstone="Ruby")
        request = pipeline.build_request("manual", selection=selection, base_image=base_image)

        await pipeline.customize(request)

        prompt, base = pipeline.image_client.generate.await_args.args
        assert prompt.startswith("Using the provided image as a base")
        assert "Set gemstone to Ruby." in prompt
        assert base is base_image

    @pytest.mark.asyncio
    async def test_generation_failure_propagates(self, pipeline):
        pipeline.image_client.generate = AsyncMock(side_effect=GenerationFailed("no image"))
        request = pipeline.build_request("prompt", prompt="A gold ring")

        with pytest.raises(GenerationFailed):
            await pipeline.customize(request)


class TestVariations:
    """Tests for multi-view generation."""

    def test_instructions(self):
        instructions = build_variation_instructions("A silver moon pendant")

        assert len(instructions) == 4
        for angle, instruction in zip(VARIATION_ANGLES, instructions):
            assert instruction.startswith(f"Show a clear {angle} view of the jewelry from this image")
            assert instruction.endswith('original concept: "A silver moon pendant".')
        assert "bird's-eye" in instructions[2]
        assert "45-degree" in instructions[3]

    @pytest.fixture(params=[True, False], ids=["parallel", "sequential"])
    def pipeline(self, request):
        config = StudioConfig(gemini_api_key="test-key", variations=VariationConfig(parallel=request.param))
        return DesignPipeline(config)

    @pytest.mark.asyncio
    async def test_all_succeed(self, pipeline, base_image):
        pipeline.image_client.generate = AsyncMock(side_effect=[
            image_result(b"front"), image_result(b"back"), image_result(b"top"), image_result(b"angle"),
        ])

        variations = await pipeline.generate_variations(base_image, "A silver moon pendant")

        assert [r.image.data for r in variations.images] == [b"front", b"back", b"top", b"angle"]
        for call in pipeline.image_client.generate.await_args_list:
            assert call.args[1] is base_image

    @pytest.mark.asyncio
    async def test_two_failures_keep_order_of_successes(self, pipeline, base_image):
        pipeline.image_client.generate = AsyncMock(side_effect=[
            GenerationFailed("blocked"),
            image_result(b"back"),
            RuntimeError("503 Service Unavailable"),
            image_result(b"angle"),
        ])

        variations = await pipeline.generate_variations(base_image, "A silver moon pendant")

        assert len(variations) == 2
        assert [r.image.data for r in variations.images] == [b"back", b"angle"]
        assert pipeline.image_client.generate.await_count == 4

    @pytest.mark.asyncio
    async def test_all_fail_is_empty_not_error(self, pipeline, base_image):
        pipeline.image_client.generate = AsyncMock(side_effect=GenerationFailed("no image"))

        variations = await pipeline.generate_variations(base_image, "A silver moon pendant")

        assert len(variations) == 0
        assert variations.data_uris == []

    @pytest.mark.asyncio
    async def test_order_follows_angles_when_completion_order_differs(self, base_image):
        config = StudioConfig(gemini_api_key="test-key", variations=VariationConfig(parallel=True))
        pipeline = DesignPipeline(config)
        delays = {"front": 0.03, "back": 0.0, "top-down": 0.02, "45-degree": 0.01}

        async def slow_generate(instruction, base):
            angle = next(key for key in delays if f"clear {key}" in instruction)
            await asyncio.sleep(delays[angle])
            return image_result(angle.encode())

        pipeline.image_client.generate = slow_generate

        variations = await pipeline.generate_variations(base_image, "ring")

        assert [r.image.data for r in variations.images] == [b"front", b"back", b"top-down", b"45-degree"]


class TestTextFlows:
    """Tests for describe / enhance / suggest delegation."""

    @pytest.fixture
    def pipeline(self, studio_config):
        return DesignPipeline(studio_config)

    @pytest.mark.asyncio
    async def test_describe_delegates(self, pipeline, base_image):
        pipeline.describer.describe = AsyncMock(return_value="A radiant ring.")

        assert await pipeline.describe(base_image) == "A radiant ring."
        pipeline.describer.describe.assert_awaited_once_with(base_image)

    @pytest.mark.asyncio
    async def test_enhance_rejects_blank(self, pipeline):
        pipeline.prompt_enhancer.enhance = AsyncMock()

        with pytest.raises(EmptyInstruction):
            await pipeline.enhance_prompt("  ")
        pipeline.prompt_enhancer.enhance.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_enhance_delegates(self, pipeline):
        pipeline.prompt_enhancer.enhance = AsyncMock(return_value="A polished 18k gold band")

        assert await pipeline.enhance_prompt("gold ring") == "A polished 18k gold band"


class TestDesignStorage:
    """Tests for saving designs through the pipeline."""

    def test_save_without_store_fails(self, studio_config):
        pipeline = DesignPipeline(studio_config)

        with pytest.raises(DesignStoreError, match="not configured"):
            pipeline.save_design("user-1", "data:image/png;base64,AAAA", "A gold ring")

    def test_save_and_list_delegate(self, studio_config):
        pipeline = DesignPipeline(studio_config)
        pipeline.design_store = MagicMock()

        pipeline.save_design("user-1", "data:image/png;base64,AAAA", "A gold ring")
        pipeline.list_designs("user-1")

        pipeline.design_store.save.assert_called_once_with("user-1", "data:image/png;base64,AAAA", "A gold ring")
        pipeline.design_store.list_for_user.assert_called_once_with("user-1")
