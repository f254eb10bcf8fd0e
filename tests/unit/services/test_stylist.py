"""
Unit tests for StylistService.

The backend is an AsyncMock; the request manager runs in simulated time so
routing can be checked through the cooldown windows each call leaves behind.
"""

import json
import logging
from unittest.mock import AsyncMock, Mock

import pytest

from wardrobe_throttle.config import ThrottleConfig
from wardrobe_throttle.exceptions import GenerationError
from wardrobe_throttle.live.audio import encode_base64, float_to_pcm16
from wardrobe_throttle.live.session import LiveConsultSession, SessionState
from wardrobe_throttle.models import (
    BoutiqueResults,
    Category,
    ClothingItem,
    GeoLocation,
    ShoppingRecommendation,
)
from wardrobe_throttle.protocols.backend import GenerateContentResponse, VideoOperation
from wardrobe_throttle.services.stylist import (
    BACKGROUND_INSTRUCTION,
    DEEP_STYLIST_INSTRUCTION,
    StylistService,
)
from wardrobe_throttle.throttle.manager import RequestManager
from wardrobe_throttle.types import TrafficClass


def text_response(text, grounding=None):
    return GenerateContentResponse.model_validate(
        {
            "text": text,
            "candidates": [{"parts": [], "groundingChunks": grounding or []}],
        }
    )


def image_response(data):
    return GenerateContentResponse.model_validate(
        {
            "candidates": [
                {"parts": [{"inlineData": {"data": data, "mimeType": "image/png"}}]}
            ]
        }
    )


@pytest.fixture
def backend():
    backend = Mock()
    backend.generate_content = AsyncMock()
    backend.generate_videos = AsyncMock()
    backend.get_video_operation = AsyncMock()
    backend.download = AsyncMock()
    backend.connect_live = AsyncMock()
    return backend


@pytest.fixture
def manager(fake_clock):
    return RequestManager(
        ThrottleConfig(prometheus_enabled=False),
        clock=fake_clock,
        sleep=fake_clock.sleep,
    )


@pytest.fixture
def stylist(backend, manager, fake_clock):
    return StylistService(backend, manager, sleep=fake_clock.sleep)


@pytest.fixture
def items():
    return [
        ClothingItem(id="1", category=Category.TOPS, color="red", tags=["casual"]),
        ClothingItem.model_validate(
            {
                "id": "2",
                "imageUrl": "data:image/png;base64,AAA",
                "category": "Bottoms",
                "color": "navy",
                "tags": ["denim", "slim"],
            }
        ),
    ]


class TestProFeatures:
    """Features routed through the PRO traffic class."""

    @pytest.mark.asyncio
    async def test_generate_image(self, stylist, backend, manager):
        backend.generate_content.return_value = image_response("iVBOR")

        async with manager:
            url = await stylist.generate_image("linen suit", aspect_ratio="9:16")

        assert url == "data:image/png;base64,iVBOR"
        model, contents, config = backend.generate_content.call_args.args
        assert model == "gemini-3-pro-image-preview"
        assert contents == [{"parts": [{"text": "linen suit"}]}]
        assert config["imageConfig"] == {"aspectRatio": "9:16", "imageSize": "1K"}
        assert manager.wait_time_seconds(TrafficClass.PRO) == 32
        assert manager.wait_time_seconds(TrafficClass.FLASH) == 0

    @pytest.mark.asyncio
    async def test_generate_image_without_image(self, stylist, backend, manager):
        backend.generate_content.return_value = text_response("sorry")

        async with manager:
            with pytest.raises(GenerationError, match="Generation failed"):
                await stylist.generate_image("linen suit")

    @pytest.mark.asyncio
    async def test_ask_stylist_deep(self, stylist, backend, manager):
        backend.generate_content.return_value = text_response("Go monochrome.")

        async with manager:
            assert await stylist.ask_stylist_deep("What to wear?") == "Go monochrome."

        model, contents, config = backend.generate_content.call_args.args
        assert model == "gemini-3-pro-preview"
        assert contents == "What to wear?"
        assert config["thinkingConfig"] == {"thinkingBudget": 32768}
        assert config["systemInstruction"] == DEEP_STYLIST_INSTRUCTION
        assert manager.wait_time_seconds(TrafficClass.PRO) == 32

    @pytest.mark.asyncio
    async def test_generate_style_video(self, stylist, backend, manager, fake_clock):
        backend.generate_videos.return_value = VideoOperation(name="op-1")
        backend.get_video_operation.side_effect = [
            VideoOperation(name="op-1"),
            VideoOperation.model_validate(
                {"name": "op-1", "done": True, "videoUri": "https://files/v.mp4"}
            ),
        ]
        backend.download.return_value = b"mp4-bytes"

        async with manager:
            assert await stylist.generate_style_video("runway walk") == b"mp4-bytes"

        _, prompt, config = backend.generate_videos.call_args.args
        assert prompt == "runway walk"
        assert config["resolution"] == "720p"
        assert config["aspectRatio"] == "9:16"
        backend.download.assert_awaited_once_with("https://files/v.mp4")
        assert fake_clock.sleeps == [10.0, 10.0]
        # Window starts after the job finished
        assert manager.time_until_available(TrafficClass.PRO) == 32.0

    @pytest.mark.asyncio
    async def test_generate_style_video_without_uri(self, stylist, backend, manager):
        backend.generate_videos.return_value = VideoOperation(done=True)

        async with manager:
            with pytest.raises(GenerationError, match="no download link"):
                await stylist.generate_style_video("runway walk")
        backend.download.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_generate_style_video_error(self, stylist, backend, manager):
        backend.generate_videos.return_value = VideoOperation(
            done=True, error={"message": "blocked"}
        )

        async with manager:
            with pytest.raises(GenerationError, match="blocked"):
                await stylist.generate_style_video("runway walk")

    @pytest.mark.asyncio
    async def test_shopping_recommendations(self, stylist, backend, manager, items):
        payload = {
            "wardrobeAnalysis": "Casual heavy.",
            "styleProfile": {"dominantColors": ["red"], "coreAesthetic": "street"},
            "gaps": [{"category": "Outerwear", "reason": "none owned"}],
            "suggestions": [{"itemType": "Trench coat", "whyItFits": "layers"}],
            "brandMatches": [{"name": "Acme", "style": "minimal", "url": "https://a"}],
        }
        backend.generate_content.return_value = text_response(
            json.dumps(payload),
            grounding=[{"web": {"uri": "https://shop", "title": "Shop"}}],
        )

        async with manager:
            result = await stylist.get_shopping_recommendations(items)

        assert isinstance(result, ShoppingRecommendation)
        assert result.wardrobe_analysis == "Casual heavy."
        assert result.style_profile.dominant_colors == ["red"]
        assert result.gaps[0].category == "Outerwear"
        assert result.suggestions[0].item_type == "Trench coat"
        assert result.brand_matches[0].name == "Acme"
        assert result.sources[0].web is not None
        assert result.sources[0].web.uri == "https://shop"

        _, contents, config = backend.generate_content.call_args.args
        assert "Tops: red (casual)" in contents
        assert "Bottoms: navy (denim, slim)" in contents
        assert config["tools"] == [{"googleSearch": {}}]
        assert config["responseMimeType"] == "application/json"

    @pytest.mark.asyncio
    async def test_shopping_recommendations_malformed(self, stylist, backend, manager):
        backend.generate_content.return_value = text_response("{not json")

        async with manager:
            with pytest.raises(GenerationError, match="malformed JSON"):
                await stylist.get_shopping_recommendations([])


class TestFlashFeatures:
    """Features routed through the FLASH traffic class."""

    @pytest.mark.asyncio
    async def test_fast_analyze(self, stylist, backend, manager):
        backend.generate_content.return_value = text_response("Looks sharp.")

        async with manager:
            assert await stylist.fast_analyze("rate my fit") == "Looks sharp."

        assert backend.generate_content.call_args.args == (
            "gemini-flash-lite-latest",
            "rate my fit",
        )
        assert manager.wait_time_seconds(TrafficClass.FLASH) == 5
        assert manager.wait_time_seconds(TrafficClass.PRO) == 0

    @pytest.mark.asyncio
    async def test_edit_image(self, stylist, backend, manager):
        backend.generate_content.return_value = image_response("EDITED")

        async with manager:
            assert await stylist.edit_image("ORIGINAL", "make it blue") == "EDITED"

        model, contents = backend.generate_content.call_args.args
        assert model == "gemini-2.5-flash-image"
        assert contents["parts"][0] == {
            "inlineData": {"data": "ORIGINAL", "mimeType": "image/jpeg"}
        }
        assert contents["parts"][1] == {"text": "make it blue"}

    @pytest.mark.asyncio
    async def test_edit_image_returns_input_without_image(
        self, stylist, backend, manager
    ):
        backend.generate_content.return_value = text_response("cannot edit")

        async with manager:
            assert await stylist.edit_image("ORIGINAL", "make it blue") == "ORIGINAL"

    @pytest.mark.asyncio
    async def test_clean_image_background(self, stylist, backend, manager):
        backend.generate_content.return_value = image_response("WHITE")

        async with manager:
            assert await stylist.clean_image_background("PHOTO") == "WHITE"

        _, contents = backend.generate_content.call_args.args
        assert contents["parts"][1] == {"text": BACKGROUND_INSTRUCTION}

    @pytest.mark.asyncio
    async def test_find_local_boutiques(self, stylist, backend, manager):
        backend.generate_content.return_value = text_response(
            "Try Atelier Nord.",
            grounding=[{"maps": {"uri": "https://maps/1", "title": "Atelier Nord"}}],
        )

        async with manager:
            result = await stylist.find_local_boutiques(GeoLocation(lat=52.5, lng=13.4))

        assert isinstance(result, BoutiqueResults)
        assert result.text == "Try Atelier Nord."
        assert result.places[0].maps is not None
        assert result.places[0].maps.title == "Atelier Nord"

        model, _, config = backend.generate_content.call_args.args
        assert model == "gemini-2.5-flash"
        assert config["tools"] == [{"googleMaps": {}}, {"googleSearch": {}}]
        assert config["toolConfig"]["retrievalConfig"]["latLng"] == {
            "latitude": 52.5,
            "longitude": 13.4,
        }

    @pytest.mark.asyncio
    async def test_analyze_clothing_image(self, stylist, backend, manager):
        backend.generate_content.return_value = text_response(
            json.dumps(
                {
                    "category": "Shoes",
                    "color": "white",
                    "season": ["Summer"],
                    "occasion": ["Casual"],
                    "tags": ["sneaker"],
                }
            )
        )

        async with manager:
            result = await stylist.analyze_clothing_image("PHOTO")

        assert result.known_category is Category.SHOES
        assert result.color == "white"
        assert result.tags == ["sneaker"]

    @pytest.mark.asyncio
    async def test_analyze_clothing_image_empty_text(self, stylist, backend, manager):
        backend.generate_content.return_value = text_response(None)

        async with manager:
            result = await stylist.analyze_clothing_image("PHOTO")

        assert result.category is None
        assert result.tags == []

    @pytest.mark.asyncio
    async def test_separate_clothing_items(self, stylist, backend, manager):
        backend.generate_content.return_value = text_response(
            json.dumps(
                {
                    "items": [
                        {"category": "Tops", "color": "black"},
                        {"category": "Bottoms", "color": "grey"},
                    ]
                }
            )
        )

        async with manager:
            result = await stylist.separate_clothing_items("GROUP")

        assert [item.color for item in result] == ["black", "grey"]
        assert all(item.image == "GROUP" for item in result)

    @pytest.mark.asyncio
    async def test_separate_clothing_items_empty(self, stylist, backend, manager):
        backend.generate_content.return_value = text_response("")

        async with manager:
            assert await stylist.separate_clothing_items("GROUP") == []

    @pytest.mark.asyncio
    async def test_suggest_outfits(self, stylist, backend, manager, items):
        backend.generate_content.return_value = text_response('[["1", "2"], ["2"]]')

        async with manager:
            outfits = await stylist.suggest_outfits(items, "brunch")

        assert outfits == [["1", "2"], ["2"]]
        _, contents, _ = backend.generate_content.call_args.args
        assert "ID:1, Tops, red" in contents
        assert "ID:2, Bottoms, navy" in contents
        assert '"brunch"' in contents

    @pytest.mark.asyncio
    async def test_suggest_outfits_wrong_shape(self, stylist, backend, manager, items):
        backend.generate_content.return_value = text_response('{"outfits": []}')

        async with manager:
            with pytest.raises(GenerationError):
                await stylist.suggest_outfits(items, "brunch")

    @pytest.mark.asyncio
    async def test_flash_calls_are_spaced(self, stylist, backend, manager, fake_clock):
        backend.generate_content.return_value = text_response("ok")

        async with manager:
            await stylist.fast_analyze("one")
            await stylist.fast_analyze("two")

        assert fake_clock.sleeps == [5.0]


class TestUnthrottledFeatures:
    """Speech and live consultation bypass the lane."""

    @pytest.mark.asyncio
    async def test_synthesize_speech(self, stylist, backend, manager):
        pcm = float_to_pcm16([0.0, 0.5])
        backend.generate_content.return_value = image_response(encode_base64(pcm))

        assert await stylist.synthesize_speech("Hello") == pcm

        model, _, config = backend.generate_content.call_args.args
        assert model == "gemini-2.5-flash-preview-tts"
        voice = config["speechConfig"]["voiceConfig"]["prebuiltVoiceConfig"]
        assert voice == {"voiceName": "Puck"}
        assert manager.get_metrics()["submitted"] == 0
        assert manager.is_running() is False

    @pytest.mark.asyncio
    async def test_synthesize_speech_without_audio(self, stylist, backend):
        backend.generate_content.return_value = text_response("")
        assert await stylist.synthesize_speech("Hello") is None

    @pytest.mark.asyncio
    async def test_play_speech(self, stylist, backend):
        backend.generate_content.return_value = image_response(
            encode_base64(float_to_pcm16([0.5, -0.5]))
        )
        output = Mock()
        output.play.return_value = Mock(duration=2 / 24000)

        buffer = await stylist.play_speech("Hello", output)

        assert buffer is output.play.return_value
        samples, rate = output.play.call_args.args
        assert samples == [0.5, -0.5]
        assert rate == 24000

    @pytest.mark.asyncio
    async def test_play_speech_logs_duration(self, stylist, backend, caplog):
        backend.generate_content.return_value = image_response(
            encode_base64(float_to_pcm16([0.0] * 12000))
        )
        output = Mock()

        with caplog.at_level(logging.DEBUG, logger="wardrobe_throttle"):
            await stylist.play_speech("Hello", output)

        assert "Playing 0.50s of speech" in caplog.text

    @pytest.mark.asyncio
    async def test_play_speech_without_audio(self, stylist, backend):
        backend.generate_content.return_value = text_response("")
        output = Mock()

        assert await stylist.play_speech("Hello", output) is None
        output.play.assert_not_called()

    @pytest.mark.asyncio
    async def test_start_live_consult(self, stylist, backend):
        backend.connect_live.return_value = AsyncMock()

        session = await stylist.start_live_consult(Mock(), Mock())

        assert isinstance(session, LiveConsultSession)
        assert session.state is SessionState.STREAMING
        model = backend.connect_live.call_args.args[0]
        assert model == "gemini-2.5-flash-native-audio-preview-09-2025"
        await session.stop()
