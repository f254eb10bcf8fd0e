# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Stylist service: every AI feature of the wardrobe application.

Each throttled feature wraps its backend call in a zero-argument coroutine
and hands it to the RequestManager with the traffic class of the model it
targets. Speech synthesis and the live consultation bypass the lane: they
are not single request/response calls against the rate-limited tiers.
"""

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

from pydantic import TypeAdapter, ValidationError

from ..config import LiveConfig, ModelConfig
from ..exceptions import GenerationError
from ..live.audio import decode_base64, pcm16_duration, pcm16_to_float
from ..live.session import LiveConsultSession, TextHandler
from ..models.wardrobe import (
    BoutiqueResults,
    ClothingCategorization,
    ClothingItem,
    GeoLocation,
    SeparatedItem,
    ShoppingRecommendation,
)
from ..protocols.audio import AudioOutputProtocol, ScheduledBufferProtocol
from ..protocols.backend import GenerativeBackendProtocol
from ..throttle.manager import RequestManager
from ..types.traffic import TrafficClass
from .polling import poll_until_done

logger = logging.getLogger(__name__)

DEEP_STYLIST_INSTRUCTION = (
    "You are a senior fashion director. Analyze the user request with extreme "
    "depth, considering archival fashion, color theory, and lifestyle constraints."
)
BOUTIQUE_QUESTION = (
    "What are the best independent clothing boutiques or tailors nearby?"
)
CATEGORIZE_INSTRUCTION = (
    "Categorize this clothing item. Return JSON: category, color, season, "
    "occasion, tags."
)
SEPARATE_INSTRUCTION = (
    "Detect and separate distinct clothing items in this photo. Return a JSON "
    "list of items with their category, color, and metadata."
)
BACKGROUND_INSTRUCTION = "Remove background, pure white."

_STRING = {"type": "STRING"}
_STRING_LIST = {"type": "ARRAY", "items": _STRING}

CATEGORIZATION_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "category": _STRING,
        "color": _STRING,
        "season": _STRING_LIST,
        "occasion": _STRING_LIST,
        "tags": _STRING_LIST,
    },
}

SEPARATION_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {"items": {"type": "ARRAY", "items": CATEGORIZATION_SCHEMA}},
}


def _object_of(*names: str) -> dict[str, Any]:
    return {"type": "OBJECT", "properties": {name: _STRING for name in names}}


SHOPPING_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "wardrobeAnalysis": _STRING,
        "styleProfile": {
            "type": "OBJECT",
            "properties": {
                "dominantColors": _STRING_LIST,
                "topOccasions": _STRING_LIST,
                "coreAesthetic": _STRING,
            },
        },
        "gaps": {"type": "ARRAY", "items": _object_of("category", "reason")},
        "suggestions": {
            "type": "ARRAY",
            "items": _object_of("itemType", "whyItFits", "stylingIdea"),
        },
        "brandMatches": {
            "type": "ARRAY",
            "items": _object_of("name", "style", "url"),
        },
    },
}

_OUTFITS = TypeAdapter(list[list[str]])


def _image_part(base64_image: str, mime_type: str = "image/jpeg") -> dict[str, Any]:
    return {"inlineData": {"data": base64_image, "mimeType": mime_type}}


def _image_request(base64_image: str, instruction: str) -> list[dict[str, Any]]:
    return [{"parts": [_image_part(base64_image), {"text": instruction}]}]


def _load_json(text: str | None, default: str) -> Any:
    """Parse a JSON answer; an empty answer counts as `default`."""
    try:
        return json.loads(text or default)
    except json.JSONDecodeError as e:
        raise GenerationError(f"Backend returned malformed JSON: {e}") from e


class StylistService:
    """
    AI styling features routed through the shared request manager.

    PRO features: generate_image, ask_stylist_deep, generate_style_video,
    get_shopping_recommendations.

    FLASH features: edit_image, fast_analyze, find_local_boutiques,
    analyze_clothing_image, separate_clothing_items, clean_image_background,
    suggest_outfits.

    Unthrottled: synthesize_speech, play_speech, start_live_consult.
    """

    def __init__(
        self,
        backend: GenerativeBackendProtocol,
        manager: RequestManager,
        models: ModelConfig | None = None,
        live: LiveConfig | None = None,
        *,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.backend = backend
        self.manager = manager
        self.models = models or ModelConfig()
        self.live = live or LiveConfig()
        self._sleep = sleep

    async def _pro(self, operation: Callable[[], Awaitable[Any]]) -> Any:
        return await self.manager.enqueue(TrafficClass.PRO, operation)

    async def _flash(self, operation: Callable[[], Awaitable[Any]]) -> Any:
        return await self.manager.enqueue(TrafficClass.FLASH, operation)

    # PRO features

    async def generate_image(
        self, prompt: str, aspect_ratio: str = "1:1", size: str = "1K"
    ) -> str:
        """Generate an image; returns a PNG data URL."""

        async def call() -> str:
            response = await self.backend.generate_content(
                self.models.image_model,
                [{"parts": [{"text": prompt}]}],
                {
                    "imageConfig": {"aspectRatio": aspect_ratio, "imageSize": size},
                    "tools": [{"googleSearch": {}}],
                },
            )
            data = response.first_inline_data()
            if data is None:
                raise GenerationError("Generation failed")
            return f"data:image/png;base64,{data}"

        return await self._pro(call)

    async def ask_stylist_deep(self, message: str) -> str:
        """Long-form styling advice from the high-capability model."""

        async def call() -> str:
            response = await self.backend.generate_content(
                self.models.deep_model,
                message,
                {
                    "thinkingConfig": {"thinkingBudget": self.models.thinking_budget},
                    "systemInstruction": DEEP_STYLIST_INSTRUCTION,
                },
            )
            return response.text or ""

        return await self._pro(call)

    async def generate_style_video(self, prompt: str) -> bytes:
        """
        Generate a short vertical style video.

        The job is polled at a fixed interval inside the lane slot, so later
        requests of either class wait until the video is ready.
        """

        async def call() -> bytes:
            operation = await self.backend.generate_videos(
                self.models.video_model,
                prompt,
                {
                    "numberOfVideos": 1,
                    "resolution": self.models.video_resolution,
                    "aspectRatio": self.models.video_aspect_ratio,
                },
            )
            operation = await poll_until_done(
                operation,
                self.backend.get_video_operation,
                self.models.video_poll_interval,
                sleep=self._sleep,
            )
            if operation.error:
                raise GenerationError(f"Video generation failed: {operation.error}")
            if not operation.video_uri:
                raise GenerationError("Video generation returned no download link")
            return await self.backend.download(operation.video_uri)

        return await self._pro(call)

    async def get_shopping_recommendations(
        self, items: Sequence[ClothingItem]
    ) -> ShoppingRecommendation:
        """Analyse the wardrobe and suggest grounded purchases."""
        wardrobe_context = "\n".join(item.context_line() for item in items)

        async def call() -> ShoppingRecommendation:
            response = await self.backend.generate_content(
                self.models.shopping_model,
                f"User Wardrobe:\n{wardrobe_context}\nAnalyze style DNA, identify "
                "gaps, and suggest investments with Google Search grounding. "
                "Return JSON.",
                {
                    "tools": [{"googleSearch": {}}],
                    "responseMimeType": "application/json",
                    "responseSchema": SHOPPING_SCHEMA,
                },
            )
            payload = _load_json(response.text, "{}")
            try:
                recommendation = ShoppingRecommendation.model_validate(payload)
            except ValidationError as e:
                raise GenerationError(f"Unexpected recommendation shape: {e}") from e
            recommendation.sources = response.grounding_chunks
            return recommendation

        return await self._pro(call)

    # FLASH features

    async def _edit(self, model: str, base64_image: str, instruction: str) -> str:
        response = await self.backend.generate_content(
            model,
            {"parts": [_image_part(base64_image), {"text": instruction}]},
        )
        data = response.first_inline_data()
        return data if data is not None else base64_image

    async def edit_image(self, base64_image: str, prompt: str) -> str:
        """Edit an image; returns the input unchanged if no image came back."""
        return await self._flash(
            lambda: self._edit(self.models.edit_model, base64_image, prompt)
        )

    async def clean_image_background(self, base64_image: str) -> str:
        """Replace the background with pure white."""
        return await self._flash(
            lambda: self._edit(
                self.models.background_model, base64_image, BACKGROUND_INSTRUCTION
            )
        )

    async def fast_analyze(self, text: str) -> str:
        async def call() -> str:
            response = await self.backend.generate_content(self.models.fast_model, text)
            return response.text or ""

        return await self._flash(call)

    async def find_local_boutiques(self, location: GeoLocation) -> BoutiqueResults:
        """Boutiques and tailors near a location, grounded on maps and search."""

        async def call() -> BoutiqueResults:
            response = await self.backend.generate_content(
                self.models.maps_model,
                BOUTIQUE_QUESTION,
                {
                    "tools": [{"googleMaps": {}}, {"googleSearch": {}}],
                    "toolConfig": {
                        "retrievalConfig": {
                            "latLng": {
                                "latitude": location.lat,
                                "longitude": location.lng,
                            }
                        }
                    },
                },
            )
            return BoutiqueResults(
                text=response.text or "", places=response.grounding_chunks
            )

        return await self._flash(call)

    async def analyze_clothing_image(self, base64_image: str) -> ClothingCategorization:
        async def call() -> ClothingCategorization:
            response = await self.backend.generate_content(
                self.models.categorize_model,
                _image_request(base64_image, CATEGORIZE_INSTRUCTION),
                {
                    "responseMimeType": "application/json",
                    "responseSchema": CATEGORIZATION_SCHEMA,
                },
            )
            payload = _load_json(response.text, "{}")
            try:
                return ClothingCategorization.model_validate(payload)
            except ValidationError as e:
                raise GenerationError(f"Unexpected categorization shape: {e}") from e

        return await self._flash(call)

    async def separate_clothing_items(self, base64_image: str) -> list[SeparatedItem]:
        """Detect the distinct items in a photo; each keeps the source image."""

        async def call() -> list[SeparatedItem]:
            response = await self.backend.generate_content(
                self.models.separate_model,
                _image_request(base64_image, SEPARATE_INSTRUCTION),
                {
                    "responseMimeType": "application/json",
                    "responseSchema": SEPARATION_SCHEMA,
                },
            )
            payload = _load_json(response.text, '{"items": []}')
            raw_items = payload.get("items") if isinstance(payload, dict) else None
            try:
                return [
                    SeparatedItem.model_validate({**raw, "image": base64_image})
                    for raw in raw_items or []
                ]
            except (TypeError, ValidationError) as e:
                raise GenerationError(f"Unexpected item list shape: {e}") from e

        return await self._flash(call)

    async def suggest_outfits(
        self, items: Sequence[ClothingItem], prompt: str
    ) -> list[list[str]]:
        """Suggest three outfits for an occasion, as lists of item ids."""
        items_text = "\n".join(
            f"ID:{item.id}, {item.category.value}, {item.color}" for item in items
        )

        async def call() -> list[list[str]]:
            response = await self.backend.generate_content(
                self.models.outfit_model,
                f'Wardrobe:\n{items_text}\nSuggest 3 outfits for "{prompt}". '
                "JSON array of ID arrays.",
                {"responseMimeType": "application/json"},
            )
            payload = _load_json(response.text, "[]")
            try:
                return _OUTFITS.validate_python(payload)
            except ValidationError as e:
                raise GenerationError(f"Unexpected outfit list shape: {e}") from e

        return await self._flash(call)

    # Unthrottled features

    async def synthesize_speech(self, text: str) -> bytes | None:
        """Text to speech; returns PCM16 audio, or None if no audio came back."""
        response = await self.backend.generate_content(
            self.models.tts_model,
            [{"parts": [{"text": text}]}],
            {
                "responseModalities": ["AUDIO"],
                "speechConfig": {
                    "voiceConfig": {
                        "prebuiltVoiceConfig": {"voiceName": self.live.tts_voice}
                    }
                },
            },
        )
        data = response.first_inline_data()
        return decode_base64(data) if data else None

    async def play_speech(
        self, text: str, output: AudioOutputProtocol
    ) -> ScheduledBufferProtocol | None:
        """Synthesize speech and play it immediately on an output."""
        pcm = await self.synthesize_speech(text)
        if pcm is None:
            logger.debug("Speech synthesis returned no audio")
            return None
        rate, channels = self.live.output_sample_rate, self.live.channels
        logger.debug(f"Playing {pcm16_duration(pcm, rate, channels):.2f}s of speech")
        return output.play(pcm16_to_float(pcm, channels)[0], rate)

    async def start_live_consult(
        self, on_text: TextHandler, output: AudioOutputProtocol
    ) -> LiveConsultSession:
        """Open a live voice consultation. The caller must stop() it."""
        session = LiveConsultSession(self.backend, on_text, output, self.live)
        return await session.start()


__all__ = ["StylistService"]
