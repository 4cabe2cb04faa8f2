"""Turns one palette request into the model calls that build its palettes.

Moods are resolved first. Palette colors for every mood are then generated
concurrently, and each color's psychology is generated under a per-request
concurrency limiter. Every model step has a fallback, so a request degrades to
static data rather than failing.
"""
from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Callable
from functools import partial
from typing import Any, Sequence
from uuid import uuid4

from ..core.cache import CacheClient
from ..core.config import AppSettings
from ..core.errors import ParseError
from ..models import (
    ColorEntry,
    ColorPsychology,
    GenerationMode,
    GenerationRequest,
    Palette,
    role_label,
)
from .accessibility import calculate_accessibility
from .fallbacks import default_moods, fallback_palette, fallback_psychology
from .generator import TextGenerator
from .limiter import ConcurrencyLimiter
from .parsers import (
    PsychologyParser,
    SentencePsychologyParser,
    extract_hex_colors,
    extract_moods,
    sanitize_text,
)
from .retry import FALLBACK, RetryController, RetryResult

logger = logging.getLogger(__name__)

EMOTION_CACHE = "emotionCache"
PSYCHOLOGY_CACHE = "psychologyCache"
DEFAULT_MOOD_PROMPT = "Provide a list of 6 emotions"


def random_palette_id() -> str:
    """Short opaque identifier; collisions are unlikely but not ruled out."""
    return uuid4().hex[:9]


class PaletteOrchestrator:
    """Builds mood palettes from the text generation service, the cache and fallback data."""

    MOOD_PROMPT_TEMPLATE = (
        "{mood_prompt}. List 6 distinct moods suitable for generating color palettes, "
        "separated by commas."
    )
    PALETTE_PROMPT_TEMPLATE = (
        "Generate a color palette of {size} hex codes for a {mood} mood based on: {prompt}. "
        "Format: {slots}"
    )
    PSYCHOLOGY_PROMPT_TEMPLATE = (
        "Describe the psychological impact and associations of a {role} color that evokes a "
        "{mood} mood. Provide a brief meaning, three associations, and one sentence on how "
        "the color could be applied in design."
    )

    def __init__(
        self,
        cache: CacheClient,
        generator: TextGenerator | None,
        *,
        retry: RetryController | None = None,
        concurrency_limit: int = 2,
        request_deadline: float | None = 60.0,
        text_model: str | None = None,
        image_model: str | None = None,
        id_factory: Callable[[], str] = random_palette_id,
        rng: random.Random | None = None,
        psychology_parser: PsychologyParser | None = None,
    ) -> None:
        self._cache = cache
        self._generator = generator
        self._retry = retry or RetryController()
        self._concurrency_limit = concurrency_limit
        self._request_deadline = request_deadline
        self._models = {GenerationMode.PROMPT: text_model, GenerationMode.IMAGE: image_model}
        self._id_factory = id_factory
        self._rng = rng or random.Random()
        self._psychology_parser = psychology_parser or SentencePsychologyParser()

    @classmethod
    def from_settings(
        cls,
        settings: AppSettings,
        cache: CacheClient,
        generator: TextGenerator | None,
        **overrides: Any,
    ) -> "PaletteOrchestrator":
        options: dict[str, Any] = {
            "retry": RetryController(
                max_attempts=settings.retry_max_attempts,
                base_delay=settings.retry_base_delay,
                call_timeout=settings.model_call_timeout,
            ),
            "concurrency_limit": settings.concurrency_limit,
            "request_deadline": settings.request_deadline,
            "text_model": settings.text_model,
            "image_model": settings.image_model,
        }
        options.update(overrides)
        return cls(cache, generator, **options)

    async def generate_palettes(self, request: GenerationRequest) -> list[Palette]:
        request.validate()
        prompt_text = sanitize_text(request.prompt_text)
        model = self._models.get(request.mode)

        moods = await self.resolve_moods(request, model=model)
        limiter = ConcurrencyLimiter(self._concurrency_limit)
        tasks = [
            asyncio.create_task(
                self._build_palette(mood, prompt_text, request.palette_size, limiter, model=model)
            )
            for mood in moods
        ]
        if not tasks:
            return []
        _, pending = await asyncio.wait(tasks, timeout=self._request_deadline)
        if pending:
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)
            logger.warning(
                "Palette generation exceeded %ss, serving fallback palettes for %d of %d moods",
                self._request_deadline,
                len(pending),
                len(moods),
            )
        return [
            self.fallback_palette(mood, prompt_text, request.palette_size)
            if task in pending
            else task.result()
            for mood, task in zip(moods, tasks)
        ]

    async def resolve_moods(self, request: GenerationRequest, *, model: str | None = None) -> list[str]:
        user_moods = [sanitize_text(mood) for mood in request.user_moods or []]
        user_moods = [mood for mood in user_moods if mood]
        if user_moods:
            return user_moods

        mood_prompt = sanitize_text(request.mood_prompt_text) or DEFAULT_MOOD_PROMPT
        cached = await self._cache.get(EMOTION_CACHE, mood_prompt)
        if isinstance(cached, list) and cached and all(isinstance(item, str) for item in cached):
            return cached

        moods: list[str] | None = None
        reply = await self._ask(
            self.MOOD_PROMPT_TEMPLATE.format(mood_prompt=mood_prompt),
            label="mood generation",
            model=model,
        )
        if reply is not FALLBACK:
            try:
                moods = extract_moods(reply)
            except ParseError as exc:
                logger.warning("Unusable mood list from model: %s", exc)
        if moods is None:
            logger.warning("Failed to generate moods, using default moods")
            moods = default_moods()

        await self._cache.set(EMOTION_CACHE, mood_prompt, moods)
        return moods

    async def generate_palette_colors(
        self,
        mood: str,
        prompt_text: str,
        palette_size: int,
        *,
        model: str | None = None,
    ) -> list[str]:
        prompt = self.PALETTE_PROMPT_TEMPLATE.format(
            size=palette_size,
            mood=mood.lower(),
            prompt=prompt_text,
            slots=", ".join(["#RRGGBB"] * palette_size),
        )
        reply = await self._ask(prompt, label=f"palette for {mood}", model=model)
        if reply is not FALLBACK:
            try:
                return extract_hex_colors(reply, palette_size)
            except ParseError as exc:
                logger.warning("Insufficient colors generated for %s: %s", mood, exc)
        logger.warning("Using fallback palette for %s", mood)
        return fallback_palette(mood, palette_size, self._rng)

    async def generate_psychology(
        self,
        mood: str,
        color_role: str,
        *,
        model: str | None = None,
    ) -> ColorPsychology:
        cache_key = f"{mood}_{color_role}"
        cached = await self._cache.get(PSYCHOLOGY_CACHE, cache_key)
        if cached is not None:
            try:
                return ColorPsychology.from_dict(cached)
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Ignoring malformed cached psychology for %s: %s", cache_key, exc)

        psychology: ColorPsychology | None = None
        reply = await self._ask(
            self.PSYCHOLOGY_PROMPT_TEMPLATE.format(role=color_role, mood=mood.lower()),
            label=f"psychology for {mood} {color_role}",
            model=model,
        )
        if reply is not FALLBACK:
            try:
                fields = self._psychology_parser.parse(reply)
            except ParseError as exc:
                logger.warning("Incomplete psychology data for %s: %s", cache_key, exc)
            else:
                psychology = ColorPsychology(
                    mood=mood,
                    meaning=f"{fields.meaning} through {color_role}",
                    associations=fields.associations,
                    application=fields.application,
                )
        if psychology is None:
            psychology = fallback_psychology(mood, color_role)

        await self._cache.set(PSYCHOLOGY_CACHE, cache_key, psychology.to_dict())
        return psychology

    def fallback_palette(self, mood: str, prompt_text: str, palette_size: int) -> Palette:
        """Palette assembled purely from fallback data, without cache or model access."""
        colors = fallback_palette(mood, palette_size, self._rng)
        psychologies = [fallback_psychology(mood, role_label(index).lower()) for index in range(len(colors))]
        return self._assemble(mood, prompt_text, colors, psychologies)

    async def _build_palette(
        self,
        mood: str,
        prompt_text: str,
        palette_size: int,
        limiter: ConcurrencyLimiter,
        *,
        model: str | None,
    ) -> Palette:
        colors = await self.generate_palette_colors(mood, prompt_text, palette_size, model=model)
        psychologies = await asyncio.gather(
            *(
                limiter.schedule(
                    partial(self.generate_psychology, mood, role_label(index).lower(), model=model)
                )
                for index in range(len(colors))
            )
        )
        return self._assemble(mood, prompt_text, colors, psychologies)

    def _assemble(
        self,
        mood: str,
        prompt_text: str,
        colors: Sequence[str],
        psychologies: Sequence[ColorPsychology],
    ) -> Palette:
        entries = [
            ColorEntry.from_hex(f"{mood} {role_label(index)}", hex_code, psychology)
            for index, (hex_code, psychology) in enumerate(zip(colors, psychologies))
        ]
        description = f"A {mood.lower()} palette"
        if prompt_text:
            description += f" inspired by {prompt_text}"
        return Palette(
            id=self._id_factory(),
            name=f"{mood} {prompt_text or 'Palette'}",
            mood=mood,
            colors=entries,
            description=description,
            accessibility=calculate_accessibility(colors),
        )

    async def _ask(self, prompt: str, *, label: str, model: str | None) -> RetryResult:
        if self._generator is None:
            return FALLBACK
        generator = self._generator
        return await self._retry.invoke(lambda: generator.generate(prompt, model=model), label=label)
