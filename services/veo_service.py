# Copyright 2025 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.


"""Runs generation requests and owns the session's current outcome."""

from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Optional

from google import genai
from google.genai import types

from common.analytics import get_logger
from common.error_handling import user_safe_message
from common.object_urls import LocalMediaHandle, ObjectUrlRegistry
from models.requests import VideoGenerationRequest
from models.veo import GeneratedVideo, generate_video

logger = get_logger(__name__)


class OutcomeStatus(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True)
class GenerationOutcome:
    """The state of the most recent generation."""

    status: OutcomeStatus
    request: Optional[VideoGenerationRequest] = None
    media: Optional[LocalMediaHandle] = None
    # Remote reference of a Ready clip, used to extend it.
    video: Optional[types.Video] = None
    reason: Optional[str] = None

    @classmethod
    def idle(cls) -> "GenerationOutcome":
        return cls(status=OutcomeStatus.IDLE)

    @classmethod
    def pending(cls, request: VideoGenerationRequest) -> "GenerationOutcome":
        return cls(status=OutcomeStatus.PENDING, request=request)

    @classmethod
    def ready(
        cls,
        request: VideoGenerationRequest,
        media: LocalMediaHandle,
        video: Optional[types.Video] = None,
    ) -> "GenerationOutcome":
        return cls(status=OutcomeStatus.READY, request=request, media=media, video=video)

    @classmethod
    def failed(cls, request: VideoGenerationRequest, reason: str) -> "GenerationOutcome":
        return cls(status=OutcomeStatus.FAILED, request=request, reason=reason)

    @property
    def is_pending(self) -> bool:
        return self.status == OutcomeStatus.PENDING

    @property
    def is_ready(self) -> bool:
        return self.status == OutcomeStatus.READY

    @property
    def is_failed(self) -> bool:
        return self.status == OutcomeStatus.FAILED


OutcomeListener = Callable[[GenerationOutcome], None]
GenerateFn = Callable[..., Awaitable[GeneratedVideo]]


class VeoGenerationService:
    """Submits requests and publishes their outcome.

    The service is the only writer of the outcome slot. Leaving a Ready
    outcome revokes its object URL, so the only live URL is the one held by
    the current outcome.

    Concurrent calls are resolved by submission order: the latest call to
    generate() (or reset()) wins, and an earlier call that finishes later is
    discarded without touching the outcome.
    """

    def __init__(
        self,
        registry: Optional[ObjectUrlRegistry] = None,
        client: Optional[genai.Client] = None,
        poll_interval_seconds: Optional[float] = None,
        session_id: Optional[str] = None,
        generate_fn: GenerateFn = generate_video,
    ):
        self.registry = registry if registry is not None else ObjectUrlRegistry()
        self._client = client
        self._poll_interval_seconds = poll_interval_seconds
        self._session_id = session_id
        self._generate_fn = generate_fn
        self._outcome = GenerationOutcome.idle()
        self._ticket = 0
        self._listeners: list[OutcomeListener] = []

    @property
    def outcome(self) -> GenerationOutcome:
        return self._outcome

    def add_listener(self, listener: OutcomeListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: OutcomeListener) -> None:
        self._listeners.remove(listener)

    def _publish(self, outcome: GenerationOutcome) -> None:
        previous = self._outcome
        if previous.media is not None and previous.media is not outcome.media:
            previous.media.release()
        self._outcome = outcome
        logger.info(f"Generation outcome: {outcome.status.value}")
        for listener in list(self._listeners):
            try:
                listener(outcome)
            except Exception as e:
                logger.error(f"Outcome listener {listener!r} failed: {e}")

    async def generate(self, request: VideoGenerationRequest) -> GenerationOutcome:
        """Runs a request to completion and returns the outcome it produced.

        Raises:
            ValidationError: If the request is not ready for its mode. Nothing
                is submitted and the outcome is left unchanged.
        """
        request.ensure_ready()

        self._ticket += 1
        ticket = self._ticket
        self._publish(GenerationOutcome.pending(request))

        try:
            result = await self._generate_fn(
                request,
                client=self._client,
                poll_interval_seconds=self._poll_interval_seconds,
                session_id=self._session_id,
            )
        except Exception as e:
            reason = user_safe_message(e)
            logger.error(f"Video generation failed: {reason}")
            outcome = GenerationOutcome.failed(request, reason)
        else:
            if ticket != self._ticket:
                logger.info("Discarding a generation superseded by a newer request.")
                return self._outcome
            media = LocalMediaHandle.acquire(self.registry, result.data, result.mime_type)
            outcome = GenerationOutcome.ready(request, media, video=result.video)

        if ticket != self._ticket:
            logger.info("Discarding a generation superseded by a newer request.")
            return self._outcome
        self._publish(outcome)
        return outcome

    def reset(self) -> None:
        """Returns to Idle and abandons any generation still in flight."""
        self._ticket += 1
        self._publish(GenerationOutcome.idle())

    def close(self) -> None:
        self.reset()
