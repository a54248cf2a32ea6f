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


import uuid
from typing import Optional

from google import genai

from common.analytics import get_logger
from common.error_handling import ValidationError
from common.object_urls import ObjectUrlRegistry
from config.veo_models import GenerationMode
from models.requests import VideoGenerationRequest
from services.conversation_service import ConversationSession
from services.veo_service import GenerationOutcome, VeoGenerationService
from state.veo_state import VeoRequestState

logger = get_logger(__name__)


class StudioSession:
    """Owns all mutable state of one user session.

    Holds the generation form, the generation service with its current
    outcome, and the persona conversation. Nothing here is shared between
    sessions.
    """

    def __init__(
        self,
        client: Optional[genai.Client] = None,
        poll_interval_seconds: Optional[float] = None,
        generation_service: Optional[VeoGenerationService] = None,
        conversation: Optional[ConversationSession] = None,
    ):
        self.session_id = str(uuid.uuid4())
        self.object_urls = ObjectUrlRegistry()
        self.form = VeoRequestState()
        if generation_service is None:
            generation_service = VeoGenerationService(
                registry=self.object_urls,
                client=client,
                poll_interval_seconds=poll_interval_seconds,
                session_id=self.session_id,
            )
        self.generation = generation_service
        if conversation is None:
            conversation = ConversationSession(
                client=client, session_id=self.session_id
            )
        self.conversation = conversation
        self.last_request: Optional[VideoGenerationRequest] = None
        logger.info(f"Started studio session {self.session_id}")

    @property
    def outcome(self) -> GenerationOutcome:
        return self.generation.outcome

    async def generate(self) -> GenerationOutcome:
        """Validates the form and generates a video from it.

        Raises:
            ValidationError: If the form is not ready for its mode.
        """
        request = self.form.validate()
        self.last_request = request
        return await self.generation.generate(request)

    async def retry(self) -> GenerationOutcome:
        """Generates again from the last submitted request."""
        if self.last_request is None:
            raise ValidationError("There is no previous request to retry.")
        return await self.generation.generate(self.last_request)

    def new_video(self) -> None:
        """Discards the current result and keeps the form as it is."""
        self.generation.reset()

    def prepare_extension(self) -> None:
        """Switches the form to extend the clip of the current outcome."""
        outcome = self.generation.outcome
        if not outcome.is_ready or outcome.video is None:
            raise ValidationError(
                "Extension requires a base video.", mode=GenerationMode.EXTEND_VIDEO
            )
        self.form.set_mode(GenerationMode.EXTEND_VIDEO)
        # Aspect ratio is locked in extend mode; it follows the base clip.
        if outcome.request is not None:
            self.form.aspect_ratio = outcome.request.aspect_ratio
        self.form.set_input_video_handle(outcome.video)

    async def send_message(self, text: str) -> Optional[str]:
        return await self.conversation.send(text)

    def close(self) -> None:
        """Revokes every object URL still held by the session."""
        self.generation.close()
        for url in self.object_urls.live_urls:
            self.object_urls.revoke_object_url(url)
        logger.info(f"Closed studio session {self.session_id}")
