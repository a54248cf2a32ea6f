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


from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Optional

from google import genai

from common.analytics import get_logger
from common.error_handling import ConversationError
from config.default import Default
from config.personas import (
    KASPAR_EMPTY_REPLY,
    KASPAR_FALLBACK_REPLY,
    KASPAR_GREETING,
    KASPAR_HAUSER_INSTRUCTION,
)
from models.gemini import generate_persona_reply

logger = get_logger(__name__)


class Speaker(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


# Chat model's role vocabulary.
ROLE_BY_SPEAKER = {
    Speaker.USER: "user",
    Speaker.ASSISTANT: "model",
}


@dataclass(frozen=True)
class ConversationTurn:
    speaker: Speaker
    text: str


ReplyFn = Callable[..., Awaitable[Optional[str]]]


class ConversationSession:
    """An append-only transcript with a persona-scripted assistant.

    The transcript starts with a scripted greeting. Each send() appends the
    user's turn and exactly one assistant turn, even when the model call
    fails.
    """

    def __init__(
        self,
        client: Optional[genai.Client] = None,
        system_instruction: str = KASPAR_HAUSER_INSTRUCTION,
        greeting: str = KASPAR_GREETING,
        max_history_turns: Optional[int] = None,
        model_name: Optional[str] = None,
        session_id: Optional[str] = None,
        reply_fn: ReplyFn = generate_persona_reply,
    ):
        config = Default()
        self._client = client
        self.system_instruction = system_instruction
        self.max_history_turns = (
            max_history_turns
            if max_history_turns is not None
            else config.CHAT_MAX_HISTORY_TURNS
        )
        self._model_name = model_name or config.CHAT_MODEL_ID
        self._session_id = session_id
        self._reply_fn = reply_fn
        self._transcript: list[ConversationTurn] = [
            ConversationTurn(Speaker.ASSISTANT, greeting)
        ]

    @property
    def transcript(self) -> tuple[ConversationTurn, ...]:
        return tuple(self._transcript)

    def context(self) -> list[tuple[str, str]]:
        """The turns sent to the chat model, oldest first."""
        turns = self._transcript
        if self.max_history_turns:
            turns = turns[-self.max_history_turns:]
        return [(ROLE_BY_SPEAKER[turn.speaker], turn.text) for turn in turns]

    async def _request_reply(self) -> str:
        try:
            reply = await self._reply_fn(
                self.context(),
                self.system_instruction,
                client=self._client,
                model_name=self._model_name,
                session_id=self._session_id,
            )
        except Exception as e:
            raise ConversationError(f"Persona reply failed: {e}") from e
        return reply or KASPAR_EMPTY_REPLY

    async def send(self, user_text: str) -> Optional[str]:
        """Sends a user message and returns the assistant's reply.

        A blank message is ignored: nothing is recorded and None is returned.
        If the call is cancelled, the fallback line still closes the exchange
        before the cancellation propagates.
        """
        if not user_text or not user_text.strip():
            return None

        self._transcript.append(ConversationTurn(Speaker.USER, user_text))
        reply = KASPAR_FALLBACK_REPLY
        try:
            reply = await self._request_reply()
        except ConversationError as e:
            logger.warning(str(e))
        finally:
            self._transcript.append(ConversationTurn(Speaker.ASSISTANT, reply))
        return reply
