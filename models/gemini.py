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


from typing import Optional, Sequence

from google import genai
from google.genai import types

from common.analytics import get_logger, track_model_call
from common.genai_client import get_client
from config.default import Default

logger = get_logger(__name__)


def to_contents(turns: Sequence[tuple[str, str]]) -> list[types.Content]:
    """Maps (role, text) turns to genai contents. Roles are 'user' or 'model'."""
    return [
        types.Content(role=role, parts=[types.Part(text=text)]) for role, text in turns
    ]


async def generate_persona_reply(
    turns: Sequence[tuple[str, str]],
    system_instruction: str,
    client: Optional[genai.Client] = None,
    model_name: Optional[str] = None,
    session_id: Optional[str] = None,
) -> Optional[str]:
    """Asks the chat model for the next reply to a conversation.

    Returns the reply text, or None if the model returned no text.
    """
    model_name = model_name or Default().CHAT_MODEL_ID
    if client is None:
        client = get_client()

    with track_model_call(
        model_name=model_name, session_id=session_id, turns=len(turns)
    ):
        response = await client.aio.models.generate_content(
            model=model_name,
            contents=to_contents(turns),
            config=types.GenerateContentConfig(system_instruction=system_instruction),
        )
    return response.text or None
