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


from typing import Optional

GENERIC_FAILURE_MESSAGE = "Video generation failed. Please try again."


class GenerationError(Exception):
    """Custom exception for video generation errors."""

    def __init__(self, message):
        self.message = message
        super().__init__(self.message)


class ReadError(GenerationError):
    """A local file could not be read or encoded for transport."""
    pass


class ValidationError(GenerationError):
    """The request is incomplete or inconsistent for its mode."""

    def __init__(self, message, mode=None):
        self.mode = mode
        super().__init__(message)


class FieldLockedError(ValidationError):
    """A setting was edited while the active mode locks it."""

    def __init__(self, field_name: str, mode=None):
        self.field_name = field_name
        super().__init__(
            f"'{field_name}' cannot be changed in this mode.", mode=mode
        )


class RemoteGenerationError(GenerationError):
    """Base exception for failures talking to the video endpoint."""
    pass


class RemoteSubmissionError(RemoteGenerationError):
    """The generation job could not be submitted."""
    pass


class RemotePollError(RemoteGenerationError):
    """Polling failed or the operation finished with an error."""
    pass


class RemoteFetchError(RemoteGenerationError):
    """The finished video could not be retrieved."""
    pass


class ConversationError(Exception):
    """Exception for failures of the persona chat completion."""
    pass


def user_safe_message(
    error: BaseException, fallback: Optional[str] = GENERIC_FAILURE_MESSAGE
) -> str:
    """Returns a displayable message for an error, or the fallback if it has none."""
    message = getattr(error, "message", None) or str(error)
    message = message.strip() if isinstance(message, str) else ""
    return message or fallback
