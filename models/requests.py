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


import base64
import binascii
from typing import Any, Optional, Tuple

from google.genai import types
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from common.error_handling import ValidationError
from config.veo_models import (
    AspectRatio,
    GenerationMode,
    Resolution,
    VeoModel,
    get_mode_override,
)

MAX_REFERENCE_IMAGES = 3

# Mode-specific fields. Anything not listed for a mode must stay empty.
MODE_FIELDS = (
    "start_frame",
    "end_frame",
    "reference_images",
    "style_image",
    "input_video",
    "input_video_handle",
    "is_looping",
)


def mode_fields(mode: GenerationMode) -> Tuple[str, ...]:
    """Returns the mode-specific fields that may be set in the given mode."""
    if mode == GenerationMode.TEXT_TO_VIDEO:
        return ()
    elif mode == GenerationMode.ANIMATE_IMAGE:
        return ("start_frame", "end_frame", "is_looping")
    elif mode == GenerationMode.REFERENCES_TO_VIDEO:
        return ("reference_images", "style_image")
    elif mode == GenerationMode.EXTEND_VIDEO:
        return ("input_video", "input_video_handle")
    raise ValueError(f"Unsupported generation mode: {mode}")


class EncodedMedia(BaseModel):
    """A local file's bytes, base64 encoded for inclusion in a request."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    # The originating file (path or file object), kept only for previews.
    raw_handle: Any = Field(default=None, repr=False, exclude=True)
    payload: str
    mime_type: str
    file_name: Optional[str] = None

    @field_validator("payload")
    @classmethod
    def _payload_is_bare_base64(cls, value: str) -> str:
        if not value:
            raise ValueError("payload must not be empty")
        if value.startswith("data:"):
            raise ValueError("payload must not carry a data URL prefix")
        return value

    def decode(self) -> bytes:
        try:
            return base64.b64decode(self.payload, validate=True)
        except binascii.Error as e:
            raise ValueError(f"payload is not valid base64: {e}") from e

    def to_image(self) -> types.Image:
        return types.Image(image_bytes=self.decode(), mime_type=self.mime_type)

    def to_video(self) -> types.Video:
        return types.Video(video_bytes=self.decode(), mime_type=self.mime_type)


class VideoGenerationRequest(BaseModel):
    """
    Defines the contract for a video generation request.
    A request is frozen; the form state builds a new one for every submission.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    prompt: str = ""
    model: VeoModel = VeoModel.FAST
    aspect_ratio: AspectRatio = AspectRatio.LANDSCAPE
    resolution: Resolution = Resolution.P720
    mode: GenerationMode = GenerationMode.TEXT_TO_VIDEO

    # For AnimateImage
    start_frame: Optional[EncodedMedia] = None
    end_frame: Optional[EncodedMedia] = None
    is_looping: bool = False

    # For ReferencesToVideo
    reference_images: Tuple[EncodedMedia, ...] = ()
    style_image: Optional[EncodedMedia] = None

    # For ExtendVideo
    input_video: Optional[EncodedMedia] = None
    input_video_handle: Optional[types.Video] = None

    @model_validator(mode="after")
    def _check_mode_fields(self) -> "VideoGenerationRequest":
        allowed = mode_fields(self.mode)
        for name in MODE_FIELDS:
            if name not in allowed and getattr(self, name):
                raise ValueError(f"'{name}' is not used in mode {self.mode.value}")
        if self.is_looping and self.end_frame is not None:
            raise ValueError("A looping animation cannot have an end frame")
        if len(self.reference_images) > MAX_REFERENCE_IMAGES:
            raise ValueError(
                f"At most {MAX_REFERENCE_IMAGES} reference images are supported"
            )
        override = get_mode_override(self.mode)
        for name in override.locked_fields:
            forced = getattr(override, name)
            if forced is not None and getattr(self, name) != forced:
                raise ValueError(
                    f"'{name}' must be {forced.value} in mode {self.mode.value}"
                )
        return self

    def submission_blocker(self) -> Optional[str]:
        """Returns why this request cannot be submitted, or None if it can."""
        has_prompt = bool(self.prompt.strip())
        if self.mode == GenerationMode.TEXT_TO_VIDEO:
            if not has_prompt:
                return "Please enter a description."
            return None
        elif self.mode == GenerationMode.ANIMATE_IMAGE:
            if self.start_frame is None:
                return "Upload a starting image."
            return None
        elif self.mode == GenerationMode.REFERENCES_TO_VIDEO:
            has_refs = bool(self.reference_images)
            if not has_refs and not has_prompt:
                return "Add references and a description."
            if not has_refs:
                return "Add at least one reference image."
            if not has_prompt:
                return "Please enter a description."
            return None
        elif self.mode == GenerationMode.EXTEND_VIDEO:
            if self.input_video_handle is None:
                return "Extension requires a base video."
            return None
        raise ValueError(f"Unsupported generation mode: {self.mode}")

    def ensure_ready(self) -> "VideoGenerationRequest":
        """Raises ValidationError unless the request may be submitted."""
        reason = self.submission_blocker()
        if reason:
            raise ValidationError(reason, mode=self.mode)
        return self
