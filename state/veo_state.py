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


from dataclasses import dataclass, field
from typing import List, Optional

from google.genai import types

from common.error_handling import FieldLockedError, ValidationError
from config.motion_presets import MOTION_PRESETS, get_motion_preset
from config.veo_models import (
    AspectRatio,
    GenerationMode,
    Resolution,
    VeoModel,
    get_mode_override,
)
from models.requests import (
    MAX_REFERENCE_IMAGES,
    EncodedMedia,
    VideoGenerationRequest,
)


def prompt_placeholder(mode: GenerationMode) -> str:
    if mode == GenerationMode.TEXT_TO_VIDEO:
        return "Describe your cinematic vision..."
    elif mode == GenerationMode.ANIMATE_IMAGE:
        return 'Describe the movement (e.g. "She turns the page of the book smoothly")...'
    elif mode == GenerationMode.REFERENCES_TO_VIDEO:
        return "Describe a scene using these visual anchors..."
    elif mode == GenerationMode.EXTEND_VIDEO:
        return "Describe what happens next in the scene..."
    raise ValueError(f"Unsupported generation mode: {mode}")


@dataclass
class VeoRequestState:
    """Editable generation form.

    Mode-specific inputs only exist for the mode that uses them: switching
    modes clears them, and setting one from another mode is refused.
    """

    prompt: str = ""
    model: VeoModel = VeoModel.FAST
    aspect_ratio: AspectRatio = AspectRatio.LANDSCAPE
    resolution: Resolution = Resolution.P720
    mode: GenerationMode = GenerationMode.TEXT_TO_VIDEO

    # Animate image
    start_frame: Optional[EncodedMedia] = None
    end_frame: Optional[EncodedMedia] = None
    is_looping: bool = False

    # References to video
    reference_images: List[EncodedMedia] = field(default_factory=list)
    style_image: Optional[EncodedMedia] = None

    # Extend video
    input_video: Optional[EncodedMedia] = None
    input_video_handle: Optional[types.Video] = None

    # Mode switching

    def set_mode(self, mode: GenerationMode) -> None:
        mode = GenerationMode(mode)
        self.mode = mode
        self.start_frame = None
        self.end_frame = None
        self.reference_images = []
        self.style_image = None
        self.input_video = None
        self.input_video_handle = None
        self.is_looping = False

        override = get_mode_override(mode)
        if override.model is not None:
            self.model = override.model
        if override.aspect_ratio is not None:
            self.aspect_ratio = override.aspect_ratio
        if override.resolution is not None:
            self.resolution = override.resolution

    @property
    def locked_fields(self) -> List[str]:
        return list(get_mode_override(self.mode).locked_fields)

    def is_locked(self, field_name: str) -> bool:
        return field_name in self.locked_fields

    def _require_unlocked(self, field_name: str) -> None:
        if self.is_locked(field_name):
            raise FieldLockedError(field_name, mode=self.mode)

    def _require_mode(self, mode: GenerationMode, what: str) -> None:
        if self.mode != mode:
            raise ValidationError(
                f"{what} can only be set in {mode.value} mode.", mode=self.mode
            )

    # Shared settings

    def set_prompt(self, prompt: str) -> None:
        self.prompt = prompt

    def set_model(self, model: VeoModel) -> None:
        self._require_unlocked("model")
        self.model = VeoModel(model)

    def set_aspect_ratio(self, aspect_ratio: AspectRatio) -> None:
        self._require_unlocked("aspect_ratio")
        self.aspect_ratio = AspectRatio(aspect_ratio)

    def set_resolution(self, resolution: Resolution) -> None:
        self._require_unlocked("resolution")
        self.resolution = Resolution(resolution)

    @property
    def placeholder(self) -> str:
        return prompt_placeholder(self.mode)

    # Animate image

    def set_start_frame(self, image: EncodedMedia) -> None:
        self._require_mode(GenerationMode.ANIMATE_IMAGE, "A start frame")
        self.start_frame = image

    def clear_start_frame(self) -> None:
        self.start_frame = None
        self.is_looping = False

    def set_end_frame(self, image: EncodedMedia) -> None:
        self._require_mode(GenerationMode.ANIMATE_IMAGE, "An end frame")
        self.is_looping = False
        self.end_frame = image

    def clear_end_frame(self) -> None:
        self.end_frame = None

    def set_looping(self, is_looping: bool) -> None:
        if not is_looping:
            self.is_looping = False
            return
        self._require_mode(GenerationMode.ANIMATE_IMAGE, "Looping")
        if self.start_frame is None:
            raise ValidationError("Upload a starting image.", mode=self.mode)
        self.end_frame = None
        self.is_looping = True

    @property
    def available_presets(self) -> List[dict]:
        if self.mode == GenerationMode.ANIMATE_IMAGE and self.start_frame is not None:
            return list(MOTION_PRESETS)
        return []

    def apply_preset(self, key: str) -> None:
        preset = get_motion_preset(key)
        if preset is None:
            raise ValidationError(f"Unknown motion preset: {key}", mode=self.mode)
        self.prompt = preset["prompt"]

    # References to video

    @property
    def can_add_reference_image(self) -> bool:
        return (
            self.mode == GenerationMode.REFERENCES_TO_VIDEO
            and len(self.reference_images) < MAX_REFERENCE_IMAGES
        )

    def add_reference_image(self, image: EncodedMedia) -> None:
        self._require_mode(GenerationMode.REFERENCES_TO_VIDEO, "Reference images")
        if len(self.reference_images) >= MAX_REFERENCE_IMAGES:
            raise ValidationError(
                f"At most {MAX_REFERENCE_IMAGES} reference images can be used.",
                mode=self.mode,
            )
        self.reference_images = [*self.reference_images, image]

    def remove_reference_image(self, index: int) -> None:
        self.reference_images = [
            img for i, img in enumerate(self.reference_images) if i != index
        ]

    def set_style_image(self, image: EncodedMedia) -> None:
        self._require_mode(GenerationMode.REFERENCES_TO_VIDEO, "A style image")
        self.style_image = image

    def clear_style_image(self) -> None:
        self.style_image = None

    # Extend video

    def set_input_video(self, video: EncodedMedia) -> None:
        self._require_mode(GenerationMode.EXTEND_VIDEO, "A base video")
        self.input_video = video

    def set_input_video_handle(self, video: types.Video) -> None:
        self._require_mode(GenerationMode.EXTEND_VIDEO, "A base video")
        self.input_video_handle = video

    def clear_input_video(self) -> None:
        self.input_video = None
        self.input_video_handle = None

    # Submission

    def freeze(self) -> VideoGenerationRequest:
        """Returns an immutable snapshot of the form."""
        return VideoGenerationRequest(
            prompt=self.prompt,
            model=self.model,
            aspect_ratio=self.aspect_ratio,
            resolution=self.resolution,
            mode=self.mode,
            start_frame=self.start_frame,
            end_frame=self.end_frame,
            is_looping=self.is_looping,
            reference_images=tuple(self.reference_images),
            style_image=self.style_image,
            input_video=self.input_video,
            input_video_handle=self.input_video_handle,
        )

    @property
    def submission_blocker(self) -> Optional[str]:
        return self.freeze().submission_blocker()

    @property
    def is_ready(self) -> bool:
        return self.submission_blocker is None

    def validate(self) -> VideoGenerationRequest:
        """Returns the frozen request, or raises ValidationError if it cannot be submitted."""
        return self.freeze().ensure_ready()

    def load(self, request: VideoGenerationRequest) -> None:
        """Restores the form from a previously frozen request."""
        self.prompt = request.prompt
        self.model = request.model
        self.aspect_ratio = request.aspect_ratio
        self.resolution = request.resolution
        self.mode = request.mode
        self.start_frame = request.start_frame
        self.end_frame = request.end_frame
        self.is_looping = request.is_looping
        self.reference_images = list(request.reference_images)
        self.style_image = request.style_image
        self.input_video = request.input_video
        self.input_video_handle = request.input_video_handle
