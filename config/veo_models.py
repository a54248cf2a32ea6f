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
from enum import Enum
from typing import Dict, List, Optional

from config.default import Default

config = Default()


class GenerationMode(str, Enum):
    """Input modality of a single generation request."""

    TEXT_TO_VIDEO = "t2v"
    ANIMATE_IMAGE = "i2v"
    REFERENCES_TO_VIDEO = "r2v"
    EXTEND_VIDEO = "extend"

    @classmethod
    def selectable(cls) -> List["GenerationMode"]:
        """Modes offered in the mode picker. Extension starts from a finished clip."""
        return [cls.TEXT_TO_VIDEO, cls.ANIMATE_IMAGE, cls.REFERENCES_TO_VIDEO]


class VeoModel(str, Enum):
    FAST = "fast"
    STANDARD = "standard"


class AspectRatio(str, Enum):
    LANDSCAPE = "16:9"
    PORTRAIT = "9:16"


class Resolution(str, Enum):
    P720 = "720p"
    P1080 = "1080p"


@dataclass
class ModeOverride:
    """Defines the values a mode forces and the settings it locks."""

    model: Optional[VeoModel] = None
    aspect_ratio: Optional[AspectRatio] = None
    resolution: Optional[Resolution] = None
    locked_fields: List[str] = field(default_factory=list)


@dataclass
class VeoModelConfig:
    """Configuration for a specific Veo engine."""

    model: VeoModel
    model_name: str
    display_name: str
    supported_modes: List[GenerationMode]
    supported_aspect_ratios: List[AspectRatio]
    resolutions: List[Resolution]
    number_of_videos: int = 1


# This list is the single source of truth for the Veo engines offered.
VEO_MODELS: List[VeoModelConfig] = [
    VeoModelConfig(
        model=VeoModel.FAST,
        model_name=config.VEO_FAST_MODEL_ID,
        display_name="Fast",
        supported_modes=[
            GenerationMode.TEXT_TO_VIDEO,
            GenerationMode.ANIMATE_IMAGE,
            GenerationMode.EXTEND_VIDEO,
        ],
        supported_aspect_ratios=[AspectRatio.LANDSCAPE, AspectRatio.PORTRAIT],
        resolutions=[Resolution.P720, Resolution.P1080],
    ),
    VeoModelConfig(
        model=VeoModel.STANDARD,
        model_name=config.VEO_MODEL_ID,
        display_name="Standard",
        supported_modes=[
            GenerationMode.TEXT_TO_VIDEO,
            GenerationMode.ANIMATE_IMAGE,
            GenerationMode.REFERENCES_TO_VIDEO,
            GenerationMode.EXTEND_VIDEO,
        ],
        supported_aspect_ratios=[AspectRatio.LANDSCAPE, AspectRatio.PORTRAIT],
        resolutions=[Resolution.P720, Resolution.P1080],
    ),
]

MODE_OVERRIDES: Dict[GenerationMode, ModeOverride] = {
    GenerationMode.REFERENCES_TO_VIDEO: ModeOverride(
        model=VeoModel.STANDARD,
        aspect_ratio=AspectRatio.LANDSCAPE,
        resolution=Resolution.P720,
        locked_fields=["model", "aspect_ratio", "resolution"],
    ),
    GenerationMode.EXTEND_VIDEO: ModeOverride(
        resolution=Resolution.P720,
        locked_fields=["aspect_ratio", "resolution"],
    ),
}


def get_veo_model_config(model: VeoModel) -> Optional[VeoModelConfig]:
    """Finds and returns the configuration for a given Veo engine."""
    for model_config in VEO_MODELS:
        if model_config.model == model:
            return model_config
    return None


def get_mode_override(mode: GenerationMode) -> ModeOverride:
    """Returns the overrides for a mode, or an empty override if it has none."""
    return MODE_OVERRIDES.get(mode, ModeOverride())
