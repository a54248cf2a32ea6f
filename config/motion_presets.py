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


MOTION_PRESETS = [
    {
        "key": "page_turn",
        "label": "Turn Page",
        "prompt": "The person in the scene smoothly turns a page of the book, followed immediately by turning another page in the same direction. Maintain the serene atmosphere and paper-cut art style.",
    },
    {
        "key": "gentle_sway",
        "label": "Gentle Sway",
        "prompt": "Add a subtle, cinematic swaying motion to the foreground elements, as if caught in a very light breeze. Keep the focus sharp on the central character.",
    },
    {
        "key": "dynamic_zoom",
        "label": "Deep Zoom",
        "prompt": "A slow, dramatic camera zoom-in toward the subject, creating a sense of intimacy and depth while preserving all fine details.",
    },
    {
        "key": "particle_flow",
        "label": "Floating Particles",
        "prompt": "Tiny particles of light and dust float gently across the frame, catching the light and adding a magical atmosphere to the scene.",
    },
]


def get_motion_preset(key: str) -> dict | None:
    """Returns the motion preset with the given key, if any."""
    for preset in MOTION_PRESETS:
        if preset["key"] == key:
            return preset
    return None
