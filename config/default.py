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


import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

load_dotenv(override=True)


def _optional_int(name: str) -> Optional[int]:
    value = os.environ.get(name)
    return int(value) if value else None


@dataclass
class Default:
    """Defaults class"""

    # pylint: disable=invalid-name

    # Gemini Developer API
    GEMINI_API_KEY: str = os.environ.get(
        "GEMINI_API_KEY", os.environ.get("API_KEY", "")
    )

    # Vertex AI, used instead of the API key when enabled
    GOOGLE_GENAI_USE_VERTEXAI: bool = (
        os.environ.get("GOOGLE_GENAI_USE_VERTEXAI", "false").lower() == "true"
    )
    PROJECT_ID: str = os.environ.get("PROJECT_ID", "")
    LOCATION: str = os.environ.get("LOCATION", "us-central1")

    # Veo
    VEO_FAST_MODEL_ID: str = os.environ.get(
        "VEO_FAST_MODEL_ID", "veo-3.1-fast-generate-preview"
    )
    VEO_MODEL_ID: str = os.environ.get("VEO_MODEL_ID", "veo-3.1-generate-preview")
    VEO_POLL_INTERVAL_SECONDS: float = float(
        os.environ.get("VEO_POLL_INTERVAL_SECONDS", "10")
    )
    VEO_DOWNLOAD_TIMEOUT_SECONDS: float = float(
        os.environ.get("VEO_DOWNLOAD_TIMEOUT_SECONDS", "120")
    )

    # Persona chat
    CHAT_MODEL_ID: str = os.environ.get("CHAT_MODEL_ID", "gemini-3-flash-preview")
    # None sends the whole transcript on every turn
    CHAT_MAX_HISTORY_TURNS: Optional[int] = field(
        default_factory=lambda: _optional_int("CHAT_MAX_HISTORY_TURNS")
    )
