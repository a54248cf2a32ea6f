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


import functools

from google import genai

from common.analytics import get_logger
from config.default import Default

logger = get_logger(__name__)


@functools.lru_cache(maxsize=1)
def get_client() -> genai.Client:
    """Returns the shared genai client, created on first use.

    Uses Vertex AI when GOOGLE_GENAI_USE_VERTEXAI is set, otherwise the
    Gemini Developer API key.
    """
    config = Default()
    if config.GOOGLE_GENAI_USE_VERTEXAI:
        logger.info(
            f"Creating Vertex AI client for {config.PROJECT_ID} in {config.LOCATION}"
        )
        return genai.Client(
            vertexai=True,
            project=config.PROJECT_ID,
            location=config.LOCATION,
        )
    logger.info("Creating Gemini Developer API client")
    return genai.Client(api_key=config.GEMINI_API_KEY)
