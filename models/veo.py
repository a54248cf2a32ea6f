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


import asyncio
from dataclasses import dataclass
from typing import Any, Optional

import requests
from google import genai
from google.genai import types

from common.analytics import get_logger, track_model_call
from common.error_handling import (
    GenerationError,
    RemoteFetchError,
    RemotePollError,
    RemoteSubmissionError,
)
from common.genai_client import get_client
from config.default import Default
from config.veo_models import GenerationMode, VeoModelConfig, get_veo_model_config
from models.requests import VideoGenerationRequest

logger = get_logger(__name__)


@dataclass
class GeneratedVideo:
    """A finished clip: its bytes plus the remote object it came from."""

    data: bytes
    mime_type: str
    # Remote reference, reused as the base clip when extending.
    video: types.Video
    model_name: str


def build_generation_call(
    request: VideoGenerationRequest, model_config: VeoModelConfig
) -> dict[str, Any]:
    """Builds the keyword arguments for models.generate_videos for a request."""
    gen_config_args = {
        "number_of_videos": model_config.number_of_videos,
        "resolution": request.resolution.value,
    }
    image_input = None
    video_input = None

    if request.mode == GenerationMode.TEXT_TO_VIDEO:
        logger.info("Mode: Text-to-Video")
        gen_config_args["aspect_ratio"] = request.aspect_ratio.value
    elif request.mode == GenerationMode.ANIMATE_IMAGE:
        gen_config_args["aspect_ratio"] = request.aspect_ratio.value
        image_input = request.start_frame.to_image()
        if request.is_looping:
            logger.info("Mode: Image-to-Video (loop)")
            gen_config_args["last_frame"] = request.start_frame.to_image()
        elif request.end_frame:
            logger.info("Mode: Interpolation")
            gen_config_args["last_frame"] = request.end_frame.to_image()
        else:
            # Without a last frame the model completes the motion on its own.
            logger.info("Mode: Image-to-Video")
    elif request.mode == GenerationMode.REFERENCES_TO_VIDEO:
        logger.info("Mode: Reference-to-Video (r2v)")
        gen_config_args["aspect_ratio"] = request.aspect_ratio.value
        reference_images_list = [
            types.VideoGenerationReferenceImage(
                image=ref.to_image(), reference_type="asset"
            )
            for ref in request.reference_images
        ]
        if request.style_image:
            reference_images_list.append(
                types.VideoGenerationReferenceImage(
                    image=request.style_image.to_image(), reference_type="style"
                )
            )
        logger.info(f" reference images: {len(reference_images_list)}")
        gen_config_args["reference_images"] = reference_images_list
    elif request.mode == GenerationMode.EXTEND_VIDEO:
        logger.info("Mode: Video Extension")
        logger.info(f" video_input: {request.input_video_handle.uri}")
        video_input = request.input_video_handle
    else:
        raise GenerationError(f"Unsupported generation mode: {request.mode}")

    return {
        "model": model_config.model_name,
        "prompt": request.prompt.strip() or None,
        "image": image_input,
        "video": video_input,
        "config": types.GenerateVideosConfig(**gen_config_args),
    }


async def submit_generation(
    client: genai.Client, request: VideoGenerationRequest, model_config: VeoModelConfig
):
    """Starts the long-running generation and returns its operation."""
    call_args = build_generation_call(request, model_config)
    logger.info(f"Calling generate_videos with model: {call_args['model']}")
    logger.info(
        f"Config: {call_args['config'].model_dump(exclude_none=True, exclude={'last_frame', 'reference_images'})}"
    )
    try:
        return await client.aio.models.generate_videos(**call_args)
    except Exception as e:
        logger.error(f"Failed to start Veo job: {e}")
        raise RemoteSubmissionError(f"Could not start video generation: {e}") from e


async def wait_for_operation(
    client: genai.Client, operation, poll_interval_seconds: float
):
    """Polls an operation until it reports done and returns the final state."""
    logger.info("Polling video generation operation...")
    while not operation.done:
        await asyncio.sleep(poll_interval_seconds)
        try:
            operation = await client.aio.operations.get(operation)
        except Exception as e:
            logger.error(f"Polling {operation.name} failed: {e}")
            raise RemotePollError(f"Lost track of the generation job: {e}") from e
        logger.info(f"Operation in progress: {operation.name}")
    return operation


def extract_generated_video(operation) -> types.Video:
    """Returns the first generated video of a finished operation."""
    if operation.error:
        error_details = operation.error
        if isinstance(error_details, dict):
            error_details = error_details.get("message") or str(error_details)
        logger.info(f"Video generation failed with error: {error_details}")
        raise RemotePollError(f"API Error: {error_details}")

    result = operation.response or getattr(operation, "result", None)
    if not result:
        raise RemotePollError("Unexpected API response structure or operation not done.")

    if getattr(result, "rai_media_filtered_count", None):
        reasons = result.rai_media_filtered_reasons or ["unspecified"]
        raise RemotePollError(f"Content Filtered: {reasons[0]}")

    if not result.generated_videos or not result.generated_videos[0].video:
        raise RemoteFetchError(
            "API reported success but no video was found in the response."
        )
    return result.generated_videos[0].video


def _download(uri: str, api_key: str, timeout: float) -> bytes:
    headers = {"x-goog-api-key": api_key} if api_key else {}
    response = requests.get(uri, headers=headers, timeout=timeout)
    response.raise_for_status()
    return response.content


async def fetch_video_bytes(
    video: types.Video, api_key: str, timeout: float
) -> bytes:
    """Returns the bytes of a generated video, downloading them if needed."""
    if video.video_bytes:
        return video.video_bytes
    if not video.uri or not video.uri.startswith("https://"):
        raise RemoteFetchError(f"Cannot download video from '{video.uri}'.")
    logger.info(f"Downloading generated video from {video.uri}")
    try:
        data = await asyncio.to_thread(_download, video.uri, api_key, timeout)
    except requests.RequestException as e:
        raise RemoteFetchError(f"Failed to download the generated video: {e}") from e
    if not data:
        raise RemoteFetchError("The generated video was empty.")
    return data


async def generate_video(
    request: VideoGenerationRequest,
    client: Optional[genai.Client] = None,
    poll_interval_seconds: Optional[float] = None,
    session_id: Optional[str] = None,
) -> GeneratedVideo:
    """Generates a video for a request using the genai SDK.

    Handles text-to-video, image-to-video (with interpolation and looping),
    reference-to-video and video extension.

    Raises:
        RemoteSubmissionError, RemotePollError, RemoteFetchError: On remote failures.
    """
    config = Default()
    model_config = get_veo_model_config(request.model)
    if not model_config:
        raise RemoteSubmissionError(f"Unsupported Veo model: {request.model}")
    if request.mode not in model_config.supported_modes:
        raise RemoteSubmissionError(
            f"{model_config.display_name} does not support mode {request.mode.value}"
        )
    if (
        request.aspect_ratio not in model_config.supported_aspect_ratios
        or request.resolution not in model_config.resolutions
    ):
        raise RemoteSubmissionError(
            f"{model_config.display_name} does not support "
            f"{request.aspect_ratio.value} at {request.resolution.value}"
        )
    if client is None:
        client = get_client()
    if poll_interval_seconds is None:
        poll_interval_seconds = config.VEO_POLL_INTERVAL_SECONDS

    with track_model_call(
        model_name=model_config.model_name,
        session_id=session_id,
        mode=request.mode.value,
        prompt_length=len(request.prompt),
        aspect_ratio=request.aspect_ratio.value,
        resolution=request.resolution.value,
    ):
        operation = await submit_generation(client, request, model_config)
        operation = await wait_for_operation(client, operation, poll_interval_seconds)
        video = extract_generated_video(operation)
        data = await fetch_video_bytes(
            video, config.GEMINI_API_KEY, config.VEO_DOWNLOAD_TIMEOUT_SECONDS
        )

    logger.info(f"Successfully generated video ({len(data)} bytes).")
    return GeneratedVideo(
        data=data,
        mime_type=video.mime_type or "video/mp4",
        video=video,
        model_name=model_config.model_name,
    )
