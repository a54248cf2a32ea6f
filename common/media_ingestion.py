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


"""Turns user-supplied files into transport-ready base64 payloads."""

import asyncio
import base64
import binascii
import io
import mimetypes
import os
from typing import Any, Optional

from PIL import Image, UnidentifiedImageError

from common.analytics import get_logger
from common.error_handling import ReadError
from models.requests import EncodedMedia

logger = get_logger(__name__)

DEFAULT_IMAGE_MIME_TYPE = "image/png"
DEFAULT_VIDEO_MIME_TYPE = "video/mp4"


def split_data_url(data_url: str) -> tuple[Optional[str], str]:
    """Splits a data URL into its mime type and its bare base64 payload.

    Strings without a data URL prefix are returned unchanged with no mime type.
    """
    if not data_url.startswith("data:"):
        return None, data_url
    header, _, payload = data_url.partition(",")
    mime_type = header[len("data:"):].split(";")[0] or None
    return mime_type, payload


def _file_name(file: Any) -> Optional[str]:
    if isinstance(file, (str, os.PathLike)):
        return os.path.basename(os.fspath(file))
    name = getattr(file, "name", None)
    return os.path.basename(name) if isinstance(name, str) else None


def _guess_mime_type(file: Any, default: str) -> str:
    mime_type = getattr(file, "mime_type", None)
    if mime_type:
        return mime_type
    name = _file_name(file)
    if name:
        guessed, _ = mimetypes.guess_type(name)
        if guessed:
            return guessed
    return default


def _read_bytes(file: Any) -> bytes:
    """Reads every byte of a path or file-like object."""
    if isinstance(file, (str, os.PathLike)):
        with open(file, "rb") as f:
            return f.read()
    if isinstance(file, (bytes, bytearray, memoryview)):
        return bytes(file)
    if hasattr(file, "getvalue"):
        return file.getvalue()
    if hasattr(file, "read"):
        if hasattr(file, "seek"):
            file.seek(0)
        data = file.read()
        if isinstance(data, str):
            raise TypeError("file must be opened in binary mode")
        return data
    raise TypeError(f"Unsupported file type: {type(file).__name__}")


async def ingest(file: Any, mime_type: Optional[str] = None,
                 default_mime_type: str = DEFAULT_IMAGE_MIME_TYPE) -> EncodedMedia:
    """Reads a file and returns its base64 payload.

    Args:
        file: A path, a file-like object (e.g. an uploaded file), raw bytes,
            or a data URL string.
        mime_type: Overrides the detected mime type.
        default_mime_type: Used when the mime type cannot be detected.

    Raises:
        ReadError: If the file cannot be read, yields no data, or is a data URL
            without a valid base64 payload.
    """
    if isinstance(file, str) and file.startswith("data:"):
        header, _, _ = file.partition(",")
        if ";base64" not in header:
            raise ReadError("Data URL is not base64 encoded.")
        detected, payload = split_data_url(file)
        if not payload:
            raise ReadError("Failed to read file as base64.")
        try:
            base64.b64decode(payload, validate=True)
        except binascii.Error as e:
            raise ReadError(f"Data URL payload is not valid base64: {e}") from e
        return EncodedMedia(
            raw_handle=None,
            payload=payload,
            mime_type=mime_type or detected or default_mime_type,
        )

    try:
        data = await asyncio.to_thread(_read_bytes, file)
    except (OSError, TypeError, ValueError) as e:
        logger.warning(f"Could not read {_file_name(file) or 'file'}: {e}")
        raise ReadError(f"Could not read file: {e}") from e

    payload = base64.b64encode(data).decode("ascii") if data else ""
    if not payload:
        raise ReadError("Failed to read file as base64.")

    return EncodedMedia(
        raw_handle=file,
        payload=payload,
        mime_type=mime_type or _guess_mime_type(file, default_mime_type),
        file_name=_file_name(file),
    )


async def ingest_image(file: Any, mime_type: Optional[str] = None) -> EncodedMedia:
    """Like ingest(), and also checks that the bytes decode as an image."""
    media = await ingest(file, mime_type=mime_type)
    try:
        with Image.open(io.BytesIO(media.decode())) as img:
            img.verify()
            image_format = img.format
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise ReadError(f"File is not a readable image: {e}") from e

    if mime_type is None and image_format:
        detected = Image.MIME.get(image_format)
        if detected and detected != media.mime_type:
            media = media.model_copy(update={"mime_type": detected})
    logger.info(
        f"Ingested image {media.file_name or ''} ({media.mime_type}, "
        f"{len(media.payload)} base64 chars)"
    )
    return media


async def ingest_video(file: Any, mime_type: Optional[str] = None) -> EncodedMedia:
    """Reads a local video clip."""
    media = await ingest(
        file, mime_type=mime_type, default_mime_type=DEFAULT_VIDEO_MIME_TYPE
    )
    logger.info(
        f"Ingested video {media.file_name or ''} ({media.mime_type}, "
        f"{len(media.payload)} base64 chars)"
    )
    return media
