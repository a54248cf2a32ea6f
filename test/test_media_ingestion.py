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
import base64
import io
import os
import sys

import pytest
from PIL import Image

# Setup sys.path to allow imports from the parent directory.
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from common.error_handling import ReadError
from common.media_ingestion import (
    ingest,
    ingest_image,
    ingest_video,
    split_data_url,
)


def png_bytes(color="blue"):
    buffer = io.BytesIO()
    Image.new("RGB", (8, 4), color=color).save(buffer, format="PNG")
    return buffer.getvalue()


def test_ingest_round_trips_file_bytes(tmp_path):
    data = bytes(range(256)) * 10
    path = tmp_path / "clip.bin"
    path.write_bytes(data)

    media = asyncio.run(ingest(str(path)))

    assert base64.b64decode(media.payload) == data
    assert media.decode() == data
    assert media.file_name == "clip.bin"
    assert media.raw_handle == str(path)


def test_ingest_reads_file_objects():
    data = png_bytes()
    upload = io.BytesIO(data)
    upload.name = "upload.png"

    media = asyncio.run(ingest(upload))

    assert media.decode() == data
    assert media.mime_type == "image/png"
    assert media.file_name == "upload.png"


def test_ingest_strips_data_url_prefix():
    payload = base64.b64encode(b"frame").decode()

    media = asyncio.run(ingest(f"data:image/webp;base64,{payload}"))

    assert media.payload == payload
    assert not media.payload.startswith("data:")
    assert media.mime_type == "image/webp"


def test_split_data_url():
    assert split_data_url("data:video/mp4;base64,QUJD") == ("video/mp4", "QUJD")
    assert split_data_url("QUJD") == (None, "QUJD")


def test_ingest_empty_file_fails(tmp_path):
    path = tmp_path / "empty.png"
    path.write_bytes(b"")

    with pytest.raises(ReadError):
        asyncio.run(ingest(path))


def test_ingest_empty_data_url_fails():
    with pytest.raises(ReadError):
        asyncio.run(ingest("data:image/png;base64,"))


def test_ingest_plain_text_data_url_fails():
    with pytest.raises(ReadError):
        asyncio.run(ingest("data:text/plain,hello world"))


def test_ingest_corrupt_base64_data_url_fails():
    with pytest.raises(ReadError):
        asyncio.run(ingest("data:image/png;base64,@@not base64@@"))

    with pytest.raises(ReadError):
        asyncio.run(ingest_video("data:video/mp4;base64,QUJ"))


def test_ingest_missing_file_fails(tmp_path):
    with pytest.raises(ReadError):
        asyncio.run(ingest(tmp_path / "missing.png"))


def test_ingest_text_mode_file_fails(tmp_path):
    path = tmp_path / "notes.txt"
    path.write_text("hello")
    with open(path) as f:
        with pytest.raises(ReadError):
            asyncio.run(ingest(f))


def test_ingest_image_detects_format(tmp_path):
    data = png_bytes()
    path = tmp_path / "frame.bin"
    path.write_bytes(data)

    media = asyncio.run(ingest_image(path))

    assert media.mime_type == "image/png"
    assert media.decode() == data


def test_ingest_image_rejects_non_images(tmp_path):
    path = tmp_path / "frame.png"
    path.write_bytes(b"definitely not a png")

    with pytest.raises(ReadError):
        asyncio.run(ingest_image(path))


def test_ingest_video_defaults_to_mp4():
    media = asyncio.run(ingest_video(b"\x00\x00\x00\x18ftypmp42"))

    assert media.mime_type == "video/mp4"
    assert media.decode() == b"\x00\x00\x00\x18ftypmp42"
