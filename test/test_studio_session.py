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
import os
import sys
from unittest.mock import AsyncMock

import pytest
from google.genai import types

# Setup sys.path to allow imports from the parent directory.
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from common.error_handling import RemotePollError, ValidationError
from config.veo_models import AspectRatio, GenerationMode, Resolution
from models.requests import EncodedMedia
from models.veo import GeneratedVideo
from services.conversation_service import ConversationSession
from services.veo_service import OutcomeStatus, VeoGenerationService
from state.state import StudioSession


def video_result(uri="https://example.com/files/abc"):
    return GeneratedVideo(
        data=b"mp4-bytes",
        mime_type="video/mp4",
        video=types.Video(uri=uri, mime_type="video/mp4"),
        model_name="veo-test",
    )


def make_session(*results):
    session = StudioSession(
        conversation=ConversationSession(reply_fn=AsyncMock(return_value="Hallo")),
    )
    session.generation = VeoGenerationService(
        registry=session.object_urls,
        generate_fn=AsyncMock(side_effect=list(results)),
    )
    return session


def test_generate_from_form():
    session = make_session(video_result())
    session.form.set_prompt("a paper boat at night")

    outcome = asyncio.run(session.generate())

    assert outcome.is_ready
    assert session.outcome is outcome
    assert session.last_request.prompt == "a paper boat at night"


def test_generate_rejects_incomplete_form():
    session = make_session()

    with pytest.raises(ValidationError):
        asyncio.run(session.generate())

    assert session.outcome.status == OutcomeStatus.IDLE
    assert session.last_request is None


def test_retry_reuses_last_request():
    session = make_session(RemotePollError("boom"), video_result())
    session.form.set_prompt("a paper boat at night")
    failed = asyncio.run(session.generate())
    # Edits after a failure do not change what retry submits.
    session.form.set_prompt("something else")

    retried = asyncio.run(session.retry())

    assert failed.is_failed
    assert retried.is_ready
    assert retried.request is failed.request
    assert retried.request.prompt == "a paper boat at night"


def test_retry_without_previous_request():
    with pytest.raises(ValidationError):
        asyncio.run(make_session().retry())


def test_prepare_extension_uses_current_clip():
    session = make_session(video_result(), video_result("https://example.com/files/next"))
    session.form.set_aspect_ratio(AspectRatio.PORTRAIT)
    session.form.set_resolution(Resolution.P1080)
    session.form.set_prompt("a paper boat at night")
    ready = asyncio.run(session.generate())

    session.prepare_extension()

    assert session.form.mode == GenerationMode.EXTEND_VIDEO
    assert session.form.input_video_handle is ready.video
    assert session.form.aspect_ratio == AspectRatio.PORTRAIT
    assert session.form.resolution == Resolution.P720
    assert session.form.is_ready

    extended = asyncio.run(session.generate())
    assert extended.request.input_video_handle is ready.video


def test_prepare_extension_requires_ready_clip():
    session = make_session()
    with pytest.raises(ValidationError):
        session.prepare_extension()
    assert session.form.mode == GenerationMode.TEXT_TO_VIDEO


def test_new_video_keeps_form():
    session = make_session(video_result())
    session.form.set_mode(GenerationMode.ANIMATE_IMAGE)
    session.form.set_start_frame(
        EncodedMedia(payload=base64.b64encode(b"img").decode(), mime_type="image/png")
    )
    asyncio.run(session.generate())

    session.new_video()

    assert session.outcome.status == OutcomeStatus.IDLE
    assert session.form.start_frame is not None
    assert len(session.object_urls) == 0


def test_close_revokes_everything():
    session = make_session(video_result())
    session.form.set_prompt("waves")
    asyncio.run(session.generate())
    stray = session.object_urls.create_object_url(b"preview", "image/png")

    session.close()

    assert len(session.object_urls) == 0
    assert not session.object_urls.is_live(stray)


def test_chat_is_independent_of_generation():
    session = make_session()

    reply = asyncio.run(session.send_message("Hallo"))

    assert reply == "Hallo"
    assert len(session.conversation.transcript) == 3
    assert session.outcome.status == OutcomeStatus.IDLE


def test_sessions_do_not_share_state():
    first, second = make_session(), make_session()
    first.form.set_prompt("mine")

    assert second.form.prompt == ""
    assert first.session_id != second.session_id
    assert first.object_urls is not second.object_urls


def test_default_service_publishes_into_session_registry():
    session = StudioSession(
        conversation=ConversationSession(reply_fn=AsyncMock(return_value="Hallo")),
    )
    session.generation._generate_fn = AsyncMock(return_value=video_result())
    session.form.set_prompt("a paper boat at night")

    outcome = asyncio.run(session.generate())

    assert session.generation.registry is session.object_urls
    assert session.object_urls.resolve(outcome.media.url) == b"mp4-bytes"
    assert session.object_urls.live_urls == [outcome.media.url]

    session.close()

    assert not session.object_urls.is_live(outcome.media.url)
