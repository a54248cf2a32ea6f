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


import json
import logging
import os
import sys

import pytest

# Setup sys.path to allow imports from the parent directory.
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from common.analytics import JsonFormatter, get_logger, track_model_call
from common.error_handling import GENERIC_FAILURE_MESSAGE, ReadError, user_safe_message
from common.object_urls import BLOB_URL_PREFIX, LocalMediaHandle, ObjectUrlRegistry


def test_json_formatter_includes_extra_data():
    record = logging.LogRecord(
        "genmedia.analytics", logging.INFO, __file__, 1, "Model Call: veo", None, None
    )
    record.extra_data = {"event_type": "model_call", "status": "success"}

    payload = json.loads(JsonFormatter().format(record))

    assert payload["message"] == "Model Call: veo"
    assert payload["level"] == "INFO"
    assert payload["event_type"] == "model_call"


def test_get_logger_adds_single_handler():
    logger = get_logger("genmedia.test")
    get_logger("genmedia.test")
    assert len(logger.handlers) == 1


def test_track_model_call_reraises(caplog):
    with caplog.at_level(logging.INFO, logger="genmedia.analytics"):
        with pytest.raises(ValueError):
            with track_model_call("veo-test", mode="t2v"):
                raise ValueError("bad")
    assert any("(failure)" in r.getMessage() for r in caplog.records)


def test_user_safe_message():
    assert user_safe_message(ReadError("Could not read file")) == "Could not read file"
    assert user_safe_message(RuntimeError("  ")) == GENERIC_FAILURE_MESSAGE


def test_object_url_lifecycle():
    registry = ObjectUrlRegistry()

    handle = LocalMediaHandle.acquire(registry, b"clip")

    assert handle.url.startswith(BLOB_URL_PREFIX)
    assert registry.resolve(handle.url) == b"clip"
    assert registry.mime_type(handle.url) == "video/mp4"

    handle.release()
    handle.release()

    assert not handle.is_live
    with pytest.raises(KeyError):
        registry.resolve(handle.url)
    assert registry.revoke_object_url(handle.url) is False
