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


"""Process-local, revocable URLs for in-memory media.

A generated clip is held as bytes and exposed to consumers (preview,
playback, download) through a ``blob:`` style URL. URLs stay resolvable until
they are revoked, so every URL handed out must be revoked by its owner.
"""

import uuid
from dataclasses import dataclass, field

from common.analytics import get_logger

logger = get_logger(__name__)

BLOB_URL_PREFIX = "blob:genmedia/"


class ObjectUrlRegistry:
    """Holds the bytes behind every live object URL."""

    def __init__(self):
        self._objects: dict[str, tuple[bytes, str]] = {}

    def create_object_url(self, data: bytes, mime_type: str = "video/mp4") -> str:
        url = f"{BLOB_URL_PREFIX}{uuid.uuid4()}"
        self._objects[url] = (bytes(data), mime_type)
        return url

    def revoke_object_url(self, url: str) -> bool:
        """Revokes a URL. Returns False if it was not live."""
        if self._objects.pop(url, None) is None:
            return False
        logger.info(f"Revoked object URL {url}")
        return True

    def resolve(self, url: str) -> bytes:
        """Returns the bytes behind a live URL.

        Raises:
            KeyError: If the URL was never created or has been revoked.
        """
        data, _ = self._objects[url]
        return data

    def mime_type(self, url: str) -> str:
        _, mime_type = self._objects[url]
        return mime_type

    def is_live(self, url: str) -> bool:
        return url in self._objects

    @property
    def live_urls(self) -> list[str]:
        return list(self._objects)

    def __len__(self) -> int:
        return len(self._objects)


@dataclass
class LocalMediaHandle:
    """A byte buffer plus the object URL that dereferences it."""

    data: bytes
    mime_type: str
    url: str
    registry: ObjectUrlRegistry = field(repr=False, compare=False)

    @classmethod
    def acquire(
        cls, registry: ObjectUrlRegistry, data: bytes, mime_type: str = "video/mp4"
    ) -> "LocalMediaHandle":
        url = registry.create_object_url(data, mime_type)
        return cls(data=data, mime_type=mime_type, url=url, registry=registry)

    @property
    def is_live(self) -> bool:
        return self.registry.is_live(self.url)

    def release(self) -> None:
        self.registry.revoke_object_url(self.url)
