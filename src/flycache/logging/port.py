# Copyright 2026 Firefly Software Solutions Inc.
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
"""Logging contract used when the cache subsystem is configured."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from flycache.core.config import Config


@runtime_checkable
class LoggingPort(Protocol):
    """Sets up output for the ``flycache`` logger namespace.

    Cache modules log through stdlib loggers named after their module;
    an implementation decides where those records go and how they look.
    """

    def configure(self, config: Config) -> None:
        """Apply the ``flycache.logging`` section of *config*."""
        ...

    def get_logger(self, name: str) -> Any:
        """A logger accepting an event name plus key/value context."""
        ...

    def set_level(self, name: str, level: str) -> None: ...

    def reset(self) -> None:
        """Detach whatever :meth:`configure` installed."""
        ...
