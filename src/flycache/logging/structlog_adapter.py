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
"""structlog-backed :class:`~flycache.logging.port.LoggingPort`.

Only the ``flycache`` logger namespace is touched: a single stream handler
is attached to the ``flycache`` logger and renders both structlog events
and plain stdlib records from the cache modules through
:class:`structlog.stdlib.ProcessorFormatter`. Records still propagate to
the application's own handlers.

Settings (``flycache.logging``)::

    format: console | json
    stream: stdout | stderr
    level:
      root: INFO              # level of the ``flycache`` logger
      flycache.cache: DEBUG   # any further entries are per-module levels
"""

from __future__ import annotations

import logging
import sys
from typing import IO, Any

import structlog

from flycache.core.config import Config

NAMESPACE = "flycache"
HANDLER_NAME = "flycache-structlog"

_SHARED_PROCESSORS: list[structlog.types.Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
]


class StructlogAdapter:
    """Renders ``flycache`` log output with structlog.

    Pass *stream* to write somewhere other than the configured standard
    stream.
    """

    def __init__(self, stream: IO[str] | None = None) -> None:
        self._stream = stream
        self._root_level = "INFO"
        self._format = "console"
        self._module_levels: dict[str, str] = {}
        self._handler: logging.Handler | None = None

    @property
    def handler(self) -> logging.Handler | None:
        return self._handler

    def configure(self, config: Config) -> None:
        levels = dict(config.get_section("flycache.logging.level"))
        self._root_level = str(levels.pop("root", "INFO")).upper()
        self._module_levels = {name: str(level).upper() for name, level in levels.items()}
        self._format = str(config.get("flycache.logging.format", "console")).lower()
        stream_name = str(config.get("flycache.logging.stream", "stdout")).lower()

        stream = self._stream
        if stream is None:
            stream = sys.stderr if stream_name == "stderr" else sys.stdout

        structlog.configure(
            processors=[*_SHARED_PROCESSORS, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )
        self._install_handler(stream)

        self.set_level(NAMESPACE, self._root_level)
        for name, level in self._module_levels.items():
            self.set_level(name, level)

    def get_logger(self, name: str) -> Any:
        return structlog.get_logger(name)

    def set_level(self, name: str, level: str) -> None:
        """Set *level* on the stdlib logger *name*; unknown names fall back to INFO."""
        logging.getLogger(name).setLevel(getattr(logging, level.upper(), logging.INFO))

    def reset(self) -> None:
        _remove_handlers(logging.getLogger(NAMESPACE))
        self._handler = None

    def _install_handler(self, stream: IO[str]) -> None:
        if self._format == "json":
            renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
            tail: list[structlog.types.Processor] = [structlog.processors.format_exc_info, renderer]
        else:
            tail = [structlog.dev.ConsoleRenderer(colors=False)]

        formatter = structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_SHARED_PROCESSORS,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *tail],
        )
        handler = logging.StreamHandler(stream)
        handler.set_name(HANDLER_NAME)
        handler.setFormatter(formatter)

        # A repeated configure replaces the handler instead of stacking another.
        namespace_logger = logging.getLogger(NAMESPACE)
        _remove_handlers(namespace_logger)
        namespace_logger.addHandler(handler)
        self._handler = handler


def _remove_handlers(logger: logging.Logger) -> None:
    for existing in list(logger.handlers):
        if existing.get_name() == HANDLER_NAME:
            logger.removeHandler(existing)
            existing.close()
