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
"""Unified exception hierarchy for FlyCache.

All library exceptions inherit from FlyCacheException, enabling unified
error handling across modules.

Categories:
- BusinessException: invalid arguments and registry misuse
- InfrastructureException: storage backends that cannot be set up
"""

from __future__ import annotations


# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------


class FlyCacheException(Exception):
    """Base exception for all FlyCache errors.

    Carries an optional error code and context dict for structured error data.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "CACHE_INIT").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


# ---------------------------------------------------------------------------
# Business
# ---------------------------------------------------------------------------


class BusinessException(FlyCacheException):
    """Caller-side rule violations."""


class ValidationException(BusinessException):
    """Input validation failures."""


class InvalidAdapterException(ValidationException):
    """Adapter name is unknown, already registered, or names no provider."""


# ---------------------------------------------------------------------------
# Infrastructure
# ---------------------------------------------------------------------------


class InfrastructureException(FlyCacheException):
    """Infrastructure failures: filesystem, network backends."""


class CacheException(InfrastructureException):
    """A cache adapter could not be constructed over its backing store."""
