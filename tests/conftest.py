"""Pytest configuration and fixtures shared across all test modules.

Environment variables must be set before anything imports
``studio_api.core.config``, which builds the global settings at import time.
"""

import base64
import os

os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("LLM_PROVIDER", "openai")
os.environ.setdefault("LLM_API_KEY", "test-key-123")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest  # noqa: E402

# Smallest payloads that pass the JPEG / PNG signature checks
JPEG_BYTES = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00" + b"\x00" * 32
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


@pytest.fixture
def jpeg_base64() -> str:
    return base64.b64encode(JPEG_BYTES).decode()


@pytest.fixture
def png_data_url() -> str:
    return "data:image/png;base64," + base64.b64encode(PNG_BYTES).decode()
