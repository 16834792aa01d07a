"""Test harness for deterministic upstream testing.

Provides an in-memory GitHub API double served through
``httpx.MockTransport`` and factory helpers wiring it into the app.
"""
from .fake_github import (
    FAKE_API_URL,
    FakeGitHub,
    RecordedCall,
    blob_sha,
)
from .factories import (
    fake_app,
    fake_config,
)

__all__ = [
    'FAKE_API_URL',
    'FakeGitHub',
    'RecordedCall',
    'blob_sha',
    'fake_app',
    'fake_config',
]
