"""Root pytest configuration for netlify-blobs tests."""
import pytest

from netlify_blobs import environment
from netlify_blobs.environment import CONTEXT_ENV_VAR
from netlify_blobs.settings import Settings

from .fakes.fake_backend import FakeBackend


@pytest.fixture(autouse=True)
def clean_context(monkeypatch):
    """Start every test without any environment or global context."""
    # setenv first so monkeypatch restores the variable after the test
    monkeypatch.setenv(CONTEXT_ENV_VAR, "")
    monkeypatch.delenv(CONTEXT_ENV_VAR)
    monkeypatch.delenv("NETLIFY_SITE_ID", raising=False)
    monkeypatch.delenv("NETLIFY_AUTH_TOKEN", raising=False)
    environment.clear_global_context()
    yield
    environment.clear_global_context()


@pytest.fixture
def settings():
    """Settings with zero retry delays."""
    return Settings(retry_delay_s=0.0, retry_max_delay_s=0.0)


@pytest.fixture
def backend():
    """Scripted fake backend; tests assert `backend.fulfilled` at the end."""
    return FakeBackend()
