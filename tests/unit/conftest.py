"""Pytest configuration and fixtures for unit tests."""

import pytest

from src.core.local_config import LocalConfigStore
from src.core.state import AppContext
from tests.unit.mocks import InMemoryRemoteStore, RecordingScheduler


@pytest.fixture
def remote_store():
    """Provides a fresh in-memory sheet for each test."""
    return InMemoryRemoteStore()


@pytest.fixture
def scheduler():
    return RecordingScheduler()


@pytest.fixture
def local_config(tmp_path):
    """Durable config backed by a throwaway file."""
    return LocalConfigStore(tmp_path / "local_config.json")


@pytest.fixture
def ctx(remote_store, scheduler, local_config):
    """Anonymous application context wired to the in-memory sheet."""
    return AppContext.initialize(store=remote_store, scheduler=scheduler, local_config=local_config)


@pytest.fixture
def signed_in_ctx(ctx):
    """Context with foreman Joe signed in."""
    ctx.state.current_user = "Joe"
    return ctx
