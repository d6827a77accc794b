"""
pytest configuration and fixtures.
"""

from typing import Generator
import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from webcore import WebConfig
from webcore.http import ResponseBuilder, BufferedSink
from webcore.session import Session, MemorySessionBackend


@pytest.fixture
def config() -> WebConfig:
    """Default test configuration."""
    return WebConfig(log_level="WARNING")


@pytest.fixture
def sink() -> BufferedSink:
    """In-memory transport that records what a response emits."""
    return BufferedSink()


@pytest.fixture
def response(sink: BufferedSink, config: WebConfig) -> ResponseBuilder:
    """Fresh response bound to the recording sink."""
    return ResponseBuilder(sink, config=config)


@pytest.fixture
def backend() -> MemorySessionBackend:
    """Shared in-memory session storage."""
    return MemorySessionBackend()


@pytest.fixture
def session(backend: MemorySessionBackend, config: WebConfig) -> Generator[Session, None, None]:
    """Session that is NOT started yet."""
    session = Session(backend, auto_start=False, config=config)

    yield session

    if session.is_started():
        session.destroy(remove_data=True)
