"""Pytest fixtures for API testing."""

import pytest
from httpx import AsyncClient, ASGITransport
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError

from threadchat.api.v1 import chat


@pytest.fixture(scope="function")
async def client(orchestrator):
    """Create async HTTP client over the chat router and a fake assistant service."""
    chat.orchestrator = orchestrator

    # Create a test app without lifespan (to avoid conflicts)
    test_app = FastAPI(title="threadchat test")
    test_app.add_exception_handler(RequestValidationError, chat.validation_exception_handler)
    test_app.include_router(chat.router)

    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    chat.orchestrator = None
