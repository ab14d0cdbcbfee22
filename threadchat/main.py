"""FastAPI main application."""

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from .config import settings
from .assistants import OpenAIAssistantClient
from .db import DatabaseConnection, ConversationRepository
from .services import ConversationOrchestrator, RunExecutor
from .utils.logger import init_app_logger
from .api.v1 import chat


logger = init_app_logger(settings)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.

    Args:
        app: FastAPI application instance
    """
    logger.info("=" * 70)
    logger.info("Starting threadchat...")
    logger.info(f"  Host: {settings.host}")
    logger.info(f"  Port: {settings.port}")
    logger.info(f"  Database: {settings.database_path}")
    logger.info(f"  Run polling: every {settings.run_poll_interval_ms}ms, up to {settings.run_max_wait_ms}ms")

    if not settings.assistant_id:
        raise RuntimeError("ASSISTANT_ID is not configured")
    logger.info(f"  Assistant: {settings.assistant_id}")

    db_conn = DatabaseConnection(settings.database_path)
    assistant_client = OpenAIAssistantClient.from_settings(settings)
    run_executor = RunExecutor(assistant_client, **settings.get_run_config())

    chat.orchestrator = ConversationOrchestrator(
        store=ConversationRepository(db_conn.conn),
        client=assistant_client,
        run_executor=run_executor,
        assistant_id=settings.assistant_id,
    )

    logger.info("threadchat started successfully")
    logger.info("=" * 70)

    yield

    logger.info("Shutting down threadchat...")
    chat.orchestrator = None
    await assistant_client.client.close()
    db_conn.close()
    logger.info("threadchat shut down successfully")


app = FastAPI(
    title="threadchat",
    description="Persistent multi-turn conversations over assistant threads",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, specify allowed origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(RequestValidationError, chat.validation_exception_handler)
app.include_router(chat.router)


@app.get("/health")
async def health():
    """
    Simple health check endpoint.

    Returns:
        Health status
    """
    return {
        "status": "healthy",
        "service": "threadchat"
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "threadchat.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
