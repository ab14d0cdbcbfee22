"""Chat REST API routes - V1."""

from typing import Optional
from fastapi import APIRouter, HTTPException, Depends, Header, Path, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ...exceptions import ChatError, Unauthorized, ValidationError
from ...models.chat import (
    CONVERSATION_ID_PATTERN,
    SendMessageRequest,
    CreateConversationResponse,
    SendMessageResponse,
    ConversationSummaryResponse,
    ConversationListResponse,
    MessageResponse,
    ConversationHistoryResponse,
    DeleteConversationResponse,
)
from ...services import ConversationOrchestrator
from ...utils.logger import get_component_logger

router = APIRouter(prefix="/api/v1/chat", tags=["Chat"])

# Conversation orchestrator (set by main.py)
orchestrator: ConversationOrchestrator = None

STATUS_CODES = {
    "UNAUTHORIZED": 401,
    "NOT_FOUND_OR_UNAUTHORIZED": 404,
    "REMOTE_THREAD_MISSING": 404,
    "VALIDATION_ERROR": 422,
    "REMOTE_UNAVAILABLE": 502,
    "RUN_TIMEOUT": 504,
}


def get_orchestrator() -> ConversationOrchestrator:
    """Dependency to get the conversation orchestrator."""
    if orchestrator is None:
        raise HTTPException(status_code=500, detail="Conversation orchestrator not initialized")
    return orchestrator


def get_owner_id(x_owner_id: Optional[str] = Header(None, alias="X-Owner-Id")) -> str:
    """Owner identity, verified and forwarded by the authentication layer."""
    if not x_owner_id:
        raise _to_http_error(Unauthorized())
    return x_owner_id


def _to_http_error(error: ChatError) -> HTTPException:
    """Map an error kind to its HTTP status."""
    status_code = STATUS_CODES.get(error.error_code, 500)
    if status_code >= 500:
        get_component_logger("api").error(f"{error.error_code}: {error.message}")
    return HTTPException(status_code=status_code, detail=error.to_dict())


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed requests in the same shape as other errors."""
    error = ValidationError("Invalid request", {"errors": jsonable_encoder(exc.errors())})
    return JSONResponse(
        status_code=STATUS_CODES[error.error_code],
        content={"detail": error.to_dict()}
    )


@router.post("/thread", response_model=CreateConversationResponse)
async def create_thread(
    owner_id: str = Depends(get_owner_id),
    service: ConversationOrchestrator = Depends(get_orchestrator)
):
    """Start a new conversation."""
    try:
        created = await service.start_conversation(owner_id)
    except ChatError as e:
        raise _to_http_error(e)

    return CreateConversationResponse(conversation_id=created.id, created_at=created.created_at)


@router.post("/message", response_model=SendMessageResponse)
async def send_message(
    request: SendMessageRequest,
    owner_id: str = Depends(get_owner_id),
    service: ConversationOrchestrator = Depends(get_orchestrator)
):
    """Send a message and wait for the assistant's reply."""
    try:
        reply = await service.send_message(owner_id, request.conversation_id, request.message)
    except ChatError as e:
        raise _to_http_error(e)

    return SendMessageResponse(response=reply.response, conversation_id=reply.conversation_id)


@router.get("/threads", response_model=ConversationListResponse)
async def list_threads(
    owner_id: str = Depends(get_owner_id),
    service: ConversationOrchestrator = Depends(get_orchestrator)
):
    """List the caller's active conversations, most recent first."""
    try:
        summaries = await service.list_conversations(owner_id)
    except ChatError as e:
        raise _to_http_error(e)

    return ConversationListResponse(
        conversations=[
            ConversationSummaryResponse(
                conversation_id=s.id, created_at=s.created_at, updated_at=s.updated_at
            )
            for s in summaries
        ],
        total=len(summaries)
    )


@router.get("/history/{conversation_id}", response_model=ConversationHistoryResponse)
async def get_history(
    conversation_id: str = Path(description="Conversation (thread) ID", pattern=CONVERSATION_ID_PATTERN.pattern),
    owner_id: str = Depends(get_owner_id),
    service: ConversationOrchestrator = Depends(get_orchestrator)
):
    """Get the transcript of one conversation."""
    try:
        history = await service.get_history(owner_id, conversation_id)
    except ChatError as e:
        raise _to_http_error(e)

    return ConversationHistoryResponse(
        conversation_id=history.id,
        messages=[
            MessageResponse(role=m.role, content=m.content, created_at=m.created_at)
            for m in history.messages
        ],
        created_at=history.created_at,
        updated_at=history.updated_at
    )


@router.delete("/thread/{conversation_id}", response_model=DeleteConversationResponse)
async def delete_thread(
    conversation_id: str = Path(description="Conversation (thread) ID", pattern=CONVERSATION_ID_PATTERN.pattern),
    owner_id: str = Depends(get_owner_id),
    service: ConversationOrchestrator = Depends(get_orchestrator)
):
    """End a conversation."""
    try:
        await service.end_conversation(owner_id, conversation_id)
    except ChatError as e:
        raise _to_http_error(e)

    return DeleteConversationResponse(message="Thread deleted successfully")
