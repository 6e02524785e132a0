"""Conversation REST and WebSocket routes - V1."""

from typing import Optional
from fastapi import APIRouter, HTTPException, Depends, Header, Query, Response, WebSocket, WebSocketDisconnect

from ...exceptions import (
    ConversationCreateError,
    EmptyMessageError,
    InvalidCursorError,
    InvalidParticipantsError,
    NotAuthenticatedError,
    NotParticipantError,
)
from ...models.conversation import (
    ConversationListResponse,
    CreateConversationRequest,
    CreateConversationResponse,
    MarkReadResponse,
)
from ...models.message import MessagePageResponse, MessageResponse, SendMessageRequest
from ...services.message_pager import Failed, Page
from ...services.messaging import MessagingService
from ...services.realtime import MessageInserted
from ...utils.logger import get_app_logger

router = APIRouter(prefix="/api/v1/conversations", tags=["Conversations"])
logger = get_app_logger()

# Messaging service (set by main.py)
messaging_service: MessagingService = None


def get_messaging_service() -> MessagingService:
    """Dependency to get the messaging service."""
    if messaging_service is None:
        raise HTTPException(status_code=500, detail="Messaging service not initialized")
    return messaging_service


def get_actor_id(x_user_id: Optional[str] = Header(None)) -> Optional[str]:
    """Current user as asserted by the authentication proxy; None when anonymous."""
    return x_user_id or None


@router.get("", response_model=ConversationListResponse)
async def list_conversations(
    actor_id: Optional[str] = Depends(get_actor_id),
    service: MessagingService = Depends(get_messaging_service)
):
    """List the actor's conversations, most recent first."""
    conversations = await service.reader.list_conversations(actor_id)
    return ConversationListResponse(conversations=conversations, total=len(conversations))


@router.post("", response_model=CreateConversationResponse)
async def create_conversation(
    request: CreateConversationRequest,
    response: Response,
    actor_id: Optional[str] = Depends(get_actor_id),
    service: MessagingService = Depends(get_messaging_service)
):
    """Create a conversation, or return the existing direct one (200)."""
    try:
        result = await service.mutations.create_conversation(
            actor_id,
            request.participant_ids,
            initial_message=request.initial_message,
            title=request.title
        )
    except NotAuthenticatedError as e:
        raise HTTPException(status_code=401, detail=str(e))
    except InvalidParticipantsError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ConversationCreateError as e:
        raise HTTPException(status_code=500, detail=str(e))

    response.status_code = 201 if result.created else 200
    conv = result.conversation
    return CreateConversationResponse(
        id=conv.id,
        type=conv.type,
        title=conv.title,
        created_by=conv.created_by,
        created_at=conv.created_at,
        last_message_at=conv.last_message_at,
        last_message_preview=conv.last_message_preview,
        created=result.created
    )


@router.get("/{conversation_id}/messages", response_model=MessagePageResponse)
async def list_messages(
    conversation_id: str,
    cursor: Optional[str] = Query(None, description="next_cursor of the previous page"),
    actor_id: Optional[str] = Depends(get_actor_id),
    service: MessagingService = Depends(get_messaging_service)
):
    """Get one page of messages, newest first."""
    # Non-members see an empty history, as with row-level security
    if not actor_id or not service.is_participant(conversation_id, actor_id):
        return MessagePageResponse(conversation_id=conversation_id, items=[], next_cursor=None)

    try:
        result = await service.pager.list_messages(conversation_id, cursor)
    except InvalidCursorError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if isinstance(result, Failed):
        raise HTTPException(status_code=503, detail=f"Messages temporarily unavailable: {result.reason}")

    if isinstance(result, Page):
        return MessagePageResponse(
            conversation_id=conversation_id,
            items=result.items,
            next_cursor=result.next_cursor
        )

    return MessagePageResponse(conversation_id=conversation_id, items=[], next_cursor=None)


@router.post("/{conversation_id}/messages", response_model=MessageResponse, status_code=201)
async def send_message(
    conversation_id: str,
    request: SendMessageRequest,
    actor_id: Optional[str] = Depends(get_actor_id),
    service: MessagingService = Depends(get_messaging_service)
):
    """Send a message to a conversation."""
    try:
        return await service.mutations.send_message(
            actor_id,
            conversation_id,
            request.content,
            message_type=request.message_type,
            media_url=request.media_url,
            shared_content_id=request.shared_content_id,
            shared_content_type=request.shared_content_type
        )
    except NotAuthenticatedError as e:
        raise HTTPException(status_code=401, detail=str(e))
    except NotParticipantError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except EmptyMessageError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/{conversation_id}/read", response_model=MarkReadResponse)
async def mark_conversation_read(
    conversation_id: str,
    actor_id: Optional[str] = Depends(get_actor_id),
    service: MessagingService = Depends(get_messaging_service)
):
    """Mark the conversation read for the actor (no-op when anonymous)."""
    updated = await service.mutations.mark_conversation_read(actor_id, conversation_id)
    return MarkReadResponse(conversation_id=conversation_id, updated=updated)


@router.websocket("/{conversation_id}/ws")
async def conversation_feed(websocket: WebSocket, conversation_id: str):
    """
    Push an invalidation notice to the client whenever a message lands in
    the conversation. The client re-fetches the first page on receipt.
    """
    await websocket.accept()

    service = messaging_service
    if service is None:
        await websocket.send_json({"type": "error", "content": "Messaging service not initialized"})
        await websocket.close(code=1011)
        return

    actor_id = websocket.headers.get("x-user-id") or websocket.query_params.get("user_id")
    if not actor_id or not service.is_participant(conversation_id, actor_id):
        await websocket.send_json({"type": "error", "content": "Not a participant"})
        await websocket.close(code=4403)
        return

    async def _notify(event: MessageInserted) -> None:
        await websocket.send_json({
            "type": "invalidate",
            "conversation_id": event.conversation_id,
            "message_id": event.message_id,
        })

    try:
        async with service.invalidator.watch_conversation(conversation_id, on_invalidate=_notify):
            logger.info(f"WebSocket watching conversation {conversation_id} for {actor_id}")
            await websocket.send_json({"type": "subscribed", "conversation_id": conversation_id})

            while True:
                data = await websocket.receive_text()
                if data == "ping":
                    await websocket.send_json({"type": "pong"})

    except WebSocketDisconnect:
        logger.info(f"WebSocket disconnected from conversation {conversation_id}")
