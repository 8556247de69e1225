"""Multilingual assistant conversation endpoints."""

from fastapi import APIRouter, Depends, Response, status

from craftstory.api.deps import get_conversations
from craftstory.core.models import (
    ConversationCreate,
    ConversationMessage,
    ConversationResponse,
    LanguageChangeRequest,
    MessageRequest,
)
from craftstory.services.assistant import ConversationRegistry, ConversationSession
from craftstory.services.audio.capture import AudioPayload

router = APIRouter(prefix="/conversations", tags=["assistant"])


def _to_response(session: ConversationSession) -> ConversationResponse:
    return ConversationResponse(
        id=session.id,
        language=session.language,
        context=session.context,
        messages=session.messages,
    )


@router.post("", response_model=ConversationResponse, status_code=status.HTTP_201_CREATED)
async def create_conversation(
    body: ConversationCreate,
    conversations: ConversationRegistry = Depends(get_conversations),
):
    """Start a conversation; the response carries the greeting."""
    session = await conversations.create(body.language, body.context)
    return _to_response(session)


@router.get("/{conversation_id}", response_model=ConversationResponse)
async def get_conversation(
    conversation_id: str,
    conversations: ConversationRegistry = Depends(get_conversations),
):
    return _to_response(conversations.get(conversation_id))


@router.post("/{conversation_id}/messages", response_model=ConversationMessage)
async def send_message(
    conversation_id: str,
    body: MessageRequest,
    conversations: ConversationRegistry = Depends(get_conversations),
):
    """Send a typed or spoken message and return the assistant's reply."""
    session = conversations.get(conversation_id)
    if body.audio_data:
        return await session.respond_to_audio(AudioPayload.from_data_uri(body.audio_data))
    return await session.respond(body.text or "")


@router.delete("/{conversation_id}/messages", response_model=ConversationResponse)
async def clear_messages(
    conversation_id: str,
    conversations: ConversationRegistry = Depends(get_conversations),
):
    """Clear the conversation history."""
    session = conversations.get(conversation_id)
    session.clear()
    return _to_response(session)


@router.put("/{conversation_id}/language", response_model=ConversationResponse)
async def change_language(
    conversation_id: str,
    body: LanguageChangeRequest,
    conversations: ConversationRegistry = Depends(get_conversations),
):
    """Switch language; the conversation restarts with a new greeting."""
    session = conversations.get(conversation_id)
    await session.change_language(body.language)
    return _to_response(session)


@router.delete("/{conversation_id}", status_code=status.HTTP_204_NO_CONTENT)
async def end_conversation(
    conversation_id: str,
    conversations: ConversationRegistry = Depends(get_conversations),
):
    """End the conversation and drop its history."""
    conversations.discard(conversation_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
