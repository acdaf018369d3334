"""
===========================================================================
routes/conversation_routes.py — Conversation Routes
===========================================================================

PURPOSE:
    A "conversation" ties a browser session to the location it is
    chatting about. The browser makes up its own session id (a short
    random string) when the page loads; there is no login.

    - CREATE → POST /api/conversations                        (start one)
    - READ   → GET  /api/sessions/{session_id}/conversations  (list them)

    Conversations are never updated or deleted.

USED BY:
    main.py (included via the router)
===========================================================================
"""

import logging
from typing import List

from fastapi import APIRouter, Depends

from database import RecordStore, get_storage
from schemas import Conversation, ConversationCreate

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Create the router for conversation routes
# ---------------------------------------------------------------------------
router = APIRouter()


# ===========================================================================
# ROUTE 1: Create a new conversation
# ===========================================================================

@router.post("/api/conversations", response_model=Conversation)
async def create_conversation(conv: ConversationCreate,
                              storage: RecordStore = Depends(get_storage)):
    """
    Create a new conversation for a location.

    Example JSON body:
        {"locationId": 1, "sessionId": "k3j9x0a2b"}

    The location id is stored as given — it is not checked here.
    """
    conversation = storage.create_conversation(conv)
    logger.info(
        "Created conversation %d (location %d, session %s)",
        conversation.id, conversation.location_id, conversation.session_id
    )
    return conversation


# ===========================================================================
# ROUTE 2: List the conversations of a session
# ===========================================================================

@router.get("/api/sessions/{session_id}/conversations", response_model=List[Conversation])
async def get_conversations(session_id: str, storage: RecordStore = Depends(get_storage)):
    """
    Get every conversation started by one browser session.

    An unknown session id simply returns an empty list.
    """
    return storage.get_conversations_by_session(session_id)
