"""Chatbot controller for assistant conversations."""
import logging

from portfolio_proxy.controllers.error_mapping import to_http_exception
from portfolio_proxy.errors import InputValidationError, ServiceError
from portfolio_proxy.models import ChatMessageRequest, ChatMessageResponse

logger = logging.getLogger(__name__)


class ChatbotController:
    """Controller for chatbot operations."""

    def __init__(self, assistant_service):
        """Initialize chatbot controller.

        Args:
            assistant_service: Assistant conversation orchestrator
        """
        self.assistant_service = assistant_service

    async def send_message(self, request: ChatMessageRequest) -> ChatMessageResponse:
        """Handle a chat message and return the assistant reply.

        Args:
            request: ChatMessageRequest with the user's message

        Returns:
            ChatMessageResponse
        """
        try:
            if not request.message.strip():
                raise InputValidationError("Message is required")
            reply = await self.assistant_service.get_reply(request.message)
        except ServiceError as e:
            raise to_http_exception(e, logger, "Chatbot message") from e

        return ChatMessageResponse(response=reply)
