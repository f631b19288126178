"""Config controller for health and configuration endpoints."""
import logging
from typing import Dict

from portfolio_proxy.models import HealthResponse

logger = logging.getLogger(__name__)

PROVIDERS = ["chatbot", "weather", "stock", "sports", "discord"]


class ConfigController:
    """Controller for configuration operations."""

    def __init__(self, config_service):
        """Initialize config controller.

        Args:
            config_service: Configuration service
        """
        self.config_service = config_service

    def get_health(self) -> HealthResponse:
        """Get health status.

        Returns:
            HealthResponse listing the configured providers
        """
        return HealthResponse(status="healthy", providers=PROVIDERS)

    def get_config(self) -> Dict:
        """Get sanitized configuration.

        Returns:
            Safe configuration dict without sensitive data
        """
        return self.config_service.get_safe_config()
