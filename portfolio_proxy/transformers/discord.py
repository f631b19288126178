"""Discord guild widget transformer."""
from typing import Any, Dict

from portfolio_proxy.errors import InvalidUpstreamData


def transform_widget(raw: Any) -> Dict[str, Any]:
    """Pass the widget object through unchanged after a shape check.

    Raises:
        InvalidUpstreamData: If the payload is not a JSON object
    """
    if not isinstance(raw, dict):
        raise InvalidUpstreamData("Invalid Discord widget data received from API")
    return dict(raw)
