"""Pure transformers from provider payloads to the API's stable models."""
from .discord import transform_widget
from .sports import classify_game, transform_games
from .stock import transform_history, transform_quote
from .weather import transform_weather

__all__ = [
    "classify_game",
    "transform_games",
    "transform_history",
    "transform_quote",
    "transform_weather",
    "transform_widget",
]
