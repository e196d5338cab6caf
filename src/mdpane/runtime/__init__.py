"""Runtime services: telemetry and settings."""

from . import telemetry
from .settings import WELCOME_DOCUMENT, EditorSettings

__all__ = ["telemetry", "EditorSettings", "WELCOME_DOCUMENT"]
