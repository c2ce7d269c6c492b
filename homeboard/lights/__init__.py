"""Light bridge client and keyboard-driven light transforms."""

from homeboard.lights.bridge import HueBridge, Light, LightState
from homeboard.lights.controller import LightController

__all__ = ["HueBridge", "Light", "LightState", "LightController"]
