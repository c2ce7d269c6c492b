"""Terminal home dashboard: transit, weather and light control."""

__version__ = "0.1.0"
