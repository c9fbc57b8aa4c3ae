"""Morning financial-news briefing bot."""

__version__ = "1.0.0"
