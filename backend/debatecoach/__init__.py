"""DebateCoach backend: prompt proxy between the practice web app and OpenAI."""

__version__ = "1.0.0"
