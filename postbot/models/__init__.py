from postbot.models.user import User
from postbot.models.event import Event

__all__ = ["User", "Event"]
