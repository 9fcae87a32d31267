"""Map inbound Telegram text to a closed set of shapes the services understand."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Identity:
    id: int
    first_name: str
    last_name: str | None = None
    is_bot: bool = False
    username: str | None = None

    @classmethod
    def from_user(cls, user) -> "Identity":
        """Build from an aiogram User (or anything with the same attributes)."""
        return cls(
            id=user.id,
            first_name=user.first_name or "",
            last_name=user.last_name,
            is_bot=bool(user.is_bot),
            username=user.username,
        )


@dataclass(frozen=True)
class Command:
    name: str
    args: str = ""


@dataclass(frozen=True)
class PlainText:
    body: str


@dataclass(frozen=True)
class Unknown:
    pass


Inbound = Command | PlainText | Unknown

THANKS_PHRASES = frozenset({"Thank you", "Thanks", "Thank you!", "Thanks!"})
GREETING_PHRASES = frozenset({"Hi", "Hello", "Hey"})


def classify(text: str | None) -> Inbound:
    if text is None:
        return Unknown()
    if text.startswith("/") and len(text) > 1:
        head, _, args = text[1:].partition(" ")
        # /cmd@botname -> cmd
        name = head.split("@", 1)[0].lower()
        if name:
            return Command(name=name, args=args.strip())
    return PlainText(body=text)


def smalltalk_reply(body: str, first_name: str) -> str | None:
    """Canned reply for greetings and thanks; None means the text is an event."""
    if body in THANKS_PHRASES:
        return "You're welcome!"
    if body in GREETING_PHRASES:
        return f"Hello {first_name}!"
    return None
