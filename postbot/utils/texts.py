"""Reply templates and message splitting."""

TELEGRAM_CHUNK = 4000

WELCOME = (
    "Hello {first_name}! Welcome. I will be writing highly engaging social media "
    "posts for you. Just keep feeding me with the events throughout the day. "
    "Let's shine on social media together!"
)
GENERATING = (
    "Hey {first_name}! I am generating the social media posts for you. "
    "Please wait for a moment."
)
NO_EVENTS = "No events found for today"
RAW_EVENTS_HEADER = "Here are the social media posts for today"
EVENT_ADDED = "Event has been added successfully"
EVENTS_DELETED = "All today's events have been deleted. ({count} removed)"
STATS = "You have recorded {count} event(s) today."
SERVER_TIME = "Current server time is: {time}"
QUIT = "Bot is stopping. Goodbye!"
UNKNOWN_COMMAND = "I don't know the command /{name}. Send /help to see what I can do."

ERROR_START = "There was an error while processing your request. Please try again later."
ERROR_GENERATE = "There was an error generating the posts. Please try again later."
ERROR_DELETE = "Failed to delete events. Please try again."
ERROR_STATS = "Failed to load your stats. Please try again."
ERROR_RECORD = "There was an error adding your event. Please try again."
ERROR_GENERIC = "Something went wrong. Please try again."

ABOUT = (
    "I am a social media bot designed to help you generate engaging posts based "
    "on your daily events. Use the commands to interact and make the most out of "
    "your social media presence!"
)

COMMANDS = [
    ("start", "Start interacting with the bot"),
    ("generate", "Generate social media posts from today's events"),
    ("time", "Show the current server time"),
    ("deleteevents", "Delete all events for today"),
    ("stats", "Show the number of events recorded today"),
    ("about", "Learn more about this bot"),
    ("help", "List the available commands"),
    ("quit", "Stop the bot"),
]

HELP = "Available commands:\n" + "\n".join(f"/{name} - {desc}" for name, desc in COMMANDS)


def split_text(text: str, max_len: int = TELEGRAM_CHUNK) -> list[str]:
    """Split on newlines where possible so each part fits one Telegram message."""
    chunks = []
    while text:
        if len(text) <= max_len:
            chunks.append(text)
            break
        split_at = text.rfind("\n", 0, max_len)
        if split_at < max_len // 2:
            split_at = max_len
        chunks.append(text[:split_at])
        text = text[split_at:].lstrip("\n")
    return chunks
