from aiogram.types import ReplyKeyboardMarkup, KeyboardButton

BUTTON_GENERATE = "Generate"
BUTTON_STATS = "Stats"
BUTTON_DELETE = "Delete today"


def get_main_menu() -> ReplyKeyboardMarkup:
    return ReplyKeyboardMarkup(
        keyboard=[
            [
                KeyboardButton(text=BUTTON_GENERATE),
                KeyboardButton(text=BUTTON_STATS),
                KeyboardButton(text=BUTTON_DELETE),
            ],
        ],
        resize_keyboard=True,
        input_field_placeholder="What happened today?",
    )
