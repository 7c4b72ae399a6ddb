import os
import logging
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

SELECTION_MODES = ('auto', 'buttons')


def parse_color(value, default=0x000000):
    """
    Convert a colour string such as "#b300ff", "0xb300ff" or "b300ff" to an int.

    Ints are returned unchanged. Anything that cannot be parsed yields `default`.
    """
    if isinstance(value, int):
        return value
    if not value:
        return default
    text = str(value).strip().lower()
    if text.startswith('#'):
        text = text[1:]
    elif text.startswith('0x'):
        text = text[2:]
    try:
        return int(text, 16)
    except ValueError:
        logger.warning(f"Invalid colour value {value!r}, using default")
        return default


def _split_list(value):
    return [part.strip() for part in (value or '').split(',') if part.strip()]


class Config:
    # Core Application Configuration
    BOT_TOKEN = os.getenv('BOT_TOKEN')
    DEBUG_MODE = os.getenv('DEBUG_MODE', 'none').lower()
    LANGUAGE = os.getenv('LANGUAGE', 'en')

    # Lavalink (audio node) Configuration
    LAVALINK_NODES = _split_list(os.getenv('LAVALINK_NODES', 'http://localhost:2333'))
    LAVALINK_PASSWORD = os.getenv('LAVALINK_PASSWORD', 'youshallnotpass')
    LAVALINK_CACHE_CAPACITY = int(os.getenv('LAVALINK_CACHE_CAPACITY', '100'))

    # Spotify Configuration
    SPOTIFY_CLIENT_ID = os.getenv('SPOTIFY_CLIENT_ID')
    SPOTIFY_CLIENT_SECRET = os.getenv('SPOTIFY_CLIENT_SECRET')
    SPOTIFY_MARKET = os.getenv('SPOTIFY_MARKET', 'US')

    # Support / Branding
    SUPPORT_SERVER = os.getenv('SUPPORT_SERVER', 'https://discord.gg/xQF9f9yUEM')
    SUPPORT_SERVER_INVITE = os.getenv('SUPPORT_SERVER_INVITE', 'https://discord.gg/xQF9f9yUEM')
    FOOTER_TEXT = os.getenv('FOOTER_TEXT', 'Developed by Ryuu')

    # Default Embed Colors
    EMBED_COLOR = parse_color(os.getenv('EMBED_COLOR', '#1db954'))
    ERROR_COLOR = parse_color(os.getenv('ERROR_COLOR', '#ff0000'))
    SUPPORT_COLOR = parse_color(os.getenv('SUPPORT_COLOR', '#b300ff'))

    # /play behaviour
    PLAY_SELECTION_MODE = os.getenv('PLAY_SELECTION_MODE', 'auto').lower()
    SEARCH_RESULT_LIMIT = int(os.getenv('SEARCH_RESULT_LIMIT', '10'))
    SELECTION_TIMEOUT = float(os.getenv('SELECTION_TIMEOUT', '30'))
    SUCCESS_MESSAGE_DELETE_AFTER = float(os.getenv('SUCCESS_MESSAGE_DELETE_AFTER', '3'))

    # Member permissions each command requires (0x800 = Send Messages)
    COMMAND_PERMISSIONS = {
        'play': 0x0000000000000800,
        'support': 0x0000000000000800,
    }

    def __init__(self):
        """
        Initialize a Config instance.

        Validates the dynamic settings that depend on environment input. An unknown
        PLAY_SELECTION_MODE falls back to 'auto'.
        """
        if self.PLAY_SELECTION_MODE not in SELECTION_MODES:
            logger.warning(
                f"Unknown PLAY_SELECTION_MODE {self.PLAY_SELECTION_MODE!r}, falling back to 'auto'"
            )
            self.PLAY_SELECTION_MODE = 'auto'
        self.COMMAND_PERMISSIONS = dict(Config.COMMAND_PERMISSIONS)

    def verify(self):
        """
        Ensure the settings required to start the bot are present.

        Raises:
            ValueError: if BOT_TOKEN is missing.
        """
        if not self.BOT_TOKEN:
            raise ValueError("No BOT_TOKEN found in .env file!")

# Instantiate the configuration
config = Config()
