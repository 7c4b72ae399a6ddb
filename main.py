import sys

from pathlib import Path
from dotenv import load_dotenv

# For binaries, load .env from the executable's directory
if getattr(sys, 'frozen', False):
    base_dir = Path(sys.executable).parent
else:
    base_dir = Path(__file__).parent

dotenv_path = base_dir / '.env'
if dotenv_path.exists():
    load_dotenv(dotenv_path)

import discord
from bot.debug import debug_print
from bot.bot import bot_instance, BOT_TOKEN
from config import config


def run_bot():
    """
    Start and run the configured bot instance.

    Checks that a BOT_TOKEN is configured, installs discord.py's default log handler
    and blocks the current process while the bot runs.
    """
    debug_print("Entering run_bot", level="all")
    config.verify()
    discord.utils.setup_logging()
    bot_instance.run(BOT_TOKEN, log_handler=None)


if __name__ == "__main__":
    debug_print("Starting main entry point")
    print("Starting the bot...")
    run_bot()
