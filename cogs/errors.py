import logging
import discord
from discord import app_commands
from discord.ext import commands
from bot.debug import debug_print
from lang import get_text
from shared import send_response

logger = logging.getLogger(__name__)


class ErrorHandler(commands.Cog):
    def __init__(self, bot):
        """
        Initialize the ErrorHandler cog.

        The cog installs itself as the command tree's error handler while loaded and
        puts the previous handler back when unloaded.
        """
        debug_print("Entered ErrorHandler.__init__", level="all")
        self.bot = bot
        self.lang = bot.lang
        self._previous_handler = None

    async def cog_load(self):
        tree = self.bot.tree
        self._previous_handler = tree.on_error
        tree.on_error = self.on_app_command_error

    async def cog_unload(self):
        if self._previous_handler is not None:
            self.bot.tree.on_error = self._previous_handler

# -------------------- Error Handling --------------------
    async def on_app_command_error(self, interaction: discord.Interaction, error: app_commands.AppCommandError):
        """
        Handle application command errors by sending an appropriate ephemeral response to the interaction and logging the error.

        Checks the type of the AppCommandError:
        - CommandInvokeError: replies with `errors.invoke` and logs the original underlying exception.
        - CheckFailure: replies with `errors.checkFailure`.
        - Other AppCommandError: replies with `errors.generic` and logs the error.
        """
        debug_print("Entered on_app_command_error", level="all")
        if isinstance(error, app_commands.CommandInvokeError):
            logger.error("Command error", exc_info=error.original)
            key = "errors.invoke"
        elif isinstance(error, app_commands.CheckFailure):
            debug_print(f"Check failed: {error}")
            key = "errors.checkFailure"
        else:
            logger.error(f"Command error: {error}")
            key = "errors.generic"
        try:
            await send_response(interaction, content=get_text(self.lang, key), ephemeral=True)
        except discord.HTTPException as e:
            logger.warning(f"Could not report command error: {e}")


async def setup(bot):
    await bot.add_cog(ErrorHandler(bot))
