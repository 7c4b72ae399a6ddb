import logging
import discord
from discord import app_commands
from discord.ext import commands
from bot.debug import debug_print
from lang import get_text
from shared import command_permission_check, music_embed, send_response, icons

logger = logging.getLogger(__name__)


class SupportCog(commands.Cog):
    def __init__(self, bot):
        debug_print(f"Entering SupportCog.__init__ with bot: {bot}", level="all")
        self.bot = bot
        self.config = bot.config
        self.lang = bot.lang

    @app_commands.command(name="support", description="Get the link to the support server")
    @command_permission_check("support")
    async def support(self, interaction: discord.Interaction):
        """Reply with an embed linking the support server invite."""
        debug_print(f"Entering /support with interaction: {interaction}", level="all")
        try:
            embed = music_embed(
                self.config,
                author=get_text(self.lang, "support.embed.authorName"),
                description=get_text(
                    self.lang,
                    "support.embed.description",
                    supportServerLink=self.config.SUPPORT_SERVER_INVITE,
                ),
                color=self.config.SUPPORT_COLOR,
                footer=False,
            )
            embed.timestamp = discord.utils.utcnow()
            await interaction.response.send_message(embed=embed)
        except Exception:
            logger.exception("Error executing support command")
            embed = music_embed(
                self.config,
                author=get_text(self.lang, "support.embed.error"),
                description=get_text(self.lang, "support.embed.errorDescription"),
                icon=icons.ALERT_ICON,
                color=self.config.ERROR_COLOR,
            )
            await send_response(interaction, embed=embed, ephemeral=True)


async def setup(bot):
    await bot.add_cog(SupportCog(bot))
