import functools
import logging
import discord
from bot.debug import debug_print
from lang import get_text
from shared import icons

logger = logging.getLogger(__name__)


def command_permission_check(command_name):
    """
    Create a decorator that enforces the member permissions a command declares.

    The returned decorator wraps an async command callback (signature:
    async def func(self, interaction, ...)). The required permission bitfield is looked
    up by `command_name` in the cog's config (`self.config` or `self.bot.config`)
    COMMAND_PERMISSIONS mapping. Commands without an entry, and invocations outside a
    guild, run unchecked. The guild owner and members with the Administrator permission
    are always allowed. Anyone else must hold every required permission bit in the
    invoking channel; otherwise a standard ephemeral denial message is sent and the
    command body is skipped.
    """
    def decorator(func):
        @functools.wraps(func)
        async def wrapper(self, interaction, *args, **kwargs):
            debug_print(f"Entered {func.__name__} in command_permission_check", level="all")
            config = getattr(self, "config", None) or self.bot.config
            required = config.COMMAND_PERMISSIONS.get(command_name)
            if not required or interaction.guild is None:
                return await func(self, interaction, *args, **kwargs)
            # Always allow server owner
            if interaction.guild.owner_id == interaction.user.id:
                return await func(self, interaction, *args, **kwargs)
            granted = interaction.permissions
            if granted.administrator:
                return await func(self, interaction, *args, **kwargs)
            if discord.Permissions(required).is_subset(granted):
                return await func(self, interaction, *args, **kwargs)
            debug_print(f"Denied /{command_name} for user {interaction.user.id}")
            lang = getattr(self, "lang", None) or self.bot.lang
            await send_response(interaction, content=get_text(lang, "permissions.denied"), ephemeral=True)
        return wrapper
    return decorator


async def send_response(interaction, **kwargs):
    """Reply to an interaction, falling back to a followup once a response was sent."""
    if interaction.response.is_done():
        return await interaction.followup.send(**kwargs)
    return await interaction.response.send_message(**kwargs)


def format_duration(seconds):
    """
    Format a track duration (in seconds) into a human-readable H:MM:SS or M:SS string.

    Returns "Live" for None (streams) and str(seconds) when the value is not numeric.
    """
    if seconds is None:
        return "Live"
    try:
        seconds = int(seconds)
    except (TypeError, ValueError):
        return str(seconds)
    h, rem = divmod(seconds, 3600)
    m, s = divmod(rem, 60)
    if h > 0:
        return f"{h}:{m:02}:{s:02}"
    else:
        return f"{m}:{s:02}"


def music_embed(config, *, author, description=None, icon=icons.BEATS2_ICON, color=None, footer=True):
    """
    Build the standard bot embed: coloured, with an author line linking to the support
    server and, unless `footer` is False, the branded footer.
    """
    embed = discord.Embed(
        color=config.EMBED_COLOR if color is None else color,
        description=description,
    )
    embed.set_author(name=author, icon_url=icon, url=config.SUPPORT_SERVER or None)
    if footer:
        embed.set_footer(text=config.FOOTER_TEXT, icon_url=icons.HEART_ICON)
    return embed
