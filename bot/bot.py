# -------------------- Standard Libraries -----------------
import asyncio
import logging
import os
import sys

# -------------------- Third-Party Libraries -----------------
import discord
import wavelink
from discord.ext import commands
from dotenv import load_dotenv

# -------------------- Local Imports -----------------
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
from config import config
from lang import load_language
from shared.spotify import SpotifyClient
from bot.debug import debug_print

# -------------------- Runtime Config -----------------
load_dotenv()
logger = logging.getLogger(__name__)

EXTENSIONS = (
    "cogs.errors",
    "cogs.music",
    "cogs.support",
)


class TempoBot(commands.Bot):
    def __init__(self, *args, config=config, **kwargs):
        """
        Create the bot with its config, language pack and Spotify client attached.

        Cogs read `bot.config`, `bot.lang` and `bot.spotify`. The Spotify client is
        disabled when no credentials are configured.
        """
        super().__init__(*args, **kwargs)
        self.config = config
        self.lang = load_language(config.LANGUAGE)
        self.spotify = SpotifyClient.from_config(config)
        self._command_initialized = False

    async def setup_hook(self):
        """Load the cogs, connect to the audio nodes and sync the command tree."""
        await super().setup_hook()
        for extension in EXTENSIONS:
            await self.load_extension(extension)
            debug_print(f"Loaded extension {extension}")

        if self._command_initialized:
            return

        await self.connect_nodes()
        await self.safe_sync()
        self._command_initialized = True

    async def connect_nodes(self):
        """Connect every configured Lavalink node; failures are logged and /play reports no nodes."""
        nodes = [
            wavelink.Node(uri=uri, password=self.config.LAVALINK_PASSWORD)
            for uri in self.config.LAVALINK_NODES
        ]
        if not nodes:
            logger.warning("No Lavalink nodes configured")
            return
        try:
            await wavelink.Pool.connect(
                nodes=nodes,
                client=self,
                cache_capacity=self.config.LAVALINK_CACHE_CAPACITY,
            )
        except wavelink.WavelinkException as e:
            logger.error(f"Failed to connect to Lavalink: {e}")

    async def safe_sync(self, guild=None):
        """Sync commands with rate limit handling"""
        target = "global" if guild is None else f"guild {guild.id}"

        for attempt in range(3):
            try:
                synced = await self.tree.sync(guild=guild)
                debug_print(f"Synced {len(synced)} commands ({target})")
                return True
            except discord.HTTPException as e:
                if e.status == 429:
                    delay = getattr(e, "retry_after", None) or 5 * (attempt + 1)
                    debug_print(f"  ⏳ Rate limited. Retrying in {delay:.1f}s")
                    await asyncio.sleep(delay)
                else:
                    logger.error(f"Command sync failed ({target}): {e.status} {e.text}")
                    return False
        return False

    async def on_ready(self):
        print(f'Logged in as {self.user}')
        if not self.guilds:
            debug_print("⚠️ Bot not in any guilds")

    async def on_wavelink_node_ready(self, payload: wavelink.NodeReadyEventPayload):
        logger.info(f"Lavalink node {payload.node.identifier} ready (resumed={payload.resumed})")


BOT_TOKEN = config.BOT_TOKEN

bot_instance = TempoBot(
    command_prefix=commands.when_mentioned,
    intents=discord.Intents.default(),
    help_command=None,
    activity=discord.Activity(
        type=discord.ActivityType.listening,
        name="/play"
    ),
)
