import logging
from typing import List, cast
import discord
import wavelink
from discord import app_commands
from discord.ext import commands
from discord.ui import Button, View
from bot.debug import debug_print
from lang import get_text
from shared import command_permission_check, format_duration, music_embed, send_response, icons
from shared.spotify import SpotifyError, is_spotify_query

logger = logging.getLogger(__name__)

PAGE_SIZE = 5
AUTOCOMPLETE_MIN_LENGTH = 3


class InvalidResolveResponse(TypeError):
    """The audio node answered a search with something that is neither a track list nor a playlist."""


class TrackSelectView(View):
    def __init__(self, cog, requester, player, query, tracks, offset=0, timeout=30):
        """
        Create a paginated view showing up to 5 selectable track buttons plus navigation.

        Parameters:
            cog (MusicCog): The cog that queues the chosen track.
            requester: The member who ran /play; only they may press the buttons.
            player (wavelink.Player): The guild player the track is queued on.
            query (str): The search text, shown in the embed title.
            tracks (list[wavelink.Playable]): Search results to choose from.
            offset (int): Zero-based index of the first track shown on this page.
            timeout (float): Seconds before the selection expires.
        """
        debug_print(f"Entering TrackSelectView.__init__ with query: {query}, {len(tracks)} tracks", level="all")
        super().__init__(timeout=timeout)
        self.cog = cog
        self.requester = requester
        self.player = player
        self.query = query
        self.tracks = tracks
        self.offset = offset
        self.message = None
        self.build_items()

    def build_items(self):
        self.clear_items()
        for i in range(PAGE_SIZE):
            idx = self.offset + i
            if idx < len(self.tracks):
                self.add_item(TrackSelectButton(idx))
            else:
                # Add disabled buttons for missing results
                self.add_item(Button(label="×", style=discord.ButtonStyle.grey, disabled=True))

        if self.offset > 0:
            self.add_item(PageButton(-PAGE_SIZE, self.cog.text("play.selection.back")))
        if self.offset + PAGE_SIZE < len(self.tracks):
            self.add_item(PageButton(PAGE_SIZE, self.cog.text("play.selection.more")))
        self.add_item(CancelSelectionButton(self.cog.text("play.selection.cancel")))

    def build_embed(self):
        end = min(self.offset + PAGE_SIZE, len(self.tracks))
        embed = discord.Embed(
            title=self.cog.text("play.selection.title", query=self.query, start=self.offset + 1, end=end),
            color=self.cog.config.EMBED_COLOR,
        )
        for idx in range(self.offset, end):
            track = self.tracks[idx]
            duration = format_duration(track.length // 1000 if not track.is_stream else None)
            value = f"`{duration}` • {track.author}"
            if track.uri:
                value += f" • [Link]({track.uri})"
            embed.add_field(name=f"{idx + 1}. {track.title[:45]}", value=value, inline=False)
        return embed

    async def interaction_check(self, interaction: discord.Interaction) -> bool:
        if interaction.user.id == self.requester.id:
            return True
        await interaction.response.send_message(self.cog.text("play.selection.notYours"), ephemeral=True)
        return False

    async def change_page(self, interaction: discord.Interaction, step):
        debug_print(f"Selection page change from offset {self.offset} by {step}", level="all")
        self.offset = min(max(self.offset + step, 0), max(len(self.tracks) - 1, 0))
        self.build_items()
        await interaction.response.edit_message(embed=self.build_embed(), view=self)

    async def select(self, interaction: discord.Interaction, index):
        """
        Queue the chosen result, replace the selection message with a confirmation and
        start playback when the player is idle.
        """
        debug_print(f"Entering TrackSelectView.select with index: {index}", level="all")
        if index >= len(self.tracks):
            await interaction.response.send_message(self.cog.text("play.selection.failed"), ephemeral=True)
            return
        track = self.tracks[index]
        try:
            await self.cog.enqueue_track(self.player, track, interaction.user)
            self.stop()
            await interaction.response.edit_message(
                content=self.cog.text("play.selection.added", title=track.title),
                embed=None,
                view=None,
            )
            await self.cog.start_if_idle(self.player)
        except Exception:
            logger.exception("Failed to queue selected track")
            await send_response(interaction, content=self.cog.text("play.selection.failed"), ephemeral=True)

    async def cancel(self, interaction: discord.Interaction):
        self.stop()
        await interaction.response.edit_message(
            content=self.cog.text("play.selection.cancelled"), embed=None, view=None
        )

    async def on_timeout(self):
        debug_print(f"Selection for '{self.query}' timed out", level="all")
        if self.message is None:
            return
        try:
            await self.message.edit(content=self.cog.text("play.selection.timedOut"), embed=None, view=None)
        except discord.HTTPException as e:
            debug_print(f"Could not clear timed out selection: {e}")


class TrackSelectButton(Button):
    def __init__(self, index):
        """A numbered button; the label is `index + 1` so it matches the embed field numbering."""
        super().__init__(label=str(index + 1), style=discord.ButtonStyle.primary)
        self.index = index

    async def callback(self, interaction: discord.Interaction):
        await self.view.select(interaction, self.index)


class PageButton(Button):
    def __init__(self, step, label):
        super().__init__(label=label, style=discord.ButtonStyle.secondary)
        self.step = step

    async def callback(self, interaction: discord.Interaction):
        await self.view.change_page(interaction, self.step)


class CancelSelectionButton(Button):
    def __init__(self, label):
        super().__init__(label=label, style=discord.ButtonStyle.danger)

    async def callback(self, interaction: discord.Interaction):
        await self.view.cancel(interaction)


class MusicCog(commands.Cog):
    def __init__(self, bot):
        """
        Initialize the Music cog.

        Keeps references to the bot's config, language pack and Spotify client, and a
        `requesters` map from track URI to the name of the member who queued it.
        """
        debug_print(f"Entering MusicCog.__init__ with bot: {bot}", level="all")
        self.bot = bot
        self.config = bot.config
        self.lang = bot.lang
        self.spotify = bot.spotify
        self.requesters = {}

    def text(self, key, **replacements):
        return get_text(self.lang, key, **replacements)

    def _error_embed(self, description_key, color=None):
        return music_embed(
            self.config,
            author=self.text("play.embed.error"),
            description=self.text(description_key),
            icon=icons.ALERT_ICON,
            color=self.config.ERROR_COLOR if color is None else color,
        )

    async def _get_player(self, interaction: discord.Interaction, channel):
        """
        Return the guild's player, connecting (self-deafened) to `channel` or moving there.

        The invoking text channel becomes the player's home channel for now-playing
        announcements, and partial autoplay lets the node advance through the queue.
        """
        player = cast(wavelink.Player, interaction.guild.voice_client)
        if player is None:
            debug_print(f"Connecting to voice channel {channel}")
            player = await channel.connect(cls=wavelink.Player, self_deaf=True)
        elif player.channel != channel:
            debug_print(f"Moving player to voice channel {channel}")
            await player.move_to(channel)
        player.home = interaction.channel
        player.autoplay = wavelink.AutoPlayMode.partial
        return player

    def _tag_requester(self, track, user):
        name = getattr(user, "name", None) or str(user)
        track.extras = {"requester": name}
        if track.uri:
            self.requesters[track.uri] = name

    async def enqueue_track(self, player, track, user):
        self._tag_requester(track, user)
        await player.queue.put_wait(track)

    async def start_if_idle(self, player):
        """
        Play the head of the queue unless the player is busy.

        Returns True when playback started. A track the node refuses to play is put
        back at the head of the queue, so it stays queued.
        """
        if player.playing or player.paused:
            return False
        try:
            track = player.queue.get()
        except wavelink.QueueEmpty:
            debug_print("Queue empty, nothing to start")
            return False
        try:
            await player.play(track)
        except Exception:
            logger.exception(f"Failed to start playback of {track.title}")
            player.queue.put_at(0, track)
            return False
        return True

    async def _queue_search_strings(self, player, queries, user):
        """Search each query on the audio node and queue its first hit; returns how many were queued."""
        queued = 0
        for search in queries:
            try:
                found = await wavelink.Playable.search(search)
            except wavelink.LavalinkLoadException as e:
                debug_print(f"Lavalink could not load '{search}': {e}")
                continue
            tracks = found.tracks if isinstance(found, wavelink.Playlist) else found
            if not tracks:
                continue
            await self.enqueue_track(player, tracks[0], user)
            queued += 1
        return queued

    async def _send_no_results(self, interaction: discord.Interaction, query):
        await interaction.followup.send(
            embed=self._error_embed("play.embed.noResults", color=self.config.EMBED_COLOR)
        )
        try:
            related = await self.spotify.related_tracks(query, limit=5)
        except SpotifyError as e:
            logger.warning(f"Error fetching related tracks: {e}")
            await interaction.followup.send(content=self.text("play.messages.relatedFailed"))
            return
        if not related:
            return

        embed = music_embed(
            self.config,
            author=self.text("play.embed.suggestion"),
            description=self.text("play.embed.suggestionsDescription"),
            icon=icons.MUSIC_NOTE_ICON,
        )
        for suggestion in related[:5]:
            embed.add_field(
                name=suggestion.name[:256],
                value=f"[{self.text('play.embed.listenHere')}]({suggestion.value})",
                inline=False,
            )
        await interaction.followup.send(embed=embed)

    async def _offer_selection(self, interaction: discord.Interaction, player, query, tracks):
        tracks = list(tracks)[:self.config.SEARCH_RESULT_LIMIT]
        view = TrackSelectView(
            self, interaction.user, player, query, tracks, timeout=self.config.SELECTION_TIMEOUT
        )
        view.message = await interaction.followup.send(embed=view.build_embed(), view=view, wait=True)

    async def _play(self, interaction: discord.Interaction, query: str):
        channel = getattr(getattr(interaction.user, "voice", None), "channel", None)
        if channel is None:
            await interaction.response.send_message(embed=self._error_embed("play.embed.noVoiceChannel"), ephemeral=True)
            return

        if not wavelink.Pool.nodes:
            await interaction.response.send_message(embed=self._error_embed("play.embed.noLavalinkNodes"), ephemeral=True)
            return

        await interaction.response.defer()
        player = await self._get_player(interaction, channel)

        if is_spotify_query(query):
            try:
                resolved = await self.spotify.resolve(query)
            except SpotifyError as e:
                logger.warning(f"Error fetching Spotify data: {e}")
                await interaction.followup.send(content=self.text("play.messages.spotifyFailed"))
                return
            queued = await self._queue_search_strings(player, resolved.queries, interaction.user)
            debug_print(f"Queued {queued}/{len(resolved.queries)} tracks from Spotify {resolved.kind}")
            if not queued:
                await interaction.followup.send(embed=self._error_embed("play.embed.noResults", color=self.config.EMBED_COLOR))
                return
        else:
            try:
                result = await wavelink.Playable.search(query)
            except wavelink.LavalinkLoadException as e:
                debug_print(f"Lavalink failed to load '{query}': {e}")
                result = []

            if isinstance(result, wavelink.Playlist):
                for track in result.tracks:
                    self._tag_requester(track, interaction.user)
                await player.queue.put_wait(result)
            elif not isinstance(result, list):
                raise InvalidResolveResponse(f"Invalid response from the audio node: {result!r}")
            elif not result:
                await self._send_no_results(interaction, query)
                return
            elif self.config.PLAY_SELECTION_MODE == "buttons" and len(result) > 1:
                await self._offer_selection(interaction, player, query, result)
                return
            else:
                await self.enqueue_track(player, result[0], interaction.user)

        await self.start_if_idle(player)

        embed = music_embed(
            self.config,
            author=self.text("play.embed.requestUpdated"),
            description=self.text("play.embed.successProcessed"),
        )
        message = await interaction.followup.send(embed=embed, wait=True)
        await message.delete(delay=self.config.SUCCESS_MESSAGE_DELETE_AFTER)

    @app_commands.command(name="play", description="Play a song from a name or link")
    @command_permission_check("play")
    @app_commands.rename(query="name")
    @app_commands.describe(query="Enter song name / link or playlist")
    async def play(self, interaction: discord.Interaction, query: str):
        """
        Resolve `query` through Spotify or the audio node, queue the result and start playback.

        Spotify links (and the spotify: URIs offered by autocomplete) are expanded into
        "<title> - <artists>" searches whose first hits are queued. Anything else is
        searched on the audio node: playlists are queued whole, searches queue the first
        match, or, with PLAY_SELECTION_MODE=buttons, offer the results as numbered
        buttons. A search with no results replies with Spotify suggestions instead.
        """
        debug_print(f"Entering /play with interaction: {interaction}, query: {query}", level="all")
        try:
            await self._play(interaction, query)
        except Exception:
            logger.exception("Error processing play command")
            await send_response(interaction, content=self.text("play.messages.genericError"))

    @play.autocomplete("query")
    async def play_autocomplete(self, interaction: discord.Interaction, current: str) -> List[app_commands.Choice[str]]:
        if not current or len(current) < AUTOCOMPLETE_MIN_LENGTH:
            return []
        try:
            suggestions = await self.spotify.search_suggestions(current, limit=5)
        except SpotifyError as e:
            debug_print(f"Autocomplete lookup failed for '{current}': {e}")
            return []
        except Exception:
            logger.exception(f"Unexpected autocomplete failure for '{current}'")
            return []
        return [app_commands.Choice(name=s.name, value=s.value) for s in suggestions]

    @commands.Cog.listener()
    async def on_wavelink_track_start(self, payload: wavelink.TrackStartEventPayload):
        """Announce the new track in the player's home channel, crediting whoever queued it."""
        player = payload.player
        channel = getattr(player, "home", None) if player else None
        if channel is None:
            return

        track = payload.track
        requester = (
            self.requesters.get(track.uri)
            or getattr(track.extras, "requester", None)
            or self.text("play.nowPlaying.unknown")
        )
        embed = discord.Embed(
            title=self.text("play.nowPlaying.title"),
            description=f"[{track.title}]({track.uri})" if track.uri else track.title,
            color=self.config.EMBED_COLOR,
        )
        embed.add_field(name=self.text("play.nowPlaying.author"), value=track.author or self.text("play.nowPlaying.unknown"), inline=True)
        embed.add_field(
            name=self.text("play.nowPlaying.duration"),
            value=format_duration(None if track.is_stream else track.length // 1000),
            inline=True,
        )
        embed.add_field(name=self.text("play.nowPlaying.requestedBy"), value=requester, inline=True)
        if track.artwork:
            embed.set_thumbnail(url=track.artwork)
        try:
            await channel.send(embed=embed)
        except discord.HTTPException as e:
            logger.warning(f"Could not announce track in {channel}: {e}")


async def setup(bot):
    await bot.add_cog(MusicCog(bot))
