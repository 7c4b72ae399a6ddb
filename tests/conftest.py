from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest
import wavelink

from config import Config
from lang import load_language


class FakeResponse:
    """Stands in for discord.InteractionResponse and tracks whether a response was sent."""

    def __init__(self):
        self._done = False
        self.send_message = AsyncMock(side_effect=self._mark)
        self.defer = AsyncMock(side_effect=self._mark)
        self.edit_message = AsyncMock(side_effect=self._mark)

    def _mark(self, *args, **kwargs):
        self._done = True

    def is_done(self):
        return self._done


class FakeQueue:
    def __init__(self):
        self.items = []

    async def put_wait(self, item):
        if isinstance(item, wavelink.Playlist):
            self.items.extend(item.tracks)
        else:
            self.items.append(item)

    def put_at(self, index, item):
        self.items.insert(index, item)

    def get(self):
        if not self.items:
            raise wavelink.QueueEmpty("queue is empty")
        return self.items.pop(0)


def make_track(title="Song", uri=None, author="Artist", length=185000):
    track = MagicMock(spec=wavelink.Playable)
    track.title = title
    track.uri = uri if uri is not None else f"https://example.com/{title.replace(' ', '-').lower()}"
    track.author = author
    track.length = length
    track.is_stream = False
    track.artwork = None
    return track


def make_playlist(tracks):
    playlist = MagicMock(spec=wavelink.Playlist)
    playlist.tracks = tracks
    return playlist


@pytest.fixture
def config():
    cfg = Config()
    cfg.PLAY_SELECTION_MODE = "auto"
    cfg.SEARCH_RESULT_LIMIT = 10
    cfg.SELECTION_TIMEOUT = 30
    cfg.SUCCESS_MESSAGE_DELETE_AFTER = 3
    cfg.SUPPORT_SERVER = "https://discord.gg/support"
    cfg.SUPPORT_SERVER_INVITE = "https://discord.gg/invite"
    cfg.FOOTER_TEXT = "Developed by Ryuu"
    cfg.EMBED_COLOR = 0x1DB954
    cfg.ERROR_COLOR = 0xFF0000
    cfg.SUPPORT_COLOR = 0xB300FF
    return cfg


@pytest.fixture
def lang():
    return load_language("en")


@pytest.fixture
def spotify():
    client = MagicMock()
    client.search_suggestions = AsyncMock(return_value=[])
    client.related_tracks = AsyncMock(return_value=[])
    client.resolve = AsyncMock()
    return client


@pytest.fixture
def bot(config, lang, spotify):
    return SimpleNamespace(config=config, lang=lang, spotify=spotify, tree=SimpleNamespace(on_error=None))


@pytest.fixture
def voice_channel():
    return MagicMock(spec=discord.VoiceChannel)


@pytest.fixture
def player(voice_channel):
    player = MagicMock()
    player.channel = voice_channel
    player.playing = False
    player.paused = False
    player.queue = FakeQueue()
    player.play = AsyncMock()
    player.move_to = AsyncMock()
    return player


@pytest.fixture
def make_interaction(voice_channel, player):
    def factory(user_id=1, in_voice=True, permissions=None):
        interaction = MagicMock()
        interaction.user.id = user_id
        interaction.user.name = f"user{user_id}"
        interaction.user.voice = SimpleNamespace(channel=voice_channel) if in_voice else None
        interaction.guild.owner_id = 999
        interaction.guild.voice_client = None
        interaction.permissions = permissions if permissions is not None else discord.Permissions(send_messages=True)
        interaction.response = FakeResponse()

        message = MagicMock()
        message.delete = AsyncMock()
        interaction.followup.send = AsyncMock(return_value=message)

        voice_channel.connect = AsyncMock(return_value=player)
        return interaction
    return factory


@pytest.fixture
def interaction(make_interaction):
    return make_interaction()
