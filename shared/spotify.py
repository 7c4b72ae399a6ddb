"""Spotify Web API client used to turn Spotify links into audio-node search queries."""

import asyncio
import functools
import logging
import re
from collections import namedtuple

import requests
import spotipy
from cachetools import TTLCache
from spotipy.oauth2 import SpotifyClientCredentials, SpotifyOauthError

from bot.debug import debug_print

logger = logging.getLogger(__name__)

SPOTIFY_URL_RE = re.compile(
    r"open\.spotify\.com/(?:intl-[a-z]{2}(?:-[a-z]{2})?/)?(track|album|playlist|artist)/([A-Za-z0-9]+)",
    re.IGNORECASE,
)
SPOTIFY_URI_RE = re.compile(r"^spotify:(track|album|playlist|artist):([A-Za-z0-9]+)$", re.IGNORECASE)

# Discord caps autocomplete choices at 25 and choice names/values at 100 characters.
MAX_CHOICES = 25
MAX_CHOICE_LENGTH = 100

SpotifyLink = namedtuple("SpotifyLink", "kind id")
Suggestion = namedtuple("Suggestion", "name value")
ResolvedSpotify = namedtuple("ResolvedSpotify", "kind queries")


class SpotifyError(Exception):
    """A Spotify lookup failed or the link could not be understood."""


class SpotifyUnavailable(SpotifyError):
    """No Spotify credentials are configured."""


def parse_spotify_link(query):
    """Return a SpotifyLink for open.spotify.com URLs and spotify: URIs, else None."""
    if not query:
        return None
    text = query.strip()
    match = SPOTIFY_URI_RE.match(text) or SPOTIFY_URL_RE.search(text)
    if not match:
        return None
    return SpotifyLink(match.group(1).lower(), match.group(2))


def is_spotify_query(query):
    text = (query or "").strip().lower()
    return "spotify.com" in text or text.startswith("spotify:")


def artist_names(item):
    return ", ".join(a["name"] for a in item.get("artists") or [] if a and a.get("name"))


def track_query(track):
    """Render a Spotify track object as the "<name> - <artists>" text the audio node searches for."""
    artists = artist_names(track)
    return f"{track['name']} - {artists}" if artists else track["name"]


def _clip(text, limit=MAX_CHOICE_LENGTH):
    return text if len(text) <= limit else text[:limit - 3] + "..."


class SpotifyClient:
    """
    Async wrapper around spotipy's client-credentials client.

    spotipy is synchronous, so every call runs in the event loop's default executor.
    Token acquisition and refresh are handled by SpotifyClientCredentials. When no
    credentials are configured the client is disabled and every lookup raises
    SpotifyUnavailable.
    """

    PLAYLIST_PAGE_SIZE = 100
    ALBUM_PAGE_SIZE = 50

    def __init__(self, client_id=None, client_secret=None, *, client=None, market="US", cache_ttl=300):
        self._client = client
        if self._client is None and client_id and client_secret:
            self._client = spotipy.Spotify(
                auth_manager=SpotifyClientCredentials(client_id=client_id, client_secret=client_secret)
            )
        self.market = market
        self._suggestions = TTLCache(maxsize=256, ttl=cache_ttl)

    @classmethod
    def from_config(cls, config):
        return cls(config.SPOTIFY_CLIENT_ID, config.SPOTIFY_CLIENT_SECRET, market=config.SPOTIFY_MARKET)

    @property
    def enabled(self):
        return self._client is not None

    async def _call(self, method, *args, **kwargs):
        if self._client is None:
            raise SpotifyUnavailable("Spotify credentials are not configured")
        debug_print(f"Spotify {method} args={args} kwargs={kwargs}", level="all")
        loop = asyncio.get_running_loop()
        call = functools.partial(getattr(self._client, method), *args, **kwargs)
        try:
            return await loop.run_in_executor(None, call)
        except (spotipy.SpotifyException, SpotifyOauthError, requests.RequestException) as e:
            raise SpotifyError(f"Spotify {method} failed: {e}") from e

    async def search_suggestions(self, query, limit=5):
        """
        Autocomplete suggestions for a free-text query.

        Returns tracks ("<name> - <artists>"), then albums, then artists, each as a
        Suggestion whose value is the Spotify URI, capped at 25 entries. Results are
        cached per (query, limit) for the client's cache TTL.
        """
        key = (query.strip().lower(), limit)
        if key in self._suggestions:
            return self._suggestions[key]

        data = await self._call("search", q=query, limit=limit, type="track,album,artist")
        suggestions = []
        for item in (data.get("tracks") or {}).get("items") or []:
            if item and item.get("name"):
                suggestions.append(Suggestion(_clip(track_query(item)), item["uri"]))
        for item in (data.get("albums") or {}).get("items") or []:
            if item and item.get("name"):
                suggestions.append(Suggestion(_clip(track_query(item)), item["uri"]))
        for item in (data.get("artists") or {}).get("items") or []:
            if item and item.get("name"):
                suggestions.append(Suggestion(_clip(item["name"]), item["uri"]))

        suggestions = suggestions[:MAX_CHOICES]
        self._suggestions[key] = suggestions
        return suggestions

    async def related_tracks(self, query, limit=5):
        """Tracks matching `query`, linked to their open.spotify.com page when available."""
        data = await self._call("search", q=query, limit=limit, type="track")
        related = []
        for item in (data.get("tracks") or {}).get("items") or []:
            if not item or not item.get("name"):
                continue
            link = (item.get("external_urls") or {}).get("spotify") or item.get("uri")
            related.append(Suggestion(track_query(item), link))
        return related[:limit]

    async def resolve(self, query):
        """
        Expand a Spotify link into the list of search queries to hand to the audio node.

        Raises:
            SpotifyError: if the link is not a track/album/playlist/artist link or the
                lookup fails.
        """
        link = parse_spotify_link(query)
        if link is None:
            raise SpotifyError(f"Unrecognised Spotify link: {query}")

        if link.kind == "track":
            track = await self._call("track", link.id)
            queries = [track_query(track)] if track and track.get("name") else []
        elif link.kind == "playlist":
            queries = await self.playlist_track_queries(link.id)
        elif link.kind == "album":
            queries = await self.album_track_queries(link.id)
        else:
            queries = await self.artist_top_track_queries(link.id)

        debug_print(f"Resolved Spotify {link.kind} {link.id} into {len(queries)} queries")
        return ResolvedSpotify(link.kind, queries)

    async def playlist_track_queries(self, playlist_id):
        """
        Every usable track of a playlist, paging through the API 100 items at a time.

        Items without a track, a name or artists (local files, removed tracks) are
        skipped; paging stops once the reported total has been walked or a page comes
        back empty.
        """
        queries = []
        offset = 0
        while True:
            page = await self._call(
                "playlist_items",
                playlist_id,
                limit=self.PLAYLIST_PAGE_SIZE,
                offset=offset,
                additional_types=("track",),
            )
            items = page.get("items") or []
            for item in items:
                track = item.get("track") if item else None
                if track and track.get("name") and track.get("artists"):
                    queries.append(track_query(track))
            offset += self.PLAYLIST_PAGE_SIZE
            if not items or offset >= (page.get("total") or 0):
                break
        return queries

    async def album_track_queries(self, album_id):
        queries = []
        offset = 0
        while True:
            page = await self._call("album_tracks", album_id, limit=self.ALBUM_PAGE_SIZE, offset=offset)
            items = page.get("items") or []
            queries.extend(track_query(track) for track in items if track and track.get("name"))
            offset += self.ALBUM_PAGE_SIZE
            if not items or offset >= (page.get("total") or 0):
                break
        return queries

    async def artist_top_track_queries(self, artist_id):
        data = await self._call("artist_top_tracks", artist_id, country=self.market)
        return [track_query(track) for track in data.get("tracks") or [] if track and track.get("name")]
