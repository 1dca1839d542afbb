"""
Read-through cache for Slack directory data.

Channels and users are fetched page by page the first time they are asked
for and kept in memory until clear_caches() is called.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from .errors import DirectoryError
from .log import bind_logger
from .models import is_bot

logger = logging.getLogger(__name__)

PAGE_LIMIT = 200


@dataclass(frozen=True)
class Collection:
    """A paginated Slack listing: the transport resource and its items field."""
    resource: str
    items_field: str


CHANNELS = Collection(resource="channels", items_field="channels")
USERS = Collection(resource="users", items_field="members")


def next_cursor(response: dict) -> Optional[str]:
    """Continuation token of a page, or None on the last page."""
    metadata = response.get("response_metadata") or {}
    return metadata.get("next_cursor") or None


def index_by_id(entries: list[dict]) -> dict[str, dict]:
    """Key entries by id; later duplicates replace earlier ones."""
    return {entry["id"]: entry for entry in entries}


@dataclass(frozen=True)
class Listing:
    """A fetched collection and its index by ID."""
    entries: list[dict]
    by_id: dict[str, dict]


class DirectoryCache:
    """Memoized access to the workspace's channels and users."""

    def __init__(self, transport: Any = None):
        self.transport = transport
        self.bot = None
        self.log = bind_logger(logger, f"{type(self).__name__}:")
        self._cache: dict[str, Listing] = {}

    @classmethod
    def create(cls, **options) -> "DirectoryCache":
        return cls(**options)

    def register_to(self, bot) -> "DirectoryCache":
        """
        Attach the cache to a bot as ``bot.data``, reading through its transport.

        Raises:
            TypeError: If bot is not a bot
        """
        if not is_bot(bot):
            raise TypeError("Expected an instance of Bot")

        self.bot = bot
        self.transport = bot.transport
        bot.data = self

        self.log = bind_logger(bot.log, f"{type(self).__name__}:")
        self.log.info("Registered to bot")
        return self

    def _fetch_all(self, collection: Collection) -> list[dict]:
        """Fetch every page of a collection, one request at a time."""
        entries: list[dict] = []
        cursor = None

        while True:
            try:
                response = self.transport.list(
                    collection.resource, limit=PAGE_LIMIT, cursor=cursor
                )
            except Exception as e:
                raise DirectoryError(
                    f"Could not get {collection.resource} from the Slack API: {e}",
                    cause=e,
                ) from e

            if not response or collection.items_field not in response:
                raise DirectoryError(
                    f"Could not get {collection.resource} from the Slack API: "
                    f"no {collection.resource}"
                )

            entries.extend(response[collection.items_field])

            cursor = next_cursor(response)
            if not cursor:
                break

        return entries

    def _load(self, collection: Collection) -> Listing:
        """
        Get a collection, fetching it on a cache miss.

        The list and its by-ID index are stored together in one assignment,
        so a clear_caches() from another thread drops both or neither.
        """
        listing = self._cache.get(collection.resource)
        if listing is None:
            entries = self._fetch_all(collection)
            listing = Listing(entries=entries, by_id=index_by_id(entries))
            self._cache[collection.resource] = listing
            self.log.info(f"Loaded and cached Slack {collection.resource}")
        return listing

    def _get_all(self, collection: Collection) -> list[dict]:
        return self._load(collection).entries

    def _get_all_by_id(self, collection: Collection) -> dict[str, dict]:
        return self._load(collection).by_id

    def get_channels(self) -> list[dict]:
        """All channels in the workspace."""
        return self._get_all(CHANNELS)

    def get_channels_by_id(self) -> dict[str, dict]:
        return self._get_all_by_id(CHANNELS)

    def get_channel_by_id(self, channel_id: str) -> Optional[dict]:
        return self._get_all_by_id(CHANNELS).get(channel_id)

    def get_users(self) -> list[dict]:
        """All users with access to the workspace."""
        return self._get_all(USERS)

    def get_users_by_id(self) -> dict[str, dict]:
        return self._get_all_by_id(USERS)

    def get_user_by_id(self, user_id: str) -> Optional[dict]:
        return self._get_all_by_id(USERS).get(user_id)

    def clear_caches(self) -> bool:
        """Forget all cached channels and users."""
        self._cache = {}
        return True

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
