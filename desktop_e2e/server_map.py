"""Server map: team/tab keys to the window hosting that view.

Built once per scenario after launch and read-only afterwards. Every key
a scenario uses must be registered; lookups of unknown keys fail fast.
"""

import asyncio
import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Optional

from .errors import ServerMapKeyError


logger = logging.getLogger(__name__)


KEY_SEPARATOR = "___"

VIEW_INFO_SCRIPT = """async () => {
    if (!window.testHelper) {
        return null;
    }
    const viewName = await window.testHelper.getViewName();
    const webContentsId = await window.testHelper.getWebContentsId();
    return {viewName, webContentsId};
}"""


def view_key(team: str, tab: str) -> str:
    """Compose the server map key for a team's tab."""
    return f"{team}{KEY_SEPARATOR}{tab}"


@dataclass(frozen=True)
class ServerMapEntry:
    """A registered view."""
    window: Any
    content_id: int


class ServerMap(Mapping):
    """Read-only mapping of view keys to ``ServerMapEntry``."""

    def __init__(self, entries: Mapping[str, ServerMapEntry]):
        self._entries = MappingProxyType(dict(entries))

    def __getitem__(self, key: str) -> ServerMapEntry:
        try:
            return self._entries[key]
        except KeyError:
            raise ServerMapKeyError(key, self._entries.keys()) from None

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"ServerMap({sorted(self._entries)})"

    def view(self, team: str, tab: str) -> ServerMapEntry:
        return self[view_key(team, tab)]

    def find_by_content_id(self, content_id: int) -> ServerMapEntry:
        for entry in self._entries.values():
            if entry.content_id == content_id:
                return entry
        raise ServerMapKeyError(f"content id {content_id}", self._entries.keys())


async def _view_info(window: Any) -> Optional[Dict[str, Any]]:
    return await window.evaluate(VIEW_INFO_SCRIPT)


async def build_server_map(handle: Any) -> ServerMap:
    """Ask every window for its view name and content id.

    Windows that do not expose the test helper (loading screen, main
    window chrome, dev tools) are skipped.
    """
    windows = handle.windows()
    infos = await asyncio.gather(*(_view_info(w) for w in windows))

    entries: Dict[str, ServerMapEntry] = {}
    for window, info in zip(windows, infos):
        if not info:
            continue
        entries[info["viewName"]] = ServerMapEntry(window=window, content_id=int(info["webContentsId"]))

    logger.info(f"Server map built with {len(entries)} view(s): {sorted(entries)}")
    return ServerMap(entries)
