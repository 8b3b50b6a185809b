"""OS-level keystroke injection via xdotool.

Keystrokes go to whatever window holds the global input focus, not to a
particular application window. Callers must bring the target window to
the front before injecting.
"""

import asyncio
import logging
import subprocess
import sys
from typing import List, Optional, Sequence

from .errors import InputInjectionError
from .logging_config import log_subprocess_call


logger = logging.getLogger(__name__)


# Modifier vocabulary used by scenarios -> xdotool key names
MODIFIER_KEYS = {
    "control": "ctrl",
    "ctrl": "ctrl",
    "command": "super",
    "super": "super",
    "shift": "shift",
    "alt": "alt",
    "option": "alt",
}

# Named keys whose xdotool keysym differs from the lower-case name
NAMED_KEYS = {
    "enter": "Return",
    "return": "Return",
    "escape": "Escape",
    "tab": "Tab",
    "backspace": "BackSpace",
    "delete": "Delete",
    "space": "space",
    "up": "Up",
    "down": "Down",
    "left": "Left",
    "right": "Right",
    "home": "Home",
    "end": "End",
    "pageup": "Page_Up",
    "pagedown": "Page_Down",
}


def primary_modifier(platform: Optional[str] = None) -> str:
    """Shortcut modifier of the host: command on macOS, control elsewhere."""
    platform = platform or sys.platform
    return "command" if platform == "darwin" else "control"


def platform_modifiers(
    mac: Sequence[str],
    other: Sequence[str],
    platform: Optional[str] = None,
) -> List[str]:
    """Pick the modifier set for the host platform."""
    platform = platform or sys.platform
    return list(mac) if platform == "darwin" else list(other)


def keyspec(key: str, modifiers: Sequence[str] = ()) -> str:
    """Build an xdotool key spec such as ``ctrl+shift+r``.

    Raises:
        ValueError: For unknown modifiers or an empty key
    """
    if not key:
        raise ValueError("key must not be empty")

    parts = []
    for modifier in modifiers:
        try:
            name = MODIFIER_KEYS[modifier.lower()]
        except KeyError:
            raise ValueError(f"Unknown modifier '{modifier}'. Known: {sorted(MODIFIER_KEYS)}")
        if name not in parts:
            parts.append(name)

    lowered = key.lower()
    if lowered in NAMED_KEYS:
        parts.append(NAMED_KEYS[lowered])
    elif len(lowered) > 1 and lowered[0] == "f" and lowered[1:].isdigit():
        parts.append(lowered.upper())
    else:
        parts.append(lowered if len(key) == 1 else key)

    return "+".join(parts)


class InputSynthesizer:
    """Inject key taps with modifiers held.

    Attributes:
        key_delay_ms: xdotool delay between the events of one tap
        repeat_delay_seconds: Pause between repeated taps
    """

    def __init__(self, key_delay_ms: int = 12, repeat_delay_seconds: float = 0.05):
        self.key_delay_ms = key_delay_ms
        self.repeat_delay_seconds = repeat_delay_seconds

    def _run(self, *args: str) -> str:
        cmd = ["xdotool", *args]
        try:
            result = subprocess.run(cmd, capture_output=True, text=True, timeout=10)
        except FileNotFoundError:
            raise InputInjectionError("xdotool not found. Install with: apt install xdotool")
        except subprocess.TimeoutExpired:
            raise InputInjectionError(f"xdotool timed out: {' '.join(cmd)}")

        log_subprocess_call(cmd, result, logger)
        if result.returncode != 0:
            raise InputInjectionError(f"xdotool failed: {result.stderr.strip()}")
        return result.stdout.strip()

    async def key_tap(self, key: str, modifiers: Sequence[str] = ()) -> None:
        """One key-down/key-up pair with ``modifiers`` held."""
        spec = keyspec(key, modifiers)
        logger.info(f"Key tap: {spec}")
        self._run("key", "--clearmodifiers", "--delay", str(self.key_delay_ms), spec)

    async def key_taps(self, n: int, key: str, modifiers: Sequence[str] = ()) -> None:
        """``n`` sequential taps of the same key combination."""
        if n < 0:
            raise ValueError(f"n must be >= 0, got {n}")
        for i in range(n):
            if i and self.repeat_delay_seconds:
                await asyncio.sleep(self.repeat_delay_seconds)
            await self.key_tap(key, modifiers)
