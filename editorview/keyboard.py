"""Keyboard input handling using curtsies-style tokens."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class KeyType(Enum):
    """Types of key events."""
    REGULAR = "regular"
    ALT = "alt"
    CTRL = "ctrl"
    SPECIAL = "special"
    SHIFT_SPECIAL = "shift_special"  # Shift + arrow keys, etc.


@dataclass
class KeyEvent:
    """Represents a parsed keyboard event."""
    key_type: KeyType
    value: str  # The base key (e.g., 'a', 'left', 'backspace')
    raw: str  # The raw key string from curtsies
    is_alt: bool = False
    is_ctrl: bool = False
    is_shift: bool = False


@dataclass
class ResizeEvent:
    """The display changed size."""
    width: int
    height: int


Event = Union[KeyEvent, ResizeEvent]

SPECIALS = {
    'left', 'right', 'up', 'down', 'home', 'end', 'enter', 'backspace', 'delete',
    'page_up', 'page_down', 'insert', 'tab',
}

# Alternate spellings that terminals and curtsies use for the same key
_ALIASES = {
    'pageup': 'page_up',
    'page_up': 'page_up',
    'pagedown': 'page_down',
    'page_down': 'page_down',
    'del': 'delete',
    'key_left': 'left',
    'key_right': 'right',
    'key_up': 'up',
    'key_down': 'down',
}

# Shifted arrows reported as distinct terminfo keys
_SHIFTED = {
    'key_sleft': 'left',
    'key_sright': 'right',
    'key_sr': 'up',
    'key_sf': 'down',
    'key_shome': 'home',
    'key_send': 'end',
    'key_sprevious': 'page_up',
    'key_snext': 'page_down',
}


class KeyboardHandler:
    """Handles keyboard input using curtsies-style key names."""

    def parse_key(self, key) -> KeyEvent:
        """Parse a curtsies key name into a KeyEvent.

        Args:
            key: curtsies key string such as ``'a'``, ``'<LEFT>'``,
                ``'<Ctrl-z>'`` or ``'<Shift-RIGHT>'``

        Returns:
            Parsed KeyEvent
        """
        key_str = str(key)

        if len(key_str) > 2 and key_str.startswith('<') and key_str.endswith('>'):
            name = key_str[1:-1]
            lower = name.lower().replace('+', '-')
            parts = lower.split('-') if '-' in lower else [lower]
            mods = set(parts[:-1])
            base = parts[-1] or '-'
            if 'meta' in mods or 'esc' in mods:
                mods.add('alt')
            if base in _SHIFTED:
                base = _SHIFTED[base]
                mods.add('shift')
            base = _ALIASES.get(base, base)
            is_shift = 'shift' in mods
            is_ctrl = 'ctrl' in mods

            if base in ('space', 'spacebar', 'spc') and not mods:
                return KeyEvent(key_type=KeyType.REGULAR, value=' ', raw=' ')
            if is_ctrl and len(base) == 1:
                # Ctrl-J / Ctrl-M arrive for the enter key
                if base in ('j', 'm'):
                    return KeyEvent(key_type=KeyType.SPECIAL, value='enter', raw=key_str)
                if base in ('h',):
                    return KeyEvent(key_type=KeyType.SPECIAL, value='backspace', raw=key_str)
                if base in ('i',):
                    return KeyEvent(key_type=KeyType.SPECIAL, value='tab', raw=key_str)
                return KeyEvent(key_type=KeyType.CTRL, value=base, raw=key_str, is_ctrl=True)
            if 'alt' in mods and (base in SPECIALS or len(base) == 1):
                return KeyEvent(key_type=KeyType.ALT, value=base, raw=key_str, is_alt=True,
                                is_ctrl=is_ctrl, is_shift=is_shift)
            if base in SPECIALS:
                key_type = KeyType.SHIFT_SPECIAL if is_shift else KeyType.SPECIAL
                return KeyEvent(key_type=key_type, value=base, raw=key_str,
                                is_ctrl=is_ctrl, is_shift=is_shift)
            if base in ('esc', 'escape'):
                return KeyEvent(key_type=KeyType.SPECIAL, value='escape', raw='\x1b')
            # Unknown token
            return KeyEvent(key_type=KeyType.SPECIAL, value=base, raw=key_str,
                            is_ctrl=is_ctrl, is_shift=is_shift)

        # Single-byte ASCII control chars (Ctrl-<letter>)
        if len(key_str) == 1:
            o = ord(key_str)
            if o == 0x7f:
                return KeyEvent(key_type=KeyType.SPECIAL, value='backspace', raw=key_str)
            if 1 <= o <= 26:
                ch = chr(ord('a') + o - 1)
                if ch in ('j', 'm'):
                    return KeyEvent(key_type=KeyType.SPECIAL, value='enter', raw=key_str)
                if ch == 'h':
                    return KeyEvent(key_type=KeyType.SPECIAL, value='backspace', raw=key_str)
                if ch == 'i':
                    return KeyEvent(key_type=KeyType.SPECIAL, value='tab', raw=key_str)
                return KeyEvent(key_type=KeyType.CTRL, value=ch, raw=key_str, is_ctrl=True)

        if key_str == '\x1b':
            return KeyEvent(key_type=KeyType.SPECIAL, value='escape', raw='\x1b')

        return KeyEvent(key_type=KeyType.REGULAR, value=key_str, raw=key_str)

    def key_event(self, key) -> Optional[KeyEvent]:
        """Parse ``key`` unless it is empty."""
        if not key:
            return None
        return self.parse_key(key)
