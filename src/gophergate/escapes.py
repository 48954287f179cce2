"""Streaming filter that strips terminal escape sequences from bytes.

The parser follows the usual terminal-emulator state machine (ground,
escape, control sequence, operating system command, control strings).
Printable bytes and ``\\n``, ``\\t``, ``\\r`` in the ground state are passed
through; every byte that belongs to an escape sequence is dropped, as are
all other C0 controls and DEL. Bytes >= 0x80 are never interpreted as C1
controls, so multi-byte UTF-8 text survives intact.
"""

from enum import Enum, auto

ESC = 0x1B
BEL = 0x07
CAN = 0x18
SUB = 0x1A
DEL = 0x7F

KEPT_CONTROLS = frozenset(b"\n\t\r")


class State(Enum):
    GROUND = auto()
    ESCAPE = auto()
    ESCAPE_INTERMEDIATE = auto()
    CSI = auto()
    OSC = auto()
    # DCS, SOS, PM and APC bodies, all terminated by ST (ESC \)
    CONTROL_STRING = auto()


# Final bytes after ESC that open a longer sequence
_ESCAPE_OPENERS = {
    ord("["): State.CSI,
    ord("]"): State.OSC,
    ord("P"): State.CONTROL_STRING,
    ord("X"): State.CONTROL_STRING,
    ord("^"): State.CONTROL_STRING,
    ord("_"): State.CONTROL_STRING,
}


class EscapeFilter:
    """Incremental escape-sequence stripper.

    Feed it chunks with :meth:`feed`; state carries across chunk
    boundaries, so a sequence split between two chunks is still removed.
    """

    def __init__(self):
        self.state = State.GROUND
        self._transitions = {
            State.GROUND: self._ground,
            State.ESCAPE: self._escape,
            State.ESCAPE_INTERMEDIATE: self._escape_intermediate,
            State.CSI: self._csi,
            State.OSC: self._osc,
            State.CONTROL_STRING: self._control_string,
        }

    def feed(self, data: bytes) -> bytes:
        """Consume a chunk and return the bytes that survive filtering."""
        out = bytearray()
        for byte in data:
            if self.advance(byte):
                out.append(byte)
        return bytes(out)

    def flush(self) -> bytes:
        """Signal end of input.

        Nothing printable is ever held back, so this only discards an
        unterminated sequence and resets to the ground state.
        """
        self.state = State.GROUND
        return b""

    def advance(self, byte: int) -> bool:
        """Run one transition. Returns True if ``byte`` belongs in the output."""
        if byte in (CAN, SUB):
            self.state = State.GROUND
            return False
        if byte == ESC:
            self.state = State.ESCAPE
            return False
        return self._transitions[self.state](byte)

    def _execute(self, byte: int) -> bool:
        return byte in KEPT_CONTROLS

    def _abort(self) -> bool:
        # Non-ASCII inside ESC/CSI ends the sequence and is kept as text
        self.state = State.GROUND
        return True

    def _ground(self, byte: int) -> bool:
        if byte < 0x20:
            return self._execute(byte)
        return byte != DEL

    def _escape(self, byte: int) -> bool:
        if byte < 0x20:
            return self._execute(byte)
        if byte >= 0x80:
            return self._abort()
        if byte == DEL:
            return False
        if byte <= 0x2F:
            self.state = State.ESCAPE_INTERMEDIATE
        else:
            self.state = _ESCAPE_OPENERS.get(byte, State.GROUND)
        return False

    def _escape_intermediate(self, byte: int) -> bool:
        if byte < 0x20:
            return self._execute(byte)
        if byte >= 0x80:
            return self._abort()
        if 0x30 <= byte < DEL:
            self.state = State.GROUND
        return False

    def _csi(self, byte: int) -> bool:
        if byte < 0x20:
            return self._execute(byte)
        if byte >= 0x80:
            return self._abort()
        # 0x20-0x3F are parameters and intermediates
        if 0x40 <= byte < DEL:
            self.state = State.GROUND
        return False

    def _osc(self, byte: int) -> bool:
        if byte == BEL:
            self.state = State.GROUND
        return False

    def _control_string(self, byte: int) -> bool:
        return False


def strip(data: bytes) -> bytes:
    """Strip escape sequences from ``data`` in one go."""
    escape_filter = EscapeFilter()
    return escape_filter.feed(data) + escape_filter.flush()
