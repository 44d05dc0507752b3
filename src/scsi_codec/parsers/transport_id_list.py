"""
TransportID list parsing.

Reads one or more TransportIDs from line oriented text. Each line holds
either a symbolic TransportID ("sas,5000c50005b32001") or a comma, space
or tab separated list of hex bytes. Blank lines and lines starting with '#'
are ignored, and '#' ends a hex list.

Text streams are read in fixed size chunks. A chunk without a trailing
newline continues the same line in the next chunk, and a single hex digit
left at the end of such a chunk is joined with a hex digit starting the next.
"""

import logging
import sys
from enum import Enum

from .base import BaseParser
from ..exceptions import (
    CapacityExceededError,
    LengthViolationError,
    TransportIdIOError,
    TransportIdParseError,
    UnrecognizedNotationError,
)
from ..protocol.constants import (
    COMMENT_CHAR,
    HEX_DIGITS,
    HEX_LIST_SEPARATORS,
    MAX_INPUT_LINE_LEN,
    MAX_INPUT_LINES,
    MAX_TRANSPORT_IDS,
)
from ..protocol.transport_id import encode_transport_id
from ..protocol.transport_id_array import TransportIdArray

logger = logging.getLogger(__name__)


class CarryState(Enum):
    """Whether a single hex digit is held over from the previous chunk."""
    NO_CARRY = 0
    CARRY_ONE_DIGIT = 1


class TransportIdLineReader:
    """
    Incremental reader feeding line chunks into a TransportIdArray.

    A TransportID slot stays open while its line continues across
    unterminated chunks and is closed when the line ends.
    """

    def __init__(self, transport_ids: TransportIdArray):
        self.transport_ids = transport_ids
        self.carry_state = CarryState.NO_CARRY
        self._carry_digit = ""
        self._slot: int | None = None      # Slot receiving hex bytes
        self._position = 0                 # Next byte position in that slot
        self._in_line = False              # Current line already contributed bytes
        self._split_token = False          # Multi-digit token ended an unterminated chunk
        self._skip_continuation = False    # Rest of a symbolic line is ignored

    def feed(self, chunk: str, line_number: int | None = None) -> None:
        """
        Process one chunk of input.

        Args:
            chunk: text up to and including a newline, or a partial line
            line_number: 1-based chunk number used in error messages

        Raises:
            TransportIdParseError: On a bad hex token or a value above 0xff
            LengthViolationError: On a malformed symbolic TransportID
            CapacityExceededError: If the array or a slot is full
        """
        terminated = chunk.endswith('\n')
        text = chunk[:-1].rstrip('\r') if terminated else chunk

        if self._skip_continuation:
            self._skip_continuation = not terminated
            return

        pos = self._take_carry(text, line_number)

        while pos < len(text) and text[pos] in " \t":
            pos += 1

        if pos < len(text) and text[pos] != COMMENT_CHAR:
            if not self._in_line and self._encode_symbolic(text[pos:], line_number):
                self._skip_continuation = not terminated
                return
            self._parse_hex_list(text, pos, line_number, terminated)

        if terminated:
            self.end_line()

    def end_line(self) -> None:
        """Close the current TransportID, if the line contributed any bytes."""
        if self._slot is not None:
            logger.debug("Read TransportID %d from hex list (%d bytes)", self._slot, self._position)
        self._slot = None
        self._position = 0
        self._in_line = False
        self._split_token = False
        self.carry_state = CarryState.NO_CARRY
        self._carry_digit = ""

    def _take_carry(self, text: str, line_number: int | None) -> int:
        """Join a carried digit with the first character of text; return where parsing resumes."""
        starts_with_hex = bool(text) and text[0] in HEX_DIGITS

        if self._split_token and starts_with_hex:
            raise TransportIdParseError("hex number larger than 0xff", line=line_number, column=1)
        self._split_token = False

        if self.carry_state is CarryState.NO_CARRY:
            return 0

        self.carry_state = CarryState.NO_CARRY
        if not starts_with_hex:
            return 0

        value = int(self._carry_digit + text[0], 16)
        self._carry_digit = ""
        # The carried digit was written as a byte of its own; replace it
        self.transport_ids.set_byte(self._slot, self._position - 1, value)
        if len(text) > 1 and text[1] in HEX_DIGITS:
            raise TransportIdParseError("hex number larger than 0xff", line=line_number, column=1)
        return 1

    def _encode_symbolic(self, text: str, line_number: int | None) -> bool:
        """Store text as a symbolic TransportID; False if it is not a symbolic notation."""
        try:
            record = encode_transport_id(text)
        except UnrecognizedNotationError:
            return False
        except TransportIdParseError as e:
            raise TransportIdParseError(f"bad symbolic TransportID ({e})", line=line_number) from e
        except LengthViolationError as e:
            if line_number is None:
                raise
            raise LengthViolationError(f"{e} in line {line_number}") from e
        index = self.transport_ids.add(record)
        logger.debug("Read symbolic TransportID %d: %s", index, text.split()[0])
        return True

    def _parse_hex_list(self, text: str, pos: int, line_number: int | None, terminated: bool) -> None:
        length = len(text)
        while pos < length:
            ch = text[pos]
            if ch in HEX_LIST_SEPARATORS:
                pos += 1
                continue
            if ch == COMMENT_CHAR:
                break
            if ch not in HEX_DIGITS:
                raise TransportIdParseError("syntax error", line=line_number, column=pos + 1)

            start = pos
            while pos < length and text[pos] in HEX_DIGITS:
                pos += 1
            token = text[start:pos]
            value = int(token, 16)
            if value > 0xff:
                raise TransportIdParseError("hex number larger than 0xff",
                                            line=line_number, column=start + 1)
            self._write_byte(value)

            if not terminated and pos == length:
                if len(token) == 1:
                    self.carry_state = CarryState.CARRY_ONE_DIGIT
                    self._carry_digit = token
                else:
                    self._split_token = True

    def _write_byte(self, value: int) -> None:
        if self._slot is None:
            self._slot = self.transport_ids.new_slot()
            self._position = 0
        self.transport_ids.set_byte(self._slot, self._position, value)
        self._position += 1
        self._in_line = True


class TransportIdListParser(BaseParser):
    """Parser for TransportIDs given as text."""

    @staticmethod
    def _iter_chunks(source, line_length: int):
        """Yield line chunks from a text stream or from an iterable of strings."""
        if hasattr(source, 'readline'):
            while True:
                chunk = source.readline(line_length)
                if not chunk:
                    break
                yield chunk
        else:
            yield from source

    @classmethod
    def read_all(cls, source, max_lines: int = MAX_INPUT_LINES,
                 max_transport_ids: int = MAX_TRANSPORT_IDS,
                 line_length: int = MAX_INPUT_LINE_LEN) -> TransportIdArray:
        """
        Read every TransportID from source.

        Args:
            source: text stream (file or stdin) or iterable of line chunks
            max_lines: maximum number of line chunks accepted
            max_transport_ids: maximum number of TransportIDs accepted
            line_length: chunk size used when reading a text stream

        Returns:
            TransportIdArray holding the TransportIDs in input order

        Raises:
            TransportIdParseError: On the first malformed line
            LengthViolationError: On a malformed symbolic TransportID
            CapacityExceededError: If max_lines or max_transport_ids is exceeded
        """
        transport_ids = TransportIdArray(max_count=max_transport_ids)
        reader = TransportIdLineReader(transport_ids)

        for line_number, chunk in enumerate(cls._iter_chunks(source, line_length), start=1):
            if line_number > max_lines:
                raise CapacityExceededError(f"too many input lines: at most {max_lines} accepted")
            reader.feed(chunk, line_number)

        reader.end_line()
        logger.debug("Read %d TransportIDs", len(transport_ids))
        return transport_ids

    @classmethod
    def read_file(cls, path: str, **kwargs) -> TransportIdArray:
        """
        Read every TransportID from the file at path.

        Raises:
            TransportIdIOError: If the file cannot be opened or read
        """
        try:
            with open(path, 'r') as f:
                return cls.read_all(f, **kwargs)
        except OSError as e:
            raise TransportIdIOError(f"unable to read TransportIDs from {path}: {e}") from e


def build_transport_ids(argument: str, stdin=None) -> TransportIdArray:
    """
    Build a TransportID array from a command argument.

    The argument is one of:
    - "-": TransportIDs are read from stdin
    - "file=<name>" (either case): TransportIDs are read from the file
    - a single symbolic TransportID
    - a single comma or space separated list of hex bytes

    Args:
        argument: argument text
        stdin: stream used for "-", defaults to sys.stdin

    Returns:
        TransportIdArray holding the TransportIDs
    """
    if argument.startswith('-'):
        return TransportIdListParser.read_all(stdin if stdin is not None else sys.stdin)
    if argument[:5].lower() == 'file=':
        return TransportIdListParser.read_file(argument[5:])

    transport_ids = TransportIdArray()
    if argument:
        reader = TransportIdLineReader(transport_ids)
        reader.feed(argument + '\n')
    return transport_ids
