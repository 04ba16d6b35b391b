"""
Rewindable input cursors.

A cursor reads items from a string, bytes, a list of tokens or any iterable.
Iterables are read lazily and buffered so that parsers can rewind to an
earlier mark and try another alternative.
"""
from parlang.character import character_for
from parlang.common import Location
from parlang.exceptions import ParseError, merge_errors

END = object()


class Cursor:
    """
    Args:
    input: str, bytes, a sequence of tokens or any iterable of items.
    file_name(str): Used in error reporting.
    chars(Character): Character capability. Chosen from the input type if
        not given.

    Attributes:
    position(int): Index of the next item.
    furthest(ParseError): The furthest recoverable failure parsers
        backtracked from. Reported if the parse fails closer to the start.
    """

    __slots__ = ['position', 'file_name', 'chars', 'furthest', '_buffer',
                 '_source']

    def __init__(self, input, file_name=None, chars=None, position=0):
        if isinstance(input, (str, bytes, bytearray, list, tuple)):
            self._buffer = input
            self._source = None
        else:
            self._buffer = []
            self._source = iter(input)
        self.chars = chars if chars is not None else character_for(input)
        self.file_name = file_name
        self.position = position
        self.furthest = None

    @property
    def input(self):
        """
        The input read so far.
        """
        return self._buffer

    def _fill(self, position):
        """
        Reads from the source until the item at `position` is buffered.
        Returns False if the source ends earlier.
        """
        buffer = self._buffer
        if position < len(buffer):
            return True
        if self._source is None:
            return False
        for item in self._source:
            buffer.append(item)
            if position < len(buffer):
                return True
        self._source = None
        return False

    def peek(self):
        """
        Returns the next item without consuming it or END at the end of input.
        """
        if self._fill(self.position):
            return self._buffer[self.position]
        return END

    def next(self):
        """
        Consumes and returns the next item or END at the end of input.
        """
        if self._fill(self.position):
            item = self._buffer[self.position]
            self.position += 1
            return item
        return END

    def at_end(self):
        return not self._fill(self.position)

    def mark(self):
        return self.position

    def rewind(self, mark):
        self.position = mark

    def note(self, error):
        """
        Records a recoverable failure. Failures reaching equally far have
        their expectations merged.
        """
        furthest = self.furthest
        end = error.location.end_position
        if furthest is None or end > furthest.location.end_position:
            self.furthest = error
        elif end == furthest.location.end_position:
            self.furthest = merge_errors([furthest, error])

    def location(self, start=None, end=None):
        if start is None:
            start = self.position
        return Location(self._buffer, start, end, self.file_name)

    def error(self, expected=(), start=None, end=None, fatal=False,
              error_class=None):
        """
        Creates a parse error at the given span. The item found is taken from
        the span start.
        """
        if start is None:
            start = self.position
        found = self._buffer[start] if self._fill(start) else None
        error_class = error_class or ParseError
        return error_class(self.location(start, end), expected, found=found,
                           fatal=fatal)

    def __repr__(self):
        return f"<Cursor at {self.position}>"
