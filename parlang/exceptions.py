from typing import FrozenSet, Iterable, Optional, Tuple

from parlang.common import Location
from parlang.termui import s_attention as err
from parlang.termui import s_header as _

END_OF_INPUT = "end of input"


class ParlangError(Exception):
    """
    Base class for all errors reported by parlang.

    The full message, with the input context rendered around the location, is
    built only when the error is displayed. Parse errors are raised and
    discarded often during backtracking.
    """
    error_type = "error"

    def __init__(self, location: Location,
                 message: Optional[str] = None,
                 context_message: Optional[str] = None,
                 hint: Optional[str] = None):
        super().__init__(message)
        self.location = location
        self._message = message
        self._context_message = context_message
        self.hint = hint

    @property
    def message(self) -> str:
        return self._message

    @property
    def context_message(self) -> Optional[str]:
        return self._context_message

    @property
    def full_message(self) -> str:
        context = get_context(self.location, self.context_message) \
            if self.context_message else None
        hint = _(f"  hint: {self.hint}") if self.hint else None
        return "\n".join(
            filter(None, [f"{err(self.error_type)}: {self.message}",
                          context, hint]))

    def __str__(self):
        return f"{self.location}: {self.full_message}"


def get_line_col_at_position(text: str, pos: int) -> Tuple[Optional[int],
                                                           Optional[int],
                                                           Optional[str],
                                                           Optional[str]]:
    lines = text.splitlines(keepends=True)

    if pos > len(text):
        # Position out of range
        return None, None, None, None

    # Special handling of EOF
    if pos == len(text):
        if not lines:
            return 0, 0, "", None
        prev_line = lines[-2].rstrip('\n\r') if len(lines) > 1 else None
        return len(lines) - 1, len(lines[-1]), lines[-1].rstrip('\n\r'), \
            prev_line

    current_pos = 0
    for lineidx, line in enumerate(lines):
        if current_pos <= pos < current_pos + len(line):
            prev_line = lines[lineidx-1].rstrip('\n\r') if lineidx > 0 \
                else None
            return lineidx, pos - current_pos, line.rstrip('\n\r'), prev_line
        current_pos += len(line)
    return None, None, None, None


def get_indented_message(message: str, indent: int,
                         prefix: Optional[str] = None,
                         marker: Optional[str] = None) -> str:
    """
    Returns message where all lines are indented by `indent`.

    If optional `prefix` is given it is prepended to every line.
    """
    indent_str = (_(prefix) if prefix is not None else "") + " " * indent
    first_indent_str = (indent_str[:-len(marker) + 1] + err(marker)) \
        if marker is not None else None
    return "\n".join([f"{first_indent_str}{line}"
                      if marker is not None and lineidx == 0
                      else f"{indent_str}{line}"
                      for lineidx, line in enumerate(message.splitlines())])


def get_context(location: Location, message: str) -> Optional[str]:
    context = None
    text = location.text
    if text is not None and location.start_position is not None:
        if type(text) is str:
            lineidx, colidx, line, prev_line = get_line_col_at_position(
                text, location.start_position)
        else:
            start = max(location.start_position-10, 0)
            lineidx = 0
            colidx = len(str(text[start:location.start_position])) + 1
            line = str(text[start:location.start_position+10])
            prev_line = None

        if lineidx is not None and colidx is not None:
            prev_line_context = _(f"{lineidx:>5} | ") + f"{prev_line}\n" \
                if prev_line else ""
            context = prev_line_context + \
                _(f"{lineidx+1:>5} | ") + f"{line}\n" \
                + get_indented_message(message, colidx + 4, "      |", "^^^ ")

    return context


def expected_str(expected: Iterable[str]) -> str:
    return " or ".join(sorted(expected))


class ParseError(ParlangError):
    """
    Raised when the input doesn't match at the given location.

    Args:
    location(Location): The span of the failure. For a plain mismatch this is
        the point where an item was expected.
    expected(iterable of str): Descriptions of what was expected.
    found: The item found at the location start. `None` at the end of input.
    fatal(bool): Fatal errors are not recovered by ordered choice, optional
        or repetition. A parser commits (and turns failures fatal) after a
        prefix that unambiguously selects an alternative.
    """
    error_type = "syntax error"
    problem = None

    def __init__(self, location: Location, expected: Iterable[str] = (),
                 found=None, fatal: bool = False):
        self.expected = frozenset(expected)  # type: FrozenSet[str]
        self.found = found
        self.fatal = fatal
        super().__init__(location)

    @property
    def message(self):
        if self.problem:
            return self.problem
        if self.found is None:
            return 'unexpected end of input'
        return f'unexpected {self.found!r}'

    @property
    def context_message(self):
        if self.expected:
            return _('expected: ') + expected_str(self.expected)

    def consumed(self):
        """
        True if this failure spans over some of the input.
        """
        return self.location.end_position != self.location.start_position

    def clone(self, **changes):
        """
        Returns a copy of this error with the given attributes changed.
        """
        new = self.__class__.__new__(self.__class__)
        new.__dict__.update(self.__dict__)
        new.__dict__.update(changes)
        new.args = self.args
        return new

    def __str__(self):
        return f"{self.location}: {self.full_message}"


class NumberOverflowError(ParseError):
    """
    Accumulated literal doesn't fit into the target numeric type. The location
    spans over all consumed digits.
    """
    problem = "number out of range"


class InvalidFloatError(ParseError):
    """
    Reconstructed float can't be represented in the target float type.
    """
    problem = "float out of range"


def merge_errors(errors):
    """
    Returns a single error describing the given alternatives' failures.

    The errors that reached furthest into the input win. If more than one plain
    mismatch happened at the same point their expectations are merged.
    """
    furthest = max(e.location.end_position for e in errors)
    errors = [e for e in errors if e.location.end_position == furthest]
    first = errors[0]
    if len(errors) == 1 or first.problem:
        return first
    expected = set()
    for e in errors:
        if e.problem:
            return e
        expected.update(e.expected)
    return first.clone(expected=frozenset(expected))


class TryMapError(Exception):
    """
    Raised from `try_map` callbacks to reject a parsed value.

    Args:
    expected(str): What was expected instead.
    error_class: The ParseError subclass reported to the caller.
    """
    def __init__(self, expected, error_class=ParseError):
        super().__init__(expected)
        self.expected = expected
        self.error_class = error_class


class GrammarError(ParlangError):
    """
    Raised when parsers are configured wrongly at construction time.
    """
    error_type = "grammar error"

    def __init__(self, message, location=None):
        super().__init__(location or Location(), message)

    def __str__(self):
        return self.full_message


class LayerConfigurationError(GrammarError):
    error_type = "layer error"


class LayerInvariantError(Exception):
    """
    An operator was matched by a layer which has no construction for it. This
    is a programming error in the layer table and never a parse failure.
    """
    pass
