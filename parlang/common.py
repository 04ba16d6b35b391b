from parlang.termui import s_attention as _a


class Location:
    """
    Represents a location (point or span) of the object in the input.

    Args:
    input_str: The input being parsed. For streamed inputs this is the buffer
        of items read so far.
    start_position(int): The position of the span start.
    end_position(int): The end of the span. Equals `start_position` for
        points.
    file_name(str): The name (path) of the file this location refers to.

    Attributes:
    line, column (int): The line/column calculated from the position start and
        input_str.
    line_end, column_end (int): The line/column calculated from the position
        end and input_str.
    """

    __slots__ = ['start_position', 'end_position', 'input_str', 'file_name',
                 '_line', '_column', '_line_end', '_column_end']

    def __init__(self, input_str=None, start_position=None, end_position=None,
                 file_name=None):
        self.input_str = input_str
        self.start_position = start_position
        self.end_position = start_position if end_position is None \
            else end_position
        self.file_name = file_name

        # Evaluate this only when string representation is needed.
        # E.g. during error reporting
        self._line = None
        self._column = None

        self._line_end = None
        self._column_end = None

    @property
    def line(self):
        if self._line is None:
            self.evaluate_line_col()
        return self._line

    @property
    def line_end(self):
        if self._line_end is None:
            self.evaluate_line_col_end()
        return self._line_end

    @property
    def column(self):
        if self._column is None:
            self.evaluate_line_col()
        return self._column

    @property
    def column_end(self):
        if self._column_end is None:
            self.evaluate_line_col_end()
        return self._column_end

    @property
    def text(self):
        """
        The input as a string if it is textual, else the input unchanged.
        """
        return as_text(self.input_str)

    def evaluate_line_col(self):
        self._line, self._column = pos_to_line_col(
            self.text, self.start_position)

    def evaluate_line_col_end(self):
        if self.end_position:
            self._line_end, self._column_end = \
                pos_to_line_col(self.text, self.end_position)

    def is_eof(self):
        return self.input_str is not None \
            and self.start_position >= len(self.input_str)

    def __str__(self):
        line, column = self.line, self.column
        if line is not None:
            return ('{}{}:{}:"{}"'
                    .format(f"{self.file_name}:"
                            if self.file_name else "",
                            line, column,
                            position_context(self.text,
                                             self.start_position)))
        if self.file_name:
            return _a(self.file_name)
        return "<Unknown location>"

    def __repr__(self):
        return str(self)


def as_text(input_str):
    """
    Streamed text inputs are buffered as lists of one character strings. Join
    them back so that line/column calculation works the same as for strings.
    """
    if isinstance(input_str, list) and input_str \
            and all(isinstance(c, str) and len(c) == 1 for c in input_str):
        return ''.join(input_str)
    return input_str


def position_context(input_str, position):
    """
    Returns position context string.
    """
    start = max(position-10, 0)
    c = str(input_str[start:position]) + _a(" **> ") \
        + str(input_str[position:position+10])
    return replace_newlines(c)


def replace_newlines(in_str):
    try:
        return in_str.replace("\n", "\\n")
    except AttributeError:
        return in_str


def pos_to_line_col(input_str, position):
    """
    Returns position in the (line,column) form.
    """

    if position is None or input_str is None:
        return None, None

    if not isinstance(input_str, str):
        # If we are not parsing string
        return 1, position

    line = input_str[: position].count('\n') + 1
    line_start_pos = input_str.rfind('\n', 0, position)
    column = position - line_start_pos - 1

    return line, column
