"""
Backtracking parser combinators.

A parser is an immutable object with a `parse_at(cursor)` method which either
returns the parsed value, leaving the cursor after the consumed input, or
raises `ParseError`. Ordered choice, optional parsers and repetition rewind the
cursor to where an alternative started and try the next one as long as the
failure is not fatal. The furthest failure backtracked from is kept on the
cursor and `parse` reports it if the parse then fails closer to the start.

Repetitions are *streamed* parsers: `iter_at(cursor)` yields items one by one
so that `fold` and `collect` never materialize intermediate lists unless asked
to.
"""
from parlang.cursor import END, Cursor
from parlang.exceptions import (END_OF_INPUT, ParseError, TryMapError,
                                merge_errors)


class Parser:
    """
    Base class for all parsers.
    """

    def parse_at(self, cursor):
        raise NotImplementedError()

    def parse(self, input, file_name=None):
        """
        Parses the given input from the start.

        Args:
            input: A Cursor, str, bytes, a list of tokens or any iterable.
            file_name(str): File name if applicable. Used in error reporting.
        """
        if not isinstance(input, Cursor):
            input = Cursor(input, file_name=file_name)
        try:
            return self.parse_at(input)
        except ParseError as e:
            # Report where the parse really got stuck if an alternative went
            # further before it was backtracked from.
            furthest = input.furthest
            if furthest is not None and furthest.location.end_position \
                    > e.location.end_position:
                raise furthest from None
            raise

    def map(self, f):
        return Map(self, f)

    def try_map(self, f):
        return TryMap(self, f)

    def then(self, f):
        """
        Calls `f` with the output of this parser and continues with the parser
        it returns.
        """
        return Then(self, f)

    def and_(self, other):
        return Seq(self, other)

    def skip(self, other):
        return Seq(self, other).map(lambda r: r[0])

    def prefix(self, other):
        """
        Parses this parser, then `other`, returning the output of `other`.
        """
        return Seq(self, other).map(lambda r: r[1])

    def between(self, left, right):
        return Seq(left, self, right).map(lambda r: r[1])

    def or_(self, other):
        return Choice(self, other)

    def opt(self):
        return Opt(self)

    def expect(self, expected):
        return Expect(self, expected)

    def commit(self):
        return Commit(self)

    def complete(self):
        """
        Requires the whole input to be consumed.
        """
        return self.skip(eof())

    def spanned(self):
        """
        Returns `(value, Location)` pairs.
        """
        return Spanned(self)

    def once(self):
        return Repeat(self, 1, 1)

    def times(self, n):
        return Repeat(self, n, n)

    def repeat(self, min=0, max=None):
        return Repeat(self, min, max)

    def sep_by(self, sep, min=0, max=None):
        return SepBy(self, sep, min, max)


class StreamedParser(Parser):
    """
    Base class for parsers producing a stream of items.

    Used as a plain parser it collects the items into a list.
    """

    def iter_at(self, cursor):
        raise NotImplementedError()

    def parse_at(self, cursor):
        return list(self.iter_at(cursor))

    def fold(self, init, f):
        return Fold(self, init, f)

    def collect(self, factory=list):
        return Collect(self, factory)

    def or_(self, other):
        return StreamedChoice(self, other)

    def chain(self, *others):
        return Chain(self, *others)


class Map(Parser):
    __slots__ = ['parser', 'f']

    def __init__(self, parser, f):
        self.parser = parser
        self.f = f

    def parse_at(self, cursor):
        return self.f(self.parser.parse_at(cursor))


class TryMap(Parser):
    """
    Maps the output with a function which may reject it by raising
    `TryMapError`. The rejection is reported over the span of the input
    consumed by the inner parser.
    """
    __slots__ = ['parser', 'f']

    def __init__(self, parser, f):
        self.parser = parser
        self.f = f

    def parse_at(self, cursor):
        start = cursor.position
        result = self.parser.parse_at(cursor)
        try:
            return self.f(result)
        except TryMapError as e:
            raise cursor.error([e.expected], start, cursor.position,
                               error_class=e.error_class) from None


class Then(Parser):
    __slots__ = ['parser', 'f']

    def __init__(self, parser, f):
        self.parser = parser
        self.f = f

    def parse_at(self, cursor):
        return self.f(self.parser.parse_at(cursor)).parse_at(cursor)


class Seq(Parser):
    """
    Parses all parsers in order and returns a tuple of their outputs.
    """
    __slots__ = ['parsers']

    def __init__(self, *parsers):
        self.parsers = parsers

    def parse_at(self, cursor):
        return tuple(p.parse_at(cursor) for p in self.parsers)


class Choice(Parser):
    """
    Ordered choice. The first alternative to succeed wins.
    """
    __slots__ = ['parsers']

    def __init__(self, *parsers):
        self.parsers = parsers

    def parse_at(self, cursor):
        mark = cursor.mark()
        errors = []
        for parser in self.parsers:
            try:
                return parser.parse_at(cursor)
            except ParseError as e:
                if e.fatal:
                    raise
                cursor.note(e)
                errors.append(e)
                cursor.rewind(mark)
        raise merge_errors(errors)


class Opt(Parser):
    """
    Returns None if the parser doesn't match.
    """
    __slots__ = ['parser']

    def __init__(self, parser):
        self.parser = parser

    def parse_at(self, cursor):
        mark = cursor.mark()
        try:
            return self.parser.parse_at(cursor)
        except ParseError as e:
            if e.fatal:
                raise
            cursor.note(e)
            cursor.rewind(mark)
            return None


class Expect(Parser):
    """
    Replaces the expectations of failures which happened right where this
    parser started. Failures which consumed input keep their own, more
    specific, description.
    """
    __slots__ = ['parser', 'expected']

    def __init__(self, parser, expected):
        self.parser = parser
        self.expected = expected

    def parse_at(self, cursor):
        start = cursor.position
        furthest = cursor.furthest
        try:
            return self.parser.parse_at(cursor)
        except ParseError as e:
            if e.fatal or e.consumed() or e.location.start_position != start:
                raise
            # Inner failures at the start are described by the new
            # expectation.
            if cursor.furthest is not None \
                    and cursor.furthest.location.end_position <= start:
                cursor.furthest = furthest
            raise e.clone(expected=frozenset([self.expected])) from None


class Commit(Parser):
    """
    Turns failures of the parser into fatal ones so that enclosing choices
    don't try other alternatives.
    """
    __slots__ = ['parser']

    def __init__(self, parser):
        self.parser = parser

    def parse_at(self, cursor):
        try:
            return self.parser.parse_at(cursor)
        except ParseError as e:
            if e.fatal:
                raise
            raise e.clone(fatal=True) from None


class Spanned(Parser):
    __slots__ = ['parser']

    def __init__(self, parser):
        self.parser = parser

    def parse_at(self, cursor):
        start = cursor.position
        result = self.parser.parse_at(cursor)
        return result, cursor.location(start, cursor.position)


class Lazy(Parser):
    """
    Builds the parser on first use. Used for recursive grammars.
    """
    __slots__ = ['factory', '_parser']

    def __init__(self, factory):
        self.factory = factory
        self._parser = None

    def parse_at(self, cursor):
        if self._parser is None:
            self._parser = self.factory()
        return self._parser.parse_at(cursor)


class Forward(Parser):
    """
    A parser defined later. Used for recursive grammars:

        expr = forward()
        expr.define(choice(number, expr.between(token('('), token(')'))))
    """
    __slots__ = ['parser']

    def __init__(self):
        self.parser = None

    def define(self, parser):
        self.parser = parser
        return self

    def parse_at(self, cursor):
        if self.parser is None:
            raise RuntimeError("Forward parser used before it was defined.")
        return self.parser.parse_at(cursor)


class Repeat(StreamedParser):
    """
    Repeats the parser at least `min` and at most `max` times (unbounded if
    `max` is None).
    """
    __slots__ = ['parser', 'min', 'max']

    def __init__(self, parser, min=0, max=None):
        if min < 0 or (max is not None and max < min):
            raise ValueError(f"Invalid repetition range {min}..{max}")
        self.parser = parser
        self.min = min
        self.max = max

    def iter_at(self, cursor):
        count = 0
        while self.max is None or count < self.max:
            mark = cursor.mark()
            try:
                item = self.parser.parse_at(cursor)
            except ParseError as e:
                if e.fatal or count < self.min:
                    raise
                cursor.note(e)
                cursor.rewind(mark)
                return
            count += 1
            yield item
            if cursor.position == mark and self.max is None \
                    and count >= self.min:
                # Parser matched empty input. Stop to prevent looping.
                return


class SepBy(StreamedParser):
    __slots__ = ['parser', 'sep', 'min', 'max']

    def __init__(self, parser, sep, min=0, max=None):
        self.parser = parser
        self.sep = sep
        self.min = min
        self.max = max

    def iter_at(self, cursor):
        count = 0
        while self.max is None or count < self.max:
            mark = cursor.mark()
            try:
                if count:
                    self.sep.parse_at(cursor)
                item = self.parser.parse_at(cursor)
            except ParseError as e:
                if e.fatal or count < self.min:
                    raise
                cursor.note(e)
                cursor.rewind(mark)
                return
            count += 1
            yield item


class Chain(StreamedParser):
    """
    Concatenates streams.
    """
    __slots__ = ['parsers']

    def __init__(self, *parsers):
        self.parsers = parsers

    def iter_at(self, cursor):
        for parser in self.parsers:
            yield from parser.iter_at(cursor)


class StreamedChoice(StreamedParser):
    """
    Ordered choice over streams. An alternative is selected as soon as it
    produces its first item (or ends successfully without items).
    """
    __slots__ = ['parsers']

    def __init__(self, *parsers):
        self.parsers = parsers

    def iter_at(self, cursor):
        mark = cursor.mark()
        errors = []
        for parser in self.parsers:
            items = parser.iter_at(cursor)
            try:
                first = next(items)
            except StopIteration:
                return
            except ParseError as e:
                if e.fatal:
                    raise
                cursor.note(e)
                errors.append(e)
                cursor.rewind(mark)
                continue
            yield first
            yield from items
            return
        raise merge_errors(errors)


class Fold(Parser):
    """
    Folds the stream into the output of the `init` parser.
    """
    __slots__ = ['streamed', 'init', 'f']

    def __init__(self, streamed, init, f):
        self.streamed = streamed
        self.init = init if isinstance(init, Parser) else value(init)
        self.f = f

    def parse_at(self, cursor):
        acc = self.init.parse_at(cursor)
        f = self.f
        for item in self.streamed.iter_at(cursor):
            acc = f(acc, item)
        return acc


class Collect(Parser):
    __slots__ = ['streamed', 'factory']

    def __init__(self, streamed, factory=list):
        self.streamed = streamed
        self.factory = factory

    def parse_at(self, cursor):
        return self.factory(self.streamed.iter_at(cursor))


class Is(Parser):
    """
    Consumes one item satisfying the predicate and returns it.
    """
    __slots__ = ['predicate', 'expected']

    def __init__(self, predicate, expected=None):
        self.predicate = predicate
        self.expected = expected

    def parse_at(self, cursor):
        item = cursor.peek()
        if item is END or not self.predicate(item):
            raise cursor.error([self.expected] if self.expected else [])
        cursor.position += 1
        return item


class IsSome(Parser):
    """
    Consumes one item for which `f` returns anything but None and returns
    that value.
    """
    __slots__ = ['f', 'expected']

    def __init__(self, f, expected=None):
        self.f = f
        self.expected = expected

    def parse_at(self, cursor):
        item = cursor.peek()
        result = None if item is END else self.f(item)
        if result is None:
            raise cursor.error([self.expected] if self.expected else [])
        cursor.position += 1
        return result


class CharIs(Parser):
    """
    Like `Is` but the predicate also gets the cursor's `Character`
    capability: `predicate(chars, item)`.
    """
    __slots__ = ['predicate', 'expected']

    def __init__(self, predicate, expected=None):
        self.predicate = predicate
        self.expected = expected

    def parse_at(self, cursor):
        item = cursor.peek()
        if item is END or not self.predicate(cursor.chars, item):
            raise cursor.error([self.expected] if self.expected else [])
        cursor.position += 1
        return item


class CharIsSome(Parser):
    __slots__ = ['f', 'expected']

    def __init__(self, f, expected=None):
        self.f = f
        self.expected = expected

    def parse_at(self, cursor):
        item = cursor.peek()
        result = None if item is END else self.f(cursor.chars, item)
        if result is None:
            raise cursor.error([self.expected] if self.expected else [])
        cursor.position += 1
        return result


class Tag(Parser):
    """
    Matches a sequence of items. String literals are matched against bytes
    input by their ascii encoding.
    """
    __slots__ = ['literal']

    def __init__(self, literal):
        if not len(literal):
            raise ValueError("Empty tag.")
        self.literal = literal

    def parse_at(self, cursor):
        start = cursor.position
        for expected in cursor.chars.literal(self.literal):
            item = cursor.peek()
            if item is END or item != expected:
                cursor.rewind(start)
                raise cursor.error([repr(self.literal)])
            cursor.position += 1
        return self.literal


class Value(Parser):
    __slots__ = ['value']

    def __init__(self, value):
        self.value = value

    def parse_at(self, cursor):
        return self.value


class ValueFn(Parser):
    __slots__ = ['f']

    def __init__(self, f):
        self.f = f

    def parse_at(self, cursor):
        return self.f()


class Eof(Parser):

    def parse_at(self, cursor):
        if not cursor.at_end():
            raise cursor.error([END_OF_INPUT])


def is_(predicate, expected=None):
    return Is(predicate, expected)


def is_some(f, expected=None):
    return IsSome(f, expected)


def char_is(predicate, expected=None):
    return CharIs(predicate, expected)


def char_is_some(f, expected=None):
    return CharIsSome(f, expected)


def token(item):
    """
    Matches a single item equal to the given one.
    """
    return Is(lambda c: c == item, repr(item))


def one_of(items):
    items = tuple(items)
    return Is(lambda c: c in items,
              "one of " + ", ".join(repr(i) for i in items))


def none_of(items):
    items = tuple(items)
    return Is(lambda c: c not in items,
              "none of " + ", ".join(repr(i) for i in items))


def any_item():
    return Is(lambda c: True, "any item")


def tag(literal):
    return Tag(literal)


def eof():
    return Eof()


def value(v):
    return Value(v)


def value_fn(f):
    return ValueFn(f)


def lazy(factory):
    return Lazy(factory)


def forward():
    return Forward()


def choice(*parsers):
    if not parsers:
        raise ValueError("choice needs at least one alternative.")
    if len(parsers) == 1:
        return parsers[0]
    if all(isinstance(p, StreamedParser) for p in parsers):
        return StreamedChoice(*parsers)
    return Choice(*parsers)


def seq(*parsers):
    return Seq(*parsers)


def chain(*streamed):
    return Chain(*streamed)
