"""
Tagged token (or syntax tree) variants.

A `TokenSet` wires named variants to the parsers producing their payloads.
Its `parser()` recognizes any of the variants, producing `Token` objects, and
the named matchers registered with a variant recognize that variant inside a
token stream:

    json_token = TokenSet('JsonToken')
    json_token.variant('Null', tag('null'), field=False, match='null')
    json_token.variant('Number', signed(float_literal), match='number')

    tokens = json_token.parser().repeat().parse('null')
    json_token.null().parse(tokens)
"""
from parlang.combinators import choice, is_
from parlang.exceptions import GrammarError


class Token:
    """
    A variant instance. Variants without a field have `value` set to None.
    """
    __slots__ = ['kind', 'value']

    def __init__(self, kind, value=None):
        self.kind = kind
        self.value = value

    def __eq__(self, other):
        return isinstance(other, Token) and self.kind == other.kind \
            and self.value == other.value

    def __hash__(self):
        return hash((self.kind, self.value))

    def __repr__(self):
        if self.value is None:
            return self.kind
        return f"{self.kind}({self.value!r})"


class Variant:
    """
    Args:
    name(str): The variant (token kind) name.
    parser(Parser): Parser of the variant's source.
    field(bool): If False the parsed value is dropped.
    """
    __slots__ = ['name', 'parser', 'field']

    def __init__(self, name, parser, field=True):
        self.name = name
        self.parser = parser
        self.field = field

    def build(self):
        name = self.name
        if self.field:
            return self.parser.map(lambda v: Token(name, v))
        return self.parser.map(lambda _: Token(name))


class TokenSet:
    """
    A set of variants tried in the order they were added.

    Matchers registered by `variant` are available as attributes.
    """
    def __init__(self, name):
        self.name = name
        self.variants = {}
        self.matchers = {}
        self._parser = None

    def variant(self, name, parser, field=True, match=None, match_arg=None,
                single=None):
        """
        Registers a variant.

        Args:
        name(str): The variant name.
        parser(Parser): Parser of the variant's source.
        field(bool): If False the variant carries no value.
        match(str): Name of a matcher parser recognizing a token of this
            variant in a token stream and returning its value (`()` for
            variants without a field).
        match_arg(str): Name of a matcher factory taking a value and returning
            a parser recognizing a token of this variant with that value.
        single(str): Name under which the parser of this variant alone is
            exposed.
        """
        if name in self.variants:
            raise GrammarError(
                f'Variant "{name}" is already defined in {self.name}.')
        if match_arg is not None and not field:
            raise GrammarError(
                f'"match_arg" is not supported for variant "{name}" '
                'without field.')
        for matcher in filter(None, [match, match_arg, single]):
            if matcher in self.matchers:
                raise GrammarError(
                    f'Matcher "{matcher}" is already defined in {self.name}.')
        variant = Variant(name, parser, field)
        self.variants[name] = variant
        self._parser = None

        if match is not None:
            self.matchers[match] = self._matcher(variant)
        if match_arg is not None:
            self.matchers[match_arg] = \
                lambda inner: self._arg_matcher(variant, inner, match_arg)
        if single is not None:
            self.matchers[single] = variant.build
        return self

    def _matcher(self, variant):
        kind = variant.name
        parser = is_(lambda t: isinstance(t, Token) and t.kind == kind,
                     kind)
        if variant.field:
            parser = parser.map(lambda t: t.value)
        else:
            parser = parser.map(lambda t: ())
        return lambda: parser

    def _arg_matcher(self, variant, inner, name):
        kind = variant.name
        return is_(lambda t: isinstance(t, Token) and t.kind == kind
                   and inner == t.value, name) \
            .map(lambda t: t.value)

    def parser(self):
        """
        Returns the parser of all variants.
        """
        if not self.variants:
            raise GrammarError(f"No variants in {self.name}.")
        if self._parser is None:
            self._parser = choice(*[v.build()
                                    for v in self.variants.values()])
        return self._parser

    def __getattr__(self, name):
        """
        Matchers are looked up if regular attribute is not found.
        """
        matchers = self.__dict__.get('matchers')
        if matchers is not None and name in matchers:
            return matchers[name]
        raise AttributeError(name)

    def __repr__(self):
        return f"TokenSet({self.name}: {', '.join(self.variants)})"
