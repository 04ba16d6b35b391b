"""
Expression parsers built by precedence climbing.

An expression grammar is described by its atoms and a list of operator layers
ordered from the tightest to the loosest binding. Each layer parses its
operands with the parser of the previous layer (the atoms for the first one),
so precedence and associativity follow from the composition alone:

    expr = infix(
        [signed(lambda neg: integer(10, neg)),
         lazy(lambda: expr).between(token('('), token(')'))],
        [Prefix({'-': operator.neg}),
         Left({'*': operator.mul, '/': operator.floordiv}),
         Left({'+': operator.add, '-': operator.sub})])
"""
import logging
from functools import reduce

from parlang.combinators import Parser, choice, forward, seq, tag, token
from parlang.exceptions import LayerConfigurationError, LayerInvariantError
from parlang import termui
from parlang.termui import a_print, h_print

logger = logging.getLogger(__name__)

PREFIX = 'prefix'
PREFIX_ONCE = 'prefix_once'
POSTFIX = 'postfix'
POSTFIX_ONCE = 'postfix_once'
BINARY = 'binary'
LEFT = 'left'
RIGHT = 'right'


def operator_parser(op):
    """
    Returns a parser matching the operator and returning it unchanged.

    Strings and bytes are matched as a sequence of characters. Anything else is
    matched as a single item, which is what token streams need.
    """
    if isinstance(op, (str, bytes)):
        matcher = tag(op)
    else:
        matcher = token(op)
    return matcher.map(lambda _: op)


class Layer:
    """
    Base class for operator layers.

    Args:
    operators: An ordered mapping from an operator to its construction, a
        callable building the result from the operand(s). Operators are tried
        in order so longer operators must precede their prefixes (`'**'`
        before `'*'`).
    """
    fixity = None

    def __init__(self, operators):
        self.operators = dict(operators)
        if not self.operators:
            raise LayerConfigurationError(
                f"No operators given for a {self.fixity} layer.")
        for op, construct in self.operators.items():
            if not callable(construct):
                raise LayerConfigurationError(
                    f"Construction for operator {op!r} in a {self.fixity} "
                    "layer is not callable.")
        self.operator = choice(*[operator_parser(op)
                                 for op in self.operators]) \
            .expect(self.expected())

    def expected(self):
        return "an operator " + ", ".join(repr(op) for op in self.operators)

    def construct(self, op):
        try:
            return self.operators[op]
        except KeyError:
            raise LayerInvariantError(
                f"Operator {op!r} has no construction in {self!r}.") from None

    def build(self, operand):
        """
        Returns this layer's parser given the parser of the previous layer.
        """
        raise NotImplementedError()

    def __repr__(self):
        return "{}({})".format(type(self).__name__,
                               ", ".join(repr(op) for op in self.operators))


class Prefix(Layer):
    """
    Any number of prefix operators. The operator nearest to the operand is
    applied first.
    """
    fixity = PREFIX

    def build(self, operand):
        def apply(result):
            ops, x = result
            return reduce(lambda acc, op: self.construct(op)(acc),
                          reversed(ops), x)
        return seq(self.operator.repeat(), operand).map(apply)


class PrefixOnce(Layer):
    """
    At most one prefix operator.
    """
    fixity = PREFIX_ONCE

    def build(self, operand):
        def apply(result):
            op, x = result
            return x if op is None else self.construct(op)(x)
        return seq(self.operator.opt(), operand).map(apply)


class Postfix(Layer):
    """
    Any number of postfix operators applied from left to right.
    """
    fixity = POSTFIX

    def build(self, operand):
        return self.operator.repeat().fold(
            operand, lambda acc, op: self.construct(op)(acc))


class PostfixOnce(Layer):
    """
    At most one postfix operator.
    """
    fixity = POSTFIX_ONCE

    def build(self, operand):
        def apply(result):
            x, op = result
            return x if op is None else self.construct(op)(x)
        return seq(operand, self.operator.opt()).map(apply)


class Binary(Layer):
    """
    A single, non associative, infix operator: `lhs (op rhs)?`.

    Args:
    lhs, rhs(Parser): Override the parser of the left or the right operand.
        Both default to the previous layer.
    """
    fixity = BINARY

    def __init__(self, operators, lhs=None, rhs=None):
        super().__init__(operators)
        self.lhs = lhs
        self.rhs = rhs

    def build(self, operand):
        def apply(result):
            x, rest = result
            if rest is None:
                return x
            op, y = rest
            return self.construct(op)(x, y)
        return seq(self.lhs or operand,
                   seq(self.operator, self.rhs or operand).opt()).map(apply)


class Left(Layer):
    """
    Left associative infix operators: `a - b - c` is `(a - b) - c`.

    Args:
    rhs(Parser): Overrides the parser of the operands right of operators.
    """
    fixity = LEFT

    def __init__(self, operators, rhs=None):
        super().__init__(operators)
        self.rhs = rhs

    def build(self, operand):
        def apply(acc, pair):
            op, y = pair
            return self.construct(op)(acc, y)
        return seq(self.operator, self.rhs or operand).repeat() \
            .fold(operand, apply)


class Right(Layer):
    """
    Right associative infix operators: `a ^ b ^ c` is `a ^ (b ^ c)`.

    Args:
    lhs(Parser): Overrides the parser of the operands left of operators.
    """
    fixity = RIGHT

    def __init__(self, operators, lhs=None):
        super().__init__(operators)
        self.lhs = lhs

    def build(self, operand):
        if self.lhs is not None:
            # Only the operands left of operators use the override.
            def apply_pairs(result):
                pairs, last = result
                acc = last
                for x, op in reversed(pairs):
                    acc = self.construct(op)(x, acc)
                return acc
            return seq(seq(self.lhs, self.operator).repeat(),
                       operand).map(apply_pairs)

        def apply(result):
            first, pairs = result
            if not pairs:
                return first
            operands = [first] + [y for _, y in pairs]
            acc = operands.pop()
            for (op, _), x in zip(reversed(pairs), reversed(operands)):
                acc = self.construct(op)(x, acc)
            return acc
        return seq(operand, seq(self.operator, operand).repeat()).map(apply)


LAYERS = {
    PREFIX: Prefix,
    PREFIX_ONCE: PrefixOnce,
    POSTFIX: Postfix,
    POSTFIX_ONCE: PostfixOnce,
    BINARY: Binary,
    LEFT: Left,
    RIGHT: Right,
}


def infix(atoms, layers):
    """
    Composes an expression parser.

    Args:
    atoms: A parser or a list of parsers tried in order for the operands of
        the tightest layer (literals, parenthesized expressions...).
    layers: Layers from the tightest to the loosest binding.
    """
    if isinstance(atoms, Parser):
        atoms = [atoms]
    atoms = list(atoms)
    if not atoms:
        raise LayerConfigurationError("No atoms given for an expression.")
    parser = choice(*atoms)
    for layer in layers:
        if not isinstance(layer, Layer):
            raise LayerConfigurationError(f"Not a layer: {layer!r}")
        logger.debug("Composing %r", layer)
        parser = layer.build(parser)
    return parser


class ExpressionBuilder:
    """
    Builds an expression parser step by step.

    `expression` can be referenced by atoms before the parser is built, e.g.
    for parenthesized sub-expressions:

        builder = ExpressionBuilder()
        builder.atom(number)
        builder.atom(builder.expression.between(token('('), token(')')))
        builder.layer(Left({'+': operator.add}))
        expr = builder.build()
    """
    def __init__(self, debug=False, debug_colors=False):
        self.debug = debug
        self.debug_colors = debug_colors
        termui.colors = debug_colors
        self.atoms = []
        self.layers = []
        self.expression = forward()
        self._built = False

    def atom(self, parser):
        self.atoms.append(parser)
        return self

    def layer(self, layer, operators=None, **kwargs):
        """
        Adds a layer binding looser than the previously added ones.

        Args:
        layer: A Layer instance or a fixity name (e.g. 'left') in which case
            `operators` and keyword arguments are passed to the layer class.
        """
        if isinstance(layer, str):
            try:
                layer_class = LAYERS[layer]
            except KeyError:
                raise LayerConfigurationError(
                    f'Unknown fixity "{layer}". Expected one of: '
                    + ", ".join(LAYERS)) from None
            layer = layer_class(operators or {}, **kwargs)
        self.layers.append(layer)
        return self

    def build(self):
        if self._built:
            raise LayerConfigurationError("Expression is already built.")
        self._built = True
        if self.debug:
            self.print_debug()
        return self.expression.define(infix(self.atoms, self.layers))

    def print_debug(self):
        a_print("*** EXPRESSION LAYERS ***", new_line=True)
        h_print("Atoms:", str(len(self.atoms)))
        for idx, layer in enumerate(self.layers):
            h_print(f"{idx + 1:>3} {layer.fixity}:",
                    ", ".join(repr(op) for op in layer.operators), level=1)
