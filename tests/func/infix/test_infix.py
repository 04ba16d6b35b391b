import operator

import pytest  # noqa
from parlang import ParseError, LayerConfigurationError, \
    LayerInvariantError, infix, ExpressionBuilder, Prefix, PrefixOnce, \
    Postfix, PostfixOnce, Binary, Left, Right, character, integer, \
    forward, is_, lazy, standard_identifier, NumberOverflowError


def arithmetic():
    expr = forward()
    atoms = [integer(10), expr.between(character('('), character(')'))]
    return expr.define(infix(atoms, [
        Prefix({'-': operator.neg}),
        Right({'^': operator.pow}),
        Left({'*': operator.mul, '/': operator.floordiv}),
        Left({'+': operator.add, '-': operator.sub}),
    ])).complete()


def test_arithmetic():
    parser = arithmetic()
    assert parser.parse('-1*(3+4)-4*3/6') == -9
    assert parser.parse('1+2*3') == 7
    assert parser.parse('(1+2)*3') == 9
    assert parser.parse('1--2') == 3
    assert parser.parse('42') == 42


def test_left_associativity():
    parser = arithmetic()
    assert parser.parse('10-3-2') == 5
    assert parser.parse('12/2/3') == 2


def test_right_associativity():
    parser = arithmetic()
    assert parser.parse('2^3^2') == 512
    assert parser.parse('2^3*2') == 16


def test_error_position():
    with pytest.raises(ParseError) as e:
        arithmetic().parse('1+*2')
    assert e.value.location.start_position == 2
    assert 'an integer with radix 10' in e.value.expected

    with pytest.raises(ParseError) as e:
        arithmetic().parse('(1+2')
    assert e.value.location.start_position == 4
    assert e.value.expected == {"')'"}


def test_overflow_in_operand_is_reported():
    with pytest.raises(NumberOverflowError) as e:
        arithmetic().parse('1+99999999999999999999')
    assert e.value.location.start_position == 2
    assert e.value.location.end_position == 22
    assert e.value.expected == {'a not too large number'}

    parens = lazy(lambda: parser).between(character('('), character(')'))
    parser = infix([integer(10), parens], [Left({'+': operator.add})])
    with pytest.raises(NumberOverflowError) as e:
        parser.complete().parse('(1+2)+99999999999999999999')
    assert e.value.location.start_position == 6


def tagged(name):
    return lambda *args: (name,) + args


def test_prefix():
    parser = infix(character('a'), [
        Prefix({'-': tagged('neg'), '!': tagged('not')})]).complete()
    assert parser.parse('a') == 'a'
    assert parser.parse('-a') == ('neg', 'a')
    # The operator nearest to the operand is applied first.
    assert parser.parse('-!a') == ('neg', ('not', 'a'))
    assert parser.parse('!--a') == ('not', ('neg', ('neg', 'a')))


def test_prefix_once():
    parser = infix(character('a'), [
        PrefixOnce({'-': tagged('neg')})]).complete()
    assert parser.parse('a') == 'a'
    assert parser.parse('-a') == ('neg', 'a')
    with pytest.raises(ParseError) as e:
        parser.parse('--a')
    assert e.value.location.start_position == 1


def test_postfix():
    parser = infix(character('a'), [
        Postfix({'!': tagged('fact'), '?': tagged('try')})]).complete()
    assert parser.parse('a') == 'a'
    assert parser.parse('a!?') == ('try', ('fact', 'a'))
    assert parser.parse('a!!') == ('fact', ('fact', 'a'))


def test_postfix_once():
    parser = infix(character('a'), [
        PostfixOnce({'!': tagged('fact')})]).complete()
    assert parser.parse('a!') == ('fact', 'a')
    with pytest.raises(ParseError) as e:
        parser.parse('a!!')
    assert e.value.location.start_position == 2


def test_binary():
    parser = infix(integer(10), [
        Binary({'<': tagged('lt'), '=': tagged('eq')})]).complete()
    assert parser.parse('1') == 1
    assert parser.parse('1<2') == ('lt', 1, 2)
    assert parser.parse('1=2') == ('eq', 1, 2)
    # Not associative.
    with pytest.raises(ParseError) as e:
        parser.parse('1<2<3')
    assert e.value.location.start_position == 3


def test_binary_operand_overrides():
    parser = infix(integer(10), [
        Binary({'=': tagged('assign')}, lhs=standard_identifier())]) \
        .complete()
    assert parser.parse('x=5') == ('assign', 'x', 5)
    assert parser.parse('x') == 'x'
    with pytest.raises(ParseError):
        parser.parse('5=5')

    parser = infix(standard_identifier(), [
        Binary({':': tagged('typed')}, rhs=integer(10))]).complete()
    assert parser.parse('x:5') == ('typed', 'x', 5)
    with pytest.raises(ParseError):
        parser.parse('x:y')


def test_left_rhs_override():
    parser = infix(integer(10), [
        Left({'.': tagged('attr')}, rhs=standard_identifier())]).complete()
    assert parser.parse('1.foo.bar') == ('attr', ('attr', 1, 'foo'), 'bar')
    with pytest.raises(ParseError):
        parser.parse('1.2')


def test_right_lhs_override():
    parser = infix(integer(10), [
        Right({'=': tagged('assign')}, lhs=standard_identifier())]) \
        .complete()
    assert parser.parse('a=b=1') == ('assign', 'a', ('assign', 'b', 1))
    assert parser.parse('1') == 1
    with pytest.raises(ParseError):
        parser.parse('1=a')


def test_multi_character_operators():
    # Longer operators must come first.
    parser = infix(integer(10), [
        Left({'**': operator.pow, '*': operator.mul})]).complete()
    assert parser.parse('2*3**2') == 36
    assert parser.parse('2**3*2') == 16

    parser = infix(integer(10), [
        Right({'**': operator.pow}),
        Left({'*': operator.mul})]).complete()
    assert parser.parse('2**3*2') == 16
    assert parser.parse('2*3**2') == 18


def test_operator_expectation():
    parser = infix(integer(10), [Binary({'<': tagged('lt')})]).complete()
    with pytest.raises(ParseError) as e:
        parser.parse('1>2')
    assert e.value.expected == {'end of input'}

    layer = Binary({'<': tagged('lt'), '<=': tagged('le')})
    with pytest.raises(ParseError) as e:
        layer.operator.parse('>')
    assert e.value.expected == {"an operator '<', '<='"}


def test_token_stream_operators():
    PLUS, TIMES = object(), object()
    number = is_(lambda t: isinstance(t, int), 'a number')
    parser = infix(number, [
        Left({TIMES: operator.mul}),
        Left({PLUS: operator.add})]).complete()
    assert parser.parse([1, PLUS, 2, TIMES, 3]) == 7
    assert parser.parse([4]) == 4
    with pytest.raises(ParseError):
        parser.parse([1, PLUS])


def test_iterator_input():
    parser = arithmetic()
    assert parser.parse(iter('1+2*3')) == 7
    assert parser.parse(c for c in '(1+2)*3') == 9


def test_expression_builder():
    builder = ExpressionBuilder()
    builder.atom(integer(10))
    builder.atom(builder.expression.between(character('('), character(')')))
    builder.layer('prefix', {'-': operator.neg})
    builder.layer('left', {'*': operator.mul, '/': operator.floordiv})
    builder.layer(Left({'+': operator.add, '-': operator.sub}))
    expr = builder.build()

    assert expr is builder.expression
    assert expr.complete().parse('-1*(3+4)-4*3/6') == -9

    with pytest.raises(LayerConfigurationError):
        builder.build()


def test_expression_builder_layer_kwargs():
    builder = ExpressionBuilder()
    builder.atom(integer(10))
    builder.layer('binary', {'=': tagged('assign')},
                  lhs=standard_identifier())
    expr = builder.build().complete()
    assert expr.parse('x=1') == ('assign', 'x', 1)


def test_expression_builder_debug(capsys):
    builder = ExpressionBuilder(debug=True)
    builder.atom(integer(10))
    builder.layer('prefix_once', {'-': operator.neg})
    builder.layer('right', {'^': operator.pow})
    builder.build()

    out = capsys.readouterr().out
    assert '*** EXPRESSION LAYERS ***' in out
    assert 'Atoms: 1' in out
    assert "prefix_once: '-'" in out
    assert "right: '^'" in out


def test_layer_configuration_errors():
    with pytest.raises(LayerConfigurationError):
        Prefix({})
    with pytest.raises(LayerConfigurationError) as e:
        Left({'+': 1})
    assert 'not callable' in str(e.value)
    with pytest.raises(LayerConfigurationError):
        infix([], [Left({'+': operator.add})])
    with pytest.raises(LayerConfigurationError):
        infix(integer(10), ['left'])
    with pytest.raises(LayerConfigurationError) as e:
        ExpressionBuilder().layer('infix', {'+': operator.add})
    assert 'Unknown fixity' in str(e.value)


def test_layer_invariant():
    layer = Left({'+': operator.add})
    assert layer.construct('+') is operator.add
    with pytest.raises(LayerInvariantError):
        layer.construct('-')


def test_right_layer_parses_operands_once():
    parsed = []

    def number(n):
        parsed.append(n)
        return n

    expr = forward()
    atoms = [integer(10).map(number),
             expr.between(character('('), character(')'))]
    expr.define(infix(atoms, [
        Prefix({'-': operator.neg}),
        Right({'^': operator.pow}),
        Left({'*': operator.mul}),
        Left({'+': operator.add})]))
    parser = expr.complete()

    depth = 30
    assert parser.parse('(' * depth + '2' + ')' * depth) == 2
    assert parsed == [2]

    del parsed[:]
    assert parser.parse('2^(3^(1))^2') == 512
    assert parsed == [2, 3, 1, 2]
