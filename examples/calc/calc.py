import operator

from parlang import ExpressionBuilder, Token, TokenSet, float_literal, \
    one_of, seq, standard_identifier

INPUT = """
    a = 5
    b = 10

    a + 56.4 / 3 * 5 - b + 8 * 3
    """


def op(c):
    return Token('Op', c)


def lexer():
    calc_token = TokenSet('CalcToken')
    calc_token.variant('Number', float_literal(), match='number')
    calc_token.variant('Name', standard_identifier(), match='name')
    calc_token.variant('Op', one_of('+-*/=()'), match_arg='op')
    ws = one_of(' \t\n').repeat()
    return calc_token, calc_token.parser().between(ws, ws).repeat().complete()


def calc_parser(calc_token, debug=False):
    """
    Variables are assigned while the assignments are parsed so the expression
    can refer to them.
    """
    variables = {}

    def assign(assignment):
        name, number = assignment
        variables[name] = number

    assignment = seq(calc_token.name().skip(calc_token.op('=')),
                     calc_token.number()).map(assign)

    builder = ExpressionBuilder(debug=debug)
    builder.atom(calc_token.number())
    builder.atom(calc_token.name().map(lambda name: variables[name]))
    builder.atom(builder.expression.between(calc_token.op('('),
                                            calc_token.op(')')))
    builder.layer('left', {op('*'): operator.mul, op('/'): operator.truediv})
    builder.layer('left', {op('+'): operator.add, op('-'): operator.sub})
    return assignment.repeat().prefix(builder.build()).complete()


def main(debug=False):
    calc_token, calc_lexer = lexer()
    tokens = calc_lexer.parse(INPUT)
    res = calc_parser(calc_token, debug=debug).parse(tokens)

    assert abs(res - (5. + 56.4 / 3 * 5 - 10 + 8 * 3)) < 1e-9
    print("Input:\n", INPUT)
    print("Tokens: ", tokens)
    print("Result = ", res)


if __name__ == "__main__":
    main(debug=True)
