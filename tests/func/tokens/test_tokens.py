"""
A JSON parser split into a lexer producing tokens and a parser of the token
stream.
"""
import pytest  # noqa
from parlang import ParseError, GrammarError, Token, TokenSet, character, \
    choice, forward, float_literal, integer_fixed, none_of, one_of, seq, \
    signed, standard_identifier, tag


def string_literal():
    escape = character('\\').prefix(choice(
        one_of('"\\/'),
        character('n').map(lambda _: '\n'),
        character('t').map(lambda _: '\t'),
        character('u').prefix(integer_fixed(4, 16).map(chr))))
    return choice(escape, none_of('"\\')).repeat().collect(''.join) \
        .between(character('"'), character('"'))


def json_tokens():
    json_token = TokenSet('JsonToken')
    json_token.variant('Null', tag('null'), field=False, match='null')
    json_token.variant('Bool', tag('true').map(lambda _: True)
                       .or_(tag('false').map(lambda _: False)),
                       match='boolean')
    json_token.variant('Number', signed(float_literal), match='number')
    json_token.variant('String', string_literal(), match='string')
    json_token.variant('Punct', one_of('{}[],:'), match_arg='punct')
    return json_token


def lexer(json_token):
    ws = one_of(' \t\n').repeat()
    return json_token.parser().between(ws, ws).repeat().complete()


def json_value(json_token):
    punct = json_token.punct
    value = forward()
    member = seq(json_token.string().skip(punct(':')), value)
    obj = member.sep_by(punct(',')).collect(dict) \
        .between(punct('{'), punct('}'))
    arr = value.sep_by(punct(',')).between(punct('['), punct(']'))
    return value.define(choice(
        json_token.null().map(lambda _: None),
        json_token.boolean(),
        json_token.number(),
        json_token.string(),
        obj,
        arr))


def test_lexer():
    json_token = json_tokens()
    tokens = lexer(json_token).parse('{"a": [1, -2.5e1, null]}')
    assert tokens == [
        Token('Punct', '{'), Token('String', 'a'), Token('Punct', ':'),
        Token('Punct', '['), Token('Number', 1.0), Token('Punct', ','),
        Token('Number', -25.0), Token('Punct', ','), Token('Null'),
        Token('Punct', ']'), Token('Punct', '}')]


def test_lexer_escapes():
    tokens = lexer(json_tokens()).parse(r'"xA\n\"\\"')
    assert tokens == [Token('String', 'xA\n"\\')]

    with pytest.raises(ParseError):
        lexer(json_tokens()).parse(r'"\u00g1"')


def test_json():
    json_token = json_tokens()
    tokens = lexer(json_token).parse(
        '{"a": [1, 2.5, null], "b": {"c": "x\\u0041"}, "d": true}')
    result = json_value(json_token).complete().parse(tokens)
    assert result == {'a': [1.0, 2.5, None], 'b': {'c': 'xA'}, 'd': True}


def test_json_errors():
    json_token = json_tokens()
    parser = json_value(json_token).complete()
    tokens = lexer(json_token).parse('[1, 2')
    with pytest.raises(ParseError) as e:
        parser.parse(tokens)
    assert e.value.location.start_position == 4
    assert e.value.found is None


def test_matchers():
    json_token = json_tokens()
    assert json_token.number().parse([Token('Number', 3.0)]) == 3.0
    assert json_token.null().parse([Token('Null')]) == ()
    assert json_token.punct('{').parse([Token('Punct', '{')]) == '{'

    with pytest.raises(ParseError) as e:
        json_token.number().parse([Token('String', 'x')])
    assert e.value.expected == {'Number'}

    with pytest.raises(ParseError) as e:
        json_token.punct('{').parse([Token('Punct', '}')])
    assert e.value.expected == {'punct'}

    with pytest.raises(AttributeError):
        json_token.comma


def test_single_variant():
    tokens = TokenSet('Tokens')
    tokens.variant('Ident', standard_identifier(), single='ident')
    tokens.variant('Semicolon', character(';'), field=False)
    assert tokens.ident().parse('foo') == Token('Ident', 'foo')
    assert tokens.parser().repeat().parse('a;b') == [
        Token('Ident', 'a'), Token('Semicolon'), Token('Ident', 'b')]


def test_parser_is_rebuilt_on_new_variant():
    tokens = TokenSet('Tokens')
    tokens.variant('A', tag('a'))
    parser = tokens.parser()
    assert tokens.parser() is parser
    tokens.variant('B', tag('b'))
    assert tokens.parser() is not parser
    assert tokens.parser().parse('b') == Token('B', 'b')


def test_token_set_errors():
    tokens = TokenSet('Tokens')
    with pytest.raises(GrammarError):
        tokens.parser()

    tokens.variant('A', tag('a'), match='a')
    with pytest.raises(GrammarError):
        tokens.variant('A', tag('b'))
    with pytest.raises(GrammarError):
        tokens.variant('B', tag('b'), match='a')
    with pytest.raises(GrammarError):
        tokens.variant('C', tag('c'), field=False, match_arg='c')


def test_token_repr():
    assert repr(Token('Null')) == 'Null'
    assert repr(Token('Number', 1.5)) == 'Number(1.5)'
    assert repr(json_tokens()) == \
        'TokenSet(JsonToken: Null, Bool, Number, String, Punct)'
