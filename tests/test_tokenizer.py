import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from py2js.errors import LexicalError
from py2js.tokenizer import Token, tokenize


def kinds(source):
    return [tok.type for tok in tokenize(source)]


def values(source):
    return [(tok.type, tok.value) for tok in tokenize(source)]


def test_empty():
    assert values("") == [('EOF', '')]


def test_simple_line():
    assert values("x = 1 + 2.5\n") == [
        ('NAME', 'x'),
        ('OP', '='),
        ('NUMBER', 1),
        ('OP', '+'),
        ('NUMBER', 2.5),
        ('NEWLINE', '\n'),
        ('EOF', ''),
    ]


def test_keywords_and_names():
    toks = tokenize("def define(None_, True):")
    assert [(t.type, t.value) for t in toks[:6]] == [
        ('KEYWORD', 'def'),
        ('NAME', 'define'),
        ('OP', '('),
        ('NAME', 'None_'),
        ('OP', ','),
        ('KEYWORD', 'True'),
    ]


def test_line_and_column():
    toks = tokenize("a = 1\nbb  = 22")
    bb = toks[4]
    assert bb == Token('NAME', 'bb', 2, 1)
    assert toks[6] == Token('NUMBER', 22, 2, 7)


def test_block_markers():
    source = (
        "if a:\n"
        "    b = 1\n"
        "c = 2\n"
    )
    assert kinds(source) == [
        'KEYWORD', 'NAME', 'OP', 'NEWLINE',
        'INDENT', 'NAME', 'OP', 'NUMBER', 'NEWLINE',
        'DEDENT', 'NAME', 'OP', 'NUMBER', 'NEWLINE',
        'EOF',
    ]


def test_dedent_several_levels_at_once():
    source = (
        "while a:\n"
        "  if b:\n"
        "      c = 1\n"
        "d = 2\n"
    )
    toks = kinds(source)
    assert toks.count('INDENT') == 2
    i = toks.index('DEDENT')
    assert toks[i:i + 3] == ['DEDENT', 'DEDENT', 'NAME']


def test_dedents_closed_at_end_of_input():
    source = "def f():\n    if x:\n        return 1"
    toks = kinds(source)
    assert toks[-3:] == ['DEDENT', 'DEDENT', 'EOF']


def test_blank_and_comment_lines_are_skipped():
    source = (
        "# leading comment\n"
        "\n"
        "if a:\n"
        "\n"
        "        # comment at an odd indent\n"
        "    b = 1  # trailing comment\n"
        "   \n"
        "c = 2\n"
    )
    assert kinds(source) == [
        'KEYWORD', 'NAME', 'OP', 'NEWLINE',
        'INDENT', 'NAME', 'OP', 'NUMBER', 'NEWLINE',
        'DEDENT', 'NAME', 'OP', 'NUMBER', 'NEWLINE',
        'EOF',
    ]


def test_crlf_line_endings():
    assert kinds("a = 1\r\nb = 2\r\n") == kinds("a = 1\nb = 2\n")


def test_tab_counts_to_next_multiple_of_eight():
    source = "if a:\n\tb = 1\n        c = 2\n"
    toks = kinds(source)
    assert toks.count('INDENT') == 1
    assert toks.count('DEDENT') == 1


def test_inconsistent_dedent_fails():
    source = (
        "if a:\n"
        "    b = 1\n"
        "  c = 2\n"
    )
    with pytest.raises(LexicalError) as exc:
        tokenize(source)
    assert exc.value.line == 3
    assert "unindent does not match" in exc.value.message


def test_dedent_between_levels_fails():
    source = (
        "if a:\n"
        "    if b:\n"
        "        c = 1\n"
        "      d = 2\n"
    )
    with pytest.raises(LexicalError) as exc:
        tokenize(source)
    assert exc.value.line == 4


@pytest.mark.parametrize("source,expected", [
    ("0", 0),
    ("42", 42),
    ("3.25", 3.25),
    ("1.", 1.0),
    (".5", 0.5),
    ("1e3", 1000.0),
    ("2.5E-2", 0.025),
])
def test_numbers(source, expected):
    tok = tokenize(source)[0]
    assert tok.type == 'NUMBER'
    assert tok.value == expected
    assert type(tok.value) is type(expected)


def test_number_followed_by_letter_fails():
    with pytest.raises(LexicalError) as exc:
        tokenize("x = 3abc")
    assert exc.value.column == 5


def test_strings():
    toks = tokenize(r"""print('it\'s', "tab\there", 'back\\slash', 'keep\q')""")
    strings = [tok.value for tok in toks if tok.type == 'STRING']
    assert strings == ["it's", "tab\there", "back\\slash", "keep\\q"]


def test_unterminated_string_fails():
    with pytest.raises(LexicalError) as exc:
        tokenize("x = 1\ny = 'abc\n")
    assert exc.value.line == 2
    assert exc.value.column == 5


def test_hash_inside_string_is_not_a_comment():
    toks = tokenize("x = '#no comment'")
    assert toks[2] == Token('STRING', '#no comment', 1, 5)


def test_longest_operator_wins():
    ops = [tok.value for tok in tokenize("a **= b // c <= d != e == f ** g") if tok.type == 'OP']
    assert ops == ['**=', '//', '<=', '!=', '==', '**']


@pytest.mark.parametrize("source,column", [
    ("x = 1 @ 2", 7),
    ("x = !y", 5),
    ("x = 1; y = 2", 6),
    ("x = [1]", 5),
])
def test_unknown_character_fails(source, column):
    with pytest.raises(LexicalError) as exc:
        tokenize(source)
    assert exc.value.line == 1
    assert exc.value.column == column


def test_error_message_carries_position():
    with pytest.raises(LexicalError) as exc:
        tokenize("a = 1\nb = $")
    assert str(exc.value) == "LexicalError at line 2, column 5: unexpected character '$'"


# ----------------------------------------------------------------------
# Properties
# ----------------------------------------------------------------------

@settings(deadline=None)
@given(st.lists(st.integers(min_value=0, max_value=12), max_size=30))
def test_blocks_are_always_balanced(widths):
    source = '\n'.join(' ' * w + 'x' for w in widths)
    try:
        toks = kinds(source)
    except LexicalError:
        return
    assert toks.count('INDENT') == toks.count('DEDENT')
    assert toks[-1] == 'EOF'


@settings(deadline=None)
@given(st.lists(st.integers(min_value=-3, max_value=1), max_size=30))
def test_well_formed_nesting_never_fails(steps):
    # every line is at most one level deeper than the previous one, so each
    # dedent lands on a width that is on the stack
    depth = 0
    lines = []
    for step in steps:
        depth = max(0, depth + step)
        lines.append('    ' * depth + 'x')
    toks = kinds('\n'.join(lines))
    assert toks.count('INDENT') == toks.count('DEDENT')
    depth = 0
    for kind in toks:
        depth += {'INDENT': 1, 'DEDENT': -1}.get(kind, 0)
        assert depth >= 0
    assert depth == 0


@settings(deadline=None)
@given(st.text(alphabet=' \n\tab=+1#:', max_size=60))
def test_tokenize_is_deterministic(source):
    try:
        first = tokenize(source)
    except LexicalError as e:
        with pytest.raises(LexicalError) as again:
            tokenize(source)
        assert str(again.value) == str(e)
        return
    assert tokenize(source) == first
