"""
Run:
$
$  pytest tests/test_parser.py

"""

import math, pytest

from htmeta.errors import SyntaxErrorEx
from htmeta.parser import parse, unescape
from htmeta.tree import node


#####################################################################################################################################################
#####
#####  TESTS
#####

def test_001_basic():
    assert parse("") == ()
    assert parse("  \n\n  ") == ()
    assert parse("p") == (node('p'),)
    assert parse('p "Hello" class=intro id="x"') == (node('p', 'Hello', **{'class': 'intro', 'id': 'x'}),)
    assert parse("a; b; c") == (node('a'), node('b'), node('c'))

def test_002_children():
    src = """
        html {
            body {
                p "a"; p "b"
            }
        }
    """
    out = node('html', children = [node('body', children = [node('p', 'a'), node('p', 'b')])])
    assert parse(src) == (out,)

    assert parse("div {}")[0].children == ()
    assert parse("div")[0].children is None
    assert parse("div{p}")[0].children == (node('p'),)

def test_003_special_names():
    src = """
        !DOCTYPE html
        $title "Home"
        @template card { @children }
        - "text"
        _ "<b>raw</b>"
    """
    names = [n.name for n in parse(src)]
    assert names == ['!DOCTYPE', '$title', '@template', '-', '_']

def test_004_strings():
    assert parse(r'p "a\tb\n\"q\" \\ \/ \s\u{41}"')[0].args == ('a\tb\n"q" \\ / \u0020A',)
    assert parse(r'p r"C:\path" #"say "hi""# r##"a"#b"##')[0].args == ('C:\\path', 'say "hi"', 'a"#b')
    assert parse('"quoted name" x=1')[0].name == 'quoted name'
    assert parse('p "multi\\\n      line"')[0].args == ('multiline',)

def test_005_numbers_keywords():
    args = parse("n 1 -2 +3 3.5 1e3 0xff 0o17 0b101 1_000")[0].args
    assert args == (1, -2, 3, 3.5, 1000.0, 255, 15, 5, 1000)
    assert isinstance(args[4], float) and isinstance(args[5], int)

    args = parse("k true false null #true #false #null #inf #-inf")[0].args
    assert args == (True, False, None, True, False, None, float('inf'), float('-inf'))
    assert math.isnan(parse("k #nan")[0].args[0])

    # bare identifiers are strings, unless they are keywords
    assert parse("input type=checkbox checked=true value=truthy")[0].props == {'type': 'checkbox', 'checked': True, 'value': 'truthy'}

def test_006_comments():
    src = """
        // line comment
        /- p "gone"
        div /* inline */ "x" /- "y" {
            a  // trailing comment
            /* multi
               line /* nested */ comment */
        } /- {
            b
        }
        /-p {
            c
        }
    """
    assert parse(src) == (node('div', 'x', children = [node('a')]),)

def test_007_props():
    assert parse("a x=1 x=2")[0].props == {'x': 2}
    assert parse("a x = 1")[0].props == {'x': 1}
    assert parse('a "x"=1 y=(u8)2 (i32)3')[0].props == {'x': 1, 'y': 2}
    assert parse("a 1 b=2 3")[0].args == (1, 3)

def test_008_line_continuation():
    assert parse('p "a" \\\n    "b"')[0].args == ('a', 'b')
    assert parse('p "a" \\ // comment\n    "b"')[0].args == ('a', 'b')

def test_009_line_numbers():
    nodes = parse("a\nb\n\n  c {\n    d\n  }")
    assert [n.line for n in nodes] == [1, 2, 4]
    assert nodes[2].children[0].line == 5

def test_010_errors():
    with pytest.raises(SyntaxErrorEx, match = 'line 1'):
        parse("p {")
    with pytest.raises(SyntaxErrorEx, match = 'line 2'):
        parse('a\np "unterminated')
    with pytest.raises(SyntaxErrorEx, match = 'more than one children block'):
        parse("a {} {}")
    with pytest.raises(SyntaxErrorEx, match = 'invalid escape'):
        parse(r'p "\q"')
    with pytest.raises(SyntaxErrorEx):
        parse("a }")
    with pytest.raises(SyntaxError):
        parse("a { b } c")

def test_011_unescape():
    assert unescape(r'a\nb') == 'a\nb'
    assert unescape('a\\   \n   b') == 'ab'
    assert unescape(r'\u{1F600}') == '\U0001F600'
    with pytest.raises(ValueError):
        unescape(r'\x')
