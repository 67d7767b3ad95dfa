"""
Run:
$
$  pytest tests/test_templates.py

"""

import pytest

from htmeta import Runtime, ExternalTag, HText, node
from htmeta.errors import UndefinedVariableEx, UndefinedTemplateEx, ArityEx, RecursionLimitEx, TemplateEx, VoidTagEx

rt = Runtime()

def render(src, **config):
    config.setdefault('pretty', False)
    return rt.render(src, **config)


#####################################################################################################################################################
#####
#####  TESTS
#####

def test_001_definition_and_call():
    src = """
        @template card title="Untitled" {
            div class=card {
                h2 "$title"
            }
        }
        @card title="One"
        @card title="Two"
    """
    assert render(src) == '<div class="card"><h2>One</h2></div><div class="card"><h2>Two</h2></div>'
    assert render('@template name=btn label="" { button "$label" }; @btn label=OK') == '<button>OK</button>'
    assert render('@template item { li "$0 and $1" }; @item a b') == '<li>a and b</li>'
    assert render('$n "row"; @template "$n" { tr }; @row') == '<tr></tr>'

    # a definition outputs nothing, a template with an empty body outputs nothing, too
    assert render('@template empty {}; @empty; @empty') == ''

def test_002_pretty_expansion():
    src = """
        @template item {
            li "$0"
        }
        ul {
            @item "a"
            @item "b"
        }
    """
    assert rt.render(src) == '<ul>\n    <li>a</li>\n    <li>b</li>\n</ul>\n'

def test_003_closure():
    src = """
        $color "red"
        @template box { div class="$color" }
        section {
            $color "blue"
            @box
        }
    """
    assert render(src) == '<section><div class="red"></div></section>'

    # the defining scope is captured by reference: variables defined later, before the call, are visible
    assert render('@template box { p "$color" }; $color "green"; @box') == '<p>green</p>'

    # a template defined in a nested block is not visible outside of it
    src = """
        div {
            $v "inner"
            @template local { i "$v" }
        }
        @local
    """
    with pytest.raises(UndefinedTemplateEx, match = "undefined template '@local'"):
        render(src)

def test_004_call_site_values():
    src = """
        $title "outer"
        @template t { p "$title" }
        @t title="inner"
        @t
    """
    assert render(src, apply_props = False) == '<p>inner</p><p>outer</p>'

    # values of a call are interpolated in the call-site scope
    src = """
        @template t { p "$msg" }
        div {
            $who "Bob"
            @t msg="Hi $who"
        }
    """
    assert render(src, apply_props = False) == '<div><p>Hi Bob</p></div>'

    # ... but the body can't see variables of the call site
    with pytest.raises(UndefinedVariableEx, match = r"'\$who'"):
        render('@template t { p "$who" }; div { $who "Bob"; @t }')

def test_005_defaults():
    src = """
        $size "small"
        @template btn label="Click" cls="btn-$size" {
            button class="$cls" "$label"
        }
        @btn
        @btn label="Go"
        @btn cls="big"
    """
    out = '<button class="btn-small">Click</button>' \
          '<button class="btn-small">Go</button>' \
          '<button class="big">Click</button>'
    assert render(src) == out

def test_006_isolation():
    # variables defined inside a template body don't leak out of the expansion
    with pytest.raises(UndefinedVariableEx):
        render('@template t { $x "in"; p "$x" }; @t; p "$x"')

    # every expansion gets a fresh scope and a fresh copy of the body
    src = """
        @template t {
            $n "$0"
            p "$n"
        }
        @t 1
        @t 2
    """
    assert render(src) == '<p>1</p><p>2</p>'

    # redefinition affects later calls only
    src = """
        @template t { p "a" }
        @t
        @template t { p "b" }
        @t
    """
    assert render(src) == '<p>a</p><p>b</p>'

def test_007_separate_namespaces():
    assert render('$card "text"; @template card { p "$card" }; @card') == '<p>text</p>'

def test_008_errors():
    with pytest.raises(UndefinedTemplateEx, match = "undefined template '@nope'") as ex_info:
        render('div { @nope }')
    assert ex_info.value.path == ['div', '@nope']

    with pytest.raises(ArityEx):
        render('@template { p }')
    with pytest.raises(ArityEx):
        render('@template a b { p }')
    with pytest.raises(ArityEx):
        render('@template a name=b { p }')
    with pytest.raises(TemplateEx, match = 'has no body'):
        render('@template a')
    with pytest.raises(UndefinedTemplateEx):
        render('@b; @template b { p }')                 # forward references are not allowed

def test_009_recursion():
    src = """
        @template a { div { @b } }
        @template b { @a }
        @a
    """
    with pytest.raises(RecursionLimitEx, match = "'a' invokes itself") as ex_info:
        render(src)
    assert ex_info.value.template_name == 'a'
    assert ex_info.value.path == ['@a', 'div', '@b', '@a']

    with pytest.raises(RecursionError):
        render('@template r { @r }; @r')

    src = """
        @template t1 { @t2 }
        @template t2 { @t3 }
        @template t3 { p "deep" }
        @t1
    """
    assert render(src) == '<p>deep</p>'
    with pytest.raises(RecursionLimitEx, match = 'deeper than 2'):
        render(src, max_depth = 2)

def test_010_children_slot():
    src = """
        @template card {
            div class=card {
                @children class=item
            }
        }
        @card {
            p "one"
            p "two" class=special
            - "text"
        }
    """
    assert render(src) == '<div class="card"><p class="item">one</p><p class="special">two</p>text</div>'

    # children are evaluated in the call-site scope
    src = """
        $who "caller"
        @template wrap {
            $who "template"
            section { @children; p "$who" }
        }
        @wrap { p "$who" }
    """
    assert render(src) == '<section><p>caller</p><p>template</p></section>'

    # slots can be nested, and a template can be called inside its own children block
    src = """
        @template box { div { @children } }
        @box { @box { p "x" } }
    """
    assert render(src) == '<div><div><p>x</p></div></div>'

    # @children inside a template called with no children block outputs nothing
    assert render('@template t { div { @children } }; @t') == '<div></div>'

    # @children passes the children of the innermost call, which may contain @children of an outer template
    src = """
        @template inner { span { @children } }
        @template outer { @inner { @children } }
        @outer { b "x" }
    """
    assert render(src) == '<span><b>x</b></span>'

def test_011_children_slot_errors():
    with pytest.raises(TemplateEx, match = 'no @children'):
        render('@template t { p }; @t { b }')
    with pytest.raises(TemplateEx, match = 'outside of a template'):
        render('div { @children }')
    with pytest.raises(ArityEx):
        render('@template t { @children "x" }; @t {}')

def test_012_positional_alias():
    src = """
        @template heading { h1 "$text" }
        @heading "Hello"
    """
    with pytest.raises(UndefinedVariableEx):
        render(src)
    assert render(src, positional_alias = 'text') == '<h1>Hello</h1>'
    assert render('@template h { h1 "$text" }; @h "a" text="b"', positional_alias = 'text', apply_props = False) == '<h1>b</h1>'
    assert render('@template h { h1 "$0" }; @h "a"', positional_alias = 'text') == '<h1>a</h1>'

def test_013_external_tags():
    class Emph(ExternalTag):
        def expand(self, __body__, level = '1'):
            return f'<em data-level="{level}">' + __body__.render(0) + '</em>'

    class Shout(ExternalTag):
        def expand(self, __body__, word):
            return HText(word.upper() + '!')

    rt2 = Runtime({'@em': Emph, 'shout': Shout()}, site = 'example.com')
    assert rt2.render('@em { - "a & b" }', pretty = False) == '<em data-level="1">a &amp; b</em>'
    assert rt2.render('@em level=2', pretty = False) == '<em data-level="2"></em>'
    assert rt2.render('p { @shout "$site" }', pretty = False) == '<p>EXAMPLE.COM!</p>'

    # external tags can be shadowed by templates
    assert rt2.render('@template shout { b "$0" }; @shout hey', pretty = False) == '<b>hey</b>'

    class Bad(ExternalTag):
        def expand(self, __body__):
            return 123

    with pytest.raises(TypeError):
        Runtime({'bad': Bad}).render('@bad')

def test_014_lorem():
    assert render('p { @lorem 3 }') == '<p>Lorem ipsum dolor</p>'
    assert render('@lorem') == 'Lorem'
    assert len(render('@lorem 100').split()) == 100

    with pytest.raises(VoidTagEx):
        render('@lorem 2 { p }')
    with pytest.raises(TemplateEx, match = 'integer'):
        render('@lorem many')

    # arguments that don't fit the signature of expand() are reported as ArityEx, not as a bare TypeError
    with pytest.raises(ArityEx, match = "bad arguments for '@lorem'") as ex_info:
        render('@lorem 3 4')
    assert ex_info.value.path == ['@lorem']
    with pytest.raises(ArityEx, match = "unexpected keyword argument 'extra'") as ex_info:
        render('p { @lorem 3 extra=1 }')
    assert ex_info.value.path == ['p', '@lorem']

def test_015_recursion_error_converted():
    class Deep(ExternalTag):
        def expand(self, __body__):
            raise RecursionError("maximum recursion depth exceeded")

    with pytest.raises(RecursionLimitEx):
        Runtime({'deep': Deep}).render('div { @deep }')

    # very deep nesting of plain elements is reported as an HError, too
    tree = node('p')
    for _ in range(5000):
        tree = node('div', children = [tree])
    with pytest.raises(RecursionLimitEx, match = 'maximum nesting depth exceeded'):
        rt.compile([tree])

def test_016_props():
    src = """
        @template btn label="OK" {
            button type=button "$label"
        }
        @btn class=primary label="Save" disabled=true hidden=false
        @btn type=submit
    """
    out = '<button type="button" class="primary" disabled>Save</button>' \
          '<button type="button">OK</button>'
    assert render(src) == out

    # properties that are not parameters are collected in $props
    src = """
        @template link href="#" {
            - "[$props]"
            a href="$href"
        }
        @link href="/x" title="X" target=_blank
        @link
    """
    assert render(src) == '[title="X" target="_blank"]<a href="/x"></a>[]<a href="#"></a>'
    assert render('@template t x="1" { p "$props" }; @t x="2" y=true z=null') == '<p y>y</p>'

    # a body of two or more nodes, or one that is not an element, gets no attributes
    assert render('@template t { - "a" }; @t id=x') == 'a'
    assert render('@template t { p; p }; @t id=x') == '<p></p><p></p>'
    assert render('@template t { p }; @t id=x', apply_props = False) == '<p></p>'

    # attributes pass through nested single-element expansions
    src = """
        @template inner { span }
        @template outer { @inner }
        @outer id=x
    """
    assert render(src) == '<span id="x"></span>'
