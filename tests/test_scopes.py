import pytest

from htmeta.errors import UndefinedVariableEx, UndefinedTemplateEx
from htmeta.structs import Stack, ScopeStore, State


#####################################################################################################################################################
#####
#####  TESTS
#####

def test_001_stack():
    stack = Stack()
    assert stack.top() is None
    assert stack.push('a') == 0
    assert stack.push('b') == 1
    assert stack.push('c') == 2
    assert stack.top() == 'c'
    assert stack.size == 3
    stack.size = 1
    assert stack == ['a']

def test_002_lookup_chain():
    store = ScopeStore()
    root  = store.root
    a = store.create(root)
    b = store.create(a)
    c = store.create(root)

    store.define_var(root, 'x', 'root')
    store.define_var(a, 'x', 'a')
    store.define_var(root, 'y', 'y-root')

    assert store.lookup_var(b, 'x') == 'a'              # nearest binding wins
    assert store.lookup_var(b, 'y') == 'y-root'
    assert store.lookup_var(c, 'x') == 'root'           # sibling scopes don't see each other
    assert store.lookup_var(root, 'x') == 'root'        # shadowing doesn't destroy outer bindings

    with pytest.raises(UndefinedVariableEx, match = r"undefined variable '\$z'") as ex_info:
        store.lookup_var(b, 'z')
    assert ex_info.value.token == 'z'

def test_003_separate_tables():
    store = ScopeStore()
    store.define_var(store.root, 'card', 'text')
    with pytest.raises(UndefinedTemplateEx, match = "undefined template '@card'"):
        store.lookup_tag(store.root, 'card')

    store.define_tag(store.root, 'card', 'TAG')
    assert store.lookup_tag(store.create(store.root), 'card') == 'TAG'
    assert store.lookup_var(store.root, 'card') == 'text'

def test_004_state():
    state = State({})
    assert state.scope == state.store.root

    state.define_var('x', '1')
    outer = state.enter()
    assert outer == state.store.root and state.scope != outer
    assert state.lookup_var('x') == '1'
    state.define_var('x', '2')
    assert state.lookup_var('x') == '2'

    state.scope = outer
    assert state.lookup_var('x') == '1'

    # a scope can be entered below any existing scope, not only the current one
    inner = state.store.create(outer)
    state.define_tag('t', 'T')
    previous = state.enter(inner)
    assert previous == outer
    assert state.store[state.scope].parent == inner
    assert state.lookup_tag('t') == 'T'
