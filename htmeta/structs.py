"""
Data structures for evaluation of htmeta documents: the arena of scopes and the evaluation state.
"""

from htmeta.errors import UndefinedVariableEx, UndefinedTemplateEx


########################################################################################################################################################

class Stack(list):
    """
    Stack of objects, implemented on top of a standard <list>. Additionally, push() returns the position
    of the pushed element, which stays valid for as long as the element is not popped.
    """

    @property
    def size(self):
        return len(self)
    @size.setter
    def size(self, _size_):
        del self[_size_:]

    def push(self, value):
        """Append `value` to the stack and return its index in the list."""
        self.append(value)
        return len(self) - 1

    def top(self):
        return self[-1] if self else None


########################################################################################################################################################
#####
#####  SCOPES
#####

class Scope:
    """Variable & tag bindings of a single block of the document, with a link to the enclosing scope."""

    parent = None       # index of the parent Scope in ScopeStore, or None for the root scope
    vars   = None       # {name: string value} of variables defined directly in this scope
    tags   = None       # {name: Tag} of templates (and external tags) defined directly in this scope

    def __init__(self, parent = None):
        self.parent = parent
        self.vars = {}
        self.tags = {}

    def __repr__(self):
        return f"Scope(parent={self.parent}, vars={self.vars}, tags={list(self.tags)})"


class ScopeStore(Stack):
    """
    Arena of all scopes created during a single compilation. Scopes are addressed by their index
    and are never removed before the compilation ends: a template keeps the index of its defining scope
    and may be expanded long after the block that created this scope has been evaluated.
    Lookups walk the parent chain outwards; the first binding found wins, so a binding in a nearer scope
    shadows the same name in outer scopes without destroying it.
    """

    def __init__(self):
        super(ScopeStore, self).__init__()
        self.root = self.create()

    def create(self, parent = None):
        """Create a new scope as a child of `parent` (an index) and return the new scope's index."""
        return self.push(Scope(parent))

    def define_var(self, scope, name, value):
        self[scope].vars[name] = value

    def define_tag(self, scope, name, tag):
        self[scope].tags[name] = tag

    def chain(self, scope):
        """Generate all scopes visible from `scope`, starting at `scope` itself and moving outwards."""
        while scope is not None:
            current = self[scope]
            yield current
            scope = current.parent

    def lookup_var(self, scope, name, node = None):
        for current in self.chain(scope):
            if name in current.vars: return current.vars[name]
        raise UndefinedVariableEx(name, node)

    def lookup_tag(self, scope, name, node = None):
        for current in self.chain(scope):
            if name in current.tags: return current.tags[name]
        raise UndefinedTemplateEx(name, node)


########################################################################################################################################################
#####
#####  STATE
#####

class Slot:
    """Children block of a template call, waiting to be inserted in place of @children inside the template's body."""

    children = None     # tuple of Nodes passed by the caller; None if the call had no children block
    scope    = None     # index of the call-site scope where the children shall be evaluated

    def __init__(self, children, scope):
        self.children = children
        self.scope    = scope


class State:
    """
    Mutable state of a single evaluation run, passed explicitly to every evaluator method.
    Nothing here is shared between runs.
    """
    config = None       # dict of configuration options, see Runtime.config_default
    store  = None       # ScopeStore of all scopes created so far
    scope  = None       # index of the current scope
    path   = None       # Stack of node names from the document root down to the node being evaluated
    active = None       # Stack of native Templates currently being expanded, innermost last
    slots  = None       # Stack of Slots, one per template expansion in progress

    def __init__(self, config, store = None):
        self.config = config
        self.store  = store if store is not None else ScopeStore()
        self.scope  = self.store.root
        self.path   = Stack()
        self.active = Stack()
        self.slots  = Stack()

    def lookup_var(self, name, node = None):
        return self.store.lookup_var(self.scope, name, node)

    def lookup_tag(self, name, node = None):
        return self.store.lookup_tag(self.scope, name, node)

    def define_var(self, name, value):
        self.store.define_var(self.scope, name, value)

    def define_tag(self, name, tag):
        self.store.define_tag(self.scope, name, tag)

    def enter(self, parent = None):
        """Create a new scope whose parent is `parent` (the current scope by default), make it current and return the previous one."""
        previous = self.scope
        self.scope = self.store.create(previous if parent is None else parent)
        return previous
