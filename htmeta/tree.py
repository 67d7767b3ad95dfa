"""
Generic tree: the input of compilation, as produced by the KDL reader (htmeta.parser) or built in code.

A document is a sequence of nodes, each node having a name, an ordered list of positional arguments,
a mapping of named properties, and an optional list of child nodes. Argument and property values
are plain Python objects: str, int, float, bool or None, as written in the source.
"""


########################################################################################################################################################
#####
#####  NODE
#####

class Node:
    """
    A single node of the generic tree. Nodes are treated as immutable once built; copy() returns
    a deep, independent duplicate, which is how template bodies are instantiated on every expansion.
    """
    name     = None         # node name: a tag name, or one of special names: $var, @template, @name, -, _ ...
    args     = ()           # tuple of positional values
    props    = None         # dict of named values; insertion order is preserved but carries no meaning
    children = None         # tuple of child Nodes; None if the node has no children block at all (differs from an empty block)
    line     = None         # line number in the source text, for error messages; None for nodes built in code

    def __init__(self, name, args = (), props = None, children = None, line = None):
        self.name     = name
        self.args     = tuple(args)
        self.props    = dict(props or {})
        self.children = tuple(children) if children is not None else None
        self.line     = line

    def copy(self):
        children = [child.copy() for child in self.children] if self.children is not None else None
        return Node(self.name, self.args, self.props, children, self.line)

    def __eq__(self, other):
        if not isinstance(other, Node): return NotImplemented
        return (self.name, self.args, self.props, self.children) == (other.name, other.args, other.props, other.children)

    __hash__ = None

    def __repr__(self):
        parts = [repr(self.name)] + [repr(arg) for arg in self.args] + [f"{key}={value!r}" for key, value in self.props.items()]
        if self.children is not None:
            parts.append('{%s}' % '; '.join(map(repr, self.children)))
        return 'Node(%s)' % ' '.join(parts)


def node(name, *args, children = None, **props):
    """Shorthand for building trees in code: node('p', 'text', id = 'x') is equivalent to KDL `p "text" id="x"`."""
    return Node(name, args, props, children)
