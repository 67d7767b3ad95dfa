"""
Output tree (DOM) produced by the evaluator and consumed by the serializer.

Document processing phases:
- parse     -- KDL text to the generic tree of Nodes (htmeta.parser); can be skipped if a tree is built in code
- translate -- generic tree to DOM; variables substituted, templates expanded, text separated from structure
- render    -- DOM to markup text, in pretty or minified layout

Node types:
- HElement  -- markup element with a tag, attributes and a body (Sequence of child nodes)
- HText     -- plain text, escaped during rendering
- HRaw      -- markup text, emitted verbatim

A text node is either *inline* or *outline*. Inline text is the element's own content, given as a positional
argument or a `text`/`content` property in source, and is printed on the same line as the element's opening tag.
Outline text comes from child text nodes and is printed as a separate, indented line.
"""

from types import GeneratorType
from xml.sax.saxutils import escape


########################################################################################################################################################
#####
#####  UTILITIES
#####

def get_margins(indent, level):
    """Return (padding, newline) strings for a block at a given nesting `level`; indent=0 means minified output."""
    if not indent: return '', ''
    return ' ' * (indent * level), '\n'


########################################################################################################################################################
#####
#####  SEQUENCE OF NODES
#####

class Sequence:
    """
    List of HNodes that comprise (a part of) a body of an HElement, or the whole document.
    Flattens nested lists of nodes and drops None's during construction, so that evaluator methods
    can return a node, a list, a Sequence, or nothing at all.
    """
    nodes = None

    def __init__(self, *nodes, _strict = True):
        self.nodes = self._flatten(nodes) if _strict else list(nodes)

    def __bool__(self):             return bool(self.nodes)
    def __len__(self):              return len(self.nodes)
    def __iter__(self):             return iter(self.nodes)
    def __getitem__(self, pos):
        if isinstance(pos, slice):
            return Sequence(*self.nodes[pos], _strict = False)
        return self.nodes[pos]

    @staticmethod
    def _flatten(nodes):
        """Flatten nested lists of nodes by concatenating them into the top-level list; drop None's."""
        result = []
        for n in nodes:
            if n is None: continue
            if isinstance(n, (list, tuple, Sequence, GeneratorType)):
                result += Sequence._flatten(n)
            elif isinstance(n, HNode):
                result.append(n)
            else:
                raise TypeError(f"found {type(n)} instead of an HNode as an element of DOM")
        return result

    def render(self, indent = 4, level = 0):
        return ''.join(node.render(indent, level) for node in self.nodes)

    def __repr__(self):
        return 'Sequence(%s)' % ', '.join(map(repr, self.nodes))


########################################################################################################################################################
#####
#####  DOCUMENT OBJECT MODEL
#####

class HNode:
    """Base class for all DOM nodes."""

    inline = False      # True if the node is printed on the opening line of its parent element (pretty mode only)

    def render(self, indent = 4, level = 0):
        """Render the node as a block at nesting `level`, with `indent` spaces per level (0 = minified)."""
        raise NotImplementedError

    def render_inline(self):
        """Render the node without any padding or line break."""
        raise NotImplementedError


class HText(HNode):
    """A leaf node containing plain text; <, > and & get escaped during rendering."""

    text = None

    def __init__(self, text = '', inline = False):
        self.text   = text
        self.inline = inline

    def render(self, indent = 4, level = 0):
        pad, nl = get_margins(indent, level)
        return pad + self.render_inline() + nl

    def render_inline(self):
        return escape(self.text)

    def __str__(self):
        return self.text

    def __repr__(self):
        return f"{self.__class__.__name__}({self.text!r})"


class HRaw(HText):
    """A leaf node containing markup text that is emitted without escaping."""

    def render_inline(self):
        return self.text


class HElement(HNode):
    """Markup element: opening tag with attributes, body, closing tag (unless void)."""

    tag   = None        # MarkupTag that renders the opening and closing tags
    attrs = None        # {name: value} of attributes: strings, or True for a bare attribute (no value)
    body  = None        # Sequence of child nodes, inline ones first
    block = False       # True if the element had a children block in source; its closing tag is then put on a separate line

    def __init__(self, tag, attrs = None, body = None, block = False):
        self.tag   = tag
        self.attrs = attrs if attrs is not None else {}
        self.body  = Sequence(body)
        self.block = block

    def render(self, indent = 4, level = 0):
        pad, nl = get_margins(indent, level)
        start = self.tag.start(self.attrs)
        if self.tag.void:
            return pad + start + nl

        # leading inline nodes go to the opening line; the remaining nodes are rendered as indented blocks
        split = 0
        while split < len(self.body) and self.body[split].inline:
            split += 1
        head = ''.join(node.render_inline() for node in self.body[:split])
        tail = self.body[split:]

        if not (self.block or tail):
            return pad + start + head + self.tag.end() + nl
        return pad + start + head + nl + tail.render(indent, level + 1) + pad + self.tag.end() + nl

    def render_inline(self):
        return self.render(indent = 0)

    def __repr__(self):
        return f"HElement({self.tag.name!r}, {self.attrs!r}, {self.body!r})"
