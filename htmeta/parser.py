"""
Reader of KDL documents: converts source text to a generic tree of htmeta.tree.Node objects.

    >>> parse('p "Hello" class=intro')
    (Node('p' 'Hello' class='intro'),)
"""

import re
import logging

from parsimonious.grammar import Grammar as Parsimonious
from parsimonious.nodes import NodeVisitor
from parsimonious.exceptions import ParseError

from htmeta.errors import SyntaxErrorEx
from htmeta.grammar import grammar, NonIdentChar, SpaceChar, NewlineChar
from htmeta.tree import Node

log = logging.getLogger(__name__)


#####################################################################################################################################################
#####
#####  UTILITIES
#####

ESCAPES = {
    'n': '\n', 't': '\t', 'r': '\r', 'b': '\b', 'f': '\f',
    's': ' ', '/': '/', '"': '"', '\\': '\\',
}

RE_ESCAPE = re.compile(r'\\(?:u\{([0-9a-fA-F]{1,6})\}|(\s+)|(.))', re.DOTALL)

def unescape(body):
    """Decode escape sequences in the body of a quoted string. Raise ValueError on unknown escapes."""
    def replace(match):
        code, space, char = match.groups()
        if code: return chr(int(code, 16))
        if space: return ''                             # whitespace escape: backslash + any whitespace is removed
        if char in ESCAPES: return ESCAPES[char]
        raise ValueError(f"invalid escape sequence '\\{char}' in a string")

    return RE_ESCAPE.sub(replace, body)

KEYWORDS = {
    'true':  True,
    'false': False,
    'null':  None,
    'inf':   float('inf'),
    '-inf':  float('-inf'),
    'nan':   float('nan'),
}


#####################################################################################################################################################
#####
#####  GRAMMAR
#####

class Grammar(Parsimonious):

    default = None      # class-level default instance of Grammar, created once upon module import

    def __init__(self):
        placeholders = {'NonIdentChar': NonIdentChar, 'SpaceChar': SpaceChar, 'NewlineChar': NewlineChar}
        super(Grammar, self).__init__(grammar % placeholders)


Grammar.default = Grammar()


#####################################################################################################################################################
#####
#####  READER
#####

class KDLReader(NodeVisitor):
    """
    Visitor that walks a parsimonious parse tree of a KDL document bottom-up and builds a tuple of Nodes.
    Slashdash-commented items are visited like any other item and dropped at the level of their parent.
    """
    grammar = Grammar.default
    unwrapped_exceptions = (SyntaxErrorEx,)

    def parse(self, text, pos = 0):
        try:
            tree = self.grammar.parse(text, pos)
        except ParseError as ex:
            raise SyntaxErrorEx(f"invalid KDL syntax near {self._excerpt(ex)}", ex.line(), ex.column())
        return self.visit(tree)

    @staticmethod
    def _excerpt(ex):
        snippet = ex.text[ex.pos:ex.pos + 20].split('\n')[0]
        return repr(snippet) if snippet else "end of input"

    @staticmethod
    def _position(node):
        """(line, column) of the start of a parse tree `node`, both 1-based."""
        text  = node.full_text
        line  = text.count('\n', 0, node.start) + 1
        column = node.start - (text.rfind('\n', 0, node.start) + 1) + 1
        return line, column

    def generic_visit(self, node, visited_children):
        return visited_children

    ###  DOCUMENT & NODES

    def visit_document(self, node, children):
        nodes, _ = children
        return tuple(nodes)

    def visit_nodes(self, node, children):
        _, items = children
        return [item for item, _ in items if item is not None]

    def visit_node_item(self, node, children):
        return children[0]

    def visit_slashdash_node(self, node, children):
        return None

    def visit_node(self, node, children):
        _, name, entries, blocks, _ = children
        blocks = blocks[0] if blocks else []
        if len(blocks) > 1:
            raise SyntaxErrorEx(f"node '{name}' has more than one children block", *self._position(node))

        args  = []
        props = {}
        for entry in entries:
            if entry is None: continue                  # slashdash'ed entry
            kind, key, value = entry
            if kind == 'prop':
                props.pop(key, None)                    # duplicate property: the last one wins and takes its position
                props[key] = value
            else:
                args.append(value)

        line, _ = self._position(node)
        return Node(name, args, props, blocks[0] if blocks else None, line)

    ###  ENTRIES

    def visit_entry_item(self, node, children):
        _, (entry,) = children
        return entry

    def visit_slashdash_entry(self, node, children):
        return None

    def visit_entry(self, node, children):
        return children[0]

    def visit_prop(self, node, children):
        key, _, _, _, value = children
        return 'prop', key, value

    def visit_argument(self, node, children):
        value, _ = children
        return 'arg', None, value

    ###  CHILDREN

    def visit_children_part(self, node, children):
        return [block for block in children if block is not None]

    def visit_children_item(self, node, children):
        _, (block,) = children
        return block

    def visit_slashdash_children(self, node, children):
        return None

    def visit_children(self, node, children):
        _, nodes, _ = children
        return nodes

    ###  VALUES

    def visit_name(self, node, children):
        return children[0]

    def visit_value(self, node, children):
        _, (value,) = children
        return value

    def visit_string(self, node, children):
        return children[0]

    def visit_quoted_string(self, node, children):
        try:
            return unescape(node.text[1:-1])
        except ValueError as ex:
            raise SyntaxErrorEx(str(ex), *self._position(node))

    def visit_raw_string(self, node, children):
        text = node.text
        if text[0] == 'r': text = text[1:]
        hashes = len(text) - len(text.lstrip('#'))
        return text[hashes + 1 : len(text) - hashes - 1]

    def visit_number(self, node, children):
        text = node.text.replace('_', '')
        digits = text.lstrip('+-')
        for prefix, base in (('0x', 16), ('0o', 8), ('0b', 2)):
            if digits.startswith(prefix):
                return int(text, base)
        if '.' in digits or 'e' in digits or 'E' in digits:
            return float(text)
        return int(text)

    def visit_keyword(self, node, children):
        return KEYWORDS[node.text.lstrip('#')]

    def visit_identifier(self, node, children):
        return node.text


#####################################################################################################################################################

def parse(text):
    """Parse a KDL document `text` into a tuple of top-level Nodes. Raise SyntaxErrorEx if the text is malformed."""
    nodes = KDLReader().parse(text)
    log.debug("parsed %d top-level node(s)", len(nodes))
    return nodes
