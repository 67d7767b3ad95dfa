"""
htmeta: HTML generation from KDL documents, with variables and lexically scoped templates.

    >>> import htmeta
    >>> htmeta.render('$who "World"; p "Hello, $who!"', {'pretty': False})
    '<p>Hello, World!</p>'
"""

from htmeta.errors import HError, SyntaxErrorEx, UndefinedVariableEx, UndefinedTemplateEx, ArityEx, \
    RecursionLimitEx, ConflictingContentEx, VoidTagEx, TemplateEx
from htmeta.tree import Node, node
from htmeta.document import Sequence, HElement, HText, HRaw
from htmeta.tag import Tag, Template, ExternalTag
from htmeta.parser import parse
from htmeta.runtime import Runtime


def compile(tree, options = None):
    """Compile a generic tree (a sequence of Nodes) to HTML. `options`: a dict of configuration options, e.g. {'pretty': False}."""
    return Runtime().compile(tree, **(options or {}))

def render(text, options = None):
    """Parse a KDL document `text` and compile it to HTML."""
    return Runtime().render(text, **(options or {}))
