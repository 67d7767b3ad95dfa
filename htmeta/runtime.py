import logging

from htmeta.builtin_html import BUILTIN_TAGS
from htmeta.config import MARK_TAG, MARK_VAR, DEFAULT_INDENT, MAX_DEPTH, TEXT_NODES, RAW_NODE, VOID_CHILDREN
from htmeta.errors import HError, RecursionLimitEx
from htmeta.evaluator import Evaluator, STR
from htmeta.parser import parse
from htmeta.structs import State

log = logging.getLogger(__name__)


#####################################################################################################################################################
#####
#####  RUNTIME
#####

class Runtime:
    """
    Execution environment of htmeta documents. Keeps the dynamic *context* of compilation:
    external tags and variables that are visible to every document compiled with this runtime,
    as if they were defined before the first node of the document.

        rt = Runtime(site = "example.com")
        rt.render('p "Welcome to $site"', pretty = False)       # <p>Welcome to example.com</p>

    Configuration options (see `config_default`) can be passed to compile() and render() as keyword arguments.
    """

    config_default = {
        'pretty':           True,           # if False, output is minified: no indentation, no newlines
        'indent':           DEFAULT_INDENT, # no. of spaces per nesting level in pretty output
        'text_nodes':       TEXT_NODES,     # names of text nodes
        'raw_node':         RAW_NODE,       # name of the raw node
        'void_children':    VOID_CHILDREN[0],   # what to do with content of a void element: 'drop' or 'error'
        'positional_alias': None,           # name of a variable that aliases $0 in template calls, e.g. 'text'
        'max_depth':        MAX_DEPTH,      # max. nesting of template expansions
        'apply_props':      True,           # if True, non-parameter properties of a template call are applied to a single-element expansion
    }

    tags      = None        # {name: ExternalTag} of tags visible to documents, built-in ones included
    variables = None        # {name: string} of external variables

    def __init__(self, __tags__ = None, **variables):
        """
        :param __tags__: dict of tag names and their ExternalTag instances/classes that shall be made available to documents;
                         names can be prepended with '@', though this is not mandatory
        :param variables: external variables that shall be made available to documents; values are converted to strings
        """
        self.tags = dict(BUILTIN_TAGS)
        self.tags.update(self._create_tags(__tags__ or {}))
        self.variables = {self._strip(name, MARK_VAR): STR(value) for name, value in variables.items()}

    @staticmethod
    def _strip(name, mark):
        return name[1:] if name[:1] == mark else name

    def _create_tags(self, tags):
        return {self._strip(name, MARK_TAG): tag() if isinstance(tag, type) else tag for name, tag in tags.items()}

    def configure(self, **config):
        """Combine `config` with default values of options; raise TypeError on unknown options."""
        unknown = set(config) - set(self.config_default)
        if unknown:
            raise TypeError(f"unknown configuration option(s): {', '.join(sorted(unknown))}")
        if config.get('void_children', VOID_CHILDREN[0]) not in VOID_CHILDREN:
            raise ValueError(f"incorrect value of 'void_children' option: {config['void_children']!r}")

        return dict(self.config_default, **config)

    def translate(self, tree, **config):
        """Translate a generic tree (a sequence of Nodes) to DOM; return a Sequence of top-level DOM nodes."""
        state = State(self.configure(**config))
        for name, tag in self.tags.items():
            state.define_tag(name, tag)
        for name, value in self.variables.items():
            state.define_var(name, value)

        state.enter()                       # the document gets its own scope below the context
        try:
            return Evaluator().translate_nodes(tree, state)
        except HError:
            raise
        except RecursionError as ex:
            raise RecursionLimitEx("maximum nesting depth exceeded") from ex

    def compile(self, tree, **config):
        """Translate and render a generic tree; return markup text."""
        config = self.configure(**config)
        tree   = tuple(tree)
        log.debug("compiling %d top-level node(s), pretty=%s", len(tree), config['pretty'])
        dom = self.translate(tree, **config)
        return dom.render(config['indent'] if config['pretty'] else 0)

    def render(self, text, **config):
        """Parse KDL source `text`, then compile it; return markup text."""
        return self.compile(parse(text), **config)
