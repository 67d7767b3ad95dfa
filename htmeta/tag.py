import logging
import inspect

from htmeta.config import MARK_TAG, TEMPLATE, CHILDREN, PROPS
from htmeta.document import Sequence, HNode, HElement, HRaw
from htmeta.errors import TemplateEx, RecursionLimitEx, VoidTagEx, ArityEx
from htmeta.structs import Slot

log = logging.getLogger(__name__)


########################################################################################################################################################
#####
#####  SDK
#####

class Tag:
    """
    Base class for all tags that can be invoked with @name:
    - Template    - a tag defined inside the document with @template
    - ExternalTag - a tag implemented as a python class and passed to the Runtime
    """
    name = None
    void = False        # if True, a call is expected to have no children block, otherwise an exception shall be raised

    def translate_tag(self, evaluator, state, node):
        """Expand an occurrence `node` of this tag in the current scope of `state`; return a Sequence of DOM nodes."""
        raise NotImplementedError


class Template(Tag):
    """
    Native tag, defined in the document with @template. Keeps the unevaluated body and the index
    of the scope where the definition occurred (closure): free variables of the body are resolved
    starting from this scope, not from the scope of a call site.
    """
    body     = None         # tuple of Nodes, unevaluated
    scope    = None         # index of the defining scope
    defaults = None         # {name: value} of default values of parameters, interpolated in the defining scope upon expansion
    slotted  = False        # True if the body contains @children, hence the template accepts a children block in calls

    def __init__(self, name, body, scope, defaults = None):
        self.name     = name
        self.body     = tuple(body)
        self.scope    = scope
        self.defaults = dict(defaults or {})
        self.slotted  = self._find_slot(self.body)

    @staticmethod
    def _find_slot(nodes):
        """Check if @children occurs in `nodes`, at any depth, except inside nested template definitions."""
        for node in nodes:
            if node.name == MARK_TAG + CHILDREN: return True
            if node.name == MARK_TAG + TEMPLATE or node.children is None: continue
            if Template._find_slot(node.children): return True
        return False

    def translate_tag(self, evaluator, state, node):

        if node.children is not None and not self.slotted:
            raise TemplateEx(f"template '{self.name}' was called with children but has no @children inside", node)
        if any(template is self for template in state.active):
            raise RecursionLimitEx(f"template '{self.name}' invokes itself", self.name, node)
        if state.active.size >= state.config['max_depth']:
            raise RecursionLimitEx(f"templates nested deeper than {state.config['max_depth']} levels", self.name, node)

        args, kwargs = evaluator.eval_entries(node, state)          # values are interpolated in the call-site scope
        extra = {key: evaluator.attr_value(value, state, node) for key, value in node.props.items() if key not in self.defaults}

        caller = state.enter(self.scope)
        state.active.push(self)
        state.slots.push(Slot(node.children, caller))
        try:
            self._bind_params(evaluator, state, node, args, kwargs, extra)
            log.debug("expanding template '%s' in scope #%s", self.name, state.scope)
            body = [child.copy() for child in self.body]            # every expansion works on its own copy of the body
            output = evaluator.translate_nodes(body, state)
        finally:
            state.slots.pop()
            state.active.pop()
            state.scope = caller

        if state.config['apply_props'] and len(self.body) == 1:
            self._apply_props(output, extra)
        return output

    def _bind_params(self, evaluator, state, node, args, kwargs, extra):
        """
        Bind default values, then actual values of properties and positional arguments, as variables of the current scope.
        Properties that are not parameters of the template (have no default) are also collected in $props, as attribute text.
        """
        for name, value in self.defaults.items():
            state.define_var(name, evaluator.interpolate(value, state, node, scope = self.scope))
        for name, value in kwargs.items():
            state.define_var(name, value)
        for pos, value in enumerate(args):
            state.define_var(str(pos), value)

        alias = state.config['positional_alias']
        if alias and args and alias not in kwargs:
            state.define_var(alias, args[0])

        attrs = [key if value is True else f'{key}="{value}"' for key, value in extra.items() if value is not None]
        state.define_var(PROPS, ' '.join(attrs))

    @staticmethod
    def _apply_props(output, extra):
        """If the expansion produced a single element, non-parameter properties of the call become its attributes, unless already defined."""
        if len(output) != 1 or not isinstance(output[0], HElement): return
        attrs = output[0].attrs
        for key, value in extra.items():
            attrs.setdefault(key, value)

    def __repr__(self):
        return f"Template({self.name!r}, scope={self.scope})"


class ExternalTag(Tag):
    """
    External tag, i.e., a tag implemented as a python class. Its expand() is called with:
    - the body: children block of the call, translated to a Sequence of DOM nodes in the call-site scope
    - positional arguments and properties of the call, as interpolated strings
    and should return a Sequence of nodes, a single HNode, None, or a string of markup that will be inserted unescaped.
    """

    def translate_tag(self, evaluator, state, node):
        if self.void and node.children:
            raise VoidTagEx(f"body must be empty for a void tag '@{node.name[1:]}'", node)

        args, kwargs = evaluator.eval_entries(node, state)
        body = evaluator.translate_block(node.children, state) if node.children is not None else Sequence()
        try:
            inspect.signature(self.expand).bind(body, *args, **kwargs)
        except TypeError as ex:
            raise ArityEx(f"bad arguments for '@{node.name[1:]}' ({ex})", node,
                          expected = self._arity(), actual = len(args) + len(kwargs)) from None
        output = self.expand(body, *args, **kwargs)

        if isinstance(output, str):
            return Sequence(HRaw(output))
        if output is None or isinstance(output, (Sequence, HNode)):
            return Sequence(output)
        raise TypeError(f"external tag '@{node.name[1:]}' returned {type(output)} instead of a DOM node, Sequence or string")

    def _arity(self):
        """Parameters of expand() except the body, for error messages."""
        params = list(inspect.signature(self.expand).parameters.values())[1:]
        return ', '.join(map(str, params)) or 'no arguments'

    def expand(self, __body__):     # more attributes can be defined in subclasses
        raise NotImplementedError
