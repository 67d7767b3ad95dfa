"""
Evaluator: translates a generic tree of Nodes into DOM (htmeta.document), resolving the macro layer on the way:
variable definitions and interpolation, template definitions & expansions, and separation of text from structure.

Nodes are dispatched by name:

    $name           variable definition; no output
    @template       template definition; no output
    @children       placeholder for the children block of a template call
    @name           expansion of a template or an external tag
    - text content  text node, escaped during rendering
    _               raw node, not escaped
    anything else   markup element
"""

import re
import logging

from htmeta.builtin_html import MarkupTag
from htmeta.config import MARK_VAR, MARK_TAG, TEMPLATE, CHILDREN, TEXT_PROPS
from htmeta.document import Sequence, HElement, HText, HRaw
from htmeta.errors import HError, ArityEx, TemplateEx, ConflictingContentEx, VoidTagEx
from htmeta.tag import Template

log = logging.getLogger(__name__)


#####################################################################################################################################################
#####
#####  UTILITIES
#####

RE_VAR  = re.compile(r'\$([\w-]+)')          # reference to a variable inside a string
RE_NAME = re.compile(r'[\w-]+$')             # valid name of a variable
RE_ATTR = re.compile(r'[^\s"\'>/=]+')         # valid name of an attribute

def STR(value):
    """Convert a value of a node's argument or property to a string for embedding in markup."""
    if value is None:  return ''
    if value is True:  return 'true'
    if value is False: return 'false'
    return str(value)


#####################################################################################################################################################
#####
#####  EVALUATOR
#####

class Evaluator:
    """
    Stateless translator of Nodes to DOM. All the state of a single run is kept in a State object (htmeta.structs)
    that is passed explicitly to every method. Nodes are translated depth-first, strictly in source order,
    so a variable or template can only be referenced after its definition.
    """

    def translate_nodes(self, nodes, state):
        """Translate a list of sibling nodes in the current scope; return a Sequence of DOM nodes."""
        return Sequence(self.translate_node(node, state) for node in nodes)

    def translate_block(self, nodes, state):
        """Translate a list of nodes in a new scope that's a child of the current one."""
        outer = state.enter()
        try:
            return self.translate_nodes(nodes, state)
        finally:
            state.scope = outer

    def translate_node(self, node, state):
        state.path.push(node.name)
        try:
            return self._dispatch(node, state)
        except HError as ex:
            ex.locate(node, state.path)
            raise
        finally:
            state.path.pop()

    def _dispatch(self, node, state):
        name   = node.name
        config = state.config

        if name.startswith(MARK_VAR):           return self._define_var(node, state)
        if name == MARK_TAG + TEMPLATE:         return self._define_template(node, state)
        if name == MARK_TAG + CHILDREN:         return self._fill_slot(node, state)
        if name.startswith(MARK_TAG):           return self._invoke(node, state)
        if name in config['text_nodes']:        return self._text(node, state)
        if name == config['raw_node']:          return self._text(node, state, raw = True)
        return self._element(node, state)

    ###  DEFINITIONS

    def _define_var(self, node, state):
        name = node.name[1:]
        if not RE_NAME.match(name):
            raise HError(f"invalid variable name '{node.name}'", node)
        if node.children is not None:
            raise ArityEx(f"variable '{node.name}' can't have a children block", node, expected = 0, actual = 1)

        values = list(node.args) + list(node.props.values())
        if len(values) != 1:
            raise ArityEx(f"variable '{node.name}' must be given exactly one value", node, expected = 1, actual = len(values))

        state.define_var(name, self.interpolate(values[0], state, node))

    def _define_template(self, node, state):
        defaults = dict(node.props)
        if 'name' in defaults:
            if node.args:
                raise ArityEx("template name is given as a property, no positional arguments allowed", node, expected = 0, actual = len(node.args))
            name = defaults.pop('name')
        elif len(node.args) == 1:
            name = node.args[0]
        else:
            raise ArityEx("template definition needs a name", node, expected = 1, actual = len(node.args))

        name = self.interpolate(name, state, node)
        if node.children is None:
            raise TemplateEx(f"template '{name}' has no body", node)

        state.define_tag(name, Template(name, node.children, state.scope, defaults))
        log.debug("defined template '%s' in scope #%s", name, state.scope)

    ###  EXPANSIONS

    def _invoke(self, node, state):
        tag = state.lookup_tag(node.name[1:], node)
        return tag.translate_tag(self, state, node)

    def _fill_slot(self, node, state):
        """
        Translate the children block of the innermost template call in the call-site scope.
        The expansions that are currently active on top of the call site are suspended meanwhile,
        so that the children see the same templates stack (and slots) as the call itself.
        """
        if not state.slots:
            raise TemplateEx("@children used outside of a template", node)
        if node.args:
            raise ArityEx("@children takes no positional arguments", node, expected = 0, actual = len(node.args))
        if node.children is not None:
            raise TemplateEx("@children can't have a children block", node)

        defaults = {key: self.attr_value(value, state, node) for key, value in node.props.items()}

        slot  = state.slots.top()
        depth = state.slots.size - 1
        suspended = state.active[depth:], state.slots[depth:]
        state.active.size = state.slots.size = depth
        inner = state.scope
        state.scope = slot.scope
        try:
            body = self.translate_block(slot.children, state) if slot.children is not None else Sequence()
        finally:
            state.scope = inner
            state.active.extend(suspended[0])
            state.slots.extend(suspended[1])

        for child in body:
            if not isinstance(child, HElement): continue
            for key, value in defaults.items():
                child.attrs.setdefault(key, value)
        return body

    ###  TEXT & ELEMENTS

    def _text(self, node, state, raw = False):
        if node.children is not None:
            raise ArityEx(f"text node '{node.name}' can't have a children block", node, expected = 0, actual = 1)
        if len(node.args) != 1 or node.props:
            raise ArityEx(f"text node '{node.name}' takes exactly one positional argument", node,
                          expected = 1, actual = len(node.args) + len(node.props))
        return self._content(node.args[0], state, node, raw)

    def _content(self, value, state, node, raw = False, inline = False):
        text = self.interpolate(value, state, node)
        return HRaw(text, inline) if raw else HText(text, inline)

    def _element(self, node, state):
        tag   = MarkupTag(node.name)
        props = dict(node.props)
        args  = node.args

        text = [props.pop(key) for key in TEXT_PROPS if key in props]
        if len(text) > 1:
            raise ConflictingContentEx("'text' and 'content' properties can't be used together", node)
        if tag.void:
            return self._void_element(tag, node, state, props, bool(text))

        if len(args) > 1:
            raise ArityEx(f"element '{node.name}' takes at most one positional argument", node, expected = 1, actual = len(args))
        if text and args:
            raise ConflictingContentEx(f"'{node.name}' has both a text property and a positional argument", node)

        content = text or list(args)
        if content and node.children and any(self._is_text(child, state) for child in node.children):
            raise ConflictingContentEx(f"element '{node.name}' has both its own text and text children", node)

        attrs = {key: self.attr_value(value, state, node) for key, value in props.items()}
        body  = [self._content(content[0], state, node, inline = True)] if content else []
        if node.children is not None:
            body.append(self.translate_block(node.children, state))

        return HElement(tag, attrs, body, block = node.children is not None)

    def _void_element(self, tag, node, state, props, text):
        """Void element: positional arguments become bare attributes; any content is dropped or rejected."""
        if text or node.children:
            if state.config['void_children'] == 'error':
                raise VoidTagEx(f"void element '{node.name}' can't have any content", node)
            log.debug("content of a void element '%s' dropped", node.name)

        attrs = {}
        for arg in node.args:
            name = self.interpolate(arg, state, node)
            if not RE_ATTR.fullmatch(name):
                raise HError(f"invalid attribute name {name!r} in void element '{node.name}'", node)
            attrs[name] = True
        attrs.update((key, self.attr_value(value, state, node)) for key, value in props.items())
        return HElement(tag, attrs)

    @staticmethod
    def _is_text(node, state):
        return node.name in state.config['text_nodes'] or node.name == state.config['raw_node']

    ###  VALUES

    def interpolate(self, value, state, node, scope = None):
        """
        Convert `value` to a string and replace every $name inside with the value of variable `name`,
        as visible from `scope` (the current scope by default). Substituted text is not scanned again.
        """
        if not isinstance(value, str): return STR(value)
        scope = state.scope if scope is None else scope
        return RE_VAR.sub(lambda match: state.store.lookup_var(scope, match.group(1), node), value)

    def attr_value(self, value, state, node):
        """Value of an attribute: True for a bare attribute, None for a removed one, or an interpolated string."""
        if value is True: return True
        if value is False or value is None: return None
        return self.interpolate(value, state, node)

    def eval_entries(self, node, state):
        """Interpolated positional arguments and properties of a call `node`, as a (list, dict) pair."""
        args   = [self.interpolate(value, state, node) for value in node.args]
        kwargs = {key: self.interpolate(value, state, node) for key, value in node.props.items()}
        return args, kwargs
