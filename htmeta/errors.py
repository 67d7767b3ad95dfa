"""
Exceptions raised while reading and compiling htmeta documents.
"""

########################################################################################################################################################

class HError(Exception):
    """
    Base class for all htmeta errors. Every error is terminal for the compilation of the whole document.
    Besides the message, an error carries the offending node of the input tree and the path of node names
    that leads to it from the document root; both are appended to the message when the error is printed.
    """
    node = None         # tree.Node where the error occurred, if known
    path = None         # list of node names from the root of the document down to `node`

    def __init__(self, msg = None, node = None):
        super(HError, self).__init__(msg)
        self.msg  = msg
        self.node = node

    def locate(self, node, path):
        """Record the location of the error, unless a more specific one (deeper in the tree) was recorded already."""
        if self.node is None: self.node = node
        if self.path is None: self.path = list(path)

    def make_msg(self, msg):
        where = []
        line = getattr(self.node, 'line', None)
        if line: where.append(f"line {line}")
        if self.path: where.append(' > '.join(self.path))
        if not where: return msg
        return f"{msg} ({', '.join(where)})"

    def __str__(self):
        return self.make_msg(self.msg)


########################################################################################################################################################

class TemplateEx(HError):                   pass
class ConflictingContentEx(HError):         pass

class SyntaxErrorEx(HError, SyntaxError):
    """Input text is not a valid KDL document."""
    def __init__(self, msg, line = None, column = None):
        super(SyntaxErrorEx, self).__init__(msg)
        self.line   = line
        self.column = column

    def make_msg(self, msg):
        if self.line is None: return msg
        return f"{msg} at line {self.line}, column {self.column}"

class UndefinedVariableEx(HError, NameError):
    """A $name token refers to a variable that is not defined anywhere in the scope chain."""
    def __init__(self, token, node = None):
        super(UndefinedVariableEx, self).__init__(f"undefined variable '${token}'", node)
        self.token = token

class UndefinedTemplateEx(HError):
    def __init__(self, name, node = None):
        super(UndefinedTemplateEx, self).__init__(f"undefined template '@{name}'", node)
        self.name = name

class ArityEx(HError, TypeError):
    """A node got a different number of values than it accepts."""
    def __init__(self, msg, node = None, expected = None, actual = None):
        super(ArityEx, self).__init__(f"{msg}: expected {expected}, got {actual}", node)
        self.expected = expected
        self.actual   = actual

class RecursionLimitEx(HError, RecursionError):
    def __init__(self, msg, template_name = None, node = None):
        super(RecursionLimitEx, self).__init__(msg, node)
        self.template_name = template_name

class VoidTagEx(HError):
    """Raised when non-empty content is passed to a void tag (i.e., a tag that doesn't accept body)."""
    def __init__(self, msg = "body must be empty for a void tag", node = None):
        super(VoidTagEx, self).__init__(msg, node)
