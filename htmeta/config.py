"""
Global configuration.
"""

#####################################################################################################################################################
#####
#####  SPECIAL NAMES
#####

MARK_VAR = '$'              # prefix of variable definitions in node names, and of variable references in strings
MARK_TAG = '@'              # prefix of template definitions and invocations

TEMPLATE = 'template'       # @template  -- template definition
CHILDREN = 'children'       # @children  -- placeholder for the children block of a template call
PROPS    = 'props'          # $props     -- variable with properties of a template call that are not parameters of the template

TEXT_PROPS = ('text', 'content')        # properties of an element that define its inline text content

#####################################################################################################################################################
#####
#####  COMPILATION DEFAULTS
#####

DEFAULT_INDENT = 4          # no. of spaces per nesting level in pretty output
MAX_DEPTH      = 100        # max. nesting of template expansions

TEXT_NODES = ('-', 'text', 'content')   # names of nodes that emit (escaped) text
RAW_NODE   = '_'                        # name of the node that emits raw markup

VOID_CHILDREN = ('drop', 'error')       # allowed policies for content of void elements; the 1st one is the default
