"""
PEG grammar of the KDL document language, in the format of the parsimonious library.

KDL is a node-based document language: every node has a name, a list of space-separated positional arguments,
a set of key=value properties, and an optional block of child nodes in curly braces:

    !DOCTYPE html
    html lang=en {
        head { title "Hello" }
        body {
            p "first paragraph" class=intro; p "second"
            /- p "commented out"
        }
    }

Supported: bare & quoted node names, strings with escapes, raw strings r"..." r#"..."# #"..."#,
decimal/hex/octal/binary numbers, keywords (true false null, also with # prefix),
bare identifiers as values, type annotations (ignored), // and /* */ comments, /- slashdash comments,
backslash line continuations.
"""

# characters that can't occur in an identifier, as a body of a regex character class
NonIdentChar = r'\s\\/(){}<>;\[\]=,"'

# whitespace within a line, as a body of a regex character class
SpaceChar    = r' \t\ufeff\u00a0\u1680\u2000-\u200a\u202f\u205f\u3000'

# line terminators
NewlineChar  = r'\r\n\x0b\x0c\u0085\u2028\u2029'


########################################################################################################################################################
grammar = r"""

###  DOCUMENT

document         =  nodes eof
nodes            =  linespace* (node_item linespace*)*
node_item        =  slashdash_node / node
slashdash_node   =  slashdash linespace* node

###  NODES

node             =  annotation? name entries children_part? node_term
node_term        =  ws* (single_comment / newline / ";" / &"}" / eof)

entries          =  entry_item*
entry_item       =  nodespace (slashdash_entry / entry)
slashdash_entry  =  slashdash nodespace? entry
entry            =  prop / argument
prop             =  name ws* "=" ws* value
argument         =  value ""

children_part    =  children_item+
children_item    =  nodespace? (slashdash_children / children)
slashdash_children = slashdash nodespace? children
children         =  "{" nodes "}"

slashdash        =  "/-"

###  VALUES

name             =  string / identifier
value            =  annotation? (string / number / keyword / identifier)
annotation       =  "(" ws* name ws* ")"

string           =  raw_string / quoted_string
raw_string       =  ~r'r(#*)"[\s\S]*?"\1' / ~r'(#+)"[\s\S]*?"\1'
quoted_string    =  ~r'"(?:[^"\\]|\\[\s\S])*"'

number           =  ~r'[+-]?0x[0-9a-fA-F][0-9a-fA-F_]*' / ~r'[+-]?0o[0-7][0-7_]*' / ~r'[+-]?0b[01][01_]*' /
                    ~r'[+-]?[0-9][0-9_]*(\.[0-9][0-9_]*)?([eE][+-]?[0-9][0-9_]*)?'

keyword          =  ~r'#(true|false|null|inf|-inf|nan)' / ~r'(true|false|null)(?![^%(NonIdentChar)s])'
identifier       =  ~r'[^%(NonIdentChar)s0-9#][^%(NonIdentChar)s]*'

###  WHITESPACE & COMMENTS

linespace        =  newline / ws / single_comment
nodespace        =  (ws* escline ws*)+ / ws+
escline          =  "\\" ws* (single_comment / newline / eof)
ws               =  ~r'[%(SpaceChar)s]+' / block_comment

single_comment   =  ~r'//[^%(NewlineChar)s]*' (newline / eof)
block_comment    =  "/*" (block_comment / ~r'(?:[^*/]|\*(?!/)|/(?!\*))+')* "*/"

newline          =  ~r'\r\n|[%(NewlineChar)s]'
eof              =  !~r'[\s\S]'

"""
