import itertools
from xml.sax.saxutils import escape

from htmeta.document import HText
from htmeta.errors import TemplateEx
from htmeta.tag import ExternalTag


########################################################################################################################################################
#####
#####  STANDARD MARKUP TAG
#####

# void tags: never have a closing tag nor a body; matched case-sensitively against node names
VOID_TAGS = set("area base br col embed hr img input link meta param source track wbr".split())
VOID_TAGS.add("!DOCTYPE")           # not a tag at all, but renders exactly like a void one

class MarkupTag:
    """
    Renders <name ...> and </name> strings of an HTML element, with proper handling of void tags
    and of boolean (valueless) attributes.
    """

    name = None         # tag name, as written in source
    void = False        # if True, the element is rendered without a closing tag and without a body

    def __init__(self, name, void = None):
        self.name = name
        self.void = name in VOID_TAGS if void is None else void

    def start(self, attrs):
        attrs = filter(None, map(self._render_attr, attrs.items()))
        return '<' + ' '.join([self.name] + list(attrs)) + '>'

    def end(self):
        return f"</{self.name}>"

    @staticmethod
    def _render_attr(name_value):

        name, value = name_value
        if value is True:               # name=True   -- converted to a bare attribute:  name
            return name
        if value is False or value is None:
            return None                 # name=False  -- removed from attr list

        value = escape(str(value), {'"': '&quot;'})
        return f'{name}="{value}"'


########################################################################################################################################################
#####
#####  BUILT-IN external tags
#####

LOREM_IPSUM = """
    Lorem ipsum dolor sit amet, consectetur adipiscing elit, sed do eiusmod tempor incididunt ut labore et dolore
    magna aliqua. Ut enim ad minim veniam, quis nostrud exercitation ullamco laboris nisi ut aliquip ex ea commodo
    consequat. Duis aute irure dolor in reprehenderit in voluptate velit esse cillum dolore eu fugiat nulla pariatur.
    Excepteur sint occaecat cupidatat non proident, sunt in culpa qui officia deserunt mollit anim id est laborum.
""".split()

class LoremTag(ExternalTag):
    """@lorem N -- N words of placeholder text; the words are cycled if N exceeds the length of the stock text."""
    void = True

    def expand(self, __body__, count = '1'):
        try:
            count = abs(int(count))
        except ValueError:
            raise TemplateEx(f"@lorem expects an integer number of words, got '{count}'")
        return HText(' '.join(itertools.islice(itertools.cycle(LOREM_IPSUM), count)))


BUILTIN_TAGS = {
    'lorem':        LoremTag,
}

# instantiate tag classes
for name, tag in BUILTIN_TAGS.items():
    if isinstance(tag, type):
        BUILTIN_TAGS[name] = tag()
