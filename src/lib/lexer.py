"""
Custom Pygments lexer for org-style outline markup

Used by the HTML output buffer when a source block is written in the
outline markup itself (#+BEGIN_SRC org), so documentation about org files
can show highlighted org examples.

Token types:
- Generic.Heading / Generic.Subheading: Headlines
- Keyword: TODO-style keywords, #+KEY: settings and block delimiters
- Name.Tag: Headline tags
- Comment: # comments
- Name.Attribute: Property drawers and planning lines
- Punctuation: List bullets and table bars
- Generic.Strong / Generic.Emph / Literal.String: Inline emphasis and code
- Name.Function: Links
"""

from pygments.lexer import RegexLexer, bygroups
from pygments.token import (
    Text,
    Whitespace,
    Punctuation,
    Name,
    String,
    Keyword,
    Literal,
    Comment,
    Generic,
    Number,
)


class OrgLexer(RegexLexer):
    """
    Lexer for org-style outline markup

    Example:
        * TODO Write lexer :code:
        #+BEGIN_SRC python

    Tokens:
        * → Generic.Heading
        TODO → Keyword
        :code: → Name.Tag
        #+BEGIN_SRC → Keyword
        python → Name.Attribute
    """

    name = 'Org'
    aliases = ['org', 'orgmode', 'org-mode']
    filenames = ['*.org']

    tokens = {
        'root': [
            # Top-level headline
            (r'^(\*)(\s+)(TODO|DONE)?(\s*)(.*?)(\s+:[\w@#%:]+:)?(\n)',
             bygroups(Generic.Heading, Whitespace, Keyword, Whitespace, Generic.Heading, Name.Tag, Whitespace)),

            # Nested headlines
            (r'^(\*{2,})(\s+)(TODO|DONE)?(\s*)(.*?)(\s+:[\w@#%:]+:)?(\n)',
             bygroups(Generic.Subheading, Whitespace, Keyword, Whitespace, Generic.Subheading, Name.Tag, Whitespace)),

            # Block delimiters with language / header arguments
            (r'^(\s*)(#\+(?:BEGIN|END)_\w+)(.*\n)',
             bygroups(Whitespace, Keyword, Name.Attribute)),

            # In-buffer settings
            (r'^(#\+\w+:)(.*\n)', bygroups(Keyword.Declaration, String)),

            # Comments
            (r'^\s*#(?!\+).*\n', Comment),

            # Property drawers and planning lines
            (r'^(\s*)(:[\w\-+]+:)(.*\n)', bygroups(Whitespace, Name.Attribute, Text)),
            (r'^(\s*)((?:CLOCK|DEADLINE|START|CLOSED|SCHEDULED):)(.*\n)',
             bygroups(Whitespace, Name.Attribute, Literal.Date)),

            # Tables
            (r'^\s*\|[-+|]*-[-+|]*\s*\n', Punctuation),
            (r'\|', Punctuation),

            # List bullets
            (r'^(\s*)([-+]|\d+[.)])(\s+)', bygroups(Whitespace, Punctuation, Whitespace)),

            # Links
            (r'\[\[[^\]]+\](?:\[[^\]]+\])?\]', Name.Function),

            # Footnote references
            (r'\[fn:[^\]]+\]', Number),

            # Inline emphasis and code
            (r'(?<![\w*])\*[^\s*][^*\n]*?\*(?![\w*])', Generic.Strong),
            (r'(?<![\w/])/[^\s/][^/\n]*?/(?![\w/])', Generic.Emph),
            (r'(?<![\w=])=[^\s=][^=\n]*?=(?![\w=])', String),
            (r'(?<![\w~])~[^\s~][^~\n]*?~(?![\w~])', String),

            # Everything else is text
            (r'[^|\[*/=~\n]+', Text),
            (r'\n', Whitespace),
            (r'.', Text),
        ],
    }


def get_lexer() -> OrgLexer:
    """
    Get the OrgLexer instance

    Returns:
        OrgLexer instance ready for use with Pygments
    """
    return OrgLexer()
