"""
Inline rewrite engine

Rewrites the inline markup of one logical buffer (a paragraph, a list
item, a table row...) into a target format described by an InlineFormat.

Every piece of generated markup is stashed on a snippet stack and replaced
by a placeholder (see AppSettings.placeHolder_make), so later steps never
see, re-match or escape markup produced by earlier ones. Steps, in order:

1. =code= and ~verbatim~ spans are escaped, wrapped and stashed
2. *bold* /italic/ _underline_ +strike+ markers are stashed
3. _{sub} and ^{sup} are rewritten (unless disabled)
4. [[target][label]], [[target]] and <scheme:target> links are built
5. [fn:label] / [fn:label:definition] go to the footnote hook (if any)
6. Symbols (e.g. \\alpha) are replaced from the format's table
7. The remaining literal text is escaped for the target
8. Placeholders are restored until none remain (snippets nest)

Example:
    >>> rewriter = InlineRewriter(TEXTILE_FORMAT)
    >>> rewriter.rewrite("/italic/ and [[my url]]")
    '_italic_ and "my url":my%20url'
"""

import re
from typing import Callable, Dict, List, Optional

from ..config import appsettings
from ..models.markup import InlineFormat


IMAGE_FILE_REGEXP = re.compile(r"\.(gif|jpe?g|p(?:bm|gm|n[gm]|pm)|svgz?|tiff?|x[bp]m)$", re.IGNORECASE)
LINK_REGEXP = re.compile(r"\[\[([^\]\[]+)\](?:\[([^\]\[]+)\])?\]")
ANGLE_LINK_REGEXP = re.compile(r"<(\w+:[^\]\s<>]+)>")
FILE_LINK_REGEXP = re.compile(r"^file:(.*?)(?:::.*)?$", re.IGNORECASE)
SUBSUP_REGEXP = re.compile(r"([_^])\{(.*?)\}")
FOOTNOTE_REFERENCE_REGEXP = re.compile(r"\[fn:([^\]:\s]+)(?::([^\]]*))?\]")

EMPHASIS_MARKERS = "*/_+"
CODE_MARKERS = "=~"

FootnoteHook = Callable[[str, Optional[str]], str]


def emphasis_regexpBuild(markers: str) -> "re.Pattern[str]":
    """
    Regexp for a marked span

    A span opens after whitespace, an opening bracket/quote, a snippet
    boundary or the start of a line, has non-space borders, spans at most
    one line break and closes before whitespace, punctuation or the end
    of a line.
    """
    boundary = re.escape(appsettings.snippet_prefix[:1] + appsettings.snippet_suffix[-1:])
    pre = rf"(^|[ \t('\"{{{boundary}])"
    border = r"[^\s,\"']"
    body = rf"(([{re.escape(markers)}])({border}|{border}.*?(?:\n.*?)?{border})\3)"
    post = rf"(?=[- \t.,:!?;'\")}}\\{boundary}]|$)"
    return re.compile(pre + body + post, re.MULTILINE)


def linkAbbrev_expand(target: str, link_abbrevs: Dict[str, str]) -> str:
    """
    Expand an abbreviated link target

    'name:rest' with a #+LINK: name template becomes the template with
    %s replaced by rest, or with rest appended when there is no %s.
    """
    name, separator, rest = target.partition(":")
    if not separator or name not in link_abbrevs:
        return target
    template = link_abbrevs[name]
    if "%s" in template:
        return template.replace("%s", rest)
    return template + rest


class InlineRewriter:
    """
    Rewrites inline markup of a logical buffer into one target format

    Attributes:
        inline_format: Capability set of the target format
        link_abbrevs: #+LINK abbreviations of the document
        use_sub_superscripts: Rewrite _{...} / ^{...}
        footnote_hook: Called with (label, inline definition or None) for
                       every footnote reference; returns the markup
        snippets: Stash of generated markup for the current rewrite
    """

    def __init__(
        self,
        inline_format: InlineFormat,
        link_abbrevs: Optional[Dict[str, str]] = None,
        use_sub_superscripts: bool = True,
        footnote_hook: Optional[FootnoteHook] = None,
    ):
        self.inline_format = inline_format
        self.link_abbrevs = link_abbrevs or {}
        self.use_sub_superscripts = use_sub_superscripts
        self.footnote_hook = footnote_hook
        self.snippets: List[str] = []

        self.code_regexp = emphasis_regexpBuild(CODE_MARKERS)
        self.emphasis_regexp = emphasis_regexpBuild(EMPHASIS_MARKERS)
        self.placeholder_regexp = re.compile(
            re.escape(appsettings.snippet_prefix) + r"\d+" + re.escape(appsettings.snippet_suffix)
        )
        self.symbols_regexp = self.symbols_regexpBuild(inline_format.symbols)

    @staticmethod
    def symbols_regexpBuild(symbols: Dict[str, str]) -> Optional["re.Pattern[str]"]:
        if not symbols:
            return None
        alternatives = []
        for symbol in sorted(symbols, key=len, reverse=True):
            pattern = re.escape(symbol)
            if symbol[-1:].isalpha():
                # \alpha must not match the start of \alphabet; \alpha{} ends explicitly
                pattern += r"(?:\{\}|(?![A-Za-z]))"
            alternatives.append(f"(?P<s{len(alternatives)}>{pattern})")
        return re.compile("|".join(alternatives))

    def snippet_stash(self, markup: str) -> str:
        """Push generated markup on the snippet stack, return its placeholder"""
        self.snippets.append(markup)
        return appsettings.placeHolder_make(len(self.snippets) - 1)

    def rewrite(self, text: str) -> str:
        """
        Run all rewrite steps over text

        Args:
            text: One logical buffer; may contain line breaks

        Returns:
            Text in the target markup
        """
        self.snippets = []
        text = self.code_protect(text)
        text = self.emphasis_rewrite(text)
        if self.use_sub_superscripts:
            text = self.subSuperscript_rewrite(text)
        text = self.links_rewrite(text)
        if self.footnote_hook is not None:
            text = self.footnotes_rewrite(text)
        text = self.symbols_rewrite(text)
        text = self.inline_format.escape(text)
        return self.snippets_restore(text)

    def code_protect(self, text: str) -> str:
        open_tag, close_tag = self.inline_format.code

        def code_stash(match: "re.Match[str]") -> str:
            body = self.inline_format.escape(match.group(4))
            return match.group(1) + self.snippet_stash(f"{open_tag}{body}{close_tag}")

        return self.code_regexp.sub(code_stash, text)

    def emphasis_rewrite(self, text: str) -> str:
        def emphasis_stash(match: "re.Match[str]") -> str:
            open_tag, close_tag = self.inline_format.emphasis[match.group(3)]
            return match.group(1) + self.snippet_stash(open_tag) + match.group(4) + self.snippet_stash(close_tag)

        # Nested spans (*bold /italic/*) surface one level per pass
        for _ in range(len(EMPHASIS_MARKERS)):
            rewritten = self.emphasis_regexp.sub(emphasis_stash, text)
            if rewritten == text:
                break
            text = rewritten
        return text

    def subSuperscript_rewrite(self, text: str) -> str:
        def subsup_stash(match: "re.Match[str]") -> str:
            open_tag, close_tag = (
                self.inline_format.subscript if match.group(1) == "_" else self.inline_format.superscript
            )
            return self.snippet_stash(open_tag) + match.group(2) + self.snippet_stash(close_tag)

        return SUBSUP_REGEXP.sub(subsup_stash, text)

    def link_build(self, target: str, label: Optional[str]) -> str:
        """Markup for one link; image targets without a label are inlined"""
        target = linkAbbrev_expand(target, self.link_abbrevs)
        file_match = FILE_LINK_REGEXP.match(target)
        if file_match:
            target = file_match.group(1)

        escape = self.inline_format.escape
        href = escape(target.replace(" ", "%20"))
        if label is None and IMAGE_FILE_REGEXP.search(target):
            return self.snippet_stash(self.inline_format.image(href))

        label = label if label is not None else target
        if IMAGE_FILE_REGEXP.search(label):
            label_markup = self.inline_format.image(escape(label.replace(" ", "%20")))
        else:
            label_markup = escape(label)
        return self.snippet_stash(self.inline_format.link(href, label_markup))

    def links_rewrite(self, text: str) -> str:
        text = LINK_REGEXP.sub(lambda m: self.link_build(m.group(1), m.group(2)), text)
        return ANGLE_LINK_REGEXP.sub(lambda m: self.link_build(m.group(1), None), text)

    def footnotes_rewrite(self, text: str) -> str:
        def footnote_stash(match: "re.Match[str]") -> str:
            return self.snippet_stash(self.footnote_hook(match.group(1), match.group(2)))

        return FOOTNOTE_REFERENCE_REGEXP.sub(footnote_stash, text)

    def symbols_rewrite(self, text: str) -> str:
        if self.symbols_regexp is None:
            return text
        symbols = self.inline_format.symbols

        def symbol_stash(match: "re.Match[str]") -> str:
            symbol = match.group(0)
            if symbol.endswith("{}") and symbol not in symbols:
                symbol = symbol[:-2]
            return self.snippet_stash(symbols[symbol])

        return self.symbols_regexp.sub(symbol_stash, text)

    def snippets_restore(self, text: str) -> str:
        """Replace placeholders by their snippets, innermost last"""
        for _ in range(len(self.snippets) + 1):
            if not self.placeholder_regexp.search(text):
                break
            text = self.placeholder_regexp.sub(
                lambda m: self.snippets[appsettings.snippetIndex_extract(m.group(0))], text
            )
        return text
