"""
Export selection over the flat headline list

Decides the ExportState of every headline from the document's
#+EXPORT_SELECT_TAGS and #+EXPORT_EXCLUDE_TAGS:

Pass 1 (select):  if any headline carries a select tag, everything starts
                  EXCLUDE, tagged subtrees become ALL and their strict
                  ancestors HEADLINE_ONLY (unless already ALL). Without a
                  select tag in the document everything stays ALL.
Pass 2 (exclude): a headline with an exclude tag, or whose text starts
                  with COMMENT, is EXCLUDE together with its subtree.

Subtrees are recognised with a level-keyed ancestor stack, since
headlines only record their level.
"""

from typing import Dict, List, Sequence

from ..models.line import ExportState
from .headline import Headline
from .log import LOG


def ancestors_trim(ancestors: Dict[int, Headline], level: int) -> None:
    """Forget every remembered ancestor at level or deeper"""
    for ancestor_level in [lvl for lvl in ancestors if lvl >= level]:
        del ancestors[ancestor_level]


def selectTags_mark(headlines: Sequence[Headline], select_tags: Sequence[str]) -> None:
    """Pass 1: keep only subtrees carrying a select tag (plus their outline)"""
    if not select_tags or not any(set(h.tags) & set(select_tags) for h in headlines):
        for headline in headlines:
            headline.export_state = ExportState.ALL
        return

    for headline in headlines:
        headline.export_state = ExportState.EXCLUDE

    ancestors: Dict[int, Headline] = {}
    inherit_level = None
    for headline in headlines:
        if inherit_level is not None and headline.level <= inherit_level:
            inherit_level = None
        ancestors_trim(ancestors, headline.level)

        if inherit_level is not None:
            headline.export_state = ExportState.ALL
        elif set(headline.tags) & set(select_tags):
            headline.export_state = ExportState.ALL
            inherit_level = headline.level
            for ancestor in ancestors.values():
                if ancestor.export_state != ExportState.ALL:
                    ancestor.export_state = ExportState.HEADLINE_ONLY

        ancestors[headline.level] = headline


def excludeTags_mark(headlines: Sequence[Headline], exclude_tags: Sequence[str]) -> None:
    """Pass 2: drop subtrees carrying an exclude tag or marked COMMENT"""
    inherit_level = None
    for headline in headlines:
        if inherit_level is not None and headline.level <= inherit_level:
            inherit_level = None

        if inherit_level is not None:
            headline.export_state = ExportState.EXCLUDE
        elif set(headline.tags) & set(exclude_tags) or headline.is_comment_headline:
            headline.export_state = ExportState.EXCLUDE
            inherit_level = headline.level


def trees_markForExport(
    headlines: Sequence[Headline],
    select_tags: Sequence[str] = (),
    exclude_tags: Sequence[str] = (),
) -> List[Headline]:
    """
    Assign an ExportState to every headline

    Args:
        headlines: The document's headlines in order
        select_tags: Tags from #+EXPORT_SELECT_TAGS
        exclude_tags: Tags from #+EXPORT_EXCLUDE_TAGS

    Returns:
        The headlines that produce any output, in document order
    """
    selectTags_mark(headlines, select_tags)
    excludeTags_mark(headlines, exclude_tags)
    exported = [h for h in headlines if h.export_state != ExportState.EXCLUDE]
    LOG(f"Selected {len(exported)} of {len(headlines)} headlines for export", level=2)
    return exported
