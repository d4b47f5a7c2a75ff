from __future__ import annotations

import threading
from collections import OrderedDict
from typing import Optional, Tuple

import config
from apimodel.model import Item, ParameterItem

RETURN_TAG = "@return"


def _starts_with_ci(text: str, prefix: str, at: int) -> bool:
    if at < 0:
        return False
    return text[at:at + len(prefix)].lower() == prefix.lower()


def _find_param_start(doc: str, name: str) -> int:
    """
    Index of the '@' of the `@param <name>` label, or -1.
    Occurrences of the name in prose (not right after @param, ignoring
    '*' and whitespace) are skipped.
    """
    if not name:
        return -1
    cursor = 0
    while True:
        begin = doc.find(name, cursor)
        if begin == -1:
            return -1
        for i in range(begin - 1, -1, -1):
            c = doc[i]
            if c != "*" and not c.isspace():
                if c == "m" and _starts_with_ci(doc, "@param", i - 5):
                    return i - 5
                break
        cursor = begin + len(name)


def _find_end(doc: str, begin: int) -> int:
    # first block tag at a (decoration-adjusted) line start, or any @param/@return
    is_line_prefix = False
    for i in range(begin + 1, len(doc)):
        c = doc[i]
        if c == "@" and (
            is_line_prefix
            or _starts_with_ci(doc, "@param", i)
            or _starts_with_ci(doc, RETURN_TAG, i)
        ):
            return i
        if c == "\n":
            is_line_prefix = True
        elif c != "*" and not c.isspace():
            is_line_prefix = False
    return len(doc)


def find_tag_documentation(doc: str, tag: Optional[str]) -> str:
    """
    Return the part of a javadoc block describing `tag`.

    tag=None        -> whole block
    tag="@return"   -> the @return section
    tag=<name>      -> the `@param <name>` section
    Anything missing yields "".
    """
    if not doc or doc.isspace():
        return ""
    if tag is None:
        return doc

    if tag == RETURN_TAG:
        begin = doc.find(RETURN_TAG)
    else:
        begin = _find_param_start(doc, tag)
    if begin == -1:
        return ""

    return doc[begin:_find_end(doc, begin)]


def item_tag_documentation(item: Item, tag: Optional[str]) -> str:
    # parameter docs are the @param section of the containing method
    if isinstance(item, ParameterItem):
        return find_tag_documentation(item.containing_method.documentation, item.name)
    return find_tag_documentation(item.documentation, tag)


class DocumentationCache:
    """
    Small LRU in front of item_tag_documentation, keyed by (item id, tag).
    With the default capacity of 1 it serves the back-to-back lookups the
    rule engine does for the same item.
    """

    def __init__(self, capacity: int | None = None) -> None:
        self.capacity = max(1, capacity if capacity is not None else config.DOC_CACHE_SIZE)
        self._entries: "OrderedDict[Tuple[str, Optional[str]], str]" = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get(self, item: Item, tag: Optional[str]) -> str:
        key = (item.id, tag)
        with self._lock:
            if key in self._entries:
                self._entries.move_to_end(key)
                self.hits += 1
                return self._entries[key]

        doc = item_tag_documentation(item, tag)

        with self._lock:
            self.misses += 1
            self._entries[key] = doc
            self._entries.move_to_end(key)
            while len(self._entries) > self.capacity:
                self._entries.popitem(last=False)
        return doc

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
