r"""
textcmd tokenizer.

Grammar
- "quoted value": a run enclosed by a matching pair of double quotes becomes
  one token with the quotes removed (spaces allowed inside).
- bare-token: a maximal run of non-whitespace, non-quote characters.
- zero-length tokens are discarded ('""' yields nothing).

Unbalanced quotes are tolerated: the unmatched (odd, last) quote and all the
text after it are handled as ordinary characters, split on whitespace with the
quote kept verbatim. No escaping is supported.

Example:
    >>> split('cmd --str "a b" -i 3')
    ['cmd', '--str', 'a b', '-i', '3']
    >>> split('say "unterminated quote')
    ['say', '"unterminated', 'quote']
"""
import re

_TOKEN = re.compile(r'"(?P<quoted>[^"]*)"|(?P<bare>[^"\s]+)')


def split(text, /):
    """
    split a raw line into word tokens, grouping double-quoted spans.
    """
    if not isinstance(text, str):
        raise TypeError("split() argument must be a string")

    tail = []
    if text.count('"') % 2:
        # the last quote has no partner: everything from it on is plain text
        pivot = text.rindex('"')
        text, tail = text[:pivot], text[pivot:].split()

    tokens = []
    for match in _TOKEN.finditer(text):
        if token := match["quoted"] or match["bare"]:
            tokens.append(token)
    return tokens + tail


__all__ = (
    "split",
)
