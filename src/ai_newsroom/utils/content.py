import re

_LINK = re.compile(r'\[([^\]]+)\]\([^\)]+\)')
_HEADER = re.compile(r'#+')
_BULLET = re.compile(r'[-*]\s')
_SPECIAL = re.compile(r'[^\w\s-]')


def count_words(markdown: str) -> int:
    """Count words in a markdown article body, ignoring link targets and markup."""
    text = _LINK.sub(r'\1', markdown)
    text = _HEADER.sub('', text)
    text = _BULLET.sub('', text)
    text = _SPECIAL.sub('', text)
    return len(text.split())
