"""Split text into words in a few lines — zero config, zero deps."""

from runeflow import tokenize


def words(buf: bytes) -> str | None:
    return buf[:-1].decode() if buf[-1:].isspace() else None


print(list(tokenize("  the quick\tbrown\n fox", words)))
