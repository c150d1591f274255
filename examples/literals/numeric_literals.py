"""Recognize numeric literals with optional type suffixes.

The mapper sees the whole prefix on every call, so it can check the
suffix ("10u", "3.5f") against everything before it.
"""

from runeflow import Scanner, TokenizeError

SUFFIXES = {"u": "unsigned", "l": "long", "f": "float"}


def literal(buf: bytes) -> tuple[str, str] | None:
    if not buf[-1:].isspace():
        return None

    text = buf[:-1].decode()
    body, suffix = text, ""
    if text[-1] in SUFFIXES:
        body, suffix = text[:-1], text[-1]

    try:
        float(body)
    except ValueError:
        raise TokenizeError(f"bad numeric literal {text!r}") from None

    if suffix == "f" or "." in body:
        kind = "float"
    else:
        kind = SUFFIXES.get(suffix, "int")
    return body, kind


scanner = Scanner("42 10u 7l 3.5f 2.0 oops", literal)
while scanner.scan():
    print(scanner.token)

if scanner.err() is not None:
    print("error:", scanner.err())
