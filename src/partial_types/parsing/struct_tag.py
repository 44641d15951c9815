"""Parsing of Go struct tags (``key:"value" other:"value"``)."""

from __future__ import annotations

from partial_types.parsing.go_lexer import unquote_go_string


def parse_struct_tag(tag: str) -> dict[str, str]:
    """Split a struct tag into its key/value pairs.

    Follows the conventional format read by Go's ``reflect.StructTag``:
    space-separated ``key:"value"`` pairs with interpreted-string values.
    The first occurrence of a key wins. Parsing stops at the first
    malformed pair, keeping what was read before it.
    """
    pairs: dict[str, str] = {}
    rest = tag
    while rest:
        rest = rest.lstrip(" ")
        if not rest:
            break

        i = 0
        while i < len(rest) and rest[i] > " " and rest[i] not in ':"\x7f':
            i += 1
        if i == 0 or i + 1 >= len(rest) or rest[i] != ":" or rest[i + 1] != '"':
            break
        name = rest[:i]
        rest = rest[i + 1:]

        # Scan the quoted value
        i = 1
        while i < len(rest) and rest[i] != '"':
            if rest[i] == "\\":
                i += 1
            i += 1
        if i >= len(rest):
            break
        quoted = rest[: i + 1]
        rest = rest[i + 1:]

        try:
            value = unquote_go_string(quoted)
        except ValueError:
            break
        pairs.setdefault(name, value)
    return pairs
