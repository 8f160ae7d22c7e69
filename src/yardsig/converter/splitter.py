"""
Splitting of type parameter lists.

YARD writes generic parameters between brackets, separated either by commas
(``Hash<Symbol, String>``) or by a hash rocket (``Hash{Symbol => String}``).
The splitter walks the text once, tracking how deeply nested it is in
``<>``, ``{}`` and ``()``, and only splits at the outermost level.
"""

from __future__ import annotations


OPENING_BRACKETS = "<{("
CLOSING_BRACKETS = ">})"
MATCHING_BRACKETS = {"<": ">", "{": "}", "(": ")"}


def _bracket_delta(text: str, index: int) -> int:
    """How the character at ``index`` changes the nesting level."""
    char = text[index]
    if char in OPENING_BRACKETS:
        return 1
    # The ">" of a hash rocket doesn't close anything
    if char in CLOSING_BRACKETS and not (index > 0 and text[index - 1] == "="):
        return -1
    return 0


def _top_level_rockets(params: str) -> list[int]:
    """Indices of the hash rockets at the outermost level."""
    rockets = []
    depth = 0
    for index, char in enumerate(params):
        depth += _bracket_delta(params, index)
        if depth == 0 and char == "=" and params[index + 1 : index + 2] == ">":
            rockets.append(index)
    return rockets


def split_type_parameters(params: str) -> list[str]:
    """
    Split a string of type parameters (without the outer brackets).

    Commas at the outermost level separate parameters. Hash rockets at the
    outermost level take precedence over commas: each one closes a group, so
    ``"K1, K2 => V1, V2"`` gives ``["K1, K2", "V1, V2"]`` and ``"A => B => C"``
    gives three groups. The caller treats a group that still holds several
    comma-separated parameters as a union of them.

    Args:
        params: The type parameters, e.g. ``"String, Hash<Symbol, Integer>"``

    Returns:
        The whitespace-trimmed parameters
    """
    rockets = _top_level_rockets(params)
    if rockets:
        starts = [0] + [index + 2 for index in rockets]
        ends = rockets + [len(params)]
        return [params[start:end].strip() for start, end in zip(starts, ends)]

    result: list[str] = []
    buffer: list[str] = []
    depth = 0

    for index, char in enumerate(params):
        depth += _bracket_delta(params, index)
        if depth == 0 and char == ",":
            result.append("".join(buffer).strip())
            buffer = []
        else:
            buffer.append(char)

    result.append("".join(buffer).strip())
    return result


def enclosing_bracket_end(text: str, open_index: int) -> int:
    """
    Find the index of the bracket closing the one at ``open_index``.

    Nesting is tracked the same way as in ``split_type_parameters``. Returns
    -1 if the bracket is never closed or the closing character doesn't match
    the opening one.
    """
    opening = text[open_index]
    depth = 0
    for index in range(open_index, len(text)):
        depth += _bracket_delta(text, index)
        if depth == 0:
            return index if text[index] == MATCHING_BRACKETS.get(opening) else -1
    return -1


def is_enclosed(text: str, open_index: int) -> bool:
    """Whether the bracket at ``open_index`` is closed by the last character."""
    return enclosing_bracket_end(text, open_index) == len(text) - 1
