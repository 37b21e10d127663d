"""Convert schema spellings to TypeScript names.

Fields, parameters and methods are camelCased from snake_case.
Type names come from definition keys with only the first letter capitalized;
internal underscores are kept.

Examples:
  user_id                             -> userId
  get_user                            -> getUser
  #/definitions/account               -> Account
  #/definitions/leaderboard_record    -> Leaderboard_record
"""

from __future__ import annotations

DEFINITIONS_PREFIX = "#/definitions/"


def to_camel_case(snake: str) -> str:
    """Convert a snake_case identifier to camelCase.

    The first character is lowercased; a character following an underscore
    is uppercased and the underscore dropped. Everything else passes through.
    Runs of underscores collapse, and leading or trailing underscores vanish,
    so the result never contains one.
    """
    out: list[str] = []
    upper_next = False
    for i, ch in enumerate(snake):
        if ch == "_":
            # a leading underscore separates nothing
            upper_next = bool(out)
        elif i == 0:
            out.append(ch.lower())
        elif upper_next:
            out.append(ch.upper())
            upper_next = False
        else:
            out.append(ch)
    return "".join(out)


def capitalize_first(name: str) -> str:
    """Uppercase the first character only."""
    return name[:1].upper() + name[1:]


def ref_to_definition_key(ref: str) -> str:
    """Strip the definitions pointer prefix, if present."""
    if ref.startswith(DEFINITIONS_PREFIX):
        return ref[len(DEFINITIONS_PREFIX):]
    return ref


def ref_to_type_name(ref: str) -> str:
    """Map a $ref pointer to the exported interface name.

    A reference without the ``#/definitions/`` prefix is treated as a bare
    definition key and only capitalized.
    """
    return capitalize_first(ref_to_definition_key(ref))


def definition_type_name(key: str) -> str:
    """Interface name for a definition key."""
    return capitalize_first(key)
