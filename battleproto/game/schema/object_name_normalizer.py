import re

_NON_ID_CHARS = re.compile(r"[^a-z0-9]+")


def to_id(name: object) -> str:
    """Normalize a protocol name to its lowercase alphanumeric id.

    Matches the server's toID() implementation:
    text.toLowerCase().replace(/[^a-z0-9]+/g, '')

    Non-string values are stringified first; None and booleans give "".

    Args:
        name: The name to normalize (e.g., "Farfetch'd", "Will-O-Wisp", "move: Protect")

    Returns:
        Normalized id with only lowercase ASCII letters and digits

    Examples:
        >>> to_id("Farfetch'd")
        'farfetchd'
        >>> to_id("ability: Wonder Guard")
        'abilitywonderguard'
        >>> to_id("Nidoran♀")
        'nidoran'
    """
    if name is None or name is True or name is False:
        return ""
    return _NON_ID_CHARS.sub("", str(name).lower())
