from __future__ import annotations


def format_elapsed_announcement(minutes: int, seconds: int) -> str:
    """Build the spoken elapsed-time phrase, e.g. `1 minute and thirty seconds`.

    Returns an empty string when there is nothing to announce.
    """
    phrase = ""
    if minutes > 0:
        phrase += f"{minutes} minute{'' if minutes == 1 else 's'}"
    if seconds == 30:
        phrase += " and thirty seconds"
    return phrase
