from collections.abc import Sequence
from dataclasses import dataclass

from lotfill.extraction.models import LocationEntry


@dataclass(frozen=True)
class ChoiceOption:
    """One option of an enumerable choice control."""

    value: str
    text: str


def match_choice(options: Sequence[ChoiceOption], wanted: str | None) -> ChoiceOption | None:
    """Pick the option for ``wanted``, case-insensitively.

    Tiers, first hit wins: exact display text, display text containing the
    needle, exact value, value containing the needle.
    """
    needle = (wanted or "").strip().lower()
    if not needle:
        return None
    tiers = (
        lambda option: option.text.strip().lower() == needle,
        lambda option: needle in option.text.lower(),
        lambda option: option.value.lower() == needle,
        lambda option: needle in option.value.lower(),
    )
    for matches in tiers:
        for option in options:
            if matches(option):
                return option
    return None


def select_location(
    options: Sequence[ChoiceOption], entry: LocationEntry
) -> ChoiceOption | None:
    """Choice for a location: by label first, then by code."""
    return match_choice(options, entry.label) or match_choice(options, entry.code)
