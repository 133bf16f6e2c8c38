"""Podcast and episode identity parsing from free-text titles.

Titles are expected to look like ``"99Vidas 31 - Episode Title"``, optionally
followed by a ``" | Podcast Name"`` suffix. Titles that do not follow this
convention are not an error: the derived fields are simply ``None``.
"""

import re

from podshelf.core.models import TitleParts

SUFFIX_DELIMITER = "|"
TITLE_SEPARATOR = " - "

_DIGIT_RUN = re.compile(r"\d+")
_TRAILING_DIGITS = re.compile(r"\d+$")


def strip_suffix(title: str | None) -> str:
    """Drop everything from the first pipe character onward.

    The remainder is trimmed only when a suffix was cut off; titles without a
    pipe are returned as they are.
    """
    if not title:
        return ""
    if SUFFIX_DELIMITER not in title:
        return title
    return title.split(SUFFIX_DELIMITER, 1)[0].strip()


def base_name(name: str | None) -> str | None:
    """Return the first whitespace-delimited token of a podcast name."""
    if not name:
        return None
    tokens = name.split()
    return tokens[0] if tokens else None


def extract_episode_number(podcast_part: str) -> int | None:
    """Return the last digit run found anywhere in the podcast part."""
    numbers = _DIGIT_RUN.findall(podcast_part)
    if not numbers:
        return None
    return int(numbers[-1])


def extract_podcast_name(podcast_part: str) -> str | None:
    """Return the podcast part with an end-anchored digit run removed.

    Only a trailing run is stripped, so ``"Show 2 Extra"`` keeps its digits
    even though ``extract_episode_number`` would report 2 for it.
    """
    name = _TRAILING_DIGITS.sub("", podcast_part.strip()).strip()
    return name or None


def parse_title(raw_title: str | None) -> TitleParts:
    """
    Derive podcast name, base name and episode number from an episode title.

    Args:
        raw_title: Free-text title, e.g. "99Vidas 21 - Alex Kidd | 99Vidas Podcast"

    Returns:
        TitleParts with every field None when the title has no " - " separator
    """
    main_title = strip_suffix(raw_title)
    if TITLE_SEPARATOR not in main_title:
        return TitleParts()

    podcast_part = main_title.split(TITLE_SEPARATOR, 1)[0].strip()
    podcast_name = extract_podcast_name(podcast_part)

    return TitleParts(
        podcast_name=podcast_name,
        base_podcast_name=base_name(podcast_name),
        episode_number=extract_episode_number(podcast_part),
    )


def parse_podcast_title(feed_title: str | None) -> TitleParts:
    """
    Derive the identity of a whole podcast from its feed title.

    Feed titles rarely carry the " - " separator, so when ``parse_title``
    cannot classify the title the suffix-stripped title itself is used as the
    podcast name and its first word as the base name.
    """
    parts = parse_title(feed_title)
    if parts.podcast_name:
        return parts

    main_title = strip_suffix(feed_title)
    podcast_name = extract_podcast_name(main_title) or main_title.strip() or None
    return TitleParts(
        podcast_name=podcast_name,
        base_podcast_name=base_name(main_title),
        episode_number=None,
    )
