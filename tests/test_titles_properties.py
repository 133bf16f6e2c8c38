"""Property-based tests for title parsing.

Feature: podshelf
Tests that titles in the "Name Number - Title" shape round-trip their
identity and that arbitrary text never breaks the parser.
"""

from __future__ import annotations

from hypothesis import given, settings
from hypothesis import strategies as st

from podshelf.core.titles import parse_title

# =============================================================================
# Strategies for generating test data
# =============================================================================

# Podcast names: words of letters that may start with digits, like "99Vidas"
name_word_strategy = st.from_regex(r"[0-9]{0,3}[A-Za-z][A-Za-z]{0,10}", fullmatch=True)

podcast_name_strategy = st.lists(name_word_strategy, min_size=1, max_size=3).map(" ".join)

episode_number_strategy = st.integers(min_value=0, max_value=100_000)

# Episode titles may contain anything but the pipe character
episode_title_strategy = st.text(
    alphabet=st.characters(blacklist_characters="|", blacklist_categories=("Cs",)),
    max_size=60,
).map(lambda s: f"Ep{s}")

suffix_strategy = st.text(max_size=30)


class TestStructuredTitles:
    """Titles that follow the convention always yield their identity."""

    @settings(max_examples=200)
    @given(
        name=podcast_name_strategy,
        number=episode_number_strategy,
        episode_title=episode_title_strategy,
    )
    def test_name_and_number_are_recovered(self, name: str, number: int, episode_title: str):
        parts = parse_title(f"{name} {number} - {episode_title}")

        assert parts.episode_number == number
        assert parts.podcast_name == name
        assert parts.base_podcast_name == name.split()[0]

    @settings(max_examples=200)
    @given(
        name=podcast_name_strategy,
        number=episode_number_strategy,
        episode_title=episode_title_strategy,
        suffix=suffix_strategy,
    )
    def test_pipe_suffix_never_changes_the_result(
        self, name: str, number: int, episode_title: str, suffix: str
    ):
        bare = parse_title(f"{name} {number} - {episode_title}")
        suffixed = parse_title(f"{name} {number} - {episode_title} | {suffix}")

        assert suffixed == bare


class TestArbitraryTitles:
    """The parser is total over arbitrary input."""

    @settings(max_examples=300)
    @given(title=st.text(max_size=200))
    def test_never_raises(self, title: str):
        parts = parse_title(title)

        if parts.episode_number is not None:
            assert parts.episode_number >= 0
        if parts.base_podcast_name is not None:
            assert parts.podcast_name is not None
            assert parts.podcast_name.startswith(parts.base_podcast_name)

    @settings(max_examples=200)
    @given(title=st.text(alphabet=st.characters(blacklist_characters="-"), max_size=100))
    def test_without_separator_everything_is_none(self, title: str):
        parts = parse_title(title)

        assert parts.podcast_name is None
        assert parts.base_podcast_name is None
        assert parts.episode_number is None
