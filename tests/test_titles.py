"""Tests for title parsing."""

import pytest

from podshelf.core.models import TitleParts
from podshelf.core.titles import (
    base_name,
    extract_episode_number,
    extract_podcast_name,
    parse_podcast_title,
    parse_title,
    strip_suffix,
)


class TestParseTitle:
    """Tests for parse_title."""

    def test_name_and_number(self):
        """Test the standard "Name Number - Title" shape."""
        assert parse_title("99Vidas 31 - Some Title") == TitleParts(
            podcast_name="99Vidas",
            base_podcast_name="99Vidas",
            episode_number=31,
        )

    def test_pipe_suffix_is_stripped(self):
        """Test that a trailing "| Podcast Name" does not leak into the result."""
        parts = parse_title("99Vidas 21 - Alex Kidd e seus jogos | 99Vidas Podcast")

        assert parts.podcast_name == "99Vidas"
        assert parts.base_podcast_name == "99Vidas"
        assert parts.episode_number == 21

    def test_title_without_separator(self):
        """Test that unstructured titles yield no fields."""
        assert parse_title("Random Title With No Dashes") == TitleParts()

    def test_separator_only_after_pipe(self):
        """Test that a separator inside the stripped suffix is ignored."""
        assert parse_title("Bonus episode | 99Vidas - Games") == TitleParts()

    def test_hyphen_without_spaces_is_not_a_separator(self):
        assert parse_title("Spider-Man 2") == TitleParts()

    @pytest.mark.parametrize("title", [None, "", "   ", "|", " - "])
    def test_empty_inputs(self, title):
        """Test that empty-ish titles never raise."""
        parts = parse_title(title)
        assert parts.episode_number is None
        assert parts.podcast_name is None

    def test_multi_word_podcast_name(self):
        parts = parse_title("Nerdcast Especial 12 - Tema")

        assert parts.podcast_name == "Nerdcast Especial"
        assert parts.base_podcast_name == "Nerdcast"
        assert parts.episode_number == 12

    def test_no_number(self):
        """Test a structured title without any digits."""
        parts = parse_title("Nerdcast - Tema")

        assert parts.podcast_name == "Nerdcast"
        assert parts.base_podcast_name == "Nerdcast"
        assert parts.episode_number is None

    def test_number_only(self):
        """Test a podcast part made of the episode number alone."""
        parts = parse_title("42 - The Answer")

        assert parts.episode_number == 42
        assert parts.podcast_name is None
        assert parts.base_podcast_name is None

    def test_only_first_separator_counts(self):
        parts = parse_title("Show 7 - Part 1 - Part 2")

        assert parts.podcast_name == "Show"
        assert parts.episode_number == 7

    def test_scanning_and_trailing_rules_differ(self):
        """Test that the number scan and the name strip are independent rules.

        The episode number is the last digit run anywhere, while the name only
        loses an end-anchored run.
        """
        parts = parse_title("Show 2 Extra - Title")

        assert parts.episode_number == 2
        assert parts.podcast_name == "Show 2 Extra"

    def test_leading_zeros(self):
        assert parse_title("99Vidas 007 - Bond").episode_number == 7

    def test_empty_episode_title_after_separator(self):
        """Test that trailing whitespace without a pipe keeps the separator intact."""
        assert parse_title("99Vidas 5 - ") == TitleParts(
            podcast_name="99Vidas",
            base_podcast_name="99Vidas",
            episode_number=5,
        )


class TestHelpers:
    """Tests for the individual parsing helpers."""

    def test_strip_suffix(self):
        assert strip_suffix("Title | Podcast | Network") == "Title"
        assert strip_suffix("Title | Podcast ") == "Title"
        assert strip_suffix("No suffix ") == "No suffix "
        assert strip_suffix(None) == ""

    def test_base_name(self):
        assert base_name("99Vidas Podcast") == "99Vidas"
        assert base_name("  Nerdcast  ") == "Nerdcast"
        assert base_name("") is None
        assert base_name(None) is None

    def test_extract_episode_number(self):
        assert extract_episode_number("99Vidas 31") == 31
        assert extract_episode_number("99Vidas") == 99
        assert extract_episode_number("Vidas") is None

    def test_extract_podcast_name(self):
        assert extract_podcast_name("99Vidas 31") == "99Vidas"
        assert extract_podcast_name("99Vidas31") == "99Vidas"
        assert extract_podcast_name("31") is None


class TestParsePodcastTitle:
    """Tests for deriving podcast identity from a feed title."""

    def test_plain_feed_title(self):
        """Test the fallback to the full title when there is no separator."""
        parts = parse_podcast_title("99Vidas")

        assert parts.podcast_name == "99Vidas"
        assert parts.base_podcast_name == "99Vidas"
        assert parts.episode_number is None

    def test_feed_title_with_suffix(self):
        parts = parse_podcast_title("Nerdcast | Jovem Nerd")

        assert parts.podcast_name == "Nerdcast"
        assert parts.base_podcast_name == "Nerdcast"

    def test_multi_word_feed_title(self):
        parts = parse_podcast_title("The Daily Show Podcast")

        assert parts.podcast_name == "The Daily Show Podcast"
        assert parts.base_podcast_name == "The"

    def test_structured_feed_title_uses_parser(self):
        parts = parse_podcast_title("99Vidas 1 - Trailer")

        assert parts.podcast_name == "99Vidas"
        assert parts.episode_number == 1

    def test_empty_feed_title(self):
        assert parse_podcast_title("") == TitleParts()
        assert parse_podcast_title(None) == TitleParts()
