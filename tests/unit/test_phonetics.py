"""
Unit tests for the phonetic keyword normaliser.
"""

from unittest.mock import patch

from challenge_search.phonetics import PhoneticNormalizer


class TestWords:
    """Word splitting and stop word removal."""

    def test_lowercases_and_dedupes(self):
        normalizer = PhoneticNormalizer()
        assert normalizer.words("Ruby ruby RUBY rails") == ["ruby", "rails"]

    def test_drops_stop_words(self):
        normalizer = PhoneticNormalizer()
        assert normalizer.words("Build the app for this Community") == ["build", "app", "community"]

    def test_accepts_several_texts_and_skips_none(self):
        normalizer = PhoneticNormalizer()
        assert normalizer.words("Heroku", None, "", "heroku java") == ["heroku", "java"]

    def test_custom_stop_words(self):
        normalizer = PhoneticNormalizer(stop_words=["ruby"])
        assert normalizer.words("the ruby app") == ["the", "app"]


class TestCodes:
    """Metaphone encoding."""

    def test_similar_sounding_words_share_code(self):
        normalizer = PhoneticNormalizer()
        assert normalizer.codes("ruby") == normalizer.codes("rubee")
        assert normalizer.codes("smith") == normalizer.codes("smyth")

    def test_different_words_differ(self):
        normalizer = PhoneticNormalizer()
        assert normalizer.codes("ruby") != normalizer.codes("java")

    def test_codes_are_deduplicated(self):
        normalizer = PhoneticNormalizer()
        codes = normalizer.codes("ruby rubee")
        assert len(codes) == 1

    def test_stop_words_produce_no_codes(self):
        normalizer = PhoneticNormalizer()
        assert normalizer.codes("the a an") == []

    def test_words_without_code_are_dropped(self):
        normalizer = PhoneticNormalizer()
        with patch("challenge_search.phonetics.jellyfish.metaphone", side_effect=["", "RB"]):
            assert normalizer.codes("xx ruby") == ["RB"]
