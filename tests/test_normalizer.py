"""
Tests for name normalization: the rules every renamed file and folder goes through.
"""
import pytest

from onetrack.core.normalizer import normalize_dirname, normalize_filename, normalize_name


class TestNormalizeName:

    @pytest.mark.parametrize("raw, expected", [
        ("weird!!name", "Weirdname"),
        ("THE  best   of", "The Best Of"),
        ("(live) at wembley", "Live At Wembley"),
        ("don't stop - live", "Don't Stop - Live"),
        ("01 song", "01 Song"),
        ("my_song", "My_song"),
        ("  padded  ", "Padded"),
        ("a<b>c:d|e?f*g", "Abcdefg"),
        ("tab\tand\nnewline", "Tabandnewline"),
        ("café del mar", "Café Del Mar"),
    ])
    def test_examples(self, raw, expected):
        assert normalize_name(raw) == expected

    def test_decomposed_accents_are_composed_first(self):
        """'e' + combining acute must survive the character filter as 'é'."""
        assert normalize_name("cafe\u0301") == "Caf\u00e9"

    def test_empty_input(self):
        assert normalize_name("") == ""

    def test_may_become_empty(self):
        assert normalize_name("!!!") == ""
        assert normalize_name('<>:"/\\|?*') == ""

    @pytest.mark.parametrize("raw", [
        "weird!!name",
        "  mIxEd   CaSe  (remix) ",
        "AC/DC - back in black",
        "x !! y",
        "über-ALLES",
        "o'NEIL's  tune",
        "[2003] -- best of",
    ])
    def test_idempotent(self, raw):
        """Normalizing an already normalized name changes nothing."""
        once = normalize_name(raw)
        assert normalize_name(once) == once

    def test_modifier_letter_is_not_a_word_start(self):
        """'ŉ' title-cases to U+02BC + 'N'; the apostrophe-like letter must not take the capital later."""
        assert normalize_name("ŉx") == "ʼNx"
        assert normalize_name("ʼnx") == "ʼNx"

    def test_idempotent_across_the_bmp(self):
        unstable = []
        for cp in range(0x20, 0x3000):
            raw = chr(cp) + "x"
            once = normalize_name(raw)
            if normalize_name(once) != once:
                unstable.append((hex(cp), raw, once))
        assert unstable == []

    def test_result_has_no_leading_trailing_or_double_whitespace(self):
        result = normalize_name(" a  !  b ")
        assert result == result.strip()
        assert "  " not in result


class TestNormalizeFilename:

    def test_extension_is_lowercased_and_kept(self):
        assert normalize_filename("weird!!name.MP3") == "Weirdname.mp3"
        assert normalize_filename("THE  best   of.FLAC") == "The Best Of.flac"

    def test_only_last_extension_is_split(self):
        assert normalize_filename("live.at.wembley.mp3") == "Live.at.wembley.mp3"

    def test_empty_base_keeps_original_name(self):
        assert normalize_filename("!!!.mp3") == "!!!.mp3"

    def test_canonical_name_is_unchanged(self):
        assert normalize_filename("Track.mp3") == "Track.mp3"

    def test_idempotent(self):
        once = normalize_filename("  my   FAVOURITE!! song.Ogg")
        assert normalize_filename(once) == once


class TestNormalizeDirname:

    def test_directory_names(self):
        assert normalize_dirname("my  album") == "My Album"
        assert normalize_dirname("PINK FLOYD") == "Pink Floyd"

    def test_empty_result_keeps_original(self):
        assert normalize_dirname("???") == "???"
