import json
import tempfile
import unittest
from pathlib import Path

from wordsheet.vocabulary import (
    DEFAULT_VOCABULARY,
    ROLE_TRANSLATION,
    ROLE_TRANSLITERATION,
    ROLE_UNKNOWN,
    HeaderVocabulary,
    VocabularyError,
    keyword_matches,
    load_vocabulary,
    normalize_header_value,
)


class NormalizeHeaderValueTests(unittest.TestCase):
    def test_lowercases_and_strips_accents(self):
        self.assertEqual(normalize_header_value("Übersetzung"), "ubersetzung")
        self.assertEqual(normalize_header_value("TRADUZIÓNE"), "traduzione")

    def test_punctuation_becomes_single_spaces(self):
        self.assertEqual(normalize_header_value("  Parola (sconosciuta)!! "), "parola sconosciuta")
        self.assertEqual(normalize_header_value("word/translation"), "word translation")

    def test_non_latin_text_collapses_to_empty(self):
        self.assertEqual(normalize_header_value("привет"), "")

    def test_blank_input(self):
        self.assertEqual(normalize_header_value("   "), "")


class KeywordMatchTests(unittest.TestCase):
    def test_equality_substring_and_token(self):
        self.assertTrue(keyword_matches("word", "word"))
        self.assertTrue(keyword_matches("fremdwort", "fremd"))
        self.assertTrue(keyword_matches("my word list", "word"))

    def test_no_match_and_empty_keyword(self):
        self.assertFalse(keyword_matches("meaning", "word"))
        self.assertFalse(keyword_matches("anything", ""))

    def test_default_vocabulary_roles(self):
        self.assertTrue(DEFAULT_VOCABULARY.matches("parola", ROLE_UNKNOWN))
        self.assertTrue(DEFAULT_VOCABULARY.matches("bedeutung", ROLE_TRANSLATION))
        self.assertTrue(DEFAULT_VOCABULARY.matches("trascrizione", ROLE_TRANSLITERATION))
        self.assertFalse(DEFAULT_VOCABULARY.matches_any("notes"))

    def test_transliteration_header_is_not_a_translation_header(self):
        self.assertFalse(DEFAULT_VOCABULARY.matches("transliteration", ROLE_TRANSLATION))

    def test_unknown_role_raises_key_error(self):
        with self.assertRaises(KeyError):
            DEFAULT_VOCABULARY.keywords("pronunciation")

    def test_keywords_are_normalized_and_deduplicated(self):
        vocabulary = HeaderVocabulary.from_hints({ROLE_TRANSLATION: ["Übersetzung", "ubersetzung", ""]})
        self.assertEqual(vocabulary.translation, ("ubersetzung",))
        self.assertEqual(vocabulary.unknown, ())


class LoadVocabularyTests(unittest.TestCase):
    def write(self, tmpdir: str, name: str, payload) -> Path:
        path = Path(tmpdir) / name
        text = payload if isinstance(payload, str) else json.dumps(payload)
        path.write_text(text, encoding="utf-8")
        return path

    def test_extra_keywords_extend_the_defaults(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = self.write(tmpdir, "vocab.json", {"unknown": ["Palabra"], "translation": ["Traducción"]})
            vocabulary = load_vocabulary(path)

        self.assertIn("palabra", vocabulary.unknown)
        self.assertIn("traduccion", vocabulary.translation)
        self.assertIn("parola", vocabulary.unknown)
        self.assertEqual(vocabulary.transliteration, DEFAULT_VOCABULARY.transliteration)

    def test_empty_object_keeps_defaults(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = self.write(tmpdir, "vocab.json", {})
            self.assertEqual(load_vocabulary(path), DEFAULT_VOCABULARY)

    def test_yaml_is_rejected_with_clear_message(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = self.write(tmpdir, "vocab.yaml", "unknown: [palabra]\n")
            with self.assertRaisesRegex(VocabularyError, "YAML vocabularies are not supported"):
                load_vocabulary(path)

    def test_other_suffix_is_rejected(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = self.write(tmpdir, "vocab.txt", "{}")
            with self.assertRaisesRegex(VocabularyError, r"\.json"):
                load_vocabulary(path)

    def test_missing_file(self):
        with self.assertRaisesRegex(VocabularyError, "not found"):
            load_vocabulary(Path("/nonexistent/vocab.json"))

    def test_invalid_json(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = self.write(tmpdir, "vocab.json", "{not json")
            with self.assertRaisesRegex(VocabularyError, "Invalid vocabulary JSON"):
                load_vocabulary(path)

    def test_root_must_be_object(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = self.write(tmpdir, "vocab.json", ["word"])
            with self.assertRaisesRegex(VocabularyError, "root must be an object"):
                load_vocabulary(path)

    def test_unknown_roles_are_rejected(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = self.write(tmpdir, "vocab.json", {"pronunciation": ["ipa"]})
            with self.assertRaisesRegex(VocabularyError, "Unknown vocabulary roles"):
                load_vocabulary(path)

    def test_role_values_must_be_string_lists(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = self.write(tmpdir, "vocab.json", {"unknown": "palabra"})
            with self.assertRaisesRegex(VocabularyError, "list of strings"):
                load_vocabulary(path)

    def test_vocabulary_error_is_a_value_error(self):
        self.assertTrue(issubclass(VocabularyError, ValueError))


if __name__ == "__main__":
    unittest.main()
