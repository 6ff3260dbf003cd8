from django.test import SimpleTestCase

from riddles.puzzles import (
    EmptyResultError,
    IngestionError,
    ParseError,
    ParserRegistry,
    PuzzleItem,
    decode_upload,
    dedupe,
    format_from_filename,
    parse,
)


class TextFormatTests(SimpleTestCase):
    def test_words_and_hints(self):
        raw = "dragon | a mythical animal\r\n\r\n  mouse  \nice cream|cold | sweet\n"
        self.assertEqual(
            parse(raw, "text"),
            [
                PuzzleItem("dragon", "a mythical animal"),
                PuzzleItem("mouse", None),
                PuzzleItem("ice cream", "cold | sweet"),
            ],
        )

    def test_empty_word_lines_are_dropped(self):
        self.assertEqual(parse("| orphan hint\npanda |", "text"), [PuzzleItem("panda", None)])

    def test_blank_file(self):
        with self.assertRaises(EmptyResultError):
            parse(" \n\n\t\n", "text")


class CsvFormatTests(SimpleTestCase):
    def test_header_is_skipped(self):
        raw = "Word,Hint\npanda, animal \nforest,many trees\n"
        self.assertEqual(
            parse(raw, "csv"),
            [PuzzleItem("panda", "animal"), PuzzleItem("forest", "many trees")],
        )

    def test_delimiter_is_detected_per_line(self):
        raw = "panda;bear, mostly\nlion\tbig cat\nsing\n"
        self.assertEqual(
            parse(raw, "csv"),
            [PuzzleItem("panda", "bear, mostly"), PuzzleItem("lion", "big cat"), PuzzleItem("sing", None)],
        )

    def test_first_row_without_header(self):
        self.assertEqual(parse("owl,bird\n", "csv"), [PuzzleItem("owl", "bird")])

    def test_rows_without_word_are_dropped(self):
        self.assertEqual(parse(",no word\nowl,\n", "csv"), [PuzzleItem("owl", None)])

    def test_crlf_line_endings(self):
        self.assertEqual(parse("word,hint\r\nowl,bird\r\n", "csv"), [PuzzleItem("owl", "bird")])

    def test_header_only(self):
        with self.assertRaises(EmptyResultError):
            parse("word,hint\n", "csv")


class JsonFormatTests(SimpleTestCase):
    def test_objects(self):
        raw = '[{"word": " dragon ", "hint": "fire"}, {"word": "mouse"}, {"word": ""}, {"hint": "x"}, 7, {"word": 42}]'
        self.assertEqual(
            parse(raw, "json"),
            [PuzzleItem("dragon", "fire"), PuzzleItem("mouse", None), PuzzleItem("42", None)],
        )

    def test_hints_are_trimmed(self):
        raw = '[{"word": "owl", "hint": "  "}, {"word": "lion", "hint": " big cat "}, {"word": "bat", "hint": null}]'
        self.assertEqual(
            parse(raw, "json"),
            [PuzzleItem("owl", None), PuzzleItem("lion", "big cat"), PuzzleItem("bat", None)],
        )

    def test_invalid_json(self):
        with self.assertRaises(ParseError):
            parse('[{"word": "dragon"', "json")

    def test_not_an_array(self):
        with self.assertRaises(ParseError):
            parse('{"word": "dragon"}', "json")

    def test_array_without_words(self):
        with self.assertRaises(EmptyResultError):
            parse('[{"hint": "nothing"}]', "json")

    def test_errors_share_a_base_class(self):
        self.assertTrue(issubclass(ParseError, IngestionError))
        self.assertTrue(issubclass(EmptyResultError, IngestionError))
        self.assertFalse(issubclass(EmptyResultError, ParseError))


class ParserRegistryTests(SimpleTestCase):
    def test_lookup_is_case_insensitive(self):
        self.assertIs(ParserRegistry.get(" CSV "), ParserRegistry.get("csv"))
        self.assertEqual(sorted(ParserRegistry.formats()), ["csv", "json", "text"])

    def test_unknown_format(self):
        with self.assertRaises(KeyError):
            ParserRegistry.get("xml")
        with self.assertRaises(ParseError):
            parse("dragon", "xml")

    def test_register_requires_a_name(self):
        with self.assertRaises(ValueError):
            ParserRegistry.register(" ", lambda raw: [])


class DedupeTests(SimpleTestCase):
    def test_case_variants_collapse_to_first(self):
        items = [PuzzleItem("Panda", "first"), PuzzleItem("PANDA", "second"), PuzzleItem("pan-da", "third")]
        self.assertEqual(dedupe(items), [PuzzleItem("PANDA", "first")])

    def test_display_word_keeps_punctuation(self):
        self.assertEqual(dedupe([PuzzleItem("Mother-in-law")]), [PuzzleItem("MOTHER-IN-LAW")])

    def test_empty_keys_are_dropped(self):
        items = [PuzzleItem("--"), PuzzleItem("owl", "bird"), PuzzleItem("(...)")]
        self.assertEqual(dedupe(items), [PuzzleItem("OWL", "bird")])

    def test_cap_applies_after_dedup(self):
        words = [f"word{chr(ord('a') + n)}" for n in range(25)]
        items = [PuzzleItem(words[0])] * 3 + [PuzzleItem(w) for w in words]
        result = dedupe(items)
        self.assertEqual(len(result), 20)
        self.assertEqual([i.word for i in result], [w.upper() for w in words[:20]])

    def test_cap_from_text_file(self):
        raw = "\n".join(f"item{chr(ord('a') + n)} | hint {n}" for n in range(25))
        result = dedupe(parse(raw, "text"), 20)
        self.assertEqual(len(result), 20)
        self.assertEqual(result[0], PuzzleItem("ITEMA", "hint 0"))
        self.assertEqual(result[-1], PuzzleItem("ITEMT", "hint 19"))

    def test_custom_cap(self):
        self.assertEqual(len(dedupe([PuzzleItem("a"), PuzzleItem("b"), PuzzleItem("c")], 2)), 2)


class UploadHelperTests(SimpleTestCase):
    def test_format_from_filename(self):
        self.assertEqual(format_from_filename("words.JSON"), "json")
        self.assertEqual(format_from_filename("list.csv"), "csv")
        self.assertEqual(format_from_filename("list.txt"), "text")
        self.assertEqual(format_from_filename("README"), "text")
        self.assertEqual(format_from_filename(""), "text")

    def test_decode_upload(self):
        self.assertEqual(decode_upload("\ufeffёж | hedgehog".encode("utf-8")), "ёж | hedgehog")
        with self.assertRaises(ParseError):
            decode_upload(b"\xff\xfe\x00bad")

    def test_item_dict(self):
        item = PuzzleItem("OWL", "bird")
        self.assertEqual(PuzzleItem.from_dict(item.to_dict()), item)
        self.assertEqual(PuzzleItem("OWL").to_dict(), {"word": "OWL"})
