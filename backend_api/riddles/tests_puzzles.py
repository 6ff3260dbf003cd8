import random
from collections import Counter

from django.test import SimpleTestCase

from riddles.puzzles import PuzzleEngine, PuzzleStatus, is_letter, make_bank, normalize, reveal_next_letter
from riddles.puzzles.bank import FILLER_ALPHABET, bank_size


def _engine(word, fillers="XYZWQPKJ"):
    """Engine with a predictable bank: the target's letters followed by fillers."""
    tiles = list(normalize(word).upper()) + list(fillers)
    return PuzzleEngine(word, bank=tiles, rng=random.Random(0))


def _pick_letters(engine, letters):
    for ch in letters:
        assert engine.pick(engine.bank.index(ch)), ch


class NormalizerTests(SimpleTestCase):
    def test_strips_whitespace_and_punctuation(self):
        self.assertEqual(normalize("Mother-in-Law"), "motherinlaw")
        self.assertEqual(normalize("  ice   cream "), "icecream")
        self.assertEqual(normalize("«Don't» (stop), _now_.`?!"), "dontstopnow")

    def test_folds_cyrillic(self):
        self.assertEqual(normalize("Ёлка Новая!"), "ёлкановая")

    def test_keeps_other_symbols(self):
        self.assertEqual(normalize("R2-D2:"), "r2d2:")

    def test_empty(self):
        self.assertEqual(normalize(""), "")
        self.assertEqual(normalize(" - _ "), "")

    def test_idempotent(self):
        for s in ["DRAGON", "Mother-in-Law", "  Ёж, ёжик ", "a_b`c", "«Ω» 42", ""]:
            self.assertEqual(normalize(normalize(s)), normalize(s))

    def test_letter_classes(self):
        for ch in "aZяЯёЁ":
            self.assertTrue(is_letter(ch), ch)
        for ch in ["-", " ", "1", "é", "", "ab"]:
            self.assertFalse(is_letter(ch), ch)


class BankTests(SimpleTestCase):
    def test_size_is_clamped(self):
        self.assertEqual(bank_size(0), 12)
        self.assertEqual(bank_size(6), 12)
        self.assertEqual(bank_size(8), 14)
        self.assertEqual(bank_size(10), 16)
        self.assertEqual(bank_size(15), 16)

    def test_contains_every_target_letter(self):
        rng = random.Random(3)
        for word in ["dragon", "motherinlaw", "ёж", "sing"]:
            bank = make_bank(word, rng=rng)
            self.assertGreaterEqual(len(bank), 12)
            self.assertLessEqual(len(bank), 16)
            missing = Counter(word.upper()) - Counter(bank)
            self.assertFalse(missing, word)

    def test_fillers_come_from_both_alphabets(self):
        bank = make_bank("", rng=random.Random(1))
        self.assertEqual(len(bank), 12)
        for tile in bank:
            self.assertIn(tile, FILLER_ALPHABET)

    def test_long_targets_keep_all_letters(self):
        word = "pneumonoultramicroscopic"
        bank = make_bank(word, rng=random.Random(5))
        self.assertEqual(Counter(bank), Counter(word.upper()))

    def test_seeded_rng_is_reproducible(self):
        self.assertEqual(make_bank("cat", rng=random.Random(7)), make_bank("cat", rng=random.Random(7)))


class PuzzleEngineTests(SimpleTestCase):
    def test_correct_answer(self):
        engine = _engine("DRAGON")
        _pick_letters(engine, "DRAGON")
        self.assertEqual(engine.check(), PuzzleStatus.CORRECT)

    def test_short_answer_is_wrong_until_completed(self):
        engine = _engine("DRAGON")
        _pick_letters(engine, "DRAGO")
        self.assertEqual(engine.check(), PuzzleStatus.WRONG)
        self.assertEqual(engine.check(), PuzzleStatus.WRONG)

        self.assertTrue(engine.pick(engine.bank.index("N")))
        self.assertEqual(engine.status, PuzzleStatus.IDLE)
        self.assertEqual(engine.check(), PuzzleStatus.CORRECT)

    def test_letter_order_matters(self):
        engine = _engine("DRAGON")
        _pick_letters(engine, "GRANDO")
        self.assertEqual(engine.check(), PuzzleStatus.WRONG)

    def test_punctuation_is_not_a_slot(self):
        engine = _engine("MOTHER-IN-LAW")
        self.assertEqual(engine.letter_count, 11)
        self.assertEqual([s.char for s in engine.slots() if not s.is_letter], ["-", "-"])

        _pick_letters(engine, "MOTHERINLAW")
        self.assertFalse(engine.pick(engine.bank.index("X")))
        self.assertEqual(engine.display()[6], "-")
        self.assertEqual(engine.candidate(), "MOTHER-IN-LAW")
        self.assertEqual(engine.check(), PuzzleStatus.CORRECT)

    def test_spaces_and_case_are_ignored(self):
        engine = _engine("Ice cream")
        _pick_letters(engine, "ICECREAM")
        self.assertEqual(engine.check(), PuzzleStatus.CORRECT)

    def test_pick_then_remove_restores_bank(self):
        engine = _engine("FOREST")
        before = list(engine.bank)
        for index in (0, 5, 2, 9):
            self.assertTrue(engine.pick(index))
        self.assertEqual(sum(1 for t in engine.bank if t is None), 4)
        for _ in range(4):
            self.assertTrue(engine.remove_last())
        self.assertEqual(engine.bank, before)
        self.assertEqual(engine.picked, [])
        self.assertFalse(engine.remove_last())

    def test_tiles_are_conserved(self):
        engine = _engine("FRIEND")
        original = Counter(engine.bank)
        for index in (3, 1, 7):
            engine.pick(index)
        engine.remove_last()
        engine.pick(10)
        current = Counter(t for t in engine.bank if t) + Counter(p.char for p in engine.picked)
        self.assertEqual(current, original)

    def test_invalid_picks_are_ignored(self):
        engine = _engine("SING")
        self.assertFalse(engine.pick(-1))
        self.assertFalse(engine.pick(len(engine.bank)))
        self.assertTrue(engine.pick(0))
        self.assertFalse(engine.pick(0))
        self.assertEqual(len(engine.picked), 1)

    def test_pick_stops_when_slots_are_full(self):
        engine = _engine("SING")
        engine.hint()
        for index in range(3):
            self.assertTrue(engine.pick(index + 4))
        self.assertFalse(engine.pick(10))
        self.assertEqual(engine.filled_count, engine.letter_count)

    def test_solved_puzzle_is_locked(self):
        engine = _engine("SING")
        _pick_letters(engine, "SING")
        engine.check()
        bank = list(engine.bank)
        self.assertFalse(engine.remove_last())
        self.assertFalse(engine.pick(4))
        self.assertEqual(engine.bank, bank)
        self.assertEqual(engine.status, PuzzleStatus.CORRECT)

    def test_hint_reveals_left_to_right_and_caps(self):
        engine = _engine("MOTHER-IN-LAW")
        for n in range(1, 30):
            engine.hint()
            self.assertEqual(engine.revealed, min(n, engine.letter_count))
        self.assertFalse(engine.hint())
        self.assertTrue(all(s.revealed for s in engine.slots() if s.is_letter))
        self.assertEqual(engine.check(), PuzzleStatus.CORRECT)

    def test_hint_fills_slots_before_picks(self):
        engine = _engine("DRAGON")
        _pick_letters(engine, "RA")
        engine.hint()
        self.assertEqual(engine.display(), ["D", "R", "A", "", "", ""])
        _pick_letters(engine, "GON")
        self.assertEqual(engine.check(), PuzzleStatus.CORRECT)

    def test_hint_does_not_move_existing_picks(self):
        engine = _engine("DRAGON")
        _pick_letters(engine, "DRA")
        engine.hint()
        self.assertEqual(engine.display()[:4], ["D", "D", "R", "A"])
        self.assertEqual(len(engine.picked), 3)

    def test_reveal_payload(self):
        engine = _engine("MOTHER-IN-LAW")
        for _ in range(6):
            reveal_next_letter(engine)
        payload = reveal_next_letter(engine)
        self.assertEqual(payload["type"], "reveal_next_letter")
        self.assertEqual(payload["data"], {"index": 7, "letter": "I", "remaining": 4})

    def test_reveal_payload_when_exhausted(self):
        engine = _engine("OX")
        reveal_next_letter(engine)
        reveal_next_letter(engine)
        payload = reveal_next_letter(engine)
        self.assertEqual(payload["data"], {"index": None, "letter": None, "remaining": 0})

    def test_reset_drops_consumed_tiles(self):
        engine = _engine("DRAGON")
        _pick_letters(engine, "DR")
        engine.hint()
        engine.check()
        remaining = Counter(t for t in engine.bank if t)

        engine.reset()
        self.assertEqual(engine.status, PuzzleStatus.IDLE)
        self.assertEqual(engine.picked, [])
        self.assertEqual(engine.revealed, 0)
        self.assertEqual(len(engine.bank), 12)
        self.assertEqual(Counter(engine.bank), remaining)

    def test_shuffle_keeps_empty_positions(self):
        engine = _engine("DRAGON")
        _pick_letters(engine, "DRA")
        empty = [i for i, t in enumerate(engine.bank) if t is None]
        letters = Counter(t for t in engine.bank if t)

        engine.shuffle()
        self.assertEqual([i for i, t in enumerate(engine.bank) if t is None], empty)
        self.assertEqual(Counter(t for t in engine.bank if t), letters)
        for _ in range(3):
            engine.remove_last()
        self.assertNotIn(None, engine.bank)

    def test_generated_bank(self):
        engine = PuzzleEngine("  Forest ", rng=random.Random(11))
        self.assertEqual(engine.target, "Forest")
        self.assertFalse(Counter("FOREST") - Counter(engine.bank))
        for ch in "FOREST":
            engine.pick(engine.bank.index(ch))
        self.assertEqual(engine.check(), PuzzleStatus.CORRECT)

    def test_snapshot(self):
        engine = _engine("DRAGON")
        _pick_letters(engine, "DRX")
        engine.hint()
        restored = PuzzleEngine.from_dict(engine.to_dict())
        self.assertEqual(restored.bank, engine.bank)
        self.assertEqual(restored.picked, engine.picked)
        self.assertEqual(restored.revealed, 1)
        self.assertEqual(restored.status, PuzzleStatus.IDLE)

    def test_snapshot_rejects_inconsistent_state(self):
        data = _engine("DRAGON").to_dict()
        data["picked"] = [["D", 0]]
        with self.assertRaises(ValueError):
            PuzzleEngine.from_dict(data)
