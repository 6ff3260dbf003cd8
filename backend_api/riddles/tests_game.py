import json
import os
import random
import shutil
import tempfile
from io import StringIO

from django.core.files.uploadedfile import SimpleUploadedFile
from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import SimpleTestCase
from django.urls import reverse
from rest_framework.test import APITestCase

from riddles.puzzles import EmptyResultError, MemoryStore, ParseError, PuzzleItem, PuzzleStatus, RiddleGame
from riddles.puzzles.defaults import DEFAULT_SET
from riddles.puzzles.game import STATE_KEY, WORDS_KEY


class RiddleGameTests(SimpleTestCase):
    def setUp(self):
        self.store = MemoryStore()
        self.game = RiddleGame.from_store(self.store, rng=random.Random(2))

    def test_starts_with_defaults(self):
        self.assertEqual(self.game.items, DEFAULT_SET)
        self.assertEqual(len(DEFAULT_SET), 5)
        self.assertEqual(self.game.index, 0)
        self.assertEqual(self.game.engine.target, "DRAGON")
        self.assertEqual(self.game.progress, 20)

    def test_next_wraps_around(self):
        targets = [self.game.next().word for _ in range(5)]
        self.assertEqual(targets, ["MOUSE", "FOREST", "FRIEND", "SING", "DRAGON"])
        self.assertEqual(self.game.index, 0)

    def test_next_starts_a_fresh_puzzle(self):
        engine = self.game.engine
        engine.pick(0)
        engine.hint()
        engine.check()
        self.game.next()
        self.assertIsNot(self.game.engine, engine)
        self.assertEqual(self.game.engine.picked, [])
        self.assertEqual(self.game.engine.revealed, 0)
        self.assertEqual(self.game.engine.status, PuzzleStatus.IDLE)

    def test_ingest_replaces_set_and_persists(self):
        self.game.next()
        items = self.game.ingest("Panda | animal\npanda | bear\nowl", "text")
        self.assertEqual(items, [PuzzleItem("PANDA", "animal"), PuzzleItem("OWL", None)])
        self.assertEqual(self.game.index, 0)
        self.assertEqual(self.game.engine.target, "PANDA")
        self.assertEqual(json.loads(self.store.get(WORDS_KEY)), [{"word": "PANDA", "hint": "animal"}, {"word": "OWL"}])

        reloaded = RiddleGame.from_store(self.store)
        self.assertEqual(reloaded.items, items)

    def test_ingest_caps_the_set(self):
        raw = "\n".join(f"word{chr(ord('a') + n)}" for n in range(25))
        self.assertEqual(len(self.game.ingest(raw, "text")), 20)
        self.assertEqual(self.game.items[-1].word, "WORDT")
        self.assertEqual(self.game.progress, 5)

    def test_failed_ingest_changes_nothing(self):
        self.game.next()
        engine = self.game.engine
        engine.pick(1)
        with self.assertRaises(EmptyResultError):
            self.game.ingest("word,hint\n", "csv")
        with self.assertRaises(ParseError):
            self.game.ingest("[oops", "json")
        self.assertEqual(self.game.items, DEFAULT_SET)
        self.assertEqual(self.game.index, 1)
        self.assertIs(self.game.engine, engine)
        self.assertEqual(len(engine.picked), 1)
        self.assertIsNone(self.store.get(WORDS_KEY))

    def test_reset_to_default(self):
        self.game.ingest("owl\nlion", "text")
        self.game.next()
        self.game.reset_to_default()
        self.assertIsNone(self.store.get(WORDS_KEY))
        self.assertEqual(self.game.items, DEFAULT_SET)
        self.assertEqual(self.game.index, 0)
        self.assertEqual(self.game.engine.target, "DRAGON")

    def test_unreadable_store_falls_back_to_defaults(self):
        for raw in ["not json", "{}", "[1, 2]", "[]", '[{"hint": "no word"}]']:
            store = MemoryStore({WORDS_KEY: raw})
            self.assertEqual(RiddleGame.from_store(store).items, DEFAULT_SET, raw)

    def test_state_snapshot_resumes_puzzle(self):
        self.game.next()
        self.game.engine.pick(3)
        self.game.engine.hint()
        self.game.save_state()

        resumed = RiddleGame.from_store(self.store)
        self.assertEqual(resumed.index, 1)
        self.assertEqual(resumed.engine.bank, self.game.engine.bank)
        self.assertEqual(resumed.engine.picked, self.game.engine.picked)
        self.assertEqual(resumed.engine.revealed, 1)

    def test_stale_snapshot_is_ignored(self):
        self.game.save_state()
        self.store.set(WORDS_KEY, json.dumps([{"word": "OWL"}]))
        resumed = RiddleGame.from_store(self.store)
        self.assertEqual(resumed.engine.target, "OWL")

        self.store.set(STATE_KEY, "{broken")
        self.assertEqual(RiddleGame.from_store(self.store).index, 0)

    def test_ingest_discards_saved_puzzle(self):
        self.game.next()
        self.game.engine.pick(0)
        self.game.engine.hint()
        self.game.save_state()

        self.game.ingest("owl\nlion\nbat", "text")
        self.assertIsNone(self.store.get(STATE_KEY))
        resumed = RiddleGame.from_store(self.store)
        self.assertEqual(resumed.index, 0)
        self.assertEqual(resumed.engine.target, "OWL")
        self.assertEqual(resumed.engine.picked, [])
        self.assertEqual(resumed.engine.revealed, 0)

    def test_ingest_with_same_first_word_starts_fresh(self):
        self.game.engine.pick(0)
        self.game.engine.hint()
        self.game.save_state()

        self.game.ingest("dragon\nowl", "text")
        resumed = RiddleGame.from_store(self.store)
        self.assertEqual(resumed.engine.target, "DRAGON")
        self.assertEqual(resumed.engine.picked, [])
        self.assertEqual(resumed.engine.revealed, 0)

    def test_reset_to_default_discards_saved_puzzle(self):
        self.game.ingest("owl\nlion\nbat", "text")
        self.game.next()
        self.game.next()
        self.game.save_state()

        self.game.reset_to_default()
        self.assertIsNone(self.store.get(STATE_KEY))
        resumed = RiddleGame.from_store(self.store)
        self.assertEqual(resumed.index, 0)
        self.assertEqual(resumed.engine.target, "DRAGON")
        self.assertEqual(resumed.engine.picked, [])


class PreviewWordsCommandTests(SimpleTestCase):
    def _write(self, name, content):
        tmpdir = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, tmpdir)
        path = os.path.join(tmpdir, name)
        with open(path, "w", encoding="utf-8") as fh:
            fh.write(content)
        return path

    def test_prints_words(self):
        path = self._write("words.csv", "word,hint\nPanda,animal\nPANDA,bear\nowl,\n")
        out = StringIO()
        call_command("preview_words", path, stdout=out)
        output = out.getvalue()
        self.assertIn(" 1. PANDA | animal", output)
        self.assertIn(" 2. OWL", output)
        self.assertIn("2 words from words.csv (csv).", output)

    def test_rejects_empty_file(self):
        path = self._write("words.txt", "\n\n")
        with self.assertRaises(CommandError):
            call_command("preview_words", path, stdout=StringIO())

    def test_missing_file(self):
        with self.assertRaises(CommandError):
            call_command("preview_words", "/nonexistent/words.txt", stdout=StringIO())


class PuzzleApiTests(APITestCase):
    def _state(self):
        resp = self.client.get(reverse("puzzle"))
        self.assertEqual(resp.status_code, 200)
        return resp.json()

    def _spell(self, letters):
        for ch in letters:
            bank = self._state()["bank"]
            resp = self.client.post(reverse("pick"), {"tile_index": bank.index(ch)}, format="json")
            self.assertEqual(resp.status_code, 200)
        return resp.json()

    def _upload_text(self, text, fmt="text"):
        return self.client.post(reverse("words"), {"text": text, "format": fmt}, format="json")

    def test_health(self):
        resp = self.client.get(reverse("Health"))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"message": "Server is up!"})

    def test_default_puzzle(self):
        data = self._state()
        self.assertEqual(data["index"], 0)
        self.assertEqual(data["total"], 5)
        self.assertEqual(data["hint"], "mythical creature")
        self.assertEqual(data["status"], "idle")
        self.assertEqual(data["letter_count"], 6)
        self.assertEqual(len(data["bank"]), 12)
        self.assertEqual([s["display"] for s in data["slots"]], [""] * 6)
        self.assertIsNone(data["answer"])

    def test_state_survives_between_requests(self):
        first = self._state()
        self.assertEqual(self._state()["bank"], first["bank"])

    def test_solve_dragon(self):
        data = self._spell("DRAGON")
        self.assertEqual([s["display"] for s in data["slots"]], list("DRAGON"))
        data = self.client.post(reverse("check")).json()
        self.assertEqual(data["status"], "correct")
        self.assertEqual(data["answer"], "DRAGON")

        data = self.client.post(reverse("next")).json()
        self.assertEqual(data["index"], 1)
        self.assertEqual(data["status"], "idle")
        self.assertEqual(data["hint"], "small animal")

    def test_wrong_then_complete(self):
        self._spell("DRAGO")
        self.assertEqual(self.client.post(reverse("check")).json()["status"], "wrong")
        self._spell("N")
        self.assertEqual(self.client.post(reverse("check")).json()["status"], "correct")

    def test_remove_last_and_reset(self):
        self._spell("DR")
        data = self.client.post(reverse("remove-last")).json()
        self.assertEqual(data["picked_count"], 1)
        self.assertEqual(data["bank"].count(None), 1)

        data = self.client.post(reverse("reset")).json()
        self.assertEqual(data["picked_count"], 0)
        self.assertEqual(len(data["bank"]), 11)

    def test_hint(self):
        resp = self.client.post(reverse("request-hint"))
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data["type"], "reveal_next_letter")
        self.assertEqual(data["data"], {"index": 0, "letter": "D", "remaining": 5})
        self.assertEqual(data["state"]["slots"][0], {"display": "D", "is_letter": True, "revealed": True})

    def test_pick_validation(self):
        resp = self.client.post(reverse("pick"), {"tile_index": -3}, format="json")
        self.assertEqual(resp.status_code, 400)
        resp = self.client.post(reverse("pick"), {"tile_index": 99}, format="json")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["picked_count"], 0)

    def test_shuffle(self):
        self._spell("D")
        data = self.client.post(reverse("shuffle")).json()
        self.assertEqual(data["picked_count"], 1)
        self.assertEqual(data["bank"].count(None), 1)

    def test_upload_text(self):
        resp = self._upload_text("MOTHER-IN-LAW | family\nPanda\nPANDA")
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data["count"], 2)
        self.assertEqual(data["format"], "text")
        self.assertEqual(data["state"]["hint"], "family")
        self.assertEqual(data["state"]["letter_count"], 11)
        displays = [s["display"] for s in data["state"]["slots"]]
        self.assertEqual(displays[6], "-")
        self.assertEqual(displays[9], "-")

        data = self._spell("MOTHERINLAW")
        self.assertEqual(self.client.post(reverse("check")).json()["status"], "correct")

    def test_upload_file(self):
        upload = SimpleUploadedFile(
            "words.json",
            json.dumps([{"word": "owl", "hint": "bird"}, {"word": "lion"}]).encode("utf-8"),
            content_type="application/json",
        )
        resp = self.client.post(reverse("words"), {"file": upload}, format="multipart")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["format"], "json")
        self.assertEqual(resp.json()["count"], 2)
        self.assertEqual(self._state()["total"], 2)

    def test_upload_header_only_csv_is_rejected(self):
        self._upload_text("owl\nlion")
        resp = self._upload_text("word,hint\n", "csv")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["code"], "empty_result")
        self.assertEqual(self._state()["total"], 2)

    def test_upload_bad_json_is_rejected(self):
        resp = self._upload_text("[{", "json")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["code"], "parse_error")
        self.assertEqual(self._state()["total"], 5)

    def test_upload_requires_content(self):
        resp = self.client.post(reverse("words"), {}, format="json")
        self.assertEqual(resp.status_code, 400)

    def test_reset_words(self):
        self._upload_text("owl\nlion")
        resp = self.client.delete(reverse("words"))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["total"], 5)
        self.assertEqual(resp.json()["hint"], "mythical creature")
