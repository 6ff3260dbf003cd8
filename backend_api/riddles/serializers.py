from __future__ import annotations

from typing import Any, Dict, List

from django.conf import settings
from rest_framework import serializers

from .puzzles import PuzzleStatus, RiddleGame, decode_upload, format_from_filename, ParseError


FORMAT_CHOICES = [("text", "text"), ("csv", "csv"), ("json", "json")]


def puzzle_state(game: RiddleGame) -> Dict[str, Any]:
    """Public view of the running puzzle. Unrevealed letters are never exposed."""
    engine = game.engine
    display = engine.display()
    slots: List[Dict[str, Any]] = [
        {"display": shown, "is_letter": slot.is_letter, "revealed": slot.revealed}
        for slot, shown in zip(engine.slots(), display)
    ]
    return {
        "index": game.index,
        "total": len(game.items),
        "progress": game.progress,
        "hint": game.current.hint,
        "status": engine.status.value,
        "letter_count": engine.letter_count,
        "revealed": engine.revealed,
        "picked_count": len(engine.picked),
        "slots": slots,
        "bank": list(engine.bank),
        "answer": engine.target if engine.status is PuzzleStatus.CORRECT else None,
    }


# PUBLIC_INTERFACE
class UploadWordsRequestSerializer(serializers.Serializer):
    """Request payload to replace the active word set.

    Fields:
    - file (optional): uploaded .txt, .csv or .json word file
    - text (optional): raw file contents, used when no file is sent
    - format (optional): text | csv | json; inferred from the file name when omitted
    """

    file = serializers.FileField(required=False)
    text = serializers.CharField(required=False, allow_blank=True, trim_whitespace=False)
    format = serializers.ChoiceField(required=False, choices=FORMAT_CHOICES)

    def validate(self, attrs: Dict[str, Any]) -> Dict[str, Any]:
        upload = attrs.get("file")
        if upload is None and "text" not in attrs:
            raise serializers.ValidationError("Provide a word file or its text.")

        limit = settings.RIDDLES_MAX_UPLOAD_BYTES
        if upload is not None:
            if upload.size > limit:
                raise serializers.ValidationError({"file": f"File is larger than {limit} bytes."})
            try:
                attrs["raw_text"] = decode_upload(upload.read())
            except ParseError as e:
                raise serializers.ValidationError({"file": str(e)})
            attrs.setdefault("format", format_from_filename(upload.name))
        else:
            if len(attrs["text"].encode("utf-8")) > limit:
                raise serializers.ValidationError({"text": f"Text is larger than {limit} bytes."})
            attrs["raw_text"] = attrs["text"]
            attrs.setdefault("format", "text")
        return attrs


# PUBLIC_INTERFACE
class PickRequestSerializer(serializers.Serializer):
    """Request payload to move a bank tile into the next free slot."""

    tile_index = serializers.IntegerField(min_value=0)


# PUBLIC_INTERFACE
class SlotSerializer(serializers.Serializer):
    display = serializers.CharField(allow_blank=True)
    is_letter = serializers.BooleanField()
    revealed = serializers.BooleanField()


# PUBLIC_INTERFACE
class PuzzleStateResponseSerializer(serializers.Serializer):
    """Response payload describing the current puzzle."""

    index = serializers.IntegerField()
    total = serializers.IntegerField()
    progress = serializers.IntegerField()
    hint = serializers.CharField(allow_null=True)
    status = serializers.ChoiceField(choices=[s.value for s in PuzzleStatus])
    letter_count = serializers.IntegerField()
    revealed = serializers.IntegerField()
    picked_count = serializers.IntegerField()
    slots = SlotSerializer(many=True)
    bank = serializers.ListField(child=serializers.CharField(allow_null=True))
    answer = serializers.CharField(allow_null=True)


# PUBLIC_INTERFACE
class HintResponseSerializer(serializers.Serializer):
    """Response payload for a hint request."""

    type = serializers.CharField()
    data = serializers.DictField(help_text="Hint data payload with index/letter and remaining letters.")
    state = PuzzleStateResponseSerializer()


# PUBLIC_INTERFACE
class UploadWordsResponseSerializer(serializers.Serializer):
    """Response payload after a successful upload."""

    count = serializers.IntegerField()
    format = serializers.CharField()
    state = PuzzleStateResponseSerializer()
