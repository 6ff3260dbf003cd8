from __future__ import annotations

import logging
from typing import Callable

from rest_framework.decorators import api_view, permission_classes, parser_classes
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.response import Response
from rest_framework import status, permissions
from drf_yasg.utils import swagger_auto_schema

from .puzzles import EmptyResultError, IngestionError, RiddleGame, reveal_next_letter
from .serializers import (
    UploadWordsRequestSerializer,
    UploadWordsResponseSerializer,
    PickRequestSerializer,
    PuzzleStateResponseSerializer,
    HintResponseSerializer,
    puzzle_state,
)
from .stores import game_for_request

logger = logging.getLogger(__name__)


def _state_response(game: RiddleGame) -> Response:
    """Persist the running puzzle and return its public state."""
    game.save_state()
    return Response(PuzzleStateResponseSerializer(puzzle_state(game)).data, status=status.HTTP_200_OK)


def _apply(request, operation: Callable[[RiddleGame], object]) -> Response:
    """Load the session's game, run one operation on it and return the new state."""
    game = game_for_request(request)
    operation(game)
    return _state_response(game)


# PUBLIC_INTERFACE
@api_view(['GET'])
@permission_classes([permissions.AllowAny])
def health(request):
    """Health check endpoint for the API.

    Returns:
    - 200 OK with {"message": "Server is up!"}
    """
    return Response({"message": "Server is up!"})


# PUBLIC_INTERFACE
@swagger_auto_schema(
    method="get",
    operation_id="get_puzzle",
    operation_summary="Get the current puzzle",
    operation_description="""
Return the puzzle for the current word of the session's word set.

Letter slots show only revealed or picked letters; the answer is included
once the puzzle is solved.
""",
    responses={200: PuzzleStateResponseSerializer},
    tags=["puzzle"],
)
@api_view(["GET"])
@permission_classes([permissions.AllowAny])
def get_puzzle(request):
    """Return the current puzzle state, starting the session's game if needed."""
    return _state_response(game_for_request(request))


# PUBLIC_INTERFACE
@swagger_auto_schema(
    method="post",
    operation_id="upload_words",
    operation_summary="Replace the word set",
    operation_description="""
Upload a word file (multipart field `file`) or send its contents as `text`.

Formats:
- text: one word per line, optional `| hint`
- csv: word,hint (comma, semicolon or tab; header optional)
- json: [{"word": "...", "hint": "..."}]

Duplicates are removed and at most 20 words are kept. On failure the previous
word set stays active and the response carries `error` and `code`
(parse_error | empty_result).
""",
    request_body=UploadWordsRequestSerializer,
    responses={200: UploadWordsResponseSerializer},
    tags=["words"],
)
@swagger_auto_schema(
    method="delete",
    operation_id="reset_words",
    operation_summary="Restore the built-in word set",
    responses={200: PuzzleStateResponseSerializer},
    tags=["words"],
)
@api_view(["POST", "DELETE"])
@permission_classes([permissions.AllowAny])
@parser_classes([MultiPartParser, FormParser, JSONParser])
def words(request):
    """Ingest a new word set (POST) or go back to the default one (DELETE)."""
    game = game_for_request(request)
    if request.method == "DELETE":
        game.reset_to_default()
        return _state_response(game)

    serializer = UploadWordsRequestSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    vd = serializer.validated_data

    try:
        items = game.ingest(vd["raw_text"], vd["format"])
    except IngestionError as e:
        code = "empty_result" if isinstance(e, EmptyResultError) else "parse_error"
        logger.warning("Rejected %s word upload: %s", vd["format"], e)
        return Response({"error": str(e), "code": code}, status=status.HTTP_400_BAD_REQUEST)

    game.save_state()
    resp = {"count": len(items), "format": vd["format"], "state": puzzle_state(game)}
    return Response(UploadWordsResponseSerializer(resp).data, status=status.HTTP_200_OK)


# PUBLIC_INTERFACE
@swagger_auto_schema(
    method="post",
    operation_id="pick_tile",
    operation_summary="Pick a bank tile",
    operation_description="""
Move the bank tile at `tile_index` into the next free letter slot.

Ignored when the tile is empty, all slots are filled, or the puzzle was
already checked.
""",
    request_body=PickRequestSerializer,
    responses={200: PuzzleStateResponseSerializer},
    tags=["puzzle"],
)
@api_view(["POST"])
@permission_classes([permissions.AllowAny])
def pick_tile(request):
    """Pick a tile from the letter bank."""
    serializer = PickRequestSerializer(data=request.data or {})
    serializer.is_valid(raise_exception=True)
    tile_index = serializer.validated_data["tile_index"]
    return _apply(request, lambda game: game.engine.pick(tile_index))


# PUBLIC_INTERFACE
@swagger_auto_schema(
    method="post",
    operation_id="remove_last",
    operation_summary="Undo the last pick",
    responses={200: PuzzleStateResponseSerializer},
    tags=["puzzle"],
)
@api_view(["POST"])
@permission_classes([permissions.AllowAny])
def remove_last(request):
    """Return the most recently picked tile to the bank."""
    return _apply(request, lambda game: game.engine.remove_last())


# PUBLIC_INTERFACE
@swagger_auto_schema(
    method="post",
    operation_id="request_hint",
    operation_summary="Reveal the next letter",
    operation_description="""
Reveal the next letter slot from the left. Picks already made are kept.

Response:
- type, data payload with 'index', 'letter' and 'remaining' letters, and the new state.
""",
    responses={200: HintResponseSerializer},
    tags=["puzzle", "hints"],
)
@api_view(["POST"])
@permission_classes([permissions.AllowAny])
def request_hint(request):
    """Reveal one more letter of the current word."""
    game = game_for_request(request)
    payload = reveal_next_letter(game.engine)
    game.save_state()
    resp = {
        "type": payload.get("type"),
        "data": payload.get("data"),
        "state": puzzle_state(game),
    }
    return Response(HintResponseSerializer(resp).data, status=status.HTTP_200_OK)


# PUBLIC_INTERFACE
@swagger_auto_schema(
    method="post",
    operation_id="check_answer",
    operation_summary="Check the assembled answer",
    operation_description="Compare the slots with the target ignoring case and punctuation; status becomes correct or wrong.",
    responses={200: PuzzleStateResponseSerializer},
    tags=["puzzle"],
)
@api_view(["POST"])
@permission_classes([permissions.AllowAny])
def check_answer(request):
    """Evaluate the current answer."""
    return _apply(request, lambda game: game.engine.check())


# PUBLIC_INTERFACE
@swagger_auto_schema(
    method="post",
    operation_id="next_puzzle",
    operation_summary="Go to the next word",
    responses={200: PuzzleStateResponseSerializer},
    tags=["puzzle"],
)
@api_view(["POST"])
@permission_classes([permissions.AllowAny])
def next_puzzle(request):
    """Advance to the next word, wrapping around after the last one."""
    return _apply(request, lambda game: game.next())


# PUBLIC_INTERFACE
@swagger_auto_schema(
    method="post",
    operation_id="reset_puzzle",
    operation_summary="Start the current word over",
    operation_description="Clears picks and reveals and reshuffles the tiles left in the bank.",
    responses={200: PuzzleStateResponseSerializer},
    tags=["puzzle"],
)
@api_view(["POST"])
@permission_classes([permissions.AllowAny])
def reset_puzzle(request):
    """Reset the attempt on the current word."""
    return _apply(request, lambda game: game.engine.reset())


# PUBLIC_INTERFACE
@swagger_auto_schema(
    method="post",
    operation_id="shuffle_bank",
    operation_summary="Shuffle the letter bank",
    responses={200: PuzzleStateResponseSerializer},
    tags=["puzzle"],
)
@api_view(["POST"])
@permission_classes([permissions.AllowAny])
def shuffle_bank(request):
    """Shuffle the remaining tiles."""
    return _apply(request, lambda game: game.engine.shuffle())
