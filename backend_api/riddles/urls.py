from django.urls import path
from .views import (
    health,
    get_puzzle,
    words,
    pick_tile,
    remove_last,
    request_hint,
    check_answer,
    next_puzzle,
    reset_puzzle,
    shuffle_bank,
)

urlpatterns = [
    path('health/', health, name='Health'),
    path('puzzle', get_puzzle, name='puzzle'),
    path('words', words, name='words'),
    path('pick', pick_tile, name='pick'),
    path('remove-last', remove_last, name='remove-last'),
    path('hint', request_hint, name='request-hint'),
    path('check', check_answer, name='check'),
    path('next', next_puzzle, name='next'),
    path('reset', reset_puzzle, name='reset'),
    path('shuffle', shuffle_bank, name='shuffle'),
]
