import random

import pytest

from drawlio_server.core.player import Player
from drawlio_server.core.protocol import (
    Check,
    Connect,
    Disconnect,
    Guess,
    MessageKind,
    Point,
    ProtocolError,
    chat_fields,
    chunk_points,
    decode_client_message,
    encode_message,
    format_scores,
)


def test_decode_kind_is_case_insensitive():
    assert decode_client_message(b"connect") == Connect()
    assert decode_client_message(b"Disconnect") == Disconnect()
    assert decode_client_message(b"check|abc") == Check("abc")


def test_decode_guess_keeps_delimiters_in_text():
    assert decode_client_message(b"GUESS|a|b") == Guess("a|b")
    assert decode_client_message("GUESS|äpple".encode("utf-8")) == Guess("äpple")


def test_decode_point():
    message = decode_client_message(b"POINT|3:-4")
    assert message == Point(3, -4)
    assert message.kind is MessageKind.POINT


@pytest.mark.parametrize("raw", [
    b"POINT|3",
    b"POINT|a:b",
    b"POINT|1:2:3",
    b"GUESS",
    b"CHECK",
    b"POINT",
    b"HELLO|x",
    b"SCORES|1:2",
    b"",
    b"\xff\xfe",
])
def test_decode_rejects_malformed_messages(raw):
    with pytest.raises(ProtocolError):
        decode_client_message(raw)


def test_encode_chat():
    assert encode_message(MessageKind.CHAT, *chat_fields("hi", colored=True)) == b"CHAT|COLOR||hi"
    assert encode_message(MessageKind.CHAT, *chat_fields("x", bold=True)) == b"CHAT||BOLD|x"
    assert encode_message(MessageKind.WAITING) == b"WAITING"


def test_chat_fields_trim_on_character_boundary():
    fields = chat_fields("\u00e9" * 300, max_size=512)
    assert fields[2] == "\u00e9" * 252
    assert len(encode_message(MessageKind.CHAT, *fields)) == 511
    assert chat_fields("short", bold=True, max_size=512) == ["", "BOLD", "short"]


def test_format_scores_highest_first():
    players = [Player(1, ("h", 1), score=2), Player(2, ("h", 2), score=5), Player(3, ("h", 3))]
    assert format_scores(players) == "2:5,1:2,3:0"


def test_chunk_points_empty():
    assert chunk_points([]) == []


def test_chunk_points_fit_budget_and_reconstruct():
    rng = random.Random(7)
    points = {(rng.randint(-5000, 5000), rng.randint(0, 99999)) for _ in range(1500)}
    chunks = chunk_points(points)

    assert len(chunks) > 1
    rebuilt = set()
    for chunk in chunks:
        assert len(encode_message(MessageKind.POINT, chunk)) <= 512
        for item in chunk.split(","):
            x, y = item.split(":")
            rebuilt.add((int(x), int(y)))
    assert rebuilt == points
    assert sum(len(c.split(",")) for c in chunks) == len(points)


def test_chunk_points_small_budget():
    chunks = chunk_points([(1, 2), (3, 4), (5, 6)], max_size=len(b"POINT|") + 7)
    assert chunks == ["1:2,3:4", "5:6"]
