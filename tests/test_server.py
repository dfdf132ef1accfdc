from drawlio_server.core.game import GamePhase
from drawlio_server.server import DrawlioServer

from .conftest import FakeSocket, address


def player(server, n):
    return server.registry.find_by_address(address(n))


def test_first_player_waits(server, fake_socket, connect):
    connect(1)
    assert fake_socket.messages_to(address(1)) == [
        "CONNECTED|1",
        "GAMESTATE|WAITING",
        "SCORES|1:0",
    ]
    assert server.game.phase is GamePhase.WAITING_FOR_PLAYERS


def test_second_player_starts_round(server, fake_socket, connect):
    connect(1, 2)
    word = server.game.current_word
    p1, p2 = player(server, 1), player(server, 2)

    assert (p1.id, p2.id) == (1, 2)
    assert p1.drawing and not p1.guessing
    assert p2.guessing and not p2.drawing
    assert fake_socket.messages_to(address(1))[3:] == [
        "CHAT||BOLD|Player 2 joined",
        f"DRAWING|{word}",
        "CHAT||BOLD|Player 1 is drawing",
        "SCORES|1:0,2:0",
    ]
    assert fake_socket.messages_to(address(2)) == [
        "CONNECTED|2",
        "GUESSING",
        "CHAT||BOLD|Player 1 is drawing",
        "SCORES|1:0,2:0",
    ]


def test_correct_guess_finishes_two_player_round(server, fake_socket, connect, send):
    connect(1, 2)
    word = server.game.current_word
    fake_socket.clear()

    send(2, f"guess|{word.upper()}")

    p1, p2 = player(server, 1), player(server, 2)
    assert p2.score == 1
    assert p1.score == 0
    assert p2.drawing and p1.guessing
    to_p1 = fake_socket.messages_to(address(1))
    assert to_p1[:3] == [
        "CHAT|COLOR||Player 2 guessed the word!",
        f"CHAT|COLOR|BOLD|Round finished. Word was {word.upper()}",
        "SCORES|2:1,1:0",
    ]
    assert "GUESSING" in to_p1
    assert fake_socket.messages_to(address(2))[3] == f"DRAWING|{server.game.current_word}"


def test_wrong_guess_is_chat(server, fake_socket, connect, send):
    connect(1, 2)
    fake_socket.clear()

    send(2, "GUESS|banana boat")

    assert fake_socket.messages_to(address(1)) == ["CHAT|||Player 2: banana boat"]
    assert player(server, 2).guessing


def test_long_wrong_guess_is_trimmed_to_datagram_size(server, fake_socket, connect, send):
    connect(1, 2)
    fake_socket.clear()

    send(2, "GUESS|" + "x" * 506)

    to_p1 = fake_socket.messages_to(address(1))
    assert to_p1 == ["CHAT|||Player 2: " + "x" * 495]
    assert all(len(text.encode("utf-8")) <= 512 for _, text in fake_socket.sent)


def test_correct_guess_with_guessers_left(server, fake_socket, connect, send):
    connect(1, 2, 3, 4)
    word = server.game.current_word
    fake_socket.clear()

    send(2, f"GUESS|{word}")
    assert fake_socket.messages_to(address(2))[-1] == "GAMESTATE|CORRECT"
    assert server.game.phase is GamePhase.ROUND_ACTIVE

    send(3, f"GUESS|{word}")
    assert (player(server, 2).score, player(server, 3).score) == (2, 1)
    assert player(server, 2).drawing


def test_drawer_guess_gets_game_state(server, fake_socket, connect, send):
    connect(1, 2)
    word = server.game.current_word
    fake_socket.clear()

    send(1, f"GUESS|{word}")

    assert fake_socket.messages_to(address(1)) == [f"GAMESTATE|DRAWING|{word}"]
    assert fake_socket.messages_to(address(2)) == []
    assert player(server, 1).score == 0


def test_points_are_recorded_and_broadcast(server, fake_socket, connect, send):
    connect(1, 2)
    fake_socket.clear()

    send(1, "POINT|3:4")
    send(1, "POINT|3:4")

    assert server.game.drawing_points == {(3, 4)}
    assert fake_socket.messages_to(address(2)) == ["POINT|3:4", "POINT|3:4"]
    assert fake_socket.messages_to(address(1)) == ["POINT|3:4", "POINT|3:4"]


def test_guesser_point_resends_state_and_canvas(server, fake_socket, connect, send):
    connect(1, 2)
    send(1, "POINT|1:1")
    fake_socket.clear()

    send(2, "POINT|9:9")

    assert fake_socket.messages_to(address(2)) == ["GAMESTATE|GUESSING", "POINT|1:1"]
    assert server.game.drawing_points == {(1, 1)}


def test_late_joiner_gets_canvas(server, fake_socket, connect, send):
    connect(1, 2)
    send(1, "POINT|1:2")
    send(1, "POINT|5:6")

    connect(3)

    to_p3 = fake_socket.messages_to(address(3))
    assert to_p3[:2] == ["CONNECTED|3", "GAMESTATE|GUESSING"]
    assert set(to_p3[2].split("|")[1].split(",")) == {"1:2", "5:6"}
    assert player(server, 3).guessing


def test_twelfth_connect_is_ignored(server, fake_socket, connect):
    connect(*range(1, 12))
    fake_socket.clear()

    connect(12)

    assert fake_socket.sent == []
    assert len(server.registry) == 11
    assert player(server, 12) is None


def test_duplicate_connect_resends_state(server, fake_socket, connect):
    connect(1, 2)
    fake_socket.clear()

    connect(2)

    assert fake_socket.messages_to(address(2)) == ["GAMESTATE|GUESSING"]
    assert len(server.registry) == 2


def test_unknown_sender_and_garbage_are_dropped(server, fake_socket, connect, send):
    connect(1, 2)
    fake_socket.clear()

    send(7, "GUESS|apple")
    send(1, "POINT|nope")
    send(1, "JUMP")
    server.handle_datagram(b"\xff\xfe\xfd", address(1))

    assert fake_socket.sent == []
    assert len(server.registry) == 2


def test_ids_not_reused_after_disconnect(server, connect, send):
    connect(1, 2)
    send(2, "DISCONNECT")
    connect(3)
    assert player(server, 3).id == 3


def test_drawer_disconnect_starts_next_round(server, fake_socket, connect, send):
    connect(1, 2, 3)
    fake_socket.clear()

    send(1, "DISCONNECT")

    assert player(server, 1) is None
    to_p2 = fake_socket.messages_to(address(2))
    assert to_p2[:4] == [
        "CHAT||BOLD|Player 1 disconnected.",
        "CHAT||BOLD|Drawer disconnected.",
        "SCORES|2:0,3:0",
        "CHAT||BOLD|Ending round.",
    ]
    assert server.game.phase is GamePhase.ROUND_ACTIVE
    assert player(server, 3).drawing
    assert player(server, 2).guessing


def test_disconnect_below_minimum_waits(server, fake_socket, connect, send):
    connect(1, 2)
    fake_socket.clear()

    send(2, "DISCONNECT")

    assert fake_socket.messages_to(address(1))[-1] == "WAITING"
    assert server.game.phase is GamePhase.WAITING_FOR_PLAYERS
    assert not player(server, 1).drawing

    connect(3)
    assert player(server, 1).drawing
    assert player(server, 3).guessing


def test_liveness_sweep_evicts_silent_player(server, fake_socket, connect, send):
    connect(1, 2)
    fake_socket.clear()

    for _ in range(4):
        server.check_player_connections()
        token = server.session.liveness.last_token
        assert f"CHECK|{token}" in fake_socket.messages_to(address(2))
        send(1, f"CHECK|{token}")
    assert player(server, 2) is not None

    server.check_player_connections()

    assert player(server, 2) is None
    assert player(server, 1).unresponded_checks == 1
    to_p1 = fake_socket.messages_to(address(1))
    assert "CHAT||BOLD|Player 2 disconnected." in to_p1
    assert "CHAT||BOLD|Ending round." in to_p1
    assert to_p1[-1] == "WAITING"
    assert server.game.phase is GamePhase.WAITING_FOR_PLAYERS


def test_stale_check_reply_is_ignored(server, connect, send):
    connect(1, 2)
    server.check_player_connections()
    stale = server.session.liveness.last_token
    server.check_player_connections()

    send(1, f"CHECK|{stale}")

    assert player(server, 1).unresponded_checks == 2


def test_broadcast_survives_send_failure(session):
    sock = FakeSocket(failing={address(1)})
    server = DrawlioServer(session, sock=sock)
    server.handle_datagram(b"CONNECT", address(1))
    server.handle_datagram(b"CONNECT", address(2))
    server.handle_datagram(b"CONNECT", address(3))

    assert "CHAT||BOLD|Player 3 joined" in sock.messages_to(address(2))
    assert len(server.registry) == 3
