"""Drawlio - UDP drawing and guessing game server.

The router owns the only receive loop. Each datagram is decoded, its sender
resolved to a player, checked against the round state and then turned into
state changes and outbound messages. Liveness sweeps run inside the same
loop whenever the monitor's timer has marked one as due.
"""

import logging
import socket

from drawlio_server.config import MAX_DATAGRAM_SIZE, SERVER_HOST, SOCKET_TIMEOUT
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
    format_point,
    format_scores,
)

logger = logging.getLogger(__name__)


class DrawlioServer:
    """Message router for one game session.

    Args:
        session: The game session this server drives
        sock: Optional pre-made datagram socket, mostly for tests
    """

    def __init__(self, session, sock=None):
        self.session = session
        self.sock = sock
        self.address = None
        self.running = False

    @property
    def game(self):
        return self.session.game

    @property
    def registry(self):
        return self.session.registry

    # ---- transport ----

    def bind(self, host=SERVER_HOST, port=0, timeout=SOCKET_TIMEOUT):
        """Create the datagram socket and return the bound address."""
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        sock.bind((host, port))
        # A short timeout lets the loop revisit the liveness flag without traffic
        sock.settimeout(timeout)
        self.sock = sock
        self.address = sock.getsockname()
        return self.address

    def send_message(self, recipient, kind, *fields):
        """Send a message to one player; failures are logged, not raised."""
        self._send_to(recipient, encode_message(kind, *fields))

    def _send_to(self, recipient, data):
        try:
            self.sock.sendto(data, recipient.address)
        except OSError as exc:
            logger.warning("Failed to send to %s at %s: %s", recipient, recipient.address, exc)

    def broadcast_message(self, kind, *fields):
        """Send the same message to every tracked player."""
        data = encode_message(kind, *fields)
        for player in list(self.registry):
            self._send_to(player, data)

    def broadcast_chat(self, text, colored=False, bold=False):
        self.broadcast_message(MessageKind.CHAT, *chat_fields(text, colored, bold))

    def broadcast_scores(self):
        self.broadcast_message(MessageKind.SCORES, format_scores(self.registry))

    # ---- main loop ----

    def serve_forever(self):
        """Receive and handle datagrams until shutdown() is called."""
        if self.sock is None:
            self.bind()
        liveness = self.session.liveness
        self.running = True
        liveness.start()
        logger.info("Server listening on %s", self.address)
        try:
            while self.running:
                if liveness.consume_due():
                    try:
                        self.check_player_connections()
                    except Exception:
                        logger.exception("Liveness sweep failed")
                try:
                    data, address = self.sock.recvfrom(MAX_DATAGRAM_SIZE)
                except socket.timeout:
                    continue
                except OSError:
                    if not self.running or self.sock.fileno() == -1:
                        break
                    logger.exception("Receive failed")
                    continue
                try:
                    self.handle_datagram(data, address)
                except Exception:
                    logger.exception("Error handling datagram from %s:%s", *address[:2])
        finally:
            liveness.stop()
            self.running = False

    def shutdown(self):
        """Stop the loop and close the socket."""
        self.running = False
        if self.sock is not None:
            try:
                self.sock.close()
            except OSError:
                pass

    # ---- dispatch ----

    def handle_datagram(self, data, address):
        """Decode one datagram and apply it to the session."""
        try:
            message = decode_client_message(data)
        except ProtocolError as exc:
            logger.warning("INVALID MESSAGE from %s:%s -> %s: %r", address[0], address[1], exc, data[:80])
            return

        sender = self.registry.find_by_address(address)
        if message.kind in (MessageKind.POINT, MessageKind.CHECK):
            logger.debug("%s: From %s:%s", message.kind.value, *address[:2])
        else:
            logger.info("%s: From %s:%s", message.kind.value, *address[:2])

        if isinstance(message, Connect):
            self.handle_connect(sender, address)
        elif sender is None:
            logger.info("ILLEGAL ACTION -> NOT A PLAYER: %s", message.kind.value)
        elif isinstance(message, Guess):
            self.handle_guess(sender, message.text)
        elif isinstance(message, Point):
            self.handle_point(sender, message.x, message.y)
        elif isinstance(message, Check):
            self.session.liveness.acknowledge(sender, message.token)
        elif isinstance(message, Disconnect):
            self.handle_disconnect(sender)

    def handle_connect(self, sender, address):
        if not self.game.is_action_legal(sender, MessageKind.CONNECT):
            logger.info("ILLEGAL ACTION -> %s is already connected", sender)
            self.send_game_state(sender, send_canvas=True)
            return
        if self.session.is_full:
            logger.info("Game is full, ignoring connect from %s:%s", *address[:2])
            return

        new_player = self.registry.create(address)
        # Announced before the newcomer is added, so only the others hear it
        self.broadcast_chat(f"{new_player} joined", bold=True)
        self.send_message(new_player, MessageKind.CONNECTED, new_player.id)
        if self.game.add_player(new_player):
            self.new_round(is_first=True)
        else:
            self.send_game_state(new_player, send_canvas=True)
        self.broadcast_scores()

    def handle_guess(self, sender, text):
        if not self.game.is_action_legal(sender, MessageKind.GUESS):
            logger.info("ILLEGAL ACTION -> %s is not guessing", sender)
            self.send_game_state(sender, send_canvas=True)
            return
        logger.info("-> %s", text)
        if not self.game.guess_word(sender, text):
            self.broadcast_chat(f"{sender}: {text}")
            return
        self.broadcast_chat(f"{sender} guessed the word!", colored=True)
        if self.game.is_round_finished():
            if self.finish_round():
                self.new_round(is_first=False)
        else:
            self.send_game_state(sender, send_canvas=False)

    def handle_point(self, sender, x, y):
        if not self.game.is_action_legal(sender, MessageKind.POINT):
            logger.debug("ILLEGAL ACTION -> %s is not drawing", sender)
            self.send_game_state(sender, send_canvas=True)
            return
        self.game.add_point(x, y)
        self.broadcast_message(MessageKind.POINT, format_point((x, y)))

    def handle_disconnect(self, sender):
        self.remove_player(sender)
        logger.info("-> %s disconnected.", sender)
        self.broadcast_scores()
        self.end_round_if_stalled()

    # ---- game flow ----

    def remove_player(self, player):
        """Drop a player and announce the departure to the rest."""
        self.game.remove_player(player)
        self.broadcast_chat(f"{player} disconnected.", bold=True)
        if player.drawing:
            logger.info("-> Drawer disconnected")
            self.broadcast_chat("Drawer disconnected.", bold=True)

    def end_round_if_stalled(self):
        """Finish the active round if departures left it unable to go on."""
        if not self.game.waiting_for_players and self.game.is_round_finished():
            self.broadcast_chat("Ending round.", bold=True)
            if self.finish_round():
                self.new_round(is_first=False)

    def check_player_connections(self):
        """Run one liveness sweep: evict silent players, send a new token."""
        result = self.session.liveness.sweep(self.registry)
        for player in result.evicted:
            self.remove_player(player)
        if result.evicted:
            self.broadcast_scores()
        self.broadcast_message(MessageKind.CHECK, result.token)
        self.end_round_if_stalled()

    def finish_round(self):
        """Finish the round and tell everyone.

        Returns:
            True if enough players remain for a new round
        """
        result = self.game.finish_round()
        self.broadcast_chat(f"Round finished. Word was {result.word.upper()}", colored=True, bold=True)
        self.broadcast_scores()
        if not result.continues:
            self.broadcast_message(MessageKind.WAITING)
        return result.continues

    def new_round(self, is_first):
        drawer = self.game.new_round(is_first)
        self.send_message(drawer, MessageKind.DRAWING, self.game.current_word)
        for player in self.registry:
            if player.guessing:
                self.send_message(player, MessageKind.GUESSING)
        self.broadcast_chat(f"{drawer} is drawing", bold=True)

    def send_game_state(self, player, send_canvas):
        """Send a player its authoritative role, optionally with the canvas.

        Used on join and whenever a client acts out of turn, so a client that
        missed packets can correct itself.
        """
        if player.guessing:
            fields = ["GUESSING"]
        elif player.drawing:
            fields = ["DRAWING", self.game.current_word]
        elif self.game.has_guessed_correct(player):
            fields = ["CORRECT"]
        else:
            fields = ["WAITING"]
        self.send_message(player, MessageKind.GAMESTATE, *fields)
        if send_canvas:
            for chunk in chunk_points(self.game.drawing_points):
                self.send_message(player, MessageKind.POINT, chunk)
