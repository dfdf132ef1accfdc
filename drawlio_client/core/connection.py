"""Datagram connection to a Drawlio server.

Sends CONNECT, waits for the server to confirm with a player id, then
receives server messages and hands them to a listener until the socket is
closed. Liveness checks are answered here so listeners never see them.
"""

import socket

from drawlio_client.config import HOST, RECEIVE_BUFFER, RECEIVE_TIMEOUT, SERVER_PORT

from .protocol import build_message, parse_points, parse_server_message

# Messages that start a new round or end the current one
ROUND_RESET_KINDS = ("DRAWING", "GUESSING", "WAITING")


class Connection:
    """Client side of one Drawlio session.

    Args:
        host: Server address
        port: Server port
        listener: Called with every server message except CHECK
        timeout: Receive timeout in seconds
    """

    def __init__(self, host=HOST, port=SERVER_PORT, listener=None, timeout=RECEIVE_TIMEOUT):
        self.host = host
        self.port = port
        self.listener = listener
        self.timeout = timeout
        self.sock = None
        self.connected = False
        self.player_id = None
        self.exit_message = ""
        # Points of the current round, as received from the server
        self.canvas = set()

    @property
    def closed(self):
        return self.sock is None

    def open(self):
        """Open the socket and ask to join the game."""
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        sock.settimeout(self.timeout)
        # A connected datagram socket only receives from the server and
        # reports ICMP unreachable errors on later calls
        sock.connect((self.host, self.port))
        self.sock = sock
        self.send("CONNECT")

    def send(self, kind, *fields):
        self._send_raw(build_message(kind, *fields))

    def _send_raw(self, data):
        sock = self.sock
        if sock is None:
            return
        try:
            sock.send(data)
        except OSError as exc:
            print(f"Unable to message server: {exc}")

    def send_guess(self, text):
        self.send("GUESS", text)

    def send_point(self, x, y):
        self.send("POINT", f"{x}:{y}")

    def wait_connected(self):
        """Block until the server confirms the join.

        Returns:
            The player id assigned by the server

        Raises:
            ConnectionError: If the server does not answer in time
        """
        while not self.connected:
            sock = self.sock
            try:
                if sock is None:
                    raise OSError("connection closed")
                data = sock.recv(RECEIVE_BUFFER)
            except (socket.timeout, OSError) as exc:
                self.exit_message = "Unable to connect"
                self.stop()
                raise ConnectionError(self.exit_message) from exc
            try:
                message = parse_server_message(data)
            except UnicodeDecodeError:
                continue
            if message.kind == "CONNECTED" and message.payload:
                self.player_id = int(message.payload)
                self.connected = True
        return self.player_id

    def handle(self, message):
        if message.kind == "CHECK":
            # Echo the challenge back unchanged
            self._send_raw(message.raw)
            return
        if message.kind == "POINT":
            self.canvas.update(parse_points(message.payload or ""))
        elif message.kind in ROUND_RESET_KINDS:
            self.canvas.clear()
        if self.listener is not None:
            self.listener(message)

    def run(self):
        """Receive and dispatch messages until the connection ends.

        Returns:
            A short reason for why the connection ended
        """
        if not self.connected:
            self.wait_connected()
        while True:
            # stop() may run on another thread and clear self.sock at any time
            sock = self.sock
            if sock is None:
                break
            try:
                data = sock.recv(RECEIVE_BUFFER)
                self.connected = True
                self.handle(parse_server_message(data))
            except socket.timeout:
                # One missed check interval is tolerated, two in a row are not
                if self.connected:
                    self.connected = False
                else:
                    self.exit_message = "Connection to server timed out"
                    self.stop()
            except ConnectionRefusedError:
                self.exit_message = "Lost connection to server"
                self.stop()
            except UnicodeDecodeError:
                continue
            except OSError as exc:
                if self.sock is not None:
                    self.exit_message = str(exc)
                    self.stop()
        return self.exit_message

    def stop(self):
        """Tell the server we are leaving and close the socket."""
        sock = self.sock
        if sock is None:
            return
        if self.player_id is not None:
            self.send("DISCONNECT")
        self.sock = None
        self.connected = False
        sock.close()
