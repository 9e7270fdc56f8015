import json
import socket

import zmq


# ==========================================
# EVENT BRIDGE (core -> renderer)
# ==========================================
class NetworkBridge:
    """
    TCP server for renderers. Events go out as one JSON object per line to
    every connected client. Clients are accepted without blocking from
    update(), which the runtime calls once per frame.

    greeting, if given, is called for each new client and its dict is sent
    first, so a renderer joining late starts from the current state.
    """

    def __init__(self, host="127.0.0.1", port=5555, max_clients=4, greeting=None):
        self.addr = (host, port)
        self.max_clients = max_clients
        self.greeting = greeting
        self.sock = None
        self.clients = []
        self._listen()

    def _listen(self):
        try:
            sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind(self.addr)
            sock.listen(self.max_clients)
            sock.setblocking(False)
        except OSError as e:
            print(f"[NET] Cannot listen on {self.addr}: {e}")
            return
        self.sock = sock
        print(f"[NET] Listening on {sock.getsockname()}")

    @property
    def port(self):
        return self.sock.getsockname()[1] if self.sock is not None else None

    def update(self):
        if self.sock is None:
            return
        while len(self.clients) < self.max_clients:
            try:
                conn, addr = self.sock.accept()
            except BlockingIOError:
                return
            conn.setblocking(True)
            print(f"[NET] Renderer connected: {addr}")
            self.clients.append((conn, addr))
            if self.greeting is not None:
                self._send(conn, addr, self.greeting())

    @staticmethod
    def _encode(payload):
        return (json.dumps(payload) + "\n").encode("utf-8")

    def _send(self, conn, addr, payload):
        try:
            conn.sendall(self._encode(payload))
            return True
        except OSError:
            print(f"[NET] Renderer disconnected: {addr}")
            conn.close()
            self.clients = [c for c in self.clients if c[0] is not conn]
            return False

    def send_event(self, event_data):
        """Broadcast one dict. Returns True if at least one client got it."""
        delivered = False
        for conn, addr in list(self.clients):
            delivered = self._send(conn, addr, event_data) or delivered
        return delivered

    def __call__(self, event):
        self.update()
        self.send_event(event.to_dict())

    def close(self):
        for conn, _ in self.clients:
            conn.close()
        self.clients = []
        if self.sock is not None:
            self.sock.close()
            self.sock = None


class ZmqEventPublisher:
    """ZeroMQ PUB alternative; subscribers filter on the event name topic."""

    def __init__(self, host="*", port=5556):
        self.context = zmq.Context()
        self.socket = self.context.socket(zmq.PUB)
        try:
            self.socket.bind(f"tcp://{host}:{port}")
        except zmq.ZMQError:
            self.close()
            raise
        print(f"[ZMQ] Publishing on tcp://{host}:{port}")

    def send_event(self, event_data):
        self.socket.send_string(f"{event_data['event']} {json.dumps(event_data)}")
        return True

    def __call__(self, event):
        self.send_event(event.to_dict())

    def close(self):
        self.socket.close(linger=0)
        self.context.term()


class ConsoleSink:
    def __call__(self, event):
        print(f"[PY] {event!r}")

    def close(self):
        pass


def create_sink(cfg, greeting=None):
    """Build the event sink named by cfg['network']['transport'] ("tcp", "zmq" or "none")."""
    ncfg = cfg.get("network", {})
    transport = ncfg.get("transport", "tcp")
    if transport == "tcp":
        return NetworkBridge(
            ncfg.get("host", "127.0.0.1"),
            ncfg.get("port", 5555),
            max_clients=ncfg.get("max_clients", 4),
            greeting=greeting,
        )
    if transport == "zmq":
        return ZmqEventPublisher(ncfg.get("zmq_host", "*"), ncfg.get("zmq_port", 5556))
    if transport == "none":
        return None
    raise ValueError(f"Unknown network transport: {transport}")


def attach_sinks(processor, cfg):
    """
    Create the configured sinks and register them on the processor.
    A transport that cannot be set up is reported and skipped; the core
    keeps running without a bridge.
    """
    sinks = []
    try:
        sink = create_sink(cfg, greeting=lambda: {"event": "State", **processor.snapshot()})
    except (ValueError, OSError, zmq.ZMQError) as e:
        print("[NET] WARNING: running without a bridge:", e)
        sink = None
    if sink is not None:
        sinks.append(sink)
    if cfg.get("debug", {}).get("print_events", True):
        sinks.append(ConsoleSink())
    for sink in sinks:
        processor.register_sink(sink)
    return sinks
