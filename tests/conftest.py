import pytest

from ibmi_signon.common.frame import Frame
from ibmi_signon.system import HostSystem

CLIENT_SEED = bytes(range(0x01, 0x09))
SERVER_SEED = bytes(range(0x09, 0x11))


class FakeConnection:
    """Scripted connection: returns queued replies in order and records sent frames."""

    def __init__(self, replies=()):
        self.replies = list(replies)
        self.sent = []
        self.connected = False

    async def connect(self):
        self.connected = True
        return self

    async def disconnect(self):
        self.connected = False

    async def send(self, frame):
        self.sent.append(frame)

    async def receive(self):
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply if isinstance(reply, Frame) else Frame.parse(reply)


class RecordingEncryptor:
    """Wraps an encryptor and records every call."""

    def __init__(self, delegate):
        self.delegate = delegate
        self.calls = []

    def __call__(self, *args):
        self.calls.append(args)
        return self.delegate(*args)


@pytest.fixture
def system():
    return HostSystem(host_name="ibmi.example.com", user_id="alice", password="secret")
