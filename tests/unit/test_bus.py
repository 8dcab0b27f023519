"""
Tests for the in-process request/reply bus.
"""
import threading
from concurrent.futures import InvalidStateError
from unittest.mock import MagicMock

import pytest
from persistor.bus import EventBus, Message
from persistor.exceptions import NoHandlerFound
from persistor.options import PersistorOptions


@pytest.fixture
def bus():
    with EventBus(max_workers=2) as bus:
        yield bus


def test_request_reply(bus):
    bus.register_handler('echo', lambda message: message.reply({'echo': message.body}))
    assert bus.request('echo', 'hello', timeout=5) == {'echo': 'hello'}


def test_no_handler(bus):
    future = bus.send('nowhere', {})
    with pytest.raises(NoHandlerFound) as exc_info:
        future.result(timeout=5)
    assert exc_info.value.address == 'nowhere'


def test_round_robin(bus):
    """Test point-to-point delivery alternates between handlers"""
    bus.register_handler('addr', lambda message: message.reply('first'))
    bus.register_handler('addr', lambda message: message.reply('second'))

    replies = [bus.request('addr', None, timeout=5) for _ in range(4)]

    assert replies == ['first', 'second', 'first', 'second']


def test_unregister(bus):
    def handler(message):
        message.reply('ok')

    bus.register_handler('addr', handler)
    bus.unregister_handler('addr', handler)

    assert bus.handlers('addr') == []
    with pytest.raises(NoHandlerFound):
        bus.request('addr', None, timeout=5)

    # Unknown handlers are ignored
    bus.unregister_handler('addr', handler)


def test_handler_exception_fails_future(bus):
    def handler(message):
        raise ValueError('boom')

    bus.register_handler('addr', handler)
    with pytest.raises(ValueError, match='boom'):
        bus.request('addr', None, timeout=5)


def test_handler_without_reply(bus):
    bus.register_handler('addr', lambda message: None)
    assert bus.request('addr', None, timeout=5) is None


def test_second_reply_ignored(bus):
    def handler(message):
        message.reply(1)
        message.reply(2)

    bus.register_handler('addr', handler)
    assert bus.request('addr', None, timeout=5) == 1


def test_concurrent_reply_race_ignored(caplog_warnings):
    """Test a reply losing the race to a concurrent one is logged, not raised"""
    future = MagicMock()
    future.done.return_value = False
    future.set_result.side_effect = InvalidStateError()

    Message('addr', None, future).reply(2)

    assert 'Ignoring second reply' in caplog_warnings.text

def test_messages_handled_concurrently(bus):
    """Test two messages are in flight at once on separate workers"""
    barrier = threading.Barrier(2, timeout=5)

    def handler(message):
        barrier.wait()
        message.reply(message.body)

    bus.register_handler('addr', handler)
    futures = [bus.send('addr', i) for i in range(2)]

    assert sorted(f.result(timeout=5) for f in futures) == [0, 1]


def test_from_options_worker_count():
    """Test the worker count from options allows that many messages in flight"""
    barrier = threading.Barrier(3, timeout=5)

    def handler(message):
        barrier.wait()
        message.reply(message.body)

    with EventBus.from_options(PersistorOptions(workers=3)) as bus:
        assert bus.max_workers == 3
        bus.register_handler('addr', handler)
        futures = [bus.send('addr', i) for i in range(3)]
        assert sorted(f.result(timeout=5) for f in futures) == [0, 1, 2]

def test_send_after_close():
    bus = EventBus()
    bus.close()
    with pytest.raises(RuntimeError):
        bus.send('addr', None)
    # Closing twice is harmless
    bus.close()


if __name__ == '__main__':
    __import__('pytest').main([__file__])
