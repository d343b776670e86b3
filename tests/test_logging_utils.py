import logging

import pytest

from tikzmouse.logging_utils import _safe_repr, apply_debug_logging, debug_log_call


def test_debug_log_call_traces_entry_and_exit(caplog):
    logger = logging.getLogger('tikzmouse.tests.trace')

    @debug_log_call(logger)
    def shift(value, by=1):
        return value + by

    with caplog.at_level(logging.DEBUG, logger=logger.name):
        assert shift(2, by=3) == 5

    messages = [record.getMessage() for record in caplog.records]
    assert any(m.startswith('Entering') and 'shift' in m and 'by=3' in m for m in messages)
    assert any(m.startswith('Exiting') and '-> 5' in m for m in messages)


def test_debug_log_call_reraises(caplog):
    logger = logging.getLogger('tikzmouse.tests.trace')

    @debug_log_call(logger)
    def fail():
        raise KeyError('boom')

    with caplog.at_level(logging.DEBUG, logger=logger.name):
        with pytest.raises(KeyError):
            fail()

    assert any('Exception in' in record.getMessage() for record in caplog.records)


def test_generators_are_not_wrapped():
    logger = logging.getLogger('tikzmouse.tests.trace')

    def numbers():
        yield 1

    assert debug_log_call(logger)(numbers) is numbers


def test_apply_debug_logging_skips_private_names():
    def public():
        return 1

    def _private():
        return 2

    public.__module__ = _private.__module__ = 'fake_module'
    namespace = {'__name__': 'fake_module', 'public': public, '_private': _private}

    apply_debug_logging(namespace)

    assert getattr(namespace['public'], '_debug_logging_wrapped', False)
    assert namespace['_private'] is _private


def test_safe_repr_shortens_documents():
    rendered = _safe_repr('x' * 1000)
    assert rendered.startswith('str(len=1000')
    assert len(rendered) < 200


def test_apply_debug_logging_wraps_methods_on_request(caplog):
    class Counter:
        def __init__(self):
            self.value = 0

        def bump(self, by=1):
            self.value += by
            return self.value

        @classmethod
        def fresh(cls):
            return cls()

    module_name = Counter.__module__
    logger = logging.getLogger('tikzmouse.tests.methods')
    apply_debug_logging({'__name__': module_name, 'Counter': Counter}, logger=logger, wrap_methods=True)

    assert getattr(Counter.bump, '_debug_logging_wrapped', False)
    assert not getattr(Counter.__init__, '_debug_logging_wrapped', False)
    with caplog.at_level(logging.DEBUG, logger=logger.name):
        counter = Counter.fresh()
        assert counter.bump(by=2) == 2

    messages = [record.getMessage() for record in caplog.records]
    assert any(m.startswith('Entering Counter.fresh') for m in messages)
    assert any(m.startswith('Entering Counter.bump') and 'by=2' in m for m in messages)
