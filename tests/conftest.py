import io
import json
import logging
import re
import sys

import aiohttp.web
import pytest

from vknode._cogs.clients.auth import APIContext
from vknode._cogs.configs.configuration import ProviderSettings
from vknode._cogs.structs.credentials import ConnectionInfo
from vknode._core.engines.loggers import ObjectPrefixingTextFormatter, configure
from vknode._core.provider.lifecycle import PodProvider


#
# Mocks for Kubernetes API clients of both clusters. Reasons:
# 1. We do not test the clients, we test the layers on top of them,
#    so everything low-level should be mocked and assumed to be functional.
# 2. No external calls must be made under any circumstances.
#    The unit-tests must be fully isolated from the environment.
#

@pytest.fixture()
def hostname():
    """ A fake hostname of the remote cluster for all aiohttp/aresponses tests. """
    return 'fake-host'


@pytest.fixture()
def local_hostname():
    """ A fake hostname of the local (host-adjacent) cluster. """
    return 'fake-local-host'


@pytest.fixture()
def settings():
    return ProviderSettings()


@pytest.fixture()
async def remote_context(hostname):
    context = APIContext(ConnectionInfo(server=f'https://{hostname}'))
    async with context:
        yield context


@pytest.fixture()
async def local_context(local_hostname):
    context = APIContext(ConnectionInfo(server=f'https://{local_hostname}'))
    async with context:
        yield context


@pytest.fixture()
def provider(local_context, remote_context, settings):
    return PodProvider(
        local=local_context,
        remote=remote_context,
        node_name='vk-node',
        operating_system='Linux',
        internal_ip='10.0.0.1',
        daemon_port=10250,
        settings=settings,
    )


@pytest.fixture()
def resp_mocker(mocker):
    """
    A factory of server-side callbacks for `aresponses` with mocking/spying.

    The value of the fixture is a function, which return a coroutine mock.
    That coroutine mock should be passed to `aresponses.add` as a response
    callback function. When called, it calls the mock defined by the function's
    arguments (specifically, return_value or side_effects).

    The difference from passing the responses directly to `aresponses.add`
    is that it is possible to assert on whether the response was handled
    by that callback at all (i.e. HTTP URL & method matched), especially
    if there are multiple responses registered.

    Sample usage::

        def test_me(resp_mocker):
            response = aiohttp.web.json_response({'a': 'b'})
            callback = resp_mocker(return_value=response)
            aresponses.add(hostname, '/path/', 'get', callback)
            do_something()
            assert callback.called
            assert callback.call_count == 1
            assert callback.call_args_list[0][0][0]['data'] == {...}
    """
    def resp_maker(*args, **kwargs):
        actual_response = mocker.MagicMock(*args, **kwargs)

        async def resp_mock_effect(request):

            # The request's content can be read inside of the handler only. We preserve
            # the data into the request's own storage, so that they could be asserted later.
            try:
                request['data'] = await request.json()
            except json.JSONDecodeError:
                request['data'] = await request.text()

            # Get a response/error as it was intended (via return_value/side_effect).
            response = actual_response()
            return response

        return mocker.AsyncMock(side_effect=resp_mock_effect)
    return resp_maker


def k8s_status(code, reason, message=''):
    """ A response with the Kubernetes `Status` body, as the API servers return on errors. """
    return aiohttp.web.json_response({
        'apiVersion': 'v1',
        'kind': 'Status',
        'status': 'Failure',
        'code': code,
        'reason': reason,
        'message': message or reason,
    }, status=code)


@pytest.fixture()
def status_response():
    return k8s_status


#
# Helpers for the logging checks.
#


@pytest.fixture()
def logstream(caplog):
    """ Prefixing is done at the final output. We have to intercept it. """

    logger = logging.getLogger()
    handlers = list(logger.handlers)

    # Setup all log levels of sub-libraries. A sife-effect: the handlers are also added.
    configure(verbose=True)

    # Remove any stream handlers added in the step above. But keep the caplog's handlers.
    for handler in list(logger.handlers):
        if isinstance(handler, logging.StreamHandler) and handler.stream is sys.stderr:
            logger.removeHandler(handler)

    # Inject our stream-intercepting handler.
    stream = io.StringIO()
    handler = logging.StreamHandler(stream)
    formatter = ObjectPrefixingTextFormatter('prefix %(message)s')
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    try:
        with caplog.at_level(logging.DEBUG):
            yield stream
    finally:
        logger.removeHandler(handler)
        logger.handlers[:] = handlers  # undo `configure()`


@pytest.fixture()
def assert_logs(caplog):
    """
    A function to assert the logs are present (by pattern).

    The listed message patterns MUST be present, in the order specified.
    Some other log messages can also be present, but they are ignored.
    """
    caplog.set_level(logging.DEBUG)

    def assert_logs_fn(patterns, prohibited=[]):
        __traceback_hide__ = True
        remaining_patterns = list(patterns)
        for message in caplog.messages:
            for idx, pattern in enumerate(remaining_patterns):
                if re.search(pattern, message):
                    if idx == 0:
                        remaining_patterns[:1] = []
                        break  # out of `remaining_patterns` cycle
                    else:
                        skipped_patterns = remaining_patterns[:idx]
                        raise AssertionError(f"Few patterns were skipped: {skipped_patterns!r}")

            for pattern in prohibited:
                if re.search(pattern, message):
                    raise AssertionError(f"Prohibited log pattern found: {message!r} ~ {pattern!r}")

        if remaining_patterns:
            raise AssertionError(f"Few patterns were missed: {remaining_patterns!r}")

    return assert_logs_fn
