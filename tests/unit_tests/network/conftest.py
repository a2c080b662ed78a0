# -*- coding: utf-8 -*-

import pytest
from dummy_http_server import DummyHttpServer


@pytest.fixture
def http_server():
    """Local HTTP server standing for the remote API.

    By default, a GET request on ``/?name=<name>`` is answered with the JSON
    list ``[{"name": <name>}]``, and is recorded in ``http_server.received``.
    A test can replace ``http_server.handler.do_GET`` to send another
    response (see ``DefaultHandler.send_json()`` and ``send_raw()``).

    Requests are served only inside a ``with http_server:`` block. The server
    is closed at the end of the test.
    """
    httpd = DummyHttpServer()
    yield httpd
    httpd.close()
