"""Optional httpx-backed request functions.

quickrest never picks a transport on its own; pass one of these as the
client's ``request`` option when httpx suits you.

Classes:
    :class:`HttpxTransport` -- blocking, backed by :class:`httpx.Client`.
    :class:`AsyncHttpxTransport` -- non-blocking, backed by :class:`httpx.AsyncClient`.
"""

from quickrest.transport.async_transport import AsyncHttpxTransport
from quickrest.transport.sync_transport import HttpxTransport

__all__ = ["AsyncHttpxTransport", "HttpxTransport"]
