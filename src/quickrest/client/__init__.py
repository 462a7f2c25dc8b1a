"""Runtime side of quickrest.

Classes:
    :class:`Client` -- the object handed back by :func:`quickrest.quickrest`.
    :class:`Resource` -- a navigable, callable resource view.
    :class:`Dispatcher` -- runs the before-each hook and the request function
    for every verb call.
"""

from quickrest.client.dispatch import Dispatcher
from quickrest.client.resource import Client, ClientContext, Resource

__all__ = ["Client", "ClientContext", "Dispatcher", "Resource"]
