"""Resource client for the remote game collection.

Exports:
    ResourceClient     -- Abstract CRUD contract the sync engine depends on.
    HttpResourceClient -- httpx implementation of the HTTP/JSON collection API.
"""

from gamedesk.client.base import ResourceClient
from gamedesk.client.http import HttpResourceClient

__all__ = ["HttpResourceClient", "ResourceClient"]
