"""
All configuration flags, options, settings to fine-tune the API access.

All settings are grouped semantically just for convenience
(instead of a flat mega-object with all the values in it).

In this library, they are called *"settings"* (plural).
Combined, they form a *"configuration"* (singular).

All of them have reasonable defaults. Nothing is loaded from files or
environment variables: the settings are constructed in code and passed
to the transport explicitly.
"""
import dataclasses
from typing import Iterable, Optional


@dataclasses.dataclass
class NetworkingSettings:

    request_timeout: Optional[float] = 5 * 60  # == aiohttp.client.DEFAULT_TIMEOUT
    """
    A timeout for the whole request, from connecting to reading the response.
    If ``None``, there is no timeout at all (not recommended).
    """

    connect_timeout: Optional[float] = None
    """
    A timeout for establishing a connection to the API server.
    If ``None``, only the request timeout applies.
    """

    error_backoffs: Iterable[float] = (1, 1, 2, 3, 5)
    """
    Backoffs (in seconds) between retries of the failed requests.

    Only the connection errors, timeouts, and HTTP 5xx are retried.
    Client-side errors (HTTP 4xx) are escalated immediately.

    The number of retries is the number of backoffs. An empty sequence
    disables the retries: the first failure is escalated as is.
    A single number means one retry with that backoff.

    The retries belong to the transport only. The API clients on top of it
    never retry anything on their own.
    """


@dataclasses.dataclass
class ClientSettings:
    networking: NetworkingSettings = dataclasses.field(default_factory=NetworkingSettings)
