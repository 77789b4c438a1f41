"""
The main kubeaccess module for all the exported functions & classes.
"""
# isort: skip_file

# Unlike all other places, where we import other modules and refer
# the functions via the modules, this is the library's top-level interface,
# as it is seen by the users. So, we export the individual functions.

from kubeaccess._cogs.clients.errors import (
    APIError,
    APIClientError,
    APIServerError,
    APIUnauthorizedError,
    APIForbiddenError,
    APINotFoundError,
    APIConflictError,
    UnknownResourceError,
)
from kubeaccess._cogs.clients.transports import (
    Transport,
)
from kubeaccess._cogs.configs.configuration import (
    ClientSettings,
    NetworkingSettings,
)
from kubeaccess._cogs.helpers.typedefs import (
    Logger,
)
from kubeaccess._cogs.helpers.versions import (
    version as __version__,
)
from kubeaccess._cogs.structs.bodies import (
    RawBody,
    RawMeta,
    ObjectReference,
    build_object_reference,
)
from kubeaccess._cogs.structs.discovery import (
    GroupVersion,
    APIGroup,
    APIGroupList,
    APIResource,
    APIResourceList,
    api_path,
)
from kubeaccess._core.loggers import (
    ObjectLogger,
    ObjectTextFormatter,
    ObjectJsonFormatter,
)
from kubeaccess._core.resources import (
    ResourceClient,
)
from kubeaccess._core.groupversions import (
    APIClient,
)
from kubeaccess._core.clients import (
    Client,
    client,
)

__all__ = [
    'APIError',
    'APIClientError',
    'APIServerError',
    'APIUnauthorizedError',
    'APIForbiddenError',
    'APINotFoundError',
    'APIConflictError',
    'UnknownResourceError',
    'Transport',
    'ClientSettings',
    'NetworkingSettings',
    'Logger',
    'RawBody',
    'RawMeta',
    'ObjectReference',
    'build_object_reference',
    'GroupVersion',
    'APIGroup',
    'APIGroupList',
    'APIResource',
    'APIResourceList',
    'api_path',
    'ObjectLogger',
    'ObjectTextFormatter',
    'ObjectJsonFormatter',
    'ResourceClient',
    'APIClient',
    'Client',
    'client',
]
