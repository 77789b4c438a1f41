"""
Logging of the API access, with the objects' references attached.

Every operation on an individual object is logged through :class:`ObjectLogger`,
which puts the object reference (apiVersion, kind, namespace, name, uid) into
the log records as ``k8s_ref``. It is logged to the library's logger, or to the
logger given by the application (a plain logger or an adapter).

The library never configures the logging itself: no handlers, no levels.
The formatters below are for the applications that want to render
the references; either as a text prefix or as a field of JSON logs::

    handler = logging.StreamHandler()
    handler.setFormatter(kubeaccess.ObjectJsonFormatter(refkey='k8s'))
    logging.getLogger('kubeaccess').addHandler(handler)
"""
import copy
import logging
from collections.abc import MutableMapping
from typing import Any, Dict, Mapping, Optional, Tuple

# Luckily, we do not mock these ones in tests, so we can import them into our namespace.
try:
    # python-json-logger>=3.1.0
    from pythonjsonlogger.core import RESERVED_ATTRS as _pjl_RESERVED_ATTRS
    from pythonjsonlogger.json import JsonFormatter as _pjl_JsonFormatter
except ImportError:
    # python-json-logger<3.1.0
    from pythonjsonlogger.jsonlogger import JsonFormatter as _pjl_JsonFormatter  # type: ignore
    from pythonjsonlogger.jsonlogger import RESERVED_ATTRS as _pjl_RESERVED_ATTRS  # type: ignore

from kubeaccess._cogs.helpers import typedefs
from kubeaccess._cogs.structs import bodies

logger = logging.getLogger('kubeaccess.objects')


def format_reference(ref: Mapping[str, Any]) -> str:
    """
    Render an object reference for humans: ``Kind namespace/name``.

    The absent parts are skipped: e.g. ``Namespace default`` for cluster
    objects, or ``ConfigMap`` for the objects not yet named.
    """
    namespace = ref.get('namespace')
    name = ref.get('name')
    path = f"{namespace}/{name}" if namespace and name else name or ''
    return ' '.join(part for part in [ref.get('kind'), path] if part)


class ObjectTextFormatter(logging.Formatter):
    """
    Plain-text logs, with the objects' references prefixed to the messages.

    The records without the references (e.g. the transport's own messages)
    are formatted as usual.
    """

    def format(self, record: logging.LogRecord) -> str:
        ref = getattr(record, 'k8s_ref', None)
        text = format_reference(ref) if ref else ''
        if text:
            record = copy.copy(record)  # shallow; other handlers see the original message
            record.msg = f"[{text}] {record.msg}"
        return super().format(record)


class ObjectJsonFormatter(_pjl_JsonFormatter):
    """
    JSON logs, with the objects' references in their own field.

    The field is ``"object"`` by default, or as named by ``refkey``.
    """

    def __init__(
            self,
            *args: Any,
            refkey: str = 'object',
            **kwargs: Any,
    ) -> None:
        reserved_attrs = set(kwargs.pop('reserved_attrs', _pjl_RESERVED_ATTRS)) | {'k8s_ref'}
        kwargs.setdefault('timestamp', True)
        super().__init__(*args, reserved_attrs=reserved_attrs, **kwargs)
        self.refkey = refkey

    def add_fields(
            self,
            log_record: Dict[str, Any],
            record: logging.LogRecord,
            message_dict: Dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record.setdefault('level', record.levelname.lower())
        ref = getattr(record, 'k8s_ref', None)
        if ref:
            log_record[self.refkey] = dict(ref)


class ObjectLogger(typedefs.LoggerAdapter):
    """
    A logger adapter to carry the object reference in the log records.

    The reference is taken from the body once, at creation: the later
    changes of the body do not affect the messages already being logged.

    If the parent is an adapter itself, its extras are kept too, and
    the records go to the parent's underlying logger: the standard adapters
    replace the extras of the records instead of merging them.
    """

    def __init__(
            self,
            *,
            body: Mapping[str, Any],
            parent: Optional[typedefs.Logger] = None,
    ) -> None:
        extra: Dict[str, Any] = {}
        target = parent if parent is not None else logger
        while isinstance(target, logging.LoggerAdapter):
            extra = dict(target.extra or {}, **extra)
            target = target.logger
        extra['k8s_ref'] = bodies.build_object_reference(body)
        super().__init__(target, extra)

    def process(
            self,
            msg: str,
            kwargs: MutableMapping[str, Any],
    ) -> Tuple[str, MutableMapping[str, Any]]:
        # The call's own extras are kept along with the object's ones.
        kwargs['extra'] = dict(self.extra or {}, **kwargs.get('extra', {}))
        return msg, kwargs
