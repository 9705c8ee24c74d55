"""
Logging setup and per-pod loggers.

Every message about a specific pod carries a reference to that pod, so that
the messages can be prefixed with ``[namespace/name]`` in the text logs,
or put into a separate field in the JSON logs (for the log parsers).
"""
import copy
import enum
import logging
from typing import Any, List, Mapping, MutableMapping, Optional, Tuple, Union

import pythonjsonlogger.core
import pythonjsonlogger.json

DEFAULT_JSON_REFKEY = 'object'
""" A key for object references in JSON logs, as seen by the log parsers. """


class LogFormat(enum.Enum):
    """ Log formats, as specified on CLI. """
    PLAIN = '%(message)s'
    FULL = '[%(asctime)s] %(name)-20.20s [%(levelname)-8.8s] %(message)s'
    JSON = enum.auto()


class ObjectFormatter(logging.Formatter):
    pass


class ObjectTextFormatter(ObjectFormatter, logging.Formatter):
    pass


class ObjectJsonFormatter(ObjectFormatter, pythonjsonlogger.json.JsonFormatter):
    """
    JSON records with the pod reference under its own key (``object`` by default).

    The raw ``k8s_ref`` attribute is never dumped as is: only under the refkey.
    """

    def __init__(self, *args: Any, refkey: Optional[str] = None, **kwargs: Any) -> None:
        reserved = set(kwargs.pop('reserved_attrs', pythonjsonlogger.core.RESERVED_ATTRS))
        kwargs['reserved_attrs'] = reserved | {'k8s_ref'}
        kwargs.setdefault('timestamp', True)
        super().__init__(*args, **kwargs)
        self._refkey: str = refkey or DEFAULT_JSON_REFKEY

    def add_fields(
            self,
            log_record: MutableMapping[str, object],
            record: logging.LogRecord,
            message_dict: MutableMapping[str, object],
    ) -> None:
        super().add_fields(log_record, record, message_dict)  # type: ignore
        ref = getattr(record, 'k8s_ref', None)
        if ref is not None:
            log_record[self._refkey] = ref
        log_record.setdefault('severity', _severity(record.levelno))


# The upper bound of every level, and how the log parsers name it.
SEVERITIES: List[Tuple[int, str]] = [
    (logging.DEBUG, 'debug'),
    (logging.INFO, 'info'),
    (logging.WARNING, 'warn'),
    (logging.ERROR, 'error'),
]


def _severity(levelno: int) -> str:
    for threshold, name in SEVERITIES:
        if levelno <= threshold:
            return name
    return 'fatal'


class ObjectPrefixingMixin(ObjectFormatter):
    def format(self, record: logging.LogRecord) -> str:
        if hasattr(record, 'k8s_ref'):
            ref = getattr(record, 'k8s_ref')
            namespace = ref.get('namespace', '')
            name = ref.get('name', '')
            prefix = f"[{namespace}/{name}]" if namespace else f"[{name}]"
            record = copy.copy(record)  # shallow
            record.msg = f"{prefix} {record.msg}"
        return super().format(record)


class ObjectPrefixingTextFormatter(ObjectPrefixingMixin, ObjectTextFormatter):
    pass


class ObjectPrefixingJsonFormatter(ObjectPrefixingMixin, ObjectJsonFormatter):
    pass


class ObjectLogger(logging.LoggerAdapter):
    """
    A logger/adapter to carry the pod's identifiers for formatting.

    Constructed for every relayed call about a specific pod: either from
    the pod's body (if available), or from its namespace & name (if not).
    The reference is copied, so it is protected against the pod's modification.
    """

    def __init__(
            self,
            *,
            body: Optional[Mapping[str, Any]] = None,
            namespace: Optional[str] = None,
            name: Optional[str] = None,
    ) -> None:
        meta = (body or {}).get('metadata', {})
        super().__init__(logger, dict(
            k8s_ref=dict(
                apiVersion=(body or {}).get('apiVersion', 'v1'),
                kind=(body or {}).get('kind', 'Pod'),
                name=meta.get('name', name),
                uid=meta.get('uid'),
                namespace=meta.get('namespace', namespace),
            ),
        ))

    def process(
            self,
            msg: str,
            kwargs: MutableMapping[str, Any],
    ) -> Tuple[str, MutableMapping[str, Any]]:
        # Native logging overwrites the message's extra with the adapter's extra.
        # We merge them, so that both message's & adapter's extras are available.
        kwargs["extra"] = dict(self.extra or {}, **kwargs.get('extra', {}))
        return msg, kwargs


logger = logging.getLogger('vknode.objects')


def configure(
        debug: Optional[bool] = None,
        verbose: Optional[bool] = None,
        quiet: Optional[bool] = None,
        log_format: Union[LogFormat, str] = LogFormat.FULL,
        log_prefix: Optional[bool] = False,
        log_refkey: Optional[str] = None,
) -> None:
    log_level = 'DEBUG' if debug or verbose else 'WARNING' if quiet else 'INFO'
    formatter = make_formatter(log_format=log_format, log_prefix=log_prefix, log_refkey=log_refkey)
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    logger = logging.getLogger()
    logger.addHandler(handler)
    logger.setLevel(log_level)

    # Prevent the low-level logging unless in the debug mode. Keep only the provider's messages.
    # For no-propagation loggers, add a dummy null handler to prevent printing the messages.
    for name in ['asyncio', 'aiohttp']:
        logger = logging.getLogger(name)
        logger.propagate = bool(debug)
        if not debug:
            logger.handlers[:] = [logging.NullHandler()]


def make_formatter(
        log_format: Union[LogFormat, str] = LogFormat.FULL,
        log_prefix: Optional[bool] = False,
        log_refkey: Optional[str] = None,
) -> ObjectFormatter:
    # JSON logs have the pod under their own key; text logs need the prefix unless told otherwise.
    if log_format is LogFormat.JSON:
        json_cls = ObjectPrefixingJsonFormatter if log_prefix else ObjectJsonFormatter
        return json_cls(refkey=log_refkey)

    fmt = log_format.value if isinstance(log_format, LogFormat) else log_format
    if not isinstance(fmt, str):
        raise ValueError(f"Unsupported log format: {log_format!r}")
    text_cls = ObjectTextFormatter if log_prefix is False else ObjectPrefixingTextFormatter
    return text_cls(fmt)
