"""
Wrapper around logging to provide our own functionality.

This adds the ability to log using str.format() instead of %, and to tag messages
with the map or lump currently being decoded.
"""
from typing import (
    TYPE_CHECKING, Any, Dict, Generator, List, Mapping, Optional, Tuple, Type, Union, cast,
)
from types import TracebackType
import contextlib
import contextvars
import logging
import os
import sys


__all__ = ['LoggerAdapter', 'get_logger', 'init_logging', 'context']
# Only generic in stubs!
CTX_STACK: 'contextvars.ContextVar[List[str]]' = contextvars.ContextVar('wadtools_logger')
#: Set this environment variable to ``1`` to show debug messages on the console.
DEBUG_ENV: str = 'WADTOOLS_DEBUG'


class LogMessage:
    """Allow using str.format() in logging messages.

    The __str__() method performs the joining.
    """
    fmt: str
    args: Tuple[object, ...]
    kwargs: Dict[str, object]

    def __init__(
        self,
        fmt: str,
        args: Tuple[object, ...],
        kwargs: Dict[str, object],
    ) -> None:
        self.fmt = fmt
        self.args = args
        self.kwargs = kwargs

    def __str__(self) -> str:
        # Only format if we have arguments!
        # That way { or } can be used in regular messages.
        if self.args or self.kwargs:
            self.fmt = self.fmt.format(*self.args, **self.kwargs)
            # Don't repeat the formatting, and don't keep refs to the args.
            self.args = ()
            self.kwargs = {}
        return self.fmt


_SysExcInfoType = Union[
    Tuple[Type[BaseException], BaseException, Optional[TracebackType]],
    Tuple[None, None, None]
]
if TYPE_CHECKING:  # Only generic in stubs.
    _AdapterBase = logging.LoggerAdapter[logging.Logger]
else:
    _AdapterBase = logging.LoggerAdapter


class LoggerAdapter(_AdapterBase):
    """Fix loggers to use str.format()."""
    logger: logging.Logger

    def __init__(self, logger: logging.Logger) -> None:
        self.logger = logger
        logging.LoggerAdapter.__init__(self, logger, extra={})

    def log(
        self,
        level: int,
        msg: Any,
        *args: Any,
        exc_info: Union[None, bool, _SysExcInfoType, BaseException] = None,
        stack_info: bool = False,
        extra: Optional[Mapping[str, object]] = None,
        stacklevel: int = 1,
        **kwargs: Any,
    ) -> None:
        """This version of :external:py:meth:`~logging.Logger.log()` is for :external:py:meth:`str.format()` compatibility.

        The message is wrapped in a :py:class:`LogMessage` object, which is given the
        ``args`` and ``kwargs``.
        """
        if self.isEnabledFor(level):
            try:
                ctx = ', '.join(CTX_STACK.get())
            except LookupError:
                ctx = ''

            new_extra = {} if extra is None else dict(extra)
            new_extra['wadtools_context'] = f' ({ctx})' if ctx else ''

            # Skip over this method and the debug()/info()/etc wrapper.
            # From 3.11, frames inside logging itself are skipped automatically.
            if sys.version_info >= (3, 11):
                stacklevel += 1
            else:
                stacklevel += 2

            # noinspection PyProtectedMember
            self.logger._log(
                level,
                LogMessage(str(msg), args, kwargs),
                (),  # No positional arguments, we do the formatting through LogMessage.
                extra=new_extra,
                exc_info=exc_info,
                stack_info=stack_info,
                stacklevel=stacklevel,
            )

    def __getattr__(self, attr: str) -> Any:
        """Delegate unknown methods to the logger."""
        return getattr(self.logger, attr)


class Formatter(logging.Formatter):
    """Ensure a default context is set in records from other loggers."""
    def format(self, record: logging.LogRecord) -> str:
        record.__dict__.setdefault('wadtools_context', '')
        return super().format(record)


def _below_warning(record: logging.LogRecord) -> bool:
    """Warnings and errors go to stderr only, so keep them off stdout."""
    return record.levelno < logging.WARNING


def init_logging() -> logging.Logger:
    """Send log messages to the console, and return the root logger.

    Info messages go to stdout, warnings and errors to stderr. Set ``WADTOOLS_DEBUG=1``
    to also show debug messages. This also sets :py:func:`sys.excepthook`, so uncaught
    exceptions are logged.
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    fmt = Formatter(
        '[{levelname[0]}]{wadtools_context} {module}.{funcName}(): {message}',
        style='{',
    )

    out_handler = logging.StreamHandler(sys.stdout)
    out_handler.setLevel(logging.DEBUG if os.environ.get(DEBUG_ENV, '0') == '1' else logging.INFO)
    out_handler.addFilter(_below_warning)
    err_handler = logging.StreamHandler(sys.stderr)
    err_handler.setLevel(logging.WARNING)
    for handler in [out_handler, err_handler]:
        handler.setFormatter(fmt)
        root.addHandler(handler)

    prev_hook = sys.excepthook

    def log_uncaught(
        exc_type: Type[BaseException],
        exc_value: BaseException,
        exc_tb: Optional[TracebackType],
    ) -> None:
        """Log uncaught exceptions, then pass them along."""
        if isinstance(exc_value, SystemExit):
            return
        root.error('Uncaught exception:', exc_info=(exc_type, exc_value, exc_tb))
        if prev_hook is not sys.__excepthook__:
            prev_hook(exc_type, exc_value, exc_tb)

    sys.excepthook = log_uncaught
    return cast(logging.Logger, LoggerAdapter(root))


def get_logger(name: str = '') -> logging.Logger:
    """Get the named logger object.

    This puts the logger into the ``wadtools`` namespace, and wraps it to
    use :external:py:meth:`str.format()` instead of ``%`` formatting.
    """
    if name.startswith('wadtools.'):
        name = name[len('wadtools.'):]
    if name:
        log = logging.getLogger('wadtools.' + name)
    else:  # Allow retrieving the main logger.
        log = logging.getLogger('wadtools')
    return cast(logging.Logger, LoggerAdapter(log))


@contextlib.contextmanager
def context(name: str) -> Generator[str, None, None]:
    """Context manager to allow specifying additional information for any logs contained in this block.

    The specified string gets included in the log messages.
    """
    try:
        stack = CTX_STACK.get()
    except LookupError:
        stack = []
        CTX_STACK.set(stack)
    stack.append(name)
    try:
        yield name
    finally:
        popped = stack.pop()
        assert popped is name, f'Popped incorrect value: pop({popped!r}) != ctx({name!r})!'
