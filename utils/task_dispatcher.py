"""Run session operations on a QThreadPool and report back through signals."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Tuple

from PyQt6 import sip
from PyQt6.QtCore import QObject, QRunnable, QThreadPool, pyqtSignal

from utils import common


logger = common.get_logger('task_dispatcher')


TaskCallable = Callable[..., Any]


@dataclass(frozen=True)
class TaskContext:
    """Metadata describing the submitted task."""

    name: str
    category: Optional[str] = None
    trace_id: str = field(default_factory=common.generate_trace_id)

    def __post_init__(self) -> None:
        if not self.trace_id or not str(self.trace_id).strip():
            object.__setattr__(self, "trace_id", common.generate_trace_id())


class TaskHandle(QObject):
    """Signals describing the lifecycle of one submitted task."""

    completed = pyqtSignal(object)
    failed = pyqtSignal(Exception)
    finished = pyqtSignal()

    def __init__(self, context: TaskContext, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._context = context

    @property
    def context(self) -> TaskContext:
        return self._context

    @property
    def trace_id(self) -> str:
        return self._context.trace_id


class _TaskRunnable(QRunnable):
    """Internal runnable submitting work to QThreadPool."""

    def __init__(
        self,
        fn: TaskCallable,
        args: Tuple[Any, ...],
        kwargs: Dict[str, Any],
        handle: TaskHandle,
    ):
        super().__init__()
        self.fn = fn
        self.args = args
        self.kwargs = kwargs
        self.handle = handle
        self._context = handle.context
        self._trace_id = handle.trace_id

    @staticmethod
    def _is_deleted_error(exc: Exception) -> bool:
        return isinstance(exc, RuntimeError) and 'has been deleted' in str(exc)

    def _handle_is_deleted(self) -> bool:
        try:
            return sip.isdeleted(self.handle)
        except (RuntimeError, TypeError):
            return False

    def _safe_emit(self, signal_name: str, *args: Any) -> None:
        if self._handle_is_deleted():
            logger.debug('Skipping %s emit because TaskHandle is gone for %s', signal_name, self._context)
            return
        signal = getattr(self.handle, signal_name, None)
        if signal is None:
            logger.debug('TaskHandle missing signal %s for %s', signal_name, self._context)
            return
        try:
            signal.emit(*args)
        except RuntimeError as exc:
            if self._is_deleted_error(exc):
                logger.debug('Suppressed %s emit after TaskHandle destruction for %s', signal_name, self._context)
                return
            raise

    def run(self) -> None:
        with common.trace_id_scope(self._trace_id):
            try:
                result = self.fn(*self.args, **self.kwargs)
            except Exception as exc:
                logger.exception('Task %s failed: %s', self._context, exc)
                self._safe_emit('failed', exc)
            else:
                self._safe_emit('completed', result)
            finally:
                self._safe_emit('finished')


class TaskDispatcher(QObject):
    """Submit blocking adb work to a dedicated single-thread pool.

    One worker thread keeps adb invocations strictly sequential.
    """

    def __init__(self, max_thread_count: int = 1, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._pool = QThreadPool(self)
        self._pool.setMaxThreadCount(max(1, max_thread_count))
        logger.debug('Task dispatcher ready with %s worker(s)', self._pool.maxThreadCount())

    def submit(
        self,
        fn: TaskCallable,
        *args: Any,
        context: Optional[TaskContext] = None,
        **kwargs: Any,
    ) -> TaskHandle:
        """Submit a function to the pool and return a handle for observation."""

        if context is None:
            context = TaskContext(name=getattr(fn, '__name__', 'task'))

        handle = TaskHandle(context, parent=self)
        runnable = _TaskRunnable(fn, args, kwargs, handle)
        # Handles are owned by the dispatcher; free each one once its task is done.
        handle.finished.connect(handle.deleteLater)
        self._pool.start(runnable)
        return handle

    def wait_for_done(self, msecs: int = -1) -> bool:
        """Block until queued tasks finish; used on shutdown."""
        return self._pool.waitForDone(msecs)


_dispatcher: Optional[TaskDispatcher] = None


def get_task_dispatcher() -> TaskDispatcher:
    """Return the shared TaskDispatcher instance."""

    global _dispatcher
    if _dispatcher is None:
        _dispatcher = TaskDispatcher()
    return _dispatcher


__all__ = ['TaskDispatcher', 'TaskHandle', 'TaskContext', 'get_task_dispatcher']
