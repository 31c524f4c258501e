"""Single writer log files for check results."""

import logging
import queue
import threading

from .models import LogMessage


# Marks the end of a sink's queue
_CLOSED = object()


class LogSink(threading.Thread):
    """Owns the main log file and writes status and ok lines to it.

    The file is opened on construction and only this thread writes to it.
    After close() the queue is drained, the ok count summary is appended,
    the file is closed and ``done`` is set.
    """

    def __init__(self, path, name='main-log'):
        """Initialize log sink.

        Args:
            path: Log file, opened for appending

        Raises:
            OSError: If the file cannot be opened
        """
        super().__init__(name=name)
        self.path = path
        self.log = logging.getLogger(__name__)
        self.count = 0
        self.done = threading.Event()
        self._queue = queue.Queue()
        self._closing = False
        self._file = open(path, 'a', encoding='utf-8')

    def put(self, message):
        """Queue a message for writing."""
        if self._closing:
            raise RuntimeError(f"{self.name} is closed")
        if not self.accepts(message):
            raise ValueError(f"{self.name} does not take {message.route} messages")
        self._queue.put(message)

    def close(self):
        """Stop accepting messages; the thread drains what is queued."""
        if not self._closing:
            self._closing = True
            self._queue.put(_CLOSED)

    def wait(self, timeout=None):
        """Block until the file has been closed."""
        return self.done.wait(timeout)

    def accepts(self, message):
        return not message.is_error

    def counts(self, message):
        return message.route == LogMessage.OK

    def summary(self):
        return f"\t\t    --> Ok:       {self.count}\n"

    def run(self):
        try:
            while True:
                message = self._queue.get()
                if message is _CLOSED:
                    break
                self._write(message.line())
                if self.counts(message):
                    self.count += 1

            summary = self.summary()
            if summary:
                self._write(summary)
        finally:
            self._file.close()
            self.done.set()

    def _write(self, text):
        try:
            self._file.write(text)
            self._file.flush()
        except (OSError, ValueError) as e:
            self.log.error(f"Error writing to file {self.path}: {e}")


class ErrorSink(LogSink):
    """Owns the error log file and counts every line written to it."""

    def __init__(self, path, name='error-log'):
        super().__init__(path, name=name)

    @property
    def error_count(self):
        return self.count

    def accepts(self, message):
        return message.is_error

    def counts(self, message):
        return True

    def summary(self):
        return None
