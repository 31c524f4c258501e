"""Fixed pool of domain checking workers."""

import logging
import queue
import threading

from .models import CheckOutcome


# One per worker, tells it the intake is closed
_NO_MORE_DOMAINS = object()


class DomainWorkerPool:
    """Checks domains from a shared intake with a fixed number of threads.

    Every domain results in either one ok message on ``ok_sink`` or one
    or more error messages on ``err_sink``.
    """

    def __init__(self, validator, prober, messages, ok_sink, err_sink, workers=10):
        """Initialize worker pool.

        Args:
            validator: DomainValidator for the DNS checks
            prober: AvailabilityProber for the URI checks
            messages: MessageFactory used to build log lines
            ok_sink: Sink receiving ok messages
            err_sink: Sink receiving error messages
            workers: Number of worker threads
        """
        self.validator = validator
        self.prober = prober
        self.messages = messages
        self.ok_sink = ok_sink
        self.err_sink = err_sink
        self.workers = workers
        self.log = logging.getLogger(__name__)
        self._intake = queue.Queue(maxsize=workers)
        self._threads = []
        self._closed = False

    def start(self):
        for i in range(self.workers):
            thread = threading.Thread(target=self._run, name=f"domain-worker-{i}")
            thread.start()
            self._threads.append(thread)

    def submit(self, domain):
        """Hand a domain to the workers, blocking while they are all busy."""
        if self._closed:
            raise RuntimeError('worker pool intake is closed')
        self._intake.put(domain)

    def close(self):
        """Signal that no more domains will be submitted."""
        if self._closed:
            return
        self._closed = True
        for _ in self._threads:
            self._intake.put(_NO_MORE_DOMAINS)

    def join(self):
        """Block until every worker has exited."""
        for thread in self._threads:
            thread.join()

    def _run(self):
        while True:
            domain = self._intake.get()
            if domain is _NO_MORE_DOMAINS:
                break
            try:
                self.check_domain(domain)
            except Exception as e:
                self.log.error(f"domain={domain} unexpected_error={e!r}")
                self.err_sink.put(self.messages.unexpected(domain, e))

    def check_domain(self, domain):
        """Run the DNS and URI checks for one domain and emit the result.

        Returns:
            bool: True if the ok message was emitted
        """
        outcome, detail = self.validator.check(domain)

        if outcome is CheckOutcome.DNS_ERROR:
            self.err_sink.put(self.messages.dns_error(domain, detail))
            return False
        if outcome is CheckOutcome.MULTIPLE_ADDRESSES:
            self.err_sink.put(self.messages.multiple_addresses(domain, detail))
            return False
        if outcome is CheckOutcome.WRONG_ADDRESS:
            self.err_sink.put(self.messages.wrong_address(domain, detail))
            return False

        if not self.prober.check(domain, self.err_sink):
            return False

        self.ok_sink.put(self.messages.ok(domain))
        return True
