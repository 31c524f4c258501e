"""Availability probing of the two check URIs of a domain."""

import time
import logging
from concurrent.futures import ThreadPoolExecutor

import requests

from .models import CheckOutcome


# Body reads return as soon as a byte arrives, so the deadline is seen
# even when a server trickles its response
READ_CHUNK_SIZE = 1


class AvailabilityProber:
    """Fetches uri1 and uri2 of a domain in parallel."""

    def __init__(self, messages, uri1, uri2, timeout=5, fail_on_http_status=False):
        """Initialize availability prober.

        Args:
            messages: MessageFactory used to build error lines
            uri1: First request path, starting with '/'
            uri2: Second request path, starting with '/'
            timeout: Deadline in seconds for each request, body included
            fail_on_http_status: Treat 4xx/5xx responses as failures
        """
        self.messages = messages
        self.uri1 = uri1
        self.uri2 = uri2
        self.timeout = timeout
        self.fail_on_http_status = fail_on_http_status
        self.log = logging.getLogger(__name__)

    def fetch(self, url):
        """GET a URL within the deadline and release the response.

        Returns:
            Exception or None: The fault, or None on success
        """
        deadline = time.monotonic() + self.timeout
        response = None
        try:
            response = requests.get(url, timeout=self.timeout, stream=True)
            if self.fail_on_http_status:
                response.raise_for_status()
            self._check_deadline(url, deadline)
            for _ in response.iter_content(chunk_size=READ_CHUNK_SIZE):
                self._check_deadline(url, deadline)
            return None
        except requests.RequestException as e:
            return e
        finally:
            if response is not None:
                response.close()

    def _check_deadline(self, url, deadline):
        if time.monotonic() > deadline:
            raise requests.Timeout(f"{url} took longer than {self.timeout}s")

    def check(self, domain, err_sink):
        """Check both URIs of a domain.

        Both requests always run to completion, so a domain can produce
        two error messages.

        Args:
            domain: Domain name, already validated by DNS
            err_sink: Sink receiving one error message per failed URI

        Returns:
            bool: True if neither request failed
        """
        targets = [
            (CheckOutcome.URI1_FAILURE, f"http://{domain}{self.uri1}"),
            (CheckOutcome.URI2_FAILURE, f"http://{domain}{self.uri2}"),
        ]

        results = []
        with ThreadPoolExecutor(max_workers=len(targets)) as executor:
            futures = [(outcome, url, executor.submit(self.fetch, url)) for outcome, url in targets]
            for outcome, url, future in futures:
                try:
                    fault = future.result()
                except Exception as e:
                    self.log.error(f"domain={domain} url={url} unexpected_error={e!r}")
                    fault = e
                results.append((outcome, url, fault))

        ok = True
        for outcome, url, fault in results:
            if fault is not None:
                ok = False
                self.log.debug(f"domain={domain} url={url} error={fault}")
                err_sink.put(self.messages.uri_failure(outcome, domain, url, fault))
        return ok
