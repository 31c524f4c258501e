"""Check outcomes, log messages and run statistics."""

from collections import namedtuple
from enum import Enum


class CheckOutcome(Enum):
    """Result of checking a single domain.

    The value is the code written into the error log.
    """

    OK = 'ok'
    DNS_ERROR = 'e01'
    MULTIPLE_ADDRESSES = 'e02'
    WRONG_ADDRESS = 'e03'
    URI1_FAILURE = 'e04'
    URI2_FAILURE = 'e05'

    @property
    def code(self):
        return self.value


# Code used when a worker hits an unexpected exception for a domain
UNEXPECTED_ERROR_CODE = 'e00'


class LogMessage(namedtuple('LogMessage', ['text', 'route'])):
    """An immutable log line and the sink it is routed to."""

    __slots__ = ()

    STATUS = 'status'
    OK = 'ok'
    ERROR = 'error'

    @property
    def is_error(self):
        return self.route == self.ERROR

    def line(self):
        """Return the text terminated by exactly one newline."""
        return self.text.rstrip('\n') + '\n'


class MessageFactory:
    """Builds timestamped log messages.

    Args:
        time_log_format: strftime format of the timestamp prefix
        clock: callable returning the current datetime
    """

    def __init__(self, time_log_format, clock):
        self.time_log_format = time_log_format
        self.clock = clock

    def _now(self):
        return self.clock().strftime(self.time_log_format)

    def ok(self, domain):
        return LogMessage(f"{self._now()} '{domain}': ok", LogMessage.OK)

    def status(self, text):
        return LogMessage(f"{self._now()} --> {text}", LogMessage.STATUS)

    def detail(self, text):
        """Indented status line without its own timestamp."""
        return LogMessage(f"\t\t    --> {text}", LogMessage.STATUS)

    def error(self, domain, code, text):
        return LogMessage(f"{self._now()} '{domain}': ({code}) {text}", LogMessage.ERROR)

    def dns_error(self, domain, fault):
        return self.error(domain, CheckOutcome.DNS_ERROR.code,
                          f"Problem getting A records: {fault}")

    def multiple_addresses(self, domain, addresses):
        return self.error(domain, CheckOutcome.MULTIPLE_ADDRESSES.code,
                          f"Expected exactly one IP address, got {len(addresses)}: {addresses}")

    def wrong_address(self, domain, address):
        return self.error(domain, CheckOutcome.WRONG_ADDRESS.code,
                          f"A record resolves to wrong IP address: {address}")

    def uri_failure(self, outcome, domain, url, fault):
        label = 'uri1' if outcome is CheckOutcome.URI1_FAILURE else 'uri2'
        return self.error(domain, outcome.code,
                          f"Problem receiving {label}-resource ({url}): {fault}")

    def unexpected(self, domain, fault):
        return self.error(domain, UNEXPECTED_ERROR_CODE,
                          f"Unexpected error while checking: {fault}")


class RunStatistics:
    """Counts collected over one run.

    Only complete once both sinks have been drained.
    """

    def __init__(self, domains=0, ok=0, errors=0, elapsed=None):
        self.domains = domains
        self.ok = ok
        self.errors = errors
        self.elapsed = elapsed

    @property
    def exit_code(self):
        return 0 if self.errors == 0 else 1

    def __repr__(self):
        return (f"RunStatistics(domains={self.domains}, ok={self.ok}, "
                f"errors={self.errors}, elapsed={self.elapsed})")
