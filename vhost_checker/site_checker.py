"""Main site checker orchestration."""

import os
import time
import logging
from datetime import datetime

from .config import CheckerConfig
from .domain_source import read_domains
from .domain_validator import DomainValidator
from .log_sink import LogSink, ErrorSink
from .models import MessageFactory, RunStatistics
from .web_fetcher import AvailabilityProber
from .worker_pool import DomainWorkerPool


def setup_logging(logfile=None, level=logging.INFO):
    """Configure the diagnostic log, on stderr unless a logfile is given."""
    log_format = '%(asctime)s %(message)s'
    if logfile:
        logging.basicConfig(
            filename=logfile,
            level=level,
            format=log_format,
            datefmt='%Y-%m-%d %H:%M:%S'
        )
    else:
        logging.basicConfig(
            level=level,
            format=log_format,
            datefmt='%Y-%m-%d %H:%M:%S'
        )


class SiteChecker:
    """Main site checker that wires the workers and log sinks together."""

    def __init__(self, config=None, validator=None, prober=None, clock=datetime.now):
        """Initialize site checker.

        Args:
            config: CheckerConfig, defaults are used when omitted
            validator: DomainValidator override
            prober: AvailabilityProber override
            clock: Callable returning the current datetime
        """
        if config is None:
            config = CheckerConfig()

        self.config = config
        self.clock = clock
        self.log = logging.getLogger(__name__)
        self.messages = MessageFactory(config.time_log_format, clock)

        # Initialize components
        self.validator = validator or DomainValidator(
            config.expected_addresses,
            family=config.address_family
        )
        self.prober = prober or AvailabilityProber(
            self.messages,
            config.uri1,
            config.uri2,
            timeout=config.http_timeout,
            fail_on_http_status=config.fail_on_http_status
        )

    def log_paths(self, start):
        """Return the main and error log paths for a run started at ``start``."""
        stamp = start.strftime(self.config.time_file_format)
        return (
            os.path.join(self.config.log_dir, f"main.{stamp}.log"),
            os.path.join(self.config.log_dir, f"error.{stamp}.log"),
        )

    def check_config_file(self, path):
        """Check every domain found in a web server configuration file.

        Raises:
            ConfigError: If the file cannot be read; nothing is logged then
        """
        domains = read_domains(path, self.config.domain_pattern)
        return self.run(domains)

    def run(self, domains):
        """Check a set of domains and write the run logs.

        Shutdown order matters: workers finish, then the error log is
        drained so the error count is final, then the summary goes to the
        main log and it is closed.

        Args:
            domains: Collection of unique domain names

        Returns:
            RunStatistics: Final counts for the run

        Raises:
            OSError: If a log file cannot be opened
        """
        start = self.clock()
        started = time.monotonic()
        main_path, error_path = self.log_paths(start)

        err_sink = ErrorSink(error_path)
        try:
            log_sink = LogSink(main_path)
        except OSError:
            # never started, drain inline to release the file
            err_sink.close()
            err_sink.run()
            raise

        err_sink.start()
        log_sink.start()
        self.log.info(f"Writing {main_path} and {error_path}")

        stats = RunStatistics(domains=len(domains))
        try:
            log_sink.put(self.messages.status('Starting'))

            pool = DomainWorkerPool(
                self.validator,
                self.prober,
                self.messages,
                log_sink,
                err_sink,
                workers=self.config.workers
            )
            try:
                pool.start()
                for domain in domains:
                    pool.submit(domain)
            finally:
                pool.close()
                pool.join()
                err_sink.close()
                err_sink.wait()
                err_sink.join()

            stats.errors = err_sink.error_count
            stats.elapsed = time.monotonic() - started

            log_sink.put(self.messages.status('Finished'))
            log_sink.put(self.messages.detail(f"Duration: {stats.elapsed:.3f}s"))
            log_sink.put(self.messages.detail(f"Domains:  {stats.domains}"))
            log_sink.put(self.messages.detail(f"Error:    {stats.errors}"))
        finally:
            err_sink.close()
            err_sink.wait()
            log_sink.close()
            log_sink.wait()
            log_sink.join()

        stats.ok = log_sink.count
        self.log.info(
            f"domains={stats.domains} ok={stats.ok} errors={stats.errors} "
            f"duration={stats.elapsed:.3f}s"
        )
        return stats
