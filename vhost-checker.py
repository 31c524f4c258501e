#!/usr/bin/env python3
"""Check that the domains of a web server configuration are deployed.

Every server_name found in the given configuration file must resolve to
one of the expected web server addresses and serve uri1 and uri2. Results
go to main.<timestamp>.log and error.<timestamp>.log; the exit status is
1 if any error was logged.
"""

import os
import sys
import logging

from vhost_checker.config import CheckerConfig, ConfigError, load_config
from vhost_checker.site_checker import SiteChecker, setup_logging


SETTINGS_FILE = 'vhost-checker.yml'


def settings_path():
    path = os.environ.get('VHOST_CHECKER_CONFIG')
    if path:
        return path, True
    return os.path.join(os.path.dirname(os.path.abspath(__file__)), SETTINGS_FILE), False


def main(argv=None):
    if argv is None:
        argv = sys.argv

    if len(argv) != 2:
        print(f"Usage: {os.path.basename(argv[0])} [config file]")
        return 0

    path, required = settings_path()
    try:
        if required or os.path.exists(path):
            config = load_config(path)
        else:
            config = CheckerConfig()
    except ConfigError as e:
        setup_logging()
        logging.getLogger(__name__).error(f"Error: {e}")
        return 1

    setup_logging(config.logfile)
    log = logging.getLogger(__name__)

    checker = SiteChecker(config)
    try:
        stats = checker.check_config_file(argv[1])
    except ConfigError as e:
        log.error(f"Error: {e}")
        return 1
    except OSError as e:
        log.error(f"Error opening log file: {e}")
        return 1

    return stats.exit_code


if __name__ == '__main__':
    sys.exit(main())
