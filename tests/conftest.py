"""
Pytest configuration and fixtures for all tests.
"""

import os
import socket
import sys
import threading
from datetime import datetime

import pytest

# Make the package importable without installing it
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from vhost_checker.models import MessageFactory


FIXED_NOW = datetime(2026, 10, 17, 12, 30, 5)


def addrinfo(*addresses):
    """Build a socket.getaddrinfo result for the given addresses."""
    result = []
    for address in addresses:
        if ':' in address:
            result.append((socket.AF_INET6, socket.SOCK_STREAM, 6, '', (address, 0, 0, 0)))
        else:
            result.append((socket.AF_INET, socket.SOCK_STREAM, 6, '', (address, 0)))
    return result


class CollectingSink:
    """Thread safe stand-in for a log sink."""

    def __init__(self):
        self.messages = []
        self._lock = threading.Lock()

    def put(self, message):
        with self._lock:
            self.messages.append(message)

    @property
    def texts(self):
        return [message.text for message in self.messages]


@pytest.fixture
def clock():
    """Clock frozen at FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def messages(clock):
    return MessageFactory('%Y-%m-%d %H:%M:%S', clock)


@pytest.fixture
def ok_sink():
    return CollectingSink()


@pytest.fixture
def err_sink():
    return CollectingSink()
