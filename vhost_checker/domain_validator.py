"""Domain validation utilities."""

import socket
import logging

from .config import normalize_address
from .models import CheckOutcome


class DomainValidator:
    """Validates that a domain resolves to exactly one expected address."""

    def __init__(self, expected_addresses=None, family=socket.AF_UNSPEC):
        """Initialize domain validator.

        Args:
            expected_addresses: Addresses of the web servers the domain may point at
            family: Address family passed to the resolver
        """
        self.expected_addresses = frozenset(normalize_address(a) for a in expected_addresses or [])
        self.family = family
        self.log = logging.getLogger(__name__)

    def resolve(self, domain):
        """Resolve a domain to its unique addresses, in resolver order.

        Raises:
            OSError: If the name cannot be resolved
        """
        infos = socket.getaddrinfo(domain, None, self.family, socket.SOCK_STREAM)
        addresses = []
        for _family, _type, _proto, _canonname, sockaddr in infos:
            if sockaddr[0] not in addresses:
                addresses.append(sockaddr[0])
        return addresses

    def check(self, domain):
        """Check that a domain resolves to a single expected address.

        Domains with more than one address (round robin, CDNs, dual stack
        when resolving any family) cannot be attributed to one server and
        are rejected.

        Args:
            domain: Domain name to check

        Returns:
            tuple: (outcome, detail) where detail is the resolver fault,
            the address list or the single address
        """
        try:
            addresses = self.resolve(domain)
        except (OSError, UnicodeError) as e:
            return CheckOutcome.DNS_ERROR, e

        if len(addresses) != 1:
            return CheckOutcome.MULTIPLE_ADDRESSES, addresses

        address = addresses[0]
        try:
            canonical = normalize_address(address)
        except ValueError:
            canonical = address
        if canonical in self.expected_addresses:
            return CheckOutcome.OK, address
        else:
            return CheckOutcome.WRONG_ADDRESS, address
