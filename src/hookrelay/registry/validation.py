"""Validation of endpoint names and URLs."""

import ipaddress
from urllib.parse import urlparse

from hookrelay.errors import ValidationError

# Private and reserved IP ranges refused when private networks are blocked
BLOCKED_IP_RANGES = [
    # Loopback
    ipaddress.ip_network("127.0.0.0/8"),
    ipaddress.ip_network("::1/128"),
    # Private networks (RFC 1918)
    ipaddress.ip_network("10.0.0.0/8"),
    ipaddress.ip_network("172.16.0.0/12"),
    ipaddress.ip_network("192.168.0.0/16"),
    # Link-local, including cloud metadata services
    ipaddress.ip_network("169.254.0.0/16"),
    ipaddress.ip_network("fe80::/10"),
    # Carrier-grade NAT (RFC 6598)
    ipaddress.ip_network("100.64.0.0/10"),
    # Unique local IPv6
    ipaddress.ip_network("fc00::/7"),
]

BLOCKED_HOSTNAMES = {
    "localhost",
    "localhost.localdomain",
    "ip6-localhost",
    "ip6-loopback",
    "metadata.google.internal",
    "metadata",
}


def is_ip_blocked(ip_str: str) -> bool:
    """Check if an IP address is in a blocked range."""
    try:
        ip = ipaddress.ip_address(ip_str)
    except ValueError:
        return False
    return any(ip in network for network in BLOCKED_IP_RANGES)


def validate_name(name: str) -> str:
    """Return the stripped name or raise ValidationError if it is empty."""
    stripped = name.strip()
    if not stripped:
        raise ValidationError("Name cannot be empty")
    return stripped


def validate_endpoint_url(url: str, block_private_networks: bool = False) -> str:
    """Validate a destination URL and return it stripped.

    Args:
        url: Candidate endpoint URL
        block_private_networks: Also refuse loopback, private and metadata hosts.
            Only literal hosts are checked; names are not resolved.

    Raises:
        ValidationError: If the URL is empty, malformed or blocked
    """
    url = url.strip()
    if not url:
        raise ValidationError("URL cannot be empty")

    try:
        parsed = urlparse(url)
        # Accessing port validates it
        parsed.port
    except ValueError as e:
        raise ValidationError("Invalid URL format", details=str(e)) from e

    if parsed.scheme not in ("http", "https"):
        raise ValidationError(
            "Invalid URL format",
            details=f"URL scheme must be http or https, got: {parsed.scheme or '<none>'}",
        )

    hostname = parsed.hostname
    if not hostname:
        raise ValidationError("Invalid URL format", details="URL must have a hostname")

    if block_private_networks:
        if hostname.lower() in BLOCKED_HOSTNAMES:
            raise ValidationError(f"Hostname '{hostname}' is blocked")
        if is_ip_blocked(hostname):
            raise ValidationError(f"IP address '{hostname}' is in a blocked range")

    return url
