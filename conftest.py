"""Shared fixtures for the V6-Codec test suite."""

import ipaddress

import pytest

from v6codec.core import Ipv6Compressor

SAMPLE_ADDRESSES = [
    "::1",
    "::",
    "2001:db8::1",
    "fe80::1",
    "ff02::1",
    "2001:4860:4860::8888",
    "2606:4700:4700::1111",
]

SAMPLE_WITH_PORTS = [
    "[::1]:443",
    "[2001:db8::1]:80",
    "[fe80::1]:22",
    "[2001:4860:4860::8888]:53",
]


@pytest.fixture
def compressor():
    return Ipv6Compressor()


@pytest.fixture
def sample_addresses():
    return [ipaddress.IPv6Address(a) for a in SAMPLE_ADDRESSES]


@pytest.fixture
def sample_with_ports():
    return list(SAMPLE_WITH_PORTS)
