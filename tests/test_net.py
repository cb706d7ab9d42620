import ipaddress

import pytest

from imgate.net import get_local_ip, is_private_address, real_ip


@pytest.mark.parametrize(
    "address",
    ["127.0.0.1", "10.1.2.3", "172.16.0.1", "172.31.255.255", "192.168.1.1",
     "169.254.3.4", "::1", "fc00::1", "fe80::1", "::ffff:10.0.0.1"],
)
def test_private_addresses(address):
    assert is_private_address(address) is True


@pytest.mark.parametrize("address", ["8.8.8.8", "172.32.0.1", "1.2.3.4", "2001:db8::1"])
def test_public_addresses(address):
    assert is_private_address(address) is False


@pytest.mark.parametrize("address", ["", "not-an-ip", "300.1.1.1", "fe80::1%eth0"])
def test_invalid_address_raises(address):
    with pytest.raises(ValueError, match="address is not valid"):
        is_private_address(address)


def test_remote_addr_port_is_stripped():
    assert real_ip({}, "1.2.3.4:5678") == "1.2.3.4"


def test_remote_addr_without_port_returned_as_is():
    assert real_ip(None, "1.2.3.4") == "1.2.3.4"


def test_remote_addr_ipv6_bracketed():
    assert real_ip({}, "[::1]:80") == "::1"


def test_malformed_remote_addr_gives_empty():
    assert real_ip({}, "a:b:c") == ""


def test_forwarded_for_first_public_address_wins():
    headers = {"X-Forwarded-For": "10.0.0.1, 8.8.8.8, 1.1.1.1"}
    assert real_ip(headers, "10.0.0.2:1") == "8.8.8.8"


def test_header_lookup_is_case_insensitive():
    headers = {"x-forwarded-for": "192.168.0.5,9.9.9.9"}
    assert real_ip(headers, "10.0.0.2:1") == "9.9.9.9"


def test_falls_back_to_real_ip_header():
    headers = {"X-Forwarded-For": "10.0.0.1, garbage", "X-Real-Ip": "5.6.7.8"}
    assert real_ip(headers, "10.0.0.2:1") == "5.6.7.8"


def test_only_real_ip_header():
    assert real_ip({"X-Real-Ip": "5.6.7.8"}, "10.0.0.2:1") == "5.6.7.8"


def test_list_header_values_use_first():
    headers = {"X-Forwarded-For": ["8.8.4.4", "1.1.1.1"]}
    assert real_ip(headers, "10.0.0.2:1") == "8.8.4.4"


def test_local_ip_is_empty_or_non_loopback_ipv4():
    result = get_local_ip()
    if result:
        ip = ipaddress.IPv4Address(result)
        assert not ip.is_loopback
    else:
        assert result == ""