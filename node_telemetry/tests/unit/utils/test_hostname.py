"""
Tests for local hostname resolution.
"""

import pytest

from node_telemetry.core.errors import (
    HostnameError,
    HostnameMissingNullError,
    NonUtf8HostnameError,
)
from node_telemetry.utils.hostname import MAX_HOSTNAME_LEN, decode_hostname, hostname


class TestDecodeHostname:
    """Test cases for decode_hostname."""

    def test_stops_at_first_null(self):
        assert decode_hostname(b"node-a\0\0\0garbage") == "node-a"

    def test_missing_null(self):
        with pytest.raises(HostnameMissingNullError):
            decode_hostname(b"node-a")

    def test_non_utf8(self):
        with pytest.raises(NonUtf8HostnameError):
            decode_hostname(b"node-\xff\0")

    def test_hostname_errors_share_a_base(self):
        assert issubclass(NonUtf8HostnameError, HostnameError)
        assert issubclass(HostnameMissingNullError, HostnameError)


class TestHostname:
    """Test cases for hostname."""

    def test_buffer_from_syscall(self):
        def fake_gethostname(max_len):
            assert max_len == MAX_HOSTNAME_LEN
            return b"node-a".ljust(max_len + 1, b"\0")

        assert hostname(gethostname=fake_gethostname) == "node-a"

    def test_syscall_failure(self):
        def failing_gethostname(max_len):
            raise OSError(36, "File name too long")

        with pytest.raises(HostnameError) as exc_info:
            hostname(gethostname=failing_gethostname)

        assert isinstance(exc_info.value.__cause__, OSError)

    def test_terminator_must_be_within_buffer(self):
        def oversized(max_len):
            return b"a" * (max_len + 1) + b"\0"

        with pytest.raises(HostnameMissingNullError):
            hostname(max_len=8, gethostname=oversized)

    def test_real_hostname_is_text(self):
        name = hostname()
        assert isinstance(name, str)
        assert name
