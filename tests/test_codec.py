"""Tests for lock content encoding and decoding."""

import pytest

from emacs_lockfile import LockRecord, LockSyntaxError
from emacs_lockfile.core import decode_record, encode_record


class TestEncodeRecord:
    """Tests for encode_record function."""

    def test_with_boot(self) -> None:
        record = LockRecord(user="alice", host="ws", pid=42, boot=1700000000)
        assert encode_record(record) == "alice@ws.42:1700000000"

    def test_without_boot(self) -> None:
        record = LockRecord(user="alice", host="ws", pid=42)
        assert encode_record(record) == "alice@ws.42"

    def test_zero_boot_is_kept(self) -> None:
        record = LockRecord(user="alice", host="ws", pid=42, boot=0)
        assert encode_record(record) == "alice@ws.42:0"


class TestDecodeRecord:
    """Tests for decode_record function."""

    def test_full_content(self) -> None:
        record = decode_record("alice@workstation.1234:1700000000")
        assert record == LockRecord(user="alice", host="workstation", pid=1234, boot=1700000000)

    def test_without_boot(self) -> None:
        record = decode_record("alice@workstation.1234")
        assert record.pid == 1234
        assert record.boot is None

    def test_trailing_newline_tolerated(self) -> None:
        assert decode_record("alice@ws.7:9\n").boot == 9
        assert decode_record("alice@ws.7\r\n").pid == 7

    def test_dotted_host(self) -> None:
        """The last '.' before the digits separates host from pid."""
        record = decode_record("alice@host.example.com.99")
        assert record.host == "host.example.com"
        assert record.pid == 99

    def test_user_absorbs_extra_separators(self) -> None:
        """User is matched greedily, so embedded '@' and '.' stay in it."""
        record = decode_record("first.last@corp@box.lan.12:34")
        assert record.user == "first.last@corp"
        assert record.host == "box.lan"
        assert record.pid == 12
        assert record.boot == 34

    @pytest.mark.parametrize(
        "content",
        [
            "nouseratsign",
            "user@host.nodigitpid",
            "user@host.12:",
            "user@host.12:boot",
            "@host.12",
            "user@.12",
            "user@host.12\n\n",
            "",
        ],
    )
    def test_rejects_malformed_content(self, content: str) -> None:
        with pytest.raises(LockSyntaxError, match=r"user@host\.pid:boot"):
            decode_record(content)

    def test_rejects_zero_pid(self) -> None:
        with pytest.raises(LockSyntaxError):
            decode_record("alice@ws.0")

    def test_error_carries_content(self) -> None:
        with pytest.raises(LockSyntaxError) as exc_info:
            decode_record("garbage")
        assert exc_info.value.content == "garbage"
        assert "user@host.pid" in exc_info.value.expected


class TestRoundTrip:
    """Encoding then decoding returns the same record."""

    @pytest.mark.parametrize(
        "record",
        [
            LockRecord(user="alice", host="ws", pid=1),
            LockRecord(user="a.b@c", host="d.e.f", pid=65535, boot=1699999999),
            LockRecord(user="DOMAIN\\user", host="PC-01", pid=4, boot=0),
        ],
    )
    def test_round_trip(self, record: LockRecord) -> None:
        assert decode_record(encode_record(record)) == record
