"""Unit tests for WM_CLASS decoding and the class resolver."""

import pytest

from sphidewin.connection import PropertyValue
from sphidewin.errors import ResolveError
from sphidewin.resolver import ClassResolver, decode_class_names
from tests.fixtures.mock_x_connection import ROOT_ID, build_mock_connection


class TestDecodeClassNames:
    """Test splitting of raw WM_CLASS values."""

    def test_trailing_terminator_is_dropped(self):
        """Instance and class names without the empty terminator element."""
        assert decode_class_names(b"xterm\0XTerm\0") == ["xterm", "XTerm"]

    def test_empty_value(self):
        """An empty property has no names."""
        assert decode_class_names(b"") == []

    def test_unterminated_value_keeps_last_name(self):
        """A value missing its final NUL still yields every name."""
        assert decode_class_names(b"xterm\0XTerm") == ["xterm", "XTerm"]

    def test_empty_instance_name(self):
        """Inner empty names are kept; only the terminator is stripped."""
        assert decode_class_names(b"\0Firefox\0") == ["", "Firefox"]

    def test_latin1_fallback(self):
        """Bytes that are not UTF-8 are read as Latin-1 (ICCCM STRING)."""
        assert decode_class_names(b"caf\xe9\0Caf\xe9\0") == ["café", "Café"]


class TestClassResolver:
    """Test ClassResolver against a mocked connection."""

    def test_resolve_returns_names_in_order(self):
        conn = build_mock_connection(windows={10: ["xterm", "XTerm"]})
        assert ClassResolver(conn).resolve(10) == ["xterm", "XTerm"]
        conn.get_property.assert_called_once_with(10, "WM_CLASS")

    def test_missing_property_resolves_to_empty(self):
        """A window without WM_CLASS never matches but is not an error."""
        conn = build_mock_connection(windows={12: None})
        assert ClassResolver(conn).resolve(12) == []

    def test_failed_query_raises_resolve_error(self):
        """BadWindow from the server becomes a ResolveError naming the window."""
        conn = build_mock_connection()

        with pytest.raises(ResolveError) as exc_info:
            ClassResolver(conn).resolve(30)

        assert exc_info.value.window_id == 30
        assert "30" in exc_info.value.message

    def test_wrong_format_raises_resolve_error(self):
        conn = build_mock_connection()
        conn.get_property.side_effect = None
        conn.get_property.return_value = PropertyValue(format=32, data=(1, 2))

        with pytest.raises(ResolveError):
            ClassResolver(conn).resolve(40)


class TestClientList:
    """Test reading _NET_CLIENT_LIST from the root window."""

    def test_client_list(self):
        conn = build_mock_connection(client_list=[10, 11])
        assert ClassResolver(conn).client_list(ROOT_ID) == [10, 11]

    def test_missing_client_list_is_empty(self, caplog):
        """Non-EWMH window managers have no client list; warn and scan nothing."""
        conn = build_mock_connection(client_list=None)

        assert ClassResolver(conn).client_list(ROOT_ID) == []
        assert "_NET_CLIENT_LIST" in caplog.text

    def test_8bit_client_list_is_rejected(self):
        conn = build_mock_connection()
        conn.get_property.side_effect = None
        conn.get_property.return_value = PropertyValue(format=8, data=b"\x0a\x00\x00\x00")

        with pytest.raises(ResolveError):
            ClassResolver(conn).client_list(ROOT_ID)
