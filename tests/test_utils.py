"""Tests for helper functions shared by the routes."""

import pytest

from server.utils import canonical_id, content_disposition, parse_id_list


class TestContentDisposition:
    def test_plain_ascii_name(self):
        assert content_disposition("Reports.zip") == 'attachment; filename="Reports.zip"'

    def test_inline(self):
        assert content_disposition("a.pdf", "inline") == 'inline; filename="a.pdf"'

    def test_non_ascii_name(self):
        value = content_disposition("Résumé 2024.zip")

        assert value == (
            'attachment; filename="R?sum? 2024.zip"; '
            "filename*=UTF-8''R%C3%A9sum%C3%A9%202024.zip"
        )
        value.encode("latin-1")

    def test_embedded_quote_is_escaped(self):
        value = content_disposition('say "hi".zip')

        assert value.startswith('attachment; filename="say \\"hi\\".zip";')
        assert "filename*=UTF-8''say%20%22hi%22.zip" in value

    def test_backslash_is_escaped(self):
        value = content_disposition("a\\b.zip")

        assert 'filename="a\\\\b.zip"' in value

    @pytest.mark.parametrize("name", ["evil\r\nSet-Cookie: x=1.zip", "tab\there.zip", "nul\x00.zip"])
    def test_control_characters_never_reach_the_header(self, name):
        value = content_disposition(name)

        assert "\r" not in value
        assert "\n" not in value
        assert all(0x20 <= ord(ch) < 0x7f for ch in value)

    def test_cr_lf_replaced_in_fallback(self):
        value = content_disposition("a\r\nb.zip")

        assert value == "attachment; filename=\"a__b.zip\"; filename*=UTF-8''a%0D%0Ab.zip"


class TestIds:
    def test_parse_id_list(self):
        assert parse_id_list(" a, b ,,c ") == ["a", "b", "c"]
        assert parse_id_list(None) == []
        assert parse_id_list("") == []

    def test_canonical_id(self):
        assert canonical_id(123) == "123"
        assert canonical_id(" abc ") == "abc"
