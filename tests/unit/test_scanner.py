"""Unit tests for the placeholder scanner."""

from docfill.strategies.template_engine.scanner import contains_placeholder, scan_placeholders


class TestScanPlaceholders:
    """Test suite for scan_placeholders."""

    def test_single_placeholder(self):
        """Test offsets, literal text and key of one match."""
        matches = list(scan_placeholders("Project: {object_desc}!"))

        assert len(matches) == 1
        match = matches[0]
        assert match.start == 9
        assert match.end == 22
        assert match.text == "{object_desc}"
        assert match.key == "object_desc"

    def test_multiple_placeholders_in_order(self):
        """Test that matches come back left to right."""
        keys = [m.key for m in scan_placeholders("{a} and {b} then {c}")]
        assert keys == ["a", "b", "c"]

    def test_key_is_trimmed(self):
        """Test that whitespace inside the braces is ignored for the key."""
        match = next(scan_placeholders("{  object_name  }"))
        assert match.key == "object_name"
        assert match.text == "{  object_name  }"

    def test_empty_braces_do_not_match(self):
        """Test that {} needs at least one character."""
        assert list(scan_placeholders("nothing {} here")) == []

    def test_whitespace_only_key(self):
        """Test that { } matches with an empty key."""
        match = next(scan_placeholders("{ }"))
        assert match.key == ""

    def test_stops_at_first_closing_brace(self):
        """Test minimal matching: {a}b} yields only {a}."""
        matches = list(scan_placeholders("{a}b}"))
        assert [m.text for m in matches] == ["{a}"]

    def test_nested_open_brace_is_part_of_key(self):
        """Test that there is no nesting: {{x} matches as one token."""
        matches = list(scan_placeholders("{{x}"))
        assert [m.text for m in matches] == ["{{x}"]
        assert matches[0].key == "{x"

    def test_unclosed_brace(self):
        """Test that an unclosed brace is plain text."""
        assert list(scan_placeholders("{object_name")) == []

    def test_none_and_empty(self):
        """Test that None and empty strings yield nothing."""
        assert list(scan_placeholders(None)) == []
        assert list(scan_placeholders("")) == []

    def test_is_lazy(self):
        """Test that the scanner is a generator."""
        result = scan_placeholders("{a}")
        assert iter(result) is result


class TestContainsPlaceholder:
    """Test suite for contains_placeholder."""

    def test_detects_placeholder(self):
        assert contains_placeholder("Dear {customer_name},") is True

    def test_plain_text(self):
        assert contains_placeholder("Dear customer,") is False

    def test_none(self):
        assert contains_placeholder(None) is False
