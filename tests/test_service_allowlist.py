"""
Tests for the account domain allowlist.
"""

import pytest
import sys
import os

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '../src'))

from domain.errors import ResourceError
from services import allowlist


class TestLoadAllowlist:
    """Test loading the allowlist file."""

    def test_load_domains(self, tmp_path):
        """Test each non-empty trimmed line becomes one entry."""
        path = tmp_path / "accounts.txt"
        path.write_text("example.com\n  example.org  \n\n\t\nexample.net\n")

        result = allowlist.load_allowlist(str(path))

        assert result == {'example.com', 'example.org', 'example.net'}

    def test_duplicates_collapse(self, tmp_path):
        """Test duplicate lines collapse to one entry."""
        path = tmp_path / "accounts.txt"
        path.write_text("example.com\nexample.com\n")

        assert allowlist.load_allowlist(str(path)) == {'example.com'}

    def test_no_normalization(self, tmp_path):
        """Test entries are kept literally (case and scheme preserved)."""
        path = tmp_path / "accounts.txt"
        path.write_text("Example.COM\nhttp://example.org\n")

        result = allowlist.load_allowlist(str(path))

        assert result == {'Example.COM', 'http://example.org'}
        assert 'example.com' not in result

    def test_empty_file(self, tmp_path):
        path = tmp_path / "accounts.txt"
        path.write_text("")

        assert allowlist.load_allowlist(str(path)) == set()

    def test_missing_file_raises_resource_error(self, tmp_path):
        """Test a missing allowlist raises ResourceError."""
        with pytest.raises(ResourceError, match="cannot read allowlist"):
            allowlist.load_allowlist(str(tmp_path / "missing.txt"))


class TestDomainFromHomepage:
    """Test homepage URL to domain conversion."""

    @pytest.mark.parametrize("line,expected", [
        ("https://www.example.com/about\n", "example.com"),
        ("http://Example.COM", "example.com"),
        ("example.org/path/page.html", "example.org"),
        ("https://m.example.net", "example.net"),
        ("www.example.com", "example.com"),
        ("sub.example.com", "sub.example.com"),
    ])
    def test_extracts_domain(self, line, expected):
        assert allowlist.domain_from_homepage(line) == expected

    @pytest.mark.parametrize("line", [
        "",
        "   \n",
        "localhost",
        "https://",
        "http:/example.com",
    ])
    def test_unusable_lines(self, line):
        assert allowlist.domain_from_homepage(line) is None


class TestConvertHomepages:
    """Test converting a homepages file into an allowlist file."""

    def test_convert(self, tmp_path):
        homepages = tmp_path / "homepages.txt"
        homepages.write_text("https://www.example.com/\n\nlocalhost\nhttp://example.org/x\n")
        domains = tmp_path / "domains.txt"
        domains.write_text("stale.example\n")

        written = allowlist.convert_homepages(str(homepages), str(domains))

        assert written == 2
        assert domains.read_text() == "example.com\nexample.org\n"

    def test_output_usable_as_allowlist(self, tmp_path):
        homepages = tmp_path / "homepages.txt"
        homepages.write_text("https://www.example.com/\n")
        domains = tmp_path / "domains.txt"

        allowlist.convert_homepages(str(homepages), str(domains))

        assert allowlist.load_allowlist(str(domains)) == {'example.com'}

    def test_missing_homepages_raises_resource_error(self, tmp_path):
        with pytest.raises(ResourceError):
            allowlist.convert_homepages(
                str(tmp_path / "missing.txt"),
                str(tmp_path / "domains.txt")
            )


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
