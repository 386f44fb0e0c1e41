"""Tests for the provider dictionary."""

import pytest
from sitedog_parser.services.dictionary import (
    DEFAULT_DICTIONARY_PATH,
    Dictionary,
    DictionaryEntry,
    get_default_dictionary,
    load_dictionary,
)


class TestDictionaryEntry:
    """Tests for DictionaryEntry.from_dict."""

    def test_name_defaults_to_key(self):
        """Test display name falls back to the slug."""
        entry = DictionaryEntry.from_dict("github", {"url": "https://github.com"})
        assert entry.name == "github"

    def test_comma_separated_aliases(self):
        """Test aliases string is split, trimmed and lowercased."""
        entry = DictionaryEntry.from_dict("aws", {"aliases": " Amazon ,amazon web services,, "})
        assert entry.aliases == frozenset({"amazon", "amazon web services"})

    def test_list_aliases(self):
        """Test aliases can be a YAML list."""
        entry = DictionaryEntry.from_dict("github", {"aliases": ["GH", "github pages"]})
        assert entry.aliases == frozenset({"gh", "github pages"})

    def test_image_key_variants(self):
        """Test both image_url and image are accepted."""
        assert DictionaryEntry.from_dict("a", {"image_url": "a.svg"}).image_url == "a.svg"
        assert DictionaryEntry.from_dict("b", {"image": "b.svg"}).image_url == "b.svg"

    def test_extra_fields_become_properties(self):
        """Test unknown metadata is kept as properties."""
        entry = DictionaryEntry.from_dict("zoho", {"url": "https://zoho.com", "category": "mail"})
        assert entry.properties == {"category": "mail"}

    def test_invalid_pattern_is_dropped(self):
        """Test an invalid regex keeps the entry but disables URL matching."""
        entry = DictionaryEntry.from_dict("broken", {"url_pattern": "([unclosed"})
        assert entry.url_pattern is None
        assert entry.matches_url("https://broken.example") is False

    def test_none_record(self):
        """Test an empty record still builds an entry."""
        entry = DictionaryEntry.from_dict("ansible", None)
        assert entry.name == "ansible"
        assert entry.aliases == frozenset()
        assert entry.url is None


class TestLookup:
    """Tests for Dictionary.lookup."""

    def test_lookup_by_key(self, dictionary):
        """Test direct key match."""
        entry = dictionary.lookup("aws")
        assert entry is not None
        assert entry.key == "aws"

    def test_lookup_is_case_and_whitespace_insensitive(self, dictionary):
        """Test queries are trimmed and lowercased."""
        assert dictionary.lookup("  AWS ").key == "aws"

    def test_lookup_by_alias(self, dictionary):
        """Test alias match."""
        assert dictionary.lookup("Amazon Web Services").key == "aws"
        assert dictionary.lookup("gh").key == "github"
        assert dictionary.lookup("github pages").key == "github"

    def test_keys_win_over_aliases(self):
        """Test a key match beats an alias of an earlier entry."""
        dictionary = Dictionary.from_mapping(
            {
                "first": {"aliases": "second"},
                "second": {},
            }
        )
        assert dictionary.lookup("second").key == "second"

    def test_first_alias_owner_wins(self):
        """Test alias collisions resolve to the earlier entry."""
        dictionary = Dictionary.from_mapping(
            {
                "gsuite": {"aliases": "google"},
                "gcp": {"aliases": "google"},
            }
        )
        assert dictionary.lookup("google").key == "gsuite"

    def test_unknown_slug(self, dictionary):
        """Test unknown slugs return None."""
        assert dictionary.lookup("carrd") is None

    @pytest.mark.parametrize("value", [None, 42, ["aws"], {"aws": 1}, "", "   "])
    def test_invalid_input(self, dictionary, value):
        """Test non-string or blank input returns None without raising."""
        assert dictionary.lookup(value) is None

    def test_contains(self, dictionary):
        """Test membership uses lookup semantics."""
        assert "amazon" in dictionary
        assert "carrd" not in dictionary


class TestMatch:
    """Tests for Dictionary.match."""

    def test_match_by_pattern(self, dictionary):
        """Test URL matched against provider patterns."""
        assert dictionary.match("https://aws.amazon.com/console").key == "aws"
        assert dictionary.match("https://github.com/acme/app").key == "github"

    def test_match_normalizes_first(self, dictionary):
        """Test bare and mixed-case URLs are normalized before matching."""
        assert dictionary.match("GitHub.com/Acme").key == "github"

    def test_first_match_wins(self, dictionary):
        """Test the earlier entry wins when two patterns match."""
        # Both s3 and aws patterns match; s3 is loaded first
        assert dictionary.match("https://s3.amazonaws.com/bucket").key == "s3"

    def test_order_decides_overlap(self):
        """Test reordering the dictionary changes the winner."""
        dictionary = Dictionary.from_mapping(
            {
                "aws": {"url_pattern": r"amazonaws\.com"},
                "s3": {"url_pattern": r"s3\.amazonaws\.com"},
            }
        )
        assert dictionary.match("https://s3.amazonaws.com/bucket").key == "aws"

    def test_pattern_is_case_insensitive(self):
        """Test patterns ignore case."""
        dictionary = Dictionary.from_mapping({"vercel": {"url_pattern": r"VERCEL\.APP"}})
        assert dictionary.match("https://inem.vercel.app").key == "vercel"

    def test_entries_without_pattern_skipped(self, dictionary):
        """Test entries without url_pattern never match."""
        assert dictionary.match("https://www.ansible.com") is None

    def test_no_match(self, dictionary):
        """Test unknown hosts return None."""
        assert dictionary.match("https://carrd.co") is None

    @pytest.mark.parametrize("value", ["aws", "", None, 42])
    def test_non_url_input(self, dictionary, value):
        """Test non-URL input returns None."""
        assert dictionary.match(value) is None


class TestDictionaryProperties:
    """Lookup properties over the bundled dictionary."""

    def test_every_key_and_alias_resolves(self):
        """Test lookup(key) and lookup(alias) return the entry."""
        dictionary = load_dictionary()
        assert len(dictionary) > 0

        for entry in dictionary:
            assert dictionary.lookup(entry.key) is entry
            assert dictionary.lookup(entry.key.upper()) is entry
            for alias in entry.aliases:
                owner = dictionary.lookup(f"  {alias.upper()} ")
                # An alias may shadow another key or an earlier alias
                assert owner is entry or owner.key == alias or alias in owner.aliases

    def test_narrow_patterns_precede_broad_ones(self):
        """Test bundled ordering puts S3 before AWS."""
        dictionary = load_dictionary()
        assert dictionary.match("https://s3.amazonaws.com/rbbr.io").key == "s3"
        assert dictionary.match("https://aws.amazon.com").key == "aws"

    def test_all_providers_in_load_order(self):
        """Test all_providers preserves file order."""
        keys = [entry.key for entry in load_dictionary().all_providers()]
        assert keys.index("s3") < keys.index("aws")


class TestLoadDictionary:
    """Tests for load_dictionary and the memoized default."""

    def test_load_from_file(self, tmp_path):
        """Test loading a YAML dictionary file."""
        path = tmp_path / "dictionary.yml"
        path.write_text(
            "netlify:\n"
            "  name: Netlify\n"
            "  url: https://www.netlify.com\n"
            "  url_pattern: netlify\\.app\n"
        )

        dictionary = load_dictionary(path)

        assert len(dictionary) == 1
        assert dictionary.match("https://site.netlify.app").name == "Netlify"

    def test_missing_file_gives_empty_dictionary(self, tmp_path):
        """Test a missing file degrades to an empty dictionary."""
        dictionary = load_dictionary(tmp_path / "missing.yml")
        assert len(dictionary) == 0
        assert dictionary.lookup("aws") is None

    def test_invalid_yaml_gives_empty_dictionary(self, tmp_path):
        """Test a YAML error degrades to an empty dictionary."""
        path = tmp_path / "broken.yml"
        path.write_text("aws: [unclosed\n  - nope: :\n")
        assert len(load_dictionary(path)) == 0

    def test_non_mapping_gives_empty_dictionary(self, tmp_path):
        """Test a list document degrades to an empty dictionary."""
        path = tmp_path / "list.yml"
        path.write_text("- aws\n- gcp\n")
        assert len(load_dictionary(path)) == 0

    def test_non_mapping_records_tolerated(self, tmp_path):
        """Test entries with scalar bodies still load."""
        path = tmp_path / "dictionary.yml"
        path.write_text("carrd:\nhetzner: cloud\n")

        dictionary = load_dictionary(path)

        assert dictionary.lookup("carrd").name == "carrd"
        assert dictionary.lookup("hetzner").name == "hetzner"

    def test_bundled_dictionary_exists(self):
        """Test the packaged dictionary file ships with the package."""
        assert DEFAULT_DICTIONARY_PATH.exists()

    def test_default_dictionary_is_memoized(self):
        """Test the default dictionary is loaded once."""
        assert get_default_dictionary() is get_default_dictionary()

    def test_default_dictionary_from_settings(self, tmp_path, monkeypatch):
        """Test SITEDOG_DICTIONARY_PATH selects the dictionary file."""
        path = tmp_path / "custom.yml"
        path.write_text("carrd:\n  url: https://carrd.co\n")
        monkeypatch.setenv("SITEDOG_DICTIONARY_PATH", str(path))

        dictionary = get_default_dictionary()

        assert [entry.key for entry in dictionary] == ["carrd"]
