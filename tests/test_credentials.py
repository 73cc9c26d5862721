"""Tests for the credential store and ini loading."""

import textwrap
from pathlib import Path

import pytest

from acquia_cloud import (
    CredentialsError,
    CredentialStore,
    SiteCredentials,
    UnknownSite,
    credentials_path,
    load_credentials,
)


@pytest.fixture
def store() -> CredentialStore:
    return CredentialStore.from_dict({
        "stage": "prod",
        "tangle001": {
            "username": "alice",
            "password": "pw",
            "endpoint": "https://cloudapi.example.com/v1",
        },
        "nopass": {"username": "bob", "password": "", "endpoint": "https://x"},
        "gardener": "tangle001",
        "dangling": "missing-site",
    })


class TestResolveSiteName:
    """Site names resolve directly or through one alias."""

    def test_known_site_resolves_to_itself(self, store):
        assert store.resolve_site_name("tangle001") == "tangle001"

    def test_alias_resolves_to_target(self, store):
        assert store.resolve_site_name("gardener") == "tangle001"

    @pytest.mark.parametrize("site", ["", None, "unknown"])
    def test_unknown_or_empty_site_fails(self, store, site):
        with pytest.raises(UnknownSite):
            store.resolve_site_name(site)

    def test_alias_is_followed_one_level_only(self, store):
        assert store.resolve_site_name("dangling") == "missing-site"
        with pytest.raises(UnknownSite):
            store.resolve_credentials("dangling")


class TestResolveCredentials:
    def test_basic_auth_string(self, store):
        assert store.resolve_credentials("tangle001") == "alice:pw"

    def test_alias_uses_target_credentials(self, store):
        assert store.resolve_credentials("gardener") == "alice:pw"

    def test_record_inherits_top_level_stage(self, store):
        assert store.get("tangle001").stage == "prod"
        assert store.stage == "prod"

    def test_site_names_require_username_and_password(self, store):
        assert store.site_names() == ["tangle001"]

    def test_repr_hides_password(self, store):
        assert "pw" not in repr(store.get("tangle001"))

    def test_unsupported_entry_rejected(self):
        with pytest.raises(CredentialsError):
            CredentialStore.from_dict({"site": 42})

    def test_top_level_endpoint_is_not_an_alias(self):
        store = CredentialStore.from_dict({
            "demo": {"username": "u", "password": "p"},
            "endpoint": "https://cloudapi.example.com/v1",
        })

        assert store.aliases == {}
        assert store.get("demo").endpoint == "https://cloudapi.example.com/v1"

    def test_accepts_site_credentials_records(self):
        record = SiteCredentials("u", "p", "https://x")
        assert CredentialStore.from_dict({"s": record}).get("s") is record


class TestLoadCredentials:
    """Loading ini credential files."""

    def test_loads_sections_aliases_and_stage(self, tmp_path: Path):
        path = tmp_path / "cloudapi.tangle001.ini"
        path.write_text(textwrap.dedent("""\
            stage = prod
            Gardener = tangle001

            [tangle001]
            username = alice
            password = "s3cret"
            endpoint = https://cloudapi.example.com/v1
            """))

        store = load_credentials(str(path))

        assert store.stage == "prod"
        assert store.resolve_site_name("Gardener") == "tangle001"
        record = store.get("tangle001")
        assert record.password == "s3cret"
        assert record.endpoint == "https://cloudapi.example.com/v1"

    def test_top_level_endpoint_applies_to_records(self, tmp_path: Path):
        path = tmp_path / "cloudapi.demo.ini"
        path.write_text(textwrap.dedent("""\
            endpoint = https://cloudapi.example.com/v1
            stage = prod
            gardener = demo

            [demo]
            username = u
            password = p

            [other]
            username = o
            password = q
            endpoint = https://other.example.com/v1
            """))

        store = load_credentials(str(path))

        assert "endpoint" not in store.aliases
        assert store.get("demo").endpoint == "https://cloudapi.example.com/v1"
        assert store.get("gardener").endpoint == "https://cloudapi.example.com/v1"
        assert store.get("other").endpoint == "https://other.example.com/v1"
        assert store.stage == "prod"

    def test_missing_file_fails(self, tmp_path: Path):
        with pytest.raises(CredentialsError, match="check"):
            load_credentials(str(tmp_path / "nope.ini"))

    def test_empty_file_fails(self, tmp_path: Path):
        path = tmp_path / "empty.ini"
        path.write_text("")
        with pytest.raises(CredentialsError):
            load_credentials(str(path))

    def test_malformed_file_fails(self, tmp_path: Path):
        path = tmp_path / "bad.ini"
        path.write_text("[site]\nusername = a\nusername = b\n")
        with pytest.raises(CredentialsError):
            load_credentials(str(path))


class TestCredentialsPath:
    def test_default_path(self, tmp_path: Path):
        path = credentials_path("demo", directory=str(tmp_path))
        assert path == str(tmp_path / "cloudapi.demo.ini")

    def test_stage_file_preferred_when_present(self, tmp_path: Path):
        staged = tmp_path / "cloudapi.demo.utest"
        staged.write_text("")
        assert credentials_path("demo", "utest", directory=str(tmp_path)) == str(staged)

    def test_stage_falls_back_to_default(self, tmp_path: Path):
        path = credentials_path("demo", "utest", directory=str(tmp_path))
        assert path == str(tmp_path / "cloudapi.demo.ini")
