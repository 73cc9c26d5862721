import configparser
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from .errors import CredentialsError, UnknownSite

LOGGER = logging.getLogger(__name__)

# Keys before the first section that are not aliases
_TOP_LEVEL_SECTION = "__top__"
_RESERVED_KEYS = ("stage", "endpoint")

DEFAULT_CREDENTIALS_DIR = "~/.acquia"
DEFAULT_CREDENTIALS_TEMPLATE = "cloudapi.{site}.{extension}"


@dataclass(frozen=True)
class SiteCredentials:
    username: str
    password: str
    endpoint: str
    stage: Optional[str] = None

    def basic_auth(self) -> str:
        return f"{self.username}:{self.password}"

    def __repr__(self) -> str:
        return (
            f"SiteCredentials(username={self.username!r}, password='***', "
            f"endpoint={self.endpoint!r}, stage={self.stage!r})"
        )


@dataclass(frozen=True)
class CredentialStore:
    """Read-only site → credentials mapping with single-hop aliases.

    ``aliases`` maps an alternative site identifier to the canonical one,
    e.g. ``{"gardener": "gardener-utest"}``.
    """

    records: Mapping[str, SiteCredentials] = field(default_factory=dict)
    aliases: Mapping[str, str] = field(default_factory=dict)
    stage: Optional[str] = None

    @classmethod
    def from_dict(
        cls,
        data: Mapping[str, Any],
        stage: Optional[str] = None,
        endpoint: Optional[str] = None,
    ) -> "CredentialStore":
        """Build a store from ``{site: {...record...} | "alias-target"}``.

        Top-level ``stage`` and ``endpoint`` strings are defaults for every
        record that does not set its own.
        """
        defaults = {"stage": stage, "endpoint": endpoint}
        for key in _RESERVED_KEYS:
            if isinstance(data.get(key), str):
                defaults[key] = defaults[key] or data[key]

        records: Dict[str, SiteCredentials] = {}
        aliases: Dict[str, str] = {}
        for key, value in data.items():
            if key in _RESERVED_KEYS and isinstance(value, str):
                continue
            elif isinstance(value, str):
                aliases[key] = value
            elif isinstance(value, SiteCredentials):
                records[key] = value
            elif isinstance(value, Mapping):
                records[key] = SiteCredentials(
                    username=value.get("username", ""),
                    password=value.get("password", ""),
                    endpoint=value.get("endpoint") or defaults["endpoint"] or "",
                    stage=value.get("stage") or defaults["stage"],
                )
            else:
                raise CredentialsError(
                    f"Unsupported credential entry for {key!r}: {value!r}"
                )
        return cls(records=records, aliases=aliases, stage=defaults["stage"])

    def resolve_site_name(self, site: Optional[str]) -> str:
        if not site:
            raise UnknownSite(site)
        if site in self.records:
            return site
        if self.aliases.get(site):
            return self.aliases[site]
        raise UnknownSite(site)

    def get(self, site: Optional[str]) -> SiteCredentials:
        site_name = self.resolve_site_name(site)
        record = self.records.get(site_name)
        if record is None:
            # Aliases are resolved one level only
            raise UnknownSite(site_name)
        return record

    def resolve_credentials(self, site: Optional[str]) -> str:
        return self.get(site).basic_auth()

    def site_names(self) -> List[str]:
        return [
            name
            for name, record in self.records.items()
            if record.username and record.password
        ]


def credentials_path(
    site: str,
    stage: Optional[str] = None,
    directory: str = DEFAULT_CREDENTIALS_DIR,
    template: str = DEFAULT_CREDENTIALS_TEMPLATE,
) -> str:
    """Return the credential file for a site, preferring a stage variant."""
    base_dir = os.path.expanduser(directory)
    default = os.path.join(base_dir, template.format(site=site, extension="ini"))
    if stage:
        staged = os.path.join(base_dir, template.format(site=site, extension=stage))
        if os.path.exists(staged):
            return staged
    return default


def load_credentials(path: str) -> CredentialStore:
    """Parse an ini credential file.

    Keys placed before the first section are top-level: ``stage`` is the
    stage label, ``endpoint`` the default API base URL, anything else is a
    site alias. Each section is a site record with ``username``,
    ``password`` and optional ``endpoint`` and ``stage``.
    """
    if not os.path.isfile(path) or not os.access(path, os.R_OK):
        raise CredentialsError(
            f"Cloud credentials not available (check {path})"
        )

    with open(path, encoding="utf-8") as handle:
        text = handle.read()

    parser = configparser.ConfigParser(interpolation=None)
    # Site aliases are case-sensitive
    parser.optionxform = str
    try:
        parser.read_string(f"[{_TOP_LEVEL_SECTION}]\n{text}", source=path)
    except configparser.Error as e:
        raise CredentialsError(f"Invalid credentials file {path}: {e}") from e

    data: Dict[str, Any] = {}
    for section in parser.sections():
        values = {
            key: value.strip().strip('"') for key, value in parser.items(section)
        }
        if section == _TOP_LEVEL_SECTION:
            data.update(values)
        else:
            data[section] = values

    if not data:
        raise CredentialsError(
            f"Cloud credentials not available (check {path})"
        )

    store = CredentialStore.from_dict(data)
    LOGGER.debug(
        "Loaded credentials for %d site(s) from %s", len(store.records), path
    )
    return store
