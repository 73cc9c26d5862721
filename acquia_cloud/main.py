import json
import logging
import os
import re
import sys
from contextlib import ExitStack
from dataclasses import dataclass
from typing import Any, ClassVar, Dict, List, Mapping, Optional, Tuple, Union
from urllib.parse import urlencode

import requests
from requests.auth import HTTPBasicAuth

from .credentials import (
    DEFAULT_CREDENTIALS_DIR,
    DEFAULT_CREDENTIALS_TEMPLATE,
    CredentialStore,
    credentials_path,
    load_credentials,
)
from .errors import (
    ApiError,
    CloudApiError,
    CredentialsError,
    NotImplementedCall,
    ResourceNotFound,
    ResultStreamError,
    TransportError,
)

# Package metadata
__version__ = "1.0.0"
__author__ = "Acquia Cloud Tools"
__description__ = "Acquia Cloud API client for site, environment and database management"

LOGGER = logging.getLogger(__name__)

# Library defaults, copied into every client
DEFAULT_CONFIG: Dict[str, Any] = {
    "timeout": 30,
    "user_agent": f"acquia-cloud/{__version__}",
    "credentials_dir": DEFAULT_CREDENTIALS_DIR,
    "credentials_template": DEFAULT_CREDENTIALS_TEMPLATE,
}

CALL_OPTIONS = frozenset({
    "display",
    "result_stream",
    "redirect",
    "no_verify_peer",
    "include_header",
    "timeout",
})

SUCCESS_CODES = (200, 307)

_LOCATION_PATTERN = re.compile(r"^Location: (.*)$", re.MULTILINE)
_CHUNK_SIZE = 8192


# ---------------------------------------------------------------------------
# Dispatch results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ResponseEnvelope:
    result: Any = None
    # Raw status line, headers and body; only set for include_header calls
    content: Optional[str] = None
    status_code: int = 200


@dataclass(frozen=True)
class Success:
    envelope: ResponseEnvelope
    ok: ClassVar[bool] = True

    def unwrap(self) -> ResponseEnvelope:
        return self.envelope


@dataclass(frozen=True)
class Failure:
    error: CloudApiError
    ok: ClassVar[bool] = False

    def unwrap(self) -> ResponseEnvelope:
        raise self.error


DispatchResult = Union[Success, Failure]


# ---------------------------------------------------------------------------
# Request helpers
# ---------------------------------------------------------------------------

def encode_query(params: Optional[Mapping[str, Any]]) -> str:
    """Encode query parameters as ``key=value`` pairs joined by ``&``.

    Booleans are sent as ``1``/``0`` and values are form-encoded, so a
    space becomes ``+`` and ``&``/``=`` are percent-encoded.
    """
    pairs: List[Tuple[str, Any]] = []
    for key, value in (params or {}).items():
        if isinstance(value, bool):
            value = int(value)
        pairs.append((key, "" if value is None else value))
    return urlencode(pairs)


def build_url(
    endpoint: str, resource: str, params: Optional[Mapping[str, Any]] = None
) -> str:
    url = f"{endpoint}{resource}.json"
    query = encode_query(params)
    if query:
        url = f"{url}?{query}"
    return url


def extract_location(content: Optional[str], backup: Any = None) -> str:
    """Return the URL of the ``Location`` header found in raw response text."""
    match = _LOCATION_PATTERN.search(content or "")
    if not match or not match.group(1).strip():
        raise ResourceNotFound(
            f"Could not find backup {backup}" if backup is not None
            else "No Location header in response",
            status_code=None,
        )
    return match.group(1).strip()


def _raw_response_text(response: requests.Response, body: str) -> str:
    lines = [f"HTTP/1.1 {response.status_code} {response.reason or ''}".rstrip()]
    lines.extend(f"{name}: {value}" for name, value in response.headers.items())
    return "\r\n".join(lines) + "\r\n\r\n" + body


def _parse_json(text: str) -> Any:
    if not text:
        return None
    try:
        return json.loads(text)
    except ValueError:
        return None


def _copy_body(response: requests.Response, target: Any) -> None:
    for chunk in response.iter_content(chunk_size=_CHUNK_SIZE):
        if chunk:
            target.write(chunk)
    flush = getattr(target, "flush", None)
    if flush is not None:
        flush()


def _open_result_stream(stack: ExitStack, target: Any) -> Any:
    """Return a writable sink; paths are opened here and closed by ``stack``."""
    if isinstance(target, (str, os.PathLike)):
        return stack.enter_context(open(target, "wb"))
    return target


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------

class CloudApiClient:
    """Performs Cloud API calls with the credentials of a credential store.

    Default call options and the CA bundle are fixed at construction; use
    ``with_default_options`` or ``with_ca_info`` to derive a differently
    configured client.

    Example::

        client = CloudApiClient.from_file("tangle001")
        client.list_databases("tangle001", "prod")
    """

    def __init__(
        self,
        credentials: Union[CredentialStore, Mapping[str, Any]],
        default_options: Optional[Mapping[str, Any]] = None,
        ca_info: Optional[str] = None,
        config: Optional[Mapping[str, Any]] = None,
    ):
        if not isinstance(credentials, CredentialStore):
            credentials = CredentialStore.from_dict(credentials)
        if ca_info is not None and not os.path.exists(ca_info):
            raise CredentialsError(f"{ca_info} does not exist.")

        self._credentials = credentials
        self._ca_info = ca_info
        self._config: Dict[str, Any] = {**DEFAULT_CONFIG, **(config or {})}
        self._default_options: Dict[str, Any] = dict(default_options or {})

        for key in self._default_options:
            if key not in CALL_OPTIONS:
                LOGGER.debug("Ignoring unknown default call option %r", key)

    @classmethod
    def from_file(
        cls,
        site: str,
        stage: Optional[str] = None,
        path: Optional[str] = None,
        **kwargs: Any,
    ) -> "CloudApiClient":
        """Build a client from the site's ini credential file."""
        if not path:
            config = {**DEFAULT_CONFIG, **(kwargs.get("config") or {})}
            path = credentials_path(
                site,
                stage,
                directory=config["credentials_dir"],
                template=config["credentials_template"],
            )
        return cls(load_credentials(path), **kwargs)

    def with_default_options(self, **options: Any) -> "CloudApiClient":
        return CloudApiClient(
            self._credentials,
            default_options={**self._default_options, **options},
            ca_info=self._ca_info,
            config=self._config,
        )

    def with_ca_info(self, path: str) -> "CloudApiClient":
        return CloudApiClient(
            self._credentials,
            default_options=self._default_options,
            ca_info=path,
            config=self._config,
        )

    @property
    def credentials(self) -> CredentialStore:
        return self._credentials

    @property
    def ca_info(self) -> Optional[str]:
        return self._ca_info

    @property
    def default_options(self) -> Dict[str, Any]:
        return dict(self._default_options)

    def __repr__(self) -> str:
        return (
            f"<CloudApiClient sites={sorted(self._credentials.records)} "
            f"stage={self._credentials.stage!r}>"
        )

    def __reduce_ex__(self, protocol):
        raise CloudApiError(
            "Instances of CloudApiClient are not serializable."
        )

    # -----------------------------------------------------------------------
    # Request dispatch
    # -----------------------------------------------------------------------

    def dispatch(
        self,
        site: str,
        method: str,
        resource: str,
        params: Optional[Mapping[str, Any]] = None,
        body: Any = None,
        options: Optional[Mapping[str, Any]] = None,
    ) -> DispatchResult:
        """Perform one Cloud API round trip.

        Never raises for API or transport failures: the outcome is a
        ``Success`` carrying the response envelope or a ``Failure`` carrying
        one of the ``CloudApiError`` subclasses.
        """
        call_args = {
            "site": site,
            "method": method,
            "resource": resource,
            "params": dict(params or {}),
            "body": body,
        }
        merged = {**self._default_options, **(options or {})}
        try:
            envelope = self._execute(site, method.upper(), resource, params, body, merged, call_args)
        except CloudApiError as e:
            return Failure(e)
        return Success(envelope)

    def call(
        self,
        site: str,
        method: str,
        resource: str,
        params: Optional[Mapping[str, Any]] = None,
        body: Any = None,
        options: Optional[Mapping[str, Any]] = None,
    ) -> ResponseEnvelope:
        """Like ``dispatch`` but raises the failure."""
        return self.dispatch(site, method, resource, params, body, options).unwrap()

    def _verify(self, endpoint: str, options: Mapping[str, Any]) -> Union[bool, str]:
        if options.get("no_verify_peer") or not endpoint.startswith("https:"):
            return False
        return self._ca_info or True

    def _execute(
        self,
        site: str,
        method: str,
        resource: str,
        params: Optional[Mapping[str, Any]],
        body: Any,
        options: Mapping[str, Any],
        call_args: Dict[str, Any],
    ) -> ResponseEnvelope:
        record = self._credentials.get(site)
        url = build_url(record.endpoint, resource, params)

        headers = {"User-Agent": self._config["user_agent"]}
        data = None
        if body:
            data = json.dumps(body).encode("utf-8")
            headers["Content-Type"] = "application/json;charset=utf-8"
            headers["Content-Length"] = str(len(data))

        redirect = options.get("redirect")
        result_stream = options.get("result_stream")
        timeout = options.get("timeout") or self._config["timeout"]

        LOGGER.debug("%s %s", method, url)
        with ExitStack() as stack:
            # The sink must be usable before anything is sent
            try:
                sink = _open_result_stream(stack, result_stream) if result_stream else None
            except OSError as e:
                LOGGER.error("Cannot open result stream %s: %s", result_stream, e)
                raise ResultStreamError(
                    f"Cannot open result stream {result_stream}: {e}", e, call_args
                ) from e
            session = stack.enter_context(requests.Session())
            if redirect:
                session.max_redirects = int(redirect) + 1
            try:
                response = session.request(
                    method=method,
                    url=url,
                    data=data,
                    headers=headers,
                    auth=HTTPBasicAuth(record.username, record.password),
                    verify=self._verify(record.endpoint, options),
                    allow_redirects=bool(redirect),
                    stream=bool(result_stream),
                    timeout=timeout,
                )
                with response:
                    if result_stream:
                        _copy_body(response, sink)
                        text = ""
                    else:
                        text = response.text
            except requests.exceptions.SSLError as e:
                LOGGER.error("SSL error calling %s %s: %s", method, url, e)
                raise TransportError(
                    f"SSL Error: {e}. Check no_verify_peer and ca_info settings.",
                    e, call_args,
                ) from e
            except requests.exceptions.Timeout as e:
                LOGGER.error("Timeout calling %s %s", method, url)
                raise TransportError("Request timed out", e, call_args) from e
            except requests.exceptions.ConnectionError as e:
                LOGGER.error("Cannot reach %s: %s", record.endpoint, e)
                raise TransportError(
                    f"Cannot reach Cloud API endpoint: {record.endpoint}",
                    e, call_args,
                ) from e
            except requests.exceptions.TooManyRedirects as e:
                LOGGER.error("Too many redirects calling %s %s", method, url)
                raise TransportError(
                    f"Too many redirects (limit {int(redirect) + 1})", e, call_args
                ) from e
            except requests.exceptions.RequestException as e:
                LOGGER.error("Error accessing API %s %s: %s", method, url, e)
                raise TransportError(
                    f"Error accessing API: {e}", e, call_args
                ) from e

        status = response.status_code
        result = _parse_json(text)
        LOGGER.debug("%s %s -> %s", method, url, status)

        if status not in SUCCESS_CODES:
            if status == 404:
                LOGGER.warning("Resource not found: %s %s", method, url)
                raise ResourceNotFound(
                    f"Resource not found: {method} {resource}",
                    status_code=status,
                    call_args=call_args,
                )
            LOGGER.error("Cloud API returned %s for %s %s", status, method, url)
            raise ApiError(status, result, call_args)

        if options.get("display") and not result_stream:
            sys.stdout.write(json.dumps(result, indent=2) + "\n")

        content = None
        if options.get("include_header"):
            content = _raw_response_text(response, text)
        return ResponseEnvelope(result=result, content=content, status_code=status)

    # -----------------------------------------------------------------------
    # Credential helpers
    # -----------------------------------------------------------------------

    def get_site_name(self, site: str) -> str:
        return self._credentials.resolve_site_name(site)

    def get_all_site_names(self) -> List[str]:
        return self._credentials.site_names()

    def get_stage(self) -> Optional[str]:
        return self._credentials.stage

    # -----------------------------------------------------------------------
    # Sites and environments
    # -----------------------------------------------------------------------

    def list_sites(self, site: str) -> Any:
        """List all sites accessible with the site's credentials."""
        return self.call(site, "GET", "/sites").result

    def get_site_record(self, site: str) -> Any:
        return self.call(site, "GET", f"/sites/{self.get_site_name(site)}").result

    def list_environments(self, site: str) -> Any:
        return self.call(site, "GET", f"/sites/{self.get_site_name(site)}/envs").result

    def get_environment_info(self, site: str, env: str) -> Any:
        resource = f"/sites/{self.get_site_name(site)}/envs/{env}"
        return self.call(site, "GET", resource).result

    def install_environment(self, site: str, env: str, distro_type: str, source: str) -> Any:
        """Install a Drupal distro into an environment.

        Always refused: this call never reaches the API.
        """
        raise NotImplementedCall("install_environment")

    # -----------------------------------------------------------------------
    # Databases
    # -----------------------------------------------------------------------

    def list_databases(self, site: str, env: str) -> Any:
        resource = f"/sites/{self.get_site_name(site)}/envs/{env}/dbs"
        return self.call(site, "GET", resource).result

    def get_database_info(self, site: str, env: str, db: str) -> Any:
        resource = f"/sites/{self.get_site_name(site)}/envs/{env}/dbs/{db}"
        return self.call(site, "GET", resource).result

    def add_database(
        self, site: str, db: str, cluster_map: Optional[Mapping[str, Any]] = None
    ) -> Any:
        """Add a database to every environment of the site.

        ``cluster_map`` maps environment names to database cluster ids, see
        ``get_database_cluster_map``.
        """
        body: Dict[str, Any] = {"db": db}
        if cluster_map:
            body["options"] = {
                env: {"db_cluster": str(cluster)}
                for env, cluster in cluster_map.items()
            }
        resource = f"/sites/{self.get_site_name(site)}/dbs"
        return self.call(site, "POST", resource, body=body).result

    def delete_database(self, site: str, db: str, backup: bool = True) -> Any:
        """Delete a database; a final backup is made unless ``backup`` is false."""
        resource = f"/sites/{self.get_site_name(site)}/dbs/{db}"
        params = {"backup": int(bool(backup))}
        return self.call(site, "DELETE", resource, params=params).result

    def copy_database(self, site: str, db: str, source: str, target: str) -> Any:
        resource = f"/sites/{self.get_site_name(site)}/dbs/{db}/db-copy/{source}/{target}"
        return self.call(site, "POST", resource).result

    def get_database_cluster_map(
        self, site: str, envs: Optional[List[Mapping[str, Any]]] = None
    ) -> Dict[str, Any]:
        """Return a suitable database cluster id for each environment.

        The first positive cluster listed for an environment wins;
        environments without one are left out. The map can be passed to
        ``add_database`` as is.
        """
        if not envs:
            envs = self.list_environments(site) or []
        cluster_map: Dict[str, Any] = {}
        for env in envs:
            for cluster in env.get("db_clusters") or []:
                try:
                    positive = int(cluster) > 0
                except (TypeError, ValueError):
                    continue
                if positive:
                    cluster_map[env["name"]] = cluster
                    break
        return cluster_map

    # -----------------------------------------------------------------------
    # Database backups
    # -----------------------------------------------------------------------

    def list_database_backups(self, site: str, env: str, db: str) -> Any:
        resource = f"/sites/{self.get_site_name(site)}/envs/{env}/dbs/{db}/backups"
        return self.call(site, "GET", resource).result

    def get_database_backup_info(self, site: str, env: str, db: str, backup: Any) -> Any:
        resource = f"/sites/{self.get_site_name(site)}/envs/{env}/dbs/{db}/backups/{backup}"
        return self.call(site, "GET", resource).result

    def get_database_backup_location(self, site: str, env: str, db: str, backup: Any) -> str:
        """Return the signed URL a backup can be downloaded from.

        The API answers with a redirect; the URL is read from its
        ``Location`` header, so redirects are never followed here.
        """
        resource = (
            f"/sites/{self.get_site_name(site)}/envs/{env}/dbs/{db}"
            f"/backups/{backup}/download"
        )
        options = {"include_header": True, "redirect": 0, "result_stream": None}
        envelope = self.call(site, "GET", resource, options=options)
        return extract_location(envelope.content, backup)

    def backup_database(self, site: str, env: str, db: str) -> Any:
        resource = f"/sites/{self.get_site_name(site)}/envs/{env}/dbs/{db}/backups"
        return self.call(site, "POST", resource).result

    def restore_database(self, site: str, env: str, db: str, backup: Any) -> Any:
        resource = (
            f"/sites/{self.get_site_name(site)}/envs/{env}/dbs/{db}"
            f"/backups/{backup}/restore"
        )
        return self.call(site, "POST", resource).result

    def delete_database_backup(self, site: str, env: str, db: str, backup: Any) -> Any:
        resource = f"/sites/{self.get_site_name(site)}/envs/{env}/dbs/{db}/backups/{backup}"
        return self.call(site, "DELETE", resource).result

    # -----------------------------------------------------------------------
    # Domains
    # -----------------------------------------------------------------------

    def list_domains(self, site: str, env: str) -> Any:
        resource = f"/sites/{self.get_site_name(site)}/envs/{env}/domains"
        return self.call(site, "GET", resource).result

    def get_domain_info(self, site: str, env: str, domain: str) -> Any:
        resource = f"/sites/{self.get_site_name(site)}/envs/{env}/domains/{domain}"
        return self.call(site, "GET", resource).result

    def add_domain(self, site: str, env: str, domain: str) -> Any:
        resource = f"/sites/{self.get_site_name(site)}/envs/{env}/domains/{domain}"
        return self.call(site, "POST", resource).result

    def delete_domain(self, site: str, env: str, domain: str) -> Any:
        resource = f"/sites/{self.get_site_name(site)}/envs/{env}/domains/{domain}"
        return self.call(site, "DELETE", resource).result

    def purge_varnish(self, site: str, env: str, domain: str) -> Any:
        """Purge the Varnish cache for a domain."""
        resource = f"/sites/{self.get_site_name(site)}/envs/{env}/domains/{domain}/cache"
        return self.call(site, "DELETE", resource).result

    def move_domains(
        self,
        site: str,
        from_env: str,
        to_env: str,
        domains: Union[str, List[str]],
        skip_site_update: bool = True,
    ) -> Any:
        """Move domains atomically from one environment to another.

        ``domains`` is a list of domain names or ``"*"`` for all of them.
        """
        resource = f"/sites/{self.get_site_name(site)}/domain-move/{from_env}/{to_env}"
        params = {"skip_site_update": True} if skip_site_update else {}
        body = {"domains": domains}
        return self.call(site, "POST", resource, params=params, body=body).result

    def move_all_domains(
        self, site: str, from_env: str, to_env: str, skip_site_update: bool = True
    ) -> Any:
        return self.move_domains(site, from_env, to_env, "*", skip_site_update)

    # -----------------------------------------------------------------------
    # Servers
    # -----------------------------------------------------------------------

    def list_servers(self, site: str, env: str) -> Any:
        resource = f"/sites/{self.get_site_name(site)}/envs/{env}/servers"
        return self.call(site, "GET", resource).result

    def get_server_info(self, site: str, env: str, server: str) -> Any:
        resource = f"/sites/{self.get_site_name(site)}/envs/{env}/servers/{server}"
        return self.call(site, "GET", resource).result

    # -----------------------------------------------------------------------
    # SSH keys and SVN users
    # -----------------------------------------------------------------------

    def list_ssh_keys(self, site: str) -> Any:
        return self.call(site, "GET", f"/sites/{self.get_site_name(site)}/sshkeys").result

    def get_ssh_key(self, site: str, ssh_key_id: Any) -> Any:
        resource = f"/sites/{self.get_site_name(site)}/sshkeys/{ssh_key_id}"
        return self.call(site, "GET", resource).result

    def add_ssh_key(self, site: str, nickname: str, ssh_pub_key: str) -> Any:
        resource = f"/sites/{self.get_site_name(site)}/sshkeys"
        return self.call(
            site, "POST", resource,
            params={"nickname": nickname},
            body={"ssh_pub_key": ssh_pub_key},
        ).result

    def delete_ssh_key(self, site: str, ssh_key_id: Any) -> Any:
        resource = f"/sites/{self.get_site_name(site)}/sshkeys/{ssh_key_id}"
        return self.call(site, "DELETE", resource).result

    def list_svn_users(self, site: str) -> Any:
        return self.call(site, "GET", f"/sites/{self.get_site_name(site)}/svnusers").result

    def get_svn_user(self, site: str, svn_user_id: Any) -> Any:
        resource = f"/sites/{self.get_site_name(site)}/svnusers/{svn_user_id}"
        return self.call(site, "GET", resource).result

    def add_svn_user(self, site: str, username: str, password: str) -> Any:
        resource = f"/sites/{self.get_site_name(site)}/svnusers/{username}"
        return self.call(site, "POST", resource, body={"password": password}).result

    def delete_svn_user(self, site: str, svn_user_id: Any) -> Any:
        resource = f"/sites/{self.get_site_name(site)}/svnusers/{svn_user_id}"
        return self.call(site, "DELETE", resource).result

    # -----------------------------------------------------------------------
    # Tasks
    # -----------------------------------------------------------------------

    def get_tasks(self, site: str) -> Any:
        return self.call(site, "GET", f"/sites/{self.get_site_name(site)}/tasks").result

    def get_task_info(self, site: str, task: Any) -> Any:
        resource = f"/sites/{self.get_site_name(site)}/tasks/{task}"
        return self.call(site, "GET", resource).result

    # -----------------------------------------------------------------------
    # Code and files
    # -----------------------------------------------------------------------

    def deploy_code(self, site: str, source: str, target: str) -> Any:
        """Deploy the code of one environment onto another."""
        resource = f"/sites/{self.get_site_name(site)}/code-deploy/{source}/{target}"
        return self.call(site, "POST", resource).result

    def deploy_code_path(self, site: str, env: str, path: str) -> Any:
        """Deploy a VCS branch or tag to an environment."""
        resource = f"/sites/{self.get_site_name(site)}/envs/{env}/code-deploy"
        return self.call(site, "POST", resource, params={"path": path}).result

    def copy_files(self, site: str, source: str, target: str) -> Any:
        resource = f"/sites/{self.get_site_name(site)}/files-copy/{source}/{target}"
        return self.call(site, "POST", resource).result


# ---------------------------------------------------------------------------
# Command router
# ---------------------------------------------------------------------------

# command -> (required string arguments, optional arguments)
COMMANDS: Dict[str, Tuple[Tuple[str, ...], Tuple[str, ...]]] = {
    "list_sites": (("site",), ()),
    "get_site_record": (("site",), ()),
    "list_environments": (("site",), ()),
    "get_environment_info": (("site", "env"), ()),
    "list_databases": (("site", "env"), ()),
    "get_database_info": (("site", "env", "db"), ()),
    "add_database": (("site", "db"), ("cluster_map",)),
    "delete_database": (("site", "db"), ("backup",)),
    "copy_database": (("site", "db", "source", "target"), ()),
    "get_database_cluster_map": (("site",), ("envs",)),
    "list_database_backups": (("site", "env", "db"), ()),
    "get_database_backup_info": (("site", "env", "db", "backup"), ()),
    "get_database_backup_location": (("site", "env", "db", "backup"), ()),
    "backup_database": (("site", "env", "db"), ()),
    "restore_database": (("site", "env", "db", "backup"), ()),
    "delete_database_backup": (("site", "env", "db", "backup"), ()),
    "list_domains": (("site", "env"), ()),
    "get_domain_info": (("site", "env", "domain"), ()),
    "add_domain": (("site", "env", "domain"), ()),
    "delete_domain": (("site", "env", "domain"), ()),
    "purge_varnish": (("site", "env", "domain"), ()),
    "move_domains": (("site", "from_env", "to_env"), ("domains", "skip_site_update")),
    "move_all_domains": (("site", "from_env", "to_env"), ("skip_site_update",)),
    "list_servers": (("site", "env"), ()),
    "get_server_info": (("site", "env", "server"), ()),
    "list_ssh_keys": (("site",), ()),
    "get_ssh_key": (("site", "ssh_key_id"), ()),
    "add_ssh_key": (("site", "nickname", "ssh_pub_key"), ()),
    "delete_ssh_key": (("site", "ssh_key_id"), ()),
    "list_svn_users": (("site",), ()),
    "get_svn_user": (("site", "svn_user_id"), ()),
    "add_svn_user": (("site", "username", "password"), ()),
    "delete_svn_user": (("site", "svn_user_id"), ()),
    "get_tasks": (("site",), ()),
    "get_task_info": (("site", "task"), ()),
    "deploy_code": (("site", "source", "target"), ()),
    "deploy_code_path": (("site", "env", "path"), ()),
    "copy_files": (("site", "source", "target"), ()),
    "install_environment": (("site", "env", "distro_type", "source"), ()),
}

COMMAND_ALIASES: Dict[str, str] = {
    "sites": "list_sites",
    "site": "get_site_record",
    "envs": "list_environments",
    "env": "get_environment_info",
    "dbs": "list_databases",
    "db": "get_database_info",
    "backups": "list_database_backups",
    "backup": "backup_database",
    "restore": "restore_database",
    "domains": "list_domains",
    "purge": "purge_varnish",
    "servers": "list_servers",
    "sshkeys": "list_ssh_keys",
    "svnusers": "list_svn_users",
    "tasks": "get_tasks",
    "task": "get_task_info",
    "deploy": "deploy_code",
}


def execute_command(
    client: CloudApiClient, command: str, args: Optional[Dict[str, Any]] = None
) -> Any:
    """Route a command string to the matching client method."""
    command = command.lower().strip()
    name = COMMAND_ALIASES.get(command, command)
    if name not in COMMANDS:
        valid = sorted(set(COMMANDS) | set(COMMAND_ALIASES))
        raise ValueError(f"Unknown command '{command}'. Valid: {', '.join(valid)}")

    args = args or {}
    required, optional = COMMANDS[name]
    kwargs: Dict[str, Any] = {}
    for key in required:
        value = args.get(key)
        # Ids are frequently numeric
        if isinstance(value, int) and not isinstance(value, bool):
            value = str(value)
        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"{command} requires a non-empty '{key}' string")
        kwargs[key] = value.strip()
    for key in optional:
        if key in args:
            kwargs[key] = args[key]

    if name == "move_domains" and not kwargs.get("domains"):
        raise ValueError(
            f"{command} requires 'domains' as a list of names or '*'"
        )

    return getattr(client, name)(**kwargs)


# ---------------------------------------------------------------------------
# Initialize helper
# ---------------------------------------------------------------------------

def initialize() -> Dict[str, Any]:
    aliases: Dict[str, List[str]] = {}
    for alias, name in COMMAND_ALIASES.items():
        aliases.setdefault(name, []).append(alias)

    commands = []
    for name, (required, optional) in COMMANDS.items():
        label = " / ".join([name] + aliases.get(name, []))
        needs = ", ".join(required)
        if optional:
            needs += f" (optional: {', '.join(optional)})"
        commands.append(f"{label} → needs {needs}")

    return {
        "name": "Acquia Cloud API",
        "version": __version__,
        "author": __author__,
        "description": __description__,
        "commands": commands,
    }
