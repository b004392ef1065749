"""Parse human-entered repository coordinates for each provider.

Users paste whatever they have at hand: ``owner/repo``, a browser URL, an
Azure organization URL in either the dev.azure.com or the legacy
visualstudio.com form. These pure functions reduce that input to canonical
coordinates or raise InvalidInputError with a message fit for the UI.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from urllib.parse import unquote, urlsplit

from icon_bridge.exceptions import InvalidInputError
from icon_bridge.utils.text import normalize_string

_URL_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)
_GITHUB_HOSTS = frozenset({"github.com", "www.github.com"})
_GIT_SUFFIX_RE = re.compile(r"\.git$", re.IGNORECASE)
_VISUALSTUDIO_HOST_RE = re.compile(r"^([^.]+)\.visualstudio\.com$", re.IGNORECASE)

AZURE_HOST = "dev.azure.com"


@dataclass(slots=True, frozen=True)
class GitHubAddress:
    """Canonical GitHub repository coordinates."""

    owner: str
    repo: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


@dataclass(slots=True, frozen=True)
class AzureAddress:
    """Canonical Azure DevOps project and repository."""

    project: str
    repository: str


def _path_segments(path: str) -> list[str]:
    return [unquote(part) for part in path.split("/") if part]


def _strip_git_suffix(value: str) -> str:
    return _GIT_SUFFIX_RE.sub("", value)


def parse_github_repository(value: str | None) -> GitHubAddress:
    """Parse ``owner/repo`` or a github.com URL.

    Args:
        value: User input

    Returns:
        GitHubAddress with any ``.git`` suffix removed

    Raises:
        InvalidInputError: If the input is empty, not on github.com, or has
            fewer than two path segments

    """
    raw = normalize_string(value)
    if not raw:
        msg = "Repository is required. Use owner/repo."
        raise InvalidInputError(msg)

    if _URL_SCHEME_RE.match(raw):
        url = urlsplit(raw)
        host = (url.hostname or "").lower()
        if host not in _GITHUB_HOSTS:
            msg = "GitHub repository URL must use github.com."
            raise InvalidInputError(msg)
        parts = _path_segments(url.path)
        if len(parts) < 2:
            msg = "Repository URL must include owner and repo."
            raise InvalidInputError(msg)
    else:
        parts = [part for part in raw.split("/") if part]
        if len(parts) < 2:
            msg = "Repository must be in owner/repo format."
            raise InvalidInputError(msg)

    repo = _strip_git_suffix(parts[1])
    if not repo:
        msg = "Repository must be in owner/repo format."
        raise InvalidInputError(msg)
    return GitHubAddress(owner=parts[0], repo=repo)


def parse_azure_organization(value: str | None) -> str:
    """Parse an Azure DevOps organization name or URL.

    Accepts a bare name, ``https://dev.azure.com/{org}`` (the scheme may be
    omitted) or ``https://{org}.visualstudio.com``.

    Raises:
        InvalidInputError: If no organization can be derived

    """
    raw = normalize_string(value)
    if not raw:
        msg = "Organization URL is required."
        raise InvalidInputError(msg)

    if "/" not in raw and "." not in raw:
        return raw

    url = urlsplit(raw if "://" in raw else f"https://{raw}")
    host = (url.hostname or "").lower()

    if host == AZURE_HOST:
        parts = _path_segments(url.path)
        if not parts:
            msg = "Organization URL must include organization name."
            raise InvalidInputError(msg)
        return parts[0]

    match = _VISUALSTUDIO_HOST_RE.match(host)
    if match:
        return match.group(1)

    msg = "Use a valid Azure URL: https://dev.azure.com/{organization}"
    raise InvalidInputError(msg)


def resolve_azure_project_and_repository(
    repository_value: str | None,
    project_value: str | None,
    organization: str,
) -> AzureAddress:
    """Resolve the Azure project and repository from user input.

    Supported repository forms: a bare name (project given separately),
    ``project/_git/repo``, ``project/repo`` and a browser URL containing
    ``_git``. A leading URL segment equal to the organization is skipped.
    An explicitly supplied project always wins over a parsed one.

    Raises:
        InvalidInputError: If the project or repository cannot be determined

    """
    repository = normalize_string(repository_value)
    project = normalize_string(project_value)
    org_key = normalize_string(organization).lower()

    if not repository:
        msg = "Repository is required."
        raise InvalidInputError(msg)

    if _URL_SCHEME_RE.match(repository):
        url = urlsplit(repository)
        parts = _path_segments(url.path)
        if (
            (url.hostname or "").lower() == AZURE_HOST
            and parts
            and parts[0].lower() == org_key
        ):
            parts = parts[1:]

        if "_git" in parts:
            git_index = parts.index("_git")
            if not project and git_index > 0:
                project = parts[git_index - 1]
            repository = (
                parts[git_index + 1] if git_index + 1 < len(parts) else ""
            )
        elif len(parts) >= 2:
            if not project:
                project = parts[0]
            repository = parts[1]
        else:
            repository = parts[0] if parts else ""
    elif "/_git/" in repository:
        left, _, right = repository.partition("/_git/")
        left_parts = [part for part in left.split("/") if part]
        right_parts = [part for part in right.split("/") if part]
        if not project and left_parts:
            candidate = left_parts[-1]
            if candidate.lower() == org_key and len(left_parts) > 1:
                candidate = left_parts[-2]
            project = candidate
        repository = right_parts[0] if right_parts else ""
    elif "/" in repository:
        parts = [part for part in repository.split("/") if part]
        if len(parts) >= 2:
            if not project:
                project = parts[0]
            repository = parts[-1]
        elif parts:
            repository = parts[0]

    repository = _strip_git_suffix(repository)

    if not project:
        msg = "Project is required for Azure DevOps."
        raise InvalidInputError(msg)
    if not repository:
        msg = "Repository is required for Azure DevOps."
        raise InvalidInputError(msg)

    return AzureAddress(project=project, repository=repository)
