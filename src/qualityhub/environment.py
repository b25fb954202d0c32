"""Environment discovery for QualityHub.

Parsers never read the process environment themselves. Instead the caller
builds an immutable ``EnvironmentContext`` once and hands it to each parser,
so identity resolution and CI detection can be tested with a plain dict.

Example:
    >>> env = EnvironmentContext.from_environ({"GITHUB_ACTIONS": "true", "GITHUB_SHA": "abc"})
    >>> env.ci_provider
    'github-actions'
    >>> env.git_commit
    'abc'
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

# (signal variable, provider name) in detection priority order
CI_SIGNATURES = (
    ("GITHUB_ACTIONS", "github-actions"),
    ("GITLAB_CI", "gitlab-ci"),
    ("CIRCLECI", "circleci"),
    ("JENKINS_URL", "jenkins"),
    ("TRAVIS", "travis-ci"),
)

COMMIT_VARS = ("GIT_COMMIT", "GITHUB_SHA", "CI_COMMIT_SHA")
BRANCH_VARS = ("GIT_BRANCH", "GITHUB_REF_NAME", "CI_COMMIT_REF_NAME")


@dataclass(frozen=True)
class EnvironmentContext:
    """Immutable snapshot of the environment-sourced inputs a parser may use.

    Attributes:
        package_name: Package name exported by the build tool, if any
        package_version: Package version exported by the build tool, if any
        git_commit: Commit hash from CI/git variables
        git_branch: Branch name from CI/git variables
        ci_provider: Detected CI provider (e.g. ``github-actions``)
        ci_url: Link to the CI run, when the provider exposes one
        working_dir: Last-resort search location for auxiliary report files
    """

    package_name: Optional[str] = None
    package_version: Optional[str] = None
    git_commit: Optional[str] = None
    git_branch: Optional[str] = None
    ci_provider: Optional[str] = None
    ci_url: Optional[str] = None
    working_dir: Path = field(default_factory=Path.cwd)

    @classmethod
    def from_environ(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        cwd: Optional[Path] = None,
    ) -> "EnvironmentContext":
        """Build a context from an environment mapping (``os.environ`` by default)."""
        env = os.environ if environ is None else environ
        provider = detect_ci_provider(env)
        return cls(
            package_name=_first(env, ("npm_package_name",)),
            package_version=_first(env, ("npm_package_version",)),
            git_commit=_first(env, COMMIT_VARS),
            git_branch=_first(env, BRANCH_VARS),
            ci_provider=provider,
            ci_url=ci_run_url(env, provider),
            working_dir=cwd if cwd is not None else Path.cwd(),
        )


def detect_ci_provider(env: Mapping[str, str]) -> Optional[str]:
    """Return the first CI provider whose signature variable is set."""
    for var, provider in CI_SIGNATURES:
        if env.get(var):
            return provider
    return None


def ci_run_url(env: Mapping[str, str], provider: Optional[str]) -> Optional[str]:
    """Build a link to the current CI run for providers that expose one."""
    if provider == "github-actions":
        repo = env.get("GITHUB_REPOSITORY")
        run_id = env.get("GITHUB_RUN_ID")
        if repo and run_id:
            server = env.get("GITHUB_SERVER_URL") or "https://github.com"
            return f"{server}/{repo}/actions/runs/{run_id}"
        return None
    if provider == "gitlab-ci":
        return env.get("CI_PIPELINE_URL") or None
    if provider == "circleci":
        return env.get("CIRCLE_BUILD_URL") or None
    if provider == "jenkins":
        return env.get("BUILD_URL") or None
    return None


def _first(env: Mapping[str, str], names: tuple) -> Optional[str]:
    for name in names:
        value = env.get(name)
        if value:
            return value
    return None
