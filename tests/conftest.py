"""Shared fixtures for site-deploy tests."""

import os
import sys

import pytest

from site_deploy.constants import PLATFORM_ENV_VARS
from site_deploy.models.config import ServiceConfig

ENV_PREFIXES = ("SITE_DEPLOY_",)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep credentials from the developer's shell out of every test."""
    names = {name for names in PLATFORM_ENV_VARS.values() for name in names}
    names.update(name for name in os.environ if name.startswith(ENV_PREFIXES))
    for name in names:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def project_root(tmp_path):
    root = tmp_path / "project"
    root.mkdir()
    return root


@pytest.fixture
def dist_dir(project_root):
    """Build output with a handful of files, including nested and hidden ones."""
    dist = project_root / "dist"
    (dist / "assets" / "js").mkdir(parents=True)
    (dist / "index.html").write_text("<h1>hello</h1>")
    (dist / "about.html").write_text("<h1>about</h1>")
    (dist / "assets" / "style.css").write_text("body {}")
    (dist / "assets" / "js" / "app.js").write_text("console.log(1)")
    (dist / ".nojekyll").write_text("")
    return dist


@pytest.fixture
def settings(project_root):
    return ServiceConfig(project_root=project_root, retry_delay=0)


@pytest.fixture
def python_exe():
    return sys.executable
