"""Tests for adapters that drive a platform CLI through npx."""

import pytest

from site_deploy.adapters.base import CommandResult, DeployCallbacks
from site_deploy.adapters.cloudflare import CloudflareAdapter
from site_deploy.adapters.github_pages import GitHubPagesAdapter, pages_url
from site_deploy.adapters.netlify import NetlifyAdapter
from site_deploy.adapters.platform_cli import PlatformCliAdapter
from site_deploy.adapters.surge import SurgeAdapter
from site_deploy.adapters.vercel import VercelAdapter
from site_deploy.models.deploy_config import (
    CloudflareDeployConfig,
    GitHubPagesDeployConfig,
    NetlifyDeployConfig,
    SurgeDeployConfig,
    VercelDeployConfig,
)


class FakeCli:
    """Stands in for ``exec_command``, replaying canned output."""

    def __init__(self, lines=(), code=0, stderr=""):
        self.lines = list(lines)
        self.code = code
        self.stderr = stderr
        self.calls = []

    async def __call__(self, command, args=(), cwd=None, env=None,
                       on_stdout=None, on_stderr=None, cancellable=True):
        self.calls.append({"command": command, "args": list(args), "env": env})
        for line in self.lines:
            if on_stdout:
                on_stdout(line)
        if self.stderr and on_stderr:
            on_stderr(self.stderr)
        return CommandResult(code=self.code, stdout="\n".join(self.lines), stderr=self.stderr)

    @property
    def args(self):
        return self.calls[-1]["args"]

    @property
    def env(self):
        return self.calls[-1]["env"]


def _install(adapter, cli):
    adapter.exec_command = cli
    return adapter


class TestPlatformCliContract:
    """Test the shared CLI adapter base."""

    def test_subclass_must_build_args(self):
        class NoArgsAdapter(PlatformCliAdapter):
            platform = "no-args"

        with pytest.raises(TypeError):
            NoArgsAdapter(environ={})


class TestNetlify:
    """Test the Netlify adapter."""

    OUTPUT = [
        "Deploying to draft URL...",
        "Website Draft URL: https://abc123--my-site.netlify.app",
        "Unique Deploy URL: https://64f0--my-site.netlify.app",
        "Website URL: https://my-site.netlify.app",
        "Deploy is live!",
    ]

    @pytest.mark.asyncio
    async def test_validation_requires_token(self, dist_dir):
        result = await NetlifyAdapter(environ={}).validate_config(
            NetlifyDeployConfig(dist_dir=str(dist_dir))
        )
        assert not result.is_valid
        assert "NETLIFY_AUTH_TOKEN" in result.errors[0]

    @pytest.mark.asyncio
    async def test_token_from_environment(self, dist_dir):
        result = await NetlifyAdapter(environ={"NETLIFY_AUTH_TOKEN": "tok"}).validate_config(
            NetlifyDeployConfig(dist_dir=str(dist_dir))
        )
        assert result.is_valid

    @pytest.mark.asyncio
    async def test_draft_deploy(self, dist_dir):
        cli = FakeCli(self.OUTPUT)
        adapter = _install(NetlifyAdapter(environ={}), cli)

        result = await adapter.deploy(NetlifyDeployConfig(
            dist_dir=str(dist_dir), auth_token="tok", site_id="site-1",
        ))

        assert result.success
        assert result.url == "https://64f0--my-site.netlify.app"
        assert result.platform_info["site_url"] == "https://my-site.netlify.app"
        assert cli.calls[0]["command"] == "npx"
        assert cli.args[:4] == ["netlify", "deploy", "--dir", str(dist_dir)]
        assert "--prod" not in cli.args
        assert cli.env == {"NETLIFY_AUTH_TOKEN": "tok", "NETLIFY_SITE_ID": "site-1"}

    @pytest.mark.asyncio
    async def test_production_deploy_uses_site_url(self, dist_dir):
        cli = FakeCli(self.OUTPUT)
        adapter = _install(NetlifyAdapter(environ={}), cli)

        result = await adapter.deploy(NetlifyDeployConfig(dist_dir=str(dist_dir), auth_token="t", prod=True))

        assert result.url == "https://my-site.netlify.app"
        assert "--prod" in cli.args

    @pytest.mark.asyncio
    async def test_cli_failure(self, dist_dir):
        adapter = _install(NetlifyAdapter(environ={}), FakeCli(code=1, stderr="Unauthorized"))

        result = await adapter.deploy(NetlifyDeployConfig(dist_dir=str(dist_dir), auth_token="t"))

        assert not result.success
        assert result.error == "Netlify CLI exited with code 1"
        assert result.error_details == "Unauthorized"

    @pytest.mark.asyncio
    async def test_npm_warnings_not_logged(self, dist_dir):
        logs = []
        adapter = _install(NetlifyAdapter(environ={}), FakeCli(stderr="npm WARN deprecated"))

        await adapter.deploy(NetlifyDeployConfig(dist_dir=str(dist_dir), auth_token="t"),
                             DeployCallbacks(on_log=logs.append))

        assert not any("deprecated" in entry.message for entry in logs)


class TestVercel:
    """Test the Vercel adapter."""

    @pytest.mark.asyncio
    async def test_deploy(self, dist_dir):
        cli = FakeCli(["Inspect: https://vercel.com/me/site/abc", "Production: https://site-abc.vercel.app"])
        adapter = _install(VercelAdapter(environ={"VERCEL_ORG_ID": "team_1"}), cli)

        result = await adapter.deploy(VercelDeployConfig(
            dist_dir=str(dist_dir), token="tok", prod=True, env={"API": "x"},
        ))

        assert result.success
        assert result.url == "https://site-abc.vercel.app"
        assert cli.args[:3] == ["vercel", str(dist_dir), "--yes"]
        assert "--prod" in cli.args
        assert ["--token", "tok"] == cli.args[cli.args.index("--token"):cli.args.index("--token") + 2]
        assert "API=x" in cli.args
        assert cli.env == {"VERCEL_ORG_ID": "team_1"}

    @pytest.mark.asyncio
    async def test_missing_url_still_succeeds(self, dist_dir):
        adapter = _install(VercelAdapter(environ={}), FakeCli(["done"]))

        result = await adapter.deploy(VercelDeployConfig(dist_dir=str(dist_dir), token="t"))

        assert result.success
        assert result.url is None


class TestCloudflare:
    """Test the Cloudflare Pages adapter."""

    @pytest.mark.asyncio
    async def test_validation(self, dist_dir):
        result = await CloudflareAdapter(environ={}).validate_config(
            CloudflareDeployConfig(dist_dir=str(dist_dir), api_token="t")
        )
        assert len(result.errors) == 2

    @pytest.mark.asyncio
    async def test_deploy(self, dist_dir):
        cli = FakeCli(["✨ Success! Uploaded 5 files", "Take a peek at https://1234.my-site.pages.dev"])
        adapter = _install(CloudflareAdapter(environ={}), cli)

        result = await adapter.deploy(CloudflareDeployConfig(
            dist_dir=str(dist_dir), api_token="t", account_id="acc", project_name="my-site",
            branch="main",
        ))

        assert result.url == "https://1234.my-site.pages.dev"
        assert cli.args[:6] == ["wrangler", "pages", "deploy", str(dist_dir), "--project-name", "my-site"]
        assert cli.env == {"CLOUDFLARE_API_TOKEN": "t", "CLOUDFLARE_ACCOUNT_ID": "acc"}


class TestSurge:
    """Test the Surge adapter."""

    @pytest.mark.asyncio
    async def test_deploy(self, dist_dir):
        cli = FakeCli(["Success! - Published to my-site.surge.sh"])
        adapter = _install(SurgeAdapter(environ={}), cli)

        result = await adapter.deploy(SurgeDeployConfig(
            dist_dir=str(dist_dir), token="t", domain="my-site.surge.sh",
        ))

        assert result.url == "https://my-site.surge.sh"
        assert cli.args == ["surge", str(dist_dir), "my-site.surge.sh"]
        assert cli.env == {"SURGE_TOKEN": "t"}


class TestGitHubPages:
    """Test the GitHub Pages adapter."""

    def test_pages_url(self):
        assert pages_url("octo/site") == "https://octo.github.io/site"
        assert pages_url("octo/octo.github.io") == "https://octo.github.io"
        assert pages_url("octo/site", "docs.example.com") == "https://docs.example.com"

    @pytest.mark.asyncio
    async def test_gh_token_accepted(self, dist_dir):
        result = await GitHubPagesAdapter(environ={"GH_TOKEN": "t"}).validate_config(
            GitHubPagesDeployConfig(dist_dir=str(dist_dir), repo="octo/site")
        )
        assert result.is_valid

    @pytest.mark.asyncio
    async def test_repo_format_checked(self, dist_dir):
        result = await GitHubPagesAdapter(environ={}).validate_config(
            GitHubPagesDeployConfig(dist_dir=str(dist_dir), token="t", repo="just-a-name")
        )
        assert not result.is_valid

    @pytest.mark.asyncio
    async def test_deploy_writes_cname(self, dist_dir):
        (dist_dir / ".nojekyll").unlink()
        cli = FakeCli(["Published"])
        adapter = _install(GitHubPagesAdapter(environ={}), cli)

        result = await adapter.deploy(GitHubPagesDeployConfig(
            dist_dir=str(dist_dir), token="t", repo="octo/site", cname="docs.example.com",
        ))

        assert result.url == "https://docs.example.com"
        assert (dist_dir / "CNAME").read_text() == "docs.example.com"
        assert (dist_dir / ".nojekyll").exists()
        assert cli.args[-2:] == ["-r", "https://x-access-token:t@github.com/octo/site.git"]
