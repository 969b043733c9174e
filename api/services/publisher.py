"""Git commit/push and hosting deploy after a post is published.

Runs outside the request: the HTTP response never waits for it and never
reflects its outcome. Failures are logged and dropped.
"""

import asyncio
import logging
import shlex
from collections.abc import Sequence
from pathlib import Path

from api.config import Settings, get_settings
from api.services.http_client import get_shared_client

logger = logging.getLogger(__name__)

_GIT_TIMEOUT = 60
_DEPLOY_TIMEOUT = 300

# Lazy singleton — lives for the process lifetime
_notifier: "PublishNotifier | None" = None


async def _run(cwd: Path, *args: str, timeout: int = _GIT_TIMEOUT) -> str:
    """Run a command in *cwd* and return stdout. Raises RuntimeError on failure."""
    proc = await asyncio.create_subprocess_exec(
        *args,
        cwd=str(cwd),
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except TimeoutError as e:
        proc.kill()
        await proc.wait()
        raise RuntimeError(f"{' '.join(args[:2])} timed out after {timeout}s") from e

    if proc.returncode != 0:
        err = stderr.decode().strip()
        raise RuntimeError(f"{' '.join(args[:2])} failed: {err}")

    return stdout.decode().strip()


class PublishNotifier:
    """Commits published files, pushes them, then triggers a deploy."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    @property
    def enabled(self) -> bool:
        return self.settings.publish_enabled

    async def notify(self, files: Sequence[Path], title: str) -> None:
        """Commit and push *files*, then deploy. Never raises."""
        if not self.enabled:
            logger.debug("Publishing disabled, skipping git push for %r", title)
            return
        try:
            await self._commit_and_push(files, title)
        except Exception:
            logger.exception("Git publish failed for %r", title)
            return
        try:
            await self._deploy()
        except Exception:
            logger.exception("Deploy trigger failed for %r", title)

    async def _commit_and_push(self, files: Sequence[Path], title: str) -> None:
        repo = self.settings.repo_path
        paths = [str(Path(f).resolve()) for f in files]
        await _run(repo, "git", "add", "--", *paths)
        await _run(repo, "git", "commit", "-m", f"New blog: {title}")
        push_args = ["git", "push", self.settings.git_remote]
        if self.settings.git_branch:
            push_args.append(self.settings.git_branch)
        await _run(repo, *push_args)
        logger.info("Pushed %d files for %r", len(paths), title)

    async def _deploy(self) -> None:
        if self.settings.deploy_hook_url:
            client = get_shared_client()
            resp = await client.post(self.settings.deploy_hook_url)
            resp.raise_for_status()
            logger.info("Deploy hook accepted (%d)", resp.status_code)
        elif self.settings.deploy_command:
            output = await _run(
                self.settings.repo_path,
                *shlex.split(self.settings.deploy_command),
                timeout=_DEPLOY_TIMEOUT,
            )
            logger.info("Deploy command finished: %s", output[-200:])
        else:
            logger.debug("No deploy configured, push only")


def get_publish_notifier() -> PublishNotifier:
    """Return the shared publish notifier (lazy singleton)."""
    global _notifier
    if _notifier is None:
        _notifier = PublishNotifier(get_settings())
    return _notifier
