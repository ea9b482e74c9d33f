"""A step that downloads a URI to a local file."""

from __future__ import annotations

import ipaddress
import logging
import os
import shutil
import urllib.error
import urllib.request
from dataclasses import dataclass
from urllib.parse import urlsplit

from .actions import Action, ActResult
from .context import ExecutionContext
from .paths import fetch_abs

logger = logging.getLogger(__name__)


def _within(root: str, path: str) -> str:
    return os.path.join(root, path.lstrip("/" + os.sep))


def _exists(path: str) -> bool:
    try:
        os.stat(path)
    except FileNotFoundError:
        return False
    except OSError:
        return True
    return True


def _check_proxy(proxy: str) -> None:
    try:
        parts = urlsplit(proxy)
    except ValueError as exc:
        raise ValueError(f"invalid URI given for Proxy: {proxy}") from exc
    if not parts.netloc or not parts.scheme:
        raise ValueError(f"invalid URI given for Proxy: {proxy}")


def _is_loopback(url: str) -> bool:
    host = urlsplit(url).hostname or ""
    if host == "localhost":
        return True
    try:
        return ipaddress.ip_address(host).is_loopback
    except ValueError:
        return False


@dataclass
class FetchURIStep(Action):
    """Download ``fetch_uri`` and save it at ``location``.

    With ``fs_root`` set, ``location`` is placed beneath that directory.
    """

    fetch_uri: str = ""
    location: str = ""
    retries: str = ""
    proxy: str = ""
    overwrite: bool = False
    fs_root: str | None = None

    def is_nil(self) -> bool:
        return self.fetch_uri == "" or self.location == ""

    def validate(self, exec_ctx: ExecutionContext) -> None:
        if self.fetch_uri == "":
            raise ValueError("require FetchURI to be set with fetchURI")
        if self.location == "":
            raise ValueError("require Location to be set with fetchURI")
        if self.proxy:
            _check_proxy(self.proxy)

        abs_local = fetch_abs(self.location, exec_ctx.work_dir)
        if _exists(abs_local) and not self.overwrite:
            raise FileExistsError("file exists at location specified, remove and retry")

    def execute(self, exec_ctx: ExecutionContext) -> ActResult:
        logger.info("========= Executing ==========")
        self._fetch(exec_ctx)
        logger.info("========= Result ==========")
        return ActResult()

    def cleanup(self, exec_ctx: ExecutionContext) -> ActResult:
        """Run the fetch as a cleanup action."""
        return self.execute(exec_ctx)

    def _opener(self) -> urllib.request.OpenerDirector:
        if self.proxy:
            _check_proxy(self.proxy)
            handler = urllib.request.ProxyHandler(
                {"http": self.proxy, "https": self.proxy}
            )
        elif _is_loopback(self.fetch_uri):
            handler = urllib.request.ProxyHandler({})
        else:
            handler = urllib.request.ProxyHandler()
        return urllib.request.build_opener(handler)

    def _fetch(self, exec_ctx: ExecutionContext) -> None:
        if self.fs_root is None:
            target = fetch_abs(self.location, exec_ctx.work_dir)
        else:
            target = _within(self.fs_root, self.location)
            parent = os.path.dirname(target)
            if parent:
                os.makedirs(parent, exist_ok=True)

        if _exists(target) and not self.overwrite:
            raise FileExistsError(
                f"location [{self.location}] exists and overwrite is set to false. "
                "remove and retry"
            )

        opener = self._opener()
        try:
            response = opener.open(self.fetch_uri)
        except urllib.error.HTTPError as exc:
            # Non-success statuses still carry a body, which is saved as is.
            response = exc

        with response, open(target, "wb") as handle:
            shutil.copyfileobj(response, handle)

        logger.debug("wrote contents of URI %s to %s", self.fetch_uri, target)