"""Windows Update access for the update operations."""

from __future__ import annotations

import base64
from typing import Protocol

from pydantic import BaseModel, ConfigDict

from hostmend.core.log import logger
from hostmend.core.result import ToolInvocationResult, UpdateInfo
from hostmend.core.runner import ToolInvoker

# Both scripts print one "<id>\t<title>" line per update
_EMIT = r"""
function Emit($u) {
    $kb = $u.KBArticleIDs | Select-Object -First 1
    $id = if ($kb) { "KB$kb" } else { $u.Identity.UpdateID }
    "$id`t$($u.Title)"
}
$ErrorActionPreference = 'Stop'
$session = New-Object -ComObject Microsoft.Update.Session
$found = $session.CreateUpdateSearcher().Search("IsInstalled=0 and IsHidden=0")
"""

LIST_SCRIPT = _EMIT + r"""
foreach ($u in $found.Updates) { Emit $u }
"""

APPLY_SCRIPT = _EMIT + r"""
$pending = New-Object -ComObject Microsoft.Update.UpdateColl
foreach ($u in $found.Updates) {
    if (-not $u.EulaAccepted) { $u.AcceptEula() }
    [void]$pending.Add($u)
}
if ($pending.Count -eq 0) { exit 0 }
$downloader = $session.CreateUpdateDownloader()
$downloader.Updates = $pending
[void]$downloader.Download()
$installer = $session.CreateUpdateInstaller()
$installer.Updates = $pending
$outcome = $installer.Install()
for ($i = 0; $i -lt $pending.Count; $i++) {
    if ($outcome.GetUpdateResult($i).ResultCode -eq 2) {
        Emit $pending.Item($i)
    }
}
if ($outcome.ResultCode -ne 2) { exit 1 }
"""


class UpdateQuery(BaseModel):
    """Tool run behind an update request and the updates it reported."""

    model_config = ConfigDict(frozen=True)

    invocation: ToolInvocationResult
    updates: tuple[UpdateInfo, ...] = ()


class UpdateSource(Protocol):
    """Anything that can list and install pending updates.

    Both methods raise ToolLaunchFailure when the backing tool cannot
    be started.
    """

    def list_available(self) -> UpdateQuery:
        ...

    def apply_all(self) -> UpdateQuery:
        ...


def parse_updates(lines: tuple[str, ...]) -> tuple[UpdateInfo, ...]:
    """Parse "<id>\\t<title>" lines; anything else is skipped."""
    updates = []
    for line in lines:
        identifier, sep, title = line.partition("\t")
        if sep and identifier.strip():
            updates.append(
                UpdateInfo(identifier=identifier.strip(), title=title.strip())
            )
    return tuple(updates)


def encode_command(script: str) -> str:
    """Encode a script for powershell -EncodedCommand."""
    return base64.b64encode(script.encode("utf-16-le")).decode("ascii")


class WindowsUpdateSource:
    """Windows Update Agent driven through PowerShell."""

    def __init__(self, powershell: str, invoker: ToolInvoker | None = None):
        self.powershell = powershell
        self.invoker = invoker or ToolInvoker()

    def list_available(self) -> UpdateQuery:
        return self._query(LIST_SCRIPT)

    def apply_all(self) -> UpdateQuery:
        return self._query(APPLY_SCRIPT)

    def _query(self, script: str) -> UpdateQuery:
        invocation = self.invoker.run(
            self.powershell,
            "-NoProfile -NonInteractive -EncodedCommand "
            + encode_command(script),
        )
        if invocation.exit_status != 0:
            return UpdateQuery(invocation=invocation)

        updates = parse_updates(invocation.output)
        logger.debug("Windows Update reported updates", count=len(updates))
        return UpdateQuery(invocation=invocation, updates=updates)
