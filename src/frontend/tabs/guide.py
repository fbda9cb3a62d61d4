"""Guide tab: short operator notes shown in the config panel."""

from __future__ import annotations

from textual.containers import Container
from textual.widgets import Static

GUIDE_TEXT = """\
Monitoring starts at the current end of the log; older lines are never alerted.
Each distinct line alerts once per run. Restarting the service forgets history.
A log that shrinks is treated as rotated and rescanned from the beginning.
Rotation to a file of the same size is only noticed with detect_replacement on.
Secrets are read from the environment: BOT_API, API_ID, API_HASH.
Run `loginwatch check` after editing to validate patterns and tools.
"""


class GuideTab(Container):
    def compose(self):
        yield Static(GUIDE_TEXT, classes="guide", markup=False)
