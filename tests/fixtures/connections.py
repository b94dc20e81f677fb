"""Connection doubles shared by the CTCP tests."""

import asyncio
import time


class RecordingConnection:
    """Connection double that records every NOTICE/PRIVMSG with a timestamp."""

    def __init__(self, name: str = "testnet") -> None:
        self.name = name
        self.notices: list[tuple[str, str]] = []
        self.privmsgs: list[tuple[str, str]] = []
        self.notice_times: list[float] = []

    async def notice(self, recipient: str, text: str) -> None:
        self.notice_times.append(time.monotonic())
        self.notices.append((recipient, text))
        await asyncio.sleep(0)

    def privmsg(self, recipient: str, text: str) -> None:
        self.privmsgs.append((recipient, text))
