"""Copy / share / download actions offered next to a rendered result.

Copy and share run as fire-and-forget asyncio tasks. Their only visible effect
is the button label, which flips to a confirmation and reverts after
``settings.copy_feedback_seconds``. Nothing in the engine awaits them.
"""
import asyncio
import logging
from typing import Optional, Set
from urllib.parse import quote

from ..browser import SharePayload, Window
from ..config import settings
from .classifier import Download

logger = logging.getLogger(__name__)


class AffordanceButton:
    def __init__(self, label: str):
        self.default_label = label
        self.label = label

    def flash(self, label: str, seconds: float) -> None:
        """Show ``label`` now, restore the default label after ``seconds``."""
        self.label = label
        asyncio.get_running_loop().call_later(seconds, self.reset)

    def reset(self) -> None:
        self.label = self.default_label


def data_url(download: Download) -> str:
    return f"data:{download.mime_type};charset=utf-8,{quote(download.content)}"


class ResultActions:
    def __init__(
        self,
        window: Window,
        tool_id: str,
        copy_text: Optional[str],
        download: Optional[Download] = None,
        feedback_seconds: Optional[float] = None,
    ):
        self.window = window
        self.tool_id = tool_id
        self.copy_text = copy_text
        self._download = download
        self.feedback_seconds = settings.copy_feedback_seconds if feedback_seconds is None else feedback_seconds
        self.copy_button = AffordanceButton("Copy") if copy_text is not None else None
        self.share_button = AffordanceButton("Share") if self.can_share else None
        self._tasks: Set[asyncio.Task] = set()

    @property
    def can_copy(self) -> bool:
        return self.copy_text is not None

    @property
    def can_share(self) -> bool:
        return self.copy_text is not None and self.window.capabilities.share

    @property
    def needs_copy_fallback(self) -> bool:
        return not self.window.capabilities.clipboard

    def _spawn(self, coro) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        # The loop only holds tasks weakly
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    # ── Copy ──────────────────────────────────────────────────

    def copy(self) -> Optional[asyncio.Task]:
        if not self.can_copy:
            return None
        return self._spawn(self._copy())

    async def _copy(self) -> None:
        caps = self.window.capabilities
        text = self.copy_text or ""
        try:
            if not (caps.clipboard and caps.clipboard_writer):
                raise RuntimeError("clipboard unavailable")
            await caps.clipboard_writer(text)
        except Exception as e:
            logger.info(f"Clipboard write failed ({e}), using text-selection fallback")
            self.window.document.copy_via_fallback(text)
        self.copy_button.flash("Copied!", self.feedback_seconds)

    # ── Share ─────────────────────────────────────────────────

    def share_payload(self) -> SharePayload:
        return SharePayload(
            title=f"Calculation Result{settings.title_suffix}",
            text=f"Check out this calculation result from {self.tool_id}",
            url=self.window.url,
        )

    def share(self) -> Optional[asyncio.Task]:
        if not self.can_share:
            return None
        return self._spawn(self._share())

    async def _share(self) -> None:
        handler = self.window.capabilities.share_handler
        if handler is None:
            return
        try:
            await handler(self.share_payload())
        except Exception as e:
            logger.warning(f"Share failed for {self.tool_id}: {e}")
            return
        self.share_button.flash("Shared!", self.feedback_seconds)

    # ── Download ──────────────────────────────────────────────

    def download(self) -> Optional[Download]:
        return self._download

    @property
    def download_url(self) -> Optional[str]:
        return data_url(self._download) if self._download else None
