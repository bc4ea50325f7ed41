"""Approval gate: pause a task until an external approve/reject decision.

Each request owns a single-shot asyncio future. The request record and its
future are registered together under one lock before the request id is
visible to anyone, so a decision can never arrive for a request whose waiter
is not yet known. Resolution is first-wins: later approve/reject calls on the
same id are silent no-ops.

There is no timeout. A request nobody resolves keeps its workflow suspended;
cancelling that workflow leaves the request pending.
"""

from __future__ import annotations

import asyncio
import logging
import threading

from agent_manager.storage.models import ApprovalRequest, Task, utc_now

logger = logging.getLogger(__name__)


def default_reason(task: Task) -> str:
    return f"Approve execution of: {task.description}"


class ApprovalGate:
    """Thread-safe registry of approval requests and their waiters."""

    def __init__(self) -> None:
        self._requests: dict[str, ApprovalRequest] = {}
        self._waiters: dict[str, asyncio.Future[bool]] = {}
        self._lock = threading.Lock()

    def open_request(
        self, task: Task, reason: str | None = None
    ) -> tuple[ApprovalRequest, asyncio.Future[bool]]:
        """Create a request and its waiter atomically. Must run inside an event loop."""
        future: asyncio.Future[bool] = asyncio.get_running_loop().create_future()
        request = ApprovalRequest(task_id=task.task_id, reason=reason or default_reason(task))
        with self._lock:
            self._requests[request.request_id] = request
            self._waiters[request.request_id] = future
        logger.info(
            "approval event=requested request_id=%s task_id=%s",
            request.request_id,
            task.task_id,
        )
        return request, future

    async def request_approval(self, task: Task, reason: str | None = None) -> bool:
        _, future = self.open_request(task, reason)
        return await future

    def approve(self, request_id: str) -> bool:
        return self._resolve(request_id, approved=True)

    def reject(self, request_id: str) -> bool:
        return self._resolve(request_id, approved=False)

    def get_request(self, request_id: str) -> ApprovalRequest | None:
        with self._lock:
            return self._requests.get(request_id)

    def list_pending(self) -> list[ApprovalRequest]:
        with self._lock:
            return [request for request in self._requests.values() if not request.is_resolved]

    def list_by_task(self, task_id: str) -> list[ApprovalRequest]:
        with self._lock:
            return [request for request in self._requests.values() if request.task_id == task_id]

    def _resolve(self, request_id: str, *, approved: bool) -> bool:
        with self._lock:
            request = self._requests.get(request_id)
            if request is None or request.is_resolved:
                return False
            now = utc_now()
            request.approved = approved
            if approved:
                request.approved_at = now
            else:
                request.rejected_at = now
            future = self._waiters.pop(request_id, None)

        logger.info(
            "approval event=%s request_id=%s task_id=%s",
            "approved" if approved else "rejected",
            request_id,
            request.task_id,
        )
        if future is not None:
            _complete(future, approved)
        return True


def _complete(future: asyncio.Future[bool], value: bool) -> None:
    loop = future.get_loop()
    if loop.is_closed():
        return
    try:
        running = asyncio.get_running_loop()
    except RuntimeError:
        running = None
    if running is loop:
        _set_once(future, value)
    else:
        loop.call_soon_threadsafe(_set_once, future, value)


def _set_once(future: asyncio.Future[bool], value: bool) -> None:
    # The waiter may have been cancelled by an orchestrator shutdown.
    if not future.done():
        future.set_result(value)
