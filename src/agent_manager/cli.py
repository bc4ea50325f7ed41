from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys

from agent_manager.config.settings import Settings, get_settings
from agent_manager.errors import InvalidInstructionError
from agent_manager.services.orchestrator import Orchestrator
from agent_manager.storage.models import PlatformConfig, PlatformType, Task


def _platform_type(value: str) -> PlatformType:
    try:
        return PlatformType(value.upper())
    except ValueError as exc:
        choices = ", ".join(item.value for item in PlatformType)
        raise argparse.ArgumentTypeError(
            f"unknown platform {value!r} (choose from {choices})"
        ) from exc


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="agent-manager",
        description="Route one instruction to platform agents and report task outcomes.",
    )
    parser.add_argument("instruction", help="Free-text instruction.")
    parser.add_argument(
        "--user-id", default=None, help="Requester id recorded with the instruction."
    )
    parser.add_argument(
        "--auto-approve",
        action="store_true",
        help="Skip the approval prompt for every task.",
    )
    parser.add_argument(
        "--disable",
        type=_platform_type,
        action="append",
        default=[],
        metavar="PLATFORM",
        help="Do not register this platform (repeatable).",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print machine-readable JSON output instead of one line per task.",
    )
    return parser.parse_args(argv)


def _platform_configs(settings: Settings, disabled: list[PlatformType]) -> list[PlatformConfig]:
    configs = {config.platform: config for config in settings.platforms}
    for platform in disabled:
        current = configs.get(platform) or PlatformConfig(platform=platform)
        configs[platform] = current.model_copy(update={"enabled": False})
    return list(configs.values())


async def _answer_approvals(orchestrator: Orchestrator, workflow: asyncio.Task[list[Task]]) -> None:
    while not workflow.done():
        for request in orchestrator.get_pending_approvals():
            try:
                answer = await asyncio.to_thread(input, f"{request.reason} [y/N] ")
            except EOFError:
                # Closed stdin counts as a refusal.
                answer = ""
            if answer.strip().lower() in {"y", "yes"}:
                orchestrator.approve_task(request.request_id)
            else:
                orchestrator.reject_task(request.request_id)
        await asyncio.sleep(0.05)


async def run_instruction(args: argparse.Namespace, settings: Settings) -> list[Task]:
    orchestrator = Orchestrator(
        settings,
        auto_approve=args.auto_approve or settings.auto_approve,
        platform_configs=_platform_configs(settings, args.disable),
    )
    await orchestrator.start()
    workflow = asyncio.create_task(orchestrator.process_instruction(args.instruction, args.user_id))
    try:
        await _answer_approvals(orchestrator, workflow)
        return await workflow
    finally:
        workflow.cancel()
        await asyncio.gather(workflow, return_exceptions=True)
        await orchestrator.shutdown()


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    try:
        tasks = asyncio.run(run_instruction(args, settings))
    except InvalidInstructionError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if args.json:
        print(json.dumps([task.model_dump(mode="json") for task in tasks], indent=2))
        return 0

    for task in tasks:
        error = task.result.error if task.result and task.result.error else ""
        columns = [task.task_id, f"{task.platform:<12}", f"{task.status:<11}", task.description]
        print("  ".join([*columns, error]).rstrip())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
