"""Momentum chains: ordered runs of tasks done back to back."""

import logging
from collections.abc import Iterable

from momentum.core.clock import Clock, system_clock
from momentum.core.errors import InvalidArgumentError, InvalidStateError
from momentum.domain.chain import ChainTrigger, MomentumChain
from momentum.domain.task import Task, TaskStatus
from momentum.models.service_models import ChainProgress
from momentum.services.task_service import new_id


logger = logging.getLogger(__name__)


def create_chain(
    name: str,
    task_ids: list[str],
    *,
    description: str | None = None,
    trigger_type: ChainTrigger = ChainTrigger.MANUAL,
    trigger_time: str | None = None,
    trigger_location: str | None = None,
    trigger_task_id: str | None = None,
    clock: Clock = system_clock,
) -> MomentumChain:
    """Create an active chain.

    Raises:
        InvalidArgumentError: If the name is blank or a trigger lacks its target
    """
    if not name.strip():
        msg = "Chain name must not be empty"
        raise InvalidArgumentError(msg)
    if trigger_type == ChainTrigger.TIME and not trigger_time:
        msg = "Time-triggered chains need a trigger_time"
        raise InvalidArgumentError(msg)
    if trigger_type == ChainTrigger.AFTER_TASK and not trigger_task_id:
        msg = "After-task chains need a trigger_task_id"
        raise InvalidArgumentError(msg)

    chain = MomentumChain(
        id=new_id(),
        name=name.strip(),
        description=description,
        task_ids=list(task_ids),
        created_at=clock.now(),
        trigger_type=trigger_type,
        trigger_time=trigger_time,
        trigger_location=trigger_location,
        trigger_task_id=trigger_task_id,
    )
    logger.info(f"Created chain {chain.id} '{chain.name}' with {len(task_ids)} tasks")
    return chain


def _chain_tasks(chain: MomentumChain, tasks: Iterable[Task]) -> list[Task]:
    members = set(chain.task_ids)
    return [t for t in tasks if t.id in members]


def get_next_chain_task(chain: MomentumChain, tasks: Iterable[Task]) -> Task | None:
    """First pending member in chain order."""
    ordered = sorted(_chain_tasks(chain, tasks), key=lambda t: t.chain_order or 0)
    return next((t for t in ordered if t.status == TaskStatus.PENDING), None)


def get_chain_progress(chain: MomentumChain, tasks: Iterable[Task]) -> ChainProgress:
    members = _chain_tasks(chain, tasks)
    completed = sum(1 for t in members if t.status == TaskStatus.COMPLETED)
    total = len(members)
    return ChainProgress(
        completed=completed,
        total=total,
        percentage=round(completed / total * 100) if total > 0 else 0,
    )


def is_chain_complete(chain: MomentumChain, tasks: Iterable[Task]) -> bool:
    """True once every member task present is completed; an empty chain never completes."""
    progress = get_chain_progress(chain, tasks)
    return progress.total > 0 and progress.completed == progress.total


def record_chain_completion(chain: MomentumChain, minutes_taken: float) -> MomentumChain:
    """Count one full run and fold its duration into the running average.

    Raises:
        InvalidStateError: If the chain is inactive
        InvalidArgumentError: If minutes_taken is negative
    """
    if not chain.is_active:
        msg = f"Cannot record completion: chain {chain.id} is inactive"
        raise InvalidStateError(msg)
    if minutes_taken < 0:
        msg = f"Invalid minutes_taken: {minutes_taken} must not be negative"
        raise InvalidArgumentError(msg)

    runs = chain.times_completed + 1
    average = (chain.average_completion_minutes * chain.times_completed + minutes_taken) / runs
    return chain.model_copy(update={"times_completed": runs, "average_completion_minutes": average})
