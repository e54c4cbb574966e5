"""Unit tests for chain_service module."""

import pytest

from momentum.core.errors import InvalidArgumentError, InvalidStateError
from momentum.domain.chain import ChainTrigger
from momentum.domain.task import TaskStatus
from momentum.services import chain_service


@pytest.fixture
def morning_chain(task_factory, fixed_clock):
    tasks = [
        task_factory(title="coffee", chain_order=0),
        task_factory(title="meds", chain_order=1),
        task_factory(title="inbox", chain_order=2),
    ]
    chain = chain_service.create_chain("Morning Launch", [t.id for t in tasks], clock=fixed_clock)
    return chain, tasks


@pytest.mark.unit
def test_create_chain_defaults(morning_chain):
    """Test a new chain starts active, manual and never completed."""
    chain, tasks = morning_chain

    assert chain.name == "Morning Launch"
    assert chain.is_active
    assert chain.trigger_type == ChainTrigger.MANUAL
    assert chain.task_ids == [t.id for t in tasks]


@pytest.mark.unit
def test_create_chain_validation(fixed_clock):
    """Test chain triggers must carry the field they depend on."""
    with pytest.raises(InvalidArgumentError):
        chain_service.create_chain("  ", [], clock=fixed_clock)
    with pytest.raises(InvalidArgumentError):
        chain_service.create_chain("Evening", [], trigger_type=ChainTrigger.TIME, clock=fixed_clock)
    with pytest.raises(InvalidArgumentError):
        chain_service.create_chain("After", [], trigger_type=ChainTrigger.AFTER_TASK, clock=fixed_clock)


@pytest.mark.unit
def test_next_task_follows_chain_order(morning_chain, task_factory):
    """Test the next task is the first pending one by chain order."""
    chain, (coffee, meds, inbox) = morning_chain
    coffee = coffee.model_copy(update={"status": TaskStatus.COMPLETED})
    outsider = task_factory(title="outsider", chain_order=0)

    assert chain_service.get_next_chain_task(chain, [inbox, outsider, meds, coffee]) == meds


@pytest.mark.unit
def test_progress_and_completion(morning_chain):
    """Test progress counts completed members and completion needs all of them."""
    chain, tasks = morning_chain
    done = [t.model_copy(update={"status": TaskStatus.COMPLETED}) for t in tasks]

    progress = chain_service.get_chain_progress(chain, [done[0], *tasks[1:]])

    assert (progress.completed, progress.total, progress.percentage) == (1, 3, 33)
    assert not chain_service.is_chain_complete(chain, tasks)
    assert chain_service.is_chain_complete(chain, done)
    assert chain_service.get_next_chain_task(chain, done) is None


@pytest.mark.unit
def test_empty_chain_never_completes(fixed_clock):
    """Test a chain with no tasks is never complete."""
    chain = chain_service.create_chain("Empty", [], clock=fixed_clock)

    assert not chain_service.is_chain_complete(chain, [])
    assert chain_service.get_chain_progress(chain, []).percentage == 0


@pytest.mark.unit
def test_record_chain_completion_averages(morning_chain):
    """Test completion keeps a running average of minutes taken."""
    chain, _ = morning_chain

    chain = chain_service.record_chain_completion(chain, 30)
    chain = chain_service.record_chain_completion(chain, 20)

    assert chain.times_completed == 2
    assert chain.average_completion_minutes == 25


@pytest.mark.unit
def test_record_completion_on_inactive_chain(morning_chain):
    """Test an inactive chain cannot record a completion."""
    chain, _ = morning_chain
    inactive = chain.model_copy(update={"is_active": False})

    with pytest.raises(InvalidStateError):
        chain_service.record_chain_completion(inactive, 10)
