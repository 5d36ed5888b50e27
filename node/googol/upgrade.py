# upgrade levels + the base/exponent poll
import logging
from .config import POLL_FAST_STEP, POLL_SLOW_STEP
from .counter import digit_count
from .models import CounterState, Poll, PollMeter, UpgradeKind

logger = logging.getLogger(__name__)


def upgrade_level(value: int) -> int:
    """
    One level per ten decimal digits of the count.
    """
    return digit_count(value) // 10


def is_at_upgrade(state: CounterState) -> bool:
    """
    Returns True if the count crossed a new level, raising the stored level.
    """
    level = upgrade_level(state.count.value)
    if level > state.upgrade.level:
        state.upgrade.level = level
        return True
    return False


def tick_poll(poll: Poll) -> bool:
    """
    Advance the poll clock by one tick. Returns True if time is already up.

    A tie stalls the clock. When most clients have voted the clock runs
    faster. Never goes below zero.
    """
    if poll.time_remaining == 0:
        return True
    meter = poll.meter
    if meter.base == meter.exponent:
        return False
    voted = meter.base + meter.exponent
    step = POLL_FAST_STEP if meter.pending < voted else POLL_SLOW_STEP
    poll.time_remaining = max(poll.time_remaining - step, 0)
    return False


def resolve_poll(state: CounterState, poll: Poll) -> None:
    """
    Apply the winner of a finished poll. Ties go to the exponent.
    """
    upgrade = state.upgrade
    if poll.meter.base > poll.meter.exponent:
        upgrade.base += poll.amplification
        upgrade.last_upgrade = UpgradeKind.BASE
    else:
        upgrade.exponent += poll.amplification
        upgrade.last_upgrade = UpgradeKind.EXPONENT
    state.poll = None
    logger.info(
        "Poll resolved: %s +%d (base=%d, exponent=%d)",
        upgrade.last_upgrade.value,
        poll.amplification,
        upgrade.base,
        upgrade.exponent,
    )


def apply_poll_votes(state: CounterState, poll_meter: PollMeter) -> None:
    if is_at_upgrade(state):
        if state.poll is not None:
            state.poll.amplification += 1
            logger.info(
                "Level %d reached during poll, amplification now %d",
                state.upgrade.level,
                state.poll.amplification,
            )
        else:
            state.poll = Poll()
            logger.info("Level %d reached, poll opened", state.upgrade.level)

    poll = state.poll
    if poll is None:
        return

    poll.meter = poll_meter
    if tick_poll(poll):
        resolve_poll(state, poll)
