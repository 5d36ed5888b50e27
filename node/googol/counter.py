# counter arithmetic: growth, decay and the googol ceiling
import math
from .config import ONE_GOOGOL
from .models import CounterState, CountMeter, Upgrade


def digit_count(value: int) -> int:
    """
    Number of decimal digits of |value|. Zero has one digit.
    """
    return len(str(abs(value)))


def compute_step(value: int) -> int:
    """
    Square root of the digit count, floored.
    """
    return int(math.sqrt(digit_count(value)))


def apply_votes(state: CounterState, meter: CountMeter, net_actions: int, upgrade: Upgrade) -> None:
    """
    Advance the count by one tick worth of votes.

    The increment is applied and clamped to the ceiling first; the decrement
    only applies when the count is not pinned exactly at one googol.
    Python ints are arbitrary precision and 0 ** 0 == 1.
    """
    count = state.count
    exponent = compute_step(count.value) + upgrade.exponent

    modifier = ((upgrade.level + 1) * upgrade.base) ** exponent
    actions = net_actions * modifier
    positive = max(actions, 0)
    negative = max(-actions, 0)

    step_increment = (meter.increment * upgrade.base) ** exponent + positive
    count.value += step_increment
    if count.value > ONE_GOOGOL:
        count.value = ONE_GOOGOL

    step_decrement = (meter.decrement * upgrade.base) ** exponent + negative
    if count.value != ONE_GOOGOL:
        count.value -= step_decrement
        if count.value < 0:
            count.value = 0

    count.meter = meter
