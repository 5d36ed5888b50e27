# per-tick reduction of client votes into meters
from typing import Iterable, List, Sequence, Tuple
from .models import Client, CounterVote, CountMeter, PollMeter, PollVote


def meter_counter(counter_states: Iterable[Tuple[CounterVote, int]]) -> Tuple[CountMeter, int]:
    """
    Count clients per counter vote and net their action clicks:
    clicks of incrementing clients minus clicks of decrementing ones.
    Clicks of pending clients count for neither side.
    """
    meter = CountMeter()
    net_actions = 0
    for vote, clicks in counter_states:
        if vote == CounterVote.INCREMENT:
            meter.increment += 1
            net_actions += clicks
        elif vote == CounterVote.DECREMENT:
            meter.decrement += 1
            net_actions -= clicks
        else:
            meter.pending += 1
    return meter, net_actions


def meter_poll(poll_states: Iterable[PollVote]) -> PollMeter:
    meter = PollMeter()
    for vote in poll_states:
        if vote == PollVote.BASE:
            meter.base += 1
        elif vote == PollVote.EXPONENT:
            meter.exponent += 1
        else:
            meter.pending += 1
    return meter


def aggregate(clients: Sequence[Client]) -> Tuple[CountMeter, PollMeter, int]:
    counter_states: List[Tuple[CounterVote, int]] = [
        (c.counter_vote, c.action_clicks) for c in clients
    ]
    meter, net_actions = meter_counter(counter_states)
    poll_meter = meter_poll(c.poll_vote for c in clients)
    return meter, poll_meter, net_actions
