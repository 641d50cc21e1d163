from blockmatch.events.bus import EventBus, EVENT_MATCH_FOUND, EVENT_TICK


def test_subscribers_receive_payload_in_subscription_order():
    bus = EventBus()
    calls = []
    bus.subscribe(EVENT_MATCH_FOUND, lambda sender, **k: calls.append(('first', k['size'])))
    bus.subscribe(EVENT_MATCH_FOUND, lambda sender, **k: calls.append(('second', k['size'])))
    bus.emit(EVENT_MATCH_FOUND, positions=[(0, 0), (0, 1), (0, 2)], size=3, depth=1)
    assert calls == [('first', 3), ('second', 3)]


def test_sender_is_the_bus():
    bus = EventBus()
    senders = []
    bus.subscribe(EVENT_TICK, lambda sender, **k: senders.append(sender))
    bus.emit(EVENT_TICK, dt=0.1)
    assert senders == [bus]


def test_emit_without_subscribers_is_a_no_op():
    EventBus().emit('nobody_listens', value=1)


def test_bound_methods_stay_connected_without_external_reference():
    bus = EventBus()
    hits = []

    class Listener:
        def on_tick(self, sender, **kwargs):
            hits.append(kwargs['dt'])

    bus.subscribe(EVENT_TICK, Listener().on_tick)
    bus.emit(EVENT_TICK, dt=0.25)
    assert hits == [0.25]
