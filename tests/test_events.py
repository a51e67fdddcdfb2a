from web_selectors.events import EventBus, PickingChanged, SelectorChanged


def test_listeners_fire_in_registration_order():
    bus = EventBus()
    seen = []
    bus.subscribe(SelectorChanged, lambda e: seen.append(("first", e.selector)))
    bus.subscribe(SelectorChanged, lambda e: seen.append(("second", e.selector)))
    bus.emit(SelectorChanged(selector="li"))
    assert seen == [("first", "li"), ("second", "li")]


def test_events_only_reach_listeners_of_their_type():
    bus = EventBus()
    seen = []
    bus.subscribe(PickingChanged, seen.append)
    bus.emit(SelectorChanged(selector="li"))
    assert seen == []
    bus.emit(PickingChanged(picking=True))
    assert seen == [PickingChanged(picking=True)]


def test_same_callback_registered_twice_fires_twice():
    bus = EventBus()
    seen = []
    bus.subscribe(SelectorChanged, seen.append)
    bus.subscribe(SelectorChanged, seen.append)
    bus.emit(SelectorChanged(selector="a"))
    assert len(seen) == 2


def test_unsubscribe_detaches_only_that_subscription():
    bus = EventBus()
    seen = []
    first = bus.subscribe(SelectorChanged, lambda e: seen.append("first"))
    bus.subscribe(SelectorChanged, lambda e: seen.append("second"))
    first.unsubscribe()
    first.unsubscribe()
    bus.emit(SelectorChanged(selector="a"))
    assert seen == ["second"]
    assert not first.active


def test_unsubscribing_during_dispatch_skips_later_listener():
    bus = EventBus()
    seen = []
    holder = {}

    def first(event):
        seen.append("first")
        holder["second"].unsubscribe()

    bus.subscribe(SelectorChanged, first)
    holder["second"] = bus.subscribe(SelectorChanged, lambda e: seen.append("second"))
    bus.emit(SelectorChanged(selector="a"))
    assert seen == ["first"]
