from swarmpath.core.event_bus import EventBus


def test_publish_without_data_passes_an_empty_dict():
    bus = EventBus()
    received = []
    bus.subscribe("PATH_SKIPPED", received.append)

    bus.publish("PATH_SKIPPED")
    bus.publish("PATH_SKIPPED", {"result": None})

    assert received == [{}, {"result": None}]


def test_unsubscribed_listener_stops_hearing_events():
    bus = EventBus()
    received = []
    bus.subscribe("AGENT_SPAWNED", received.append)
    bus.unsubscribe("AGENT_SPAWNED", received.append)
    bus.unsubscribe("AGENT_SPAWNED", received.append)

    bus.publish("AGENT_SPAWNED", {"agent": "a"})
    assert received == []
