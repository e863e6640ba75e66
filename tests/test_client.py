import pytest

from kl130.client import BulbClient, BulbStatus, NullSink, coerce_rgb
from kl130.color import ColorRGB
from kl130.crypto import decrypt, encrypt
from kl130.errors import (
    InvalidColorError,
    KL130Error,
    MalformedPayloadError,
    ReplyTimeoutError,
    TransmissionError,
    UnrecognizedCommandError,
)

BULB_IP = "192.0.2.10"


@pytest.fixture
def client(fake_socket_factory, sink):
    return BulbClient(BULB_IP, sink=sink, socket_factory=fake_socket_factory)


def sent_commands(factory):
    return [decrypt(data) for sock in factory.instances for data, _ in sock.sent]


def test_power_on_wire_shape(client, fake_socket_factory, sink):
    client.power_on()

    assert sent_commands(fake_socket_factory) == [
        {
            "smartlife.iot.smartbulb.lightingservice": {
                "transition_light_state": {
                    "ignore_default": 1,
                    "transition_period": 0,
                    "on_off": 1,
                }
            }
        }
    ]
    (sock,) = fake_socket_factory.instances
    assert sock.sent[0][1] == (BULB_IP, 9999)
    assert sock.recv_calls == 0
    assert sock.closed
    assert sink.calls == [("metrics:level", "on")]


def test_power_off(client, fake_socket_factory, sink):
    client.power_off()
    (cmd,) = sent_commands(fake_socket_factory)
    assert cmd["smartlife.iot.smartbulb.lightingservice"]["transition_light_state"]["on_off"] == 0
    assert sink.calls == [("metrics:level", "off")]


def test_set_exact_color(client, fake_socket_factory, sink):
    client.set_exact_color({"red": 255, "green": 128, "blue": 0})

    (cmd,) = sent_commands(fake_socket_factory)
    assert cmd == {
        "smartlife.iot.smartbulb.lightingservice": {
            "transition_light_state": {
                "ignore_default": 1,
                "transition_period": 0,
                "on_off": 1,
                "hue": 30,
                "saturation": 100,
                "brightness": 100,
                "color_temp": 0,
            }
        }
    }
    # the sink keeps the caller's RGB, not a colour derived back from HSB
    assert sink.calls == [
        ("metrics:level", "on"),
        ("metrics:color:r", 255),
        ("metrics:color:g", 128),
        ("metrics:color:b", 0),
    ]


def test_send_failure_leaves_state_untouched(client, fake_socket_factory, sink):
    fake_socket_factory.config["send_error"] = OSError("boom")
    with pytest.raises(TransmissionError):
        client.power_on()
    with pytest.raises(TransmissionError):
        client.set_exact_color((1, 2, 3))
    assert sink.calls == []
    assert all(sock.closed for sock in fake_socket_factory.instances)


@pytest.mark.parametrize("on_off, expected", [(1, "on"), (0, "off")])
def test_query_status_reports_power(client, fake_socket_factory, sink, on_off, expected):
    reply = {"system": {"get_sysinfo": {"light_state": {"on_off": on_off, "hue": 0}, "alias": "Lamp"}}}
    fake_socket_factory.config["reply"] = encrypt(reply)

    status = client.query_status()

    assert status == BulbStatus(is_on=on_off == 1, raw=reply)
    assert sent_commands(fake_socket_factory) == [{"system": {"get_sysinfo": {}}}]
    assert sink.calls == [("metrics:level", expected)]


@pytest.mark.parametrize(
    "reply",
    [
        {"system": {"get_sysinfo": {"err_code": 0}}},
        {"system": {"get_sysinfo": {"light_state": {}}}},
        {"something": "else"},
        [1, 2, 3],
    ],
)
def test_query_status_without_power_field_is_noop(client, fake_socket_factory, sink, reply):
    fake_socket_factory.config["reply"] = encrypt(reply)
    status = client.query_status()
    assert status.is_on is None
    assert status.raw == reply
    assert sink.calls == []


def test_query_status_timeout(client, fake_socket_factory, sink):
    with pytest.raises(ReplyTimeoutError):
        client.query_status()
    assert fake_socket_factory.instances[0].closed
    assert sink.calls == []


def test_query_status_malformed(client, fake_socket_factory, sink):
    fake_socket_factory.config["reply"] = b"\x01\x02\x03"
    with pytest.raises(MalformedPayloadError):
        client.query_status()
    assert sink.calls == []


def test_each_operation_uses_a_fresh_socket(client, fake_socket_factory):
    client.power_on()
    client.power_off()
    client.power_on()
    assert len(fake_socket_factory.instances) == 3
    assert len({id(s) for s in fake_socket_factory.instances}) == 3


@pytest.mark.parametrize("label", ["on", "off"])
def test_handle_dispatches(client, fake_socket_factory, label):
    client.handle(label)
    assert len(fake_socket_factory.instances) == 1


def test_handle_exact(client, sink):
    client.handle("exact", {"red": 0, "green": 0, "blue": 255})
    assert ("metrics:color:b", 255) in sink.calls


def test_handle_update_returns_status(client, fake_socket_factory):
    fake_socket_factory.config["reply"] = encrypt(
        {"system": {"get_sysinfo": {"light_state": {"on_off": 1}}}}
    )
    assert client.handle("update").is_on is True


@pytest.mark.parametrize("label", ["toggle", "", "ON", "exactColor"])
def test_unknown_command_does_no_io(client, fake_socket_factory, sink, label):
    with pytest.raises(UnrecognizedCommandError) as excinfo:
        client.handle(label)
    assert excinfo.value.command == label
    assert fake_socket_factory.instances == []
    assert sink.calls == []


def test_send_raw(client, fake_socket_factory, sink):
    payload = {"system": {"set_dev_alias": {"alias": "Desk"}}}
    assert client.send_raw(payload) is None
    fake_socket_factory.config["reply"] = encrypt({"system": {"set_dev_alias": {"err_code": 0}}})
    assert client.send_raw(payload, expect_reply=True) == {"system": {"set_dev_alias": {"err_code": 0}}}
    assert sent_commands(fake_socket_factory) == [payload, payload]
    assert sink.calls == []


def test_default_sink_is_null(fake_socket_factory):
    client = BulbClient(BULB_IP, socket_factory=fake_socket_factory)
    assert isinstance(client.sink, NullSink)
    client.power_on()


def test_custom_port(fake_socket_factory):
    client = BulbClient(BULB_IP, port=20002, socket_factory=fake_socket_factory)
    client.power_off()
    assert fake_socket_factory.instances[0].sent[0][1] == (BULB_IP, 20002)


@pytest.mark.parametrize(
    "value",
    [ColorRGB(1, 2, 3), (1, 2, 3), [1, 2, 3], {"red": 1, "green": 2, "blue": 3}, ("1", "2", "3")],
)
def test_coerce_rgb(value):
    assert coerce_rgb(value) == ColorRGB(1, 2, 3)


@pytest.mark.parametrize(
    "value",
    [None, {"red": 1, "green": 2}, (1, 2), ("a", "b", "c"), 42],
)
def test_coerce_rgb_rejects(value):
    with pytest.raises(InvalidColorError):
        coerce_rgb(value)


def test_handle_exact_without_color(client, fake_socket_factory, sink):
    with pytest.raises(KL130Error):
        client.handle("exact")
    assert fake_socket_factory.instances == []
    assert sink.calls == []
