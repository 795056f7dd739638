"""Unit tests for Nucleo signing and command dispatch."""

import hashlib
import hmac
import json
from datetime import datetime, timezone

import httpx
import pytest

from custom_components.neato_cloud.core.config import NeatoCloudConfig
from custom_components.neato_cloud.core.exceptions import RequestIdMismatchError
from custom_components.neato_cloud.core.models import (
    CommandEnvelope,
    Params,
    Robot,
    ScheduleEvent,
)
from custom_components.neato_cloud.core.protocol import (
    NucleoProtocol,
    NucleoSigner,
    format_timestamp,
)

GOLDEN_TIMESTAMP = "Mon, 02 Jan 2006 15:04:05 MST"
GOLDEN_SIGNING_STRING = (
    "abc123\n"
    "Mon, 02 Jan 2006 15:04:05 MST\n"
    '{"reqId":"00000000000000000000000000000000","cmd":"findMe"}'
)
GOLDEN_SIGNATURE = "da228b1065f2dc37b62fa0318ed2876f6a08c143c7a543d4da06c3228989cee9"

FIXED_NOW = datetime(2006, 1, 2, 15, 4, 5, tzinfo=timezone.utc)


@pytest.fixture
def robot():
    return Robot(serial="ABC123", name="Kitchen", secret_key="deadbeef")


@pytest.fixture
def envelope():
    return CommandEnvelope(req_id="00" * 16, cmd="findMe")


def make_protocol(handler):
    config = NeatoCloudConfig()
    client = httpx.Client(
        base_url=config.nucleo_url, transport=httpx.MockTransport(handler)
    )
    signer = NucleoSigner(config, clock=lambda: FIXED_NOW)
    return NucleoProtocol(config, client=client, signer=signer)


def echo_handler(requests):
    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        body = json.loads(request.content)
        return httpx.Response(
            200,
            json={
                "version": 1,
                "reqId": body["reqId"],
                "result": "ok",
                "state": 1,
                "details": {"isCharging": True, "isDocked": True, "charge": 87},
            },
        )

    return handler


def test_signing_string_golden(robot, envelope):
    """Test the signing string of a known command."""
    assert (
        NucleoSigner.build_signing_string(robot, envelope, GOLDEN_TIMESTAMP)
        == GOLDEN_SIGNING_STRING
    )


def test_signature_golden(robot, envelope):
    """Test the signature of a known command."""
    signature = NucleoSigner().sign(robot, envelope, GOLDEN_TIMESTAMP)
    assert signature.hex() == GOLDEN_SIGNATURE


def test_signature_matches_reference_hmac(robot):
    """Test the signature equals HMAC-SHA256 of the signing string."""
    envelope = CommandEnvelope(
        req_id="ab" * 16, cmd="startCleaning", params=Params(category=2, mode=1)
    )
    signing_string = NucleoSigner.build_signing_string(robot, envelope, "ts")

    expected = hmac.new(b"deadbeef", signing_string.encode(), hashlib.sha256).digest()
    assert NucleoSigner().sign(robot, envelope, "ts") == expected


def test_signing_string_is_deterministic(robot, envelope):
    """Test identical inputs give identical strings and any change alters it."""
    base = NucleoSigner.build_signing_string(robot, envelope, GOLDEN_TIMESTAMP)

    assert base == NucleoSigner.build_signing_string(robot, envelope, GOLDEN_TIMESTAMP)

    other_robot = Robot(serial="XYZ789", secret_key="deadbeef")
    other_time = "Tue, 03 Jan 2006 15:04:05 MST"
    other_id = CommandEnvelope(req_id="11" * 16, cmd="findMe")
    other_cmd = CommandEnvelope(req_id="00" * 16, cmd="getRobotState")
    with_params = CommandEnvelope(req_id="00" * 16, cmd="findMe", params=Params(mode=1))

    variants = {
        NucleoSigner.build_signing_string(other_robot, envelope, GOLDEN_TIMESTAMP),
        NucleoSigner.build_signing_string(robot, envelope, other_time),
        NucleoSigner.build_signing_string(robot, other_id, GOLDEN_TIMESTAMP),
        NucleoSigner.build_signing_string(robot, other_cmd, GOLDEN_TIMESTAMP),
        NucleoSigner.build_signing_string(robot, with_params, GOLDEN_TIMESTAMP),
    }
    assert base not in variants
    assert len(variants) == 5


def test_signing_string_lowercases_serial(envelope):
    """Test serials that differ only in case sign the same string."""
    upper = Robot(serial="ABC123", secret_key="k")
    lower = Robot(serial="abc123", secret_key="k")

    assert NucleoSigner.build_signing_string(
        upper, envelope, "ts"
    ) == NucleoSigner.build_signing_string(lower, envelope, "ts")


def test_envelope_serialization_order():
    """Test params are serialized after reqId and cmd, without unset fields."""
    envelope = CommandEnvelope(
        req_id="00" * 16,
        cmd="setSchedule",
        params=Params(
            robot_sounds=True,
            events=[ScheduleEvent(day=1, start_time="08:00", mode=1)],
        ),
    )

    assert envelope.serialize() == (
        b'{"reqId":"00000000000000000000000000000000","cmd":"setSchedule",'
        b'"params":{"robotSounds":true,"events":[{"mode":1,"day":1,"startTime":"08:00"}]}}'
    )


def test_format_timestamp():
    """Test timestamps use the RFC 1123 layout in GMT."""
    assert format_timestamp(FIXED_NOW) == "Mon, 02 Jan 2006 15:04:05 GMT"


def test_attach_auth_headers(robot, envelope):
    """Test the Date header and the signature share one timestamp."""
    headers: dict[str, str] = {}
    signer = NucleoSigner(clock=lambda: FIXED_NOW)

    signer.attach_auth_headers(headers, robot, envelope)

    assert headers["Accept"] == "application/vnd.neato.nucleo.v1"
    assert headers["Date"] == "Mon, 02 Jan 2006 15:04:05 GMT"
    expected = signer.sign(robot, envelope, headers["Date"]).hex()
    assert headers["Authorization"] == f"NEATOAPP {expected}"


def test_new_command():
    """Test envelopes get a fresh 32 character request id."""
    protocol = make_protocol(echo_handler([]))

    first = protocol.new_command("findMe")
    second = protocol.new_command("findMe")

    assert len(first.req_id) == 32
    assert first.req_id != second.req_id
    assert first.cmd == "findMe"
    assert first.params is None


def test_dispatch(robot):
    """Test a command is signed, posted and its response decoded."""
    requests: list[httpx.Request] = []
    protocol = make_protocol(echo_handler(requests))
    envelope = protocol.new_command("getRobotState")

    response = protocol.dispatch(robot, envelope)

    assert response.req_id == envelope.req_id
    assert response.state == 1
    assert response.details is not None
    assert response.details.charge == 87
    assert response.details.is_charging is True

    (request,) = requests
    assert request.method == "POST"
    assert request.url.host == "nucleo.neatocloud.com"
    assert request.url.port == 4443
    assert request.url.path == "/vendors/neato/robots/ABC123/messages"
    assert request.content == envelope.serialize()
    assert request.headers["Date"] == "Mon, 02 Jan 2006 15:04:05 GMT"

    signature = protocol.signer.sign(robot, envelope, request.headers["Date"]).hex()
    assert request.headers["Authorization"] == f"NEATOAPP {signature}"


def test_dispatch_rejects_mismatched_request_id(robot):
    """Test a response for another request is never returned."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"version": 1, "reqId": "ff" * 16, "result": "ok"})

    protocol = make_protocol(handler)
    envelope = protocol.new_command("findMe")

    with pytest.raises(RequestIdMismatchError) as excinfo:
        protocol.dispatch(robot, envelope)

    assert excinfo.value.expected == envelope.req_id
    assert excinfo.value.received == "ff" * 16


def test_dispatch_rejects_missing_request_id(robot):
    """Test a response without reqId is an integrity failure."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"version": 1, "result": "ok"})

    protocol = make_protocol(handler)

    with pytest.raises(RequestIdMismatchError):
        protocol.find_me(robot)


def test_dispatch_propagates_http_errors(robot):
    """Test transport level failures reach the caller unchanged."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(403, json={"message": "Forbidden"})

    protocol = make_protocol(handler)

    with pytest.raises(httpx.HTTPStatusError):
        protocol.find_me(robot)


def test_dispatch_propagates_decode_errors(robot):
    """Test malformed bodies reach the caller unchanged."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"not json")

    protocol = make_protocol(handler)

    with pytest.raises(json.JSONDecodeError):
        protocol.find_me(robot)


@pytest.mark.parametrize(
    ("method", "cmd"),
    [
        ("find_me", "findMe"),
        ("get_robot_state", "getRobotState"),
        ("get_general_info", "getGeneralInfo"),
        ("get_robot_info", "getRobotInfo"),
        ("get_local_stats", "getLocalStats"),
        ("get_robot_manual_cleaning_info", "getRobotManualCleaningInfo"),
        ("start_cleaning", "startCleaning"),
        ("stop_cleaning", "stopCleaning"),
        ("pause_cleaning", "pauseCleaning"),
        ("resume_cleaning", "resumeCleaning"),
        ("send_to_base", "sendToBase"),
        ("get_map_boundaries", "getMapBoundaries"),
        ("set_map_boundaries", "setMapBoundaries"),
        ("start_persistent_map_exploration", "startPersistentMapExploration"),
        ("get_preferences", "getPreferences"),
        ("set_preferences", "setPreferences"),
        ("get_schedule", "getSchedule"),
        ("set_schedule", "setSchedule"),
        ("enable_schedule", "enableSchedule"),
        ("disable_schedule", "disableSchedule"),
    ],
)
def test_command_names(robot, method, cmd):
    """Test each command wrapper sends the matching command name."""
    requests: list[httpx.Request] = []
    protocol = make_protocol(echo_handler(requests))

    getattr(protocol, method)(robot)

    assert json.loads(requests[0].content)["cmd"] == cmd


def test_start_cleaning_sends_params(robot):
    """Test command parameters are sent in the body."""
    requests: list[httpx.Request] = []
    protocol = make_protocol(echo_handler(requests))

    protocol.start_cleaning(robot, Params(category=2, mode=1, modifier=1))

    body = json.loads(requests[0].content)
    assert body["params"] == {"category": 2, "mode": 1, "modifier": 1}
