import pytest

from app.domain.errors import MalformedCodePayload
from app.schemas.code_payloads import ActivationPayload, ResetPayload, decode_payload


def test_activation_payload_encodes_kind_and_version():
    payload = ActivationPayload(
        zone_id="uaa",
        user_id="u1",
        client_id="c1",
        redirect_uri="https://app.example.com/cb",
    )
    decoded = decode_payload(ActivationPayload, payload.encode())
    assert decoded == payload
    assert decoded.kind == "activation"
    assert decoded.v == 1


def test_reset_code_cannot_be_redeemed_as_activation():
    data = ResetPayload(zone_id="uaa", user_id="u1").encode()
    with pytest.raises(MalformedCodePayload):
        decode_payload(ActivationPayload, data)


@pytest.mark.parametrize(
    "data",
    [
        b"not json",
        b"u1",
        b"{}",
        b'{"kind": "reset", "v": 2, "zone_id": "uaa", "user_id": "u1"}',
        b'{"kind": "reset", "v": 1, "zone_id": "uaa", "user_id": "u1", "x": 1}',
        b'{"kind": "reset", "v": 1, "zone_id": "uaa"}',
    ],
)
def test_malformed_payloads_are_rejected(data):
    with pytest.raises(MalformedCodePayload):
        decode_payload(ResetPayload, data)
