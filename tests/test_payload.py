import json

import pytest

from notify_client import (CommonOption, EmailOption, Personalisation,
                           PreviewOption, SMSOption, email_reply_to_id,
                           reference, sms_sender_id, status_callback)
from notify_client.payload import (EMAIL, PREVIEW, SMS, PayloadItem,
                                   apply_options, build_payload,
                                   payload_to_dict, serialize_payload)

BASE = [("template_id", "t-1"), ("email_address", "someone@example.com")]


def test_options_accumulate_additively():
    only_reference = build_payload(BASE, [reference("ref1")], EMAIL)
    both = build_payload(BASE, [reference("ref1"), email_reply_to_id("id1")], EMAIL)

    assert set(only_reference.items()) <= set(both.items())
    assert set(both) - set(only_reference) == {"email_reply_to_id"}
    assert both["email_reply_to_id"] == "id1"


def test_options_are_applied_in_caller_order():
    payload = apply_options(SMS, [reference("a"), sms_sender_id("s"), reference("b")])

    assert [item.field for item in payload] == ["reference", "sms_sender_id", "reference"]
    # the last write for a field wins once collapsed
    assert payload_to_dict(payload)["reference"] == "b"


def test_options_do_not_mutate_payload():
    original = (PayloadItem("template_id", "t-1"),)

    updated = reference("ref1").update_sms_payload(original)

    assert original == (PayloadItem("template_id", "t-1"),)
    assert updated == original + (PayloadItem("reference", "ref1"),)


def test_personalisation_duplicate_keys_last_value_wins():
    fields = build_payload(BASE, [Personalisation([("name", "A"), ("name", "B")])], EMAIL)

    assert fields["personalisation"] == {"name": "B"}


def test_personalisation_accepts_mapping():
    option = Personalisation({"name": "Sam", "day": "Friday"})

    assert option.as_dict() == {"name": "Sam", "day": "Friday"}
    assert option == Personalisation([("name", "Sam"), ("day", "Friday")])


def test_personalisation_with_list_and_mapping_values():
    option = Personalisation([("items", ["tea", "milk"]), ("address", {"line1": "1 Main St"})])

    assert hash(option) == hash(Personalisation([("items", ["bread"]), ("address", {})]))
    assert option == Personalisation([("items", ["tea", "milk"]), ("address", {"line1": "1 Main St"})])
    assert option != Personalisation([("items", ["bread"]), ("address", {})])
    assert len({option, option}) == 1

    fields = build_payload(BASE, [option], EMAIL)
    assert fields["personalisation"] == {"items": ["tea", "milk"], "address": {"line1": "1 Main St"}}


def test_repeated_personalisation_option_last_one_wins():
    fields = build_payload(
        BASE,
        [Personalisation([("name", "A"), ("day", "Monday")]), Personalisation([("name", "B")])],
        EMAIL,
    )

    assert fields["personalisation"] == {"name": "B"}


def test_status_callback_adds_two_fields():
    fields = build_payload(BASE, [status_callback("https://example.com/cb", "secret-token")], EMAIL)

    assert fields["status_callback_url"] == "https://example.com/cb"
    assert fields["status_callback_bearer_token"] == "secret-token"


def test_options_cannot_override_base_fields():
    sneaky = CommonOption(lambda payload: payload + (PayloadItem("template_id", "other"),))

    fields = build_payload(BASE, [sneaky], EMAIL)

    assert fields["template_id"] == "t-1"


def test_serialized_payload_round_trips_nested_fields():
    body = serialize_payload(
        BASE,
        [reference("ref1"), Personalisation([("name", "Sam"), ("amount_owing", "$205.20")])],
        EMAIL,
    )

    assert json.loads(body) == {
        "template_id": "t-1",
        "email_address": "someone@example.com",
        "reference": "ref1",
        "personalisation": {"name": "Sam", "amount_owing": "$205.20"},
    }


def test_option_roles():
    assert isinstance(reference("r"), SMSOption)
    assert isinstance(reference("r"), EmailOption)
    assert not isinstance(reference("r"), PreviewOption)

    assert isinstance(sms_sender_id("s"), SMSOption)
    assert not isinstance(sms_sender_id("s"), EmailOption)

    assert isinstance(email_reply_to_id("e"), EmailOption)
    assert not isinstance(email_reply_to_id("e"), SMSOption)

    personalisation = Personalisation([("name", "Sam")])
    assert isinstance(personalisation, SMSOption)
    assert isinstance(personalisation, EmailOption)
    assert isinstance(personalisation, PreviewOption)


@pytest.mark.parametrize("option, role", [
    (email_reply_to_id("id1"), SMS),
    (sms_sender_id("s1"), EMAIL),
    (reference("ref1"), PREVIEW),
    ("reference", SMS),
])
def test_incompatible_option_is_rejected(option, role):
    with pytest.raises(TypeError) as excinfo:
        build_payload(BASE, [option], role)

    assert role.name in str(excinfo.value)


def test_options_are_reusable():
    option = reference("shared")

    first = build_payload(BASE, [option], EMAIL)
    second = build_payload([("template_id", "t-2"), ("phone_number", "0400000000")], [option], SMS)

    assert first["reference"] == second["reference"] == "shared"
