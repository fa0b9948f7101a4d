"""
Tests for credit and people tools.
"""
from conftest import tool_error, tool_result


def test_list_credits(call_tool, fake_api):
    result = tool_result(call_tool("list_credits", {"episode_id": "ep-001"}))

    assert result == {"credits": [{"id": "cr-001", "role": "HostCredit", "person_id": "p-001"}], "count": 1}
    params = fake_api.last("GET", "/credits").params
    assert params["filter[creditable_id]"] == "ep-001"
    assert params["filter[creditable_type]"] == "Episode"


def test_add_credit_maps_role_shorthand(call_tool, fake_api):
    result = tool_result(
        call_tool("add_credit", {"episode_id": "ep-001", "person_id": "p-002", "role": "cohost"})
    )

    assert result["data"]["id"] == "cr-new"
    sent = fake_api.last("POST", "/credits").body["data"]
    assert sent["attributes"] == {"type": "CoHostCredit"}
    assert sent["relationships"] == {
        "creditable": {"data": {"type": "episodes", "id": "ep-001"}},
        "person": {"data": {"type": "people", "id": "p-002"}},
    }


def test_add_credit_passes_full_type_through(call_tool, fake_api):
    call_tool("add_credit", {"episode_id": "ep-001", "person_id": "p-002", "role": "GuestCredit"})

    assert fake_api.last("POST", "/credits").body["data"]["attributes"]["type"] == "GuestCredit"


def test_add_credit_requires_person(call_tool, fake_api):
    body = call_tool("add_credit", {"episode_id": "ep-001", "role": "host"})

    assert tool_error(body)
    assert "person_id" in body["result"]["content"][0]["text"]
    assert fake_api.requests == []


def test_update_credit(call_tool, fake_api):
    call_tool("update_credit", {"credit_id": "cr-001", "role": "producer"})

    sent = fake_api.last("PATCH", "/credits/cr-001").body["data"]
    assert sent == {"type": "credits", "id": "cr-001", "attributes": {"type": "ProducerCredit"}}


def test_remove_credit(call_tool, fake_api):
    assert tool_result(call_tool("remove_credit", {"credit_id": "cr-001"})) == {"removed": "cr-001"}
    assert fake_api.last("DELETE").path == "/credits/cr-001"


def test_search_people(call_tool, fake_api):
    result = tool_result(call_tool("search_people", {"q": "wes"}))

    assert result["count"] == 1
    assert result["people"][0] == {
        "id": "p-002",
        "full_name": "Wes Payne",
        "first_name": "Wes",
        "last_name": "Payne",
    }
    assert fake_api.last("GET", "/people").params["filter[name]"] == "wes"


def test_search_people_no_match(call_tool):
    assert tool_result(call_tool("search_people", {"q": "nobody"})) == {"people": [], "count": 0}


def test_search_people_blank_query_rejected(call_tool, fake_api):
    body = call_tool("search_people", {"q": "   "})

    assert tool_error(body)
    assert fake_api.requests == []


def test_get_person_not_found(call_tool):
    body = call_tool("get_person", {"person_id": "p-404"})

    assert tool_error(body)
    assert "Person not found" in body["result"]["content"][0]["text"]


def test_create_person(call_tool, fake_api):
    result = tool_result(call_tool("create_person", {"first_name": "Brent", "last_name": "Gervais"}))

    assert result["data"]["id"] == "p-new"
    assert result["data"]["attributes"]["full_name"] == "Brent Gervais"
    assert fake_api.last("POST", "/people").body == {
        "data": {"type": "people", "attributes": {"first_name": "Brent", "last_name": "Gervais"}}
    }


def test_remove_credit_rejects_dot_segment(call_tool, fake_api):
    body = call_tool("remove_credit", {"credit_id": ".."})

    assert tool_error(body)
    assert fake_api.requests == []
