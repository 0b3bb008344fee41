"""Test sequential source listing and service inspection."""

import asyncio

import pytest

from custom_components.bravia_tv.api_base import BraviaRemoteError
from custom_components.bravia_tv.introspection import async_get_sources, async_inspect
from custom_components.bravia_tv.models import ServiceMethod


class SequentialClient:
    """Fake client answering from a table and tracking request overlap."""

    base_url = "http://192.168.1.50/sony"

    def __init__(self, answers):
        self.answers = answers
        self.calls = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def call(self, service, method, version="1.0", params=None):
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        self.calls.append((service, method, params))
        try:
            await asyncio.sleep(0)
            answer = self.answers[(service, method, repr(params))]
            if isinstance(answer, Exception):
                raise answer
            return answer
        finally:
            self.in_flight -= 1


@pytest.mark.asyncio
async def test_sources_are_fetched_one_scheme_at_a_time():
    client = SequentialClient(
        {
            ("avContent", "getSchemeList", "None"): [[{"scheme": "extInput"}, {"scheme": "tv"}]],
            ("avContent", "getSourceList", "{'scheme': 'extInput'}"): [[{"source": "extInput:hdmi"}]],
            ("avContent", "getSourceList", "{'scheme': 'tv'}"): [[{"source": "tv:dvbt"}]],
        }
    )

    sources = await async_get_sources(client)

    assert sources == [[{"source": "extInput:hdmi"}], [{"source": "tv:dvbt"}]]
    assert client.max_in_flight == 1
    assert [c[1] for c in client.calls] == ["getSchemeList", "getSourceList", "getSourceList"]


@pytest.mark.asyncio
async def test_inspect_replaces_failing_service_with_placeholder():
    client = SequentialClient(
        {
            ("guide", "getServiceProtocols", "None"): [["system", ["1.0"]], ["broken", ["1.0"]]],
            ("system", "getVersions", "None"): [["1.0", "1.1"]],
            ("system", "getMethodTypes", "['1.0']"): [
                ["getPowerStatus", [], ['{"status":"string"}'], "1.0"],
            ],
            ("system", "getMethodTypes", "['1.1']"): [
                ["getInterfaceInformation", [], ['{"productName":"string"}'], "1.1"],
            ],
            ("broken", "getVersions", "None"): BraviaRemoteError([12, "No Such Method"]),
        }
    )

    data = await async_inspect(client)

    assert data["broken"] == "Could not fetch methods"
    assert data["system"] == [
        ServiceMethod(name="getPowerStatus", version="1.0", arguments=[], return_type=['{"status":"string"}']),
        ServiceMethod(
            name="getInterfaceInformation",
            version="1.1",
            arguments=[],
            return_type=['{"productName":"string"}'],
        ),
    ]
    assert client.max_in_flight == 1


@pytest.mark.asyncio
async def test_inspect_propagates_protocol_list_failure():
    client = SequentialClient({("guide", "getServiceProtocols", "None"): BraviaRemoteError([3, "Illegal Argument"])})

    with pytest.raises(BraviaRemoteError):
        await async_inspect(client)


def test_service_method_serializes_return_type_alias():
    method = ServiceMethod(name="getPowerStatus", version="1.0", arguments=[], return_type=["x"])

    assert method.model_dump(by_alias=True)["returnType"] == ["x"]
