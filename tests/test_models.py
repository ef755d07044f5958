from dreamland.models import (
    Echart,
    EchartCategory,
    EchartLink,
    EchartNode,
    UniverseInfo,
    UniverseStatus,
)


def _sample_chart_json():
    return {
        "nodes": [
            {"id": "QmA", "name": "seer@blackhole", "category": 0, "value": {"http": 4043, "p2p": 4044}},
            {"id": "QmB", "name": "client@blackhole", "category": 1, "value": {"p2p": 4050}},
        ],
        "links": [{"source": "QmA", "target": "QmB"}],
        "categories": [{"name": "seer"}, {"name": "client"}],
    }


def test_echart_from_json_reads_fields():
    chart = Echart.from_json(_sample_chart_json())
    assert chart.nodes[0] == EchartNode(
        id="QmA", name="seer@blackhole", category=0, value={"http": 4043, "p2p": 4044}
    )
    assert chart.links == [EchartLink(source="QmA", target="QmB")]
    assert chart.categories == [EchartCategory("seer"), EchartCategory("client")]


def test_echart_round_trip():
    data = _sample_chart_json()
    assert Echart.from_json(data).to_json() == data


def test_echart_handles_null_lists():
    chart = Echart.from_json({"nodes": None, "links": None, "categories": None})
    assert chart.to_json() == {"nodes": [], "links": [], "categories": []}


def test_echart_node_null_value_becomes_empty():
    chart = Echart.from_json({"nodes": [{"id": "QmA", "name": "n", "category": 2, "value": None}]})
    assert chart.nodes[0].value == {}
    assert chart.nodes[0].category == 2


def test_universe_info_from_json():
    assert UniverseInfo.from_json({"id": "abc123"}).id == "abc123"


def test_universe_status_uses_dashed_node_count():
    status = UniverseStatus.from_json({"node-count": 3, "Nodes": {"QmA": ["seer"], "QmB": ["tns"]}})
    assert status.node_count == 3
    assert status.nodes == {"QmA": ["seer"], "QmB": ["tns"]}


def test_universe_status_accepts_lowercase_nodes_key():
    status = UniverseStatus.from_json({"node-count": 1, "nodes": {"QmA": ["auth"]}})
    assert status.nodes == {"QmA": ["auth"]}


def test_universe_status_defaults_when_missing():
    status = UniverseStatus.from_json({})
    assert status.node_count == 0
    assert status.nodes == {}