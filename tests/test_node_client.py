import json
from urllib.parse import parse_qs, urlparse

import pytest
import responses

from wallet713.args import TxWrapper
from wallet713.errors import ErrorKind, WalletError
from wallet713.node_client import HTTPNodeClient, NodeVersionInfo

NODE = "http://localhost:3413"


@pytest.fixture
def mocked():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


def test_version_info_dict_round_trip():
    info = NodeVersionInfo("2.0.0", 2, True)
    assert NodeVersionInfo.from_dict(info.to_dict()) == info


def test_version_info_rejects_bad_data():
    with pytest.raises(ValueError):
        NodeVersionInfo.from_dict({"node_version": "2.0.0", "block_header_version": "x"})


def test_version_info_is_verified_and_cached(mocked):
    mocked.add(
        responses.GET,
        f"{NODE}/v1/version",
        json={"node_version": "2.0.0", "block_header_version": 2},
    )
    client = HTTPNodeClient(NODE)
    first = client.get_version_info()
    second = client.get_version_info()
    assert first == NodeVersionInfo("2.0.0", 2, True)
    assert second == first
    assert len(mocked.calls) == 1


def test_version_info_404_means_old_node(mocked):
    mocked.add(responses.GET, f"{NODE}/v1/version", status=404)
    info = HTTPNodeClient(NODE).get_version_info()
    assert info == NodeVersionInfo("1.0.0", 1, False)


def test_version_info_other_error_gives_none(mocked):
    mocked.add(responses.GET, f"{NODE}/v1/version", status=500)
    assert HTTPNodeClient(NODE).get_version_info() is None


def test_version_info_unreachable_gives_none(mocked):
    assert HTTPNodeClient(NODE).get_version_info() is None


def test_secret_is_sent_as_basic_auth(mocked):
    mocked.add(responses.GET, f"{NODE}/v1/chain", json={"height": 5})
    client = HTTPNodeClient(NODE, node_api_secret="secret")
    assert client.get_chain_height() == 5
    assert mocked.calls[0].request.headers["Authorization"].startswith("Basic ")


def test_post_tx_plain_and_fluff(mocked):
    mocked.add(responses.POST, f"{NODE}/v1/pool/push_tx")
    client = HTTPNodeClient(NODE)
    client.post_tx(TxWrapper("abcd"), False)
    client.post_tx(TxWrapper("abcd"), True)
    assert mocked.calls[0].request.url.endswith("/v1/pool/push_tx")
    assert mocked.calls[1].request.url.endswith("/v1/pool/push_tx?fluff")
    assert json.loads(mocked.calls[0].request.body) == {"tx_hex": "abcd"}


def test_post_tx_failure(mocked):
    mocked.add(responses.POST, f"{NODE}/v1/pool/push_tx", status=500)
    with pytest.raises(WalletError) as info:
        HTTPNodeClient(NODE).post_tx(TxWrapper("abcd"), False)
    assert info.value.kind is ErrorKind.CLIENT_CALLBACK
    assert str(info.value).startswith("Client Callback Error: Posting transaction to node:")


def test_chain_height_failure(mocked):
    mocked.add(responses.GET, f"{NODE}/v1/chain", status=503)
    with pytest.raises(WalletError) as info:
        HTTPNodeClient(NODE).get_chain_height()
    assert info.value.kind is ErrorKind.CLIENT_CALLBACK


def _byids_callback(request):
    ids = parse_qs(urlparse(request.url).query)["id"][0].split(",")
    body = [{"commit": commit, "height": 7, "mmr_index": 9} for commit in ids]
    return 200, {}, json.dumps(body)


def test_outputs_from_node_in_chunks(mocked):
    mocked.add_callback(
        responses.GET, f"{NODE}/v1/chain/outputs/byids", callback=_byids_callback
    )
    commits = [f"{n:066x}" for n in range(121)]
    found = HTTPNodeClient(NODE).get_outputs_from_node(commits)
    assert len(mocked.calls) == 2
    assert set(found) == set(commits)
    assert found[commits[0]] == (commits[0], 7, 9)


def test_outputs_from_node_empty_makes_no_request(mocked):
    assert HTTPNodeClient(NODE).get_outputs_from_node([]) == {}
    assert len(mocked.calls) == 0


def test_outputs_from_node_failure(mocked):
    mocked.add(responses.GET, f"{NODE}/v1/chain/outputs/byids", status=500)
    with pytest.raises(WalletError) as info:
        HTTPNodeClient(NODE).get_outputs_from_node(["aa"])
    assert info.value.kind is ErrorKind.CLIENT_CALLBACK


def test_outputs_by_pmmr_index(mocked):
    mocked.add(
        responses.GET,
        f"{NODE}/v1/txhashset/outputs",
        json={
            "highest_index": 100,
            "last_retrieved_index": 2,
            "outputs": [
                {"output_type": "Coinbase", "commit": "c1", "proof": "p1",
                 "block_height": 1, "mmr_index": 1},
                {"output_type": "Transaction", "commit": "c2", "proof": "p2",
                 "block_height": 3, "mmr_index": 2},
            ],
        },
    )
    highest, last, outputs = HTTPNodeClient(NODE).get_outputs_by_pmmr_index(1, 2)
    assert (highest, last) == (100, 2)
    assert outputs == [("c1", "p1", True, 1, 1), ("c2", "p2", False, 3, 2)]
    query = parse_qs(urlparse(mocked.calls[0].request.url).query)
    assert query == {"start_index": ["1"], "max": ["2"]}


def test_outputs_by_pmmr_index_failure(mocked):
    mocked.add(responses.GET, f"{NODE}/v1/txhashset/outputs", status=404)
    with pytest.raises(WalletError) as info:
        HTTPNodeClient(NODE).get_outputs_by_pmmr_index(0, 10)
    assert info.value.kind is ErrorKind.CLIENT_CALLBACK