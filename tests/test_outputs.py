import json

import pytest

from wallet713.errors import ErrorKind, WalletError
from wallet713.outputs import OutputCommitMapping, OutputData, OutputStatus


def make_output(**overrides):
    fields = dict(
        root_key_id="0200000000000000000000000000000000",
        key_id="0300000000000000000000000000000000",
        n_child=4,
        commit="08abcdef",
        mmr_index=17,
        value=60_000_000_000,
        status=OutputStatus.UNSPENT,
        height=100,
        lock_height=0,
        is_coinbase=False,
        tx_log_entry=2,
    )
    fields.update(overrides)
    return OutputData(**fields)


def test_status_display():
    out = make_output(status=OutputStatus.UNCONFIRMED)
    assert str(out.status) == "Unconfirmed"
    out.mark_unspent()
    out.mark_spent()
    assert str(out.status) == "Spent"


def test_confirmations_zero_when_above_current_height():
    assert make_output(height=100).num_confirmations(99) == 0


def test_confirmations_zero_when_unconfirmed():
    out = make_output(status=OutputStatus.UNCONFIRMED, height=50)
    assert out.num_confirmations(100) == 0


def test_confirmations_zero_when_height_unknown():
    assert make_output(height=0).num_confirmations(100) == 0


def test_single_confirmation_at_own_height():
    assert make_output(height=100).num_confirmations(100) == 1


@pytest.mark.parametrize("current", [100, 150, 1000])
def test_confirmations_grow_one_per_block(current):
    out = make_output(height=100)
    assert out.num_confirmations(current + 1) - out.num_confirmations(current) == 1


@pytest.mark.parametrize("status", [OutputStatus.SPENT, OutputStatus.LOCKED])
def test_spent_or_locked_not_eligible(status):
    assert not make_output(status=status).eligible_to_spend(1000, 0)


def test_unconfirmed_coinbase_not_eligible():
    out = make_output(status=OutputStatus.UNCONFIRMED, is_coinbase=True)
    assert not out.eligible_to_spend(1000, 0)


def test_lock_height_blocks_spending():
    out = make_output(lock_height=2000)
    assert not out.eligible_to_spend(1000, 1)
    assert out.eligible_to_spend(2000, 1)


def test_unspent_needs_minimum_confirmations():
    out = make_output(height=100)
    needed = out.num_confirmations(110)
    assert out.eligible_to_spend(110, needed)
    assert not out.eligible_to_spend(110, needed + 1)


def test_unconfirmed_spendable_only_with_zero_minimum():
    out = make_output(status=OutputStatus.UNCONFIRMED)
    assert out.eligible_to_spend(1000, 0)
    assert not out.eligible_to_spend(1000, 1)


def test_lock():
    out = make_output()
    out.lock()
    assert out.status is OutputStatus.LOCKED


@pytest.mark.parametrize(
    "before, after",
    [
        (OutputStatus.UNCONFIRMED, OutputStatus.UNSPENT),
        (OutputStatus.UNSPENT, OutputStatus.UNSPENT),
        (OutputStatus.LOCKED, OutputStatus.LOCKED),
        (OutputStatus.SPENT, OutputStatus.SPENT),
    ],
)
def test_mark_unspent(before, after):
    out = make_output(status=before)
    out.mark_unspent()
    assert out.status is after


@pytest.mark.parametrize(
    "before, after",
    [
        (OutputStatus.UNCONFIRMED, OutputStatus.UNCONFIRMED),
        (OutputStatus.UNSPENT, OutputStatus.SPENT),
        (OutputStatus.LOCKED, OutputStatus.SPENT),
        (OutputStatus.SPENT, OutputStatus.SPENT),
    ],
)
def test_mark_spent(before, after):
    out = make_output(status=before)
    out.mark_spent()
    assert out.status is after


def test_json_round_trip():
    out = make_output(commit=None, mmr_index=None, tx_log_entry=None)
    assert OutputData.from_json(out.to_json()) == out


def test_json_uses_status_name():
    data = json.loads(make_output(status=OutputStatus.LOCKED).to_json())
    assert data["status"] == "Locked"


def test_missing_optional_fields_read_as_none():
    data = json.loads(make_output().to_json())
    del data["commit"]
    del data["tx_log_entry"]
    restored = OutputData.from_json(json.dumps(data))
    assert restored.commit is None
    assert restored.tx_log_entry is None


@pytest.mark.parametrize(
    "text",
    ["not json", "[]", json.dumps({"key_id": "03"})],
)
def test_corrupted_json_rejected(text):
    with pytest.raises(WalletError) as info:
        OutputData.from_json(text)
    assert info.value.kind is ErrorKind.DESER


def test_bad_status_rejected():
    data = json.loads(make_output().to_json())
    data["status"] = "Vanished"
    with pytest.raises(WalletError) as info:
        OutputData.from_json(json.dumps(data))
    assert info.value.kind is ErrorKind.DESER


def test_commit_mapping_holds_output():
    out = make_output()
    mapping = OutputCommitMapping(output=out, commit="08abcdef")
    assert mapping.output.commit == mapping.commit