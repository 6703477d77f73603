import json

import pytest

from wallet713.context import Context
from wallet713.errors import ErrorKind, WalletError

SECRET_KEY = bytes(range(1, 33))
PARENT = "0200000000000000000000000000000000"
CHILD = "0300000000000000010000000000000000"


def _context():
    return Context.create(SECRET_KEY, PARENT, 1)


def test_create_sets_defaults():
    ctx = _context()
    assert ctx.parent_key_id == PARENT
    assert ctx.sec_key == SECRET_KEY
    assert ctx.participant_id == 1
    assert (ctx.amount, ctx.fee) == (0, 0)
    assert ctx.get_outputs() == [] and ctx.get_inputs() == []
    assert ctx.output_commits == [] and ctx.input_commits == []


def test_secret_nonce_is_a_nonzero_key_and_fresh_each_time():
    first = _context().sec_nonce
    second = _context().sec_nonce
    assert len(first) == 32
    assert int.from_bytes(first, "big") > 0
    assert first != second


def test_outputs_and_inputs_keep_order():
    ctx = _context()
    ctx.add_output(CHILD, None, 50)
    ctx.add_output(PARENT, 9, 70)
    ctx.add_input(CHILD, 4, 120)
    assert ctx.get_outputs() == [(CHILD, None, 50), (PARENT, 9, 70)]
    assert ctx.get_inputs() == [(CHILD, 4, 120)]


def test_get_outputs_returns_a_copy():
    ctx = _context()
    ctx.add_output(CHILD, None, 50)
    outputs = ctx.get_outputs()
    outputs.clear()
    assert ctx.get_outputs() == [(CHILD, None, 50)]


def test_json_round_trip():
    ctx = _context()
    ctx.add_output(CHILD, None, 50)
    ctx.add_input(PARENT, 3, 80)
    ctx.amount = 30
    ctx.fee = 8
    ctx.output_commits.append("08" + "aa" * 32)
    assert Context.from_json(ctx.to_json()) == ctx


def test_json_stores_key_entries_as_triples():
    ctx = _context()
    ctx.add_output(CHILD, None, 50)
    data = json.loads(ctx.to_json())
    assert data["output_ids"] == [[CHILD, None, 50]]
    assert data["sec_key"] == SECRET_KEY.hex()


@pytest.mark.parametrize("key", [b"\x01" * 31, b"\x00" * 32, b"\xff" * 32])
def test_invalid_secret_key_rejected(key):
    with pytest.raises(ValueError):
        Context.create(key, PARENT, 0)


@pytest.mark.parametrize(
    "text",
    ["not json", "[]", "{}"],
)
def test_corrupted_json_raises_deser(text):
    with pytest.raises(WalletError) as info:
        Context.from_json(text)
    assert info.value.kind is ErrorKind.DESER


def test_bad_key_entry_raises_deser():
    data = json.loads(_context().to_json())
    data["input_ids"] = [[CHILD, None]]
    with pytest.raises(WalletError) as info:
        Context.from_json(json.dumps(data))
    assert info.value.kind is ErrorKind.DESER