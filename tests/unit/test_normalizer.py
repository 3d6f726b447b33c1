"""Unit tests for transaction normalization"""
import base64

import pytest

import qbase58 as base58

from solswaps.constants import RAYDIUM_V4_PROGRAM_ID, TOKEN_PROGRAM_ID
from solswaps.errors import MalformedTransaction
from solswaps.normalizer import normalize
from tests.builders import MINT_A, SIGNER, UNKNOWN_PROGRAM, TxBuilder, address


def _b64_key(addr: str) -> str:
    return base64.b64encode(base58.decode(addr)).decode()


class TestRpcNormalizer:
    def test_envelope_is_unwrapped(self, tx_builder):
        tx_builder.outer(RAYDIUM_V4_PROGRAM_ID, [SIGNER], b"\x09" + bytes(16))
        bare = normalize(tx_builder.build())
        wrapped = normalize(tx_builder.build(envelope=True))
        assert bare == wrapped

    def test_empty_envelope_rejected(self):
        with pytest.raises(MalformedTransaction):
            normalize({"jsonrpc": "2.0", "id": 1, "result": None})

    def test_non_object_rejected(self):
        with pytest.raises(MalformedTransaction):
            normalize(["not", "a", "transaction"])

    def test_binary_encoding_rejected(self, tx_builder):
        raw = tx_builder.build()
        raw["transaction"] = ["AQID", "base64"]
        with pytest.raises(MalformedTransaction):
            normalize(raw)

    def test_json_parsed_encoding_rejected(self, tx_builder):
        tx_builder.outer(UNKNOWN_PROGRAM, [SIGNER])
        raw = tx_builder.build()
        message = raw["transaction"]["message"]
        message["accountKeys"] = [
            {"pubkey": key, "signer": i == 0, "writable": i == 0, "source": "transaction"}
            for i, key in enumerate(message["accountKeys"])
        ]
        message["instructions"] = [{"programId": UNKNOWN_PROGRAM, "accounts": [SIGNER], "data": ""}]
        with pytest.raises(MalformedTransaction, match="jsonParsed"):
            normalize(raw)

    def test_instruction_data_decoded_to_bytes(self, tx_builder):
        payload = b"\x03" + (1234).to_bytes(8, "little")
        tx_builder.outer(TOKEN_PROGRAM_ID, [address("a"), address("b"), SIGNER], payload)
        tx = normalize(tx_builder.build())
        instr = tx.message.instructions[0]
        assert instr.data == payload
        assert tx.message.accountKeys[instr.programIdIndex] == TOKEN_PROGRAM_ID
        assert instr.accounts == [2, 3, 0]

    def test_invalid_base58_data_rejected(self, tx_builder):
        tx_builder.outer(TOKEN_PROGRAM_ID, [SIGNER])
        raw = tx_builder.build()
        raw["transaction"]["message"]["instructions"][0]["data"] = "0OIl"
        with pytest.raises(MalformedTransaction):
            normalize(raw)

    def test_loaded_addresses_follow_static_keys(self, tx_builder):
        tx_builder.outer(RAYDIUM_V4_PROGRAM_ID, [SIGNER])
        tx_builder.loaded_writable = [address("w1")]
        tx_builder.loaded_readonly = [address("r1"), address("r2")]
        tx = normalize(tx_builder.build())
        assert tx.all_accounts == [SIGNER, RAYDIUM_V4_PROGRAM_ID, address("w1"), address("r1"), address("r2")]

    def test_missing_meta_kept_as_none(self, tx_builder):
        raw = tx_builder.build()
        raw["meta"] = None
        tx = normalize(raw)
        assert tx.meta is None
        assert tx.message is not None

    def test_token_balances_and_header(self, tx_builder):
        tx_builder.num_signers = 2
        tx_builder.token_balance(address("ata"), MINT_A, SIGNER, pre=5, post=7, decimals=6)
        tx = normalize(tx_builder.build())
        assert tx.message.numRequiredSignatures == 2
        post = tx.meta.postTokenBalances[0]
        assert post.mint == MINT_A
        assert post.owner == SIGNER
        assert post.uiTokenAmount.amount == "7"
        assert post.uiTokenAmount.decimals == 6
        assert tx.blockTime == 1_700_000_000


class TestGeyserNormalizer:
    def _geyser(self, inner_data: bytes) -> dict:
        keys = [SIGNER, TOKEN_PROGRAM_ID, address("src"), address("dst")]
        return {
            "transaction": {
                "slot": 42,
                "transaction": {
                    "transaction": {
                        "signatures": ["sig"],
                        "message": {
                            "accountKeys": [_b64_key(k) for k in keys],
                            "recentBlockhash": "",
                            "instructions": [
                                {
                                    "programIdIndex": 1,
                                    "accounts": base64.b64encode(bytes([2, 3, 0])).decode(),
                                    "data": base64.b64encode(inner_data).decode(),
                                }
                            ],
                            "header": {"numRequiredSignatures": 1},
                        },
                    },
                    "meta": {
                        "fee": "5000",
                        "preBalances": ["10", "1", "1", "1"],
                        "postBalances": ["5", "1", "1", "1"],
                        "preTokenBalances": [],
                        "postTokenBalances": [],
                        "innerInstructions": [],
                        "loadedWritableAddresses": [_b64_key(address("loaded"))],
                        "loadedReadonlyAddresses": [],
                    },
                },
            }
        }

    def test_keys_accounts_and_data_decoded(self):
        payload = b"\x03" + (99).to_bytes(8, "little")
        tx = normalize(self._geyser(payload))
        assert tx.slot == 42
        assert tx.blockTime is None
        assert tx.message.accountKeys[0] == SIGNER
        assert tx.message.accountKeys[1] == TOKEN_PROGRAM_ID
        instr = tx.message.instructions[0]
        assert instr.accounts == [2, 3, 0]
        assert instr.data == payload
        assert tx.meta.preBalances == [10, 1, 1, 1]
        assert tx.all_accounts[-1] == address("loaded")
