from __future__ import annotations

import hashlib
import struct
from typing import List, Sequence, Tuple

from tweetoracle.config import SETTLE_METHOD
from tweetoracle.errors import InstructionTooLarge, InvalidPayload
from tweetoracle.models import U64_MAX, AccountMeta, HostContext, Instruction, RequestParameters
from tweetoracle.validation import pubkey_bytes

DISCRIMINATOR_LEN = 8
PAYLOAD_LEN = DISCRIMINATOR_LEN + 8

# The function runner rejects results larger than this after serialization
MAX_INSTRUCTION_SIZE = 700


def get_ixn_discriminator(ixn_name: str) -> bytes:
    """
    Anchor instruction discriminator: first 8 bytes of sha256("global:<name>").
    Must match what the on-chain program dispatches on.
    """
    preimage = f"global:{ixn_name}".encode("utf-8")
    return hashlib.sha256(preimage).digest()[:DISCRIMINATOR_LEN]


def encode_payload(discriminator: bytes, score: int) -> bytes:
    """
    IXN DATA (16 bytes):
    [0-8]:  Anchor ixn discriminator
    [8-16]: Points, u64 little-endian
    """
    if len(discriminator) != DISCRIMINATOR_LEN:
        raise InvalidPayload(f"discriminator must be {DISCRIMINATOR_LEN} bytes, got {len(discriminator)}")
    if not 0 <= score <= U64_MAX:
        raise InvalidPayload(f"score out of u64 range: {score}")
    return bytes(discriminator) + struct.pack("<Q", score)


def decode_payload(data: bytes) -> Tuple[bytes, int]:
    if len(data) != PAYLOAD_LEN:
        raise InvalidPayload(f"payload must be {PAYLOAD_LEN} bytes, got {len(data)}")
    (score,) = struct.unpack("<Q", data[DISCRIMINATOR_LEN:])
    return bytes(data[:DISCRIMINATOR_LEN]), score


def settle_accounts(params: RequestParameters, host: HostContext) -> List[AccountMeta]:
    """
    ACCOUNTS (order and flags are part of the on-chain interface):
    1. Enclave signer (signer): keypair generated inside the enclave
    2. User who made the request
    3. Realm (writable)
    4. User account PDA (writable)
    5. User account PDA again (writable), slot reserved by the program
    6. Switchboard function
    7. Switchboard function request
    """
    return [
        AccountMeta(pubkey=host.signer, is_signer=True, is_writable=False),
        AccountMeta(pubkey=params.user_address, is_signer=False, is_writable=False),
        AccountMeta(pubkey=params.realm_address, is_signer=False, is_writable=True),
        AccountMeta(pubkey=params.user_record_address, is_signer=False, is_writable=True),
        AccountMeta(pubkey=params.user_record_address, is_signer=False, is_writable=True),
        AccountMeta(pubkey=host.function, is_signer=False, is_writable=False),
        AccountMeta(pubkey=host.function_request_key, is_signer=False, is_writable=False),
    ]


def serialize_instruction(ix: Instruction) -> bytes:
    """
    Bincode layout of a solana_program Instruction:
    program_id (32) | u64 len | (pubkey 32, is_signer 1, is_writable 1)* | u64 len | data
    """
    out = bytearray(pubkey_bytes(ix.program_id))
    out += struct.pack("<Q", len(ix.accounts))
    for meta in ix.accounts:
        out += pubkey_bytes(meta.pubkey)
        out += struct.pack("<??", meta.is_signer, meta.is_writable)
    out += struct.pack("<Q", len(ix.data))
    out += ix.data
    return bytes(out)


def serialize_instructions(ixs: Sequence[Instruction]) -> bytes:
    out = bytearray(struct.pack("<Q", len(ixs)))
    for ix in ixs:
        out += serialize_instruction(ix)
    return bytes(out)


def build_settle_instruction(
    params: RequestParameters,
    host: HostContext,
    score: int,
    method: str = SETTLE_METHOD,
) -> Instruction:
    ix = Instruction(
        program_id=params.program_id,
        accounts=settle_accounts(params, host),
        data=encode_payload(get_ixn_discriminator(method), score),
    )

    size = len(serialize_instruction(ix))
    if size >= MAX_INSTRUCTION_SIZE:
        raise InstructionTooLarge(f"instruction is {size} bytes, must be under {MAX_INSTRUCTION_SIZE}")
    return ix
