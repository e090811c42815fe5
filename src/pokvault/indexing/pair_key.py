"""Direction-independent pair identity, matching the vault's on-chain pair hash."""

from __future__ import annotations

from web3 import Web3

_PACKED_TYPES = ["address", "uint256", "address", "uint256"]


def _ordered_legs(token_a: str, id_a: int, token_b: str, id_b: int) -> tuple[str, int, str, int]:
    """Order legs by lower-cased address; equal addresses fall back to the smaller id first."""
    addr_a, addr_b = token_a.lower(), token_b.lower()
    if addr_a < addr_b or (addr_a == addr_b and id_a < id_b):
        return addr_a, id_a, addr_b, id_b
    return addr_b, id_b, addr_a, id_a


def canonical_pair_key(token_a: str, id_a: str | int, token_b: str, id_b: str | int) -> str:
    """keccak256(abi.encodePacked(address, uint256, address, uint256)) over the ordered legs.

    Returns a 0x-prefixed lower-case hex string. Ids may be ints or decimal strings.
    """
    addr1, id1, addr2, id2 = _ordered_legs(token_a, int(id_a), token_b, int(id_b))
    digest = Web3.solidity_keccak(
        _PACKED_TYPES,
        [Web3.to_checksum_address(addr1), id1, Web3.to_checksum_address(addr2), id2],
    )
    return Web3.to_hex(digest)


def token_lookup_key(token_address: str, token_id: str | int) -> str:
    """Key of one outcome token in resolver results: "{address}-{token id}"."""
    return f"{token_address.lower()}-{token_id}"
