# exchange_indexer/types/new.py

from typing import NewType


EvmAddress = NewType('EvmAddress', str)
EvmHash = NewType('EvmHash', str)
IntStr = NewType('IntStr', str)
EntityId = NewType('EntityId', str)
ErrorId = NewType('ErrorId', str)


def to_address(value: str) -> EvmAddress:
    return EvmAddress(value.lower())


def to_hash(value: str) -> EvmHash:
    return EvmHash(value.lower())
