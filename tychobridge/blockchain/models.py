"""JSON-RPC shapes of the ``getContractState`` endpoint."""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class JrpcResponse(BaseModel):
    jsonrpc: Literal["2.0"]
    result: Any = None
    error: Any = None
    id: int | str | None


class Timings(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    gen_lt: str = Field(alias="genLt")
    gen_utime: int = Field(alias="genUtime")


class LastTransactionId(BaseModel):
    lt: str
    hash: str


class ContractStateExists(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: Literal["exists"]
    account: str
    timings: Timings
    last_transaction_id: LastTransactionId = Field(alias="lastTransactionId")


class ContractStateNotExists(BaseModel):
    type: Literal["notExists"]
    timings: Timings


ContractState = Annotated[
    Union[ContractStateExists, ContractStateNotExists],
    Field(discriminator="type"),
]


class ContractStateResult(BaseModel):
    state: ContractState
