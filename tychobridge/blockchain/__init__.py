"""Remote account-state collaborator."""

from tychobridge.blockchain.models import ContractStateExists, ContractStateNotExists
from tychobridge.blockchain.storage import JrpcClient, RemoteAccount, RemoteBlockchainStorage

__all__ = [
    "ContractStateExists",
    "ContractStateNotExists",
    "JrpcClient",
    "RemoteAccount",
    "RemoteBlockchainStorage",
]
