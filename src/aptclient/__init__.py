"""
aptclient - account key management and transaction signing for Move ledgers.

Derives Ed25519 accounts from random keys, encoded private keys or BIP-39
mnemonics, and drives transactions through the REST API signing protocol.
"""

from .runtime.errors import *
from .keys import *
from .crypto import Ed25519KeyPair, Ed25519PublicKey, Ed25519PrivateKey
from .transactions import *
from .types import *
from .transport import Transport, RequestsTransport
from .api_client import AptClient, ApiPaths, ClientConfig, mainnet_client, testnet_client, local_client
from .tx import *

__version__ = "0.1.0"
