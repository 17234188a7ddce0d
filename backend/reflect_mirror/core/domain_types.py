"""Domain Types: rich types that replace bare primitives across the codebase.

Invariants:
    - StablecoinSymbol and IntegrationId are opaque strings, only their length or pattern is checked
    - All closed value sets (side, event kind, cluster, handler kind) are str Enums
    - Identifier patterns live here and nowhere else

Design Decisions:
    - NewType over wrapper classes for identifiers
    - str Enums serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

StablecoinSymbol = NewType("StablecoinSymbol", str)
IntegrationId = NewType("IntegrationId", str)
WalletAddress = NewType("WalletAddress", str)
EventId = NewType("EventId", str)


# ─── Identifier Formats ─────────────────────────────────────────

# Integration token tickers, 1-16 chars, e.g. "ACME", "USDC+"
TOKEN_SYMBOL_PATTERN = r"^[A-Za-z0-9+]{1,16}$"
# uuid4().hex
INTEGRATION_ID_PATTERN = r"^[0-9a-f]{32}$"
# Solana base58 public key
WALLET_ADDRESS_PATTERN = r"^[1-9A-HJ-NP-Za-km-z]{32,44}$"


# ─── Enums ───────────────────────────────────────────────────────

class QuoteSide(str, Enum):
    """Direction of a quote. mint: collateral in, stablecoin out. redeem: the reverse."""
    MINT = "mint"
    REDEEM = "redeem"


class Cluster(str, Enum):
    """Solana cluster a placeholder transaction targets."""
    MAINNET = "mainnet"
    DEVNET = "devnet"


class EventKind(str, Enum):
    """Kinds of protocol and integration events."""
    MINT = "mint"
    REDEEM = "redeem"
    CLAIM = "claim"
    CONFIG_UPDATE = "configUpdate"
    INTEGRATION_INITIALIZED = "integrationInitialized"
    API_KEY_ROTATED = "apiKeyRotated"
    WHITELIST_UPDATED = "whitelistUpdated"
    AUTHORITY_TRANSFERRED = "authorityTransferred"
    METADATA_UPLOADED = "metadataUploaded"
    TOKEN_INITIALIZED = "tokenInitialized"
    VAULT_INITIALIZED = "vaultInitialized"
    FLOW_INITIALIZED = "flowInitialized"


class TransactionKind(str, Enum):
    """Placeholder transaction builders exposed by the mirror."""
    MINT = "mint"
    BURN = "burn"
    INITIALIZE_TOKEN = "initializeToken"
    INITIALIZE_USER_TOKEN = "initializeUserToken"
    INITIALIZE_VAULT = "initializeVault"
    INITIALIZE_FLOW = "initializeFlow"
    INTEGRATION_MINT = "integrationMint"
    MINT_AND_WHITELABEL = "mintAndWhitelabel"
    INTEGRATION_REDEEM = "integrationRedeem"
    REDEEM_WHITELABELED = "redeemWhitelabeled"
    CLAIM = "claim"


class HandlerKind(str, Enum):
    """Behavioral class of a route handler."""
    READ = "read"
    TRANSACTION = "transaction"
    MUTATION = "mutation"
    QUOTE = "quote"
