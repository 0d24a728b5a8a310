"""
Pydantic models for the JSON documents returned by the Koios API.

The API adds fields between releases and returns null for many of them on
older chain data, so every model keeps unknown fields (``extra="allow"``)
and declares its fields Optional. Only the value types decide how a field
is decoded (unix timestamps, lovelace strings, metadata shapes).
"""

from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..application.domain import (
    Address,
    AssetName,
    BlockHash,
    BlockNo,
    DatumHash,
    EpochNo,
    Metadata,
    PaymentCredential,
    PolicyID,
    PoolID,
    ScriptHash,
    Slot,
    StakeAddress,
    Timestamp,
    TxHash,
)


class KoiosModel(BaseModel):
    """Base model for API documents."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)


# --- Shared ---

class Asset(KoiosModel):
    policy_id: Optional[PolicyID] = None
    asset_name: Optional[AssetName] = None
    fingerprint: Optional[str] = None
    decimals: Optional[int] = None
    quantity: Optional[Decimal] = None


class UTxO(KoiosModel):
    """Unspent (or spent, for tx inputs) transaction output."""

    tx_hash: Optional[TxHash] = None
    tx_index: Optional[int] = None
    address: Optional[Address] = None
    value: Optional[Decimal] = None
    stake_address: Optional[StakeAddress] = None
    payment_cred: Optional[PaymentCredential] = None
    epoch_no: Optional[EpochNo] = None
    block_height: Optional[BlockNo] = None
    block_time: Optional[Timestamp] = None
    datum_hash: Optional[DatumHash] = None
    inline_datum: Optional[Any] = None
    reference_script: Optional[Any] = None
    asset_list: Optional[List[Asset]] = None
    is_spent: Optional[bool] = None


class TxRef(KoiosModel):
    """Transaction reference as returned by the ``*_txs`` endpoints."""

    tx_hash: Optional[TxHash] = None
    epoch_no: Optional[EpochNo] = None
    block_height: Optional[BlockNo] = None
    block_time: Optional[Timestamp] = None


# --- Network ---

class Tip(KoiosModel):
    hash: Optional[BlockHash] = None
    epoch_no: Optional[EpochNo] = None
    abs_slot: Optional[Slot] = None
    epoch_slot: Optional[int] = None
    block_height: Optional[BlockNo] = None
    block_time: Optional[Timestamp] = None


class Genesis(KoiosModel):
    networkmagic: Optional[int] = None
    networkid: Optional[str] = None
    epochlength: Optional[int] = None
    slotlength: Optional[int] = None
    maxlovelacesupply: Optional[Decimal] = None
    systemstart: Optional[Timestamp] = None
    activeslotcoeff: Optional[Decimal] = None
    slotsperkesperiod: Optional[int] = None
    maxkesrevolutions: Optional[int] = None
    securityparam: Optional[int] = None
    updatequorum: Optional[int] = None
    alonzogenesis: Optional[Any] = None


class Totals(KoiosModel):
    epoch_no: Optional[EpochNo] = None
    circulation: Optional[Decimal] = None
    treasury: Optional[Decimal] = None
    reward: Optional[Decimal] = None
    supply: Optional[Decimal] = None
    reserves: Optional[Decimal] = None
    fees: Optional[Decimal] = None
    deposits_stake: Optional[Decimal] = None


class ParamUpdateProposal(KoiosModel):
    tx_hash: Optional[TxHash] = None
    block_height: Optional[BlockNo] = None
    block_time: Optional[Timestamp] = None
    epoch_no: Optional[EpochNo] = None
    data: Optional[Any] = None


# --- Epoch ---

class EpochInfo(KoiosModel):
    epoch_no: Optional[EpochNo] = None
    out_sum: Optional[Decimal] = None
    fees: Optional[Decimal] = None
    tx_count: Optional[int] = None
    blk_count: Optional[int] = None
    start_time: Optional[Timestamp] = None
    end_time: Optional[Timestamp] = None
    first_block_time: Optional[Timestamp] = None
    last_block_time: Optional[Timestamp] = None
    active_stake: Optional[Decimal] = None
    total_rewards: Optional[Decimal] = None
    avg_blk_reward: Optional[Decimal] = None


class EpochParams(KoiosModel):
    epoch_no: Optional[EpochNo] = None
    min_fee_a: Optional[int] = None
    min_fee_b: Optional[int] = None
    max_block_size: Optional[int] = None
    max_tx_size: Optional[int] = None
    max_bh_size: Optional[int] = None
    key_deposit: Optional[Decimal] = None
    pool_deposit: Optional[Decimal] = None
    max_epoch: Optional[int] = None
    optimal_pool_count: Optional[int] = None
    influence: Optional[Decimal] = None
    monetary_expand_rate: Optional[Decimal] = None
    treasury_growth_rate: Optional[Decimal] = None
    decentralisation: Optional[Decimal] = None
    extra_entropy: Optional[str] = None
    protocol_major: Optional[int] = None
    protocol_minor: Optional[int] = None
    min_utxo_value: Optional[Decimal] = None
    min_pool_cost: Optional[Decimal] = None
    nonce: Optional[str] = None
    block_hash: Optional[BlockHash] = None
    cost_models: Optional[Any] = None
    price_mem: Optional[Decimal] = None
    price_step: Optional[Decimal] = None
    max_tx_ex_mem: Optional[int] = None
    max_tx_ex_steps: Optional[int] = None
    max_block_ex_mem: Optional[int] = None
    max_block_ex_steps: Optional[int] = None
    max_val_size: Optional[int] = None
    collateral_percent: Optional[int] = None
    max_collateral_inputs: Optional[int] = None
    coins_per_utxo_size: Optional[Decimal] = None


class EpochBlockProtocols(KoiosModel):
    proto_major: Optional[int] = None
    proto_minor: Optional[int] = None
    blocks: Optional[int] = None


# --- Block ---

class Block(KoiosModel):
    hash: Optional[BlockHash] = None
    epoch_no: Optional[EpochNo] = None
    abs_slot: Optional[Slot] = None
    epoch_slot: Optional[int] = None
    block_height: Optional[BlockNo] = None
    block_size: Optional[int] = None
    block_time: Optional[Timestamp] = None
    tx_count: Optional[int] = None
    vrf_key: Optional[str] = None
    pool: Optional[PoolID] = None
    op_cert_counter: Optional[int] = None
    proto_major: Optional[int] = None
    proto_minor: Optional[int] = None
    parent_hash: Optional[BlockHash] = None


class BlockInfo(Block):
    total_output: Optional[Decimal] = None
    total_fees: Optional[Decimal] = None
    num_confirmations: Optional[int] = None
    op_cert: Optional[str] = None
    child_hash: Optional[BlockHash] = None


class BlockTx(TxRef):
    block_hash: Optional[BlockHash] = None


# --- Address ---

class AddressInfo(KoiosModel):
    address: Optional[Address] = None
    balance: Optional[Decimal] = None
    stake_address: Optional[StakeAddress] = None
    script_address: Optional[bool] = None
    utxo_set: List[UTxO] = Field(default_factory=list)


class AddressAsset(Asset):
    address: Optional[Address] = None


# --- Account ---

class AccountListItem(KoiosModel):
    stake_address: Optional[StakeAddress] = None
    stake_address_hex: Optional[str] = None
    script_hash: Optional[ScriptHash] = None


class AccountInfo(KoiosModel):
    stake_address: Optional[StakeAddress] = None
    status: Optional[str] = None
    delegated_pool: Optional[PoolID] = None
    total_balance: Optional[Decimal] = None
    utxo: Optional[Decimal] = None
    rewards: Optional[Decimal] = None
    withdrawals: Optional[Decimal] = None
    rewards_available: Optional[Decimal] = None
    deposit: Optional[Decimal] = None
    reserves: Optional[Decimal] = None
    treasury: Optional[Decimal] = None


class AccountReward(KoiosModel):
    earned_epoch: Optional[EpochNo] = None
    spendable_epoch: Optional[EpochNo] = None
    amount: Optional[Decimal] = None
    type: Optional[str] = None
    pool_id: Optional[PoolID] = None


class AccountRewards(KoiosModel):
    stake_address: Optional[StakeAddress] = None
    rewards: List[AccountReward] = Field(default_factory=list)


class AccountAction(KoiosModel):
    action_type: Optional[str] = None
    tx_hash: Optional[TxHash] = None
    epoch_no: Optional[EpochNo] = None
    epoch_slot: Optional[int] = None
    absolute_slot: Optional[Slot] = None
    block_time: Optional[Timestamp] = None


class AccountUpdates(KoiosModel):
    stake_address: Optional[StakeAddress] = None
    updates: List[AccountAction] = Field(default_factory=list)


class AccountAddresses(KoiosModel):
    stake_address: Optional[StakeAddress] = None
    addresses: List[Address] = Field(default_factory=list)


class AccountAsset(Asset):
    stake_address: Optional[StakeAddress] = None


class AccountHistoryEntry(KoiosModel):
    pool_id: Optional[PoolID] = None
    epoch_no: Optional[EpochNo] = None
    active_stake: Optional[Decimal] = None


class AccountHistory(KoiosModel):
    stake_address: Optional[StakeAddress] = None
    history: List[AccountHistoryEntry] = Field(default_factory=list)


# --- Asset ---

class AssetListItem(KoiosModel):
    policy_id: Optional[PolicyID] = None
    asset_name: Optional[AssetName] = None
    asset_name_ascii: Optional[str] = None
    fingerprint: Optional[str] = None


class AssetInfo(KoiosModel):
    policy_id: Optional[PolicyID] = None
    asset_name: Optional[AssetName] = None
    asset_name_ascii: Optional[str] = None
    fingerprint: Optional[str] = None
    minting_tx_hash: Optional[TxHash] = None
    total_supply: Optional[Decimal] = None
    mint_cnt: Optional[int] = None
    burn_cnt: Optional[int] = None
    creation_time: Optional[Timestamp] = None
    minting_tx_metadata: Optional[Metadata] = None
    token_registry_metadata: Optional[Any] = None
    cip68_metadata: Optional[Any] = None


class AssetHolder(KoiosModel):
    payment_address: Optional[Address] = None
    stake_address: Optional[StakeAddress] = None
    quantity: Optional[Decimal] = None


class AssetMint(KoiosModel):
    tx_hash: Optional[TxHash] = None
    block_time: Optional[Timestamp] = None
    quantity: Optional[Decimal] = None
    metadata: Optional[Metadata] = None


class AssetHistory(KoiosModel):
    policy_id: Optional[PolicyID] = None
    asset_name: Optional[AssetName] = None
    fingerprint: Optional[str] = None
    minting_txs: List[AssetMint] = Field(default_factory=list)


class PolicyAssetInfo(KoiosModel):
    policy_id: Optional[PolicyID] = None
    asset_name: Optional[AssetName] = None
    asset_name_ascii: Optional[str] = None
    fingerprint: Optional[str] = None
    minting_tx_hash: Optional[TxHash] = None
    total_supply: Optional[Decimal] = None
    mint_cnt: Optional[int] = None
    burn_cnt: Optional[int] = None
    creation_time: Optional[Timestamp] = None
    minting_tx_metadata: Optional[Metadata] = None
    token_registry_metadata: Optional[Any] = None


class AssetSummary(KoiosModel):
    policy_id: Optional[PolicyID] = None
    asset_name: Optional[AssetName] = None
    fingerprint: Optional[str] = None
    total_transactions: Optional[int] = None
    staked_wallets: Optional[int] = None
    unstaked_addresses: Optional[int] = None
    addresses: Optional[int] = None


# --- Pool ---

class Relay(KoiosModel):
    dns: Optional[str] = None
    srv: Optional[str] = None
    ipv4: Optional[str] = None
    ipv6: Optional[str] = None
    port: Optional[int] = None


class PoolListItem(KoiosModel):
    pool_id_bech32: Optional[PoolID] = None
    pool_id_hex: Optional[str] = None
    active_epoch_no: Optional[EpochNo] = None
    ticker: Optional[str] = None
    pool_status: Optional[str] = None
    retiring_epoch: Optional[EpochNo] = None
    margin: Optional[Decimal] = None
    fixed_cost: Optional[Decimal] = None
    pledge: Optional[Decimal] = None
    active_stake: Optional[Decimal] = None


class PoolInfo(KoiosModel):
    pool_id_bech32: Optional[PoolID] = None
    pool_id_hex: Optional[str] = None
    active_epoch_no: Optional[EpochNo] = None
    vrf_key_hash: Optional[str] = None
    margin: Optional[Decimal] = None
    fixed_cost: Optional[Decimal] = None
    pledge: Optional[Decimal] = None
    reward_addr: Optional[StakeAddress] = None
    owners: Optional[List[StakeAddress]] = None
    relays: Optional[List[Relay]] = None
    meta_url: Optional[str] = None
    meta_hash: Optional[str] = None
    meta_json: Optional[Dict[str, Any]] = None
    pool_status: Optional[str] = None
    retiring_epoch: Optional[EpochNo] = None
    op_cert: Optional[str] = None
    op_cert_counter: Optional[int] = None
    active_stake: Optional[Decimal] = None
    sigma: Optional[Decimal] = None
    block_count: Optional[int] = None
    live_pledge: Optional[Decimal] = None
    live_stake: Optional[Decimal] = None
    live_delegators: Optional[int] = None
    live_saturation: Optional[Decimal] = None


class PoolDelegator(KoiosModel):
    stake_address: Optional[StakeAddress] = None
    amount: Optional[Decimal] = None
    active_epoch_no: Optional[EpochNo] = None
    latest_delegation_tx_hash: Optional[TxHash] = None


class PoolBlock(KoiosModel):
    epoch_no: Optional[EpochNo] = None
    epoch_slot: Optional[int] = None
    abs_slot: Optional[Slot] = None
    block_height: Optional[BlockNo] = None
    block_hash: Optional[BlockHash] = None
    block_time: Optional[Timestamp] = None


class PoolHistory(KoiosModel):
    epoch_no: Optional[EpochNo] = None
    active_stake: Optional[Decimal] = None
    active_stake_pct: Optional[Decimal] = None
    saturation_pct: Optional[Decimal] = None
    block_cnt: Optional[int] = None
    delegator_cnt: Optional[int] = None
    margin: Optional[Decimal] = None
    fixed_cost: Optional[Decimal] = None
    pool_fees: Optional[Decimal] = None
    deleg_rewards: Optional[Decimal] = None
    member_rewards: Optional[Decimal] = None
    epoch_ros: Optional[Decimal] = None


class PoolUpdate(KoiosModel):
    tx_hash: Optional[TxHash] = None
    block_time: Optional[Timestamp] = None
    pool_id_bech32: Optional[PoolID] = None
    pool_id_hex: Optional[str] = None
    active_epoch_no: Optional[EpochNo] = None
    margin: Optional[Decimal] = None
    fixed_cost: Optional[Decimal] = None
    pledge: Optional[Decimal] = None
    reward_addr: Optional[StakeAddress] = None
    owners: Optional[List[StakeAddress]] = None
    relays: Optional[List[Relay]] = None
    meta_url: Optional[str] = None
    meta_hash: Optional[str] = None
    update_type: Optional[str] = None
    retiring_epoch: Optional[EpochNo] = None


class PoolRelays(KoiosModel):
    pool_id_bech32: Optional[PoolID] = None
    relays: List[Relay] = Field(default_factory=list)


class PoolMetadata(KoiosModel):
    pool_id_bech32: Optional[PoolID] = None
    meta_url: Optional[str] = None
    meta_hash: Optional[str] = None
    meta_json: Optional[Dict[str, Any]] = None


# --- Script ---

class ScriptListItem(KoiosModel):
    script_hash: Optional[ScriptHash] = None
    creation_tx_hash: Optional[TxHash] = None
    type: Optional[str] = None
    size: Optional[int] = None


class Redeemer(KoiosModel):
    tx_hash: Optional[TxHash] = None
    tx_index: Optional[int] = None
    unit_mem: Optional[int] = None
    unit_steps: Optional[int] = None
    fee: Optional[Decimal] = None
    purpose: Optional[str] = None
    datum_hash: Optional[DatumHash] = None
    datum_value: Optional[Any] = None


class ScriptRedeemers(KoiosModel):
    script_hash: Optional[ScriptHash] = None
    redeemers: List[Redeemer] = Field(default_factory=list)


class DatumInfo(KoiosModel):
    datum_hash: Optional[DatumHash] = None
    creation_tx_hash: Optional[TxHash] = None
    value: Optional[Any] = None
    bytes: Optional[str] = None


# --- Transaction ---

class Withdrawal(KoiosModel):
    amount: Optional[Decimal] = None
    stake_addr: Optional[StakeAddress] = None


class Certificate(KoiosModel):
    index: Optional[int] = None
    type: Optional[str] = None
    info: Optional[Dict[str, Any]] = None


class TxInfo(KoiosModel):
    tx_hash: Optional[TxHash] = None
    block_hash: Optional[BlockHash] = None
    block_height: Optional[BlockNo] = None
    epoch_no: Optional[EpochNo] = None
    epoch_slot: Optional[int] = None
    absolute_slot: Optional[Slot] = None
    tx_timestamp: Optional[Timestamp] = None
    tx_block_index: Optional[int] = None
    tx_size: Optional[int] = None
    total_output: Optional[Decimal] = None
    fee: Optional[Decimal] = None
    deposit: Optional[Decimal] = None
    invalid_before: Optional[Any] = None
    invalid_after: Optional[Any] = None
    collateral_inputs: Optional[List[UTxO]] = None
    collateral_output: Optional[UTxO] = None
    reference_inputs: Optional[List[UTxO]] = None
    inputs: List[UTxO] = Field(default_factory=list)
    outputs: List[UTxO] = Field(default_factory=list)
    withdrawals: Optional[List[Withdrawal]] = None
    assets_minted: Optional[List[Asset]] = None
    metadata: Optional[Metadata] = None
    certificates: Optional[List[Certificate]] = None
    native_scripts: Optional[List[Any]] = None
    plutus_contracts: Optional[List[Any]] = None


class TxUTxOs(KoiosModel):
    tx_hash: Optional[TxHash] = None
    inputs: List[UTxO] = Field(default_factory=list)
    outputs: List[UTxO] = Field(default_factory=list)


class TxMetadata(KoiosModel):
    tx_hash: Optional[TxHash] = None
    metadata: Metadata = Field(default_factory=dict)


class TxMetalabel(KoiosModel):
    key: Optional[str] = None


class TxStatus(KoiosModel):
    tx_hash: Optional[TxHash] = None
    num_confirmations: Optional[int] = None


class TxBodyJSON(KoiosModel):
    """Signed transaction as written by ``cardano-cli`` (text envelope)."""

    type: str = ""
    description: str = ""
    cbor_hex: str = Field(default="", alias="cborHex")
