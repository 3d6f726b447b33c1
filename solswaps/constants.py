from enum import Enum

WSOL_MINT = "So11111111111111111111111111111111111111112"
SOL_DECIMALS = 9

TOKEN_PROGRAM_ID = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"
TOKEN_2022_PROGRAM_ID = "TokenzQdBNbLqP5VEhdkAS6EPFLC1PHnBqCXEpPxuEb"

# SPL token instruction tags.
TRANSFER_TAG = 3
TRANSFER_CHECKED_TAG = 12

# Aggregators and routers.
JUPITER_PROGRAM_ID = "JUP6LkbZbjS1jKKwapdHNy74zcZ3tLUZoi5QNyVTaV4"
JUPITER_DCA_PROGRAM_ID = "DCAK36VfExkPdAkYUQg6ewgxyinvcEyPLyHjRbmveKFw"
OKX_DEX_ROUTER_PROGRAM_ID = "6m2CDdhRgxpH4WjvdzxAYbGxwdGUz5MziiL5jek2kBma"

# Trading bots.
BANANA_GUN_PROGRAM_ID = "BANANAjs7FJiPQqJTGFzkZJndT9o7UmKiYYGaJz6frGu"
MINTECH_PROGRAM_ID = "minTcHYRLVPubRK8nt6sqe2ZpWrGDLQoNLipDJCGocY"
BLOOM_PROGRAM_ID = "b1oomGGqPKGD6errbyfbVMBuzSC8WtAAYo8MwNafWW1"
MAESTRO_PROGRAM_ID = "MaestroAAe9ge5HTc64VbBQZ6fP77pwvrhM8i1XWSAx"
NOVA_PROGRAM_ID = "NoVA1TmDUqksaj2hB1nayFkPysjJbFiU76dT4qPw2wm"

# DEXes.
RAYDIUM_V4_PROGRAM_ID = "675kPX9MHTjS2zt1qfr1NYHuzeLXfQM9H24wFSUt1Mp8"
RAYDIUM_AMM_PROGRAM_ID = "routeUGWgWzqBWFcrCfv8tritsqukccJPu3q5GPP3xS"
RAYDIUM_CPMM_PROGRAM_ID = "CPMMoo8L3F4NbTegBCKVNunggL7H1ZpdTHKxQB5qKP1C"
RAYDIUM_CONCENTRATED_LIQUIDITY_PROGRAM_ID = "CAMMCzo5YL8w4VFF8KVHrK22GGUsp5VTaW7grrKgrWqK"
RAYDIUM_CONCENTRATED_LIQUIDITY_LEGACY_PROGRAM_ID = "AP51WLiiqTdbZfgyRMs35PsZpdmLuPDdHYmrB23pEtMU"
RAYDIUM_LAUNCHPAD_PROGRAM_ID = "LanMV9sAd7wArD4vJFi2qDdfnVhFxYSUg6eADduJ3uj"
ORCA_PROGRAM_ID = "whirLbMiicVdio4qvUfM5KAg6Ct8VwpYzGff3uctyCc"
METEORA_PROGRAM_ID = "LBUZKhRxPF3XUpBCjp4YzTKgLccjZhTSDM9YuVaPwxo"
METEORA_POOLS_PROGRAM_ID = "Eo7WjKq67rjJQSZxS6z3YkapzY3eMj6Xy8X5EQVn5UaB"
METEORA_DAMM_V2_PROGRAM_ID = "cpamdpZCGKUy5JxQXB4dcpGPiikHawvSWAd6mEn1sGG"
PUMPFUN_PROGRAM_ID = "6EF8rrecthR5Dkzon8Nwu78hRvfCKubJ14M5uBEwF6P"
PUMPFUN_SECONDARY_PROGRAM_ID = "BSfD6SHZigAfDWSjzD5Q41jw8LmKwtmjskPH9XW1mrRW"
PUMPFUN_AMM_PROGRAM_ID = "pAMMBay6oceH9fJKBRHGP5D4bD4sWpmSwMn52FMfXEA"
MOONSHOT_PROGRAM_ID = "MoonCVVNZFSYkqNXP6bxHLPL6QQJiMagDL3qcqUQTrG"

# Anchor event prefix (sha256("anchor:event")[:8]) shared by every self-CPI event.
ANCHOR_EVENT_PREFIX = bytes([228, 69, 165, 46, 81, 203, 154, 29])

JUPITER_ROUTE_EVENT_DISCRIMINATOR = ANCHOR_EVENT_PREFIX + bytes([64, 198, 205, 232, 38, 8, 113, 226])
PUMPFUN_TRADE_EVENT_DISCRIMINATOR = ANCHOR_EVENT_PREFIX + bytes([189, 219, 127, 211, 78, 230, 97, 238])
PUMPFUN_CREATE_EVENT_DISCRIMINATOR = ANCHOR_EVENT_PREFIX + bytes([27, 114, 169, 77, 222, 235, 99, 118])

MOONSHOT_BUY_DISCRIMINATOR = bytes([102, 6, 61, 18, 1, 218, 235, 234])
MOONSHOT_SELL_DISCRIMINATOR = bytes([51, 230, 133, 164, 1, 127, 131, 173])

OKX_SWAP_DISCRIMINATOR = bytes([248, 198, 158, 145, 225, 117, 135, 200])
OKX_SWAP2_DISCRIMINATOR = bytes([65, 75, 63, 76, 235, 91, 91, 136])
OKX_COMMISSION_SPL_SWAP2_DISCRIMINATOR = bytes([173, 131, 78, 38, 150, 165, 123, 15])
OKX_SWAP3_DISCRIMINATOR = bytes([19, 44, 130, 148, 72, 56, 44, 238])


class ProtocolTag(str, Enum):
    """
    Closed set of protocol families the dispatcher can route to.

    The value doubles as the AMM label reported in a swap summary.
    """
    JUPITER = "Jupiter"
    MOONSHOT = "Moonshot"
    TRADING_BOT = "TradingBot"
    OKX = "OKX"
    RAYDIUM = "Raydium"
    RAYDIUM_LAUNCHPAD = "RaydiumLaunchpad"
    ORCA = "Orca"
    METEORA = "Meteora"
    PUMP_FUN = "PumpFun"
    PUMP_FUN_AMM = "PumpFunAMM"
    GENERIC = "Generic"

    def __str__(self) -> str:
        return self.value
