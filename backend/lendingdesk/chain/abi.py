"""Minimal ABIs for the lending pool, its data provider and ERC-20 tokens."""

POOL_ABI = [
    {"name": "deposit", "inputs": [
        {"name": "asset", "type": "address"},
        {"name": "amount", "type": "uint256"},
        {"name": "onBehalfOf", "type": "address"},
        {"name": "referralCode", "type": "uint16"},
    ], "outputs": [], "stateMutability": "nonpayable", "type": "function"},
    {"name": "withdraw", "inputs": [
        {"name": "asset", "type": "address"},
        {"name": "amount", "type": "uint256"},
        {"name": "to", "type": "address"},
    ], "outputs": [{"name": "", "type": "uint256"}], "stateMutability": "nonpayable", "type": "function"},
    {"name": "borrow", "inputs": [
        {"name": "asset", "type": "address"},
        {"name": "amount", "type": "uint256"},
        {"name": "interestRateMode", "type": "uint256"},
        {"name": "referralCode", "type": "uint16"},
        {"name": "onBehalfOf", "type": "address"},
    ], "outputs": [], "stateMutability": "nonpayable", "type": "function"},
    {"name": "repay", "inputs": [
        {"name": "asset", "type": "address"},
        {"name": "amount", "type": "uint256"},
        {"name": "interestRateMode", "type": "uint256"},
        {"name": "onBehalfOf", "type": "address"},
    ], "outputs": [{"name": "", "type": "uint256"}], "stateMutability": "nonpayable", "type": "function"},
    {"name": "flashLoanSimple", "inputs": [
        {"name": "receiverAddress", "type": "address"},
        {"name": "asset", "type": "address"},
        {"name": "amount", "type": "uint256"},
        {"name": "params", "type": "bytes"},
        {"name": "referralCode", "type": "uint16"},
    ], "outputs": [], "stateMutability": "nonpayable", "type": "function"},
    {"name": "getUserAccountData", "inputs": [{"name": "user", "type": "address"}], "outputs": [
        {"name": "totalCollateralBase", "type": "uint256"},
        {"name": "totalDebtBase", "type": "uint256"},
        {"name": "availableBorrowsBase", "type": "uint256"},
        {"name": "currentLiquidationThreshold", "type": "uint256"},
        {"name": "ltv", "type": "uint256"},
        {"name": "healthFactor", "type": "uint256"},
    ], "stateMutability": "view", "type": "function"},
]

DATA_PROVIDER_ABI = [
    {"name": "getReserveData", "inputs": [{"name": "asset", "type": "address"}], "outputs": [
        {"name": "unbacked", "type": "uint256"},
        {"name": "accruedToTreasuryScaled", "type": "uint256"},
        {"name": "totalAToken", "type": "uint256"},
        {"name": "totalStableDebt", "type": "uint256"},
        {"name": "totalVariableDebt", "type": "uint256"},
        {"name": "liquidityRate", "type": "uint256"},
        {"name": "variableBorrowRate", "type": "uint256"},
        {"name": "stableBorrowRate", "type": "uint256"},
        {"name": "averageStableBorrowRate", "type": "uint256"},
        {"name": "liquidityIndex", "type": "uint256"},
        {"name": "variableBorrowIndex", "type": "uint256"},
        {"name": "lastUpdateTimestamp", "type": "uint40"},
    ], "stateMutability": "view", "type": "function"},
]

ERC20_ABI = [
    {"name": "approve", "inputs": [
        {"name": "spender", "type": "address"},
        {"name": "amount", "type": "uint256"},
    ], "outputs": [{"name": "", "type": "bool"}], "stateMutability": "nonpayable", "type": "function"},
    {"name": "allowance", "inputs": [
        {"name": "owner", "type": "address"},
        {"name": "spender", "type": "address"},
    ], "outputs": [{"name": "", "type": "uint256"}], "stateMutability": "view", "type": "function"},
    {"name": "balanceOf", "inputs": [{"name": "account", "type": "address"}],
     "outputs": [{"name": "", "type": "uint256"}], "stateMutability": "view", "type": "function"},
    {"name": "decimals", "inputs": [], "outputs": [{"name": "", "type": "uint8"}],
     "stateMutability": "view", "type": "function"},
]
