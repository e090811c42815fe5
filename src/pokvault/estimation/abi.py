"""Minimal ABIs for the view functions the estimation path reads."""

_PAIR_INPUTS = [
    {"name": "outcomeTokenA", "type": "address"},
    {"name": "outcomeIdA", "type": "uint256"},
    {"name": "outcomeTokenB", "type": "address"},
    {"name": "outcomeIdB", "type": "uint256"},
]


def _view(name: str, inputs: list[dict], output: str = "uint256") -> dict:
    return {
        "type": "function",
        "name": name,
        "stateMutability": "view",
        "inputs": inputs,
        "outputs": [{"name": "", "type": output}],
    }


EARLY_EXIT_VAULT_ABI = [
    _view("estimateEarlyExitAmount", _PAIR_INPUTS + [{"name": "amount", "type": "uint256"}]),
    _view("estimateSplitOppositeOutcomeTokensAmount", _PAIR_INPUTS + [{"name": "amount", "type": "uint256"}]),
    _view("totalAssets", []),
    _view("totalEarlyExitedAmount", []),
]

ERC1155_ABI = [
    _view("balanceOf", [{"name": "account", "type": "address"}, {"name": "id", "type": "uint256"}]),
]
