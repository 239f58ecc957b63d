"""Rule-based roast prompt for an Arc Testnet wallet.

The prompt is a pure function of the address, transaction count and USDC
balance. Angles are picked by fixed thresholds, one per category at most,
and the template pins the output shape the generator has to follow.
"""

ARC_TESTNET_CHAIN_ID = 5042002
NETWORK_LINE = 'Arc Testnet (Chain {chain_id}) — ALL TOKENS ARE FAKE AND FREE'


def _grouped_int(value: int) -> str:
    return f'{value:,}'


def _grouped_decimal(value: float) -> str:
    # en-US grouping with at most three fraction digits
    return f'{value:,.3f}'.rstrip('0').rstrip('.')


def tx_count_angle(tx_count: int) -> str | None:
    if tx_count == 0:
        return 'Zero transactions ever. Born, saw the blockchain, immediately gave up. A wallet-shaped void.'
    if tx_count <= 3:
        return f'{tx_count} transaction(s) total lifetime. The blockchain equivalent of a snail doing one push-up.'
    if tx_count <= 20:
        return f'{tx_count} transactions — tourist behavior. One visit, one selfie, back home to tell nobody.'
    if tx_count > 5000:
        return f'{_grouped_int(tx_count)} transactions. This wallet IS the chain. It has transcended human existence.'
    if tx_count > 1000:
        return (
            f'{_grouped_int(tx_count)} transactions on FAKE testnet money. '
            'Grinding with the intensity of a prop trading desk. For free tokens.'
        )
    if tx_count > 200:
        return f'{tx_count} transactions on a network where currency is free. Overachieving in meaninglessness.'
    return None


def balance_angle(tx_count: int, usdc: float) -> str | None:
    if usdc == 0 and tx_count > 0:
        return f'{tx_count} txs sent, $0.00 left. Where did it all go? The void has claimed it.'
    if usdc == 0:
        return "$0.00 USDC on a testnet where USDC is FREE. Couldn't collect free money. Historic laziness."
    if usdc < 1:
        return f"${usdc:.4f} USDC. That's not a balance, that's quantum foam."
    if usdc > 500_000:
        return f"${_grouped_decimal(usdc)} in fake USDC. Hoarding monopoly money like it's real."
    return None


def select_angles(tx_count: int, usdc: float) -> list[str]:
    return [a for a in (tx_count_angle(tx_count), balance_angle(tx_count, usdc)) if a]


def build_roast_prompt(
    address: str, tx_count: int, usdc: float, chain_id: int = ARC_TESTNET_CHAIN_ID
) -> str:
    angles = '\n'.join(f'{i}. {angle}' for i, angle in enumerate(select_angles(tx_count, usdc), start=1))
    txs = _grouped_int(tx_count)
    balance = f'{usdc:.2f}'
    return (
        'You are a savage crypto roast comedian. Roast this Arc Testnet wallet brutally and hilariously.\n'
        '\n'
        'LIVE ON-CHAIN DATA:\n'
        f'- Address: {address}\n'
        f'- Transactions sent: {txs}\n'
        f'- USDC balance: ${balance}\n'
        f'- Network: {NETWORK_LINE.format(chain_id=chain_id)}\n'
        '\n'
        'ROAST ANGLES:\n'
        f'{angles}\n'
        '\n'
        'RULES:\n'
        '- Write exactly 3 paragraphs of savage roast\n'
        f'- Reference exact numbers: {txs} txs, ${balance} USDC\n'
        '- Use web3 slang: ser, fren, ngmi, wagmi, degen, wen moon, probably nothing, have fun staying poor\n'
        '- Mock the TESTNET angle hard — fake money, zero stakes, still failing somehow\n'
        '- End with: VERDICT: [one brutal line in ALL CAPS]\n'
        '- Plain text only, zero asterisks, zero markdown'
    )
