"""Levenshtein distance and normalised word similarity."""


def distance(a: str, b: str) -> int:
    """Classic Levenshtein distance with unit insert/delete/substitute cost.

    Args:
        a: First word.
        b: Second word.

    Returns:
        Minimum number of single-character edits turning ``a`` into ``b``.
    """
    n, m = len(a), len(b)
    if n == 0:
        return m
    if m == 0:
        return n

    dp = [[0] * (m + 1) for _ in range(n + 1)]
    for i in range(n + 1):
        dp[i][0] = i
    for j in range(m + 1):
        dp[0][j] = j

    for i in range(1, n + 1):
        for j in range(1, m + 1):
            cost = 0 if a[i - 1] == b[j - 1] else 1
            dp[i][j] = min(
                dp[i - 1][j] + 1,  # deletion
                dp[i][j - 1] + 1,  # insertion
                dp[i - 1][j - 1] + cost,  # substitution
            )

    return dp[n][m]


def similarity(a: str, b: str) -> float:
    """Similarity in [0, 1]: 1 - distance / longer length (1.0 for two empty words)."""
    max_length = max(len(a), len(b))
    if max_length == 0:
        return 1.0
    return 1.0 - distance(a, b) / max_length
