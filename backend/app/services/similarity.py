from __future__ import annotations

from backend.app.services.normalize import normalize_name


def levenshtein_distance(left: str, right: str) -> int:
    rows = len(left)
    cols = len(right)
    if rows == 0:
        return cols
    if cols == 0:
        return rows

    matrix = [[0] * (cols + 1) for _ in range(rows + 1)]
    for i in range(rows + 1):
        matrix[i][0] = i
    for j in range(cols + 1):
        matrix[0][j] = j

    for i in range(1, rows + 1):
        for j in range(1, cols + 1):
            if left[i - 1] == right[j - 1]:
                matrix[i][j] = matrix[i - 1][j - 1]
            else:
                matrix[i][j] = 1 + min(
                    matrix[i - 1][j - 1],
                    matrix[i - 1][j],
                    matrix[i][j - 1],
                )
    return matrix[rows][cols]


def _round_half_up(value: float) -> int:
    return int(value + 0.5)


def calculate_string_similarity(left: str, right: str) -> int:
    """Edit-distance similarity of two names as a 0-100 score."""
    a = normalize_name(left)
    b = normalize_name(right)
    if a == b:
        return 100
    if not a or not b:
        return 0
    distance = levenshtein_distance(a, b)
    return _round_half_up((1 - distance / max(len(a), len(b))) * 100)


def calculate_name_similarity(
    first_name_a: str,
    last_name_a: str,
    first_name_b: str,
    last_name_b: str,
) -> int:
    """Best of the straight and the first/last-transposed full-name similarity."""
    full_a = normalize_name(first_name_a) + normalize_name(last_name_a)
    full_b = normalize_name(first_name_b) + normalize_name(last_name_b)
    # Checked before equality: two blank names are missing data, not a perfect match.
    if not full_a or not full_b:
        return 0
    if full_a == full_b:
        return 100

    straight = calculate_string_similarity(full_a, full_b)
    swapped_b = normalize_name(last_name_b) + normalize_name(first_name_b)
    swapped = calculate_string_similarity(full_a, swapped_b)
    return max(straight, swapped)
