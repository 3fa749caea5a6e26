from __future__ import annotations

import random


def random_grammar(
    seed: int | None = None,
    length: int | None = None,
    *,
    p_branch: float = 0.20,
    max_depth: int = 4,
) -> str:
    """Generate a random grammar with balanced brackets.

    Produces symbols from: F, S, R, C, [, ]
    Brackets never go negative, nesting stays within ``max_depth`` and the
    result always contains at least one F.
    """
    rng = random.Random(seed)
    if length is None:
        length = rng.randint(12, 40)

    word: list[str] = []
    depth = 0

    for _ in range(length):
        r = rng.random()
        if r < p_branch and depth < max_depth:
            word.append("[")
            depth += 1
            # Seed self-similarity: most groups start smaller.
            if rng.random() < 0.7:
                word.append("S")
            continue
        if r < p_branch * 2 and depth > 0:
            word.append("]")
            depth -= 1
            continue

        t = rng.random()
        if t < 0.5:
            word.append("F")
        elif t < 0.8:
            word.append("R")
        elif t < 0.9:
            word.append("C")
        else:
            word.append("S")

    word.extend("]" * depth)

    if "F" not in word:
        word.append("F")

    return "".join(word)
