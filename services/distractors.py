import random
from typing import Iterable, List, Optional


def select_options(correct: str, pool: Iterable[str], rng: Optional[random.Random] = None,
                   n_distractors: int = 3) -> List[str]:
    """
    Correct value plus up to `n_distractors` distinct alternatives from `pool`,
    shuffled. Returns fewer than n_distractors + 1 options when the pool runs
    short; callers check the length.
    """
    rng = rng or random.Random()
    seen = {correct.strip().lower()}
    candidates = []
    for p in pool:
        key = (p or "").strip().lower()
        if key and key not in seen:
            seen.add(key)
            candidates.append(p)

    picked = rng.sample(candidates, min(n_distractors, len(candidates)))
    options = [correct] + picked
    rng.shuffle(options)
    return options
