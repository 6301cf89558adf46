from typing import Iterable, Set


class Sequences:
    """
    Picks the numeric postfix used to tell apart names sharing the same base.

    Sequence 0 stands for the bare name (no postfix). Examples:

        [], <any>      => <any>
        [0], 0         => 2
        [0, 2, 3], 0   => 4
        [2], 0         => 0
        [1, 4], 1      => 0
    """

    def find(self, sequences: Iterable[int], origin: int) -> int:
        used = set(sequences)
        if not used or origin > max(used):
            return origin

        gaps = self._skipped_sequences(used)
        if origin in gaps:
            return origin

        # We do not add "1" as a postfix: var, var2, var3, etc.
        gaps.discard(1)
        if not gaps:
            highest = max(used)
            if highest == 0:
                return 2
            return highest + 1

        return min(gaps)

    def _skipped_sequences(self, used: Set[int]) -> Set[int]:
        return {i for i in range(max(used)) if i not in used}
