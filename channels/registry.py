# channels/registry.py
from typing import Dict, Iterable, List, Tuple

class InstrumentRegistry:
    """program -> channels that have carried it, in first-seen order.

    Only a search preference for the allocator, never a restriction.
    """
    def __init__(self):
        self._channels: Dict[int, List[int]] = {}

    @classmethod
    def from_changes(cls, changes: Iterable[Tuple[int, int, int]]) -> "InstrumentRegistry":
        reg = cls()
        for _, channel, program in changes:
            reg.register(program, channel)
        return reg

    def channels_for(self, program: int) -> List[int]:
        return list(self._channels.get(program, ()))

    def register(self, program: int, channel: int) -> None:
        arr = self._channels.setdefault(program, [])
        if channel not in arr:
            arr.append(channel)
