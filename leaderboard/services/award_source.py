import random
from typing import Optional, Protocol


class AwardSource(Protocol):
    def draw(self, low: int, high: int) -> int:
        """[low, high] 범위의 정수 하나를 반환"""
        ...


class RandomAwardSource:
    """균등 분포 난수 기반 지급 포인트 생성기"""

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng or random.Random()

    def draw(self, low: int, high: int) -> int:
        return self._rng.randint(low, high)
