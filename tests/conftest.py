from datetime import datetime, timezone
from typing import Any, Dict, List, Tuple

import pytest

from services.checkout import CartLine, StudentContext


class FakeSizeSource:
    """Stock source keyed by product name; records every lookup it serves."""

    def __init__(self, sizes: Dict[str, Any] | None = None, failing: Tuple[str, ...] = ()):
        self.sizes = sizes or {}
        self.failing = set(failing)
        self.calls: List[Tuple[str, str]] = []

    async def __call__(self, product_name: str, education_level: str) -> Any:
        self.calls.append((product_name, education_level))
        if product_name in self.failing:
            raise TimeoutError("stock service timed out")
        return self.sizes.get(product_name, [])


class FakeOrderStore:
    def __init__(self, failing_types: Tuple[str, ...] = ()):
        self.failing_types = set(failing_types)
        self.saved = []

    async def __call__(self, draft) -> Dict[str, Any]:
        if draft.order_type in self.failing_types:
            raise RuntimeError(f"Failed to store order {draft.order_number}")
        self.saved.append(draft)
        return {"id": f"id-{len(self.saved)}", "order_number": draft.order_number}


class FakeCart:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.cleared: List[str] = []

    async def __call__(self, student_id: str) -> None:
        if self.fail:
            raise RuntimeError("cart table unavailable")
        self.cleared.append(student_id)


def make_line(name: str, size: str | None = "N/A", quantity: int = 1, **kwargs) -> CartLine:
    kwargs.setdefault("education_level", "College")
    return CartLine(product_name=name, size=size, quantity=quantity, **kwargs)


@pytest.fixture
def student() -> StudentContext:
    return StudentContext(
        student_id="student-1",
        name="Ana Cruz",
        email="ana@example.edu",
        education_level="College",
    )


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2025, 6, 2, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def sequential_numbers():
    counter = iter(range(1, 100))

    def factory(now: datetime) -> str:
        return f"ORD-{now:%Y%m%d}-{next(counter):012X}"

    return factory
