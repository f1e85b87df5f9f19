from conftest import FakeCart, FakeOrderStore, FakeSizeSource, make_line

from services.checkout import StudentEligibility, UsageSnapshot, load_eligibility, run_checkout

ELIGIBLE = StudentEligibility(total_item_type_limit=5)

STOCK = {
    "Shorts": [{"size": "S", "stock": 3}],
    "PE Shirt": [{"size": "M", "stock": 0}],
    "ID Lace (College)": [{"size": "N/A", "stock": 12}],
}


def eligibility_of(eligibility, usage=None):
    async def lookup(student_id):
        return eligibility, usage or UsageSnapshot()

    return lookup


async def test_load_eligibility_fails_closed():
    async def broken(student_id):
        raise ConnectionError("profiles unavailable")

    eligibility, usage = await load_eligibility(broken, "student-1")
    assert eligibility == StudentEligibility()
    assert usage == UsageSnapshot()


async def test_checkout_splits_and_clears_cart(student, fixed_now, sequential_numbers):
    source, store, cart = FakeSizeSource(STOCK), FakeOrderStore(), FakeCart()
    lines = [make_line("Shorts", "S"), make_line("PE Shirt", "M"), make_line("ID Lace (College)")]
    result = await run_checkout(
        student,
        lines,
        eligibility_lookup=eligibility_of(ELIGIBLE),
        size_lookup=source,
        create_order=store,
        clear_cart=cart,
        now=fixed_now,
        order_number_factory=sequential_numbers,
    )
    assert result.status == "submitted"
    assert [draft.order_type for draft in result.drafts] == ["regular", "pre-order"]
    assert result.drafts[0].lines == (lines[0], lines[2])
    assert result.cart_cleared
    assert cart.cleared == ["student-1"]
    assert result.message == "2 orders submitted successfully!"


async def test_partial_submission_still_clears_cart(student, fixed_now):
    store, cart = FakeOrderStore(failing_types=("pre-order",)), FakeCart()
    result = await run_checkout(
        student,
        [make_line("Shorts", "S"), make_line("PE Shirt", "M")],
        eligibility_lookup=eligibility_of(ELIGIBLE),
        size_lookup=FakeSizeSource(STOCK),
        create_order=store,
        clear_cart=cart,
        now=fixed_now,
    )
    assert result.status == "partial"
    assert len(result.outcome.created) == 1
    assert len(result.outcome.failed) == 1
    assert cart.cleared == ["student-1"]


async def test_nothing_created_keeps_cart(student):
    cart = FakeCart()
    result = await run_checkout(
        student,
        [make_line("Shorts", "S")],
        eligibility_lookup=eligibility_of(ELIGIBLE),
        size_lookup=FakeSizeSource(STOCK),
        create_order=FakeOrderStore(failing_types=("regular",)),
        clear_cart=cart,
    )
    assert result.status == "failed"
    assert cart.cleared == []
    assert not result.cart_cleared


async def test_cart_clear_failure_is_not_raised(student):
    result = await run_checkout(
        student,
        [make_line("Shorts", "S")],
        eligibility_lookup=eligibility_of(ELIGIBLE),
        size_lookup=FakeSizeSource(STOCK),
        create_order=FakeOrderStore(),
        clear_cart=FakeCart(fail=True),
    )
    assert result.status == "submitted"
    assert not result.cart_cleared


async def test_void_lockout_aborts_before_stock_lookups(student):
    source, store = FakeSizeSource(STOCK), FakeOrderStore()
    result = await run_checkout(
        student,
        [make_line("Shorts", "S"), make_line("PE Shirt", "M")],
        eligibility_lookup=eligibility_of(ELIGIBLE, UsageSnapshot(blocked_due_to_void=True)),
        size_lookup=source,
        create_order=store,
        clear_cart=FakeCart(),
    )
    assert result.status == "blocked"
    assert result.gate.state == "void-lockout"
    assert source.calls == []
    assert store.saved == []


async def test_violations_block_without_side_effects(student):
    source, store, cart = FakeSizeSource(STOCK), FakeOrderStore(), FakeCart()
    result = await run_checkout(
        student,
        [make_line("Shorts", "S")],
        eligibility_lookup=eligibility_of(ELIGIBLE, UsageSnapshot(claimed={"short": 1})),
        size_lookup=source,
        create_order=store,
        clear_cart=cart,
    )
    assert result.status == "blocked"
    assert result.gate.state == "violations"
    assert source.calls == [] and store.saved == [] and cart.cleared == []


async def test_unavailable_eligibility_blocks_checkout(student):
    async def broken(student_id):
        raise TimeoutError

    result = await run_checkout(
        student,
        [make_line("Shorts", "S")],
        eligibility_lookup=broken,
        size_lookup=FakeSizeSource(STOCK),
        create_order=FakeOrderStore(),
    )
    assert result.status == "blocked"
    assert result.gate.state == "limit-not-configured"


async def test_buy_now_intent_overrides_classification(student):
    store = FakeOrderStore()
    result = await run_checkout(
        student,
        [make_line("PE Shirt", "M")],
        eligibility_lookup=eligibility_of(ELIGIBLE),
        size_lookup=FakeSizeSource(STOCK),
        create_order=store,
        intent="regular",
        source="direct",
    )
    assert result.classifications[0].reason == "zero-stock"
    assert [draft.order_type for draft in store.saved] == ["regular"]
    assert not result.cart_cleared


async def test_intent_ignored_for_single_line_cart_checkout(student):
    store = FakeOrderStore()
    result = await run_checkout(
        student,
        [make_line("PE Shirt", "M")],
        eligibility_lookup=eligibility_of(ELIGIBLE),
        size_lookup=FakeSizeSource(STOCK),
        create_order=store,
        clear_cart=FakeCart(),
        intent="regular",
        source="cart",
    )
    assert result.classifications[0].reason == "zero-stock"
    assert [draft.order_type for draft in store.saved] == ["pre-order"]
