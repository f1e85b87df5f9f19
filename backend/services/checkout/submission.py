import logging
from typing import Any, Awaitable, Callable, Mapping, Sequence

from .builder import ORDER_TYPE_SEQUENCE
from .models import FailedSubmission, OrderDraft, SubmissionOutcome

logger = logging.getLogger("uniform-orders")

OrderSink = Callable[[OrderDraft], Awaitable[Mapping[str, Any]]]


def _submission_order(draft: OrderDraft) -> int:
    return ORDER_TYPE_SEQUENCE.index(draft.order_type)


async def submit_drafts(drafts: Sequence[OrderDraft], create_order: OrderSink) -> SubmissionOutcome:
    """Persist drafts one at a time, regular before pre-order.

    A failing draft is recorded and never rolls back or blocks its sibling.
    """
    outcome = SubmissionOutcome()
    for draft in sorted(drafts, key=_submission_order):
        try:
            created = await create_order(draft)
        except Exception as exc:
            logger.exception(
                "Order submission failed order_number=%s type=%s", draft.order_number, draft.order_type
            )
            outcome.failed.append(FailedSubmission(draft=draft, error=str(exc) or type(exc).__name__))
            continue
        outcome.created.append(draft)
        order_id = created.get("id") if isinstance(created, Mapping) else None
        if order_id is not None:
            outcome.order_ids[draft.order_number] = str(order_id)
        logger.info(
            "Order created order_number=%s type=%s id=%s", draft.order_number, draft.order_type, order_id
        )
    return outcome


def outcome_message(outcome: SubmissionOutcome) -> str:
    created = len(outcome.created)
    if not outcome.failed:
        if created == 1:
            return "Order submitted successfully!"
        return f"{created} orders submitted successfully!"
    if created:
        return (
            f"{created} of {created + len(outcome.failed)} orders were created. "
            "Please check your orders page."
        )
    return "Failed to submit your order. Please check your orders page before trying again."
