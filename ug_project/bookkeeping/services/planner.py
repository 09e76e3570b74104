"""
Weekly / monthly receivable, payable and expense planner.

The book stores, per cadence, the start of the last period the user
acknowledged. When today's period start differs from that marker the
planner is `promptPending` and plans cannot be edited until the user
either starts a new plan or continues the old one.
"""
import logging
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Sum
from django.utils import timezone

from ..exceptions import PlannerPromptPending
from ..models import Company, JournalEntry, PlannerData, PlannerMember
from ..models.account import PAYABLE_CODE, RECEIVABLE_CODE
from .audit_helper import log_action
from .periods import period_start, previous_period

logger = logging.getLogger(__name__)

IDLE = "idle"
PROMPT_PENDING = "promptPending"
ZERO = Decimal("0.00")


def _today(today):
    return today or timezone.localdate()


def _subject_kwargs(group, subject):
    if group == "expense_accounts":
        return {"account": subject, "entity": None}
    return {"entity": subject, "account": None}


def planner_state(company, cadence, today=None):
    """
    `idle` or `promptPending`. A book with no marker yet gets one set
    silently to the current period start.
    """
    start = period_start(cadence, _today(today))
    marker = company.planner_marker(cadence)
    if marker is None:
        setattr(company, Company.planner_marker_field(cadence), start)
        company.save(update_fields=[Company.planner_marker_field(cadence)])
        logger.info("Initialised %s planner marker for %s at %s", cadence, company, start)
        return IDLE
    if marker != start:
        return PROMPT_PENDING
    return IDLE


def actual_for(company, group, subject, start, end):
    """
    What actually happened for a planner subject within [start, end]:
    receipts from a customer, payments to a supplier, or spending on an
    expense account.
    """
    entries = JournalEntry.objects.for_company(company).between(start, end)
    if group == "customers":
        qs, side = entries.filter(voucher__entry_type="Receipt", entity=subject), "credit"
    elif group == "suppliers":
        qs, side = entries.filter(voucher__entry_type="Payment", entity=subject), "debit"
    else:
        qs, side = entries.filter(
            voucher__entry_type__in=("Expense", "Payment"), account=subject
        ), "debit"
    return qs.aggregate(total=Sum(side))["total"] or ZERO


def _resolve_prompt(company, cadence, today):
    """Lock the book and confirm a rollover is actually pending."""
    book = Company.objects.select_for_update().get(pk=company.pk)
    if planner_state(book, cadence, today) != PROMPT_PENDING:
        raise ValidationError(f"No {cadence} planner rollover is pending.")
    return book


@transaction.atomic
def start_new_plan(company, cadence, today=None, actor=""):
    """
    Archive the plan of the finished period for every tracked subject:
    current plan becomes last plan, last actual is recomputed from the
    previous full period, and the current plan is cleared.
    """
    today = _today(today)
    book = _resolve_prompt(company, cadence, today)
    prev_start, prev_end = previous_period(cadence, today)

    rolled = 0
    for member in PlannerMember.objects.for_company(book).select_related("entity", "account"):
        data, _ = PlannerData.objects.get_or_create(
            company=book,
            group=member.group,
            cadence=cadence,
            **_subject_kwargs(member.group, member.subject),
        )
        data.last_plan = data.current_plan
        data.last_actual = actual_for(book, member.group, member.subject, prev_start, prev_end)
        data.current_plan = ZERO
        data.save()
        rolled += 1

    start = period_start(cadence, today)
    setattr(book, Company.planner_marker_field(cadence), start)
    book.save(update_fields=[Company.planner_marker_field(cadence)])
    log_action(
        action="planner_start_new",
        instance=book,
        actor=actor,
        changes={"cadence": cadence, "period_start": start.isoformat(), "subjects": rolled},
    )
    logger.info("Started new %s plan for %s (%d subjects)", cadence, book, rolled)
    company.refresh_from_db()
    return start


@transaction.atomic
def continue_plan(company, cadence, today=None, actor=""):
    """Keep the plans as they are; only acknowledge the new period."""
    today = _today(today)
    book = _resolve_prompt(company, cadence, today)
    start = period_start(cadence, today)
    setattr(book, Company.planner_marker_field(cadence), start)
    book.save(update_fields=[Company.planner_marker_field(cadence)])
    log_action(
        action="planner_continue",
        instance=book,
        actor=actor,
        changes={"cadence": cadence, "period_start": start.isoformat()},
    )
    logger.info("Continued %s plan for %s", cadence, book)
    company.refresh_from_db()
    return start


def set_plan(company, cadence, group, subject, amount, today=None):
    if planner_state(company, cadence, today) == PROMPT_PENDING:
        raise PlannerPromptPending(
            f"Resolve the {cadence} planner rollover before editing plans."
        )
    kwargs = _subject_kwargs(group, subject)
    if not PlannerMember.objects.for_company(company).filter(group=group, **kwargs).exists():
        raise ValidationError(f"{subject} is not tracked in the planner.")
    data, _ = PlannerData.objects.get_or_create(
        company=company, group=group, cadence=cadence, **kwargs
    )
    data.current_plan = Decimal(str(amount))
    data.save()
    return data


def add_planner_member(company, group, subject):
    member, _ = PlannerMember.objects.get_or_create(
        company=company, group=group, **_subject_kwargs(group, subject)
    )
    return member


def remove_planner_member(company, group, subject):
    PlannerMember.objects.for_company(company).filter(
        group=group, **_subject_kwargs(group, subject)
    ).delete()


def _last_entry(qs):
    entry = qs.select_related("voucher").order_by("-voucher__date", "-pk").first()
    if entry is None:
        return None, ZERO
    return entry.voucher.date, entry.debit + entry.credit


def planner_rows(company, cadence, today=None):
    """
    What the planner screen shows per tracked subject: plan figures,
    outstanding balance and the most recent receipt / payment.
    """
    today = _today(today)
    entries = JournalEntry.objects.for_company(company).up_to(today)
    data = {
        (d.group, d.entity_id, d.account_id): d
        for d in PlannerData.objects.for_company(company).filter(cadence=cadence)
    }

    rows = []
    for member in PlannerMember.objects.for_company(company).select_related("entity", "account"):
        plan = data.get((member.group, member.entity_id, member.account_id))
        row = {
            "group": member.group,
            "id": member.subject.code,
            "name": member.subject.name,
            "current_plan": plan.current_plan if plan else ZERO,
            "last_plan": plan.last_plan if plan else ZERO,
            "last_actual": plan.last_actual if plan else ZERO,
        }
        if member.group == "customers":
            ledger = entries.filter(account__code=RECEIVABLE_CODE, entity=member.entity)
            totals = ledger.aggregate(d=Sum("debit"), c=Sum("credit"))
            row["balance"] = (totals["d"] or ZERO) - (totals["c"] or ZERO)
            row["last_date"], row["last_amount"] = _last_entry(
                ledger.filter(voucher__entry_type="Receipt")
            )
        elif member.group == "suppliers":
            ledger = entries.filter(account__code=PAYABLE_CODE, entity=member.entity)
            totals = ledger.aggregate(d=Sum("debit"), c=Sum("credit"))
            row["balance"] = (totals["c"] or ZERO) - (totals["d"] or ZERO)
            row["last_date"], row["last_amount"] = _last_entry(
                ledger.filter(voucher__entry_type="Payment")
            )
        else:
            start = period_start(cadence, today)
            row["balance"] = actual_for(company, member.group, member.account, start, today)
            row["last_date"], row["last_amount"] = None, ZERO
        rows.append(row)
    return rows


def initialize_markers(today=None):
    """Silently set missing planner markers on every book. Returns how many were set."""
    today = _today(today)
    count = 0
    for cadence in ("weekly", "monthly"):
        field = Company.planner_marker_field(cadence)
        for company in Company.objects.filter(**{f"{field}__isnull": True}):
            planner_state(company, cadence, today)
            count += 1
    return count
