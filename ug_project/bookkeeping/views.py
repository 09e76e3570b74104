from dataclasses import asdict

from django.core.exceptions import ValidationError
from django.http import HttpResponse, JsonResponse
from django.shortcuts import get_object_or_404
from django.utils import timezone
from django.utils.dateparse import parse_date
from django.views.decorators.http import require_GET, require_POST

from .models import Company
from .services import (all_accounts_rollup, build_balance_sheet,
                       build_profit_and_loss, compute_ledger, continue_plan,
                       export_csv, find_voucher, finished_goods_stock,
                       ledger_csv_rows, planner_rows, planner_state,
                       start_new_plan, summarize_by_type)
from .services.export import LEDGER_HEADERS


def _date(request, name, default=None):
    raw = request.GET.get(name) or request.POST.get(name)
    if not raw:
        if default is None:
            raise ValidationError(f"'{name}' is required (YYYY-MM-DD).")
        return default
    value = parse_date(raw)
    if value is None:
        raise ValidationError(f"'{name}' is not a valid date: {raw}")
    return value


def _bad_request(exc):
    return JsonResponse({"ok": False, "error": "; ".join(exc.messages)}, status=400)


def _ledger_args(request, company):
    return dict(
        account=request.GET.get("account"),
        entity=request.GET.get("entity"),
        general_account=request.GET.get("general_account"),
        start=_date(request, "start"),
        end=_date(request, "end"),
        display_currency=request.GET.get("currency") or company.base_currency_id,
    )


@require_GET
def ledger_view(request, slug):
    company = get_object_or_404(Company, slug=slug)
    try:
        ledger = compute_ledger(company, **_ledger_args(request, company))
    except ValidationError as e:
        return _bad_request(e)
    data = asdict(ledger)
    for row, source in zip(data["rows"], ledger.rows):
        row["suffix"] = source.suffix
    return JsonResponse(data)


@require_GET
def ledger_csv_view(request, slug):
    company = get_object_or_404(Company, slug=slug)
    try:
        args = _ledger_args(request, company)
    except ValidationError as e:
        return _bad_request(e)
    ledger = compute_ledger(company, **args)
    body = export_csv(ledger_csv_rows(ledger, args["start"], args["end"]), LEDGER_HEADERS)
    response = HttpResponse(body, content_type="text/csv; charset=utf-8")
    response["Content-Disposition"] = 'attachment; filename="ledger.csv"'
    return response


@require_GET
def summary_view(request, slug, type_key):
    company = get_object_or_404(Company, slug=slug)
    try:
        rows = summarize_by_type(
            company, type_key, _date(request, "start"), _date(request, "end")
        )
    except ValidationError as e:
        return _bad_request(e)
    return JsonResponse({"rows": [asdict(r) for r in rows]})


@require_GET
def rollup_view(request, slug):
    company = get_object_or_404(Company, slug=slug)
    try:
        end = _date(request, "end", timezone.localdate())
    except ValidationError as e:
        return _bad_request(e)
    return JsonResponse({"rows": [asdict(r) for r in all_accounts_rollup(company, end)]})


@require_GET
def balance_sheet_view(request, slug):
    company = get_object_or_404(Company, slug=slug)
    try:
        sheet = build_balance_sheet(company, _date(request, "as_of", timezone.localdate()))
    except ValidationError as e:
        return _bad_request(e)
    return JsonResponse({
        "as_of": sheet.as_of,
        "assets": sheet.assets,
        "liabilities": sheet.liabilities,
        "equity": sheet.equity,
        "total_assets": sheet.total_assets,
        "total_liabilities": sheet.total_liabilities,
        "total_equity": sheet.total_equity,
        "is_balanced": sheet.is_balanced,
    })


@require_GET
def profit_and_loss_view(request, slug):
    company = get_object_or_404(Company, slug=slug)
    try:
        pl = build_profit_and_loss(company, _date(request, "start"), _date(request, "end"))
    except ValidationError as e:
        return _bad_request(e)
    return JsonResponse({
        "start": pl.start,
        "end": pl.end,
        "revenue": pl.revenue,
        "expenses": [
            {"code": code, "name": name, "amount": amount}
            for code, name, amount in pl.expenses
        ],
        "total_expenses": pl.total_expenses,
        "net_income": pl.net_income,
    })


@require_GET
def stock_worth_view(request, slug):
    company = get_object_or_404(Company, slug=slug)
    try:
        rows = finished_goods_stock(company, _date(request, "start"), _date(request, "end"))
    except ValidationError as e:
        return _bad_request(e)
    return JsonResponse({"rows": [asdict(r) for r in rows]})


@require_GET
def planner_view(request, slug, cadence):
    company = get_object_or_404(Company, slug=slug)
    try:
        today = _date(request, "today", timezone.localdate())
        state = planner_state(company, cadence, today)
    except ValidationError as e:
        return _bad_request(e)
    return JsonResponse({"state": state, "rows": planner_rows(company, cadence, today)})


@require_POST
def planner_resolve_view(request, slug, cadence):
    company = get_object_or_404(Company, slug=slug)
    action = request.POST.get("action")
    resolvers = {"start_new": start_new_plan, "continue": continue_plan}
    if action not in resolvers:
        return JsonResponse({"ok": False, "error": "action must be start_new or continue"}, status=400)
    try:
        today = _date(request, "today", timezone.localdate())
        marker = resolvers[action](company, cadence, today, actor=request.POST.get("actor", ""))
    except ValidationError as e:
        return _bad_request(e)
    return JsonResponse({"ok": True, "period_start": marker})


@require_GET
def voucher_view(request, slug, voucher_id):
    company = get_object_or_404(Company, slug=slug)
    voucher = find_voucher(company, voucher_id)
    if voucher is None:
        return JsonResponse({"found": False, "voucher_id": voucher_id}, status=404)
    return JsonResponse({
        "found": True,
        "voucher_id": voucher.voucher_id,
        "date": voucher.date,
        "entry_type": voucher.entry_type,
        "description": voucher.description,
        "is_reversed": voucher.is_reversed,
        "entries": [
            {
                "account": e.account.code,
                "debit": e.debit,
                "credit": e.credit,
                "description": e.description,
                "entity": e.entity.code if e.entity_id else None,
                "original_amount": e.original_amount,
                "original_currency": e.original_currency_id,
            }
            for e in voucher.entries.all()
        ],
    })
