from django.urls import path

from . import views

app_name = "bookkeeping"

urlpatterns = [
    path("<slug:slug>/ledger/", views.ledger_view, name="ledger"),
    path("<slug:slug>/ledger.csv", views.ledger_csv_view, name="ledger-csv"),
    path("<slug:slug>/summary/<str:type_key>/", views.summary_view, name="summary"),
    path("<slug:slug>/rollup/", views.rollup_view, name="rollup"),
    path("<slug:slug>/balance-sheet/", views.balance_sheet_view, name="balance-sheet"),
    path("<slug:slug>/profit-and-loss/", views.profit_and_loss_view, name="profit-and-loss"),
    path("<slug:slug>/stock-worth/", views.stock_worth_view, name="stock-worth"),
    path("<slug:slug>/planner/<str:cadence>/", views.planner_view, name="planner"),
    path("<slug:slug>/planner/<str:cadence>/resolve/", views.planner_resolve_view, name="planner-resolve"),
    path("<slug:slug>/vouchers/<str:voucher_id>/", views.voucher_view, name="voucher"),
]
