from .assets import acquire_asset, post_depreciation
from .export import export_csv, ledger_csv_rows
from .inventory import (finished_goods_stock, finished_goods_value,
                        packing_material_stock, raw_material_stock,
                        raw_material_value)
from .ledger import (all_accounts_rollup, compute_ledger, summarize_by_type)
from .packing import record_packing_purchase
from .planner import (add_planner_member, continue_plan, planner_rows,
                      planner_state, remove_planner_member, set_plan,
                      start_new_plan)
from .posting import append_voucher, batch_append, next_voucher_id
from .setup import create_book
from .statements import build_balance_sheet, build_profit_and_loss
from .vouchers import (find_voucher, record_expense, record_journal,
                       record_payment, record_receipt, reverse_voucher)
