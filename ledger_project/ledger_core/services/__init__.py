# Report services. Import submodules directly, e.g.
#   from ledger_core.services.trial_balance import build_trial_balance
