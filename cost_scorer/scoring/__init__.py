"""
Business performance scoring engine: turns operational records into
per-category cost scores against revenue-scaled bracket targets.

Modules
-------
periods     : filter_by_range() + group_by_week() — date window selection
              and Monday-anchored week buckets.
classifier  : CostClassifier protocol + KeywordCostClassifier +
              partition_purchases() — raw vs sub material split.
brackets    : order/validate brackets, threshold selection, linear
              interpolation, resolve_active_bracket().
attribution : compute_cost_basis() — inventory delta, deemed input-tax
              credit, labor fallback, utility overhead.
calculator  : Multiplier sentinels + compute_item() + status_for_score().
revenue     : RevenueFigures + reconcile_revenue() default collaborator.
engine      : compute_full_period_score() + compute_weekly_scores().

Everything here is pure: no I/O, no module-level mutable state.
"""
