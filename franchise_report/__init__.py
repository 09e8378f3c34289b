"""
franchise-report — Source package.

Modules:
    config          — YAML configuration loader with environment overrides
    metrics         — MetricsSnapshot, completion/resolution rates, API and CSV sources
    data_simulator  — Synthetic suppliers/stores/tickets exports for the local source
    formatter       — Summary, performance and detail row-sets with annotations
    narrative       — Executive summary lines
    pdf_builder     — ReportLab PDF renderer
    excel_pack      — Two-sheet openpyxl workbook renderer
    dashboard       — Interactive Plotly HTML dashboard
    delivery        — Saves artifacts as relatorio_gerencial_<unix_ms>.<ext>
    exporter        — fetch -> format -> render -> save orchestration
    errors          — MetricsFetchError / ReportRenderError
"""
