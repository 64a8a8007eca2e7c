"""
Command Line Interface Package

Reports over an exported tenant ledger.

Command Structure:
- insight-hunter: Main entry point with utility commands (version, config)
- insight-hunter forecast: Revenue, expense and profit forecasts with seasonality
- insight-hunter anomalies: Anomaly detection with sensitivity tiers
- insight-hunter trends: Moving averages, growth metrics and KPIs
"""
